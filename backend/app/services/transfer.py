# backend/app/services/transfer.py
"""
Portfolio Transfer Service - export, import and reset.

This service handles:
- Exporting the whole portfolio as a "simple-investor-portfolio.v1" document
- Importing such a document, replacing all stored data
- Resetting the store to empty

Design Principles:
- All-or-Nothing: an import either replaces everything or changes nothing
- Validate Before Write: the document is fully parsed before the first
  row is deleted
- No HTTP Knowledge: Raises InvalidDocumentError, not HTTPException

Usage:
    from app.services.transfer import PortfolioTransferService

    service = PortfolioTransferService(store)

    document = service.export_document(db)      # JSON-ready dict
    service.import_document(db, document)       # replace everything
    service.reset(db)                           # clear everything
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models import Goal, Instrument, Price, Purchase
from app.schemas.portfolio_document import (
    DOCUMENT_SCHEMA,
    DocumentGoal,
    DocumentInstrument,
    DocumentPrice,
    DocumentPurchase,
    PortfolioDocument,
)
from app.services.exceptions import InvalidDocumentError
from app.services.portfolio_store import PortfolioStore, DEFAULT_GOAL_NAME, new_goal_id

logger = logging.getLogger(__name__)


# =============================================================================
# RESULT TYPES
# =============================================================================

@dataclass
class ImportResult:
    """Counts of what an import wrote."""

    instruments: int
    prices: int
    purchases: int
    goals: int


# =============================================================================
# SERVICE
# =============================================================================

class PortfolioTransferService:
    """
    Moves whole portfolios in and out of the store.

    Attributes:
        _store: Store used for reading the snapshot and clearing data
    """

    def __init__(self, store: PortfolioStore) -> None:
        self._store = store
        logger.info("PortfolioTransferService initialized")

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def export_document(self, db: Session) -> dict[str, Any]:
        """
        Export everything as a JSON-ready dict.

        Instruments are sorted by symbol, their prices and all purchases
        ascending by time.
        """
        snapshot = self._store.load_snapshot(db)

        document = PortfolioDocument(
            schema_=DOCUMENT_SCHEMA,
            exported_at=datetime.now(timezone.utc),
            etfs=[
                DocumentInstrument(
                    symbol=i.symbol,
                    name=i.name,
                    prices=[DocumentPrice(ts=o.timestamp, price=o.price) for o in i.observations],
                )
                for i in snapshot.instruments
            ],
            purchases=[
                DocumentPurchase(symbol=p.symbol, ts=p.timestamp, qty=p.quantity)
                for p in snapshot.purchases
            ],
            goals=[
                DocumentGoal(id=g.id, name=g.name, target=g.target, monthly=g.monthly)
                for g in snapshot.goals
            ],
        )

        logger.info(
            f"Exported portfolio: {len(snapshot.instruments)} instruments, "
            f"{len(snapshot.purchases)} purchases, {len(snapshot.goals)} goals"
        )
        return document.model_dump(mode="json", by_alias=True)

    def parse_document(self, payload: Any) -> PortfolioDocument:
        """
        Validate a raw payload (already JSON-decoded).

        Raises:
            InvalidDocumentError: If the payload is not a valid document
        """
        if not isinstance(payload, dict):
            raise InvalidDocumentError("document must be a JSON object")
        if not isinstance(payload.get("etfs"), list) or not isinstance(payload.get("purchases"), list):
            raise InvalidDocumentError("'etfs' and 'purchases' must be lists")

        try:
            return PortfolioDocument.model_validate(payload)
        except PydanticValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"])
            raise InvalidDocumentError(f"{location}: {first['msg']}", field=location) from e

    def import_document(self, db: Session, payload: Any) -> ImportResult:
        """
        Replace all stored data with the document's contents.

        Args:
            db: Database session
            payload: JSON-decoded document

        Returns:
            ImportResult with written counts

        Raises:
            InvalidDocumentError: If the payload is invalid (nothing changed)
        """
        document = self.parse_document(payload)
        result = self._replace_all(db, document)

        logger.info(
            f"Imported portfolio: {result.instruments} instruments, {result.prices} prices, "
            f"{result.purchases} purchases, {result.goals} goals"
        )
        return result

    def reset(self, db: Session) -> None:
        """Delete every instrument, price, purchase and goal."""
        try:
            self._store.clear(db)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        logger.info("Portfolio reset")

    # =========================================================================
    # PRIVATE METHODS
    # =========================================================================

    def _replace_all(self, db: Session, document: PortfolioDocument) -> ImportResult:
        """Clear and rewrite in one transaction (rolled back on any error)."""
        price_count = 0
        try:
            self._store.clear(db)

            for item in document.etfs:
                instrument = Instrument(symbol=item.symbol, name=item.name.strip() or item.symbol)
                # Last write wins for repeated timestamps
                by_ts = {p.ts: p.price for p in item.prices}
                instrument.prices = [
                    Price(timestamp=ts, price=price) for ts, price in sorted(by_ts.items())
                ]
                price_count += len(by_ts)
                db.add(instrument)

            for item in document.purchases:
                db.add(Purchase(symbol=item.symbol, timestamp=item.ts, quantity=item.qty))

            seen_goal_ids: set[str] = set()
            for item in document.goals:
                goal_id = item.id if item.id and item.id not in seen_goal_ids else new_goal_id()
                seen_goal_ids.add(goal_id)
                db.add(Goal(
                    id=goal_id,
                    name=item.name.strip() or DEFAULT_GOAL_NAME,
                    target=item.target,
                    monthly=item.monthly,
                ))

            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Import failed, changes rolled back")
            raise

        return ImportResult(
            instruments=len(document.etfs),
            prices=price_count,
            purchases=len(document.purchases),
            goals=len(document.goals),
        )
