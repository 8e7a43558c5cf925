# backend/app/services/portfolio_store.py
"""
Portfolio Store - all reads and writes of portfolio data.

This service handles:
- Instruments: list, create, delete (prices go with them)
- Prices: add-or-overwrite, edit, delete, filtered listing
- Purchases: create by quantity or by amount, delete, filtered listing
- Goals: create, update, delete
- Snapshots: the immutable view the valuation engine computes on

Design Principles:
- Single Writer: routers never touch ORM objects directly for mutation
- No HTTP Knowledge: Raises domain exceptions, not HTTPException
- Snapshot Boundary: load_snapshot() is the only path from storage to
  the engine, so calculations never see half-applied writes

Usage:
    from app.services.portfolio_store import PortfolioStore

    store = PortfolioStore(valuation_service)

    store.create_instrument(db, "vwce", "Vanguard FTSE All-World")
    store.add_price(db, "VWCE", timestamp=1704067200000, price=Decimal("100"))
    store.create_purchase(db, "VWCE", timestamp=1704067200000, amount=Decimal("500"))

    snapshot = store.load_snapshot(db)
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Literal

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session, selectinload

from app.models import Goal, Instrument, Price, Purchase, QUANTITY_DIGITS, QUANTITY_PLACES
from app.services.exceptions import (
    DuplicateInstrumentError,
    GoalNotFoundError,
    InstrumentNotFoundError,
    PriceNotFoundError,
    PurchaseNotFoundError,
    ValidationError,
)
from app.services.valuation import ValuationService
from app.services.valuation.types import (
    GoalSpec,
    InstrumentSeries,
    PortfolioSnapshot,
    PriceObservation,
    PurchaseEvent,
)

logger = logging.getLogger(__name__)

SortOrder = Literal["asc", "desc"]

DEFAULT_GOAL_NAME = "New goal"


def normalize_symbol(symbol: str) -> str:
    """Trimmed, upper-case symbol (the form instruments are stored under)."""
    return symbol.strip().upper()


def new_goal_id() -> str:
    return f"goal_{uuid.uuid4().hex}"


# =============================================================================
# RESULT TYPES
# =============================================================================

@dataclass
class PurchaseRow:
    """
    A purchase as shown in the purchase list.

    Attributes:
        purchase: The stored purchase
        unit_price: Price at the purchase time (None if no price data)
        amount: quantity × unit_price (None if no price data)
    """

    purchase: Purchase
    unit_price: Decimal | None
    amount: Decimal | None


# =============================================================================
# SERVICE
# =============================================================================

class PortfolioStore:
    """
    Service owning every mutation of the portfolio.

    Attributes:
        _valuation: Used for amount → quantity conversion and purchase rows
    """

    def __init__(self, valuation_service: ValuationService) -> None:
        self._valuation = valuation_service
        logger.info("PortfolioStore initialized")

    # =========================================================================
    # SNAPSHOT
    # =========================================================================

    def load_snapshot(self, db: Session) -> PortfolioSnapshot:
        """
        Build an immutable snapshot of the whole portfolio.

        Args:
            db: Database session

        Returns:
            PortfolioSnapshot with instruments (and prices), purchases, goals
        """
        instruments = db.scalars(
            select(Instrument)
            .options(selectinload(Instrument.prices))
            .order_by(Instrument.symbol)
        ).all()
        purchases = db.scalars(select(Purchase).order_by(Purchase.timestamp, Purchase.id)).all()
        goals = db.scalars(select(Goal).order_by(Goal.created_at, Goal.id)).all()

        return PortfolioSnapshot(
            instruments=tuple(
                InstrumentSeries.build(
                    symbol=i.symbol,
                    name=i.name,
                    observations=[
                        PriceObservation(timestamp=p.timestamp, price=Decimal(p.price))
                        for p in i.prices
                    ],
                )
                for i in instruments
            ),
            purchases=tuple(
                PurchaseEvent(
                    symbol=p.symbol,
                    timestamp=p.timestamp,
                    quantity=Decimal(p.quantity),
                )
                for p in purchases
            ),
            goals=tuple(
                GoalSpec(
                    id=g.id,
                    name=g.name,
                    target=Decimal(g.target),
                    monthly=Decimal(g.monthly),
                )
                for g in goals
            ),
        )

    def is_empty(self, db: Session) -> bool:
        """True if the store holds no instruments, purchases or goals."""
        for model in (Instrument, Purchase, Goal):
            if db.scalar(select(func.count()).select_from(model)):
                return False
        return True

    # =========================================================================
    # INSTRUMENTS
    # =========================================================================

    def list_instruments(self, db: Session) -> list[Instrument]:
        """All instruments sorted by symbol, prices loaded."""
        return list(
            db.scalars(
                select(Instrument)
                .options(selectinload(Instrument.prices))
                .order_by(Instrument.symbol)
            ).all()
        )

    def get_instrument(self, db: Session, symbol: str) -> Instrument:
        """
        Raises:
            InstrumentNotFoundError: If the symbol does not exist
        """
        instrument = db.get(Instrument, normalize_symbol(symbol))
        if instrument is None:
            raise InstrumentNotFoundError(normalize_symbol(symbol))
        return instrument

    def create_instrument(self, db: Session, symbol: str, name: str) -> Instrument:
        """
        Create an instrument without prices.

        Raises:
            ValidationError: If symbol or name is blank
            DuplicateInstrumentError: If the symbol already exists
        """
        symbol = normalize_symbol(symbol)
        name = name.strip()
        if not symbol:
            raise ValidationError("Symbol must not be blank", field="symbol")
        if not name:
            raise ValidationError("Name must not be blank", field="name")

        if db.get(Instrument, symbol) is not None:
            raise DuplicateInstrumentError(symbol)

        instrument = Instrument(symbol=symbol, name=name)
        db.add(instrument)
        db.commit()
        db.refresh(instrument)

        logger.info(f"Created instrument {symbol}")
        return instrument

    def delete_instrument(self, db: Session, symbol: str) -> None:
        """
        Delete an instrument and its prices.

        Purchases of the symbol are kept. Without prices they contribute
        nothing to totals or history until the instrument is re-created.
        """
        instrument = self.get_instrument(db, symbol)
        symbol = instrument.symbol
        db.delete(instrument)
        db.commit()

        orphaned = db.scalar(
            select(func.count()).select_from(Purchase).where(Purchase.symbol == symbol)
        )
        logger.info(f"Deleted instrument {symbol} ({orphaned} purchases kept without price data)")

    # =========================================================================
    # PRICES
    # =========================================================================

    def add_price(self, db: Session, symbol: str, timestamp: int, price: Decimal) -> Price:
        """
        Record a price, overwriting any price at the same exact timestamp.

        Raises:
            InstrumentNotFoundError: If the symbol does not exist
            ValidationError: If price is negative
        """
        instrument = self.get_instrument(db, symbol)
        if price < 0:
            raise ValidationError("Price must not be negative", field="price")

        existing = self._find_price(db, instrument.symbol, timestamp)
        if existing is not None:
            existing.price = price
            row = existing
            logger.info(f"Overwrote price of {instrument.symbol} at {timestamp}")
        else:
            row = Price(symbol=instrument.symbol, timestamp=timestamp, price=price)
            db.add(row)

        db.commit()
        db.refresh(row)
        return row

    def update_price(
            self,
            db: Session,
            symbol: str,
            timestamp: int,
            new_timestamp: int | None = None,
            new_price: Decimal | None = None,
    ) -> Price:
        """
        Edit an existing price (move it in time and/or change its value).

        Moving onto a timestamp that already has a price replaces that price.

        Raises:
            PriceNotFoundError: If no price exists at `timestamp`
            ValidationError: If new_price is negative
        """
        instrument = self.get_instrument(db, symbol)
        row = self._find_price(db, instrument.symbol, timestamp)
        if row is None:
            raise PriceNotFoundError(instrument.symbol, timestamp)

        if new_price is not None:
            if new_price < 0:
                raise ValidationError("Price must not be negative", field="price")
            row.price = new_price

        if new_timestamp is not None and new_timestamp != timestamp:
            clash = self._find_price(db, instrument.symbol, new_timestamp)
            if clash is not None:
                db.delete(clash)
                db.flush()
            row.timestamp = new_timestamp

        db.commit()
        db.refresh(row)
        return row

    def delete_price(self, db: Session, symbol: str, timestamp: int) -> None:
        """
        Raises:
            PriceNotFoundError: If no price exists at `timestamp`
        """
        instrument = self.get_instrument(db, symbol)
        row = self._find_price(db, instrument.symbol, timestamp)
        if row is None:
            raise PriceNotFoundError(instrument.symbol, timestamp)
        db.delete(row)
        db.commit()

    def list_prices(
            self,
            db: Session,
            symbol: str,
            start: int | None = None,
            end: int | None = None,
            order: SortOrder = "asc",
    ) -> list[Price]:
        """Prices of one instrument within inclusive [start, end]."""
        instrument = self.get_instrument(db, symbol)

        query = select(Price).where(Price.symbol == instrument.symbol)
        if start is not None:
            query = query.where(Price.timestamp >= start)
        if end is not None:
            query = query.where(Price.timestamp <= end)
        sort_column = Price.timestamp.asc() if order == "asc" else Price.timestamp.desc()

        return list(db.scalars(query.order_by(sort_column)).all())

    # =========================================================================
    # PURCHASES
    # =========================================================================

    def create_purchase(
            self,
            db: Session,
            symbol: str,
            timestamp: int,
            quantity: Decimal | None = None,
            amount: Decimal | None = None,
    ) -> Purchase:
        """
        Record a purchase, given either a quantity or an amount of money.

        A positive quantity wins. Otherwise a positive amount is converted:
        quantity = amount / price_at(symbol, timestamp).

        Raises:
            ValidationError: If neither a positive quantity nor amount is given,
                or the converted quantity does not fit the quantity column
            InstrumentNotFoundError: Converting an amount for an unknown symbol
            PriceUnavailableError: No positive price to convert the amount
        """
        symbol = normalize_symbol(symbol)
        if not symbol:
            raise ValidationError("Symbol must not be blank", field="symbol")

        if quantity is None or quantity <= 0:
            if amount is None or amount <= 0:
                raise ValidationError(
                    "Either a positive quantity or a positive amount is required",
                    field="quantity",
                )
            snapshot = self.load_snapshot(db)
            quantity = self._valuation.quantity_for_amount(snapshot, symbol, timestamp, amount)
            if quantity >= Decimal(10) ** (QUANTITY_DIGITS - QUANTITY_PLACES):
                raise ValidationError(f"Amount {amount} buys too many units of {symbol}", field="amount")
            quantity = quantity.quantize(Decimal(1).scaleb(-QUANTITY_PLACES))
            if quantity <= 0:
                raise ValidationError(
                    f"Amount {amount} buys less than the smallest storable quantity of {symbol}",
                    field="amount",
                )
            logger.info(f"Converted amount {amount} of {symbol} at {timestamp} into {quantity} units")

        purchase = Purchase(symbol=symbol, timestamp=timestamp, quantity=quantity)
        db.add(purchase)
        db.commit()
        db.refresh(purchase)

        logger.info(f"Recorded purchase {purchase.id}: {quantity} {symbol} at {timestamp}")
        return purchase

    def delete_purchase(self, db: Session, purchase_id: int) -> None:
        """
        Raises:
            PurchaseNotFoundError: If the purchase does not exist
        """
        purchase = db.get(Purchase, purchase_id)
        if purchase is None:
            raise PurchaseNotFoundError(purchase_id)
        db.delete(purchase)
        db.commit()

    def list_purchases(
            self,
            db: Session,
            symbol: str | None = None,
            start: int | None = None,
            end: int | None = None,
            order: SortOrder = "desc",
    ) -> list[PurchaseRow]:
        """
        Purchases with their unit price and amount at purchase time.

        Args:
            db: Database session
            symbol: Only this symbol (None = all)
            start: Inclusive lower bound in epoch ms
            end: Inclusive upper bound in epoch ms
            order: Sort by timestamp ascending or descending

        Returns:
            List of PurchaseRow
        """
        query = select(Purchase)
        if symbol:
            query = query.where(Purchase.symbol == normalize_symbol(symbol))
        if start is not None:
            query = query.where(Purchase.timestamp >= start)
        if end is not None:
            query = query.where(Purchase.timestamp <= end)
        if order == "asc":
            query = query.order_by(Purchase.timestamp.asc(), Purchase.id.asc())
        else:
            query = query.order_by(Purchase.timestamp.desc(), Purchase.id.desc())

        purchases = db.scalars(query).all()
        snapshot = self.load_snapshot(db)
        return [self._to_row(snapshot, p) for p in purchases]

    def purchase_row(self, db: Session, purchase: Purchase) -> PurchaseRow:
        """Unit price and amount of a single stored purchase."""
        return self._to_row(self.load_snapshot(db), purchase)

    # =========================================================================
    # GOALS
    # =========================================================================

    def list_goals(self, db: Session) -> list[Goal]:
        return list(db.scalars(select(Goal).order_by(Goal.created_at, Goal.id)).all())

    def get_goal(self, db: Session, goal_id: str) -> Goal:
        goal = db.get(Goal, goal_id)
        if goal is None:
            raise GoalNotFoundError(goal_id)
        return goal

    def create_goal(
            self,
            db: Session,
            name: str | None = None,
            target: Decimal = Decimal("0"),
            monthly: Decimal = Decimal("0"),
    ) -> Goal:
        """Create a goal. A blank name falls back to DEFAULT_GOAL_NAME."""
        goal = Goal(
            id=new_goal_id(),
            name=(name or "").strip() or DEFAULT_GOAL_NAME,
            target=target,
            monthly=monthly,
        )
        db.add(goal)
        db.commit()
        db.refresh(goal)

        logger.info(f"Created goal {goal.id}")
        return goal

    def update_goal(
            self,
            db: Session,
            goal_id: str,
            name: str | None = None,
            target: Decimal | None = None,
            monthly: Decimal | None = None,
    ) -> Goal:
        """
        Update a goal. Fields left as None are unchanged and a blank name
        keeps the previous name.

        Raises:
            GoalNotFoundError: If the goal does not exist
        """
        goal = self.get_goal(db, goal_id)

        if name is not None and name.strip():
            goal.name = name.strip()
        if target is not None:
            goal.target = target
        if monthly is not None:
            goal.monthly = monthly

        db.commit()
        db.refresh(goal)
        return goal

    def delete_goal(self, db: Session, goal_id: str) -> None:
        goal = self.get_goal(db, goal_id)
        db.delete(goal)
        db.commit()

    # =========================================================================
    # BULK
    # =========================================================================

    def clear(self, db: Session) -> None:
        """
        Delete everything (no commit, so callers can make it part of a
        larger transaction).
        """
        db.execute(delete(Price))
        db.execute(delete(Purchase))
        db.execute(delete(Instrument))
        db.execute(delete(Goal))
        db.expunge_all()

    # =========================================================================
    # PRIVATE METHODS
    # =========================================================================

    def _to_row(self, snapshot: PortfolioSnapshot, purchase: Purchase) -> PurchaseRow:
        unit_price, amount = self._valuation.purchase_cost(
            snapshot,
            PurchaseEvent(
                symbol=purchase.symbol,
                timestamp=purchase.timestamp,
                quantity=Decimal(purchase.quantity),
            ),
        )
        return PurchaseRow(purchase=purchase, unit_price=unit_price, amount=amount)

    def _find_price(self, db: Session, symbol: str, timestamp: int) -> Price | None:
        return db.scalar(
            select(Price).where(Price.symbol == symbol, Price.timestamp == timestamp)
        )
