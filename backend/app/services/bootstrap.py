# backend/app/services/bootstrap.py
"""
First-run seeding of the sample portfolio.

When the store is completely empty and BOOTSTRAP_DEFAULTS is on, the
document at DEFAULT_DATA_PATH is imported. A missing or broken file is
logged and ignored: the application starts with an empty portfolio.
"""

import json
import logging
from pathlib import Path

from sqlalchemy.orm import Session

from app.config import settings
from app.services.exceptions import InvalidDocumentError
from app.services.portfolio_store import PortfolioStore
from app.services.transfer import PortfolioTransferService
from app.services.valuation import ValuationService

logger = logging.getLogger(__name__)


def bootstrap_defaults(
        db: Session,
        path: Path | None = None,
        enabled: bool | None = None,
) -> bool:
    """
    Seed the sample portfolio into an empty store.

    Args:
        db: Database session
        path: Document to import (default: settings.default_data_path)
        enabled: Override for settings.bootstrap_defaults

    Returns:
        True if data was imported
    """
    if not (settings.bootstrap_defaults if enabled is None else enabled):
        return False

    store = PortfolioStore(ValuationService(tz=settings.tzinfo))
    if not store.is_empty(db):
        logger.debug("Store not empty, skipping default data")
        return False

    path = path or settings.default_data_path
    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
        result = PortfolioTransferService(store).import_document(db, payload)
    except (OSError, json.JSONDecodeError, InvalidDocumentError) as e:
        logger.warning(f"Default data load failed ({path}): {e}")
        return False

    logger.info(
        f"Seeded default portfolio from {path}: "
        f"{result.instruments} instruments, {result.purchases} purchases"
    )
    return True
