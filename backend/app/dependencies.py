# backend/app/dependencies.py
"""
Dependency injection module for FastAPI services.

This module provides singleton service instances that are shared across
all requests. Services hold no per-request state, so one instance each
is enough.

Services are lazily initialized on first use to avoid import-time side effects.

Usage in routers:
    from app.dependencies import get_portfolio_store, get_time_bounds

    @router.get("/")
    def list_purchases(
        bounds: TimeBounds = Depends(get_time_bounds),
        store: PortfolioStore = Depends(get_portfolio_store),
    ):
        ...
"""

import logging
from dataclasses import dataclass
from datetime import date
from functools import lru_cache

from fastapi import HTTPException, Query, status

from app.config import settings
from app.schemas.validators import validate_date_range
from app.services.goals import GoalProjector
from app.services.portfolio_store import PortfolioStore
from app.services.transfer import PortfolioTransferService
from app.services.valuation.service import ValuationService
from app.utils.date_utils import day_range_to_bounds

logger = logging.getLogger(__name__)


# =============================================================================
# SINGLETON SERVICE INSTANCES
# =============================================================================
# Order matters: define dependencies before dependents
# 1. get_valuation_service (no deps)
# 2. get_portfolio_store (depends on valuation_service)
# 3. get_transfer_service (depends on store)
# 4. get_goal_projector (no deps)


@lru_cache(maxsize=1)
def get_valuation_service() -> ValuationService:
    """Get the singleton ValuationService (days defined by settings.timezone)."""
    logger.debug("Initializing singleton ValuationService")
    return ValuationService(tz=settings.tzinfo)


@lru_cache(maxsize=1)
def get_portfolio_store() -> PortfolioStore:
    """Get the singleton PortfolioStore."""
    logger.debug("Initializing singleton PortfolioStore")
    return PortfolioStore(get_valuation_service())


@lru_cache(maxsize=1)
def get_transfer_service() -> PortfolioTransferService:
    """Get the singleton PortfolioTransferService."""
    logger.debug("Initializing singleton PortfolioTransferService")
    return PortfolioTransferService(get_portfolio_store())


@lru_cache(maxsize=1)
def get_goal_projector() -> GoalProjector:
    return GoalProjector()


# =============================================================================
# QUERY DEPENDENCIES
# =============================================================================

@dataclass(frozen=True)
class TimeBounds:
    """Inclusive epoch-ms bounds derived from a date range (None = open)."""

    start: int | None
    end: int | None


def get_time_bounds(
        from_date: date | None = Query(
            default=None,
            description="First day included (local midnight in the configured timezone)"
        ),
        to_date: date | None = Query(
            default=None,
            description="Last day included, up to its final millisecond"
        ),
) -> TimeBounds:
    """
    Convert optional from/to dates into epoch-ms bounds.

    Raises:
        HTTPException 400: If from_date is after to_date
    """
    try:
        validate_date_range(from_date, to_date)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    start, end = day_range_to_bounds(from_date, to_date, settings.tzinfo)
    return TimeBounds(start=start, end=end)
