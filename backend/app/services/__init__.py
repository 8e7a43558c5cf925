# backend/app/services/__init__.py
"""
Service layer for business logic.

This package contains the service layer which encapsulates business logic
separate from the API (router) layer. Services:
- Have NO knowledge of HTTP (no HTTPException, no status codes)
- Raise domain-specific exceptions
- Receive database sessions as parameters (not via Depends)
- Are easily testable via dependency injection

Usage:
    from app.services import ValuationService, PortfolioStore
    from app.services import PortfolioTransferService, GoalProjector
    from app.services import InstrumentNotFoundError, PriceUnavailableError

Architecture:
    services/
    ├── __init__.py                  # This file - main exports
    ├── exceptions.py                # Domain exceptions
    ├── portfolio_store.py           # All reads/writes, snapshot loading
    ├── transfer.py                  # Export / import / reset
    ├── bootstrap.py                 # First-run sample portfolio
    ├── goals.py                     # Time-to-target projection
    └── valuation/                   # Valuation engine
        ├── service.py               # Main valuation orchestrator
        ├── types.py                 # Snapshot and result types
        ├── calculators.py           # Point-in-time calculations
        └── history_calculator.py    # Timeline + time series calculations
"""

# Exceptions
from app.services.exceptions import (
    ServiceError,
    ValidationError,
    InvalidDocumentError,
    PriceUnavailableError,
    NotFoundError,
    InstrumentNotFoundError,
    PriceNotFoundError,
    PurchaseNotFoundError,
    GoalNotFoundError,
    ConflictError,
    DuplicateInstrumentError,
)
# Goal projection
from app.services.goals import GoalProjector, GoalProjection, YearsMonths, UNREACHABLE
# Storage
from app.services.portfolio_store import PortfolioStore, PurchaseRow
# Export / import / reset
from app.services.transfer import PortfolioTransferService, ImportResult
# Valuation Service
from app.services.valuation import ValuationService

__all__ = [
    # ==========================================================================
    # Services
    # ==========================================================================
    "ValuationService",
    "PortfolioStore",
    "PurchaseRow",
    "PortfolioTransferService",
    "ImportResult",
    "GoalProjector",
    "GoalProjection",
    "YearsMonths",
    "UNREACHABLE",

    # ==========================================================================
    # Exceptions
    # ==========================================================================
    "ServiceError",
    "ValidationError",
    "InvalidDocumentError",
    "PriceUnavailableError",
    "NotFoundError",
    "InstrumentNotFoundError",
    "PriceNotFoundError",
    "PurchaseNotFoundError",
    "GoalNotFoundError",
    "ConflictError",
    "DuplicateInstrumentError",
]
