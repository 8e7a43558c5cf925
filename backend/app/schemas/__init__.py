# backend/app/schemas/__init__.py
"""
Pydantic schemas for API request/response validation.

This package contains all Pydantic schemas organized by domain:
- dashboard: Totals and chart series
- errors: Error response formats
- goals: Savings goals and projections
- instruments: Instruments and prices
- portfolio_document: Export/import document format
- purchases: Purchase entry and listing
- validators: Reusable validation functions (symbol, date range)

Usage:
    from app.schemas import InstrumentCreate, InstrumentResponse
    from app.schemas import PurchaseCreate, PurchaseListResponse
    from app.schemas import TotalsResponse, HistoryResponse
    from app.schemas import PortfolioDocument
"""

from app.schemas.dashboard import (
    TotalsResponse,
    SeriesPointResponse,
    HistoryResponse,
    SymbolSeriesResponse,
    PriceSeriesResponse,
    DailyPurchasesResponse,
)
from app.schemas.errors import ErrorDetail, ValidationErrorDetail
from app.schemas.goals import GoalCreate, GoalUpdate, GoalResponse, ProjectionResponse
from app.schemas.instruments import (
    InstrumentCreate,
    InstrumentResponse,
    PriceCreate,
    PriceUpdate,
    PriceResponse,
)
from app.schemas.portfolio_document import (
    DOCUMENT_SCHEMA,
    PortfolioDocument,
    DocumentInstrument,
    DocumentPrice,
    DocumentPurchase,
    DocumentGoal,
)
from app.schemas.purchases import PurchaseCreate, PurchaseResponse, PurchaseListResponse

__all__ = [
    # Dashboard
    "TotalsResponse",
    "SeriesPointResponse",
    "HistoryResponse",
    "SymbolSeriesResponse",
    "PriceSeriesResponse",
    "DailyPurchasesResponse",
    # Errors
    "ErrorDetail",
    "ValidationErrorDetail",
    # Goals
    "GoalCreate",
    "GoalUpdate",
    "GoalResponse",
    "ProjectionResponse",
    # Instruments
    "InstrumentCreate",
    "InstrumentResponse",
    "PriceCreate",
    "PriceUpdate",
    "PriceResponse",
    # Document
    "DOCUMENT_SCHEMA",
    "PortfolioDocument",
    "DocumentInstrument",
    "DocumentPrice",
    "DocumentPurchase",
    "DocumentGoal",
    # Purchases
    "PurchaseCreate",
    "PurchaseResponse",
    "PurchaseListResponse",
]
