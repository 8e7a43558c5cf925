# backend/app/schemas/dashboard.py
"""
Pydantic schemas for the dashboard.

These schemas handle:
- Portfolio totals (invested, current value, P&L) with data diagnostics
- Value vs. invested history (portfolio chart)
- Price series per instrument (instrument chart)
- Daily purchase amounts per instrument (purchases chart)

All money values are in the configured reporting currency. Timestamps are
epoch milliseconds.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# TOTALS
# =============================================================================

class TotalsResponse(BaseModel):
    """Portfolio-level totals."""

    model_config = ConfigDict(from_attributes=True)

    currency: str = Field(..., description="Reporting currency label")
    invested: Decimal = Field(
        ...,
        description="Cost basis: each purchase priced at its own timestamp"
    )
    current: Decimal = Field(
        ...,
        description="All holdings at each instrument's latest price"
    )
    profit_loss: Decimal = Field(..., description="current - invested")
    profit_loss_pct: Decimal = Field(
        ...,
        description="profit_loss / invested × 100 (0 when nothing invested)"
    )
    purchase_count: int = Field(..., description="Purchases considered")
    skipped_cost_count: int = Field(
        ...,
        description="Purchases left out of `invested` for missing prices"
    )
    skipped_value_count: int = Field(
        ...,
        description="Symbols left out of `current` for missing prices"
    )
    has_complete_data: bool = Field(..., description="True if nothing was skipped")
    warnings: list[str] = Field(default_factory=list)


# =============================================================================
# SERIES
# =============================================================================

class SeriesPointResponse(BaseModel):
    """Single (timestamp, value) point."""

    model_config = ConfigDict(from_attributes=True)

    timestamp: int
    value: Decimal


class HistoryResponse(BaseModel):
    """
    Value vs. invested series sharing one x-axis.

    Samples are every price and purchase timestamp within [start, end].
    """

    model_config = ConfigDict(from_attributes=True)

    currency: str
    start: int | None = Field(default=None, description="Inclusive lower bound (epoch ms)")
    end: int | None = Field(default=None, description="Inclusive upper bound (epoch ms)")
    total_points: int
    value_series: list[SeriesPointResponse]
    invested_series: list[SeriesPointResponse]
    warnings: list[str] = Field(default_factory=list)


class SymbolSeriesResponse(BaseModel):
    """Points of one instrument."""

    model_config = ConfigDict(from_attributes=True)

    symbol: str
    points: list[SeriesPointResponse]


class PriceSeriesResponse(BaseModel):
    """Recorded prices per instrument within the requested range."""

    start: int | None = None
    end: int | None = None
    series: list[SymbolSeriesResponse]


class DailyPurchasesResponse(BaseModel):
    """
    Money spent per instrument per calendar day.

    Each point's timestamp is the start of the day in `timezone`.
    """

    currency: str
    timezone: str
    start: int | None = None
    end: int | None = None
    series: list[SymbolSeriesResponse]
