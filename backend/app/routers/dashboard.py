# backend/app/routers/dashboard.py
"""
Dashboard endpoints (chart data as JSON).

- GET /dashboard/summary    - Invested / current / P&L with diagnostics
- GET /dashboard/history    - Value vs. invested series (portfolio chart)
- GET /dashboard/prices     - Price series per instrument (instrument chart)
- GET /dashboard/purchases  - Money spent per instrument per day (purchases chart)

Every date filter covers whole days in the configured timezone.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.dependencies import (
    TimeBounds,
    get_portfolio_store,
    get_time_bounds,
    get_valuation_service,
)
from app.schemas.dashboard import (
    DailyPurchasesResponse,
    HistoryResponse,
    PriceSeriesResponse,
    SeriesPointResponse,
    SymbolSeriesResponse,
    TotalsResponse,
)
from app.services.portfolio_store import PortfolioStore, normalize_symbol
from app.services.valuation import ValuationService

# =============================================================================
# ROUTER SETUP
# =============================================================================

router = APIRouter(
    prefix="/dashboard",
    tags=["Dashboard"],
)


# =============================================================================
# MAPPER FUNCTIONS (Internal Types -> Pydantic Schemas)
# =============================================================================

def _map_points(points) -> list[SeriesPointResponse]:
    return [SeriesPointResponse(timestamp=p.timestamp, value=p.value) for p in points]


def _map_symbol_series(series) -> SymbolSeriesResponse:
    """Map InstrumentPriceSeries / DailyAmountSeries to the response schema."""
    return SymbolSeriesResponse(symbol=series.symbol, points=_map_points(series.points))


def _parse_symbols(symbols: list[str] | None) -> list[str] | None:
    if not symbols:
        return None
    return [normalize_symbol(s) for s in symbols if s.strip()]


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get(
    "/summary",
    response_model=TotalsResponse,
    summary="Portfolio totals",
)
def get_summary(
        db: Session = Depends(get_db),
        store: PortfolioStore = Depends(get_portfolio_store),
        service: ValuationService = Depends(get_valuation_service),
) -> TotalsResponse:
    """
    Invested amount, current value and profit/loss.

    Purchases of instruments without price data are left out of the sums.
    `skipped_cost_count`, `skipped_value_count` and `warnings` report them.
    """
    totals = service.get_totals(store.load_snapshot(db))

    return TotalsResponse(
        currency=settings.reporting_currency,
        invested=totals.invested,
        current=totals.current,
        profit_loss=totals.profit_loss,
        profit_loss_pct=totals.profit_loss_pct,
        purchase_count=totals.purchase_count,
        skipped_cost_count=totals.skipped_cost_count,
        skipped_value_count=totals.skipped_value_count,
        has_complete_data=totals.has_complete_data,
        warnings=totals.warnings,
    )


@router.get(
    "/history",
    response_model=HistoryResponse,
    summary="Value vs. invested history",
)
def get_history(
        bounds: TimeBounds = Depends(get_time_bounds),
        db: Session = Depends(get_db),
        store: PortfolioStore = Depends(get_portfolio_store),
        service: ValuationService = Depends(get_valuation_service),
) -> HistoryResponse:
    """
    Portfolio value and cumulative invested amount over time.

    One sample per distinct price or purchase timestamp in the range.
    """
    history = service.get_history(store.load_snapshot(db), start=bounds.start, end=bounds.end)

    return HistoryResponse(
        currency=settings.reporting_currency,
        start=history.start,
        end=history.end,
        total_points=history.total_points,
        value_series=_map_points(history.value_series),
        invested_series=_map_points(history.invested_series),
        warnings=history.warnings,
    )


@router.get(
    "/prices",
    response_model=PriceSeriesResponse,
    summary="Price series per instrument",
)
def get_price_series(
        symbols: list[str] | None = Query(default=None, alias="symbol", description="Repeat to select several"),
        bounds: TimeBounds = Depends(get_time_bounds),
        db: Session = Depends(get_db),
        store: PortfolioStore = Depends(get_portfolio_store),
        service: ValuationService = Depends(get_valuation_service),
) -> PriceSeriesResponse:
    """Recorded prices of the selected instruments (all when none selected)."""
    series = service.get_price_series(
        store.load_snapshot(db),
        symbols=_parse_symbols(symbols),
        start=bounds.start,
        end=bounds.end,
    )
    return PriceSeriesResponse(
        start=bounds.start,
        end=bounds.end,
        series=[_map_symbol_series(s) for s in series],
    )


@router.get(
    "/purchases",
    response_model=DailyPurchasesResponse,
    summary="Daily purchase amounts per instrument",
)
def get_daily_purchases(
        symbols: list[str] | None = Query(default=None, alias="symbol", description="Repeat to select several"),
        bounds: TimeBounds = Depends(get_time_bounds),
        db: Session = Depends(get_db),
        store: PortfolioStore = Depends(get_portfolio_store),
        service: ValuationService = Depends(get_valuation_service),
) -> DailyPurchasesResponse:
    """Money spent per instrument per calendar day, for stacked bar charts."""
    series = service.get_daily_purchase_amounts(
        store.load_snapshot(db),
        symbols=_parse_symbols(symbols),
        start=bounds.start,
        end=bounds.end,
    )
    return DailyPurchasesResponse(
        currency=settings.reporting_currency,
        timezone=settings.timezone,
        start=bounds.start,
        end=bounds.end,
        series=[_map_symbol_series(s) for s in series],
    )
