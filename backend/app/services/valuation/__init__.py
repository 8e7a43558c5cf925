# backend/app/services/valuation/__init__.py
"""
Valuation Service Package.

This package provides portfolio valuation capabilities:
- Portfolio totals (get_totals)
- Time series for charts (get_history)
- Per-instrument price and daily purchase series

Usage:
    from app.services.valuation import ValuationService

    service = ValuationService()
    snapshot = store.load_snapshot(db)

    # Invested / current / P&L
    totals = service.get_totals(snapshot)

    # Time series for charts
    history = service.get_history(snapshot, start=start_ms, end=end_ms)

Architecture:
    valuation/
    ├── __init__.py              # This file - package exports
    ├── types.py                 # Snapshot and result data classes
    ├── calculators.py           # Point-in-time calculators
    ├── history_calculator.py    # Timeline + time series calculator
    └── service.py               # ValuationService (orchestrator)

Data Flow:
    Purchases → HoldingsCalculator → quantities per symbol
    Purchases + Prices (as-of) → CostBasisCalculator → invested
    Quantities + Prices (latest / as-of) → ValueCalculator → value
    Invested + Value → PnLCalculator → profit/loss
"""

# Calculators (for testing / direct usage)
from app.services.valuation.calculators import (
    PriceResolver,
    HoldingsCalculator,
    CostBasisCalculator,
    ValueCalculator,
    PnLCalculator,
)
from app.services.valuation.history_calculator import HistoryCalculator, TimelineBuilder
# Main service
from app.services.valuation.service import ValuationService
# Data types
from app.services.valuation.types import (
    PriceObservation,
    InstrumentSeries,
    PurchaseEvent,
    GoalSpec,
    PortfolioSnapshot,
    PortfolioTotals,
    SeriesPoint,
    PortfolioHistory,
    InstrumentPriceSeries,
    DailyAmountSeries,
)

__all__ = [
    # Main service
    "ValuationService",

    # Data types
    "PriceObservation",
    "InstrumentSeries",
    "PurchaseEvent",
    "GoalSpec",
    "PortfolioSnapshot",
    "PortfolioTotals",
    "SeriesPoint",
    "PortfolioHistory",
    "InstrumentPriceSeries",
    "DailyAmountSeries",

    # Calculators (for testing)
    "PriceResolver",
    "HoldingsCalculator",
    "CostBasisCalculator",
    "ValueCalculator",
    "PnLCalculator",
    "TimelineBuilder",
    "HistoryCalculator",
]
