# backend/app/services/valuation/types.py
"""
Internal data types for the Valuation Service.

These dataclasses are used internally by the valuation calculators.
They are NOT Pydantic schemas - those are defined in app/schemas/dashboard.py
for API serialization.

Design Principles:
- Immutable snapshots (frozen=True) built once at the storage boundary
- Use Decimal for ALL financial values (never float)
- Timestamps are integer epoch milliseconds
- Missing prices are None, not sentinel values
- Warnings accumulate for data quality tracking

Type Hierarchy:
    PriceObservation    - One manual price entry for an instrument
    InstrumentSeries    - Instrument with its ordered price observations
    PurchaseEvent       - Quantity acquired at a timestamp
    GoalSpec            - Savings goal (projection input only)
    PortfolioSnapshot   - Everything the engine reads for one computation
    PortfolioTotals     - Invested / current / P&L with diagnostics
    SeriesPoint         - Single point in a time series
    PortfolioHistory    - Dual time series (value vs. invested)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from functools import cached_property


# =============================================================================
# PRICE SERIES
# =============================================================================

@dataclass(frozen=True)
class PriceObservation:
    """A price recorded for an instrument at a point in time."""

    timestamp: int
    price: Decimal


@dataclass(frozen=True)
class InstrumentSeries:
    """
    A tradable instrument and its price history.

    Attributes:
        symbol: Upper-case identifier (e.g., "VWCE")
        name: Display name
        observations: Price observations sorted ascending by timestamp,
                      at most one per exact timestamp

    Note:
        Use InstrumentSeries.build() when the observations come from an
        unordered source. It sorts them and keeps the LAST observation
        written for any duplicated timestamp.
    """

    symbol: str
    name: str
    observations: tuple[PriceObservation, ...] = ()

    @classmethod
    def build(
            cls,
            symbol: str,
            name: str,
            observations: list[PriceObservation] | tuple[PriceObservation, ...] = (),
    ) -> InstrumentSeries:
        """Create a series with normalized symbol and de-duplicated, sorted observations."""
        by_timestamp: dict[int, PriceObservation] = {}
        for observation in observations:
            by_timestamp[observation.timestamp] = observation

        return cls(
            symbol=symbol.strip().upper(),
            name=name,
            observations=tuple(
                by_timestamp[ts] for ts in sorted(by_timestamp)
            ),
        )

    @cached_property
    def timestamps(self) -> list[int]:
        return [o.timestamp for o in self.observations]


# =============================================================================
# EVENTS & GOALS
# =============================================================================

@dataclass(frozen=True)
class PurchaseEvent:
    """
    A purchase of an instrument.

    The symbol is NOT guaranteed to reference an existing instrument.
    Purchases of deleted instruments resolve to no price and are
    excluded from every sum.
    """

    symbol: str
    timestamp: int
    quantity: Decimal


@dataclass(frozen=True)
class GoalSpec:
    """A savings goal: reach `target` by contributing `monthly` each month."""

    id: str
    name: str
    target: Decimal
    monthly: Decimal


@dataclass(frozen=True)
class PortfolioSnapshot:
    """
    Read-only view of the whole portfolio for one engine computation.

    Built by PortfolioStore.load_snapshot(). The engine never keeps a
    reference to it between calls.
    """

    instruments: tuple[InstrumentSeries, ...] = ()
    purchases: tuple[PurchaseEvent, ...] = ()
    goals: tuple[GoalSpec, ...] = ()

    def instrument(self, symbol: str) -> InstrumentSeries | None:
        """Look up an instrument by symbol (None if it does not exist)."""
        for instrument in self.instruments:
            if instrument.symbol == symbol:
                return instrument
        return None

    def instruments_by_symbol(self) -> dict[str, InstrumentSeries]:
        return {i.symbol: i for i in self.instruments}


# =============================================================================
# VALUATION RESULTS
# =============================================================================

@dataclass
class PortfolioTotals:
    """
    Portfolio-level valuation.

    Attributes:
        invested: Cost basis of all purchases (each priced at its own time)
        current: Value of all purchases at each instrument's latest price
        profit_loss: current - invested
        profit_loss_pct: profit_loss / invested × 100 (0 when invested is 0)
        purchase_count: Number of purchases considered
        skipped_cost_count: Purchases left out of `invested` (no price data)
        skipped_value_count: Symbols left out of `current` (no price data)
        warnings: Data quality warnings

    Note:
        Skipped contributions silently lower the totals. The counts make
        that visible to callers instead of hiding it.
    """

    invested: Decimal
    current: Decimal
    profit_loss: Decimal
    profit_loss_pct: Decimal
    purchase_count: int = 0
    skipped_cost_count: int = 0
    skipped_value_count: int = 0
    warnings: list[str] = field(default_factory=list)

    @property
    def has_complete_data(self) -> bool:
        """True if no contribution was skipped for missing prices."""
        return self.skipped_cost_count == 0 and self.skipped_value_count == 0


# =============================================================================
# HISTORY (Time series for charts)
# =============================================================================

@dataclass(frozen=True)
class SeriesPoint:
    """A single (timestamp, value) point in a time series."""

    timestamp: int
    value: Decimal


@dataclass
class PortfolioHistory:
    """
    Portfolio history as two parallel series sharing the same x-axis.

    Attributes:
        value_series: Market value of holdings at each sample timestamp
        invested_series: Cumulative cost basis at each sample timestamp
        start: Inclusive lower bound used to filter samples (None = open)
        end: Inclusive upper bound used to filter samples (None = open)
        warnings: Data quality warnings
    """

    value_series: list[SeriesPoint]
    invested_series: list[SeriesPoint]
    start: int | None = None
    end: int | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def timestamps(self) -> list[int]:
        return [p.timestamp for p in self.value_series]

    @property
    def total_points(self) -> int:
        """Number of data points in the series."""
        return len(self.value_series)


@dataclass(frozen=True)
class InstrumentPriceSeries:
    """Price points of one instrument inside a date range (for price charts)."""

    symbol: str
    points: list[SeriesPoint]


@dataclass(frozen=True)
class DailyAmountSeries:
    """
    Money spent on one instrument per calendar day.

    Each point's timestamp is the start of the day (epoch ms in the
    configured timezone), its value the summed purchase cost.
    """

    symbol: str
    points: list[SeriesPoint]
