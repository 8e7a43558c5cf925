# backend/app/services/valuation/history_calculator.py
"""
History Calculator for time series portfolio valuation.

This module generates the two series behind the portfolio chart:
- Value:    market value of holdings at each sample time (as-of prices)
- Invested: cumulative cost basis of purchases made up to each sample time

Timeline:
    Samples are NOT a regular calendar grid. TimelineBuilder takes the
    union of every price observation timestamp and every purchase
    timestamp, so each discontinuity (new price, new purchase) is an exact
    sample point. Between samples, the as-of price lookup already carries
    values forward, so no interpolation is needed.

Performance Optimization:
    Instead of re-aggregating all purchases at every sample (O(S * P)),
    purchases are sorted once and applied incrementally (Rolling State).
    Results are identical to calling value_at()/invested_at() per sample.

Design Principles:
- Pure computation over a snapshot (no storage access)
- Graceful handling of missing data (skipped, counted, warned)
- Reuses point-in-time calculators for consistency
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal

from app.services.valuation.calculators import (
    HoldingsCalculator,
    CostBasisCalculator,
    ValueCalculator,
)
from app.services.valuation.types import (
    InstrumentSeries,
    PurchaseEvent,
    PortfolioHistory,
    SeriesPoint,
)

logger = logging.getLogger(__name__)


# =============================================================================
# TIMELINE BUILDER
# =============================================================================

class TimelineBuilder:
    """
    Derives the sample timestamps of a historical series.

    The timeline is the sorted, de-duplicated union of all price
    observation timestamps (across every instrument) and all purchase
    timestamps, optionally restricted to an inclusive [start, end] window.
    """

    def sample_timestamps(
            self,
            instruments: Iterable[InstrumentSeries],
            purchases: Iterable[PurchaseEvent],
            start: int | None = None,
            end: int | None = None,
    ) -> list[int]:
        """
        Build the x-axis for a history series.

        Args:
            instruments: Instruments whose price timestamps are included
            purchases: Purchases whose timestamps are included
            start: Inclusive lower bound in epoch ms (None = unbounded)
            end: Inclusive upper bound in epoch ms (None = unbounded)

        Returns:
            Strictly ascending list of unique timestamps
        """
        times: set[int] = set()
        for instrument in instruments:
            times.update(o.timestamp for o in instrument.observations)
        times.update(p.timestamp for p in purchases)

        return sorted(
            t for t in times
            if (start is None or t >= start) and (end is None or t <= end)
        )


# =============================================================================
# HISTORY CALCULATOR
# =============================================================================

class HistoryCalculator:
    """
    Calculates portfolio valuation history (time series).

    Key Insight:
        Holdings CHANGE over time as purchases occur. So we can't just take
        today's holdings and apply historical prices. The quantity held at
        each sample is the sum of purchases at or before that sample.

    Attributes:
        _holdings_calc: Calculator for quantity aggregation
        _cost_calc: Calculator for purchase cost (invested series)
        _value_calc: Calculator for holdings value (value series)
    """

    def __init__(
            self,
            holdings_calc: HoldingsCalculator,
            cost_calc: CostBasisCalculator,
            value_calc: ValueCalculator,
    ) -> None:
        self._holdings_calc = holdings_calc
        self._cost_calc = cost_calc
        self._value_calc = value_calc

    def calculate(
            self,
            purchases: Iterable[PurchaseEvent],
            instruments: Mapping[str, InstrumentSeries],
            sample_timestamps: list[int],
            start: int | None = None,
            end: int | None = None,
    ) -> PortfolioHistory:
        """
        Calculate value and invested series using the Rolling State pattern.

        Complexity: O(S * H + P log P) where S = samples, H = symbols held,
        P = purchases. NOT O(S * P) like the naive approach!

        Args:
            purchases: All purchase events (any order)
            instruments: Instruments keyed by symbol
            sample_timestamps: Ascending sample times (see TimelineBuilder)
            start: Requested lower bound, echoed in the result
            end: Requested upper bound, echoed in the result

        Returns:
            PortfolioHistory with two parallel series
        """
        ordered = sorted(purchases, key=lambda p: p.timestamp)

        value_series: list[SeriesPoint] = []
        invested_series: list[SeriesPoint] = []

        # Rolling state - mutated as we walk forward in time
        holdings_state: dict[str, Decimal] = {}
        invested_total = Decimal("0")
        unpriced_purchases: set[str] = set()
        unpriced_symbols: set[str] = set()

        purchase_index = 0
        num_purchases = len(ordered)

        for timestamp in sample_timestamps:
            # === PHASE 1: Apply all purchases up to and including timestamp ===
            while purchase_index < num_purchases:
                purchase = ordered[purchase_index]
                if purchase.timestamp > timestamp:
                    break  # This purchase is in the future

                self._holdings_calc.apply_purchase(holdings_state, purchase)

                cost = self._cost_calc.purchase_cost(purchase, instruments)
                if cost is None:
                    unpriced_purchases.add(purchase.symbol)
                else:
                    invested_total += cost

                purchase_index += 1

            # === PHASE 2: Snapshot - value holdings at this timestamp ===
            value, skipped = self._value_calc.value_holdings(
                holdings_state, instruments, timestamp=timestamp
            )
            unpriced_symbols.update(skipped)

            value_series.append(SeriesPoint(timestamp=timestamp, value=value))
            invested_series.append(SeriesPoint(timestamp=timestamp, value=invested_total))

        warnings: list[str] = []
        missing = sorted(unpriced_purchases | unpriced_symbols)
        if missing:
            warnings.append(
                f"No price data for {', '.join(missing)}; "
                f"their purchases are excluded from the history"
            )
            logger.warning(f"History excludes unpriced symbols: {missing}")

        return PortfolioHistory(
            value_series=value_series,
            invested_series=invested_series,
            start=start,
            end=end,
            warnings=warnings,
        )
