# backend/app/services/valuation/service.py
"""
Valuation Service - Main orchestrator for portfolio valuation.

This is the single entry point for all valuation operations:
- get_totals(): Invested, current value and P&L of the whole portfolio
- get_history(): Value vs. invested time series for charts
- get_price_series(): Recorded prices per instrument for charts
- get_daily_purchase_amounts(): Money spent per instrument per day
- quantity_for_amount(): Units bought for a given amount of money

Design Principles:
- Snapshot In, Result Out: every call receives a PortfolioSnapshot and
  keeps nothing once it returns
- No Storage Knowledge: the caller loads the snapshot (PortfolioStore)
- No HTTP Knowledge: Raises domain exceptions, not HTTPException
- Composable: Uses specialized calculators for each task

Usage:
    from app.services.valuation import ValuationService

    service = ValuationService()
    snapshot = store.load_snapshot(db)

    totals = service.get_totals(snapshot)
    history = service.get_history(snapshot, start=start_ms, end=end_ms)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import timezone, tzinfo
from decimal import Decimal

from app.services.exceptions import InstrumentNotFoundError, PriceUnavailableError
from app.services.valuation.calculators import (
    PriceResolver,
    HoldingsCalculator,
    CostBasisCalculator,
    ValueCalculator,
    PnLCalculator,
)
from app.services.valuation.history_calculator import HistoryCalculator, TimelineBuilder
from app.services.valuation.types import (
    DailyAmountSeries,
    InstrumentPriceSeries,
    PortfolioHistory,
    PortfolioSnapshot,
    PortfolioTotals,
    PurchaseEvent,
    SeriesPoint,
)
from app.utils.date_utils import start_of_day_ms

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


class ValuationService:
    """
    Main service for portfolio valuation operations.

    Orchestrates all valuation calculations by composing specialized
    calculators.

    Attributes:
        _tz: Timezone defining calendar days (daily purchase buckets)
        _price_resolver: Latest / as-of price lookups
        _holdings_calc: Calculator for quantity aggregation
        _cost_calc: Calculator for cost basis
        _value_calc: Calculator for market value
        _pnl_calc: Calculator for profit/loss
        _timeline: Builder for history sample timestamps
        _history_calc: Calculator for time series
    """

    def __init__(self, tz: tzinfo = timezone.utc) -> None:
        self._tz = tz

        # Initialize point-in-time calculators
        self._price_resolver = PriceResolver()
        self._holdings_calc = HoldingsCalculator()
        self._cost_calc = CostBasisCalculator(self._price_resolver)
        self._value_calc = ValueCalculator(self._price_resolver, self._holdings_calc)
        self._pnl_calc = PnLCalculator()

        # Initialize history calculators (reuse point-in-time calculators)
        self._timeline = TimelineBuilder()
        self._history_calc = HistoryCalculator(
            holdings_calc=self._holdings_calc,
            cost_calc=self._cost_calc,
            value_calc=self._value_calc,
        )

        logger.info("ValuationService initialized")

    @property
    def price_resolver(self) -> PriceResolver:
        return self._price_resolver

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def get_totals(self, snapshot: PortfolioSnapshot) -> PortfolioTotals:
        """
        Calculate invested amount, current value and P&L.

        - invested: each purchase priced at its own timestamp (as-of)
        - current: all purchased quantity at each instrument's latest price
        - profit_loss_pct: 0 when nothing is invested

        Purchases whose instrument has no price data are excluded from the
        sums. They are counted and listed in warnings.

        Args:
            snapshot: Portfolio snapshot to value

        Returns:
            PortfolioTotals with diagnostics
        """
        instruments = snapshot.instruments_by_symbol()
        purchases = snapshot.purchases

        invested, skipped_purchases = self._cost_calc.calculate_with_skipped(
            purchases, instruments
        )
        quantities = self._holdings_calc.quantity_by_symbol(purchases)
        current, skipped_symbols = self._value_calc.value_holdings(quantities, instruments)

        profit_loss, profit_loss_pct = self._pnl_calc.calculate(invested, current)

        warnings: list[str] = []
        missing = sorted({p.symbol for p in skipped_purchases} | set(skipped_symbols))
        if missing:
            warnings.append(
                f"{len(skipped_purchases)} of {len(purchases)} purchases have no "
                f"price data ({', '.join(missing)}) and are excluded from totals"
            )
            logger.warning(
                f"Totals exclude {len(skipped_purchases)} unpriced purchases: {missing}"
            )

        return PortfolioTotals(
            invested=invested.quantize(CENT),
            current=current.quantize(CENT),
            profit_loss=profit_loss.quantize(CENT),
            profit_loss_pct=profit_loss_pct,
            purchase_count=len(purchases),
            skipped_cost_count=len(skipped_purchases),
            skipped_value_count=len(skipped_symbols),
            warnings=warnings,
        )

    def get_history(
            self,
            snapshot: PortfolioSnapshot,
            start: int | None = None,
            end: int | None = None,
    ) -> PortfolioHistory:
        """
        Get portfolio value vs. invested history.

        Samples are every price and purchase timestamp inside the
        inclusive [start, end] window.

        Args:
            snapshot: Portfolio snapshot
            start: Inclusive lower bound in epoch ms (None = unbounded)
            end: Inclusive upper bound in epoch ms (None = unbounded)

        Returns:
            PortfolioHistory with value and invested series
        """
        samples = self._timeline.sample_timestamps(
            snapshot.instruments, snapshot.purchases, start=start, end=end
        )

        logger.info(
            f"Calculating history over {len(samples)} samples "
            f"(start={start}, end={end})"
        )

        return self._history_calc.calculate(
            purchases=snapshot.purchases,
            instruments=snapshot.instruments_by_symbol(),
            sample_timestamps=samples,
            start=start,
            end=end,
        )

    def price_at(
            self,
            snapshot: PortfolioSnapshot,
            symbol: str,
            timestamp: int,
    ) -> Decimal | None:
        """As-of price of `symbol` at `timestamp` (None if no price data)."""
        return self._price_resolver.price_at(snapshot.instrument(symbol), timestamp)

    def purchase_cost(
            self,
            snapshot: PortfolioSnapshot,
            purchase: PurchaseEvent,
    ) -> tuple[Decimal | None, Decimal | None]:
        """
        Unit price and total cost of one purchase.

        Returns:
            Tuple of (unit price, cost) - both None if no price data
        """
        unit_price = self.price_at(snapshot, purchase.symbol, purchase.timestamp)
        if unit_price is None:
            return None, None
        return unit_price, purchase.quantity * unit_price

    def quantity_for_amount(
            self,
            snapshot: PortfolioSnapshot,
            symbol: str,
            timestamp: int,
            amount: Decimal,
    ) -> Decimal:
        """
        Convert a purchase amount (money) into a quantity of units.

        quantity = amount / price_at(instrument, timestamp)

        Raises:
            InstrumentNotFoundError: If the symbol does not exist
            PriceUnavailableError: If there is no positive price to divide by
        """
        instrument = snapshot.instrument(symbol)
        if instrument is None:
            raise InstrumentNotFoundError(symbol)

        unit_price = self._price_resolver.price_at(instrument, timestamp)
        if unit_price is None or unit_price <= 0:
            raise PriceUnavailableError(symbol, timestamp)

        return amount / unit_price

    def get_price_series(
            self,
            snapshot: PortfolioSnapshot,
            symbols: Iterable[str] | None = None,
            start: int | None = None,
            end: int | None = None,
    ) -> list[InstrumentPriceSeries]:
        """
        Recorded prices of each instrument within [start, end].

        Args:
            snapshot: Portfolio snapshot
            symbols: Instruments to include (None = all, unknown ignored)
            start: Inclusive lower bound in epoch ms
            end: Inclusive upper bound in epoch ms

        Returns:
            One series per instrument, sorted by symbol, points ascending
        """
        wanted = None if symbols is None else set(symbols)
        result: list[InstrumentPriceSeries] = []

        for instrument in sorted(snapshot.instruments, key=lambda i: i.symbol):
            if wanted is not None and instrument.symbol not in wanted:
                continue
            points = [
                SeriesPoint(timestamp=o.timestamp, value=o.price)
                for o in instrument.observations
                if (start is None or o.timestamp >= start)
                and (end is None or o.timestamp <= end)
            ]
            result.append(InstrumentPriceSeries(symbol=instrument.symbol, points=points))

        return result

    def get_daily_purchase_amounts(
            self,
            snapshot: PortfolioSnapshot,
            symbols: Iterable[str] | None = None,
            start: int | None = None,
            end: int | None = None,
    ) -> list[DailyAmountSeries]:
        """
        Money spent per instrument per calendar day.

        Each purchase in [start, end] contributes quantity × price at its
        own timestamp to the day it falls on (in the service timezone).
        Purchases without price data are left out.

        Returns:
            One series per requested symbol (sorted), days ascending
        """
        if symbols is None:
            selected = sorted({i.symbol for i in snapshot.instruments})
        else:
            selected = sorted(set(symbols))

        by_symbol: dict[str, dict[int, Decimal]] = {s: {} for s in selected}

        for purchase in snapshot.purchases:
            days = by_symbol.get(purchase.symbol)
            if days is None:
                continue
            if start is not None and purchase.timestamp < start:
                continue
            if end is not None and purchase.timestamp > end:
                continue

            _, cost = self.purchase_cost(snapshot, purchase)
            if cost is None:
                continue

            day = start_of_day_ms(purchase.timestamp, self._tz)
            days[day] = days.get(day, Decimal("0")) + cost

        return [
            DailyAmountSeries(
                symbol=symbol,
                points=[
                    SeriesPoint(timestamp=day, value=amount)
                    for day, amount in sorted(by_symbol[symbol].items())
                ],
            )
            for symbol in selected
        ]
