# backend/app/services/valuation/calculators.py
"""
Point-in-time valuation calculators.

Each calculator follows the Single Responsibility Principle:
- PriceResolver: Latest and as-of price lookups over a price series
- HoldingsCalculator: Aggregates purchases into quantity by symbol
- CostBasisCalculator: What was paid (each purchase priced at its own time)
- ValueCalculator: What holdings are worth (latest or as-of price)
- PnLCalculator: Profit/loss amount and percentage

Design Principles:
- Each calculator does ONE thing well
- Stateless (no instance state beyond injected calculators)
- Receives all data explicitly (snapshot values, never storage)
- Missing prices are excluded from sums, never raised
- Uses Decimal for ALL financial calculations

Usage:
    resolver = PriceResolver()
    price = resolver.price_at(instrument, timestamp=1_700_000_000_000)

    holdings_calc = HoldingsCalculator()
    quantities = holdings_calc.quantity_by_symbol(purchases, as_of=ts)
"""

from __future__ import annotations

import bisect
import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal

from app.services.valuation.types import InstrumentSeries, PurchaseEvent

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


# =============================================================================
# PRICE RESOLVER
# =============================================================================

class PriceResolver:
    """
    Resolves prices from an instrument's sparse price observations.

    Two lookups are supported:
    - latest_price: the most recent observation overall
    - price_at: "as-of" lookup - the most recent observation at or before
      the query time. When the query time precedes every observation, the
      closest observation in either direction is used instead, preferring
      the earlier one on an exact distance tie.

    Both return None only when the instrument is missing or has no
    observations at all.
    """

    def latest_price(self, instrument: InstrumentSeries | None) -> Decimal | None:
        """Price of the observation with the greatest timestamp."""
        if instrument is None or not instrument.observations:
            return None
        return instrument.observations[-1].price

    def price_at(
            self,
            instrument: InstrumentSeries | None,
            timestamp: int,
    ) -> Decimal | None:
        """
        Price in effect at `timestamp`.

        Args:
            instrument: Instrument with ascending observations (or None)
            timestamp: Query time in epoch milliseconds

        Returns:
            As-of price, nearest-observation fallback, or None if no data
        """
        if instrument is None or not instrument.observations:
            return None

        observations = instrument.observations

        # Index of the first observation strictly after the query time
        idx = bisect.bisect_right(instrument.timestamps, timestamp)
        if idx > 0:
            return observations[idx - 1].price

        # Query precedes all observations: closest by distance.
        # min() keeps the first minimal element, i.e. the earlier timestamp.
        closest = min(observations, key=lambda o: abs(o.timestamp - timestamp))
        logger.debug(
            f"{instrument.symbol}: no price at or before {timestamp}, "
            f"using nearest observation at {closest.timestamp}"
        )
        return closest.price


# =============================================================================
# HOLDINGS CALCULATOR
# =============================================================================

class HoldingsCalculator:
    """
    Aggregates purchase events into quantity held per symbol.

    Note:
        Only symbols with at least one purchase at or before `as_of` are
        returned. There are no zero entries.
    """

    def quantity_by_symbol(
            self,
            purchases: Iterable[PurchaseEvent],
            as_of: int | None = None,
    ) -> dict[str, Decimal]:
        """
        Sum purchased quantity per symbol.

        Args:
            purchases: Purchase events in any order
            as_of: Inclusive cut-off in epoch ms (None = every purchase)

        Returns:
            Dict mapping symbol -> total quantity
        """
        quantities: dict[str, Decimal] = {}

        for purchase in purchases:
            if as_of is not None and purchase.timestamp > as_of:
                continue
            quantities[purchase.symbol] = (
                    quantities.get(purchase.symbol, ZERO) + purchase.quantity
            )

        return quantities

    def apply_purchase(
            self,
            holdings_state: dict[str, Decimal],
            purchase: PurchaseEvent,
    ) -> None:
        """
        Apply a single purchase to holdings state (mutates holdings_state).

        Used by the rolling state pattern in history calculator.
        """
        holdings_state[purchase.symbol] = (
                holdings_state.get(purchase.symbol, ZERO) + purchase.quantity
        )


# =============================================================================
# COST BASIS CALCULATOR
# =============================================================================

class CostBasisCalculator:
    """
    Calculates what was paid for purchases.

    Each purchase is priced at its OWN timestamp:
        cost = quantity × price_at(instrument, purchase.timestamp)

    Purchases whose instrument has no price data contribute nothing.
    """

    def __init__(self, price_resolver: PriceResolver) -> None:
        self._price_resolver = price_resolver

    def purchase_cost(
            self,
            purchase: PurchaseEvent,
            instruments: Mapping[str, InstrumentSeries],
    ) -> Decimal | None:
        """Cost of a single purchase (None if its price cannot be resolved)."""
        unit_price = self._price_resolver.price_at(
            instruments.get(purchase.symbol), purchase.timestamp
        )
        if unit_price is None:
            return None
        return purchase.quantity * unit_price

    def calculate(
            self,
            purchases: Iterable[PurchaseEvent],
            instruments: Mapping[str, InstrumentSeries],
    ) -> Decimal:
        """Total cost basis over all purchases."""
        total, _ = self.calculate_with_skipped(purchases, instruments)
        return total

    def calculate_with_skipped(
            self,
            purchases: Iterable[PurchaseEvent],
            instruments: Mapping[str, InstrumentSeries],
    ) -> tuple[Decimal, list[PurchaseEvent]]:
        """
        Total cost basis plus the purchases that could not be priced.

        Returns:
            Tuple of (total cost, skipped purchases)
        """
        total = ZERO
        skipped: list[PurchaseEvent] = []

        for purchase in purchases:
            cost = self.purchase_cost(purchase, instruments)
            if cost is None:
                skipped.append(purchase)
                continue
            total += cost

        return total, skipped

    def invested_at(
            self,
            purchases: Iterable[PurchaseEvent],
            instruments: Mapping[str, InstrumentSeries],
            timestamp: int,
    ) -> Decimal:
        """
        Cumulative cost basis of purchases made at or before `timestamp`.

        Purchases keep their own purchase-time price; they are NOT
        re-priced at `timestamp`.
        """
        return self.calculate(
            (p for p in purchases if p.timestamp <= timestamp),
            instruments,
        )


# =============================================================================
# VALUE CALCULATOR
# =============================================================================

class ValueCalculator:
    """
    Calculates market value of holdings.

    Formula:
        value = Σ quantity(symbol) × price(symbol)

    where price is the latest price (current value) or the as-of price at
    a timestamp (historical value). Symbols without price data are skipped.
    """

    def __init__(
            self,
            price_resolver: PriceResolver,
            holdings_calc: HoldingsCalculator,
    ) -> None:
        self._price_resolver = price_resolver
        self._holdings_calc = holdings_calc

    def value_holdings(
            self,
            quantities: Mapping[str, Decimal],
            instruments: Mapping[str, InstrumentSeries],
            timestamp: int | None = None,
    ) -> tuple[Decimal, list[str]]:
        """
        Value a quantity-by-symbol mapping.

        Args:
            quantities: Quantity held per symbol
            instruments: Instruments keyed by symbol
            timestamp: As-of time (None = use latest prices)

        Returns:
            Tuple of (total value, symbols skipped for missing prices)
        """
        total = ZERO
        skipped: list[str] = []

        for symbol, quantity in quantities.items():
            instrument = instruments.get(symbol)
            if timestamp is None:
                unit_price = self._price_resolver.latest_price(instrument)
            else:
                unit_price = self._price_resolver.price_at(instrument, timestamp)

            if unit_price is None:
                skipped.append(symbol)
                continue
            total += quantity * unit_price

        return total, skipped

    def current_value(
            self,
            purchases: Iterable[PurchaseEvent],
            instruments: Mapping[str, InstrumentSeries],
    ) -> Decimal:
        """Value of all purchases at each instrument's latest price."""
        quantities = self._holdings_calc.quantity_by_symbol(purchases)
        total, _ = self.value_holdings(quantities, instruments)
        return total

    def value_at(
            self,
            purchases: Iterable[PurchaseEvent],
            instruments: Mapping[str, InstrumentSeries],
            timestamp: int,
    ) -> Decimal:
        """Value of holdings as of `timestamp`, using as-of prices."""
        quantities = self._holdings_calc.quantity_by_symbol(purchases, as_of=timestamp)
        total, _ = self.value_holdings(quantities, instruments, timestamp=timestamp)
        return total


# =============================================================================
# P&L CALCULATOR
# =============================================================================

class PnLCalculator:
    """
    Calculates profit/loss of the portfolio.

    Formula:
        profit_loss = current - invested
        profit_loss_pct = (profit_loss / invested) × 100

    Note:
        A portfolio with nothing invested reports 0%, whatever its value.
    """

    def calculate(
            self,
            invested: Decimal,
            current: Decimal,
    ) -> tuple[Decimal, Decimal]:
        """
        Returns:
            Tuple of (amount, percentage)
        """
        profit_loss = current - invested

        if invested > ZERO:
            profit_loss_pct = (profit_loss / invested) * HUNDRED
        else:
            profit_loss_pct = ZERO

        return profit_loss, profit_loss_pct.quantize(Decimal("0.01"))
