# backend/tests/services/valuation/test_history_calculator.py
"""
Tests for TimelineBuilder and HistoryCalculator.

The rolling-state history must give exactly the same numbers as valuing
each sample independently with the point-in-time calculators.
"""

from decimal import Decimal

import pytest

from app.services.valuation.calculators import (
    PriceResolver,
    HoldingsCalculator,
    CostBasisCalculator,
    ValueCalculator,
)
from app.services.valuation.history_calculator import HistoryCalculator, TimelineBuilder
from tests.conftest import make_instrument, make_purchase


@pytest.fixture
def calculators():
    resolver = PriceResolver()
    holdings = HoldingsCalculator()
    cost = CostBasisCalculator(resolver)
    value = ValueCalculator(resolver, holdings)
    return holdings, cost, value


@pytest.fixture
def history_calc(calculators) -> HistoryCalculator:
    holdings, cost, value = calculators
    return HistoryCalculator(holdings_calc=holdings, cost_calc=cost, value_calc=value)


@pytest.fixture
def instruments():
    return {
        "AAA": make_instrument("AAA", [(1000, "10"), (2000, "20"), (4000, "15")]),
        "BBB": make_instrument("BBB", [(1500, "100"), (3000, "110")]),
    }


@pytest.fixture
def purchases():
    return [
        make_purchase("BBB", 3500, "1"),
        make_purchase("AAA", 500, "2"),
        make_purchase("AAA", 2000, "3"),
        make_purchase("BBB", 1500, "0.5"),
    ]


# =============================================================================
# TEST: TimelineBuilder
# =============================================================================

class TestTimelineBuilder:
    """Tests for sample timestamp derivation."""

    def test_union_of_price_and_purchase_times(self, instruments, purchases):
        """Samples are every distinct price and purchase time, ascending."""
        samples = TimelineBuilder().sample_timestamps(instruments.values(), purchases)

        assert samples == [500, 1000, 1500, 2000, 3000, 3500, 4000]

    def test_window_is_inclusive(self, instruments, purchases):
        samples = TimelineBuilder().sample_timestamps(
            instruments.values(), purchases, start=1500, end=3500
        )

        assert samples == [1500, 2000, 3000, 3500]

    def test_empty_portfolio(self):
        assert TimelineBuilder().sample_timestamps([], []) == []


# =============================================================================
# TEST: HistoryCalculator
# =============================================================================

class TestHistoryCalculator:
    """Tests for value and invested series."""

    def test_series_share_timestamps(self, history_calc, instruments, purchases):
        samples = TimelineBuilder().sample_timestamps(instruments.values(), purchases)

        history = history_calc.calculate(purchases, instruments, samples)

        assert history.timestamps == samples
        assert [p.timestamp for p in history.invested_series] == samples
        assert history.total_points == len(samples)

    def test_rolling_state_matches_independent_valuation(
            self, history_calc, calculators, instruments, purchases
    ):
        """Every sample equals value_at() / invested_at() computed from scratch."""
        _, cost, value = calculators
        samples = TimelineBuilder().sample_timestamps(instruments.values(), purchases)

        history = history_calc.calculate(purchases, instruments, samples)

        for point, invested in zip(history.value_series, history.invested_series):
            assert point.value == value.value_at(purchases, instruments, point.timestamp)
            assert invested.value == cost.invested_at(purchases, instruments, invested.timestamp)

    def test_known_values(self, history_calc, instruments):
        """Early purchase uses the nearest price, later ones their own."""
        purchases = [
            make_purchase("AAA", 500, "2"),
            make_purchase("AAA", 2000, "3"),
        ]

        history = history_calc.calculate(purchases, instruments, [500, 1000, 2000, 4000])

        assert [p.value for p in history.value_series] == [
            Decimal("20"), Decimal("20"), Decimal("100"), Decimal("75"),
        ]
        assert [p.value for p in history.invested_series] == [
            Decimal("20"), Decimal("20"), Decimal("80"), Decimal("80"),
        ]

    def test_unpriced_purchases_excluded_with_warning(self, history_calc, instruments):
        purchases = [
            make_purchase("AAA", 1000, "1"),
            make_purchase("GONE", 1000, "5"),
        ]

        history = history_calc.calculate(purchases, instruments, [1000])

        assert history.value_series[0].value == Decimal("10")
        assert history.invested_series[0].value == Decimal("10")
        assert len(history.warnings) == 1
        assert "GONE" in history.warnings[0]

    def test_echoes_window(self, history_calc, instruments, purchases):
        history = history_calc.calculate(purchases, instruments, [], start=1, end=2)

        assert history.start == 1
        assert history.end == 2
        assert history.total_points == 0
