# backend/tests/services/test_portfolio_store.py
"""
Tests for PortfolioStore (storage of instruments, prices, purchases, goals).

Uses the in-memory SQLite session from conftest.
"""

from decimal import Decimal

import pytest

from app.models import Price, Purchase
from app.services.exceptions import (
    DuplicateInstrumentError,
    GoalNotFoundError,
    InstrumentNotFoundError,
    PriceNotFoundError,
    PriceUnavailableError,
    PurchaseNotFoundError,
    ValidationError,
)
from app.services.portfolio_store import DEFAULT_GOAL_NAME, PortfolioStore


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def seeded(db, store: PortfolioStore) -> PortfolioStore:
    """AAA priced 10 at t=1000 and 20 at t=2000, 5 units bought at t=1000."""
    store.create_instrument(db, "aaa", "Triple A")
    store.add_price(db, "AAA", 1000, Decimal("10"))
    store.add_price(db, "AAA", 2000, Decimal("20"))
    store.create_purchase(db, "AAA", 1000, quantity=Decimal("5"))
    return store


# =============================================================================
# TEST: INSTRUMENTS
# =============================================================================

class TestInstruments:
    """Tests for instrument management."""

    def test_create_normalizes_symbol(self, db, store):
        instrument = store.create_instrument(db, "  vwce ", " Vanguard ")

        assert instrument.symbol == "VWCE"
        assert instrument.name == "Vanguard"

    def test_duplicate_symbol(self, db, store):
        store.create_instrument(db, "VWCE", "Vanguard")

        with pytest.raises(DuplicateInstrumentError):
            store.create_instrument(db, "vwce", "Again")

    def test_blank_name(self, db, store):
        with pytest.raises(ValidationError):
            store.create_instrument(db, "VWCE", "   ")

    def test_list_sorted(self, db, store):
        store.create_instrument(db, "ZZZ", "Z")
        store.create_instrument(db, "AAA", "A")

        assert [i.symbol for i in store.list_instruments(db)] == ["AAA", "ZZZ"]

    def test_get_unknown(self, db, store):
        with pytest.raises(InstrumentNotFoundError):
            store.get_instrument(db, "NOPE")

    def test_delete_removes_prices_keeps_purchases(self, db, seeded):
        """Purchases survive but no longer count toward totals."""
        seeded.delete_instrument(db, "AAA")

        assert db.query(Price).count() == 0
        assert db.query(Purchase).count() == 1

        snapshot = seeded.load_snapshot(db)
        assert snapshot.instruments == ()
        assert len(snapshot.purchases) == 1


# =============================================================================
# TEST: PRICES
# =============================================================================

class TestPrices:
    """Tests for price management."""

    def test_same_timestamp_overwrites(self, db, seeded):
        seeded.add_price(db, "AAA", 1000, Decimal("12"))

        prices = seeded.list_prices(db, "AAA")
        assert [(p.timestamp, Decimal(p.price)) for p in prices] == [
            (1000, Decimal("12")),
            (2000, Decimal("20")),
        ]

    def test_negative_price(self, db, seeded):
        with pytest.raises(ValidationError):
            seeded.add_price(db, "AAA", 3000, Decimal("-1"))

    def test_unknown_instrument(self, db, store):
        with pytest.raises(InstrumentNotFoundError):
            store.add_price(db, "NOPE", 1000, Decimal("1"))

    def test_list_window_and_order(self, db, seeded):
        seeded.add_price(db, "AAA", 3000, Decimal("30"))

        prices = seeded.list_prices(db, "AAA", start=1500, end=3000, order="desc")

        assert [p.timestamp for p in prices] == [3000, 2000]

    def test_update_moves_and_reprices(self, db, seeded):
        row = seeded.update_price(db, "AAA", 2000, new_timestamp=2500, new_price=Decimal("25"))

        assert row.timestamp == 2500
        assert Decimal(row.price) == Decimal("25")
        assert [p.timestamp for p in seeded.list_prices(db, "AAA")] == [1000, 2500]

    def test_update_onto_existing_timestamp_replaces_it(self, db, seeded):
        seeded.update_price(db, "AAA", 2000, new_timestamp=1000)

        prices = seeded.list_prices(db, "AAA")
        assert [(p.timestamp, Decimal(p.price)) for p in prices] == [(1000, Decimal("20"))]

    def test_update_missing_price(self, db, seeded):
        with pytest.raises(PriceNotFoundError):
            seeded.update_price(db, "AAA", 999, new_price=Decimal("1"))

    def test_delete_price(self, db, seeded):
        seeded.delete_price(db, "AAA", 2000)

        assert [p.timestamp for p in seeded.list_prices(db, "AAA")] == [1000]

        with pytest.raises(PriceNotFoundError):
            seeded.delete_price(db, "AAA", 2000)


# =============================================================================
# TEST: PURCHASES
# =============================================================================

class TestPurchases:
    """Tests for purchase entry and listing."""

    def test_create_by_amount(self, db, seeded):
        """An amount is converted at the price in effect at the purchase time."""
        purchase = seeded.create_purchase(db, "AAA", 2500, amount=Decimal("100"))

        assert Decimal(purchase.quantity) == Decimal("5")

    def test_positive_quantity_wins_over_amount(self, db, seeded):
        purchase = seeded.create_purchase(
            db, "AAA", 2500, quantity=Decimal("2"), amount=Decimal("100")
        )

        assert Decimal(purchase.quantity) == Decimal("2")

    def test_requires_quantity_or_amount(self, db, seeded):
        with pytest.raises(ValidationError):
            seeded.create_purchase(db, "AAA", 2500)

        with pytest.raises(ValidationError):
            seeded.create_purchase(db, "AAA", 2500, quantity=Decimal("0"), amount=Decimal("0"))

    def test_amount_without_price(self, db, store):
        store.create_instrument(db, "EMPTY", "No prices")

        with pytest.raises(PriceUnavailableError):
            store.create_purchase(db, "EMPTY", 1000, amount=Decimal("100"))

    def test_amount_quantity_rounded_to_stored_places(self, db, store):
        store.create_instrument(db, "CCC", "Thirds")
        store.add_price(db, "CCC", 1000, Decimal("3"))

        purchase = store.create_purchase(db, "CCC", 1000, amount=Decimal("10"))

        assert Decimal(purchase.quantity) == Decimal("3.333333333333")

    def test_amount_too_small_to_store(self, db, seeded):
        """A quantity that would be stored as 0 is refused."""
        with pytest.raises(ValidationError) as exc_info:
            seeded.create_purchase(db, "AAA", 2500, amount=Decimal("0.00000000001"))

        assert exc_info.value.field == "amount"
        assert db.query(Purchase).count() == 1

    def test_amount_for_unknown_instrument(self, db, store):
        with pytest.raises(InstrumentNotFoundError):
            store.create_purchase(db, "NOPE", 1000, amount=Decimal("100"))

    def test_quantity_for_unknown_instrument_is_stored(self, db, store):
        """Purchases by quantity do not require the instrument to exist."""
        purchase = store.create_purchase(db, "later", 1000, quantity=Decimal("1"))

        assert purchase.symbol == "LATER"

    def test_list_rows_carry_unit_price_and_amount(self, db, seeded):
        seeded.create_purchase(db, "AAA", 2000, quantity=Decimal("1"))

        rows = seeded.list_purchases(db)

        assert [r.purchase.timestamp for r in rows] == [2000, 1000]
        assert rows[0].unit_price == Decimal("20")
        assert rows[1].amount == Decimal("50")

    def test_list_filters(self, db, seeded):
        seeded.create_purchase(db, "AAA", 2000, quantity=Decimal("1"))
        seeded.create_purchase(db, "BBB", 2000, quantity=Decimal("1"))

        rows = seeded.list_purchases(db, symbol="aaa", start=1500, order="asc")

        assert len(rows) == 1
        assert rows[0].purchase.symbol == "AAA"
        assert rows[0].purchase.timestamp == 2000

    def test_unpriced_row(self, db, seeded):
        seeded.create_purchase(db, "GONE", 1000, quantity=Decimal("1"))

        rows = seeded.list_purchases(db, symbol="GONE")

        assert rows[0].unit_price is None
        assert rows[0].amount is None

    def test_delete(self, db, seeded):
        purchase = seeded.create_purchase(db, "AAA", 2000, quantity=Decimal("1"))

        seeded.delete_purchase(db, purchase.id)

        assert len(seeded.list_purchases(db)) == 1
        with pytest.raises(PurchaseNotFoundError):
            seeded.delete_purchase(db, purchase.id)


# =============================================================================
# TEST: GOALS
# =============================================================================

class TestGoals:
    """Tests for goal management."""

    def test_create_defaults(self, db, store):
        goal = store.create_goal(db)

        assert goal.id.startswith("goal_")
        assert goal.name == DEFAULT_GOAL_NAME
        assert Decimal(goal.target) == Decimal("0")

    def test_update(self, db, store):
        goal = store.create_goal(db, name="Car", target=Decimal("1000"), monthly=Decimal("50"))

        updated = store.update_goal(db, goal.id, target=Decimal("2000"))

        assert updated.name == "Car"
        assert Decimal(updated.target) == Decimal("2000")
        assert Decimal(updated.monthly) == Decimal("50")

    def test_blank_name_keeps_previous(self, db, store):
        goal = store.create_goal(db, name="Car")

        assert store.update_goal(db, goal.id, name="  ").name == "Car"

    def test_delete(self, db, store):
        goal = store.create_goal(db, name="Car")

        store.delete_goal(db, goal.id)

        assert store.list_goals(db) == []
        with pytest.raises(GoalNotFoundError):
            store.get_goal(db, goal.id)


# =============================================================================
# TEST: SNAPSHOT
# =============================================================================

class TestSnapshot:
    """Tests for snapshot loading and emptiness."""

    def test_load_snapshot(self, db, seeded):
        seeded.create_goal(db, name="Car", target=Decimal("100"), monthly=Decimal("10"))

        snapshot = seeded.load_snapshot(db)

        assert [i.symbol for i in snapshot.instruments] == ["AAA"]
        assert snapshot.instrument("AAA").timestamps == [1000, 2000]
        assert snapshot.purchases[0].quantity == Decimal("5")
        assert snapshot.goals[0].name == "Car"

    def test_is_empty(self, db, store):
        assert store.is_empty(db) is True

        store.create_goal(db)

        assert store.is_empty(db) is False

    def test_clear(self, db, seeded):
        seeded.clear(db)
        db.commit()

        assert seeded.is_empty(db) is True
        assert db.query(Price).count() == 0
