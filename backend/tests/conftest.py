# backend/tests/conftest.py
"""
Pytest configuration and fixtures.

This module provides shared fixtures for all tests:
- Database session fixtures (in-memory SQLite)
- Service fixtures (valuation, store, transfer)
- API client with the database dependency overridden
- Snapshot factories for pure engine tests
"""

import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("BOOTSTRAP_DEFAULTS", "false")

from datetime import timezone
from decimal import Decimal
from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import get_db
from app.main import app
from app.models import Base
from app.services.portfolio_store import PortfolioStore
from app.services.transfer import PortfolioTransferService
from app.services.valuation import ValuationService
from app.services.valuation.types import (
    InstrumentSeries,
    PortfolioSnapshot,
    PriceObservation,
    PurchaseEvent,
)


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture(scope="function")
def db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)


@pytest.fixture(scope="function")
def db(db_engine) -> Iterator[Session]:
    """Create a database session for testing."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


# =============================================================================
# SERVICE FIXTURES
# =============================================================================

@pytest.fixture
def valuation_service() -> ValuationService:
    return ValuationService(tz=timezone.utc)


@pytest.fixture
def store(valuation_service: ValuationService) -> PortfolioStore:
    return PortfolioStore(valuation_service)


@pytest.fixture
def transfer_service(store: PortfolioStore) -> PortfolioTransferService:
    return PortfolioTransferService(store)


# =============================================================================
# API CLIENT
# =============================================================================

@pytest.fixture(scope="function")
def client(db: Session) -> Iterator[TestClient]:
    """Create TestClient with database dependency override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


# =============================================================================
# SNAPSHOT FACTORIES
# =============================================================================

def make_instrument(symbol: str, prices: list[tuple[int, str]], name: str | None = None) -> InstrumentSeries:
    """Build an instrument from (timestamp, price) pairs."""
    return InstrumentSeries.build(
        symbol=symbol,
        name=name or f"{symbol} fund",
        observations=[PriceObservation(timestamp=ts, price=Decimal(p)) for ts, p in prices],
    )


def make_purchase(symbol: str, timestamp: int, quantity: str) -> PurchaseEvent:
    return PurchaseEvent(symbol=symbol, timestamp=timestamp, quantity=Decimal(quantity))


def make_snapshot(
        instruments: list[InstrumentSeries] = (),
        purchases: list[PurchaseEvent] = (),
) -> PortfolioSnapshot:
    return PortfolioSnapshot(instruments=tuple(instruments), purchases=tuple(purchases))


@pytest.fixture
def aaa_snapshot() -> PortfolioSnapshot:
    """
    One instrument priced 10 then 20, one purchase of 5 units at t=1000.

    Invested 50, current 100, P&L +50 (+100%).
    """
    return make_snapshot(
        instruments=[make_instrument("AAA", [(1000, "10"), (2000, "20")])],
        purchases=[make_purchase("AAA", 1000, "5")],
    )
