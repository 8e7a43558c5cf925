# backend/app/routers/instruments.py
"""
Instrument and price management endpoints.

- GET    /instruments                              - List instruments
- POST   /instruments                              - Create instrument
- GET    /instruments/{symbol}                     - Get instrument
- DELETE /instruments/{symbol}                     - Delete instrument + prices
- GET    /instruments/{symbol}/prices              - List prices (date filter, sort)
- POST   /instruments/{symbol}/prices              - Add or overwrite a price
- PATCH  /instruments/{symbol}/prices/{timestamp}  - Edit a price
- DELETE /instruments/{symbol}/prices/{timestamp}  - Delete a price

Deleting an instrument keeps its purchases; they stay stored but no longer
count toward totals until prices exist again.
"""

from typing import Literal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import TimeBounds, get_portfolio_store, get_time_bounds
from app.models import Instrument
from app.schemas.instruments import (
    InstrumentCreate,
    InstrumentResponse,
    PriceCreate,
    PriceResponse,
    PriceUpdate,
)
from app.services.portfolio_store import PortfolioStore

# =============================================================================
# ROUTER SETUP
# =============================================================================

router = APIRouter(
    prefix="/instruments",
    tags=["Instruments"],
)


# =============================================================================
# MAPPER FUNCTIONS
# =============================================================================

def _map_instrument(instrument: Instrument) -> InstrumentResponse:
    """Map ORM Instrument (prices ordered by timestamp) to response."""
    latest = instrument.prices[-1] if instrument.prices else None
    return InstrumentResponse(
        symbol=instrument.symbol,
        name=instrument.name,
        price_count=len(instrument.prices),
        latest_price=latest.price if latest else None,
        latest_price_timestamp=latest.timestamp if latest else None,
    )


# =============================================================================
# INSTRUMENT ENDPOINTS
# =============================================================================

@router.get(
    "/",
    response_model=list[InstrumentResponse],
    summary="List instruments",
)
def list_instruments(
        db: Session = Depends(get_db),
        store: PortfolioStore = Depends(get_portfolio_store),
) -> list[InstrumentResponse]:
    """List all instruments sorted by symbol."""
    return [_map_instrument(i) for i in store.list_instruments(db)]


@router.post(
    "/",
    response_model=InstrumentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create instrument",
)
def create_instrument(
        payload: InstrumentCreate,
        db: Session = Depends(get_db),
        store: PortfolioStore = Depends(get_portfolio_store),
) -> InstrumentResponse:
    """
    Create an instrument without prices.

    Raises **409** if the symbol already exists.
    """
    instrument = store.create_instrument(db, payload.symbol, payload.name)
    return _map_instrument(instrument)


@router.get(
    "/{symbol}",
    response_model=InstrumentResponse,
    summary="Get instrument",
)
def get_instrument(
        symbol: str,
        db: Session = Depends(get_db),
        store: PortfolioStore = Depends(get_portfolio_store),
) -> InstrumentResponse:
    return _map_instrument(store.get_instrument(db, symbol))


@router.delete(
    "/{symbol}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete instrument",
)
def delete_instrument(
        symbol: str,
        db: Session = Depends(get_db),
        store: PortfolioStore = Depends(get_portfolio_store),
) -> None:
    """Delete an instrument and its prices. Its purchases are kept."""
    store.delete_instrument(db, symbol)


# =============================================================================
# PRICE ENDPOINTS
# =============================================================================

@router.get(
    "/{symbol}/prices",
    response_model=list[PriceResponse],
    summary="List prices",
)
def list_prices(
        symbol: str,
        bounds: TimeBounds = Depends(get_time_bounds),
        order: Literal["asc", "desc"] = Query(default="asc", description="Sort by time"),
        db: Session = Depends(get_db),
        store: PortfolioStore = Depends(get_portfolio_store),
) -> list[PriceResponse]:
    """Prices of one instrument, optionally restricted to whole days."""
    prices = store.list_prices(db, symbol, start=bounds.start, end=bounds.end, order=order)
    return [PriceResponse.model_validate(p) for p in prices]


@router.post(
    "/{symbol}/prices",
    response_model=PriceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add price",
)
def add_price(
        symbol: str,
        payload: PriceCreate,
        db: Session = Depends(get_db),
        store: PortfolioStore = Depends(get_portfolio_store),
) -> PriceResponse:
    """Record a price. A price at the same timestamp is overwritten."""
    price = store.add_price(db, symbol, timestamp=payload.timestamp, price=payload.price)
    return PriceResponse.model_validate(price)


@router.patch(
    "/{symbol}/prices/{timestamp}",
    response_model=PriceResponse,
    summary="Edit price",
)
def update_price(
        symbol: str,
        timestamp: int,
        payload: PriceUpdate,
        db: Session = Depends(get_db),
        store: PortfolioStore = Depends(get_portfolio_store),
) -> PriceResponse:
    """Move a price to another time and/or change its value."""
    price = store.update_price(
        db,
        symbol,
        timestamp,
        new_timestamp=payload.timestamp,
        new_price=payload.price,
    )
    return PriceResponse.model_validate(price)


@router.delete(
    "/{symbol}/prices/{timestamp}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete price",
)
def delete_price(
        symbol: str,
        timestamp: int,
        db: Session = Depends(get_db),
        store: PortfolioStore = Depends(get_portfolio_store),
) -> None:
    store.delete_price(db, symbol, timestamp)
