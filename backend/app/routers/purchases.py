# backend/app/routers/purchases.py
"""
Purchase endpoints.

- GET    /purchases       - List purchases (symbol / date filter, sort)
- POST   /purchases       - Record a purchase by quantity or by amount
- DELETE /purchases/{id}  - Delete a purchase
"""

from decimal import Decimal
from typing import Literal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import TimeBounds, get_portfolio_store, get_time_bounds
from app.schemas.purchases import PurchaseCreate, PurchaseListResponse, PurchaseResponse
from app.services.portfolio_store import PortfolioStore, PurchaseRow

router = APIRouter(
    prefix="/purchases",
    tags=["Purchases"],
)


def _map_row(row: PurchaseRow) -> PurchaseResponse:
    """Map a store PurchaseRow to the response schema."""
    return PurchaseResponse(
        id=row.purchase.id,
        symbol=row.purchase.symbol,
        timestamp=row.purchase.timestamp,
        quantity=row.purchase.quantity,
        unit_price=row.unit_price,
        amount=row.amount,
    )


@router.get(
    "/",
    response_model=PurchaseListResponse,
    summary="List purchases",
)
def list_purchases(
        symbol: str | None = Query(default=None, description="Only this symbol"),
        bounds: TimeBounds = Depends(get_time_bounds),
        order: Literal["asc", "desc"] = Query(default="desc", description="Sort by time"),
        db: Session = Depends(get_db),
        store: PortfolioStore = Depends(get_portfolio_store),
) -> PurchaseListResponse:
    """
    List purchases with the unit price in effect at each purchase and the
    resulting amount. Rows for instruments without prices have null
    `unit_price` and `amount`.
    """
    rows = store.list_purchases(
        db, symbol=symbol, start=bounds.start, end=bounds.end, order=order
    )
    return PurchaseListResponse(
        items=[_map_row(r) for r in rows],
        total_quantity=sum((Decimal(r.purchase.quantity) for r in rows), Decimal("0")),
        total_amount=sum((r.amount for r in rows if r.amount is not None), Decimal("0")),
    )


@router.post(
    "/",
    response_model=PurchaseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record purchase",
)
def create_purchase(
        payload: PurchaseCreate,
        db: Session = Depends(get_db),
        store: PortfolioStore = Depends(get_portfolio_store),
) -> PurchaseResponse:
    """
    Record a purchase.

    Give `quantity` (units) or `amount` (money). An amount is converted using
    the price in effect at `timestamp`.

    Raises **400** if an amount cannot be converted (no price), **404** if
    converting an amount for an unknown instrument.
    """
    purchase = store.create_purchase(
        db,
        payload.symbol,
        timestamp=payload.timestamp,
        quantity=payload.quantity,
        amount=payload.amount,
    )
    return _map_row(store.purchase_row(db, purchase))


@router.delete(
    "/{purchase_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete purchase",
)
def delete_purchase(
        purchase_id: int,
        db: Session = Depends(get_db),
        store: PortfolioStore = Depends(get_portfolio_store),
) -> None:
    store.delete_purchase(db, purchase_id)
