# backend/app/schemas/purchases.py
"""
Pydantic schemas for purchases.

A purchase can be entered two ways:
- by quantity: units bought
- by amount: money spent, converted to units at the price in effect at
  the purchase time

If both are given, a positive quantity wins.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.models import QUANTITY_DIGITS, QUANTITY_PLACES
from app.schemas.validators import validate_symbol


class PurchaseCreate(BaseModel):
    """Schema for recording a purchase."""

    symbol: str = Field(
        ...,
        min_length=1,
        max_length=32,
        examples=["VWCE"],
        description="Instrument symbol"
    )
    timestamp: int = Field(..., description="Purchase time (epoch ms)")
    quantity: Decimal | None = Field(
        default=None,
        gt=0,
        max_digits=QUANTITY_DIGITS,
        decimal_places=QUANTITY_PLACES,
        description="Units bought"
    )
    amount: Decimal | None = Field(
        default=None,
        gt=0,
        description="Money spent (converted to units at the purchase-time price)"
    )

    @field_validator('symbol')
    @classmethod
    def validate_and_normalize_symbol(cls, v: str) -> str:
        return validate_symbol(v)

    @model_validator(mode='after')
    def require_quantity_or_amount(self) -> "PurchaseCreate":
        if self.quantity is None and self.amount is None:
            raise ValueError("Either quantity or amount is required")
        return self


class PurchaseResponse(BaseModel):
    """A purchase with its unit price and amount at purchase time."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    symbol: str
    timestamp: int = Field(..., description="Purchase time (epoch ms)")
    quantity: Decimal
    unit_price: Decimal | None = Field(
        default=None,
        description="Price at purchase time (None if the instrument has no prices)"
    )
    amount: Decimal | None = Field(
        default=None,
        description="quantity × unit_price (None if no price)"
    )


class PurchaseListResponse(BaseModel):
    """Filtered purchase listing."""

    items: list[PurchaseResponse]
    total_quantity: Decimal = Field(..., description="Sum of listed quantities")
    total_amount: Decimal = Field(..., description="Sum of listed amounts (priced rows only)")
