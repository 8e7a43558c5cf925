# backend/app/schemas/instruments.py
"""
Pydantic schemas for instruments and their prices.

Validation layers:
- Field constraints: type, length, non-negative prices
- Field validators: symbol normalization (uppercase, trim)
- Service: existence checks, uniqueness
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models import PRICE_DIGITS, PRICE_PLACES
from app.schemas.validators import validate_symbol


# =============================================================================
# INSTRUMENT SCHEMAS
# =============================================================================

class InstrumentCreate(BaseModel):
    """Schema for creating an instrument (no prices yet)."""

    symbol: str = Field(
        ...,
        min_length=1,
        max_length=32,
        examples=["VWCE", "IWDA.AS"],
        description="Trading symbol, stored upper-case"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        examples=["Vanguard FTSE All-World UCITS ETF"],
        description="Display name"
    )

    @field_validator('symbol')
    @classmethod
    def validate_and_normalize_symbol(cls, v: str) -> str:
        return validate_symbol(v)

    @field_validator('name')
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be blank")
        return v


class PriceResponse(BaseModel):
    """One price observation."""

    model_config = ConfigDict(from_attributes=True)

    timestamp: int = Field(..., description="Observation time (epoch ms)")
    price: Decimal = Field(..., description="Price per unit")


class InstrumentResponse(BaseModel):
    """Instrument with summary of its price data."""

    model_config = ConfigDict(from_attributes=True)

    symbol: str
    name: str
    price_count: int = Field(..., description="Number of recorded prices")
    latest_price: Decimal | None = Field(
        default=None,
        description="Most recent price (None if no prices)"
    )
    latest_price_timestamp: int | None = Field(
        default=None,
        description="Time of the most recent price (epoch ms)"
    )


# =============================================================================
# PRICE SCHEMAS
# =============================================================================

class PriceCreate(BaseModel):
    """
    Schema for recording a price.

    A price at an existing timestamp overwrites the previous one.
    """

    timestamp: int = Field(..., description="Observation time (epoch ms)")
    price: Decimal = Field(
        ...,
        ge=0,
        max_digits=PRICE_DIGITS,
        decimal_places=PRICE_PLACES,
        description="Price per unit (non-negative, at most 8 decimal places)"
    )


class PriceUpdate(BaseModel):
    """Schema for editing a price. Omitted fields are unchanged."""

    timestamp: int | None = Field(default=None, description="New observation time (epoch ms)")
    price: Decimal | None = Field(
        default=None,
        ge=0,
        max_digits=PRICE_DIGITS,
        decimal_places=PRICE_PLACES,
        description="New price"
    )

