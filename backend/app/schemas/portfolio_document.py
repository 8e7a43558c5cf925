# backend/app/schemas/portfolio_document.py
"""
Pydantic schemas for the portfolio export/import document.

Document format "simple-investor-portfolio.v1":

    {
        "$schema": "simple-investor-portfolio.v1",
        "exportedAt": "2024-03-01T12:00:00+00:00",
        "etfs": [{"symbol": "VWCE", "name": "...", "prices": [{"ts": 1704067200000, "price": 100.5}]}],
        "purchases": [{"symbol": "VWCE", "ts": 1704067200000, "qty": 2}],
        "goals": [{"id": "goal_1", "name": "Car", "target": 20000, "monthly": 500}]
    }

Rules:
- `etfs` and `purchases` are required lists, `goals` is optional
- Numbers are written as JSON numbers and read into Decimal
  rounded to the storage scale (a positive value rounding to 0 is rejected)
- Symbols are only trimmed and upper-cased
- Unknown keys (such as an old `ui` block) are ignored
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator, model_validator

from app.models import (
    MONEY_DIGITS,
    MONEY_PLACES,
    PRICE_DIGITS,
    PRICE_PLACES,
    QUANTITY_DIGITS,
    QUANTITY_PLACES,
)
from app.schemas.validators import fit_decimal, validate_symbol

DOCUMENT_SCHEMA = "simple-investor-portfolio.v1"

# Decimal in Python, number in JSON
JsonNumber = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]


class DocumentPrice(BaseModel):
    model_config = ConfigDict(extra="ignore")

    ts: int = Field(..., description="Observation time (epoch ms)")
    price: JsonNumber = Field(..., ge=0)

    @field_validator('price')
    @classmethod
    def fit_price(cls, v: Decimal) -> Decimal:
        return fit_decimal(v, PRICE_DIGITS, PRICE_PLACES)


class DocumentInstrument(BaseModel):
    model_config = ConfigDict(extra="ignore")

    symbol: str
    name: str = ""
    prices: list[DocumentPrice] = Field(default_factory=list)

    @field_validator('symbol')
    @classmethod
    def validate_and_normalize_symbol(cls, v: str) -> str:
        return validate_symbol(v)


class DocumentPurchase(BaseModel):
    model_config = ConfigDict(extra="ignore")

    symbol: str
    ts: int = Field(..., description="Purchase time (epoch ms)")
    qty: JsonNumber = Field(..., gt=0)

    @field_validator('symbol')
    @classmethod
    def validate_and_normalize_symbol(cls, v: str) -> str:
        return validate_symbol(v)

    @field_validator('qty')
    @classmethod
    def fit_qty(cls, v: Decimal) -> Decimal:
        return fit_decimal(v, QUANTITY_DIGITS, QUANTITY_PLACES)


class DocumentGoal(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | None = Field(default=None, description="Generated when missing")
    name: str = ""
    target: JsonNumber = Decimal("0")
    monthly: JsonNumber = Decimal("0")

    @field_validator('target', 'monthly')
    @classmethod
    def fit_money(cls, v: Decimal) -> Decimal:
        return fit_decimal(v, MONEY_DIGITS, MONEY_PLACES)


class PortfolioDocument(BaseModel):
    """The whole portfolio as one JSON document."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    schema_: str = Field(default=DOCUMENT_SCHEMA, alias="$schema")
    exported_at: datetime | None = Field(default=None, alias="exportedAt")
    etfs: list[DocumentInstrument]
    purchases: list[DocumentPurchase]
    goals: list[DocumentGoal] = Field(default_factory=list)

    @field_validator('goals', mode='before')
    @classmethod
    def goals_default_when_not_list(cls, v):
        """A missing or non-list `goals` entry means "no goals"."""
        return v if isinstance(v, list) else []

    @model_validator(mode='after')
    def unique_symbols(self) -> "PortfolioDocument":
        seen: set[str] = set()
        for instrument in self.etfs:
            if instrument.symbol in seen:
                raise ValueError(f"Duplicate instrument symbol '{instrument.symbol}'")
            seen.add(instrument.symbol)
        return self
