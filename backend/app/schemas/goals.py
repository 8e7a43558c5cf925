# backend/app/schemas/goals.py
"""Pydantic schemas for savings goals and their projections."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from app.models import MONEY_DIGITS, MONEY_PLACES


class GoalCreate(BaseModel):
    """
    Schema for creating a goal. Everything is optional.

    Amounts are stored in cents; more decimal places are rejected rather
    than rounded (0.004 a month would otherwise become 0).
    """

    name: str | None = Field(default=None, max_length=255, description="Goal name")
    target: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        max_digits=MONEY_DIGITS,
        decimal_places=MONEY_PLACES,
        description="Target amount",
    )
    monthly: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        max_digits=MONEY_DIGITS,
        decimal_places=MONEY_PLACES,
        description="Monthly contribution",
    )


class GoalUpdate(BaseModel):
    """
    Schema for updating a goal.

    Omitted fields are unchanged. A blank name keeps the current name.
    """

    name: str | None = Field(default=None, max_length=255)
    target: Decimal | None = Field(
        default=None, ge=0, max_digits=MONEY_DIGITS, decimal_places=MONEY_PLACES
    )
    monthly: Decimal | None = Field(
        default=None, ge=0, max_digits=MONEY_DIGITS, decimal_places=MONEY_PLACES
    )


class ProjectionResponse(BaseModel):
    """Time to reach the target with flat monthly contributions."""

    reachable: bool = Field(..., description="False when the monthly contribution is 0")
    months: int | None = Field(
        default=None,
        description="Months needed (None if unreachable)"
    )
    years: int | None = Field(default=None, description="Whole years of `months`")
    remainder_months: int | None = Field(default=None, description="Months left after `years`")


class GoalResponse(BaseModel):
    """A goal with its projection."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    target: Decimal
    monthly: Decimal
    projection: ProjectionResponse
