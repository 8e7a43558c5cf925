# backend/app/schemas/errors.py
"""
Error bodies returned by the global handlers in main.py.

Every failure, whether raised by the portfolio services, by routing or by
request validation, reaches the client in one of these two shapes.
"""

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """
    Body of 400/404/409/500 responses.

    `error` is the exception class name (InstrumentNotFoundError,
    DuplicateInstrumentError, PriceUnavailableError, InvalidDocumentError...)
    so clients can branch on it without parsing `message`.
    """

    error: str = Field(
        ...,
        examples=["PriceUnavailableError"],
        description="Exception class name",
    )
    message: str = Field(
        ...,
        examples=["No price available for 'VWCE' at 1704067200000 to convert the amount into a quantity"],
    )
    details: dict | None = Field(
        default=None,
        examples=[{"symbol": "VWCE", "timestamp": 1704067200000}],
        description="Offending symbol, resource id or document field",
    )


class ValidationErrorDetail(BaseModel):
    """Body of 422 responses: one entry per rejected request field."""

    error: str = Field(default="ValidationError")
    message: str = Field(default="Request validation failed")
    details: list[dict] = Field(
        ...,
        examples=[[{"field": "body.monthly", "message": "Decimal input should have no more than 2 decimal places", "type": "decimal_max_places"}]],
    )
