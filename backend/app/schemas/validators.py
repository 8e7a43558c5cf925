# backend/app/schemas/validators.py
"""
Reusable validation functions for Pydantic schemas and query parameters.

This module provides:
- Instrument symbol normalization
- Fitting decimals to a storage column
- Date range validation

These validators ensure consistent input handling across all schemas.
"""

from datetime import date
from decimal import Decimal

# =============================================================================
# CONSTANTS
# =============================================================================

# Symbols are free-form (tickers, index names, non-Latin scripts), only the
# column width bounds them
SYMBOL_MAX_LENGTH = 32


# =============================================================================
# SYMBOL VALIDATION
# =============================================================================

def validate_symbol(value: str) -> str:
    """
    Normalize an instrument symbol: trim and upper-case.

    Any characters are allowed ("VWCE", "IWDA.AS", "S&P 500").

    Args:
        value: Raw symbol input

    Returns:
        Normalized symbol (uppercase, trimmed)

    Raises:
        ValueError: If the symbol is blank or too long
    """
    normalized = value.strip().upper() if value else ""
    if not normalized:
        raise ValueError("Symbol cannot be empty")

    if len(normalized) > SYMBOL_MAX_LENGTH:
        raise ValueError(f"Symbol cannot exceed {SYMBOL_MAX_LENGTH} characters")

    return normalized


# =============================================================================
# DECIMAL VALIDATION
# =============================================================================

def fit_decimal(value: Decimal, max_digits: int, decimal_places: int) -> Decimal:
    """
    Round a decimal to a column's scale.

    Imported documents carry float noise (0.30000000000000004), so extra
    places are rounded away. A positive value that would round to zero, or
    a value with too many integer digits, is rejected.

    Raises:
        ValueError: If the value cannot be stored without losing its meaning
    """
    if abs(value) >= Decimal(10) ** (max_digits - decimal_places):
        raise ValueError(f"{value} exceeds {max_digits - decimal_places} integer digits")

    fitted = value.quantize(Decimal(1).scaleb(-decimal_places))
    if value > 0 and fitted == 0:
        raise ValueError(f"{value} is below the smallest storable step of 1e-{decimal_places}")
    return fitted


# =============================================================================
# DATE VALIDATION
# =============================================================================

def validate_date_range(
    from_date: date | None,
    to_date: date | None,
) -> tuple[date | None, date | None]:
    """
    Validate an optional inclusive date range (both ends may be open).

    Raises:
        ValueError: If both ends are set and from_date is after to_date
    """
    if from_date is not None and to_date is not None and from_date > to_date:
        raise ValueError("from_date must be before or equal to to_date")
    return from_date, to_date
