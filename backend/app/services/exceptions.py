# backend/app/services/exceptions.py
"""
Service layer exceptions.

These exceptions represent domain-specific errors and contain NO HTTP knowledge.
The global handlers in main.py map them to appropriate HTTP responses.

The valuation engine itself raises none of these: missing prices are
excluded from sums and reported as warnings. Exceptions belong to the
storage and data-entry layer around it.

Exception Hierarchy:
    ServiceError (base)
    ├── ValidationError
    │   ├── InvalidDocumentError
    │   └── PriceUnavailableError
    ├── NotFoundError
    │   ├── InstrumentNotFoundError
    │   ├── PriceNotFoundError
    │   ├── PurchaseNotFoundError
    │   └── GoalNotFoundError
    └── ConflictError
        └── DuplicateInstrumentError
"""


class ServiceError(Exception):
    """
    Base exception for all service layer errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(ServiceError):
    """
    Raised when input validation fails.

    This is for programmatic validation errors (invalid documents,
    impossible conversions, etc.), NOT for request body validation which
    is handled by Pydantic.

    Attributes:
        field: The field that failed validation (optional)
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class InvalidDocumentError(ValidationError):
    """
    Raised when an imported portfolio document is malformed.

    The import is all-or-nothing: when this is raised, the stored
    portfolio has not been modified.

    Attributes:
        reason: What is wrong with the document
    """

    def __init__(self, reason: str, field: str | None = None) -> None:
        self.reason = reason
        super().__init__(f"Invalid portfolio document: {reason}", field=field)


class PriceUnavailableError(ValidationError):
    """
    Raised when a purchase amount cannot be converted to a quantity.

    Converting money to units needs a positive price for the instrument at
    the purchase time. Instruments without price data (or with a zero
    price) cannot be bought by amount.
    """

    def __init__(self, symbol: str, timestamp: int) -> None:
        self.symbol = symbol
        self.timestamp = timestamp
        super().__init__(
            f"No price available for '{symbol}' at {timestamp} "
            f"to convert the amount into a quantity",
            field="amount",
        )


# =============================================================================
# NOT FOUND ERRORS
# =============================================================================


class NotFoundError(ServiceError):
    """
    Base exception for resource not found errors.

    Attributes:
        resource_type: Type of resource (e.g., "Instrument", "Goal")
        resource_id: Identifier of the resource
    """

    def __init__(
            self,
            message: str,
            resource_type: str | None = None,
            resource_id: int | str | None = None,
    ) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(message)


class InstrumentNotFoundError(NotFoundError):
    """Raised when an instrument symbol is not in the store."""

    def __init__(self, symbol: str) -> None:
        self.symbol = symbol
        super().__init__(
            f"Instrument '{symbol}' not found",
            resource_type="Instrument",
            resource_id=symbol,
        )


class PriceNotFoundError(NotFoundError):
    """Raised when an instrument has no price at the given timestamp."""

    def __init__(self, symbol: str, timestamp: int) -> None:
        self.symbol = symbol
        self.timestamp = timestamp
        super().__init__(
            f"No price for '{symbol}' at timestamp {timestamp}",
            resource_type="Price",
            resource_id=f"{symbol}@{timestamp}",
        )


class PurchaseNotFoundError(NotFoundError):
    """Raised when a purchase cannot be found."""

    def __init__(self, purchase_id: int) -> None:
        self.purchase_id = purchase_id
        super().__init__(
            f"Purchase {purchase_id} not found",
            resource_type="Purchase",
            resource_id=purchase_id,
        )


class GoalNotFoundError(NotFoundError):
    """Raised when a goal cannot be found."""

    def __init__(self, goal_id: str) -> None:
        self.goal_id = goal_id
        super().__init__(
            f"Goal '{goal_id}' not found",
            resource_type="Goal",
            resource_id=goal_id,
        )


# =============================================================================
# CONFLICT ERRORS
# =============================================================================


class ConflictError(ServiceError):
    """Base exception for writes that clash with existing data."""
    pass


class DuplicateInstrumentError(ConflictError):
    """
    Raised when creating an instrument whose symbol already exists.

    Symbols are compared after normalization (trimmed, upper-case).
    """

    def __init__(self, symbol: str) -> None:
        self.symbol = symbol
        super().__init__(f"Instrument '{symbol}' already exists")


__all__ = [
    # Base
    "ServiceError",
    # Validation
    "ValidationError",
    "InvalidDocumentError",
    "PriceUnavailableError",
    # Not Found
    "NotFoundError",
    "InstrumentNotFoundError",
    "PriceNotFoundError",
    "PurchaseNotFoundError",
    "GoalNotFoundError",
    # Conflict
    "ConflictError",
    "DuplicateInstrumentError",
]
