# backend/app/utils/context.py
"""
Request-scoped correlation ID storage.

Uses contextvars so the value follows the request through async/await
calls and never leaks into a concurrent request.

Usage:
    from app.utils.context import get_correlation_id, set_correlation_id

    set_correlation_id("abc-123")   # middleware, at request start
    get_correlation_id()            # anywhere during the request
"""

from contextvars import ContextVar

_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> str | None:
    """Correlation ID of the current request, or None outside a request."""
    return _correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    _correlation_id_var.set(correlation_id)


def clear_correlation_id() -> None:
    """Reset the correlation ID (called by middleware when a request ends)."""
    _correlation_id_var.set(None)
