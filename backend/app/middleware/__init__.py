# backend/app/middleware/__init__.py
"""
Middleware components.

- CorrelationIdMiddleware: request tracing through logs and headers
"""

from app.middleware.correlation import CorrelationIdMiddleware, CORRELATION_ID_HEADER

__all__ = [
    "CorrelationIdMiddleware",
    "CORRELATION_ID_HEADER",
]
