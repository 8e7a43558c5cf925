# backend/app/utils/__init__.py
"""
Cross-cutting utilities.

- logging: Logging configuration with correlation ID support
- context: Request context (correlation ID)
- date_utils: Epoch-ms timestamps and inclusive day ranges

Usage:
    from app.utils import setup_logging, get_logger
    from app.utils import day_range_to_bounds, now_ms
"""

from app.utils.context import (
    get_correlation_id,
    set_correlation_id,
    clear_correlation_id,
)
from app.utils.date_utils import (
    day_range_to_bounds,
    datetime_to_ms,
    ms_to_datetime,
    now_ms,
)
from app.utils.logging import setup_logging, get_logger

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    # Context
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
    # Dates
    "day_range_to_bounds",
    "datetime_to_ms",
    "ms_to_datetime",
    "now_ms",
]
