# tests/test_correlation_id.py
"""
Tests for correlation ID middleware and context management.
"""

import json
import logging

from app.utils.context import get_correlation_id, set_correlation_id, clear_correlation_id
from app.utils.logging import CorrelationIdFilter, JsonFormatter, NO_CORRELATION_ID


class TestCorrelationIdContext:
    """Tests for correlation ID context functions."""

    def test_get_returns_none_when_not_set(self):
        """Should return None when correlation ID is not set."""
        clear_correlation_id()
        assert get_correlation_id() is None

    def test_set_and_get_correlation_id(self):
        """Should set and retrieve correlation ID."""
        set_correlation_id("test-correlation-123")
        assert get_correlation_id() == "test-correlation-123"
        clear_correlation_id()

    def test_clear_correlation_id(self):
        """Should clear correlation ID."""
        set_correlation_id("test-correlation-456")
        clear_correlation_id()
        assert get_correlation_id() is None


class TestCorrelationIdMiddleware:
    """Tests for correlation ID middleware."""

    def test_generates_correlation_id_when_not_provided(self, client):
        """Should generate correlation ID when not provided in request."""
        response = client.get("/health")

        assert response.status_code == 200
        correlation_id = response.headers["X-Correlation-ID"]
        assert len(correlation_id) == 36  # UUID length
        assert correlation_id.count("-") == 4

    def test_uses_provided_correlation_id(self, client):
        """Should use correlation ID from request header."""
        response = client.get("/health", headers={"X-Correlation-ID": "my-custom-trace-id-123"})

        assert response.headers["X-Correlation-ID"] == "my-custom-trace-id-123"

    def test_uses_request_id_header_as_fallback(self, client):
        """Should use X-Request-ID header if X-Correlation-ID not provided."""
        response = client.get("/health", headers={"X-Request-ID": "my-request-id-456"})

        assert response.headers["X-Correlation-ID"] == "my-request-id-456"

    def test_prefers_correlation_id_over_request_id(self, client):
        """Should prefer X-Correlation-ID over X-Request-ID."""
        response = client.get(
            "/health",
            headers={"X-Correlation-ID": "correlation-123", "X-Request-ID": "request-456"},
        )

        assert response.headers["X-Correlation-ID"] == "correlation-123"

    def test_different_requests_get_different_ids(self, client):
        """Different requests should get different correlation IDs."""
        id1 = client.get("/health").headers["X-Correlation-ID"]
        id2 = client.get("/health").headers["X-Correlation-ID"]

        assert id1 != id2


class TestLogFormatting:
    """Tests for the correlation filter and JSON formatter."""

    def _record(self, **extra) -> logging.LogRecord:
        record = logging.LogRecord(
            name="app.test", level=logging.WARNING, pathname=__file__, lineno=1,
            msg="Totals exclude %d purchases", args=(2,), exc_info=None,
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_filter_adds_placeholder_outside_request(self):
        clear_correlation_id()
        record = self._record()

        CorrelationIdFilter().filter(record)

        assert record.correlation_id == NO_CORRELATION_ID

    def test_json_output(self):
        set_correlation_id("trace-1")
        record = self._record(config={"level": "INFO"})
        CorrelationIdFilter().filter(record)
        clear_correlation_id()

        entry = json.loads(JsonFormatter().format(record))

        assert entry["level"] == "WARNING"
        assert entry["logger"] == "app.test"
        assert entry["correlation_id"] == "trace-1"
        assert entry["message"] == "Totals exclude 2 purchases"
        assert entry["extra"] == {"config": {"level": "INFO"}}
