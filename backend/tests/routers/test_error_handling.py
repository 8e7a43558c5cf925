# tests/routers/test_error_handling.py
"""
Integration tests for error handling across all API endpoints.

These tests verify:
- Consistent error response format (ErrorDetail schema)
- Correct HTTP status codes for different error types
- Correlation ID headers in responses
- Validation error details
"""

import pytest
from fastapi.testclient import TestClient


# =============================================================================
# TEST: CORRELATION ID HEADERS
# =============================================================================

class TestCorrelationIdHeaders:
    """Error responses carry the correlation ID like any other response."""

    def test_error_responses_include_correlation_id(self, client: TestClient):
        response = client.get(
            "/instruments/NOPE",
            headers={"X-Correlation-ID": "trace-404"},
        )

        assert response.status_code == 404
        assert response.headers["X-Correlation-ID"] == "trace-404"


# =============================================================================
# TEST: ERROR RESPONSE FORMAT
# =============================================================================

class TestErrorResponseStructure:
    """Tests for consistent error response structure."""

    @pytest.mark.parametrize(
        "method,url,body,status",
        [
            ("get", "/instruments/NOPE", None, 404),
            ("delete", "/goals/goal_missing", None, 404),
            ("delete", "/purchases/12345", None, 404),
            ("post", "/portfolio/import", {"etfs": "x", "purchases": []}, 400),
            ("post", "/instruments/", {"symbol": "???", "name": "x"}, 422),
        ],
    )
    def test_all_errors_have_required_fields(self, client: TestClient, method, url, body, status):
        """Every error has `error` and `message`; `details` may be null."""
        response = getattr(client, method)(url, json=body) if body else getattr(client, method)(url)

        assert response.status_code == status
        data = response.json()
        assert isinstance(data["error"], str)
        assert isinstance(data["message"], str)
        assert "details" in data

    def test_validation_error_lists_fields(self, client: TestClient):
        response = client.post("/purchases/", json={"symbol": "AAA"})

        assert response.status_code == 422
        data = response.json()
        assert data["message"] == "Request validation failed"
        fields = {d["field"] for d in data["details"]}
        assert "body.timestamp" in fields

    def test_invalid_json_body_is_422(self, client: TestClient):
        response = client.post(
            "/portfolio/import",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 422

    def test_unknown_route(self, client: TestClient):
        response = client.get("/does-not-exist")

        assert response.status_code == 404
        assert response.json()["error"] == "NotFoundError"


# =============================================================================
# TEST: HEALTH CHECK
# =============================================================================

class TestHealthCheck:
    def test_health_check_success(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["checks"]["database"]["status"] == "healthy"

    def test_liveness(self, client: TestClient):
        assert client.get("/health/live").json() == {"status": "alive"}

    def test_root_endpoint(self, client: TestClient):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["currency"] == "EUR"
        assert response.json()["docs"] == "/docs"
