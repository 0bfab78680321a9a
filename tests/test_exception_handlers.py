"""Tests for global exception handlers.

Validates that all exception types are handled consistently with
proper HTTP status codes, error format, and no information leakage.
"""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from studio_api.core.errors import (
    AppError,
    ConfigurationAppError,
    LLMAppError,
    RateLimitAppError,
    ValidationAppError,
)
from studio_api.core.exception_handlers import setup_exception_handlers


@pytest.fixture
def app_with_handlers() -> FastAPI:
    """Create FastAPI app with exception handlers registered."""
    app = FastAPI()
    setup_exception_handlers(app)
    return app


@pytest.fixture
def client(app_with_handlers: FastAPI) -> TestClient:
    """Create test client with handlers enabled."""
    return TestClient(app_with_handlers)


class TestAppErrorHandler:
    """Test handler for AppError and subclasses."""

    def test_validation_error_returns_400(self, client: TestClient, app_with_handlers: FastAPI):
        """Verify ValidationAppError returns HTTP 400."""
        @app_with_handlers.get("/test-validation")
        async def test_endpoint():
            raise ValidationAppError(code="invalid_email", message="Valid email is required")

        response = client.get("/test-validation")

        assert response.status_code == 400
        data = response.json()
        assert data["error"]["code"] == "invalid_email"
        assert data["error"]["message"] == "Valid email is required"
        assert "request_id" in data["error"]
        assert "details" not in data["error"]
        assert "rate_limit_exceeded" not in data["error"]

    def test_validation_error_includes_details(self, client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/test-validation-details")
        async def test_endpoint():
            raise ValidationAppError(
                code="image_too_large",
                message="Pet image too large. Maximum size: 20MB",
                details={"max_value": 1000000, "actual_value": 5000000},
            )

        response = client.get("/test-validation-details")

        assert response.status_code == 400
        data = response.json()
        assert data["error"]["details"] == {"max_value": 1000000, "actual_value": 5000000}

    def test_rate_limit_error_returns_429_with_retry_after(
        self, client: TestClient, app_with_handlers: FastAPI
    ):
        """Verify RateLimitAppError returns 429, the flag and a Retry-After header."""
        @app_with_handlers.get("/test-rate-limit")
        async def test_endpoint():
            raise RateLimitAppError(
                code="rate_limit_exceeded",
                message="Rate limit exceeded. You can generate 0 more portraits. Try again in 90 minutes.",
                details={"scope": "email", "remaining": 0, "reset_in_minutes": 90},
            )

        response = client.get("/test-rate-limit")

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "5400"
        error = response.json()["error"]
        assert error["rate_limit_exceeded"] is True
        assert error["details"] == {"scope": "email", "remaining": 0, "reset_in_minutes": 90}

    def test_rate_limit_at_window_boundary_still_asks_for_a_minute(
        self, client: TestClient, app_with_handlers: FastAPI
    ):
        @app_with_handlers.get("/test-rate-limit-boundary")
        async def test_endpoint():
            raise RateLimitAppError(
                code="rate_limit_exceeded",
                message="Too many requests from your location. Try again in 0 minutes.",
                details={"scope": "ip", "remaining": 0, "reset_in_minutes": 0},
            )

        response = client.get("/test-rate-limit-boundary")

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "60"
        assert response.json()["error"]["details"]["reset_in_minutes"] == 0

    @pytest.mark.parametrize("error_cls", [LLMAppError, ConfigurationAppError])
    def test_server_side_errors_return_500(
        self, client: TestClient, app_with_handlers: FastAPI, error_cls: type[AppError]
    ):
        @app_with_handlers.get("/test-server-error")
        async def test_endpoint():
            raise error_cls(code="upstream_failed", message="Failed to generate portrait: boom")

        response = client.get("/test-server-error")

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "upstream_failed"

    def test_error_response_format_is_consistent(self, client: TestClient, app_with_handlers: FastAPI):
        """Verify error responses have consistent JSON structure."""
        @app_with_handlers.get("/test-format")
        async def test_endpoint():
            raise ValidationAppError(code="test", message="test")

        data = client.get("/test-format").json()

        assert set(data) == {"error"}
        assert {"code", "message", "request_id"} <= set(data["error"])


class TestGeneralExceptionHandler:
    """Test fallback handler for unexpected exceptions."""

    def test_unexpected_exception_handler_registered(self, app_with_handlers: FastAPI):
        assert Exception in app_with_handlers.exception_handlers

    def test_general_exception_handler_hides_error_text(self):
        """Verify general_exception_handler returns a generic body."""
        from studio_api.core.exception_handlers import general_exception_handler

        request = AsyncMock()
        request.url.path = "/api/generate-portrait"
        request.method = "POST"

        exc = RuntimeError("OPENAI key sk-secret rejected")
        response = asyncio.run(general_exception_handler(request, exc))

        data = json.loads(bytes(response.body).decode())
        assert response.status_code == 500
        assert data["error"]["code"] == "internal_server_error"
        assert "sk-secret" not in data["error"]["message"]
        assert "request_id" in data["error"]

    def test_unexpected_exception_in_route_returns_500(self, app_with_handlers: FastAPI):
        @app_with_handlers.get("/test-crash")
        async def test_endpoint():
            raise ValueError("Test error with details")

        client = TestClient(app_with_handlers, raise_server_exceptions=False)
        response = client.get("/test-crash")

        assert response.status_code == 500
        assert "Traceback" not in response.text
        assert "ValueError" not in response.text
        assert "Test error with details" not in response.text


def test_setup_exception_handlers_is_idempotent():
    app = FastAPI()

    setup_exception_handlers(app)
    setup_exception_handlers(app)

    assert AppError in app.exception_handlers
    assert Exception in app.exception_handlers
