"""
Unit tests for server exception handlers.

Tests cover domain errors, request validation, HTTP errors and unhandled
exceptions, both through the handlers directly and through a small app.
"""

import json
from unittest.mock import Mock, patch

import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel

from empowered_camps.core.errors import BadRequestError, NotFoundError, PaymentProviderError
from empowered_camps.server.exception_handlers import setup_exception_handlers
from empowered_camps.server.exception_handlers.global_handler import (
    domain_exception_handler,
    global_exception_handler,
)


@pytest.fixture
def mock_request():
    """Create a mock request object."""
    request = Mock(spec=Request)
    request.method = "GET"
    request.url.path = "/api/v1/test"
    request.query_params = {}
    request.client = Mock()
    request.client.host = "127.0.0.1"
    return request


class TestDomainExceptionHandler:
    """Test suite for the domain error handler."""

    @pytest.mark.asyncio
    async def test_maps_status_and_body(self, mock_request):
        """A domain error becomes its status code and ``to_dict`` body."""
        response = await domain_exception_handler(mock_request, NotFoundError("Camp not found"))

        assert response.status_code == 404
        assert json.loads(response.body) == {"error": "Camp not found", "code": "NOT_FOUND"}

    @pytest.mark.asyncio
    async def test_details_are_included(self, mock_request):
        """Details given to the error are returned to the client."""
        exc = BadRequestError("Camp is full", details={"camp_id": "c1"})

        response = await domain_exception_handler(mock_request, exc)

        assert json.loads(response.body)["details"] == {"camp_id": "c1"}

    @pytest.mark.asyncio
    async def test_server_errors_are_reported(self, mock_request):
        """5xx domain errors are logged as errors and sent to monitoring."""
        module = "empowered_camps.server.exception_handlers.global_handler"
        with patch(f"{module}.logger") as mock_logger, patch(f"{module}.log_error") as mock_log_error:
            response = await domain_exception_handler(mock_request, PaymentProviderError("Stripe down"))

        assert response.status_code == 500
        mock_logger.error.assert_called_once()
        mock_log_error.assert_called_once()
        assert mock_log_error.call_args[0][0] == "PaymentProviderError"

    @pytest.mark.asyncio
    async def test_client_errors_are_not_reported(self, mock_request):
        """4xx domain errors stay out of error monitoring."""
        with patch("empowered_camps.server.exception_handlers.global_handler.log_error") as mock_log_error:
            await domain_exception_handler(mock_request, BadRequestError("nope"))

        mock_log_error.assert_not_called()


class TestGlobalExceptionHandler:
    """Test suite for global exception handler."""

    @pytest.mark.asyncio
    async def test_exception_handler_logs_error(self, mock_request):
        """Test that exception handler logs errors."""
        exc = ValueError("Test error")

        with patch("empowered_camps.server.exception_handlers.global_handler.logger") as mock_logger:
            await global_exception_handler(mock_request, exc)

            mock_logger.error.assert_called_once()
            call_args = mock_logger.error.call_args
            assert "Unhandled exception" in call_args[0][0]
            assert call_args[1]["extra"]["error_type"] == "ValueError"

    @pytest.mark.asyncio
    async def test_response_hides_exception_message(self, mock_request):
        """The body names the error type and id but never the message."""
        exc = RuntimeError("database password is hunter2")

        with patch("empowered_camps.server.exception_handlers.global_handler.logger"):
            response = await global_exception_handler(mock_request, exc)

        assert isinstance(response, JSONResponse)
        assert response.status_code == 500
        body = json.loads(response.body)
        assert body["error"] == "Internal server error"
        assert body["error_id"] == id(exc)
        assert body["error_type"] == "RuntimeError"
        assert "hunter2" not in response.body.decode()

    @pytest.mark.asyncio
    async def test_handles_request_without_client(self, mock_request):
        """A request without client information is logged as ``unknown``."""
        mock_request.client = None

        with patch("empowered_camps.server.exception_handlers.global_handler.logger") as mock_logger:
            await global_exception_handler(mock_request, RuntimeError("x"))

        assert mock_logger.error.call_args[1]["extra"]["client"] == "unknown"


class Payload(BaseModel):
    name: str


class TestSetupExceptionHandlers:
    """Test the handlers registered on an application."""

    @pytest.fixture
    def app(self):
        app = FastAPI()
        setup_exception_handlers(app)

        @app.get("/boom")
        async def boom():
            raise RuntimeError("boom")

        @app.get("/missing")
        async def missing():
            raise NotFoundError("Thing not found")

        @app.post("/validate")
        async def validate(payload: Payload):
            return payload

        return app

    @pytest.mark.asyncio
    async def test_validation_errors_become_400(self, app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.post("/validate", json={})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Invalid request"
        assert body["details"][0]["field"] == "body.name"

    @pytest.mark.asyncio
    async def test_domain_error_route(self, app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/missing")

        assert response.status_code == 404
        assert response.json()["error"] == "Thing not found"

    @pytest.mark.asyncio
    async def test_unknown_route(self, app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/nowhere")

        assert response.json() == {"error": "Not Found"}

    @pytest.mark.asyncio
    async def test_unhandled_exception_becomes_500(self, app):
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        with patch("empowered_camps.server.exception_handlers.global_handler.logger"):
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                response = await client.get("/boom")

        assert response.status_code == 500
        assert response.json()["error_type"] == "RuntimeError"
