"""
Unit tests for Logfire middleware.

This test suite covers:
- Request/response processing
- Error handling and exception tracking
- Slow request detection
- Header injection
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient
from starlette.responses import Response

from empowered_camps.server.middleware.logfire_middleware import LogfireMiddleware

MODULE = "empowered_camps.server.middleware.logfire_middleware"


def _request(method="GET", path="/api/v1/camps"):
    request = AsyncMock(spec=Request)
    request.method = method
    request.url.path = path
    request.state = MagicMock()
    return request


class TestLogfireMiddlewareDispatch:
    """Test LogfireMiddleware.dispatch method."""

    @pytest.mark.asyncio
    async def test_middleware_processes_successful_request(self):
        """Test that middleware reports method, path and status."""

        async def call_next(request):
            return Response(content="ok", status_code=200)

        middleware = LogfireMiddleware(app=AsyncMock())

        with patch(f"{MODULE}.log_api_request") as mock_log:
            response = await middleware.dispatch(_request(), call_next)

        assert response.status_code == 200
        kwargs = mock_log.call_args[1]
        assert kwargs["method"] == "GET"
        assert kwargs["path"] == "/api/v1/camps"
        assert kwargs["status_code"] == 200
        assert kwargs["duration_ms"] >= 0

    @pytest.mark.asyncio
    async def test_middleware_adds_process_time_header(self):
        """Test that the response carries X-Process-Time in milliseconds."""

        async def call_next(request):
            return Response(content="created", status_code=201)

        middleware = LogfireMiddleware(app=AsyncMock())

        with patch(f"{MODULE}.log_api_request"):
            response = await middleware.dispatch(_request("POST"), call_next)

        assert float(response.headers["X-Process-Time"]) >= 0

    @pytest.mark.asyncio
    async def test_middleware_reports_failures_as_500(self):
        """Test that exceptions are logged, reported as 500 and re-raised."""

        async def call_next(request):
            raise RuntimeError("boom")

        middleware = LogfireMiddleware(app=AsyncMock())

        with patch(f"{MODULE}.log_api_request") as mock_log, patch(f"{MODULE}.logger") as mock_logger:
            with pytest.raises(RuntimeError):
                await middleware.dispatch(_request(), call_next)

        assert mock_log.call_args[1]["status_code"] == 500
        mock_logger.error.assert_called_once()

    @pytest.mark.asyncio
    async def test_middleware_warns_on_slow_requests(self):
        """Test that requests over the threshold are logged as slow."""

        async def call_next(request):
            return Response(status_code=200)

        middleware = LogfireMiddleware(app=AsyncMock())

        with patch(f"{MODULE}.log_api_request"), patch(f"{MODULE}.SLOW_REQUEST_MS", -1):
            with patch(f"{MODULE}.logger") as mock_logger:
                await middleware.dispatch(_request(), call_next)

        mock_logger.warning.assert_called_once()
        assert "Slow API request" in mock_logger.warning.call_args[0][0]

    @pytest.mark.asyncio
    async def test_fast_requests_do_not_warn(self):
        async def call_next(request):
            return Response(status_code=200)

        middleware = LogfireMiddleware(app=AsyncMock())

        with patch(f"{MODULE}.log_api_request"), patch(f"{MODULE}.logger") as mock_logger:
            await middleware.dispatch(_request(), call_next)

        mock_logger.warning.assert_not_called()


class TestLogfireMiddlewareIntegration:
    """Middleware mounted on a real application."""

    @pytest.mark.asyncio
    async def test_header_present_on_real_response(self):
        app = FastAPI()
        app.add_middleware(LogfireMiddleware)

        @app.get("/ping")
        async def ping():
            return {"pong": True}

        with patch(f"{MODULE}.log_api_request") as mock_log:
            async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
                response = await client.get("/ping")

        assert response.status_code == 200
        assert "x-process-time" in response.headers
        assert mock_log.call_args[1]["path"] == "/ping"
