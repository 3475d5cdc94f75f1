"""
Unit tests for RequestLoggingMiddleware.

Tests cover timing headers, request reporting, failure reporting and the
slow request warning.
"""

from unittest.mock import AsyncMock, Mock, patch

import pytest
from starlette.responses import Response

from interior_manager.server.middleware import request_logging
from interior_manager.server.middleware.request_logging import RequestLoggingMiddleware


@pytest.fixture
def mock_request():
    request = AsyncMock()
    request.method = "GET"
    request.url = Mock()
    request.url.path = "/api/v1/projects"
    return request


@pytest.fixture
def middleware():
    return RequestLoggingMiddleware(app=AsyncMock())


class TestRequestLoggingMiddleware:
    """Test suite for RequestLoggingMiddleware."""

    @pytest.mark.asyncio
    async def test_successful_request_is_reported(self, middleware, mock_request):
        call_next = AsyncMock(return_value=Response(content="ok", status_code=200))

        with patch("interior_manager.server.middleware.request_logging.log_api_request") as mock_log:
            response = await middleware.dispatch(mock_request, call_next)

        assert response.status_code == 200
        assert "X-Process-Time" in response.headers
        float(response.headers["X-Process-Time"])
        mock_log.assert_called_once()
        kwargs = mock_log.call_args.kwargs
        assert kwargs["method"] == "GET"
        assert kwargs["path"] == "/api/v1/projects"
        assert kwargs["status_code"] == 200
        assert kwargs["duration_ms"] >= 0

    @pytest.mark.asyncio
    async def test_error_status_is_passed_through(self, middleware, mock_request):
        call_next = AsyncMock(return_value=Response(status_code=404))

        with patch("interior_manager.server.middleware.request_logging.log_api_request") as mock_log:
            response = await middleware.dispatch(mock_request, call_next)

        assert response.status_code == 404
        assert mock_log.call_args.kwargs["status_code"] == 404

    @pytest.mark.asyncio
    async def test_exception_is_reported_and_reraised(self, middleware, mock_request):
        call_next = AsyncMock(side_effect=RuntimeError("boom"))

        with (
            patch("interior_manager.server.middleware.request_logging.log_api_request") as mock_log,
            patch("interior_manager.server.middleware.request_logging.logger") as mock_logger,
        ):
            with pytest.raises(RuntimeError, match="boom"):
                await middleware.dispatch(mock_request, call_next)

        assert mock_log.call_args.kwargs["status_code"] == 500
        mock_logger.error.assert_called_once()
        assert mock_logger.error.call_args.kwargs["extra"]["error"] == "boom"

    @pytest.mark.asyncio
    async def test_slow_request_warns(self, middleware, mock_request, monkeypatch):
        monkeypatch.setattr(request_logging, "SLOW_REQUEST_MS", -1)
        call_next = AsyncMock(return_value=Response(status_code=200))

        with (
            patch("interior_manager.server.middleware.request_logging.log_api_request"),
            patch("interior_manager.server.middleware.request_logging.logger") as mock_logger,
        ):
            await middleware.dispatch(mock_request, call_next)

        mock_logger.warning.assert_called_once()
        assert "Slow API request" in mock_logger.warning.call_args[0][0]

    @pytest.mark.asyncio
    async def test_fast_request_does_not_warn(self, middleware, mock_request):
        call_next = AsyncMock(return_value=Response(status_code=200))

        with (
            patch("interior_manager.server.middleware.request_logging.log_api_request"),
            patch("interior_manager.server.middleware.request_logging.logger") as mock_logger,
        ):
            await middleware.dispatch(mock_request, call_next)

        mock_logger.warning.assert_not_called()
