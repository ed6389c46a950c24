"""
Unit tests for server exception handlers.

Tests cover domain error translation, the global 500 handler and handler
registration.
"""

import json
from unittest.mock import Mock, patch

import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from sumikapp.core.errors import (
    InvalidStatusTransitionError,
    NotFoundError,
    PermissionDeniedError,
    SumikappError,
)
from sumikapp.server.exception_handlers import setup_exception_handlers
from sumikapp.server.exception_handlers.global_handler import (
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


def body(response: JSONResponse) -> dict:
    return json.loads(response.body)


@pytest.mark.asyncio
class TestDomainExceptionHandler:
    async def test_not_found_maps_to_404(self, mock_request):
        response = await domain_exception_handler(mock_request, NotFoundError("Section", "BSIT-4A"))

        assert response.status_code == 404
        assert body(response) == {
            "detail": "Section not found: BSIT-4A",
            "error_type": "NotFoundError",
            "details": {"resource": "Section", "id": "BSIT-4A"},
        }

    async def test_details_are_omitted_when_absent(self, mock_request):
        response = await domain_exception_handler(mock_request, PermissionDeniedError("Not your report"))

        assert response.status_code == 403
        assert body(response) == {"detail": "Not your report", "error_type": "PermissionDeniedError"}

    async def test_invalid_transition_maps_to_409(self, mock_request):
        exc = InvalidStatusTransitionError("Weekly report", "approved", "rejected")
        response = await domain_exception_handler(mock_request, exc)

        assert response.status_code == 409
        assert body(response)["details"] == {"current": "approved", "target": "rejected"}

    async def test_domain_errors_are_logged_at_info(self, mock_request):
        with patch("sumikapp.server.exception_handlers.global_handler.logger") as mock_logger:
            await domain_exception_handler(mock_request, SumikappError("bad"))

        mock_logger.info.assert_called_once()
        mock_logger.error.assert_not_called()
        assert mock_logger.info.call_args[1]["extra"]["status_code"] == 400


@pytest.mark.asyncio
class TestGlobalExceptionHandler:
    async def test_exception_handler_logs_error(self, mock_request):
        exc = ValueError("Test error")

        with patch("sumikapp.server.exception_handlers.global_handler.logger") as mock_logger:
            await global_exception_handler(mock_request, exc)

        mock_logger.error.assert_called_once()
        call_args = mock_logger.error.call_args
        assert "Unhandled exception" in call_args[0][0]
        assert call_args[1]["extra"]["error_type"] == "ValueError"
        assert call_args[1]["extra"]["client"] == "127.0.0.1"

    async def test_exception_handler_returns_500_with_error_id(self, mock_request):
        exc = RuntimeError("Test error")

        with patch("sumikapp.server.exception_handlers.global_handler.logger"):
            response = await global_exception_handler(mock_request, exc)

        assert isinstance(response, JSONResponse)
        assert response.status_code == 500
        content = body(response)
        assert content["detail"] == "Internal server error"
        assert content["error_id"] == id(exc)
        assert content["error_type"] == "RuntimeError"

    async def test_internal_message_is_not_leaked(self, mock_request):
        exc = RuntimeError("password=hunter2")

        with patch("sumikapp.server.exception_handlers.global_handler.logger"):
            response = await global_exception_handler(mock_request, exc)

        assert "hunter2" not in response.body.decode()

    async def test_unknown_client(self, mock_request):
        mock_request.client = None

        with patch("sumikapp.server.exception_handlers.global_handler.logger") as mock_logger:
            await global_exception_handler(mock_request, KeyError("x"))

        assert mock_logger.error.call_args[1]["extra"]["client"] == "unknown"

    async def test_forwards_to_monitoring(self, mock_request):
        exc = RuntimeError("boom")

        with patch("sumikapp.server.exception_handlers.global_handler.logger"), patch(
            "sumikapp.server.exception_handlers.global_handler.log_error"
        ) as mock_log_error:
            await global_exception_handler(mock_request, exc)

        mock_log_error.assert_called_once_with("RuntimeError", "boom", {"error_id": id(exc), "path": "/api/v1/test"})


class TestSetupExceptionHandlers:
    def test_registers_domain_and_global_handlers(self):
        app = FastAPI()
        setup_exception_handlers(app)

        assert app.exception_handlers[SumikappError] is domain_exception_handler
        assert app.exception_handlers[Exception] is global_exception_handler
