"""
Exception Handlers for the FastAPI Application.

Two handlers are registered:

- ``domain_exception_handler`` maps ``SumikappError`` subclasses (not found,
  permission denied, invalid status transition...) to their HTTP status code.
- ``global_exception_handler`` catches everything else, logs the full context
  with an error ID, and returns a 500 that clients can quote when reporting.
"""

import traceback

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from sumikapp.core.errors import SumikappError
from sumikapp.core.logging_config import get_logger
from sumikapp.core.monitoring import log_error

logger = get_logger(__name__)


async def domain_exception_handler(request: Request, exc: SumikappError) -> JSONResponse:
    """
    Translate a domain error into a JSON response.

    Args:
        request: The HTTP request that caused the exception
        exc: The domain error that was raised

    Returns:
        JSONResponse carrying the error message and the error type
    """
    logger.info(
        f"{type(exc).__name__} in {request.method} {request.url.path}: {exc.message}",
        extra={
            "method": request.method,
            "path": request.url.path,
            "status_code": exc.status_code,
            "error_type": type(exc).__name__,
        },
    )
    content = {"detail": exc.message, "error_type": type(exc).__name__}
    if exc.details is not None:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler to log detailed error information.

    This handler is called for any unhandled exception in the application.
    It logs the full error context and returns a JSON response with an error ID
    that clients can use to reference the error when reporting issues.

    Args:
        request: The HTTP request that caused the exception
        exc: The exception that was raised

    Returns:
        JSONResponse with error details and error ID
    """
    error_id = id(exc)

    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {str(exc)}",
        exc_info=True,
        extra={
            "error_id": error_id,
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
            "client": request.client.host if request.client else "unknown",
            "error_type": type(exc).__name__,
            "traceback": traceback.format_exc(),
        },
    )
    log_error(type(exc).__name__, str(exc), {"error_id": error_id, "path": request.url.path})

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_id": error_id,
            "error_type": type(exc).__name__,
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    This function should be called during application initialization to set up
    all custom exception handlers.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(SumikappError, domain_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered successfully")
