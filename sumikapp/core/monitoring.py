"""
Monitoring and Tracing Configuration Module.

This module provides integration with Pydantic Logfire for monitoring and
tracing of SumikAPP operations, including:
- API endpoint tracing
- Database operation monitoring
- Outbound calls to the employability prediction service
- Document review events (approvals and rejections)

Logfire is opt-in: nothing is sent unless ``LOGFIRE_ENABLED`` is true and a
``LOGFIRE_TOKEN`` is configured.
"""

import logging
from typing import Any, Optional

import logfire
from fastapi import FastAPI

from sumikapp.server.core.config import settings

logger = logging.getLogger(__name__)

_configured = False


def is_enabled() -> bool:
    """Whether Logfire has been configured for this process."""
    return _configured


def initialize_logfire(app: FastAPI | None = None) -> None:
    """
    Initialize Pydantic Logfire for monitoring and tracing.

    This function sets up Logfire with automatic instrumentation for:
    - SQLAlchemy database operations
    - HTTPX HTTP requests
    - FastAPI endpoints

    Args:
        app: FastAPI application instance for FastAPI instrumentation (optional).
    """
    global _configured

    if not settings.logfire_enabled:
        logger.info("Logfire monitoring is disabled. Set LOGFIRE_ENABLED=true to enable.")
        return

    if not settings.logfire_token:
        logger.warning(
            "Logfire is enabled but LOGFIRE_TOKEN is not set. "
            "Monitoring will not work. Set LOGFIRE_TOKEN to enable Logfire."
        )
        return

    logfire.configure(
        token=settings.logfire_token,
        service_name=settings.logfire_service_name,
        environment=settings.environment,
    )
    _configured = True

    logfire.instrument_sqlalchemy()
    logfire.instrument_httpx()
    if app is not None:
        logfire.instrument_fastapi(app=app)
        logger.info("Logfire: FastAPI instrumentation enabled")

    logger.info(
        f"Logfire monitoring initialized: environment={settings.environment}, service={settings.logfire_service_name}"
    )


def log_api_request(method: str, path: str, status_code: int, duration_ms: float) -> None:
    """
    Log an API request with performance metrics.

    Args:
        method: HTTP method
        path: Request path
        status_code: HTTP status code
        duration_ms: Request duration in milliseconds
    """
    if not _configured:
        return
    logfire.info(
        "API request completed",
        method=method,
        path=path,
        status_code=status_code,
        duration_ms=duration_ms,
    )


def log_review_event(document: str, document_id: str, decision: str, reviewer_id: str) -> None:
    """Record a document review decision (approve/reject) in Logfire."""
    if not _configured:
        return
    logfire.info(
        "Document reviewed",
        document=document,
        document_id=document_id,
        decision=decision,
        reviewer_id=reviewer_id,
    )


def log_error(error_type: str, error_message: str, context: Optional[dict[str, Any]] = None) -> None:
    """
    Log an error with context for debugging.

    Args:
        error_type: Type of error
        error_message: Error message
        context: Additional context dictionary
    """
    if not _configured:
        return
    logfire.error(
        "{error_type}: {error_message}",
        error_type=error_type,
        error_message=error_message,
        **(context or {}),
    )
