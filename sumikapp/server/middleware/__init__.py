"""
Middleware modules for the SumikAPP server.

This package contains custom middleware for request/response logging and
request correlation.
"""

from .request_middleware import RequestLoggingMiddleware

__all__ = ["RequestLoggingMiddleware"]
