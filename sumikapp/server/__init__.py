"""
SumikAPP server package.

Contains the FastAPI application, its versioned routers, the service layer the
routers delegate to, and cross-cutting middleware and exception handlers.
"""
