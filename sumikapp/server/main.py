"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request logging), registers exception handlers and includes all API routers.
It serves as the root of the web server.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sumikapp.core.database import init_db
from sumikapp.core.logging_config import get_logger, setup_logging
from sumikapp.core.monitoring import initialize_logfire

from .api.v1 import (
    dashboard,
    health,
    industry_partners,
    internships,
    me,
    navigation,
    notifications,
    predefined_requirements,
    reports,
    requirements,
    review_reports,
    sections,
    skills,
    supervisor,
    users,
)
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import RequestLoggingMiddleware

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Handles startup and shutdown events for the FastAPI application.
    """
    # Startup
    try:
        logger.info("Starting up SumikAPP Server...")
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    # Shutdown
    logger.info("Shutting down SumikAPP Server...")


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    SumikAPP Server API

    Backend services for the SumikAPP On-the-Job Training system: sections and
    enrollment, internship placements, weekly/attendance/accomplishment reports,
    requirement documents, supervisor evaluations and role dashboards.
    """,
    version=constant.API_VERSION,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

initialize_logfire(app)
setup_exception_handlers(app)

app.add_middleware(RequestLoggingMiddleware)

# Set all CORS enabled origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=settings.cors.allow_methods,
    allow_headers=settings.cors.allow_headers,
    expose_headers=["X-Request-Id", "X-Process-Time"],
)

api = constant.API_V1_STR

app.include_router(health.router, prefix=api, tags=["health"])
app.include_router(me.router, prefix=f"{api}/me", tags=["me"])
app.include_router(navigation.router, prefix=f"{api}/navigation", tags=["navigation"])
app.include_router(dashboard.router, prefix=api, tags=["dashboard"])
app.include_router(notifications.router, prefix=f"{api}/notifications", tags=["notifications"])

# Trainee
app.include_router(reports.weekly_router, prefix=f"{api}/weekly-reports", tags=["weekly-reports"])
app.include_router(reports.attendance_router, prefix=f"{api}/attendance-reports", tags=["attendance-reports"])
app.include_router(
    reports.accomplishment_router, prefix=f"{api}/accomplishment-reports", tags=["accomplishment-reports"]
)
app.include_router(requirements.router, prefix=f"{api}/requirements", tags=["requirements"])
app.include_router(internships.router, prefix=f"{api}/internships", tags=["internships"])
app.include_router(skills.router, prefix=f"{api}/skills", tags=["skills"])

# Supervisor
app.include_router(review_reports.router, prefix=f"{api}/review-reports", tags=["review-reports"])
app.include_router(supervisor.router, prefix=api, tags=["supervisor"])

# Coordinator
app.include_router(sections.router, prefix=f"{api}/sections", tags=["sections"])

# Admin
app.include_router(users.router, prefix=f"{api}/users", tags=["users"])
app.include_router(industry_partners.router, prefix=f"{api}/industry-partners", tags=["industry-partners"])
app.include_router(
    predefined_requirements.router, prefix=f"{api}/predefined-requirements", tags=["predefined-requirements"]
)
