"""
Dashboard Endpoints.

``/dashboard`` returns the dashboard of the caller's role. Payloads are safe
to cache briefly on the client, so responses carry a ``Cache-Control`` hint.
"""

from datetime import date
from typing import Optional, Union

from fastapi import APIRouter, Response

from sumikapp.dashboards import (
    AdminDashboardData,
    CoordinatorDashboardData,
    SectionDashboardData,
    SupervisorDashboardData,
    TraineeDashboardData,
)
from sumikapp.server.core.config import settings
from sumikapp.server.services.dashboard import DashboardService
from sumikapp.server.services.deps import CoordinatorDep, CurrentUserDep, SessionDep

router = APIRouter()


def _cache_headers(response: Response) -> None:
    response.headers["Cache-Control"] = f"private, max-age={settings.cache.dashboard_max_age}"


@router.get(
    "/dashboard",
    response_model=Optional[
        Union[AdminDashboardData, CoordinatorDashboardData, SupervisorDashboardData, TraineeDashboardData]
    ],
    summary="Get Role Dashboard",
    description="Retrieve the dashboard for the caller's role (admin, coordinator, supervisor or trainee).",
    response_description="Dashboard payload. Null for a supervisor account without a profile.",
    responses={401: {"description": "Missing or unknown user"}},
)
async def get_dashboard(response: Response, current_user: CurrentUserDep, session: SessionDep):
    """
    Get the caller's dashboard.

    Data errors never fail the request: the empty dashboard for the role is
    returned instead.
    """
    _cache_headers(response)
    return await DashboardService(session).get_dashboard(current_user, date.today())


@router.get(
    "/sections/{slug}/overview",
    response_model=SectionDashboardData,
    summary="Get Section Overview",
    description="Retrieve trainee, requirement, placement and report counts for one section.",
    responses={404: {"description": "Section not found"}},
)
async def get_section_overview(
    slug: str, response: Response, current_user: CoordinatorDep, session: SessionDep
) -> SectionDashboardData:
    _cache_headers(response)
    return await DashboardService(session).section_overview(current_user.id, slug, date.today())
