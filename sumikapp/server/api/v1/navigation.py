"""
Navigation Endpoints.

Serve the sidebar, settings and section navigation trees, filtered to what
the caller's role (and, for trainees, OJT status) may see.
"""

from typing import List

from fastapi import APIRouter

from sumikapp.core.models.domain.enums import Role
from sumikapp.navigation import (
    NavigationConfig,
    RouteSubChild,
    filter_navigation_by_role,
    filter_settings_navigation,
    section_navigation,
    settings_navigation,
    sidebar_navigation,
)
from sumikapp.server.services.deps import CoordinatorDep, CurrentUserDep

router = APIRouter()


@router.get(
    "/sidebar",
    response_model=NavigationConfig,
    summary="Get Sidebar Navigation",
    description="Retrieve the main sidebar tree filtered by the caller's role and OJT status.",
    response_description="Navigation config with only the visible routes.",
    responses={401: {"description": "Missing or unknown user"}},
)
async def get_sidebar(current_user: CurrentUserDep) -> NavigationConfig:
    """
    Get sidebar navigation.

    Groups left without visible children are dropped, so a trainee who has
    not started their OJT only sees the routes available before placement.
    """
    return filter_navigation_by_role(sidebar_navigation(), current_user.role, current_user.ojt_status)


@router.get(
    "/settings",
    response_model=List[RouteSubChild],
    summary="Get Settings Navigation",
    description="Retrieve the settings pages visible to the caller.",
)
async def get_settings_navigation(current_user: CurrentUserDep) -> List[RouteSubChild]:
    return filter_settings_navigation(settings_navigation(), current_user.role, current_user.ojt_status)


@router.get(
    "/sections/{slug}",
    response_model=NavigationConfig,
    summary="Get Section Navigation",
    description="Retrieve the navigation of one section (program batch) page.",
    responses={403: {"description": "Caller is not a coordinator"}},
)
async def get_section_navigation(slug: str, current_user: CoordinatorDep) -> NavigationConfig:
    return filter_navigation_by_role(section_navigation(slug), Role.coordinator)
