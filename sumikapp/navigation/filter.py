"""Role and OJT-status aware navigation filtering.

The filter is pure: it builds a new config and never mutates its input.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from sumikapp.core.models.domain.enums import OJTStatus, Role

from .types import Divider, NavigationConfig, RouteChild, RouteGroup, RouteSubChild

logger = logging.getLogger(__name__)


def is_route_visible(route: RouteSubChild, role: Role, ojt_status: Optional[OJTStatus] = None) -> bool:
    """Whether a single route passes its own role and OJT-status restrictions.

    OJT-status restrictions only apply to trainees. A trainee without a known
    status fails any route that restricts status. An empty list hides the
    route from everyone it applies to.
    """
    if route.authorized_roles is not None and role not in route.authorized_roles:
        return False
    if role == Role.trainee and route.allowed_ojt_status is not None:
        if ojt_status is None or ojt_status not in route.allowed_ojt_status:
            return False
    return True


def _filter_child(child: RouteChild, role: Role, ojt_status: Optional[OJTStatus]) -> Optional[RouteChild]:
    if not is_route_visible(child, role, ojt_status):
        return None
    if not child.children:
        return child.model_copy()

    visible = [sub.model_copy() for sub in child.children if is_route_visible(sub, role, ojt_status)]
    if visible or not any(sub.is_restricted for sub in child.children):
        return child.model_copy(update={"children": visible})
    return None


def filter_routes(
    routes: List[Divider | RouteGroup], role: Role, ojt_status: Optional[OJTStatus] = None
) -> List[Divider | RouteGroup]:
    """Filter a list of groups and dividers. Empty groups are dropped."""
    filtered: List[Divider | RouteGroup] = []
    for item in routes:
        if isinstance(item, Divider):
            filtered.append(item)
            continue
        children = [kept for child in item.children if (kept := _filter_child(child, role, ojt_status)) is not None]
        if children:
            filtered.append(item.model_copy(update={"children": children}))
    return filtered


def filter_navigation_by_role(
    config: NavigationConfig, user_role: Role, ojt_status: Optional[OJTStatus] = None
) -> NavigationConfig:
    """Return the subset of ``config`` that ``user_role`` may see.

    Args:
        config: The full navigation tree.
        user_role: Role of the current user.
        ojt_status: The trainee's OJT status. Ignored for other roles.

    Returns:
        A new config with the same presentation settings and filtered routes.
    """
    routes = filter_routes(config.routes, user_role, ojt_status)
    logger.debug(
        f"Filtered navigation for role={user_role.value} ojt_status={ojt_status.value if ojt_status else None}: "
        f"{len(routes)} of {len(config.routes)} top-level items kept"
    )
    return config.model_copy(update={"routes": routes})


def filter_settings_navigation(
    items: List[RouteSubChild], user_role: Role, ojt_status: Optional[OJTStatus] = None
) -> List[RouteSubChild]:
    """Apply the same visibility rule to a flat list of routes."""
    return [item.model_copy() for item in items if is_route_visible(item, user_role, ojt_status)]
