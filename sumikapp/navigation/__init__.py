"""Navigation trees and the role/OJT-status filter applied to them."""

from .config import section_navigation, settings_navigation, sidebar_navigation
from .filter import filter_navigation_by_role, filter_settings_navigation, is_route_visible
from .types import Divider, NavigationConfig, RouteChild, RouteGroup, RouteSubChild

__all__ = [
    "Divider",
    "NavigationConfig",
    "RouteChild",
    "RouteGroup",
    "RouteSubChild",
    "filter_navigation_by_role",
    "filter_settings_navigation",
    "is_route_visible",
    "section_navigation",
    "settings_navigation",
    "sidebar_navigation",
]
