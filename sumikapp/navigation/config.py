"""Static navigation trees.

The trees list every route for every role. ``filter_navigation_by_role``
narrows them down for a specific user.
"""

from __future__ import annotations

from sumikapp.core.models.domain.enums import OJTStatus, Role

from . import paths
from .types import NavigationConfig, RouteChild, RouteGroup, RouteSubChild

ALL_ROLES = [Role.trainee, Role.coordinator, Role.supervisor, Role.admin]


def sidebar_navigation() -> NavigationConfig:
    """The main dashboard sidebar."""
    return NavigationConfig(
        style="sidebar",
        sidebar_collapsed=True,
        sidebar_collapsed_style="icon",
        routes=[
            RouteGroup(
                label="Application",
                children=[
                    RouteChild(label="Dashboard", path=paths.HOME, icon="home", end=True, authorized_roles=ALL_ROLES),
                    RouteChild(
                        label="Placement",
                        path=paths.PLACEMENT,
                        icon="briefcase",
                        authorized_roles=[Role.trainee],
                        allowed_ojt_status=[OJTStatus.not_started, OJTStatus.dropped],
                    ),
                    RouteChild(
                        label="Requirements",
                        path=paths.REQUIREMENTS,
                        icon="file-text",
                        authorized_roles=[Role.trainee],
                        allowed_ojt_status=[
                            OJTStatus.not_started,
                            OJTStatus.completed,
                            OJTStatus.active,
                            OJTStatus.dropped,
                        ],
                    ),
                    RouteChild(
                        label="Weekly Reports",
                        path=paths.WEEKLY_REPORTS,
                        icon="calendar",
                        authorized_roles=[Role.trainee],
                        allowed_ojt_status=[OJTStatus.completed, OJTStatus.active],
                    ),
                    RouteChild(
                        label="Sections", path=paths.SECTIONS, icon="users", authorized_roles=[Role.coordinator]
                    ),
                    RouteChild(label="Trainees", path=paths.TRAINEES, icon="users", authorized_roles=[Role.supervisor]),
                    RouteChild(
                        label="Evaluations",
                        path=paths.EVALUATIONS,
                        icon="clipboard-check",
                        authorized_roles=[Role.supervisor],
                    ),
                    RouteChild(
                        label="Reports",
                        path=paths.REVIEW_REPORTS,
                        icon="file-check",
                        authorized_roles=[Role.supervisor],
                    ),
                    RouteChild(label="Users", path=paths.USERS, icon="user-cog", authorized_roles=[Role.admin]),
                    RouteChild(
                        label="Industry Partners",
                        path=paths.INDUSTRY_PARTNERS,
                        icon="building",
                        authorized_roles=[Role.admin],
                    ),
                    RouteChild(
                        label="Requirements",
                        path=paths.PREDEFINED_REQUIREMENTS,
                        icon="file-text",
                        authorized_roles=[Role.admin],
                    ),
                ],
            )
        ],
    )


def section_navigation(slug: str) -> NavigationConfig:
    """Navigation inside one coordinator section."""
    return NavigationConfig(
        style="sidebar",
        sidebar_collapsed=False,
        sidebar_collapsed_style="icon",
        routes=[
            RouteGroup(
                label="Application",
                children=[
                    RouteChild(label="Overview", path=paths.section_overview(slug), icon="layout", end=True),
                    RouteChild(label="Trainees", path=paths.section_trainees(slug), icon="users"),
                    RouteChild(label="Announcements", path=paths.section_announcements(slug), icon="megaphone"),
                    RouteChild(label="Requirements", path=paths.section_requirements(slug), icon="file-text"),
                    RouteChild(label="Weekly Reports", path=paths.section_weekly_reports(slug), icon="calendar"),
                ],
            ),
            RouteGroup(
                label="Settings",
                children=[RouteChild(label="Settings", path=paths.section_settings(slug), icon="settings")],
            ),
        ],
    )


def settings_navigation() -> list[RouteSubChild]:
    """The flat list of account settings pages."""
    return [
        RouteSubChild(label="Profile", path=paths.SETTINGS_PROFILE, end=True, authorized_roles=ALL_ROLES),
        RouteSubChild(label="Skills", path=paths.SETTINGS_SKILLS, authorized_roles=[Role.trainee]),
        RouteSubChild(
            label="Internship Details", path=paths.SETTINGS_INTERNSHIP_DETAILS, authorized_roles=[Role.trainee]
        ),
    ]
