"""Role dashboards: defensive parsers and payload transformers."""

from .parsing import parse_json_field, safe_number
from .transformers import (
    AdminDashboardData,
    CoordinatorDashboardData,
    SectionDashboardData,
    SupervisorDashboardData,
    TraineeDashboardData,
    transform_admin_dashboard,
    transform_coordinator_dashboard,
    transform_section_dashboard,
    transform_supervisor_dashboard,
    transform_trainee_dashboard,
)

__all__ = [
    "AdminDashboardData",
    "CoordinatorDashboardData",
    "SectionDashboardData",
    "SupervisorDashboardData",
    "TraineeDashboardData",
    "parse_json_field",
    "safe_number",
    "transform_admin_dashboard",
    "transform_coordinator_dashboard",
    "transform_section_dashboard",
    "transform_supervisor_dashboard",
    "transform_trainee_dashboard",
]
