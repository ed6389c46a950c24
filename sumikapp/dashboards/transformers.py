"""Dashboard payload models and the transformers that build them from raw rows.

Each dashboard has:

- a model whose defaults are the safe "empty dashboard" payload, and
- a ``transform_*`` function that turns a raw aggregate row (a mapping shaped
  like a reporting view) into that model without ever raising on bad data.
"""

from __future__ import annotations

from typing import Any, List, Mapping

from pydantic import BaseModel, Field

from sumikapp.core.models.domain.enums import OJTStatus

from .parsing import has_keys, keep_items, parse_json_field, safe_number, strict_number

# =====================================================================
# Admin
# =====================================================================


class AdminDashboardData(BaseModel):
    total_trainees: float = 0
    total_coordinators: float = 0
    total_supervisors: float = 0
    total_admins: float = 0
    total_industry_partners: float = 0
    recent_activities: List[dict] = Field(default_factory=list)


def transform_admin_dashboard(row: Mapping[str, Any]) -> AdminDashboardData:
    return AdminDashboardData(
        total_trainees=safe_number(row.get("total_trainees")),
        total_coordinators=safe_number(row.get("total_coordinators")),
        total_supervisors=safe_number(row.get("total_supervisors")),
        total_admins=safe_number(row.get("total_admins")),
        total_industry_partners=safe_number(row.get("total_industry_partners")),
        recent_activities=keep_items(parse_json_field(row.get("recent_activities"), []), has_keys("id", "title")),
    )


# =====================================================================
# Coordinator
# =====================================================================


class CoordinatorDashboardStats(BaseModel):
    total_students: float = 0
    total_sections: float = 0
    pending_requirements: float = 0
    active_batches: float = 0


class CoordinatorDashboardData(BaseModel):
    dashboard_stats: CoordinatorDashboardStats = Field(default_factory=CoordinatorDashboardStats)
    recent_activities: List[dict] = Field(default_factory=list)
    section_progress: List[dict] = Field(default_factory=list)


def transform_coordinator_dashboard(row: Mapping[str, Any]) -> CoordinatorDashboardData:
    stats = parse_json_field(row.get("dashboard_stats"), {})
    if not isinstance(stats, dict):
        stats = {}
    return CoordinatorDashboardData(
        dashboard_stats=CoordinatorDashboardStats(
            total_students=strict_number(stats.get("total_students")),
            total_sections=strict_number(stats.get("total_sections")),
            pending_requirements=strict_number(stats.get("pending_requirements")),
            active_batches=strict_number(stats.get("active_batches")),
        ),
        recent_activities=keep_items(parse_json_field(row.get("recent_activities"), []), has_keys("id", "title")),
        section_progress=keep_items(
            parse_json_field(row.get("section_progress"), []),
            lambda item: bool(item.get("program")) and "progress_percentage" in item,
        ),
    )


# =====================================================================
# Supervisor
# =====================================================================


class SupervisorDashboardData(BaseModel):
    supervisor_id: str = ""
    supervisor_name: str = ""
    supervisor_email: str = ""
    company_name: str = ""
    department: str = ""
    position: str = ""
    total_active_trainees: float = 0
    currently_active_trainees: float = 0
    completed_trainees: float = 0
    total_pending_reports: float = 0
    pending_evaluations_count: float = 0
    recent_activities: List[dict] = Field(default_factory=list)
    trainees_pending_evaluation: List[dict] = Field(default_factory=list)


def transform_supervisor_dashboard(row: Mapping[str, Any]) -> SupervisorDashboardData:
    return SupervisorDashboardData(
        supervisor_id=row.get("supervisor_id") or "",
        supervisor_name=row.get("supervisor_name") or "",
        supervisor_email=row.get("supervisor_email") or "",
        company_name=row.get("company_name") or "",
        department=row.get("department") or "",
        position=row.get("position") or "",
        total_active_trainees=safe_number(row.get("total_active_trainees")),
        currently_active_trainees=safe_number(row.get("currently_active_trainees")),
        completed_trainees=safe_number(row.get("completed_trainees")),
        total_pending_reports=safe_number(row.get("pending_weekly_reports")),
        pending_evaluations_count=safe_number(row.get("pending_evaluations")),
        recent_activities=keep_items(parse_json_field(row.get("recent_activities"), []), lambda item: True),
        trainees_pending_evaluation=keep_items(
            parse_json_field(row.get("trainees_pending_evaluation"), []), lambda item: True
        ),
    )


# =====================================================================
# Trainee
# =====================================================================


class TraineeHours(BaseModel):
    total: float = 0
    required: float = 0


class TraineeAttendance(BaseModel):
    recent_entries: List[dict] = Field(default_factory=list)
    weekly_chart: List[dict] = Field(default_factory=list)


class TraineeDashboardData(BaseModel):
    ojt_status: str = OJTStatus.not_started.value
    hours: TraineeHours = Field(default_factory=TraineeHours)
    attendance_rate_percentage: float = 0
    total_submitted_reports: float = 0
    approved_weekly_reports: float = 0
    rejected_weekly_reports: float = 0
    pending_weekly_reports: float = 0
    total_weekly_reports: float = 0
    attendance: TraineeAttendance = Field(default_factory=TraineeAttendance)
    recent_activities: List[dict] = Field(default_factory=list)
    announcements: List[dict] = Field(default_factory=list)
    recent_reports: List[dict] = Field(default_factory=list)
    internships: List[dict] = Field(default_factory=list)


def transform_trainee_dashboard(row: Mapping[str, Any]) -> TraineeDashboardData:
    return TraineeDashboardData(
        ojt_status=row.get("ojt_status") or OJTStatus.not_started.value,
        hours=TraineeHours(
            total=safe_number(row.get("total_hours_logged")),
            required=safe_number(row.get("required_hours")),
        ),
        attendance_rate_percentage=min(100, safe_number(row.get("attendance_rate_percentage"))),
        total_submitted_reports=safe_number(row.get("total_submitted_reports")),
        approved_weekly_reports=safe_number(row.get("approved_weekly_reports")),
        rejected_weekly_reports=safe_number(row.get("rejected_weekly_reports")),
        pending_weekly_reports=safe_number(row.get("pending_weekly_reports")),
        total_weekly_reports=safe_number(row.get("total_weekly_reports")),
        attendance=TraineeAttendance(
            recent_entries=keep_items(parse_json_field(row.get("recent_attendance"), []), has_keys("date")),
            weekly_chart=keep_items(parse_json_field(row.get("weekly_attendance_chart"), []), has_keys("day", "date")),
        ),
        recent_activities=keep_items(parse_json_field(row.get("recent_activities"), []), has_keys("id", "title")),
        announcements=keep_items(parse_json_field(row.get("announcements"), []), has_keys("id", "title")),
        recent_reports=keep_items(parse_json_field(row.get("recent_reports"), []), has_keys("id")),
    )


# =====================================================================
# Section (program batch) overview
# =====================================================================


class SectionDashboardData(BaseModel):
    total_trainees: float = 0
    active_trainees: float = 0
    completed_trainees: float = 0
    dropped_trainees: float = 0
    not_started_trainees: float = 0
    total_requirements: float = 0
    mandatory_requirements: float = 0
    optional_requirements: float = 0
    total_internship_forms: float = 0
    approved_internship_forms: float = 0
    pending_internship_forms: float = 0
    rejected_internship_forms: float = 0
    total_companies: float = 0
    companies: List[dict] = Field(default_factory=list)
    job_roles: List[str] = Field(default_factory=list)
    total_hours_logged: float = 0
    avg_hours_per_trainee: float = 0
    completion_percentage: float = 0
    total_weekly_reports: float = 0
    approved_weekly_reports: float = 0
    pending_weekly_reports: float = 0
    rejected_weekly_reports: float = 0
    recent_activities: List[dict] = Field(default_factory=list)


_SECTION_NUMBER_FIELDS = (
    "total_trainees",
    "active_trainees",
    "completed_trainees",
    "dropped_trainees",
    "not_started_trainees",
    "total_requirements",
    "mandatory_requirements",
    "optional_requirements",
    "total_internship_forms",
    "approved_internship_forms",
    "pending_internship_forms",
    "rejected_internship_forms",
    "total_companies",
    "total_hours_logged",
    "avg_hours_per_trainee",
    "total_weekly_reports",
    "approved_weekly_reports",
    "pending_weekly_reports",
    "rejected_weekly_reports",
)


def transform_section_dashboard(row: Mapping[str, Any]) -> SectionDashboardData:
    numbers = {name: safe_number(row.get(name)) for name in _SECTION_NUMBER_FIELDS}
    job_roles = parse_json_field(row.get("job_roles"), [])
    return SectionDashboardData(
        **numbers,
        completion_percentage=max(0, min(100, safe_number(row.get("completion_percentage")))),
        companies=keep_items(parse_json_field(row.get("companies"), []), has_keys("company_name")),
        job_roles=[role for role in job_roles if isinstance(role, str) and role],
        recent_activities=keep_items(parse_json_field(row.get("recent_activities"), []), has_keys("id", "title")),
    )
