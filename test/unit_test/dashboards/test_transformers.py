"""
Unit tests for dashboard transformers.

Every transformer must turn an empty or malformed row into the default
payload instead of raising, and keep only well-formed list items.
"""

import json

from sumikapp.dashboards import (
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


class TestEmptyRows:
    def test_every_transformer_returns_defaults_for_empty_row(self):
        assert transform_admin_dashboard({}) == AdminDashboardData()
        assert transform_coordinator_dashboard({}) == CoordinatorDashboardData()
        assert transform_supervisor_dashboard({}) == SupervisorDashboardData()
        assert transform_trainee_dashboard({}) == TraineeDashboardData()
        assert transform_section_dashboard({}) == SectionDashboardData()

    def test_trainee_default_status_is_not_started(self):
        assert transform_trainee_dashboard({"ojt_status": None}).ojt_status == "not started"


class TestAdminDashboard:
    def test_counts_and_activity_filtering(self):
        row = {
            "total_trainees": "12",
            "total_coordinators": 2,
            "total_supervisors": None,
            "total_admins": True,
            "total_industry_partners": 4,
            "recent_activities": json.dumps(
                [{"id": "a1", "title": "Created"}, {"id": "a2"}, {"title": "no id"}, "garbage"]
            ),
        }
        data = transform_admin_dashboard(row)
        assert data.total_trainees == 12
        assert data.total_coordinators == 2
        assert data.total_supervisors == 0
        assert data.total_admins == 0
        assert data.recent_activities == [{"id": "a1", "title": "Created"}]


class TestCoordinatorDashboard:
    def test_stats_only_accept_real_numbers(self):
        row = {
            "dashboard_stats": {"total_students": 30, "total_sections": "3", "pending_requirements": 4.0},
            "section_progress": [
                {"program": "BSIT-4A", "progress_percentage": 50},
                {"program": "", "progress_percentage": 10},
                {"program": "BSIT-4B"},
            ],
        }
        data = transform_coordinator_dashboard(row)
        assert data.dashboard_stats.total_students == 30
        assert data.dashboard_stats.total_sections == 0
        assert data.dashboard_stats.pending_requirements == 4.0
        assert data.dashboard_stats.active_batches == 0
        assert data.section_progress == [{"program": "BSIT-4A", "progress_percentage": 50}]

    def test_stats_that_decode_to_a_list_are_ignored(self):
        data = transform_coordinator_dashboard({"dashboard_stats": "[1, 2]"})
        assert data.dashboard_stats.total_students == 0


class TestSupervisorDashboard:
    def test_field_mapping(self):
        row = {
            "supervisor_id": "s1",
            "supervisor_name": "Maria Santos",
            "company_name": None,
            "pending_weekly_reports": 3,
            "pending_evaluations": "2",
            "trainees_pending_evaluation": '[{"trainee_id": "t1"}, 5]',
        }
        data = transform_supervisor_dashboard(row)
        assert data.supervisor_name == "Maria Santos"
        assert data.company_name == ""
        assert data.total_pending_reports == 3
        assert data.pending_evaluations_count == 2
        assert data.trainees_pending_evaluation == [{"trainee_id": "t1"}]


class TestTraineeDashboard:
    def test_hours_attendance_and_lists(self):
        row = {
            "ojt_status": "active",
            "total_hours_logged": "120.5",
            "required_hours": 486,
            "attendance_rate_percentage": 130,
            "recent_attendance": [{"date": "2024-02-01", "status": "present"}, {"status": "absent"}],
            "weekly_attendance_chart": [{"day": "Mon", "date": "2024-02-05"}, {"day": "Tue"}],
            "recent_reports": [{"id": "r1"}, {}],
        }
        data = transform_trainee_dashboard(row)
        assert data.ojt_status == "active"
        assert data.hours.total == 120.5
        assert data.hours.required == 486
        assert data.attendance_rate_percentage == 100
        assert data.attendance.recent_entries == [{"date": "2024-02-01", "status": "present"}]
        assert data.attendance.weekly_chart == [{"day": "Mon", "date": "2024-02-05"}]
        assert data.recent_reports == [{"id": "r1"}]


class TestSectionDashboard:
    def test_completion_is_clamped_and_lists_filtered(self):
        row = {
            "total_trainees": 10,
            "completion_percentage": 150,
            "companies": [{"company_name": "Acme", "trainee_count": 2}, {"trainee_count": 1}],
            "job_roles": json.dumps(["Developer", "", 3, "QA"]),
        }
        data = transform_section_dashboard(row)
        assert data.total_trainees == 10
        assert data.completion_percentage == 100
        assert data.companies == [{"company_name": "Acme", "trainee_count": 2}]
        assert data.job_roles == ["Developer", "QA"]

    def test_negative_completion_is_clamped_to_zero(self):
        assert transform_section_dashboard({"completion_percentage": -5}).completion_percentage == 0
