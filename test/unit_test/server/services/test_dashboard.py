"""Unit tests for the role dashboards and the section overview."""

from datetime import date, time
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from sumikapp.core.database.entities import Announcement, IndustryPartner, WeeklyReport, WeeklyReportEntry
from sumikapp.core.errors import NotFoundError
from sumikapp.core.models.domain.enums import DocumentStatus, EntryStatus, Role
from sumikapp.core.models.io.requirements import RequirementUpload
from sumikapp.dashboards import (
    AdminDashboardData,
    CoordinatorDashboardData,
    SupervisorDashboardData,
    TraineeDashboardData,
)
from sumikapp.server.services.auth import CurrentUser
from sumikapp.server.services.dashboard import DashboardService, progress_percentage
from sumikapp.server.services.requirements import TraineeRequirementService

pytestmark = pytest.mark.asyncio

TODAY = date(2024, 3, 1)


async def report_with_entries(session, internship_id, statuses, status=DocumentStatus.pending) -> WeeklyReport:
    report = WeeklyReport(
        internship_id=internship_id,
        start_date=date(2024, 1, 15),
        end_date=date(2024, 1, 21),
        status=status.value,
    )
    session.add(report)
    await session.flush()
    for offset, entry_status in enumerate(statuses):
        hours = 0 if entry_status in (EntryStatus.absent, EntryStatus.holiday) else 8
        session.add(
            WeeklyReportEntry(
                report_id=report.id,
                entry_date=date(2024, 1, 15 + offset),
                time_in=time(8, 0),
                time_out=time(16, 0),
                total_hours=hours,
                status=entry_status.value,
            )
        )
    await session.commit()
    return report


class TestProgressPercentage:
    @pytest.mark.parametrize(
        ("today", "expected"),
        [
            (date(2024, 1, 6), 50.0),
            (date(2023, 12, 1), 0.0),
            (date(2024, 2, 1), 100.0),
            (date(2024, 1, 1), 0.0),
        ],
    )
    async def test_clamped_share_of_elapsed_days(self, today, expected):
        assert progress_percentage(date(2024, 1, 1), date(2024, 1, 11), today) == expected

    async def test_empty_range(self):
        assert progress_percentage(date(2024, 1, 1), date(2024, 1, 1), date(2024, 1, 1)) == 100.0
        assert progress_percentage(date(2024, 1, 1), date(2024, 1, 1), date(2023, 12, 31)) == 0.0


class TestTraineeDashboard:
    async def test_hours_attendance_and_reports(self, session, placement):
        await report_with_entries(
            session,
            placement.internship.id,
            [EntryStatus.present, EntryStatus.late, EntryStatus.absent, EntryStatus.holiday],
        )
        await report_with_entries(session, placement.internship.id, [], status=DocumentStatus.approved)
        session.add(
            Announcement(
                program_batch_id=placement.section.id,
                title="Orientation",
                content="Monday 9AM, AVR",
                created_by=placement.coordinator.id,
            )
        )
        await session.commit()

        data = await DashboardService(session).trainee_dashboard(placement.trainee.id)

        assert data.ojt_status == "active"
        assert data.hours.total == 16
        assert data.hours.required == 486
        assert data.attendance_rate_percentage == pytest.approx(66.67)
        assert data.total_weekly_reports == 2
        assert data.pending_weekly_reports == 1
        assert data.approved_weekly_reports == 1
        assert data.total_submitted_reports == 2
        assert len(data.attendance.recent_entries) == 4
        assert [day["day"] for day in data.attendance.weekly_chart] == ["Mon", "Tue", "Wed", "Thu"]
        assert [item["title"] for item in data.announcements] == ["Orientation"]

    async def test_trainee_without_enrollment_gets_empty_dashboard(self, session, seed):
        trainee = await seed.user(Role.trainee)

        data = await DashboardService(session).trainee_dashboard(trainee.id)

        assert data == TraineeDashboardData()

    async def test_database_error_falls_back_to_defaults(self, session, placement):
        service = DashboardService(session)
        failure = OperationalError("SELECT 1", {}, Exception("connection lost"))

        with patch.object(service, "_trainee_row", AsyncMock(side_effect=failure)):
            data = await service.trainee_dashboard(placement.trainee.id)

        assert data == TraineeDashboardData()


class TestCoordinatorDashboard:
    async def test_stats_and_section_progress(self, session, placement, seed):
        slot = await seed.requirement_slot(placement.section)
        await TraineeRequirementService(session).upload_requirement(
            placement.trainee.id,
            RequirementUpload(
                batch_requirement_id=slot.id,
                file_name="medical.pdf",
                file_path="requirements/medical.pdf",
                file_size=1024,
                file_type="application/pdf",
            ),
        )

        data = await DashboardService(session).coordinator_dashboard(placement.coordinator.id, TODAY)

        stats = data.dashboard_stats
        assert (stats.total_students, stats.total_sections, stats.pending_requirements, stats.active_batches) == (
            1,
            1,
            1,
            1,
        )
        assert data.section_progress[0]["program"] == "BSIT-4A"
        assert 0 < data.section_progress[0]["progress_percentage"] < 100
        assert data.recent_activities

    async def test_coordinator_without_sections(self, session, seed):
        coordinator = await seed.user(Role.coordinator)

        data = await DashboardService(session).coordinator_dashboard(coordinator.id, TODAY)

        assert data == CoordinatorDashboardData()


class TestSupervisorDashboard:
    async def test_supervised_trainees(self, session, placement):
        await report_with_entries(session, placement.internship.id, [EntryStatus.present])

        data = await DashboardService(session).supervisor_dashboard(placement.supervisor.id)

        assert isinstance(data, SupervisorDashboardData)
        assert data.supervisor_email == "boss@acme.example.com"
        assert data.company_name == "Acme Corp"
        assert data.total_active_trainees == 1
        assert data.currently_active_trainees == 1
        assert data.total_pending_reports == 1
        assert data.pending_evaluations_count == 1
        assert data.trainees_pending_evaluation[0]["trainee_name"] == "Juan Dela Cruz"

    async def test_missing_profile_returns_none(self, session, placement):
        assert await DashboardService(session).supervisor_dashboard(placement.coordinator.id) is None


class TestAdminDashboard:
    async def test_counts(self, session, placement):
        session.add(IndustryPartner(company_name="Acme Corp"))
        await session.commit()

        data = await DashboardService(session).admin_dashboard()

        assert (data.total_trainees, data.total_coordinators, data.total_supervisors, data.total_admins) == (
            1,
            1,
            1,
            0,
        )
        assert data.total_industry_partners == 1

    async def test_dispatch_on_role(self, session, seed):
        admin = await seed.user(Role.admin)

        data = await DashboardService(session).get_dashboard(CurrentUser(user=admin), TODAY)

        assert isinstance(data, AdminDashboardData)
        assert data.total_admins == 1


class TestSectionOverview:
    async def test_overview(self, session, placement, seed):
        await seed.requirement_slot(placement.section)
        await report_with_entries(session, placement.internship.id, [EntryStatus.present, EntryStatus.present])

        data = await DashboardService(session).section_overview(placement.coordinator.id, "BSIT-4A", TODAY)

        assert data.total_trainees == 1
        assert data.active_trainees == 1
        assert data.total_requirements == 1
        assert data.mandatory_requirements == 1
        assert data.approved_internship_forms == 1
        assert data.companies == [{"company_name": "Acme Corp", "trainee_count": 1}]
        assert data.job_roles == ["Software Developer"]
        assert data.total_hours_logged == 16
        assert data.avg_hours_per_trainee == 16
        assert data.pending_weekly_reports == 1

    async def test_unknown_slug(self, session, placement):
        with pytest.raises(NotFoundError):
            await DashboardService(session).section_overview(placement.coordinator.id, "BSCS-1A", TODAY)
