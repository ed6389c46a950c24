"""Unit tests for supervisor review of reports and report entries."""

from datetime import date, time
from unittest.mock import patch

import pytest
from sqlmodel import select

from sumikapp.core.database.entities import (
    AccomplishmentEntry,
    AccomplishmentReport,
    Notification,
    WeeklyReport,
    WeeklyReportEntry,
)
from sumikapp.core.errors import (
    InvalidStatusTransitionError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from sumikapp.core.models.domain.enums import DocumentStatus, EntryStatus, Role
from sumikapp.server.services.report_status import (
    SubmitEntryFeedbackService,
    UpdateEntryStatusService,
    UpdateTraineeReportService,
)

pytestmark = pytest.mark.asyncio


async def weekly_report(session, internship_id: str, status: DocumentStatus = DocumentStatus.pending) -> WeeklyReport:
    report = WeeklyReport(
        internship_id=internship_id,
        start_date=date(2024, 1, 15),
        end_date=date(2024, 1, 21),
        status=status.value,
    )
    session.add(report)
    await session.commit()
    return report


async def weekly_entry(session, report_id: str) -> WeeklyReportEntry:
    entry = WeeklyReportEntry(
        report_id=report_id,
        entry_date=date(2024, 1, 15),
        time_in=time(8, 0),
        time_out=time(17, 0),
        total_hours=9,
    )
    session.add(entry)
    await session.commit()
    return entry


class TestApproveAndReject:
    async def test_approve_pending_report(self, session, placement):
        report = await weekly_report(session, placement.internship.id)

        with patch("sumikapp.server.services.report_status.monitoring.log_review_event") as mock_event:
            result = await UpdateTraineeReportService(session).approve_report(placement.supervisor.id, report.id)

        assert result.message == "Weekly report successfully approved"
        assert result.data.status is DocumentStatus.approved
        assert result.data.supervisor_approved_at is not None
        mock_event.assert_called_once_with("weekly_report", report.id, "approved", placement.supervisor.id)

        notification = (await session.execute(select(Notification))).scalars().one()
        assert notification.user_id == placement.trainee.id
        assert notification.notification_type == "report status change"
        assert notification.reference_id == report.id

    async def test_reject_pending_report(self, session, placement):
        report = await weekly_report(session, placement.internship.id)

        result = await UpdateTraineeReportService(session).reject_report(placement.supervisor.id, report.id)

        assert result.message == "Weekly report successfully rejected"
        assert result.data.status is DocumentStatus.rejected
        assert result.data.supervisor_approved_at is None

    async def test_accomplishment_reports_are_found_too(self, session, placement):
        report = AccomplishmentReport(
            internship_id=placement.internship.id,
            start_date=date(2024, 1, 15),
            end_date=date(2024, 1, 31),
            status=DocumentStatus.pending.value,
        )
        session.add(report)
        await session.commit()

        result = await UpdateTraineeReportService(session).approve_report(placement.supervisor.id, report.id)
        assert result.message == "Accomplishment report successfully approved"

    @pytest.mark.parametrize(
        "status", [DocumentStatus.not_submitted, DocumentStatus.approved, DocumentStatus.rejected]
    )
    async def test_only_pending_reports_can_be_reviewed(self, session, placement, status):
        report = await weekly_report(session, placement.internship.id, status)

        with pytest.raises(InvalidStatusTransitionError):
            await UpdateTraineeReportService(session).approve_report(placement.supervisor.id, report.id)

    async def test_other_supervisor_is_denied(self, session, placement, seed):
        stranger = await seed.user(Role.supervisor)
        report = await weekly_report(session, placement.internship.id)

        with pytest.raises(PermissionDeniedError):
            await UpdateTraineeReportService(session).reject_report(stranger.id, report.id)

        await session.refresh(report)
        assert report.status == DocumentStatus.pending.value

    async def test_unknown_report(self, session, placement):
        with pytest.raises(NotFoundError):
            await UpdateTraineeReportService(session).approve_report(placement.supervisor.id, "missing")


class TestEntryStatus:
    async def test_update_status(self, session, placement):
        report = await weekly_report(session, placement.internship.id)
        entry = await weekly_entry(session, report.id)

        result = await UpdateEntryStatusService(session).update_status(
            placement.supervisor.id, entry.id, EntryStatus.late
        )

        assert result.data == {"entry_id": entry.id, "old_status": "present", "new_status": "late"}

    async def test_update_status_on_accomplishment_entry(self, session, placement):
        report = AccomplishmentReport(
            internship_id=placement.internship.id, start_date=date(2024, 1, 15), end_date=date(2024, 1, 31)
        )
        session.add(report)
        await session.flush()
        entry = AccomplishmentEntry(report_id=report.id, entry_date=date(2024, 1, 15), total_hours=8)
        session.add(entry)
        await session.commit()

        result = await UpdateEntryStatusService(session).update_status(
            placement.supervisor.id, entry.id, EntryStatus.holiday
        )
        assert result.data["new_status"] == "holiday"

    async def test_update_status_denied_for_other_supervisor(self, session, placement, seed):
        stranger = await seed.user(Role.supervisor)
        report = await weekly_report(session, placement.internship.id)
        entry = await weekly_entry(session, report.id)

        with pytest.raises(PermissionDeniedError):
            await UpdateEntryStatusService(session).update_status(stranger.id, entry.id, EntryStatus.absent)

    async def test_unknown_entry(self, session, placement):
        with pytest.raises(NotFoundError):
            await UpdateEntryStatusService(session).update_status(placement.supervisor.id, "x", EntryStatus.absent)


class TestEntryFeedback:
    async def test_feedback_is_trimmed_and_saved(self, session, placement):
        report = await weekly_report(session, placement.internship.id)
        entry = await weekly_entry(session, report.id)

        result = await SubmitEntryFeedbackService(session).submit_feedback(
            placement.supervisor.id, entry.id, "  Good work on the API docs.  "
        )

        assert result.message == "Feedback submitted successfully"
        assert result.data.feedback == "Good work on the API docs."

    @pytest.mark.parametrize("feedback", [None, "", "   ", "x" * 201])
    async def test_invalid_feedback(self, session, placement, feedback):
        report = await weekly_report(session, placement.internship.id)
        entry = await weekly_entry(session, report.id)

        with pytest.raises(ValidationFailedError):
            await SubmitEntryFeedbackService(session).submit_feedback(placement.supervisor.id, entry.id, feedback)

    async def test_feedback_at_limit_is_accepted(self, session, placement):
        report = await weekly_report(session, placement.internship.id)
        entry = await weekly_entry(session, report.id)

        result = await SubmitEntryFeedbackService(session).submit_feedback(
            placement.supervisor.id, entry.id, "x" * 200
        )
        assert len(result.data.feedback) == 200

    async def test_feedback_denied_for_other_supervisor(self, session, placement, seed):
        stranger = await seed.user(Role.supervisor)
        report = await weekly_report(session, placement.internship.id)
        entry = await weekly_entry(session, report.id)

        with pytest.raises(PermissionDeniedError):
            await SubmitEntryFeedbackService(session).submit_feedback(stranger.id, entry.id, "Nice")
