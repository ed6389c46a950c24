"""
Supervisor review of trainee reports.

A report moves ``not submitted -> pending`` when the trainee submits it
(see ``trainee_reports``). From ``pending`` a supervisor either approves or
rejects it; no other transition is accepted here.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from sumikapp.core import monitoring
from sumikapp.core.database import utc_now
from sumikapp.core.database.entities import WeeklyReport, WeeklyReportEntry
from sumikapp.core.database.entities.reports import EntryBase, ReportBase
from sumikapp.core.errors import (
    InvalidStatusTransitionError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from sumikapp.core.logging_config import log_context
from sumikapp.core.models.domain.enums import (
    ActivityType,
    DocumentStatus,
    EntryStatus,
    NotificationType,
    Role,
)
from sumikapp.core.models.io.common import ActionResult
from sumikapp.core.models.io.reports import MAX_FEEDBACK_LENGTH, ReportEntryRead, ReportRead

from .activity import log_activity, notify
from .base import BaseService, logged_operation
from .lookups import internship_with_enrollment
from .report_tables import LOOKUP_ORDER, REPORT_TABLES, ReportTable

logger = logging.getLogger(__name__)


class UpdateTraineeReportService(BaseService):
    """Approve or reject a pending weekly, attendance or accomplishment report."""

    async def find_report(self, report_id: str) -> Tuple[ReportTable, ReportBase]:
        """Locate a report by id across the report tables."""
        for kind in LOOKUP_ORDER:
            table = REPORT_TABLES[kind]
            report = await self.session.get(table.report, report_id)
            if report is not None:
                return table, report
        raise NotFoundError("Report", report_id)

    async def approve_report(self, user_id: str, report_id: str) -> ActionResult:
        return await self._review(user_id, report_id, DocumentStatus.approved)

    async def reject_report(self, user_id: str, report_id: str) -> ActionResult:
        return await self._review(user_id, report_id, DocumentStatus.rejected)

    async def _review(self, user_id: str, report_id: str, target: DocumentStatus) -> ActionResult:
        action = "approve" if target is DocumentStatus.approved else "reject"
        ctx = log_context(f"trainee_report.{action}", user_id=user_id, report_id=report_id)
        logger.info(f"Reviewing trainee report ({action})...", extra={"ctx": ctx})

        with logged_operation(logger, f"Report {action}", ctx):
            table, report = await self.find_report(report_id)
            ctx["kind"] = table.kind.value

            internship, enrollment = await internship_with_enrollment(self.session, report.internship_id)
            if internship.supervisor_id != user_id:
                raise PermissionDeniedError("Only the trainee's assigned supervisor can review this report")

            if report.status != DocumentStatus.pending.value:
                raise InvalidStatusTransitionError(table.label, report.status, target)

            report.status = target.value
            if target is DocumentStatus.approved:
                report.supervisor_approved_at = utc_now()
            self.session.add(report)

            decision = "approved" if target is DocumentStatus.approved else "rejected"
            log_activity(
                self.session,
                user_id=user_id,
                user_role=Role.supervisor,
                activity_type=ActivityType.for_report(table.kind, decision),
                title=f"{table.label} {decision}",
                description=f"{table.label} for {report.start_date} to {report.end_date} was {decision}",
                reference_id=report.id,
                reference_type=f"{table.kind.value}_report",
                program_batch_id=enrollment.program_batch_id,
            )
            notify(
                self.session,
                user_id=enrollment.trainee_id,
                title=f"{table.label} {decision}",
                message=f"Your {table.label.lower()} for {report.start_date} to {report.end_date} was {decision}.",
                notification_type=NotificationType.report_status_change,
                reference_id=report.id,
            )
            await self.session.commit()
            await self.session.refresh(report)

        monitoring.log_review_event(f"{table.kind.value}_report", report.id, decision, user_id)
        logger.info(f"Trainee report {decision}", extra={"ctx": ctx})
        return ActionResult.ok(f"{table.label} successfully {decision}", ReportRead.model_validate(report))


class UpdateEntryStatusService(BaseService):
    """Change the attendance status of a single report entry."""

    async def find_entry(self, entry_id: str) -> Tuple[ReportTable, EntryBase]:
        for kind in LOOKUP_ORDER:
            table = REPORT_TABLES[kind]
            entry = await self.session.get(table.entry, entry_id)
            if entry is not None:
                return table, entry
        raise NotFoundError("Report entry", entry_id)

    async def update_status(self, user_id: str, entry_id: str, status: EntryStatus) -> ActionResult:
        ctx = log_context("report_entry.update_status", user_id=user_id, entry_id=entry_id, status=status.value)
        logger.info("Updating report entry status...", extra={"ctx": ctx})

        with logged_operation(logger, "Entry status update", ctx):
            table, entry = await self.find_entry(entry_id)
            report = await self.session.get(table.report, entry.report_id)
            if report is None:
                raise NotFoundError("Report", entry.report_id)
            internship, _ = await internship_with_enrollment(self.session, report.internship_id)
            if internship.supervisor_id != user_id:
                raise PermissionDeniedError("Only the trainee's assigned supervisor can update this entry")

            old_status = entry.status
            entry.status = status.value
            self.session.add(entry)
            await self.session.commit()

        logger.info(f"Entry status changed from {old_status} to {status.value}", extra={"ctx": ctx})
        return ActionResult.ok(
            "Entry status updated",
            {"entry_id": entry_id, "old_status": old_status, "new_status": status.value},
        )


class SubmitEntryFeedbackService(BaseService):
    """Attach supervisor feedback to a weekly report entry."""

    async def submit_feedback(self, user_id: str, entry_id: str, feedback: Optional[str]) -> ActionResult:
        ctx = log_context("report_entry.feedback", user_id=user_id, entry_id=entry_id)
        logger.info("Submitting entry feedback...", extra={"ctx": ctx})

        with logged_operation(logger, "Entry feedback", ctx):
            text = (feedback or "").strip()
            if not text:
                raise ValidationFailedError("Feedback cannot be empty")
            if len(text) > MAX_FEEDBACK_LENGTH:
                raise ValidationFailedError(f"Feedback cannot exceed {MAX_FEEDBACK_LENGTH} characters")

            entry = await self.session.get(WeeklyReportEntry, entry_id)
            if entry is None:
                raise NotFoundError("Weekly report entry", entry_id)
            report = await self.session.get(WeeklyReport, entry.report_id)
            if report is None:
                raise NotFoundError("Weekly report", entry.report_id)
            internship, _ = await internship_with_enrollment(self.session, report.internship_id)
            if internship.supervisor_id != user_id:
                raise PermissionDeniedError("Only the trainee's assigned supervisor can leave feedback")

            entry.feedback = text
            self.session.add(entry)
            await self.session.commit()
            await self.session.refresh(entry)

        logger.info("Entry feedback saved", extra={"ctx": ctx})
        return ActionResult.ok("Feedback submitted successfully", ReportEntryRead.model_validate(entry))
