"""
Trainee report lifecycle.

One service class handles all three report kinds; the kind selects the
report/entry tables from ``REPORT_TABLES``. Hour totals are rolled up after
every entry insert:

    period_total       = sum(entry.total_hours)
    total_hours_served = previous_total + period_total
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import List, Optional

from sqlalchemy import func
from sqlmodel import select

from sumikapp.core.database import utc_now
from sumikapp.core.database.entities import (
    InternshipDetails,
    ProgramBatch,
    TraineeBatchEnrollment,
    User,
)
from sumikapp.core.database.entities.reports import ReportBase
from sumikapp.core.errors import (
    InvalidStatusTransitionError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from sumikapp.core.logging_config import log_context
from sumikapp.core.models.domain.enums import ActivityType, DocumentStatus, ReportKind, Role
from sumikapp.core.models.io.common import ActionResult
from sumikapp.core.models.io.reports import (
    ReportDetail,
    ReportEntryCreate,
    ReportEntryRead,
    ReportRead,
    ReviewReportRead,
)

from .activity import log_activity
from .base import BaseService, logged_operation
from .lookups import internship_with_enrollment, latest_internship, owned_section, trainee_internships
from .report_tables import REPORT_TABLES

logger = logging.getLogger(__name__)

WEEKLY_REPORT_DAYS = 7

EDITABLE_STATUSES = (DocumentStatus.not_submitted.value, DocumentStatus.rejected.value)
LOCKED_STATUSES = (DocumentStatus.approved.value, DocumentStatus.pending.value)


class TraineeReportService(BaseService):
    """Create, fill, submit and delete a trainee's reports of one kind."""

    def __init__(self, session, kind: ReportKind):
        super().__init__(session)
        self.kind = kind
        self.table = REPORT_TABLES[kind]

    @property
    def _namespace(self) -> str:
        return f"{self.kind.value}_report"

    async def _own_report(self, user_id: str, report_id: str) -> ReportBase:
        report = await self.session.get(self.table.report, report_id)
        if report is None:
            raise NotFoundError(self.table.label, report_id)
        _, enrollment = await internship_with_enrollment(self.session, report.internship_id)
        if enrollment.trainee_id != user_id:
            raise PermissionDeniedError(f"{self.table.label} belongs to another trainee")
        return report

    async def _batch_id(self, internship_id: str) -> str:
        _, enrollment = await internship_with_enrollment(self.session, internship_id)
        return enrollment.program_batch_id

    async def create_report(self, user_id: str, start_date: date, end_date: date) -> ActionResult:
        """Open a new report period on the trainee's latest internship.

        ``previous_total`` carries over the hours served so far, taken from
        the most recent report's ``period_total``.
        """
        ctx = log_context(f"{self._namespace}.create", user_id=user_id, start_date=str(start_date))
        logger.info(f"Creating {self.table.label.lower()}...", extra={"ctx": ctx})

        with logged_operation(logger, f"{self.table.label} creation", ctx):
            if end_date < start_date:
                raise ValidationFailedError("End date must not be before start date")
            if self.kind is ReportKind.weekly and end_date - start_date != timedelta(days=WEEKLY_REPORT_DAYS - 1):
                raise ValidationFailedError(f"A weekly report must cover exactly {WEEKLY_REPORT_DAYS} days")

            internship = await latest_internship(self.session, user_id)
            model = self.table.report
            stmt = (
                select(model)
                .where(model.internship_id == internship.id)
                .order_by(model.created_at.desc())
            )
            previous = (await self.session.execute(stmt)).scalars().first()
            previous_total = previous.period_total if previous is not None else 0.0

            report = model(
                internship_id=internship.id,
                start_date=start_date,
                end_date=end_date,
                previous_total=previous_total,
                total_hours_served=previous_total,
            )
            self.session.add(report)
            log_activity(
                self.session,
                user_id=user_id,
                user_role=Role.trainee,
                activity_type=ActivityType.for_report(self.kind, "created"),
                title=f"{self.table.label} created",
                reference_id=report.id,
                reference_type=self._namespace,
                program_batch_id=await self._batch_id(internship.id),
            )
            await self.session.commit()
            await self.session.refresh(report)

        logger.info(f"{self.table.label} {report.id} created", extra={"ctx": ctx})
        return ActionResult.ok(f"{self.table.label} created successfully", ReportRead.model_validate(report))

    async def insert_entry(self, user_id: str, report_id: str, data: ReportEntryCreate) -> ActionResult:
        ctx = log_context(f"{self._namespace}.insert_entry", user_id=user_id, report_id=report_id)
        logger.info("Adding report entry...", extra={"ctx": ctx})

        with logged_operation(logger, "Report entry insert", ctx):
            report = await self._own_report(user_id, report_id)
            if report.status not in EDITABLE_STATUSES:
                raise InvalidStatusTransitionError(self.table.label, report.status, "edited")

            values = data.model_dump(exclude_none=True)
            values["status"] = data.status.value
            entry_fields = set(self.table.entry.model_fields)
            values = {key: value for key, value in values.items() if key in entry_fields}
            entry = self.table.entry(report_id=report.id, is_confirmed=True, **values)
            self.session.add(entry)
            await self.session.flush()

            await self._rollup(report)
            await self.session.commit()
            await self.session.refresh(entry)

        logger.info(f"Entry added; report total is now {report.total_hours_served}h", extra={"ctx": ctx})
        return ActionResult.ok("Entry added successfully", ReportEntryRead.model_validate(entry))

    async def _rollup(self, report: ReportBase) -> None:
        entry = self.table.entry
        stmt = select(func.coalesce(func.sum(entry.total_hours), 0.0)).where(entry.report_id == report.id)
        period_total = float((await self.session.execute(stmt)).scalar_one())
        report.period_total = round(period_total, 2)
        report.total_hours_served = round(report.previous_total + period_total, 2)
        self.session.add(report)

    async def submit_report(self, user_id: str, report_id: str) -> ActionResult:
        ctx = log_context(f"{self._namespace}.submit", user_id=user_id, report_id=report_id)
        logger.info(f"Submitting {self.table.label.lower()}...", extra={"ctx": ctx})

        with logged_operation(logger, f"{self.table.label} submission", ctx):
            report = await self._own_report(user_id, report_id)
            if report.status not in EDITABLE_STATUSES:
                raise InvalidStatusTransitionError(self.table.label, report.status, DocumentStatus.pending)

            report.status = DocumentStatus.pending.value
            report.submitted_at = utc_now()
            self.session.add(report)
            log_activity(
                self.session,
                user_id=user_id,
                user_role=Role.trainee,
                activity_type=ActivityType.for_report(self.kind, "submitted"),
                title=f"{self.table.label} submitted",
                reference_id=report.id,
                reference_type=self._namespace,
                program_batch_id=await self._batch_id(report.internship_id),
            )
            await self.session.commit()
            await self.session.refresh(report)

        logger.info(f"{self.table.label} submitted for review", extra={"ctx": ctx})
        return ActionResult.ok(f"{self.table.label} submitted successfully", ReportRead.model_validate(report))

    async def delete_report(self, user_id: str, report_id: str) -> ActionResult:
        ctx = log_context(f"{self._namespace}.delete", user_id=user_id, report_id=report_id)
        logger.info(f"Deleting {self.table.label.lower()}...", extra={"ctx": ctx})

        with logged_operation(logger, f"{self.table.label} deletion", ctx):
            report = await self._own_report(user_id, report_id)
            if report.status in LOCKED_STATUSES:
                raise InvalidStatusTransitionError(self.table.label, report.status, "deleted")

            program_batch_id = await self._batch_id(report.internship_id)
            entries = await self._entries(report.id)
            for entry in entries:
                await self.session.delete(entry)
            await self.session.delete(report)
            log_activity(
                self.session,
                user_id=user_id,
                user_role=Role.trainee,
                activity_type=ActivityType.for_report(self.kind, "deleted"),
                title=f"{self.table.label} deleted",
                reference_id=report_id,
                reference_type=self._namespace,
                program_batch_id=program_batch_id,
            )
            await self.session.commit()

        logger.info(f"{self.table.label} deleted with {len(entries)} entries", extra={"ctx": ctx})
        return ActionResult.ok(f"{self.table.label} deleted successfully")

    async def list_reports(self, user_id: str) -> List[ReportRead]:
        """The trainee's reports of this kind, newest first."""
        internship_ids = [internship.id for internship in await trainee_internships(self.session, user_id)]
        if not internship_ids:
            return []
        model = self.table.report
        stmt = select(model).where(model.internship_id.in_(internship_ids)).order_by(model.created_at.desc())
        result = await self.session.execute(stmt)
        return [ReportRead.model_validate(report) for report in result.scalars().all()]

    async def get_report(self, user_id: str, report_id: str) -> ReportDetail:
        report = await self._own_report(user_id, report_id)
        entries = await self._entries(report.id)
        detail = ReportDetail.model_validate(report)
        detail.entries = [ReportEntryRead.model_validate(entry) for entry in entries]
        return detail

    async def _entries(self, report_id: str):
        entry = self.table.entry
        stmt = select(entry).where(entry.report_id == report_id).order_by(entry.entry_date)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class ReviewReportService(BaseService):
    """Weekly reports as seen by reviewers."""

    def _base_query(self):
        table = REPORT_TABLES[ReportKind.weekly]
        return (
            select(table.report, InternshipDetails, TraineeBatchEnrollment, User)
            .join(InternshipDetails, table.report.internship_id == InternshipDetails.id)
            .join(TraineeBatchEnrollment, InternshipDetails.enrollment_id == TraineeBatchEnrollment.id)
            .join(User, TraineeBatchEnrollment.trainee_id == User.id)
        )

    @staticmethod
    def _to_read(row) -> ReviewReportRead:
        report, internship, enrollment, user = row
        data = ReportRead.model_validate(report).model_dump()
        return ReviewReportRead(
            **data,
            kind=ReportKind.weekly,
            trainee_id=enrollment.trainee_id,
            trainee_name=user.full_name,
            company_name=internship.company_name,
        )

    async def get_trainee_reports(
        self, supervisor_id: str, status: Optional[DocumentStatus] = None
    ) -> List[ReviewReportRead]:
        """Weekly reports of the trainees this supervisor is assigned to.

        Reports the trainee has not submitted yet are never listed.
        """
        table = REPORT_TABLES[ReportKind.weekly]
        stmt = self._base_query().where(InternshipDetails.supervisor_id == supervisor_id)
        if status is not None:
            stmt = stmt.where(table.report.status == status.value)
        else:
            stmt = stmt.where(table.report.status != DocumentStatus.not_submitted.value)
        stmt = stmt.order_by(table.report.submitted_at.desc())
        result = await self.session.execute(stmt)
        return [self._to_read(row) for row in result.all()]

    async def get_section_trainee_reports(
        self, coordinator_id: str, slug: str, status: Optional[DocumentStatus] = None
    ) -> List[ReviewReportRead]:
        table = REPORT_TABLES[ReportKind.weekly]
        section: ProgramBatch = await owned_section(self.session, coordinator_id, slug)
        stmt = self._base_query().where(TraineeBatchEnrollment.program_batch_id == section.id)
        if status is not None:
            stmt = stmt.where(table.report.status == status.value)
        stmt = stmt.order_by(table.report.start_date.desc())
        result = await self.session.execute(stmt)
        return [self._to_read(row) for row in result.all()]
