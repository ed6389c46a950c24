"""
Role dashboards and the section overview.

Each dashboard is computed in two steps. First a raw row is assembled from
table aggregates, keyed like the reporting views the frontend was built
against. Then the row goes through the matching ``sumikapp.dashboards``
transformer. A database error while assembling the row degrades to the
empty dashboard instead of failing the page.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Union

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from sumikapp.core.database.entities import (
    Announcement,
    BatchRequirement,
    Evaluation,
    IndustryPartner,
    InternshipDetails,
    ProgramBatch,
    RecentActivity,
    Requirement,
    Supervisor,
    TraineeBatchEnrollment,
    User,
    WeeklyReport,
    WeeklyReportEntry,
)
from sumikapp.core.logging_config import log_context
from sumikapp.core.models.domain.enums import DocumentStatus, EntryStatus, OJTStatus, Role
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

from .auth import CurrentUser
from .base import BaseService
from .lookups import latest_enrollment, owned_section, trainee_internships
from .requirements import current_status, document_histories

logger = logging.getLogger(__name__)

RECENT_ACTIVITY_LIMIT = 10
RECENT_ITEMS_LIMIT = 5

DashboardData = Union[AdminDashboardData, CoordinatorDashboardData, SupervisorDashboardData, TraineeDashboardData]


def progress_percentage(start: date, end: date, today: date) -> float:
    """Share of the ``start``..``end`` range elapsed on ``today``, clamped to 0-100."""
    span = (end - start).days
    if span <= 0:
        return 100.0 if today >= end else 0.0
    elapsed = (today - start).days / span * 100
    return round(max(0.0, min(100.0, elapsed)), 2)


def _activity_items(rows: Iterable[RecentActivity]) -> List[Dict[str, Any]]:
    return [
        {
            "id": row.id,
            "title": row.activity_title,
            "description": row.activity_description,
            "type": row.activity_type,
            "timestamp": row.activity_timestamp.isoformat(),
        }
        for row in rows
    ]


class DashboardService(BaseService):
    async def get_dashboard(self, user: CurrentUser, today: date) -> Optional[DashboardData]:
        """Dispatch on the caller's role."""
        if user.role is Role.admin:
            return await self.admin_dashboard()
        if user.role is Role.coordinator:
            return await self.coordinator_dashboard(user.id, today)
        if user.role is Role.supervisor:
            return await self.supervisor_dashboard(user.id)
        return await self.trainee_dashboard(user.id)

    async def _scalars(self, stmt) -> List[Any]:
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def _recent_activities(self, *conditions) -> List[Dict[str, Any]]:
        stmt = (
            select(RecentActivity)
            .where(RecentActivity.is_deleted == False, *conditions)  # noqa: E712
            .order_by(RecentActivity.activity_timestamp.desc())
            .limit(RECENT_ACTIVITY_LIMIT)
        )
        return _activity_items(await self._scalars(stmt))

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    async def admin_dashboard(self) -> AdminDashboardData:
        ctx = log_context("dashboard.admin")
        try:
            row = await self._admin_row()
        except SQLAlchemyError:
            logger.exception("Failed to build admin dashboard, using defaults", extra={"ctx": ctx})
            return AdminDashboardData()
        return transform_admin_dashboard(row)

    async def _admin_row(self) -> Dict[str, Any]:
        counts = await self.session.execute(
            select(User.role, func.count(User.id)).where(User.is_deleted == False).group_by(User.role)  # noqa: E712
        )
        by_role = {role: count for role, count in counts.all()}
        partners = await self.session.execute(select(func.count(IndustryPartner.id)))
        return {
            "total_trainees": by_role.get(Role.trainee.value, 0),
            "total_coordinators": by_role.get(Role.coordinator.value, 0),
            "total_supervisors": by_role.get(Role.supervisor.value, 0),
            "total_admins": by_role.get(Role.admin.value, 0),
            "total_industry_partners": partners.scalar_one(),
            "recent_activities": await self._recent_activities(),
        }

    # ------------------------------------------------------------------
    # Coordinator
    # ------------------------------------------------------------------

    async def coordinator_dashboard(self, coordinator_id: str, today: date) -> CoordinatorDashboardData:
        ctx = log_context("dashboard.coordinator", user_id=coordinator_id)
        try:
            row = await self._coordinator_row(coordinator_id, today)
        except SQLAlchemyError:
            logger.exception("Failed to build coordinator dashboard, using defaults", extra={"ctx": ctx})
            return CoordinatorDashboardData()
        return transform_coordinator_dashboard(row)

    async def _coordinator_row(self, coordinator_id: str, today: date) -> Dict[str, Any]:
        sections = await self._scalars(
            select(ProgramBatch)
            .where(ProgramBatch.coordinator_id == coordinator_id)
            .order_by(ProgramBatch.start_date.desc())
        )
        section_ids = [section.id for section in sections]

        students = 0
        pending = 0
        if section_ids:
            students = (
                await self.session.execute(
                    select(func.count(func.distinct(TraineeBatchEnrollment.trainee_id))).where(
                        TraineeBatchEnrollment.program_batch_id.in_(section_ids)
                    )
                )
            ).scalar_one()
            document_ids = await self._scalars(
                select(Requirement.id)
                .join(BatchRequirement, Requirement.batch_requirement_id == BatchRequirement.id)
                .where(BatchRequirement.program_batch_id.in_(section_ids))
            )
            histories = await document_histories(self.session, document_ids)
            pending = sum(1 for history in histories.values() if current_status(history) is DocumentStatus.pending)

        activities = await self._recent_activities(
            (RecentActivity.user_id == coordinator_id) | RecentActivity.program_batch_id.in_(section_ids)
        )
        return {
            "dashboard_stats": {
                "total_students": students,
                "total_sections": len(sections),
                "pending_requirements": pending,
                "active_batches": sum(1 for s in sections if s.start_date <= today <= s.end_date),
            },
            "recent_activities": activities,
            "section_progress": [
                {
                    "id": section.id,
                    "program": section.title,
                    "internship_code": section.internship_code,
                    "progress_percentage": progress_percentage(section.start_date, section.end_date, today),
                }
                for section in sections
            ],
        }

    # ------------------------------------------------------------------
    # Supervisor
    # ------------------------------------------------------------------

    async def supervisor_dashboard(self, supervisor_id: str) -> Optional[SupervisorDashboardData]:
        """Supervisor dashboard, or ``None`` when the caller has no supervisor profile."""
        ctx = log_context("dashboard.supervisor", user_id=supervisor_id)
        try:
            row = await self._supervisor_row(supervisor_id)
        except SQLAlchemyError:
            logger.exception("Failed to build supervisor dashboard, using defaults", extra={"ctx": ctx})
            return SupervisorDashboardData(supervisor_id=supervisor_id)
        if row is None:
            return None
        return transform_supervisor_dashboard(row)

    async def _supervisor_row(self, supervisor_id: str) -> Optional[Dict[str, Any]]:
        profile = await self.session.get(Supervisor, supervisor_id)
        user = await self.session.get(User, supervisor_id)
        if profile is None or user is None:
            return None

        rows = (
            await self.session.execute(
                select(InternshipDetails, TraineeBatchEnrollment, User)
                .join(TraineeBatchEnrollment, InternshipDetails.enrollment_id == TraineeBatchEnrollment.id)
                .join(User, TraineeBatchEnrollment.trainee_id == User.id)
                .where(
                    InternshipDetails.supervisor_id == supervisor_id,
                    InternshipDetails.status == DocumentStatus.approved.value,
                    User.is_deleted == False,  # noqa: E712
                )
            )
        ).all()
        internship_ids = [internship.id for internship, _, _ in rows]
        statuses = Counter(enrollment.ojt_status for _, enrollment, _ in rows)

        pending_reports = 0
        evaluated = set()
        if internship_ids:
            pending_reports = (
                await self.session.execute(
                    select(func.count(WeeklyReport.id)).where(
                        WeeklyReport.internship_id.in_(internship_ids),
                        WeeklyReport.status == DocumentStatus.pending.value,
                    )
                )
            ).scalar_one()
            evaluated = set(
                await self._scalars(
                    select(Evaluation.internship_id).where(Evaluation.internship_id.in_(internship_ids))
                )
            )
        pending_evaluation = [
            {"trainee_id": trainee.id, "trainee_name": trainee.full_name, "job_role": internship.job_role}
            for internship, _, trainee in rows
            if internship.id not in evaluated
        ]
        return {
            "supervisor_id": supervisor_id,
            "supervisor_name": user.full_name,
            "supervisor_email": user.email,
            "company_name": profile.company_name,
            "department": profile.department,
            "position": profile.position,
            "total_active_trainees": len(rows),
            "currently_active_trainees": statuses.get(OJTStatus.active.value, 0),
            "completed_trainees": statuses.get(OJTStatus.completed.value, 0),
            "pending_weekly_reports": pending_reports,
            "pending_evaluations": len(pending_evaluation),
            "recent_activities": await self._recent_activities(RecentActivity.user_id == supervisor_id),
            "trainees_pending_evaluation": pending_evaluation,
        }

    # ------------------------------------------------------------------
    # Trainee
    # ------------------------------------------------------------------

    async def trainee_dashboard(self, trainee_id: str) -> TraineeDashboardData:
        ctx = log_context("dashboard.trainee", user_id=trainee_id)
        try:
            row = await self._trainee_row(trainee_id)
        except SQLAlchemyError:
            logger.exception("Failed to build trainee dashboard, using defaults", extra={"ctx": ctx})
            return TraineeDashboardData()
        return transform_trainee_dashboard(row)

    async def _trainee_row(self, trainee_id: str) -> Dict[str, Any]:
        enrollment = await latest_enrollment(self.session, trainee_id)
        section = await self.session.get(ProgramBatch, enrollment.program_batch_id) if enrollment else None
        internships = await trainee_internships(self.session, trainee_id)
        internship_ids = [internship.id for internship in internships]

        reports: List[WeeklyReport] = []
        entries: List[WeeklyReportEntry] = []
        if internship_ids:
            reports = await self._scalars(
                select(WeeklyReport)
                .where(WeeklyReport.internship_id.in_(internship_ids))
                .order_by(WeeklyReport.start_date.desc())
            )
        if reports:
            entries = await self._scalars(
                select(WeeklyReportEntry)
                .where(WeeklyReportEntry.report_id.in_([report.id for report in reports]))
                .order_by(WeeklyReportEntry.entry_date.desc())
            )

        by_status = Counter(report.status for report in reports)
        counted = [entry for entry in entries if entry.status != EntryStatus.holiday.value]
        attended = [entry for entry in counted if entry.status in (EntryStatus.present.value, EntryStatus.late.value)]
        attendance_rate = round(len(attended) / len(counted) * 100, 2) if counted else 0

        announcements: List[Dict[str, Any]] = []
        if section is not None:
            rows = await self._scalars(
                select(Announcement)
                .where(Announcement.program_batch_id == section.id)
                .order_by(Announcement.created_at.desc())
                .limit(RECENT_ITEMS_LIMIT)
            )
            announcements = [
                {"id": row.id, "title": row.title, "content": row.content, "created_at": row.created_at.isoformat()}
                for row in rows
            ]

        return {
            "ojt_status": enrollment.ojt_status if enrollment else None,
            "total_hours_logged": round(sum(entry.total_hours for entry in entries), 2),
            "required_hours": section.required_hours if section else 0,
            "attendance_rate_percentage": attendance_rate,
            "total_submitted_reports": sum(1 for r in reports if r.status != DocumentStatus.not_submitted.value),
            "approved_weekly_reports": by_status.get(DocumentStatus.approved.value, 0),
            "rejected_weekly_reports": by_status.get(DocumentStatus.rejected.value, 0),
            "pending_weekly_reports": by_status.get(DocumentStatus.pending.value, 0),
            "total_weekly_reports": len(reports),
            "recent_attendance": [
                {"date": entry.entry_date.isoformat(), "status": entry.status, "hours": entry.total_hours}
                for entry in entries[:RECENT_ITEMS_LIMIT]
            ],
            "weekly_attendance_chart": [
                {
                    "day": entry.entry_date.strftime("%a"),
                    "date": entry.entry_date.isoformat(),
                    "hours": entry.total_hours,
                }
                for entry in reversed(entries[:7])
            ],
            "recent_activities": await self._recent_activities(RecentActivity.user_id == trainee_id),
            "announcements": announcements,
            "recent_reports": [
                {
                    "id": report.id,
                    "start_date": report.start_date.isoformat(),
                    "end_date": report.end_date.isoformat(),
                    "status": report.status,
                    "period_total": report.period_total,
                }
                for report in reports[:RECENT_ITEMS_LIMIT]
            ],
        }

    # ------------------------------------------------------------------
    # Section overview
    # ------------------------------------------------------------------

    async def section_overview(self, coordinator_id: str, slug: str, today: date) -> SectionDashboardData:
        section = await owned_section(self.session, coordinator_id, slug)
        ctx = log_context("dashboard.section", user_id=coordinator_id, program_batch_id=section.id)
        try:
            row = await self._section_row(section, today)
        except SQLAlchemyError:
            logger.exception("Failed to build section overview, using defaults", extra={"ctx": ctx})
            return SectionDashboardData()
        return transform_section_dashboard(row)

    async def _section_row(self, section: ProgramBatch, today: date) -> Dict[str, Any]:
        enrollment_statuses = await self._scalars(
            select(TraineeBatchEnrollment.ojt_status).where(TraineeBatchEnrollment.program_batch_id == section.id)
        )
        trainees = Counter(enrollment_statuses)
        mandatory = await self._scalars(
            select(BatchRequirement.is_mandatory).where(BatchRequirement.program_batch_id == section.id)
        )
        internships = await self._scalars(
            select(InternshipDetails)
            .join(TraineeBatchEnrollment, InternshipDetails.enrollment_id == TraineeBatchEnrollment.id)
            .where(TraineeBatchEnrollment.program_batch_id == section.id)
        )
        forms = Counter(internship.status for internship in internships)
        placed = [internship for internship in internships if internship.status == DocumentStatus.approved.value]
        companies = Counter(internship.company_name for internship in placed)

        reports: List[WeeklyReport] = []
        hours = 0.0
        if internships:
            reports = await self._scalars(
                select(WeeklyReport).where(WeeklyReport.internship_id.in_([i.id for i in internships]))
            )
        if reports:
            hours = (
                await self.session.execute(
                    select(func.coalesce(func.sum(WeeklyReportEntry.total_hours), 0)).where(
                        WeeklyReportEntry.report_id.in_([report.id for report in reports])
                    )
                )
            ).scalar_one()
        report_statuses = Counter(report.status for report in reports)
        total_trainees = len(enrollment_statuses)

        return {
            "total_trainees": total_trainees,
            "active_trainees": trainees.get(OJTStatus.active.value, 0),
            "completed_trainees": trainees.get(OJTStatus.completed.value, 0),
            "dropped_trainees": trainees.get(OJTStatus.dropped.value, 0),
            "not_started_trainees": trainees.get(OJTStatus.not_started.value, 0),
            "total_requirements": len(mandatory),
            "mandatory_requirements": sum(1 for flag in mandatory if flag),
            "optional_requirements": sum(1 for flag in mandatory if not flag),
            "total_internship_forms": len(internships),
            "approved_internship_forms": forms.get(DocumentStatus.approved.value, 0),
            "pending_internship_forms": forms.get(DocumentStatus.pending.value, 0),
            "rejected_internship_forms": forms.get(DocumentStatus.rejected.value, 0),
            "total_companies": len(companies),
            "companies": [{"company_name": name, "trainee_count": count} for name, count in companies.most_common()],
            "job_roles": sorted({internship.job_role for internship in placed}),
            "total_hours_logged": round(float(hours), 2),
            "avg_hours_per_trainee": round(float(hours) / total_trainees, 2) if total_trainees else 0,
            "completion_percentage": progress_percentage(section.start_date, section.end_date, today),
            "total_weekly_reports": len(reports),
            "approved_weekly_reports": report_statuses.get(DocumentStatus.approved.value, 0),
            "pending_weekly_reports": report_statuses.get(DocumentStatus.pending.value, 0),
            "rejected_weekly_reports": report_statuses.get(DocumentStatus.rejected.value, 0),
            "recent_activities": await self._recent_activities(RecentActivity.program_batch_id == section.id),
        }
