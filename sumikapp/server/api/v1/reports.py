"""
Trainee Report Endpoints.

Weekly, attendance and accomplishment reports share one lifecycle:
create for a date range, add daily entries, submit for review. The same set
of endpoints is mounted once per report kind.
"""

from typing import List

from fastapi import APIRouter, status

from sumikapp.core.models.domain.enums import ReportKind
from sumikapp.core.models.io.common import ActionResult
from sumikapp.core.models.io.reports import ReportCreate, ReportDetail, ReportEntryCreate, ReportRead
from sumikapp.server.services.deps import SessionDep, TraineeDep
from sumikapp.server.services.report_tables import REPORT_TABLES
from sumikapp.server.services.trainee_reports import TraineeReportService


def build_report_router(kind: ReportKind) -> APIRouter:
    """Create the CRUD, entry and submit endpoints for one report kind."""
    router = APIRouter()
    label = REPORT_TABLES[kind].label

    @router.get(
        "",
        response_model=List[ReportRead],
        summary=f"List {label}s",
        description=f"Retrieve the caller's {label.lower()}s across all their internships, newest first.",
    )
    async def list_reports(current_user: TraineeDep, session: SessionDep) -> List[ReportRead]:
        return await TraineeReportService(session, kind).list_reports(current_user.id)

    @router.post(
        "",
        response_model=ActionResult,
        status_code=status.HTTP_201_CREATED,
        summary=f"Create {label}",
        description=f"Open a new {label.lower()} for a date range on the caller's latest internship.",
        responses={
            404: {"description": "Caller has no internship"},
            422: {"description": "Invalid date range"},
        },
    )
    async def create_report(payload: ReportCreate, current_user: TraineeDep, session: SessionDep) -> ActionResult:
        return await TraineeReportService(session, kind).create_report(
            current_user.id, payload.start_date, payload.end_date
        )

    @router.get(
        "/{report_id}",
        response_model=ReportDetail,
        summary=f"Get {label}",
        description=f"Retrieve one {label.lower()} with its daily entries.",
        responses={403: {"description": "Report belongs to another trainee"}, 404: {"description": "Not found"}},
    )
    async def get_report(report_id: str, current_user: TraineeDep, session: SessionDep) -> ReportDetail:
        return await TraineeReportService(session, kind).get_report(current_user.id, report_id)

    @router.delete(
        "/{report_id}",
        response_model=ActionResult,
        summary=f"Delete {label}",
        description=f"Delete a {label.lower()} and its entries. Approved and pending reports are kept.",
        responses={409: {"description": "Report is under review or approved"}},
    )
    async def delete_report(report_id: str, current_user: TraineeDep, session: SessionDep) -> ActionResult:
        return await TraineeReportService(session, kind).delete_report(current_user.id, report_id)

    @router.post(
        "/{report_id}/entries",
        response_model=ActionResult,
        summary=f"Add {label} Entry",
        description="Insert a daily entry and recompute the report totals.",
        responses={409: {"description": "Report can no longer be edited"}},
    )
    async def insert_entry(
        report_id: str, payload: ReportEntryCreate, current_user: TraineeDep, session: SessionDep
    ) -> ActionResult:
        """
        Add a daily entry.

        Only reports that were never submitted, or were rejected, accept new
        entries. Period and running totals are recomputed on every insert.
        """
        return await TraineeReportService(session, kind).insert_entry(current_user.id, report_id, payload)

    @router.post(
        "/{report_id}/submit",
        response_model=ActionResult,
        summary=f"Submit {label}",
        description="Send the report to the supervisor for review.",
        responses={409: {"description": "Report is already pending or approved"}},
    )
    async def submit_report(report_id: str, current_user: TraineeDep, session: SessionDep) -> ActionResult:
        return await TraineeReportService(session, kind).submit_report(current_user.id, report_id)

    return router


weekly_router = build_report_router(ReportKind.weekly)
attendance_router = build_report_router(ReportKind.attendance)
accomplishment_router = build_report_router(ReportKind.accomplishment)
