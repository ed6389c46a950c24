"""
Report Review Endpoints.

Supervisors review the weekly reports of the trainees placed with them:
approve or reject whole reports, correct an entry's attendance status, and
leave short feedback on a day.
"""

from typing import List, Optional

from fastapi import APIRouter

from sumikapp.core.models.domain.enums import DocumentStatus
from sumikapp.core.models.io.common import ActionResult
from sumikapp.core.models.io.reports import EntryFeedback, EntryStatusUpdate, ReviewReportRead
from sumikapp.server.services.deps import SessionDep, SupervisorDep
from sumikapp.server.services.report_status import (
    SubmitEntryFeedbackService,
    UpdateEntryStatusService,
    UpdateTraineeReportService,
)
from sumikapp.server.services.trainee_reports import ReviewReportService

router = APIRouter()

_REVIEW_RESPONSES = {
    403: {"description": "Report belongs to a trainee the caller does not supervise"},
    404: {"description": "Report not found"},
    409: {"description": "Report is not pending review"},
}


@router.get(
    "",
    response_model=List[ReviewReportRead],
    summary="List Trainee Reports",
    description="Retrieve the submitted weekly reports of the caller's trainees, optionally filtered by status.",
)
async def list_review_reports(
    current_user: SupervisorDep, session: SessionDep, status: Optional[DocumentStatus] = None
) -> List[ReviewReportRead]:
    """
    List reports to review.

    Without a ``status`` filter every report except the ones still being
    drafted (``not submitted``) is returned, newest submission first.
    """
    return await ReviewReportService(session).get_trainee_reports(current_user.id, status)


@router.post(
    "/{report_id}/approve",
    response_model=ActionResult,
    summary="Approve Report",
    description="Approve a pending weekly, attendance or accomplishment report.",
    responses=_REVIEW_RESPONSES,
)
async def approve_report(report_id: str, current_user: SupervisorDep, session: SessionDep) -> ActionResult:
    return await UpdateTraineeReportService(session).approve_report(current_user.id, report_id)


@router.post(
    "/{report_id}/reject",
    response_model=ActionResult,
    summary="Reject Report",
    description="Reject a pending report so the trainee can correct and resubmit it.",
    responses=_REVIEW_RESPONSES,
)
async def reject_report(report_id: str, current_user: SupervisorDep, session: SessionDep) -> ActionResult:
    return await UpdateTraineeReportService(session).reject_report(current_user.id, report_id)


@router.patch(
    "/entries/{entry_id}/status",
    response_model=ActionResult,
    summary="Update Entry Status",
    description="Change the attendance status (present, absent, late, holiday) of one report entry.",
    responses={403: {"description": "Entry belongs to another supervisor's trainee"}},
)
async def update_entry_status(
    entry_id: str, payload: EntryStatusUpdate, current_user: SupervisorDep, session: SessionDep
) -> ActionResult:
    return await UpdateEntryStatusService(session).update_status(current_user.id, entry_id, payload.status)


@router.patch(
    "/entries/{entry_id}/feedback",
    response_model=ActionResult,
    summary="Submit Entry Feedback",
    description="Attach feedback (at most 200 characters) to a weekly report entry.",
    responses={
        403: {"description": "Entry belongs to another supervisor's trainee"},
        422: {"description": "Feedback is empty or too long"},
    },
)
async def submit_entry_feedback(
    entry_id: str, payload: EntryFeedback, current_user: SupervisorDep, session: SessionDep
) -> ActionResult:
    return await SubmitEntryFeedbackService(session).submit_feedback(current_user.id, entry_id, payload.feedback)
