"""
Notification Endpoints.

In-app notifications for any signed-in user: review decisions, new
announcements and document submissions.
"""

from typing import List

from fastapi import APIRouter, Query

from sumikapp.core.models.io.common import ActionResult
from sumikapp.core.models.io.users import NotificationRead
from sumikapp.server.services.activity import NotificationService
from sumikapp.server.services.deps import CurrentUserDep, SessionDep

router = APIRouter()


@router.get(
    "",
    response_model=List[NotificationRead],
    summary="List Notifications",
    description="Retrieve the caller's notifications, newest first.",
)
async def list_notifications(
    current_user: CurrentUserDep,
    session: SessionDep,
    unread_only: bool = False,
    limit: int = Query(default=50, ge=1, le=200),
) -> List[NotificationRead]:
    rows = await NotificationService(session).list_notifications(current_user.id, unread_only, limit)
    return [NotificationRead.model_validate(row) for row in rows]


@router.post(
    "/read-all",
    response_model=ActionResult,
    summary="Mark All Notifications Read",
)
async def mark_all_read(current_user: CurrentUserDep, session: SessionDep) -> ActionResult:
    updated = await NotificationService(session).mark_all_read(current_user.id)
    return ActionResult.ok(f"{updated} notifications marked as read", {"updated": updated})


@router.post(
    "/{notification_id}/read",
    response_model=NotificationRead,
    summary="Mark Notification Read",
    responses={404: {"description": "Notification not found"}},
)
async def mark_read(notification_id: str, current_user: CurrentUserDep, session: SessionDep) -> NotificationRead:
    notification = await NotificationService(session).mark_read(current_user.id, notification_id)
    return NotificationRead.model_validate(notification)
