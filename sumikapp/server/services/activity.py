"""
Recent activity feed and notifications.

``log_activity`` and ``notify`` only stage rows on the session; the calling
service commits them together with the change they describe.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from sumikapp.core.database.entities import Notification, RecentActivity
from sumikapp.core.errors import NotFoundError
from sumikapp.core.logging_config import log_context
from sumikapp.core.models.domain.enums import ActivityType, NotificationType, Role

from .base import BaseService

logger = logging.getLogger(__name__)


def log_activity(
    session: AsyncSession,
    *,
    user_id: str,
    user_role: Role,
    activity_type: ActivityType,
    title: str,
    reference_id: Optional[str] = None,
    reference_type: Optional[str] = None,
    description: Optional[str] = None,
    program_batch_id: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> RecentActivity:
    """Stage a ``recent_activity`` row on ``session``."""
    activity = RecentActivity(
        user_id=user_id,
        user_role=user_role.value,
        activity_type=activity_type.value,
        activity_title=title,
        activity_description=description,
        reference_id=reference_id,
        reference_type=reference_type,
        program_batch_id=program_batch_id,
        activity_metadata=json.dumps(metadata) if metadata else None,
    )
    session.add(activity)
    logger.debug(f"Recorded activity {activity_type.value} for user {user_id}")
    return activity


def notify(
    session: AsyncSession,
    *,
    user_id: str,
    title: str,
    message: str,
    notification_type: NotificationType,
    reference_id: Optional[str] = None,
) -> Notification:
    """Stage a notification for ``user_id`` on ``session``."""
    notification = Notification(
        user_id=user_id,
        title=title,
        message=message,
        notification_type=notification_type.value,
        reference_id=reference_id,
    )
    session.add(notification)
    return notification


class NotificationService(BaseService):
    """Read and acknowledge the caller's notifications."""

    async def list_notifications(self, user_id: str, unread_only: bool = False, limit: int = 50) -> List[Notification]:
        stmt = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            stmt = stmt.where(Notification.is_read == False)  # noqa: E712
        stmt = stmt.order_by(Notification.created_at.desc()).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def mark_read(self, user_id: str, notification_id: str) -> Notification:
        notification = await self.session.get(Notification, notification_id)
        if notification is None or notification.user_id != user_id:
            raise NotFoundError("Notification", notification_id)
        notification.is_read = True
        self.session.add(notification)
        await self.session.commit()
        await self.session.refresh(notification)
        return notification

    async def mark_all_read(self, user_id: str) -> int:
        ctx = log_context("notification.mark_all_read", user_id=user_id)
        stmt = (
            update(Notification)
            .where(Notification.user_id == user_id, Notification.is_read == False)  # noqa: E712
            .values(is_read=True)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        logger.info(f"Marked {result.rowcount} notifications as read", extra={"ctx": ctx})
        return result.rowcount or 0
