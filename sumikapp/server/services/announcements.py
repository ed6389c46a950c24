"""
Section announcements.
"""

from __future__ import annotations

import logging
from typing import List

from sqlmodel import select

from sumikapp.core.database import utc_now
from sumikapp.core.database.entities import Announcement, TraineeBatchEnrollment
from sumikapp.core.errors import NotFoundError
from sumikapp.core.logging_config import log_context
from sumikapp.core.models.domain.enums import ActivityType, NotificationType, Role
from sumikapp.core.models.io.common import ActionResult
from sumikapp.core.models.io.sections import AnnouncementCreate, AnnouncementRead, AnnouncementUpdate

from .activity import log_activity, notify
from .base import BaseService, logged_operation
from .lookups import owned_section

logger = logging.getLogger(__name__)


class AnnouncementService(BaseService):
    async def _get(self, section_id: str, announcement_id: str) -> Announcement:
        announcement = await self.session.get(Announcement, announcement_id)
        if announcement is None or announcement.program_batch_id != section_id:
            raise NotFoundError("Announcement", announcement_id)
        return announcement

    async def list_announcements(self, coordinator_id: str, slug: str) -> List[AnnouncementRead]:
        section = await owned_section(self.session, coordinator_id, slug)
        stmt = (
            select(Announcement)
            .where(Announcement.program_batch_id == section.id)
            .order_by(Announcement.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return [AnnouncementRead.model_validate(row) for row in result.scalars().all()]

    async def create_announcement(self, coordinator_id: str, slug: str, data: AnnouncementCreate) -> ActionResult:
        """Post an announcement and notify every trainee enrolled in the section."""
        ctx = log_context("announcement.create", user_id=coordinator_id, slug=slug)
        logger.info("Creating announcement...", extra={"ctx": ctx})

        with logged_operation(logger, "Announcement creation", ctx):
            section = await owned_section(self.session, coordinator_id, slug)
            announcement = Announcement(
                program_batch_id=section.id,
                title=data.title,
                content=data.content,
                created_by=coordinator_id,
            )
            self.session.add(announcement)

            trainee_ids = await self.session.execute(
                select(TraineeBatchEnrollment.trainee_id).where(TraineeBatchEnrollment.program_batch_id == section.id)
            )
            recipients = list(trainee_ids.scalars().all())
            for trainee_id in recipients:
                notify(
                    self.session,
                    user_id=trainee_id,
                    title=f"New announcement in {section.title}",
                    message=data.title,
                    notification_type=NotificationType.program_announcement,
                    reference_id=announcement.id,
                )
            log_activity(
                self.session,
                user_id=coordinator_id,
                user_role=Role.coordinator,
                activity_type=ActivityType.batch_announcement_posted,
                title=data.title,
                reference_id=announcement.id,
                reference_type="announcement",
                program_batch_id=section.id,
            )
            await self.session.commit()
            await self.session.refresh(announcement)

        logger.info(f"Announcement posted to {len(recipients)} trainees", extra={"ctx": ctx})
        return ActionResult.ok("Announcement created successfully", AnnouncementRead.model_validate(announcement))

    async def update_announcement(
        self, coordinator_id: str, slug: str, announcement_id: str, data: AnnouncementUpdate
    ) -> ActionResult:
        ctx = log_context("announcement.update", user_id=coordinator_id, announcement_id=announcement_id)
        logger.info("Updating announcement...", extra={"ctx": ctx})

        with logged_operation(logger, "Announcement update", ctx):
            section = await owned_section(self.session, coordinator_id, slug)
            announcement = await self._get(section.id, announcement_id)
            for key, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
                setattr(announcement, key, value)
            announcement.updated_at = utc_now()
            self.session.add(announcement)
            await self.session.commit()
            await self.session.refresh(announcement)

        return ActionResult.ok("Announcement updated successfully", AnnouncementRead.model_validate(announcement))

    async def delete_announcement(self, coordinator_id: str, slug: str, announcement_id: str) -> ActionResult:
        ctx = log_context("announcement.delete", user_id=coordinator_id, announcement_id=announcement_id)
        logger.info("Deleting announcement...", extra={"ctx": ctx})

        with logged_operation(logger, "Announcement deletion", ctx):
            section = await owned_section(self.session, coordinator_id, slug)
            announcement = await self._get(section.id, announcement_id)
            await self.session.delete(announcement)
            await self.session.commit()

        return ActionResult.ok("Announcement deleted successfully")
