"""
Admin user management.

Deleting a user is a soft delete: the row is kept (reports, reviews and the
activity feed still point at it) but flagged ``is_deleted`` and hidden from
listings and authentication.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import func
from sqlmodel import select

from sumikapp.core.database import utc_now
from sumikapp.core.database.entities import Coordinator, Supervisor, Trainee, User
from sumikapp.core.errors import ConflictError, ValidationFailedError
from sumikapp.core.logging_config import log_context
from sumikapp.core.models.domain.enums import ActivityType, Role, UserStatus
from sumikapp.core.models.io.common import ActionResult
from sumikapp.core.models.io.users import UserCreate, UserRead, UserStatistics

from .activity import log_activity
from .base import BaseService, logged_operation
from .lookups import get_active_user

logger = logging.getLogger(__name__)


class UserService(BaseService):
    async def list_users(self, role: Optional[Role] = None, status: Optional[UserStatus] = None) -> List[UserRead]:
        stmt = select(User).where(User.is_deleted == False)  # noqa: E712
        if role is not None:
            stmt = stmt.where(User.role == role.value)
        if status is not None:
            stmt = stmt.where(User.status == status.value)
        stmt = stmt.order_by(User.created_at.desc())
        return [UserRead.model_validate(user) for user in (await self.session.execute(stmt)).scalars().all()]

    async def get_user(self, user_id: str) -> UserRead:
        return UserRead.model_validate(await get_active_user(self.session, user_id))

    async def create_user(self, admin_id: str, data: UserCreate) -> ActionResult:
        """Create an account and the profile row matching its role."""
        email = data.email
        ctx = log_context("user.create", user_id=admin_id, email=email, role=data.role.value)
        logger.info("Creating user...", extra={"ctx": ctx})

        with logged_operation(logger, "User creation", ctx):
            existing = await self.session.execute(select(User.id).where(User.email == email))
            if existing.first() is not None:
                raise ConflictError(f"An account with email {email} already exists")
            if data.role is Role.trainee and not data.student_id_number:
                raise ValidationFailedError("Student ID number is required for trainees")

            user = User(
                email=email,
                first_name=data.first_name,
                middle_name=data.middle_name,
                last_name=data.last_name,
                role=data.role.value,
                status=data.status.value,
            )
            self.session.add(user)
            await self.session.flush()

            if data.role is Role.trainee:
                self.session.add(
                    Trainee(
                        id=user.id,
                        student_id_number=data.student_id_number,
                        course=data.course,
                        section=data.section,
                    )
                )
            elif data.role is Role.coordinator:
                self.session.add(Coordinator(id=user.id, department=data.department))
            elif data.role is Role.supervisor:
                self.session.add(
                    Supervisor(
                        id=user.id,
                        company_name=data.company_name,
                        department=data.department,
                        position=data.position,
                    )
                )
            log_activity(
                self.session,
                user_id=admin_id,
                user_role=Role.admin,
                activity_type=ActivityType.user_registered,
                title=f"{user.full_name} registered as {data.role.value}",
                reference_id=user.id,
                reference_type="user",
            )
            await self.session.commit()
            await self.session.refresh(user)

        logger.info(f"User {user.id} created", extra={"ctx": ctx})
        return ActionResult.ok("User created successfully", UserRead.model_validate(user))

    async def update_user_status(self, admin_id: str, user_id: str, status: UserStatus) -> ActionResult:
        ctx = log_context("user.update_status", user_id=admin_id, target_user_id=user_id, status=status.value)
        logger.info("Updating user status...", extra={"ctx": ctx})

        with logged_operation(logger, "User status update", ctx):
            user = await get_active_user(self.session, user_id)
            old_status = user.status
            user.status = status.value
            self.session.add(user)
            log_activity(
                self.session,
                user_id=admin_id,
                user_role=Role.admin,
                activity_type=ActivityType.user_status_changed,
                title=f"{user.full_name} is now {status.value}",
                reference_id=user.id,
                reference_type="user",
                metadata={"old_status": old_status, "new_status": status.value},
            )
            await self.session.commit()
            await self.session.refresh(user)

        return ActionResult.ok("User status updated successfully", UserRead.model_validate(user))

    async def delete_user(self, admin_id: str, user_id: str) -> ActionResult:
        ctx = log_context("user.delete", user_id=admin_id, target_user_id=user_id)
        logger.info("Deleting user...", extra={"ctx": ctx})

        with logged_operation(logger, "User deletion", ctx):
            if user_id == admin_id:
                raise ValidationFailedError("You cannot delete your own account")
            user = await get_active_user(self.session, user_id)
            user.is_deleted = True
            user.deleted_at = utc_now()
            self.session.add(user)
            await self.session.commit()

        logger.info(f"User {user_id} soft-deleted", extra={"ctx": ctx})
        return ActionResult.ok("User deleted successfully")

    async def user_statistics(self) -> UserStatistics:
        active = User.is_deleted == False  # noqa: E712
        by_role = await self.session.execute(select(User.role, func.count(User.id)).where(active).group_by(User.role))
        by_status = await self.session.execute(
            select(User.status, func.count(User.id)).where(active).group_by(User.status)
        )
        roles = {role: count for role, count in by_role.all()}
        return UserStatistics(
            total=sum(roles.values()),
            by_role=roles,
            by_status={status: count for status, count in by_status.all()},
        )

