"""
Caller identity.

Authentication itself happens upstream: the auth gateway verifies the session
and forwards the user id in a header (``X-User-Id`` by default, see
``SUMIKAPP_AUTH_USER_ID_HEADER``). This module turns that header into a
``CurrentUser`` and provides role guards for routers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from sumikapp.core.database import get_session
from sumikapp.core.database.entities import Trainee, User
from sumikapp.core.errors import AuthenticationError, PermissionDeniedError
from sumikapp.core.models.domain.enums import OJTStatus, Role, UserStatus
from sumikapp.server.core.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurrentUser:
    """The authenticated caller of a request."""

    user: User
    ojt_status: Optional[OJTStatus] = None

    @property
    def id(self) -> str:
        return self.user.id

    @property
    def role(self) -> Role:
        return Role(self.user.role)


async def get_current_user(request: Request, session: AsyncSession = Depends(get_session)) -> CurrentUser:
    """Resolve the caller from the identity header.

    Raises:
        AuthenticationError: header missing, user unknown, deleted or suspended
    """
    header = settings.auth.user_id_header
    user_id = request.headers.get(header)
    if not user_id:
        raise AuthenticationError(f"Missing {header} header")

    user = await session.get(User, user_id)
    if user is None or user.is_deleted:
        logger.warning(f"Rejected request from unknown user {user_id}")
        raise AuthenticationError("Unknown user")
    if user.status == UserStatus.suspended.value:
        raise AuthenticationError("Account is suspended")

    ojt_status = None
    if user.role == Role.trainee.value:
        trainee = await session.get(Trainee, user.id)
        if trainee is not None:
            ojt_status = OJTStatus(trainee.ojt_status)
    return CurrentUser(user=user, ojt_status=ojt_status)


def require_roles(*roles: Role) -> Callable:
    """Build a dependency that only admits callers holding one of ``roles``."""

    async def _guard(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if current_user.role not in roles:
            allowed = ", ".join(role.value for role in roles)
            raise PermissionDeniedError(f"This action requires one of the roles: {allowed}")
        return current_user

    return _guard
