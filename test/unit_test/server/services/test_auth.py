"""Unit tests for caller identity and role guards."""

from typing import Optional

import pytest
from starlette.requests import Request

from sumikapp.core.errors import AuthenticationError, PermissionDeniedError
from sumikapp.core.models.domain.enums import OJTStatus, Role, UserStatus
from sumikapp.server.services.auth import CurrentUser, get_current_user, require_roles
from sumikapp.server.services.users import UserService

pytestmark = pytest.mark.asyncio


def request_for(user_id: Optional[str]) -> Request:
    headers = [(b"x-user-id", user_id.encode())] if user_id else []
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers})


class TestGetCurrentUser:
    async def test_resolves_trainee_with_ojt_status(self, session, seed):
        trainee = await seed.user(Role.trainee, ojt_status=OJTStatus.active.value)

        current = await get_current_user(request_for(trainee.id), session)

        assert current.id == trainee.id
        assert current.role is Role.trainee
        assert current.ojt_status is OJTStatus.active

    async def test_non_trainee_has_no_ojt_status(self, session, seed):
        coordinator = await seed.user(Role.coordinator)

        current = await get_current_user(request_for(coordinator.id), session)

        assert current.ojt_status is None

    async def test_missing_header(self, session):
        with pytest.raises(AuthenticationError, match="X-User-Id"):
            await get_current_user(request_for(None), session)

    async def test_unknown_user(self, session):
        with pytest.raises(AuthenticationError, match="Unknown user"):
            await get_current_user(request_for("nobody"), session)

    async def test_suspended_user(self, session, seed):
        user = await seed.user(Role.trainee, status=UserStatus.suspended.value)

        with pytest.raises(AuthenticationError, match="suspended"):
            await get_current_user(request_for(user.id), session)

    async def test_deleted_user(self, session, seed):
        admin = await seed.user(Role.admin)
        user = await seed.user(Role.coordinator)
        await UserService(session).delete_user(admin.id, user.id)

        with pytest.raises(AuthenticationError):
            await get_current_user(request_for(user.id), session)


class TestRequireRoles:
    async def test_allowed_role_passes(self, seed):
        coordinator = await seed.user(Role.coordinator)
        current = CurrentUser(user=coordinator)

        guard = require_roles(Role.coordinator, Role.admin)

        assert await guard(current) is current

    async def test_other_role_is_denied(self, seed):
        trainee = await seed.user(Role.trainee)

        with pytest.raises(PermissionDeniedError, match="coordinator, admin"):
            await require_roles(Role.coordinator, Role.admin)(CurrentUser(user=trainee))
