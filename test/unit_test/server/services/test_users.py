"""Unit tests for admin user management."""

import pytest
from sqlmodel import select

from sumikapp.core.database.entities import Coordinator, RecentActivity, Supervisor, Trainee, User
from sumikapp.core.errors import ConflictError, NotFoundError, ValidationFailedError
from sumikapp.core.models.domain.enums import Role, UserStatus
from sumikapp.core.models.io.users import UserCreate
from sumikapp.server.services.users import UserService

pytestmark = pytest.mark.asyncio


def new_user(role: Role, **overrides) -> UserCreate:
    values = {
        "email": "Ana.Reyes@Example.com",
        "first_name": "Ana",
        "last_name": "Reyes",
        "role": role,
    }
    values.update(overrides)
    return UserCreate(**values)


class TestCreateUser:
    @pytest.mark.parametrize(
        ("role", "profile", "extra"),
        [
            (Role.trainee, Trainee, {"student_id_number": "2021-00042", "course": "BSIT"}),
            (Role.coordinator, Coordinator, {"department": "CCS"}),
            (Role.supervisor, Supervisor, {"company_name": "Acme Corp", "position": "Lead"}),
        ],
    )
    async def test_creates_profile_for_role(self, session, seed, role, profile, extra):
        admin = await seed.user(Role.admin)

        result = await UserService(session).create_user(admin.id, new_user(role, **extra))

        assert result.message == "User created successfully"
        assert result.data.email == "ana.reyes@example.com"
        assert result.data.role is role
        assert await session.get(profile, result.data.id) is not None

        activity = (await session.execute(select(RecentActivity))).scalars().one()
        assert activity.activity_type == "user_registered"
        assert activity.reference_id == result.data.id

    async def test_admin_has_no_profile_row(self, session, seed):
        admin = await seed.user(Role.admin)

        result = await UserService(session).create_user(admin.id, new_user(Role.admin))

        assert await session.get(Trainee, result.data.id) is None
        assert await session.get(Coordinator, result.data.id) is None

    async def test_duplicate_email_conflicts(self, session, seed):
        admin = await seed.user(Role.admin)
        await seed.user(Role.coordinator, email="ana.reyes@example.com")

        with pytest.raises(ConflictError):
            await UserService(session).create_user(admin.id, new_user(Role.coordinator))

    async def test_trainee_requires_student_number(self, session, seed):
        admin = await seed.user(Role.admin)

        with pytest.raises(ValidationFailedError, match="Student ID"):
            await UserService(session).create_user(admin.id, new_user(Role.trainee))

    async def test_invalid_email_is_rejected_by_schema(self):
        with pytest.raises(ValueError):
            new_user(Role.admin, email="not-an-email")

    async def test_padded_email_is_accepted_and_normalized(self, session, seed):
        admin = await seed.user(Role.admin)

        result = await UserService(session).create_user(
            admin.id, new_user(Role.admin, email="  Ana.Reyes@Example.com ")
        )

        assert result.data.email == "ana.reyes@example.com"


class TestManageUsers:
    async def test_list_filters_by_role_and_status(self, session, seed):
        await seed.user(Role.trainee)
        suspended = await seed.user(Role.trainee, status=UserStatus.suspended.value)
        await seed.user(Role.coordinator)
        service = UserService(session)

        trainees = await service.list_users(role=Role.trainee)
        only_suspended = await service.list_users(status=UserStatus.suspended)

        assert len(trainees) == 2
        assert [user.id for user in only_suspended] == [suspended.id]

    async def test_update_status_records_old_and_new(self, session, seed):
        admin = await seed.user(Role.admin)
        trainee = await seed.user(Role.trainee)

        result = await UserService(session).update_user_status(admin.id, trainee.id, UserStatus.suspended)

        assert result.data.status is UserStatus.suspended
        activity = (await session.execute(select(RecentActivity))).scalars().one()
        assert '"old_status": "active"' in activity.activity_metadata

    async def test_soft_delete_hides_user(self, session, seed):
        admin = await seed.user(Role.admin)
        trainee = await seed.user(Role.trainee)
        service = UserService(session)

        await service.delete_user(admin.id, trainee.id)

        row = await session.get(User, trainee.id)
        assert row.is_deleted is True
        assert row.deleted_at is not None
        assert [user.id for user in await service.list_users()] == [admin.id]
        with pytest.raises(NotFoundError):
            await service.get_user(trainee.id)

    async def test_cannot_delete_self(self, session, seed):
        admin = await seed.user(Role.admin)

        with pytest.raises(ValidationFailedError):
            await UserService(session).delete_user(admin.id, admin.id)

    async def test_statistics(self, session, placement, seed):
        await seed.user(Role.trainee, status=UserStatus.pending.value)

        stats = await UserService(session).user_statistics()

        assert stats.total == 4
        assert stats.by_role == {"coordinator": 1, "supervisor": 1, "trainee": 2}
        assert stats.by_status == {"active": 3, "pending": 1}
