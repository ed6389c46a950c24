"""Shared fixtures for unit tests that need a database.

Every test gets its own in-memory SQLite database (``StaticPool`` keeps the
single connection alive for the engine's lifetime), so rows never leak
between tests. ``seed`` builds the user -> section -> enrollment ->
internship chain most services work on.
"""

from __future__ import annotations

import json
from datetime import date, time
from types import SimpleNamespace
from typing import AsyncGenerator, Callable, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlmodel.pool import StaticPool

from sumikapp.core.database import create_all, create_sessionmaker
from sumikapp.core.database.entities import (
    BatchRequirement,
    Coordinator,
    InternshipDetails,
    ProgramBatch,
    RequirementType,
    Supervisor,
    Trainee,
    TraineeBatchEnrollment,
    User,
)
from sumikapp.core.models.domain.enums import DocumentStatus, InternshipCode, OJTStatus, Role

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory database with every table."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a new session for each test."""
    async with create_sessionmaker(test_engine)() as session:
        yield session


@pytest_asyncio.fixture(name="client")
async def client_fixture(session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client whose requests share the test session."""
    from sumikapp.core.database import get_session
    from sumikapp.server.main import app

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def as_user() -> Callable[[User], dict[str, str]]:
    """Build the identity header the auth gateway would forward for a user."""

    def _headers(user: User) -> dict[str, str]:
        return {"X-User-Id": user.id}

    return _headers


class Seeder:
    """Insert domain rows with sensible defaults."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self._counter = 0

    async def _save(self, *rows):
        for row in rows:
            self.session.add(row)
        await self.session.commit()
        for row in rows:
            await self.session.refresh(row)
        return rows[0]

    async def user(
        self,
        role: Role,
        *,
        email: Optional[str] = None,
        first_name: str = "Test",
        last_name: Optional[str] = None,
        status: str = "active",
        **profile,
    ) -> User:
        self._counter += 1
        user = User(
            email=email or f"{role.value}{self._counter}@example.com",
            first_name=first_name,
            last_name=last_name or f"{role.value.title()}{self._counter}",
            role=role.value,
            status=status,
        )
        self.session.add(user)
        await self.session.flush()
        if role is Role.trainee:
            self.session.add(Trainee(id=user.id, student_id_number=f"2021-{self._counter:05d}", **profile))
        elif role is Role.coordinator:
            self.session.add(Coordinator(id=user.id, **profile))
        elif role is Role.supervisor:
            self.session.add(Supervisor(id=user.id, company_name="Acme Corp", **profile))
        return await self._save(user)

    async def section(
        self,
        coordinator: User,
        *,
        title: str = "BSIT-4A",
        code: InternshipCode = InternshipCode.CTNTERN1,
        start_date: date = date(2024, 1, 8),
        end_date: date = date(2024, 5, 31),
        required_hours: int = 486,
    ) -> ProgramBatch:
        return await self._save(
            ProgramBatch(
                coordinator_id=coordinator.id,
                title=title,
                internship_code=code.value,
                required_hours=required_hours,
                start_date=start_date,
                end_date=end_date,
            )
        )

    async def enroll(
        self, trainee: User, section: ProgramBatch, ojt_status: OJTStatus = OJTStatus.not_started
    ) -> TraineeBatchEnrollment:
        return await self._save(
            TraineeBatchEnrollment(trainee_id=trainee.id, program_batch_id=section.id, ojt_status=ojt_status.value)
        )

    async def internship(
        self,
        enrollment: TraineeBatchEnrollment,
        *,
        status: DocumentStatus = DocumentStatus.approved,
        supervisor: Optional[User] = None,
        temp_email: Optional[str] = None,
        company_name: str = "Acme Corp",
        job_role: str = "Software Developer",
    ) -> InternshipDetails:
        return await self._save(
            InternshipDetails(
                enrollment_id=enrollment.id,
                company_name=company_name,
                contact_number="09171234567",
                nature_of_business="Software",
                address="123 Ayala Ave, Makati",
                job_role=job_role,
                start_date=date(2024, 1, 15),
                end_date=date(2024, 5, 15),
                start_time=time(8, 0),
                end_time=time(17, 0),
                daily_schedule=json.dumps(["monday", "tuesday", "wednesday", "thursday", "friday"]),
                status=status.value,
                supervisor_id=supervisor.id if supervisor else None,
                temp_email=temp_email,
            )
        )

    async def requirement_slot(
        self, section: ProgramBatch, name: str = "Medical Certificate", *, predefined: bool = True
    ) -> BatchRequirement:
        requirement_type = await self._save(RequirementType(name=name, is_predefined=predefined))
        return await self._save(BatchRequirement(program_batch_id=section.id, requirement_type_id=requirement_type.id))


@pytest_asyncio.fixture
async def seed(session: AsyncSession) -> Seeder:
    return Seeder(session)


@pytest_asyncio.fixture
async def placement(seed: Seeder) -> SimpleNamespace:
    """A trainee with an approved internship under a supervisor, in a coordinator's section."""
    coordinator = await seed.user(Role.coordinator)
    supervisor = await seed.user(Role.supervisor, email="boss@acme.example.com")
    trainee = await seed.user(Role.trainee, first_name="Juan", last_name="Dela Cruz")
    section = await seed.section(coordinator)
    enrollment = await seed.enroll(trainee, section, OJTStatus.active)
    internship = await seed.internship(enrollment, supervisor=supervisor)
    return SimpleNamespace(
        coordinator=coordinator,
        supervisor=supervisor,
        trainee=trainee,
        section=section,
        enrollment=enrollment,
        internship=internship,
    )
