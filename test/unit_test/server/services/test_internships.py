"""Unit tests for placement forms and their coordinator review."""

from datetime import date, time

import pytest
from sqlmodel import select

from sumikapp.core.database.entities import Notification, Supervisor, Trainee, User, WeeklyReport
from sumikapp.core.errors import (
    ConflictError,
    InvalidStatusTransitionError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from sumikapp.core.models.domain.enums import DocumentStatus, OJTStatus, Role, UserStatus
from sumikapp.core.models.io.internships import InternshipCreate, InternshipUpdate
from sumikapp.server.services.internships import InternshipService, UpdateInternshipStatusService

pytestmark = pytest.mark.asyncio


def placement_form(**overrides) -> InternshipCreate:
    values = {
        "company_name": "Globe Telecom",
        "contact_number": "09171234567",
        "nature_of_business": "Telecommunications",
        "address": "BGC, Taguig",
        "supervisor_email": "  Maria.Santos@Globe.example.com ",
        "job_role": "others",
        "custom_job_role": " Network Intern ",
        "start_date": date(2024, 1, 15),
        "end_date": date(2024, 5, 15),
        "start_time": time(9, 0),
        "end_time": time(18, 0),
        "daily_schedule": ["monday", "wednesday", "friday"],
    }
    values.update(overrides)
    return InternshipCreate(**values)


@pytest.fixture
def enrolled(seed):
    async def _build():
        coordinator = await seed.user(Role.coordinator)
        trainee = await seed.user(Role.trainee)
        section = await seed.section(coordinator)
        enrollment = await seed.enroll(trainee, section)
        return coordinator, trainee, section, enrollment

    return _build


class TestCreateInternship:
    async def test_create_normalizes_form(self, session, enrolled):
        _, trainee, _, enrollment = await enrolled()

        result = await InternshipService(session).create_internship(trainee.id, placement_form())

        data = result.data
        assert result.message == "Internship details created successfully"
        assert data.enrollment_id == enrollment.id
        assert data.job_role == "Network Intern"
        assert data.temp_email == "maria.santos@globe.example.com"
        assert data.daily_schedule == ["monday", "wednesday", "friday"]
        assert data.status is DocumentStatus.not_submitted

    async def test_requires_enrollment(self, session, seed):
        trainee = await seed.user(Role.trainee)
        with pytest.raises(ValidationFailedError, match="enrolled"):
            await InternshipService(session).create_internship(trainee.id, placement_form())

    async def test_foreign_enrollment_is_not_found(self, session, enrolled, seed):
        _, _, _, enrollment = await enrolled()
        intruder = await seed.user(Role.trainee)

        with pytest.raises(NotFoundError):
            await InternshipService(session).create_internship(
                intruder.id, placement_form(enrollment_id=enrollment.id)
            )

    async def test_one_internship_per_enrollment(self, session, enrolled):
        _, trainee, _, _ = await enrolled()
        service = InternshipService(session)
        await service.create_internship(trainee.id, placement_form())

        with pytest.raises(ConflictError):
            await service.create_internship(trainee.id, placement_form())

    async def test_custom_role_required_for_others(self):
        with pytest.raises(ValueError):
            placement_form(custom_job_role=None)

    async def test_supervisor_email_is_trimmed_and_lowercased(self):
        assert placement_form().supervisor_email == "maria.santos@globe.example.com"
        assert InternshipUpdate(supervisor_email=" Boss@Globe.example.com ").supervisor_email == (
            "boss@globe.example.com"
        )

    async def test_malformed_supervisor_email_is_rejected(self):
        with pytest.raises(ValueError):
            placement_form(supervisor_email="  maria santos@globe  ")


class TestEditInternship:
    async def test_update_fields(self, session, enrolled):
        _, trainee, _, _ = await enrolled()
        service = InternshipService(session)
        created = await service.create_internship(trainee.id, placement_form())

        result = await service.update_internship(
            trainee.id,
            created.data.id,
            InternshipUpdate(supervisor_email="Boss@Globe.example.com", daily_schedule=["saturday"]),
        )

        assert result.data.temp_email == "boss@globe.example.com"
        assert result.data.daily_schedule == ["saturday"]

    async def test_update_rejects_inverted_dates_without_touching_row(self, session, enrolled):
        _, trainee, _, _ = await enrolled()
        service = InternshipService(session)
        created = await service.create_internship(trainee.id, placement_form())

        with pytest.raises(ValidationFailedError):
            await service.update_internship(trainee.id, created.data.id, InternshipUpdate(end_date=date(2024, 1, 1)))

        listed = await service.list_internships(trainee.id)
        assert listed[0].end_date == date(2024, 5, 15)

    async def test_approved_form_is_read_only(self, session, placement):
        with pytest.raises(InvalidStatusTransitionError):
            await InternshipService(session).update_internship(
                placement.trainee.id, placement.internship.id, InternshipUpdate(company_name="Other")
            )

    async def test_other_trainee_cannot_edit(self, session, enrolled, seed):
        _, trainee, _, _ = await enrolled()
        created = await InternshipService(session).create_internship(trainee.id, placement_form())
        intruder = await seed.user(Role.trainee)

        with pytest.raises(PermissionDeniedError):
            await InternshipService(session).delete_internship(intruder.id, created.data.id)

    async def test_delete_refused_while_reports_exist(self, session, enrolled, seed):
        _, trainee, _, enrollment = await enrolled()
        internship = await seed.internship(enrollment, status=DocumentStatus.rejected)
        session.add(
            WeeklyReport(internship_id=internship.id, start_date=date(2024, 1, 15), end_date=date(2024, 1, 21))
        )
        await session.commit()

        with pytest.raises(ConflictError):
            await InternshipService(session).delete_internship(trainee.id, internship.id)

    async def test_delete(self, session, enrolled):
        _, trainee, _, _ = await enrolled()
        service = InternshipService(session)
        created = await service.create_internship(trainee.id, placement_form())

        await service.delete_internship(trainee.id, created.data.id)
        assert await service.list_internships(trainee.id) == []

    async def test_submit_notifies_coordinator(self, session, enrolled):
        coordinator, trainee, _, _ = await enrolled()
        service = InternshipService(session)
        created = await service.create_internship(trainee.id, placement_form())

        result = await service.submit_internship_form(trainee.id, created.data.id)

        assert result.data.status is DocumentStatus.pending
        notification = (await session.execute(select(Notification))).scalars().one()
        assert notification.user_id == coordinator.id
        assert notification.notification_type == "document submission"

        with pytest.raises(InvalidStatusTransitionError):
            await service.submit_internship_form(trainee.id, created.data.id)


class TestReviewInternship:
    async def submitted(self, session, enrolled, **form):
        coordinator, trainee, section, enrollment = await enrolled()
        service = InternshipService(session)
        created = await service.create_internship(trainee.id, placement_form(**form))
        await service.submit_internship_form(trainee.id, created.data.id)
        return coordinator, trainee, section, enrollment, created.data.id

    async def test_approve_creates_pending_supervisor_and_activates_trainee(self, session, enrolled):
        coordinator, trainee, section, enrollment, internship_id = await self.submitted(session, enrolled)

        result = await UpdateInternshipStatusService(session).approve_form(coordinator.id, internship_id, section.title)

        assert result.data.status is DocumentStatus.approved
        assert result.data.temp_email is None
        supervisor_user = await session.get(User, result.data.supervisor_id)
        assert supervisor_user.email == "maria.santos@globe.example.com"
        assert supervisor_user.role == Role.supervisor.value
        assert supervisor_user.status == UserStatus.pending.value
        profile = await session.get(Supervisor, supervisor_user.id)
        assert profile.company_name == "Globe Telecom"

        await session.refresh(enrollment)
        assert enrollment.ojt_status == OJTStatus.active.value
        trainee_profile = await session.get(Trainee, trainee.id)
        await session.refresh(trainee_profile)
        assert trainee_profile.ojt_status == OJTStatus.active.value

    async def test_approve_reuses_existing_supervisor(self, session, enrolled, seed):
        existing = await seed.user(Role.supervisor, email="maria.santos@globe.example.com")
        coordinator, _, _, _, internship_id = await self.submitted(session, enrolled)

        result = await UpdateInternshipStatusService(session).approve_form(coordinator.id, internship_id)

        assert result.data.supervisor_id == existing.id

    async def test_email_of_non_supervisor_conflicts(self, session, enrolled, seed):
        await seed.user(Role.trainee, email="maria.santos@globe.example.com")
        coordinator, _, _, _, internship_id = await self.submitted(session, enrolled)

        with pytest.raises(ConflictError, match="non-supervisor"):
            await UpdateInternshipStatusService(session).approve_form(coordinator.id, internship_id)

    async def test_reject_stores_feedback_and_notifies(self, session, enrolled):
        coordinator, trainee, _, _, internship_id = await self.submitted(session, enrolled)

        result = await UpdateInternshipStatusService(session).reject_form(
            coordinator.id, internship_id, "  Company has no MOA  "
        )

        assert result.data.status is DocumentStatus.rejected
        assert result.data.feedback == "Company has no MOA"
        notifications = (
            await session.execute(select(Notification).where(Notification.user_id == trainee.id))
        ).scalars().all()
        assert notifications[0].message.endswith("Reason: Company has no MOA")

    async def test_only_pending_forms_are_reviewed(self, session, placement):
        with pytest.raises(InvalidStatusTransitionError):
            await UpdateInternshipStatusService(session).approve_form(
                placement.coordinator.id, placement.internship.id
            )

    async def test_other_coordinator_is_denied(self, session, enrolled, seed):
        _, _, _, _, internship_id = await self.submitted(session, enrolled)
        stranger = await seed.user(Role.coordinator)

        with pytest.raises(PermissionDeniedError):
            await UpdateInternshipStatusService(session).reject_form(stranger.id, internship_id)

    async def test_wrong_section_slug_is_not_found(self, session, enrolled):
        coordinator, _, _, _, internship_id = await self.submitted(session, enrolled)

        with pytest.raises(NotFoundError):
            await UpdateInternshipStatusService(session).approve_form(coordinator.id, internship_id, "BSCS-4A")

    async def test_list_section_internships(self, session, enrolled):
        coordinator, _, section, _, internship_id = await self.submitted(session, enrolled)
        service = UpdateInternshipStatusService(session)

        pending = await service.list_section_internships(coordinator.id, section.title, DocumentStatus.pending)
        approved = await service.list_section_internships(coordinator.id, section.title, DocumentStatus.approved)

        assert [form.id for form in pending] == [internship_id]
        assert approved == []
