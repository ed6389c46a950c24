"""Unit tests for section CRUD and trainee enrollment rules."""

from datetime import date, timedelta

import pytest
from sqlmodel import select

from sumikapp.core.database.entities import (
    BatchRequirement,
    RecentActivity,
    Requirement,
    RequirementHistory,
    Trainee,
    TraineeBatchEnrollment,
)
from sumikapp.core.errors import ConflictError, NotFoundError, ValidationFailedError
from sumikapp.core.models.domain.enums import DocumentStatus, InternshipCode, OJTStatus, Role
from sumikapp.core.models.io.sections import SectionCreate, SectionUpdate
from sumikapp.server.services.sections import EnrollmentService, SectionService

pytestmark = pytest.mark.asyncio


def section_payload(**overrides) -> SectionCreate:
    values = {
        "title": "BSIT-4B",
        "internship_code": InternshipCode.CTNTERN1,
        "required_hours": 486,
        "start_date": date(2024, 1, 8),
        "end_date": date(2024, 5, 31),
    }
    values.update(overrides)
    return SectionCreate(**values)


class TestSectionService:
    async def test_create_attaches_predefined_requirements(self, session, seed):
        coordinator = await seed.user(Role.coordinator)
        other = await seed.section(coordinator, title="Template")
        await seed.requirement_slot(other, "Medical Certificate", predefined=True)
        await seed.requirement_slot(other, "Company Waiver", predefined=False)

        result = await SectionService(session).create_section(coordinator.id, section_payload())

        assert result.success
        assert result.message == "Section created successfully"
        slots = (
            await session.execute(select(BatchRequirement).where(BatchRequirement.program_batch_id == result.data.id))
        ).scalars().all()
        assert len(slots) == 1
        assert all(slot.is_mandatory for slot in slots)

        activity = (await session.execute(select(RecentActivity))).scalars().one()
        assert activity.activity_type == "batch_created"
        assert activity.program_batch_id == result.data.id

    async def test_duplicate_title_conflicts(self, session, seed):
        coordinator = await seed.user(Role.coordinator)
        await seed.section(coordinator, title="BSIT-4B")

        with pytest.raises(ConflictError):
            await SectionService(session).create_section(coordinator.id, section_payload())

    async def test_same_title_is_allowed_for_another_coordinator(self, session, seed):
        first = await seed.user(Role.coordinator)
        second = await seed.user(Role.coordinator)
        await seed.section(first, title="BSIT-4B")

        result = await SectionService(session).create_section(second.id, section_payload())
        assert result.data.coordinator_id == second.id

    async def test_list_sections_counts_trainees(self, session, seed):
        coordinator = await seed.user(Role.coordinator)
        section = await seed.section(coordinator)
        await seed.enroll(await seed.user(Role.trainee), section)
        await seed.enroll(await seed.user(Role.trainee), section)

        sections = await SectionService(session).list_sections(coordinator.id)

        assert [(s.title, s.trainee_count) for s in sections] == [("BSIT-4A", 2)]

    async def test_get_section_of_other_coordinator_is_not_found(self, session, seed):
        owner = await seed.user(Role.coordinator)
        intruder = await seed.user(Role.coordinator)
        await seed.section(owner)

        with pytest.raises(NotFoundError):
            await SectionService(session).get_section(intruder.id, "BSIT-4A")

    async def test_update_rejects_inverted_dates(self, session, seed):
        coordinator = await seed.user(Role.coordinator)
        await seed.section(coordinator)

        with pytest.raises(ValidationFailedError):
            await SectionService(session).update_section(
                coordinator.id, "BSIT-4A", SectionUpdate(end_date=date(2024, 1, 1))
            )

    async def test_update_changes_fields(self, session, seed):
        coordinator = await seed.user(Role.coordinator)
        await seed.section(coordinator)

        result = await SectionService(session).update_section(
            coordinator.id, "BSIT-4A", SectionUpdate(title="BSIT-4C", required_hours=600)
        )

        assert result.data.title == "BSIT-4C"
        assert result.data.required_hours == 600

    async def test_update_ignores_explicit_nulls(self, session, seed):
        coordinator = await seed.user(Role.coordinator)
        await seed.section(coordinator)

        result = await SectionService(session).update_section(
            coordinator.id,
            "BSIT-4A",
            SectionUpdate.model_validate(
                {"title": None, "required_hours": None, "start_date": None, "end_date": date(2024, 6, 30)}
            ),
        )

        assert result.data.title == "BSIT-4A"
        assert result.data.required_hours == 486
        assert result.data.start_date == date(2024, 1, 8)
        assert result.data.end_date == date(2024, 6, 30)

    async def test_update_title_collision_conflicts(self, session, seed):
        coordinator = await seed.user(Role.coordinator)
        await seed.section(coordinator, title="BSIT-4A")
        await seed.section(coordinator, title="BSIT-4B")

        with pytest.raises(ConflictError):
            await SectionService(session).update_section(coordinator.id, "BSIT-4A", SectionUpdate(title="BSIT-4B"))

    async def test_delete_refused_while_trainees_enrolled(self, session, seed):
        coordinator = await seed.user(Role.coordinator)
        section = await seed.section(coordinator)
        await seed.enroll(await seed.user(Role.trainee), section)

        with pytest.raises(ConflictError, match="Remove all trainees"):
            await SectionService(session).delete_section(coordinator.id, "BSIT-4A")

    async def test_delete_empty_section(self, session, seed):
        coordinator = await seed.user(Role.coordinator)
        section = await seed.section(coordinator)
        await seed.requirement_slot(section)

        result = await SectionService(session).delete_section(coordinator.id, "BSIT-4A")

        assert result.success
        assert await SectionService(session).list_sections(coordinator.id) == []
        remaining = (await session.execute(select(BatchRequirement))).scalars().all()
        assert remaining == []


class TestCheckEnrollment:
    async def test_first_internship_is_open(self, session, seed):
        trainee = await seed.user(Role.trainee)
        reason = await EnrollmentService(session).check_enrollment(trainee.id, InternshipCode.CTNTERN1, date.today())
        assert reason is None

    async def test_only_one_first_internship(self, session, seed):
        coordinator = await seed.user(Role.coordinator)
        trainee = await seed.user(Role.trainee)
        await seed.enroll(trainee, await seed.section(coordinator))

        reason = await EnrollmentService(session).check_enrollment(trainee.id, InternshipCode.CTNTERN1, date.today())
        assert reason == "Trainee is already enrolled in Internship 1."

    async def test_second_internship_requires_first(self, session, seed):
        trainee = await seed.user(Role.trainee)
        reason = await EnrollmentService(session).check_enrollment(trainee.id, InternshipCode.CTNTERN2, date.today())
        assert reason == "Trainee must complete Internship 1 before enrolling in Internship 2"

    async def test_second_internship_refused_while_first_is_ongoing(self, session, seed):
        coordinator = await seed.user(Role.coordinator)
        trainee = await seed.user(Role.trainee)
        await seed.enroll(trainee, await seed.section(coordinator), OJTStatus.completed)

        reason = await EnrollmentService(session).check_enrollment(
            trainee.id, InternshipCode.CTNTERN2, date(2024, 3, 1)
        )
        assert reason == "Cannot enroll in Internship 2 while Internship 1 is still ongoing"

    async def test_second_internship_requires_completed_status(self, session, seed):
        coordinator = await seed.user(Role.coordinator)
        trainee = await seed.user(Role.trainee)
        await seed.enroll(trainee, await seed.section(coordinator), OJTStatus.active)

        reason = await EnrollmentService(session).check_enrollment(
            trainee.id, InternshipCode.CTNTERN2, date(2024, 7, 1)
        )
        assert reason == "This trainee has not yet finished Internship 1 to enroll in Internship 2."

    async def test_second_internship_after_completed_first(self, session, seed):
        coordinator = await seed.user(Role.coordinator)
        trainee = await seed.user(Role.trainee)
        await seed.enroll(trainee, await seed.section(coordinator), OJTStatus.completed)
        service = EnrollmentService(session)

        assert await service.check_enrollment(trainee.id, InternshipCode.CTNTERN2, date(2024, 7, 1)) is None

        second = await seed.section(coordinator, title="BSIT-4A-2", code=InternshipCode.CTNTERN2)
        await seed.enroll(trainee, second)
        reason = await service.check_enrollment(trainee.id, InternshipCode.CTNTERN2, date(2024, 7, 1))
        assert reason == "Trainee is already enrolled in Internship 2."


class TestAddStudents:
    async def test_partial_success_reports_each_trainee(self, session, seed):
        coordinator = await seed.user(Role.coordinator)
        section = await seed.section(coordinator)
        fresh = await seed.user(Role.trainee)
        already = await seed.user(Role.trainee)
        other_section = await seed.section(coordinator, title="BSIT-4B")
        await seed.enroll(already, other_section)

        result = await EnrollmentService(session).add_students(
            coordinator.id, section.title, [fresh.id, already.id, "ghost"]
        )

        assert result.message == "Successfully added 1 out of 3 students"
        assert result.data.successful == [fresh.id]
        reasons = {failure.trainee_id: failure.reason for failure in result.data.failed}
        assert reasons == {
            already.id: "Trainee is already enrolled in Internship 1.",
            "ghost": "Trainee not found",
        }
        assert result.data.total == 3

    async def test_enrollment_resets_profile_status(self, session, seed):
        coordinator = await seed.user(Role.coordinator)
        section = await seed.section(coordinator, code=InternshipCode.CTNTERN2, title="BSIT-4A-2")
        first_section = await seed.section(
            coordinator, start_date=date.today() - timedelta(days=200), end_date=date.today() - timedelta(days=30)
        )
        trainee = await seed.user(Role.trainee, ojt_status=OJTStatus.completed.value)
        await seed.enroll(trainee, first_section, OJTStatus.completed)

        result = await EnrollmentService(session).add_students(coordinator.id, section.title, [trainee.id])

        assert result.data.successful == [trainee.id]
        profile = await session.get(Trainee, trainee.id)
        await session.refresh(profile)
        assert profile.ojt_status == OJTStatus.not_started.value

    async def test_unknown_section_is_not_found(self, session, seed):
        coordinator = await seed.user(Role.coordinator)
        with pytest.raises(NotFoundError):
            await EnrollmentService(session).add_students(coordinator.id, "nope", ["t1"])


class TestRoster:
    async def test_list_section_trainees(self, session, seed):
        coordinator = await seed.user(Role.coordinator)
        section = await seed.section(coordinator)
        trainee = await seed.user(Role.trainee, first_name="Ana", last_name="Reyes", course="BSIT")
        await seed.enroll(trainee, section, OJTStatus.active)

        roster = await EnrollmentService(session).list_section_trainees(coordinator.id, section.title)

        assert len(roster) == 1
        assert roster[0].last_name == "Reyes"
        assert roster[0].course == "BSIT"
        assert roster[0].ojt_status is OJTStatus.active

    async def test_remove_student_without_enrollment(self, session, seed):
        coordinator = await seed.user(Role.coordinator)
        section = await seed.section(coordinator)

        with pytest.raises(NotFoundError):
            await EnrollmentService(session).remove_student_from_section(coordinator.id, section.title, "t1")

    async def test_remove_student_with_internship_conflicts(self, session, placement):
        with pytest.raises(ConflictError):
            await EnrollmentService(session).remove_student_from_section(
                placement.coordinator.id, placement.section.title, placement.trainee.id
            )

    async def test_remove_student_cascades_uploads(self, session, seed):
        coordinator = await seed.user(Role.coordinator)
        section = await seed.section(coordinator)
        trainee = await seed.user(Role.trainee)
        enrollment = await seed.enroll(trainee, section)
        slot = await seed.requirement_slot(section)
        upload = Requirement(
            batch_requirement_id=slot.id,
            enrollment_id=enrollment.id,
            file_name="medical.pdf",
            file_path="requirements/medical.pdf",
        )
        session.add(upload)
        await session.flush()
        session.add(
            RequirementHistory(document_id=upload.id, title="Submitted", document_status=DocumentStatus.pending.value)
        )
        await session.commit()

        result = await EnrollmentService(session).remove_student_from_section(
            coordinator.id, section.title, trainee.id
        )

        assert result.message == "Student removed from section"
        assert (await session.execute(select(TraineeBatchEnrollment))).scalars().all() == []
        assert (await session.execute(select(Requirement))).scalars().all() == []
        assert (await session.execute(select(RequirementHistory))).scalars().all() == []
