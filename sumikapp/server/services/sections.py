"""
Coordinator sections (program batches) and trainee enrollment.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlmodel import select

from sumikapp.core.database import utc_now
from sumikapp.core.database.entities import (
    Announcement,
    BatchRequirement,
    InternshipDetails,
    ProgramBatch,
    Requirement,
    RequirementHistory,
    RequirementType,
    Trainee,
    TraineeBatchEnrollment,
    User,
)
from sumikapp.core.errors import ConflictError, NotFoundError, ValidationFailedError
from sumikapp.core.logging_config import log_context
from sumikapp.core.models.domain.enums import ActivityType, InternshipCode, OJTStatus, Role
from sumikapp.core.models.io.common import ActionResult
from sumikapp.core.models.io.sections import (
    EnrollmentFailure,
    EnrollmentResult,
    SectionCreate,
    SectionRead,
    SectionTraineeRead,
    SectionUpdate,
)

from .activity import log_activity
from .base import BaseService, logged_operation
from .lookups import owned_section

logger = logging.getLogger(__name__)


class SectionService(BaseService):
    """CRUD over a coordinator's own sections."""

    async def _title_taken(self, coordinator_id: str, title: str, exclude_id: Optional[str] = None) -> bool:
        stmt = select(ProgramBatch.id).where(
            ProgramBatch.coordinator_id == coordinator_id,
            ProgramBatch.title == title,
        )
        if exclude_id is not None:
            stmt = stmt.where(ProgramBatch.id != exclude_id)
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def _trainee_counts(self, section_ids: List[str]) -> Dict[str, int]:
        if not section_ids:
            return {}
        stmt = (
            select(TraineeBatchEnrollment.program_batch_id, func.count(TraineeBatchEnrollment.id))
            .where(TraineeBatchEnrollment.program_batch_id.in_(section_ids))
            .group_by(TraineeBatchEnrollment.program_batch_id)
        )
        result = await self.session.execute(stmt)
        return {batch_id: count for batch_id, count in result.all()}

    async def create_section(self, coordinator_id: str, data: SectionCreate) -> ActionResult:
        """Create a section and attach every predefined requirement to it as mandatory."""
        ctx = log_context("section.create", user_id=coordinator_id, title=data.title)
        logger.info("Creating section...", extra={"ctx": ctx})

        with logged_operation(logger, "Section creation", ctx):
            if await self._title_taken(coordinator_id, data.title):
                raise ConflictError(f"A section titled '{data.title}' already exists")

            section = ProgramBatch(
                coordinator_id=coordinator_id,
                title=data.title,
                description=data.description,
                internship_code=data.internship_code.value,
                required_hours=data.required_hours,
                start_date=data.start_date,
                end_date=data.end_date,
            )
            self.session.add(section)
            await self.session.flush()
            predefined = await self.session.execute(
                select(RequirementType.id).where(RequirementType.is_predefined == True)  # noqa: E712
            )
            for requirement_type_id in predefined.scalars().all():
                self.session.add(BatchRequirement(program_batch_id=section.id, requirement_type_id=requirement_type_id))
            log_activity(
                self.session,
                user_id=coordinator_id,
                user_role=Role.coordinator,
                activity_type=ActivityType.batch_created,
                title=f"Section {data.title} created",
                reference_id=section.id,
                reference_type="program_batch",
                program_batch_id=section.id,
            )
            await self.session.commit()
            await self.session.refresh(section)

        logger.info(f"Section {section.id} created", extra={"ctx": ctx})
        return ActionResult.ok("Section created successfully", SectionRead.model_validate(section))

    async def list_sections(self, coordinator_id: str) -> List[SectionRead]:
        stmt = (
            select(ProgramBatch)
            .where(ProgramBatch.coordinator_id == coordinator_id)
            .order_by(ProgramBatch.created_at.desc())
        )
        sections = list((await self.session.execute(stmt)).scalars().all())
        counts = await self._trainee_counts([section.id for section in sections])
        return [
            SectionRead.model_validate(section).model_copy(update={"trainee_count": counts.get(section.id, 0)})
            for section in sections
        ]

    async def get_section(self, coordinator_id: str, slug: str) -> SectionRead:
        section = await owned_section(self.session, coordinator_id, slug)
        counts = await self._trainee_counts([section.id])
        return SectionRead.model_validate(section).model_copy(update={"trainee_count": counts.get(section.id, 0)})

    async def update_section(self, coordinator_id: str, slug: str, data: SectionUpdate) -> ActionResult:
        ctx = log_context("section.update", user_id=coordinator_id, slug=slug)
        logger.info("Updating section...", extra={"ctx": ctx})

        with logged_operation(logger, "Section update", ctx):
            section = await owned_section(self.session, coordinator_id, slug)
            values = data.model_dump(exclude_unset=True, exclude_none=True)
            if "title" in values and await self._title_taken(coordinator_id, values["title"], exclude_id=section.id):
                raise ConflictError(f"A section titled '{values['title']}' already exists")
            if values.get("internship_code") is not None:
                values["internship_code"] = values["internship_code"].value

            start = values.get("start_date", section.start_date)
            end = values.get("end_date", section.end_date)
            if end <= start:
                raise ValidationFailedError("end_date must be after start_date")

            for key, value in values.items():
                setattr(section, key, value)
            section.updated_at = utc_now()
            self.session.add(section)
            log_activity(
                self.session,
                user_id=coordinator_id,
                user_role=Role.coordinator,
                activity_type=ActivityType.batch_updated,
                title=f"Section {section.title} updated",
                reference_id=section.id,
                reference_type="program_batch",
                program_batch_id=section.id,
            )
            await self.session.commit()
            await self.session.refresh(section)

        return ActionResult.ok("Section updated successfully", SectionRead.model_validate(section))

    async def delete_section(self, coordinator_id: str, slug: str) -> ActionResult:
        """Delete an empty section together with its announcements and requirement slots.

        Sections that still have enrolled trainees cannot be deleted.
        """
        ctx = log_context("section.delete", user_id=coordinator_id, slug=slug)
        logger.info("Deleting section...", extra={"ctx": ctx})

        with logged_operation(logger, "Section deletion", ctx):
            section = await owned_section(self.session, coordinator_id, slug)
            counts = await self._trainee_counts([section.id])
            if counts.get(section.id, 0):
                raise ConflictError("Remove all trainees from the section before deleting it")

            for model in (Announcement, BatchRequirement):
                rows = await self.session.execute(select(model).where(model.program_batch_id == section.id))
                for row in rows.scalars().all():
                    await self.session.delete(row)
            await self.session.flush()
            await self.session.delete(section)
            log_activity(
                self.session,
                user_id=coordinator_id,
                user_role=Role.coordinator,
                activity_type=ActivityType.batch_deleted,
                title=f"Section {section.title} deleted",
                reference_id=section.id,
                reference_type="program_batch",
            )
            await self.session.commit()

        return ActionResult.ok("Section deleted successfully")


class EnrollmentService(BaseService):
    """Enroll trainees into a section and manage the roster."""

    async def check_enrollment(self, trainee_id: str, target_code: InternshipCode, today: date) -> Optional[str]:
        """Return why ``trainee_id`` cannot join a batch of ``target_code``, or ``None`` if they can.

        Rules:
        - at most one CTNTERN1 and one CTNTERN2 enrollment per trainee
        - CTNTERN2 requires a CTNTERN1 enrollment
        - CTNTERN2 is refused while the CTNTERN1 batch is still running
        - CTNTERN2 requires the CTNTERN1 OJT status to be ``completed``
        """
        stmt = (
            select(TraineeBatchEnrollment, ProgramBatch)
            .join(ProgramBatch, TraineeBatchEnrollment.program_batch_id == ProgramBatch.id)
            .where(TraineeBatchEnrollment.trainee_id == trainee_id)
        )
        rows = (await self.session.execute(stmt)).all()
        first = [row for row in rows if row[1].internship_code == InternshipCode.CTNTERN1.value]
        second = [row for row in rows if row[1].internship_code == InternshipCode.CTNTERN2.value]

        if target_code is InternshipCode.CTNTERN1:
            if first:
                return "Trainee is already enrolled in Internship 1."
            return None

        if second:
            return "Trainee is already enrolled in Internship 2."
        if not first:
            return "Trainee must complete Internship 1 before enrolling in Internship 2"
        enrollment, batch = first[0]
        if batch.start_date <= today <= batch.end_date:
            return "Cannot enroll in Internship 2 while Internship 1 is still ongoing"
        if enrollment.ojt_status != OJTStatus.completed.value:
            return "This trainee has not yet finished Internship 1 to enroll in Internship 2."
        return None

    async def add_students(self, coordinator_id: str, slug: str, trainee_ids: List[str]) -> ActionResult:
        """Enroll each trainee independently; one failure does not stop the others."""
        ctx = log_context("section.add_students", user_id=coordinator_id, slug=slug, count=len(trainee_ids))
        logger.info("Adding students to section...", extra={"ctx": ctx})

        with logged_operation(logger, "Student enrollment", ctx):
            section = await owned_section(self.session, coordinator_id, slug)
            target_code = InternshipCode(section.internship_code)
            today = date.today()
            result = EnrollmentResult(total=len(trainee_ids))

            for trainee_id in trainee_ids:
                trainee = await self.session.get(Trainee, trainee_id)
                if trainee is None:
                    result.failed.append(EnrollmentFailure(trainee_id=trainee_id, reason="Trainee not found"))
                    continue

                reason = await self.check_enrollment(trainee_id, target_code, today)
                if reason is None:
                    existing = await self.session.execute(
                        select(TraineeBatchEnrollment.id).where(
                            TraineeBatchEnrollment.trainee_id == trainee_id,
                            TraineeBatchEnrollment.program_batch_id == section.id,
                        )
                    )
                    if existing.first() is not None:
                        reason = "Trainee is already enrolled in this batch"
                if reason is not None:
                    logger.debug(f"Skipped trainee {trainee_id}: {reason}", extra={"ctx": ctx})
                    result.failed.append(EnrollmentFailure(trainee_id=trainee_id, reason=reason))
                    continue

                self.session.add(TraineeBatchEnrollment(trainee_id=trainee_id, program_batch_id=section.id))
                # The profile mirrors the newest enrollment, which starts over.
                trainee.ojt_status = OJTStatus.not_started.value
                self.session.add(trainee)
                await self.session.flush()
                result.successful.append(trainee_id)

            if result.successful:
                log_activity(
                    self.session,
                    user_id=coordinator_id,
                    user_role=Role.coordinator,
                    activity_type=ActivityType.batch_enrolled,
                    title=f"{len(result.successful)} trainees added to {section.title}",
                    reference_id=section.id,
                    reference_type="program_batch",
                    program_batch_id=section.id,
                    metadata={"trainee_ids": result.successful},
                )
            await self.session.commit()

        logger.info(
            f"Enrollment finished: {len(result.successful)} added, {len(result.failed)} failed",
            extra={"ctx": ctx},
        )
        return ActionResult.ok(
            f"Successfully added {len(result.successful)} out of {result.total} students",
            result,
        )

    async def list_section_trainees(self, coordinator_id: str, slug: str) -> List[SectionTraineeRead]:
        section = await owned_section(self.session, coordinator_id, slug)
        stmt = (
            select(TraineeBatchEnrollment, Trainee, User)
            .join(Trainee, TraineeBatchEnrollment.trainee_id == Trainee.id)
            .join(User, Trainee.id == User.id)
            .where(TraineeBatchEnrollment.program_batch_id == section.id, User.is_deleted == False)  # noqa: E712
            .order_by(User.last_name, User.first_name)
        )
        rows = (await self.session.execute(stmt)).all()
        return [
            SectionTraineeRead(
                enrollment_id=enrollment.id,
                trainee_id=trainee.id,
                first_name=user.first_name,
                middle_name=user.middle_name,
                last_name=user.last_name,
                email=user.email,
                student_id_number=trainee.student_id_number,
                course=trainee.course,
                section=trainee.section,
                ojt_status=OJTStatus(enrollment.ojt_status),
            )
            for enrollment, trainee, user in rows
        ]

    async def remove_student_from_section(self, coordinator_id: str, slug: str, trainee_id: str) -> ActionResult:
        ctx = log_context("section.remove_student", user_id=coordinator_id, slug=slug, trainee_id=trainee_id)
        logger.info("Removing student from section...", extra={"ctx": ctx})

        with logged_operation(logger, "Student removal", ctx):
            section = await owned_section(self.session, coordinator_id, slug)
            stmt = select(TraineeBatchEnrollment).where(
                TraineeBatchEnrollment.trainee_id == trainee_id,
                TraineeBatchEnrollment.program_batch_id == section.id,
            )
            enrollment = (await self.session.execute(stmt)).scalars().first()
            if enrollment is None:
                raise NotFoundError("Enrollment", trainee_id)
            placements = await self.session.execute(
                select(InternshipDetails.id).where(InternshipDetails.enrollment_id == enrollment.id)
            )
            if placements.first() is not None:
                raise ConflictError("Trainee already has an internship placement in this section")

            uploads = await self.session.execute(select(Requirement).where(Requirement.enrollment_id == enrollment.id))
            for upload in uploads.scalars().all():
                history = await self.session.execute(
                    select(RequirementHistory).where(RequirementHistory.document_id == upload.id)
                )
                for row in history.scalars().all():
                    await self.session.delete(row)
                await self.session.flush()
                await self.session.delete(upload)
            await self.session.flush()
            await self.session.delete(enrollment)
            await self.session.commit()

        return ActionResult.ok("Student removed from section")
