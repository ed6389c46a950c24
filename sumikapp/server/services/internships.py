"""
Internship placement forms.

``InternshipService`` is the trainee side (fill in, edit, submit);
``UpdateInternshipStatusService`` is the coordinator review. Approving a form
links the trainee to a supervisor account, creating one from the form's
supervisor email when it does not exist yet.
"""

from __future__ import annotations

import json
import logging
from typing import List, Optional, Tuple

from sqlmodel import select

from sumikapp.core import monitoring
from sumikapp.core.database import utc_now
from sumikapp.core.database.entities import (
    InternshipDetails,
    ProgramBatch,
    Supervisor,
    Trainee,
    TraineeBatchEnrollment,
    User,
)
from sumikapp.core.errors import (
    ConflictError,
    InvalidStatusTransitionError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from sumikapp.core.logging_config import log_context
from sumikapp.core.models.domain.enums import (
    ActivityType,
    DocumentStatus,
    NotificationType,
    OJTStatus,
    Role,
    UserStatus,
)
from sumikapp.core.models.io.common import ActionResult
from sumikapp.core.models.io.internships import InternshipCreate, InternshipRead, InternshipUpdate

from .activity import log_activity, notify
from .base import BaseService, logged_operation
from .lookups import internship_with_enrollment, latest_enrollment, owned_section, trainee_internships
from .report_tables import REPORT_TABLES

logger = logging.getLogger(__name__)

EDITABLE_STATUSES = (DocumentStatus.not_submitted.value, DocumentStatus.rejected.value)


class InternshipService(BaseService):
    """A trainee's own placement forms."""

    async def _own_internship(
        self, user_id: str, internship_id: str
    ) -> Tuple[InternshipDetails, TraineeBatchEnrollment]:
        internship, enrollment = await internship_with_enrollment(self.session, internship_id)
        if enrollment.trainee_id != user_id:
            raise PermissionDeniedError("Internship belongs to another trainee")
        return internship, enrollment

    async def list_internships(self, user_id: str) -> List[InternshipRead]:
        return [InternshipRead.model_validate(row) for row in await trainee_internships(self.session, user_id)]

    async def create_internship(self, user_id: str, form: InternshipCreate) -> ActionResult:
        ctx = log_context("internship.create", user_id=user_id, company=form.company_name)
        logger.info("Creating internship details...", extra={"ctx": ctx})

        with logged_operation(logger, "Internship creation", ctx):
            if form.enrollment_id is not None:
                enrollment = await self.session.get(TraineeBatchEnrollment, form.enrollment_id)
                if enrollment is None or enrollment.trainee_id != user_id:
                    raise NotFoundError("Enrollment", form.enrollment_id)
            else:
                enrollment = await latest_enrollment(self.session, user_id)
                if enrollment is None:
                    raise ValidationFailedError("You must be enrolled in a section before submitting a placement")

            existing = await self.session.execute(
                select(InternshipDetails.id).where(InternshipDetails.enrollment_id == enrollment.id)
            )
            if existing.first() is not None:
                raise ConflictError("An internship placement already exists for this enrollment")

            internship = InternshipDetails(
                enrollment_id=enrollment.id,
                company_name=form.company_name,
                contact_number=form.contact_number,
                nature_of_business=form.nature_of_business,
                address=form.address,
                job_role=form.resolved_job_role,
                start_date=form.start_date,
                end_date=form.end_date,
                start_time=form.start_time,
                end_time=form.end_time,
                daily_schedule=json.dumps(form.daily_schedule),
                temp_email=form.supervisor_email,
            )
            self.session.add(internship)
            await self.session.commit()
            await self.session.refresh(internship)

        logger.info(f"Internship {internship.id} created", extra={"ctx": ctx})
        return ActionResult.ok("Internship details created successfully", InternshipRead.model_validate(internship))

    async def update_internship(self, user_id: str, internship_id: str, data: InternshipUpdate) -> ActionResult:
        ctx = log_context("internship.update", user_id=user_id, internship_id=internship_id)
        logger.info("Updating internship details...", extra={"ctx": ctx})

        with logged_operation(logger, "Internship update", ctx):
            internship, enrollment = await self._own_internship(user_id, internship_id)
            if internship.status == DocumentStatus.approved.value:
                raise InvalidStatusTransitionError("Internship", internship.status, "edited")

            values = data.model_dump(exclude_unset=True, exclude_none=True)
            if "supervisor_email" in values:
                values["temp_email"] = values.pop("supervisor_email")
            if "daily_schedule" in values:
                values["daily_schedule"] = json.dumps(values["daily_schedule"])
            if values.get("end_date", internship.end_date) <= values.get("start_date", internship.start_date):
                raise ValidationFailedError("End date must be after start date")
            if values.get("end_time", internship.end_time) <= values.get("start_time", internship.start_time):
                raise ValidationFailedError("End time must be after start time")
            for key, value in values.items():
                setattr(internship, key, value)

            internship.updated_at = utc_now()
            self.session.add(internship)
            log_activity(
                self.session,
                user_id=user_id,
                user_role=Role.trainee,
                activity_type=ActivityType.internship_updated,
                title="Internship details updated",
                reference_id=internship.id,
                reference_type="internship_details",
                program_batch_id=enrollment.program_batch_id,
            )
            await self.session.commit()
            await self.session.refresh(internship)

        return ActionResult.ok("Internship details updated successfully", InternshipRead.model_validate(internship))

    async def delete_internship(self, user_id: str, internship_id: str) -> ActionResult:
        ctx = log_context("internship.delete", user_id=user_id, internship_id=internship_id)
        logger.info("Deleting internship details...", extra={"ctx": ctx})

        with logged_operation(logger, "Internship deletion", ctx):
            internship, _ = await self._own_internship(user_id, internship_id)
            if internship.status == DocumentStatus.approved.value:
                raise InvalidStatusTransitionError("Internship", internship.status, "deleted")
            for table in REPORT_TABLES.values():
                reports = await self.session.execute(
                    select(table.report.id).where(table.report.internship_id == internship.id)
                )
                if reports.first() is not None:
                    raise ConflictError("Delete the reports filed under this internship first")
            await self.session.delete(internship)
            await self.session.commit()

        return ActionResult.ok("Internship details deleted successfully")

    async def submit_internship_form(self, user_id: str, internship_id: str) -> ActionResult:
        ctx = log_context("internship.submit", user_id=user_id, internship_id=internship_id)
        logger.info("Submitting internship form...", extra={"ctx": ctx})

        with logged_operation(logger, "Internship submission", ctx):
            internship, enrollment = await self._own_internship(user_id, internship_id)
            if internship.status not in EDITABLE_STATUSES:
                raise InvalidStatusTransitionError("Internship", internship.status, DocumentStatus.pending)
            internship.status = DocumentStatus.pending.value
            internship.updated_at = utc_now()
            self.session.add(internship)

            section = await self.session.get(ProgramBatch, enrollment.program_batch_id)
            if section is not None:
                notify(
                    self.session,
                    user_id=section.coordinator_id,
                    title="Internship form submitted",
                    message=f"A trainee in {section.title} submitted their placement at {internship.company_name}.",
                    notification_type=NotificationType.document_submission,
                    reference_id=internship.id,
                )
            await self.session.commit()
            await self.session.refresh(internship)

        return ActionResult.ok("Internship form submitted successfully", InternshipRead.model_validate(internship))


class UpdateInternshipStatusService(BaseService):
    """Coordinator approval and rejection of placement forms."""

    async def list_section_internships(
        self, coordinator_id: str, slug: str, status: Optional[DocumentStatus] = None
    ) -> List[InternshipRead]:
        """Placement forms of the trainees enrolled in a section, newest first."""
        section = await owned_section(self.session, coordinator_id, slug)
        stmt = (
            select(InternshipDetails)
            .join(TraineeBatchEnrollment, InternshipDetails.enrollment_id == TraineeBatchEnrollment.id)
            .where(TraineeBatchEnrollment.program_batch_id == section.id)
        )
        if status is not None:
            stmt = stmt.where(InternshipDetails.status == status.value)
        stmt = stmt.order_by(InternshipDetails.created_at.desc())
        result = await self.session.execute(stmt)
        return [InternshipRead.model_validate(row) for row in result.scalars().all()]

    async def _pending_form(
        self, coordinator_id: str, internship_id: str, slug: Optional[str] = None
    ) -> Tuple[InternshipDetails, TraineeBatchEnrollment, ProgramBatch]:
        internship, enrollment = await internship_with_enrollment(self.session, internship_id)
        section = await self.session.get(ProgramBatch, enrollment.program_batch_id)
        if section is None or section.coordinator_id != coordinator_id:
            raise PermissionDeniedError("Internship belongs to another coordinator's section")
        if slug is not None and section.title != slug:
            raise NotFoundError("Internship in section", internship_id)
        if internship.status != DocumentStatus.pending.value:
            raise InvalidStatusTransitionError("Internship", internship.status, "reviewed")
        return internship, enrollment, section

    async def find_or_create_supervisor(self, email: str, internship: InternshipDetails) -> str:
        """Return the supervisor id for ``email``, creating a pending account if needed.

        Raises:
            ConflictError: the email belongs to an account with another role
        """
        email = email.strip().lower()
        existing = (await self.session.execute(select(User).where(User.email == email))).scalars().first()
        if existing is not None:
            if existing.role != Role.supervisor.value or existing.is_deleted:
                raise ConflictError(f"{email} is already registered to a non-supervisor account")
            logger.debug(f"Found existing supervisor {existing.id} for {email}")
            return existing.id

        user = User(
            email=email,
            first_name="",
            last_name="",
            role=Role.supervisor.value,
            status=UserStatus.pending.value,
        )
        self.session.add(user)
        await self.session.flush()
        self.session.add(
            Supervisor(
                id=user.id,
                company_name=internship.company_name,
                company_address=internship.address,
                company_contact_no=internship.contact_number,
                nature_of_business=internship.nature_of_business,
            )
        )
        await self.session.flush()
        logger.info(f"Created pending supervisor account {user.id} for {email}")
        return user.id

    async def approve_form(self, coordinator_id: str, internship_id: str, slug: Optional[str] = None) -> ActionResult:
        ctx = log_context("internship_details.approve", user_id=coordinator_id, internship_id=internship_id)
        logger.info("Approving internship form...", extra={"ctx": ctx})

        with logged_operation(logger, "Internship approval", ctx):
            internship, enrollment, section = await self._pending_form(coordinator_id, internship_id, slug)

            supervisor_id: Optional[str] = internship.supervisor_id
            if internship.temp_email:
                supervisor_id = await self.find_or_create_supervisor(internship.temp_email, internship)

            internship.status = DocumentStatus.approved.value
            internship.supervisor_id = supervisor_id
            internship.temp_email = None
            internship.feedback = None
            internship.updated_at = utc_now()
            self.session.add(internship)

            enrollment.ojt_status = OJTStatus.active.value
            self.session.add(enrollment)
            trainee = await self.session.get(Trainee, enrollment.trainee_id)
            if trainee is not None:
                trainee.ojt_status = OJTStatus.active.value
                self.session.add(trainee)

            self._record(coordinator_id, internship, enrollment, section, DocumentStatus.approved)
            await self.session.commit()
            await self.session.refresh(internship)

        monitoring.log_review_event("internship", internship.id, DocumentStatus.approved.value, coordinator_id)
        logger.info("Internship form approved", extra={"ctx": ctx})
        return ActionResult.ok("Internship form approved successfully", InternshipRead.model_validate(internship))

    async def reject_form(
        self, coordinator_id: str, internship_id: str, feedback: Optional[str] = None, slug: Optional[str] = None
    ) -> ActionResult:
        ctx = log_context("internship_details.reject", user_id=coordinator_id, internship_id=internship_id)
        logger.info("Rejecting internship form...", extra={"ctx": ctx})

        with logged_operation(logger, "Internship rejection", ctx):
            internship, enrollment, section = await self._pending_form(coordinator_id, internship_id, slug)
            internship.status = DocumentStatus.rejected.value
            internship.feedback = feedback.strip() if feedback and feedback.strip() else None
            internship.updated_at = utc_now()
            self.session.add(internship)

            self._record(coordinator_id, internship, enrollment, section, DocumentStatus.rejected)
            await self.session.commit()
            await self.session.refresh(internship)

        monitoring.log_review_event("internship", internship.id, DocumentStatus.rejected.value, coordinator_id)
        return ActionResult.ok("Internship form rejected successfully", InternshipRead.model_validate(internship))

    def _record(
        self,
        coordinator_id: str,
        internship: InternshipDetails,
        enrollment: TraineeBatchEnrollment,
        section: ProgramBatch,
        decision: DocumentStatus,
    ) -> None:
        log_activity(
            self.session,
            user_id=coordinator_id,
            user_role=Role.coordinator,
            activity_type=ActivityType.internship_status_changed,
            title=f"Internship form {decision.value}",
            description=f"{internship.company_name} placement was {decision.value}",
            reference_id=internship.id,
            reference_type="internship_details",
            program_batch_id=section.id,
        )
        message = f"Your internship form for {internship.company_name} was {decision.value}."
        if internship.feedback:
            message = f"{message} Reason: {internship.feedback}"
        notify(
            self.session,
            user_id=enrollment.trainee_id,
            title=f"Internship form {decision.value}",
            message=message,
            notification_type=NotificationType.document_status_change,
            reference_id=internship.id,
        )
