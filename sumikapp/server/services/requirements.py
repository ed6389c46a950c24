"""
Requirement documents.

A requirement's status is never stored on the ``requirements`` row itself.
It is the ``document_status`` of its newest ``requirements_history`` row; a
batch requirement the trainee has not uploaded anything for is
``not submitted``.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from sumikapp.core.database import utc_now
from sumikapp.core.database.entities import (
    BatchRequirement,
    ProgramBatch,
    Requirement,
    RequirementHistory,
    RequirementType,
    TraineeBatchEnrollment,
    User,
)
from sumikapp.core.errors import (
    ConflictError,
    InvalidStatusTransitionError,
    NotFoundError,
    PermissionDeniedError,
)
from sumikapp.core.logging_config import log_context
from sumikapp.core.models.domain.enums import ActivityType, DocumentStatus, NotificationType, Role
from sumikapp.core.models.io.common import ActionResult
from sumikapp.core.models.io.requirements import (
    BatchRequirementRead,
    CustomRequirementCreate,
    CustomRequirementUpdate,
    RequirementHistoryRead,
    RequirementRead,
    RequirementTypeCreate,
    RequirementTypeRead,
    RequirementTypeUpdate,
    RequirementUpload,
    TraineeRequirementsRead,
)

from .activity import log_activity, notify
from .base import BaseService, logged_operation
from .lookups import latest_enrollment, owned_section

logger = logging.getLogger(__name__)

SUBMITTED_TITLE = "Document Submitted"
SUBMITTED_DESCRIPTION = "You submitted your document to your OJT coordinator. Please wait for approval."


async def document_histories(
    session: AsyncSession, document_ids: Iterable[str]
) -> Dict[str, List[RequirementHistory]]:
    """History rows per document, oldest first."""
    ids = list(document_ids)
    if not ids:
        return {}
    stmt = select(RequirementHistory).where(RequirementHistory.document_id.in_(ids)).order_by(RequirementHistory.date)
    histories: Dict[str, List[RequirementHistory]] = defaultdict(list)
    for row in (await session.execute(stmt)).scalars().all():
        histories[row.document_id].append(row)
    return histories


def current_status(history: List[RequirementHistory]) -> DocumentStatus:
    if not history:
        return DocumentStatus.not_submitted
    return DocumentStatus(history[-1].document_status)


class PredefinedRequirementService(BaseService):
    """Admin-managed requirement types attached to every new section."""

    async def _get(self, requirement_type_id: str) -> RequirementType:
        requirement_type = await self.session.get(RequirementType, requirement_type_id)
        if requirement_type is None or not requirement_type.is_predefined:
            raise NotFoundError("Predefined requirement", requirement_type_id)
        return requirement_type

    async def _name_taken(self, name: str, exclude_id: Optional[str] = None) -> bool:
        stmt = select(RequirementType.id).where(
            RequirementType.is_predefined == True,  # noqa: E712
            func.lower(RequirementType.name) == name.strip().lower(),
        )
        if exclude_id is not None:
            stmt = stmt.where(RequirementType.id != exclude_id)
        return (await self.session.execute(stmt)).first() is not None

    async def list_predefined(self) -> List[RequirementTypeRead]:
        stmt = (
            select(RequirementType)
            .where(RequirementType.is_predefined == True)  # noqa: E712
            .order_by(RequirementType.name)
        )
        result = await self.session.execute(stmt)
        return [RequirementTypeRead.model_validate(row) for row in result.scalars().all()]

    async def create_predefined(self, admin_id: str, data: RequirementTypeCreate) -> ActionResult:
        ctx = log_context("predefined_requirement.create", user_id=admin_id, requirement=data.name)
        logger.info("Creating predefined requirement...", extra={"ctx": ctx})

        with logged_operation(logger, "Predefined requirement creation", ctx):
            if await self._name_taken(data.name):
                raise ConflictError(f"Predefined requirement '{data.name}' already exists")
            requirement_type = RequirementType(
                name=data.name.strip(),
                description=data.description,
                is_predefined=True,
                created_by=admin_id,
            )
            self.session.add(requirement_type)
            await self.session.commit()
            await self.session.refresh(requirement_type)

        return ActionResult.ok(
            "Predefined requirement created successfully", RequirementTypeRead.model_validate(requirement_type)
        )

    async def update_predefined(self, requirement_type_id: str, data: RequirementTypeUpdate) -> ActionResult:
        ctx = log_context("predefined_requirement.update", requirement_type_id=requirement_type_id)
        logger.info("Updating predefined requirement...", extra={"ctx": ctx})

        with logged_operation(logger, "Predefined requirement update", ctx):
            requirement_type = await self._get(requirement_type_id)
            values = data.model_dump(exclude_unset=True, exclude_none=True)
            if values.get("name") and await self._name_taken(values["name"], exclude_id=requirement_type.id):
                raise ConflictError(f"Predefined requirement '{values['name']}' already exists")
            for key, value in values.items():
                setattr(requirement_type, key, value)
            self.session.add(requirement_type)
            await self.session.commit()
            await self.session.refresh(requirement_type)

        return ActionResult.ok(
            "Predefined requirement updated successfully", RequirementTypeRead.model_validate(requirement_type)
        )

    async def delete_predefined(self, requirement_type_id: str) -> ActionResult:
        """Delete a predefined type and its unused section slots.

        Types that trainees already uploaded documents for are kept.
        """
        ctx = log_context("predefined_requirement.delete", requirement_type_id=requirement_type_id)
        logger.info("Deleting predefined requirement...", extra={"ctx": ctx})

        with logged_operation(logger, "Predefined requirement deletion", ctx):
            requirement_type = await self._get(requirement_type_id)
            await _delete_type_with_slots(self.session, requirement_type)
            await self.session.commit()

        return ActionResult.ok("Predefined requirement deleted successfully")


async def _delete_type_with_slots(session: AsyncSession, requirement_type: RequirementType) -> None:
    stmt = select(BatchRequirement).where(BatchRequirement.requirement_type_id == requirement_type.id)
    slots = list((await session.execute(stmt)).scalars().all())
    if slots:
        uploads = await session.execute(
            select(func.count(Requirement.id)).where(Requirement.batch_requirement_id.in_([slot.id for slot in slots]))
        )
        if uploads.scalar_one():
            raise ConflictError("Trainees have already submitted documents for this requirement")
    for slot in slots:
        await session.delete(slot)
    await session.flush()
    await session.delete(requirement_type)


class CustomRequirementService(BaseService):
    """Coordinator-defined requirements of one section, and compliance views."""

    async def _own_slot(
        self, coordinator_id: str, slug: str, batch_requirement_id: str
    ) -> Tuple[ProgramBatch, BatchRequirement, RequirementType]:
        section = await owned_section(self.session, coordinator_id, slug)
        slot = await self.session.get(BatchRequirement, batch_requirement_id)
        if slot is None or slot.program_batch_id != section.id:
            raise NotFoundError("Section requirement", batch_requirement_id)
        requirement_type = await self.session.get(RequirementType, slot.requirement_type_id)
        if requirement_type is None:
            raise NotFoundError("Requirement type", slot.requirement_type_id)
        if requirement_type.is_predefined:
            raise PermissionDeniedError("Predefined requirements can only be changed by an admin")
        return section, slot, requirement_type

    async def create_custom_requirement(
        self, coordinator_id: str, slug: str, data: CustomRequirementCreate
    ) -> ActionResult:
        ctx = log_context("custom_requirement.create", user_id=coordinator_id, slug=slug, requirement=data.name)
        logger.info("Creating custom requirement...", extra={"ctx": ctx})

        with logged_operation(logger, "Custom requirement creation", ctx):
            section = await owned_section(self.session, coordinator_id, slug)
            existing = await self.session.execute(
                select(BatchRequirement.id)
                .join(RequirementType, BatchRequirement.requirement_type_id == RequirementType.id)
                .where(
                    BatchRequirement.program_batch_id == section.id,
                    func.lower(RequirementType.name) == data.name.strip().lower(),
                )
            )
            if existing.first() is not None:
                raise ConflictError(f"Section already requires '{data.name}'")

            requirement_type = RequirementType(
                name=data.name.strip(),
                description=data.description,
                is_predefined=False,
                created_by=coordinator_id,
            )
            self.session.add(requirement_type)
            await self.session.flush()
            slot = BatchRequirement(
                program_batch_id=section.id,
                requirement_type_id=requirement_type.id,
                is_mandatory=data.is_mandatory,
            )
            self.session.add(slot)
            log_activity(
                self.session,
                user_id=coordinator_id,
                user_role=Role.coordinator,
                activity_type=ActivityType.batch_requirement_added,
                title=f"Requirement {requirement_type.name} added",
                reference_id=slot.id,
                reference_type="batch_requirement",
                program_batch_id=section.id,
            )
            await self.session.commit()

        logger.info(f"Custom requirement {slot.id} created", extra={"ctx": ctx})
        return ActionResult.ok("Custom requirement created successfully", {"batch_requirement_id": slot.id})

    async def update_custom_requirement(
        self, coordinator_id: str, slug: str, batch_requirement_id: str, data: CustomRequirementUpdate
    ) -> ActionResult:
        ctx = log_context(
            "custom_requirement.update", user_id=coordinator_id, batch_requirement_id=batch_requirement_id
        )
        logger.info("Updating custom requirement...", extra={"ctx": ctx})

        with logged_operation(logger, "Custom requirement update", ctx):
            _, slot, requirement_type = await self._own_slot(coordinator_id, slug, batch_requirement_id)
            values = data.model_dump(exclude_unset=True)
            is_mandatory = values.pop("is_mandatory", None)
            if is_mandatory is not None:
                slot.is_mandatory = is_mandatory
                self.session.add(slot)
            if values.get("name"):
                requirement_type.name = values["name"].strip()
            if "description" in values:
                requirement_type.description = values["description"]
            self.session.add(requirement_type)
            await self.session.commit()

        return ActionResult.ok("Custom requirement updated successfully", {"batch_requirement_id": slot.id})

    async def delete_custom_requirement(
        self, coordinator_id: str, slug: str, batch_requirement_id: str
    ) -> ActionResult:
        ctx = log_context(
            "custom_requirement.delete", user_id=coordinator_id, batch_requirement_id=batch_requirement_id
        )
        logger.info("Deleting custom requirement...", extra={"ctx": ctx})

        with logged_operation(logger, "Custom requirement deletion", ctx):
            _, _, requirement_type = await self._own_slot(coordinator_id, slug, batch_requirement_id)
            await _delete_type_with_slots(self.session, requirement_type)
            await self.session.commit()

        return ActionResult.ok("Custom requirement deleted successfully")

    async def _section_slots(self, section_id: str) -> List[Tuple[BatchRequirement, RequirementType]]:
        stmt = (
            select(BatchRequirement, RequirementType)
            .join(RequirementType, BatchRequirement.requirement_type_id == RequirementType.id)
            .where(BatchRequirement.program_batch_id == section_id)
            .order_by(RequirementType.is_predefined.desc(), RequirementType.name)
        )
        return [(slot, requirement_type) for slot, requirement_type in (await self.session.execute(stmt)).all()]

    async def get_batch_requirements(self, coordinator_id: str, slug: str) -> List[BatchRequirementRead]:
        """Every requirement of the section with compliance counts.

        ``compliance_percentage`` is the share of enrolled trainees whose
        document for that requirement is approved.
        """
        section = await owned_section(self.session, coordinator_id, slug)
        slots = await self._section_slots(section.id)
        total_trainees = (
            await self.session.execute(
                select(func.count(TraineeBatchEnrollment.id)).where(
                    TraineeBatchEnrollment.program_batch_id == section.id
                )
            )
        ).scalar_one()

        uploads: List[Requirement] = []
        if slots:
            stmt = select(Requirement).where(Requirement.batch_requirement_id.in_([slot.id for slot, _ in slots]))
            uploads = list((await self.session.execute(stmt)).scalars().all())
        histories = await document_histories(self.session, [upload.id for upload in uploads])

        counts: Dict[str, Dict[str, int]] = defaultdict(lambda: defaultdict(int))
        for upload in uploads:
            counts[upload.batch_requirement_id][current_status(histories.get(upload.id, [])).value] += 1

        items = []
        for slot, requirement_type in slots:
            by_status = counts.get(slot.id, {})
            submitted = sum(by_status.values())
            approved = by_status.get(DocumentStatus.approved.value, 0)
            items.append(
                BatchRequirementRead(
                    id=slot.id,
                    requirement_type_id=requirement_type.id,
                    name=requirement_type.name,
                    description=requirement_type.description,
                    is_mandatory=slot.is_mandatory,
                    is_predefined=requirement_type.is_predefined,
                    submitted=submitted,
                    pending=by_status.get(DocumentStatus.pending.value, 0),
                    approved=approved,
                    rejected=by_status.get(DocumentStatus.rejected.value, 0),
                    not_submitted=max(total_trainees - submitted, 0),
                    total_trainees=total_trainees,
                    compliance_percentage=round(approved / total_trainees * 100, 2) if total_trainees else 0.0,
                )
            )
        return items

    async def get_trainee_requirements(self, coordinator_id: str, slug: str) -> List[TraineeRequirementsRead]:
        """Each enrolled trainee with the status of every section requirement."""
        section = await owned_section(self.session, coordinator_id, slug)
        slots = await self._section_slots(section.id)
        stmt = (
            select(TraineeBatchEnrollment, User)
            .join(User, TraineeBatchEnrollment.trainee_id == User.id)
            .where(TraineeBatchEnrollment.program_batch_id == section.id)
            .order_by(User.last_name, User.first_name)
        )
        enrollments = (await self.session.execute(stmt)).all()
        uploads: List[Requirement] = []
        if enrollments:
            upload_stmt = select(Requirement).where(Requirement.enrollment_id.in_([row[0].id for row in enrollments]))
            uploads = list((await self.session.execute(upload_stmt)).scalars().all())
        histories = await document_histories(self.session, [upload.id for upload in uploads])
        by_key = {(upload.enrollment_id, upload.batch_requirement_id): upload for upload in uploads}

        return [
            TraineeRequirementsRead(
                trainee_id=user.id,
                trainee_name=user.full_name,
                enrollment_id=enrollment.id,
                documents=[
                    _requirement_read(slot, requirement_type, by_key.get((enrollment.id, slot.id)), histories)
                    for slot, requirement_type in slots
                ],
            )
            for enrollment, user in enrollments
        ]


def _requirement_read(
    slot: BatchRequirement,
    requirement_type: RequirementType,
    upload: Optional[Requirement],
    histories: Dict[str, List[RequirementHistory]],
) -> RequirementRead:
    read = RequirementRead(
        batch_requirement_id=slot.id,
        requirement_name=requirement_type.name,
        requirement_description=requirement_type.description,
        is_mandatory=slot.is_mandatory,
    )
    if upload is None:
        return read
    history = histories.get(upload.id, [])
    return read.model_copy(
        update={
            "requirement_id": upload.id,
            "file_name": upload.file_name,
            "file_path": upload.file_path,
            "file_size": upload.file_size,
            "file_type": upload.file_type,
            "submitted_at": upload.submitted_at,
            "status": current_status(history),
            "history": [RequirementHistoryRead.model_validate(row) for row in reversed(history)],
        }
    )


class TraineeRequirementService(BaseService):
    """A trainee's own requirement uploads."""

    async def list_requirements(self, user_id: str) -> List[RequirementRead]:
        enrollment = await latest_enrollment(self.session, user_id)
        if enrollment is None:
            return []
        stmt = (
            select(BatchRequirement, RequirementType)
            .join(RequirementType, BatchRequirement.requirement_type_id == RequirementType.id)
            .where(BatchRequirement.program_batch_id == enrollment.program_batch_id)
            .order_by(RequirementType.is_predefined.desc(), RequirementType.name)
        )
        slots = (await self.session.execute(stmt)).all()
        uploads = (
            await self.session.execute(select(Requirement).where(Requirement.enrollment_id == enrollment.id))
        ).scalars().all()
        histories = await document_histories(self.session, [upload.id for upload in uploads])
        by_slot = {upload.batch_requirement_id: upload for upload in uploads}
        return [
            _requirement_read(slot, requirement_type, by_slot.get(slot.id), histories)
            for slot, requirement_type in slots
        ]

    async def upload_requirement(self, user_id: str, data: RequirementUpload) -> ActionResult:
        """Record an uploaded document and submit it for review.

        Re-uploading replaces the previous file unless it was already approved.
        """
        ctx = log_context("requirement.upload", user_id=user_id, batch_requirement_id=data.batch_requirement_id)
        logger.info("Uploading requirement...", extra={"ctx": ctx})

        with logged_operation(logger, "Requirement upload", ctx):
            slot = await self.session.get(BatchRequirement, data.batch_requirement_id)
            if slot is None:
                raise NotFoundError("Section requirement", data.batch_requirement_id)
            enrollment = (
                await self.session.execute(
                    select(TraineeBatchEnrollment).where(
                        TraineeBatchEnrollment.trainee_id == user_id,
                        TraineeBatchEnrollment.program_batch_id == slot.program_batch_id,
                    )
                )
            ).scalars().first()
            if enrollment is None:
                raise PermissionDeniedError("You are not enrolled in the section that owns this requirement")

            upload = (
                await self.session.execute(
                    select(Requirement).where(
                        Requirement.enrollment_id == enrollment.id,
                        Requirement.batch_requirement_id == slot.id,
                    )
                )
            ).scalars().first()
            if upload is not None:
                history = (await document_histories(self.session, [upload.id])).get(upload.id, [])
                status = current_status(history)
                if status is DocumentStatus.approved:
                    raise InvalidStatusTransitionError("Requirement", status, DocumentStatus.pending)
            else:
                upload = Requirement(enrollment_id=enrollment.id, batch_requirement_id=slot.id)

            upload.file_name = data.file_name
            upload.file_path = data.file_path
            upload.file_size = data.file_size
            upload.file_type = data.file_type
            upload.submitted_at = utc_now()
            self.session.add(upload)
            await self.session.flush()
            self.session.add(
                RequirementHistory(
                    document_id=upload.id,
                    title=SUBMITTED_TITLE,
                    description=SUBMITTED_DESCRIPTION,
                    document_status=DocumentStatus.pending.value,
                )
            )

            section = await self.session.get(ProgramBatch, slot.program_batch_id)
            requirement_type = await self.session.get(RequirementType, slot.requirement_type_id)
            name = requirement_type.name if requirement_type else data.file_name
            log_activity(
                self.session,
                user_id=user_id,
                user_role=Role.trainee,
                activity_type=ActivityType.requirement_submitted,
                title=f"{name} submitted",
                reference_id=upload.id,
                reference_type="requirement",
                program_batch_id=slot.program_batch_id,
            )
            if section is not None:
                notify(
                    self.session,
                    user_id=section.coordinator_id,
                    title="New document submission",
                    message=f"A trainee in {section.title} submitted {name}.",
                    notification_type=NotificationType.document_submission,
                    reference_id=upload.id,
                )
            await self.session.commit()

        logger.info(f"Requirement {upload.id} submitted for review", extra={"ctx": ctx})
        return ActionResult.ok("Requirement uploaded successfully", {"requirement_id": upload.id})

    async def delete_requirement(self, user_id: str, requirement_id: str) -> ActionResult:
        ctx = log_context("requirement.delete", user_id=user_id, requirement_id=requirement_id)
        logger.info("Deleting requirement...", extra={"ctx": ctx})

        with logged_operation(logger, "Requirement deletion", ctx):
            upload = await self.session.get(Requirement, requirement_id)
            if upload is None:
                raise NotFoundError("Requirement", requirement_id)
            enrollment = await self.session.get(TraineeBatchEnrollment, upload.enrollment_id)
            if enrollment is None or enrollment.trainee_id != user_id:
                raise PermissionDeniedError("Requirement belongs to another trainee")

            history = (await document_histories(self.session, [upload.id])).get(upload.id, [])
            status = current_status(history)
            if status is DocumentStatus.approved:
                raise InvalidStatusTransitionError("Requirement", status, "deleted")

            for row in history:
                await self.session.delete(row)
            await self.session.flush()
            await self.session.delete(upload)
            log_activity(
                self.session,
                user_id=user_id,
                user_role=Role.trainee,
                activity_type=ActivityType.requirement_deleted,
                title=f"{upload.file_name} deleted",
                reference_id=upload.id,
                reference_type="requirement",
                program_batch_id=enrollment.program_batch_id,
            )
            await self.session.commit()

        return ActionResult.ok("Requirement deleted successfully")
