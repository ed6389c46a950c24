"""
Coordinator review of requirement submissions.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from sumikapp.core import monitoring
from sumikapp.core.database.entities import (
    BatchRequirement,
    ProgramBatch,
    Requirement,
    RequirementHistory,
    RequirementType,
    TraineeBatchEnrollment,
)
from sumikapp.core.errors import InvalidStatusTransitionError, NotFoundError, PermissionDeniedError
from sumikapp.core.logging_config import log_context
from sumikapp.core.models.domain.enums import ActivityType, DocumentStatus, NotificationType, Role
from sumikapp.core.models.io.common import ActionResult
from sumikapp.core.models.io.requirements import RequirementHistoryRead

from .activity import log_activity, notify
from .base import BaseService, logged_operation
from .requirements import current_status, document_histories

logger = logging.getLogger(__name__)

APPROVED_TITLE = "Document Approved"
APPROVED_DESCRIPTION = "Your Document has been approved by the coordinator."
REJECTED_TITLE = "Document Rejected"


def rejection_description(feedback: Optional[str]) -> str:
    if feedback and feedback.strip():
        return f"Your document has been rejected by your coordinator. Reason: {feedback.strip()}"
    return "Your document has been rejected by your coordinator"


class UpdateSubmissionStatusService(BaseService):
    """Approve or reject a trainee's requirement by appending a history row."""

    async def _load(
        self, coordinator_id: str, document_id: str, slug: Optional[str]
    ) -> Tuple[Requirement, ProgramBatch, str, str]:
        document = await self.session.get(Requirement, document_id)
        if document is None:
            raise NotFoundError("Document", document_id)
        slot = await self.session.get(BatchRequirement, document.batch_requirement_id)
        section = await self.session.get(ProgramBatch, slot.program_batch_id) if slot else None
        if section is None:
            raise NotFoundError("Section requirement", document.batch_requirement_id)
        if section.coordinator_id != coordinator_id:
            raise PermissionDeniedError("Document belongs to another coordinator's section")
        if slug is not None and section.title != slug:
            raise NotFoundError("Document in section", document_id)
        enrollment = await self.session.get(TraineeBatchEnrollment, document.enrollment_id)
        requirement_type = await self.session.get(RequirementType, slot.requirement_type_id)
        name = requirement_type.name if requirement_type else document.file_name
        return document, section, enrollment.trainee_id, name

    async def approve_submission(
        self, coordinator_id: str, document_id: str, slug: Optional[str] = None
    ) -> ActionResult:
        return await self._decide(coordinator_id, document_id, DocumentStatus.approved, None, slug)

    async def reject_submission(
        self, coordinator_id: str, document_id: str, feedback: Optional[str] = None, slug: Optional[str] = None
    ) -> ActionResult:
        return await self._decide(coordinator_id, document_id, DocumentStatus.rejected, feedback, slug)

    async def _decide(
        self,
        coordinator_id: str,
        document_id: str,
        target: DocumentStatus,
        feedback: Optional[str],
        slug: Optional[str] = None,
    ) -> ActionResult:
        approved = target is DocumentStatus.approved
        ctx = log_context(
            f"submission.{'approve' if approved else 'reject'}", user_id=coordinator_id, document_id=document_id
        )
        logger.info("Reviewing trainee submission...", extra={"ctx": ctx})

        with logged_operation(logger, "Submission review", ctx):
            document, section, trainee_id, name = await self._load(coordinator_id, document_id, slug)
            history = (await document_histories(self.session, [document.id])).get(document.id, [])
            status = current_status(history)
            if status is not DocumentStatus.pending:
                raise InvalidStatusTransitionError("Document", status, target)

            entry = RequirementHistory(
                document_id=document.id,
                title=APPROVED_TITLE if approved else REJECTED_TITLE,
                description=APPROVED_DESCRIPTION if approved else rejection_description(feedback),
                document_status=target.value,
            )
            self.session.add(entry)
            log_activity(
                self.session,
                user_id=coordinator_id,
                user_role=Role.coordinator,
                activity_type=ActivityType.requirement_approved if approved else ActivityType.requirement_rejected,
                title=f"{name} {target.value}",
                reference_id=document.id,
                reference_type="requirement",
                program_batch_id=section.id,
            )
            notify(
                self.session,
                user_id=trainee_id,
                title=entry.title,
                message=entry.description or entry.title,
                notification_type=NotificationType.document_status_change,
                reference_id=document.id,
            )
            await self.session.commit()
            await self.session.refresh(entry)

        monitoring.log_review_event("requirement", document.id, target.value, coordinator_id)
        logger.info(f"Submission {target.value}", extra={"ctx": ctx})
        return ActionResult.ok(
            f"Submission {'approved' if approved else 'rejected'} successfully",
            RequirementHistoryRead.model_validate(entry),
        )
