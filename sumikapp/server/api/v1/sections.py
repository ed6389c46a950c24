"""
Section (Program Batch) Endpoints.

Everything a coordinator manages inside one of their sections. A section is
addressed by its slug, which is its title (unique per coordinator):

- the section itself and its enrolled trainees
- announcements posted to the section
- requirements: the batch view, per-trainee documents, custom requirements
  and the approval of uploaded documents
- internship placement forms and weekly reports of its trainees
"""

from typing import List, Optional

from fastapi import APIRouter, status

from sumikapp.core.models.domain.enums import DocumentStatus
from sumikapp.core.models.io.common import ActionResult
from sumikapp.core.models.io.internships import InternshipRead, InternshipReview
from sumikapp.core.models.io.reports import ReviewReportRead
from sumikapp.core.models.io.requirements import (
    BatchRequirementRead,
    CustomRequirementCreate,
    CustomRequirementUpdate,
    SubmissionReview,
    TraineeRequirementsRead,
)
from sumikapp.core.models.io.sections import (
    AddStudentsRequest,
    AnnouncementCreate,
    AnnouncementRead,
    AnnouncementUpdate,
    SectionCreate,
    SectionRead,
    SectionTraineeRead,
    SectionUpdate,
)
from sumikapp.server.services.announcements import AnnouncementService
from sumikapp.server.services.deps import CoordinatorDep, SessionDep
from sumikapp.server.services.internships import UpdateInternshipStatusService
from sumikapp.server.services.requirements import CustomRequirementService
from sumikapp.server.services.sections import EnrollmentService, SectionService
from sumikapp.server.services.submission_status import UpdateSubmissionStatusService
from sumikapp.server.services.trainee_reports import ReviewReportService

router = APIRouter()

_SECTION_NOT_FOUND = {404: {"description": "Section not found among the caller's sections"}}


# =====================================================================
# Sections
# =====================================================================


@router.get(
    "",
    response_model=List[SectionRead],
    summary="List Sections",
    description="Retrieve the caller's sections with their trainee counts.",
)
async def list_sections(current_user: CoordinatorDep, session: SessionDep) -> List[SectionRead]:
    return await SectionService(session).list_sections(current_user.id)


@router.post(
    "",
    response_model=ActionResult,
    status_code=status.HTTP_201_CREATED,
    summary="Create Section",
    description="Create a section. Every predefined requirement is attached to it automatically.",
    responses={409: {"description": "The caller already has a section with this title"}},
)
async def create_section(payload: SectionCreate, current_user: CoordinatorDep, session: SessionDep) -> ActionResult:
    return await SectionService(session).create_section(current_user.id, payload)


@router.get("/{slug}", response_model=SectionRead, summary="Get Section", responses=_SECTION_NOT_FOUND)
async def get_section(slug: str, current_user: CoordinatorDep, session: SessionDep) -> SectionRead:
    return await SectionService(session).get_section(current_user.id, slug)


@router.put(
    "/{slug}",
    response_model=ActionResult,
    summary="Update Section",
    description="Update a section's title, description, internship code, hours or date range.",
    responses={**_SECTION_NOT_FOUND, 409: {"description": "Title already used"}},
)
async def update_section(
    slug: str, payload: SectionUpdate, current_user: CoordinatorDep, session: SessionDep
) -> ActionResult:
    return await SectionService(session).update_section(current_user.id, slug, payload)


@router.delete(
    "/{slug}",
    response_model=ActionResult,
    summary="Delete Section",
    description="Delete an empty section with its announcements and requirements.",
    responses={**_SECTION_NOT_FOUND, 409: {"description": "Trainees are still enrolled"}},
)
async def delete_section(slug: str, current_user: CoordinatorDep, session: SessionDep) -> ActionResult:
    return await SectionService(session).delete_section(current_user.id, slug)


# =====================================================================
# Trainees
# =====================================================================


@router.get(
    "/{slug}/trainees",
    response_model=List[SectionTraineeRead],
    summary="List Section Trainees",
    responses=_SECTION_NOT_FOUND,
)
async def list_section_trainees(
    slug: str, current_user: CoordinatorDep, session: SessionDep
) -> List[SectionTraineeRead]:
    return await EnrollmentService(session).list_section_trainees(current_user.id, slug)


@router.post(
    "/{slug}/trainees",
    response_model=ActionResult,
    summary="Add Trainees to Section",
    description="Enroll trainees in bulk. Each trainee is checked against the internship enrollment rules.",
    responses=_SECTION_NOT_FOUND,
)
async def add_students(
    slug: str, payload: AddStudentsRequest, current_user: CoordinatorDep, session: SessionDep
) -> ActionResult:
    """
    Add trainees to a section.

    The call succeeds even when some trainees are refused; ``data`` lists the
    enrolled ids and, for each refusal, the reason (already enrolled,
    Internship 1 not finished, ...).
    """
    return await EnrollmentService(session).add_students(current_user.id, slug, payload.trainee_ids)


@router.delete(
    "/{slug}/trainees/{trainee_id}",
    response_model=ActionResult,
    summary="Remove Trainee from Section",
    description="Unenroll a trainee who has no placement form yet, removing their uploaded documents.",
    responses={**_SECTION_NOT_FOUND, 409: {"description": "Trainee already has an internship"}},
)
async def remove_student(slug: str, trainee_id: str, current_user: CoordinatorDep, session: SessionDep) -> ActionResult:
    return await EnrollmentService(session).remove_student_from_section(current_user.id, slug, trainee_id)


# =====================================================================
# Announcements
# =====================================================================


@router.get(
    "/{slug}/announcements",
    response_model=List[AnnouncementRead],
    summary="List Announcements",
    responses=_SECTION_NOT_FOUND,
)
async def list_announcements(slug: str, current_user: CoordinatorDep, session: SessionDep) -> List[AnnouncementRead]:
    return await AnnouncementService(session).list_announcements(current_user.id, slug)


@router.post(
    "/{slug}/announcements",
    response_model=ActionResult,
    status_code=status.HTTP_201_CREATED,
    summary="Post Announcement",
    description="Post an announcement to a section and notify its trainees.",
    responses=_SECTION_NOT_FOUND,
)
async def create_announcement(
    slug: str, payload: AnnouncementCreate, current_user: CoordinatorDep, session: SessionDep
) -> ActionResult:
    return await AnnouncementService(session).create_announcement(current_user.id, slug, payload)


@router.put("/{slug}/announcements/{announcement_id}", response_model=ActionResult, summary="Update Announcement")
async def update_announcement(
    slug: str, announcement_id: str, payload: AnnouncementUpdate, current_user: CoordinatorDep, session: SessionDep
) -> ActionResult:
    return await AnnouncementService(session).update_announcement(current_user.id, slug, announcement_id, payload)


@router.delete("/{slug}/announcements/{announcement_id}", response_model=ActionResult, summary="Delete Announcement")
async def delete_announcement(
    slug: str, announcement_id: str, current_user: CoordinatorDep, session: SessionDep
) -> ActionResult:
    return await AnnouncementService(session).delete_announcement(current_user.id, slug, announcement_id)


# =====================================================================
# Requirements
# =====================================================================


@router.get(
    "/{slug}/requirements",
    response_model=List[BatchRequirementRead],
    summary="List Section Requirements",
    description="Retrieve each requirement of the section with submission counts and compliance percentage.",
    responses=_SECTION_NOT_FOUND,
)
async def get_batch_requirements(
    slug: str, current_user: CoordinatorDep, session: SessionDep
) -> List[BatchRequirementRead]:
    return await CustomRequirementService(session).get_batch_requirements(current_user.id, slug)


@router.get(
    "/{slug}/requirements/trainees",
    response_model=List[TraineeRequirementsRead],
    summary="List Trainee Documents",
    description="Retrieve, per enrolled trainee, every requirement with its uploaded document and status.",
    responses=_SECTION_NOT_FOUND,
)
async def get_trainee_requirements(
    slug: str, current_user: CoordinatorDep, session: SessionDep
) -> List[TraineeRequirementsRead]:
    return await CustomRequirementService(session).get_trainee_requirements(current_user.id, slug)


@router.post(
    "/{slug}/requirements",
    response_model=ActionResult,
    status_code=status.HTTP_201_CREATED,
    summary="Create Custom Requirement",
    description="Add a requirement that only this section asks for.",
    responses={**_SECTION_NOT_FOUND, 409: {"description": "Requirement name already used in the section"}},
)
async def create_custom_requirement(
    slug: str, payload: CustomRequirementCreate, current_user: CoordinatorDep, session: SessionDep
) -> ActionResult:
    return await CustomRequirementService(session).create_custom_requirement(current_user.id, slug, payload)


@router.put(
    "/{slug}/requirements/{batch_requirement_id}",
    response_model=ActionResult,
    summary="Update Custom Requirement",
    responses={403: {"description": "Predefined requirements cannot be edited here"}},
)
async def update_custom_requirement(
    slug: str,
    batch_requirement_id: str,
    payload: CustomRequirementUpdate,
    current_user: CoordinatorDep,
    session: SessionDep,
) -> ActionResult:
    service = CustomRequirementService(session)
    return await service.update_custom_requirement(current_user.id, slug, batch_requirement_id, payload)


@router.delete(
    "/{slug}/requirements/{batch_requirement_id}",
    response_model=ActionResult,
    summary="Delete Custom Requirement",
    responses={
        403: {"description": "Predefined requirements cannot be deleted here"},
        409: {"description": "Trainees already uploaded documents for it"},
    },
)
async def delete_custom_requirement(
    slug: str, batch_requirement_id: str, current_user: CoordinatorDep, session: SessionDep
) -> ActionResult:
    return await CustomRequirementService(session).delete_custom_requirement(
        current_user.id, slug, batch_requirement_id
    )


@router.post(
    "/{slug}/requirements/submissions/{document_id}/approve",
    response_model=ActionResult,
    summary="Approve Submission",
    description="Approve a pending requirement document.",
    responses={409: {"description": "Document is not pending"}},
)
async def approve_submission(
    slug: str, document_id: str, current_user: CoordinatorDep, session: SessionDep
) -> ActionResult:
    return await UpdateSubmissionStatusService(session).approve_submission(current_user.id, document_id, slug)


@router.post(
    "/{slug}/requirements/submissions/{document_id}/reject",
    response_model=ActionResult,
    summary="Reject Submission",
    description="Reject a pending requirement document, optionally with a reason shown to the trainee.",
    responses={409: {"description": "Document is not pending"}},
)
async def reject_submission(
    slug: str,
    document_id: str,
    current_user: CoordinatorDep,
    session: SessionDep,
    payload: Optional[SubmissionReview] = None,
) -> ActionResult:
    feedback = payload.feedback if payload else None
    return await UpdateSubmissionStatusService(session).reject_submission(current_user.id, document_id, feedback, slug)


# =====================================================================
# Internships and reports
# =====================================================================


@router.get(
    "/{slug}/internships",
    response_model=List[InternshipRead],
    summary="List Placement Forms",
    description="Retrieve the placement forms of the section's trainees, optionally filtered by status.",
    responses=_SECTION_NOT_FOUND,
)
async def list_section_internships(
    slug: str, current_user: CoordinatorDep, session: SessionDep, status: Optional[DocumentStatus] = None
) -> List[InternshipRead]:
    return await UpdateInternshipStatusService(session).list_section_internships(current_user.id, slug, status)


@router.post(
    "/{slug}/internships/{internship_id}/approve",
    response_model=ActionResult,
    summary="Approve Placement Form",
    description="Approve a pending form, link the trainee's supervisor and mark the OJT as active.",
    responses={
        409: {"description": "Form is not pending, or the supervisor email belongs to another role"},
    },
)
async def approve_internship(
    slug: str, internship_id: str, current_user: CoordinatorDep, session: SessionDep
) -> ActionResult:
    """
    Approve a placement form.

    When the form names a supervisor email with no account yet, a pending
    supervisor account is created from the company details on the form.
    """
    return await UpdateInternshipStatusService(session).approve_form(current_user.id, internship_id, slug)


@router.post(
    "/{slug}/internships/{internship_id}/reject",
    response_model=ActionResult,
    summary="Reject Placement Form",
    responses={409: {"description": "Form is not pending"}},
)
async def reject_internship(
    slug: str,
    internship_id: str,
    current_user: CoordinatorDep,
    session: SessionDep,
    payload: Optional[InternshipReview] = None,
) -> ActionResult:
    feedback = payload.feedback if payload else None
    return await UpdateInternshipStatusService(session).reject_form(current_user.id, internship_id, feedback, slug)


@router.get(
    "/{slug}/weekly-reports",
    response_model=List[ReviewReportRead],
    summary="List Section Weekly Reports",
    description="Retrieve the weekly reports of the section's trainees, optionally filtered by status.",
    responses=_SECTION_NOT_FOUND,
)
async def list_section_weekly_reports(
    slug: str, current_user: CoordinatorDep, session: SessionDep, status: Optional[DocumentStatus] = None
) -> List[ReviewReportRead]:
    return await ReviewReportService(session).get_section_trainee_reports(current_user.id, slug, status)
