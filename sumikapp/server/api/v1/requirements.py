"""
Trainee Requirement Endpoints.

Trainees see the documents their section asks for and upload files against
them. Files are stored by the frontend; this API records the uploaded file's
metadata and its review history.
"""

from typing import List

from fastapi import APIRouter, status

from sumikapp.core.models.io.common import ActionResult
from sumikapp.core.models.io.requirements import RequirementRead, RequirementUpload
from sumikapp.server.services.deps import SessionDep, TraineeDep
from sumikapp.server.services.requirements import TraineeRequirementService

router = APIRouter()


@router.get(
    "",
    response_model=List[RequirementRead],
    summary="List My Requirements",
    description="Retrieve every requirement of the caller's current section with its latest status and history.",
)
async def list_requirements(current_user: TraineeDep, session: SessionDep) -> List[RequirementRead]:
    return await TraineeRequirementService(session).list_requirements(current_user.id)


@router.post(
    "",
    response_model=ActionResult,
    status_code=status.HTTP_201_CREATED,
    summary="Upload Requirement",
    description="Record an uploaded document for a section requirement and send it for review.",
    responses={
        403: {"description": "Requirement belongs to a section the caller is not enrolled in"},
        409: {"description": "Document is already approved"},
    },
)
async def upload_requirement(payload: RequirementUpload, current_user: TraineeDep, session: SessionDep) -> ActionResult:
    """
    Upload a requirement document.

    Re-uploading replaces the previous file and puts the document back to
    ``pending``. An approved document cannot be replaced.
    """
    return await TraineeRequirementService(session).upload_requirement(current_user.id, payload)


@router.delete(
    "/{requirement_id}",
    response_model=ActionResult,
    summary="Delete Requirement Upload",
    description="Remove an uploaded document that has not been approved yet.",
    responses={409: {"description": "Document is already approved"}},
)
async def delete_requirement(requirement_id: str, current_user: TraineeDep, session: SessionDep) -> ActionResult:
    return await TraineeRequirementService(session).delete_requirement(current_user.id, requirement_id)
