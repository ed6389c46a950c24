"""
Trainee Internship Endpoints.

The internship placement form: company, supervisor email, schedule. Once
submitted it waits for the section coordinator's approval.
"""

from typing import List

from fastapi import APIRouter, status

from sumikapp.core.models.io.common import ActionResult
from sumikapp.core.models.io.internships import InternshipCreate, InternshipRead, InternshipUpdate
from sumikapp.server.services.deps import SessionDep, TraineeDep
from sumikapp.server.services.internships import InternshipService

router = APIRouter()


@router.get(
    "",
    response_model=List[InternshipRead],
    summary="List My Internships",
    description="Retrieve the caller's placement forms across enrollments, newest first.",
)
async def list_internships(current_user: TraineeDep, session: SessionDep) -> List[InternshipRead]:
    return await InternshipService(session).list_internships(current_user.id)


@router.post(
    "",
    response_model=ActionResult,
    status_code=status.HTTP_201_CREATED,
    summary="Create Internship Form",
    description="Create a placement form for the given (or latest) enrollment.",
    responses={
        404: {"description": "Caller is not enrolled in any section"},
        409: {"description": "The enrollment already has a placement form"},
    },
)
async def create_internship(payload: InternshipCreate, current_user: TraineeDep, session: SessionDep) -> ActionResult:
    return await InternshipService(session).create_internship(current_user.id, payload)


@router.put(
    "/{internship_id}",
    response_model=ActionResult,
    summary="Update Internship Form",
    description="Edit a placement form that has not been approved.",
    responses={409: {"description": "Form is already approved"}},
)
async def update_internship(
    internship_id: str, payload: InternshipUpdate, current_user: TraineeDep, session: SessionDep
) -> ActionResult:
    return await InternshipService(session).update_internship(current_user.id, internship_id, payload)


@router.delete(
    "/{internship_id}",
    response_model=ActionResult,
    summary="Delete Internship Form",
    description="Delete a placement form that is not approved and has no reports.",
    responses={409: {"description": "Form is approved or already has reports"}},
)
async def delete_internship(internship_id: str, current_user: TraineeDep, session: SessionDep) -> ActionResult:
    return await InternshipService(session).delete_internship(current_user.id, internship_id)


@router.post(
    "/{internship_id}/submit",
    response_model=ActionResult,
    summary="Submit Internship Form",
    description="Send the placement form to the section coordinator for approval.",
    responses={409: {"description": "Form is already pending or approved"}},
)
async def submit_internship_form(internship_id: str, current_user: TraineeDep, session: SessionDep) -> ActionResult:
    return await InternshipService(session).submit_internship_form(current_user.id, internship_id)
