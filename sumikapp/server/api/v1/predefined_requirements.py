"""
Predefined Requirement Endpoints.

Admin-managed requirement types that every new section asks for
automatically (e.g. medical certificate, parent consent).
"""

from typing import List

from fastapi import APIRouter, status

from sumikapp.core.models.io.common import ActionResult
from sumikapp.core.models.io.requirements import RequirementTypeCreate, RequirementTypeRead, RequirementTypeUpdate
from sumikapp.server.services.deps import AdminDep, SessionDep
from sumikapp.server.services.requirements import PredefinedRequirementService

router = APIRouter()


@router.get("", response_model=List[RequirementTypeRead], summary="List Predefined Requirements")
async def list_predefined(current_user: AdminDep, session: SessionDep) -> List[RequirementTypeRead]:
    return await PredefinedRequirementService(session).list_predefined()


@router.post(
    "",
    response_model=ActionResult,
    status_code=status.HTTP_201_CREATED,
    summary="Create Predefined Requirement",
    description="Create a requirement type that new sections will include.",
    responses={409: {"description": "A predefined requirement with this name exists"}},
)
async def create_predefined(
    payload: RequirementTypeCreate, current_user: AdminDep, session: SessionDep
) -> ActionResult:
    return await PredefinedRequirementService(session).create_predefined(current_user.id, payload)


@router.put(
    "/{requirement_type_id}",
    response_model=ActionResult,
    summary="Update Predefined Requirement",
    responses={404: {"description": "Requirement type not found"}, 409: {"description": "Name already used"}},
)
async def update_predefined(
    requirement_type_id: str, payload: RequirementTypeUpdate, current_user: AdminDep, session: SessionDep
) -> ActionResult:
    return await PredefinedRequirementService(session).update_predefined(requirement_type_id, payload)


@router.delete(
    "/{requirement_type_id}",
    response_model=ActionResult,
    summary="Delete Predefined Requirement",
    description="Delete a predefined requirement and detach it from every section.",
    responses={409: {"description": "Trainees already uploaded documents for it"}},
)
async def delete_predefined(requirement_type_id: str, current_user: AdminDep, session: SessionDep) -> ActionResult:
    return await PredefinedRequirementService(session).delete_predefined(requirement_type_id)
