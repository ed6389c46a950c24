"""
Industry Partner Endpoints.

Admin-managed list of companies the school has a memorandum of agreement
with.
"""

from typing import List

from fastapi import APIRouter, status

from sumikapp.core.models.io.common import ActionResult
from sumikapp.core.models.io.internships import IndustryPartnerCreate, IndustryPartnerRead, IndustryPartnerUpdate
from sumikapp.server.services.deps import AdminDep, SessionDep
from sumikapp.server.services.industry_partners import IndustryPartnerService

router = APIRouter()

_NOT_FOUND = {404: {"description": "Industry partner not found"}}


@router.get("", response_model=List[IndustryPartnerRead], summary="List Industry Partners")
async def list_partners(current_user: AdminDep, session: SessionDep) -> List[IndustryPartnerRead]:
    return await IndustryPartnerService(session).list_partners()


@router.post(
    "",
    response_model=ActionResult,
    status_code=status.HTTP_201_CREATED,
    summary="Create Industry Partner",
)
async def create_partner(payload: IndustryPartnerCreate, current_user: AdminDep, session: SessionDep) -> ActionResult:
    return await IndustryPartnerService(session).create_partner(current_user.id, payload)


@router.get("/{partner_id}", response_model=IndustryPartnerRead, summary="Get Industry Partner", responses=_NOT_FOUND)
async def get_partner(partner_id: str, current_user: AdminDep, session: SessionDep) -> IndustryPartnerRead:
    return await IndustryPartnerService(session).get_partner(partner_id)


@router.put("/{partner_id}", response_model=ActionResult, summary="Update Industry Partner", responses=_NOT_FOUND)
async def update_partner(
    partner_id: str, payload: IndustryPartnerUpdate, current_user: AdminDep, session: SessionDep
) -> ActionResult:
    return await IndustryPartnerService(session).update_partner(partner_id, payload)


@router.delete("/{partner_id}", response_model=ActionResult, summary="Delete Industry Partner", responses=_NOT_FOUND)
async def delete_partner(partner_id: str, current_user: AdminDep, session: SessionDep) -> ActionResult:
    return await IndustryPartnerService(session).delete_partner(partner_id)
