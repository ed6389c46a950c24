"""
Trainee Skill Endpoints.
"""

from typing import List

from fastapi import APIRouter, status

from sumikapp.core.models.io.common import ActionResult
from sumikapp.core.models.io.users import SkillAdd, SkillRead
from sumikapp.server.services.deps import SessionDep, TraineeDep
from sumikapp.server.services.skills import SkillService

router = APIRouter()


@router.get("", response_model=List[SkillRead], summary="List My Skills")
async def list_skills(current_user: TraineeDep, session: SessionDep) -> List[SkillRead]:
    return await SkillService(session).list_skills(current_user.id)


@router.post(
    "",
    response_model=ActionResult,
    status_code=status.HTTP_201_CREATED,
    summary="Add Skill",
    description="Add a skill to the caller's profile. Skill names are shared and matched case-insensitively.",
    responses={409: {"description": "Skill is already on the profile"}},
)
async def add_skill(payload: SkillAdd, current_user: TraineeDep, session: SessionDep) -> ActionResult:
    return await SkillService(session).add_skill(current_user.id, payload.name)


@router.delete(
    "/{skill_id}",
    response_model=ActionResult,
    summary="Remove Skill",
    responses={404: {"description": "Skill is not on the profile"}},
)
async def remove_skill(skill_id: str, current_user: TraineeDep, session: SessionDep) -> ActionResult:
    return await SkillService(session).remove_skill(current_user.id, skill_id)
