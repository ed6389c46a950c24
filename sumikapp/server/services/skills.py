"""
Trainee skills.
"""

from __future__ import annotations

import logging
from typing import List

from sqlalchemy import func
from sqlmodel import select

from sumikapp.core.database.entities import Skill, TraineeSkill
from sumikapp.core.errors import ConflictError, NotFoundError
from sumikapp.core.logging_config import log_context
from sumikapp.core.models.io.common import ActionResult
from sumikapp.core.models.io.users import SkillRead

from .base import BaseService, logged_operation

logger = logging.getLogger(__name__)


class SkillService(BaseService):
    async def list_skills(self, user_id: str) -> List[SkillRead]:
        stmt = (
            select(Skill)
            .join(TraineeSkill, TraineeSkill.skill_id == Skill.id)
            .where(TraineeSkill.trainee_id == user_id)
            .order_by(Skill.name)
        )
        return [SkillRead.model_validate(skill) for skill in (await self.session.execute(stmt)).scalars().all()]

    async def add_skill(self, user_id: str, name: str) -> ActionResult:
        """Attach a skill, reusing an existing one with the same name (case-insensitive)."""
        name = name.strip()
        ctx = log_context("skill.add", user_id=user_id, skill=name)
        logger.info("Adding skill...", extra={"ctx": ctx})

        with logged_operation(logger, "Skill add", ctx):
            stmt = select(Skill).where(func.lower(Skill.name) == name.lower())
            skill = (await self.session.execute(stmt)).scalars().first()
            if skill is None:
                skill = Skill(name=name)
                self.session.add(skill)
                await self.session.flush()
            else:
                linked = await self.session.execute(
                    select(TraineeSkill.id).where(TraineeSkill.trainee_id == user_id, TraineeSkill.skill_id == skill.id)
                )
                if linked.first() is not None:
                    raise ConflictError(f"Skill '{skill.name}' is already on your profile")

            self.session.add(TraineeSkill(trainee_id=user_id, skill_id=skill.id))
            await self.session.commit()

        return ActionResult.ok("Skill added successfully", SkillRead.model_validate(skill))

    async def remove_skill(self, user_id: str, skill_id: str) -> ActionResult:
        ctx = log_context("skill.remove", user_id=user_id, skill_id=skill_id)
        logger.info("Removing skill...", extra={"ctx": ctx})

        with logged_operation(logger, "Skill removal", ctx):
            stmt = select(TraineeSkill).where(TraineeSkill.trainee_id == user_id, TraineeSkill.skill_id == skill_id)
            link = (await self.session.execute(stmt)).scalars().first()
            if link is None:
                raise NotFoundError("Skill", skill_id)
            await self.session.delete(link)
            await self.session.commit()

        return ActionResult.ok("Skill removed successfully")
