"""
Industry partners (companies with a memorandum of agreement).
"""

from __future__ import annotations

import logging
from typing import List

from sumikapp.core.database.entities import IndustryPartner
from sumikapp.core.database.repositories import AsyncRepository
from sumikapp.core.errors import NotFoundError
from sumikapp.core.logging_config import log_context
from sumikapp.core.models.io.common import ActionResult
from sumikapp.core.models.io.internships import IndustryPartnerCreate, IndustryPartnerRead, IndustryPartnerUpdate

from .base import BaseService, logged_operation

logger = logging.getLogger(__name__)


class IndustryPartnerService(BaseService):
    def __init__(self, session):
        super().__init__(session)
        self.repository = AsyncRepository(session, IndustryPartner)

    async def _get(self, partner_id: str) -> IndustryPartner:
        partner = await self.repository.get_by_id(partner_id)
        if partner is None:
            raise NotFoundError("Industry partner", partner_id)
        return partner

    async def list_partners(self) -> List[IndustryPartnerRead]:
        partners = await self.repository.list(order_by=IndustryPartner.company_name)
        return [IndustryPartnerRead.model_validate(partner) for partner in partners]

    async def get_partner(self, partner_id: str) -> IndustryPartnerRead:
        return IndustryPartnerRead.model_validate(await self._get(partner_id))

    async def create_partner(self, admin_id: str, data: IndustryPartnerCreate) -> ActionResult:
        ctx = log_context("industry_partner.create", user_id=admin_id, company=data.company_name)
        logger.info("Creating industry partner...", extra={"ctx": ctx})

        with logged_operation(logger, "Industry partner creation", ctx):
            partner = await self.repository.create(IndustryPartner(**data.model_dump()))

        return ActionResult.ok("Industry partner created successfully", IndustryPartnerRead.model_validate(partner))

    async def update_partner(self, partner_id: str, data: IndustryPartnerUpdate) -> ActionResult:
        ctx = log_context("industry_partner.update", partner_id=partner_id)
        logger.info("Updating industry partner...", extra={"ctx": ctx})

        with logged_operation(logger, "Industry partner update", ctx):
            values = data.model_dump(exclude_unset=True, exclude_none=True)
            partner = await self.repository.update(await self._get(partner_id), values)

        return ActionResult.ok("Industry partner updated successfully", IndustryPartnerRead.model_validate(partner))

    async def delete_partner(self, partner_id: str) -> ActionResult:
        ctx = log_context("industry_partner.delete", partner_id=partner_id)
        logger.info("Deleting industry partner...", extra={"ctx": ctx})

        with logged_operation(logger, "Industry partner deletion", ctx):
            if not await self.repository.delete(partner_id):
                raise NotFoundError("Industry partner", partner_id)

        return ActionResult.ok("Industry partner deleted successfully")
