"""
Request dependencies.

Typed ``Annotated`` aliases for the session, the caller and the prediction
client, so routers declare what they need in their signatures.
"""

from typing import Annotated, AsyncIterator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from sumikapp.core.database import get_session
from sumikapp.core.models.domain.enums import Role
from sumikapp.prediction import EmployabilityPredictionClient
from sumikapp.server.core.config import settings
from sumikapp.server.services.auth import CurrentUser, get_current_user, require_roles


async def get_prediction_client() -> AsyncIterator[EmployabilityPredictionClient]:
    config = settings.prediction
    client = EmployabilityPredictionClient(config.base_url, timeout=config.timeout, max_retries=config.max_retries)
    try:
        yield client
    finally:
        await client.aclose()


SessionDep = Annotated[AsyncSession, Depends(get_session)]
PredictionClientDep = Annotated[EmployabilityPredictionClient, Depends(get_prediction_client)]

CurrentUserDep = Annotated[CurrentUser, Depends(get_current_user)]
TraineeDep = Annotated[CurrentUser, Depends(require_roles(Role.trainee))]
CoordinatorDep = Annotated[CurrentUser, Depends(require_roles(Role.coordinator))]
SupervisorDep = Annotated[CurrentUser, Depends(require_roles(Role.supervisor))]
AdminDep = Annotated[CurrentUser, Depends(require_roles(Role.admin))]
