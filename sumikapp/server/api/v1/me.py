"""
Current User Endpoint.

Returns the account behind the identity header, so the frontend can decide
which dashboard and navigation to load.
"""

from fastapi import APIRouter

from sumikapp.core.models.io.users import CurrentUserRead
from sumikapp.server.services.deps import CurrentUserDep

router = APIRouter()


@router.get(
    "",
    response_model=CurrentUserRead,
    summary="Get Current User",
    description="Retrieve the authenticated caller's account, role and (for trainees) OJT status.",
    responses={401: {"description": "Missing or unknown user"}},
)
async def get_me(current_user: CurrentUserDep) -> CurrentUserRead:
    data = CurrentUserRead.model_validate(current_user.user)
    return data.model_copy(update={"ojt_status": current_user.ojt_status})
