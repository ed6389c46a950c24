"""
User Management Endpoints.

Admin-only management of accounts. Deleting an account is a soft delete;
the user disappears from listings and can no longer authenticate.
"""

from typing import List, Optional

from fastapi import APIRouter, Query, status

from sumikapp.core.models.domain.enums import Role, UserStatus
from sumikapp.core.models.io.common import ActionResult
from sumikapp.core.models.io.users import UserCreate, UserRead, UserStatistics, UserStatusUpdate
from sumikapp.server.services.deps import AdminDep, SessionDep
from sumikapp.server.services.users import UserService

router = APIRouter()


@router.get(
    "",
    response_model=List[UserRead],
    summary="List Users",
    description="Retrieve all non-deleted accounts, optionally filtered by role and status.",
)
async def list_users(
    current_user: AdminDep,
    session: SessionDep,
    role: Optional[Role] = None,
    user_status: Optional[UserStatus] = Query(default=None, alias="status"),
) -> List[UserRead]:
    return await UserService(session).list_users(role, user_status)


@router.get(
    "/statistics",
    response_model=UserStatistics,
    summary="Get User Statistics",
    description="Count accounts by role and by status.",
)
async def user_statistics(current_user: AdminDep, session: SessionDep) -> UserStatistics:
    return await UserService(session).user_statistics()


@router.post(
    "",
    response_model=ActionResult,
    status_code=status.HTTP_201_CREATED,
    summary="Create User",
    description="Create an account together with the profile of its role.",
    responses={409: {"description": "Email already registered"}},
)
async def create_user(payload: UserCreate, current_user: AdminDep, session: SessionDep) -> ActionResult:
    return await UserService(session).create_user(current_user.id, payload)


@router.get(
    "/{user_id}",
    response_model=UserRead,
    summary="Get User",
    responses={404: {"description": "User not found"}},
)
async def get_user(user_id: str, current_user: AdminDep, session: SessionDep) -> UserRead:
    return await UserService(session).get_user(user_id)


@router.patch(
    "/{user_id}/status",
    response_model=ActionResult,
    summary="Update User Status",
    description="Activate, suspend or mark an account as pending. Suspended users cannot authenticate.",
    responses={404: {"description": "User not found"}},
)
async def update_user_status(
    user_id: str, payload: UserStatusUpdate, current_user: AdminDep, session: SessionDep
) -> ActionResult:
    return await UserService(session).update_user_status(current_user.id, user_id, payload.status)


@router.delete(
    "/{user_id}",
    response_model=ActionResult,
    summary="Delete User",
    responses={404: {"description": "User not found"}, 422: {"description": "Cannot delete own account"}},
)
async def delete_user(user_id: str, current_user: AdminDep, session: SessionDep) -> ActionResult:
    return await UserService(session).delete_user(current_user.id, user_id)
