"""
User administration API endpoints. Admin only.
"""

from fastapi import APIRouter, Depends, Path
from typing import List
from uuid import UUID

from app.services.authorization import Actor
from app.services.user import UserService
from app.schemas.user import (
    UserResponse,
    RoleUpdateRequest,
    RoleUpdateResponse,
    UserStatsResponse
)
from app.schemas.error import error_responses
from app.utils.dependencies import get_current_actor, get_user_service


router = APIRouter(prefix="/users", tags=["Users"])


@router.get(
    "",
    response_model=List[UserResponse],
    summary="List users",
    description="All accounts, newest first",
    responses=error_responses(401, 403)
)
async def list_users(
    actor: Actor = Depends(get_current_actor),
    user_service: UserService = Depends(get_user_service)
) -> List[UserResponse]:
    users = await user_service.list_users(actor)
    return [UserResponse.model_validate(user.to_dict()) for user in users]


@router.get(
    "/stats",
    response_model=UserStatsResponse,
    summary="User statistics",
    responses=error_responses(401, 403)
)
async def get_user_statistics(
    actor: Actor = Depends(get_current_actor),
    user_service: UserService = Depends(get_user_service)
) -> UserStatsResponse:
    statistics = await user_service.get_user_statistics(actor)
    return UserStatsResponse.model_validate(statistics)


@router.put(
    "/{user_id}/role",
    response_model=RoleUpdateResponse,
    summary="Change user role",
    responses=error_responses(400, 401, 403)
)
async def update_user_role(
    role_data: RoleUpdateRequest,
    user_id: UUID = Path(..., description="User ID"),
    actor: Actor = Depends(get_current_actor),
    user_service: UserService = Depends(get_user_service)
) -> RoleUpdateResponse:
    """
    Change the role of an account.

    Raises:
        ValidationError: If the role is not buyer, seller or admin
    """
    await user_service.update_user_role(user_id, role_data.role, actor)
    return RoleUpdateResponse(message="User role updated successfully")
