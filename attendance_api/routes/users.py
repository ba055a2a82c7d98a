"""
User Routes
Profiles and group memberships
"""

from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query, status
from attendance_api.auth import get_current_user, get_region_staff, get_super_admin
from attendance_api.dependencies import get_user_service
from attendance_api.errors import Forbidden, NotFound
from attendance_api.roles import Role
from attendance_api.schemas.user import UpdateUserRequest, UserGroupResponse, UserResponse
from attendance_api.services.user_service import UserService

router = APIRouter()


def can_view_user(caller: dict, user: dict) -> bool:
    """Self, super admins, and the manager of the user's region"""
    if caller["role"] == Role.SUPER_ADMIN or caller["id"] == str(user["id"]):
        return True
    if caller["role"] == Role.REGION_MANAGER and caller["region_id"]:
        return user["region_id"] is not None and str(user["region_id"]) == caller["region_id"]
    return False


async def visible_user(caller: dict, user_id: UUID, users: UserService) -> dict:
    user = await users.find_user(user_id)
    if not user:
        if caller["role"] == Role.SUPER_ADMIN:
            raise NotFound("User not found")
        raise Forbidden()
    if not can_view_user(caller, user):
        raise Forbidden()
    return user


@router.get("", response_model=list[UserResponse])
async def list_users(
    search: Optional[str] = Query(None, description="Part of the user's full name"),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    current_user: dict = Depends(get_region_staff),
    users: UserService = Depends(get_user_service)
):
    """
    List users (Super Admin, or Region Manager for their own region)

    - **search**: case-insensitive name filter
    """
    region_id = None
    if current_user["role"] == Role.REGION_MANAGER:
        region_id = current_user["region_id"]
        if not region_id:
            raise Forbidden()

    return await users.list_users(search, region_id, limit=limit, offset=offset)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    current_user: dict = Depends(get_current_user),
    users: UserService = Depends(get_user_service)
):
    return await visible_user(current_user, user_id, users)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    request: UpdateUserRequest,
    current_user: dict = Depends(get_current_user),
    users: UserService = Depends(get_user_service)
):
    """Update profile fields (the user themself, or a Super Admin)"""
    if current_user["role"] != Role.SUPER_ADMIN and current_user["id"] != str(user_id):
        raise Forbidden("You can only update your own profile")

    return await users.update_user(user_id, request)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: UUID,
    current_user: dict = Depends(get_super_admin),
    users: UserService = Depends(get_user_service)
):
    """Delete a user with their memberships and attendance (Super Admin)"""
    await users.delete_user(user_id)


@router.get("/{user_id}/groups", response_model=list[UserGroupResponse])
async def list_user_groups(
    user_id: UUID,
    current_user: dict = Depends(get_current_user),
    users: UserService = Depends(get_user_service)
):
    """Groups a user belongs to, with their membership role"""
    await visible_user(current_user, user_id, users)
    return await users.user_groups(user_id)
