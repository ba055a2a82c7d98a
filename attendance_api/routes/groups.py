"""
Group Routes
Group creation, membership and admin assignment
"""

from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query, status
from attendance_api.auth import get_current_user, get_analytics_user, get_region_staff
from attendance_api.dependencies import get_event_service, get_group_service, get_scope_authorizer
from attendance_api.errors import Forbidden
from attendance_api.roles import Role
from attendance_api.schemas.event import EventResponse
from attendance_api.schemas.group import (
    AddMemberRequest,
    AssignAdminRequest,
    CreateGroupRequest,
    GroupMemberResponse,
    GroupResponse,
    MembershipResponse,
    UpdateGroupRequest,
)
from attendance_api.services.event_service import EventService
from attendance_api.services.group_service import GroupService
from attendance_api.services.scope_service import ScopeAuthorizer

router = APIRouter()


@router.post("", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group(
    request: CreateGroupRequest,
    current_user: dict = Depends(get_region_staff),
    groups: GroupService = Depends(get_group_service)
):
    """
    Create a group (Super Admin, or Region Manager inside their own region)

    - **name**: Group name, unique within its region
    - **region_id**: Owning region
    - **group_admin_id**: Optional designated admin
    """
    if current_user["role"] == Role.REGION_MANAGER:
        if not request.region_id or str(request.region_id) != current_user["region_id"]:
            raise Forbidden("Region managers can only create groups in their own region")

    return await groups.create_group(request)


@router.get("", response_model=list[GroupResponse])
async def list_groups(
    region_id: Optional[UUID] = Query(None, alias="regionId"),
    current_user: dict = Depends(get_current_user),
    groups: GroupService = Depends(get_group_service)
):
    """All groups, optionally filtered to one region"""
    return await groups.list_groups(region_id)


@router.get("/{group_id}", response_model=GroupResponse)
async def get_group(
    group_id: UUID,
    current_user: dict = Depends(get_current_user),
    groups: GroupService = Depends(get_group_service)
):
    return await groups.get_group(group_id)


@router.put("/{group_id}", response_model=GroupResponse)
async def update_group(
    group_id: UUID,
    request: UpdateGroupRequest,
    current_user: dict = Depends(get_analytics_user),
    authorizer: ScopeAuthorizer = Depends(get_scope_authorizer),
    groups: GroupService = Depends(get_group_service)
):
    """Rename or re-describe a group (admins of the group and above)"""
    await authorizer.authorize_group(current_user, group_id)
    return await groups.update_group(group_id, request)


@router.delete("/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_group(
    group_id: UUID,
    current_user: dict = Depends(get_region_staff),
    authorizer: ScopeAuthorizer = Depends(get_scope_authorizer),
    groups: GroupService = Depends(get_group_service)
):
    """Delete a group with its memberships, events and attendance (Super Admin, or the region's manager)"""
    await authorizer.authorize_group(current_user, group_id)
    await groups.delete_group(group_id)


@router.get("/{group_id}/members", response_model=list[GroupMemberResponse])
async def list_group_members(
    group_id: UUID,
    current_user: dict = Depends(get_current_user),
    groups: GroupService = Depends(get_group_service)
):
    """Members of a group with their membership role"""
    return await groups.list_members(group_id)


@router.get("/{group_id}/events", response_model=list[EventResponse])
async def list_group_events(
    group_id: UUID,
    current_user: dict = Depends(get_current_user),
    events: EventService = Depends(get_event_service)
):
    """Events of a group, newest first"""
    return await events.list_group_events(group_id)


@router.post("/{group_id}/members", response_model=MembershipResponse, status_code=status.HTTP_201_CREATED)
async def add_group_member(
    group_id: UUID,
    request: AddMemberRequest,
    current_user: dict = Depends(get_analytics_user),
    authorizer: ScopeAuthorizer = Depends(get_scope_authorizer),
    groups: GroupService = Depends(get_group_service)
):
    """Add a user to a group (admins of the group and above)"""
    await authorizer.authorize_group(current_user, group_id)
    return await groups.add_member(group_id, request)


@router.delete("/{group_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_group_member(
    group_id: UUID,
    user_id: UUID,
    current_user: dict = Depends(get_analytics_user),
    authorizer: ScopeAuthorizer = Depends(get_scope_authorizer),
    groups: GroupService = Depends(get_group_service)
):
    """Remove a user from a group (admins of the group and above)"""
    await authorizer.authorize_group(current_user, group_id)
    await groups.remove_member(group_id, user_id)


@router.put("/{group_id}/admin", response_model=GroupResponse)
async def assign_group_admin(
    group_id: UUID,
    request: AssignAdminRequest,
    current_user: dict = Depends(get_region_staff),
    authorizer: ScopeAuthorizer = Depends(get_scope_authorizer),
    groups: GroupService = Depends(get_group_service)
):
    """Designate the admin of a group (Super Admin, or Region Manager of the group's region)"""
    await authorizer.authorize_group(current_user, group_id)
    return await groups.assign_admin(group_id, request.user_id)
