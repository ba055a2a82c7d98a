"""
Event Routes
"""

from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query, status
from attendance_api.auth import get_current_user, get_analytics_user
from attendance_api.dependencies import get_event_service, get_scope_authorizer
from attendance_api.roles import Role
from attendance_api.schemas.event import CreateEventRequest, EventResponse, UpdateEventRequest
from attendance_api.services.event_service import EventService
from attendance_api.services.scope_service import ScopeAuthorizer

router = APIRouter()


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    request: CreateEventRequest,
    current_user: dict = Depends(get_analytics_user),
    authorizer: ScopeAuthorizer = Depends(get_scope_authorizer),
    events: EventService = Depends(get_event_service)
):
    """Create an event under a group (admins of the group and above)"""
    await authorizer.authorize_group(current_user, request.group_id)
    return await events.create_event(request)


@router.get("", response_model=list[EventResponse])
async def list_events(
    region_id: Optional[UUID] = Query(None, alias="regionId"),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    current_user: dict = Depends(get_current_user),
    events: EventService = Depends(get_event_service)
):
    """
    Events newest first

    Region managers always see their own region only.
    """
    if current_user["role"] == Role.REGION_MANAGER:
        region_id = current_user["region_id"]

    return await events.list_events(region_id, limit=limit, offset=offset)


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: UUID,
    current_user: dict = Depends(get_current_user),
    events: EventService = Depends(get_event_service)
):
    return await events.get_event(event_id)


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: UUID,
    request: UpdateEventRequest,
    current_user: dict = Depends(get_analytics_user),
    authorizer: ScopeAuthorizer = Depends(get_scope_authorizer),
    events: EventService = Depends(get_event_service)
):
    """Change an event's title, description, date or location (admins of its group and above)"""
    await authorizer.authorize_event(current_user, await events.find_event(event_id))
    return await events.update_event(event_id, request)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: UUID,
    current_user: dict = Depends(get_analytics_user),
    authorizer: ScopeAuthorizer = Depends(get_scope_authorizer),
    events: EventService = Depends(get_event_service)
):
    """Delete an event and its attendance records (admins of its group and above)"""
    await authorizer.authorize_event(current_user, await events.find_event(event_id))
    await events.delete_event(event_id)
