"""
Attendance Routes
Attendance overview analytics and attendance record endpoints
"""

from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query, status
from attendance_api.auth import get_current_user, get_analytics_user, get_region_staff
from attendance_api.dependencies import (
    get_analytics_service,
    get_attendance_service,
    get_event_service,
    get_scope_authorizer,
)
from attendance_api.errors import Forbidden, InvalidPeriod
from attendance_api.roles import Role
from attendance_api.schemas.analytics import (
    AttendanceOverviewResponse,
    EventParticipationResponse,
    GroupAttendanceResponse,
)
from attendance_api.schemas.attendance import (
    AttendanceResponse,
    AttendedMemberResponse,
    CreateAttendanceRequest,
    EventAttendanceEntry,
    PeriodAttendanceResponse,
    UpdateAttendanceRequest,
    UserAttendanceEntry,
)
from attendance_api.services.analytics_service import AnalyticsService
from attendance_api.services.attendance_service import AttendanceService
from attendance_api.services.event_service import EventService
from attendance_api.services.period_buckets import SUPPORTED_PERIODS, get_period_range
from attendance_api.services.scope_service import ScopeAuthorizer

router = APIRouter()


@router.get("/overview", response_model=AttendanceOverviewResponse)
async def get_attendance_overview(
    period: Optional[str] = Query(None, description="week, month, quarter or year"),
    scope: str = Query("overall", description="overall, region or group"),
    region_id: Optional[UUID] = Query(None, alias="regionId"),
    group_id: Optional[UUID] = Query(None, alias="groupId"),
    current_user: dict = Depends(get_analytics_user),
    analytics: AnalyticsService = Depends(get_analytics_service)
):
    """
    Bucketed attendance overview

    - **period**: week (7 daily buckets), month (4 weekly), quarter (4 monthly), year (12 monthly)
    - **scope**: overall (super admins), region (regionId) or group (groupId)

    Returns per-bucket and summary event count, possible and present
    attendance and attendance rate.
    """
    if not period:
        raise InvalidPeriod(f"period query parameter is required. Supported options: {', '.join(SUPPORTED_PERIODS)}")

    scope_id = {"group": group_id, "region": region_id}.get(scope.strip().lower())
    return await analytics.attendance_overview(current_user, period, scope, scope_id)


@router.get("/events/{event_id}/participation", response_model=EventParticipationResponse)
async def get_event_participation(
    event_id: UUID,
    current_user: dict = Depends(get_analytics_user),
    analytics: AnalyticsService = Depends(get_analytics_service)
):
    """Possible, present and absent counts for one event"""
    return await analytics.event_participation(current_user, event_id)


@router.get("/groups/{group_id}/stats", response_model=GroupAttendanceResponse)
async def get_group_attendance_stats(
    group_id: UUID,
    current_user: dict = Depends(get_analytics_user),
    analytics: AnalyticsService = Depends(get_analytics_service)
):
    """Attendance for every event of a group, plus overall totals"""
    return await analytics.group_attendance(current_user, group_id)


@router.get("/period/{period}", response_model=PeriodAttendanceResponse)
async def get_attendance_by_period(
    period: str,
    current_user: dict = Depends(get_region_staff),
    attendance: AttendanceService = Depends(get_attendance_service)
):
    """
    Attendance records for events in the last week, month, quarter,
    half-year or year. Region managers only see their own region.
    """
    window = get_period_range(period)

    region_id = None
    if current_user["role"] == Role.REGION_MANAGER:
        region_id = current_user["region_id"]
        if not region_id:
            raise Forbidden()

    records = await attendance.get_attendance_between(window.start_date, window.end_date, region_id)
    return {
        "period": window.canonical_period,
        "start_date": window.start_date,
        "end_date": window.end_date,
        "records": records
    }


@router.post("/event/{event_id}", response_model=AttendanceResponse, status_code=status.HTTP_201_CREATED)
async def create_attendance(
    event_id: UUID,
    request: CreateAttendanceRequest,
    current_user: dict = Depends(get_analytics_user),
    events: EventService = Depends(get_event_service),
    authorizer: ScopeAuthorizer = Depends(get_scope_authorizer),
    attendance: AttendanceService = Depends(get_attendance_service)
):
    """Record a user's attendance at an event (admins of the event's group and above)"""
    await authorizer.authorize_event(current_user, await events.find_event(event_id))
    return await attendance.create_attendance(event_id, request)


@router.get("/event/{event_id}", response_model=list[EventAttendanceEntry])
async def list_event_attendance(
    event_id: UUID,
    current_user: dict = Depends(get_current_user),
    attendance: AttendanceService = Depends(get_attendance_service)
):
    """Attendance records of an event with attendee names"""
    return await attendance.get_event_attendance(event_id)


@router.get("/event/{event_id}/attended-members", response_model=list[AttendedMemberResponse])
async def list_attended_members(
    event_id: UUID,
    current_user: dict = Depends(get_current_user),
    attendance: AttendanceService = Depends(get_attendance_service)
):
    """Users marked present at an event"""
    return await attendance.get_attended_members(event_id)


@router.get("/user/{user_id}", response_model=list[UserAttendanceEntry])
async def list_user_attendance(
    user_id: UUID,
    current_user: dict = Depends(get_current_user),
    attendance: AttendanceService = Depends(get_attendance_service)
):
    """Attendance history of a user"""
    return await attendance.get_user_attendance(user_id)


@router.get("/{attendance_id}", response_model=AttendanceResponse)
async def get_attendance(
    attendance_id: UUID,
    current_user: dict = Depends(get_current_user),
    attendance: AttendanceService = Depends(get_attendance_service)
):
    return await attendance.get_attendance(attendance_id)


async def authorize_record(
    caller: dict,
    attendance_id: UUID,
    attendance: AttendanceService,
    events: EventService,
    authorizer: ScopeAuthorizer
) -> None:
    """Scope check against the group of the event an attendance record belongs to"""
    record = await attendance.find_attendance(attendance_id)
    event = await events.find_event(record["event_id"]) if record else None
    await authorizer.authorize_event(caller, event, missing="Attendance record not found")


@router.put("/{attendance_id}", response_model=AttendanceResponse)
async def update_attendance(
    attendance_id: UUID,
    request: UpdateAttendanceRequest,
    current_user: dict = Depends(get_analytics_user),
    events: EventService = Depends(get_event_service),
    authorizer: ScopeAuthorizer = Depends(get_scope_authorizer),
    attendance: AttendanceService = Depends(get_attendance_service)
):
    """Correct presence or notes on an attendance record (admins of the event's group and above)"""
    await authorize_record(current_user, attendance_id, attendance, events, authorizer)
    return await attendance.update_attendance(attendance_id, request)


@router.delete("/{attendance_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_attendance(
    attendance_id: UUID,
    current_user: dict = Depends(get_analytics_user),
    events: EventService = Depends(get_event_service),
    authorizer: ScopeAuthorizer = Depends(get_scope_authorizer),
    attendance: AttendanceService = Depends(get_attendance_service)
):
    """Delete an attendance record (admins of the event's group and above)"""
    await authorize_record(current_user, attendance_id, attendance, events, authorizer)
    await attendance.delete_attendance(attendance_id)
