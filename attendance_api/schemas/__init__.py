"""
Pydantic schemas for request/response validation
"""

from attendance_api.schemas.analytics import (
    AttendanceOverviewResponse,
    EventParticipationResponse,
    GroupAttendanceResponse
)
from attendance_api.schemas.attendance import (
    CreateAttendanceRequest,
    UpdateAttendanceRequest,
    AttendanceResponse
)

__all__ = [
    "AttendanceOverviewResponse",
    "EventParticipationResponse",
    "GroupAttendanceResponse",
    "CreateAttendanceRequest",
    "UpdateAttendanceRequest",
    "AttendanceResponse",
]
