"""
Analytics Response Models
Wire shapes for attendance overview and participation stats (camelCase)
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Literal, Optional
from datetime import datetime
from uuid import UUID


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AttendanceTotals(CamelModel):
    """Counts shared by buckets and summaries"""
    event_count: int
    total_possible: int
    present_count: int
    attendance_rate: float


class OverviewBucket(AttendanceTotals):
    """One labelled time slice"""
    label: str
    start_date: str
    end_date: str


class AttendanceOverviewResponse(CamelModel):
    """Attendance overview envelope"""
    scope: Literal["overall", "region", "group"]
    scope_id: Optional[str] = None
    period: Literal["week", "month", "quarter", "year"]
    buckets: list[OverviewBucket]
    summary: AttendanceTotals


class EventParticipationResponse(CamelModel):
    """Attendance stats for a single event"""
    event_id: UUID
    event_title: str
    event_date: datetime
    total_possible: int
    present_count: int
    absent_count: int
    attendance_rate: float


class GroupEventStats(CamelModel):
    event_id: UUID
    event_title: str
    event_date: datetime
    total_members: int
    present_members: int
    attendance_rate: float


class GroupOverallStats(CamelModel):
    total_events: int
    total_members: int
    total_present_members: int
    average_attendance_rate: float


class GroupAttendanceResponse(CamelModel):
    """Per-event and overall attendance stats for a group"""
    group_id: UUID
    event_stats: list[GroupEventStats]
    overall_stats: GroupOverallStats
