"""
Attendance Request/Response Models
"""

from pydantic import BaseModel, Field, AliasChoices
from typing import Optional
from datetime import datetime
from uuid import UUID


class CreateAttendanceRequest(BaseModel):
    """Request to record attendance for an event (camelCase userId accepted)"""
    user_id: UUID = Field(..., validation_alias=AliasChoices("user_id", "userId"))
    present: bool = True
    apology: Optional[str] = Field(None, description="Reason given when absent")
    topic: Optional[str] = Field(None, max_length=255)
    aob: Optional[str] = Field(None, description="Any other business")


class UpdateAttendanceRequest(BaseModel):
    """Request to correct presence or notes"""
    present: Optional[bool] = None
    apology: Optional[str] = None
    topic: Optional[str] = Field(None, max_length=255)
    aob: Optional[str] = None


class AttendanceResponse(BaseModel):
    """Attendance record"""
    id: UUID
    user_id: UUID
    event_id: UUID
    present: bool
    apology: Optional[str] = None
    topic: Optional[str] = None
    aob: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class EventAttendanceEntry(AttendanceResponse):
    """Attendance record with the attendee's name"""
    full_name: Optional[str] = None
    email: Optional[str] = None


class UserAttendanceEntry(AttendanceResponse):
    """Attendance record with the event's title and date"""
    title: str
    date: datetime


class PeriodAttendanceEntry(EventAttendanceEntry):
    """Attendance record with attendee and event details"""
    title: str
    date: datetime


class PeriodAttendanceResponse(BaseModel):
    """Attendance records inside a single period window"""
    period: str
    start_date: datetime
    end_date: datetime
    records: list[PeriodAttendanceEntry]


class AttendedMemberResponse(BaseModel):
    """User marked present at an event"""
    id: UUID
    full_name: Optional[str] = None
    email: str
