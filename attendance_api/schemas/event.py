"""
Event Request/Response Models
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from uuid import UUID


class CreateEventRequest(BaseModel):
    """Request to create an event under a group"""
    group_id: UUID
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    date: datetime
    location: Optional[str] = Field(None, max_length=200)


class UpdateEventRequest(BaseModel):
    """Request to change an event's details"""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    date: Optional[datetime] = None
    location: Optional[str] = Field(None, max_length=200)


class EventResponse(BaseModel):
    """Event details"""
    id: UUID
    group_id: UUID
    title: str
    description: Optional[str] = None
    date: datetime
    location: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
