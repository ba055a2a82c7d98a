"""
Region Response Models
"""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from uuid import UUID


class RegionResponse(BaseModel):
    """Region details"""
    id: UUID
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RegionUserResponse(BaseModel):
    """User owned by a region"""
    id: UUID
    full_name: Optional[str] = None
    email: str
    role: str
