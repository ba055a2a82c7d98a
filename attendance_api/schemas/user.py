"""
User Request/Response Models
"""

from pydantic import BaseModel, Field
from typing import Literal, Optional
from datetime import datetime
from uuid import UUID
from attendance_api.roles import MembershipRole, Role


class UserResponse(BaseModel):
    """User profile"""
    id: UUID
    email: str
    full_name: Optional[str] = None
    phone_number: Optional[str] = None
    gender: Optional[str] = None
    profile_picture: Optional[str] = None
    location: Optional[str] = None
    next_of_kin_name: Optional[str] = None
    next_of_kin_contact: Optional[str] = None
    role: Role
    region_id: Optional[UUID] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UpdateUserRequest(BaseModel):
    """Profile fields a user may change; role and region are not editable here"""
    full_name: Optional[str] = Field(None, max_length=200)
    phone_number: Optional[str] = Field(None, max_length=50)
    gender: Optional[Literal["male", "female", "other"]] = None
    profile_picture: Optional[str] = None
    location: Optional[str] = Field(None, max_length=200)
    next_of_kin_name: Optional[str] = Field(None, max_length=200)
    next_of_kin_contact: Optional[str] = Field(None, max_length=100)


class UserGroupResponse(BaseModel):
    """Group a user belongs to"""
    id: UUID
    name: str
    description: Optional[str] = None
    region_id: Optional[UUID] = None
    role: MembershipRole
    joined_at: Optional[datetime] = None
