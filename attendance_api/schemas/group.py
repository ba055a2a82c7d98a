"""
Group Request/Response Models
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from uuid import UUID
from attendance_api.roles import MembershipRole


class CreateGroupRequest(BaseModel):
    """Request to create a group"""
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    region_id: Optional[UUID] = None
    group_admin_id: Optional[UUID] = None


class UpdateGroupRequest(BaseModel):
    """Request to rename or re-describe a group"""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None


class AddMemberRequest(BaseModel):
    """Request to add a user to a group"""
    user_id: UUID
    role: MembershipRole = MembershipRole.USER


class AssignAdminRequest(BaseModel):
    """Request to designate a group's admin"""
    user_id: UUID


class GroupResponse(BaseModel):
    """Group details"""
    id: UUID
    name: str
    description: Optional[str] = None
    region_id: Optional[UUID] = None
    group_admin_id: Optional[UUID] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class GroupMemberResponse(BaseModel):
    """Member of a group"""
    id: UUID
    full_name: Optional[str] = None
    email: str
    profile_picture: Optional[str] = None
    role: MembershipRole
    joined_at: Optional[datetime] = None


class MembershipResponse(BaseModel):
    """Membership row"""
    id: UUID
    user_id: UUID
    group_id: UUID
    role: MembershipRole
    created_at: Optional[datetime] = None
