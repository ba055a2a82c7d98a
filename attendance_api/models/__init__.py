"""
Database Models
Import all models here for Alembic migrations
"""

from attendance_api.models.region import Region, REGION_NAMES
from attendance_api.models.user import User
from attendance_api.models.group import Group, UserGroup
from attendance_api.models.event import Event
from attendance_api.models.attendance import Attendance

__all__ = [
    "Region",
    "REGION_NAMES",
    "User",
    "Group",
    "UserGroup",
    "Event",
    "Attendance",
]
