"""
Service Dependencies
Per-request service construction on top of the shared connection pool
"""

from databases import Database
from fastapi import Depends
from attendance_api.database import get_database
from attendance_api.services.analytics_service import AnalyticsService
from attendance_api.services.attendance_service import AttendanceService
from attendance_api.services.event_service import EventService
from attendance_api.services.group_service import GroupService
from attendance_api.services.region_service import RegionService
from attendance_api.services.scope_service import ScopeAuthorizer
from attendance_api.services.user_service import UserService


def get_analytics_service(db: Database = Depends(get_database)) -> AnalyticsService:
    return AnalyticsService(db)


def get_scope_authorizer(db: Database = Depends(get_database)) -> ScopeAuthorizer:
    return ScopeAuthorizer(db)


def get_attendance_service(db: Database = Depends(get_database)) -> AttendanceService:
    return AttendanceService(db)


def get_event_service(db: Database = Depends(get_database)) -> EventService:
    return EventService(db)


def get_group_service(db: Database = Depends(get_database)) -> GroupService:
    return GroupService(db)


def get_region_service(db: Database = Depends(get_database)) -> RegionService:
    return RegionService(db)


def get_user_service(db: Database = Depends(get_database)) -> UserService:
    return UserService(db)
