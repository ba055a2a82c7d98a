"""
Authentication Module
JWT token handling and role-gated dependencies
"""

from attendance_api.auth.dependencies import (
    create_access_token,
    decode_access_token,
    get_current_user,
    require_roles,
    get_super_admin,
    get_region_staff,
    get_analytics_user
)

__all__ = [
    "create_access_token",
    "decode_access_token",
    "get_current_user",
    "require_roles",
    "get_super_admin",
    "get_region_staff",
    "get_analytics_user",
]
