"""
Role Model
Canonical user and membership roles
"""

from enum import Enum


class Role(str, Enum):
    """Global user role, ordered from least to most privileged"""
    USER = "user"
    ADMIN = "admin"
    REGION_MANAGER = "region_manager"
    SUPER_ADMIN = "super_admin"


class MembershipRole(str, Enum):
    """Per-group role stored on users_groups"""
    USER = "user"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


# Spellings written by older clients and migrations
LEGACY_ROLE_SPELLINGS = {
    "super admin": Role.SUPER_ADMIN,
    "superadmin": Role.SUPER_ADMIN,
    "region manager": Role.REGION_MANAGER,
    "regional manager": Role.REGION_MANAGER,
    "regional_manager": Role.REGION_MANAGER,
}


def normalize_role(raw) -> Role:
    """
    Map a stored role string to its canonical Role

    Args:
        raw: Role value as stored (any legacy spelling)

    Returns:
        Canonical Role

    Raises:
        ValueError: If the value is not a known role
    """
    if isinstance(raw, Role):
        return raw
    if not isinstance(raw, str):
        raise ValueError(f"Unknown role: {raw!r}")

    key = " ".join(raw.strip().lower().split())
    if key in LEGACY_ROLE_SPELLINGS:
        return LEGACY_ROLE_SPELLINGS[key]
    return Role(key.replace(" ", "_"))


def normalize_membership_role(raw) -> MembershipRole:
    """Map a stored users_groups.role value to its canonical MembershipRole"""
    if raw is None:
        return MembershipRole.USER
    role = normalize_role(raw)
    if role == Role.REGION_MANAGER:
        raise ValueError("region_manager is not a membership role")
    return MembershipRole(role.value)
