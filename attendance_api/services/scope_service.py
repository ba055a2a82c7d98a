"""
Scope Authorizer
Decides which analytics scopes a caller's role and affiliation cover
"""

import logging
from dataclasses import dataclass
from typing import Optional
from databases import Database
from attendance_api.database import database
from attendance_api.errors import Forbidden, NotFound
from attendance_api.roles import MembershipRole, Role, normalize_membership_role
from attendance_api.services.membership_service import MembershipResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScopeGrant:
    """Outcome of a successful authorization"""
    scope: str
    scope_id: Optional[str]
    bypass: bool = False


class ScopeAuthorizer:
    """
    Role-based scope checks

    - super_admin: every scope (bypass)
    - region_manager: own region, or any group inside it
    - admin: groups the caller administers
    - user: nothing

    Authorization runs before any existence check, so an unknown id is
    rejected exactly like a foreign one.
    """

    def __init__(self, db: Database = database, memberships: MembershipResolver = None):
        self.db = db
        self.memberships = memberships or MembershipResolver(db)

    async def authorize(self, caller: dict, scope: str, scope_id=None) -> ScopeGrant:
        """
        Check that the caller may read analytics for a scope

        Args:
            caller: Current user (id, role, region_id)
            scope: overall, region or group
            scope_id: Region or group id for scoped requests

        Returns:
            ScopeGrant describing the allowed scope

        Raises:
            Forbidden: If the role or affiliation does not cover the scope
        """
        role = caller["role"]
        scope_id = str(scope_id) if scope_id else None

        if role == Role.SUPER_ADMIN:
            return ScopeGrant(scope, scope_id, bypass=True)

        allowed = False
        if role == Role.REGION_MANAGER:
            allowed = await self._region_manager_allowed(caller, scope, scope_id)
        elif role == Role.ADMIN:
            allowed = await self._group_admin_allowed(caller, scope, scope_id)

        if not allowed:
            logger.info(
                "Denied %s scope=%s scope_id=%s for user %s",
                role.value, scope, scope_id, caller.get("id")
            )
            raise Forbidden()

        return ScopeGrant(scope, scope_id)

    async def authorize_group(self, caller: dict, group_id) -> ScopeGrant:
        return await self.authorize(caller, "group", group_id)

    async def authorize_region(self, caller: dict, region_id) -> ScopeGrant:
        return await self.authorize(caller, "region", region_id)

    async def authorize_event(self, caller: dict, event: Optional[dict], missing: str = "Event not found") -> ScopeGrant:
        """
        Authorize against the group owning an event

        A missing event (or record) is NotFound only for super admins;
        everyone else gets the same Forbidden as for a foreign event.
        """
        if not event:
            if caller["role"] == Role.SUPER_ADMIN:
                raise NotFound(missing)
            raise Forbidden()
        return await self.authorize_group(caller, event["group_id"])

    async def _region_manager_allowed(self, caller: dict, scope: str, scope_id: Optional[str]) -> bool:
        own_region = caller.get("region_id")
        if not own_region or not scope_id:
            return False

        if scope == "region":
            return scope_id == str(own_region)

        if scope == "group":
            group_region = await self.db.fetch_val(
                "SELECT region_id FROM groups WHERE id = :id",
                {"id": scope_id}
            )
            return group_region is not None and str(group_region) == str(own_region)

        return False

    async def _group_admin_allowed(self, caller: dict, scope: str, scope_id: Optional[str]) -> bool:
        if scope != "group" or not scope_id:
            return False

        group_admin_id = await self.db.fetch_val(
            "SELECT group_admin_id FROM groups WHERE id = :id",
            {"id": scope_id}
        )
        if group_admin_id is not None and str(group_admin_id) == str(caller["id"]):
            return True

        membership_role = await self.memberships.membership_role(caller["id"], scope_id)
        if membership_role is None:
            return False
        return normalize_membership_role(membership_role) == MembershipRole.ADMIN
