"""
Membership Resolver
Read projections over groups and the users_groups association
"""

from typing import Dict, Iterable, List, Optional, Set
from databases import Database
from attendance_api.database import database


class MembershipResolver:
    """Member counts and group rosters, always read live from the store"""

    def __init__(self, db: Database = database):
        self.db = db

    async def member_count(self, group_id) -> int:
        """Number of members currently in a group"""
        count = await self.db.fetch_val(
            "SELECT COUNT(user_id) FROM users_groups WHERE group_id = :group_id",
            {"group_id": str(group_id)}
        )
        return int(count or 0)

    async def member_counts_by_group(self, group_ids: Iterable) -> Dict[str, int]:
        """
        Member counts for many groups in one grouped query

        Groups without members are absent from the result.
        """
        ids = sorted({str(group_id) for group_id in group_ids})
        if not ids:
            return {}

        rows = await self.db.fetch_all(
            """
            SELECT group_id, COUNT(user_id) AS member_count
            FROM users_groups
            WHERE group_id = ANY(:group_ids)
            GROUP BY group_id
            """,
            {"group_ids": ids}
        )
        return {str(row["group_id"]): int(row["member_count"]) for row in rows}

    async def get_group(self, group_id) -> Optional[dict]:
        row = await self.db.fetch_one(
            "SELECT * FROM groups WHERE id = :id",
            {"id": str(group_id)}
        )
        return dict(row) if row else None

    async def groups_in_region(self, region_id) -> Set[str]:
        """Ids of all groups owned by a region"""
        rows = await self.db.fetch_all(
            "SELECT id FROM groups WHERE region_id = :region_id",
            {"region_id": str(region_id)}
        )
        return {str(row["id"]) for row in rows}

    async def membership_role(self, user_id, group_id) -> Optional[str]:
        """Role of a user inside a group, or None when not a member"""
        return await self.db.fetch_val(
            "SELECT role FROM users_groups WHERE user_id = :user_id AND group_id = :group_id",
            {"user_id": str(user_id), "group_id": str(group_id)}
        )

    async def user_groups(self, user_id) -> List[dict]:
        """Groups a user belongs to, with membership role and join time"""
        rows = await self.db.fetch_all(
            """
            SELECT g.id, g.name, g.description, g.region_id,
                   ug.role, ug.created_at AS joined_at
            FROM users_groups ug
            JOIN groups g ON g.id = ug.group_id
            WHERE ug.user_id = :user_id
            ORDER BY g.name
            """,
            {"user_id": str(user_id)}
        )
        return [dict(row) for row in rows]

    async def group_members(self, group_id) -> List[dict]:
        """Members of a group, with membership role and join time"""
        rows = await self.db.fetch_all(
            """
            SELECT u.id, u.full_name, u.email, u.profile_picture,
                   ug.role, ug.created_at AS joined_at
            FROM users_groups ug
            JOIN users u ON u.id = ug.user_id
            WHERE ug.group_id = :group_id
            ORDER BY u.full_name
            """,
            {"group_id": str(group_id)}
        )
        return [dict(row) for row in rows]
