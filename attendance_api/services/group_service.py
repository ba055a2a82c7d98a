"""
Group Service
Business logic for groups and their memberships
"""

import logging
from typing import List
from uuid import uuid4
from asyncpg.exceptions import UniqueViolationError
from databases import Database
from attendance_api.database import database
from attendance_api.errors import Conflict, NotFound
from attendance_api.roles import MembershipRole
from attendance_api.schemas.group import CreateGroupRequest, AddMemberRequest, UpdateGroupRequest
from attendance_api.services.membership_service import MembershipResolver

logger = logging.getLogger(__name__)


class GroupService:
    """Service for group management operations"""

    def __init__(self, db: Database = database):
        self.db = db
        self.memberships = MembershipResolver(db)

    async def create_group(self, data: CreateGroupRequest) -> dict:
        """Create a new group, unique by name within its region"""

        group_id = str(uuid4())
        try:
            async with self.db.transaction():
                group = await self.db.fetch_one(
                    """
                    INSERT INTO groups (id, name, description, region_id, group_admin_id)
                    VALUES (:id, :name, :description, :region_id, :group_admin_id)
                    RETURNING *
                    """,
                    {
                        "id": group_id,
                        "name": data.name,
                        "description": data.description,
                        "region_id": str(data.region_id) if data.region_id else None,
                        "group_admin_id": str(data.group_admin_id) if data.group_admin_id else None
                    }
                )
                if data.group_admin_id:
                    await self._upsert_membership(group_id, data.group_admin_id, MembershipRole.ADMIN)
        except UniqueViolationError:
            raise Conflict(f"Group '{data.name}' already exists in this region")

        logger.info("Created group %s (%s)", group_id, data.name)
        return dict(group)

    async def list_groups(self, region_id=None) -> List[dict]:
        """All groups by name, optionally only those of one region"""
        query = "SELECT * FROM groups"
        params = {}
        if region_id is not None:
            query += " WHERE region_id = :region_id"
            params["region_id"] = str(region_id)

        rows = await self.db.fetch_all(query + " ORDER BY name", params)
        return [dict(row) for row in rows]

    async def get_group(self, group_id) -> dict:
        group = await self.memberships.get_group(group_id)
        if not group:
            raise NotFound("Group not found")
        return group

    async def update_group(self, group_id, data: UpdateGroupRequest) -> dict:
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if not changes:
            return await self.get_group(group_id)

        assignments = ", ".join(f"{column} = :{column}" for column in changes)
        try:
            row = await self.db.fetch_one(
                f"""
                UPDATE groups
                SET {assignments}, updated_at = NOW()
                WHERE id = :id
                RETURNING *
                """,
                {**changes, "id": str(group_id)}
            )
        except UniqueViolationError:
            raise Conflict(f"Group '{data.name}' already exists in this region")

        if not row:
            raise NotFound("Group not found")
        return dict(row)

    async def delete_group(self, group_id) -> None:
        """Delete a group; its memberships, events and their attendance cascade"""
        row = await self.db.fetch_one(
            "DELETE FROM groups WHERE id = :id RETURNING id",
            {"id": str(group_id)}
        )
        if not row:
            raise NotFound("Group not found")
        logger.info("Deleted group %s", group_id)

    async def list_members(self, group_id) -> List[dict]:
        await self.get_group(group_id)
        return await self.memberships.group_members(group_id)

    async def add_member(self, group_id, data: AddMemberRequest) -> dict:
        """Add a user to a group; a (user, group) pair is unique"""

        await self.get_group(group_id)
        user = await self.db.fetch_one(
            "SELECT id FROM users WHERE id = :id",
            {"id": str(data.user_id)}
        )
        if not user:
            raise NotFound("User not found")

        try:
            row = await self.db.fetch_one(
                """
                INSERT INTO users_groups (id, user_id, group_id, role)
                VALUES (:id, :user_id, :group_id, :role)
                RETURNING *
                """,
                {
                    "id": str(uuid4()),
                    "user_id": str(data.user_id),
                    "group_id": str(group_id),
                    "role": data.role.value
                }
            )
        except UniqueViolationError:
            raise Conflict("User is already a member of this group")

        return dict(row)

    async def remove_member(self, group_id, user_id) -> None:
        row = await self.db.fetch_one(
            """
            DELETE FROM users_groups
            WHERE group_id = :group_id AND user_id = :user_id
            RETURNING id
            """,
            {"group_id": str(group_id), "user_id": str(user_id)}
        )
        if not row:
            raise NotFound("Membership not found")

    async def assign_admin(self, group_id, user_id) -> dict:
        """Designate a group's admin and give them the admin membership role"""

        await self.get_group(group_id)
        user = await self.db.fetch_one(
            "SELECT id FROM users WHERE id = :id",
            {"id": str(user_id)}
        )
        if not user:
            raise NotFound("User not found")

        async with self.db.transaction():
            group = await self.db.fetch_one(
                """
                UPDATE groups
                SET group_admin_id = :user_id, updated_at = NOW()
                WHERE id = :id
                RETURNING *
                """,
                {"id": str(group_id), "user_id": str(user_id)}
            )
            await self._upsert_membership(group_id, user_id, MembershipRole.ADMIN)

        return dict(group)

    async def _upsert_membership(self, group_id, user_id, role: MembershipRole) -> None:
        await self.db.execute(
            """
            INSERT INTO users_groups (id, user_id, group_id, role)
            VALUES (:id, :user_id, :group_id, :role)
            ON CONFLICT (user_id, group_id)
            DO UPDATE SET role = EXCLUDED.role, updated_at = NOW()
            """,
            {
                "id": str(uuid4()),
                "user_id": str(user_id),
                "group_id": str(group_id),
                "role": role.value
            }
        )
