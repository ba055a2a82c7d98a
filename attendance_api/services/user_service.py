"""
User Service
Profile lookups and edits, plus a user's group memberships
"""

import logging
from typing import List, Optional
from databases import Database
from attendance_api.database import database
from attendance_api.errors import NotFound
from attendance_api.schemas.user import UpdateUserRequest
from attendance_api.services.membership_service import MembershipResolver

logger = logging.getLogger(__name__)

USER_COLUMNS = """
    id, email, full_name, phone_number, gender, profile_picture, location,
    next_of_kin_name, next_of_kin_contact, role, region_id, created_at
"""


class UserService:
    """Service for user profile operations"""

    def __init__(self, db: Database = database):
        self.db = db
        self.memberships = MembershipResolver(db)

    async def list_users(
        self,
        search: Optional[str] = None,
        region_id=None,
        limit: int = 100,
        offset: int = 0
    ) -> List[dict]:
        """
        Users ordered by name

        Args:
            search: Case-insensitive substring of the full name
            region_id: Only users owned by this region
            limit: Page size
            offset: Rows to skip
        """
        conditions = []
        params = {"limit": limit, "offset": offset}

        if search:
            conditions.append("full_name ILIKE :search")
            params["search"] = f"%{search.strip()}%"
        if region_id is not None:
            conditions.append("region_id = :region_id")
            params["region_id"] = str(region_id)

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        rows = await self.db.fetch_all(
            f"""
            SELECT {USER_COLUMNS}
            FROM users
            {where}
            ORDER BY full_name
            LIMIT :limit OFFSET :offset
            """,
            params
        )
        return [dict(row) for row in rows]

    async def find_user(self, user_id) -> Optional[dict]:
        row = await self.db.fetch_one(
            f"SELECT {USER_COLUMNS} FROM users WHERE id = :id",
            {"id": str(user_id)}
        )
        return dict(row) if row else None

    async def get_user(self, user_id) -> dict:
        user = await self.find_user(user_id)
        if not user:
            raise NotFound("User not found")
        return user

    async def update_user(self, user_id, data: UpdateUserRequest) -> dict:
        changes = data.model_dump(exclude_unset=True)
        if not changes:
            return await self.get_user(user_id)

        assignments = ", ".join(f"{column} = :{column}" for column in changes)
        row = await self.db.fetch_one(
            f"""
            UPDATE users
            SET {assignments}, updated_at = NOW()
            WHERE id = :id
            RETURNING {USER_COLUMNS}
            """,
            {**changes, "id": str(user_id)}
        )
        if not row:
            raise NotFound("User not found")
        return dict(row)

    async def delete_user(self, user_id) -> None:
        """Delete a user; memberships and attendance go with them"""
        row = await self.db.fetch_one(
            "DELETE FROM users WHERE id = :id RETURNING id",
            {"id": str(user_id)}
        )
        if not row:
            raise NotFound("User not found")
        logger.info("Deleted user %s", user_id)

    async def user_groups(self, user_id) -> List[dict]:
        await self.get_user(user_id)
        return await self.memberships.user_groups(user_id)
