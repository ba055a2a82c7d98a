"""
Region Service
Read access to the predefined regions and what they own
"""

from typing import List
from databases import Database
from attendance_api.database import database
from attendance_api.errors import NotFound


class RegionService:
    """Service for region lookups"""

    def __init__(self, db: Database = database):
        self.db = db

    async def list_regions(self) -> List[dict]:
        rows = await self.db.fetch_all("SELECT * FROM regions ORDER BY name")
        return [dict(row) for row in rows]

    async def get_region(self, region_id) -> dict:
        row = await self.db.fetch_one(
            "SELECT * FROM regions WHERE id = :id",
            {"id": str(region_id)}
        )
        if not row:
            raise NotFound("Region not found")
        return dict(row)

    async def list_region_groups(self, region_id) -> List[dict]:
        rows = await self.db.fetch_all(
            "SELECT * FROM groups WHERE region_id = :region_id ORDER BY name",
            {"region_id": str(region_id)}
        )
        return [dict(row) for row in rows]

    async def list_region_users(self, region_id) -> List[dict]:
        rows = await self.db.fetch_all(
            """
            SELECT id, full_name, email, role
            FROM users
            WHERE region_id = :region_id
            ORDER BY full_name
            """,
            {"region_id": str(region_id)}
        )
        return [dict(row) for row in rows]
