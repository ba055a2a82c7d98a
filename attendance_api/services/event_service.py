"""
Event Service
Event reads for analytics plus event record management
"""

import logging
from datetime import datetime
from typing import List, Optional
from uuid import uuid4
from databases import Database
from attendance_api.database import database
from attendance_api.errors import NotFound
from attendance_api.schemas.event import CreateEventRequest, UpdateEventRequest

logger = logging.getLogger(__name__)


class EventReader:
    """Event lookups by date range and scope"""

    def __init__(self, db: Database = database):
        self.db = db

    async def events_in_range(
        self,
        start: datetime,
        end: datetime,
        scope: str = "overall",
        scope_id=None
    ) -> List[dict]:
        """
        Events dated within [start, end], filtered by scope

        Args:
            start: Range start (inclusive)
            end: Range end (inclusive)
            scope: overall, region or group
            scope_id: Group or region id for the scoped variants

        Returns:
            Rows with id, group_id and date
        """
        params = {"start": start, "end": end}

        if scope == "group":
            query = """
            SELECT e.id, e.group_id, e.date
            FROM events e
            WHERE e.date >= :start AND e.date <= :end
              AND e.group_id = :scope_id
            """
            params["scope_id"] = str(scope_id)
        elif scope == "region":
            query = """
            SELECT e.id, e.group_id, e.date
            FROM events e
            JOIN groups g ON g.id = e.group_id
            WHERE e.date >= :start AND e.date <= :end
              AND g.region_id = :scope_id
            """
            params["scope_id"] = str(scope_id)
        else:
            query = """
            SELECT e.id, e.group_id, e.date
            FROM events e
            WHERE e.date >= :start AND e.date <= :end
            """

        rows = await self.db.fetch_all(query + " ORDER BY e.date", params)
        return [dict(row) for row in rows]

    async def get_event(self, event_id) -> Optional[dict]:
        row = await self.db.fetch_one(
            "SELECT * FROM events WHERE id = :id",
            {"id": str(event_id)}
        )
        return dict(row) if row else None

    async def events_for_group(self, group_id) -> List[dict]:
        rows = await self.db.fetch_all(
            "SELECT * FROM events WHERE group_id = :group_id ORDER BY date DESC",
            {"group_id": str(group_id)}
        )
        return [dict(row) for row in rows]


class EventService:
    """Service for event record operations"""

    def __init__(self, db: Database = database):
        self.db = db
        self.reader = EventReader(db)

    async def create_event(self, data: CreateEventRequest) -> dict:
        """Create an event under an existing group"""

        group = await self.db.fetch_one(
            "SELECT id FROM groups WHERE id = :id",
            {"id": str(data.group_id)}
        )
        if not group:
            raise NotFound("Group not found")

        event_id = str(uuid4())
        row = await self.db.fetch_one(
            """
            INSERT INTO events (id, group_id, title, description, date, location)
            VALUES (:id, :group_id, :title, :description, :date, :location)
            RETURNING *
            """,
            {
                "id": event_id,
                "group_id": str(data.group_id),
                "title": data.title,
                "description": data.description,
                "date": data.date,
                "location": data.location
            }
        )
        logger.info("Created event %s for group %s", event_id, data.group_id)
        return dict(row)

    async def get_event(self, event_id) -> dict:
        event = await self.reader.get_event(event_id)
        if not event:
            raise NotFound("Event not found")
        return event

    async def list_group_events(self, group_id) -> List[dict]:
        return await self.reader.events_for_group(group_id)

    async def find_event(self, event_id) -> Optional[dict]:
        return await self.reader.get_event(event_id)

    async def list_events(self, region_id=None, limit: int = 100, offset: int = 0) -> List[dict]:
        """Events newest first, optionally limited to one region's groups"""

        query = """
        SELECT e.*
        FROM events e
        JOIN groups g ON g.id = e.group_id
        """
        params = {"limit": limit, "offset": offset}

        if region_id is not None:
            query += " WHERE g.region_id = :region_id"
            params["region_id"] = str(region_id)

        rows = await self.db.fetch_all(query + " ORDER BY e.date DESC LIMIT :limit OFFSET :offset", params)
        return [dict(row) for row in rows]

    async def update_event(self, event_id, data: UpdateEventRequest) -> dict:
        """Change an event's details; the owning group is fixed"""

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if not changes:
            return await self.get_event(event_id)

        assignments = ", ".join(f"{column} = :{column}" for column in changes)
        row = await self.db.fetch_one(
            f"""
            UPDATE events
            SET {assignments}, updated_at = NOW()
            WHERE id = :id
            RETURNING *
            """,
            {**changes, "id": str(event_id)}
        )
        if not row:
            raise NotFound("Event not found")
        return dict(row)

    async def delete_event(self, event_id) -> None:
        """Delete an event together with its attendance records"""
        row = await self.db.fetch_one(
            "DELETE FROM events WHERE id = :id RETURNING id",
            {"id": str(event_id)}
        )
        if not row:
            raise NotFound("Event not found")
        logger.info("Deleted event %s", event_id)
