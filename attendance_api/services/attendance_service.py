"""
Attendance Service
Presence counts for analytics plus attendance record management
"""

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional
from uuid import uuid4
from asyncpg.exceptions import UniqueViolationError
from databases import Database
from attendance_api.database import database
from attendance_api.errors import Conflict, NotFound
from attendance_api.schemas.attendance import CreateAttendanceRequest, UpdateAttendanceRequest

logger = logging.getLogger(__name__)


class AttendanceReader:
    """Batched presence counts keyed by event"""

    def __init__(self, db: Database = database):
        self.db = db

    async def present_counts_by_event(self, event_ids: Iterable) -> Dict[str, int]:
        """
        Present rows per event, counting only users who are still members
        of the event's group so presence never exceeds possible attendance.
        Events with none are absent from the result.
        """
        return await self._counts_by_event(event_ids, present=True)

    async def absent_counts_by_event(self, event_ids: Iterable) -> Dict[str, int]:
        """Recorded absences per event, reconciled against membership the same way"""
        return await self._counts_by_event(event_ids, present=False)

    async def _counts_by_event(self, event_ids: Iterable, present: bool) -> Dict[str, int]:
        ids = sorted({str(event_id) for event_id in event_ids})
        if not ids:
            return {}

        rows = await self.db.fetch_all(
            """
            SELECT a.event_id, COUNT(a.id) AS row_count
            FROM attendance a
            JOIN events e ON e.id = a.event_id
            JOIN users_groups ug ON ug.user_id = a.user_id AND ug.group_id = e.group_id
            WHERE a.event_id = ANY(:event_ids) AND a.present = :present
            GROUP BY a.event_id
            """,
            {"event_ids": ids, "present": present}
        )
        return {str(row["event_id"]): int(row["row_count"]) for row in rows}


class AttendanceService:
    """Service for attendance record operations"""

    def __init__(self, db: Database = database):
        self.db = db

    async def create_attendance(self, event_id, data: CreateAttendanceRequest) -> dict:
        """Record attendance of a user at an event"""

        event = await self.db.fetch_one(
            "SELECT id FROM events WHERE id = :id",
            {"id": str(event_id)}
        )
        if not event:
            raise NotFound("Event not found")

        user = await self.db.fetch_one(
            "SELECT id FROM users WHERE id = :id",
            {"id": str(data.user_id)}
        )
        if not user:
            raise NotFound("User not found")

        try:
            row = await self.db.fetch_one(
                """
                INSERT INTO attendance (id, user_id, event_id, present, apology, topic, aob)
                VALUES (:id, :user_id, :event_id, :present, :apology, :topic, :aob)
                RETURNING *
                """,
                {
                    "id": str(uuid4()),
                    "user_id": str(data.user_id),
                    "event_id": str(event_id),
                    "present": data.present,
                    "apology": data.apology,
                    "topic": data.topic,
                    "aob": data.aob
                }
            )
        except UniqueViolationError:
            raise Conflict("Attendance already recorded for this user and event")

        return dict(row)

    async def find_attendance(self, attendance_id) -> Optional[dict]:
        row = await self.db.fetch_one(
            "SELECT * FROM attendance WHERE id = :id",
            {"id": str(attendance_id)}
        )
        return dict(row) if row else None

    async def get_attendance(self, attendance_id) -> dict:
        record = await self.find_attendance(attendance_id)
        if not record:
            raise NotFound("Attendance record not found")
        return record

    async def update_attendance(self, attendance_id, data: UpdateAttendanceRequest) -> dict:
        """Correct presence or notes on an existing record"""

        changes = data.model_dump(exclude_unset=True)
        if not changes:
            return await self.get_attendance(attendance_id)

        assignments = ", ".join(f"{column} = :{column}" for column in changes)
        row = await self.db.fetch_one(
            f"""
            UPDATE attendance
            SET {assignments}, updated_at = NOW()
            WHERE id = :id
            RETURNING *
            """,
            {**changes, "id": str(attendance_id)}
        )
        if not row:
            raise NotFound("Attendance record not found")
        return dict(row)

    async def delete_attendance(self, attendance_id) -> None:
        row = await self.db.fetch_one(
            "DELETE FROM attendance WHERE id = :id RETURNING id",
            {"id": str(attendance_id)}
        )
        if not row:
            raise NotFound("Attendance record not found")

    async def get_event_attendance(self, event_id) -> List[dict]:
        rows = await self.db.fetch_all(
            """
            SELECT a.*, u.full_name, u.email
            FROM attendance a
            JOIN users u ON u.id = a.user_id
            WHERE a.event_id = :event_id
            ORDER BY u.full_name
            """,
            {"event_id": str(event_id)}
        )
        return [dict(row) for row in rows]

    async def get_attended_members(self, event_id) -> List[dict]:
        """Users marked present at an event"""
        rows = await self.db.fetch_all(
            """
            SELECT u.id, u.full_name, u.email
            FROM attendance a
            JOIN users u ON u.id = a.user_id
            WHERE a.event_id = :event_id AND a.present = TRUE
            ORDER BY u.full_name
            """,
            {"event_id": str(event_id)}
        )
        return [dict(row) for row in rows]

    async def get_user_attendance(self, user_id) -> List[dict]:
        rows = await self.db.fetch_all(
            """
            SELECT a.*, e.title, e.date
            FROM attendance a
            JOIN events e ON e.id = a.event_id
            WHERE a.user_id = :user_id
            ORDER BY e.date DESC
            """,
            {"user_id": str(user_id)}
        )
        return [dict(row) for row in rows]

    async def get_attendance_between(
        self,
        start: datetime,
        end: datetime,
        region_id: Optional[str] = None
    ) -> List[dict]:
        """Attendance records for events dated in [start, end], optionally limited to a region"""

        query = """
        SELECT a.*, u.full_name, u.email, e.title, e.date
        FROM attendance a
        JOIN users u ON u.id = a.user_id
        JOIN events e ON e.id = a.event_id
        JOIN groups g ON g.id = e.group_id
        WHERE e.date >= :start AND e.date <= :end
        """
        params = {"start": start, "end": end}

        if region_id is not None:
            query += " AND g.region_id = :region_id"
            params["region_id"] = str(region_id)

        rows = await self.db.fetch_all(query + " ORDER BY e.date DESC", params)
        return [dict(row) for row in rows]
