"""
Attendance Analytics
Bucketed attendance overview plus per-event and per-group statistics
"""

import asyncio
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional
from databases import Database
from attendance_api.database import database
from attendance_api.errors import AppError, InvalidScope, MissingScopeId, NotFound, StoreFailure
from attendance_api.services.attendance_service import AttendanceReader
from attendance_api.services.event_service import EventReader
from attendance_api.services.membership_service import MembershipResolver
from attendance_api.services.overview_formatter import OverviewResult, format_overview
from attendance_api.services.period_buckets import (
    attendance_rate,
    build_buckets,
    find_bucket,
    normalize_period,
    utcnow,
)
from attendance_api.services.scope_service import ScopeAuthorizer

logger = logging.getLogger(__name__)

SCOPES = ("overall", "region", "group")
SCOPE_ID_PARAMS = {"group": "groupId", "region": "regionId"}


@dataclass(frozen=True)
class OverviewRequest:
    period: str
    scope: str
    scope_id: Optional[str]


def parse_overview_request(period, scope="overall", scope_id=None) -> OverviewRequest:
    """
    Validate overview inputs before anything touches the store

    Raises:
        InvalidPeriod: Unknown period keyword
        InvalidScope: Unknown scope
        MissingScopeId: group/region scope without an id
    """
    canonical_period = normalize_period(period)

    scope = (scope or "overall").strip().lower() if isinstance(scope, str) else scope
    if scope not in SCOPES:
        raise InvalidScope(f"Invalid scope '{scope}'. Supported options: {', '.join(SCOPES)}")

    if scope == "overall":
        return OverviewRequest(canonical_period, scope, None)

    if not scope_id:
        raise MissingScopeId(f"{SCOPE_ID_PARAMS[scope]} is required when scope is {scope}")

    return OverviewRequest(canonical_period, scope, str(scope_id))


@contextmanager
def store_errors(action: str):
    """Turn unexpected persistence errors into StoreFailure, logged once"""
    try:
        yield
    except AppError:
        raise
    except Exception as exc:
        logger.exception("Store failure while %s", action)
        raise StoreFailure() from exc


class AttendanceAggregator:
    """Fills period buckets from event, attendance and membership reads"""

    def __init__(
        self,
        events: EventReader,
        attendance: AttendanceReader,
        memberships: MembershipResolver,
        clock: Callable[[], datetime] = utcnow
    ):
        self.events = events
        self.attendance = attendance
        self.memberships = memberships
        self.clock = clock

    async def overview(self, scope: str, scope_id, period: str) -> OverviewResult:
        """
        Attendance per bucket for a scope and period

        Possible attendance for an event is the live member count of its
        group. Events dated outside every bucket are skipped.

        Args:
            scope: overall, region or group
            scope_id: Region or group id (ignored for overall)
            period: week, month, quarter, year or an alias

        Returns:
            OverviewResult with filled buckets
        """
        request = parse_overview_request(period, scope, scope_id)
        buckets = build_buckets(request.period, now=self.clock())
        result = OverviewResult(request.scope, request.scope_id, request.period, buckets)

        with store_errors(f"building {request.scope} overview"):
            events = await self.events.events_in_range(
                buckets[0].start_date,
                buckets[-1].end_date,
                request.scope,
                request.scope_id
            )
            if not events:
                return result

            present_counts, member_counts = await asyncio.gather(
                self.attendance.present_counts_by_event(event["id"] for event in events),
                self.memberships.member_counts_by_group(event["group_id"] for event in events),
            )

        for event in events:
            bucket = find_bucket(buckets, event["date"])
            if bucket is None:
                logger.debug("Event %s at %s falls outside the %s buckets", event["id"], event["date"], request.period)
                continue

            bucket.event_count += 1
            bucket.total_possible += member_counts.get(str(event["group_id"]), 0)
            bucket.present_count += present_counts.get(str(event["id"]), 0)

        return result

    async def event_participation(self, event: dict) -> dict:
        """Possible, present and absent counts for one event"""
        event_id = str(event["id"])

        with store_errors(f"computing participation for event {event_id}"):
            total_possible, present_counts, absent_counts = await asyncio.gather(
                self.memberships.member_count(event["group_id"]),
                self.attendance.present_counts_by_event([event_id]),
                self.attendance.absent_counts_by_event([event_id]),
            )

        present_count = present_counts.get(event_id, 0)
        return {
            "eventId": event["id"],
            "eventTitle": event["title"],
            "eventDate": event["date"],
            "totalPossible": total_possible,
            "presentCount": present_count,
            "absentCount": absent_counts.get(event_id, 0),
            "attendanceRate": attendance_rate(present_count, total_possible),
        }

    async def group_attendance(self, group_id) -> dict:
        """Per-event attendance for every event of a group, plus totals"""
        group_id = str(group_id)

        with store_errors(f"computing attendance for group {group_id}"):
            total_members, events = await asyncio.gather(
                self.memberships.member_count(group_id),
                self.events.events_for_group(group_id),
            )
            present_counts = await self.attendance.present_counts_by_event(event["id"] for event in events)

        event_stats = []
        for event in events:
            present = present_counts.get(str(event["id"]), 0)
            event_stats.append({
                "eventId": event["id"],
                "eventTitle": event["title"],
                "eventDate": event["date"],
                "totalMembers": total_members,
                "presentMembers": present,
                "attendanceRate": attendance_rate(present, total_members),
            })

        total_present = sum(stat["presentMembers"] for stat in event_stats)
        return {
            "groupId": group_id,
            "eventStats": event_stats,
            "overallStats": {
                "totalEvents": len(events),
                "totalMembers": total_members,
                "totalPresentMembers": total_present,
                "averageAttendanceRate": attendance_rate(total_present, total_members * len(events)),
            },
        }


class AnalyticsService:
    """Validation, authorization and aggregation for analytics requests"""

    def __init__(
        self,
        db: Database = database,
        aggregator: AttendanceAggregator = None,
        authorizer: ScopeAuthorizer = None
    ):
        memberships = MembershipResolver(db)
        self.events = EventReader(db)
        self.memberships = memberships
        self.aggregator = aggregator or AttendanceAggregator(self.events, AttendanceReader(db), memberships)
        self.authorizer = authorizer or ScopeAuthorizer(db, memberships)

    async def attendance_overview(self, caller: dict, period, scope="overall", scope_id=None) -> dict:
        """Validate, authorize, aggregate and format an overview request"""
        request = parse_overview_request(period, scope, scope_id)
        with store_errors(f"authorizing {request.scope} overview"):
            await self.authorizer.authorize(caller, request.scope, request.scope_id)

        result = await self.aggregator.overview(request.scope, request.scope_id, request.period)
        return format_overview(result)

    async def event_participation(self, caller: dict, event_id) -> dict:
        with store_errors(f"authorizing event {event_id}"):
            event = await self.events.get_event(event_id)
            await self.authorizer.authorize_event(caller, event)

        return await self.aggregator.event_participation(event)

    async def group_attendance(self, caller: dict, group_id) -> dict:
        with store_errors(f"authorizing group {group_id}"):
            await self.authorizer.authorize_group(caller, group_id)
            group = await self.memberships.get_group(group_id)
        if not group:
            raise NotFound("Group not found")

        return await self.aggregator.group_attendance(group_id)
