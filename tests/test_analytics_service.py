"""
Tests for the attendance aggregator and the analytics service.

The store is replaced by AsyncMock readers so bucket assignment,
batching and error mapping can be checked without PostgreSQL.
"""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from attendance_api.errors import (
    Forbidden,
    InvalidPeriod,
    InvalidScope,
    MissingScopeId,
    NotFound,
    StoreFailure,
)
from attendance_api.services.analytics_service import (
    AnalyticsService,
    AttendanceAggregator,
    parse_overview_request,
)
from attendance_api.services.overview_formatter import format_overview
from attendance_api.services.scope_service import ScopeAuthorizer
from tests.conftest import FIXED_NOW, GROUP_A, GROUP_B, REGION_A


def event(event_id, group_id, when):
    return {"id": event_id, "group_id": group_id, "date": when}


def make_aggregator(events=(), present=None, members=None):
    event_reader = AsyncMock()
    event_reader.events_in_range.return_value = list(events)
    attendance_reader = AsyncMock()
    attendance_reader.present_counts_by_event.return_value = present or {}
    membership_resolver = AsyncMock()
    membership_resolver.member_counts_by_group.return_value = members or {}

    aggregator = AttendanceAggregator(
        event_reader,
        attendance_reader,
        membership_resolver,
        clock=lambda: FIXED_NOW
    )
    return aggregator, event_reader, attendance_reader, membership_resolver


class TestParseOverviewRequest:

    def test_period_is_checked_before_scope(self):
        with pytest.raises(InvalidPeriod):
            parse_overview_request("bogus", "galaxy")

    def test_unknown_scope(self):
        with pytest.raises(InvalidScope):
            parse_overview_request("week", "galaxy")

    def test_group_scope_requires_group_id(self):
        with pytest.raises(MissingScopeId) as exc_info:
            parse_overview_request("week", "group")

        assert exc_info.value.detail == "groupId is required when scope is group"

    def test_region_scope_requires_region_id(self):
        with pytest.raises(MissingScopeId) as exc_info:
            parse_overview_request("month", "Region", None)

        assert "regionId" in exc_info.value.detail

    def test_overall_scope_drops_scope_id(self):
        request = parse_overview_request("Weekly", "OVERALL", GROUP_A)

        assert (request.period, request.scope, request.scope_id) == ("week", "overall", None)


class TestAttendanceAggregator:

    async def test_single_event_two_days_ago(self):
        aggregator, *_ = make_aggregator(
            events=[event("e1", GROUP_A, FIXED_NOW - timedelta(days=2))],
            present={"e1": 6},
            members={GROUP_A: 10},
        )

        payload = format_overview(await aggregator.overview("overall", None, "week"))

        filled = [bucket for bucket in payload["buckets"] if bucket["eventCount"]]
        assert len(filled) == 1
        assert filled[0] is payload["buckets"][5]
        expected = {"eventCount": 1, "totalPossible": 10, "presentCount": 6, "attendanceRate": 60.0}
        assert {key: filled[0][key] for key in expected} == expected
        assert payload["summary"] == expected

    async def test_group_without_events_gives_empty_buckets(self):
        aggregator, event_reader, attendance_reader, membership_resolver = make_aggregator()

        payload = format_overview(await aggregator.overview("group", GROUP_A, "month"))

        assert len(payload["buckets"]) == 4
        assert all(bucket["eventCount"] == 0 for bucket in payload["buckets"])
        assert payload["summary"]["attendanceRate"] == 0
        attendance_reader.present_counts_by_event.assert_not_called()
        membership_resolver.member_counts_by_group.assert_not_called()

    async def test_same_day_events_accumulate(self):
        when = FIXED_NOW - timedelta(hours=3)
        aggregator, *_ = make_aggregator(
            events=[event("e1", GROUP_A, when), event("e2", GROUP_A, when)],
            present={"e1": 3, "e2": 5},
            members={GROUP_A: 5},
        )

        result = await aggregator.overview("group", GROUP_A, "week")

        last = result.buckets[-1]
        assert (last.event_count, last.total_possible, last.present_count) == (2, 10, 8)
        assert last.attendance_rate == 80.0

    async def test_reads_are_scoped_and_batched_once(self):
        events = [
            event("e1", GROUP_A, FIXED_NOW - timedelta(days=1)),
            event("e2", GROUP_B, FIXED_NOW - timedelta(days=3)),
        ]
        aggregator, event_reader, attendance_reader, membership_resolver = make_aggregator(events=events)

        result = await aggregator.overview("region", REGION_A, "week")

        start, end, scope, scope_id = event_reader.events_in_range.await_args.args
        assert (start, end) == (result.buckets[0].start_date, FIXED_NOW)
        assert (scope, scope_id) == ("region", REGION_A)
        attendance_reader.present_counts_by_event.assert_awaited_once()
        membership_resolver.member_counts_by_group.assert_awaited_once()

    async def test_events_outside_every_bucket_are_dropped(self):
        aggregator, *_ = make_aggregator(
            events=[
                event("old", GROUP_A, FIXED_NOW - timedelta(days=30)),
                event("future", GROUP_A, FIXED_NOW + timedelta(minutes=1)),
                event("ok", GROUP_A, FIXED_NOW),
            ],
            present={"old": 4, "future": 4, "ok": 2},
            members={GROUP_A: 4},
        )

        payload = format_overview(await aggregator.overview("group", GROUP_A, "week"))

        assert payload["summary"]["eventCount"] == 1
        assert payload["summary"]["presentCount"] == 2
        assert payload["buckets"][-1]["eventCount"] == 1

    async def test_group_without_members_counts_zero_possible(self):
        aggregator, *_ = make_aggregator(
            events=[event("e1", GROUP_B, FIXED_NOW - timedelta(days=1))],
            present={},
            members={},
        )

        payload = format_overview(await aggregator.overview("overall", None, "week"))

        assert payload["summary"] == {"eventCount": 1, "totalPossible": 0, "presentCount": 0, "attendanceRate": 0}

    async def test_overview_is_idempotent(self):
        aggregator, *_ = make_aggregator(
            events=[event("e1", GROUP_A, FIXED_NOW - timedelta(days=10))],
            present={"e1": 7},
            members={GROUP_A: 9},
        )

        first = format_overview(await aggregator.overview("group", GROUP_A, "month"))
        second = format_overview(await aggregator.overview("group", GROUP_A, "month"))

        assert first == second

    async def test_summary_matches_bucket_sums_and_rates_are_bounded(self):
        events = [event(f"e{n}", GROUP_A, FIXED_NOW - timedelta(days=n * 9)) for n in range(10)]
        aggregator, *_ = make_aggregator(
            events=events,
            present={f"e{n}": n for n in range(10)},
            members={GROUP_A: 9},
        )

        payload = format_overview(await aggregator.overview("group", GROUP_A, "quarter"))

        for key in ("eventCount", "totalPossible", "presentCount"):
            assert payload["summary"][key] == sum(bucket[key] for bucket in payload["buckets"])
        for totals in payload["buckets"] + [payload["summary"]]:
            assert 0 <= totals["attendanceRate"] <= 100

    async def test_store_errors_become_store_failure(self):
        aggregator, event_reader, *_ = make_aggregator()
        event_reader.events_in_range.side_effect = ConnectionError("pool exhausted")

        with pytest.raises(StoreFailure) as exc_info:
            await aggregator.overview("overall", None, "year")

        assert exc_info.value.status_code == 500
        assert "pool" not in exc_info.value.detail

    async def test_event_participation(self):
        aggregator, _, attendance_reader, membership_resolver = make_aggregator()
        membership_resolver.member_count.return_value = 8
        attendance_reader.present_counts_by_event.return_value = {"e1": 6}
        attendance_reader.absent_counts_by_event.return_value = {"e1": 1}

        stats = await aggregator.event_participation(
            {"id": "e1", "group_id": GROUP_A, "title": "Weekly Meetup", "date": FIXED_NOW}
        )

        assert stats["totalPossible"] == 8
        assert stats["presentCount"] == 6
        assert stats["absentCount"] == 1
        assert stats["attendanceRate"] == 75.0

    async def test_group_attendance_totals(self):
        aggregator, event_reader, attendance_reader, membership_resolver = make_aggregator()
        membership_resolver.member_count.return_value = 4
        event_reader.events_for_group.return_value = [
            {"id": "e1", "title": "One", "date": FIXED_NOW},
            {"id": "e2", "title": "Two", "date": FIXED_NOW - timedelta(days=7)},
        ]
        attendance_reader.present_counts_by_event.return_value = {"e1": 4, "e2": 1}

        stats = await aggregator.group_attendance(GROUP_A)

        assert [stat["attendanceRate"] for stat in stats["eventStats"]] == [100.0, 25.0]
        assert stats["overallStats"] == {
            "totalEvents": 2,
            "totalMembers": 4,
            "totalPresentMembers": 5,
            "averageAttendanceRate": 62.5,
        }


class TestAnalyticsService:

    def make_service(self, authorizer=None):
        aggregator, *_ = make_aggregator()
        authorizer = authorizer or AsyncMock()
        service = AnalyticsService(db=AsyncMock(), aggregator=aggregator, authorizer=authorizer)
        return service, authorizer

    async def test_overview_authorizes_before_aggregating(self, group_admin):
        service, authorizer = self.make_service()
        authorizer.authorize.side_effect = Forbidden()
        service.aggregator.events.events_in_range = AsyncMock()

        with pytest.raises(Forbidden):
            await service.attendance_overview(group_admin, "week", "group", GROUP_B)

        authorizer.authorize.assert_awaited_once_with(group_admin, "group", GROUP_B)
        service.aggregator.events.events_in_range.assert_not_called()

    async def test_missing_scope_id_fails_before_authorization(self, group_admin):
        service, authorizer = self.make_service()

        with pytest.raises(MissingScopeId):
            await service.attendance_overview(group_admin, "week", "group", None)

        authorizer.authorize.assert_not_called()

    async def test_overview_returns_formatted_payload(self, super_admin):
        service, authorizer = self.make_service()

        payload = await service.attendance_overview(super_admin, "yearly", "overall")

        assert payload["period"] == "year"
        assert payload["scope"] == "overall"
        assert len(payload["buckets"]) == 12

    async def test_missing_event_is_forbidden_for_scoped_callers(self, region_manager):
        service, authorizer = self.make_service(ScopeAuthorizer(AsyncMock(), AsyncMock()))
        service.events = AsyncMock()
        service.events.get_event.return_value = None

        with pytest.raises(Forbidden):
            await service.event_participation(region_manager, "e-missing")

    async def test_missing_event_is_not_found_for_super_admin(self, super_admin):
        service, authorizer = self.make_service(ScopeAuthorizer(AsyncMock(), AsyncMock()))
        service.events = AsyncMock()
        service.events.get_event.return_value = None

        with pytest.raises(NotFound):
            await service.event_participation(super_admin, "e-missing")

    async def test_group_attendance_checks_scope_then_existence(self, super_admin):
        service, authorizer = self.make_service()
        service.memberships = AsyncMock()
        service.memberships.get_group.return_value = None

        with pytest.raises(NotFound):
            await service.group_attendance(super_admin, GROUP_A)

        authorizer.authorize_group.assert_awaited_once_with(super_admin, GROUP_A)

    async def test_participation_authorizes_on_the_event_group(self, group_admin):
        service, authorizer = self.make_service()
        service.events = AsyncMock()
        event_row = {"id": "e1", "group_id": GROUP_A, "title": "Weekly Meetup", "date": FIXED_NOW}
        service.events.get_event.return_value = event_row
        service.aggregator.memberships.member_count.return_value = 5
        service.aggregator.attendance.absent_counts_by_event.return_value = {}

        await service.event_participation(group_admin, "e1")

        authorizer.authorize_event.assert_awaited_once_with(group_admin, event_row)

    async def test_store_error_while_authorizing_becomes_store_failure(self, region_manager):
        db = AsyncMock()
        db.fetch_val.side_effect = ConnectionError("password=secret host=db.internal")
        service, _ = self.make_service(ScopeAuthorizer(db, AsyncMock()))

        with pytest.raises(StoreFailure) as exc_info:
            await service.attendance_overview(region_manager, "week", "group", GROUP_A)

        assert exc_info.value.detail == "Internal server error"

    async def test_forbidden_passes_through_store_error_mapping(self, group_admin):
        service, authorizer = self.make_service()
        authorizer.authorize_group.side_effect = Forbidden()

        with pytest.raises(Forbidden):
            await service.group_attendance(group_admin, GROUP_B)
