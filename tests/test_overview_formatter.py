from datetime import datetime, timezone

from attendance_api.schemas.analytics import AttendanceOverviewResponse
from attendance_api.services.overview_formatter import OverviewResult, format_overview
from attendance_api.services.period_buckets import build_buckets

NOW = datetime(2024, 3, 6, 12, 0, tzinfo=timezone.utc)


def filled_month():
    buckets = build_buckets("month", now=NOW)
    buckets[1].event_count, buckets[1].total_possible, buckets[1].present_count = 2, 10, 8
    buckets[3].event_count, buckets[3].total_possible, buckets[3].present_count = 1, 3, 1
    return buckets


class TestFormatOverview:

    def test_summary_is_the_sum_of_buckets(self):
        payload = format_overview(OverviewResult("region", "r-1", "month", filled_month()))

        assert payload["summary"] == {
            "eventCount": 3,
            "totalPossible": 13,
            "presentCount": 9,
            "attendanceRate": 69.23,
        }

    def test_bucket_fields_are_camel_case_with_iso_dates(self):
        payload = format_overview(OverviewResult("group", "g-1", "month", filled_month()))
        bucket = payload["buckets"][1]

        assert bucket["label"] == "Week 2"
        assert bucket["startDate"] == "2024-02-14T12:00:00+00:00"
        assert bucket["endDate"] == "2024-02-21T12:00:00+00:00"
        assert bucket["attendanceRate"] == 80.0

    def test_empty_buckets_have_zero_rate(self):
        payload = format_overview(OverviewResult("overall", None, "week", build_buckets("week", now=NOW)))

        assert payload["scopeId"] is None
        assert all(bucket["attendanceRate"] == 0 for bucket in payload["buckets"])
        assert payload["summary"]["attendanceRate"] == 0

    def test_payload_validates_against_response_model(self):
        payload = format_overview(OverviewResult("group", "g-1", "month", filled_month()))
        response = AttendanceOverviewResponse.model_validate(payload)

        dumped = response.model_dump(by_alias=True)
        assert dumped["scopeId"] == "g-1"
        assert dumped["buckets"][3]["presentCount"] == 1
