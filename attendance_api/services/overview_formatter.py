"""
Presentation Formatter
Shapes aggregated buckets into the attendance overview envelope
"""

from dataclasses import dataclass
from typing import List, Optional
from attendance_api.services.period_buckets import Bucket, attendance_rate


@dataclass
class OverviewResult:
    scope: str
    scope_id: Optional[str]
    period: str
    buckets: List[Bucket]


def format_totals(event_count: int, total_possible: int, present_count: int) -> dict:
    return {
        "eventCount": event_count,
        "totalPossible": total_possible,
        "presentCount": present_count,
        "attendanceRate": attendance_rate(present_count, total_possible),
    }


def format_bucket(bucket: Bucket) -> dict:
    return {
        "label": bucket.label,
        "startDate": bucket.start_date.isoformat(),
        "endDate": bucket.end_date.isoformat(),
        **format_totals(bucket.event_count, bucket.total_possible, bucket.present_count),
    }


def format_overview(result: OverviewResult) -> dict:
    """
    Serialize an overview result

    Dates are ISO-8601 strings and rates are percentages rounded to two
    decimals. The summary is the field-wise sum of the buckets.
    """
    summary = format_totals(
        sum(bucket.event_count for bucket in result.buckets),
        sum(bucket.total_possible for bucket in result.buckets),
        sum(bucket.present_count for bucket in result.buckets),
    )

    return {
        "scope": result.scope,
        "scopeId": str(result.scope_id) if result.scope_id else None,
        "period": result.period,
        "buckets": [format_bucket(bucket) for bucket in result.buckets],
        "summary": summary,
    }
