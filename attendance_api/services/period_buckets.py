"""
Period Bucketizer
Splits a reporting period into fixed, contiguous time buckets ending at "now"
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional
from dateutil.relativedelta import relativedelta
from attendance_api.errors import InvalidPeriod


WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

SUPPORTED_PERIODS = ("week", "month", "quarter", "year")

PERIOD_ALIASES = {
    "week": "week",
    "weekly": "week",
    "month": "month",
    "monthly": "month",
    "quarter": "quarter",
    "quarterly": "quarter",
    "year": "year",
    "yearly": "year",
}


@dataclass
class Bucket:
    """One time slice of a period with its running attendance totals"""
    start_date: datetime
    end_date: datetime
    label: str = ""
    event_count: int = 0
    total_possible: int = 0
    present_count: int = 0

    @property
    def attendance_rate(self) -> float:
        return attendance_rate(self.present_count, self.total_possible)


@dataclass(frozen=True)
class PeriodConfig:
    bucket_count: int
    step: relativedelta
    label: Callable[[Bucket, int], str]


PERIOD_CONFIGS = {
    "week": PeriodConfig(7, relativedelta(days=1), lambda bucket, _: WEEKDAY_LABELS[bucket.start_date.weekday()]),
    "month": PeriodConfig(4, relativedelta(days=7), lambda _, index: f"Week {index + 1}"),
    "quarter": PeriodConfig(4, relativedelta(months=1), lambda bucket, _: MONTH_LABELS[bucket.start_date.month - 1]),
    "year": PeriodConfig(12, relativedelta(months=1), lambda bucket, _: MONTH_LABELS[bucket.start_date.month - 1]),
}


def attendance_rate(present: int, possible: int) -> float:
    """Percentage of possible attendance that was present, 0 when nothing was possible"""
    if possible <= 0:
        return 0.0
    return round(present / possible * 100, 2)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes from the store as UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def normalize_period(period) -> str:
    """
    Resolve a period keyword or alias to its canonical name

    Raises:
        InvalidPeriod: If the keyword is unknown
    """
    key = period.strip().lower() if isinstance(period, str) else ""
    canonical = PERIOD_ALIASES.get(key)
    if canonical is None:
        raise InvalidPeriod(f"Invalid period. Supported options: {', '.join(SUPPORTED_PERIODS)}")
    return canonical


def build_buckets(period: str, now: Optional[datetime] = None) -> List[Bucket]:
    """
    Build the bucket sequence for a period, oldest first

    Buckets are carved backwards from `now` one step at a time, so they
    are contiguous and together span N chained steps back from now. With
    calendar-month steps that start can differ from `now - N months`
    because each step clamps to the end of a shorter month.

    Args:
        period: Period keyword or alias (week, month, quarter, year)
        now: Reference time (defaults to current UTC time)

    Returns:
        Chronologically ordered buckets with labels and zeroed totals
    """
    config = PERIOD_CONFIGS[normalize_period(period)]
    bucket_end = as_utc(now) if now is not None else utcnow()

    buckets = []
    for _ in range(config.bucket_count):
        bucket_start = bucket_end - config.step
        buckets.append(Bucket(start_date=bucket_start, end_date=bucket_end))
        bucket_end = bucket_start
    buckets.reverse()

    for index, bucket in enumerate(buckets):
        bucket.label = config.label(bucket, index)

    return buckets


def find_bucket(buckets: List[Bucket], when: datetime) -> Optional[Bucket]:
    """
    Locate the bucket containing `when`

    Every bucket is half-open [start, end) except the last one, which is
    closed so that "now" itself is counted.
    """
    when = as_utc(when)
    last_index = len(buckets) - 1

    for index, bucket in enumerate(buckets):
        if when < bucket.start_date:
            continue
        if when < bucket.end_date or (index == last_index and when == bucket.end_date):
            return bucket

    return None


# Single-window ranges used by the plain attendance listing

@dataclass(frozen=True)
class PeriodRange:
    start_date: datetime
    end_date: datetime
    canonical_period: str


RANGE_PERIODS = {
    "week": (relativedelta(days=7), "weekly"),
    "weekly": (relativedelta(days=7), "weekly"),
    "month": (relativedelta(months=1), "monthly"),
    "monthly": (relativedelta(months=1), "monthly"),
    "quarter": (relativedelta(months=3), "quarterly"),
    "quarterly": (relativedelta(months=3), "quarterly"),
    "6months": (relativedelta(months=6), "semiannual"),
    "sixmonths": (relativedelta(months=6), "semiannual"),
    "halfyear": (relativedelta(months=6), "semiannual"),
    "half-year": (relativedelta(months=6), "semiannual"),
    "semiannual": (relativedelta(months=6), "semiannual"),
    "biannual": (relativedelta(months=6), "semiannual"),
    "year": (relativedelta(years=1), "yearly"),
    "yearly": (relativedelta(years=1), "yearly"),
}

SUPPORTED_RANGE_PERIODS = ("weekly", "monthly", "quarterly", "semiannual", "yearly")


def get_period_range(period, now: Optional[datetime] = None) -> PeriodRange:
    """Single [now - period, now] window for a period keyword"""
    key = period.strip().lower() if isinstance(period, str) else ""
    if key not in RANGE_PERIODS:
        raise InvalidPeriod(f"Invalid period. Supported options: {', '.join(SUPPORTED_RANGE_PERIODS)}")

    delta, canonical = RANGE_PERIODS[key]
    end_date = as_utc(now) if now is not None else utcnow()
    return PeriodRange(start_date=end_date - delta, end_date=end_date, canonical_period=canonical)
