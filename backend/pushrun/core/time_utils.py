from datetime import datetime, timedelta, timezone

from pushrun.core.constants import WEEK_DAYS


def _resolve_tz(tz_name: str | None):
    """Return a tzinfo for `tz_name`, or None for the system local timezone."""
    if not tz_name or tz_name == "local":
        return None
    try:
        from zoneinfo import ZoneInfo
        return ZoneInfo(tz_name)
    except Exception:
        return None


def today_ymd(now: datetime | None = None, tz_name: str | None = None) -> str:
    """
    Current calendar date as 'YYYY-MM-DD' in the server's local time
    (or in `tz_name` when given).

    Note this is local time while stored timestamps are UTC midnight, so near
    midnight in a non-UTC deployment an entry can land on a different UTC day.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(_resolve_tz(tz_name)).date().isoformat()


def ymd_to_timestamp(ymd: str) -> datetime:
    """
    Convert 'YYYY-MM-DD' -> aware datetime at 00:00:00 UTC of that day.
    Example: '2026-01-05' -> 2026-01-05 00:00:00+00:00
    """
    d = datetime.strptime(ymd, "%Y-%m-%d").date()
    return datetime(d.year, d.month, d.day, tzinfo=timezone.utc)


def timestamp_to_iso(ts: datetime) -> str:
    """Format a UTC datetime as '2026-01-05T00:00:00.000Z'."""
    ts = parse_timestamp(ts)
    return ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"


def parse_timestamp(value) -> datetime:
    """Parse a datetime or ISO string into an aware UTC datetime.

    - Naive datetimes are assumed to be UTC (SQLite hands them back naive).
    - Strings may end in 'Z' or carry an explicit offset.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    else:
        raise ValueError(f"Not a timestamp: {value!r}")
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def start_of_week(now: datetime) -> datetime:
    """Midnight UTC of the Monday on/before `now`'s UTC date."""
    now = parse_timestamp(now)
    day = datetime(now.year, now.month, now.day, tzinfo=timezone.utc)
    # Monday = 0, Sunday = 6
    return day - timedelta(days=day.weekday())


def end_of_week(now: datetime) -> datetime:
    """Exclusive upper bound of the week window containing `now`."""
    return start_of_week(now) + timedelta(days=WEEK_DAYS)


def week_window(now: datetime) -> tuple[datetime, datetime]:
    return start_of_week(now), end_of_week(now)
