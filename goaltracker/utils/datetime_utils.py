"""
Datetime helpers. Everything is stored as naive UTC.
"""
from datetime import datetime, timezone
from typing import Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from goaltracker.exceptions import ValidationFailedError


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive UTC; naive values are assumed UTC already."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def utc_now() -> datetime:
    return datetime.utcnow()


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to a stored naive datetime so it serialises with an explicit offset."""
    if value is None:
        return value
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def get_zone(tz_name: str) -> ZoneInfo:
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValidationFailedError(f"Unknown timezone: {tz_name}")


def local_day_bounds(tz_name: str, now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """
    Return the [00:00:00.000, 23:59:59.999] window of the current day in
    ``tz_name``, expressed as naive UTC datetimes.
    """
    zone = get_zone(tz_name)
    if now is None:
        local_now = datetime.now(zone)
    elif now.tzinfo is None:
        local_now = now.replace(tzinfo=timezone.utc).astimezone(zone)
    else:
        local_now = now.astimezone(zone)

    start = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    end = local_now.replace(hour=23, minute=59, second=59, microsecond=999000)
    return to_naive_utc(start), to_naive_utc(end)
