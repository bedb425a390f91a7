"""Time zone conversions for appointment storage and day-range queries."""

from datetime import UTC, date, datetime, time
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.core.exceptions import BadRequestException

# Last representable instant of a local day, millisecond precision
END_OF_DAY = time(23, 59, 59, 999000)


def find_time_zone(name: str) -> ZoneInfo | None:
    """IANA zone called ``name``, or None when there is no such zone."""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        # OSError covers names that hit a tzdata directory, e.g. "Asia"
        return None


def resolve_time_zone(name: str) -> ZoneInfo:
    """
    Look up an IANA time zone.

    Raises:
        BadRequestException: If the name is unknown
    """
    tz = find_time_zone(name)
    if tz is None:
        raise BadRequestException(f"Invalid time zone: {name}")
    return tz


def local_to_utc(value: datetime, time_zone: str) -> datetime:
    """
    Interpret a wall-clock time in ``time_zone`` and return the UTC instant.

    Values that already carry an offset are only converted.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=resolve_time_zone(time_zone))
    return value.astimezone(UTC)


def day_bounds_utc(local_date: date, time_zone: str) -> tuple[datetime, datetime]:
    """
    UTC interval covering a calendar day in ``time_zone``.

    Both bounds are inclusive: ``[00:00:00.000, 23:59:59.999]`` local time.
    The offset is resolved separately for each bound so days that cross a
    daylight-saving transition come out 23 or 25 hours long.
    """
    tz = resolve_time_zone(time_zone)
    start = datetime.combine(local_date, time.min, tzinfo=tz)
    end = datetime.combine(local_date, END_OF_DAY, tzinfo=tz)
    return start.astimezone(UTC), end.astimezone(UTC)


def now_in_time_zone(time_zone: str) -> datetime:
    """Current instant expressed in ``time_zone``."""
    return datetime.now(resolve_time_zone(time_zone))


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive values read back from drivers that drop the offset."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)

