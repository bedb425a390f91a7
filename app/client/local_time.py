"""Caller-side date encoding and time zone discovery."""

import os
from datetime import date, datetime
from pathlib import Path

from app.core.timezones import find_time_zone

LOCALTIME_PATH = Path("/etc/localtime")


def format_date_for_query(value: date | datetime) -> str:
    """
    Encode a calendar date as ``YYYY-MM-DD`` for the appointments filter.

    The date is taken as the caller sees it; a datetime contributes its own
    wall-clock date and is never shifted through UTC first.
    """
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def discover_time_zone(localtime_path: Path = LOCALTIME_PATH) -> str:
    """
    Find the caller's IANA time zone name.

    Checks ``TZ`` first, then where ``/etc/localtime`` points, and falls
    back to ``UTC``.
    """
    tz_env = os.environ.get("TZ", "").lstrip(":")
    if tz_env and find_time_zone(tz_env):
        return tz_env

    try:
        target = str(localtime_path.resolve())
    except OSError:
        target = ""
    if "zoneinfo/" in target:
        name = target.split("zoneinfo/", 1)[1]
        if find_time_zone(name):
            return name

    return "UTC"
