"""
Time source and timezone resolution.
Engine code never reads the wall clock directly; callers pass a Clock so
"today" can be pinned in tests.
"""

from datetime import date, datetime, tzinfo
from typing import Optional

import tzlocal
from dateutil import tz as dateutil_tz

from smartcal.logging_helper import Log


def local_timezone() -> tzinfo:
    """Return the system timezone (IANA zone via tzlocal, dateutil fallback)."""
    try:
        return tzlocal.get_localzone()
    except Exception as tz_err:
        Log.warn(f"Failed to determine system timezone via tzlocal: {tz_err}")
        return dateutil_tz.tzlocal()


def resolve_timezone(name: Optional[str]) -> tzinfo:
    """
    Resolve a timezone name into a tzinfo.

    Args:
        name: "local"/None/"" for the system zone, "UTC", an IANA name such as
            "Europe/Berlin", or a POSIX/offset string understood by dateutil.

    Returns:
        tzinfo instance

    Raises:
        ValueError: if the name cannot be resolved
    """
    s = (name or "").strip()
    if not s or s.lower() in {"local", "system"}:
        return local_timezone()
    if s.upper() in {"UTC", "Z", "GMT"}:
        return dateutil_tz.UTC
    resolved = dateutil_tz.gettz(s)
    if resolved is None:
        raise ValueError(f"Invalid timezone identifier: {name!r}")
    return resolved


class Clock:
    """Base time source. Subclasses implement now()."""

    def now(self, tz: Optional[tzinfo] = None) -> datetime:
        raise NotImplementedError

    def today(self, tz: Optional[tzinfo] = None) -> date:
        return self.now(tz).date()


class SystemClock(Clock):
    """Reads the real wall clock."""

    def now(self, tz: Optional[tzinfo] = None) -> datetime:
        return datetime.now(tz or local_timezone())


class FixedClock(Clock):
    """Always returns the same instant. Naive instants are taken as UTC."""

    def __init__(self, instant: datetime):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=dateutil_tz.UTC)
        self.instant = instant

    def now(self, tz: Optional[tzinfo] = None) -> datetime:
        return self.instant.astimezone(tz or local_timezone())
