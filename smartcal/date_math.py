"""
Date arithmetic for calendar views.
Computes day/week/month boundaries in local time and shifts an anchor date by
view granularity. Weeks start on Monday.

Boundaries are wall-clock local midnights: on DST transition days the real
elapsed time is 23h or 25h, while same-zone datetime subtraction still reports
exactly one day. Where a zone skips midnight itself (e.g. America/Santiago in
September) the day starts at the first existing local time and the bounds
span 23h.
"""

from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any, Optional, Union

from dateutil import parser as dateutil_parser
from dateutil import tz as dateutil_tz
from dateutil.relativedelta import relativedelta

from smartcal.clock import local_timezone
from smartcal.event_models import (
    VIEW_DAY,
    VIEW_MONTH,
    VIEW_WEEK,
    ViewBounds,
    check_view,
)

Anchor = Union[datetime, date]

# Filled in for free-form strings that omit components, so parsing never
# depends on the current date.
_PARSE_DEFAULT = datetime(1970, 1, 1)


def to_local(anchor: Anchor, tz: Optional[tzinfo] = None) -> datetime:
    """
    Express an anchor as an aware datetime in the given (or system) timezone.
    Naive datetimes are taken as wall-clock time in that zone; plain dates
    become local midnight.
    """
    tz = tz or local_timezone()
    if not isinstance(anchor, datetime):
        return local_midnight(anchor, tz)
    if anchor.tzinfo is None:
        return anchor.replace(tzinfo=tz)
    return anchor.astimezone(tz)


def local_date(anchor: Anchor, tz: Optional[tzinfo] = None) -> date:
    """Calendar day of the anchor in local time."""
    if not isinstance(anchor, datetime):
        return anchor
    return to_local(anchor, tz).date()


def local_midnight(d: date, tz: tzinfo) -> datetime:
    """Midnight at the start of `d` in `tz` (moved forward if it does not exist)."""
    aware = datetime.combine(d, time(0, 0), tzinfo=tz)
    return dateutil_tz.resolve_imaginary(aware)


def start_of_week(d: date) -> date:
    """Most recent Monday on or before `d`."""
    return d - timedelta(days=d.weekday())


def day_bounds(anchor: Anchor, tz: Optional[tzinfo] = None) -> ViewBounds:
    tz = tz or local_timezone()
    d = local_date(anchor, tz)
    return ViewBounds(local_midnight(d, tz), local_midnight(d + timedelta(days=1), tz))


def week_bounds(anchor: Anchor, tz: Optional[tzinfo] = None) -> ViewBounds:
    tz = tz or local_timezone()
    monday = start_of_week(local_date(anchor, tz))
    return ViewBounds(local_midnight(monday, tz), local_midnight(monday + timedelta(days=7), tz))


def month_bounds(anchor: Anchor, tz: Optional[tzinfo] = None) -> ViewBounds:
    tz = tz or local_timezone()
    first = local_date(anchor, tz).replace(day=1)
    return ViewBounds(local_midnight(first, tz), local_midnight(first + relativedelta(months=1), tz))


_BOUNDS = {
    VIEW_DAY: day_bounds,
    VIEW_WEEK: week_bounds,
    VIEW_MONTH: month_bounds,
}


def view_bounds(view: str, anchor: Anchor, tz: Optional[tzinfo] = None) -> ViewBounds:
    """
    Visible [start, end) range for a view.

    Raises:
        UnsupportedViewError: if `view` is not day/week/month
    """
    return _BOUNDS[check_view(view)](anchor, tz)


def shift_anchor(view: str, anchor: Anchor, direction: int) -> Anchor:
    """
    Move the anchor one step backward (-1) or forward (+1).

    Day and week views shift by 1 and 7 days; month view shifts by one calendar
    month, clamping the day-of-month (Jan 31 + 1 month -> Feb 28/29). The
    wall-clock time and tzinfo of the anchor are kept.

    Raises:
        UnsupportedViewError: if `view` is not day/week/month
        ValueError: if `direction` is not -1 or +1
    """
    check_view(view)
    if isinstance(direction, bool) or direction not in (-1, 1):
        raise ValueError(f"direction must be -1 or +1, got {direction!r}")

    if view == VIEW_MONTH:
        shifted = anchor + relativedelta(months=direction)
    elif view == VIEW_WEEK:
        shifted = anchor + timedelta(days=7 * direction)
    else:
        shifted = anchor + timedelta(days=direction)

    if isinstance(shifted, datetime) and shifted.tzinfo is not None:
        shifted = dateutil_tz.resolve_imaginary(shifted)
    return shifted


def parse_event_date(value: Any, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """
    Parse an event timestamp into an aware datetime.

    Accepts datetimes, dates (local midnight), epoch milliseconds and strings
    (ISO-8601 first, then dateutil's free-form parser). Naive results are
    interpreted in `tz` (system zone by default).

    Returns:
        aware datetime, or None if the value cannot be parsed
    """
    if value is None or isinstance(value, bool):
        return None

    tz = tz or local_timezone()

    if isinstance(value, datetime):
        return _convertible(_attach_tz(value, tz))
    if isinstance(value, date):
        return _convertible(local_midnight(value, tz))

    if isinstance(value, (int, float)):
        try:
            return _convertible(datetime.fromtimestamp(value / 1000.0, tz))
        except (OverflowError, OSError, ValueError):
            return None

    if not isinstance(value, str):
        return None

    s = value.strip()
    if not s:
        return None
    try:
        parsed = dateutil_parser.isoparse(s)
    except (ValueError, OverflowError):
        try:
            parsed = dateutil_parser.parse(s, default=_PARSE_DEFAULT)
        except (ValueError, OverflowError):
            return None
    return _convertible(_attach_tz(parsed, tz))


def _attach_tz(dt: datetime, tz: tzinfo) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt


def _convertible(dt: Optional[datetime]) -> Optional[datetime]:
    """Drop values that cannot be expressed in UTC (out-of-range offsets or years)."""
    if dt is None:
        return None
    try:
        dt.astimezone(dateutil_tz.UTC)
    except (ValueError, OverflowError):
        return None
    return dt


def to_local_datetime_input_value(instant: datetime, tz: Optional[tzinfo] = None) -> str:
    """Format an instant as 'YYYY-MM-DDTHH:MM' local time (datetime-local input value)."""
    return to_local(instant, tz).strftime("%Y-%m-%dT%H:%M")
