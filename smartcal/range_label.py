"""
Human-readable labels for the current view/anchor.
Names come from fixed English tables so output does not depend on the
process locale.
"""

from datetime import date, timedelta, tzinfo
from typing import Optional

from smartcal.date_math import Anchor, local_date, start_of_week
from smartcal.event_models import VIEW_MONTH, VIEW_WEEK, check_view

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def _short(d: date) -> str:
    return f"{MONTH_NAMES[d.month - 1][:3]} {d.day}"


def format_range_label(view: str, anchor: Anchor, tz: Optional[tzinfo] = None) -> str:
    """
    Label for a view, e.g. "March 2026", "Mar 9 – Mar 15, 2026" or
    "Monday, March 9, 2026".

    Raises:
        UnsupportedViewError: if `view` is not day/week/month
    """
    check_view(view)
    d = local_date(anchor, tz)

    if view == VIEW_MONTH:
        return f"{MONTH_NAMES[d.month - 1]} {d.year}"

    if view == VIEW_WEEK:
        first = start_of_week(d)
        last = first + timedelta(days=6)
        if first.year != last.year:
            return f"{_short(first)}, {first.year} – {_short(last)}, {last.year}"
        return f"{_short(first)} – {_short(last)}, {last.year}"

    # day
    return f"{WEEKDAY_NAMES[d.weekday()]}, {MONTH_NAMES[d.month - 1]} {d.day}, {d.year}"
