"""
Event data models for the calendar engine.
Defines CalendarEvent (normalized event), ViewBounds, GridCell and the
diagnostics returned by day binning.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Optional, Tuple

VIEW_DAY = "day"
VIEW_WEEK = "week"
VIEW_MONTH = "month"
VIEWS = (VIEW_DAY, VIEW_WEEK, VIEW_MONTH)

UNTITLED = "(Untitled)"


class UnsupportedViewError(ValueError):
    """Raised when a view tag other than day/week/month is passed in."""

    def __init__(self, view: Any):
        self.view = view
        super().__init__(
            f"Unsupported calendar view {view!r}; expected one of: {', '.join(VIEWS)}"
        )


def check_view(view: Any) -> str:
    """Return the view tag unchanged, or raise UnsupportedViewError."""
    if view not in VIEWS:
        raise UnsupportedViewError(view)
    return view


@dataclass(frozen=True)
class CalendarEvent:
    """
    Canonical calendar event produced by normalization.
    `start`/`end` are timezone-aware datetimes, or None when the raw value
    could not be parsed. `raw` keeps a copy of the input record and does not
    take part in equality.
    """
    id: Any = None
    title: str = UNTITLED
    description: str = ""
    location: str = ""
    all_day: bool = False
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    raw_start: Any = None
    raw_end: Any = None
    raw: Optional[Dict[str, Any]] = field(default=None, compare=False, hash=False, repr=False)


@dataclass(frozen=True)
class ViewBounds:
    """Half-open visible range [start, end)."""
    start: datetime
    end: datetime

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end


@dataclass(frozen=True)
class GridCell:
    date: date
    in_month: bool
    today: bool


@dataclass(frozen=True)
class MalformedEvent:
    """Non-fatal diagnostic for an event that could not be binned cleanly."""
    index: int
    event_id: Any
    field: str
    value: Any
    reason: str  # "malformed_record" | "unparsable_start" | "unparsable_end" | "invalid_range"


@dataclass(frozen=True)
class BinResult:
    buckets: Dict[date, Tuple[CalendarEvent, ...]]
    diagnostics: Tuple[MalformedEvent, ...] = ()

    def days(self) -> Tuple[date, ...]:
        return tuple(sorted(self.buckets))
