"""
Event normalizer and day binner.
Converts loosely-typed backend records into CalendarEvent objects and groups
them by local calendar day, ordered by start time.
"""

from collections.abc import Mapping
from datetime import date, tzinfo
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from smartcal.clock import local_timezone
from smartcal.date_math import parse_event_date
from smartcal.event_models import (
    UNTITLED,
    VIEW_DAY,
    VIEW_MONTH,
    VIEW_WEEK,
    BinResult,
    CalendarEvent,
    MalformedEvent,
)
from smartcal.logging_helper import Log

# The backend contract is not fixed, so each field is looked up under several
# names. Order is priority: the first key present with a non-None value wins.
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "id": ("id", "eventId", "Id", "EventId", "event_id"),
    "title": ("title", "Title"),
    "description": ("description", "Description"),
    "location": ("location", "Location"),
    "all_day": ("allDay", "AllDay", "all_day"),
    "start": ("start", "Start"),
    "end": ("end", "End"),
}

# Rendering caps per view; None shows every event.
DEFAULT_DISPLAY_CAPS: Dict[str, Optional[int]] = {
    VIEW_MONTH: 3,
    VIEW_WEEK: 6,
    VIEW_DAY: None,
}


def lookup_field(raw: Mapping, field: str) -> Any:
    """
    Return the first non-None value among the aliases of `field`.

    Args:
        raw: raw event record
        field: canonical field name (key of FIELD_ALIASES)

    Returns:
        the value found, or None
    """
    for key in FIELD_ALIASES[field]:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def normalize(raw: Any, tz: Optional[tzinfo] = None) -> CalendarEvent:
    """
    Normalize a raw event record into a CalendarEvent.

    Unparsable timestamps do not raise: they leave `start`/`end` as None and
    the raw value in `raw_start`/`raw_end`, so group_by_day can report them.
    The input is never mutated.

    Args:
        raw: mapping with any of the aliased field names, None (all defaults),
            or an already-normalized CalendarEvent (returned unchanged)
        tz: timezone for naive timestamps (system zone by default)

    Returns:
        CalendarEvent
    """
    if isinstance(raw, CalendarEvent):
        return raw
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise TypeError(f"event record must be a mapping, got {type(raw).__name__}")

    tz = tz or local_timezone()
    title = lookup_field(raw, "title")
    description = lookup_field(raw, "description")
    location = lookup_field(raw, "location")
    raw_start = lookup_field(raw, "start")
    raw_end = lookup_field(raw, "end")

    return CalendarEvent(
        id=lookup_field(raw, "id"),
        title=UNTITLED if title is None else str(title),
        description="" if description is None else str(description),
        location="" if location is None else str(location),
        all_day=bool(lookup_field(raw, "all_day")),
        start=parse_event_date(raw_start, tz),
        end=parse_event_date(raw_end, tz),
        raw_start=raw_start,
        raw_end=raw_end,
        raw=dict(raw),
    )


def group_by_day(events: Iterable[Any], tz: Optional[tzinfo] = None) -> BinResult:
    """
    Group events by the local calendar day of their start.

    Records that are not mappings, events whose start cannot be parsed, and
    events whose end is present but cannot be parsed are left out and
    reported in `diagnostics`. Events ending at or before their start are
    still bucketed by start and reported as "invalid_range". Each day's
    events are sorted by start; ties keep input order.

    Args:
        events: raw records and/or CalendarEvent objects
        tz: local timezone used for day keys (system zone by default)

    Returns:
        BinResult with buckets keyed by datetime.date, in ascending day order
    """
    tz = tz or local_timezone()
    grouped: Dict[date, List[CalendarEvent]] = {}
    diagnostics: List[MalformedEvent] = []
    total = 0

    for index, item in enumerate(events):
        total += 1
        try:
            event = normalize(item, tz)
        except TypeError:
            diagnostics.append(MalformedEvent(index, None, "record", item, "malformed_record"))
            continue

        if event.start is None:
            diagnostics.append(MalformedEvent(index, event.id, "start", event.raw_start, "unparsable_start"))
            continue
        if event.end is None and event.raw_end is not None:
            diagnostics.append(MalformedEvent(index, event.id, "end", event.raw_end, "unparsable_end"))
            continue
        try:
            key = event.start.astimezone(tz).date()
        except (ValueError, OverflowError):
            # representable in UTC but not in the local zone
            diagnostics.append(MalformedEvent(index, event.id, "start", event.raw_start, "unparsable_start"))
            continue
        if event.end is not None and event.end <= event.start:
            diagnostics.append(MalformedEvent(index, event.id, "end", event.raw_end, "invalid_range"))

        grouped.setdefault(key, []).append(event)

    buckets = {
        day: tuple(sorted(grouped[day], key=lambda ev: ev.start))
        for day in sorted(grouped)
    }

    if diagnostics:
        Log.kv({
            "stage": "group_by_day",
            "events": total,
            "days": len(buckets),
            "dropped": sum(1 for d in diagnostics if d.reason != "invalid_range"),
            "diagnostics": len(diagnostics),
        })
    return BinResult(buckets=buckets, diagnostics=tuple(diagnostics))


def events_for_day(result: BinResult, day: date) -> Tuple[CalendarEvent, ...]:
    """Events bucketed under `day`, or an empty tuple."""
    return result.buckets.get(day, ())


def visible_events(
    bucket: Sequence[CalendarEvent],
    cap: Optional[int],
) -> Tuple[Tuple[CalendarEvent, ...], int]:
    """
    Split a day bucket into the events to display and the overflow count.

    Args:
        bucket: ordered events of one day
        cap: maximum number to show, None for no limit

    Returns:
        (shown events, number hidden)
    """
    if cap is None:
        return tuple(bucket), 0
    if cap < 0:
        raise ValueError(f"display cap must be >= 0, got {cap}")
    shown = tuple(bucket[:cap])
    return shown, len(bucket) - len(shown)
