"""
Helpers for the backend event contract.
The events API may answer with a bare list or an envelope, and accepts a
camelCase payload with ISO-8601 UTC timestamps.
"""

from collections.abc import Mapping
from datetime import datetime, timedelta
from typing import Any, Dict, List

from dateutil import tz as dateutil_tz

from smartcal.event_models import CalendarEvent
from smartcal.event_normalizer import lookup_field
from smartcal.logging_helper import Log

DEFAULT_DURATION_MINUTES = 60


def guess_id(raw: Any) -> Any:
    """Return the event id under any known alias, or None."""
    if isinstance(raw, CalendarEvent):
        return raw.id
    if not isinstance(raw, Mapping):
        return None
    return lookup_field(raw, "id")


def extract_event_list(data: Any) -> List[Any]:
    """
    Pull the event list out of a list-events response body.

    Args:
        data: decoded JSON; a list, or a mapping with "items" or "events"

    Returns:
        list of raw event records (empty if the shape is not recognized)
    """
    if isinstance(data, list):
        return data
    if isinstance(data, Mapping):
        for key in ("items", "events"):
            value = data.get(key)
            if isinstance(value, list):
                return value
    if data is not None:
        Log.warn(f"Unrecognized events response shape: {type(data).__name__}")
    return []


def format_api_datetime(dt: datetime) -> str:
    """
    Format datetime as ISO-8601 UTC with a 'Z' suffix and millisecond precision.

    Args:
        dt: aware datetime (naive values are taken as system local time)

    Returns:
        e.g. "2026-03-09T08:00:00.000Z"
    """
    if dt.tzinfo is None:
        system_tz = dateutil_tz.tzlocal()
        dt = dt.replace(tzinfo=system_tz)
        Log.warn(f"Datetime missing timezone info, assuming system timezone: {system_tz}")
    dt_utc = dt.astimezone(dateutil_tz.UTC)
    return dt_utc.strftime('%Y-%m-%dT%H:%M:%S.') + f"{dt_utc.microsecond // 1000:03d}Z"


def default_end(start: datetime) -> datetime:
    """End time used by the event form when none is given."""
    return start + timedelta(minutes=DEFAULT_DURATION_MINUTES)


def to_api_payload(event: CalendarEvent) -> Dict[str, Any]:
    """
    Build the request body for create/update calls.

    Raises:
        ValueError: if the event has no start
    """
    if event.start is None:
        raise ValueError("event has no start time")
    end = event.end if event.end is not None else default_end(event.start)

    payload: Dict[str, Any] = {}
    if event.id is not None:
        payload["id"] = event.id
    payload.update({
        "title": event.title,
        "description": event.description,
        "location": event.location,
        "allDay": bool(event.all_day),
        "start": format_api_datetime(event.start),
        "end": format_api_datetime(end),
    })
    return payload
