"""
Command line entry point for SmartCal.
Prints the range label, visible bounds and a text rendering of the month grid,
week list or day agenda for a JSON file of events.
"""

import argparse
import json
import sys
from datetime import date, datetime, tzinfo
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from smartcal.clock import Clock, SystemClock, resolve_timezone
from smartcal.date_math import parse_event_date, shift_anchor, view_bounds
from smartcal.event_models import VIEW_DAY, VIEW_MONTH, VIEW_WEEK, VIEWS, BinResult, CalendarEvent
from smartcal.event_normalizer import events_for_day, group_by_day, visible_events
from smartcal.api_payload import extract_event_list
from smartcal.grid import WEEKDAY_LABELS, grid_rows, month_grid, week_days
from smartcal.logging_helper import Log
from smartcal.range_label import MONTH_NAMES, format_range_label
from smartcal.settings_manager import get_display_cap, get_timezone_name


def _day_heading(d: date) -> str:
    return f"{WEEKDAY_LABELS[d.weekday()]}, {MONTH_NAMES[d.month - 1][:3]} {d.day}"


def _event_line(event: CalendarEvent, tz: tzinfo) -> str:
    when = "all day" if event.all_day else event.start.astimezone(tz).strftime("%H:%M")
    line = f"{when}  {event.title}"
    if event.location:
        line += f" @ {event.location}"
    return line


def _event_lines(events: Sequence[CalendarEvent], cap: Optional[int], tz: tzinfo, indent: str) -> List[str]:
    shown, overflow = visible_events(events, cap)
    lines = [f"{indent}{_event_line(ev, tz)}" for ev in shown]
    if overflow > 0:
        lines.append(f"{indent}+{overflow} more")
    return lines


def render_month(anchor, result: BinResult, cap: Optional[int], tz: tzinfo, clock: Clock) -> List[str]:
    cells = month_grid(anchor, clock=clock, tz=tz)
    lines = [" ".join(f"{label:>4}" for label in WEEKDAY_LABELS)]
    for row in grid_rows(cells):
        parts = []
        for cell in row:
            mark = "*" if cell.today else ("" if cell.in_month else ".")
            parts.append(f"{mark}{cell.date.day}".rjust(4))
        lines.append(" ".join(parts))
    for cell in cells:
        events = events_for_day(result, cell.date)
        if cell.in_month and events:
            lines.append("")
            lines.append(_day_heading(cell.date))
            lines.extend(_event_lines(events, cap, tz, "  "))
    return lines


def render_week(anchor, result: BinResult, cap: Optional[int], tz: tzinfo, clock: Clock) -> List[str]:
    today = clock.today(tz)
    lines = []
    for d in week_days(anchor, tz):
        events = events_for_day(result, d)
        summary = f"{len(events)} event(s)" if events else "No events"
        marker = " (today)" if d == today else ""
        lines.append(f"{_day_heading(d)}{marker} - {summary}")
        lines.extend(_event_lines(events, cap, tz, "  "))
    return lines


def render_day(anchor, result: BinResult, cap: Optional[int], tz: tzinfo, clock: Clock) -> List[str]:
    bounds = view_bounds(VIEW_DAY, anchor, tz)
    events = events_for_day(result, bounds.start.date())
    if not events:
        return ["No events scheduled"]
    lines = [f"{len(events)} event(s)"]
    shown, overflow = visible_events(events, cap)
    for ev in shown:
        lines.append(f"  {_event_line(ev, tz)}")
        if ev.description:
            lines.append(f"      {ev.description}")
    if overflow > 0:
        lines.append(f"  +{overflow} more")
    return lines


_RENDERERS = {
    VIEW_MONTH: render_month,
    VIEW_WEEK: render_week,
    VIEW_DAY: render_day,
}


def render_view(
    view: str,
    anchor: datetime,
    events: Sequence,
    tz: tzinfo,
    clock: Clock,
    caps: Optional[Dict[str, Optional[int]]] = None,
) -> List[str]:
    """
    Render one view as text lines.

    Args:
        view: "day", "week" or "month"
        anchor: anchor datetime
        events: raw event records
        tz: local timezone
        clock: time source for the today markers
        caps: per-view display caps (settings are used for missing views)

    Returns:
        list of output lines
    """
    bounds = view_bounds(view, anchor, tz)
    result = group_by_day(events, tz)
    if result.diagnostics:
        Log.warn(f"{len(result.diagnostics)} event(s) reported problems while binning")
        for diag in result.diagnostics:
            Log.kv({"index": diag.index, "id": diag.event_id, "field": diag.field, "reason": diag.reason})

    cap = caps[view] if caps and view in caps else get_display_cap(view)
    lines = [
        format_range_label(view, anchor, tz),
        f"{bounds.start.isoformat()} .. {bounds.end.isoformat()}",
        "",
    ]
    lines.extend(_RENDERERS[view](anchor, result, cap, tz, clock))
    return lines


def load_events(path: Path) -> list:
    """Read a JSON events file (a list, or an object with "items"/"events")."""
    data = json.loads(path.read_text(encoding="utf-8"))
    return extract_event_list(data)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="smartcal", description="Preview calendar views in the terminal.")
    ap.add_argument("--view", choices=VIEWS, default=VIEW_MONTH)
    ap.add_argument("--anchor", default=None, help="Anchor date/time (ISO-8601). Defaults to now.")
    ap.add_argument("--events", default=None, help="Path to a JSON file of events.")
    ap.add_argument("--tz", default=None, help="Timezone: local, UTC or an IANA name. Defaults to settings.")
    ap.add_argument("--shift", type=int, default=0, help="Move the anchor N views forward (negative: back).")
    return ap


def main(argv: Optional[Sequence[str]] = None, clock: Optional[Clock] = None) -> int:
    """Main entry point for the CLI."""
    args = build_parser().parse_args(argv)
    clock = clock or SystemClock()

    Log.section("SmartCal")
    log_path = Log.get_log_path()
    if log_path:
        Log.info(f"Log file: {log_path}")
    try:
        tz = resolve_timezone(args.tz or get_timezone_name())
    except ValueError as e:
        Log.error(str(e))
        return 2

    if args.anchor:
        anchor = parse_event_date(args.anchor, tz)
        if anchor is None:
            Log.error(f"Invalid anchor date: {args.anchor!r}")
            return 2
    else:
        anchor = clock.now(tz)

    step = 1 if args.shift > 0 else -1
    for _ in range(abs(args.shift)):
        anchor = shift_anchor(args.view, anchor, step)

    events: list = []
    if args.events:
        try:
            events = load_events(Path(args.events))
        except (OSError, ValueError) as e:
            Log.error(f"Failed to load events from {args.events}: {e}")
            return 2
    Log.info(f"Loaded {len(events)} event(s)")

    for line in render_view(args.view, anchor, events, tz, clock):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
