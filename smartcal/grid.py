"""
Grid generation for month and week views.
The month grid is always 6 rows x 7 columns, Monday-first.
"""

from datetime import date, timedelta, tzinfo
from typing import Optional, Tuple

from smartcal.clock import Clock, SystemClock, local_timezone
from smartcal.date_math import Anchor, local_date, start_of_week
from smartcal.event_models import GridCell

GRID_ROWS = 6
GRID_COLUMNS = 7
GRID_CELLS = GRID_ROWS * GRID_COLUMNS
WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def month_grid(
    anchor: Anchor,
    clock: Optional[Clock] = None,
    tz: Optional[tzinfo] = None,
) -> Tuple[GridCell, ...]:
    """
    Build the 42-cell month grid containing the anchor's month.

    The first cell is the Monday on or before the first of the month. The grid
    depends only on the anchor's year and month; the `today` flag comes from
    `clock`, read once per call.

    Args:
        anchor: any date/datetime inside the month to show
        clock: time source for the today flag (system clock by default)
        tz: local timezone (system zone by default)

    Returns:
        tuple of 42 GridCell
    """
    tz = tz or local_timezone()
    today = (clock or SystemClock()).today(tz)

    first = local_date(anchor, tz).replace(day=1)
    origin = start_of_week(first)

    cells = []
    for offset in range(GRID_CELLS):
        d = origin + timedelta(days=offset)
        cells.append(GridCell(
            date=d,
            in_month=(d.year, d.month) == (first.year, first.month),
            today=d == today,
        ))
    return tuple(cells)


def week_days(anchor: Anchor, tz: Optional[tzinfo] = None) -> Tuple[date, ...]:
    """Seven consecutive local dates of the week containing the anchor, Monday-first."""
    monday = start_of_week(local_date(anchor, tz))
    return tuple(monday + timedelta(days=i) for i in range(GRID_COLUMNS))


def grid_rows(cells: Tuple[GridCell, ...]) -> Tuple[Tuple[GridCell, ...], ...]:
    """Split a flat grid into rows of seven."""
    return tuple(cells[i:i + GRID_COLUMNS] for i in range(0, len(cells), GRID_COLUMNS))
