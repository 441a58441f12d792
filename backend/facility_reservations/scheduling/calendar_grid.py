"""
Month grid and per-day event aggregation for the portal calendar.

The grid is laid out Sunday-first: leading cells from the previous month,
every day of the target month, then next-month padding. The portal renders
five rows (35 cells); a month that starts late and has many days needs six,
so a 35-cell grid drops its last days. That truncation is logged, and callers
that want the full month ask for 42 cells.
"""

import calendar
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable

from facility_reservations.core.logging import get_logger
from facility_reservations.domain.models import Reservation
from facility_reservations.scheduling.visibility import VisibilityPolicy

logger = get_logger(__name__)

GRID_COLUMNS = 7
SUPPORTED_GRID_SIZES = (35, 42)


@dataclass(frozen=True)
class DayEvents:
    has_event: bool
    count: int


@dataclass(frozen=True)
class CalendarDay:
    day: int
    month: int
    year: int
    current_month: bool
    is_today: bool = False
    has_event: bool = False
    event_count: int = 0

    @property
    def key(self) -> str:
        prefix = "curr" if self.current_month else "pad"
        return f"{prefix}-{self.year}-{self.month:02d}-{self.day:02d}"


class ListingMode(str, Enum):
    UPCOMING = "upcoming"
    PAST = "past"


def first_weekday(year: int, month: int) -> int:
    """Weekday of the 1st with 0 = Sunday."""
    return (calendar.weekday(year, month, 1) + 1) % 7


def _previous_month(year: int, month: int) -> tuple[int, int]:
    return (year - 1, 12) if month == 1 else (year, month - 1)


def _next_month(year: int, month: int) -> tuple[int, int]:
    return (year + 1, 1) if month == 12 else (year, month + 1)


def events_for_day(
    year: int,
    month: int,
    day: int,
    reservations: Iterable[Reservation],
    policy: VisibilityPolicy | None = None,
) -> DayEvents:
    """Count reservations starting on the given day that ``policy`` lets the caller see."""
    target = date(year, month, day)
    count = sum(
        1 for r in reservations
        if r.date == target and (policy is None or policy.allows(r))
    )
    return DayEvents(has_event=count > 0, count=count)


def build_month_grid(
    year: int,
    month: int,
    today: date,
    reservations: Iterable[Reservation],
    policy: VisibilityPolicy | None = None,
    cells: int = 35,
) -> list[CalendarDay]:
    """Build the calendar grid for ``month`` (1-12) of ``year``.

    Always returns exactly ``cells`` entries. Only current-month cells carry
    today/event data.
    """
    if cells not in SUPPORTED_GRID_SIZES:
        raise ValueError(f"Calendar grid must have one of {SUPPORTED_GRID_SIZES} cells")

    visible = list(reservations) if policy is None else policy.apply(reservations)
    leading = first_weekday(year, month)
    days_in_month = calendar.monthrange(year, month)[1]
    prev_year, prev_month = _previous_month(year, month)
    days_in_prev_month = calendar.monthrange(prev_year, prev_month)[1]

    grid: list[CalendarDay] = []
    for day in range(days_in_prev_month - leading + 1, days_in_prev_month + 1):
        grid.append(CalendarDay(day=day, month=prev_month, year=prev_year, current_month=False))

    for day in range(1, days_in_month + 1):
        events = events_for_day(year, month, day, visible)
        grid.append(
            CalendarDay(
                day=day,
                month=month,
                year=year,
                current_month=True,
                is_today=today == date(year, month, day),
                has_event=events.has_event,
                event_count=events.count,
            )
        )

    if len(grid) > cells:
        dropped = grid[cells:]
        logger.warning(
            "calendar_grid_truncated",
            year=year,
            month=month,
            cells=cells,
            dropped_days=[d.day for d in dropped],
        )
        return grid[:cells]

    next_year, next_month = _next_month(year, month)
    padding = 1
    while len(grid) < cells:
        grid.append(CalendarDay(day=padding, month=next_month, year=next_year, current_month=False))
        padding += 1
    return grid


def rows(grid: list[CalendarDay]) -> list[list[CalendarDay]]:
    return [grid[i:i + GRID_COLUMNS] for i in range(0, len(grid), GRID_COLUMNS)]


def _matches_search(reservation: Reservation, needle: str) -> bool:
    if not needle:
        return True
    if needle in reservation.title.lower():
        return True
    return any(needle in person.lower() for person in reservation.people_tag)


def list_day_events(
    reservations: Iterable[Reservation],
    day: date,
    mode: ListingMode = ListingMode.UPCOMING,
    search: str = "",
    policy: VisibilityPolicy | None = None,
) -> list[Reservation]:
    """Events shown when a calendar day is opened.

    ``upcoming`` lists reservations starting that day, ``past`` lists the ones
    that finished that day. ``search`` matches the title or a tagged person.
    """
    needle = search.strip().lower()
    if mode is ListingMode.PAST:
        selected = (r for r in reservations if r.finished_on == day)
    else:
        selected = (r for r in reservations if r.date == day)

    events = [
        r for r in selected
        if (policy is None or policy.allows(r)) and _matches_search(r, needle)
    ]
    return sorted(events, key=lambda r: (r.time_start, r.id))
