"""
Calendar service: loads the reservations a calendar view needs and hands them
to the grid/listing functions.
"""

import calendar
from dataclasses import dataclass
from datetime import date

from facility_reservations.core.clock import Clock
from facility_reservations.core.config import get_settings
from facility_reservations.domain.models import Reservation, ReservationFilter
from facility_reservations.scheduling.calendar_grid import (
    CalendarDay,
    ListingMode,
    build_month_grid,
    list_day_events,
)
from facility_reservations.scheduling.display import describe_start
from facility_reservations.scheduling.visibility import VisibilityPolicy
from facility_reservations.stores.interfaces import ReservationStore


@dataclass(frozen=True)
class DayListingEntry:
    reservation: Reservation
    start_label: str


def month_grid(
    store: ReservationStore,
    year: int,
    month: int,
    clock: Clock,
    policy: VisibilityPolicy,
    cells: int | None = None,
) -> list[CalendarDay]:
    # Counts are keyed on the start date, so only reservations starting in the month matter
    first = date(year, month, 1)
    last = date(year, month, calendar.monthrange(year, month)[1])
    rows = [r for r in store.list_reservations(ReservationFilter(start=first, end=last)) if r.date >= first]
    return build_month_grid(
        year,
        month,
        clock.now().date(),
        policy.apply(rows),
        cells=cells or get_settings().CALENDAR_GRID_CELLS,
    )


def day_events(
    store: ReservationStore,
    day: date,
    clock: Clock,
    policy: VisibilityPolicy,
    mode: ListingMode = ListingMode.UPCOMING,
    search: str = "",
) -> list[DayListingEntry]:
    # Both modes select reservations occupying ``day``: it is either their
    # start date or (finished_on) their last day
    rows = policy.apply(store.list_reservations(ReservationFilter(start=day, end=day)))
    now = clock.now()
    return [
        DayListingEntry(reservation=r, start_label=describe_start(r.date, r.time_start, now))
        for r in list_day_events(rows, day, mode=mode, search=search)
    ]
