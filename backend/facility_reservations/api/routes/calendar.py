"""
Calendar endpoints: month grid and the events of one day.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from facility_reservations.api.deps import get_clock, get_policy, get_store
from facility_reservations.api.responses import reservation_response
from facility_reservations.core.clock import Clock
from facility_reservations.scheduling.calendar_grid import ListingMode, SUPPORTED_GRID_SIZES
from facility_reservations.scheduling.visibility import VisibilityPolicy
from facility_reservations.schemas.calendar import (
    CalendarDayResponse,
    DayEventResponse,
    DayEventsResponse,
    MonthGridResponse,
)
from facility_reservations.services import calendar_service
from facility_reservations.stores.interfaces import ReservationStore

router = APIRouter(prefix="/calendar", tags=["Calendar"])


@router.get("/{year}/{month}", response_model=MonthGridResponse)
def month_grid_endpoint(
    year: int = Path(..., ge=1, le=9999),
    month: int = Path(..., ge=1, le=12),
    cells: Optional[int] = Query(None, description="35 (five rows) or 42 (six rows)"),
    policy: VisibilityPolicy = Depends(get_policy),
    store: ReservationStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    """Month grid with per-day event counts for the caller's role."""
    if cells is not None and cells not in SUPPORTED_GRID_SIZES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"cells must be one of {list(SUPPORTED_GRID_SIZES)}",
        )
    grid = calendar_service.month_grid(store, year, month, clock, policy, cells)
    return MonthGridResponse(
        year=year,
        month=month,
        cells=len(grid),
        days=[CalendarDayResponse.model_validate(day) for day in grid],
    )


@router.get("/{year}/{month}/{day}", response_model=DayEventsResponse)
def day_events_endpoint(
    year: int = Path(..., ge=1, le=9999),
    month: int = Path(..., ge=1, le=12),
    day: int = Path(..., ge=1, le=31),
    mode: ListingMode = Query(ListingMode.UPCOMING),
    search: str = Query("", max_length=255),
    policy: VisibilityPolicy = Depends(get_policy),
    store: ReservationStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    """Events of one day: starting that day (upcoming) or finished that day (past)."""
    try:
        target = date(year, month, day)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid date")

    entries = calendar_service.day_events(store, target, clock, policy, mode=mode, search=search)
    return DayEventsResponse(
        date=target.isoformat(),
        mode=mode.value,
        events=[
            DayEventResponse(reservation=reservation_response(e.reservation), start_label=e.start_label)
            for e in entries
        ],
    )
