"""
Pydantic schemas for calendar views.
"""

from pydantic import BaseModel

from facility_reservations.schemas.reservation import ReservationResponse


class CalendarDayResponse(BaseModel):
    key: str
    day: int
    month: int
    year: int
    current_month: bool
    is_today: bool
    has_event: bool
    event_count: int

    model_config = {"from_attributes": True}


class MonthGridResponse(BaseModel):
    year: int
    month: int
    cells: int
    days: list[CalendarDayResponse]


class DayEventResponse(BaseModel):
    reservation: ReservationResponse
    start_label: str


class DayEventsResponse(BaseModel):
    date: str
    mode: str
    events: list[DayEventResponse]
