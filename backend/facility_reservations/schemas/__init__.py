from facility_reservations.schemas.asset import AssetResponse
from facility_reservations.schemas.calendar import (
    CalendarDayResponse, DayEventResponse, DayEventsResponse, MonthGridResponse,
)
from facility_reservations.schemas.reservation import (
    ApprovalResponse, ConflictCheckResponse, FinishResponse, ReservationCreate,
    ReservationResponse, ReservationUpdate, StatsResponse, StatusChange, SubmissionResponse,
)

__all__ = [
    "AssetResponse",
    "CalendarDayResponse", "DayEventResponse", "DayEventsResponse", "MonthGridResponse",
    "ApprovalResponse", "ConflictCheckResponse", "FinishResponse", "ReservationCreate",
    "ReservationResponse", "ReservationUpdate", "StatsResponse", "StatusChange", "SubmissionResponse",
]
