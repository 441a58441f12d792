from facility_reservations.domain.models import (
    ACTIVE_STATUSES,
    Asset,
    AssetType,
    Reservation,
    ReservationDraft,
    ReservationFilter,
    ReservationStats,
    ReservationStatus,
)
from facility_reservations.domain.time_range import DaySpan, TimeRange, overlaps

__all__ = [
    "ACTIVE_STATUSES",
    "Asset",
    "AssetType",
    "DaySpan",
    "Reservation",
    "ReservationDraft",
    "ReservationFilter",
    "ReservationStats",
    "ReservationStatus",
    "TimeRange",
    "overlaps",
]
