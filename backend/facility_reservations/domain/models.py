"""
Domain models for reservations and the assets they hold.

These are plain immutable values. Stores return them, the engine derives new
ones with ``dataclasses.replace``; persistence models live in models/.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum

from facility_reservations.domain.errors import ValidationError
from facility_reservations.domain.time_range import DaySpan, TimeRange

AUTO_DECLINE_MARKER = "(conflict with #"


class AssetType(str, Enum):
    VENUE = "venue"
    VEHICLE = "vehicle"


class ReservationStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"

    @classmethod
    def from_external(cls, value: str | None) -> "ReservationStatus":
        """Translate any status spelling used by clients into the enum.

        The portal front-end also used ``open``/``closed`` for
        approved/rejected and treated a missing status as pending.
        """
        if value is None or not value.strip():
            return cls.PENDING
        normalized = value.strip().upper()
        legacy = {"OPEN": cls.APPROVED, "CLOSED": cls.REJECTED}
        if normalized in legacy:
            return legacy[normalized]
        try:
            return cls(normalized)
        except ValueError:
            raise ValidationError(f"Unknown reservation status '{value}'", field="status") from None


ACTIVE_STATUSES = frozenset({ReservationStatus.PENDING, ReservationStatus.APPROVED})


@dataclass(frozen=True)
class Asset:
    """A reservable room or vehicle. Owned by the catalog, read-only here."""

    id: int
    name: str
    capacity: int
    type: AssetType
    facilities: tuple[str, ...] = ()


@dataclass(frozen=True)
class ReservationDraft:
    """What the reservation wizard submits before the store assigns an id."""

    asset_id: int
    title: str
    date: date
    time_start: time
    time_end: time
    range: int = 1
    description: str = ""
    category: str = ""
    info_type: str = ""
    people_tag: tuple[str, ...] = ()
    reserved_by: str | None = None

    @property
    def span(self) -> DaySpan:
        return DaySpan(self.date, self.range)

    def time_range_on(self, day: date) -> TimeRange:
        return TimeRange(day, self.time_start, self.time_end)


@dataclass(frozen=True)
class Reservation:
    id: int
    asset_id: int
    title: str
    date: date
    range: int
    time_start: time
    time_end: time
    status: ReservationStatus = ReservationStatus.PENDING
    description: str = ""
    category: str = ""
    info_type: str = ""
    people_tag: tuple[str, ...] = ()
    reserved_by: str | None = None
    approved_by: str | None = None
    declined_by: str | None = None
    resolution_reason: str | None = None
    finished_on: date | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    version: int = 1

    @property
    def span(self) -> DaySpan:
        return DaySpan(self.date, self.range)

    @property
    def last_day(self) -> date:
        return self.span.end

    @property
    def is_pending(self) -> bool:
        return self.status is ReservationStatus.PENDING

    @property
    def auto_declined(self) -> bool:
        """Declined by an approval cascade rather than by a person."""
        return (
            self.status is ReservationStatus.REJECTED
            and self.declined_by is not None
            and AUTO_DECLINE_MARKER in self.declined_by
        )

    def time_range_on(self, day: date) -> TimeRange:
        return TimeRange(day, self.time_start, self.time_end)


@dataclass(frozen=True)
class ReservationFilter:
    """Query contract shared by every ReservationStore.

    ``start``/``end`` select reservations whose occupied days intersect the
    inclusive window; either bound may be omitted.
    """

    asset_id: int | None = None
    start: date | None = None
    end: date | None = None
    statuses: frozenset[ReservationStatus] | None = None
    reserved_by: str | None = None

    def matches(self, reservation: Reservation) -> bool:
        if self.asset_id is not None and reservation.asset_id != self.asset_id:
            return False
        if self.statuses is not None and reservation.status not in self.statuses:
            return False
        if self.reserved_by is not None and reservation.reserved_by != self.reserved_by:
            return False
        if self.start is not None and reservation.last_day < self.start:
            return False
        if self.end is not None and reservation.date > self.end:
            return False
        return True


@dataclass(frozen=True)
class ReservationStats:
    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0
    finished: int = 0
    by_asset: dict[int, int] = field(default_factory=dict)
