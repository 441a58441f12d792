"""
Conflict detection between reservations of the same asset.

Two reservations conflict when they hold the same asset on a shared day and
their wall-clock windows overlap on that day. REJECTED reservations no longer
hold anything and are never returned.
"""

from facility_reservations.domain.models import (
    ACTIVE_STATUSES,
    Reservation,
    ReservationDraft,
    ReservationFilter,
    ReservationStatus,
)
from facility_reservations.domain.time_range import overlaps
from facility_reservations.scheduling.visibility import VisibilityPolicy
from facility_reservations.stores.interfaces import ReservationStore

Candidate = Reservation | ReservationDraft


def conflicts_with(candidate: Candidate, other: Reservation) -> bool:
    if candidate.asset_id != other.asset_id:
        return False
    # Day sets first; the time check only matters on a shared day
    for day in candidate.span.shared_days(other.span):
        if overlaps(candidate.time_range_on(day), other.time_range_on(day)):
            return True
    return False


def find_conflicts(
    candidate: Candidate,
    store: ReservationStore,
    policy: VisibilityPolicy | None = None,
) -> list[Reservation]:
    """Return every active reservation that conflicts with ``candidate``, by ascending id.

    ``candidate`` may be a stored reservation (it never conflicts with itself)
    or a draft that has no id yet. An empty list is the normal answer.
    """
    # A rejected reservation holds nothing, so it conflicts with nothing
    if getattr(candidate, "status", None) is ReservationStatus.REJECTED:
        return []

    span = candidate.span
    rows = store.list_reservations(
        ReservationFilter(
            asset_id=candidate.asset_id,
            start=span.start,
            end=span.end,
            statuses=ACTIVE_STATUSES,
        )
    )
    if policy is not None:
        rows = policy.apply(rows)

    candidate_id = getattr(candidate, "id", None)
    conflicts = [
        row for row in rows
        if row.id != candidate_id and conflicts_with(candidate, row)
    ]
    return sorted(conflicts, key=lambda r: r.id)
