"""
Approval state machine.

    PENDING --approve--> APPROVED
    PENDING --decline--> REJECTED

Both targets are terminal. ``transition`` is the only place a status changes;
stores call it inside their compare-and-set so the rule is enforced wherever
the write happens. Approving also declines every PENDING reservation that
conflicts with the approved one; that cascade is described by ApprovalResult.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

from facility_reservations.domain.errors import InvalidStateError, ValidationError
from facility_reservations.domain.models import Reservation, ReservationStatus

RESOLVED_STATUSES = frozenset({ReservationStatus.APPROVED, ReservationStatus.REJECTED})


def transition(
    reservation: Reservation,
    target: ReservationStatus,
    actor: str,
    now: datetime,
    reason: str | None = None,
) -> Reservation:
    """Return ``reservation`` moved to ``target`` by ``actor``.

    Raises:
        InvalidStateError: If the reservation is already APPROVED or REJECTED.
        ValidationError: If ``target`` is not a resolved status or no actor is given.
    """
    if target not in RESOLVED_STATUSES:
        raise ValidationError(f"Cannot move a reservation to {target.value}", field="status")
    if not actor:
        raise ValidationError("An actor is required to resolve a reservation", field="actor")
    if not reservation.is_pending:
        raise InvalidStateError(reservation.id, reservation.status.value)

    approved = target is ReservationStatus.APPROVED
    return replace(
        reservation,
        status=target,
        approved_by=actor if approved else None,
        declined_by=None if approved else actor,
        resolution_reason=reason,
        updated_at=now,
    )


def auto_decline_actor(approved_id: int, system_actor: str = "system") -> str:
    return f"{system_actor} (conflict with #{approved_id})"


def auto_decline_reason(approved_id: int) -> str:
    return f"Conflicts with approved reservation #{approved_id}"


class CascadeState(str, Enum):
    DECLINED = "declined"
    # Someone else resolved or edited the conflict first; nothing was written
    STALE = "stale"
    FAILED = "failed"


@dataclass(frozen=True)
class CascadeOutcome:
    reservation_id: int
    reserved_by: str | None
    state: CascadeState
    reservation: Reservation | None = None
    error: str | None = None


@dataclass(frozen=True)
class ApprovalResult:
    """The approved reservation plus every secondary effect of approving it."""

    reservation: Reservation
    conflicts: tuple[Reservation, ...] = ()
    cascade: tuple[CascadeOutcome, ...] = field(default_factory=tuple)

    @property
    def cascaded_declines(self) -> list[Reservation]:
        return [o.reservation for o in self.cascade if o.state is CascadeState.DECLINED and o.reservation]

    @property
    def skipped(self) -> list[CascadeOutcome]:
        return [o for o in self.cascade if o.state is CascadeState.STALE]

    @property
    def failed(self) -> list[CascadeOutcome]:
        return [o for o in self.cascade if o.state is CascadeState.FAILED]

    @property
    def complete(self) -> bool:
        """True when no cascade decline failed; callers retry the rest otherwise."""
        return not self.failed

    @property
    def notifications(self) -> list[tuple[int, str | None]]:
        """(reservation id, owner) pairs the caller should notify of an automatic decline."""
        return [(r.id, r.reserved_by) for r in self.cascaded_declines]
