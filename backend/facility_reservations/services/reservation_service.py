"""
Reservation service: submission, editing and the approval workflow.

APPROVAL AND CASCADING DECLINES
===============================

Approving a reservation frees nobody else's slot; it takes one. Every PENDING
reservation that conflicts with the approved one can no longer be honoured,
so it is declined automatically in the same operation:

  1. Re-read the reservation from the store (the caller's copy may be stale)
  2. Find its conflicts against every non-rejected reservation of the asset
  3. Approve it with a compare-and-set on the fresh version
  4. Decline each PENDING conflict as "system (conflict with #<id>)"

APPROVED conflicts are left alone: an approval never silently undoes an
earlier one. Each cascade decline is its own write, and each produces a
CascadeOutcome, so a failure half-way through tells the caller exactly which
reservations were declined and which still need attention.
"""

from dataclasses import dataclass
from typing import Any

from facility_reservations.core.clock import Clock
from facility_reservations.core.config import get_settings
from facility_reservations.core.logging import get_logger
from facility_reservations.core.metrics import (
    record_cascade,
    record_conflicts,
    record_submission,
    record_transition,
)
from facility_reservations.domain.errors import (
    InvalidStateError,
    StaleStateError,
    StoreUnavailable,
    ValidationError,
)
from facility_reservations.domain.models import (
    Reservation,
    ReservationDraft,
    ReservationFilter,
    ReservationStats,
    ReservationStatus,
)
from facility_reservations.scheduling.approval import (
    ApprovalResult,
    CascadeOutcome,
    CascadeState,
    auto_decline_actor,
    auto_decline_reason,
)
from facility_reservations.scheduling.conflicts import find_conflicts
from facility_reservations.scheduling.visibility import VisibilityPolicy
from facility_reservations.stores.interfaces import AssetCatalog, ReservationStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class SubmissionResult:
    """A stored PENDING reservation and the reservations it currently conflicts with.

    Conflicts are a disclaimer for the requester, not a refusal.
    """

    reservation: Reservation
    conflicts: tuple[Reservation, ...] = ()


def validate_draft(draft: ReservationDraft, catalog: AssetCatalog) -> None:
    """Reject malformed candidates before they reach the store or the detector."""
    if not draft.title or not draft.title.strip():
        raise ValidationError("Reservation title is required", field="title")
    if draft.range < 1:
        raise ValidationError("Reservation range must be at least one day", field="range")
    if draft.time_end <= draft.time_start:
        raise ValidationError("Reservation must end after it starts", field="time_end")
    if catalog.get_asset(draft.asset_id) is None:
        raise ValidationError(f"Asset #{draft.asset_id} does not exist", field="asset_id")


def submit_reservation(
    store: ReservationStore,
    catalog: AssetCatalog,
    draft: ReservationDraft,
    clock: Clock,
) -> SubmissionResult:
    """Store a new reservation as PENDING and report what it conflicts with."""
    validate_draft(draft, catalog)
    reservation = store.create_reservation(draft, clock.now())
    conflicts = find_conflicts(reservation, store)
    record_submission(len(conflicts))

    logger.info(
        "reservation_submitted",
        reservation_id=reservation.id,
        asset_id=reservation.asset_id,
        date=reservation.date.isoformat(),
        range=reservation.range,
        conflicts=[c.id for c in conflicts],
    )
    return SubmissionResult(reservation=reservation, conflicts=tuple(conflicts))


def check_conflicts(
    store: ReservationStore,
    catalog: AssetCatalog,
    draft: ReservationDraft,
) -> list[Reservation]:
    """Conflicts a draft would have if it were submitted now."""
    validate_draft(draft, catalog)
    conflicts = find_conflicts(draft, store)
    record_conflicts("preview", len(conflicts))
    return conflicts


def conflicts_for(store: ReservationStore, reservation_id: int) -> list[Reservation]:
    conflicts = find_conflicts(store.get_reservation(reservation_id), store)
    record_conflicts("preview", len(conflicts))
    return conflicts


def get_reservation(store: ReservationStore, reservation_id: int) -> Reservation:
    return store.get_reservation(reservation_id)


def list_reservations(
    store: ReservationStore,
    query: ReservationFilter | None = None,
    policy: VisibilityPolicy | None = None,
) -> list[Reservation]:
    rows = store.list_reservations(query)
    return rows if policy is None else policy.apply(rows)


def edit_reservation(
    store: ReservationStore,
    reservation_id: int,
    changes: dict[str, Any],
    clock: Clock,
    expected_version: int | None = None,
) -> Reservation:
    """Edit descriptive fields of a PENDING reservation. Status never changes here."""
    nulls = sorted(name for name, value in changes.items() if value is None)
    if nulls:
        raise ValidationError(f"Fields cannot be null: {', '.join(nulls)}", field=nulls[0])
    if "title" in changes and not (changes["title"] or "").strip():
        raise ValidationError("Reservation title is required", field="title")
    reservation = store.update_details(reservation_id, changes, clock.now(), expected_version)
    logger.info("reservation_edited", reservation_id=reservation_id, fields=sorted(changes))
    return reservation


def _fresh_pending(
    store: ReservationStore,
    reservation_id: int,
    expected_version: int | None,
    transition_name: str,
) -> Reservation:
    current = store.get_reservation(reservation_id)
    if expected_version is not None and current.version != expected_version:
        record_transition(transition_name, "stale")
        raise StaleStateError(reservation_id, expected_version, current.version)
    if not current.is_pending:
        record_transition(transition_name, "invalid_state")
        raise InvalidStateError(reservation_id, current.status.value)
    return current


def _cascade_decline(
    store: ReservationStore,
    approved: Reservation,
    conflict: Reservation,
    clock: Clock,
) -> CascadeOutcome:
    settings = get_settings()
    try:
        declined = store.update_status(
            conflict.id,
            ReservationStatus.REJECTED,
            auto_decline_actor(approved.id, settings.SYSTEM_ACTOR),
            clock.now(),
            reason=auto_decline_reason(approved.id),
            expected_version=conflict.version,
        )
    except (StaleStateError, InvalidStateError) as exc:
        logger.info(
            "cascade_decline_skipped",
            approved_id=approved.id,
            reservation_id=conflict.id,
            reason=exc.code.value,
        )
        return CascadeOutcome(conflict.id, conflict.reserved_by, CascadeState.STALE, error=exc.message)
    except StoreUnavailable as exc:
        logger.error(
            "cascade_decline_failed",
            approved_id=approved.id,
            reservation_id=conflict.id,
            error=exc.detail or exc.message,
        )
        return CascadeOutcome(conflict.id, conflict.reserved_by, CascadeState.FAILED, error=exc.message)

    logger.info(
        "reservation_auto_declined",
        approved_id=approved.id,
        reservation_id=declined.id,
        reserved_by=declined.reserved_by,
    )
    return CascadeOutcome(declined.id, declined.reserved_by, CascadeState.DECLINED, reservation=declined)


def approve_reservation(
    store: ReservationStore,
    reservation_id: int,
    actor: str,
    clock: Clock,
    reason: str | None = None,
    expected_version: int | None = None,
) -> ApprovalResult:
    """
    Approve a PENDING reservation and decline its PENDING conflicts.

    Raises:
        InvalidStateError: The reservation is already APPROVED or REJECTED.
        StaleStateError: ``expected_version`` is out of date, or another actor
            resolved the reservation while this approval was running.
    """
    current = _fresh_pending(store, reservation_id, expected_version, "approve")
    conflicts = find_conflicts(current, store)

    try:
        approved = store.update_status(
            reservation_id,
            ReservationStatus.APPROVED,
            actor,
            clock.now(),
            reason=reason,
            expected_version=current.version,
        )
    except StaleStateError:
        record_transition("approve", "stale")
        raise

    record_transition("approve", "success")
    record_conflicts("approval", len(conflicts))

    outcomes = []
    for conflict in conflicts:
        if conflict.status is not ReservationStatus.PENDING:
            continue
        outcome = _cascade_decline(store, approved, conflict, clock)
        record_cascade(outcome.state.value)
        outcomes.append(outcome)

    result = ApprovalResult(reservation=approved, conflicts=tuple(conflicts), cascade=tuple(outcomes))
    logger.info(
        "reservation_approved",
        reservation_id=approved.id,
        approved_by=actor,
        conflicts=[c.id for c in conflicts],
        declined=[r.id for r in result.cascaded_declines],
        failed=[o.reservation_id for o in result.failed],
    )
    return result


def decline_reservation(
    store: ReservationStore,
    reservation_id: int,
    actor: str,
    clock: Clock,
    reason: str | None = None,
    expected_version: int | None = None,
) -> Reservation:
    """Decline a PENDING reservation. Nothing else changes."""
    current = _fresh_pending(store, reservation_id, expected_version, "decline")
    try:
        declined = store.update_status(
            reservation_id,
            ReservationStatus.REJECTED,
            actor,
            clock.now(),
            reason=reason,
            expected_version=current.version,
        )
    except StaleStateError:
        record_transition("decline", "stale")
        raise

    record_transition("decline", "success")
    logger.info("reservation_declined", reservation_id=reservation_id, declined_by=actor, reason=reason)
    return declined


def finish_concluded(store: ReservationStore, clock: Clock) -> list[Reservation]:
    """Stamp ``finished_on`` on approved reservations whose last occurrence has ended.

    A reservation concludes at ``time_end`` on its last occupied day;
    ``finished_on`` is that day, which is what the "past events" listing
    filters on.
    """
    now = clock.now()
    today = now.date()
    candidates = store.list_reservations(
        ReservationFilter(end=today, statuses=frozenset({ReservationStatus.APPROVED}))
    )

    finished = []
    for reservation in candidates:
        if reservation.finished_on is not None:
            continue
        last_day = reservation.last_day
        if last_day > today or (last_day == today and reservation.time_end > now.time()):
            continue
        try:
            finished.append(
                store.mark_finished(reservation.id, last_day, now, expected_version=reservation.version)
            )
        except StaleStateError:
            # Changed concurrently; the next sweep picks it up
            logger.info("reservation_finish_skipped", reservation_id=reservation.id)

    if finished:
        logger.info("reservations_finished", reservation_ids=[r.id for r in finished])
    return finished


def reservation_stats(
    store: ReservationStore,
    policy: VisibilityPolicy | None = None,
) -> ReservationStats:
    rows = list_reservations(store, policy=policy)
    by_asset: dict[int, int] = {}
    for r in rows:
        by_asset[r.asset_id] = by_asset.get(r.asset_id, 0) + 1
    return ReservationStats(
        total=len(rows),
        pending=sum(1 for r in rows if r.status is ReservationStatus.PENDING),
        approved=sum(1 for r in rows if r.status is ReservationStatus.APPROVED),
        rejected=sum(1 for r in rows if r.status is ReservationStatus.REJECTED),
        finished=sum(1 for r in rows if r.finished_on is not None),
        by_asset=by_asset,
    )
