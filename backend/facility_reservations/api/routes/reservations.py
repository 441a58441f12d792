"""
Reservation endpoints: submission, editing and the approval workflow.

Endpoints are plain ``def`` functions; the engine and stores are synchronous
and FastAPI runs them in its threadpool.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from facility_reservations.api.deps import get_catalog, get_clock, get_policy, get_store
from facility_reservations.api.responses import approval_response, reservation_response
from facility_reservations.core.clock import Clock
from facility_reservations.core.logging import get_logger
from facility_reservations.domain.models import ReservationFilter, ReservationStatus
from facility_reservations.scheduling.visibility import VisibilityPolicy
from facility_reservations.schemas.reservation import (
    ApprovalResponse,
    ConflictCheckResponse,
    FinishResponse,
    ReservationCreate,
    ReservationResponse,
    ReservationUpdate,
    StatsResponse,
    StatusChange,
    SubmissionResponse,
)
from facility_reservations.services import reservation_service
from facility_reservations.stores.interfaces import AssetCatalog, ReservationStore

logger = get_logger(__name__)
router = APIRouter(prefix="/reservations", tags=["Reservations"])


@router.post("/", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED)
def submit_reservation_endpoint(
    payload: ReservationCreate,
    store: ReservationStore = Depends(get_store),
    catalog: AssetCatalog = Depends(get_catalog),
    clock: Clock = Depends(get_clock),
):
    """
    Submit a reservation. It is stored as PENDING.

    Conflicting reservations are returned alongside it as a disclaimer; a
    conflict never blocks the submission.
    """
    result = reservation_service.submit_reservation(store, catalog, payload.to_draft(), clock)
    conflicts = [reservation_response(r) for r in result.conflicts]
    return SubmissionResponse(
        reservation=reservation_response(result.reservation),
        conflicts=conflicts,
        has_conflicts=bool(conflicts),
    )


@router.get("/", response_model=list[ReservationResponse])
def list_reservations_endpoint(
    asset_id: Optional[int] = Query(None),
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    reserved_by: Optional[str] = Query(None),
    policy: VisibilityPolicy = Depends(get_policy),
    store: ReservationStore = Depends(get_store),
):
    """List reservations visible to the caller, optionally by asset, date window or status."""
    statuses = None
    if status_filter is not None:
        statuses = frozenset({ReservationStatus.from_external(status_filter)})
    query = ReservationFilter(
        asset_id=asset_id, start=start, end=end, statuses=statuses, reserved_by=reserved_by,
    )
    rows = reservation_service.list_reservations(store, query, policy)
    return [reservation_response(r) for r in rows]


@router.get("/stats", response_model=StatsResponse)
def reservation_stats_endpoint(
    policy: VisibilityPolicy = Depends(get_policy),
    store: ReservationStore = Depends(get_store),
):
    """Dashboard counts by status."""
    return StatsResponse.model_validate(reservation_service.reservation_stats(store, policy))


@router.post("/conflicts", response_model=ConflictCheckResponse)
def check_conflicts_endpoint(
    payload: ReservationCreate,
    store: ReservationStore = Depends(get_store),
    catalog: AssetCatalog = Depends(get_catalog),
):
    """Preview the conflicts of a reservation before submitting it."""
    conflicts = reservation_service.check_conflicts(store, catalog, payload.to_draft())
    return ConflictCheckResponse(
        conflicts=[reservation_response(r) for r in conflicts],
        has_conflicts=bool(conflicts),
    )


@router.post("/finish", response_model=FinishResponse)
def finish_concluded_endpoint(
    store: ReservationStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    """Mark approved reservations whose last day has ended as finished."""
    finished = reservation_service.finish_concluded(store, clock)
    return FinishResponse(finished=[reservation_response(r) for r in finished])


@router.get("/{reservation_id}", response_model=ReservationResponse)
def get_reservation_endpoint(
    reservation_id: int,
    store: ReservationStore = Depends(get_store),
):
    return reservation_response(reservation_service.get_reservation(store, reservation_id))


@router.patch("/{reservation_id}", response_model=ReservationResponse)
def edit_reservation_endpoint(
    reservation_id: int,
    payload: ReservationUpdate,
    store: ReservationStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    """Edit the descriptive fields of a PENDING reservation."""
    reservation = reservation_service.edit_reservation(
        store, reservation_id, payload.changes(), clock, payload.expected_version,
    )
    return reservation_response(reservation)


@router.get("/{reservation_id}/conflicts", response_model=ConflictCheckResponse)
def reservation_conflicts_endpoint(
    reservation_id: int,
    store: ReservationStore = Depends(get_store),
):
    """Conflicts shown in the approval confirmation dialog."""
    conflicts = reservation_service.conflicts_for(store, reservation_id)
    return ConflictCheckResponse(
        conflicts=[reservation_response(r) for r in conflicts],
        has_conflicts=bool(conflicts),
    )


@router.post("/{reservation_id}/approve", response_model=ApprovalResponse)
def approve_reservation_endpoint(
    reservation_id: int,
    payload: StatusChange,
    store: ReservationStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    """
    Approve a PENDING reservation.

    Every PENDING reservation that conflicts with it is declined
    automatically; ``cascade`` reports the outcome for each one and ``notify``
    lists whom to tell. Returns 409 if the reservation was already resolved or
    ``expected_version`` is out of date.
    """
    result = reservation_service.approve_reservation(
        store,
        reservation_id,
        payload.actor,
        clock,
        reason=payload.reason,
        expected_version=payload.expected_version,
    )
    return approval_response(result)


@router.post("/{reservation_id}/decline", response_model=ReservationResponse)
def decline_reservation_endpoint(
    reservation_id: int,
    payload: StatusChange,
    store: ReservationStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    """Decline a PENDING reservation."""
    reservation = reservation_service.decline_reservation(
        store,
        reservation_id,
        payload.actor,
        clock,
        reason=payload.reason,
        expected_version=payload.expected_version,
    )
    return reservation_response(reservation)
