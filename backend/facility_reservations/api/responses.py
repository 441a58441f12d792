"""
Domain model -> response schema conversion shared by the routers.
"""

from facility_reservations.domain.models import Asset, Reservation
from facility_reservations.scheduling.approval import ApprovalResult
from facility_reservations.schemas.asset import AssetResponse
from facility_reservations.schemas.reservation import (
    ApprovalResponse,
    CascadeOutcomeResponse,
    NotificationTarget,
    ReservationResponse,
)


def reservation_response(r: Reservation) -> ReservationResponse:
    return ReservationResponse(
        id=r.id,
        asset_id=r.asset_id,
        title=r.title,
        description=r.description,
        category=r.category,
        info_type=r.info_type,
        people_tag=list(r.people_tag),
        reserved_by=r.reserved_by,
        date=r.date,
        range=r.range,
        time_start=r.time_start,
        time_end=r.time_end,
        status=r.status.value,
        approved_by=r.approved_by,
        declined_by=r.declined_by,
        resolution_reason=r.resolution_reason,
        auto_declined=r.auto_declined,
        finished_on=r.finished_on,
        created_at=r.created_at,
        updated_at=r.updated_at,
        version=r.version,
    )


def approval_response(result: ApprovalResult) -> ApprovalResponse:
    return ApprovalResponse(
        reservation=reservation_response(result.reservation),
        conflicts=[reservation_response(r) for r in result.conflicts],
        cascaded_declines=[reservation_response(r) for r in result.cascaded_declines],
        cascade=[
            CascadeOutcomeResponse(
                reservation_id=o.reservation_id,
                reserved_by=o.reserved_by,
                state=o.state.value,
                error=o.error,
            )
            for o in result.cascade
        ],
        notify=[
            NotificationTarget(reservation_id=rid, reserved_by=owner)
            for rid, owner in result.notifications
        ],
        complete=result.complete,
    )


def asset_response(asset: Asset) -> AssetResponse:
    return AssetResponse(
        id=asset.id,
        name=asset.name,
        capacity=asset.capacity,
        type=asset.type.value,
        facilities=list(asset.facilities),
    )
