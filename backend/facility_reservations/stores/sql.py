"""SQLAlchemy implementation of the reservation store and asset catalog.

CONCURRENCY STRATEGY: Optimistic Locking
========================================

Problem:
  Two administrators open the same pending reservation (or two conflicting
  ones) and both press "approve". Both read status=PENDING, both write.
  Result: two approvals for one time slot, or an approval silently
  overwriting a decline.

Solution:
  Every reservation row carries a `version` column.

  1. Read the row and its current version
  2. Apply the state machine to the domain copy (raises on non-PENDING)
  3. UPDATE reservations SET ..., version = version + 1
     WHERE id = :id AND version = :version AND status = 'PENDING'
  4. If rows_affected == 0, someone else changed the row -> StaleStateError

  The engine never retries: the business meaning of a reservation may have
  changed, so the caller reloads and asks the user again.

Every write commits on its own. A cascade of automatic declines is a series
of such writes, and the caller gets a per-reservation outcome for each.
"""

from datetime import date, datetime
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from facility_reservations.core.logging import get_logger
from facility_reservations.core.metrics import record_store_error
from facility_reservations.domain.errors import (
    InvalidStateError,
    ReservationNotFoundError,
    StaleStateError,
    StoreUnavailable,
    ValidationError,
)
from facility_reservations.domain.models import (
    Asset,
    AssetType,
    Reservation,
    ReservationDraft,
    ReservationFilter,
    ReservationStatus,
)
from facility_reservations.models.asset import Asset as AssetRow
from facility_reservations.models.reservation import Reservation as ReservationRow
from facility_reservations.scheduling.approval import transition
from facility_reservations.stores.interfaces import EDITABLE_FIELDS, AssetCatalog, ReservationStore

logger = get_logger(__name__)


def _to_domain(row: ReservationRow) -> Reservation:
    return Reservation(
        id=row.id,
        asset_id=row.asset_id,
        title=row.title,
        date=row.date,
        range=row.range_days,
        time_start=row.time_start,
        time_end=row.time_end,
        status=ReservationStatus(row.status),
        description=row.description or "",
        category=row.category or "",
        info_type=row.info_type or "",
        people_tag=tuple(row.people_tag or ()),
        reserved_by=row.reserved_by,
        approved_by=row.approved_by,
        declined_by=row.declined_by,
        resolution_reason=row.resolution_reason,
        finished_on=row.finished_on,
        created_at=row.created_at,
        updated_at=row.updated_at,
        version=row.version,
    )


def _asset_to_domain(row: AssetRow) -> Asset:
    return Asset(
        id=row.id,
        name=row.name,
        capacity=row.capacity,
        type=AssetType(row.asset_type),
        facilities=tuple(row.facilities or ()),
    )


class SqlReservationStore(ReservationStore):
    """PostgreSQL-backed reservation store."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def _fail(self, operation: str, exc: SQLAlchemyError) -> StoreUnavailable:
        self._session.rollback()
        record_store_error(operation)
        logger.error("reservation_store_error", operation=operation, error=str(exc))
        return StoreUnavailable(operation, str(exc))

    def list_reservations(self, query: ReservationFilter | None = None) -> list[Reservation]:
        query = query or ReservationFilter()
        stmt = select(ReservationRow)
        if query.asset_id is not None:
            stmt = stmt.where(ReservationRow.asset_id == query.asset_id)
        if query.statuses is not None:
            stmt = stmt.where(ReservationRow.status.in_([s.value for s in query.statuses]))
        if query.reserved_by is not None:
            stmt = stmt.where(ReservationRow.reserved_by == query.reserved_by)
        # Uses ix_reservations_asset_window / ix_reservations_window
        if query.start is not None:
            stmt = stmt.where(ReservationRow.end_date >= query.start)
        if query.end is not None:
            stmt = stmt.where(ReservationRow.date <= query.end)
        stmt = stmt.order_by(ReservationRow.id.asc())
        try:
            rows = self._session.execute(stmt).scalars().all()
        except SQLAlchemyError as exc:
            raise self._fail("list_reservations", exc) from exc
        return [_to_domain(row) for row in rows]

    def get_reservation(self, reservation_id: int) -> Reservation:
        try:
            row = self._session.get(ReservationRow, reservation_id, populate_existing=True)
        except SQLAlchemyError as exc:
            raise self._fail("get_reservation", exc) from exc
        if row is None:
            raise ReservationNotFoundError(reservation_id)
        return _to_domain(row)

    def create_reservation(self, draft: ReservationDraft, now: datetime) -> Reservation:
        if draft.range < 1:
            raise ValidationError("Reservation range must be at least one day", field="range")
        row = ReservationRow(
            asset_id=draft.asset_id,
            title=draft.title,
            description=draft.description,
            category=draft.category,
            info_type=draft.info_type,
            people_tag=list(draft.people_tag),
            reserved_by=draft.reserved_by,
            date=draft.date,
            range_days=draft.range,
            end_date=draft.span.end,
            time_start=draft.time_start,
            time_end=draft.time_end,
            status=ReservationStatus.PENDING.value,
            version=1,
            created_at=now,
            updated_at=now,
        )
        try:
            self._session.add(row)
            self._session.commit()
            self._session.refresh(row)
        except SQLAlchemyError as exc:
            raise self._fail("create_reservation", exc) from exc
        return _to_domain(row)

    def _current(self, reservation_id: int, expected_version: int | None) -> Reservation:
        current = self.get_reservation(reservation_id)
        if expected_version is not None and current.version != expected_version:
            raise StaleStateError(reservation_id, expected_version, current.version)
        return current

    def _compare_and_set(
        self,
        operation: str,
        current: Reservation,
        values: dict[str, Any],
        require_pending: bool,
    ) -> Reservation:
        conditions = [
            ReservationRow.id == current.id,
            ReservationRow.version == current.version,
        ]
        if require_pending:
            conditions.append(ReservationRow.status == ReservationStatus.PENDING.value)
        stmt = (
            update(ReservationRow)
            .where(*conditions)
            .values(**values, version=ReservationRow.version + 1)
        )
        try:
            result = self._session.execute(stmt)
            if result.rowcount == 0:
                # Another transaction got there between our read and write
                self._session.rollback()
                logger.info(
                    "reservation_write_lost_race",
                    reservation_id=current.id,
                    operation=operation,
                    version=current.version,
                )
                raise StaleStateError(current.id, current.version, None)
            self._session.commit()
        except SQLAlchemyError as exc:
            raise self._fail(operation, exc) from exc
        return self.get_reservation(current.id)

    def update_status(
        self,
        reservation_id: int,
        new_status: ReservationStatus,
        actor: str,
        now: datetime,
        reason: str | None = None,
        expected_version: int | None = None,
    ) -> Reservation:
        current = self._current(reservation_id, expected_version)
        resolved = transition(current, new_status, actor, now, reason)
        return self._compare_and_set(
            "update_status",
            current,
            {
                "status": resolved.status.value,
                "approved_by": resolved.approved_by,
                "declined_by": resolved.declined_by,
                "resolution_reason": resolved.resolution_reason,
                "updated_at": now,
            },
            require_pending=True,
        )

    def update_details(
        self,
        reservation_id: int,
        changes: dict[str, Any],
        now: datetime,
        expected_version: int | None = None,
    ) -> Reservation:
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")
        current = self._current(reservation_id, expected_version)
        if not current.is_pending:
            raise InvalidStateError(reservation_id, current.status.value)
        values = dict(changes)
        if "people_tag" in values:
            values["people_tag"] = list(values["people_tag"])
        values["updated_at"] = now
        return self._compare_and_set("update_details", current, values, require_pending=True)

    def mark_finished(
        self,
        reservation_id: int,
        finished_on: date,
        now: datetime,
        expected_version: int | None = None,
    ) -> Reservation:
        current = self._current(reservation_id, expected_version)
        return self._compare_and_set(
            "mark_finished",
            current,
            {"finished_on": finished_on, "updated_at": now},
            require_pending=False,
        )


class SqlAssetCatalog(AssetCatalog):

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_asset(self, asset_id: int) -> Asset | None:
        try:
            row = self._session.get(AssetRow, asset_id)
        except SQLAlchemyError as exc:
            self._session.rollback()
            record_store_error("get_asset")
            raise StoreUnavailable("get_asset", str(exc)) from exc
        return _asset_to_domain(row) if row is not None else None

    def list_assets(self, asset_type: AssetType | None = None) -> list[Asset]:
        stmt = select(AssetRow)
        if asset_type is not None:
            stmt = stmt.where(AssetRow.asset_type == asset_type.value)
        stmt = stmt.order_by(AssetRow.name.asc())
        try:
            rows = self._session.execute(stmt).scalars().all()
        except SQLAlchemyError as exc:
            self._session.rollback()
            record_store_error("list_assets")
            raise StoreUnavailable("list_assets", str(exc)) from exc
        return [_asset_to_domain(row) for row in rows]
