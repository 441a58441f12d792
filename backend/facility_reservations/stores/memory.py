"""In-memory reservation store and asset catalog.

Holds the snapshot the engine works on and backs the API in tests. Rows are
indexed by asset id and by every occupied day so conflict and calendar
queries never scan the whole collection.
"""

from collections import defaultdict
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Iterable

from facility_reservations.domain.errors import (
    InvalidStateError,
    ReservationNotFoundError,
    StaleStateError,
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
from facility_reservations.scheduling.approval import transition
from facility_reservations.stores.interfaces import EDITABLE_FIELDS, AssetCatalog, ReservationStore


class InMemoryReservationStore(ReservationStore):

    def __init__(self, reservations: Iterable[Reservation] = ()) -> None:
        self._rows: dict[int, Reservation] = {}
        self._by_asset: dict[int, set[int]] = defaultdict(set)
        self._by_day: dict[date, set[int]] = defaultdict(set)
        self._next_id = 1
        for reservation in reservations:
            self.add(reservation)

    def __len__(self) -> int:
        return len(self._rows)

    def add(self, reservation: Reservation) -> Reservation:
        """Load an existing record (snapshot seeding); keeps its id and status."""
        if reservation.id in self._rows:
            raise ValueError(f"Reservation #{reservation.id} is already loaded")
        self._index(reservation)
        self._next_id = max(self._next_id, reservation.id + 1)
        return reservation

    def _index(self, reservation: Reservation) -> None:
        self._rows[reservation.id] = reservation
        self._by_asset[reservation.asset_id].add(reservation.id)
        for day in reservation.span.dates():
            self._by_day[day].add(reservation.id)

    def _candidate_ids(self, query: ReservationFilter) -> set[int]:
        if query.asset_id is not None:
            return set(self._by_asset.get(query.asset_id, ()))
        if query.start is not None and query.end is not None:
            ids: set[int] = set()
            for day, day_ids in self._by_day.items():
                if query.start <= day <= query.end:
                    ids |= day_ids
            return ids
        return set(self._rows)

    def list_reservations(self, query: ReservationFilter | None = None) -> list[Reservation]:
        query = query or ReservationFilter()
        rows = (self._rows[i] for i in self._candidate_ids(query))
        return sorted((r for r in rows if query.matches(r)), key=lambda r: r.id)

    def get_reservation(self, reservation_id: int) -> Reservation:
        try:
            return self._rows[reservation_id]
        except KeyError:
            raise ReservationNotFoundError(reservation_id) from None

    def create_reservation(self, draft: ReservationDraft, now: datetime) -> Reservation:
        if draft.range < 1:
            raise ValidationError("Reservation range must be at least one day", field="range")
        reservation = Reservation(
            id=self._next_id,
            asset_id=draft.asset_id,
            title=draft.title,
            date=draft.date,
            range=draft.range,
            time_start=draft.time_start,
            time_end=draft.time_end,
            status=ReservationStatus.PENDING,
            description=draft.description,
            category=draft.category,
            info_type=draft.info_type,
            people_tag=tuple(draft.people_tag),
            reserved_by=draft.reserved_by,
            created_at=now,
            updated_at=now,
        )
        self._next_id += 1
        self._index(reservation)
        return reservation

    def _current(self, reservation_id: int, expected_version: int | None) -> Reservation:
        current = self.get_reservation(reservation_id)
        if expected_version is not None and current.version != expected_version:
            raise StaleStateError(reservation_id, expected_version, current.version)
        return current

    def _save(self, updated: Reservation) -> Reservation:
        stored = replace(updated, version=updated.version + 1)
        self._rows[stored.id] = stored
        return stored

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
        return self._save(transition(current, new_status, actor, now, reason))

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
        if "people_tag" in changes:
            changes = {**changes, "people_tag": tuple(changes["people_tag"])}
        return self._save(replace(current, **changes, updated_at=now))

    def mark_finished(
        self,
        reservation_id: int,
        finished_on: date,
        now: datetime,
        expected_version: int | None = None,
    ) -> Reservation:
        current = self._current(reservation_id, expected_version)
        return self._save(replace(current, finished_on=finished_on, updated_at=now))


class InMemoryAssetCatalog(AssetCatalog):

    def __init__(self, assets: Iterable[Asset] = ()) -> None:
        self._assets = {asset.id: asset for asset in assets}

    def get_asset(self, asset_id: int) -> Asset | None:
        return self._assets.get(asset_id)

    def list_assets(self, asset_type: AssetType | None = None) -> list[Asset]:
        assets = (a for a in self._assets.values() if asset_type is None or a.type is asset_type)
        return sorted(assets, key=lambda a: a.name)
