"""
Pytest fixtures for stores, a pinned clock, and the HTTP client.

The API runs against the in-memory store through dependency overrides, so
no database is needed; every test gets fresh stores.
"""

from datetime import date, datetime, time
from itertools import count
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from facility_reservations.api.deps import get_catalog, get_clock, get_store
from facility_reservations.core.clock import FixedClock
from facility_reservations.domain.errors import ReservationNotFoundError
from facility_reservations.domain.models import Asset, AssetType, Reservation, ReservationStatus
from facility_reservations.main import app
from facility_reservations.stores.memory import InMemoryAssetCatalog, InMemoryReservationStore

AV_ROOM = 1
GYMNASIUM = 2
COASTER_BUS = 3

# Monday 19 October 2026, mid-morning
NOW = datetime(2026, 10, 19, 10, 0)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def catalog() -> InMemoryAssetCatalog:
    return InMemoryAssetCatalog([
        Asset(AV_ROOM, "Audio-Visual Room", 120, AssetType.VENUE, ("Projector", "Sound system")),
        Asset(GYMNASIUM, "University Gymnasium", 800, AssetType.VENUE),
        Asset(COASTER_BUS, "Coaster Bus", 29, AssetType.VEHICLE),
    ])


@pytest.fixture
def store() -> InMemoryReservationStore:
    return InMemoryReservationStore()


@pytest.fixture
def add_reservation(store: InMemoryReservationStore):
    """Load a reservation straight into the store, bypassing submission.

    ``add_reservation("09:00", "10:00", status=ReservationStatus.APPROVED)``
    """
    ids = count(1)

    def _add(start: str = "09:00", end: str = "10:00", **overrides) -> Reservation:
        status = overrides.pop("status", ReservationStatus.PENDING)
        resolver = {}
        if status is ReservationStatus.APPROVED:
            resolver["approved_by"] = overrides.pop("approved_by", "admin.reyes")
        elif status is ReservationStatus.REJECTED:
            resolver["declined_by"] = overrides.pop("declined_by", "admin.reyes")
        reservation_id = overrides.pop("id", None)
        if reservation_id is None:
            reservation_id = next(ids)
            while True:
                try:
                    store.get_reservation(reservation_id)
                except ReservationNotFoundError:
                    break
                reservation_id = next(ids)
        fields = {
            "id": reservation_id,
            "asset_id": AV_ROOM,
            "title": f"Event {reservation_id}",
            "date": date(2026, 10, 19),
            "range": 1,
            "time_start": time.fromisoformat(start),
            "time_end": time.fromisoformat(end),
            "status": status,
            "reserved_by": f"faculty.{reservation_id}",
            "created_at": NOW,
            "updated_at": NOW,
            **resolver,
            **overrides,
        }
        return store.add(Reservation(**fields))

    return _add


@pytest_asyncio.fixture
async def client(
    store: InMemoryReservationStore,
    catalog: InMemoryAssetCatalog,
    clock: FixedClock,
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client with the stores and clock replaced by the fixtures above."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_catalog] = lambda: catalog
    app.dependency_overrides[get_clock] = lambda: clock

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
