"""
Tests for reservation endpoints, including the approval cascade.
"""

from datetime import date

import pytest
from httpx import AsyncClient

from facility_reservations.api.deps import get_store
from facility_reservations.domain.errors import StoreUnavailable
from facility_reservations.domain.models import ReservationStatus
from facility_reservations.main import app
from facility_reservations.stores.memory import InMemoryReservationStore

BASE = "/api/v1/reservations"


def payload(**overrides) -> dict:
    body = {
        "title": "Research Colloquium",
        "asset_id": 1,
        "date": "2026-10-22",
        "time_start": "09:00:00",
        "time_end": "11:00:00",
        "reserved_by": "prof.cruz",
        "people_tag": "Dr. Santos, Dr. Lim",
    }
    body.update(overrides)
    return body


class UnavailableStore(InMemoryReservationStore):
    def list_reservations(self, query=None):
        raise StoreUnavailable("list_reservations", "connection refused")


@pytest.mark.asyncio
async def test_submit_reservation(client: AsyncClient):
    """Submission stores a PENDING reservation with no conflicts."""
    response = await client.post(f"{BASE}/", json=payload())
    assert response.status_code == 201
    data = response.json()
    assert data["has_conflicts"] is False
    assert data["conflicts"] == []
    reservation = data["reservation"]
    assert reservation["status"] == "PENDING"
    assert reservation["people_tag"] == ["Dr. Santos", "Dr. Lim"]
    assert reservation["version"] == 1
    assert reservation["created_at"] == "2026-10-19T10:00:00"


@pytest.mark.asyncio
async def test_submit_ignores_client_status(client: AsyncClient):
    response = await client.post(f"{BASE}/", json=payload(status="APPROVED"))
    assert response.status_code == 201
    assert response.json()["reservation"]["status"] == "PENDING"


@pytest.mark.asyncio
async def test_submit_reports_conflicts_without_blocking(client: AsyncClient):
    first = await client.post(f"{BASE}/", json=payload())
    second = await client.post(f"{BASE}/", json=payload(time_start="10:00:00", time_end="12:00:00"))

    assert second.status_code == 201
    data = second.json()
    assert data["has_conflicts"] is True
    assert [c["id"] for c in data["conflicts"]] == [first.json()["reservation"]["id"]]


@pytest.mark.asyncio
async def test_submit_end_before_start(client: AsyncClient):
    response = await client.post(f"{BASE}/", json=payload(time_end="08:00:00"))
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_FAILED"


@pytest.mark.asyncio
async def test_submit_unknown_asset(client: AsyncClient):
    response = await client.post(f"{BASE}/", json=payload(asset_id=99))
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_submit_zero_range(client: AsyncClient):
    response = await client.post(f"{BASE}/", json=payload(range=0))
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_conflict_preview_stores_nothing(client: AsyncClient, add_reservation, store):
    existing = add_reservation("09:00", "10:00", date=date(2026, 10, 22))

    response = await client.post(f"{BASE}/conflicts", json=payload())

    assert response.status_code == 200
    assert [c["id"] for c in response.json()["conflicts"]] == [existing.id]
    assert len(store) == 1


@pytest.mark.asyncio
async def test_get_missing_reservation(client: AsyncClient):
    response = await client.get(f"{BASE}/404")
    assert response.status_code == 404
    assert response.json()["code"] == "RESERVATION_NOT_FOUND"


@pytest.mark.asyncio
async def test_approve_cascades_to_pending_conflicts(client: AsyncClient, add_reservation):
    a = add_reservation("09:00", "11:00")
    b = add_reservation("10:00", "12:00", reserved_by="prof.lim")
    c = add_reservation("08:00", "09:30", status=ReservationStatus.APPROVED)

    response = await client.post(
        f"{BASE}/{a.id}/approve",
        json={"actor": "dean.santos", "expected_version": a.version},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["reservation"]["status"] == "APPROVED"
    assert data["reservation"]["approved_by"] == "dean.santos"
    assert [r["id"] for r in data["conflicts"]] == [b.id, c.id]
    assert [r["id"] for r in data["cascaded_declines"]] == [b.id]
    assert data["cascade"] == [
        {"reservation_id": b.id, "reserved_by": "prof.lim", "state": "declined", "error": None},
    ]
    assert data["notify"] == [{"reservation_id": b.id, "reserved_by": "prof.lim"}]
    assert data["complete"] is True

    declined = (await client.get(f"{BASE}/{b.id}")).json()
    assert declined["status"] == "REJECTED"
    assert declined["declined_by"] == f"system (conflict with #{a.id})"
    assert declined["auto_declined"] is True


@pytest.mark.asyncio
async def test_second_approval_conflicts(client: AsyncClient, add_reservation):
    a = add_reservation()
    first = await client.post(f"{BASE}/{a.id}/approve", json={"actor": "dean.santos"})
    second = await client.post(f"{BASE}/{a.id}/approve", json={"actor": "admin.reyes"})

    assert first.status_code == 200
    assert second.status_code == 409
    assert second.json()["code"] == "INVALID_STATE"


@pytest.mark.asyncio
async def test_stale_approval_conflicts(client: AsyncClient, add_reservation):
    a = add_reservation()
    await client.patch(f"{BASE}/{a.id}", json={"title": "Renamed"})

    response = await client.post(
        f"{BASE}/{a.id}/approve",
        json={"actor": "dean.santos", "expected_version": a.version},
    )
    assert response.status_code == 409
    assert response.json()["code"] == "STALE_STATE"


@pytest.mark.asyncio
async def test_approve_requires_actor(client: AsyncClient, add_reservation):
    a = add_reservation()
    response = await client.post(f"{BASE}/{a.id}/approve", json={})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_decline(client: AsyncClient, add_reservation):
    a = add_reservation("09:00", "11:00")
    b = add_reservation("10:00", "12:00")

    response = await client.post(
        f"{BASE}/{a.id}/decline",
        json={"actor": "admin.reyes", "reason": "Venue under maintenance"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "REJECTED"
    assert data["declined_by"] == "admin.reyes"
    assert data["resolution_reason"] == "Venue under maintenance"
    assert data["auto_declined"] is False
    assert (await client.get(f"{BASE}/{b.id}")).json()["status"] == "PENDING"


@pytest.mark.asyncio
async def test_edit_pending_then_refused_after_approval(client: AsyncClient, add_reservation):
    a = add_reservation()
    edited = await client.patch(f"{BASE}/{a.id}", json={"description": "Bring lab coats"})
    assert edited.status_code == 200
    assert edited.json()["description"] == "Bring lab coats"
    assert edited.json()["version"] == a.version + 1

    await client.post(f"{BASE}/{a.id}/approve", json={"actor": "dean.santos"})
    refused = await client.patch(f"{BASE}/{a.id}", json={"description": "Changed"})
    assert refused.status_code == 409


@pytest.mark.asyncio
async def test_reservation_conflicts_endpoint(client: AsyncClient, add_reservation):
    a = add_reservation("09:00", "10:00")
    b = add_reservation("09:30", "10:30")

    response = await client.get(f"{BASE}/{a.id}/conflicts")
    assert response.status_code == 200
    assert [c["id"] for c in response.json()["conflicts"]] == [b.id]


@pytest.mark.asyncio
async def test_declined_reservation_has_no_conflicts(client: AsyncClient, add_reservation):
    """Once auto-declined, a reservation no longer lists the one that was approved."""
    a = add_reservation("09:00", "11:00")
    b = add_reservation("10:00", "12:00")
    await client.post(f"{BASE}/{a.id}/approve", json={"actor": "dean.santos"})

    response = await client.get(f"{BASE}/{b.id}/conflicts")
    assert response.status_code == 200
    assert response.json() == {"conflicts": [], "has_conflicts": False}


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["title", "description", "category", "info_type", "people_tag"])
async def test_edit_rejects_null_fields(client: AsyncClient, add_reservation, store, field):
    """A null edit is refused before anything is written."""
    a = add_reservation(description="Bring IDs")

    response = await client.patch(f"{BASE}/{a.id}", json={field: None})

    assert response.status_code == 422
    assert store.get_reservation(a.id) == a


@pytest.mark.asyncio
async def test_list_respects_role(client: AsyncClient, add_reservation):
    pending = add_reservation(reserved_by="prof.cruz")
    approved = add_reservation(status=ReservationStatus.APPROVED)

    public = await client.get(f"{BASE}/")
    admin = await client.get(f"{BASE}/", params={"role": "admin"})
    owner = await client.get(f"{BASE}/", params={"role": "owner", "actor": "prof.cruz"})

    assert [r["id"] for r in public.json()] == [approved.id]
    assert [r["id"] for r in admin.json()] == [pending.id, approved.id]
    assert [r["id"] for r in owner.json()] == [pending.id]


@pytest.mark.asyncio
async def test_list_accepts_legacy_status_names(client: AsyncClient, add_reservation):
    add_reservation()
    approved = add_reservation(status=ReservationStatus.APPROVED)

    response = await client.get(f"{BASE}/", params={"role": "admin", "status": "open"})
    assert [r["id"] for r in response.json()] == [approved.id]

    unknown = await client.get(f"{BASE}/", params={"role": "admin", "status": "cancelled"})
    assert unknown.status_code == 400


@pytest.mark.asyncio
async def test_owner_view_needs_actor(client: AsyncClient):
    response = await client.get(f"{BASE}/", params={"role": "owner"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_stats(client: AsyncClient, add_reservation):
    add_reservation()
    add_reservation(status=ReservationStatus.APPROVED)

    response = await client.get(f"{BASE}/stats", params={"role": "admin"})
    assert response.status_code == 200
    data = response.json()
    assert (data["total"], data["pending"], data["approved"]) == (2, 1, 1)
    assert data["by_asset"] == {"1": 2}


@pytest.mark.asyncio
async def test_finish_endpoint(client: AsyncClient, add_reservation):
    done = add_reservation("08:00", "09:00", status=ReservationStatus.APPROVED)
    add_reservation("09:00", "12:00", status=ReservationStatus.APPROVED)

    response = await client.post(f"{BASE}/finish")
    assert response.status_code == 200
    assert [r["id"] for r in response.json()["finished"]] == [done.id]
    assert response.json()["finished"][0]["finished_on"] == "2026-10-19"


@pytest.mark.asyncio
async def test_store_outage_is_503(client: AsyncClient):
    app.dependency_overrides[get_store] = lambda: UnavailableStore()

    response = await client.get(f"{BASE}/")

    assert response.status_code == 503
    assert response.headers["retry-after"] == "5"
    assert response.json()["code"] == "STORE_UNAVAILABLE"
