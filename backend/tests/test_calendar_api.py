"""
Tests for calendar, asset and health endpoints.
"""

from datetime import date

import pytest
from httpx import AsyncClient

from facility_reservations.domain.models import ReservationStatus


@pytest.mark.asyncio
async def test_month_grid(client: AsyncClient, add_reservation):
    add_reservation(status=ReservationStatus.APPROVED)
    add_reservation("11:00", "12:00", status=ReservationStatus.APPROVED)
    add_reservation("13:00", "14:00")

    public = await client.get("/api/v1/calendar/2026/10")
    admin = await client.get("/api/v1/calendar/2026/10", params={"role": "admin"})

    assert public.status_code == 200
    data = public.json()
    assert (data["year"], data["month"], data["cells"]) == (2026, 10, 35)
    assert len(data["days"]) == 35
    public_day = next(d for d in data["days"] if d["key"] == "curr-2026-10-19")
    admin_day = next(d for d in admin.json()["days"] if d["key"] == "curr-2026-10-19")
    assert public_day["is_today"] is True
    assert public_day["event_count"] == 2
    assert admin_day["event_count"] == 3


@pytest.mark.asyncio
async def test_month_grid_with_six_rows(client: AsyncClient):
    response = await client.get("/api/v1/calendar/2026/8", params={"cells": 42})
    assert response.status_code == 200
    days = response.json()["days"]
    assert len(days) == 42
    assert sum(1 for d in days if d["current_month"]) == 31


@pytest.mark.asyncio
async def test_month_grid_rejects_other_sizes(client: AsyncClient):
    response = await client.get("/api/v1/calendar/2026/10", params={"cells": 40})
    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize("month", [0, 13])
async def test_month_out_of_range(client: AsyncClient, month):
    response = await client.get(f"/api/v1/calendar/2026/{month}")
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_day_events(client: AsyncClient, add_reservation):
    started = add_reservation("09:00", "12:00", status=ReservationStatus.APPROVED, title="Research Summit")
    later = add_reservation("15:00", "16:00", status=ReservationStatus.APPROVED, title="Choir Night")
    add_reservation("10:00", "11:00", title="Pending Seminar")

    response = await client.get("/api/v1/calendar/2026/10/19")

    assert response.status_code == 200
    data = response.json()
    assert (data["date"], data["mode"]) == ("2026-10-19", "upcoming")
    assert [(e["reservation"]["id"], e["start_label"]) for e in data["events"]] == [
        (started.id, "Started 1 hour ago"),
        (later.id, "Starts at 3:00 PM"),
    ]

    searched = await client.get("/api/v1/calendar/2026/10/19", params={"search": "summit"})
    assert [e["reservation"]["id"] for e in searched.json()["events"]] == [started.id]


@pytest.mark.asyncio
async def test_day_events_past(client: AsyncClient, add_reservation):
    done = add_reservation(
        date=date(2026, 10, 18), range=2, status=ReservationStatus.APPROVED, finished_on=date(2026, 10, 19),
    )

    response = await client.get("/api/v1/calendar/2026/10/19", params={"mode": "past"})
    assert [e["reservation"]["id"] for e in response.json()["events"]] == [done.id]


@pytest.mark.asyncio
async def test_day_events_invalid_date(client: AsyncClient):
    response = await client.get("/api/v1/calendar/2026/2/30")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_list_assets(client: AsyncClient):
    response = await client.get("/api/v1/assets/")
    assert response.status_code == 200
    assert [a["name"] for a in response.json()] == [
        "Audio-Visual Room", "Coaster Bus", "University Gymnasium",
    ]

    vehicles = await client.get("/api/v1/assets/", params={"type": "vehicle"})
    assert [(a["id"], a["type"]) for a in vehicles.json()] == [(3, "vehicle")]


@pytest.mark.asyncio
async def test_get_asset(client: AsyncClient):
    response = await client.get("/api/v1/assets/1")
    assert response.status_code == 200
    assert response.json()["facilities"] == ["Projector", "Sound system"]

    missing = await client.get("/api/v1/assets/99")
    assert missing.status_code == 404
    assert missing.json()["code"] == "ASSET_NOT_FOUND"


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_metrics(client: AsyncClient, add_reservation):
    a = add_reservation()
    await client.post(f"/api/v1/reservations/{a.id}/approve", json={"actor": "dean.santos"})

    response = await client.get("/metrics")
    assert response.status_code == 200
    assert "reservation_transitions_total" in response.text


@pytest.mark.asyncio
async def test_request_id_is_echoed(client: AsyncClient):
    response = await client.get("/health", headers={"X-Request-ID": "abc123"})
    assert response.headers["x-request-id"] == "abc123"
