"""
Tests for conflict detection between reservations of one asset.
"""

from datetime import date, time

from facility_reservations.domain.models import ReservationDraft, ReservationStatus
from facility_reservations.scheduling.conflicts import conflicts_with, find_conflicts
from facility_reservations.scheduling.visibility import Role, VisibilityPolicy

GYMNASIUM = 2


def ids(reservations):
    return [r.id for r in reservations]


def test_reservation_never_conflicts_with_itself(store, add_reservation):
    alone = add_reservation("09:00", "11:00")
    assert find_conflicts(alone, store) == []


def test_overlapping_reservations_conflict_both_ways(store, add_reservation):
    first = add_reservation("09:00", "10:00")
    second = add_reservation("09:30", "10:30")
    assert ids(find_conflicts(first, store)) == [second.id]
    assert ids(find_conflicts(second, store)) == [first.id]


def test_touching_reservations_do_not_conflict(store, add_reservation):
    first = add_reservation("09:00", "10:00")
    second = add_reservation("10:00", "11:00")
    assert find_conflicts(first, store) == []
    assert find_conflicts(second, store) == []


def test_other_assets_are_ignored(store, add_reservation):
    room = add_reservation("09:00", "10:00")
    add_reservation("09:00", "10:00", asset_id=GYMNASIUM)
    assert find_conflicts(room, store) == []


def test_multi_day_reservations_conflict_on_shared_day(store, add_reservation):
    """Days 1-3 and 3-5 share day 3; days 4-6 share nothing with 1-3."""
    first = add_reservation("09:00", "10:00", date=date(2026, 10, 1), range=3)
    second = add_reservation("09:00", "10:00", date=date(2026, 10, 3), range=3)
    third = add_reservation("09:00", "10:00", date=date(2026, 10, 4), range=3)

    assert ids(find_conflicts(first, store)) == [second.id]
    assert ids(find_conflicts(second, store)) == [first.id, third.id]
    assert ids(find_conflicts(third, store)) == [second.id]


def test_shared_day_needs_overlapping_window(store, add_reservation):
    morning = add_reservation("08:00", "09:00", date=date(2026, 10, 1), range=3)
    add_reservation("13:00", "15:00", date=date(2026, 10, 2), range=3)
    assert find_conflicts(morning, store) == []


def test_rejected_reservations_hold_nothing(store, add_reservation):
    active = add_reservation("09:00", "10:00")
    rejected = add_reservation("09:00", "10:00", status=ReservationStatus.REJECTED)
    assert find_conflicts(active, store) == []
    assert find_conflicts(rejected, store) == []


def test_approved_reservations_are_reported(store, add_reservation):
    pending = add_reservation("09:00", "10:00")
    approved = add_reservation("09:30", "10:30", status=ReservationStatus.APPROVED)
    assert ids(find_conflicts(pending, store)) == [approved.id]


def test_conflicts_come_back_by_ascending_id(store, add_reservation):
    add_reservation("09:00", "10:00", id=9)
    add_reservation("09:00", "10:00", id=2)
    add_reservation("09:00", "10:00", id=5)
    candidate = add_reservation("08:00", "12:00", id=20)
    assert ids(find_conflicts(candidate, store)) == [2, 5, 9]


def test_draft_candidate_without_id(store, add_reservation):
    """A draft is checked before it exists, so every overlap counts."""
    existing = add_reservation("09:00", "10:00")
    draft = ReservationDraft(
        asset_id=existing.asset_id,
        title="Faculty Assembly",
        date=existing.date,
        time_start=time(9, 45),
        time_end=time(11, 0),
    )
    assert ids(find_conflicts(draft, store)) == [existing.id]
    assert conflicts_with(draft, existing)


def test_policy_narrows_conflicts(store, add_reservation):
    candidate = add_reservation("09:00", "10:00", reserved_by="prof.cruz")
    approved = add_reservation("09:00", "10:00", status=ReservationStatus.APPROVED)
    add_reservation("09:00", "10:00")

    public = VisibilityPolicy(Role.PUBLIC)
    assert ids(find_conflicts(candidate, store, public)) == [approved.id]
    assert len(find_conflicts(candidate, store, VisibilityPolicy.full())) == 2
