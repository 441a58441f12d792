"""
FastAPI dependencies: stores, clock and the caller's visibility policy.

Tests override ``get_store``, ``get_catalog`` and ``get_clock`` with the
in-memory implementations.
"""

from typing import Optional

from fastapi import Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from facility_reservations.core.clock import Clock, SystemClock
from facility_reservations.db.session import get_db
from facility_reservations.scheduling.visibility import Role, VisibilityPolicy
from facility_reservations.stores.interfaces import AssetCatalog, ReservationStore
from facility_reservations.stores.sql import SqlAssetCatalog, SqlReservationStore

_system_clock = SystemClock()


def get_store(db: Session = Depends(get_db)) -> ReservationStore:
    return SqlReservationStore(db)


def get_catalog(db: Session = Depends(get_db)) -> AssetCatalog:
    return SqlAssetCatalog(db)


def get_clock() -> Clock:
    return _system_clock


def get_policy(
    role: Role = Query(Role.PUBLIC, description="Caller role: admin, dean, owner or public"),
    actor: Optional[str] = Query(None, description="Caller identity, required for the owner view"),
) -> VisibilityPolicy:
    if role is Role.OWNER and not actor:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="The owner view needs an actor",
        )
    return VisibilityPolicy(role=role, actor=actor)
