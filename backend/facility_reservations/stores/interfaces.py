"""Store interfaces (repository pattern).

Stores are swappable and return domain models. Every status write is a
compare-and-set against the stored version, so two actors resolving the same
reservation cannot both win.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Any

from facility_reservations.domain.models import (
    Asset,
    AssetType,
    Reservation,
    ReservationDraft,
    ReservationFilter,
    ReservationStatus,
)

EDITABLE_FIELDS = frozenset({"title", "description", "category", "info_type", "people_tag"})


class ReservationStore(ABC):
    """Interface for reservation persistence operations."""

    @abstractmethod
    def list_reservations(self, query: ReservationFilter | None = None) -> list[Reservation]:
        """Return matching reservations ordered by id ascending."""
        ...

    @abstractmethod
    def get_reservation(self, reservation_id: int) -> Reservation:
        """Return the current stored copy.

        Raises:
            ReservationNotFoundError: If no reservation has this id.
        """
        ...

    @abstractmethod
    def create_reservation(self, draft: ReservationDraft, now: datetime) -> Reservation:
        """Insert a draft. The stored status is always PENDING."""
        ...

    @abstractmethod
    def update_status(
        self,
        reservation_id: int,
        new_status: ReservationStatus,
        actor: str,
        now: datetime,
        reason: str | None = None,
        expected_version: int | None = None,
    ) -> Reservation:
        """Move a PENDING reservation to APPROVED or REJECTED.

        Raises:
            InvalidStateError: If the stored reservation is not PENDING.
            StaleStateError: If ``expected_version`` no longer matches, or the
                row changed between the read and the write.
        """
        ...

    @abstractmethod
    def update_details(
        self,
        reservation_id: int,
        changes: dict[str, Any],
        now: datetime,
        expected_version: int | None = None,
    ) -> Reservation:
        """Edit descriptive fields of a PENDING reservation."""
        ...

    @abstractmethod
    def mark_finished(
        self,
        reservation_id: int,
        finished_on: date,
        now: datetime,
        expected_version: int | None = None,
    ) -> Reservation:
        """Record the day a reservation's occurrence concluded."""
        ...


class AssetCatalog(ABC):
    """Read-only view of the reservable assets."""

    @abstractmethod
    def get_asset(self, asset_id: int) -> Asset | None:
        """Return an asset by id, or None if not found."""
        ...

    @abstractmethod
    def list_assets(self, asset_type: AssetType | None = None) -> list[Asset]:
        """Return assets ordered by name, optionally of one type."""
        ...
