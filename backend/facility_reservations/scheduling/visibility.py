"""
Role-based visibility of reservations.

Applied once, before calendar counts or conflict lists are computed, so no
call site has to remember its own filter.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from facility_reservations.domain.models import Reservation, ReservationStatus


class Role(str, Enum):
    ADMIN = "admin"
    DEAN = "dean"
    OWNER = "owner"
    PUBLIC = "public"


@dataclass(frozen=True)
class VisibilityPolicy:
    role: Role = Role.PUBLIC
    actor: str | None = None

    def __post_init__(self) -> None:
        if self.role is Role.OWNER and not self.actor:
            raise ValueError("Owner visibility needs the actor whose reservations are shown")

    @classmethod
    def full(cls) -> "VisibilityPolicy":
        return cls(Role.ADMIN)

    def allows(self, reservation: Reservation) -> bool:
        if self.role in (Role.ADMIN, Role.DEAN):
            return True
        if self.role is Role.OWNER:
            return reservation.reserved_by == self.actor
        return reservation.status is ReservationStatus.APPROVED

    def apply(self, reservations: Iterable[Reservation]) -> list[Reservation]:
        return [r for r in reservations if self.allows(r)]
