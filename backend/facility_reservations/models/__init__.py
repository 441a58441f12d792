from facility_reservations.models.asset import Asset
from facility_reservations.models.reservation import Reservation

__all__ = ["Asset", "Reservation"]
