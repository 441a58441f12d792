from facility_reservations.stores.interfaces import AssetCatalog, ReservationStore
from facility_reservations.stores.memory import InMemoryAssetCatalog, InMemoryReservationStore

__all__ = [
    "AssetCatalog",
    "ReservationStore",
    "InMemoryAssetCatalog",
    "InMemoryReservationStore",
]
