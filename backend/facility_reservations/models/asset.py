"""
Asset model: rooms and vehicles that can be reserved.

Reference data owned by the facilities office; the reservation engine only
reads it.
"""

from sqlalchemy import Column, Integer, String, JSON, CheckConstraint, Index

from facility_reservations.db.base import Base, TimestampMixin


class Asset(Base, TimestampMixin):
    __tablename__ = "assets"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    capacity = Column(Integer, nullable=False, default=0)
    asset_type = Column(String(20), nullable=False)  # venue, vehicle
    facilities = Column(JSON, nullable=False, default=list)

    __table_args__ = (
        CheckConstraint("capacity >= 0", name="check_asset_capacity_non_negative"),
        CheckConstraint("asset_type IN ('venue', 'vehicle')", name="check_asset_type"),
        Index("ix_assets_type_name", "asset_type", "name"),
    )

    def __repr__(self) -> str:
        return f"<Asset(id={self.id}, name={self.name}, type={self.asset_type})>"
