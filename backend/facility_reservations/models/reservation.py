"""
Reservation model: one request to hold an asset over a span of days.

Key design decisions:
- `end_date` is denormalized (date + range_days - 1) so date-window queries
  are plain index range scans
- Composite index on (asset_id, date, end_date) serves conflict detection
- `version` column enables optimistic locking for concurrent approvals
- Status never returns to PENDING; the CHECK constraints keep the
  approved_by/declined_by columns consistent with it
"""

from sqlalchemy import (
    Column, Integer, String, Date, Time, JSON, ForeignKey, Index, CheckConstraint,
)

from facility_reservations.db.base import Base, TimestampMixin


class Reservation(Base, TimestampMixin):
    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, index=True)
    asset_id = Column(Integer, ForeignKey("assets.id"), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(String(2000), nullable=False, default="")
    category = Column(String(100), nullable=False, default="")
    info_type = Column(String(100), nullable=False, default="")
    people_tag = Column(JSON, nullable=False, default=list)
    reserved_by = Column(String(255), nullable=True, index=True)

    date = Column(Date, nullable=False)
    range_days = Column(Integer, nullable=False, default=1)
    end_date = Column(Date, nullable=False)
    time_start = Column(Time, nullable=False)
    time_end = Column(Time, nullable=False)

    status = Column(String(20), nullable=False, default="PENDING")
    approved_by = Column(String(255), nullable=True)
    declined_by = Column(String(255), nullable=True)
    resolution_reason = Column(String(1000), nullable=True)
    finished_on = Column(Date, nullable=True)

    # Optimistic locking version counter
    version = Column(Integer, nullable=False, default=1)

    __table_args__ = (
        CheckConstraint("range_days >= 1", name="check_reservation_range_positive"),
        CheckConstraint("time_end > time_start", name="check_reservation_time_order"),
        CheckConstraint(
            "status IN ('PENDING', 'APPROVED', 'REJECTED')", name="check_reservation_status"
        ),
        CheckConstraint(
            "(status = 'PENDING' AND approved_by IS NULL AND declined_by IS NULL)"
            " OR (status = 'APPROVED' AND approved_by IS NOT NULL AND declined_by IS NULL)"
            " OR (status = 'REJECTED' AND declined_by IS NOT NULL AND approved_by IS NULL)",
            name="check_reservation_resolver",
        ),
        Index("ix_reservations_asset_window", "asset_id", "date", "end_date"),
        Index("ix_reservations_window", "date", "end_date"),
        Index("ix_reservations_finished_on", "finished_on"),
    )

    def __repr__(self) -> str:
        return f"<Reservation(id={self.id}, asset={self.asset_id}, date={self.date}, status={self.status})>"
