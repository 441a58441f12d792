"""Initial schema: assets and reservations with window indexes and constraints.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "assets",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("asset_type", sa.String(20), nullable=False),
        sa.Column("facilities", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("capacity >= 0", name="check_asset_capacity_non_negative"),
        sa.CheckConstraint("asset_type IN ('venue', 'vehicle')", name="check_asset_type"),
    )
    op.create_index("ix_assets_id", "assets", ["id"])
    op.create_index("ix_assets_type_name", "assets", ["asset_type", "name"])

    op.create_table(
        "reservations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("asset_id", sa.Integer(), sa.ForeignKey("assets.id"), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.String(2000), nullable=False, server_default=""),
        sa.Column("category", sa.String(100), nullable=False, server_default=""),
        sa.Column("info_type", sa.String(100), nullable=False, server_default=""),
        sa.Column("people_tag", sa.JSON(), nullable=False),
        sa.Column("reserved_by", sa.String(255), nullable=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("range_days", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("time_start", sa.Time(), nullable=False),
        sa.Column("time_end", sa.Time(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'PENDING'")),
        sa.Column("approved_by", sa.String(255), nullable=True),
        sa.Column("declined_by", sa.String(255), nullable=True),
        sa.Column("resolution_reason", sa.String(1000), nullable=True),
        sa.Column("finished_on", sa.Date(), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("range_days >= 1", name="check_reservation_range_positive"),
        sa.CheckConstraint("time_end > time_start", name="check_reservation_time_order"),
        sa.CheckConstraint(
            "status IN ('PENDING', 'APPROVED', 'REJECTED')", name="check_reservation_status"
        ),
        sa.CheckConstraint(
            "(status = 'PENDING' AND approved_by IS NULL AND declined_by IS NULL)"
            " OR (status = 'APPROVED' AND approved_by IS NOT NULL AND declined_by IS NULL)"
            " OR (status = 'REJECTED' AND declined_by IS NOT NULL AND approved_by IS NULL)",
            name="check_reservation_resolver",
        ),
    )
    op.create_index("ix_reservations_id", "reservations", ["id"])
    op.create_index("ix_reservations_reserved_by", "reservations", ["reserved_by"])
    # Conflict detection: "active reservations of asset X touching days A..B"
    op.create_index("ix_reservations_asset_window", "reservations", ["asset_id", "date", "end_date"])
    # Calendar month and day views query by window without an asset
    op.create_index("ix_reservations_window", "reservations", ["date", "end_date"])
    # Past-events listing filters on finished_on
    op.create_index("ix_reservations_finished_on", "reservations", ["finished_on"])


def downgrade() -> None:
    op.drop_table("reservations")
    op.drop_table("assets")
