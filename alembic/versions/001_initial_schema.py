"""Initial schema: companies, opening hours, staff, time off, bookings and their line items.

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # gist operator classes for uuid equality inside the exclusion constraint
    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")

    # Companies
    op.create_table(
        "companies",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # Weekly opening hours
    op.create_table(
        "company_weekly_hours",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("company_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("companies.id"), nullable=False),
        sa.Column("day_in_week", sa.String(10), nullable=False),
        sa.Column("from_time", sa.Time, nullable=False),
        sa.Column("to_time", sa.Time, nullable=False),
        sa.Column("break_from_time", sa.Time),
        sa.Column("break_to_time", sa.Time),
        sa.UniqueConstraint("company_id", "day_in_week", name="uq_weekly_hours_company_day"),
        sa.CheckConstraint("from_time < to_time", name="ck_weekly_hours_window"),
        sa.CheckConstraint(
            "(break_from_time IS NULL AND break_to_time IS NULL) OR "
            "(from_time <= break_from_time AND break_from_time < break_to_time AND break_to_time <= to_time)",
            name="ck_weekly_hours_break",
        ),
    )

    # Date overrides (holidays, shortened days)
    op.create_table(
        "company_date_overrides",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("company_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("companies.id"), nullable=False),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("from_hour", sa.Time),
        sa.Column("to_hour", sa.Time),
        sa.Column("break_from", sa.Time),
        sa.Column("break_to", sa.Time),
        sa.Column("message", sa.Text),
        sa.UniqueConstraint("company_id", "date", name="uq_date_override_company_date"),
    )

    # Staff
    op.create_table(
        "staff",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("company_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("companies.id"), nullable=False),
        sa.Column("full_name", sa.String(100), nullable=False),
        sa.Column("available_for_booking", sa.Boolean, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_staff_company_id", "staff", ["company_id"])

    # Staff time off
    op.create_table(
        "staff_time_offs",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("staff_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("staff.id"), nullable=False),
        sa.Column("day", sa.Date, nullable=False),
        sa.Column("all_day", sa.Boolean, server_default=sa.true()),
        sa.Column("from_time", sa.Time),
        sa.Column("to_time", sa.Time),
        sa.Column("reason", sa.String(20), server_default="vacation"),
    )
    op.create_index("ix_staff_time_offs_staff_day", "staff_time_offs", ["staff_id", "day"])

    # Bookings
    op.create_table(
        "bookings",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("company_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("companies.id"), nullable=False),
        sa.Column("staff_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("staff.id"), nullable=True),
        sa.Column("user_id", sa.String(100)),
        sa.Column("service_id", sa.String(100)),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("time_from", sa.Time, nullable=False),
        sa.Column("time_to", sa.Time, nullable=False),
        sa.Column("duration_minutes", sa.Integer, nullable=False),
        sa.Column("client_note", sa.Text),
        sa.Column("status", sa.String(20), server_default="confirmed"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("time_from < time_to", name="ck_bookings_interval"),
    )
    op.create_index("ix_bookings_company_date", "bookings", ["company_id", "date"])
    op.create_index("ix_bookings_staff_date", "bookings", ["staff_id", "date"])
    op.create_index("ix_bookings_status", "bookings", ["status"])

    # Booking line items: selected services and their addons
    op.create_table(
        "booking_services",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("booking_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False),
        sa.Column("service_id", sa.String(100), nullable=False),
        sa.Column("duration_minutes", sa.Integer, server_default="0"),
    )
    op.create_index("ix_booking_services_booking_id", "booking_services", ["booking_id"])

    op.create_table(
        "booking_service_addons",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("booking_service_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("booking_services.id", ondelete="CASCADE"), nullable=False),
        sa.Column("addon_id", sa.String(100), nullable=False),
        sa.Column("count", sa.Integer, server_default="1"),
        sa.CheckConstraint("count > 0", name="ck_booking_service_addons_count"),
    )

    # No two live bookings of one staff member may overlap ([) ranges, so touching is fine).
    # A losing concurrent insert fails with SQLSTATE 23P01.
    op.execute(
        """
        ALTER TABLE bookings ADD CONSTRAINT bookings_no_staff_overlap
        EXCLUDE USING gist (
            staff_id WITH =,
            tsrange(date + time_from, date + time_to, '[)') WITH &&
        )
        WHERE (staff_id IS NOT NULL AND status <> 'cancelled')
        """
    )


def downgrade() -> None:
    op.execute("ALTER TABLE bookings DROP CONSTRAINT IF EXISTS bookings_no_staff_overlap")
    op.drop_table("booking_service_addons")
    op.drop_table("booking_services")
    op.drop_table("bookings")
    op.drop_table("staff_time_offs")
    op.drop_table("staff")
    op.drop_table("company_date_overrides")
    op.drop_table("company_weekly_hours")
    op.drop_table("companies")
