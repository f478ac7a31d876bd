"""
Booking models - a committed interval on one staff member's day, and its service line items.

Overlap between confirmed bookings of the same staff member is rejected by the
bookings_no_staff_overlap exclusion constraint (PostgreSQL, see alembic 001).
"""
import uuid
from datetime import datetime, timezone, date, time
from typing import Optional
from sqlalchemy import String, Text, Integer, DateTime, Date, Time, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from slotbook.database import Base

BOOKING_OVERLAP_CONSTRAINT = "bookings_no_staff_overlap"


class Booking(Base):
    __tablename__ = "bookings"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    company_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("companies.id"), nullable=False
    )
    # Unassigned bookings block nobody
    staff_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True), ForeignKey("staff.id"), nullable=True
    )
    user_id: Mapped[Optional[str]] = mapped_column(String(100))
    service_id: Mapped[Optional[str]] = mapped_column(String(100))

    # Half-open [time_from, time_to) on the company's local date
    booking_date: Mapped[date] = mapped_column("date", Date, nullable=False)
    time_from: Mapped[time] = mapped_column(Time, nullable=False)
    time_to: Mapped[time] = mapped_column(Time, nullable=False)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)

    client_note: Mapped[Optional[str]] = mapped_column(Text)

    # Status
    status: Mapped[str] = mapped_column(
        String(20), default="confirmed"
    )  # confirmed, cancelled

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc)
    )

    # Line items, written in the same flush as the booking
    services: Mapped[list["BookingService"]] = relationship(
        back_populates="booking", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("ix_bookings_company_date", "company_id", "date"),
        Index("ix_bookings_staff_date", "staff_id", "date"),
        Index("ix_bookings_status", "status"),
    )

    def __repr__(self) -> str:
        return f"<Booking {self.booking_date} {self.time_from}-{self.time_to} staff={self.staff_id} status={self.status}>"


class BookingService(Base):
    """One service selected for a booking. Booking.service_id keeps the first for listings."""
    __tablename__ = "booking_services"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    booking_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False
    )
    service_id: Mapped[str] = mapped_column(String(100), nullable=False)
    duration_minutes: Mapped[int] = mapped_column(Integer, default=0)

    booking: Mapped["Booking"] = relationship(back_populates="services")
    addons: Mapped[list["BookingServiceAddon"]] = relationship(
        back_populates="booking_service", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("ix_booking_services_booking_id", "booking_id"),
    )

    def __repr__(self) -> str:
        return f"<BookingService {self.service_id} booking={self.booking_id}>"


class BookingServiceAddon(Base):
    __tablename__ = "booking_service_addons"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    booking_service_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("booking_services.id", ondelete="CASCADE"), nullable=False
    )
    addon_id: Mapped[str] = mapped_column(String(100), nullable=False)
    count: Mapped[int] = mapped_column(Integer, default=1)

    booking_service: Mapped["BookingService"] = relationship(back_populates="addons")

    def __repr__(self) -> str:
        return f"<BookingServiceAddon {self.addon_id} x{self.count}>"
