"""
Staff model - the bookable resources of a company, plus their time off.
"""
import uuid
from datetime import datetime, timezone, date, time
from typing import Optional
from sqlalchemy import String, Boolean, DateTime, Date, Time, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from slotbook.database import Base


class Staff(Base):
    __tablename__ = "staff"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    company_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("companies.id"), nullable=False
    )
    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    available_for_booking: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    company: Mapped["Company"] = relationship(back_populates="staff")
    time_offs: Mapped[list["StaffTimeOff"]] = relationship(back_populates="staff")

    __table_args__ = (
        Index("ix_staff_company_id", "company_id"),
    )

    def __repr__(self) -> str:
        return f"<Staff {self.full_name} bookable={self.available_for_booking}>"


class StaffTimeOff(Base):
    __tablename__ = "staff_time_offs"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    staff_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("staff.id"), nullable=False
    )
    day: Mapped[date] = mapped_column(Date, nullable=False)
    all_day: Mapped[bool] = mapped_column(Boolean, default=True)
    from_time: Mapped[Optional[time]] = mapped_column(Time)
    to_time: Mapped[Optional[time]] = mapped_column(Time)
    reason: Mapped[str] = mapped_column(
        String(20), default="vacation"
    )  # sick_day, vacation, training

    staff: Mapped["Staff"] = relationship(back_populates="time_offs")

    __table_args__ = (
        Index("ix_staff_time_offs_staff_day", "staff_id", "day"),
    )

    def __repr__(self) -> str:
        return f"<StaffTimeOff {self.day} all_day={self.all_day} reason={self.reason}>"
