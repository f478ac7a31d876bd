"""
Opening hours models - the weekly recurring schedule and date-specific overrides.
Both are edited by the admin hours screen and only read by the scheduling core.
"""
import uuid
from datetime import date, time
from typing import Optional
from sqlalchemy import String, Text, Date, Time, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from slotbook.database import Base


class WeeklyHours(Base):
    __tablename__ = "company_weekly_hours"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    company_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("companies.id"), nullable=False
    )
    day_in_week: Mapped[str] = mapped_column(
        String(10), nullable=False
    )  # monday .. sunday
    from_time: Mapped[time] = mapped_column(Time, nullable=False)
    to_time: Mapped[time] = mapped_column(Time, nullable=False)
    break_from_time: Mapped[Optional[time]] = mapped_column(Time)
    break_to_time: Mapped[Optional[time]] = mapped_column(Time)

    company: Mapped["Company"] = relationship(back_populates="weekly_hours")

    __table_args__ = (
        UniqueConstraint("company_id", "day_in_week", name="uq_weekly_hours_company_day"),
    )

    def __repr__(self) -> str:
        return f"<WeeklyHours {self.day_in_week} {self.from_time}-{self.to_time}>"


class DateOverride(Base):
    __tablename__ = "company_date_overrides"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    company_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("companies.id"), nullable=False
    )
    override_date: Mapped[date] = mapped_column("date", Date, nullable=False)

    # Null boundaries: closed all day (or, under the merge policy, "use the weekly value")
    from_hour: Mapped[Optional[time]] = mapped_column(Time)
    to_hour: Mapped[Optional[time]] = mapped_column(Time)
    break_from: Mapped[Optional[time]] = mapped_column(Time)
    break_to: Mapped[Optional[time]] = mapped_column(Time)
    message: Mapped[Optional[str]] = mapped_column(Text)

    company: Mapped["Company"] = relationship(back_populates="date_overrides")

    __table_args__ = (
        UniqueConstraint("company_id", "date", name="uq_date_override_company_date"),
    )

    def __repr__(self) -> str:
        return f"<DateOverride {self.override_date} {self.from_hour}-{self.to_hour}>"
