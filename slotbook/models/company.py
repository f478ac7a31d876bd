"""
Company model - a salon or service business taking bookings.
Only the fields the scheduling core reads live here; profile data is owned elsewhere.
"""
import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Boolean, DateTime
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from slotbook.database import Base


class Company(Base):
    __tablename__ = "companies"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    # Relationships
    weekly_hours: Mapped[list["WeeklyHours"]] = relationship(back_populates="company")
    date_overrides: Mapped[list["DateOverride"]] = relationship(back_populates="company")
    staff: Mapped[list["Staff"]] = relationship(back_populates="company")

    def __repr__(self) -> str:
        return f"<Company {self.name}>"
