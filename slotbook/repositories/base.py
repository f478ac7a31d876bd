"""
Abstract repository interfaces - the read/write ports the scheduling core depends on.
Implementations return normalized value types, never raw rows.
"""
import uuid
from abc import ABC, abstractmethod
from datetime import date, time
from typing import Optional, Sequence

from slotbook.schemas.api_responses import BookingServiceItem
from slotbook.schemas.scheduling import (
    CommittedInterval,
    DateOverrideRule,
    TimeOffEntry,
    WeeklyHoursRule,
)


class HoursRepository(ABC):
    """Weekly opening hours and date overrides."""

    @abstractmethod
    async def get_weekly_hours(self, company_id: uuid.UUID, day_in_week: str) -> Optional[WeeklyHoursRule]:
        """The weekly row for a weekday name (monday..sunday), or None when closed."""
        ...

    @abstractmethod
    async def get_override(self, company_id: uuid.UUID, day: date) -> Optional[DateOverrideRule]:
        """The override row for a calendar date, or None when there is none."""
        ...


class RosterRepository(ABC):
    """Company staff."""

    @abstractmethod
    async def list_staff(self, company_id: uuid.UUID) -> list:
        """
        All staff of a company in stable order.
        Each item exposes .id and .available_for_booking.
        """
        ...


class BookingRepository(ABC):
    """Committed intervals, staff time off, and the booking write path."""

    @abstractmethod
    async def list_committed_intervals(
        self,
        company_id: uuid.UUID,
        day: date,
        staff_ids: list[uuid.UUID],
    ) -> list[CommittedInterval]:
        """Non-cancelled bookings for the date assigned to any of staff_ids."""
        ...

    @abstractmethod
    async def list_time_offs(self, day: date, staff_ids: list[uuid.UUID]) -> list[TimeOffEntry]:
        """Time off entries for the date for any of staff_ids."""
        ...

    @abstractmethod
    async def insert_booking(
        self,
        company_id: uuid.UUID,
        staff_id: uuid.UUID,
        day: date,
        time_from: time,
        time_to: time,
        duration_minutes: int,
        user_id: Optional[str] = None,
        service_id: Optional[str] = None,
        client_note: Optional[str] = None,
        services: Sequence[BookingServiceItem] = (),
    ) -> uuid.UUID:
        """
        Write one confirmed booking with its service and addon line items and
        return its id. Addons with a non-positive count are not stored.
        Raises BookingOverlapError when storage rejects an overlapping interval;
        nothing of the booking is kept in that case.
        """
        ...


class BookingOverlapError(Exception):
    """Storage rejected a booking that overlaps another on the same staff member."""
    pass


class SchedulingRepositories:
    """The three ports bundled for injection into the scheduling services."""

    def __init__(self, hours: HoursRepository, roster: RosterRepository, bookings: BookingRepository):
        self.hours = hours
        self.roster = roster
        self.bookings = bookings
