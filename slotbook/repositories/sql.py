"""
SQLAlchemy-backed repositories. This is the one place ORM rows become
scheduling value types.
"""
import logging
import uuid
from datetime import date, time
from typing import Optional, Sequence

from pydantic import ValidationError
from sqlalchemy import select, and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from slotbook.models.booking import (
    Booking,
    BookingService,
    BookingServiceAddon,
    BOOKING_OVERLAP_CONSTRAINT,
)
from slotbook.models.business_hours import WeeklyHours, DateOverride
from slotbook.models.staff import Staff, StaffTimeOff
from slotbook.repositories.base import (
    BookingOverlapError,
    BookingRepository,
    HoursRepository,
    RosterRepository,
    SchedulingRepositories,
)
from slotbook.schemas.api_responses import BookingServiceItem
from slotbook.schemas.scheduling import (
    CommittedInterval,
    DateOverrideRule,
    Interval,
    TimeOffEntry,
    WeeklyHoursRule,
)

logger = logging.getLogger(__name__)

# PostgreSQL exclusion_violation
EXCLUSION_VIOLATION_SQLSTATE = "23P01"


def weekly_rule_from_row(row: WeeklyHours) -> WeeklyHoursRule:
    """Normalize a weekly row. A break that breaks the invariant is dropped, not fatal."""
    try:
        return WeeklyHoursRule(
            day_in_week=row.day_in_week,
            open_from=row.from_time,
            open_to=row.to_time,
            break_from=row.break_from_time,
            break_to=row.break_to_time,
        )
    except ValidationError:
        logger.warning(
            "Dropping invalid break %s-%s on %s",
            row.break_from_time, row.break_to_time, row.day_in_week,
            extra={"company_id": str(row.company_id)},
        )
        return WeeklyHoursRule(
            day_in_week=row.day_in_week,
            open_from=row.from_time,
            open_to=row.to_time,
        )


def override_rule_from_row(row: DateOverride) -> DateOverrideRule:
    return DateOverrideRule(
        override_date=row.override_date,
        open_from=row.from_hour,
        open_to=row.to_hour,
        break_from=row.break_from,
        break_to=row.break_to,
        reason=row.message,
    )


def line_item_from_service(item: BookingServiceItem) -> BookingService:
    return BookingService(
        service_id=item.service_id,
        duration_minutes=max(0, item.duration),
        addons=[
            BookingServiceAddon(addon_id=addon.addon_id, count=addon.count)
            for addon in item.addons
            if addon.count > 0
        ],
    )


def is_overlap_violation(error: IntegrityError) -> bool:
    """True when an IntegrityError comes from the booking exclusion constraint."""
    orig = getattr(error, "orig", None)
    for attr in ("sqlstate", "pgcode"):
        if getattr(orig, attr, None) == EXCLUSION_VIOLATION_SQLSTATE:
            return True
    return BOOKING_OVERLAP_CONSTRAINT in str(orig if orig is not None else error)


class SqlHoursRepository(HoursRepository):
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_weekly_hours(self, company_id: uuid.UUID, day_in_week: str) -> Optional[WeeklyHoursRule]:
        result = await self.db.execute(
            select(WeeklyHours).where(
                and_(
                    WeeklyHours.company_id == company_id,
                    WeeklyHours.day_in_week == day_in_week,
                )
            )
        )
        row = result.scalar_one_or_none()
        return weekly_rule_from_row(row) if row else None

    async def get_override(self, company_id: uuid.UUID, day: date) -> Optional[DateOverrideRule]:
        result = await self.db.execute(
            select(DateOverride).where(
                and_(
                    DateOverride.company_id == company_id,
                    DateOverride.override_date == day,
                )
            )
        )
        row = result.scalar_one_or_none()
        return override_rule_from_row(row) if row else None


class SqlRosterRepository(RosterRepository):
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_staff(self, company_id: uuid.UUID) -> list[Staff]:
        result = await self.db.execute(
            select(Staff)
            .where(Staff.company_id == company_id)
            .order_by(Staff.created_at, Staff.id)
        )
        return list(result.scalars().all())


class SqlBookingRepository(BookingRepository):
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_committed_intervals(
        self,
        company_id: uuid.UUID,
        day: date,
        staff_ids: list[uuid.UUID],
    ) -> list[CommittedInterval]:
        if not staff_ids:
            return []
        result = await self.db.execute(
            select(Booking.staff_id, Booking.time_from, Booking.time_to).where(
                and_(
                    Booking.company_id == company_id,
                    Booking.booking_date == day,
                    Booking.staff_id.in_(staff_ids),
                    Booking.status != "cancelled",
                )
            )
        )
        committed = []
        for staff_id, time_from, time_to in result.all():
            if time_from >= time_to:
                logger.warning(
                    "Skipping booking with inverted times %s-%s", time_from, time_to,
                    extra={"company_id": str(company_id), "staff_id": str(staff_id)},
                )
                continue
            committed.append(
                CommittedInterval(staff_id=staff_id, interval=Interval(start=time_from, end=time_to))
            )
        return committed

    async def list_time_offs(self, day: date, staff_ids: list[uuid.UUID]) -> list[TimeOffEntry]:
        if not staff_ids:
            return []
        result = await self.db.execute(
            select(StaffTimeOff).where(
                and_(
                    StaffTimeOff.day == day,
                    StaffTimeOff.staff_id.in_(staff_ids),
                )
            )
        )
        return [
            TimeOffEntry(
                staff_id=row.staff_id,
                day=row.day,
                all_day=row.all_day,
                from_time=row.from_time,
                to_time=row.to_time,
                reason=row.reason,
            )
            for row in result.scalars().all()
        ]

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
        booking = Booking(
            company_id=company_id,
            staff_id=staff_id,
            booking_date=day,
            time_from=time_from,
            time_to=time_to,
            duration_minutes=duration_minutes,
            user_id=user_id,
            service_id=service_id,
            client_note=client_note,
            status="confirmed",
            services=[line_item_from_service(item) for item in services],
        )
        # One flush writes the booking and its line items; a rejection discards all of them
        self.db.add(booking)
        try:
            await self.db.flush()
        except IntegrityError as e:
            # The failed flush poisons the transaction; start over on a fresh one
            await self.db.rollback()
            if is_overlap_violation(e):
                raise BookingOverlapError(
                    f"Staff {staff_id} already booked within {time_from}-{time_to} on {day}"
                ) from e
            raise
        return booking.id


def sql_repositories(db: AsyncSession) -> SchedulingRepositories:
    """All three repositories on one session."""
    return SchedulingRepositories(
        hours=SqlHoursRepository(db),
        roster=SqlRosterRepository(db),
        bookings=SqlBookingRepository(db),
    )
