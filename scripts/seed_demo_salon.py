"""
Seed a demo salon (weekly hours, a holiday override, two stylists) into the database.

Usage:
    python scripts/seed_demo_salon.py
"""
import asyncio
import logging
from datetime import date, time

from sqlalchemy import select

from slotbook.database import async_session_factory
from slotbook.models import Company, WeeklyHours, DateOverride, Staff

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEMO_COMPANY_NAME = "Studio Demo Salon"

WEEKLY_HOURS = {
    "monday": (time(9, 0), time(17, 0), time(12, 0), time(12, 30)),
    "tuesday": (time(9, 0), time(17, 0), time(12, 0), time(12, 30)),
    "wednesday": (time(9, 0), time(17, 0), time(12, 0), time(12, 30)),
    "thursday": (time(9, 0), time(19, 0), None, None),
    "friday": (time(9, 0), time(17, 0), None, None),
    "saturday": (time(8, 0), time(13, 0), None, None),
}

STAFF = [
    ("Jana Novak", True),
    ("Petra Horvath", True),
    ("Trainee", False),
]


async def seed():
    async with async_session_factory() as session:
        result = await session.execute(select(Company).where(Company.name == DEMO_COMPANY_NAME))
        existing = result.scalar_one_or_none()
        if existing:
            logger.info("Demo salon already exists (id=%s). Skipping.", existing.id)
            return

        company = Company(name=DEMO_COMPANY_NAME, is_active=True)
        session.add(company)
        await session.flush()

        for day_name, (open_from, open_to, break_from, break_to) in WEEKLY_HOURS.items():
            session.add(WeeklyHours(
                company_id=company.id,
                day_in_week=day_name,
                from_time=open_from,
                to_time=open_to,
                break_from_time=break_from,
                break_to_time=break_to,
            ))

        # Christmas: override row with no hours = closed all day
        session.add(DateOverride(
            company_id=company.id,
            override_date=date(date.today().year, 12, 25),
            message="Christmas",
        ))

        for full_name, bookable in STAFF:
            session.add(Staff(company_id=company.id, full_name=full_name, available_for_booking=bookable))

        await session.commit()
        logger.info("Seeded demo salon: %s (id=%s)", company.name, company.id)


if __name__ == "__main__":
    asyncio.run(seed())
