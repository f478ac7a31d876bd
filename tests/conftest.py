"""
Test configuration and fixtures.
Uses SQLite in-memory for repository tests and in-memory repositories for the
scheduling services, so the slot engine is exercised without any database.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import uuid
from datetime import date
from types import SimpleNamespace

import pytest
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from slotbook.config import Settings
from slotbook.database import Base
from slotbook import models  # noqa: F401  (registers tables on Base.metadata)
from slotbook.repositories.base import SchedulingRepositories

from factories import (
    MemoryBookingRepository,
    MemoryHoursRepository,
    MemoryRosterRepository,
    staff_member,
    weekly,
)


@pytest.fixture
async def db():
    """In-memory SQLite database for tests."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session
    await engine.dispose()

@pytest.fixture
def settings():
    """Settings with defaults, independent of the environment."""
    return Settings(database_url="sqlite+aiosqlite:///:memory:", _env_file=None)

@pytest.fixture
def company_id():
    return uuid.uuid4()

@pytest.fixture
def make_repos():
    """Build SchedulingRepositories backed by memory."""

    def _make(weekly=None, overrides=None, staff=None, bookings=None, time_offs=None, race_writes=None):
        return SchedulingRepositories(
            hours=MemoryHoursRepository(weekly, overrides),
            roster=MemoryRosterRepository(staff),
            bookings=MemoryBookingRepository(bookings, time_offs, race_writes),
        )

    return _make

@pytest.fixture
def salon(company_id, make_repos):
    """
    One company open Mon-Fri 09:00-17:00 with a 12:00-12:30 break on Wednesday,
    two bookable stylists (A, B) and one non-bookable trainee.
    2026-02-16 is a Monday.
    """
    stylist_a = staff_member()
    stylist_b = staff_member()
    trainee = staff_member(available=False)
    hours = {
        (company_id, name): weekly(name, "09:00", "17:00")
        for name in ("monday", "tuesday", "thursday", "friday")
    }
    hours[(company_id, "wednesday")] = weekly("wednesday", "09:00", "17:00", "12:00", "12:30")

    def _build(overrides=None, bookings=None, time_offs=None, race_writes=None):
        repos = make_repos(
            weekly=hours,
            overrides=overrides,
            staff={company_id: [stylist_a, stylist_b, trainee]},
            bookings=bookings,
            time_offs=time_offs,
            race_writes=race_writes,
        )
        return repos

    return SimpleNamespace(
        company_id=company_id,
        a=stylist_a.id,
        b=stylist_b.id,
        trainee=trainee.id,
        build=_build,
        monday=date(2026, 2, 16),
        wednesday=date(2026, 2, 18),
        sunday=date(2026, 2, 22),
    )
