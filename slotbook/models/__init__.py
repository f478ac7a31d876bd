"""
Database models - import all models here so Alembic can discover them.
"""
from slotbook.models.company import Company
from slotbook.models.business_hours import WeeklyHours, DateOverride
from slotbook.models.staff import Staff, StaffTimeOff
from slotbook.models.booking import Booking, BookingService, BookingServiceAddon

__all__ = [
    "Company",
    "WeeklyHours",
    "DateOverride",
    "Staff",
    "StaffTimeOff",
    "Booking",
    "BookingService",
    "BookingServiceAddon",
]
