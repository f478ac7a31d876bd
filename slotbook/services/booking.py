"""
Booking commit - auto-assign a staff member and write the booking.

Process:
1. Total the duration of the selected services and their addons
2. Check the requested range fits the resolved opening window (and misses the break)
3. Load the roster and a fresh busy index, pick the first free staff member
4. Insert with its service and addon line items; if the exclusion constraint
   rejects it (a concurrent writer won), reload and try again, bounded by
   booking_max_attempts

A rejection followed by "nobody free any more" is reported as concurrent_conflict
so the caller re-lists slots instead of offering the same time again.
"""
import logging
import uuid
from datetime import date, time
from typing import Optional

from slotbook.config import Settings, get_settings
from slotbook.repositories.base import BookingOverlapError
from slotbook.schemas.api_responses import BookingOutcome, BookingRequest, BookingServiceItem
from slotbook.schemas.scheduling import (
    Interval,
    InvalidSchedulingInput,
    NoResourceAvailable,
    format_time_of_day,
    from_seconds,
    parse_time_of_day,
    to_seconds,
)
from slotbook.services.assignment import assign, conflicts_with_break
from slotbook.services.busy_index import load_busy_intervals
from slotbook.services.hours import resolve_company_window
from slotbook.services.roster import list_bookable_resources

logger = logging.getLogger(__name__)


def compute_booking_duration(services: list[BookingServiceItem]) -> int:
    """Sum of service durations plus addon duration x count. Non-positive addon counts are ignored."""
    total = 0
    for service in services:
        total += max(0, service.duration)
        for addon in service.addons:
            if addon.count <= 0:
                continue
            total += max(0, addon.duration) * addon.count
    return total


def booking_interval(start: time, duration_minutes: int) -> Interval:
    """The half-open range a booking occupies. Must end on the same day."""
    if duration_minutes <= 0:
        raise InvalidSchedulingInput(f"Invalid booking duration: {duration_minutes}")
    end_seconds = to_seconds(start) + duration_minutes * 60
    if end_seconds >= 24 * 3600:
        raise InvalidSchedulingInput(f"Booking starting {start} for {duration_minutes} min runs past midnight")
    return Interval(start=start, end=from_seconds(end_seconds))


def _outcome(status: str, day: date, interval: Interval, attempts: int = 0,
             booking_id: Optional[uuid.UUID] = None, staff_id: Optional[uuid.UUID] = None) -> BookingOutcome:
    return BookingOutcome(
        status=status,
        booking_id=str(booking_id) if booking_id else None,
        staff_id=str(staff_id) if staff_id else None,
        date=day.isoformat(),
        time_from=format_time_of_day(interval.start),
        time_to=format_time_of_day(interval.end),
        attempts=attempts,
    )


async def create_booking(
    repos,
    request: BookingRequest,
    user_id: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> BookingOutcome:
    """Assign a free staff member to the requested time and persist the booking."""
    settings = settings or get_settings()
    company_id = request.company_id
    day = request.date
    start = parse_time_of_day(request.time)
    duration = compute_booking_duration(request.services)
    interval = booking_interval(start, duration)
    log_extra = {"company_id": str(company_id), "booking_date": day.isoformat()}

    window = await resolve_company_window(
        repos.hours, company_id, day, settings.partial_override_policy
    )
    if (
        window is None
        or not window.contains(interval)
        or (settings.apply_break_windows and conflicts_with_break(window, interval))
    ):
        logger.info(
            "Booking %s-%s outside opening hours", interval.start, interval.end,
            extra={**log_extra, "error_code": "outside_opening_hours"},
        )
        return _outcome("outside_opening_hours", day, interval)

    resource_ids = await list_bookable_resources(repos.roster, company_id)
    lost_race = False

    for attempt in range(1, settings.booking_max_attempts + 1):
        busy_index = await load_busy_intervals(repos.bookings, company_id, day, resource_ids)
        choice = assign(company_id, day, interval.start, interval.end, resource_ids, busy_index)
        if isinstance(choice, NoResourceAvailable):
            status = "concurrent_conflict" if lost_race else choice.code
            return _outcome(status, day, interval, attempts=attempt)

        try:
            booking_id = await repos.bookings.insert_booking(
                company_id=company_id,
                staff_id=choice,
                day=day,
                time_from=interval.start,
                time_to=interval.end,
                duration_minutes=duration,
                user_id=user_id or request.user_id,
                service_id=request.services[0].service_id,
                client_note=request.note,
                services=request.services,
            )
        except BookingOverlapError:
            lost_race = True
            logger.warning(
                "Concurrent booking took staff member, recomputing (attempt %d/%d)",
                attempt, settings.booking_max_attempts,
                extra={**log_extra, "staff_id": str(choice), "error_code": "concurrent_conflict"},
            )
            continue

        logger.info(
            "Booking confirmed %s-%s", interval.start, interval.end,
            extra={**log_extra, "staff_id": str(choice), "booking_id": str(booking_id)},
        )
        return _outcome("confirmed", day, interval, attempts=attempt, booking_id=booking_id, staff_id=choice)

    return _outcome("concurrent_conflict", day, interval, attempts=settings.booking_max_attempts)
