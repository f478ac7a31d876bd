"""
Availability checker - slot listing for one company day, and the boolean
"does this company have a free slot in my time range" used to filter search
results across many companies.

One filtering pass often asks about the same company day several times, so
slot lists can be shared through a SlotMemo scoped to that pass. Nothing is
cached across requests.
"""
import logging
import uuid
from datetime import date, time, timedelta, datetime
from typing import Iterable, Optional

from slotbook.config import Settings, get_settings
from slotbook.schemas.scheduling import InvalidSchedulingInput
from slotbook.services.busy_index import load_busy_intervals
from slotbook.services.hours import resolve_company_window
from slotbook.services.roster import list_bookable_resources
from slotbook.services.slots import generate_slots

logger = logging.getLogger(__name__)


class SlotMemo:
    """Per-pass memo of slot lists keyed by (company_id, date, duration)."""

    def __init__(self):
        self._slots: dict[tuple, list[time]] = {}
        self.hits = 0

    def get(self, key: tuple) -> Optional[list[time]]:
        slots = self._slots.get(key)
        if slots is not None:
            self.hits += 1
        return slots

    def put(self, key: tuple, slots: list[time]) -> None:
        self._slots[key] = slots

    def __len__(self) -> int:
        return len(self._slots)


def validate_duration(duration_minutes) -> int:
    if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int):
        raise InvalidSchedulingInput(f"Duration must be an integer number of minutes, got {duration_minutes!r}")
    if duration_minutes <= 0:
        raise InvalidSchedulingInput(f"Duration must be positive, got {duration_minutes}")
    return duration_minutes


async def list_available_slots(
    repos,
    company_id: uuid.UUID,
    day: date,
    duration_minutes: int,
    settings: Optional[Settings] = None,
    memo: Optional[SlotMemo] = None,
) -> list[time]:
    """Resolve hours, roster and busy index for the day, then generate slots."""
    validate_duration(duration_minutes)
    if not isinstance(day, date):
        raise InvalidSchedulingInput(f"Expected a calendar date, got {day!r}")
    settings = settings or get_settings()

    key = (company_id, day, duration_minutes)
    if memo is not None:
        cached = memo.get(key)
        if cached is not None:
            return cached

    slots: list[time] = []
    window = await resolve_company_window(
        repos.hours, company_id, day, settings.partial_override_policy
    )
    if window is not None:
        resource_ids = await list_bookable_resources(repos.roster, company_id)
        if resource_ids:
            busy_index = await load_busy_intervals(repos.bookings, company_id, day, resource_ids)
            slots = generate_slots(
                window,
                busy_index,
                resource_ids,
                duration_minutes,
                step_minutes=settings.slot_step_minutes,
                apply_break=settings.apply_break_windows,
            )

    logger.debug(
        "Computed %d slots for %s (%d min)", len(slots), day.isoformat(), duration_minutes,
        extra={"company_id": str(company_id), "booking_date": day.isoformat()},
    )
    if memo is not None:
        memo.put(key, slots)
    return slots


def desired_range(
    desired_from: Optional[time],
    desired_to: Optional[time],
    default_window_minutes: int = 120,
) -> Optional[tuple[time, time]]:
    """
    Normalize the requested search range. No start: None (any time of day).
    No end: start + default window, capped at the end of the day.
    """
    if desired_from is None:
        return None
    if desired_to is None:
        end = datetime.combine(date.min, desired_from) + timedelta(minutes=default_window_minutes)
        desired_to = time.max if end.date() > date.min else end.time()
    if desired_to <= desired_from:
        raise InvalidSchedulingInput(f"Desired range end {desired_to} must be after start {desired_from}")
    return desired_from, desired_to


def any_slot_in_range(slots: Iterable[time], time_range: Optional[tuple[time, time]]) -> bool:
    """True when some slot s satisfies from <= s < to (or any slot when no range)."""
    if time_range is None:
        return any(True for _ in slots)
    start, end = time_range
    return any(start <= s < end for s in slots)


async def is_available(
    repos,
    company_id: uuid.UUID,
    day: date,
    duration_minutes: Optional[int] = None,
    desired_from: Optional[time] = None,
    desired_to: Optional[time] = None,
    settings: Optional[Settings] = None,
    memo: Optional[SlotMemo] = None,
) -> bool:
    """Whether the company has any slot starting inside the desired range on that date."""
    settings = settings or get_settings()
    duration = settings.availability_probe_duration_minutes if duration_minutes is None else duration_minutes
    validate_duration(duration)
    time_range = desired_range(desired_from, desired_to, settings.availability_default_window_minutes)

    slots = await list_available_slots(repos, company_id, day, duration, settings=settings, memo=memo)
    return any_slot_in_range(slots, time_range)


async def filter_available_companies(
    repos,
    company_ids: Iterable[uuid.UUID],
    day: date,
    duration_minutes: Optional[int] = None,
    desired_from: Optional[time] = None,
    desired_to: Optional[time] = None,
    settings: Optional[Settings] = None,
    memo: Optional[SlotMemo] = None,
) -> list[uuid.UUID]:
    """Keep, in input order, the companies with a qualifying slot."""
    memo = memo if memo is not None else SlotMemo()
    available = []
    for company_id in company_ids:
        if await is_available(
            repos,
            company_id,
            day,
            duration_minutes=duration_minutes,
            desired_from=desired_from,
            desired_to=desired_to,
            settings=settings,
            memo=memo,
        ):
            available.append(company_id)

    logger.info(
        "Availability filter kept %d companies for %s (memo hits=%d)",
        len(available), day.isoformat(), memo.hits,
    )
    return available
