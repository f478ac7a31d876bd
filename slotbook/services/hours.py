"""
Hours resolver - the effective open window for one company on one date.

A date override row takes precedence over the weekly schedule. How a partial
override (only one boundary set) combines with the weekly row is governed by
the partial override policy:

- merge:  override boundaries apply one by one; a missing boundary comes
          from the weekly row for that weekday.
- strict: the override alone defines the day; a missing boundary means closed.

In both policies an override with neither boundary means closed all day, and
a missing weekly row with no override means closed.
"""
import logging
import uuid
from datetime import date
from typing import Optional

from slotbook.schemas.scheduling import (
    DateOverrideRule,
    OpeningWindow,
    WeeklyHoursRule,
    weekday_name,
)

logger = logging.getLogger(__name__)

MERGE = "merge"
STRICT = "strict"


def resolve_window(
    weekly: Optional[WeeklyHoursRule],
    override: Optional[DateOverrideRule],
    policy: str = MERGE,
) -> Optional[OpeningWindow]:
    """
    Combine the weekly row and the override row for a date.
    Returns None when the company is closed that day.
    """
    if policy not in (MERGE, STRICT):
        raise ValueError(f"Unknown partial override policy: {policy!r}")

    if override is None:
        if weekly is None:
            return None
        return _window(weekly.open_from, weekly.open_to, weekly.break_from, weekly.break_to)

    if override.is_closed:
        return None

    open_from = override.open_from
    open_to = override.open_to
    if policy == MERGE and weekly is not None:
        if open_from is None:
            open_from = weekly.open_from
        if open_to is None:
            open_to = weekly.open_to

    if open_from is None or open_to is None:
        return None

    break_from, break_to = override.break_from, override.break_to
    if break_from is None or break_to is None:
        break_from = break_to = None
        if policy == MERGE and weekly is not None and weekly.break_from is not None:
            # Weekly break survives only while it still fits the shifted hours
            if open_from <= weekly.break_from and weekly.break_to <= open_to:
                break_from, break_to = weekly.break_from, weekly.break_to

    return _window(open_from, open_to, break_from, break_to)


def _window(open_from, open_to, break_from, break_to) -> Optional[OpeningWindow]:
    if open_from >= open_to:
        logger.warning("Ignoring inverted opening window %s-%s", open_from, open_to)
        return None
    if break_from is not None and not (open_from <= break_from < break_to <= open_to):
        break_from = break_to = None
    return OpeningWindow(
        open_from=open_from,
        open_to=open_to,
        break_from=break_from,
        break_to=break_to,
    )


async def resolve_company_window(
    hours_repo,
    company_id: uuid.UUID,
    day: date,
    policy: str = MERGE,
) -> Optional[OpeningWindow]:
    """Load the override and weekly rows for a company's date and resolve them."""
    override = await hours_repo.get_override(company_id, day)
    weekly = None
    # Under strict, an existing override makes the weekly row irrelevant
    if override is None or policy == MERGE:
        weekly = await hours_repo.get_weekly_hours(company_id, weekday_name(day))

    window = resolve_window(weekly, override, policy)
    if window is None:
        logger.debug(
            "Company closed on %s", day.isoformat(),
            extra={"company_id": str(company_id), "booking_date": day.isoformat()},
        )
    return window
