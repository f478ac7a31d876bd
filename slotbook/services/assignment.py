"""
Assignment selector - pick the staff member for a booking being committed.

Resources are tried in the caller's order (roster order) and the first one
with no overlapping busy interval wins, so identical inputs always give the
same answer. The read-check-write sequence around this is not atomic; the
storage exclusion constraint is what rejects a concurrent double booking.
"""
import logging
import uuid
from datetime import date, time
from typing import Optional, Union

from slotbook.schemas.scheduling import (
    Interval,
    InvalidSchedulingInput,
    NoResourceAvailable,
    to_seconds,
)
from slotbook.services.slots import is_resource_free, interval_seconds

logger = logging.getLogger(__name__)


def assign(
    company_id: Optional[uuid.UUID],
    booking_date: Optional[date],
    time_from: time,
    time_to: time,
    resource_ids: list[uuid.UUID],
    busy_index: dict,
) -> Union[uuid.UUID, NoResourceAvailable]:
    """Return the first free resource for [time_from, time_to), or NoResourceAvailable."""
    if time_from >= time_to:
        raise InvalidSchedulingInput(f"Booking start {time_from} must be before end {time_to}")

    start, end = to_seconds(time_from), to_seconds(time_to)
    for resource_id in resource_ids:
        busy = interval_seconds(busy_index.get(resource_id, ()))
        if is_resource_free(busy, start, end):
            return resource_id

    logger.info(
        "No staff free for %s-%s", time_from, time_to,
        extra={
            "company_id": str(company_id) if company_id else None,
            "booking_date": booking_date.isoformat() if booking_date else None,
            "error_code": "no_resource_available",
        },
    )
    return NoResourceAvailable(
        company_id=company_id,
        booking_date=booking_date,
        time_from=time_from,
        time_to=time_to,
        candidates_checked=len(resource_ids),
    )


def conflicts_with_break(window, interval: Interval) -> bool:
    """True when the interval overlaps the window's break."""
    brk = window.break_interval if window is not None else None
    return brk is not None and brk.overlaps(interval)
