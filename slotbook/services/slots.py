"""
Slot generator - bookable appointment start times for one company day.

Candidates are walked on a fixed grid (slot_step_minutes, 15 by default) from
the opening time, independent of the service duration, so a 37-minute service
still gets starts at :00, :15, :30 and :45. A candidate is feasible when at
least one resource has no busy interval overlapping [start, start + duration).
The break window blocks every resource equally.
"""
import logging
import uuid
from datetime import time
from typing import Iterable, Optional

from slotbook.schemas.scheduling import (
    Interval,
    OpeningWindow,
    format_time_of_day,
    from_seconds,
    to_seconds,
)

logger = logging.getLogger(__name__)

DEFAULT_STEP_MINUTES = 15


def intervals_overlap(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    """Half-open [a) vs [b) overlap. Touching endpoints do not overlap."""
    return start_a < end_b and start_b < end_a


def interval_seconds(intervals: Iterable[Interval]) -> list[tuple[int, int]]:
    return [(to_seconds(iv.start), to_seconds(iv.end)) for iv in intervals]


def is_resource_free(busy: list[tuple[int, int]], start: int, end: int) -> bool:
    return not any(intervals_overlap(start, end, b_start, b_end) for b_start, b_end in busy)


def generate_slots(
    window: Optional[OpeningWindow],
    busy_index: dict,
    resource_ids: list[uuid.UUID],
    duration_minutes: int,
    step_minutes: int = DEFAULT_STEP_MINUTES,
    apply_break: bool = True,
) -> list[time]:
    """
    Feasible start times in ascending order.

    Closed days, windows shorter than the duration, an empty roster or a
    non-positive duration/step all produce an empty list.
    """
    if window is None or duration_minutes <= 0 or step_minutes <= 0 or not resource_ids:
        return []

    open_from = to_seconds(window.open_from)
    open_to = to_seconds(window.open_to)
    duration = duration_minutes * 60
    step = step_minutes * 60

    last_start = open_to - duration
    if open_from >= open_to or last_start < open_from:
        return []

    blackout = []
    if apply_break and window.break_interval is not None:
        blackout = interval_seconds([window.break_interval])

    busy_by_resource = [
        blackout + interval_seconds(busy_index.get(rid, ())) for rid in resource_ids
    ]

    slots = []
    candidate = open_from
    while candidate <= last_start:
        candidate_end = candidate + duration
        if any(is_resource_free(busy, candidate, candidate_end) for busy in busy_by_resource):
            slots.append(from_seconds(candidate))
        candidate += step

    return slots


def format_slots(slots: list[time]) -> list[str]:
    """HH:MM strings for the API."""
    return [format_time_of_day(s) for s in slots]
