"""
Busy-interval index - each bookable staff member's occupied ranges on one date.

Committed bookings and staff time off both occupy a resource. Bookings with no
staff member assigned block nobody. Overlap between a resource's own bookings
is prevented at write time and not re-checked here.
"""
import uuid
from datetime import date
from typing import Iterable

from slotbook.schemas.scheduling import CommittedInterval, Interval, TimeOffEntry

BusyIndex = dict[uuid.UUID, list[Interval]]


def build_busy_index(
    resource_ids: Iterable[uuid.UUID],
    committed: Iterable[CommittedInterval],
    time_offs: Iterable[TimeOffEntry] = (),
) -> BusyIndex:
    """Group busy intervals by resource. Every resource gets an entry, possibly empty."""
    index: BusyIndex = {rid: [] for rid in resource_ids}

    for item in committed:
        if item.staff_id is None or item.staff_id not in index:
            continue
        index[item.staff_id].append(item.interval)

    for entry in time_offs:
        if entry.staff_id not in index:
            continue
        interval = entry.as_interval()
        if interval is not None:
            index[entry.staff_id].append(interval)

    for intervals in index.values():
        intervals.sort(key=lambda iv: (iv.start, iv.end))
    return index


async def load_busy_intervals(
    booking_repo,
    company_id: uuid.UUID,
    day: date,
    resource_ids: list[uuid.UUID],
) -> BusyIndex:
    """Fetch bookings and time off for the date and index them by resource."""
    if not resource_ids:
        return {}
    committed = await booking_repo.list_committed_intervals(company_id, day, resource_ids)
    time_offs = await booking_repo.list_time_offs(day, resource_ids)
    return build_busy_index(resource_ids, committed, time_offs)
