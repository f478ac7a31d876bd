"""
Resource roster - which staff members take part in scheduling.
"""
import logging
import uuid

logger = logging.getLogger(__name__)


def bookable_resource_ids(staff_rows) -> list[uuid.UUID]:
    """
    Filter a company's staff to the ones flagged available_for_booking.
    Input order is kept: it is the assignment tie-break order.
    """
    seen = set()
    result = []
    for staff in staff_rows:
        if not staff.available_for_booking or staff.id in seen:
            continue
        seen.add(staff.id)
        result.append(staff.id)
    return result


async def list_bookable_resources(roster_repo, company_id: uuid.UUID) -> list[uuid.UUID]:
    """Bookable staff IDs for a company, in stable roster order. Empty means no slots ever."""
    staff_rows = await roster_repo.list_staff(company_id)
    resource_ids = bookable_resource_ids(staff_rows)
    if not resource_ids:
        logger.info(
            "Company has no bookable staff",
            extra={"company_id": str(company_id)},
        )
    return resource_ids
