"""
Scheduling API - slot listing, availability checks and booking commit.

- GET  /api/v1/companies/{company_id}/slots         - bookable start times for a date
- GET  /api/v1/companies/{company_id}/availability  - any slot inside a time range?
- POST /api/v1/availability/search                  - filter many companies by availability
- POST /api/v1/bookings                             - auto-assign staff and commit
"""
import logging
import uuid
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from slotbook.config import Settings, get_settings
from slotbook.database import get_db
from slotbook.repositories.base import SchedulingRepositories
from slotbook.repositories.sql import sql_repositories
from slotbook.schemas.api_responses import (
    AvailabilityResponse,
    AvailabilitySearchRequest,
    AvailabilitySearchResponse,
    BookingRequest,
    SlotListResponse,
)
from slotbook.schemas.scheduling import InvalidSchedulingInput, parse_time_of_day
from slotbook.services.availability import (
    SlotMemo,
    filter_available_companies,
    is_available,
    list_available_slots,
)
from slotbook.services.booking import create_booking
from slotbook.services.slots import format_slots

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["scheduling"])


async def get_repositories(db: AsyncSession = Depends(get_db)) -> SchedulingRepositories:
    return sql_repositories(db)


def _optional_time(value: Optional[str], field: str):
    if value is None or value == "":
        return None
    try:
        return parse_time_of_day(value)
    except InvalidSchedulingInput:
        raise HTTPException(status_code=400, detail=f"{field} must be HH:MM")


@router.get("/companies/{company_id}/slots", response_model=SlotListResponse)
async def get_slots(
    company_id: uuid.UUID,
    date: date = Query(..., description="Company-local calendar date, YYYY-MM-DD"),
    duration: int = Query(..., gt=0, description="Service duration in minutes"),
    repos: SchedulingRepositories = Depends(get_repositories),
    settings: Settings = Depends(get_settings),
):
    """Ascending list of start times with at least one free staff member."""
    try:
        slots = await list_available_slots(repos, company_id, date, duration, settings=settings)
    except InvalidSchedulingInput as e:
        raise HTTPException(status_code=400, detail=str(e))

    return SlotListResponse(
        company_id=str(company_id),
        date=date.isoformat(),
        duration_minutes=duration,
        slots=format_slots(slots),
    )


@router.get("/companies/{company_id}/availability", response_model=AvailabilityResponse)
async def get_availability(
    company_id: uuid.UUID,
    date: date = Query(...),
    time_from: Optional[str] = Query(default=None),
    time_to: Optional[str] = Query(default=None),
    duration: Optional[int] = Query(default=None, gt=0),
    repos: SchedulingRepositories = Depends(get_repositories),
    settings: Settings = Depends(get_settings),
):
    """Whether any slot starts inside [time_from, time_to)."""
    desired_from = _optional_time(time_from, "time_from")
    desired_to = _optional_time(time_to, "time_to")
    try:
        available = await is_available(
            repos, company_id, date,
            duration_minutes=duration,
            desired_from=desired_from,
            desired_to=desired_to,
            settings=settings,
        )
    except InvalidSchedulingInput as e:
        raise HTTPException(status_code=400, detail=str(e))

    return AvailabilityResponse(company_id=str(company_id), date=date.isoformat(), available=available)


@router.post("/availability/search", response_model=AvailabilitySearchResponse)
async def search_availability(
    payload: AvailabilitySearchRequest,
    repos: SchedulingRepositories = Depends(get_repositories),
    settings: Settings = Depends(get_settings),
):
    """Filter a storefront result list down to companies with a free slot."""
    desired_from = _optional_time(payload.time_from, "time_from")
    desired_to = _optional_time(payload.time_to, "time_to")
    try:
        company_ids = await filter_available_companies(
            repos,
            payload.company_ids,
            payload.date,
            duration_minutes=payload.duration_minutes,
            desired_from=desired_from,
            desired_to=desired_to,
            settings=settings,
            memo=SlotMemo(),
        )
    except InvalidSchedulingInput as e:
        raise HTTPException(status_code=400, detail=str(e))

    return AvailabilitySearchResponse(
        date=payload.date.isoformat(),
        company_ids=[str(cid) for cid in company_ids],
    )


@router.post("/bookings", status_code=201)
async def post_booking(
    payload: BookingRequest,
    repos: SchedulingRepositories = Depends(get_repositories),
    settings: Settings = Depends(get_settings),
):
    """
    Commit a booking. 409 responses carry a code the client acts on:
    no_resource_available / outside_opening_hours - pick another time;
    concurrent_conflict - reload slots, the chosen one was just taken.
    """
    try:
        outcome = await create_booking(repos, payload, settings=settings)
    except InvalidSchedulingInput as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not outcome.confirmed:
        return JSONResponse(
            status_code=409,
            content={"code": outcome.status, **outcome.model_dump(exclude={"status"})},
        )
    return outcome.model_dump()
