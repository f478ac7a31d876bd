"""
API request/response schemas for the scheduling endpoints.
"""
import uuid
from datetime import date
from typing import Optional
from pydantic import BaseModel, Field


class SlotListResponse(BaseModel):
    company_id: str
    date: str
    duration_minutes: int
    slots: list[str] = Field(default_factory=list, description="Ascending HH:MM start times")


class AvailabilityResponse(BaseModel):
    company_id: str
    date: str
    available: bool


class AvailabilitySearchRequest(BaseModel):
    company_ids: list[uuid.UUID]
    date: date
    time_from: Optional[str] = Field(default=None, description="HH:MM, inclusive")
    time_to: Optional[str] = Field(default=None, description="HH:MM, exclusive; defaults to time_from + 2h")
    duration_minutes: Optional[int] = Field(default=None, gt=0)


class AvailabilitySearchResponse(BaseModel):
    date: str
    company_ids: list[str]


class BookingAddonItem(BaseModel):
    addon_id: str
    duration: int = 0
    count: int = 1


class BookingServiceItem(BaseModel):
    service_id: str
    duration: int = 0
    addons: list[BookingAddonItem] = Field(default_factory=list)


class BookingRequest(BaseModel):
    company_id: uuid.UUID
    date: date
    time: str = Field(..., description="Requested start, HH:MM")
    note: Optional[str] = None
    user_id: Optional[str] = None
    services: list[BookingServiceItem] = Field(..., min_length=1)


class BookingOutcome(BaseModel):
    """
    Result of a booking commit.
    status: confirmed, no_resource_available, concurrent_conflict, outside_opening_hours
    """
    status: str
    booking_id: Optional[str] = None
    staff_id: Optional[str] = None
    date: str
    time_from: str
    time_to: str
    attempts: int = 0

    @property
    def confirmed(self) -> bool:
        return self.status == "confirmed"
