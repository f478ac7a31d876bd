"""
Scheduling value types - the normalized shapes the slot engine works on.

Raw rows (ORM objects, API payloads, "HH:MM" / "HH:MM:SS" strings) are converted
into these models at the repository or request boundary, so the core never
branches on row shapes. Times are local to the company's calendar date.
"""
import uuid
from datetime import date, time
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

WEEKDAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

# Stand-in for 24:00 - the end of an all-day block
END_OF_DAY = time.max


class InvalidSchedulingInput(ValueError):
    """Raised for malformed scheduling input (programmer error, not a business state)."""
    pass


def parse_time_of_day(value) -> time:
    """
    Parse a zero-padded "HH:MM" or "HH:MM:SS" string into a time.
    time objects pass through unchanged.
    """
    if isinstance(value, time):
        return value
    if not isinstance(value, str):
        raise InvalidSchedulingInput(f"Expected HH:MM time string, got {type(value).__name__}")
    parts = value.strip().split(":")
    if len(parts) not in (2, 3) or not all(p.isdigit() and len(p) == 2 for p in parts):
        raise InvalidSchedulingInput(f"Malformed time of day: {value!r}")
    try:
        return time(*(int(p) for p in parts))
    except ValueError as e:
        raise InvalidSchedulingInput(f"Malformed time of day: {value!r}") from e


def parse_calendar_date(value) -> date:
    """Parse an ISO calendar date (YYYY-MM-DD)."""
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError as e:
        raise InvalidSchedulingInput(f"Malformed calendar date: {value!r}") from e


def format_time_of_day(value: time) -> str:
    """Format as zero-padded HH:MM."""
    return value.strftime("%H:%M")


def to_seconds(value: time) -> int:
    """Seconds since midnight. END_OF_DAY maps to a full day."""
    if value == END_OF_DAY:
        return 24 * 3600
    return value.hour * 3600 + value.minute * 60 + value.second


def from_seconds(seconds: int) -> time:
    if seconds >= 24 * 3600:
        return END_OF_DAY
    return time(seconds // 3600, (seconds % 3600) // 60, seconds % 60)


def weekday_name(day: date) -> str:
    """Lower-case English weekday name, the key used by the weekly hours table."""
    return WEEKDAY_NAMES[day.weekday()]


def _optional_time(value):
    if value is None or value == "":
        return None
    return parse_time_of_day(value)


class Interval(BaseModel):
    """Half-open time range [start, end) within one calendar date."""
    model_config = ConfigDict(frozen=True)

    start: time
    end: time

    @field_validator("start", "end", mode="before")
    @classmethod
    def _parse(cls, v):
        return parse_time_of_day(v)

    @model_validator(mode="after")
    def _ordered(self):
        if self.start >= self.end:
            raise ValueError(f"Interval start {self.start} must be before end {self.end}")
        return self

    def overlaps(self, other: "Interval") -> bool:
        """Touching endpoints do not overlap."""
        return self.start < other.end and other.start < self.end


class OpeningWindow(BaseModel):
    """The effective open hours for one company on one date."""
    model_config = ConfigDict(frozen=True)

    open_from: time
    open_to: time
    break_from: Optional[time] = None
    break_to: Optional[time] = None

    @field_validator("open_from", "open_to", mode="before")
    @classmethod
    def _parse_open(cls, v):
        return parse_time_of_day(v)

    @field_validator("break_from", "break_to", mode="before")
    @classmethod
    def _parse_break(cls, v):
        return _optional_time(v)

    @property
    def break_interval(self) -> Optional[Interval]:
        if self.break_from is None or self.break_to is None:
            return None
        if self.break_from >= self.break_to:
            return None
        return Interval(start=self.break_from, end=self.break_to)

    def contains(self, interval: Interval) -> bool:
        return self.open_from <= interval.start and interval.end <= self.open_to


class WeeklyHoursRule(BaseModel):
    """One recurring weekday row: open_from <= break_from < break_to <= open_to."""
    model_config = ConfigDict(frozen=True)

    day_in_week: str
    open_from: time
    open_to: time
    break_from: Optional[time] = None
    break_to: Optional[time] = None

    @field_validator("day_in_week", mode="before")
    @classmethod
    def _day(cls, v):
        name = str(v).strip().lower()
        if name not in WEEKDAY_NAMES:
            raise ValueError(f"Unknown weekday: {v!r}")
        return name

    @field_validator("open_from", "open_to", mode="before")
    @classmethod
    def _parse_open(cls, v):
        return parse_time_of_day(v)

    @field_validator("break_from", "break_to", mode="before")
    @classmethod
    def _parse_break(cls, v):
        return _optional_time(v)

    @model_validator(mode="after")
    def _break_inside_hours(self):
        if (self.break_from is None) != (self.break_to is None):
            raise ValueError("break_from and break_to must be set together")
        if self.break_from is not None and not (
            self.open_from <= self.break_from < self.break_to <= self.open_to
        ):
            raise ValueError("Break window must lie inside opening hours")
        return self


class DateOverrideRule(BaseModel):
    """
    A date-specific replacement for the weekly row.
    Both boundaries null means closed all day.
    """
    model_config = ConfigDict(frozen=True)

    override_date: date
    open_from: Optional[time] = None
    open_to: Optional[time] = None
    break_from: Optional[time] = None
    break_to: Optional[time] = None
    reason: Optional[str] = None

    @field_validator("open_from", "open_to", "break_from", "break_to", mode="before")
    @classmethod
    def _parse_times(cls, v):
        return _optional_time(v)

    @property
    def is_closed(self) -> bool:
        return self.open_from is None and self.open_to is None


class TimeOffEntry(BaseModel):
    """A staff member's absence on one date. all_day blocks the whole day."""
    model_config = ConfigDict(frozen=True)

    staff_id: uuid.UUID
    day: date
    all_day: bool = True
    from_time: Optional[time] = None
    to_time: Optional[time] = None
    reason: str = "vacation"

    @field_validator("from_time", "to_time", mode="before")
    @classmethod
    def _parse_times(cls, v):
        return _optional_time(v)

    def as_interval(self) -> Optional[Interval]:
        if self.all_day:
            return Interval(start=time.min, end=END_OF_DAY)
        if self.from_time is None or self.to_time is None or self.from_time >= self.to_time:
            return None
        return Interval(start=self.from_time, end=self.to_time)


class CommittedInterval(BaseModel):
    """An existing booking's occupied range. staff_id None: unassigned."""
    model_config = ConfigDict(frozen=True)

    staff_id: Optional[uuid.UUID] = None
    interval: Interval


class NoResourceAvailable(BaseModel):
    """
    Typed, recoverable assignment failure: no bookable staff member is free
    for [time_from, time_to). The caller should offer a different time.
    """
    model_config = ConfigDict(frozen=True)

    code: str = Field(default="no_resource_available")
    company_id: Optional[uuid.UUID] = None
    booking_date: Optional[date] = None
    time_from: time
    time_to: time
    candidates_checked: int = 0
