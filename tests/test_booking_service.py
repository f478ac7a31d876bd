"""
Booking commit tests - duration totals, opening-hours checks, staff
auto-assignment and the retry path when a concurrent writer wins.
"""
from datetime import time

import pytest

from slotbook.schemas.api_responses import BookingRequest, BookingServiceItem
from slotbook.schemas.scheduling import DateOverrideRule, Interval, InvalidSchedulingInput
from slotbook.services.booking import (
    booking_interval,
    compute_booking_duration,
    create_booking,
)

from factories import booked, time_off


def _request(salon, day, start="10:00", duration=30, **kwargs):
    return BookingRequest(
        company_id=salon.company_id,
        date=day,
        time=start,
        services=[{"service_id": "haircut", "duration": duration}],
        **kwargs,
    )


class TestComputeBookingDuration:
    def test_services_and_addons(self):
        services = [
            BookingServiceItem(
                service_id="color",
                duration=30,
                addons=[
                    {"addon_id": "toner", "duration": 10, "count": 2},
                    {"addon_id": "mask", "duration": 5, "count": 0},
                    {"addon_id": "gloss", "duration": 15, "count": -1},
                ],
            ),
            BookingServiceItem(service_id="blowdry", duration=15),
        ]
        assert compute_booking_duration(services) == 65

    def test_addon_count_defaults_to_one(self):
        services = [BookingServiceItem(service_id="cut", duration=30, addons=[{"addon_id": "wash", "duration": 10}])]
        assert compute_booking_duration(services) == 40

    def test_empty(self):
        assert compute_booking_duration([]) == 0


class TestBookingInterval:
    def test_end_from_duration(self):
        assert booking_interval(time(10, 0), 45) == Interval(start="10:00", end="10:45")

    def test_last_minute_of_day(self):
        assert booking_interval(time(23, 0), 30).end == time(23, 30)

    def test_runs_past_midnight(self):
        with pytest.raises(InvalidSchedulingInput):
            booking_interval(time(23, 30), 30)

    def test_zero_duration(self):
        with pytest.raises(InvalidSchedulingInput):
            booking_interval(time(10, 0), 0)


class TestCreateBooking:
    async def test_first_free_staff_member(self, salon, settings):
        repos = salon.build()
        outcome = await create_booking(repos, _request(salon, salon.monday, note="fringe only"), settings=settings)

        assert outcome.confirmed
        assert outcome.staff_id == str(salon.a)
        assert (outcome.time_from, outcome.time_to) == ("10:00", "10:30")
        assert outcome.attempts == 1
        assert outcome.booking_id is not None
        row = repos.bookings.inserted[0]
        assert (row.company_id, row.day) == (salon.company_id, salon.monday)
        assert row.committed.staff_id == salon.a
        assert row.client_note == "fringe only"

    async def test_skips_busy_staff(self, salon, settings):
        repos = salon.build(bookings={(salon.company_id, salon.monday): [booked(salon.a, "09:30", "10:15")]})
        outcome = await create_booking(repos, _request(salon, salon.monday), settings=settings)
        assert outcome.staff_id == str(salon.b)

    async def test_staff_on_time_off_skipped(self, salon, settings):
        repos = salon.build(time_offs=[time_off(salon.a, salon.monday)])
        outcome = await create_booking(repos, _request(salon, salon.monday), settings=settings)
        assert outcome.staff_id == str(salon.b)

    async def test_back_to_back_bookings(self, salon, settings):
        repos = salon.build(bookings={(salon.company_id, salon.monday): [booked(salon.a, "09:30", "10:00")]})
        outcome = await create_booking(repos, _request(salon, salon.monday), settings=settings)
        assert outcome.staff_id == str(salon.a)

    async def test_no_resource_available(self, salon, settings):
        repos = salon.build(bookings={
            (salon.company_id, salon.monday): [
                booked(salon.a, "10:00", "11:00"),
                booked(salon.b, "09:45", "10:15"),
            ],
        })
        outcome = await create_booking(repos, _request(salon, salon.monday), settings=settings)
        assert outcome.status == "no_resource_available"
        assert outcome.staff_id is None
        assert repos.bookings.insert_attempts == 0

    async def test_closed_day(self, salon, settings):
        repos = salon.build()
        outcome = await create_booking(repos, _request(salon, salon.sunday), settings=settings)
        assert outcome.status == "outside_opening_hours"
        assert repos.bookings.insert_attempts == 0

    async def test_holiday(self, salon, settings):
        repos = salon.build(overrides={
            (salon.company_id, salon.monday): DateOverrideRule(override_date=salon.monday, reason="Holiday"),
        })
        outcome = await create_booking(repos, _request(salon, salon.monday), settings=settings)
        assert outcome.status == "outside_opening_hours"

    async def test_runs_past_closing(self, salon, settings):
        outcome = await create_booking(salon.build(), _request(salon, salon.monday, start="16:45"), settings=settings)
        assert outcome.status == "outside_opening_hours"

    async def test_ends_exactly_at_closing(self, salon, settings):
        outcome = await create_booking(salon.build(), _request(salon, salon.monday, start="16:30"), settings=settings)
        assert outcome.confirmed

    async def test_overlaps_break(self, salon, settings):
        outcome = await create_booking(salon.build(), _request(salon, salon.wednesday, start="11:45"), settings=settings)
        assert outcome.status == "outside_opening_hours"

    async def test_break_ignored_when_disabled(self, salon, settings):
        no_breaks = settings.model_copy(update={"apply_break_windows": False})
        outcome = await create_booking(salon.build(), _request(salon, salon.wednesday, start="11:45"), settings=no_breaks)
        assert outcome.confirmed

    async def test_duration_includes_addons(self, salon, settings):
        request = BookingRequest(
            company_id=salon.company_id,
            date=salon.monday,
            time="10:00",
            services=[{
                "service_id": "color",
                "duration": 60,
                "addons": [{"addon_id": "toner", "duration": 15, "count": 2}],
            }],
        )
        outcome = await create_booking(salon.build(), request, settings=settings)
        assert outcome.time_to == "11:30"

    async def test_all_services_passed_to_storage(self, salon, settings):
        request = BookingRequest(
            company_id=salon.company_id,
            date=salon.monday,
            time="10:00",
            services=[
                {"service_id": "color", "duration": 60, "addons": [{"addon_id": "toner", "duration": 15, "count": 2}]},
                {"service_id": "blowdry", "duration": 20},
            ],
        )
        repos = salon.build()
        outcome = await create_booking(repos, request, settings=settings)

        assert outcome.time_to == "11:50"
        row = repos.bookings.inserted[0]
        assert row.service_id == "color"
        assert [s.service_id for s in row.services] == ["color", "blowdry"]
        assert row.services[0].addons[0].count == 2

    async def test_user_id_argument_wins(self, salon, settings):
        repos = salon.build()
        outcome = await create_booking(
            repos, _request(salon, salon.monday, user_id="from-payload"), user_id="from-auth", settings=settings,
        )
        assert outcome.confirmed
        assert repos.bookings.inserted[0].user_id == "from-auth"

    async def test_malformed_time(self, salon, settings):
        with pytest.raises(InvalidSchedulingInput):
            await create_booking(salon.build(), _request(salon, salon.monday, start="9:00"), settings=settings)

    async def test_zero_duration(self, salon, settings):
        with pytest.raises(InvalidSchedulingInput):
            await create_booking(salon.build(), _request(salon, salon.monday, duration=0), settings=settings)


class TestConcurrentBooking:
    async def test_lost_race_moves_to_next_staff(self, salon, settings):
        """Another writer takes A between our read and our insert; B gets the booking."""
        repos = salon.build(race_writes=[(salon.company_id, salon.monday, booked(salon.a, "10:00", "10:30"))])
        outcome = await create_booking(repos, _request(salon, salon.monday), settings=settings)

        assert outcome.confirmed
        assert outcome.staff_id == str(salon.b)
        assert outcome.attempts == 2
        assert repos.bookings.insert_attempts == 2

    async def test_lost_race_with_nobody_left(self, salon, settings):
        repos = salon.build(
            bookings={(salon.company_id, salon.monday): [booked(salon.b, "10:00", "11:00")]},
            race_writes=[(salon.company_id, salon.monday, booked(salon.a, "10:15", "10:45"))],
        )
        outcome = await create_booking(repos, _request(salon, salon.monday), settings=settings)

        assert outcome.status == "concurrent_conflict"
        assert outcome.attempts == 2
        assert repos.bookings.inserted == []

    async def test_attempts_are_bounded(self, salon, settings):
        single = settings.model_copy(update={"booking_max_attempts": 1})
        repos = salon.build(race_writes=[(salon.company_id, salon.monday, booked(salon.a, "10:00", "10:30"))])
        outcome = await create_booking(repos, _request(salon, salon.monday), settings=single)

        assert outcome.status == "concurrent_conflict"
        assert outcome.attempts == 1
        assert repos.bookings.insert_attempts == 1

    async def test_no_double_booking_across_sequential_requests(self, salon, settings):
        repos = salon.build()
        outcomes = [
            await create_booking(repos, _request(salon, salon.monday), settings=settings)
            for _ in range(3)
        ]
        assert [o.status for o in outcomes] == ["confirmed", "confirmed", "no_resource_available"]
        assert {o.staff_id for o in outcomes[:2]} == {str(salon.a), str(salon.b)}
