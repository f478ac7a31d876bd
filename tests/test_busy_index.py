"""
Busy-interval index tests - what occupies a resource on a given date.
"""
import uuid
from datetime import date, time

from slotbook.schemas.scheduling import CommittedInterval, END_OF_DAY, Interval
from slotbook.services.busy_index import build_busy_index, load_busy_intervals

from factories import MemoryBookingRepository, booked, time_off

DAY = date(2026, 2, 16)


class TestBuildBusyIndex:
    def test_every_resource_has_an_entry(self):
        a, b = uuid.uuid4(), uuid.uuid4()
        index = build_busy_index([a, b], [])
        assert index == {a: [], b: []}

    def test_groups_by_staff_and_sorts(self):
        a, b = uuid.uuid4(), uuid.uuid4()
        index = build_busy_index(
            [a, b],
            [booked(a, "14:00", "15:00"), booked(b, "09:00", "10:00"), booked(a, "09:00", "09:30")],
        )
        assert [iv.start for iv in index[a]] == [time(9, 0), time(14, 0)]
        assert len(index[b]) == 1

    def test_unassigned_bookings_block_nobody(self):
        a = uuid.uuid4()
        unassigned = CommittedInterval(staff_id=None, interval=Interval(start="10:00", end="11:00"))
        index = build_busy_index([a], [unassigned])
        assert index[a] == []

    def test_bookings_of_non_roster_staff_ignored(self):
        a, stranger = uuid.uuid4(), uuid.uuid4()
        index = build_busy_index([a], [booked(stranger, "10:00", "11:00")])
        assert stranger not in index
        assert index[a] == []

    def test_all_day_time_off_blocks_whole_day(self):
        a = uuid.uuid4()
        index = build_busy_index([a], [], [time_off(a, DAY)])
        assert index[a] == [Interval(start=time.min, end=END_OF_DAY)]

    def test_partial_time_off(self):
        a = uuid.uuid4()
        index = build_busy_index([a], [], [time_off(a, DAY, "13:00", "15:00", reason="training")])
        assert index[a] == [Interval(start="13:00", end="15:00")]


class TestLoadBusyIntervals:
    async def test_reads_bookings_and_time_off(self, company_id):
        a, b = uuid.uuid4(), uuid.uuid4()
        repo = MemoryBookingRepository(
            bookings={(company_id, DAY): [booked(a, "10:00", "11:00")]},
            time_offs=[time_off(b, DAY, reason="sick_day"), time_off(b, date(2026, 2, 17))],
        )
        index = await load_busy_intervals(repo, company_id, DAY, [a, b])
        assert index[a] == [Interval(start="10:00", end="11:00")]
        assert len(index[b]) == 1

    async def test_empty_roster(self, company_id):
        repo = MemoryBookingRepository()
        assert await load_busy_intervals(repo, company_id, DAY, []) == {}
