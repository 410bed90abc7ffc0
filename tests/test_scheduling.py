"""
Unit tests for slot enumeration and conflict detection.
"""

from datetime import date, datetime, timedelta

import pytest

from barbershop.booking import DayLocks
from barbershop.errors import ValidationError
from barbershop.models import Appointment, Service
from barbershop.scheduling import (
    business_window,
    candidate_starts,
    compute_available_slots,
    has_conflict,
    overlaps,
    parse_day,
    validate_start,
)

DAY = date(2030, 1, 15)
EARLY = datetime(2030, 1, 15, 0, 0)


def dt(hour, minute, day=DAY):
    return datetime(day.year, day.month, day.day, hour, minute)


def service(minutes, service_id=1):
    return Service(id=service_id, name=f"{minutes} min", duration_minutes=minutes, price=1000)


def appointment(start, service_id=1, status="pending", appointment_id=None):
    return Appointment(id=appointment_id, user_id=1, service_id=service_id, appointment_date=start, status=status)


class TestOverlap:
    def test_touching_intervals_do_not_overlap(self):
        assert not overlaps(dt(10, 0), dt(10, 30), dt(10, 30), dt(11, 0))
        assert not overlaps(dt(10, 30), dt(11, 0), dt(10, 0), dt(10, 30))

    def test_partial_and_contained_intervals_overlap(self):
        assert overlaps(dt(10, 0), dt(10, 30), dt(10, 20), dt(10, 50))
        assert overlaps(dt(10, 0), dt(11, 0), dt(10, 20), dt(10, 30))
        assert overlaps(dt(10, 20), dt(10, 30), dt(10, 0), dt(11, 0))

    def test_disjoint_intervals(self):
        assert not overlaps(dt(9, 0), dt(9, 20), dt(12, 0), dt(12, 30))


class TestCandidateStarts:
    def test_grid_runs_from_opening_to_closing_inclusive(self):
        starts = candidate_starts(DAY)

        assert starts[0] == dt(9, 0)
        assert starts[-1] == dt(19, 30)
        # 6 per hour for 09..18, then 19:00, 19:10, 19:20, 19:30
        assert len(starts) == 64
        assert all(b - a == timedelta(minutes=10) for a, b in zip(starts, starts[1:]))

    def test_business_window(self):
        assert business_window(DAY) == (dt(9, 0), dt(19, 30))


class TestComputeAvailableSlots:
    def test_empty_day_returns_every_start_that_fits(self):
        slots = compute_available_slots(DAY, service(30), [], {}, EARLY)

        assert slots[0] == dt(9, 0)
        assert slots[-1] == dt(19, 0)
        assert len(slots) == 61

    @pytest.mark.parametrize("minutes", [10, 20, 30, 40, 45, 90, 630])
    def test_no_slot_runs_past_closing(self, minutes):
        close = dt(19, 30)
        length = timedelta(minutes=minutes)

        slots = compute_available_slots(DAY, service(minutes), [], {}, EARLY)

        expected = [s for s in candidate_starts(DAY) if s + length <= close]
        assert slots == expected
        assert all(s + length <= close for s in slots)

    def test_service_longer_than_the_day_has_no_slots(self):
        assert compute_available_slots(DAY, service(700), [], {}, EARLY) == []

    def test_booked_interval_is_subtracted(self):
        booked = [appointment(dt(10, 0))]

        slots = compute_available_slots(DAY, service(30), booked, {1: 30}, EARLY)

        assert dt(9, 30) in slots
        assert dt(10, 30) in slots
        for blocked in (dt(9, 40), dt(9, 50), dt(10, 0), dt(10, 10), dt(10, 20)):
            assert blocked not in slots

    def test_slots_before_now_are_dropped(self):
        slots = compute_available_slots(DAY, service(30), [], {}, dt(12, 5))

        assert slots[0] == dt(12, 10)

    def test_slot_starting_exactly_now_is_kept(self):
        slots = compute_available_slots(DAY, service(30), [], {}, dt(12, 10))

        assert slots[0] == dt(12, 10)

    def test_day_in_the_past_is_fully_unavailable(self):
        assert compute_available_slots(DAY, service(30), [], {}, dt(9, 0, date(2030, 1, 16))) == []

    def test_cancelled_appointments_do_not_block(self):
        booked = [appointment(dt(10, 0), status="cancelled")]

        slots = compute_available_slots(DAY, service(30), booked, {1: 30}, EARLY)

        assert dt(10, 0) in slots

    def test_other_days_and_unknown_services_are_ignored(self):
        booked = [
            appointment(dt(10, 0, date(2030, 1, 16))),
            appointment(dt(11, 0), service_id=99),
        ]

        slots = compute_available_slots(DAY, service(30), booked, {1: 30}, EARLY)

        assert dt(10, 0) in slots
        assert dt(11, 0) in slots

    def test_fully_booked_day_is_empty(self):
        booked = [appointment(dt(9, 0), service_id=2)]

        assert compute_available_slots(DAY, service(30), booked, {2: 630}, EARLY) == []

    def test_repeated_calls_agree(self):
        booked = [appointment(dt(10, 0)), appointment(dt(15, 20))]
        args = (DAY, service(40), booked, {1: 30}, EARLY)

        assert compute_available_slots(*args) == compute_available_slots(*args)


class TestHasConflict:
    def test_boundary_touching_booking_is_allowed(self):
        booked = [appointment(dt(10, 0))]

        assert not has_conflict(dt(10, 30), service(30), booked, {1: 30})
        assert not has_conflict(dt(9, 30), service(30), booked, {1: 30})

    def test_overlapping_booking_conflicts(self):
        booked = [appointment(dt(10, 0))]

        assert has_conflict(dt(10, 20), service(30), booked, {1: 30})
        assert has_conflict(dt(9, 40), service(30), booked, {1: 30})
        assert has_conflict(dt(10, 0), service(10), booked, {1: 30})

    def test_checks_every_appointment(self):
        booked = [appointment(dt(9, 0)), appointment(dt(12, 0)), appointment(dt(17, 0))]

        assert has_conflict(dt(17, 10), service(20), booked, {1: 30})
        assert not has_conflict(dt(14, 0), service(20), booked, {1: 30})

    def test_cancelled_and_excluded_appointments_are_skipped(self):
        booked = [
            appointment(dt(10, 0), status="cancelled"),
            appointment(dt(11, 0), appointment_id=7),
        ]

        assert not has_conflict(dt(10, 0), service(30), booked, {1: 30})
        assert not has_conflict(dt(11, 10), service(30), booked, {1: 30}, exclude_id=7)
        assert has_conflict(dt(11, 10), service(30), booked, {1: 30})

    def test_appointments_on_other_days_never_conflict(self):
        booked = [appointment(dt(10, 0, date(2030, 1, 16)))]

        assert not has_conflict(dt(10, 0), service(30), booked, {1: 30})


class TestValidateStart:
    @pytest.mark.parametrize("start", [dt(9, 0), dt(12, 30), dt(19, 0)])
    def test_valid_starts(self, start):
        validate_start(start, service(30))

    def test_off_grid_minute_is_rejected(self):
        with pytest.raises(ValidationError, match="10-minute"):
            validate_start(dt(9, 7), service(30))

    def test_seconds_are_off_grid(self):
        with pytest.raises(ValidationError):
            validate_start(dt(9, 10) + timedelta(seconds=30), service(30))

    @pytest.mark.parametrize("start", [dt(8, 50), dt(19, 40), dt(21, 0), dt(0, 0)])
    def test_outside_business_hours_is_rejected(self, start):
        with pytest.raises(ValidationError, match="between 09:00 and 19:30"):
            validate_start(start, service(10))

    def test_service_running_past_closing_is_rejected(self):
        with pytest.raises(ValidationError, match="end by 19:30"):
            validate_start(dt(19, 0), service(40))

    def test_service_ending_exactly_at_closing_is_accepted(self):
        validate_start(dt(19, 0), service(30))


class TestParseDay:
    @pytest.mark.parametrize("value", ["2030-01-15", "2030-01-15T00:00:00", " 2030-01-15T16:40 "])
    def test_accepts_dates_and_timestamps(self, value):
        assert parse_day(value) == DAY

    def test_rejects_garbage(self):
        with pytest.raises(ValidationError):
            parse_day("next tuesday")


class TestDayLocks:
    def test_same_day_shares_a_lock(self):
        locks = DayLocks()

        assert locks.for_day(DAY) is locks.for_day(DAY)
        assert locks.for_day(DAY) is not locks.for_day(date(2030, 1, 16))

    def test_hold_acquires_every_day_once(self):
        locks = DayLocks()
        other = date(2030, 1, 16)

        with locks.hold(other, DAY, DAY):
            assert locks.for_day(DAY).locked()
            assert locks.for_day(other).locked()

        assert not locks.for_day(DAY).locked()
        assert not locks.for_day(other).locked()

    def test_idle_days_are_forgotten(self):
        locks = DayLocks()

        with locks.hold(DAY, date(2030, 1, 16)):
            assert len(locks) == 2

        assert len(locks) == 0
