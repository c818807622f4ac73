"""Pure slot computation: generator, weekday matching, overlap rule, range enumeration."""
from datetime import UTC, date, datetime, timedelta

import pytest

from app.core.clock import MalformedTimeError, to_minutes
from app.models.appointment import Appointment, AppointmentStatus, AppointmentType
from app.models.availability import AvailabilityWindow
from app.services.slot_service import (
    Slot,
    conflicts,
    day_of_week,
    enumerate_available_slots,
    generate_slot_times,
    windows_for_date,
)

MONDAY = date(2026, 10, 19)
MIDNIGHT = datetime(2026, 10, 19, 0, 0)


def window(day=1, start="09:00", end="10:00", duration=30, nutritionist_id=1):
    return AvailabilityWindow(
        nutritionist_id=nutritionist_id,
        day_of_week=day,
        start_time=start,
        end_time=end,
        slot_duration_minutes=duration,
    )


def booking(start: datetime, minutes: int, status=AppointmentStatus.confirmed):
    return Appointment(
        nutritionist_id=1,
        patient_id=2,
        date=start,
        duration_minutes=minutes,
        status=status,
        type=AppointmentType.followup,
    )


def times(slots):
    return [s.time for s in slots]


class TestGenerateSlotTimes:
    def test_last_slot_must_end_by_window_end(self):
        assert generate_slot_times("09:00", "10:00", 30) == ["09:00", "09:30"]

    def test_window_of_exactly_one_duration(self):
        assert generate_slot_times("09:00", "09:45", 45) == ["09:00"]

    def test_window_shorter_than_duration(self):
        assert generate_slot_times("09:00", "09:20", 30) == []

    def test_partial_tail_is_dropped(self):
        assert generate_slot_times("09:00", "10:10", 20) == ["09:00", "09:20", "09:40"]

    def test_window_reaching_end_of_day(self):
        assert generate_slot_times("23:00", "23:59", 30) == ["23:00"]

    def test_non_positive_duration_yields_nothing(self):
        assert generate_slot_times("09:00", "10:00", 0) == []

    def test_restartable(self):
        assert generate_slot_times("08:00", "09:00", 15) == generate_slot_times("08:00", "09:00", 15)

    def test_malformed_window_time_propagates(self):
        with pytest.raises(MalformedTimeError):
            generate_slot_times("9am", "10:00", 30)


class TestWindowsForDate:
    def test_sunday_is_zero(self):
        assert day_of_week(date(2026, 10, 18)) == 0
        assert day_of_week(MONDAY) == 1
        assert day_of_week(date(2026, 10, 24)) == 6

    def test_filters_by_weekday_and_keeps_order(self):
        late = window(day=1, start="14:00", end="15:00")
        tuesday = window(day=2)
        early = window(day=1, start="08:00", end="09:00")
        assert windows_for_date([late, tuesday, early], MONDAY) == [late, early]

    def test_no_match(self):
        assert windows_for_date([window(day=3)], MONDAY) == []


class TestConflicts:
    at = staticmethod(lambda h, m: datetime(2026, 10, 19, h, m))

    def test_slot_starting_inside_appointment(self):
        assert conflicts(self.at(9, 15), 30, [booking(self.at(9, 0), 30)])

    def test_slot_ending_inside_appointment(self):
        assert conflicts(self.at(8, 45), 30, [booking(self.at(9, 0), 30)])

    def test_slot_containing_appointment(self):
        assert conflicts(self.at(9, 0), 60, [booking(self.at(9, 15), 15)])

    def test_identical_interval(self):
        assert conflicts(self.at(9, 0), 30, [booking(self.at(9, 0), 30)])

    def test_touching_before_does_not_conflict(self):
        assert not conflicts(self.at(8, 30), 30, [booking(self.at(9, 0), 30)])

    def test_touching_after_does_not_conflict(self):
        assert not conflicts(self.at(9, 30), 30, [booking(self.at(9, 0), 30)])

    def test_slot_ending_exactly_at_appointment_end(self):
        # end-inclusive clause: 09:00-09:30 against 09:15-09:30
        assert conflicts(self.at(9, 0), 30, [booking(self.at(9, 15), 15)])

    def test_any_appointment_is_enough(self):
        appointments = [booking(self.at(7, 0), 30), booking(self.at(9, 0), 30)]
        assert conflicts(self.at(9, 0), 30, appointments)

    def test_no_appointments(self):
        assert not conflicts(self.at(9, 0), 30, [])


class TestEnumerateAvailableSlots:
    def test_scenario_a_no_appointments(self):
        slots = enumerate_available_slots([window()], [], MONDAY, MONDAY, MIDNIGHT)
        assert slots == [
            Slot(date=MONDAY, time="09:00", date_time=datetime(2026, 10, 19, 9, 0)),
            Slot(date=MONDAY, time="09:30", date_time=datetime(2026, 10, 19, 9, 30)),
        ]

    def test_scenario_b_booked_first_slot(self):
        apt = booking(datetime(2026, 10, 19, 9, 0), 30)
        assert times(enumerate_available_slots([window()], [apt], MONDAY, MONDAY, MIDNIGHT)) == ["09:30"]

    def test_scenario_c_short_booking_inside_first_slot(self):
        # 09:00-09:30 ends inside 09:15-09:30, so only 09:30 survives
        apt = booking(datetime(2026, 10, 19, 9, 15), 15)
        assert times(enumerate_available_slots([window()], [apt], MONDAY, MONDAY, MIDNIGHT)) == ["09:30"]

    def test_scenario_d_past_slots_are_dropped(self):
        now = datetime(2026, 10, 19, 9, 15)
        assert times(enumerate_available_slots([window()], [], MONDAY, MONDAY, now)) == ["09:30"]

    def test_slot_starting_exactly_now_is_kept(self):
        now = datetime(2026, 10, 19, 9, 30)
        assert times(enumerate_available_slots([window()], [], MONDAY, MONDAY, now)) == ["09:30"]

    def test_scenario_e_no_windows(self):
        assert enumerate_available_slots([], [], MONDAY, MONDAY + timedelta(days=60), MIDNIGHT) == []

    def test_inverted_range_is_empty(self):
        assert enumerate_available_slots([window()], [], MONDAY, MONDAY - timedelta(days=1), MIDNIGHT) == []

    def test_range_covers_both_ends_and_repeats_weekly(self):
        next_monday = MONDAY + timedelta(days=7)
        slots = enumerate_available_slots([window()], [], MONDAY, next_monday, MIDNIGHT)
        assert [(s.date, s.time) for s in slots] == [
            (MONDAY, "09:00"),
            (MONDAY, "09:30"),
            (next_monday, "09:00"),
            (next_monday, "09:30"),
        ]

    def test_order_is_date_then_window_then_time(self):
        afternoon = window(day=1, start="14:00", end="15:00", duration=30)
        morning = window(day=1, start="09:00", end="10:00", duration=30)
        tuesday = window(day=2, start="08:00", end="08:30", duration=30)
        slots = enumerate_available_slots(
            [afternoon, tuesday, morning], [], MONDAY, MONDAY + timedelta(days=1), MIDNIGHT
        )
        assert [(s.date.isoformat(), s.time) for s in slots] == [
            ("2026-10-19", "14:00"),
            ("2026-10-19", "14:30"),
            ("2026-10-19", "09:00"),
            ("2026-10-19", "09:30"),
            ("2026-10-20", "08:00"),
        ]

    def test_overlapping_windows_are_not_deduplicated(self):
        first = window(start="09:00", end="10:00", duration=30)
        second = window(start="09:30", end="10:30", duration=30)
        slots = enumerate_available_slots([first, second], [], MONDAY, MONDAY, MIDNIGHT)
        assert times(slots) == ["09:00", "09:30", "09:30", "10:00"]

    def test_each_window_uses_its_own_duration_for_overlap(self):
        short = window(start="09:00", end="10:00", duration=15)
        apt = booking(datetime(2026, 10, 19, 9, 20), 10)
        slots = enumerate_available_slots([short], [apt], MONDAY, MONDAY, MIDNIGHT)
        assert times(slots) == ["09:00", "09:30", "09:45"]

    def test_accepts_datetime_bounds(self):
        slots = enumerate_available_slots(
            [window()], [], datetime(2026, 10, 19, 18, 0), datetime(2026, 10, 19, 1, 0), MIDNIGHT
        )
        assert times(slots) == ["09:00", "09:30"]

    def test_aware_now_is_read_as_wall_clock(self):
        now = datetime(2026, 10, 19, 9, 15, tzinfo=UTC)
        assert times(enumerate_available_slots([window()], [], MONDAY, MONDAY, now)) == ["09:30"]

    def test_aware_appointment_start_is_read_as_wall_clock(self):
        apt = booking(datetime(2026, 10, 19, 9, 0, tzinfo=UTC), 30)
        assert times(enumerate_available_slots([window()], [apt], MONDAY, MONDAY, MIDNIGHT)) == ["09:30"]

    def test_does_not_mutate_inputs(self):
        windows = [window()]
        appointments = [booking(datetime(2026, 10, 19, 9, 0), 30)]
        before = [w.model_dump() for w in windows], [a.model_dump() for a in appointments]
        enumerate_available_slots(windows, appointments, MONDAY, MONDAY, MIDNIGHT)
        assert ([w.model_dump() for w in windows], [a.model_dump() for a in appointments]) == before


class TestSlotProperties:
    windows = [
        window(day=1, start="08:00", end="12:00", duration=45),
        window(day=1, start="13:00", end="17:30", duration=30),
        window(day=3, start="10:00", end="11:00", duration=20),
        window(day=5, start="09:00", end="09:50", duration=25),
    ]
    appointments = [
        booking(datetime(2026, 10, 19, 8, 30), 60),
        booking(datetime(2026, 10, 19, 14, 10), 20),
        booking(datetime(2026, 10, 21, 10, 20), 40),
        booking(datetime(2026, 10, 26, 16, 0), 90),
    ]
    now = datetime(2026, 10, 19, 13, 0)
    end = MONDAY + timedelta(days=13)

    def _run(self):
        return enumerate_available_slots(self.windows, self.appointments, MONDAY, self.end, self.now)

    def _source_window(self, slot):
        dow = day_of_week(slot.date)
        minute = to_minutes(slot.time)
        for w in self.windows:
            if w.day_of_week == dow and to_minutes(w.start_time) <= minute < to_minutes(w.end_time):
                return w
        raise AssertionError(f"no window produced {slot}")

    def test_slots_fit_inside_their_window(self):
        for slot in self._run():
            w = self._source_window(slot)
            assert to_minutes(slot.time) + w.slot_duration_minutes <= to_minutes(w.end_time)

    def test_slots_never_collide_with_bookings(self):
        for slot in self._run():
            w = self._source_window(slot)
            for apt in self.appointments:
                assert not conflicts(slot.date_time, w.slot_duration_minutes, [apt])

    def test_slots_are_not_in_the_past(self):
        assert all(s.date_time >= self.now for s in self._run())

    def test_date_time_matches_date_and_time(self):
        for s in self._run():
            assert s.date_time.date() == s.date
            assert s.date_time.strftime("%H:%M") == s.time

    def test_idempotent(self):
        assert self._run() == self._run()
