"""
Tests for hourly capacity.

Tests:
- Slot classification (full / warning)
- Grouping of bookings into hour slots
- Counts computed from stored appointments
"""

from datetime import date

from frontdesk.config import COMMERCIAL_HOURS
from frontdesk.domain.scheduling.capacity import (
    build_hour_counts,
    compute_hour_counts,
    hour_status,
    is_full,
    is_warning,
)


class TestSlotClassification:
    """Tests for the full and warning thresholds."""

    def test_full_at_cap(self):
        """Test that a slot is full exactly at the cap."""
        assert is_full(15, 15)
        assert is_full(16, 15)
        assert not is_full(14, 15)

    def test_warning_from_eighty_percent(self):
        """Test that warning starts at 80% of the cap."""
        assert not is_warning(11, 15)
        assert is_warning(12, 15)
        assert is_warning(14, 15)

    def test_full_and_warning_are_exclusive(self):
        """Test that a slot is never flagged both full and warning."""
        for cap in (1, 5, 15):
            for count in range(0, cap + 3):
                assert not (is_full(count, cap) and is_warning(count, cap))

    def test_cap_of_one(self):
        """Test that a cap of 1 has no warning band."""
        assert not is_warning(0, 1)
        assert is_full(1, 1)
        assert not is_warning(1, 1)


class TestBuildHourCounts:
    """Tests for grouping booking times into slots."""

    def test_one_entry_per_slot_in_order(self):
        """Test that every commercial hour is listed once, in order."""
        counts = build_hour_counts([])

        assert [c.hour for c in counts] == list(COMMERCIAL_HOURS)
        assert all(c.count == 0 for c in counts)

    def test_warning_and_full_slots(self):
        """Test 13 bookings at 09:00 warn and 15 at 10:00 fill the slot."""
        times = ["09:00"] * 13 + ["10:00"] * 15

        counts = build_hour_counts(times, max_per_hour=15)
        nine = hour_status(counts, "09:00")
        ten = hour_status(counts, "10:00")

        assert (nine.count, nine.is_warning, nine.is_full) == (13, True, False)
        assert (ten.count, ten.is_warning, ten.is_full) == (15, False, True)

    def test_minutes_are_discarded(self):
        """Test that a 09:30 booking occupies the 09:00 slot."""
        counts = build_hour_counts(["09:30", "09:00", "09:59"])

        assert hour_status(counts, "09:00").count == 3

    def test_times_outside_slots_not_counted(self):
        """Test that bookings outside commercial hours are ignored."""
        counts = build_hour_counts(["07:00", "18:00", "11:00"])

        assert sum(c.count for c in counts) == 1

    def test_unknown_hour_status_is_empty(self):
        """Test that looking up a missing slot gives an empty entry."""
        entry = hour_status(build_hour_counts([]), "23:00")

        assert entry.count == 0
        assert not entry.is_full


class TestComputeHourCounts:
    """Tests for counts read from stored appointments."""

    def test_no_date_gives_empty_list(self, db):
        """Test that no date yields no slots."""
        assert compute_hour_counts(db, None) == []

    def test_counts_only_the_given_date(self, db, make_appointment):
        """Test that bookings on other dates are not counted."""
        day = date(2024, 6, 10)
        for _ in range(3):
            make_appointment(scheduled_date=day, scheduled_time="14:00")
        make_appointment(scheduled_date=date(2024, 6, 11), scheduled_time="14:00")

        counts = compute_hour_counts(db, day, max_per_hour=3)

        assert hour_status(counts, "14:00").count == 3
        assert hour_status(counts, "14:00").is_full

    def test_counts_all_attendance_states(self, db, make_appointment):
        """Test that confirmed and no-show bookings still occupy the slot."""
        from frontdesk.models import Attendance

        day = date(2024, 6, 10)
        make_appointment(scheduled_date=day, scheduled_time="10:00")
        make_appointment(scheduled_date=day, scheduled_time="10:00", confirmed=True)
        make_appointment(
            scheduled_date=day,
            scheduled_time="10:00",
            confirmed=True,
            attendance=Attendance.NO_SHOW,
        )

        assert hour_status(compute_hour_counts(db, day), "10:00").count == 3
