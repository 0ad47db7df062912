"""
Tests for service days and booking.

Tests:
- Service day creation and listing
- Per-day capacity overrides
- Booking validation and over-capacity behaviour
- Scheduling endpoints
"""

import logging
from datetime import date

import pytest

from frontdesk.domain.scheduling import SchedulingService
from frontdesk.exceptions import ValidationError
from frontdesk.models import AppointmentState, Attendance
from frontdesk.shared.calendar import format_service_day

MONDAY = date(2024, 6, 10)


class TestServiceDays:
    """Tests for configuring bookable dates."""

    def test_create_sets_weekday_name(self, db):
        """Test that the weekday name is derived from the date."""
        service_day = SchedulingService(db).create_service_day(MONDAY, max_per_hour=10)

        assert service_day.weekday_name == "Monday"
        assert service_day.max_per_hour == 10
        assert service_day.is_active

    def test_duplicate_date_rejected(self, db):
        """Test that a date can only be configured once."""
        service = SchedulingService(db)
        service.create_service_day(MONDAY)

        with pytest.raises(ValidationError):
            service.create_service_day(MONDAY)

    def test_max_per_hour_must_be_positive(self, db):
        """Test that a zero cap is refused."""
        with pytest.raises(ValidationError):
            SchedulingService(db).create_service_day(MONDAY, max_per_hour=0)

    def test_upcoming_excludes_past_days(self, db):
        """Test that only today and later are listed, soonest first."""
        service = SchedulingService(db)
        service.create_service_day(date(2024, 6, 20))
        service.create_service_day(date(2024, 6, 1))
        service.create_service_day(MONDAY)

        days = service.list_upcoming_service_days(MONDAY)

        assert [d.service_date for d in days] == [MONDAY, date(2024, 6, 20)]
        assert days[0].label == "10/06 - Monday"

    def test_label_format(self):
        """Test the dd/mm - Weekday label."""
        assert format_service_day(date(2024, 7, 6)) == "06/07 - Saturday"

    def test_resolve_max_per_hour(self, db):
        """Test per-day override and the global default."""
        service = SchedulingService(db)
        service.create_service_day(MONDAY, max_per_hour=4)

        assert service.resolve_max_per_hour(MONDAY) == 4
        assert service.resolve_max_per_hour(date(2024, 6, 12)) == 15


class TestBooking:
    """Tests for booking appointments."""

    def test_new_appointment_is_scheduled(self, db, lead):
        """Test that a booking starts unconfirmed with unknown attendance."""
        appointment = SchedulingService(db).book_appointment(lead.id, "agent-1", MONDAY, "10:00")

        assert appointment.confirmed is False
        assert appointment.attendance == Attendance.UNKNOWN
        assert appointment.state == AppointmentState.SCHEDULED
        assert appointment.checked_in_at is None
        assert len(appointment.public_id) == 36

    def test_seconds_are_dropped(self, db, lead):
        """Test that HH:MM:SS is stored as HH:MM."""
        appointment = SchedulingService(db).book_appointment(lead.id, "agent-1", MONDAY, "10:00:00")

        assert appointment.scheduled_time == "10:00"

    @pytest.mark.parametrize("time_label", ["25:00", "9h", "", "18:00"])
    def test_invalid_or_closed_hour_rejected(self, db, lead, time_label):
        """Test that malformed times and hours outside the schedule are refused."""
        with pytest.raises(ValidationError):
            SchedulingService(db).book_appointment(lead.id, "agent-1", MONDAY, time_label)

    def test_full_slot_still_books(self, db, lead, caplog):
        """Test that a full slot logs a warning and books anyway."""
        service = SchedulingService(db)
        service.create_service_day(MONDAY, max_per_hour=1)
        service.book_appointment(lead.id, "agent-1", MONDAY, "11:00")

        with caplog.at_level(logging.WARNING):
            second = service.book_appointment(lead.id, "agent-2", MONDAY, "11:00")

        assert second.id is not None
        assert "booking anyway" in caplog.text
        counts = service.get_hour_counts(MONDAY)
        assert [c.count for c in counts if c.hour == "11:00"] == [2]


class TestSchedulingEndpoints:
    """Tests for the /scheduling routes."""

    def test_create_and_list_service_days(self, client):
        """Test creating a service day through the API."""
        response = client.post(
            "/scheduling/service-days", json={"service_date": "2099-01-05", "max_per_hour": 8}
        )
        assert response.status_code == 200
        assert response.json()["label"] == "05/01 - Monday"

        listed = client.get("/scheduling/service-days").json()
        assert [d["service_date"] for d in listed] == ["2099-01-05"]

    def test_hour_counts_uses_day_override(self, client, make_appointment):
        """Test that hour counts pick up the service day's cap."""
        client.post(
            "/scheduling/service-days", json={"service_date": "2024-06-10", "max_per_hour": 2}
        )
        make_appointment(scheduled_date=MONDAY, scheduled_time="09:00")
        make_appointment(scheduled_date=MONDAY, scheduled_time="09:00")

        body = client.get("/scheduling/hour-counts", params={"service_date": "2024-06-10"}).json()

        assert body["max_per_hour"] == 2
        assert body["hours"][0] == {
            "hour": "09:00",
            "count": 2,
            "is_full": True,
            "is_warning": False,
        }

    def test_book_appointment(self, client, lead):
        """Test booking through the API."""
        response = client.post(
            "/scheduling/appointments",
            json={
                "lead_id": lead.id,
                "agent_id": "agent-1",
                "service_date": "2024-06-10",
                "scheduled_time": "15:00",
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["state"] == "scheduled"
        assert body["attendance"] == "unknown"

    def test_book_outside_hours_is_422(self, client, lead):
        """Test that a closed hour is a validation error."""
        response = client.post(
            "/scheduling/appointments",
            json={
                "lead_id": lead.id,
                "agent_id": "agent-1",
                "service_date": "2024-06-10",
                "scheduled_time": "19:00",
            },
        )

        assert response.status_code == 422
        assert "commercial hour" in response.json()["detail"]
