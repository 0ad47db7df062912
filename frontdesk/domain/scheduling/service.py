"""Scheduling service - Business logic for service days and bookings"""

import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...config import COMMERCIAL_HOURS, DEFAULT_MAX_PER_HOUR
from ...exceptions import ValidationError
from ...models import Appointment, Attendance, ServiceDay
from ...shared.calendar import format_service_day, weekday_name
from ...shared.validators import validate_time_label
from .capacity import compute_hour_counts, hour_status
from .repository import SchedulingRepository
from .schemas import HourCount, ServiceDayResponse

logger = logging.getLogger(__name__)


def service_day_response(service_day: ServiceDay) -> ServiceDayResponse:
    return ServiceDayResponse(
        id=service_day.id,
        service_date=service_day.service_date,
        weekday_name=service_day.weekday_name,
        is_active=service_day.is_active,
        max_per_hour=service_day.max_per_hour,
        label=format_service_day(service_day.service_date),
        created_at=service_day.created_at,
    )


class SchedulingService:
    """Service layer for service days, hour occupancy and booking"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = SchedulingRepository()

    def list_upcoming_service_days(self, today: date) -> list[ServiceDayResponse]:
        """Active service days from ``today`` onwards, with display labels"""
        return [
            service_day_response(d) for d in self.repo.get_upcoming_service_days(self.db, today)
        ]

    def create_service_day(
        self,
        service_date: date,
        max_per_hour: int = DEFAULT_MAX_PER_HOUR,
        created_by: Optional[str] = None,
    ) -> ServiceDay:
        if max_per_hour < 1:
            raise ValidationError("max_per_hour must be at least 1")

        logger.info(f"📅 Creating service day {service_date} (max {max_per_hour}/h)")
        return self.repo.create_service_day(
            self.db,
            service_date=service_date,
            weekday_name=weekday_name(service_date),
            max_per_hour=max_per_hour,
            created_by=created_by,
        )

    def resolve_max_per_hour(self, service_date: date) -> int:
        """Per-day override when the date is configured, global default otherwise"""
        service_day = self.repo.get_service_day(self.db, service_date)
        if service_day and service_day.max_per_hour:
            return service_day.max_per_hour
        return DEFAULT_MAX_PER_HOUR

    def get_hour_counts(
        self, service_date: Optional[date], max_per_hour: Optional[int] = None
    ) -> list[HourCount]:
        if service_date is None:
            return []
        if max_per_hour is None:
            max_per_hour = self.resolve_max_per_hour(service_date)
        return compute_hour_counts(self.db, service_date, max_per_hour)

    def book_appointment(
        self,
        lead_id: int,
        agent_id: str,
        service_date: date,
        scheduled_time: str,
        notes: Optional[str] = None,
    ) -> Appointment:
        """
        Create an appointment in the scheduled state.

        A full slot does not block the booking: the overflow is logged so the
        schedulers can rebalance, and the appointment is created anyway.
        """
        try:
            scheduled_time = validate_time_label(scheduled_time)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        if scheduled_time not in COMMERCIAL_HOURS:
            raise ValidationError(
                f"{scheduled_time} is not a commercial hour ({', '.join(COMMERCIAL_HOURS)})"
            )

        max_per_hour = self.resolve_max_per_hour(service_date)
        hour_counts = compute_hour_counts(self.db, service_date, max_per_hour)
        current = hour_status(hour_counts, scheduled_time)
        if current.is_full:
            logger.warning(
                f"⚠️ Slot {service_date} {scheduled_time} already has "
                f"{current.count}/{max_per_hour} bookings - booking anyway"
            )

        appointment = self.repo.create_appointment(
            self.db,
            lead_id=lead_id,
            agent_id=agent_id,
            scheduled_date=service_date,
            scheduled_time=scheduled_time,
            confirmed=False,
            attendance=Attendance.UNKNOWN,
            notes=notes,
        )
        logger.info(
            f"✅ Appointment {appointment.public_id} booked for lead {lead_id} "
            f"on {service_date} {scheduled_time}"
        )
        return appointment
