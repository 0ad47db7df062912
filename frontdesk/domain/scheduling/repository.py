"""Scheduling repository - Database operations for service days and appointments"""

from datetime import date
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...database import data_access
from ...exceptions import ValidationError
from ...models import Appointment, ServiceDay


class SchedulingRepository:
    """Repository for scheduling database operations"""

    @staticmethod
    def get_scheduled_times(db: Session, service_date: date) -> list[str]:
        """Get the scheduled time of every appointment on a date"""
        with data_access(db, f"loading appointments for {service_date}"):
            rows = (
                db.query(Appointment.scheduled_time)
                .filter(Appointment.scheduled_date == service_date)
                .all()
            )
        return [row[0] for row in rows]

    @staticmethod
    def get_service_day(db: Session, service_date: date) -> Optional[ServiceDay]:
        with data_access(db, f"loading service day {service_date}"):
            return db.query(ServiceDay).filter(ServiceDay.service_date == service_date).first()

    @staticmethod
    def get_upcoming_service_days(db: Session, today: date) -> list[ServiceDay]:
        """Get active service days from today onwards, soonest first"""
        with data_access(db, "loading service days"):
            return (
                db.query(ServiceDay)
                .filter(ServiceDay.is_active.is_(True), ServiceDay.service_date >= today)
                .order_by(ServiceDay.service_date.asc())
                .all()
            )

    @staticmethod
    def create_service_day(db: Session, **service_day_data) -> ServiceDay:
        """Create a service day; a date can only be configured once"""
        service_day = ServiceDay(**service_day_data)
        with data_access(db, "creating service day"):
            db.add(service_day)
            try:
                db.commit()
            except IntegrityError as e:
                db.rollback()
                raise ValidationError(
                    f"Service day {service_day_data.get('service_date')} already exists"
                ) from e
            db.refresh(service_day)
        return service_day

    @staticmethod
    def create_appointment(db: Session, **appointment_data) -> Appointment:
        appointment = Appointment(**appointment_data)
        with data_access(db, "creating appointment"):
            db.add(appointment)
            db.commit()
            db.refresh(appointment)
        return appointment
