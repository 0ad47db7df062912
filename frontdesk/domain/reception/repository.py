"""Reception repository - Database operations for appointment check-in"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...database import data_access
from ...models import Appointment


class ReceptionRepository:
    """Repository for appointment lookups and state persistence"""

    @staticmethod
    def get_by_public_id(db: Session, public_id: str) -> Optional[Appointment]:
        with data_access(db, f"loading appointment {public_id}"):
            return db.query(Appointment).filter(Appointment.public_id == public_id).first()

    @staticmethod
    def save(db: Session, appointment: Appointment) -> Appointment:
        with data_access(db, f"saving appointment {appointment.public_id}"):
            db.commit()
            db.refresh(appointment)
        return appointment

    @staticmethod
    def get_between(db: Session, start: date, end: date) -> list[Appointment]:
        """Appointments scheduled from ``start`` to ``end`` inclusive"""
        with data_access(db, f"loading appointments {start}..{end}"):
            return (
                db.query(Appointment)
                .filter(Appointment.scheduled_date >= start, Appointment.scheduled_date <= end)
                .order_by(Appointment.scheduled_date.asc(), Appointment.scheduled_time.asc())
                .all()
            )
