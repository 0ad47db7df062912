"""Notification repository - Count queries behind the navigation badges"""

from datetime import date, datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...database import data_access
from ...models import (
    LEAD_STATUS_NEW,
    PAYMENT_STATUS_OVERDUE,
    Appointment,
    Attendance,
    Lead,
    Payment,
)


class NotificationRepository:
    @staticmethod
    def count_new_leads(db: Session, since: datetime) -> int:
        with data_access(db, "counting new leads"):
            return (
                db.query(func.count(Lead.id))
                .filter(Lead.status == LEAD_STATUS_NEW, Lead.created_at >= since)
                .scalar()
            ) or 0

    @staticmethod
    def count_no_shows(db: Session, day: date) -> int:
        with data_access(db, "counting no-shows"):
            return (
                db.query(func.count(Appointment.id))
                .filter(
                    Appointment.scheduled_date == day,
                    Appointment.attendance == Attendance.NO_SHOW,
                )
                .scalar()
            ) or 0

    @staticmethod
    def count_overdue_payments(db: Session) -> int:
        with data_access(db, "counting overdue payments"):
            return (
                db.query(func.count(Payment.id))
                .filter(Payment.status == PAYMENT_STATUS_OVERDUE)
                .scalar()
            ) or 0

    @staticmethod
    def count_awaiting_check_in(db: Session, day: date) -> int:
        """Confirmed for ``day`` and not scanned in yet"""
        with data_access(db, "counting appointments awaiting check-in"):
            return (
                db.query(func.count(Appointment.id))
                .filter(
                    Appointment.scheduled_date == day,
                    Appointment.confirmed.is_(True),
                    Appointment.checked_in_at.is_(None),
                )
                .scalar()
            ) or 0
