import enum
import uuid

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from .database import Base
from .shared.validators import utcnow


def generate_public_id():
    """Generate a unique public ID for secure public access"""
    return str(uuid.uuid4())


class Attendance(str, enum.Enum):
    """Outcome of an appointment; set at most once to a terminal value"""

    UNKNOWN = "unknown"
    ATTENDED = "attended"
    NO_SHOW = "no_show"

    @property
    def is_terminal(self) -> bool:
        return self is not Attendance.UNKNOWN


class AppointmentState(str, enum.Enum):
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    ATTENDED = "attended"
    NO_SHOW = "no_show"


# Lead pipeline: new_lead → contacted → scheduled → attended → enrolled / lost
LEAD_STATUS_NEW = "new_lead"

# Payment statuses: pending → paid, pending → overdue
PAYMENT_STATUS_OVERDUE = "overdue"


class Lead(Base):
    __tablename__ = "leads"

    id = Column(Integer, primary_key=True, index=True)
    public_id = Column(
        String(36), unique=True, nullable=False, index=True, default=generate_public_id
    )
    full_name = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=True)
    email = Column(String(255), nullable=True)
    source = Column(String(50), nullable=True)  # whatsapp, instagram, site, referral...
    status = Column(String(50), default=LEAD_STATUS_NEW, nullable=False, index=True)
    notes = Column(Text, nullable=True)

    # Python-side defaults keep stored timestamps naive UTC on every backend
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    appointments = relationship("Appointment", back_populates="lead")


class Appointment(Base):
    """A booked visit; confirmation and attendance are driven by reception"""

    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    public_id = Column(
        String(36), unique=True, nullable=False, index=True, default=generate_public_id
    )

    lead_id = Column(Integer, ForeignKey("leads.id"), nullable=False)
    agent_id = Column(String(255), nullable=False)  # Commercial agent who booked it

    scheduled_date = Column(Date, nullable=False, index=True)
    scheduled_time = Column(String(5), nullable=False)  # HH:MM, one of COMMERCIAL_HOURS

    # Status workflow: scheduled → confirmed → attended | no_show
    confirmed = Column(Boolean, default=False, nullable=False)
    attendance = Column(
        Enum(Attendance, name="attendance_outcome", values_callable=lambda e: [m.value for m in e]),
        default=Attendance.UNKNOWN,
        nullable=False,
    )
    checked_in_at = Column(DateTime, nullable=True)  # Only set by a QR scan

    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    lead = relationship("Lead", back_populates="appointments")

    @property
    def state(self) -> AppointmentState:
        attendance = self.attendance or Attendance.UNKNOWN
        if attendance is Attendance.ATTENDED:
            return AppointmentState.ATTENDED
        if attendance is Attendance.NO_SHOW:
            return AppointmentState.NO_SHOW
        if self.confirmed:
            return AppointmentState.CONFIRMED
        return AppointmentState.SCHEDULED


class ServiceDay(Base):
    """A bookable calendar date with its own per-hour cap"""

    __tablename__ = "service_days"

    id = Column(Integer, primary_key=True, index=True)
    service_date = Column(Date, unique=True, nullable=False, index=True)
    weekday_name = Column(String(20), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    max_per_hour = Column(Integer, nullable=False)
    created_by = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    lead_id = Column(Integer, ForeignKey("leads.id"), nullable=True)
    installment_number = Column(Integer, default=1, nullable=False)
    amount = Column(Float, nullable=False)
    due_date = Column(Date, nullable=False)
    status = Column(String(50), default="pending", nullable=False, index=True)
    paid_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    duration_hours = Column(Integer, default=1, nullable=False)  # Length of one lesson
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    offerings = relationship("ClassOffering", back_populates="course")


class ClassOffering(Base):
    """A recurring weekly class; its lesson dates are derived, not stored"""

    __tablename__ = "class_offerings"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False)
    name = Column(String(255), nullable=False)
    room = Column(String(100), nullable=False)
    instructor_id = Column(String(255), nullable=True)
    weekday = Column(String(10), nullable=False)  # monday..sunday
    start_time = Column(String(5), nullable=False)  # HH:MM
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    max_students = Column(Integer, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    course = relationship("Course", back_populates="offerings")
