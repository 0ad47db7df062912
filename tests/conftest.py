"""Pytest configuration and fixtures for test suite."""

import os
from datetime import date, datetime

import pytest

# Set test environment BEFORE any frontdesk imports
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("DB_LOG_SLOW_QUERIES", "false")
os.environ["NOTIFICATIONS_ENABLED"] = "false"
os.environ.pop("REDIS_URL", None)

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from frontdesk.database import Base, get_db  # noqa: E402
from frontdesk.main import app  # noqa: E402
from frontdesk.models import Appointment, Attendance, Course, Lead, Payment  # noqa: E402

# Tuesday
NOW = datetime(2024, 6, 11, 12, 0, 0)
TODAY = NOW.date()


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    """TestClient bound to the test session; lifespan is not started"""

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def lead(db):
    lead = Lead(full_name="Maria Souza", phone="+5511999990000", created_at=NOW)
    db.add(lead)
    db.commit()
    db.refresh(lead)
    return lead


@pytest.fixture
def make_appointment(db, lead):
    """Factory for appointments in any state"""

    def _make(
        scheduled_date: date = TODAY,
        scheduled_time: str = "09:00",
        confirmed: bool = False,
        attendance: Attendance = Attendance.UNKNOWN,
        checked_in_at=None,
        public_id: str = None,
    ) -> Appointment:
        appointment = Appointment(
            lead_id=lead.id,
            agent_id="agent-1",
            scheduled_date=scheduled_date,
            scheduled_time=scheduled_time,
            confirmed=confirmed,
            attendance=attendance,
            checked_in_at=checked_in_at,
        )
        if public_id is not None:
            appointment.public_id = public_id
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
        return appointment

    return _make


@pytest.fixture
def course(db):
    course = Course(name="Barbering Fundamentals", duration_hours=2)
    db.add(course)
    db.commit()
    db.refresh(course)
    return course


@pytest.fixture
def make_payment(db, lead):
    def _make(status: str = "pending") -> Payment:
        payment = Payment(lead_id=lead.id, amount=350.0, due_date=TODAY, status=status)
        db.add(payment)
        db.commit()
        db.refresh(payment)
        return payment

    return _make
