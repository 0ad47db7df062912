"""Class service - Business logic for recurring course offerings"""

import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...config import DEFAULT_ROOM_CAPACITY, ROOMS
from ...exceptions import NotFoundError, ValidationError
from ...models import ClassOffering
from .recurrence import generate_occurrences
from .repository import ClassRepository
from .schemas import ClassOccurrence, ClassOfferingCreate, ClassOfferingResponse

logger = logging.getLogger(__name__)


def room_capacity(room: str) -> int:
    return ROOMS.get(room, {}).get("capacity", DEFAULT_ROOM_CAPACITY)


def offering_response(
    offering: ClassOffering, occurrences: list[ClassOccurrence]
) -> ClassOfferingResponse:
    return ClassOfferingResponse(
        id=offering.id,
        name=offering.name,
        course_id=offering.course_id,
        room=offering.room,
        weekday=offering.weekday,
        start_time=offering.start_time,
        start_date=offering.start_date,
        end_date=offering.end_date,
        max_students=offering.max_students,
        occurrences=occurrences,
    )


class ClassService:
    """Service layer for class offerings"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ClassRepository()

    def create_class_offering(self, data: ClassOfferingCreate) -> ClassOfferingResponse:
        """
        Persist a weekly offering and return it with its lessons.

        The lessons are generated before anything is written, so an invalid
        start time leaves no offering behind.
        """
        course = self.repo.get_course(self.db, data.course_id)
        if not course:
            raise NotFoundError(f"Course {data.course_id} not found")
        if not course.is_active:
            raise ValidationError(f"Course {course.name} is not active")
        if data.room not in ROOMS:
            raise ValidationError(f"Unknown room '{data.room}'")

        occurrences = generate_occurrences(
            course.id, data.start_date, data.weekday, data.start_time, course.duration_hours
        )

        end_date: Optional[date] = data.end_date or occurrences[-1].lesson_date
        if end_date < occurrences[0].lesson_date:
            raise ValidationError("End date is before the first lesson")

        offering = self.repo.create_offering(
            self.db,
            course_id=course.id,
            name=data.name,
            room=data.room,
            instructor_id=data.instructor_id,
            weekday=data.weekday,
            start_time=data.start_time,
            start_date=data.start_date,
            end_date=end_date,
            max_students=room_capacity(data.room),
        )
        logger.info(
            f"✅ Class offering {offering.id} '{offering.name}' created: "
            f"{len(occurrences)} lessons from {occurrences[0].lesson_date}"
        )
        return offering_response(offering, occurrences)

    def get_occurrences(self, offering: ClassOffering) -> list[ClassOccurrence]:
        return generate_occurrences(
            offering.course_id,
            offering.start_date,
            offering.weekday,
            offering.start_time,
            offering.course.duration_hours,
        )

    def list_offerings(self, room: Optional[str] = None) -> list[ClassOfferingResponse]:
        """Active offerings with their lessons, optionally for one room"""
        return [
            offering_response(o, self.get_occurrences(o))
            for o in self.repo.get_active_offerings(self.db, room)
        ]
