"""Class repository - Database operations for courses and offerings"""

from typing import Optional

from sqlalchemy.orm import Session

from ...database import data_access
from ...models import ClassOffering, Course


class ClassRepository:
    """Repository for course and class offering database operations"""

    @staticmethod
    def get_course(db: Session, course_id: int) -> Optional[Course]:
        with data_access(db, f"loading course {course_id}"):
            return db.query(Course).filter(Course.id == course_id).first()

    @staticmethod
    def create_offering(db: Session, **offering_data) -> ClassOffering:
        offering = ClassOffering(**offering_data)
        with data_access(db, "creating class offering"):
            db.add(offering)
            db.commit()
            db.refresh(offering)
        return offering

    @staticmethod
    def get_active_offerings(db: Session, room: Optional[str] = None) -> list[ClassOffering]:
        with data_access(db, "loading class offerings"):
            query = db.query(ClassOffering).filter(ClassOffering.is_active.is_(True))
            if room:
                query = query.filter(ClassOffering.room == room)
            return query.order_by(ClassOffering.start_date.asc()).all()
