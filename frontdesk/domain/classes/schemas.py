"""Class domain schemas - Pydantic models for validation"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_time_label


class ClassOccurrence(BaseModel):
    """One concrete lesson of a recurring offering"""

    course_id: int
    lesson_number: int
    lesson_date: date
    weekday: str
    start_time: str
    end_time: str
    duration_hours: int


class ClassOfferingCreate(BaseModel):
    """Schema for creating a recurring weekly class"""

    name: str
    course_id: int
    room: str
    weekday: str
    start_time: str
    start_date: date
    end_date: Optional[date] = None
    instructor_id: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Class name is required")
        return v.strip()

    @field_validator("weekday")
    @classmethod
    def normalize_weekday(cls, v):
        return v.strip().lower()

    @field_validator("start_time")
    @classmethod
    def validate_start_time(cls, v):
        return validate_time_label(v)


class ClassOfferingResponse(BaseModel):
    id: int
    name: str
    course_id: int
    room: str
    weekday: str
    start_time: str
    start_date: date
    end_date: Optional[date]
    max_students: int
    occurrences: list[ClassOccurrence]


class StartTimesResponse(BaseModel):
    duration_hours: int
    start_times: list[str]
