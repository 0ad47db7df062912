"""Scheduling domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...config import DEFAULT_MAX_PER_HOUR
from ...shared.validators import validate_time_label


class HourCount(BaseModel):
    """Occupancy of one commercial hour slot on one date"""

    hour: str
    count: int
    is_full: bool
    is_warning: bool


class HourCountsResponse(BaseModel):
    service_date: date
    max_per_hour: int
    hours: list[HourCount]


class ServiceDayCreate(BaseModel):
    """Schema for creating a service day"""

    service_date: date
    max_per_hour: int = Field(default=DEFAULT_MAX_PER_HOUR, ge=1)
    created_by: Optional[str] = None


class ServiceDayResponse(BaseModel):
    id: int
    service_date: date
    weekday_name: str
    is_active: bool
    max_per_hour: int
    label: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AppointmentCreate(BaseModel):
    """Schema for booking an appointment"""

    lead_id: int
    agent_id: str
    service_date: date
    scheduled_time: str
    notes: Optional[str] = None

    @field_validator("scheduled_time")
    @classmethod
    def validate_scheduled_time(cls, v):
        return validate_time_label(v)


class AppointmentResponse(BaseModel):
    id: int
    public_id: str
    lead_id: int
    agent_id: str
    scheduled_date: date
    scheduled_time: str
    confirmed: bool
    attendance: str
    state: str
    checked_in_at: Optional[datetime] = None
    notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("attendance", "state", mode="before")
    @classmethod
    def enum_value(cls, v):
        return getattr(v, "value", v)
