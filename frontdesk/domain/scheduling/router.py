"""Scheduling router - FastAPI endpoints for service days and hour occupancy"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from ...shared.validators import utcnow
from .schemas import (
    AppointmentCreate,
    AppointmentResponse,
    HourCountsResponse,
    ServiceDayCreate,
    ServiceDayResponse,
)
from .service import SchedulingService, service_day_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scheduling", tags=["Scheduling"])


def get_scheduling_service(db: Session = Depends(get_db)) -> SchedulingService:
    """Dependency injection for SchedulingService"""
    return SchedulingService(db)


@router.get("/service-days", response_model=list[ServiceDayResponse])
async def list_service_days(service: SchedulingService = Depends(get_scheduling_service)):
    """Get active service days from today onwards"""
    return service.list_upcoming_service_days(utcnow().date())


@router.post("/service-days", response_model=ServiceDayResponse)
async def create_service_day(
    data: ServiceDayCreate,
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Create a bookable service day"""
    service_day = service.create_service_day(data.service_date, data.max_per_hour, data.created_by)
    return service_day_response(service_day)


@router.get("/hour-counts", response_model=HourCountsResponse)
async def get_hour_counts(
    service_date: date = Query(...),
    max_per_hour: Optional[int] = Query(None, ge=1),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Occupancy per commercial hour for a date"""
    if max_per_hour is None:
        max_per_hour = service.resolve_max_per_hour(service_date)
    return HourCountsResponse(
        service_date=service_date,
        max_per_hour=max_per_hour,
        hours=service.get_hour_counts(service_date, max_per_hour),
    )


@router.post("/appointments", response_model=AppointmentResponse)
async def book_appointment(
    data: AppointmentCreate,
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Book an appointment (never rejected for capacity)"""
    appointment = service.book_appointment(
        data.lead_id, data.agent_id, data.service_date, data.scheduled_time, data.notes
    )
    return AppointmentResponse.model_validate(appointment)
