"""Class router - FastAPI endpoints for recurring offerings"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from .recurrence import available_start_times
from .schemas import ClassOfferingCreate, ClassOfferingResponse, StartTimesResponse
from .service import ClassService

router = APIRouter(prefix="/classes", tags=["Classes"])


def get_class_service(db: Session = Depends(get_db)) -> ClassService:
    """Dependency injection for ClassService"""
    return ClassService(db)


@router.get("/start-times", response_model=StartTimesResponse)
async def get_start_times(duration_hours: int = Query(..., ge=1)):
    """Slots a lesson of the given length may start at"""
    return StartTimesResponse(
        duration_hours=duration_hours, start_times=available_start_times(duration_hours)
    )


@router.post("/offerings", response_model=ClassOfferingResponse)
async def create_offering(
    data: ClassOfferingCreate,
    service: ClassService = Depends(get_class_service),
):
    """Create a weekly offering and return its lessons"""
    return service.create_class_offering(data)


@router.get("/offerings", response_model=list[ClassOfferingResponse])
async def list_offerings(
    room: Optional[str] = Query(None),
    service: ClassService = Depends(get_class_service),
):
    """Active offerings with their lessons"""
    return service.list_offerings(room)
