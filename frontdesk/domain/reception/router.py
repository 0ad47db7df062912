"""Reception router - FastAPI endpoints for confirmation, attendance and QR check-in"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...database import get_db
from ...exceptions import NotFoundError
from ...shared.validators import utcnow
from ..scheduling.schemas import AppointmentResponse
from .repository import ReceptionRepository
from .schemas import (
    AttendanceRequest,
    AttendanceSummary,
    CheckInRequest,
    CheckInResponse,
    QRCodeResponse,
)
from .stats import attendance_summary
from .tokens import encode_checkin_token, render_checkin_qr
from .workflow import CheckInWorkflow

router = APIRouter(prefix="/reception", tags=["Reception"])


def get_checkin_workflow(db: Session = Depends(get_db)) -> CheckInWorkflow:
    """Dependency injection for CheckInWorkflow"""
    return CheckInWorkflow(db)


@router.post("/appointments/{appointment_id}/confirm", response_model=AppointmentResponse)
async def confirm_appointment(
    appointment_id: str,
    workflow: CheckInWorkflow = Depends(get_checkin_workflow),
):
    """Confirm a scheduled appointment (no-op if already confirmed)"""
    return AppointmentResponse.model_validate(workflow.confirm(appointment_id))


@router.post("/appointments/{appointment_id}/attendance", response_model=AppointmentResponse)
async def mark_attendance(
    appointment_id: str,
    data: AttendanceRequest,
    workflow: CheckInWorkflow = Depends(get_checkin_workflow),
):
    """Mark a confirmed appointment as attended or no_show"""
    return AppointmentResponse.model_validate(
        workflow.mark_attendance(appointment_id, data.outcome)
    )


@router.post("/check-in", response_model=CheckInResponse)
async def check_in(
    data: CheckInRequest,
    workflow: CheckInWorkflow = Depends(get_checkin_workflow),
):
    """Check in from the text of a scanned QR code; unrelated codes are ignored"""
    appointment = workflow.check_in(data.payload)
    if appointment is None:
        return CheckInResponse(checked_in=False)
    return CheckInResponse(
        checked_in=True,
        appointment_id=appointment.public_id,
        state=appointment.state.value,
    )


@router.get("/appointments/{appointment_id}/qr", response_model=QRCodeResponse)
async def get_checkin_qr(appointment_id: str, db: Session = Depends(get_db)):
    """QR code the lead presents at the front desk"""
    appointment = ReceptionRepository.get_by_public_id(db, appointment_id)
    if not appointment:
        raise NotFoundError(f"Appointment {appointment_id} not found")

    return QRCodeResponse(
        appointment_id=appointment.public_id,
        payload=encode_checkin_token(appointment.public_id),
        qr_code=render_checkin_qr(appointment.public_id),
    )


@router.get("/stats", response_model=AttendanceSummary)
async def get_reception_stats(db: Session = Depends(get_db)):
    """Today's turnout by hour and the attendance rate over the last 7 days"""
    return attendance_summary(db, utcnow().date())
