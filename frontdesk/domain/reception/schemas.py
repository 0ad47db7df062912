"""Reception domain schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ...config import CHECKIN_TOKEN_TYPE


class CheckInToken(BaseModel):
    """Payload embedded in an appointment's QR code"""

    type: str = CHECKIN_TOKEN_TYPE
    appointment_id: str = Field(alias="appointmentId")

    model_config = ConfigDict(populate_by_name=True)


class AttendanceRequest(BaseModel):
    outcome: str  # attended | no_show


class CheckInRequest(BaseModel):
    """Raw text decoded by a scanner"""

    payload: str


class CheckInResponse(BaseModel):
    checked_in: bool
    appointment_id: Optional[str] = None
    state: Optional[str] = None


class QRCodeResponse(BaseModel):
    appointment_id: str
    payload: str
    qr_code: str  # data:image/png;base64,...


class HourlyAttendance(BaseModel):
    hour: str
    scheduled: int
    attended: int
    no_show: int


class DailyAttendance(BaseModel):
    date: str
    scheduled: int
    attended: int
    rate: int  # percent


class AttendanceSummary(BaseModel):
    today_total: int
    today_attended: int
    today_no_show: int
    today_pending: int
    today_rate: int
    week_total: int
    week_attended: int
    week_rate: int
    rate_trend: int  # today's rate minus yesterday's, in points
    hourly: list[HourlyAttendance]
    daily: list[DailyAttendance]
