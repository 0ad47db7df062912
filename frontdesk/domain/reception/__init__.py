"""Reception domain - Confirmation, attendance and QR check-in"""

from .router import router
from .scanner import CameraSource, ScanSession, camera_session
from .stats import attendance_summary, daily_attendance, hourly_attendance
from .tokens import encode_checkin_token, parse_checkin_token, render_checkin_qr
from .workflow import CheckInWorkflow

__all__ = [
    "CameraSource",
    "CheckInWorkflow",
    "ScanSession",
    "attendance_summary",
    "camera_session",
    "daily_attendance",
    "encode_checkin_token",
    "hourly_attendance",
    "parse_checkin_token",
    "render_checkin_qr",
    "router",
]
