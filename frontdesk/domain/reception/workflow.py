"""
Check-in workflow

Appointment lifecycle driven by reception:

    scheduled ──confirm()──▶ confirmed ──mark_attendance()──▶ attended | no_show

- confirm() is idempotent on a confirmed appointment
- attendance can only be marked after confirmation
- attended / no_show are terminal; reverting one is an administrative edit,
  not a transition of this machine
- check_in() is mark_attendance(attended) triggered by a scanned QR code, and
  is the only path that stamps checked_in_at
"""

import logging
from typing import Callable, Optional, Union

from sqlalchemy.orm import Session

from ...config import CHECKIN_TOKEN_TYPE
from ...exceptions import (
    InvalidToken,
    InvalidTransition,
    NotFoundError,
    PreconditionFailed,
    ValidationError,
)
from ...models import Appointment, AppointmentState, Attendance
from ...shared.validators import utcnow
from .repository import ReceptionRepository
from .tokens import parse_checkin_token

logger = logging.getLogger(__name__)

TERMINAL_STATES = (AppointmentState.ATTENDED, AppointmentState.NO_SHOW)


def parse_outcome(outcome: Union[Attendance, str]) -> Attendance:
    """Accepts an Attendance or its value; "no-show" is read as no_show"""
    if isinstance(outcome, Attendance):
        value = outcome
    else:
        try:
            value = Attendance(str(outcome).strip().lower().replace("-", "_"))
        except ValueError as e:
            raise ValidationError(f"Unknown attendance outcome '{outcome}'") from e

    if not value.is_terminal:
        raise ValidationError("Attendance can only be marked as attended or no_show")
    return value


def apply_confirm(appointment: Appointment) -> bool:
    """Confirm in place; returns False when it was already confirmed"""
    state = appointment.state
    if state in TERMINAL_STATES:
        raise InvalidTransition(
            f"Appointment {appointment.public_id} is already {state.value}; cannot confirm"
        )
    if state is AppointmentState.CONFIRMED:
        return False

    appointment.confirmed = True
    return True


def apply_attendance(appointment: Appointment, outcome: Union[Attendance, str]) -> Attendance:
    """Record the terminal outcome in place"""
    outcome = parse_outcome(outcome)
    state = appointment.state
    if state in TERMINAL_STATES:
        raise InvalidTransition(
            f"Appointment {appointment.public_id} is already {state.value}"
        )
    if state is AppointmentState.SCHEDULED:
        raise PreconditionFailed(
            f"Appointment {appointment.public_id} must be confirmed before marking attendance"
        )

    appointment.attendance = outcome
    return outcome


class CheckInWorkflow:
    """Persisted state transitions for appointments, looked up by public id"""

    def __init__(
        self,
        db: Session,
        clock: Callable = utcnow,
        token_type: str = CHECKIN_TOKEN_TYPE,
    ):
        self.db = db
        self.clock = clock
        self.token_type = token_type
        self.repo = ReceptionRepository()

    def _get(self, appointment_id: str) -> Appointment:
        appointment = self.repo.get_by_public_id(self.db, appointment_id)
        if not appointment:
            raise NotFoundError(f"Appointment {appointment_id} not found")
        return appointment

    def confirm(self, appointment_id: str) -> Appointment:
        appointment = self._get(appointment_id)
        if not apply_confirm(appointment):
            logger.debug(f"ℹ️ Appointment {appointment_id} already confirmed")
            return appointment

        self.repo.save(self.db, appointment)
        logger.info(f"✅ Appointment {appointment_id} transitioned: scheduled → confirmed")
        return appointment

    def mark_attendance(self, appointment_id: str, outcome: Union[Attendance, str]) -> Appointment:
        appointment = self._get(appointment_id)
        return self._record_attendance(appointment, outcome)

    def _record_attendance(
        self, appointment: Appointment, outcome: Union[Attendance, str], scanned: bool = False
    ) -> Appointment:
        outcome = apply_attendance(appointment, outcome)
        if scanned:
            appointment.checked_in_at = self.clock()

        self.repo.save(self.db, appointment)
        logger.info(
            f"✅ Appointment {appointment.public_id} transitioned: confirmed → {outcome.value}"
            + (" (QR check-in)" if scanned else "")
        )
        return appointment

    def check_in(self, payload: str) -> Optional[Appointment]:
        """
        Check in from scanned text.

        Codes that are not check-in tokens are ignored (returns None) so a
        scanner can sweep past unrelated QR codes.

        Raises:
            InvalidToken: the token names an appointment that does not exist
            PreconditionFailed: the appointment is not confirmed yet
            InvalidTransition: the appointment already has an outcome
        """
        try:
            token = parse_checkin_token(payload, self.token_type)
        except ValidationError as e:
            logger.debug(f"ℹ️ Ignoring scanned code: {e.message}")
            return None

        appointment = self.repo.get_by_public_id(self.db, token.appointment_id)
        if not appointment:
            logger.warning(f"⚠️ Check-in token for unknown appointment {token.appointment_id}")
            raise InvalidToken(f"Appointment {token.appointment_id} not found")

        return self._record_attendance(appointment, Attendance.ATTENDED, scanned=True)
