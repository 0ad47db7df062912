"""
Check-in tokens

An appointment's QR code carries {"type": ..., "appointmentId": ...} as JSON.
Tokens are neither signed nor time-limited: anyone holding a copy of the code
can present it again.
"""

import base64
import io
import json

import qrcode
from qrcode.constants import ERROR_CORRECT_H

from ...config import CHECKIN_TOKEN_TYPE
from ...exceptions import ValidationError
from .schemas import CheckInToken


def encode_checkin_token(appointment_id: str, token_type: str = CHECKIN_TOKEN_TYPE) -> str:
    token = CheckInToken(type=token_type, appointment_id=appointment_id)
    return json.dumps(token.model_dump(by_alias=True))


def parse_checkin_token(text: str, token_type: str = CHECKIN_TOKEN_TYPE) -> CheckInToken:
    """
    Decode scanned text into a token.

    Raises:
        ValidationError: not JSON, wrong or missing discriminator, or a missing
            or empty appointment id
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise ValidationError("Scanned code is not a check-in token") from e

    if not isinstance(data, dict) or data.get("type") != token_type:
        raise ValidationError("Scanned code is not a check-in token")

    appointment_id = data.get("appointmentId")
    if not isinstance(appointment_id, str) or not appointment_id:
        raise ValidationError("Check-in token has no appointment id")

    return CheckInToken(type=token_type, appointment_id=appointment_id)


def render_checkin_qr(appointment_id: str, token_type: str = CHECKIN_TOKEN_TYPE) -> str:
    """PNG data URL of the check-in QR code (high error correction for poor lighting)"""
    qr = qrcode.QRCode(version=None, error_correction=ERROR_CORRECT_H, box_size=10, border=4)
    qr.add_data(encode_checkin_token(appointment_id, token_type))
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    qr_code_base64 = base64.b64encode(buffer.getvalue()).decode()

    return f"data:image/png;base64,{qr_code_base64}"
