"""
QR scanning session

A ScanSession holds the camera for the lifetime of one scanning dialog and
feeds every decoded code to CheckInWorkflow.check_in(). The camera is
released on every exit path: success, cancel, exhaustion or error.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional, Protocol

from ...exceptions import ResourceAcquisitionError
from ...models import Appointment
from .workflow import CheckInWorkflow

logger = logging.getLogger(__name__)


class CameraSource(Protocol):
    """Anything that can hand over decoded QR text frame by frame"""

    def open(self) -> None:
        ...

    def read_text(self) -> Optional[str]:
        """Decoded text of the next frame, or None when nothing was recognised"""
        ...

    def close(self) -> None:
        ...


class CameraExhausted(Exception):
    """Raised by a CameraSource whose stream has ended"""


@contextmanager
def camera_session(camera: CameraSource) -> Iterator[CameraSource]:
    """
    Acquire the camera exclusively for the duration of the block.

    Raises:
        ResourceAcquisitionError: the camera could not be opened
    """
    try:
        camera.open()
    except PermissionError as e:
        logger.warning(f"⚠️ Camera access denied: {e}")
        raise ResourceAcquisitionError("Camera access denied", permission_denied=True) from e
    except (OSError, RuntimeError) as e:
        logger.warning(f"⚠️ Camera unavailable: {e}")
        raise ResourceAcquisitionError(f"Camera unavailable: {e}") from e

    logger.debug("📷 Camera acquired")
    try:
        yield camera
    finally:
        camera.close()
        logger.debug("📷 Camera released")


class ScanSession:
    def __init__(self, workflow: CheckInWorkflow, camera: CameraSource):
        self.workflow = workflow
        self.camera = camera
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        """Stop scanning; safe to call from another thread"""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def run(self, max_frames: Optional[int] = None) -> Optional[Appointment]:
        """
        Scan until the first recognised check-in token.

        Returns the checked-in appointment, or None when the session was
        cancelled or the camera ran out of frames. InvalidToken and transition
        errors propagate after the camera has been released.
        """
        frames = 0
        with camera_session(self.camera) as camera:
            while not self._cancelled.is_set():
                if max_frames is not None and frames >= max_frames:
                    logger.info(f"📷 Scan stopped after {frames} frames")
                    return None
                frames += 1

                try:
                    text = camera.read_text()
                except CameraExhausted:
                    logger.info("📷 Camera stream ended")
                    return None

                if not text:
                    continue

                appointment = self.workflow.check_in(text)
                if appointment is not None:
                    logger.info(f"✅ Checked in appointment {appointment.public_id}")
                    return appointment

        logger.info("📷 Scan cancelled")
        return None
