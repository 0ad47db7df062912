"""
Tests for QR scan sessions.

Tests:
- Camera acquisition errors
- Camera release on every exit path
- Scanning past unrelated codes
"""

import threading
from unittest.mock import Mock

import pytest

from frontdesk.domain.reception import (
    CheckInWorkflow,
    ScanSession,
    camera_session,
    encode_checkin_token,
)
from frontdesk.domain.reception.scanner import CameraExhausted
from frontdesk.exceptions import InvalidToken, InvalidTransition, ResourceAcquisitionError
from frontdesk.models import AppointmentState

from .conftest import NOW


class FakeCamera:
    """Camera yielding a fixed list of decoded frames"""

    def __init__(self, frames=(), open_error=None, endless=False):
        self.frames = list(frames)
        self.open_error = open_error
        self.endless = endless
        self.opened = False
        self.closed = False
        self.reads = 0

    def open(self):
        if self.open_error:
            raise self.open_error
        self.opened = True

    def read_text(self):
        self.reads += 1
        if self.frames:
            return self.frames.pop(0)
        if self.endless:
            return None
        raise CameraExhausted()

    def close(self):
        self.closed = True


@pytest.fixture
def workflow(db):
    return CheckInWorkflow(db, clock=lambda: NOW)


class TestCameraSession:
    """Tests for scoped camera acquisition."""

    def test_permission_denied(self):
        """Test that a denied camera is a retryable acquisition error."""
        camera = FakeCamera(open_error=PermissionError("denied"))

        with pytest.raises(ResourceAcquisitionError) as exc_info:
            with camera_session(camera):
                pass

        assert exc_info.value.permission_denied is True
        assert exc_info.value.retryable is True
        assert exc_info.value.status_code == 503

    def test_device_unavailable(self):
        """Test that a busy device is an acquisition error without permission flag."""
        camera = FakeCamera(open_error=OSError("device busy"))

        with pytest.raises(ResourceAcquisitionError) as exc_info:
            with camera_session(camera):
                pass

        assert exc_info.value.permission_denied is False

    def test_released_on_error(self):
        """Test that the camera is closed when the block raises."""
        camera = FakeCamera()

        with pytest.raises(RuntimeError):
            with camera_session(camera):
                raise RuntimeError("boom")

        assert camera.closed


class TestScanSession:
    """Tests for a scanning dialog's lifetime."""

    def test_checks_in_first_token_after_unrelated_codes(self, workflow, make_appointment):
        """Test that unrelated codes are skipped until a check-in token appears."""
        appointment = make_appointment(confirmed=True)
        camera = FakeCamera(
            frames=[
                None,
                "https://example.com",
                "garbage{",
                encode_checkin_token(appointment.public_id),
            ]
        )

        result = ScanSession(workflow, camera).run()

        assert result.public_id == appointment.public_id
        assert result.state == AppointmentState.ATTENDED
        assert result.checked_in_at == NOW
        assert camera.closed

    def test_exhausted_camera_returns_none(self, workflow):
        """Test that running out of frames ends the session quietly."""
        camera = FakeCamera(frames=["nothing here"])

        assert ScanSession(workflow, camera).run() is None
        assert camera.closed

    def test_max_frames(self, workflow):
        """Test that scanning stops after max_frames."""
        camera = FakeCamera(endless=True)

        assert ScanSession(workflow, camera).run(max_frames=5) is None
        assert camera.reads == 5
        assert camera.closed

    def test_cancel_before_run(self, workflow):
        """Test that a cancelled session releases the camera without reading."""
        camera = FakeCamera(endless=True)
        session = ScanSession(workflow, camera)
        session.cancel()

        assert session.run() is None
        assert session.cancelled
        assert camera.opened and camera.closed
        assert camera.reads == 0

    def test_cancel_from_another_thread(self, workflow):
        """Test that cancel() stops a running session."""
        camera = FakeCamera(endless=True)
        session = ScanSession(workflow, camera)
        timer = threading.Timer(0.05, session.cancel)
        timer.start()

        try:
            assert session.run() is None
        finally:
            timer.cancel()
        assert camera.closed

    @pytest.mark.parametrize("error", [InvalidToken("missing"), InvalidTransition("done")])
    def test_errors_propagate_after_release(self, error):
        """Test that workflow errors surface and the camera is still released."""
        workflow = Mock()
        workflow.check_in.side_effect = error
        camera = FakeCamera(frames=["{}"])

        with pytest.raises(type(error)):
            ScanSession(workflow, camera).run()
        assert camera.closed

    def test_unavailable_camera(self, workflow):
        """Test that a camera that cannot open fails the session."""
        camera = FakeCamera(open_error=PermissionError("denied"))

        with pytest.raises(ResourceAcquisitionError):
            ScanSession(workflow, camera).run()
        assert not camera.closed
