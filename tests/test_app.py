"""
Tests for application wiring.

Tests:
- Health endpoint
- Error mapping
- Aggregator started and stopped with the app
"""

from unittest.mock import patch

from fastapi.testclient import TestClient

from frontdesk.exceptions import DataAccessError
from frontdesk.main import app
from frontdesk.models import Lead
from frontdesk.shared.validators import utcnow


class TestHealth:
    def test_health(self, client):
        """Test that the health endpoint responds."""
        assert client.get("/health").json() == {"status": "healthy"}


class TestErrorMapping:
    """Tests for the domain error handler."""

    def test_unknown_appointment_is_404(self, client):
        """Test that NotFoundError maps to 404 with a detail message."""
        response = client.post("/reception/appointments/nope/confirm")

        assert response.status_code == 404
        assert "not found" in response.json()["detail"]

    def test_store_failure_is_503(self, client):
        """Test that DataAccessError maps to 503."""
        with patch(
            "frontdesk.domain.reception.router.attendance_summary",
            side_effect=DataAccessError("Database error while loading appointments"),
        ):
            response = client.get("/reception/stats")

        assert response.status_code == 503
        assert response.json() == {"detail": "Database error while loading appointments"}


class TestLifespan:
    """Tests for the notification aggregator lifecycle."""

    def test_aggregator_runs_with_app(self, engine, session_factory):
        """Test that the app serves live counts and stops the aggregator on shutdown."""
        with patch("frontdesk.main.NOTIFICATIONS_ENABLED", True), patch(
            "frontdesk.main.REDIS_URL", None
        ), patch("frontdesk.main.engine", engine), patch(
            "frontdesk.main.SessionLocal", session_factory
        ):
            with TestClient(app) as client:
                aggregator = app.state.notification_aggregator
                assert aggregator.running

                session = session_factory()
                session.add(Lead(full_name="Live", created_at=utcnow()))
                session.commit()
                session.close()

                body = client.get("/notifications/counts").json()

            assert not aggregator.running
            assert app.state.notification_aggregator is None

        assert body["counts"]["crm"] == 1
        assert body["is_loading"] is False
