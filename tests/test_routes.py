"""Tests for HTTP routes using FastAPI TestClient."""

import uuid
from contextlib import asynccontextmanager
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from conftest import make_job
from printshop.auth.models import User, UserRole
from printshop.auth.service import create_user
from printshop.database import get_db
from printshop.dependencies import get_current_user
from printshop.jobs.models import Job


@asynccontextmanager
async def _test_lifespan(app):
    yield


def _make_app(db_session):
    """Build the app with lifespan and settings patched, and the test session as its DB."""
    from printshop.main import create_app

    with patch("printshop.main.lifespan", _test_lifespan), patch("printshop.main.settings") as mock_settings:
        mock_settings.trusted_hosts_list = ["*"]
        mock_settings.cors_origins_list = ["*"]
        mock_settings.cors_allow_credentials = True
        mock_settings.secret_key = "test-secret"
        app = create_app()

    def _test_db():
        yield db_session

    app.dependency_overrides[get_db] = _test_db
    return app


@pytest.fixture
def app_client(db_session):
    """Unauthenticated client."""
    with TestClient(_make_app(db_session), raise_server_exceptions=False) as client:
        yield client


def _client_as(db_session, role: UserRole):
    user = User(id=uuid.uuid4(), email=f"{role.value}@printshop.test", password_hash="x", role=role)
    db_session.add(user)
    db_session.commit()
    app = _make_app(db_session)
    app.dependency_overrides[get_current_user] = lambda: user
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def staff_client(db_session):
    with _client_as(db_session, UserRole.STAFF) as client:
        yield client


@pytest.fixture
def admin_client(db_session):
    with _client_as(db_session, UserRole.ADMIN) as client:
        yield client


@pytest.fixture
def customer_client(db_session, test_customer):
    client = _client_as(db_session, UserRole.CUSTOMER)
    user = client.app.dependency_overrides[get_current_user]()
    test_customer.user_id = user.id
    db_session.commit()
    with client:
        yield client


class TestHealthEndpoint:
    def test_health_returns_ok(self, app_client):
        response = app_client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["db"] == "ok"
        assert "version" in data
        assert "uptime_seconds" in data

    def test_health_degraded_when_db_unreachable(self, db_session):
        app = _make_app(db_session)
        broken = MagicMock()
        broken.execute.side_effect = RuntimeError("connection refused")

        def _broken_db():
            yield broken

        app.dependency_overrides[get_db] = _broken_db
        with TestClient(app, raise_server_exceptions=False) as client:
            data = client.get("/health").json()
        assert data["status"] == "degraded"
        assert data["db"] == "unreachable"


class TestErrors:
    def test_unknown_path_is_json_404(self, app_client):
        response = app_client.get("/nonexistent-page-that-does-not-exist")
        assert response.status_code == 404
        assert "error" in response.json()

    def test_security_headers(self, app_client):
        response = app_client.get("/health")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"

    def test_validation_error(self, staff_client, workflow):
        response = staff_client.post("/api/v1/jobs", json={"title": ""})
        assert response.status_code == 422
        assert response.json()["error"] == "Invalid request"


class TestAuthRoutes:
    def test_login_wrong_credentials(self, app_client):
        with patch("printshop.auth.routes.authenticate_user", return_value=None):
            response = app_client.post("/login", json={"email": "wrong@test.com", "password": "wrong"})
        assert response.status_code == 401

    def test_login_then_me(self, app_client, db_session):
        create_user(db_session, "Clerk@PrintShop.com", "s3cret-pass", "Clerk", UserRole.STAFF)
        db_session.commit()

        response = app_client.post("/login", json={"email": "clerk@printshop.com", "password": "s3cret-pass"})
        assert response.status_code == 200
        assert response.json()["user"]["role"] == "staff"

        me = app_client.get("/me")
        assert me.status_code == 200
        assert me.json()["email"] == "clerk@printshop.com"

        app_client.post("/logout")
        assert app_client.get("/me").status_code == 401


class TestApiRequiresAuth:
    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("get", "/api/v1/jobs"),
            ("post", "/api/v1/jobs/1/advance"),
            ("post", "/api/v1/jobs/1/cancel"),
            ("get", "/api/v1/workflow/statuses"),
            ("get", "/api/v1/notifications/logs"),
        ],
    )
    def test_unauthenticated_is_401(self, app_client, method, path):
        response = getattr(app_client, method)(path)
        assert response.status_code == 401
        assert response.json() == {"error": "Authentication required"}

    def test_customer_cannot_advance(self, customer_client, test_job):
        response = customer_client.post(f"/api/v1/jobs/{test_job.id}/advance")
        assert response.status_code == 403

    def test_staff_cannot_delete(self, staff_client, test_job):
        assert staff_client.delete(f"/api/v1/jobs/{test_job.id}").status_code == 403

    def test_customer_cannot_see_stats(self, customer_client, workflow):
        assert customer_client.get("/api/v1/jobs/stats").status_code == 403


class TestTracking:
    def test_unknown_code(self, app_client, workflow):
        response = app_client.get("/track/PS000000000000")
        assert response.status_code == 404

    def test_public_summary(self, app_client, test_job):
        response = app_client.get("/track/ps260101abcdef")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "Received"
        assert data["title"] == test_job.title
        assert "customer_id" not in data


class TestJobRoutes:
    def test_advance(self, staff_client, test_job, db_session):
        with patch("printshop.jobs.service.notify_status_update") as mock_notify:
            response = staff_client.post(f"/api/v1/jobs/{test_job.id}/advance")
        assert response.status_code == 200
        data = response.json()
        assert data["outcome"] == "advanced"
        assert data["job"]["status"] == "Processing"
        mock_notify.assert_called_once()

    def test_advance_at_final_stage(self, staff_client, db_session, test_customer, workflow):
        job = make_job(db_session, test_customer, workflow["Completed"])
        with patch("printshop.jobs.service.notify_status_update") as mock_notify:
            response = staff_client.post(f"/api/v1/jobs/{job.id}/advance")
        assert response.status_code == 200
        assert response.json()["outcome"] == "final_stage"
        assert response.json()["changed"] is False
        mock_notify.assert_not_called()

    def test_advance_missing_job(self, staff_client, workflow):
        assert staff_client.post("/api/v1/jobs/9999/advance").status_code == 404

    def test_stats(self, staff_client, db_session, test_customer, workflow):
        make_job(db_session, test_customer, workflow["Printing"])
        make_job(db_session, test_customer, workflow["Cancelled"])
        response = staff_client.get("/api/v1/jobs/stats")
        assert response.status_code == 200
        data = response.json()
        assert data["total_jobs"] == 2
        assert data["active_jobs"] == 1
        assert data["cancelled_jobs"] == 1

    def test_cancel_too_late_is_conflict(self, customer_client, db_session, test_customer, workflow):
        job = make_job(db_session, test_customer, workflow["Printing"])
        response = customer_client.post(f"/api/v1/jobs/{job.id}/cancel")
        assert response.status_code == 409
        assert "Too late" in response.json()["error"]

    def test_customer_cancels_own_job(self, customer_client, test_job):
        with patch("printshop.jobs.service.notify_status_update"):
            response = customer_client.post(f"/api/v1/jobs/{test_job.id}/cancel")
        assert response.status_code == 200
        assert response.json()["job"]["status"] == "Cancelled"

    def test_customer_cannot_see_other_jobs(self, customer_client, db_session, workflow):
        from printshop.customers.models import Customer

        other = Customer(id=uuid.uuid4(), name="Someone Else", email="else@example.com")
        db_session.add(other)
        db_session.commit()
        job = make_job(db_session, other, workflow["Pending"])
        assert customer_client.get(f"/api/v1/jobs/{job.id}").status_code == 404

    def test_submit_on_behalf_of_customer(self, staff_client, test_customer, workflow):
        with patch("printshop.jobs.service.notify_job_submitted") as mock_notify:
            response = staff_client.post(
                "/api/v1/jobs",
                json={
                    "title": "Wedding invitations",
                    "customer_id": str(test_customer.id),
                    "quantity": 150,
                    "finishing_options": ["Embossing"],
                },
            )
        assert response.status_code == 201
        data = response.json()["job"]
        assert data["status"] == "Pending"
        assert data["tracking_code"].startswith("PS")
        mock_notify.assert_called_once()

    def test_admin_deletes_job(self, admin_client, test_job, db_session):
        job_id = test_job.id
        assert admin_client.delete(f"/api/v1/jobs/{job_id}").status_code == 200
        db_session.expire_all()
        assert db_session.get(Job, job_id) is None


class TestNotificationRoutes:
    def test_send_reports_per_channel(self, admin_client, test_customer):
        with patch("printshop.notifications.service.send_email", return_value="em_1"):
            response = admin_client.post(
                "/api/v1/notifications/send",
                json={
                    "type": "email",
                    "customer_id": str(test_customer.id),
                    "event": "delivery_scheduled",
                    "message": "Your delivery is booked",
                },
            )
        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "email_sent": True,
            "sms_sent": False,
            "customer_name": "Aminata Kamara",
        }

    def test_send_unexpected_error_is_500(self, admin_client, test_customer):
        with patch("printshop.notifications.routes.dispatch", side_effect=RuntimeError("boom")):
            response = admin_client.post(
                "/api/v1/notifications/send",
                json={"customer_id": str(test_customer.id), "event": "status_updated", "message": "x"},
            )
        assert response.status_code == 500
        assert response.json() == {"error": "boom"}

    def test_preferences_round_trip(self, customer_client):
        response = customer_client.get("/api/v1/notifications/preferences")
        assert response.status_code == 200
        assert response.json()["sms_notifications"] is False

        response = customer_client.put("/api/v1/notifications/preferences", json={"sms_notifications": True})
        assert response.status_code == 200
        assert response.json()["sms_notifications"] is True
        assert response.json()["email_notifications"] is True

    def test_logs_filtered_by_status(self, admin_client, test_customer):
        with patch("printshop.notifications.service.send_email", side_effect=RuntimeError("bounced")):
            admin_client.post(
                "/api/v1/notifications/send",
                json={"customer_id": str(test_customer.id), "event": "status_updated", "message": "x"},
            )
        logs = admin_client.get("/api/v1/notifications/logs", params={"status": "failed"}).json()["logs"]
        assert len(logs) == 1
        assert logs[0]["error_message"] == "bounced"
