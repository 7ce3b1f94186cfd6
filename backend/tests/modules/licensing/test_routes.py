"""
Tests for licensing API endpoints.

Routes run against a real LicenseService wired to the in-memory store,
the scripted gateway and the recording notifier.
"""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from api.dependencies import get_developer_service, get_license_service
from modules.developers.service import DeveloperService
from modules.licensing.exceptions import InvalidLicenseDataError
from modules.licensing.service import LicenseService
from modules.payments.exceptions import PaymentIndeterminateError

from tests.conftest import NOW


@pytest.fixture
def license_service(store, gateway, notifier, policy, clock):
    return LicenseService(store, gateway, notifier, policy, clock=clock)


@pytest.fixture
def client(store, notifier, clock, license_service):
    app = create_app()
    app.dependency_overrides[get_license_service] = lambda: license_service
    app.dependency_overrides[get_developer_service] = lambda: DeveloperService(
        store, notifier, clock=clock
    )
    return TestClient(app)


class TestSessionEndpoint:
    """Tests for GET /api/session/{developer_id}"""

    def test_active(self, client, store, make_developer):
        """Active developers get 200 with status active."""
        store._developers["dev-123"] = make_developer()

        response = client.get("/api/session/dev-123")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "active"
        assert data["developer"]["id"] == "dev-123"
        assert "token" not in data["developer"]

    def test_expired_without_payment_method(self, client, store, make_developer):
        store._developers["dev-123"] = make_developer(expiration=NOW - timedelta(hours=1))

        response = client.get("/api/session/dev-123")

        assert response.status_code == 200
        assert response.json()["status"] == "expired"

    def test_renewed(self, client, store, gateway, make_developer):
        store._developers["dev-123"] = make_developer(
            expiration=NOW - timedelta(hours=1),
            payment_method_token="tok_123",
        )

        response = client.get("/api/session/dev-123")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "renewed"
        assert data["developer"]["is_paid"] is True
        assert gateway.charge_count == 1

    def test_declined_renewal_is_402(self, client, store, gateway, declined, make_developer):
        store._developers["dev-123"] = make_developer(
            expiration=NOW - timedelta(hours=1),
            payment_method_token="tok_123",
        )
        gateway.failure = declined

        response = client.get("/api/session/dev-123")

        assert response.status_code == 402
        data = response.json()
        assert data["status"] == "renewal_failed"
        assert data["reason"] == "declined"
        assert data["error"] == "Your card was declined."

    def test_indeterminate_renewal_is_503(self, client, store, gateway, make_developer):
        store._developers["dev-123"] = make_developer(
            expiration=NOW - timedelta(hours=1),
            payment_method_token="tok_123",
        )
        gateway.failure = PaymentIndeterminateError("Read timed out")

        response = client.get("/api/session/dev-123")

        assert response.status_code == 503
        assert response.json()["reason"] == "indeterminate"

    def test_unknown_developer_is_404(self, client, gateway):
        """Unknown IDs are reported as not found, distinct from expired."""
        response = client.get("/api/session/nobody")

        assert response.status_code == 404
        data = response.json()
        assert data["status"] == "failed"
        assert data["error"] == "DEVELOPER_NOT_FOUND"
        assert gateway.charge_count == 0

    def test_invalid_license_data_is_400(self):
        service = AsyncMock()
        service.check_session.side_effect = InvalidLicenseDataError("dev-123")
        app = create_app()
        app.dependency_overrides[get_license_service] = lambda: service

        response = TestClient(app).get("/api/session/dev-123")

        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_LICENSE_DATA"


class TestSignupEndpoints:
    """Tests for POST /api/signup and /api/signup/paid"""

    def test_trial_signup(self, client, gateway):
        response = client.post("/api/signup", json={"name": "Ada", "email": "ada@example.com"})

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "created"
        assert data["developer"]["expiration"].startswith("2026-03-31")
        assert data["developer"]["is_paid"] is False
        assert gateway.charge_count == 0

    def test_trial_signup_with_client_id(self, client):
        response = client.post(
            "/api/signup",
            json={"name": "Ada", "email": "ada@example.com", "id": "client-generated"},
        )

        assert response.status_code == 201
        assert response.json()["developer"]["id"] == "client-generated"

    def test_duplicate_email_is_409(self, client, store, make_developer):
        store._developers["dev-123"] = make_developer()

        response = client.post("/api/signup", json={"name": "Ada", "email": "ada@example.com"})

        assert response.status_code == 409
        assert response.json()["message"] == "email already exists"

    def test_invalid_email_is_422(self, client):
        response = client.post("/api/signup", json={"name": "Ada", "email": "nope"})
        assert response.status_code == 422

    def test_paid_signup(self, client, gateway):
        response = client.post(
            "/api/signup/paid",
            json={"name": "Ada", "email": "ada@example.com", "source_token": "tok_visa"},
        )

        assert response.status_code == 201
        assert response.json()["developer"]["is_paid"] is True
        assert gateway.charge_count == 1

    def test_paid_signup_declined_is_402(self, client, store, gateway, declined):
        gateway.failure = declined

        response = client.post(
            "/api/signup/paid",
            json={"name": "Ada", "email": "ada@example.com", "source_token": "tok_visa"},
        )

        assert response.status_code == 402
        data = response.json()
        assert data["error"] == "PAYMENT_DECLINED"
        assert data["details"]["gateway_code"] == "card_declined"
        assert store._developers == {}


class TestPayEndpoint:
    """Tests for POST /api/developers/me/pay"""

    def test_requires_token(self, client):
        response = client.post("/api/developers/me/pay", json={"source_token": "tok_visa"})
        assert response.status_code == 401

    def test_pays_with_bearer_token(self, client, store, gateway, make_developer):
        store._developers["dev-123"] = make_developer(expiration=NOW - timedelta(days=1))

        response = client.post(
            "/api/developers/me/pay",
            json={"source_token": "tok_visa"},
            headers={"Authorization": "Bearer token-123"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "success"
        assert data["developer"]["is_paid"] is True
        assert gateway.customers[0]["source"] == "tok_visa"

    def test_pays_with_query_token(self, client, store, make_developer):
        store._developers["dev-123"] = make_developer()

        response = client.post(
            "/api/developers/me/pay?token=token-123",
            json={"source_token": "tok_visa"},
        )

        assert response.status_code == 200
