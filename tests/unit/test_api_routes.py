"""
Unit tests for API routes.

Tests endpoint responses with a mocked RegistrationService.
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.api.dependencies import get_registration_service
from src.api.errors import register_exception_handlers
from src.api.routes import router
from src.domain.exceptions import (
    DuplicateEmailError,
    ExpiredError,
    NotFoundError,
    RegistrationError,
    SendError,
    ValidationError,
)
from src.domain.ports import Account, PendingVerification
from src.domain.registration import RegistrationService

NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

ACCOUNT = Account(
    id="acct-1",
    email="user@example.com",
    username="ana maria",
    account_type="client",
    public_key="GPUBLIC0001",
    is_verified=True,
    created_at=NOW,
)

REGISTER_BODY = {"email": "user@example.com", "username": "ana", "accountType": "client"}


@pytest.fixture
def mock_service() -> MagicMock:
    return MagicMock(spec=RegistrationService)


@pytest.fixture
def app(mock_service: MagicMock) -> FastAPI:
    """Create test FastAPI application with the API router and a mocked service."""
    test_app = FastAPI()
    register_exception_handlers(test_app)
    test_app.include_router(router, prefix="/api")
    test_app.dependency_overrides[get_registration_service] = lambda: mock_service
    return test_app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client for the application."""
    return TestClient(app)


class TestRegisterInitiateEndpoint:
    """Tests for POST /api/register-initiate."""

    def test_success_returns_200_with_message(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.initiate_registration.return_value = PendingVerification(
            "user@example.com", "ana", "client", "tok", NOW, NOW
        )

        response = client.post("/api/register-initiate", json=REGISTER_BODY)

        assert response.status_code == 200
        assert "verification email" in response.json()["message"]
        mock_service.initiate_registration.assert_awaited_once_with("user@example.com", "ana", "client")

    def test_duplicate_returns_409(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.initiate_registration.side_effect = DuplicateEmailError("user@example.com")

        response = client.post("/api/register-initiate", json=REGISTER_BODY)

        assert response.status_code == 409
        assert response.json() == {"message": "This email address is already registered."}

    def test_send_failure_returns_500(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.initiate_registration.side_effect = SendError("user@example.com")

        response = client.post("/api/register-initiate", json=REGISTER_BODY)

        assert response.status_code == 500
        assert "could not be sent" in response.json()["message"]

    def test_blank_fields_return_400(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.initiate_registration.side_effect = ValidationError("required")

        response = client.post(
            "/api/register-initiate",
            json={"email": "user@example.com", "username": " ", "accountType": "client"},
        )

        assert response.status_code == 400
        assert response.json() == {"message": "All fields are required."}

    @pytest.mark.parametrize("missing", ["email", "username", "accountType"])
    def test_missing_field_returns_400(self, client: TestClient, mock_service: MagicMock, missing: str) -> None:
        """Schema violations are 400 with a message naming the field."""
        body = {k: v for k, v in REGISTER_BODY.items() if k != missing}

        response = client.post("/api/register-initiate", json=body)

        assert response.status_code == 400
        assert missing in response.json()["message"]
        mock_service.initiate_registration.assert_not_called()

    def test_invalid_email_returns_400(self, client: TestClient) -> None:
        response = client.post("/api/register-initiate", json={**REGISTER_BODY, "email": "nope"})
        assert response.status_code == 400

    def test_missing_body_returns_400(self, client: TestClient) -> None:
        response = client.post("/api/register-initiate")
        assert response.status_code == 400
        assert "message" in response.json()


class TestVerifyEmailEndpoint:
    """Tests for GET /api/verify-email."""

    def test_success_redirects_to_success_page(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.verify_email.return_value = ACCOUNT

        response = client.get("/api/verify-email", params={"token": "tok"}, follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == (
            "/success-redirect.html?email=user%40example.com&accountType=client&username=ana+maria"
        )
        mock_service.verify_email.assert_awaited_once_with("tok")

    def test_missing_token_returns_400_plain_text(self, client: TestClient, mock_service: MagicMock) -> None:
        response = client.get("/api/verify-email")

        assert response.status_code == 400
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == "Verification token is missing."
        mock_service.verify_email.assert_not_called()

    def test_empty_token_returns_400(self, client: TestClient) -> None:
        response = client.get("/api/verify-email", params={"token": ""})
        assert response.status_code == 400

    @pytest.mark.parametrize(
        "error,status_code,text",
        [
            (NotFoundError("tok"), 404, "Invalid or already used verification token."),
            (ExpiredError("tok"), 400, "Verification token expired. Please start the registration again."),
            (DuplicateEmailError("user@example.com"), 409, "This email address is already registered."),
            (
                RegistrationError("user@example.com"),
                500,
                "Internal error while completing the registration. Please try again.",
            ),
        ],
    )
    def test_errors_map_to_plain_text(
        self, client: TestClient, mock_service: MagicMock, error: Exception, status_code: int, text: str
    ) -> None:
        mock_service.verify_email.side_effect = error

        response = client.get("/api/verify-email", params={"token": "tok"}, follow_redirects=False)

        assert response.status_code == status_code
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == text


class TestLoginEndpoint:
    """Tests for POST /api/login."""

    def test_success_returns_public_profile(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.login.return_value = ACCOUNT

        response = client.post("/api/login", json={"email": "user@example.com"})

        assert response.status_code == 200
        assert response.json() == {
            "message": "Login successful.",
            "user": {
                "id": "acct-1",
                "email": "user@example.com",
                "username": "ana maria",
                "accountType": "client",
                "publicKey": "GPUBLIC0001",
            },
        }
        mock_service.login.assert_called_once_with("user@example.com")

    def test_response_never_contains_secret(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.login.return_value = ACCOUNT

        response = client.post("/api/login", json={"email": "user@example.com"})

        assert "secret" not in response.text.lower()

    def test_unknown_email_returns_401(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.login.side_effect = NotFoundError("user@example.com")

        response = client.post("/api/login", json={"email": "user@example.com"})

        assert response.status_code == 401
        assert response.json() == {"message": "Email not found or not verified."}

    def test_missing_email_returns_400(self, client: TestClient, mock_service: MagicMock) -> None:
        response = client.post("/api/login", json={})

        assert response.status_code == 400
        assert "email" in response.json()["message"]
        mock_service.login.assert_not_called()

    def test_malformed_email_returns_400(self, client: TestClient, mock_service: MagicMock) -> None:
        """Address syntax is checked before lookup, so a malformed email is a 400 not a 401."""
        response = client.post("/api/login", json={"email": "ana"})

        assert response.status_code == 400
        mock_service.login.assert_not_called()


class TestClientsEndpoint:
    """Tests for GET /api/clients."""

    def test_lists_clients(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.list_clients.return_value = [ACCOUNT]

        response = client.get("/api/clients")

        assert response.status_code == 200
        clients = response.json()["clients"]
        assert len(clients) == 1
        assert clients[0]["email"] == "user@example.com"
        assert clients[0]["accountType"] == "client"
        assert clients[0]["isVerified"] is True
        assert "createdAt" in clients[0]

    def test_empty_list(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.list_clients.return_value = []

        response = client.get("/api/clients")

        assert response.json() == {"clients": []}


class TestHealthEndpoint:
    """Tests for GET /health on the application."""

    def test_reports_pending_count_from_service(self, mock_service: MagicMock) -> None:
        from src.api.main import app as main_app

        mock_service.pending_count.return_value = 3
        main_app.dependency_overrides[get_registration_service] = lambda: mock_service
        try:
            response = TestClient(main_app).get("/health")
        finally:
            main_app.dependency_overrides.clear()

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "pendingVerifications": 3}
        mock_service.pending_count.assert_called_once_with()
