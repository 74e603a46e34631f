"""
API routes - Registration, verification and account endpoints.

This module defines the HTTP endpoints, mounted under /api:
- POST /api/register-initiate - Begin registration, email the verification link
- GET /api/verify-email - Consume the link, provision the account, redirect
- POST /api/login - Look up a verified account by email
- GET /api/clients - List client accounts

JSON endpoints answer errors with {"message": ...}. The verification link
is opened in a browser, so it answers errors in plain text.
"""

import logging
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse

from src.api.dependencies import get_registration_service
from src.api.models import (
    ClientProfile,
    ClientsResponse,
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterInitiateRequest,
    UserProfile,
)
from src.domain.exceptions import (
    DuplicateEmailError,
    ExpiredError,
    NotFoundError,
    RegistrationError,
    SendError,
    ValidationError,
)
from src.domain.registration import RegistrationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["accounts"])

SUCCESS_PAGE = "/success-redirect.html"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


@router.post(
    "/register-initiate",
    response_model=MessageResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing or invalid fields"},
        409: {"model": ErrorResponse, "description": "Email already registered"},
        500: {"model": ErrorResponse, "description": "Verification email could not be sent"},
    },
    summary="Start a registration",
    description="Submit email, username and account type. "
    "A single-use verification link valid for one hour is emailed to the address.",
)
async def register_initiate(
    request_data: RegisterInitiateRequest,
    service: RegistrationService = Depends(get_registration_service),
):
    """
    Start a registration and send the verification email.

    - **email**: Address to register
    - **username**: Display name
    - **accountType**: Account type, e.g. "client"
    """
    try:
        await service.initiate_registration(
            request_data.email, request_data.username, request_data.account_type
        )
    except ValidationError:
        return _error(status.HTTP_400_BAD_REQUEST, "All fields are required.")
    except DuplicateEmailError:
        return _error(status.HTTP_409_CONFLICT, "This email address is already registered.")
    except SendError:
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "The verification email could not be sent. Please try again.",
        )
    return MessageResponse(
        message="A verification email has been sent to your address. Please check your inbox."
    )


@router.get(
    "/verify-email",
    response_class=RedirectResponse,
    status_code=status.HTTP_302_FOUND,
    responses={
        400: {"description": "Missing or expired token", "content": {"text/plain": {}}},
        404: {"description": "Unknown or already used token", "content": {"text/plain": {}}},
        409: {"description": "Email already registered", "content": {"text/plain": {}}},
        500: {"description": "Ledger registration failed", "content": {"text/plain": {}}},
    },
    summary="Verify an email address",
    description="Target of the emailed verification link. On success the account is "
    "provisioned and the browser is redirected to the success page.",
)
async def verify_email(
    token: str | None = None,
    service: RegistrationService = Depends(get_registration_service),
):
    """Consume a verification token and redirect to the success page."""
    if not token:
        return PlainTextResponse("Verification token is missing.", status_code=status.HTTP_400_BAD_REQUEST)

    try:
        account = await service.verify_email(token)
    except ValidationError:
        return PlainTextResponse("Verification token is missing.", status_code=status.HTTP_400_BAD_REQUEST)
    except NotFoundError:
        return PlainTextResponse(
            "Invalid or already used verification token.", status_code=status.HTTP_404_NOT_FOUND
        )
    except ExpiredError:
        return PlainTextResponse(
            "Verification token expired. Please start the registration again.",
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    except DuplicateEmailError:
        return PlainTextResponse(
            "This email address is already registered.", status_code=status.HTTP_409_CONFLICT
        )
    except RegistrationError:
        return PlainTextResponse(
            "Internal error while completing the registration. Please try again.",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    query = urlencode(
        {"email": account.email, "accountType": account.account_type, "username": account.username}
    )
    return RedirectResponse(f"{SUCCESS_PAGE}?{query}", status_code=status.HTTP_302_FOUND)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing or invalid email"},
        401: {"model": ErrorResponse, "description": "Email not found or not verified"},
    },
    summary="Log in by email",
)
async def login(
    request_data: LoginRequest,
    service: RegistrationService = Depends(get_registration_service),
):
    """Return the public profile of the verified account registered to an email."""
    try:
        account = service.login(request_data.email)
    except ValidationError:
        return _error(status.HTTP_400_BAD_REQUEST, "Email is required to log in.")
    except NotFoundError:
        return _error(status.HTTP_401_UNAUTHORIZED, "Email not found or not verified.")
    return LoginResponse(message="Login successful.", user=UserProfile.from_account(account))


@router.get(
    "/clients",
    response_model=ClientsResponse,
    summary="List client accounts",
)
async def list_clients(
    service: RegistrationService = Depends(get_registration_service),
) -> ClientsResponse:
    """All accounts of type "client", oldest first."""
    return ClientsResponse(clients=[ClientProfile.from_account(a) for a in service.list_clients()])
