"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Wire names are camelCase (accountType, publicKey, ...); Python attributes
stay snake_case and either form is accepted on input.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from src.domain.ports import Account


class RegisterInitiateRequest(BaseModel):
    """Request model for starting a registration."""

    model_config = ConfigDict(populate_by_name=True)

    email: EmailStr
    username: str = Field(..., description="Display name")
    account_type: str = Field(..., alias="accountType", description='Account type, e.g. "client"')


class LoginRequest(BaseModel):
    """Request model for login by email."""

    email: EmailStr


class MessageResponse(BaseModel):
    """Response model carrying a human-readable message."""

    message: str


class ErrorResponse(BaseModel):
    """Standard error response model."""

    message: str


class UserProfile(BaseModel):
    """Public projection of an account. Never carries key material."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    email: str
    username: str
    account_type: str = Field(..., alias="accountType")
    public_key: str = Field(..., alias="publicKey")

    @classmethod
    def from_account(cls, account: Account) -> "UserProfile":
        return cls(
            id=account.id,
            email=account.email,
            username=account.username,
            account_type=account.account_type,
            public_key=account.public_key,
        )


class ClientProfile(UserProfile):
    """Client listing entry: the public projection plus status fields."""

    is_verified: bool = Field(..., alias="isVerified")
    created_at: datetime = Field(..., alias="createdAt")

    @classmethod
    def from_account(cls, account: Account) -> "ClientProfile":
        return cls(
            id=account.id,
            email=account.email,
            username=account.username,
            account_type=account.account_type,
            public_key=account.public_key,
            is_verified=account.is_verified,
            created_at=account.created_at,
        )


class LoginResponse(BaseModel):
    """Response model for a successful login."""

    message: str
    user: UserProfile


class ClientsResponse(BaseModel):
    """Response model for the client listing."""

    clients: list[ClientProfile]


class HealthResponse(BaseModel):
    """Response model for the health check."""

    model_config = ConfigDict(populate_by_name=True)

    status: str
    pending_verifications: int = Field(..., alias="pendingVerifications")
