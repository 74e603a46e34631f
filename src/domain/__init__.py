"""
Domain layer - Pure business logic with zero framework imports.

This package contains the core business logic for account onboarding:
the verification token lifecycle and the account lookups built on it.
It defines its own port interfaces for infrastructure abstraction,
ensuring true hexagonal architecture decoupling.
"""

from .exceptions import (
    DuplicateEmailError,
    ExpiredError,
    NotFoundError,
    OnboardingError,
    RegistrationError,
    SendError,
    ValidationError,
)
from .ports import (
    Account,
    AccountStore,
    ClaimOutcome,
    ClaimResult,
    EmailSender,
    Keypair,
    KeypairGenerator,
    LedgerReceipt,
    LedgerRegistrar,
    PendingVerification,
    SecretStore,
    VerificationLedger,
    VerificationState,
)
from .registration import CLIENT_ACCOUNT_TYPE, RegistrationService

__all__ = [
    "CLIENT_ACCOUNT_TYPE",
    "Account",
    "AccountStore",
    "ClaimOutcome",
    "ClaimResult",
    "DuplicateEmailError",
    "EmailSender",
    "ExpiredError",
    "Keypair",
    "KeypairGenerator",
    "LedgerReceipt",
    "LedgerRegistrar",
    "NotFoundError",
    "OnboardingError",
    "PendingVerification",
    "RegistrationError",
    "RegistrationService",
    "SecretStore",
    "SendError",
    "ValidationError",
    "VerificationLedger",
    "VerificationState",
]
