"""
Domain exceptions - Semantic error types for account onboarding.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
"""


class OnboardingError(Exception):
    """Base class for onboarding domain errors."""

    pass


class ValidationError(OnboardingError):
    """A required field is missing or blank."""

    pass


class DuplicateEmailError(OnboardingError):
    """Email already belongs to an account or a live pending verification."""

    pass


class SendError(OnboardingError):
    """Verification email could not be delivered."""

    pass


class NotFoundError(OnboardingError):
    """Unknown or already used token, or no verified account for an email."""

    pass


class ExpiredError(OnboardingError):
    """Verification token is past its validity window."""

    pass


class RegistrationError(OnboardingError):
    """External ledger registration failed."""

    pass
