"""
Onboarding domain service - Verification token lifecycle.

This module contains the core business logic for account onboarding:
registration intake, email verification, login lookup and client listing.

Token Lifecycle
===============

States (see VerificationState):
- PENDING: record issued, email sent, waiting for the link to be visited
- REGISTERING: a visit claimed the token, ledger registration in flight
- COMPLETED: account stored, record removed from the ledger
- FAILED: ledger registration failed, the link may be visited again

Valid Transitions:
    PENDING -> REGISTERING      (link visited, token unexpired)
    REGISTERING -> COMPLETED    (account stored)
    REGISTERING -> FAILED       (ledger registrar raised or rejected)
    FAILED -> REGISTERING       (link visited again)

Expired PENDING/FAILED records are removed on the next visit or by
purge_expired(). The claim step is atomic in the ledger, so two visits
with the same token can never both reach account creation.
"""

import html
import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from urllib.parse import urlencode

from .exceptions import (
    DuplicateEmailError,
    ExpiredError,
    NotFoundError,
    RegistrationError,
    SendError,
    ValidationError,
)
from .ports import (
    Account,
    AccountStore,
    ClaimResult,
    EmailSender,
    KeypairGenerator,
    LedgerRegistrar,
    PendingVerification,
    SecretStore,
    VerificationLedger,
)

logger = logging.getLogger(__name__)

CLIENT_ACCOUNT_TYPE = "client"
DEFAULT_TOKEN_TTL_SECONDS = 3600


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RegistrationService:
    """
    Domain service for account onboarding.

    Orchestrates intake, verification and lookups over the injected ports.
    Holds no state of its own; all records live in the ledger and stores.
    """

    ledger: VerificationLedger
    accounts: AccountStore
    secrets: SecretStore
    email_sender: EmailSender
    keypair_generator: KeypairGenerator
    registrar: LedgerRegistrar
    base_url: str = "http://localhost:3000"
    app_name: str = "TinakAward"
    ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS
    clock: Callable[[], datetime] = field(default=_utcnow)

    async def initiate_registration(
        self, email: str, username: str, account_type: str
    ) -> PendingVerification:
        """
        Issue a pending verification and email the verification link.

        Args:
            email: User's email address (will be normalized)
            username: Display name
            account_type: Account type, e.g. "client"

        Returns:
            The stored PendingVerification

        Raises:
            ValidationError: If any field is missing or blank
            DuplicateEmailError: If the email has an account or a live pending record
            SendError: If the email could not be sent (the record is discarded)
        """
        email = self._normalize_email(email or "")
        username = (username or "").strip()
        account_type = (account_type or "").strip()
        if not email or not username or not account_type:
            raise ValidationError("email, username and accountType are required")

        if self.accounts.exists(email):
            raise DuplicateEmailError(email)

        now = self.clock()
        record = PendingVerification(
            email=email,
            username=username,
            account_type=account_type,
            token=self._generate_token(),
            created_at=now,
            expires_at=now + timedelta(seconds=self.ttl_seconds),
        )
        if not self.ledger.add(record, now):
            raise DuplicateEmailError(email)
        logger.info("Pending verification created for %s (%s)", email, account_type)

        subject, body = self._compose_verification_email(record)
        try:
            await self.email_sender.send(email, subject, body)
        except Exception as e:
            # Compensating delete; the email is free to register again.
            self.ledger.discard(record.token)
            logger.error("Verification email to %s failed: %s", email, e)
            if isinstance(e, SendError):
                raise
            raise SendError(email) from e

        logger.info("Verification email sent to %s", email)
        return record

    async def verify_email(self, token: str) -> Account:
        """
        Consume a verification token and provision the account.

        Args:
            token: Opaque token from the verification link

        Returns:
            The newly stored Account

        Raises:
            ValidationError: If the token is blank
            NotFoundError: Unknown token, already used, or currently being consumed
            ExpiredError: Token past its validity window (record removed)
            RegistrationError: Ledger registration failed (record kept as FAILED)
            DuplicateEmailError: An account for the email appeared meanwhile
        """
        token = (token or "").strip()
        if not token:
            raise ValidationError("verification token is required")

        outcome = self.ledger.claim(token, self.clock())
        if outcome.result == ClaimResult.EXPIRED:
            logger.warning("Expired verification token presented")
            raise ExpiredError(token)
        if outcome.result != ClaimResult.CLAIMED or outcome.record is None:
            logger.warning("Unknown or used verification token presented (%s)", outcome.result.value)
            raise NotFoundError(token)
        record = outcome.record

        try:
            keypair = self.keypair_generator.generate()
            receipt = await self.registrar.register(keypair.public_key, record.account_type, record.username)
            if not receipt.success:
                raise RegistrationError(receipt.message)
        except Exception as e:
            self.ledger.release(token)
            logger.error("Ledger registration failed for %s: %s", record.email, e)
            if isinstance(e, RegistrationError):
                raise
            raise RegistrationError(record.email) from e

        account = Account(
            id=str(uuid.uuid4()),
            email=record.email,
            username=record.username,
            account_type=record.account_type,
            public_key=keypair.public_key,
            is_verified=True,
            created_at=self.clock(),
        )
        if not self.accounts.add(account):
            self.ledger.discard(token)
            raise DuplicateEmailError(record.email)

        self.secrets.store(account.id, keypair.secret)
        self.ledger.complete(token)
        logger.info("Account %s verified for %s", account.id, account.email)
        return account

    def login(self, email: str) -> Account:
        """
        Look up a verified account by email.

        Raises:
            ValidationError: If the email is blank
            NotFoundError: If no verified account exists for the email
        """
        normalized_email = self._normalize_email(email or "")
        if not normalized_email:
            raise ValidationError("email is required")

        account = self.accounts.find_verified_by_email(normalized_email)
        if account is None:
            raise NotFoundError(normalized_email)
        return account

    def list_clients(self) -> list[Account]:
        """All client accounts in insertion order."""
        return self.accounts.list_by_type(CLIENT_ACCOUNT_TYPE)

    def purge_expired(self) -> int:
        """Drop expired pending records nobody is consuming."""
        purged = self.ledger.purge_expired(self.clock())
        if purged:
            logger.info("Purged %d expired pending verification(s)", purged)
        return purged

    def pending_count(self) -> int:
        """Number of pending records currently held, reported by /health."""
        return len(self.ledger)

    def verification_link(self, token: str) -> str:
        return f"{self.base_url.rstrip('/')}/api/verify-email?{urlencode({'token': token})}"

    def _compose_verification_email(self, record: PendingVerification) -> tuple[str, str]:
        link = self.verification_link(record.token)
        hours = self.ttl_seconds / 3600
        validity = f"{hours:g} hour" + ("" if hours == 1 else "s")
        subject = f"Verify your {self.app_name} account"
        body = (
            f"<p>Hello {html.escape(record.username)},</p>"
            f"<p>Thanks for signing up to {self.app_name}. Please click the link below "
            "to verify your email and complete your registration:</p>"
            f'<p><a href="{link}">Verify account</a></p>'
            f"<p>This link expires in {validity}.</p>"
            "<p>If you did not request this, you can ignore this email.</p>"
            f"<p>The {self.app_name} team</p>"
        )
        return subject, body

    def _normalize_email(self, email: str) -> str:
        """
        Normalize email address for consistent storage and lookup.

        Applies: strip whitespace + lowercase
        """
        return email.strip().lower()

    def _generate_token(self) -> str:
        return str(uuid.uuid4())
