"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the records the domain passes around and the
interfaces (ports) it requires from infrastructure. Adapters implement
these protocols.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol


class VerificationState(str, Enum):
    """
    Lifecycle states of a pending verification record.

    State Transitions:
    - PENDING -> REGISTERING (a consumer claimed the token)
    - REGISTERING -> COMPLETED (account stored, record removed)
    - REGISTERING -> FAILED (ledger registration failed)
    - FAILED -> REGISTERING (the link was visited again)

    A record in REGISTERING is invisible to other consumers, which is what
    makes a token single-use under concurrent visits.
    """

    PENDING = "PENDING"
    REGISTERING = "REGISTERING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class ClaimResult(Enum):
    """Result of an attempt to claim a verification token."""

    CLAIMED = "claimed"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    IN_FLIGHT = "in_flight"


@dataclass(frozen=True)
class PendingVerification:
    """A time-boxed, single-use link between an email and a token."""

    email: str
    username: str
    account_type: str
    token: str
    created_at: datetime
    expires_at: datetime
    state: VerificationState = VerificationState.PENDING

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


@dataclass(frozen=True)
class ClaimOutcome:
    """What the ledger did with a claim request."""

    result: ClaimResult
    record: PendingVerification | None = None


@dataclass(frozen=True)
class Account:
    """A registered, verified user. Holds no private key material."""

    id: str
    email: str
    username: str
    account_type: str
    public_key: str
    is_verified: bool
    created_at: datetime


@dataclass(frozen=True)
class Keypair:
    """Freshly generated ledger keypair."""

    public_key: str
    secret: str


@dataclass(frozen=True)
class LedgerReceipt:
    """Acknowledgement returned by the ledger registrar."""

    success: bool
    message: str


class VerificationLedger(Protocol):
    """Port interface for pending verification storage."""

    def add(self, record: PendingVerification, now: datetime) -> bool:
        """
        Atomically store a new pending record.

        An expired record for the same email is replaced.

        Returns:
            True if stored, False if a live record already exists for the email
        """
        ...

    def get(self, token: str) -> PendingVerification | None:
        """Return the record for a token, whatever its state."""
        ...

    def discard(self, token: str) -> None:
        """Remove a record unconditionally (no-op if absent)."""
        ...

    def claim(self, token: str, now: datetime) -> ClaimOutcome:
        """
        Atomically claim a token for consumption.

        Return values by scenario:
        - NOT_FOUND: no record for the token
        - IN_FLIGHT: another consumer holds the claim (REGISTERING)
        - EXPIRED: record past its validity window; it has been removed
        - CLAIMED: record moved to REGISTERING, returned in the outcome
        """
        ...

    def complete(self, token: str) -> None:
        """Mark a claimed record COMPLETED and remove it."""
        ...

    def release(self, token: str) -> None:
        """Move a claimed record to FAILED so the link can be retried."""
        ...

    def purge_expired(self, now: datetime) -> int:
        """Remove expired records that nobody is consuming. Returns the count."""
        ...

    def __len__(self) -> int: ...


class AccountStore(Protocol):
    """Port interface for finalized accounts."""

    def add(self, account: Account) -> bool:
        """
        Atomically store an account.

        Returns:
            True if stored, False if an account with the email already exists
        """
        ...

    def exists(self, email: str) -> bool: ...

    def find_verified_by_email(self, email: str) -> Account | None: ...

    def list_by_type(self, account_type: str) -> list[Account]:
        """Accounts of a type, in insertion order."""
        ...


class SecretStore(Protocol):
    """Port interface for custody of private key material."""

    def store(self, account_id: str, secret: str) -> None: ...

    def has(self, account_id: str) -> bool: ...


class KeypairGenerator(Protocol):
    """Port interface for ledger keypair generation."""

    def generate(self) -> Keypair: ...


class LedgerRegistrar(Protocol):
    """Port interface for the external ledger registration call."""

    async def register(self, public_key: str, account_type: str, username: str) -> LedgerReceipt:
        """
        Register an account on the external ledger.

        Raises:
            RegistrationError: If the ledger rejects or cannot be reached
        """
        ...


class EmailSender(Protocol):
    """Port interface for email delivery."""

    async def send(self, recipient: str, subject: str, body: str) -> None:
        """
        Deliver an HTML email.

        Raises:
            SendError: If the transport fails
        """
        ...
