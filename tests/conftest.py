"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- A controllable clock
- Recording fakes for the mail, keypair and ledger registrar ports
- A RegistrationService wired to the in-memory stores
"""

import asyncio
import itertools
from datetime import datetime, timedelta, timezone

import pytest

from src.adapters.memory import InMemoryAccountStore, InMemorySecretStore, InMemoryVerificationLedger
from src.domain.ports import Keypair, LedgerReceipt
from src.domain.registration import RegistrationService

EPOCH = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime = EPOCH) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class RecordingEmailSender:
    """EmailSender that keeps every message and can be told to fail."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, str]] = []
        self.fail_with: Exception | None = None

    async def send(self, recipient: str, subject: str, body: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append((recipient, subject, body))


class SequentialKeypairGenerator:
    """KeypairGenerator producing predictable, distinct keys."""

    def __init__(self) -> None:
        self._counter = itertools.count(1)

    def generate(self) -> Keypair:
        n = next(self._counter)
        return Keypair(public_key=f"GPUBLIC{n:04d}", secret=f"SSECRET{n:04d}")


class FakeLedgerRegistrar:
    """LedgerRegistrar that records calls, yields to the loop, and can fail."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, str]] = []
        self.fail_with: Exception | None = None
        self.receipt = LedgerReceipt(success=True, message="registered")

    async def register(self, public_key: str, account_type: str, username: str) -> LedgerReceipt:
        self.calls.append((public_key, account_type, username))
        # Suspension point, like a real network call.
        await asyncio.sleep(0)
        if self.fail_with is not None:
            raise self.fail_with
        return self.receipt


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ledger() -> InMemoryVerificationLedger:
    return InMemoryVerificationLedger()


@pytest.fixture
def accounts() -> InMemoryAccountStore:
    return InMemoryAccountStore()


@pytest.fixture
def secret_store() -> InMemorySecretStore:
    return InMemorySecretStore()


@pytest.fixture
def sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def registrar() -> FakeLedgerRegistrar:
    return FakeLedgerRegistrar()


@pytest.fixture
def service(
    ledger: InMemoryVerificationLedger,
    accounts: InMemoryAccountStore,
    secret_store: InMemorySecretStore,
    sender: RecordingEmailSender,
    registrar: FakeLedgerRegistrar,
    clock: FakeClock,
) -> RegistrationService:
    """RegistrationService over fresh in-memory stores and recording fakes."""
    return RegistrationService(
        ledger=ledger,
        accounts=accounts,
        secrets=secret_store,
        email_sender=sender,
        keypair_generator=SequentialKeypairGenerator(),
        registrar=registrar,
        base_url="http://testserver",
        clock=clock,
    )
