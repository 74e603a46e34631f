"""
In-memory verification ledger - Implements VerificationLedger protocol.

Every operation runs under a single lock, which plays the role the row
lock plays in a database: claim() is a compare-and-set from PENDING (or
FAILED) to REGISTERING, so concurrent visits with one token resolve to
exactly one winner.

Records are frozen dataclasses; transitions store a replaced copy.
Insertion order is kept so purge and iteration are deterministic.
"""

import logging
import threading
from dataclasses import replace
from datetime import datetime

from src.domain.ports import ClaimOutcome, ClaimResult, PendingVerification, VerificationState

logger = logging.getLogger(__name__)

# States a consumer may claim from.
_CLAIMABLE = (VerificationState.PENDING, VerificationState.FAILED)


class InMemoryVerificationLedger:
    """
    Implements VerificationLedger protocol with a token-keyed dict.

    Uses structural subtyping - no explicit inheritance from Protocol.
    A secondary email index enforces one live record per email.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_token: dict[str, PendingVerification] = {}
        self._token_by_email: dict[str, str] = {}

    def add(self, record: PendingVerification, now: datetime) -> bool:
        """
        Store a new pending record unless the email already has a live one.

        A stale record (expired and not being consumed) is replaced, the
        same way an EXPIRED claim can be re-registered.
        """
        with self._lock:
            existing_token = self._token_by_email.get(record.email)
            if existing_token is not None:
                existing = self._by_token[existing_token]
                if existing.state == VerificationState.REGISTERING or not existing.is_expired(now):
                    return False
                self._remove(existing_token)
                logger.info("Replaced expired pending verification for %s", record.email)

            self._by_token[record.token] = record
            self._token_by_email[record.email] = record.token
            return True

    def get(self, token: str) -> PendingVerification | None:
        with self._lock:
            return self._by_token.get(token)

    def discard(self, token: str) -> None:
        with self._lock:
            self._remove(token)

    def claim(self, token: str, now: datetime) -> ClaimOutcome:
        with self._lock:
            record = self._by_token.get(token)
            if record is None:
                return ClaimOutcome(ClaimResult.NOT_FOUND)

            if record.state not in _CLAIMABLE:
                return ClaimOutcome(ClaimResult.IN_FLIGHT)

            # Lazy expiry: the stale record goes away on the visit that finds it.
            if record.is_expired(now):
                self._remove(token)
                return ClaimOutcome(ClaimResult.EXPIRED, record)

            claimed = replace(record, state=VerificationState.REGISTERING)
            self._by_token[token] = claimed
            return ClaimOutcome(ClaimResult.CLAIMED, claimed)

    def complete(self, token: str) -> None:
        with self._lock:
            record = self._by_token.get(token)
            if record is None or record.state != VerificationState.REGISTERING:
                return
            self._by_token[token] = replace(record, state=VerificationState.COMPLETED)
            self._remove(token)

    def release(self, token: str) -> None:
        with self._lock:
            record = self._by_token.get(token)
            if record is None or record.state != VerificationState.REGISTERING:
                return
            self._by_token[token] = replace(record, state=VerificationState.FAILED)

    def purge_expired(self, now: datetime) -> int:
        with self._lock:
            stale = [
                token
                for token, record in self._by_token.items()
                if record.state in _CLAIMABLE and record.is_expired(now)
            ]
            for token in stale:
                self._remove(token)
            return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_token)

    def _remove(self, token: str) -> None:
        """Drop a record and its email index entry. Caller holds the lock."""
        record = self._by_token.pop(token, None)
        if record is not None and self._token_by_email.get(record.email) == token:
            del self._token_by_email[record.email]
