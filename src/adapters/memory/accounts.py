"""
In-memory account store - Implements AccountStore protocol.

Accounts are kept in insertion order with an email index. add() checks
and inserts under one lock, the in-process equivalent of a UNIQUE
constraint on email.
"""

import threading

from src.domain.ports import Account


class InMemoryAccountStore:
    """
    Implements AccountStore protocol with an ordered list plus email index.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._accounts: list[Account] = []
        self._by_email: dict[str, Account] = {}

    def add(self, account: Account) -> bool:
        with self._lock:
            if account.email in self._by_email:
                return False
            self._accounts.append(account)
            self._by_email[account.email] = account
            return True

    def exists(self, email: str) -> bool:
        with self._lock:
            return email in self._by_email

    def find_verified_by_email(self, email: str) -> Account | None:
        with self._lock:
            account = self._by_email.get(email)
        if account is None or not account.is_verified:
            return None
        return account

    def list_by_type(self, account_type: str) -> list[Account]:
        with self._lock:
            return [a for a in self._accounts if a.account_type == account_type]

    def __len__(self) -> int:
        with self._lock:
            return len(self._accounts)
