"""
In-memory secret store - Implements SecretStore protocol.

Holds ledger secret keys apart from account records. Nothing in the API
layer reads from it; values are never logged or returned.
"""

import threading


class InMemorySecretStore:
    """Implements SecretStore protocol with an account-id keyed dict."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._secrets: dict[str, str] = {}

    def store(self, account_id: str, secret: str) -> None:
        with self._lock:
            self._secrets[account_id] = secret

    def has(self, account_id: str) -> bool:
        with self._lock:
            return account_id in self._secrets

    def __repr__(self) -> str:
        return f"InMemorySecretStore(<{len(self._secrets)} secret(s)>)"
