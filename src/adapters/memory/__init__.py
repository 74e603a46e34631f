"""Memory adapters - Process-lifetime implementations of the storage ports."""

from .accounts import InMemoryAccountStore
from .ledger import InMemoryVerificationLedger
from .vault import InMemorySecretStore

__all__ = ["InMemoryAccountStore", "InMemorySecretStore", "InMemoryVerificationLedger"]
