"""Stellar adapters - Keypair generation and ledger registration."""

from .keys import StellarKeypairGenerator
from .registrar import SimulatedLedgerRegistrar

__all__ = ["SimulatedLedgerRegistrar", "StellarKeypairGenerator"]
