"""
Stellar keypair adapter - Implements KeypairGenerator protocol.

Generates random ed25519 keypairs in Stellar strkey encoding
(public keys start with "G", secret seeds with "S").
"""

from stellar_sdk import Keypair as StellarKeypair

from src.domain.ports import Keypair


class StellarKeypairGenerator:
    """Implements KeypairGenerator protocol via stellar_sdk.Keypair.random()."""

    def generate(self) -> Keypair:
        keypair = StellarKeypair.random()
        return Keypair(public_key=keypair.public_key, secret=keypair.secret)
