"""
Simulated ledger registrar - Implements LedgerRegistrar protocol.

Stands in for the Soroban contract call that would register a new
account on the Stellar network. It only logs the request and reports
success; a real adapter would build, sign and submit the contract
invocation and raise RegistrationError when the network rejects it.
"""

import logging

from src.domain.ports import LedgerReceipt

logger = logging.getLogger(__name__)


class SimulatedLedgerRegistrar:
    """
    Implements LedgerRegistrar protocol with a logging placeholder.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    async def register(self, public_key: str, account_type: str, username: str) -> LedgerReceipt:
        logger.info(
            "[LEDGER] Registering %s %s with public key %s", account_type, username, public_key
        )
        logger.info("[LEDGER] Registration accepted for %s", username)
        return LedgerReceipt(success=True, message="Account registered on the ledger contract")
