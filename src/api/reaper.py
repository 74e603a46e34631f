"""
Background sweep of expired pending verifications.

Links that are never visited would otherwise stay in the ledger for the
life of the process. The reaper calls RegistrationService.purge_expired()
on a fixed interval from an asyncio task owned by the app lifespan.
"""

import asyncio
import contextlib
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class ExpiredVerificationReaper:
    """Periodically runs a purge callable until stopped."""

    def __init__(self, purge: Callable[[], int], interval_seconds: float) -> None:
        self._purge = purge
        self._interval = interval_seconds
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self._interval <= 0:
            logger.info("Expired verification reaper disabled")
            return
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="expired-verification-reaper")
        logger.info("Expired verification reaper started (every %ss)", self._interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Expired verification reaper stopped")

    def sweep(self) -> int:
        """Run one purge pass; failures are logged and the loop carries on."""
        try:
            return self._purge()
        except Exception:
            logger.exception("Expired verification sweep failed")
            return 0

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self.sweep()
