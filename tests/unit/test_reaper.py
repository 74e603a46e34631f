"""
Unit tests for ExpiredVerificationReaper.
"""

import asyncio
import logging

import pytest

from src.api.reaper import ExpiredVerificationReaper


class TestSweep:
    def test_sweep_returns_purge_count(self) -> None:
        reaper = ExpiredVerificationReaper(lambda: 3, interval_seconds=60)
        assert reaper.sweep() == 3

    def test_sweep_logs_failures(self, caplog: pytest.LogCaptureFixture) -> None:
        def broken() -> int:
            raise RuntimeError("boom")

        reaper = ExpiredVerificationReaper(broken, interval_seconds=60)

        with caplog.at_level(logging.ERROR):
            assert reaper.sweep() == 0

        assert "sweep failed" in caplog.text


class TestLoop:
    def test_runs_periodically_until_stopped(self) -> None:
        calls: list[int] = []

        def purge() -> int:
            calls.append(1)
            return 0

        async def scenario() -> None:
            reaper = ExpiredVerificationReaper(purge, interval_seconds=0.01)
            reaper.start()
            assert reaper.running
            await asyncio.sleep(0.1)
            await reaper.stop()
            assert not reaper.running

        asyncio.run(scenario())
        assert len(calls) >= 2

    def test_zero_interval_disables(self) -> None:
        async def scenario() -> bool:
            reaper = ExpiredVerificationReaper(lambda: 0, interval_seconds=0)
            reaper.start()
            running = reaper.running
            await reaper.stop()
            return running

        assert asyncio.run(scenario()) is False
