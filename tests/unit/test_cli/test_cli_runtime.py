"""Unit tests for Ctrl-C handling in CLI parse commands."""

import asyncio
import signal
import sys

import pytest

from county_results_api.cli.runtime import cancel_on_interrupt

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="needs a Unix event loop for SIGINT handlers")


class TestCancelOnInterrupt:
    @pytest.mark.asyncio
    async def test_sigint_sets_cancel_event(self) -> None:
        with cancel_on_interrupt() as cancel_event:
            assert not cancel_event.is_set()
            signal.raise_signal(signal.SIGINT)
            await asyncio.wait_for(cancel_event.wait(), timeout=2)

        assert cancel_event.is_set()

    @pytest.mark.asyncio
    async def test_handler_removed_on_exit(self) -> None:
        loop = asyncio.get_running_loop()
        with cancel_on_interrupt():
            pass
        assert loop.remove_signal_handler(signal.SIGINT) is False

    @pytest.mark.asyncio
    async def test_handler_removed_when_block_raises(self) -> None:
        loop = asyncio.get_running_loop()
        with pytest.raises(ValueError), cancel_on_interrupt():
            raise ValueError("boom")
        assert loop.remove_signal_handler(signal.SIGINT) is False
