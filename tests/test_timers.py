"""
Tests for loop timer adapters (timers.py).
"""

import asyncio

import pytest

from callbridge import after_delay, next_tick


class TestNextTick:
    """Tests for next_tick."""

    @pytest.mark.asyncio
    async def test_immediate(self, soon):
        """Test callbacks queued earlier run first."""
        c = 1

        def bump():
            nonlocal c
            assert c == 1
            c += 1

        soon(bump)
        await next_tick()
        assert c == 2

    @pytest.mark.asyncio
    async def test_value(self):
        assert await next_tick("payload") == "payload"
        assert await next_tick() is None

    @pytest.mark.asyncio
    async def test_not_resolved_synchronously(self):
        future = next_tick()
        assert not future.done()
        await future


class TestAfterDelay:
    """Tests for after_delay."""

    @pytest.mark.asyncio
    async def test_timeout(self):
        """Test an earlier timer fires before a later one."""
        c = 1

        def bump():
            nonlocal c
            assert c == 1
            c += 1

        asyncio.get_running_loop().call_later(0, bump)
        await after_delay(0.01)
        assert c == 2

    @pytest.mark.asyncio
    async def test_elapsed(self):
        loop = asyncio.get_running_loop()
        start = loop.time()
        assert await after_delay(0.05, "late") == "late"
        assert loop.time() - start >= 0.04

    @pytest.mark.asyncio
    async def test_negative_delay(self):
        with pytest.raises(ValueError):
            after_delay(-1)

    @pytest.mark.asyncio
    async def test_cancel(self):
        """Test cancelling the future leaves nothing behind."""
        future = after_delay(0.01)
        future.cancel()
        await asyncio.sleep(0.03)
        assert future.cancelled()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
