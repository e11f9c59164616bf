"""Tests for the asyncio refresh ticker."""

import asyncio

import pytest

from asciiplay.display import RefreshTicker

from conftest import wait_until


class TestRefreshTicker:
    """Tests for RefreshTicker."""

    def test_invalid_interval(self):
        """Test invalid interval."""
        with pytest.raises(ValueError):
            RefreshTicker(lambda: None, 0)

    def test_start_requires_running_loop(self):
        """Test start requires running loop."""
        ticker = RefreshTicker(lambda: None, 0.01)
        with pytest.raises(RuntimeError):
            ticker.start()
        assert not ticker.running

    def test_stop_when_not_running(self):
        """Test stop when not running."""
        ticker = RefreshTicker(lambda: None, 0.01)
        ticker.stop()
        assert not ticker.running

    @pytest.mark.asyncio
    async def test_ticks_until_stopped(self):
        """Test ticks until stopped."""
        calls = []
        ticker = RefreshTicker(lambda: calls.append(1), 0.001)

        ticker.start()
        assert ticker.running
        await wait_until(lambda: len(calls) >= 3)
        ticker.stop()
        count = len(calls)
        await asyncio.sleep(0.02)

        assert not ticker.running
        assert len(calls) == count
        assert ticker.ticks == count

    @pytest.mark.asyncio
    async def test_no_tick_before_first_interval(self):
        """Test no tick before first interval."""
        calls = []
        ticker = RefreshTicker(lambda: calls.append(1), 10)
        ticker.start()
        await asyncio.sleep(0)
        ticker.stop()
        assert calls == []

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self):
        """Test start is idempotent."""
        calls = []
        ticker = RefreshTicker(lambda: calls.append(1), 0.05)
        ticker.start()
        task = ticker._task
        ticker.start()
        assert ticker._task is task
        ticker.stop()

    @pytest.mark.asyncio
    async def test_stop_from_callback(self):
        """Test stop from callback."""
        calls = []

        def tick():
            calls.append(1)
            ticker.stop()

        ticker = RefreshTicker(tick, 0.001)
        ticker.start()
        await wait_until(lambda: calls)
        await asyncio.sleep(0.02)

        assert calls == [1]
        assert not ticker.running

    @pytest.mark.asyncio
    async def test_restart(self):
        """Test restart."""
        calls = []
        ticker = RefreshTicker(lambda: calls.append(1), 0.001)
        ticker.start()
        ticker.stop()
        ticker.start()
        await wait_until(lambda: calls)
        ticker.stop()
        assert calls

    @pytest.mark.asyncio
    async def test_callback_error_stops_ticker(self):
        """Test callback error stops ticker."""
        errors = []

        def tick():
            raise RuntimeError("paint failed")

        ticker = RefreshTicker(tick, 0.001, on_error=errors.append)
        ticker.start()
        await wait_until(lambda: errors)

        assert isinstance(errors[0], RuntimeError)
        assert not ticker.running
