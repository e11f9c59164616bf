"""Fixed interval timer driving the render consumer."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

logger = logging.getLogger(__name__)


class RefreshTicker:
    """Calls ``callback`` every ``interval`` seconds on the running event loop.

    A tick that is running always completes; after :meth:`stop` returned no
    further tick fires. If the callback raises, the ticker stops and hands the
    error to ``on_error`` (if set).

    :param callback: Function called on every tick
    :param interval: Seconds between two ticks
    :param on_error: Receives an exception raised by ``callback``
    """

    def __init__(
        self,
        callback: Callable[[], None],
        interval: float,
        on_error: Callable[[Exception], None] | None = None,
    ):
        if interval <= 0:
            raise ValueError(f"Interval must be positive, got {interval}")
        self.callback = callback
        self.interval = interval
        self.on_error = on_error
        self._task: asyncio.Task | None = None
        self._ticks = 0

    def start(self) -> None:
        """Start ticking. Does nothing if already running.

        :raises RuntimeError: If no event loop is running
        """
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    def stop(self) -> None:
        """Stop ticking. Does nothing if not running."""
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()

    async def _run(self) -> None:
        task = asyncio.current_task()
        while self._task is task:
            await asyncio.sleep(self.interval)
            if self._task is not task:
                break
            self._ticks += 1
            try:
                self.callback()
            except Exception as e:
                logger.exception(f"Refresh tick {self._ticks} failed")
                if self._task is task:
                    self._task = None
                if self.on_error is not None:
                    self.on_error(e)
                break

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def ticks(self) -> int:
        """Number of ticks fired since creation."""
        return self._ticks


__all__ = ["RefreshTicker"]
