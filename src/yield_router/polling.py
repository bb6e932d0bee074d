"""Timer-driven refresh loop and request sequencing for the polling views."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class RequestSequencer:
    """Hands out increasing request ids and decides which responses may land.

    ``is_current`` implements "latest issued wins" for debounced searches;
    ``accept`` drops any response older than the last one applied, for
    overlapping poll ticks.
    """

    def __init__(self) -> None:
        self._issued = 0
        self._applied = 0

    def issue(self) -> int:
        self._issued += 1
        return self._issued

    def is_current(self, request_id: int) -> bool:
        return request_id == self._issued

    def stale(self, request_id: int) -> bool:
        """True once a newer response was applied or the owner closed."""

        return request_id <= self._applied

    def accept(self, request_id: int) -> bool:
        if self.stale(request_id):
            return False
        self._applied = request_id
        return True

    def invalidate(self) -> None:
        """Make every outstanding request stale."""

        self._applied = self._issued = self._issued + 1


class Poller:
    """Run ``refresh`` immediately and then every ``interval`` seconds.

    Ticks are fire-and-forget: a slow refresh never delays the next tick.
    ``start`` and ``stop`` are meant to be called once per mount and unmount.
    """

    def __init__(
        self,
        refresh: Callable[[], Awaitable[object]],
        interval: float,
        *,
        name: str = "poller",
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._refresh = refresh
        self.interval = interval
        self.name = name
        self._loop_task: asyncio.Task[None] | None = None
        self._ticks: set[asyncio.Task[object]] = set()

    @property
    def running(self) -> bool:
        return self._loop_task is not None

    def start(self) -> None:
        if self._loop_task is not None:
            logger.debug("%s already running", self.name)
            return
        self._loop_task = asyncio.get_running_loop().create_task(self._run())

    def stop(self) -> None:
        if self._loop_task is None:
            return
        self._loop_task.cancel()
        self._loop_task = None
        for tick in list(self._ticks):
            tick.cancel()
        self._ticks.clear()

    async def _run(self) -> None:
        while True:
            tick = asyncio.ensure_future(self._refresh())
            self._ticks.add(tick)
            tick.add_done_callback(self._tick_done)
            await asyncio.sleep(self.interval)

    def _tick_done(self, tick: asyncio.Task[object]) -> None:
        self._ticks.discard(tick)
        if tick.cancelled():
            return
        exc = tick.exception()
        if exc is not None:
            logger.error("%s tick failed", self.name, exc_info=exc)


__all__ = ["Poller", "RequestSequencer"]
