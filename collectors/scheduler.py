"""Repeating timer on a private asyncio loop, driven from a dedicated thread.

Lifecycle is Idle -> Running -> Stopped. Ticks run one at a time on the loop
thread; an overrunning tick delays the next firing instead of overlapping it.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Awaitable, Callable

from .errors import LifecycleError

logger = logging.getLogger(__name__)

IDLE = "idle"
RUNNING = "running"
STOPPED = "stopped"


class PollScheduler:
    def __init__(
        self,
        interval: float,
        tick: Callable[[], Awaitable[object]],
        log: logging.Logger | None = None,
        name: str = "poll-scheduler",
    ) -> None:
        self.interval = interval
        self.name = name
        self.state = IDLE
        self._tick = tick
        self._log = log or logger
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._timer: asyncio.TimerHandle | None = None
        self._current: asyncio.Task | None = None
        self._next_at = 0.0
        self._detached = False
        self._dead = False

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Attach the timer and start the loop thread."""
        if self.state != IDLE:
            raise LifecycleError(f"{self.name}: cannot start from state '{self.state}'")
        self._loop = asyncio.new_event_loop()
        self._next_at = self._loop.time() + self.interval
        self._timer = self._loop.call_at(self._next_at, self._fire)
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self.state = RUNNING
        self._thread.start()

    def shutdown(self) -> None:
        """Detach the timer, stop the loop once any in-flight tick ends, join the thread."""
        if self.state == STOPPED:
            return
        if self.state == IDLE:
            self.state = STOPPED
            return
        self.state = STOPPED
        assert self._loop is not None and self._thread is not None
        if not self._thread.is_alive():
            self._log.error("%s: poll thread already exited", self.name)
            return
        try:
            self._loop.call_soon_threadsafe(self._detach)
        except RuntimeError:
            # Loop closed between the liveness check and here.
            self._log.error("%s: poll loop already closed", self.name)
        self._thread.join()

    def _run(self) -> None:
        loop = self._loop
        assert loop is not None
        asyncio.set_event_loop(loop)
        try:
            loop.run_forever()
        except BaseException:
            self._dead = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._log.exception("%s: unexpected error, poll thread exiting", self.name)
        finally:
            try:
                loop.run_until_complete(loop.shutdown_asyncgens())
            finally:
                loop.close()

    def _fire(self) -> None:
        assert self._loop is not None
        self._timer = None
        self._current = self._loop.create_task(self._guarded_tick())
        self._current.add_done_callback(self._after_tick)

    async def _guarded_tick(self) -> None:
        try:
            await self._tick()
        except Exception:
            self._log.exception("%s: tick failed", self.name)

    def _after_tick(self, _task: asyncio.Task) -> None:
        assert self._loop is not None
        self._current = None
        if self._dead:
            return
        if self._detached:
            self._loop.stop()
            return
        now = self._loop.time()
        self._next_at += self.interval
        if self._next_at < now:
            self._next_at = now
        self._timer = self._loop.call_at(self._next_at, self._fire)

    def _detach(self) -> None:
        assert self._loop is not None
        self._detached = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._current is None:
            self._loop.stop()
