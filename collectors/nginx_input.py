"""nginx_status input: configure/start/shutdown hooks plus the per-tick pipeline."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Mapping

import httpx

from .base import Sink, TickStats
from .config import Configuration
from .emission import emit
from .errors import FetchFailure, LifecycleError, ParseFailure
from .nginx_collector import NginxStatusCollector
from .registry import register_input
from .scheduler import PollScheduler

logger = logging.getLogger(__name__)


@register_input("nginx_status")
class NginxStatusInput:
    """Polls one stub_status endpoint on a timer and forwards the counters to a sink."""

    def __init__(
        self,
        sink: Sink,
        log: logging.Logger | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.sink = sink
        self.log = log or logger
        self.stats = TickStats()
        self.config: Configuration | None = None
        self.collector: NginxStatusCollector | None = None
        self._transport = transport
        self._clock = clock
        self._scheduler: PollScheduler | None = None

    def configure(self, raw: Mapping[str, Any] | None) -> Configuration:
        self.log.info("Nginx status monitor initializing")
        self.config = Configuration.from_mapping(raw)
        self.collector = NginxStatusCollector(self.config, transport=self._transport)
        return self.config

    def start(self) -> None:
        if self.config is None:
            raise LifecycleError("nginx_status input started before configure()")
        if self._scheduler is not None:
            raise LifecycleError("nginx_status input already started")
        self._scheduler = PollScheduler(
            self.config.interval,
            self.tick,
            log=self.log,
            name=f"nginx-status-{self.config.tag}",
        )
        self._scheduler.start()
        self.log.info(
            "Nginx status monitor started url=%s interval=%ss multi_events=%s",
            self.config.url,
            self.config.interval,
            self.config.multi_events,
        )

    def shutdown(self) -> None:
        if self._scheduler is None:
            return
        self._scheduler.shutdown()
        self.log.info("Nginx status monitor stopped")

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.is_alive

    async def tick(self) -> int:
        """Fetch, parse and emit once. Returns the number of records emitted."""
        if self.collector is None or self.config is None:
            raise LifecycleError("nginx_status input ticked before configure()")
        self.stats.ticks += 1
        try:
            outcome = await self.collector.collect()
            if isinstance(outcome, FetchFailure):
                self.stats.fetch_failures += 1
                self.stats.last_error = outcome.describe()
                self.log.error(outcome.describe())
                return 0
            if isinstance(outcome, ParseFailure):
                self.stats.parse_failures += 1
                self.stats.last_error = outcome.describe()
                self.log.error(outcome.describe())
                return 0

            self.stats.samples += 1
            now = int(self._clock())
            emitted = emit(outcome, self.config, now, self.sink)
        except Exception as e:
            self.stats.errors += 1
            self.stats.last_error = f"{type(e).__name__}: {e}"
            raise

        self.stats.records_emitted += emitted
        self.stats.last_success = now
        return emitted
