"""SnapshotSink — keeps the latest counters per (tag, server) for the web host."""

from __future__ import annotations

import threading
from typing import Any, Sequence

from collectors.base import Event, Record, Sink


class SnapshotSink(Sink):
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._latest: dict[tuple[str, str], dict[str, Any]] = {}
        self.records_received = 0

    def _merge(self, tag: str, timestamp: int, record: Record) -> None:
        # Multi-event records carry one counter each; merging rebuilds the full set.
        server = str(record.get("server", ""))
        entry = self._latest.setdefault((tag, server), {"tag": tag, "server": server, "counters": {}})
        entry["counters"].update(
            {k: v for k, v in record.items() if k not in ("tag", "server")}
        )
        entry["time"] = timestamp
        self.records_received += 1

    def emit(self, tag: str, timestamp: int, record: Record) -> None:
        with self._lock:
            self._merge(tag, timestamp, record)

    def emit_stream(self, tag: str, events: Sequence[Event]) -> None:
        with self._lock:
            for ts, record in events:
                self._merge(tag, ts, record)

    def snapshot(self) -> list[dict[str, Any]]:
        with self._lock:
            return [
                {**entry, "counters": dict(entry["counters"])}
                for _, entry in sorted(self._latest.items())
            ]
