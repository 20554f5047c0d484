"""JsonLinesSink — writes one JSON object per record to a text stream."""

from __future__ import annotations

import json
import sys
import threading
from typing import Sequence, TextIO

from collectors.base import Event, Record, Sink


class JsonLinesSink(Sink):
    """Writes ``{"tag", "time", "record"}`` lines; safe to share between poll threads."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream or sys.stdout
        self._lock = threading.Lock()

    def _line(self, tag: str, timestamp: int, record: Record) -> str:
        return json.dumps({"tag": tag, "time": timestamp, "record": record}, sort_keys=True)

    def emit(self, tag: str, timestamp: int, record: Record) -> None:
        line = self._line(tag, timestamp, record)
        with self._lock:
            self.stream.write(line + "\n")
            self.stream.flush()

    def emit_stream(self, tag: str, events: Sequence[Event]) -> None:
        lines = [self._line(tag, ts, record) for ts, record in events]
        # One write keeps a batch contiguous in the output.
        with self._lock:
            self.stream.write("".join(line + "\n" for line in lines))
            self.stream.flush()
