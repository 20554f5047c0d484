"""Shared test fixtures."""

from __future__ import annotations

import threading

import httpx
import pytest

from collectors.base import Sink

# Layout produced by nginx itself.
NGINX_BODY = (
    "Active connections: 2 \n"
    "server accepts handled requests\n"
    " 4 4 11 \n"
    "Reading: 0 Writing: 1 Waiting: 1 \n"
)

# Condensed layout used by the end-to-end scenario.
SCENARIO_BODY = (
    "Active connections: 3 \n"
    "accepted handled total \n"
    "5 5 10 \n"
    "Reading: 0 Writing: 1 Waiting: 2"
)


class RecordingSink(Sink):
    """Keeps every emit/emit_stream call for assertions."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self._lock = threading.Lock()

    def emit(self, tag, timestamp, record) -> None:
        with self._lock:
            self.calls.append(("emit", tag, timestamp, record))

    def emit_stream(self, tag, events) -> None:
        with self._lock:
            self.calls.append(("emit_stream", tag, list(events)))

    @property
    def records(self) -> list[dict]:
        out = []
        with self._lock:
            for call in self.calls:
                if call[0] == "emit":
                    out.append(call[3])
                else:
                    out.extend(record for _, record in call[2])
        return out


def mock_transport(status: int = 200, body: str = NGINX_BODY) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, text=body)

    return httpx.MockTransport(handler)


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()
