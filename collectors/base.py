"""Base collector ABC, the sink interface, and shared data types."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from typing import Any, Sequence

from .errors import FetchFailure, ParseFailure
from .stub_status import StatusSample

Record = dict[str, Any]
# (epoch seconds, record)
Event = tuple[int, Record]


class Sink(ABC):
    """Destination for emitted records. Called from the poll thread."""

    @abstractmethod
    def emit(self, tag: str, timestamp: int, record: Record) -> None:
        ...

    @abstractmethod
    def emit_stream(self, tag: str, events: Sequence[Event]) -> None:
        """Emit an ordered batch of records under one tag."""
        ...


@dataclass
class TickStats:
    ticks: int = 0
    samples: int = 0
    fetch_failures: int = 0
    parse_failures: int = 0
    errors: int = 0
    records_emitted: int = 0
    last_error: str | None = None
    last_success: int | None = None

    def snapshot(self) -> dict[str, Any]:
        return asdict(self)


class BaseCollector(ABC):
    """Abstract base for status collectors."""

    @abstractmethod
    async def collect(self) -> StatusSample | FetchFailure | ParseFailure:
        """Fetch and parse one sample. Must not raise — return the failure instead."""
        ...
