"""Turns a parsed sample into records and hands them to the sink."""

from __future__ import annotations

from .base import Record, Sink
from .config import Configuration
from .stub_status import StatusSample


def build_records(sample: StatusSample, tag: str, server: str, multi: bool) -> list[Record]:
    """One combined record, or one record per counter in parse order when `multi`."""
    counters = sample.as_dict()
    if multi:
        return [{key: value, "tag": tag, "server": server} for key, value in counters.items()]
    return [{**counters, "tag": tag, "server": server}]


def emit(sample: StatusSample, config: Configuration, now: int, sink: Sink) -> int:
    """Emit `sample` under `config.tag`; returns the number of records handed over."""
    records = build_records(sample, config.tag, config.server_name, config.multi_events)
    if config.multi_events:
        sink.emit_stream(config.tag, [(now, record) for record in records])
    else:
        sink.emit(config.tag, now, records[0])
    return len(records)
