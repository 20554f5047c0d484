from .base import BaseCollector, Sink, TickStats, Record, Event
from .config import Configuration
from .errors import (
    CollectorError,
    ConfigError,
    LifecycleError,
    FetchFailure,
    NonOkStatus,
    TransportError,
    ParseFailure,
)
from .stub_status import StatusSample, parse
from .emission import build_records, emit
from .nginx_collector import NginxStatusCollector
from .scheduler import PollScheduler
from .nginx_input import NginxStatusInput
from .registry import create_input, register_input, registered_inputs

__all__ = [
    "BaseCollector",
    "Sink",
    "TickStats",
    "Record",
    "Event",
    "Configuration",
    "CollectorError",
    "ConfigError",
    "LifecycleError",
    "FetchFailure",
    "NonOkStatus",
    "TransportError",
    "ParseFailure",
    "StatusSample",
    "parse",
    "build_records",
    "emit",
    "NginxStatusCollector",
    "PollScheduler",
    "NginxStatusInput",
    "create_input",
    "register_input",
    "registered_inputs",
]
