"""Input configuration: defaults, coercion and validation of the raw mapping."""

from __future__ import annotations

import math
import socket
from dataclasses import dataclass
from typing import Any, Mapping

from .errors import ConfigError

DEFAULT_TAG = "nginx.status"
DEFAULT_HOST = "localhost"
DEFAULT_PORT = "80"
DEFAULT_PATH = "/nginx_status"
DEFAULT_INTERVAL = 1
TLS_PORT = 443

KNOWN_KEYS = frozenset(
    {"tag", "host", "port", "path", "interval", "server_name", "multi_events"}
)

_TRUE = {"true", "yes", "on", "1"}
_FALSE = {"false", "no", "off", "0"}


def _as_str(key: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"'{key}' must be a non-empty string, got {value!r}")
    return value


def _as_port(value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"'port' must be an integer, got {value!r}")
    if isinstance(value, int):
        port = value
    elif isinstance(value, str) and value.strip().isdigit():
        port = int(value.strip())
    else:
        raise ConfigError(f"'port' must be an integer, got {value!r}")
    if not 1 <= port <= 65535:
        raise ConfigError(f"'port' out of range: {port}")
    return port


def _as_interval(value: Any) -> float:
    if isinstance(value, bool):
        raise ConfigError(f"'interval' must be a number, got {value!r}")
    try:
        interval = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"'interval' must be a number, got {value!r}") from None
    if not math.isfinite(interval) or not interval > 0:
        raise ConfigError(f"'interval' must be a positive finite number, got {value!r}")
    return interval


def _as_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
    raise ConfigError(f"'{key}' must be a boolean, got {value!r}")


@dataclass(frozen=True)
class Configuration:
    tag: str
    host: str
    port: int
    path: str
    interval: float
    server_name: str
    multi_events: bool

    @property
    def scheme(self) -> str:
        # Port 443 implies TLS regardless of anything else.
        return "https" if self.port == TLS_PORT else "http"

    @property
    def url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}{self.path}"

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> Configuration:
        """Build a Configuration from a raw config mapping, applying defaults.

        Raises ConfigError for unknown keys or values that cannot be coerced.
        """
        raw = dict(raw or {})
        unknown = sorted(set(raw) - KNOWN_KEYS)
        if unknown:
            raise ConfigError(f"unknown config key(s): {', '.join(unknown)}")

        path = _as_str("path", raw.get("path", DEFAULT_PATH))
        if not path.startswith("/"):
            raise ConfigError(f"'path' must start with '/', got {path!r}")

        server_name = raw.get("server_name")
        if server_name is None:
            server_name = socket.gethostname()

        return cls(
            tag=_as_str("tag", raw.get("tag", DEFAULT_TAG)),
            host=_as_str("host", raw.get("host", DEFAULT_HOST)),
            port=_as_port(raw.get("port", DEFAULT_PORT)),
            path=path,
            interval=_as_interval(raw.get("interval", DEFAULT_INTERVAL)),
            server_name=_as_str("server_name", server_name),
            multi_events=_as_bool("multi_events", raw.get("multi_events", False)),
        )
