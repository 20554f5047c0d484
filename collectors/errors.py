"""Error taxonomy for the status collector.

ConfigError and LifecycleError are raised. The per-tick failures are plain
values returned by the fetcher and the parser so the tick can dispatch on them.
"""

from __future__ import annotations

from dataclasses import dataclass


class CollectorError(Exception):
    """Base for errors raised by the collector."""


class ConfigError(CollectorError):
    """Raw configuration could not be turned into a Configuration."""


class LifecycleError(CollectorError):
    """Start/stop called in the wrong state, or the poll thread died."""


@dataclass(frozen=True)
class FetchFailure:
    url: str

    def describe(self) -> str:
        return f"fetch failed for {self.url}"


@dataclass(frozen=True)
class NonOkStatus(FetchFailure):
    code: int

    def describe(self) -> str:
        return f"invalid_nginx_status_response code={self.code} url={self.url}"


@dataclass(frozen=True)
class TransportError(FetchFailure):
    cause: BaseException

    def describe(self) -> str:
        return f"Unable to fetch status page url={self.url} error={type(self.cause).__name__}: {self.cause}"


@dataclass(frozen=True)
class ParseFailure:
    length: int
    preview: str

    def describe(self) -> str:
        return f"unparseable status body length={self.length} preview={self.preview}"
