"""Parser for the nginx stub_status page.

The page is a fixed three-line report::

    Active connections: 2
    server accepts handled requests
     4 4 11
    Reading: 0 Writing: 1 Waiting: 1

The whole body is matched with one pattern; a body that does not match yields
a ParseFailure and never a partially filled sample.
"""

from __future__ import annotations

import re
from dataclasses import astuple, dataclass

from .errors import ParseFailure

FIELDS = ("active", "accepted", "handled", "total", "reading", "writing", "waiting")

PREVIEW_CHARS = 80

_STUB_STATUS_RE = re.compile(
    r"^[a-zA-Z\s]+:\s([0-9]+?)\s\n"
    r"[a-z\s]+([0-9]+)\s([0-9]+)\s([0-9]+)\s\n"
    r"[a-zA-Z:?]+\s([0-9]+)\s[a-zA-Z:?]+\s([0-9]+)\s[a-zA-Z:?]+\s([0-9]+)",
    re.MULTILINE | re.ASCII,
)


@dataclass(frozen=True)
class StatusSample:
    active: int
    accepted: int
    handled: int
    total: int
    reading: int
    writing: int
    waiting: int

    def as_dict(self) -> dict[str, int]:
        """Counters keyed by field name, in parse order."""
        return dict(zip(FIELDS, astuple(self)))


def parse(body: str) -> StatusSample | ParseFailure:
    m = _STUB_STATUS_RE.search(body)
    if m is None:
        return ParseFailure(length=len(body), preview=repr(body[:PREVIEW_CHARS]))
    return StatusSample(*(int(g) for g in m.groups()))
