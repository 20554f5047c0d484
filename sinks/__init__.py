from .jsonlines import JsonLinesSink
from .snapshot import SnapshotSink

__all__ = ["JsonLinesSink", "SnapshotSink"]
