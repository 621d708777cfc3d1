"""Build event model.

Every event is a frozen dataclass stamped with a monotonic
``timestamp_ns``, so events can be produced from any task or worker thread
and shared freely.

"""

import time
from dataclasses import dataclass
from typing import TypeAlias

from prowl._types import OutputKind


@dataclass(frozen=True, slots=True)
class FileWritten:
    """A file landed in the output tree.

    Attributes:
        route: Logical source (route, generated path, or asset name).
        target: Absolute output path, as a string.
        kind: Category of the written file.
        size_bytes: Bytes written.
        duration_ms: Time spent writing.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    route: str
    target: str
    kind: OutputKind
    size_bytes: int
    duration_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class RouteFailed:
    """A route was rejected or only partially written."""

    route: str
    message: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class EngineLogged:
    """The rendering engine emitted a log line."""

    message: str
    timestamp_ns: int


BuildRecord: TypeAlias = FileWritten | RouteFailed | EngineLogged


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
