"""Build collector — the one place the pipeline reports what happened.

Translates writer results and failures into build records and appends them
to an ``EventLog``.  Safe to call from worker threads (the log is locked).

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from prowl.observability.events import EngineLogged, FileWritten, RouteFailed, now_ns
from prowl.observability.log import EventLog

if TYPE_CHECKING:
    from collections.abc import Iterable

    from prowl.export.result import ExportedFile


class BuildCollector:
    """Records build activity into an event log.

    Args:
        log: The EventLog to store records in (a fresh one if omitted).

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        return self._log

    def record_files(self, files: Iterable[ExportedFile]) -> None:
        """Record one ``FileWritten`` per exported file."""
        for exported in files:
            self._log.append(
                FileWritten(
                    route=exported.source_path,
                    target=str(exported.output_path),
                    kind=exported.kind,
                    size_bytes=exported.size_bytes,
                    duration_ms=exported.duration_ms,
                    timestamp_ns=now_ns(),
                )
            )

    def record_failure(self, route: str, message: str) -> None:
        self._log.append(RouteFailed(route=route, message=message, timestamp_ns=now_ns()))

    def record_engine_log(self, message: str) -> None:
        self._log.append(EngineLogged(message=message, timestamp_ns=now_ns()))
