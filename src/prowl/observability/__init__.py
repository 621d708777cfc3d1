"""Build observability — structured records of what a build wrote.

Quick Start:
    >>> from prowl.observability import BuildCollector, EventLog, FileWritten
    >>> collector = BuildCollector(EventLog())
    >>> # pass collector to BuildPipeline(writer, collector=collector)
    >>> collector.log.query(event_type=FileWritten)
    []

"""

from prowl.observability.collector import BuildCollector
from prowl.observability.events import (
    BuildRecord,
    EngineLogged,
    FileWritten,
    RouteFailed,
    now_ns,
)
from prowl.observability.log import EventLog

__all__ = [
    "BuildCollector",
    "BuildRecord",
    "EngineLogged",
    "EventLog",
    "FileWritten",
    "RouteFailed",
    "now_ns",
]
