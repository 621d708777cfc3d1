"""Engine layer — the rendering engine as an external process.

Typed event model, the subprocess runner that streams those events, and the
bundle step that prepares ``main.js`` and the engine build.
"""

from prowl.engine.events import (
    GeneratedFile,
    InitialEvent,
    JsonLdTag,
    LogEvent,
    MetaTag,
    PageDescriptor,
    parse_event,
)
from prowl.engine.process import EngineFlags, EngineProcess

__all__ = [
    "EngineFlags",
    "EngineProcess",
    "GeneratedFile",
    "InitialEvent",
    "JsonLdTag",
    "LogEvent",
    "MetaTag",
    "PageDescriptor",
    "parse_event",
]
