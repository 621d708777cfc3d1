"""Shared test fixtures for prowl."""

from __future__ import annotations

import json
import sys
from collections.abc import AsyncIterator, Callable
from pathlib import Path
from typing import Any

import pytest

from prowl.export.writer import OutputWriter

# Reads the flags line, logs the mode, replays events from a JSON file, and
# exits with the requested status.
_FAKE_ENGINE = """\
import json
import sys

flags = json.loads(sys.stdin.readline())
print(json.dumps({"command": "log", "value": "mode=" + flags["mode"]}), flush=True)
with open(sys.argv[1], encoding="utf-8") as fh:
    for event in json.load(fh):
        if isinstance(event, str):
            print(event, flush=True)
        else:
            print(json.dumps(event), flush=True)
sys.exit(int(sys.argv[2]))
"""


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """An empty output directory."""
    out = tmp_path / "dist"
    out.mkdir()
    return out


@pytest.fixture
def writer(output_dir: Path) -> OutputWriter:
    return OutputWriter(output_dir)


@pytest.fixture
def fake_engine(tmp_path: Path) -> Callable[..., tuple[str, ...]]:
    """Factory for an engine command replaying the given raw events.

    Raw string entries are printed as-is (for malformed-output tests).
    """
    script = tmp_path / "engine.py"
    script.write_text(_FAKE_ENGINE, encoding="utf-8")

    def make(events: list[Any], *, exit_code: int = 0) -> tuple[str, ...]:
        events_file = tmp_path / "events.json"
        events_file.write_text(json.dumps(events), encoding="utf-8")
        return (sys.executable, str(script), str(events_file), str(exit_code))

    return make


async def stream(*events: object) -> AsyncIterator[object]:
    """Async iterator over the given events, like an engine subscription."""
    for event in events:
        yield event


def initial(manifest: Any = None, files: list[dict[str, str]] | None = None) -> dict[str, Any]:
    return {
        "command": "initial",
        "manifest": {"name": "x"} if manifest is None else manifest,
        "filesToGenerate": files or [],
    }


def page(route: str, html: str = "<p>hi</p>", **extra: Any) -> dict[str, Any]:
    return {"route": route, "html": html, "headTags": [], "staticData": None, **extra}
