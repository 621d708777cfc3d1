"""Engine process — runs the rendering engine and streams its events.

The engine is any executable that:

1. reads one JSON line of startup flags on stdin,
2. writes one JSON event per line on stdout,
3. exits 0 once every route has been emitted.

Its stderr is passed straight through to ours.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from prowl._errors import EngineError
from prowl.config import DEFAULT_MODE

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Mapping
    from pathlib import Path

    from prowl.config import ProwlConfig

# Page descriptors arrive as single lines and can be large
_LINE_LIMIT = 64 * 1024 * 1024


class LineReader(Protocol):
    async def readline(self) -> bytes: ...


@dataclass(frozen=True, slots=True)
class EngineFlags:
    """Startup flags handed to the engine exactly once.

    Attributes:
        mode: Rendering mode selected by configuration.
        secrets: Environment values the engine may read.
        static_http_cache: Pre-seeded HTTP responses keyed by request.

    """

    mode: str = DEFAULT_MODE
    secrets: Mapping[str, str] = field(default_factory=dict)
    static_http_cache: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_config(cls, config: ProwlConfig) -> EngineFlags:
        secrets = dict(os.environ) if config.pass_environment else {}
        return cls(mode=config.mode, secrets=secrets)

    def to_json(self) -> str:
        return json.dumps({
            "secrets": dict(self.secrets),
            "mode": self.mode,
            "staticHttpCache": dict(self.static_http_cache),
        })


async def read_events(stream: LineReader) -> AsyncIterator[Any]:
    """Yield one decoded JSON value per non-blank line until EOF.

    Raises:
        EngineError: If a line is not valid JSON.

    """
    while True:
        line = await stream.readline()
        if not line:
            return
        text = line.decode("utf-8").strip()
        if not text:
            continue
        try:
            yield json.loads(text)
        except json.JSONDecodeError as exc:
            msg = f"Engine emitted a line that is not JSON: {text[:80]!r}"
            raise EngineError(msg) from exc


class EngineProcess:
    """A single run of the rendering engine.

    Args:
        command: Engine argv.
        cwd: Working directory for the engine.
        flags: Startup flags written to the engine's stdin.

    """

    def __init__(
        self,
        command: tuple[str, ...],
        cwd: Path,
        flags: EngineFlags | None = None,
    ) -> None:
        if not command:
            msg = "Engine command is empty"
            raise EngineError(msg)
        self._command = command
        self._cwd = cwd
        self._flags = flags if flags is not None else EngineFlags()

    @classmethod
    def from_config(cls, config: ProwlConfig) -> EngineProcess:
        return cls(config.engine_command, config.root, EngineFlags.from_config(config))

    async def events(self) -> AsyncIterator[Any]:
        """Spawn the engine and yield its events as they are emitted.

        Raises:
            EngineError: If the engine cannot be started, emits non-JSON
                output, or exits with a non-zero status.

        """
        try:
            proc = await asyncio.create_subprocess_exec(
                *self._command,
                cwd=self._cwd,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                limit=_LINE_LIMIT,
            )
        except OSError as exc:
            msg = f"Cannot start engine {self._command[0]!r}: {exc}"
            raise EngineError(msg) from exc

        assert proc.stdin is not None
        assert proc.stdout is not None

        try:
            proc.stdin.write(self._flags.to_json().encode("utf-8") + b"\n")
            await proc.stdin.drain()
        except (BrokenPipeError, ConnectionResetError):
            pass  # engine ignores stdin; its exit status decides the outcome
        finally:
            proc.stdin.close()

        try:
            async for event in read_events(proc.stdout):
                yield event
        except BaseException:
            if proc.returncode is None:
                with contextlib.suppress(ProcessLookupError):
                    proc.kill()
            await proc.wait()
            raise

        returncode = await proc.wait()
        if returncode != 0:
            msg = f"Engine exited with status {returncode}"
            raise EngineError(msg)
