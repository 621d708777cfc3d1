"""Build pipeline coordinator — connects the engine's event stream to disk.

Orchestrates one build session:
    1. Wait for the bootstrap (``initial``) event
    2. Write ``manifest.json`` and every requested generated file
    3. Write each pre-rendered route as it arrives, concurrently
    4. When the stream ends, wait for outstanding writes and report

Stages only move forward::

    AWAITING_BOOTSTRAP --initial--> PROCESSING_ROUTES --end of stream--> DONE

Log events are allowed in any stage.  A route before bootstrap, or a second
bootstrap, is a protocol violation and stops the build.  A single bad route
never does: it is reported and the remaining routes are still written.
"""

from __future__ import annotations

import asyncio
import enum
import sys
import time
from collections.abc import AsyncIterable, Mapping
from typing import TYPE_CHECKING

from prowl._errors import DescriptorError, ExportError, ProtocolError
from prowl.engine.events import InitialEvent, LogEvent, PageDescriptor, parse_event
from prowl.export.result import ExportResult, RouteFailure

if TYPE_CHECKING:
    from prowl.engine.events import EngineEvent
    from prowl.export.result import ExportedFile
    from prowl.export.writer import OutputWriter
    from prowl.observability.collector import BuildCollector


class Stage(enum.Enum):
    AWAITING_BOOTSTRAP = "awaiting_bootstrap"
    PROCESSING_ROUTES = "processing_routes"
    DONE = "done"


def _describe(raw: object) -> str:
    """Best-effort route label for an event that failed to parse."""
    if isinstance(raw, Mapping) and isinstance(raw.get("route"), str):
        return raw["route"]
    return "<unknown>"


class BuildPipeline:
    """Dispatches engine events to the output writer.

    Args:
        writer: Writer bound to the output directory.
        collector: Optional build collector for structured records.

    """

    def __init__(
        self,
        writer: OutputWriter,
        collector: BuildCollector | None = None,
    ) -> None:
        self._writer = writer
        self._collector = collector
        self._stage = Stage.AWAITING_BOOTSTRAP
        self._pending: set[asyncio.Task[None]] = set()
        self._files: list[ExportedFile] = []
        self._failures: list[RouteFailure] = []
        self._pages = 0

    @property
    def stage(self) -> Stage:
        return self._stage

    @property
    def failures(self) -> tuple[RouteFailure, ...]:
        return tuple(self._failures)

    async def run(self, events: AsyncIterable[object]) -> ExportResult:
        """Consume the whole event stream and return the build result.

        Accepts raw JSON-shaped dicts or already-typed events.

        Raises:
            ProtocolError: On a protocol violation, or if the stream ended
                without a bootstrap event.  Route writes already in flight
                are awaited before the error propagates.
            ExportError: If the bootstrap writes fail.

        """
        start = time.perf_counter()
        try:
            async for raw in events:
                try:
                    event = raw if _is_typed(raw) else parse_event(raw)
                except DescriptorError as exc:
                    if _is_log(raw):
                        print(f"  Ignored engine log: {exc}", file=sys.stderr)
                    else:
                        self._fail(_describe(raw), str(exc))
                    continue
                await self.handle(event)  # type: ignore[arg-type]
        finally:
            # Stops the engine if we bailed out before the stream ended
            aclose = getattr(events, "aclose", None)
            if aclose is not None:
                await aclose()
            await self.drain()

        if self._stage is Stage.AWAITING_BOOTSTRAP:
            msg = "Engine finished without sending the bootstrap event"
            raise ProtocolError(msg)
        self._stage = Stage.DONE

        return ExportResult(
            files=tuple(self._files),
            failures=tuple(self._failures),
            total_pages=self._pages,
            duration_ms=(time.perf_counter() - start) * 1000,
            output_dir=self._writer.root,
        )

    async def handle(self, event: EngineEvent) -> None:
        """Dispatch a single typed event.

        Route events are scheduled and return immediately; call ``drain()``
        to wait for them.
        """
        if isinstance(event, LogEvent):
            print(f"  {event.value}", file=sys.stderr)
            if self._collector is not None:
                self._collector.record_engine_log(event.value)
        elif isinstance(event, InitialEvent):
            await self._bootstrap(event)
        elif isinstance(event, PageDescriptor):
            if self._stage is not Stage.PROCESSING_ROUTES:
                msg = f"Route {event.route!r} arrived before the bootstrap event"
                raise ProtocolError(msg)
            task = asyncio.create_task(self._write_page(event))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
        else:
            msg = f"Unsupported engine event: {event!r}"
            raise ProtocolError(msg)

    async def drain(self) -> None:
        """Wait for every scheduled route write to finish."""
        while self._pending:
            batch = tuple(self._pending)
            await asyncio.gather(*batch)
            self._pending.difference_update(batch)

    async def _bootstrap(self, event: InitialEvent) -> None:
        if self._stage is not Stage.AWAITING_BOOTSTRAP:
            msg = "Received a second bootstrap event"
            raise ProtocolError(msg)

        manifest, generated = await asyncio.gather(
            self._writer.write_manifest(event.manifest),
            self._writer.write_generated_files(event.files_to_generate),
            return_exceptions=True,
        )
        for outcome in (manifest, generated):
            if isinstance(outcome, DescriptorError):
                raise ProtocolError(f"Invalid bootstrap event: {outcome}") from outcome
            if isinstance(outcome, BaseException):
                raise outcome

        self._record((manifest, *generated))  # type: ignore[misc]
        self._stage = Stage.PROCESSING_ROUTES

    async def _write_page(self, descriptor: PageDescriptor) -> None:
        try:
            written = await self._writer.write_page(descriptor)
        except (DescriptorError, ExportError, OSError) as exc:
            self._fail(descriptor.route, str(exc))
            return

        self._pages += 1
        self._record(written)
        print(f"  Pre-rendered /{descriptor.route.lstrip('/')}", file=sys.stderr)

    def _record(self, files: tuple[ExportedFile, ...]) -> None:
        self._files.extend(files)
        if self._collector is not None:
            self._collector.record_files(files)

    def _fail(self, route: str, message: str) -> None:
        print(f"  Route failed: /{route.lstrip('/')}: {message}", file=sys.stderr)
        self._failures.append(RouteFailure(route=route, message=message))
        if self._collector is not None:
            self._collector.record_failure(route, message)


def _is_log(raw: object) -> bool:
    return isinstance(raw, Mapping) and raw.get("command") == "log"


def _is_typed(event: object) -> bool:
    return isinstance(event, (LogEvent, InitialEvent, PageDescriptor))
