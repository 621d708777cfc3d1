"""Output writer — lowers engine events to files under the output root.

All writes go through ``asyncio.to_thread`` so the receive loop never blocks
on disk I/O; callers may issue many writes without awaiting earlier ones.
Directory creation is ``exist_ok`` and therefore safe when two writes race
to create the same parent.
"""

from __future__ import annotations

import asyncio
import json
import time
from pathlib import Path
from typing import TYPE_CHECKING, Any

from prowl._errors import ExportError
from prowl.export.document import wrap_html
from prowl.export.manifest import serialize_manifest
from prowl.export.paths import output_dir, output_route, safe_relative
from prowl.export.result import ExportedFile

if TYPE_CHECKING:
    from collections.abc import Iterable

    from prowl._types import OutputKind
    from prowl.config import DocumentConfig
    from prowl.engine.events import GeneratedFile, PageDescriptor


def content_json(descriptor: PageDescriptor) -> str:
    """Compact ``content.json`` payload for a page."""
    return json.dumps(
        {"body": descriptor.rendered_body, "staticData": descriptor.static_data},
        separators=(",", ":"),
        ensure_ascii=False,
    )


def _write_text(filepath: Path, text: str) -> int:
    """Write text, creating parent dirs as needed. Returns bytes written."""
    filepath.parent.mkdir(parents=True, exist_ok=True)
    data = text.encode("utf-8")
    filepath.write_bytes(data)
    return len(data)


class OutputWriter:
    """Writes pages, generated files, and the manifest under ``root``.

    Args:
        root: Output directory (created on first write if missing).
        document: Static head metadata for wrapped pages.

    """

    def __init__(self, root: Path, document: DocumentConfig | None = None) -> None:
        self._root = root
        self._document = document

    @property
    def root(self) -> Path:
        return self._root

    async def _write(
        self, source: str, filepath: Path, text: str, kind: OutputKind,
    ) -> ExportedFile:
        t0 = time.perf_counter()
        size = await asyncio.to_thread(_write_text, filepath, text)
        return ExportedFile(
            source_path=source,
            output_path=filepath,
            kind=kind,
            size_bytes=size,
            duration_ms=(time.perf_counter() - t0) * 1000,
        )

    async def write_page(self, descriptor: PageDescriptor) -> tuple[ExportedFile, ...]:
        """Write ``index.html`` and ``content.json`` for one route.

        Both files are written concurrently and both are always attempted;
        a failure in one does not undo the other.

        Raises:
            DescriptorError: If the route resolves outside the output root.
            ExportError: If either file could not be written.

        """
        target = output_dir(descriptor.route, self._root)
        source = "/" + output_route(descriptor.route)

        try:
            await asyncio.to_thread(target.mkdir, parents=True, exist_ok=True)
        except OSError as exc:
            msg = f"Cannot create {target} for route {source!r}: {exc}"
            raise ExportError(msg) from exc

        outcomes = await asyncio.gather(
            self._write(source, target / "index.html",
                        wrap_html(descriptor, self._document), "page"),
            self._write(source, target / "content.json",
                        content_json(descriptor), "data"),
            return_exceptions=True,
        )

        errors = [o for o in outcomes if isinstance(o, BaseException)]
        if errors:
            msg = f"Failed to write route {source!r}: {errors[0]}"
            raise ExportError(msg) from errors[0]
        return tuple(outcomes)  # type: ignore[arg-type]

    async def write_generated_files(
        self, files: Iterable[GeneratedFile],
    ) -> tuple[ExportedFile, ...]:
        """Write engine-requested files verbatim, creating parent dirs.

        Raises:
            DescriptorError: If a declared path escapes the output root.
            ExportError: If any file could not be written.

        """
        jobs = []
        for generated in files:
            relative = safe_relative(generated.path, what="generated file")
            jobs.append(self._write(
                generated.path, self._root / relative, generated.content, "generated",
            ))

        outcomes = await asyncio.gather(*jobs, return_exceptions=True)
        for outcome in outcomes:
            if isinstance(outcome, OSError):
                msg = f"Failed to write generated file: {outcome}"
                raise ExportError(msg) from outcome
            if isinstance(outcome, BaseException):
                raise outcome
        return tuple(outcomes)  # type: ignore[arg-type]

    async def write_manifest(self, source: Any) -> ExportedFile:
        """Transform and write ``manifest.json`` at the output root.

        Raises:
            DescriptorError: If the manifest source is not an object.
            ExportError: If the file could not be written.

        """
        text = serialize_manifest(source)
        try:
            return await self._write(
                "manifest.json", self._root / "manifest.json", text, "manifest",
            )
        except OSError as exc:
            msg = f"Failed to write manifest.json: {exc}"
            raise ExportError(msg) from exc
