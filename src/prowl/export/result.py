"""Build records — what was written, what failed."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from prowl._types import OutputKind


@dataclass(frozen=True, slots=True)
class ExportedFile:
    """Record of a single file written during the build.

    Attributes:
        source_path: Logical source (a route like ``"/blog/post-1"``, or the
            declared path of a generated file).
        output_path: Absolute filesystem path to the written file.
        kind: Category of the written file.
        size_bytes: Size of the written file in bytes.
        duration_ms: Time taken to write this file.

    """

    source_path: str
    output_path: Path
    kind: OutputKind
    size_bytes: int
    duration_ms: float


@dataclass(frozen=True, slots=True)
class RouteFailure:
    """A route that could not be written (or could not even be parsed)."""

    route: str
    message: str


@dataclass(frozen=True, slots=True)
class ExportResult:
    """Aggregate result of a build.

    Attributes:
        files: All files written.
        failures: Routes that were rejected or only partially written.
        total_pages: Number of routes whose ``index.html`` was written.
        duration_ms: Wall-clock time for the run.
        output_dir: Absolute path to the output directory.

    """

    files: tuple[ExportedFile, ...]
    failures: tuple[RouteFailure, ...]
    total_pages: int
    duration_ms: float
    output_dir: Path

    @property
    def ok(self) -> bool:
        """True when every route made it to disk."""
        return not self.failures
