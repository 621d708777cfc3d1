"""Asset handling — copy the client runtime files into the output.

The wrapped documents reference ``/index.js`` and ``/style.css`` (and the
user hook ``user-index.js``) at the output root; they are copied unmodified
from the project root.
"""

from __future__ import annotations

import shutil
import sys
import time
from typing import TYPE_CHECKING

from prowl._errors import ExportError
from prowl.config import DEFAULT_ASSETS
from prowl.export.paths import safe_relative
from prowl.export.result import ExportedFile

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path


def copy_assets(
    root: Path,
    output_dir: Path,
    names: Iterable[str] = DEFAULT_ASSETS,
) -> tuple[ExportedFile, ...]:
    """Copy each named file from ``root`` to the same path under ``output_dir``.

    Missing files are skipped with a warning on stderr.

    Args:
        root: Project root holding the assets.
        output_dir: Root export output directory.
        names: Asset paths relative to ``root``.

    Returns:
        Tuple of :class:`ExportedFile` entries, one per copied file.

    Raises:
        ExportError: If a file exists but cannot be copied.

    """
    results: list[ExportedFile] = []

    for name in names:
        relative = safe_relative(name, what="asset")
        src_file = root / relative
        if not src_file.is_file():
            print(f"  Asset skipped (not found): {name}", file=sys.stderr)
            continue

        t0 = time.perf_counter()
        dest_file = output_dir / relative
        try:
            dest_file.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(src_file, dest_file)
        except OSError as exc:
            msg = f"Failed to copy asset {name!r}: {exc}"
            raise ExportError(msg) from exc

        results.append(ExportedFile(
            source_path=name,
            output_path=dest_file,
            kind="asset",
            size_bytes=dest_file.stat().st_size,
            duration_ms=(time.perf_counter() - t0) * 1000,
        ))

    return tuple(results)
