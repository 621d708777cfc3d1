"""Prowl application — the ``build`` entry point.

Ties the pieces together for one run:
    1. Load configuration and prepare the output directory
    2. Build the engine and the client bundle (when configured)
    3. Copy client assets
    4. Stream engine events through the build pipeline
"""

from __future__ import annotations

import asyncio
import shutil
import sys
import time
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING

from prowl._errors import ExportError
from prowl.config_loader import load_config
from prowl.export.result import ExportedFile

if TYPE_CHECKING:
    from prowl.config import ProwlConfig
    from prowl.export.result import ExportResult
    from prowl.observability.collector import BuildCollector


def _prepare_output(config: ProwlConfig) -> Path:
    """Create the output directory, wiping it first when ``clean`` is set."""
    output_dir = config.output_path
    try:
        if config.clean and output_dir.exists():
            shutil.rmtree(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        msg = f"Cannot prepare output directory {output_dir}: {exc}"
        raise ExportError(msg) from exc
    return output_dir


async def run_build(
    config: ProwlConfig,
    collector: BuildCollector | None = None,
) -> ExportResult:
    """Run a full build for an already-loaded configuration.

    Raises:
        ProwlError: On any fatal failure (engine, protocol, bootstrap writes).

    """
    from prowl.engine.bundle import compile_bundle, compile_engine
    from prowl.engine.process import EngineProcess
    from prowl.export.assets import copy_assets
    from prowl.export.writer import OutputWriter
    from prowl.observability import BuildCollector
    from prowl.pipeline import BuildPipeline

    if collector is None:
        collector = BuildCollector()

    start = time.perf_counter()
    output_dir = _prepare_output(config)

    await compile_engine(config)
    extra: list[ExportedFile] = []
    bundle, assets = await asyncio.gather(
        compile_bundle(config),
        asyncio.to_thread(copy_assets, config.root, output_dir, config.assets),
    )
    extra.extend(assets)
    if bundle is not None:
        extra.append(ExportedFile(
            source_path="main.js",
            output_path=bundle,
            kind="bundle",
            size_bytes=bundle.stat().st_size,
            duration_ms=0.0,
        ))
    collector.record_files(extra)

    writer = OutputWriter(output_dir, config.document)
    pipeline = BuildPipeline(writer, collector=collector)
    engine = EngineProcess.from_config(config)
    result = await pipeline.run(engine.events())

    return replace(
        result,
        files=(*extra, *result.files),
        duration_ms=(time.perf_counter() - start) * 1000,
    )


def build(root: str | Path = ".", **kwargs: object) -> ExportResult:
    """Build the site into its static output tree.

    Args:
        root: Path to the project root.
        **kwargs: Override ProwlConfig fields.

    Returns:
        The ExportResult; check ``result.failures`` for rejected routes.

    """
    config = load_config(Path(root), **kwargs)
    print(f"  Building {config.root} -> {config.output_path}", file=sys.stderr)
    result = asyncio.run(run_build(config))
    _print_export_summary(result)
    return result


def _print_export_summary(result: ExportResult) -> None:
    """Print build completion summary to stderr."""
    lines = [
        "",
        "─" * 41,
        f"  Pre-rendered {result.total_pages} page{'s' if result.total_pages != 1 else ''}",
    ]
    if result.failures:
        count = len(result.failures)
        lines.append(f"  {count} route{'s' if count != 1 else ''} failed:")
        lines.extend(f"    /{f.route.lstrip('/')}: {f.message}" for f in result.failures)
    lines.append(f"  Output: {result.output_dir}")
    lines.append(f"  Done in {result.duration_ms:.0f}ms")

    print("\n".join(lines), file=sys.stderr)
