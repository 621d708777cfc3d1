"""Bundle step — compile, convert to an ES module, and minify ``main.js``.

The compiler and minifier are external tools run as shell commands.  The
text rewrites applied between them are kept here as small pure functions
with explicit input/output contracts:

``to_esm``
    The compiler emits a script that attaches ``Elm`` to ``this`` through an
    IIFE ending in ``}(this));``.  Pages load ``/main.js`` with
    ``type="module"``, where ``this`` is undefined, so the IIFE is pointed at
    a local ``scope`` object which is then exported.

``strip_json_stringify_placeholder``
    Engine builds encode values through a placeholder string that must
    pass values through untouched; every
    ``return $elm$json$Json$Encode$string(?REPLACE_ME_WITH_JSON_STRINGIFY?)``
    becomes ``return x``.
"""

from __future__ import annotations

import asyncio
import re
import sys
from typing import TYPE_CHECKING

from prowl._errors import EngineError

if TYPE_CHECKING:
    from pathlib import Path

    from prowl.config import ProwlConfig

_IIFE_TAIL = "}(this));"
_JSON_STRINGIFY_PLACEHOLDER = re.compile(
    r"return \$elm\$json\$Json\$Encode\$string\(.REPLACE_ME_WITH_JSON_STRINGIFY.\)"
)


def to_esm(source: str) -> str:
    """Wrap a ``this``-attaching bundle as an ES module exporting ``Elm``.

    Only the first ``}(this));`` is redirected.
    """
    return (
        "\n"
        "const scope = {};\n"
        + source.replace(_IIFE_TAIL, "}(scope));", 1)
        + "export const { Elm } = scope;\n"
        "\n"
    )


def strip_json_stringify_placeholder(source: str) -> str:
    return _JSON_STRINGIFY_PLACEHOLDER.sub("return x", source)


async def run_command(command: str, cwd: Path) -> str:
    """Run a shell command and return its stdout.

    Raises:
        EngineError: If the command exits with a non-zero status.

    """
    proc = await asyncio.create_subprocess_shell(
        command,
        cwd=cwd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stdout, stderr = await proc.communicate()
    if proc.returncode != 0:
        detail = stderr.decode("utf-8", errors="replace").strip()
        msg = f"Command failed ({proc.returncode}): {command}\n{detail}"
        raise EngineError(msg)
    if stderr:
        print(stderr.decode("utf-8", errors="replace").rstrip(), file=sys.stderr)
    return stdout.decode("utf-8", errors="replace")


async def compile_bundle(config: ProwlConfig) -> Path | None:
    """Produce ``<output>/main.js`` as a minified ES module.

    Returns the bundle path, or ``None`` when no ``compile_command`` is set.

    Raises:
        EngineError: If a command fails or the compiler wrote no bundle.

    """
    if not config.compile_command:
        return None

    bundle = config.bundle_path
    await run_command(config.compile_command, config.root)
    if not bundle.is_file():
        msg = f"Compile command did not produce {bundle}"
        raise EngineError(msg)

    source = await asyncio.to_thread(bundle.read_text, encoding="utf-8")
    await asyncio.to_thread(bundle.write_text, to_esm(source), encoding="utf-8")

    if config.minify_command:
        await run_command(config.minify_command.format(path=bundle), config.root)
    return bundle


async def compile_engine(config: ProwlConfig) -> Path | None:
    """Build the engine itself and patch out the JSON placeholder.

    Returns the patched engine bundle, or ``None`` when
    ``engine_compile_command`` is not set.

    Raises:
        EngineError: If the command fails or ``engine_bundle`` is missing.

    """
    if not config.engine_compile_command:
        return None
    if not config.engine_bundle:
        msg = "engine_compile_command requires engine_bundle"
        raise EngineError(msg)

    await run_command(config.engine_compile_command, config.root)
    bundle = config.root / config.engine_bundle
    if not bundle.is_file():
        msg = f"Engine compile command did not produce {bundle}"
        raise EngineError(msg)

    source = await asyncio.to_thread(bundle.read_text, encoding="utf-8")
    await asyncio.to_thread(
        bundle.write_text, strip_json_stringify_placeholder(source), encoding="utf-8",
    )
    return bundle
