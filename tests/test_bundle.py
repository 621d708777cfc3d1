"""Tests for prowl.engine.bundle — bundle rewrites and commands."""

from __future__ import annotations

import shlex
import sys
from pathlib import Path

import pytest

from prowl._errors import EngineError
from prowl.config import ProwlConfig
from prowl.engine.bundle import (
    compile_bundle,
    compile_engine,
    run_command,
    strip_json_stringify_placeholder,
    to_esm,
)

_PY = shlex.quote(sys.executable)


class TestToEsm:
    """to_esm — UMD bundle to ES module."""

    def test_wraps_scope(self) -> None:
        source = "(function(scope){ scope.Elm = {}; }(this));"
        assert to_esm(source) == (
            "\nconst scope = {};\n"
            "(function(scope){ scope.Elm = {}; }(scope));"
            "export const { Elm } = scope;\n\n"
        )

    def test_only_first_iife_redirected(self) -> None:
        out = to_esm("a}(this));b}(this));")
        assert out.count("}(scope));") == 1
        assert out.count("}(this));") == 1


class TestStripPlaceholder:
    def test_replaces_all(self) -> None:
        source = (
            "function a(x){return $elm$json$Json$Encode$string('REPLACE_ME_WITH_JSON_STRINGIFY')}\n"
            'function b(x){return $elm$json$Json$Encode$string("REPLACE_ME_WITH_JSON_STRINGIFY")}'
        )
        out = strip_json_stringify_placeholder(source)
        assert out.count("return x") == 2
        assert "REPLACE_ME" not in out

    def test_untouched_otherwise(self) -> None:
        source = "return $elm$json$Json$Encode$string(value)"
        assert strip_json_stringify_placeholder(source) == source


class TestRunCommand:
    @pytest.mark.asyncio
    async def test_stdout(self, tmp_path: Path) -> None:
        out = await run_command(f"{_PY} -c \"print('ok')\"", tmp_path)
        assert out.strip() == "ok"

    @pytest.mark.asyncio
    async def test_failure(self, tmp_path: Path) -> None:
        with pytest.raises(EngineError, match="boom"):
            await run_command(
                f"{_PY} -c \"import sys; sys.stderr.write('boom'); sys.exit(2)\"", tmp_path,
            )


class TestCompileBundle:
    """compile_bundle — compile, wrap, minify."""

    @pytest.mark.asyncio
    async def test_disabled(self, tmp_path: Path) -> None:
        assert await compile_bundle(ProwlConfig(root=tmp_path)) is None

    @pytest.mark.asyncio
    async def test_compiles_and_wraps(self, tmp_path: Path) -> None:
        (tmp_path / "dist").mkdir()
        (tmp_path / "compile.py").write_text(
            "open('dist/main.js', 'w').write('(function(s){s.Elm=1}(this));')\n"
        )
        (tmp_path / "minify.py").write_text(
            "import sys\n"
            "p = sys.argv[1]\n"
            "t = open(p).read()\n"
            "open(p, 'w').write(t.replace(' ', ''))\n"
        )
        config = ProwlConfig(
            root=tmp_path,
            compile_command=f"{_PY} compile.py",
            minify_command=f"{_PY} minify.py {{path}}",
        )
        bundle = await compile_bundle(config)
        assert bundle == tmp_path / "dist" / "main.js"
        text = bundle.read_text()
        assert "}(scope));" in text
        assert "exportconst{Elm}=scope;" in text

    @pytest.mark.asyncio
    async def test_missing_output(self, tmp_path: Path) -> None:
        config = ProwlConfig(root=tmp_path, compile_command=f"{_PY} -c pass")
        with pytest.raises(EngineError, match="did not produce"):
            await compile_bundle(config)


class TestCompileEngine:
    @pytest.mark.asyncio
    async def test_disabled(self, tmp_path: Path) -> None:
        assert await compile_engine(ProwlConfig(root=tmp_path)) is None

    @pytest.mark.asyncio
    async def test_requires_bundle_path(self, tmp_path: Path) -> None:
        config = ProwlConfig(root=tmp_path, engine_compile_command=f"{_PY} -c pass")
        with pytest.raises(EngineError, match="engine_bundle"):
            await compile_engine(config)

    @pytest.mark.asyncio
    async def test_patches_placeholder(self, tmp_path: Path) -> None:
        (tmp_path / "build.py").write_text(
            "open('engine.js', 'w').write("
            "\"return $elm$json$Json$Encode$string('REPLACE_ME_WITH_JSON_STRINGIFY')\")\n"
        )
        config = ProwlConfig(
            root=tmp_path,
            engine_compile_command=f"{_PY} build.py",
            engine_bundle="engine.js",
        )
        bundle = await compile_engine(config)
        assert bundle is not None
        assert bundle.read_text() == "return x"
