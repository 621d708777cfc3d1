"""Integration tests — full builds through a real engine subprocess."""

from __future__ import annotations

import json
import shlex
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

from prowl._errors import EngineError, ProtocolError
from prowl.app import build, run_build
from prowl.config import ProwlConfig
from prowl.observability import BuildCollector, FileWritten
from tests.conftest import initial, page


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A project root with the client runtime assets."""
    (tmp_path / "index.js").write_text("import './main.js';\n")
    (tmp_path / "user-index.js").write_text("export default {};\n")
    (tmp_path / "style.css").write_text("body { margin: 0; }\n")
    return tmp_path


class TestBuild:
    """build / run_build — engine to output tree."""

    @pytest.mark.asyncio
    async def test_full_tree(
        self, project: Path, fake_engine: Callable[..., tuple[str, ...]],
    ) -> None:
        command = fake_engine([
            initial({"name": "x", "startUrl": "/"}, [{"path": "robots.txt", "content": "User-agent: *"}]),
            page("", "<h1>Home</h1>"),
            page("blog/post-1", "<p>hi</p>", staticData={"title": "Post 1"}),
            page("about/index", "<p>About</p>"),
        ])
        config = ProwlConfig(root=project, engine_command=command)
        collector = BuildCollector()

        result = await run_build(config, collector)

        dist = project / "dist"
        assert json.loads((dist / "manifest.json").read_text()) == {"name": "x", "start_url": "/"}
        assert (dist / "robots.txt").read_text() == "User-agent: *"
        assert "<h1>Home</h1>" in (dist / "index.html").read_text()
        assert '<base href="../../">' in (dist / "blog" / "post-1" / "index.html").read_text()
        assert (dist / "blog" / "post-1" / "content.json").read_text() == (
            '{"body":"<p>hi</p>","staticData":{"title":"Post 1"}}'
        )
        assert "<p>About</p>" in (dist / "about" / "index.html").read_text()
        for name in ("index.js", "user-index.js", "style.css"):
            assert (dist / name).read_text() == (project / name).read_text()

        assert result.total_pages == 3
        assert result.ok
        kinds = {w.kind for w in collector.log.query(event_type=FileWritten, limit=100)}
        assert kinds == {"manifest", "generated", "page", "data", "asset"}

    @pytest.mark.asyncio
    async def test_bundle_step(
        self, project: Path, fake_engine: Callable[..., tuple[str, ...]],
    ) -> None:
        (project / "compile.py").write_text(
            "open('dist/main.js', 'w').write('(function(s){s.Elm=1}(this));')\n"
        )
        config = ProwlConfig(
            root=project,
            engine_command=fake_engine([initial()]),
            compile_command=f"{shlex.quote(sys.executable)} compile.py",
        )
        result = await run_build(config)
        assert "export const { Elm } = scope;" in (project / "dist" / "main.js").read_text()
        assert any(f.kind == "bundle" for f in result.files)

    @pytest.mark.asyncio
    async def test_clean_removes_stale_output(
        self, project: Path, fake_engine: Callable[..., tuple[str, ...]],
    ) -> None:
        stale = project / "dist" / "old" / "index.html"
        stale.parent.mkdir(parents=True)
        stale.write_text("stale")
        config = ProwlConfig(root=project, engine_command=fake_engine([initial()]), clean=True)
        await run_build(config)
        assert not stale.exists()
        assert (project / "dist" / "manifest.json").is_file()

    @pytest.mark.asyncio
    async def test_engine_failure(
        self, project: Path, fake_engine: Callable[..., tuple[str, ...]],
    ) -> None:
        config = ProwlConfig(root=project, engine_command=fake_engine([initial()], exit_code=1))
        with pytest.raises(EngineError):
            await run_build(config)

    @pytest.mark.asyncio
    async def test_protocol_violation(
        self, project: Path, fake_engine: Callable[..., tuple[str, ...]],
    ) -> None:
        config = ProwlConfig(root=project, engine_command=fake_engine([page("a"), initial()]))
        with pytest.raises(ProtocolError):
            await run_build(config)

    def test_build_entry_point(
        self,
        project: Path,
        fake_engine: Callable[..., tuple[str, ...]],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        command = fake_engine([initial(), page("a"), {"route": "broken"}])
        (project / "prowl.yaml").write_text(
            "engine_command:\n" + "".join(f"  - {json.dumps(part)}\n" for part in command)
        )
        result = build(project, output="public")

        assert (project / "public" / "a" / "index.html").is_file()
        assert [f.route for f in result.failures] == ["broken"]
        err = capsys.readouterr().err
        assert "Pre-rendered 1 page" in err
        assert "1 route failed" in err
