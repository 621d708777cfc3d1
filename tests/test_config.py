"""Tests for prowl.config and prowl.config_loader."""

from pathlib import Path

import pytest

from prowl._errors import ConfigError
from prowl.config import DocumentConfig, ProwlConfig
from prowl.config_loader import load_config


class TestProwlConfig:
    """ProwlConfig — frozen dataclass with sensible defaults."""

    def test_defaults(self) -> None:
        config = ProwlConfig()
        assert config.mode == "elm-to-html-beta"
        assert config.assets == ("index.js", "user-index.js", "style.css")
        assert config.compile_command is None
        assert config.clean is False
        assert config.document == DocumentConfig()

    def test_frozen(self) -> None:
        config = ProwlConfig()
        with pytest.raises(AttributeError):
            config.mode = "other"  # type: ignore[misc]

    def test_output_resolves_from_root(self, tmp_path: Path) -> None:
        config = ProwlConfig(root=tmp_path)
        assert config.output_path == tmp_path / "dist"
        assert config.bundle_path == tmp_path / "dist" / "main.js"

    def test_absolute_output_preserved(self, tmp_path: Path) -> None:
        output = Path("/tmp/custom-output")
        assert ProwlConfig(root=tmp_path, output=output).output_path == output

    def test_relative_root_resolved_to_absolute(self) -> None:
        assert ProwlConfig(root=Path("site")).root.is_absolute()


class TestLoadConfig:
    """load_config — file config merged with overrides."""

    def test_no_file(self, tmp_path: Path) -> None:
        assert load_config(tmp_path) == ProwlConfig(root=tmp_path)

    def test_yaml(self, tmp_path: Path) -> None:
        (tmp_path / "prowl.yaml").write_text(
            "output: public\n"
            "mode: prod\n"
            "engine_command: [node, engine.js]\n"
            "document:\n"
            "  application_name: My Site\n"
            "  favicon_sizes: [32]\n"
        )
        config = load_config(tmp_path)
        assert config.output_path == tmp_path / "public"
        assert config.mode == "prod"
        assert config.engine_command == ("node", "engine.js")
        assert config.document.application_name == "My Site"
        assert config.document.favicon_sizes == (32,)

    def test_prowl_section(self, tmp_path: Path) -> None:
        (tmp_path / "prowl.yml").write_text("prowl:\n  clean: true\n")
        assert load_config(tmp_path).clean is True

    def test_toml(self, tmp_path: Path) -> None:
        (tmp_path / "prowl.toml").write_text(
            '[prowl]\nassets = ["app.js"]\n\n[prowl.document]\nlang = "de"\n'
        )
        config = load_config(tmp_path)
        assert config.assets == ("app.js",)
        assert config.document.lang == "de"

    def test_overrides_win(self, tmp_path: Path) -> None:
        (tmp_path / "prowl.yaml").write_text("output: public\nmode: prod\n")
        config = load_config(tmp_path, output="out", mode=None)
        assert config.output_path == tmp_path / "out"
        assert config.mode == "prod"

    def test_unknown_key(self, tmp_path: Path) -> None:
        (tmp_path / "prowl.yaml").write_text("colour: blue\n")
        with pytest.raises(ConfigError, match="colour"):
            load_config(tmp_path)

    def test_unknown_document_key(self, tmp_path: Path) -> None:
        (tmp_path / "prowl.yaml").write_text("document:\n  font: serif\n")
        with pytest.raises(ConfigError, match="font"):
            load_config(tmp_path)

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        (tmp_path / "prowl.yaml").write_text("output: [unclosed\n")
        with pytest.raises(ConfigError, match="prowl.yaml"):
            load_config(tmp_path)

    def test_non_mapping_yaml(self, tmp_path: Path) -> None:
        (tmp_path / "prowl.yaml").write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(tmp_path)

    def test_string_engine_command_rejected(self, tmp_path: Path) -> None:
        (tmp_path / "prowl.yaml").write_text("engine_command: node engine.js\n")
        with pytest.raises(ConfigError, match="engine_command"):
            load_config(tmp_path)
