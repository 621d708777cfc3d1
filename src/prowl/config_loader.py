"""Load ProwlConfig from prowl.yaml / prowl.toml if present.

Merges file config with CLI kwargs. CLI overrides file.
"""

from __future__ import annotations

import tomllib
from dataclasses import fields
from pathlib import Path

import yaml

from prowl._errors import ConfigError
from prowl.config import DocumentConfig, ProwlConfig

_CONFIG_KEYS = frozenset(f.name for f in fields(ProwlConfig)) - {"root"}
_DOCUMENT_KEYS = frozenset(f.name for f in fields(DocumentConfig))
_TUPLE_KEYS = frozenset({"engine_command", "assets"})


def load_config(root: Path, **overrides: object) -> ProwlConfig:
    """Load ProwlConfig from root, optionally merging prowl.yaml.

    Looks for prowl.yaml, prowl.yml, or prowl.toml in root. If found, loads
    and merges with overrides. Overrides take precedence; ``None`` overrides
    are ignored so unset CLI flags do not mask file values.

    Raises:
        ConfigError: If the config file cannot be parsed or holds unknown keys.

    """
    file_config = _read_prowl_config(root)
    merged = {**file_config, **{k: v for k, v in overrides.items() if v is not None}}
    return _build_config(root, merged)


def _read_prowl_config(root: Path) -> dict[str, object]:
    """Read prowl config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("prowl.yaml", "prowl.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "prowl.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        msg = f"Failed to read {path.name}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"{path.name} must contain a mapping, got {type(data).__name__}"
        raise ConfigError(msg)
    return _flatten_prowl_section(data)


def _parse_toml(path: Path) -> dict[str, object]:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        msg = f"Failed to read {path.name}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_prowl_section(data)


def _flatten_prowl_section(data: dict[str, object]) -> dict[str, object]:
    """Extract prowl.* keys into top-level config."""
    result: dict[str, object] = {}
    for k, v in data.items():
        if k != "prowl":
            result[k] = v
    section = data.get("prowl")
    if isinstance(section, dict):
        result.update(section)
    return result


def _build_config(root: Path, values: dict[str, object]) -> ProwlConfig:
    unknown = sorted(set(values) - _CONFIG_KEYS)
    if unknown:
        msg = f"Unknown config keys: {', '.join(unknown)}"
        raise ConfigError(msg)

    kwargs = dict(values)
    if "output" in kwargs and not isinstance(kwargs["output"], Path):
        kwargs["output"] = Path(str(kwargs["output"]))
    for key in _TUPLE_KEYS & kwargs.keys():
        value = kwargs[key]
        if isinstance(value, str):
            msg = f"{key} must be a list, got a string"
            raise ConfigError(msg)
        kwargs[key] = tuple(str(item) for item in value)  # type: ignore[attr-defined]

    document = kwargs.get("document")
    if isinstance(document, dict):
        kwargs["document"] = _build_document(document)
    elif document is not None and not isinstance(document, DocumentConfig):
        msg = "document must be a mapping"
        raise ConfigError(msg)

    try:
        return ProwlConfig(root=root, **kwargs)  # type: ignore[arg-type]
    except TypeError as exc:
        raise ConfigError(str(exc)) from exc


def _build_document(values: dict[str, object]) -> DocumentConfig:
    unknown = sorted(set(values) - _DOCUMENT_KEYS)
    if unknown:
        msg = f"Unknown document keys: {', '.join(unknown)}"
        raise ConfigError(msg)
    kwargs = dict(values)
    for key in ("favicon_sizes", "apple_touch_icon_sizes"):
        if key in kwargs:
            kwargs[key] = tuple(int(size) for size in kwargs[key])  # type: ignore[attr-defined]
    return DocumentConfig(**kwargs)  # type: ignore[arg-type]
