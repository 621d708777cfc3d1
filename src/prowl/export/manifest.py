"""Manifest transformer — reshapes the engine's manifest into ``manifest.json``.

The engine describes the web-app manifest with camelCase keys and structured
icon data; browsers expect the snake_case W3C shape with string ``sizes``
and ``purpose`` fields::

    {"startUrl": "/", "icons": [{"src": "i.png", "sizes": [[192, 192]],
                                  "mimeType": "image/png"}]}
    ->
    {"start_url": "/", "icons": [{"src": "i.png", "sizes": "192x192",
                                   "type": "image/png"}]}

"""

from __future__ import annotations

import json
import re
from typing import Any

from prowl._errors import DescriptorError

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def _snake(key: str) -> str:
    return _CAMEL_BOUNDARY.sub(r"_\1", key).lower()


def _size(entry: Any) -> str:
    if isinstance(entry, str):
        return entry
    if isinstance(entry, list) and len(entry) == 2:
        width, height = entry
        return f"{width}x{height}"
    msg = f"Icon size must be a [width, height] pair or a string, got {entry!r}"
    raise DescriptorError(msg)


def _icon(raw: Any) -> Any:
    if not isinstance(raw, dict):
        return raw

    icon: dict[str, Any] = {}
    for key, value in raw.items():
        if value is None:
            continue
        if key == "mimeType":
            icon["type"] = value
        elif key == "sizes" and isinstance(value, list):
            icon["sizes"] = " ".join(_size(entry) for entry in value)
        elif key == "purposes" and isinstance(value, list):
            icon["purpose"] = " ".join(str(p) for p in value)
        else:
            icon[_snake(key)] = value
    return icon


def generate_manifest(source: Any) -> dict[str, Any]:
    """Transform a raw engine manifest into the on-disk manifest shape.

    Raises:
        DescriptorError: If ``source`` is not a JSON object, or an icon size
            is neither a ``[width, height]`` pair nor a string.

    """
    if not isinstance(source, dict):
        msg = f"Manifest source must be an object, got {type(source).__name__}"
        raise DescriptorError(msg)

    manifest: dict[str, Any] = {}
    for key, value in source.items():
        if value is None:
            continue
        if key == "icons" and isinstance(value, list):
            manifest["icons"] = [_icon(icon) for icon in value]
        else:
            manifest[_snake(key)] = value
    return manifest


def serialize_manifest(source: Any) -> str:
    """``generate_manifest`` followed by JSON encoding."""
    return json.dumps(generate_manifest(source), ensure_ascii=False)
