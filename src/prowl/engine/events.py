"""Engine event model — typed views of what the rendering engine emits.

The engine speaks JSON.  Each message is one of:

- ``{"command": "log", "value": str}``
- ``{"command": "initial", "manifest": JSON, "filesToGenerate": [{path, content}]}``
- a page descriptor (no command, or ``"command": "render"``)

``parse_event`` lowers a raw message into one of the frozen dataclasses
below.  A bad page descriptor only costs that route (``DescriptorError``);
a bad bootstrap message breaks the whole build (``ProtocolError``).

"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, TypeAlias

from prowl._errors import DescriptorError, ProtocolError


@dataclass(frozen=True, slots=True)
class MetaTag:
    """A head element rendered as ``<name k="v" ...>``.

    Attributes:
        name: Element name (usually ``meta`` or ``link``).
        attributes: Ordered ``(key, value)`` pairs.

    """

    name: str
    attributes: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True, slots=True)
class JsonLdTag:
    """Structured data rendered as an ``application/ld+json`` script."""

    contents: Any


HeadTag: TypeAlias = MetaTag | JsonLdTag


@dataclass(frozen=True, slots=True)
class GeneratedFile:
    """A file the engine asks to be written verbatim under the output root."""

    path: str
    content: str


@dataclass(frozen=True, slots=True)
class LogEvent:
    """A diagnostic line from the engine."""

    value: str


@dataclass(frozen=True, slots=True)
class InitialEvent:
    """The bootstrap message: global manifest data plus extra files.

    Attributes:
        manifest: Raw manifest source, reshaped by ``generate_manifest``.
        files_to_generate: Files written verbatim at their declared paths.

    """

    manifest: Any
    files_to_generate: tuple[GeneratedFile, ...] = ()


@dataclass(frozen=True, slots=True)
class PageDescriptor:
    """One pre-rendered route.

    Attributes:
        route: Logical route (``"blog/post-1"``, ``"/"``, ``"about/index"``).
        html: Body fragment embedded verbatim in ``index.html``.
        rendered_body: Body stored in ``content.json`` for client navigation.
        head_tags: Head elements, rendered in order.
        static_data: Arbitrary JSON stored next to the body.

    """

    route: str
    html: str
    rendered_body: str
    head_tags: tuple[HeadTag, ...] = ()
    static_data: Any = None


EngineEvent: TypeAlias = LogEvent | InitialEvent | PageDescriptor


def parse_event(raw: object) -> EngineEvent:
    """Lower one raw engine message into a typed event.

    Raises:
        ProtocolError: If an ``initial`` message is malformed.
        DescriptorError: If a log or page message is malformed.

    """
    if not isinstance(raw, Mapping):
        msg = f"Engine event must be an object, got {type(raw).__name__}"
        raise DescriptorError(msg)

    command = raw.get("command")
    if command == "log":
        value = raw.get("value")
        if not isinstance(value, str):
            msg = "Log event is missing a string 'value'"
            raise DescriptorError(msg)
        return LogEvent(value=value)
    if command == "initial":
        return _parse_initial(raw)
    if command is None or command == "render":
        return _parse_page(raw)

    msg = f"Unknown engine command {command!r}"
    raise DescriptorError(msg)


def _parse_initial(raw: Mapping[str, Any]) -> InitialEvent:
    if "manifest" not in raw:
        msg = "Bootstrap event is missing 'manifest'"
        raise ProtocolError(msg)

    files = raw.get("filesToGenerate", [])
    if not isinstance(files, Sequence) or isinstance(files, str):
        msg = "Bootstrap 'filesToGenerate' must be a list"
        raise ProtocolError(msg)

    generated: list[GeneratedFile] = []
    for i, entry in enumerate(files):
        if (
            not isinstance(entry, Mapping)
            or not isinstance(entry.get("path"), str)
            or not isinstance(entry.get("content"), str)
        ):
            msg = f"Bootstrap filesToGenerate[{i}] needs string 'path' and 'content'"
            raise ProtocolError(msg)
        generated.append(GeneratedFile(path=entry["path"], content=entry["content"]))

    return InitialEvent(manifest=raw["manifest"], files_to_generate=tuple(generated))


def _parse_page(raw: Mapping[str, Any]) -> PageDescriptor:
    route = raw.get("route")
    if not isinstance(route, str):
        msg = "Page descriptor is missing a string 'route'"
        raise DescriptorError(msg)

    html = raw.get("html")
    if not isinstance(html, str):
        msg = f"Page descriptor for {route!r} is missing a string 'html'"
        raise DescriptorError(msg)

    body = _first_present(raw, "body", "renderedBody", default=html)
    if not isinstance(body, str):
        msg = f"Page descriptor for {route!r} has a non-string body"
        raise DescriptorError(msg)

    tags = _first_present(raw, "headTags", "head", default=[])
    if not isinstance(tags, Sequence) or isinstance(tags, str):
        msg = f"Page descriptor for {route!r} has non-list head tags"
        raise DescriptorError(msg)

    return PageDescriptor(
        route=route,
        html=html,
        rendered_body=body,
        head_tags=tuple(_parse_head_tag(route, tag) for tag in tags),
        static_data=_first_present(raw, "staticData", "contentJson", default=None),
    )


def _parse_head_tag(route: str, raw: object) -> HeadTag:
    if not isinstance(raw, Mapping):
        msg = f"Head tag for {route!r} must be an object"
        raise DescriptorError(msg)

    kind = raw.get("kind", raw.get("type"))
    if kind == "json-ld":
        return JsonLdTag(contents=raw.get("contents"))
    if kind not in ("meta", "head"):
        msg = f"Head tag for {route!r} has unknown kind {kind!r}"
        raise DescriptorError(msg)

    name = raw.get("name")
    if not isinstance(name, str) or not name:
        msg = f"Head tag for {route!r} is missing a 'name'"
        raise DescriptorError(msg)

    attributes = raw.get("attributes", [])
    if not isinstance(attributes, Sequence) or isinstance(attributes, str):
        msg = f"Head tag attributes for {route!r} must be a list"
        raise DescriptorError(msg)

    pairs: list[tuple[str, str]] = []
    for pair in attributes:
        if not isinstance(pair, Sequence) or isinstance(pair, str) or len(pair) != 2:
            msg = f"Head tag attribute for {route!r} must be a [key, value] pair"
            raise DescriptorError(msg)
        pairs.append((str(pair[0]), str(pair[1])))
    return MetaTag(name=name, attributes=tuple(pairs))


def _first_present(raw: Mapping[str, Any], *keys: str, default: Any) -> Any:
    """Value of the first key present in ``raw`` (wire names vary by engine)."""
    for key in keys:
        if key in raw:
            return raw[key]
    return default
