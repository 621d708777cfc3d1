"""Shared type definitions for prowl."""

from typing import Any, Literal, TypeAlias

# Rendering mode handed to the engine at startup
RenderMode: TypeAlias = str

# Logical route as emitted by the engine (e.g., "/blog/post-1/")
RoutePath: TypeAlias = str

# Any value that survives a JSON round-trip
JSONValue: TypeAlias = Any

# Category of a file written during the build
OutputKind: TypeAlias = Literal["page", "data", "manifest", "generated", "asset", "bundle"]
