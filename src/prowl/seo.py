"""Head-tag serializer — renders engine head tags into HTML.

Meta-style tags become a bare start tag with escaped attributes; JSON-LD
becomes a ``<script type="application/ld+json">`` block.  Tags are rendered
in the order the engine emitted them.
"""

from __future__ import annotations

import html
import json
from collections.abc import Iterable

from prowl.engine.events import HeadTag, JsonLdTag, MetaTag

_SEPARATOR = "\n    "


def render_tag(tag: HeadTag) -> str:
    """Render a single head tag."""
    if isinstance(tag, JsonLdTag):
        # "</" would close the script element early
        payload = json.dumps(tag.contents, ensure_ascii=False).replace("</", "<\\/")
        return f'<script type="application/ld+json">{payload}</script>'

    if isinstance(tag, MetaTag):
        attrs = "".join(
            f' {key}="{html.escape(value, quote=True)}"' for key, value in tag.attributes
        )
        return f"<{tag.name}{attrs}>"

    msg = f"Unsupported head tag: {tag!r}"
    raise TypeError(msg)


def render_tags(tags: Iterable[HeadTag]) -> str:
    """Render head tags in order, one per line."""
    return _SEPARATOR.join(render_tag(tag) for tag in tags)
