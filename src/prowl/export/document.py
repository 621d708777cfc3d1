"""Document wrapper — turns a page descriptor into a complete HTML document.

The wrapper is a plain string template: given the same descriptor and the
same ``DocumentConfig`` it returns byte-identical output.

The ``<base href>`` makes every relative reference in the document (the
preloaded ``content.json``, ``manifest.json``, touch icons) resolve against
the output root, whatever depth the route is written at.
"""

from __future__ import annotations

import html
from typing import TYPE_CHECKING

from prowl.config import DocumentConfig
from prowl.export.paths import base_route, output_route
from prowl.seo import render_tags

if TYPE_CHECKING:
    from prowl.engine.events import PageDescriptor


_DOCUMENT = """\
<!DOCTYPE html>
  <html lang="{lang}">
  <head>
    <link rel="preload" href="content.json" as="fetch" crossorigin="">
    <base href="{base}">
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width,initial-scale=1">
    <script>if ("serviceWorker" in navigator) {{
      window.addEventListener("load", () => {{
        navigator.serviceWorker.register("service-worker.js");
      }});
    }} else {{
      console.log("No service worker registered.");
    }}</script>
    {icons}
    <link rel="manifest" href="manifest.json">
    <meta name="mobile-web-app-capable" content="yes">
    <meta name="theme-color" content="{theme_color}">
    <meta name="application-name" content="{application_name}">
    {touch_icons}
    <meta name="apple-mobile-web-app-capable" content="yes">
    <meta name="apple-mobile-web-app-status-bar-style" content="{status_bar_style}">

    <meta name="apple-mobile-web-app-title" content="{apple_title}">
    <script defer="defer" src="/main.js" type="module"></script>
    <script defer="defer" src="/index.js" type="module"></script>
    <link rel="stylesheet" href="/style.css">
    <link rel="preload" href="/main.js" as="script">
    {head_tags}
  </head>
    <body>
      <div data-url="" display="none"></div>
      {body}
    </body>
  </html>
"""

_LINE = "\n    "


def _attr(value: str) -> str:
    return html.escape(value, quote=True)


def _icon_links(config: DocumentConfig) -> str:
    favicon = _attr(config.favicon)
    links = [f'<link rel="shortcut icon" href="{favicon}">']
    links.extend(
        f'<link rel="icon" type="image/png" sizes="{size}x{size}" href="{favicon}">'
        for size in config.favicon_sizes
    )
    return _LINE.join(links)


def _touch_icon_links(config: DocumentConfig) -> str:
    return _LINE.join(
        f'<link rel="apple-touch-icon" sizes="{size}x{size}" '
        f'href="assets/apple-touch-icon-{size}x{size}.png">'
        for size in config.apple_touch_icon_sizes
    )


def wrap_html(descriptor: PageDescriptor, config: DocumentConfig | None = None) -> str:
    """Render the full HTML document for one page.

    The base href is computed from the directory the page is written to,
    so ``about/index`` gets the same ``../`` as ``about``.

    Args:
        descriptor: The page to wrap; ``descriptor.html`` is embedded verbatim.
        config: Static head metadata (defaults to ``DocumentConfig()``).

    Returns:
        The complete document as a string.

    """
    if config is None:
        config = DocumentConfig()

    return _DOCUMENT.format(
        lang=_attr(config.lang),
        base=base_route(output_route(descriptor.route)),
        icons=_icon_links(config),
        theme_color=_attr(config.theme_color),
        application_name=_attr(config.application_name),
        touch_icons=_touch_icon_links(config),
        status_bar_style=_attr(config.status_bar_style),
        apple_title=_attr(config.apple_title),
        head_tags=render_tags(descriptor.head_tags),
        body=descriptor.html,
    )
