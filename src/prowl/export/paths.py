"""Route normalization — from logical routes to output paths.

Every page is written to ``<output>/<route>/index.html``.  Each document
carries a ``<base href>`` pointing back at the output root, so one compiled
bundle and one set of assets serve every route depth without rewriting paths.

    ``""``              -> ``output/index.html``         base ``./``
    ``/about/``         -> ``output/about/index.html``   base ``../``
    ``about/index``     -> ``output/about/index.html``   base ``../``
    ``blog/post-1``     -> ``output/blog/post-1/...``    base ``../../``

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from prowl._errors import DescriptorError

if TYPE_CHECKING:
    from pathlib import Path

_INDEX = "index"


def clean_route(route: str) -> str:
    """Strip one leading and one trailing ``/``; inner slashes are kept."""
    if route.startswith("/"):
        route = route[1:]
    if route.endswith("/"):
        route = route[:-1]
    return route


def path_to_root(cleaned_route: str) -> str:
    """Relative prefix from a directory at ``cleaned_route`` back to the root.

    One ``..`` per segment; the result always ends in ``../`` (or is empty
    for the root itself).
    """
    if cleaned_route == "":
        return ""
    ups = "/".join(".." for _ in cleaned_route.split("/"))
    if ups.endswith("."):
        ups = ups[:-1] + "./"
    return ups


def base_route(route: str) -> str:
    """Value of the document's ``<base href>`` for ``route``."""
    cleaned = clean_route(route)
    if cleaned == "":
        return "./"
    return path_to_root(cleaned)


def output_route(route: str) -> str:
    """Cleaned route with a trailing ``index`` segment collapsed.

    ``about/index`` and ``about`` share a directory; ``index`` is the root.
    Only whole segments match, so ``blog/myindex`` is left alone.
    """
    cleaned = clean_route(route)
    if cleaned == _INDEX:
        return ""
    if cleaned.endswith("/" + _INDEX):
        return cleaned[: -len(_INDEX) - 1]
    return cleaned


def output_dir(route: str, root: Path) -> Path:
    """Directory that receives ``route``'s ``index.html`` and ``content.json``.

    Raises:
        DescriptorError: If the route would resolve outside ``root``.

    """
    relative = output_route(route)
    if not relative:
        return root
    return root / safe_relative(relative, what=f"route {route!r}")


def safe_relative(path: str, *, what: str) -> str:
    """Reject paths that are absolute or climb out of the output root.

    Empty paths and paths with an empty or ``.`` segment (``"dir/"``,
    ``"a//b"``, ``"./x"``) are rejected too.
    """
    segments = path.split("/")
    if path.startswith("/") or "\\" in path or any(s == ".." for s in segments):
        msg = f"Refusing to write {what}: {path!r} escapes the output directory"
        raise DescriptorError(msg)
    if any(s in ("", ".") for s in segments):
        msg = f"Refusing to write {what}: {path!r} has an empty or '.' segment"
        raise DescriptorError(msg)
    return path
