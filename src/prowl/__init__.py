"""Prowl — build driver for engine-rendered static sites.

Runs an external rendering engine, listens to the page descriptors it emits,
and lays them out as a static tree ready for any file host: one directory per
route holding ``index.html`` and ``content.json``, plus ``manifest.json``,
generated files, the compiled bundle, and copied assets.

Quick start::

    import prowl

    result = prowl.build("my-site/")

Pieces usable on their own::

    from prowl.export.paths import base_route
    from prowl.export.document import wrap_html
    from prowl.pipeline import BuildPipeline

"""

__version__ = "0.1.0-dev"
__all__ = [
    "BuildPipeline",
    "ProwlConfig",
    "__version__",
    "build",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import prowl`` fast; the pipeline and engine modules are only
    loaded when a build is requested.
    """
    if name == "ProwlConfig":
        from prowl.config import ProwlConfig

        return ProwlConfig

    if name == "BuildPipeline":
        from prowl.pipeline import BuildPipeline

        return BuildPipeline

    if name == "build":
        from prowl.app import build

        return build

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
