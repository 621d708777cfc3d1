"""Prowl configuration.

ProwlConfig is the central configuration object, frozen after creation.
DocumentConfig carries the static head metadata stamped into every page.
"""

from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_MODE = "elm-to-html-beta"
DEFAULT_ASSETS = ("index.js", "user-index.js", "style.css")


@dataclass(frozen=True, slots=True)
class DocumentConfig:
    """Static metadata for the wrapped HTML document.

    None of these values depend on the page being rendered.

    Attributes:
        lang: Value of the ``<html lang>`` attribute.
        application_name: ``application-name`` meta content.
        apple_title: ``apple-mobile-web-app-title`` meta content.
        theme_color: ``theme-color`` meta content.
        favicon: Icon URL used for the shortcut and sized icon links.
        favicon_sizes: Square pixel sizes emitted as ``rel="icon"`` links.
        apple_touch_icon_sizes: Sizes of ``assets/apple-touch-icon-NxN.png``.
        status_bar_style: ``apple-mobile-web-app-status-bar-style`` content.

    """

    lang: str = "en"
    application_name: str = "prowl"
    apple_title: str = "prowl"
    theme_color: str = "#ffffff"
    favicon: str = "favicon.png"
    favicon_sizes: tuple[int, ...] = (16, 32, 48)
    apple_touch_icon_sizes: tuple[int, ...] = (
        57, 60, 72, 76, 114, 120, 144, 152, 167, 180, 1024,
    )
    status_bar_style: str = "black-translucent"


@dataclass(frozen=True, slots=True)
class ProwlConfig:
    """Configuration for a prowl build.

    Attributes:
        root: Project root (holds the engine, assets, and config file).
              Always resolved to an absolute path on construction.
        output: Output directory, relative to ``root`` unless absolute.
        mode: Rendering mode passed to the engine once at startup.
        engine_command: Argv of the rendering engine process.
        compile_command: Shell command producing ``<output>/main.js``
            (``None`` skips the bundle step).
        minify_command: Shell command run on the bundle after ESM wrapping;
            ``{path}`` is replaced with the bundle path.
        engine_compile_command: Shell command that builds the engine itself.
        engine_bundle: Engine file (relative to ``root``) patched after
            ``engine_compile_command`` runs.
        assets: Files copied unmodified from ``root`` into the output.
        clean: Remove the output directory before building.
        pass_environment: Hand the process environment to the engine as
            its ``secrets`` flag.
        document: Static head metadata for every page.

    """

    root: Path = field(default_factory=Path.cwd)
    output: Path = field(default_factory=lambda: Path("dist"))
    mode: str = DEFAULT_MODE
    engine_command: tuple[str, ...] = ("node", "elm-stuff/prowl/engine.js")
    compile_command: str | None = None
    minify_command: str | None = None
    engine_compile_command: str | None = None
    engine_bundle: str | None = None
    assets: tuple[str, ...] = DEFAULT_ASSETS
    clean: bool = False
    pass_environment: bool = True
    document: DocumentConfig = field(default_factory=DocumentConfig)

    def __post_init__(self) -> None:
        if not self.root.is_absolute():
            object.__setattr__(self, "root", self.root.resolve())

    @property
    def output_path(self) -> Path:
        """Absolute path to output directory."""
        if self.output.is_absolute():
            return self.output
        return self.root / self.output

    @property
    def bundle_path(self) -> Path:
        """Absolute path of the compiled bundle inside the output."""
        return self.output_path / "main.js"
