"""Prowl error hierarchy.

All prowl-specific errors inherit from ProwlError for easy catching.
"""


class ProwlError(Exception):
    """Base error for all prowl operations."""


class ConfigError(ProwlError):
    """Invalid or missing configuration."""


class ProtocolError(ProwlError):
    """The rendering engine broke the event protocol (fatal for the build)."""


class DescriptorError(ProwlError):
    """A single engine event is malformed or points outside the output root."""


class ExportError(ProwlError):
    """Error while writing build output to disk."""


class EngineError(ProwlError):
    """The rendering engine or a bundle command failed to run."""
