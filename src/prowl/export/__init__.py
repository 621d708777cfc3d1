"""Export layer — static output generation.

Turns engine events into the deployable tree: wrapped HTML pages and their
``content.json``, ``manifest.json``, generated files, and copied assets.
"""

from prowl.export.result import ExportedFile, ExportResult, RouteFailure
from prowl.export.writer import OutputWriter

__all__ = ["ExportResult", "ExportedFile", "OutputWriter", "RouteFailure"]
