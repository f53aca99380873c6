"""deckport - flatten design scene graphs into slide-ready element lists."""

from deckport.dsl.schema import ExportBatch, ExportedDocument, ExportMessage
from deckport.errors import EmptySelectionError, ExportError, NoValidRootError, RasterizationError
from deckport.exporter import ExportOptions, ExportOrchestrator
from deckport.scene import SceneDocument, load_document

__version__ = "0.1.0"

__all__ = [
    "EmptySelectionError",
    "ExportBatch",
    "ExportError",
    "ExportMessage",
    "ExportOptions",
    "ExportOrchestrator",
    "ExportedDocument",
    "NoValidRootError",
    "RasterizationError",
    "SceneDocument",
    "load_document",
]
