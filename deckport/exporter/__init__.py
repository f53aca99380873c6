"""Exporter module - flattens scene graphs into element records.

This module walks each selected root container depth-first and produces an
ordered element list per root:
- Positions resolved against the root from absolute transforms
- Nodes classified into text, shape, image, line or transparent containers
- Rasterization preferred for image fills and complex geometry, with a
  structural fallback when it fails
- Roots exported concurrently, documents kept in selection order
"""

from deckport.exporter.classifier import (
    Classification,
    Disposition,
    ElementClassifier,
    ExportStrategy,
)
from deckport.exporter.element_exporter import ElementExporter
from deckport.exporter.geometry import GeometryResolver
from deckport.exporter.options import ExportOptions
from deckport.exporter.orchestrator import ExportOrchestrator
from deckport.exporter.results import Decomposed, Emitted, FellBack, NodeResult, Skipped
from deckport.exporter.style_extractor import StyleExtractor
from deckport.exporter.tree_walker import TreeWalker, WalkStats

__all__ = [
    "Classification",
    "Decomposed",
    "Disposition",
    "ElementClassifier",
    "ElementExporter",
    "Emitted",
    "ExportOptions",
    "ExportOrchestrator",
    "ExportStrategy",
    "FellBack",
    "GeometryResolver",
    "NodeResult",
    "Skipped",
    "StyleExtractor",
    "TreeWalker",
    "WalkStats",
]
