"""Scene graph input - host node models, documents and host interfaces.

This module models the host's hierarchical document as it is handed to the
exporter:
- Typed nodes (frames, groups, components, instances, text, lines, shapes)
- Indeterminate ("mixed") values as explicit variants
- Absolute transforms bound from nested relative transforms
- Host protocols for rasterization and the plugin window
"""

from deckport.scene.document import Page, SceneDocument, bind_document, bind_transforms, load_document
from deckport.scene.host import PluginHost, Rasterizer
from deckport.scene.nodes import (
    CONTAINER_TYPES,
    BooleanOperationNode,
    ComponentNode,
    EllipseNode,
    FrameNode,
    GroupNode,
    InstanceNode,
    LineNode,
    OtherNode,
    PolygonNode,
    RectangleNode,
    SceneNode,
    StarNode,
    TextNode,
    VectorNode,
)
from deckport.scene.raster import PillowRasterizer
from deckport.scene.transform import AffineTransform
from deckport.scene.values import Mixed, Uniform, UniformWithUnit

__all__ = [
    "CONTAINER_TYPES",
    "AffineTransform",
    "BooleanOperationNode",
    "ComponentNode",
    "EllipseNode",
    "FrameNode",
    "GroupNode",
    "InstanceNode",
    "LineNode",
    "Mixed",
    "OtherNode",
    "Page",
    "PillowRasterizer",
    "PluginHost",
    "PolygonNode",
    "Rasterizer",
    "RectangleNode",
    "SceneDocument",
    "SceneNode",
    "StarNode",
    "TextNode",
    "Uniform",
    "UniformWithUnit",
    "VectorNode",
    "bind_document",
    "bind_transforms",
    "load_document",
]
