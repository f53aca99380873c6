"""Decide what each scene node becomes in the export.

Rules, in priority order:
1. Text nodes become text elements.
2. Lines become line elements.
3. Containers (frame, group, component, instance) with an image fill are
   rasterized whole; if that fails they decompose into their children.
4. Other containers are transparent: their children are visited instead.
   Frames additionally contribute a background shape for their own paints.
5. Stars, polygons, vectors and boolean operations prefer rasterization,
   which is the only faithful representation of their geometry.
6. Remaining fillable or strokeable shapes become shape elements, unless
   they carry an image fill, in which case they are rasterized.
Hidden nodes and nodes matching no rule are skipped.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from deckport.dsl.schema import ImagePaint
from deckport.scene.nodes import CONTAINER_TYPES, FillMixin, LineNode, SceneNode, StrokeMixin, TextNode


COMPLEX_SHAPE_TYPES = frozenset({"STAR", "REGULAR_POLYGON", "VECTOR", "BOOLEAN_OPERATION"})


class Disposition(str, Enum):
    """What a node turns into."""

    TEXT = "text"
    LINE = "line"
    SHAPE = "shape"
    CONTAINER = "container"
    SKIP = "skip"


class ExportStrategy(str, Enum):
    """How the exporter should try to produce the element."""

    STRUCTURAL = "structural"
    RASTERIZE = "rasterize"


@dataclass(frozen=True)
class Classification:
    """Result of classifying one node."""

    disposition: Disposition
    strategy: ExportStrategy = ExportStrategy.STRUCTURAL
    reason: str = ""

    @property
    def prefers_image(self) -> bool:
        """True when rasterization should be attempted first."""
        return self.strategy == ExportStrategy.RASTERIZE


class ElementClassifier:
    """Classifies scene nodes into element dispositions."""

    def classify(self, node: SceneNode) -> Classification:
        """Classify a node.

        Args:
            node: The node to classify.

        Returns:
            Classification with the disposition and preferred strategy.
        """
        if not node.visible:
            return Classification(Disposition.SKIP, reason="hidden")

        if isinstance(node, TextNode):
            return Classification(Disposition.TEXT)

        if isinstance(node, LineNode):
            return Classification(Disposition.LINE)

        if node.type in CONTAINER_TYPES:
            if self.image_fill(node) is not None:
                return Classification(Disposition.CONTAINER, ExportStrategy.RASTERIZE, "image fill")
            return Classification(Disposition.CONTAINER)

        if node.type in COMPLEX_SHAPE_TYPES:
            return Classification(Disposition.SHAPE, ExportStrategy.RASTERIZE, "complex geometry")

        if isinstance(node, (FillMixin, StrokeMixin)):
            if self.image_fill(node) is not None:
                return Classification(Disposition.SHAPE, ExportStrategy.RASTERIZE, "image fill")
            return Classification(Disposition.SHAPE)

        return Classification(Disposition.SKIP, reason=f"unsupported node type {node.type}")

    @staticmethod
    def image_fill(node: SceneNode) -> Optional[ImagePaint]:
        """First visible image paint among a node's fills, if any."""
        if not isinstance(node, FillMixin):
            return None
        for paint in node.fills:
            if isinstance(paint, ImagePaint) and paint.visible:
                return paint
        return None
