"""Extract paints and typography from scene nodes.

Host values may be indeterminate ("mixed") when a text run or a shape is
not uniform. Every accessor here resolves such values to a deterministic
default instead of failing.
"""

import logging
from typing import Optional, Sequence

from deckport.dsl.schema import Dimension, FontName, Paint
from deckport.exporter.options import ExportOptions
from deckport.scene.nodes import CornerMixin, FillMixin, SceneNode, StrokeMixin, TextNode
from deckport.scene.values import Mixed, Uniform, UniformWithUnit, is_mixed, numeric_or

logger = logging.getLogger(__name__)


class StyleExtractor:
    """Extracts visual styles from scene nodes."""

    def __init__(self, options: Optional[ExportOptions] = None) -> None:
        """Initialize the style extractor.

        Args:
            options: Export options supplying the defaults for mixed values.
        """
        self.options = options or ExportOptions()

    # ------------------------------------------------------------------
    # Paints
    # ------------------------------------------------------------------

    def visible_paints(self, paints: Sequence[Paint]) -> list[Paint]:
        """Drop hidden paints, keeping order (bottom to top)."""
        return [paint for paint in paints if paint.visible]

    def fills(self, node: SceneNode) -> list[Paint]:
        """Visible fills of a node (empty for nodes that cannot be filled)."""
        if isinstance(node, TextNode):
            return self.text_fills(node)
        if isinstance(node, FillMixin):
            return self.visible_paints(node.fills)
        return []

    def strokes(self, node: SceneNode) -> list[Paint]:
        """Visible strokes of a node."""
        if isinstance(node, StrokeMixin):
            return self.visible_paints(node.strokes)
        return []

    def has_visible_paint(self, node: SceneNode) -> bool:
        """True when the node paints anything of its own."""
        return bool(self.fills(node) or self.strokes(node))

    def stroke_weight(self, node: SceneNode) -> float:
        """Stroke weight, defaulting when unset or mixed."""
        if not isinstance(node, StrokeMixin):
            return 0.0
        weight = numeric_or(node.stroke_weight, self.options.default_stroke_weight)
        return max(weight, 0.0)

    def corner_radius(self, node: SceneNode) -> Optional[float]:
        """Corner radius, or None when the node has none.

        Only node types whose geometry supports a radius carry one. A mixed
        radius (corners differ) is reported as None rather than guessed.
        """
        if not isinstance(node, CornerMixin) or node.corner_radius is None:
            return None
        if is_mixed(node.corner_radius):
            logger.debug(f"Node {node.id} has mixed corner radii; omitting corner radius")
            return None
        radius = node.corner_radius.value
        return max(float(radius), 0.0) if radius is not None else None

    # ------------------------------------------------------------------
    # Typography
    # ------------------------------------------------------------------

    def text_fills(self, node: TextNode) -> list[Paint]:
        """Text fills; a run with mixed fills exports none."""
        if is_mixed(node.fills):
            return []
        return self.visible_paints(node.fills)

    def font_size(self, node: TextNode) -> float:
        """Font size, defaulting when unset, mixed or non-positive."""
        size = numeric_or(node.font_size, self.options.default_font_size)
        return size if size > 0 else self.options.default_font_size

    def font_name(self, node: TextNode) -> FontName:
        """Font family and style, defaulting when unset or mixed."""
        if node.font_name is None or is_mixed(node.font_name):
            return FontName(family=self.options.default_font_family, style=self.options.default_font_style)
        return node.font_name

    def line_height(self, node: TextNode, font_size: float) -> Dimension:
        """Resolve line height.

        Args:
            node: The text node.
            font_size: Resolved font size, used when the run is mixed.

        Returns:
            Dimension; AUTO line heights carry no value.
        """
        value = node.line_height
        if value is None:
            return Dimension(unit="AUTO")
        if isinstance(value, Mixed):
            return Dimension(value=font_size, unit="PIXELS")
        if isinstance(value, Uniform):
            return Dimension(value=value.value, unit="PIXELS")
        if value.unit == "AUTO":
            return Dimension(unit="AUTO")
        return Dimension(value=value.value if value.value is not None else font_size, unit=value.unit)

    def letter_spacing(self, node: TextNode) -> Dimension:
        """Resolve letter spacing; unset or mixed spacing is zero pixels."""
        value = node.letter_spacing
        if value is None or isinstance(value, Mixed):
            return Dimension(value=0.0, unit="PIXELS")
        if isinstance(value, UniformWithUnit) and value.unit != "AUTO":
            return Dimension(value=value.value or 0.0, unit=value.unit)
        return Dimension(value=value.value or 0.0, unit="PIXELS")

    def paragraph_measure(self, value: Optional[Uniform | UniformWithUnit | Mixed]) -> float:
        """Paragraph indent/spacing in pixels; mixed is zero."""
        return numeric_or(value, 0.0)

    def enum_value(self, value: str | Mixed, default: str) -> str:
        """An enum-valued property (alignment, case, cap, join), defaulting when mixed."""
        if is_mixed(value):
            return default
        return value
