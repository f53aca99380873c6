"""Turn classified scene nodes into element records.

Rasterization is attempted first where the classifier prefers it. Any
failure there (a host exception, an empty result or a timeout) is logged and
the node falls back to a structural shape built from its own fills and
strokes, so one node can never abort an export.
"""

import asyncio
import hashlib
import logging
from typing import Any, Optional

from deckport.dsl.schema import (
    ImageElement,
    LineElement,
    Point,
    ShapeElement,
    ShapeType,
    TextElement,
)
from deckport.errors import RasterizationError
from deckport.exporter.classifier import Classification, Disposition, ElementClassifier
from deckport.exporter.geometry import GeometryResolver
from deckport.exporter.options import ExportOptions
from deckport.exporter.results import Decomposed, Emitted, FellBack, NodeResult, Skipped
from deckport.exporter.style_extractor import StyleExtractor
from deckport.scene.host import Rasterizer
from deckport.scene.nodes import LineNode, SceneNode, TextNode

logger = logging.getLogger(__name__)


class ElementExporter:
    """Exports single nodes, falling back when rasterization fails."""

    # Map node types to shape geometry
    SHAPE_TYPE_MAP = {
        "RECTANGLE": ShapeType.RECTANGLE,
        "FRAME": ShapeType.RECTANGLE,
        "COMPONENT": ShapeType.RECTANGLE,
        "INSTANCE": ShapeType.RECTANGLE,
        "ELLIPSE": ShapeType.ELLIPSE,
        "REGULAR_POLYGON": ShapeType.POLYGON,
        "STAR": ShapeType.STAR,
        "VECTOR": ShapeType.VECTOR,
        "BOOLEAN_OPERATION": ShapeType.VECTOR,
    }

    def __init__(
        self,
        rasterizer: Rasterizer,
        options: Optional[ExportOptions] = None,
        semaphore: Optional[asyncio.Semaphore] = None,
    ) -> None:
        """Initialize the element exporter.

        Args:
            rasterizer: Host capability used to render nodes to images.
            options: Export options.
            semaphore: Bounds concurrent rasterizations, shared by every
                root of one export call.
        """
        self.rasterizer = rasterizer
        self.options = options or ExportOptions()
        self.semaphore = semaphore
        self.geometry = GeometryResolver()
        self.style_extractor = StyleExtractor(self.options)

    def base_props(self, node: SceneNode, root: SceneNode) -> dict[str, Any]:
        """Attributes shared by every element kind.

        Args:
            node: The node being exported.
            root: The export root that owns it.

        Returns:
            Dictionary of base element fields.
        """
        x, y = self.geometry.resolve_position(node, root)
        return {
            "node_id": node.id,
            "name": node.name,
            "x": x,
            "y": y,
            "width": node.width,
            "height": node.height,
            "opacity": node.opacity,
            "rotation": self.geometry.resolve_rotation(node, root),
            "blend_mode": node.blend_mode,
        }

    async def export_node(
        self,
        node: SceneNode,
        base: dict[str, Any],
        classification: Classification,
        root: Optional[SceneNode] = None,
    ) -> NodeResult:
        """Export one node according to its classification.

        Args:
            node: The node to export.
            base: Base element fields from :meth:`base_props`.
            classification: How the node should be exported.
            root: The export root, whose frame line endpoints are resolved in.

        Returns:
            The node's result; never raises for node-level failures.
        """
        disposition = classification.disposition

        if disposition == Disposition.SKIP:
            return Skipped(classification.reason)
        if disposition == Disposition.TEXT:
            return Emitted(self.extract_text(node, base))
        if disposition == Disposition.LINE:
            return Emitted(self.extract_line(node, base, root))

        if classification.prefers_image:
            try:
                return Emitted(await self.extract_image(node, base))
            except Exception as e:
                error = _describe(e)
                logger.warning(f"Rasterizing {node.type} node {node.id} ({node.name!r}) failed, falling back: {error}")
                return self._fall_back(node, base, disposition, error)

        if disposition == Disposition.CONTAINER:
            background = None
            if node.type == "FRAME" and self.style_extractor.has_visible_paint(node):
                background = self.extract_shape(node, base)
            return Decomposed(background)

        return Emitted(self.extract_shape(node, base))

    def _fall_back(self, node: SceneNode, base: dict[str, Any], disposition: Disposition, error: str) -> FellBack:
        """Structural replacement for a node whose rasterization failed."""
        if disposition == Disposition.CONTAINER:
            element = self.extract_shape(node, base) if self.style_extractor.has_visible_paint(node) else None
            return FellBack(element, error, descend=True)
        return FellBack(self.extract_shape(node, base), error)

    async def extract_image(self, node: SceneNode, base: dict[str, Any]) -> ImageElement:
        """Rasterize a node into an image element.

        The image token is the SHA-256 of the encoded bytes, so identical
        renders share a token and different renders never collide.

        Raises:
            Exception: Whatever the rasterizer raised, TimeoutError, or
                RasterizationError for an empty result.
        """
        data = await self._rasterize(node)
        image_fill = ElementClassifier.image_fill(node)
        return ImageElement(
            **base,
            image_bytes=data,
            image_token=hashlib.sha256(data).hexdigest(),
            scale_mode=image_fill.scale_mode if image_fill else "FILL",
            source_image_hash=image_fill.image_hash if image_fill else None,
        )

    async def _rasterize(self, node: SceneNode) -> bytes:
        if self.semaphore is None:
            data = await self._call_rasterizer(node)
        else:
            async with self.semaphore:
                data = await self._call_rasterizer(node)
        if not data:
            raise RasterizationError(f"Rasterizer returned no data for node {node.id}")
        return data

    async def _call_rasterizer(self, node: SceneNode) -> bytes:
        request = self.rasterizer.export_image(node, self.options.scale, self.options.image_format)
        if self.options.rasterize_timeout is None:
            return await request
        return await asyncio.wait_for(request, timeout=self.options.rasterize_timeout)

    def extract_shape(self, node: SceneNode, base: dict[str, Any]) -> ShapeElement:
        """Build a shape element from a node's own paints."""
        style = self.style_extractor
        return ShapeElement(
            **base,
            shape_type=self.SHAPE_TYPE_MAP.get(node.type, ShapeType.RECTANGLE),
            fills=style.fills(node),
            strokes=style.strokes(node),
            stroke_weight=style.stroke_weight(node),
            corner_radius=style.corner_radius(node),
        )

    def extract_text(self, node: TextNode, base: dict[str, Any]) -> TextElement:
        """Build a text element, resolving mixed typography to defaults."""
        style = self.style_extractor
        font_size = style.font_size(node)
        return TextElement(
            **base,
            characters=node.characters,
            font_size=font_size,
            font_name=style.font_name(node),
            text_align_horizontal=style.enum_value(node.text_align_horizontal, "LEFT"),
            text_align_vertical=style.enum_value(node.text_align_vertical, "TOP"),
            fills=style.text_fills(node),
            line_height=style.line_height(node, font_size),
            letter_spacing=style.letter_spacing(node),
            text_case=style.enum_value(node.text_case, "ORIGINAL"),
            text_decoration=style.enum_value(node.text_decoration, "NONE"),
            paragraph_indent=style.paragraph_measure(node.paragraph_indent),
            paragraph_spacing=style.paragraph_measure(node.paragraph_spacing),
            text_auto_resize=node.text_auto_resize,
        )

    def extract_line(
        self,
        node: LineNode,
        base: dict[str, Any],
        root: Optional[SceneNode] = None,
    ) -> LineElement:
        """Build a line element; the line runs along the node's local x axis."""
        style = self.style_extractor
        offset = self.geometry.resolve_offset(node, node.width, 0.0, root)
        return LineElement(
            **base,
            stroke_weight=style.stroke_weight(node),
            strokes=style.strokes(node),
            stroke_cap=style.enum_value(node.stroke_cap, "NONE"),
            stroke_join=style.enum_value(node.stroke_join, "MITER"),
            dash_pattern=list(node.dash_pattern) or None,
            start=Point(x=base["x"], y=base["y"]),
            end=Point(x=base["x"] + offset.x, y=base["y"] + offset.y),
        )


def _describe(error: Exception) -> str:
    if isinstance(error, asyncio.TimeoutError):
        return "rasterization timed out"
    return str(error) or type(error).__name__
