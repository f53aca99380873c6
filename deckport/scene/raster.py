"""Rasterize in-process scene documents with Pillow.

This is the Rasterizer used when the host is a loaded SceneDocument rather
than a live design tool. It paints axis-aligned frames, rectangles,
ellipses, regular polygons, stars, lines and text (in Pillow's default
bitmap font). Anything it cannot paint faithfully raises
RasterizationError, which the exporter turns into a structural fallback.
"""

import asyncio
import io
import logging
import math
from typing import Mapping, Optional

from PIL import Image, ImageDraw, ImageFont, UnidentifiedImageError

from deckport.dsl.schema import RGBA, GradientPaint, ImagePaint, SolidPaint
from deckport.errors import RasterizationError
from deckport.scene.host import ImageFormat
from deckport.scene.nodes import (
    ChildrenMixin,
    EllipseNode,
    FillMixin,
    FrameNode,
    LineNode,
    PolygonNode,
    SceneNode,
    StarNode,
    StrokeMixin,
    TextNode,
)
from deckport.scene.transform import AffineTransform
from deckport.scene.values import is_mixed, numeric_or

logger = logging.getLogger(__name__)

# Refuse absurd canvases rather than exhausting memory
MAX_PIXELS = 64_000_000

_UNPAINTABLE_TYPES = frozenset({"VECTOR", "BOOLEAN_OPERATION"})


class PillowRasterizer:
    """Renders scene nodes to PNG/JPEG bytes."""

    def __init__(self, images: Optional[Mapping[str, bytes]] = None) -> None:
        """Initialize the rasterizer.

        Args:
            images: Image store mapping image hashes to encoded image bytes,
                used to paint image fills.
        """
        self.images = dict(images or {})

    async def export_image(self, node: SceneNode, scale: float, image_format: ImageFormat = "PNG") -> bytes:
        """Rasterize a node off the event loop."""
        return await asyncio.to_thread(self.render, node, scale, image_format)

    def render(self, node: SceneNode, scale: float, image_format: ImageFormat = "PNG") -> bytes:
        """Rasterize a node synchronously.

        Args:
            node: Node to render, with its subtree.
            scale: Output pixels per document unit.
            image_format: "PNG" or "JPG".

        Returns:
            Encoded image bytes.

        Raises:
            RasterizationError: If the node cannot be painted.
        """
        width_px = round(node.width * scale)
        height_px = round(node.height * scale)
        if width_px <= 0 or height_px <= 0:
            raise RasterizationError(f"Node {node.id} has no area to rasterize")
        if width_px * height_px > MAX_PIXELS:
            raise RasterizationError(f"Node {node.id} is too large to rasterize ({width_px}x{height_px})")

        origin = node.absolute_transform or AffineTransform.identity()
        canvas = Image.new("RGBA", (width_px, height_px), (0, 0, 0, 0))
        self._paint(canvas, node, origin, scale, 1.0)

        buffer = io.BytesIO()
        if image_format == "JPG":
            canvas.convert("RGB").save(buffer, format="JPEG")
        else:
            canvas.save(buffer, format="PNG")
        return buffer.getvalue()

    def _paint(
        self,
        canvas: Image.Image,
        node: SceneNode,
        origin: AffineTransform,
        scale: float,
        opacity: float,
    ) -> None:
        if not node.visible:
            return
        if node.type in _UNPAINTABLE_TYPES:
            raise RasterizationError(f"No path geometry available for {node.type} node {node.id}")

        transform = node.absolute_transform or origin
        if not transform.is_axis_aligned:
            raise RasterizationError(f"Cannot rasterize rotated node {node.id}")

        left = (transform.tx - origin.tx) * scale
        top = (transform.ty - origin.ty) * scale
        box = (
            left,
            top,
            left + node.width * transform.a * scale,
            top + node.height * transform.d * scale,
        )
        opacity *= node.opacity

        layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(layer)

        if isinstance(node, TextNode):
            self._paint_text(draw, node, box, opacity)
        elif isinstance(node, LineNode):
            self._paint_line(draw, node, box, scale, opacity)
        else:
            if isinstance(node, FillMixin):
                for paint in node.fills:
                    if paint.visible:
                        self._paint_fill(layer, draw, node, paint, box, opacity)
            if isinstance(node, StrokeMixin):
                self._paint_stroke(draw, node, box, scale, opacity)

        canvas.alpha_composite(layer)

        if isinstance(node, ChildrenMixin):
            clips = isinstance(node, FrameNode) and node.clips_content
            target = Image.new("RGBA", canvas.size, (0, 0, 0, 0)) if clips else canvas
            for child in node.children:
                self._paint(target, child, origin, scale, opacity)
            if clips:
                canvas.alpha_composite(_clip(target, box))

    def _paint_fill(self, layer, draw, node, paint, box, opacity: float) -> None:
        if isinstance(paint, ImagePaint):
            self._paint_image(layer, node, paint, box, opacity)
            return
        color = self._paint_color(paint, opacity)
        if color is None:
            return
        self._draw_outline(draw, node, box, fill=color)

    def _paint_stroke(self, draw, node, box, scale: float, opacity: float) -> None:
        weight = round(numeric_or(node.stroke_weight, 1.0) * scale)
        if weight <= 0:
            return
        for paint in node.strokes:
            color = self._paint_color(paint, opacity) if paint.visible else None
            if color is not None:
                self._draw_outline(draw, node, box, outline=color, width=weight)

    def _draw_outline(self, draw, node, box, **style) -> None:
        if isinstance(node, EllipseNode):
            draw.ellipse(box, **style)
        elif isinstance(node, (PolygonNode, StarNode)):
            width = style.pop("width", 1)
            points = _star_points(node, box) if isinstance(node, StarNode) else _polygon_points(node, box)
            draw.polygon(points, width=width, **style)
        else:
            draw.rectangle(box, **style)

    def _paint_image(self, layer: Image.Image, node, paint: ImagePaint, box, opacity: float) -> None:
        data = self.images.get(paint.image_hash or "")
        if data is None:
            raise RasterizationError(f"Image {paint.image_hash} for node {node.id} is not available")
        try:
            image = Image.open(io.BytesIO(data)).convert("RGBA")
        except (UnidentifiedImageError, OSError) as e:
            raise RasterizationError(f"Image {paint.image_hash} for node {node.id} is unreadable: {e}") from e

        size = (max(1, round(box[2] - box[0])), max(1, round(box[3] - box[1])))
        image = image.resize(size, Image.Resampling.LANCZOS)
        alpha = opacity * paint.opacity
        if alpha < 1.0:
            image.putalpha(image.getchannel("A").point(lambda value: round(value * alpha)))
        layer.paste(image, (round(box[0]), round(box[1])), image)

    def _paint_text(self, draw, node: TextNode, box, opacity: float) -> None:
        if not node.characters:
            return
        color = (0, 0, 0, round(255 * opacity))
        if not is_mixed(node.fills):
            for paint in node.fills:
                resolved = self._paint_color(paint, opacity) if paint.visible else None
                if resolved is not None:
                    color = resolved
                    break
        draw.multiline_text((box[0], box[1]), node.characters, fill=color, font=ImageFont.load_default())

    def _paint_line(self, draw, node: LineNode, box, scale: float, opacity: float) -> None:
        weight = max(1, round(numeric_or(node.stroke_weight, 1.0) * scale))
        for paint in node.strokes:
            color = self._paint_color(paint, opacity) if paint.visible else None
            if color is not None:
                draw.line([(box[0], box[1]), (box[2], box[1])], fill=color, width=weight)

    def _paint_color(self, paint, opacity: float) -> Optional[tuple[int, int, int, int]]:
        """Resolve a paint to one RGBA tuple (gradients use their first stop)."""
        if isinstance(paint, SolidPaint):
            color = paint.color
        elif isinstance(paint, GradientPaint) and paint.gradient_stops:
            color = paint.gradient_stops[0].color
        else:
            return None
        return _to_rgba(color, opacity * paint.opacity)


def _to_rgba(color: RGBA, alpha: float) -> tuple[int, int, int, int]:
    return (
        round(color.r * 255),
        round(color.g * 255),
        round(color.b * 255),
        round(color.a * alpha * 255),
    )


def _clip(layer: Image.Image, box) -> Image.Image:
    """Keep only the part of ``layer`` inside ``box`` (right/bottom exclusive)."""
    mask = Image.new("L", layer.size, 0)
    if box[2] > box[0] and box[3] > box[1]:
        ImageDraw.Draw(mask).rectangle((box[0], box[1], box[2] - 1, box[3] - 1), fill=255)
    return Image.composite(layer, Image.new("RGBA", layer.size, (0, 0, 0, 0)), mask)


def _polygon_points(node: PolygonNode, box) -> list[tuple[float, float]]:
    return _radial_points(box, [1.0] * node.point_count)


def _star_points(node: StarNode, box) -> list[tuple[float, float]]:
    radii = [1.0 if i % 2 == 0 else node.inner_radius for i in range(node.point_count * 2)]
    return _radial_points(box, radii)


def _radial_points(box, radii: list[float]) -> list[tuple[float, float]]:
    """Points around the box center, first vertex at the top."""
    center_x = (box[0] + box[2]) / 2
    center_y = (box[1] + box[3]) / 2
    radius_x = (box[2] - box[0]) / 2
    radius_y = (box[3] - box[1]) / 2
    step = 2 * math.pi / len(radii)
    return [
        (
            center_x + radius_x * r * math.sin(i * step),
            center_y - radius_y * r * math.cos(i * step),
        )
        for i, r in enumerate(radii)
    ]
