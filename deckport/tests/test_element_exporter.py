"""Tests for single-node export and the fallback policy."""

import asyncio
import hashlib

import pytest

from deckport.dsl.schema import (
    RGBA,
    ImageElement,
    ImagePaint,
    LineElement,
    ShapeElement,
    ShapeType,
    SolidPaint,
    TextElement,
)
from deckport.exporter.classifier import Disposition, ElementClassifier
from deckport.exporter.element_exporter import ElementExporter
from deckport.exporter.options import ExportOptions
from deckport.exporter.results import Decomposed, Emitted, FellBack, Skipped
from deckport.scene import FrameNode, GroupNode, LineNode, OtherNode, RectangleNode, StarNode, TextNode, bind_transforms
from deckport.tests.conftest import PNG_SIGNATURE, FailingRasterizer, SlowRasterizer, StaticRasterizer


RED = SolidPaint(color=RGBA(r=1, g=0, b=0))
IMAGE_FILL = ImagePaint(image_hash="photo", scale_mode="CROP")


def export(exporter: ElementExporter, node, root=None):
    """Classify and export one node synchronously."""
    root = root or node
    classification = ElementClassifier().classify(node)
    return asyncio.run(exporter.export_node(node, exporter.base_props(node, root), classification, root))


class TestRasterizedNodes:
    """Tests for nodes exported as images."""

    def test_image_token_is_content_hash(self, static_rasterizer: StaticRasterizer) -> None:
        """Test the token is the SHA-256 of the bytes."""
        result = export(ElementExporter(static_rasterizer), StarNode(id="s", width=10, height=10))
        assert isinstance(result, Emitted)
        assert isinstance(result.element, ImageElement)
        assert result.element.image_token == hashlib.sha256(static_rasterizer.data).hexdigest()

    def test_identical_renders_share_token(self, static_rasterizer: StaticRasterizer) -> None:
        """Test two nodes with identical renders share a token."""
        exporter = ElementExporter(static_rasterizer)
        first = export(exporter, StarNode(id="a"))
        second = export(exporter, StarNode(id="b"))
        assert first.element.image_token == second.element.image_token
        assert first.element.node_id != second.element.node_id

    def test_scale_and_format_passed(self, static_rasterizer: StaticRasterizer) -> None:
        """Test the rasterizer receives the configured scale."""
        export(ElementExporter(static_rasterizer, ExportOptions(scale=3.0)), StarNode(id="s"))
        assert static_rasterizer.calls == [("s", 3.0, "PNG")]

    def test_image_fill_metadata(self, static_rasterizer: StaticRasterizer) -> None:
        """Test the source image fill is carried on the element."""
        result = export(ElementExporter(static_rasterizer), RectangleNode(id="r", fills=[IMAGE_FILL]))
        assert result.element.scale_mode == "CROP"
        assert result.element.source_image_hash == "photo"

    def test_rasterized_container_not_descended(self, static_rasterizer: StaticRasterizer) -> None:
        """Test a rasterized container stands in for its subtree."""
        frame = FrameNode(id="f", fills=[IMAGE_FILL], children=[TextNode(id="t")])
        result = export(ElementExporter(static_rasterizer), frame)
        assert isinstance(result, Emitted)
        assert not result.descend


class TestFallback:
    """Tests for the rasterization fallback policy."""

    def test_host_exception_falls_back_to_shape(self, failing_rasterizer: FailingRasterizer) -> None:
        """Test a failing rasterization yields a shape of the same node."""
        star = StarNode(id="s", width=20, height=20, fills=[RED])
        result = export(ElementExporter(failing_rasterizer), star)
        assert isinstance(result, FellBack)
        assert isinstance(result.element, ShapeElement)
        assert result.element.shape_type == ShapeType.STAR
        assert result.element.fills == [RED]
        assert "cannot export s" in result.error
        assert not result.descend

    def test_empty_bytes_fall_back(self) -> None:
        """Test an empty render counts as a failure."""
        result = export(ElementExporter(StaticRasterizer(b"")), StarNode(id="s"))
        assert isinstance(result, FellBack)
        assert "no data" in result.error

    def test_timeout_falls_back(self) -> None:
        """Test a slow rasterizer times out."""
        exporter = ElementExporter(SlowRasterizer(delay=1.0), ExportOptions(rasterize_timeout=0.01))
        result = export(exporter, StarNode(id="s"))
        assert isinstance(result, FellBack)
        assert result.error == "rasterization timed out"

    def test_failed_container_decomposes(self, failing_rasterizer: FailingRasterizer) -> None:
        """Test a failed container keeps a background and descends."""
        frame = FrameNode(id="f", width=100, height=100, fills=[IMAGE_FILL])
        result = export(ElementExporter(failing_rasterizer), frame)
        assert isinstance(result, FellBack)
        assert result.descend
        assert isinstance(result.element, ShapeElement)

    def test_failed_container_without_paint(self, failing_rasterizer: FailingRasterizer) -> None:
        """Test a failed container with nothing visible emits nothing itself."""
        group = GroupNode(id="g", children=[TextNode(id="t")])
        exporter = ElementExporter(failing_rasterizer)
        result = exporter._fall_back(group, exporter.base_props(group, group), Disposition.CONTAINER, "boom")
        assert result.element is None
        assert result.descend
        assert result.error == "boom"


class TestStructuralNodes:
    """Tests for nodes exported without rasterization."""

    def test_frame_background(self, static_rasterizer: StaticRasterizer) -> None:
        """Test a painted frame contributes a background shape."""
        result = export(ElementExporter(static_rasterizer), FrameNode(id="f", width=10, height=10, fills=[RED]))
        assert isinstance(result, Decomposed)
        assert isinstance(result.background, ShapeElement)
        assert static_rasterizer.calls == []

    def test_unpainted_frame(self, static_rasterizer: StaticRasterizer) -> None:
        """Test an unpainted frame contributes nothing itself."""
        result = export(ElementExporter(static_rasterizer), FrameNode(id="f"))
        assert isinstance(result, Decomposed)
        assert result.elements == ()

    def test_rectangle_shape(self, static_rasterizer: StaticRasterizer) -> None:
        """Test a rectangle becomes a shape with its radius."""
        result = export(ElementExporter(static_rasterizer), RectangleNode(id="r", fills=[RED], corner_radius=6))
        assert isinstance(result.element, ShapeElement)
        assert result.element.corner_radius == 6
        assert result.element.stroke_weight == 1.0

    def test_text_element(self, static_rasterizer: StaticRasterizer) -> None:
        """Test text nodes resolve their typography."""
        node = TextNode.model_validate(
            {"id": "t", "characters": "Hi", "fontSize": "MIXED", "textAlignHorizontal": "CENTER"}
        )
        result = export(ElementExporter(static_rasterizer), node)
        assert isinstance(result.element, TextElement)
        assert result.element.font_size == 12
        assert result.element.text_align_horizontal == "CENTER"

    def test_skipped(self, static_rasterizer: StaticRasterizer) -> None:
        """Test unsupported nodes are skipped."""
        assert isinstance(export(ElementExporter(static_rasterizer), OtherNode(id="o", type="SLICE")), Skipped)


class TestLines:
    """Tests for line endpoints."""

    def test_horizontal_line(self, static_rasterizer: StaticRasterizer) -> None:
        """Test endpoints of an axis-aligned line."""
        (frame,) = bind_transforms([
            FrameNode(id="f", x=100, y=100, children=[LineNode(id="l", x=10, y=20, width=50, stroke_weight=2)])
        ])
        result = export(ElementExporter(static_rasterizer), frame.children[0], frame)
        line = result.element
        assert isinstance(line, LineElement)
        assert (line.start.x, line.start.y) == (10, 20)
        assert (line.end.x, line.end.y) == (60, 20)
        assert line.stroke_weight == 2
        assert line.dash_pattern is None

    def test_rotated_line(self, static_rasterizer: StaticRasterizer) -> None:
        """Test a rotated line ends along its rotated axis."""
        (frame,) = bind_transforms([FrameNode(id="f", children=[LineNode(id="l", width=30, rotation=-90)])])
        line = export(ElementExporter(static_rasterizer), frame.children[0], frame).element
        assert line.end.x == pytest.approx(0, abs=1e-9)
        assert line.end.y == pytest.approx(30)
        assert line.rotation == pytest.approx(-90)

    def test_line_in_rotated_root(self, static_rasterizer: StaticRasterizer) -> None:
        """Test endpoints and rotation agree in a rotated root's frame."""
        (frame,) = bind_transforms([FrameNode(id="f", rotation=90, children=[LineNode(id="l", x=10, y=0, width=20)])])
        line = export(ElementExporter(static_rasterizer), frame.children[0], frame).element
        assert line.rotation == pytest.approx(0)
        assert (line.start.x, line.start.y) == (pytest.approx(10), pytest.approx(0, abs=1e-9))
        assert (line.end.x, line.end.y) == (pytest.approx(30), pytest.approx(0, abs=1e-9))


def test_png_signature_untouched(static_rasterizer: StaticRasterizer) -> None:
    """Test rasterized bytes are passed through unchanged."""
    result = export(ElementExporter(static_rasterizer), StarNode(id="s"))
    assert result.element.image_bytes.startswith(PNG_SIGNATURE)
