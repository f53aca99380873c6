"""Tests for depth-first tree traversal."""

import asyncio

from deckport.dsl.schema import RGBA, ImagePaint, SolidPaint
from deckport.exporter.element_exporter import ElementExporter
from deckport.exporter.tree_walker import TreeWalker, WalkStats
from deckport.scene import FrameNode, GroupNode, LineNode, RectangleNode, StarNode, TextNode, bind_transforms
from deckport.tests.conftest import FailingRasterizer, StaticRasterizer


RED = SolidPaint(color=RGBA(r=1, g=0, b=0))
IMAGE_FILL = ImagePaint(image_hash="photo")


def walk(rasterizer, root):
    """Walk a root and return (buffer, stats)."""
    buffer = []
    stats = asyncio.run(TreeWalker(ElementExporter(rasterizer)).walk(root, root, buffer))
    return buffer, stats


def build_slide():
    (frame,) = bind_transforms([
        FrameNode(
            id="f",
            width=100,
            height=100,
            fills=[RED],
            children=[
                RectangleNode(id="r1", fills=[RED]),
                GroupNode(id="g", children=[TextNode(id="t", characters="A"), StarNode(id="s")]),
                RectangleNode(id="r2", fills=[RED], visible=False),
                LineNode(id="l", width=10),
            ],
        )
    ])
    return frame


class TestTreeWalker:
    """Tests for TreeWalker.walk."""

    def test_pre_order_paint_order(self, static_rasterizer: StaticRasterizer) -> None:
        """Test elements come out in document order, back to front."""
        buffer, _ = walk(static_rasterizer, build_slide())
        assert [element.node_id for element in buffer] == ["f", "r1", "t", "s", "l"]
        assert [element.kind for element in buffer] == ["shape", "shape", "text", "image", "line"]

    def test_stats(self, static_rasterizer: StaticRasterizer) -> None:
        """Test outcome counters."""
        _, stats = walk(static_rasterizer, build_slide())
        assert stats == WalkStats(visited=7, emitted=5, fell_back=0, skipped=1)

    def test_hidden_subtree_skipped(self, static_rasterizer: StaticRasterizer) -> None:
        """Test hidden containers hide their descendants."""
        (frame,) = bind_transforms([
            FrameNode(id="f", children=[GroupNode(id="g", visible=False, children=[TextNode(id="t")])])
        ])
        buffer, stats = walk(static_rasterizer, frame)
        assert buffer == []
        assert stats.visited == 2

    def test_rasterized_container_hides_children(self, static_rasterizer: StaticRasterizer) -> None:
        """Test an image-filled container is exported whole."""
        (frame,) = bind_transforms([
            FrameNode(
                id="f",
                children=[FrameNode(id="c", fills=[IMAGE_FILL], children=[TextNode(id="t"), StarNode(id="s")])],
            )
        ])
        buffer, _ = walk(static_rasterizer, frame)
        assert [element.node_id for element in buffer] == ["c"]
        assert buffer[0].kind == "image"
        assert [call[0] for call in static_rasterizer.calls] == ["c"]

    def test_failed_container_decomposes(self) -> None:
        """Test a container whose rasterization fails is walked into."""
        rasterizer = FailingRasterizer(failing_ids={"c"})
        (frame,) = bind_transforms([
            FrameNode(
                id="f",
                children=[FrameNode(id="c", fills=[IMAGE_FILL], children=[TextNode(id="t"), StarNode(id="s")])],
            )
        ])
        buffer, stats = walk(rasterizer, frame)
        assert [(element.node_id, element.kind) for element in buffer] == [
            ("c", "shape"),
            ("t", "text"),
            ("s", "image"),
        ]
        assert stats.fell_back == 1

    def test_positions_relative_to_root(self, static_rasterizer: StaticRasterizer) -> None:
        """Test nested positions resolve against the root, not the parent."""
        (frame,) = bind_transforms([
            FrameNode(
                id="f",
                x=100,
                y=50,
                children=[GroupNode(id="g", x=5, y=5, children=[TextNode(id="t", x=10, y=20)])],
            )
        ])
        buffer, _ = walk(static_rasterizer, frame)
        assert (buffer[0].x, buffer[0].y) == (15, 25)

    def test_deep_tree(self, static_rasterizer: StaticRasterizer) -> None:
        """Test deeply nested groups do not exhaust the stack."""
        node = TextNode(id="leaf")
        for depth in range(2000):
            node = GroupNode(id=f"g{depth}", children=[node])
        frame = FrameNode(id="f", children=[node])
        buffer, stats = walk(static_rasterizer, frame)
        assert [element.node_id for element in buffer] == ["leaf"]
        assert stats.visited == 2002
