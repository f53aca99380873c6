"""Pytest configuration and fixtures."""

import asyncio
import base64
import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from deckport.api.main import app


PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


class StaticRasterizer:
    """Returns the same bytes for every node and records the calls."""

    def __init__(self, data: bytes = PNG_SIGNATURE + b"static") -> None:
        self.data = data
        self.calls: list[tuple[str, float, str]] = []

    async def export_image(self, node, scale, image_format="PNG") -> bytes:
        self.calls.append((node.id, scale, image_format))
        return self.data


class FailingRasterizer:
    """Raises for the given node ids (all nodes when none are given)."""

    def __init__(self, failing_ids: set[str] | None = None, data: bytes = PNG_SIGNATURE + b"ok") -> None:
        self.failing_ids = failing_ids
        self.data = data
        self.calls: list[str] = []

    async def export_image(self, node, scale, image_format="PNG") -> bytes:
        self.calls.append(node.id)
        if self.failing_ids is None or node.id in self.failing_ids:
            raise RuntimeError(f"cannot export {node.id}")
        return self.data


class SlowRasterizer:
    """Sleeps before answering and tracks how many calls overlap."""

    def __init__(self, delay: float = 0.01) -> None:
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0

    async def export_image(self, node, scale, image_format="PNG") -> bytes:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1
        return PNG_SIGNATURE + node.id.encode()


@pytest.fixture
def static_rasterizer() -> StaticRasterizer:
    """Rasterizer that always succeeds."""
    return StaticRasterizer()


@pytest.fixture
def failing_rasterizer() -> FailingRasterizer:
    """Rasterizer that always raises."""
    return FailingRasterizer()


@pytest.fixture
def client() -> TestClient:
    """Create a test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture
def png_bytes() -> bytes:
    """A small opaque red PNG."""
    buffer = io.BytesIO()
    Image.new("RGBA", (4, 4), (255, 0, 0, 255)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def sample_document(png_bytes: bytes) -> dict:
    """A host document in its JSON (camelCase) form."""
    return {
        "name": "Pitch deck",
        "selection": ["1:1", "2:1", "1:9"],
        "images": {"img-hero": base64.b64encode(png_bytes).decode("ascii")},
        "pages": [
            {
                "id": "0:1",
                "name": "Slides",
                "children": [
                    {
                        "id": "1:1",
                        "type": "FRAME",
                        "name": "Title slide",
                        "x": 100,
                        "y": 50,
                        "width": 960,
                        "height": 540,
                        "fills": [{"type": "SOLID", "color": {"r": 1, "g": 1, "b": 1}}],
                        "children": [
                            {
                                "id": "1:2",
                                "type": "GROUP",
                                "name": "Heading",
                                "x": 5,
                                "y": 5,
                                "width": 400,
                                "height": 80,
                                "children": [
                                    {
                                        "id": "1:3",
                                        "type": "TEXT",
                                        "name": "Title",
                                        "x": 10,
                                        "y": 20,
                                        "width": 300,
                                        "height": 40,
                                        "characters": "Hello",
                                        "fontSize": 32,
                                        "fontName": {"family": "Inter", "style": "Bold"},
                                        "lineHeight": {"value": 120, "unit": "PERCENT"},
                                        "letterSpacing": "MIXED",
                                        "fills": [{"type": "SOLID", "color": {"r": 0, "g": 0, "b": 0}}],
                                    }
                                ],
                            },
                            {
                                "id": "1:4",
                                "type": "RECTANGLE",
                                "name": "Hero",
                                "x": 500,
                                "y": 100,
                                "width": 200,
                                "height": 100,
                                "cornerRadius": 8,
                                "fills": [{"type": "IMAGE", "imageHash": "img-hero", "scaleMode": "FIT"}],
                            },
                            {
                                "id": "1:5",
                                "type": "LINE",
                                "name": "Rule",
                                "x": 0,
                                "y": 500,
                                "width": 960,
                                "height": 0,
                                "strokeWeight": 2,
                                "strokes": [{"type": "SOLID", "color": {"r": 0.5, "g": 0.5, "b": 0.5}}],
                            },
                        ],
                    },
                    {
                        "id": "2:1",
                        "type": "FRAME",
                        "name": "Agenda",
                        "x": 1200,
                        "y": 50,
                        "width": 960,
                        "height": 540,
                        "children": [
                            {
                                "id": "2:2",
                                "type": "STAR",
                                "name": "Badge",
                                "x": 20,
                                "y": 20,
                                "width": 50,
                                "height": 50,
                                "fills": [{"type": "SOLID", "color": {"r": 1, "g": 0.8, "b": 0}}],
                            },
                            {
                                "id": "2:3",
                                "type": "VECTOR",
                                "name": "Arrow",
                                "x": 100,
                                "y": 20,
                                "width": 40,
                                "height": 10,
                                "strokes": [{"type": "SOLID", "color": {"r": 0, "g": 0, "b": 0}}],
                            },
                        ],
                    },
                    {
                        "id": "1:9",
                        "type": "ELLIPSE",
                        "name": "Loose dot",
                        "x": 0,
                        "y": 0,
                        "width": 10,
                        "height": 10,
                    },
                ],
            }
        ],
    }
