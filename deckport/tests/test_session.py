"""Tests for plugin message handling."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from deckport.plugin import PluginSession
from deckport.plugin.session import EXPORT_SUCCEEDED
from deckport.scene import FrameNode, RectangleNode, TextNode, bind_transforms
from deckport.tests.conftest import StaticRasterizer


@pytest.fixture
def host() -> MagicMock:
    """A plugin host with a single frame selected."""
    (frame,) = bind_transforms([
        FrameNode(id="f", name="Slide", width=160, height=90, children=[TextNode(id="t", characters="Hi")])
    ])
    host = MagicMock()
    host.selection = [frame]
    return host


class TestPluginSession:
    """Tests for PluginSession."""

    def test_export_posts_batch(self, host: MagicMock, static_rasterizer: StaticRasterizer) -> None:
        """Test a successful export posts one message and a success toast."""
        session = PluginSession(host, static_rasterizer)
        asyncio.run(session.handle_message({"type": "export-to-ppt"}))

        host.post_message.assert_called_once()
        message = host.post_message.call_args.args[0]
        assert message["type"] == "export-data"
        assert message["data"][0]["name"] == "Slide"
        assert message["aspect_ratio"] == {"width": 160, "height": 90}
        host.notify.assert_called_once_with(EXPORT_SUCCEEDED)

    def test_empty_selection_notifies(self, host: MagicMock, static_rasterizer: StaticRasterizer) -> None:
        """Test an empty selection shows guidance and posts nothing."""
        host.selection = []
        result = asyncio.run(PluginSession(host, static_rasterizer).export())

        assert result is None
        host.post_message.assert_not_called()
        host.notify.assert_called_once_with("Select a frame to export first")

    def test_no_frame_selected(self, host: MagicMock, static_rasterizer: StaticRasterizer) -> None:
        """Test a selection without containers asks for a frame."""
        host.selection = [RectangleNode(id="r")]
        asyncio.run(PluginSession(host, static_rasterizer).export())
        host.notify.assert_called_once_with("Select at least one frame to export")

    def test_unexpected_error_reported(self, host: MagicMock, static_rasterizer: StaticRasterizer) -> None:
        """Test unexpected failures are reported, not raised."""
        session = PluginSession(host, static_rasterizer)
        session.orchestrator.export_selection = AsyncMock(side_effect=RuntimeError("boom"))

        assert asyncio.run(session.export()) is None
        host.notify.assert_called_once_with("Export failed: boom")
        host.post_message.assert_not_called()

    def test_cancel_closes(self, host: MagicMock, static_rasterizer: StaticRasterizer) -> None:
        """Test cancel closes the plugin."""
        asyncio.run(PluginSession(host, static_rasterizer).handle_message({"type": "cancel"}))
        host.close.assert_called_once()
        host.post_message.assert_not_called()

    def test_unknown_message_ignored(self, host: MagicMock, static_rasterizer: StaticRasterizer) -> None:
        """Test unknown messages do nothing."""
        asyncio.run(PluginSession(host, static_rasterizer).handle_message({"type": "resize"}))
        host.close.assert_not_called()
        host.notify.assert_not_called()
