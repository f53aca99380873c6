"""Interfaces the exporter and plugin session call into.

The host application owns the document, rasterization, the plugin window and
its notification toasts. These protocols are everything deckport needs from
it.
"""

from typing import Any, Literal, Protocol, Sequence, runtime_checkable

from deckport.scene.nodes import SceneNode


ImageFormat = Literal["PNG", "JPG"]


@runtime_checkable
class Rasterizer(Protocol):
    """Renders a node (and its descendants) to encoded image bytes."""

    async def export_image(self, node: SceneNode, scale: float, image_format: ImageFormat = "PNG") -> bytes:
        """Rasterize ``node`` at ``scale`` and return the encoded bytes.

        Raises:
            Exception: Any failure; callers treat every exception as a
                failed rasterization of this one node.
        """
        ...


@runtime_checkable
class PluginHost(Protocol):
    """The host-side surface a plugin session talks to."""

    @property
    def selection(self) -> Sequence[SceneNode]:
        """Currently selected nodes, in selection order."""
        ...

    def notify(self, message: str) -> None:
        """Show a short status toast."""
        ...

    def post_message(self, message: dict[str, Any]) -> None:
        """Send a message to the plugin UI."""
        ...

    def close(self) -> None:
        """Close the plugin."""
        ...
