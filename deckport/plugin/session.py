"""Plugin message handling.

The plugin UI posts messages to the plugin; this session reacts to them:
``export-to-ppt`` exports the current selection and posts the resulting
``export-data`` message back to the UI, ``cancel`` closes the plugin. Every
export ends with a status toast saying whether it worked and, if not, why.
"""

import logging
from typing import Any, Optional

from deckport.dsl.schema import ExportBatch
from deckport.errors import ExportError
from deckport.exporter.options import ExportOptions
from deckport.exporter.orchestrator import ExportOrchestrator
from deckport.scene.host import PluginHost, Rasterizer

logger = logging.getLogger(__name__)

EXPORT_MESSAGE = "export-to-ppt"
CANCEL_MESSAGE = "cancel"

EXPORT_SUCCEEDED = "Export succeeded"
EXPORT_FAILED = "Export failed: {reason}"


class PluginSession:
    """Connects a plugin host to the exporter."""

    def __init__(
        self,
        host: PluginHost,
        rasterizer: Rasterizer,
        options: Optional[ExportOptions] = None,
    ) -> None:
        """Initialize the session.

        Args:
            host: The host's plugin surface (selection, toasts, UI channel).
            rasterizer: Host capability used to render nodes to images.
            options: Export options.
        """
        self.host = host
        self.orchestrator = ExportOrchestrator(rasterizer, options)

    async def handle_message(self, message: dict[str, Any]) -> None:
        """Dispatch one message from the plugin UI."""
        message_type = message.get("type")

        if message_type == EXPORT_MESSAGE:
            await self.export()
        elif message_type == CANCEL_MESSAGE:
            self.host.close()
        else:
            logger.info(f"Ignoring plugin message of type {message_type!r}")

    async def export(self) -> Optional[ExportBatch]:
        """Export the current selection and report the outcome.

        Returns:
            The batch on success, None when the export failed.
        """
        try:
            batch = await self.orchestrator.export_selection(list(self.host.selection))
        except ExportError as e:
            logger.info(f"Export rejected: {e.user_message}")
            self.host.notify(e.user_message)
            return None
        except Exception as e:
            logger.exception("Export failed")
            self.host.notify(EXPORT_FAILED.format(reason=e))
            return None

        self.host.post_message(batch.to_message().model_dump(mode="json"))
        self.host.notify(EXPORT_SUCCEEDED)
        return batch
