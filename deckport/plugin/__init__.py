"""Plugin glue - routes UI messages to the exporter and reports status."""

from deckport.plugin.session import (
    CANCEL_MESSAGE,
    EXPORT_FAILED,
    EXPORT_MESSAGE,
    EXPORT_SUCCEEDED,
    PluginSession,
)

__all__ = [
    "CANCEL_MESSAGE",
    "EXPORT_FAILED",
    "EXPORT_MESSAGE",
    "EXPORT_SUCCEEDED",
    "PluginSession",
]
