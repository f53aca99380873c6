"""Exceptions raised by deckport.

Only the selection errors are fatal to an export call. A failed rasterization
is always recovered by the exporter, which falls back to a structural
element for that one node.
"""


class ExportError(Exception):
    """Base class for export failures.

    Attributes:
        user_message: Short instructional text suitable for a status toast.
    """

    user_message = "Export failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.user_message)
        if message:
            self.user_message = message


class EmptySelectionError(ExportError):
    """Nothing was selected when the export started."""

    user_message = "Select a frame to export first"


class NoValidRootError(ExportError):
    """The selection holds nodes, but none can be an export root."""

    user_message = "Select at least one frame to export"


class RasterizationError(ExportError):
    """A node could not be rendered to an image."""

    user_message = "Rasterization failed"
