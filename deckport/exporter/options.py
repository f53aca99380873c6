"""Tunables for an export run."""

from dataclasses import dataclass
from typing import Any, Optional

from deckport.scene.host import ImageFormat


@dataclass(frozen=True)
class ExportOptions:
    """Options threaded through one export call.

    Attributes:
        scale: Rasterization scale (output pixels per document unit).
        image_format: Encoding requested from the rasterizer.
        rasterize_timeout: Seconds before a rasterization counts as failed.
            None waits indefinitely.
        max_concurrent_rasterizations: Upper bound on rasterizations in
            flight across all roots of one call.
        default_font_family: Substituted when a text run mixes fonts.
        default_font_style: Substituted when a text run mixes fonts.
        default_font_size: Substituted when a text run mixes sizes.
        default_stroke_weight: Substituted when stroke weights are mixed.
    """

    scale: float = 2.0
    image_format: ImageFormat = "PNG"
    rasterize_timeout: Optional[float] = 30.0
    max_concurrent_rasterizations: int = 4
    default_font_family: str = "Arial"
    default_font_style: str = "Regular"
    default_font_size: float = 12.0
    default_stroke_weight: float = 1.0

    @classmethod
    def from_settings(cls, settings: Any) -> "ExportOptions":
        """Build options from application settings."""
        return cls(
            scale=settings.export_scale,
            rasterize_timeout=settings.rasterize_timeout_seconds or None,
            max_concurrent_rasterizations=settings.max_concurrent_rasterizations,
            default_font_family=settings.default_font_family,
            default_font_style=settings.default_font_style,
            default_font_size=settings.default_font_size,
        )
