"""Export schema - flattened element records produced from a scene graph."""

from deckport.dsl.schema import (
    RGBA,
    AspectRatio,
    BaseElement,
    ColorStop,
    Dimension,
    ElementKind,
    ElementRecord,
    ExportBatch,
    ExportedDocument,
    ExportMessage,
    FontName,
    GradientPaint,
    ImageElement,
    ImagePaint,
    LineElement,
    Paint,
    Point,
    ShapeElement,
    ShapeType,
    SolidPaint,
    TextElement,
)

__all__ = [
    "RGBA",
    "AspectRatio",
    "BaseElement",
    "ColorStop",
    "Dimension",
    "ElementKind",
    "ElementRecord",
    "ExportBatch",
    "ExportedDocument",
    "ExportMessage",
    "FontName",
    "GradientPaint",
    "ImageElement",
    "ImagePaint",
    "LineElement",
    "Paint",
    "Point",
    "ShapeElement",
    "ShapeType",
    "SolidPaint",
    "TextElement",
]
