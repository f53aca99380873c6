"""Pydantic v2 models for the flattened export schema.

A scene graph is exported as one ExportedDocument per selected root. Each
document holds an ordered list of element records (text, shape, image, line)
whose order is the paint order of the source tree. All positions are in the
host's pixel units, relative to the owning root's origin.
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Paint Models (shared by the scene input and the export output)
# ============================================================================


class RGBA(BaseModel):
    """Color with channels in the 0-1 range."""

    model_config = ConfigDict(frozen=True)

    r: float = Field(ge=0.0, le=1.0)
    g: float = Field(ge=0.0, le=1.0)
    b: float = Field(ge=0.0, le=1.0)
    a: float = Field(default=1.0, ge=0.0, le=1.0)

    def to_hex(self) -> str:
        """Convert to an RGB hex string (alpha dropped)."""
        return "#{:02X}{:02X}{:02X}".format(
            round(self.r * 255), round(self.g * 255), round(self.b * 255)
        )


class ColorStop(BaseModel):
    """A gradient color stop."""

    model_config = ConfigDict(frozen=True)

    position: float = Field(ge=0.0, le=1.0, description="Position along gradient (0-1)")
    color: RGBA


class SolidPaint(BaseModel):
    """Solid color paint."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Literal["SOLID"] = "SOLID"
    color: RGBA
    opacity: float = Field(default=1.0, ge=0.0, le=1.0)
    visible: bool = True
    blend_mode: str = Field(default="NORMAL", alias="blendMode")


class GradientPaint(BaseModel):
    """Gradient paint."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Literal["GRADIENT_LINEAR", "GRADIENT_RADIAL", "GRADIENT_ANGULAR", "GRADIENT_DIAMOND"]
    gradient_stops: list[ColorStop] = Field(default_factory=list, alias="gradientStops")
    gradient_transform: Optional[list[list[float]]] = Field(default=None, alias="gradientTransform")
    opacity: float = Field(default=1.0, ge=0.0, le=1.0)
    visible: bool = True
    blend_mode: str = Field(default="NORMAL", alias="blendMode")


class ImagePaint(BaseModel):
    """Image paint referencing an image by its hash."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Literal["IMAGE"] = "IMAGE"
    image_hash: Optional[str] = Field(default=None, alias="imageHash")
    scale_mode: Literal["FILL", "FIT", "CROP", "TILE"] = Field(default="FILL", alias="scaleMode")
    opacity: float = Field(default=1.0, ge=0.0, le=1.0)
    visible: bool = True
    blend_mode: str = Field(default="NORMAL", alias="blendMode")


Paint = Annotated[
    Union[SolidPaint, GradientPaint, ImagePaint],
    Field(discriminator="type"),
]


# ============================================================================
# Geometry Models
# ============================================================================


class Point(BaseModel):
    """A point relative to the export root's origin."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float


class Dimension(BaseModel):
    """A resolved typographic measure."""

    model_config = ConfigDict(frozen=True)

    value: Optional[float] = Field(default=None, description="None when unit is AUTO")
    unit: Literal["PIXELS", "PERCENT", "AUTO"] = "PIXELS"


class FontName(BaseModel):
    """Font identity."""

    model_config = ConfigDict(frozen=True)

    family: str = "Arial"
    style: str = "Regular"


# ============================================================================
# Element Records
# ============================================================================


class ElementKind(str, Enum):
    """Kinds of exported elements."""

    TEXT = "text"
    SHAPE = "shape"
    IMAGE = "image"
    LINE = "line"


class ShapeType(str, Enum):
    """Geometry of a shape element."""

    RECTANGLE = "rectangle"
    ELLIPSE = "ellipse"
    POLYGON = "polygon"
    STAR = "star"
    VECTOR = "vector"


class BaseElement(BaseModel):
    """Attributes shared by every element record."""

    model_config = ConfigDict(frozen=True, ser_json_bytes="base64", val_json_bytes="base64")

    node_id: str = Field(description="Source node identifier")
    name: str = Field(default="", description="Source node name")
    x: float = Field(default=0.0, description="Left position relative to the export root")
    y: float = Field(default=0.0, description="Top position relative to the export root")
    width: float = Field(default=0.0, ge=0.0)
    height: float = Field(default=0.0, ge=0.0)
    opacity: float = Field(default=1.0, ge=0.0, le=1.0)
    rotation: float = Field(default=0.0, description="Rotation in degrees, counter-clockwise")
    blend_mode: str = Field(default="NORMAL")


class TextElement(BaseElement):
    """A text element."""

    kind: Literal["text"] = "text"
    characters: str = ""
    font_size: float = Field(default=12.0, gt=0)
    font_name: FontName = Field(default_factory=FontName)
    text_align_horizontal: str = "LEFT"
    text_align_vertical: str = "TOP"
    fills: list[Paint] = Field(default_factory=list)
    line_height: Dimension = Field(default_factory=lambda: Dimension(unit="AUTO"))
    letter_spacing: Dimension = Field(default_factory=lambda: Dimension(value=0.0))
    text_case: str = "ORIGINAL"
    text_decoration: str = "NONE"
    paragraph_indent: float = 0.0
    paragraph_spacing: float = 0.0
    text_auto_resize: str = "NONE"


class ShapeElement(BaseElement):
    """A filled and/or stroked geometric shape."""

    kind: Literal["shape"] = "shape"
    shape_type: ShapeType = ShapeType.RECTANGLE
    fills: list[Paint] = Field(default_factory=list)
    strokes: list[Paint] = Field(default_factory=list)
    stroke_weight: float = Field(default=0.0, ge=0.0)
    corner_radius: Optional[float] = Field(
        default=None,
        ge=0.0,
        description="None when the source has no corner radius (distinct from 0)",
    )


class ImageElement(BaseElement):
    """A rasterized node."""

    kind: Literal["image"] = "image"
    image_bytes: bytes = Field(description="Encoded PNG bytes")
    image_token: str = Field(description="Content-derived identity of the image bytes")
    scale_mode: str = "FILL"
    source_image_hash: Optional[str] = Field(
        default=None,
        description="Hash of the image fill the node carried, if any",
    )


class LineElement(BaseElement):
    """A straight line segment."""

    kind: Literal["line"] = "line"
    stroke_weight: float = Field(default=1.0, ge=0.0)
    strokes: list[Paint] = Field(default_factory=list)
    stroke_cap: str = "NONE"
    stroke_join: str = "MITER"
    dash_pattern: Optional[list[float]] = None
    start: Point
    end: Point


ElementRecord = Annotated[
    Union[TextElement, ShapeElement, ImageElement, LineElement],
    Field(discriminator="kind"),
]


# ============================================================================
# Document & Batch Models
# ============================================================================


class AspectRatio(BaseModel):
    """Canvas reference size shared across a batch."""

    model_config = ConfigDict(frozen=True)

    width: float = Field(ge=0.0)
    height: float = Field(ge=0.0)

    @property
    def ratio(self) -> float:
        """Width over height."""
        return self.width / self.height if self.height > 0 else 0


class ExportedDocument(BaseModel):
    """One export root flattened to an ordered element list."""

    model_config = ConfigDict(frozen=True, ser_json_bytes="base64", val_json_bytes="base64")

    name: str
    width: float = Field(ge=0.0)
    height: float = Field(ge=0.0)
    elements: list[ElementRecord] = Field(default_factory=list, description="Elements in paint order")

    def elements_of(self, kind: ElementKind) -> list[BaseElement]:
        """Return the elements of one kind, in document order."""
        return [element for element in self.elements if element.kind == kind.value]


class ExportBatch(BaseModel):
    """Result of one export call."""

    model_config = ConfigDict(frozen=True, ser_json_bytes="base64", val_json_bytes="base64")

    documents: list[ExportedDocument] = Field(default_factory=list)
    aspect_ratio: AspectRatio

    def to_message(self) -> "ExportMessage":
        """Package the batch as the outbound UI message."""
        return ExportMessage(data=self.documents, aspect_ratio=self.aspect_ratio)


class ExportMessage(BaseModel):
    """The single message carrying a batch to the downstream renderer."""

    model_config = ConfigDict(frozen=True, ser_json_bytes="base64", val_json_bytes="base64")

    type: Literal["export-data"] = "export-data"
    data: list[ExportedDocument] = Field(default_factory=list)
    aspect_ratio: AspectRatio
