"""Scene graph node models.

The host document is a tree of typed nodes. Each node type carries a fixed
capability set (children, fills, strokes, corner radius, typography), so the
tree is modelled as a closed union discriminated on ``type``: access to a
capability is a matter of which variant a node is, not of probing for
attributes. Unknown node types load as ``OtherNode``.

Positions (``x``, ``y``) are relative to the parent node. Field names accept
the host's camelCase spelling.
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag

from deckport.dsl.schema import Paint
from deckport.scene.transform import AffineTransform
from deckport.scene.values import MixedFontName, MixedPaints, MixedStr, NumericValue


CONTAINER_TYPES = frozenset({"FRAME", "GROUP", "COMPONENT", "INSTANCE"})


class NodeBase(BaseModel):
    """Fields every node carries."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = Field(description="Host node identifier")
    name: str = Field(default="")
    visible: bool = True
    x: float = Field(default=0.0, description="Left position relative to the parent")
    y: float = Field(default=0.0, description="Top position relative to the parent")
    width: float = Field(default=0.0, ge=0.0)
    height: float = Field(default=0.0, ge=0.0)
    rotation: float = Field(default=0.0, description="Rotation in degrees")
    opacity: float = Field(default=1.0, ge=0.0, le=1.0)
    blend_mode: str = Field(default="NORMAL", alias="blendMode")
    relative_transform: Optional[AffineTransform] = Field(default=None, alias="relativeTransform")
    absolute_transform: Optional[AffineTransform] = Field(default=None, alias="absoluteTransform")

    @property
    def is_container(self) -> bool:
        """True for frame-like nodes that can be export roots."""
        return self.type in CONTAINER_TYPES


class FillMixin(BaseModel):
    """Nodes that can be filled."""

    fills: list[Paint] = Field(default_factory=list)


class StrokeMixin(BaseModel):
    """Nodes that can be stroked."""

    strokes: list[Paint] = Field(default_factory=list)
    stroke_weight: Optional[NumericValue] = Field(default=None, alias="strokeWeight")
    stroke_cap: MixedStr = Field(default="NONE", alias="strokeCap")
    stroke_join: MixedStr = Field(default="MITER", alias="strokeJoin")
    dash_pattern: list[float] = Field(default_factory=list, alias="dashPattern")


class CornerMixin(BaseModel):
    """Nodes whose geometry supports a corner radius."""

    corner_radius: Optional[NumericValue] = Field(default=None, alias="cornerRadius")


class ChildrenMixin(BaseModel):
    """Nodes with an ordered child sequence (paint order, back to front)."""

    children: list["SceneNode"] = Field(default_factory=list)


# ============================================================================
# Containers
# ============================================================================


class FrameNode(NodeBase, FillMixin, StrokeMixin, CornerMixin, ChildrenMixin):
    type: Literal["FRAME"] = "FRAME"
    clips_content: bool = Field(default=True, alias="clipsContent")


class ComponentNode(NodeBase, FillMixin, StrokeMixin, CornerMixin, ChildrenMixin):
    type: Literal["COMPONENT"] = "COMPONENT"


class InstanceNode(NodeBase, FillMixin, StrokeMixin, CornerMixin, ChildrenMixin):
    type: Literal["INSTANCE"] = "INSTANCE"
    main_component_id: Optional[str] = Field(default=None, alias="mainComponentId")


class GroupNode(NodeBase, ChildrenMixin):
    type: Literal["GROUP"] = "GROUP"


# ============================================================================
# Leaves
# ============================================================================


class TextNode(NodeBase):
    type: Literal["TEXT"] = "TEXT"
    characters: str = ""
    fills: MixedPaints = Field(default_factory=list)
    font_size: Optional[NumericValue] = Field(default=None, alias="fontSize")
    font_name: Optional[MixedFontName] = Field(default=None, alias="fontName")
    text_align_horizontal: MixedStr = Field(default="LEFT", alias="textAlignHorizontal")
    text_align_vertical: MixedStr = Field(default="TOP", alias="textAlignVertical")
    line_height: Optional[NumericValue] = Field(default=None, alias="lineHeight")
    letter_spacing: Optional[NumericValue] = Field(default=None, alias="letterSpacing")
    text_case: MixedStr = Field(default="ORIGINAL", alias="textCase")
    text_decoration: MixedStr = Field(default="NONE", alias="textDecoration")
    paragraph_indent: Optional[NumericValue] = Field(default=None, alias="paragraphIndent")
    paragraph_spacing: Optional[NumericValue] = Field(default=None, alias="paragraphSpacing")
    text_auto_resize: str = Field(default="NONE", alias="textAutoResize")


class LineNode(NodeBase, StrokeMixin):
    type: Literal["LINE"] = "LINE"


class RectangleNode(NodeBase, FillMixin, StrokeMixin, CornerMixin):
    type: Literal["RECTANGLE"] = "RECTANGLE"


class EllipseNode(NodeBase, FillMixin, StrokeMixin):
    type: Literal["ELLIPSE"] = "ELLIPSE"


class PolygonNode(NodeBase, FillMixin, StrokeMixin, CornerMixin):
    type: Literal["REGULAR_POLYGON"] = "REGULAR_POLYGON"
    point_count: int = Field(default=3, ge=3, alias="pointCount")


class StarNode(NodeBase, FillMixin, StrokeMixin, CornerMixin):
    type: Literal["STAR"] = "STAR"
    point_count: int = Field(default=5, ge=3, alias="pointCount")
    inner_radius: float = Field(default=0.382, ge=0.0, le=1.0, alias="innerRadius")


class VectorNode(NodeBase, FillMixin, StrokeMixin, CornerMixin):
    type: Literal["VECTOR"] = "VECTOR"


class BooleanOperationNode(NodeBase, FillMixin, StrokeMixin, ChildrenMixin):
    type: Literal["BOOLEAN_OPERATION"] = "BOOLEAN_OPERATION"
    boolean_operation: str = Field(default="UNION", alias="booleanOperation")


class OtherNode(NodeBase):
    """A node type with nothing to export (slices, stickies, widgets, ...)."""

    type: str = "OTHER"


_NODE_TAGS = frozenset({
    "FRAME",
    "COMPONENT",
    "INSTANCE",
    "GROUP",
    "TEXT",
    "LINE",
    "RECTANGLE",
    "ELLIPSE",
    "REGULAR_POLYGON",
    "STAR",
    "VECTOR",
    "BOOLEAN_OPERATION",
})


def _node_tag(value: Any) -> str:
    node_type = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    return node_type if node_type in _NODE_TAGS else "OTHER"


SceneNode = Annotated[
    Union[
        Annotated[FrameNode, Tag("FRAME")],
        Annotated[ComponentNode, Tag("COMPONENT")],
        Annotated[InstanceNode, Tag("INSTANCE")],
        Annotated[GroupNode, Tag("GROUP")],
        Annotated[TextNode, Tag("TEXT")],
        Annotated[LineNode, Tag("LINE")],
        Annotated[RectangleNode, Tag("RECTANGLE")],
        Annotated[EllipseNode, Tag("ELLIPSE")],
        Annotated[PolygonNode, Tag("REGULAR_POLYGON")],
        Annotated[StarNode, Tag("STAR")],
        Annotated[VectorNode, Tag("VECTOR")],
        Annotated[BooleanOperationNode, Tag("BOOLEAN_OPERATION")],
        Annotated[OtherNode, Tag("OTHER")],
    ],
    Discriminator(_node_tag),
]

ContainerNode = Union[FrameNode, ComponentNode, InstanceNode, GroupNode]

for _model in (ChildrenMixin, FrameNode, ComponentNode, InstanceNode, GroupNode, BooleanOperationNode):
    _model.model_rebuild()
