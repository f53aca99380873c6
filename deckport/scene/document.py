"""In-process scene documents loaded from JSON.

A document holds pages of nodes, the current selection (node ids, in the
order they were selected) and an image store mapping image hashes to encoded
image bytes. Loading binds every node's absolute transform by composing
relative transforms from the page down, so geometry never has to be
re-derived by summing offsets during export.
"""

import base64
import json
import logging
from pathlib import Path
from typing import Any, BinaryIO, Iterator, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from deckport.scene.nodes import ChildrenMixin, SceneNode
from deckport.scene.transform import AffineTransform

logger = logging.getLogger(__name__)


class Page(BaseModel):
    """A top-level canvas of the document."""

    model_config = ConfigDict(frozen=True)

    id: str = "0:1"
    name: str = "Page 1"
    children: list[SceneNode] = Field(default_factory=list)


class SceneDocument(BaseModel):
    """A host document snapshot."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    pages: list[Page] = Field(default_factory=list)
    selection: list[str] = Field(default_factory=list, description="Selected node ids, in order")
    images: dict[str, bytes] = Field(default_factory=dict, description="Image bytes keyed by image hash")

    @field_validator("images", mode="before")
    @classmethod
    def _decode_images(cls, value: Any) -> Any:
        """Decode base64 strings; raw bytes pass through."""
        if not isinstance(value, dict):
            return value
        return {
            key: base64.b64decode(data, validate=True) if isinstance(data, str) else data
            for key, data in value.items()
        }

    def iter_nodes(self) -> Iterator[SceneNode]:
        """Yield every node in document order."""
        for page in self.pages:
            yield from _iter_subtree(page.children)

    def find_node(self, node_id: str) -> Optional[SceneNode]:
        """Find a node by id."""
        for node in self.iter_nodes():
            if node.id == node_id:
                return node
        return None

    def selected_nodes(self, selection: Optional[Sequence[str]] = None) -> list[SceneNode]:
        """Resolve selected ids to nodes, keeping selection order.

        Args:
            selection: Node ids to resolve. Defaults to the document's own
                selection.

        Returns:
            The matching nodes. Ids not present in the document are dropped.
        """
        ids = list(self.selection if selection is None else selection)
        index = {node.id: node for node in self.iter_nodes()}
        nodes = []
        for node_id in ids:
            node = index.get(node_id)
            if node is None:
                logger.debug(f"Selected node {node_id} not found in document")
                continue
            nodes.append(node)
        return nodes


def _iter_subtree(nodes: Sequence[SceneNode]) -> Iterator[SceneNode]:
    for node in nodes:
        yield node
        if isinstance(node, ChildrenMixin):
            yield from _iter_subtree(node.children)


def bind_transforms(
    nodes: Sequence[SceneNode],
    parent: Optional[AffineTransform] = None,
) -> list[SceneNode]:
    """Attach relative and absolute transforms to a subtree.

    A node's relative transform comes from the host when present, otherwise
    from its ``x``/``y``/``rotation``. A host-reported absolute transform is
    kept as-is; otherwise it is the parent's absolute transform composed with
    the node's relative transform.

    Args:
        nodes: Sibling nodes sharing ``parent`` as their coordinate space.
        parent: Absolute transform of the parent (identity for page children).

    Returns:
        New node instances with transforms bound, in the same order.
    """
    parent = parent or AffineTransform.identity()
    bound: list[SceneNode] = []

    for node in nodes:
        relative = node.relative_transform or AffineTransform.from_placement(node.x, node.y, node.rotation)
        absolute = node.absolute_transform or parent.compose(relative)
        update: dict[str, Any] = {"relative_transform": relative, "absolute_transform": absolute}
        if isinstance(node, ChildrenMixin):
            update["children"] = bind_transforms(node.children, absolute)
        bound.append(node.model_copy(update=update))

    return bound


def load_document(source: Union[str, Path, BinaryIO, dict]) -> SceneDocument:
    """Load a scene document and bind its transforms.

    Args:
        source: Path to a JSON file, a readable binary/text stream, or an
            already-parsed dict.

    Returns:
        The validated SceneDocument.

    Raises:
        pydantic.ValidationError: If the document does not match the schema.
        json.JSONDecodeError: If the source is not valid JSON.
    """
    if isinstance(source, dict):
        data = source
    elif isinstance(source, (str, Path)):
        with open(source, encoding="utf-8") as f:
            data = json.load(f)
    else:
        data = json.load(source)

    document = bind_document(SceneDocument.model_validate(data))
    logger.debug(f"Loaded document '{document.name}' with {len(document.pages)} page(s)")
    return document


def bind_document(document: SceneDocument) -> SceneDocument:
    """Return a copy of ``document`` with transforms bound on every page."""
    pages = [page.model_copy(update={"children": bind_transforms(page.children)}) for page in document.pages]
    return document.model_copy(update={"pages": pages})
