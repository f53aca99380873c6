"""Resolve node geometry in the coordinate space of an export root.

Every position is computed from the node's absolute transform mapped through
the inverse of the fixed export root's absolute transform, never by summing
local offsets down the tree: an intermediate container may rotate or scale
its children, and additive offsets are only correct when none does. Positions,
line offsets and rotations all come out in the root's own frame, so a root
drawn upright downstream keeps its children where they belong.
"""

from typing import Optional

from deckport.dsl.schema import Point
from deckport.scene.nodes import SceneNode
from deckport.scene.transform import AffineTransform, normalize_rotation


class GeometryResolver:
    """Computes positions relative to an export root's origin."""

    def resolve_position(self, node: SceneNode, root: SceneNode) -> tuple[float, float]:
        """Position of a node's origin in the root's coordinate space.

        Missing transform data counts as a zero translation.

        Args:
            node: The node being exported.
            root: The export root that owns it.

        Returns:
            (x, y) in the root's coordinate space.
        """
        if node.absolute_transform is None:
            return (0.0, 0.0)
        origin = node.absolute_transform.apply(0.0, 0.0)
        return self._to_root(root, *origin)

    def resolve_offset(
        self,
        node: SceneNode,
        local_dx: float,
        local_dy: float,
        root: Optional[SceneNode] = None,
    ) -> Point:
        """Map a displacement in the node's local space into the root's space.

        Used for line endpoints: the end point is the start point plus the
        mapped ``(length, 0)`` offset.

        Args:
            node: Node whose local space the offset is in.
            local_dx: X displacement in the node's local space.
            local_dy: Y displacement in the node's local space.
            root: Export root whose frame the result is in; page axes when
                omitted.

        Returns:
            The displacement as a Point.
        """
        transform = node.absolute_transform
        if transform is None:
            transform = AffineTransform.from_placement(0.0, 0.0, node.rotation)
        start = transform.apply(0.0, 0.0)
        end = transform.apply(local_dx, local_dy)
        if root is not None:
            start = self._to_root(root, *start)
            end = self._to_root(root, *end)
        return Point(x=end[0] - start[0], y=end[1] - start[1])

    def resolve_rotation(self, node: SceneNode, root: SceneNode) -> float:
        """Rotation of a node as seen in the root's frame, in degrees.

        Uses absolute transforms so rotated ancestors are accounted for;
        falls back to the node's own rotation when transforms are missing.
        The root itself is never rotated within its own frame.
        """
        if node.id == root.id:
            return 0.0
        if node.absolute_transform is None or root.absolute_transform is None:
            return node.rotation
        return normalize_rotation(node.absolute_transform.rotation - root.absolute_transform.rotation)

    def _to_root(self, root: SceneNode, x: float, y: float) -> tuple[float, float]:
        """Map a page-space point into the root's frame."""
        transform = root.absolute_transform
        if transform is None:
            return (x, y)
        try:
            return transform.inverse().apply(x, y)
        except ValueError:
            # Degenerate root scale: fall back to plain translation
            return (x - transform.tx, y - transform.ty)
