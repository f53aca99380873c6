"""Depth-first traversal of one export root.

Nodes are visited in pre-order and children in the host's native order,
which is their paint order, so the output buffer ends up back-to-front. A
node's result decides whether its children are visited: a rasterized
container stands in for its whole subtree, a transparent one hands off to
its children.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from deckport.dsl.schema import BaseElement
from deckport.exporter.classifier import Disposition, ElementClassifier
from deckport.exporter.element_exporter import ElementExporter
from deckport.exporter.results import FellBack, NodeResult, Skipped
from deckport.scene.nodes import ChildrenMixin, SceneNode

logger = logging.getLogger(__name__)


@dataclass
class WalkStats:
    """Counts of node outcomes during one walk."""

    visited: int = 0
    emitted: int = 0
    fell_back: int = 0
    skipped: int = 0

    def record(self, result: NodeResult) -> None:
        self.visited += 1
        self.emitted += len(result.elements)
        if isinstance(result, FellBack):
            self.fell_back += 1
        elif isinstance(result, Skipped):
            self.skipped += 1


class TreeWalker:
    """Walks a subtree and accumulates element records in document order."""

    def __init__(self, exporter: ElementExporter, classifier: Optional[ElementClassifier] = None) -> None:
        """Initialize the tree walker.

        Args:
            exporter: Produces the result for each visited node.
            classifier: Decides what each node becomes.
        """
        self.exporter = exporter
        self.classifier = classifier or ElementClassifier()

    async def walk(
        self,
        node: SceneNode,
        root: SceneNode,
        buffer: list[BaseElement],
        stats: Optional[WalkStats] = None,
    ) -> WalkStats:
        """Visit ``node`` and its descendants, appending to ``buffer``.

        Every position is resolved against ``root``, never against the
        immediate parent. Node visits are sequential so the buffer order is
        deterministic.

        Args:
            node: Where to start (usually the root itself).
            root: The export root owning the output.
            buffer: Output list owned by this root's traversal.
            stats: Counters to update; a fresh one is created if omitted.

        Returns:
            The walk statistics.
        """
        stats = stats if stats is not None else WalkStats()
        pending = [node]

        while pending:
            current = pending.pop()
            result = await self._visit(current, root)
            stats.record(result)
            buffer.extend(result.elements)

            if result.descend and isinstance(current, ChildrenMixin):
                # Reversed so the first child is popped first
                pending.extend(reversed(current.children))

        return stats

    async def _visit(self, node: SceneNode, root: SceneNode) -> NodeResult:
        classification = self.classifier.classify(node)
        if classification.disposition == Disposition.SKIP:
            logger.debug(f"Skipping {node.type} node {node.id}: {classification.reason}")
            return Skipped(classification.reason)
        base = self.exporter.base_props(node, root)
        return await self.exporter.export_node(node, base, classification, root)
