"""Export a selection of root containers into an ExportBatch."""

import asyncio
import logging
from typing import Optional, Sequence

from deckport.dsl.schema import AspectRatio, BaseElement, ExportBatch, ExportedDocument
from deckport.errors import EmptySelectionError, NoValidRootError
from deckport.exporter.element_exporter import ElementExporter
from deckport.exporter.options import ExportOptions
from deckport.exporter.tree_walker import TreeWalker
from deckport.scene.document import bind_transforms
from deckport.scene.host import Rasterizer
from deckport.scene.nodes import ChildrenMixin, SceneNode

logger = logging.getLogger(__name__)


class ExportOrchestrator:
    """Runs one export call over the selected roots."""

    def __init__(self, rasterizer: Rasterizer, options: Optional[ExportOptions] = None) -> None:
        """Initialize the orchestrator.

        Args:
            rasterizer: Host capability used to render nodes to images.
            options: Export options.
        """
        self.rasterizer = rasterizer
        self.options = options or ExportOptions()

    @staticmethod
    def select_roots(selected_nodes: Sequence[SceneNode]) -> list[SceneNode]:
        """Container nodes of a selection, in selection order."""
        return [node for node in selected_nodes if node.is_container]

    async def export_selection(self, selected_nodes: Sequence[SceneNode]) -> ExportBatch:
        """Export every container in the selection.

        Roots are walked concurrently, each into its own buffer; documents
        are returned in selection order. The first root's size is the
        batch's aspect-ratio reference.

        Args:
            selected_nodes: The host selection, in selection order.

        Returns:
            ExportBatch with one document per container root.

        Raises:
            EmptySelectionError: If nothing is selected.
            NoValidRootError: If no selected node is a container.
        """
        if not selected_nodes:
            raise EmptySelectionError()

        roots = self.select_roots(selected_nodes)
        if not roots:
            raise NoValidRootError()

        first = roots[0]
        aspect_ratio = AspectRatio(width=first.width, height=first.height)

        semaphore = asyncio.Semaphore(max(1, self.options.max_concurrent_rasterizations))
        walker = TreeWalker(ElementExporter(self.rasterizer, self.options, semaphore))

        documents = await asyncio.gather(*(self._export_root(walker, root) for root in roots))

        logger.info(
            f"Exported {len(documents)} document(s) from {len(selected_nodes)} selected node(s), "
            f"{sum(len(document.elements) for document in documents)} element(s) total"
        )
        return ExportBatch(documents=list(documents), aspect_ratio=aspect_ratio)

    def export_selection_sync(self, selected_nodes: Sequence[SceneNode]) -> ExportBatch:
        """Blocking wrapper around :meth:`export_selection`."""
        return asyncio.run(self.export_selection(selected_nodes))

    async def _export_root(self, walker: TreeWalker, root: SceneNode) -> ExportedDocument:
        if _needs_binding(root):
            (root,) = bind_transforms([root])

        buffer: list[BaseElement] = []
        stats = await walker.walk(root, root, buffer)

        logger.info(
            f"Root '{root.name}' ({root.id}): {stats.visited} visited, {stats.emitted} emitted, "
            f"{stats.fell_back} fell back, {stats.skipped} skipped"
        )
        return ExportedDocument(name=root.name, width=root.width, height=root.height, elements=buffer)


def _needs_binding(root: SceneNode) -> bool:
    """True when any node of the subtree lacks an absolute transform.

    Hosts may hand over nodes carrying only their local position, size and
    rotation; those subtrees are bound before traversal.
    """
    pending = [root]
    while pending:
        node = pending.pop()
        if node.absolute_transform is None:
            return True
        if isinstance(node, ChildrenMixin):
            pending.extend(node.children)
    return False
