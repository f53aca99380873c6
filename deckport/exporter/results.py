"""Per-node export outcomes.

Each visited node yields exactly one result. The variants make the fallback
policy explicit: a node either produced its preferred element, was treated
as a transparent container, fell back after its preferred extraction failed,
or contributed nothing.
"""

from dataclasses import dataclass
from typing import Optional, Union

from deckport.dsl.schema import BaseElement, ShapeElement


@dataclass(frozen=True)
class Emitted:
    """The node produced its preferred element."""

    element: BaseElement

    @property
    def elements(self) -> tuple[BaseElement, ...]:
        return (self.element,)

    @property
    def descend(self) -> bool:
        return False


@dataclass(frozen=True)
class Decomposed:
    """A container whose children are exported individually.

    Attributes:
        background: Shape for the container's own paints (frames only).
    """

    background: Optional[ShapeElement] = None

    @property
    def elements(self) -> tuple[BaseElement, ...]:
        return (self.background,) if self.background is not None else ()

    @property
    def descend(self) -> bool:
        return True


@dataclass(frozen=True)
class FellBack:
    """Rasterization failed; a structural element was produced instead.

    Attributes:
        element: Shape built from the node's own fills and strokes, if it
            paints anything.
        error: Why the preferred extraction failed.
        descend: True for containers, whose children are visited instead.
    """

    element: Optional[BaseElement]
    error: str
    descend: bool = False

    @property
    def elements(self) -> tuple[BaseElement, ...]:
        return (self.element,) if self.element is not None else ()


@dataclass(frozen=True)
class Skipped:
    """The node contributes nothing (hidden or unclassifiable)."""

    reason: str

    @property
    def elements(self) -> tuple[BaseElement, ...]:
        return ()

    @property
    def descend(self) -> bool:
        return False


NodeResult = Union[Emitted, Decomposed, FellBack, Skipped]
