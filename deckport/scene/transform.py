"""2D affine transforms in the host's layout.

The host stores a node transform as a 2x3 matrix ``[[a, c, tx], [b, d, ty]]``
mapping the node's local space into its parent's (relative transform) or into
page space (absolute transform). Rotation is in degrees, counter-clockwise
on screen, which with a y-down axis gives ``b = -sin(rotation)``.
"""

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


_EPSILON = 1e-9


class AffineTransform(BaseModel):
    """An affine transform ``(x, y) -> (a*x + c*y + tx, b*x + d*y + ty)``."""

    model_config = ConfigDict(frozen=True)

    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    tx: float = 0.0
    ty: float = 0.0

    @model_validator(mode="before")
    @classmethod
    def _from_matrix(cls, data: Any) -> Any:
        """Accept the host's nested-list matrix form."""
        if isinstance(data, (list, tuple)):
            if len(data) != 2 or any(len(row) != 3 for row in data):
                raise ValueError("transform matrix must be 2x3")
            (a, c, tx), (b, d, ty) = data
            return {"a": a, "b": b, "c": c, "d": d, "tx": tx, "ty": ty}
        return data

    @classmethod
    def identity(cls) -> "AffineTransform":
        """The identity transform."""
        return cls()

    @classmethod
    def from_placement(cls, x: float, y: float, rotation: float = 0.0) -> "AffineTransform":
        """Build a relative transform from a position and a rotation in degrees."""
        radians = math.radians(rotation)
        cos, sin = math.cos(radians), math.sin(radians)
        return cls(a=cos, b=-sin, c=sin, d=cos, tx=x, ty=y)

    def compose(self, inner: "AffineTransform") -> "AffineTransform":
        """Return ``self * inner``: apply ``inner`` first, then ``self``."""
        return AffineTransform(
            a=self.a * inner.a + self.c * inner.b,
            b=self.b * inner.a + self.d * inner.b,
            c=self.a * inner.c + self.c * inner.d,
            d=self.b * inner.c + self.d * inner.d,
            tx=self.a * inner.tx + self.c * inner.ty + self.tx,
            ty=self.b * inner.tx + self.d * inner.ty + self.ty,
        )

    def inverse(self) -> "AffineTransform":
        """Return the transform mapping the target space back to local space.

        Raises:
            ValueError: If the transform is singular (zero-area scale).
        """
        det = self.a * self.d - self.b * self.c
        if abs(det) < _EPSILON:
            raise ValueError("transform is not invertible")
        a, b, c, d = self.d / det, -self.b / det, -self.c / det, self.a / det
        return AffineTransform(
            a=a,
            b=b,
            c=c,
            d=d,
            tx=-(a * self.tx + c * self.ty),
            ty=-(b * self.tx + d * self.ty),
        )

    def apply(self, x: float, y: float) -> tuple[float, float]:
        """Map a local point through the transform."""
        return (self.a * x + self.c * y + self.tx, self.b * x + self.d * y + self.ty)

    @property
    def rotation(self) -> float:
        """Rotation in degrees."""
        return math.degrees(math.atan2(-self.b, self.a))

    @property
    def scale_x(self) -> float:
        """Horizontal scale factor."""
        return math.hypot(self.a, self.b)

    @property
    def scale_y(self) -> float:
        """Vertical scale factor."""
        return math.hypot(self.c, self.d)

    @property
    def is_axis_aligned(self) -> bool:
        """True when the transform neither rotates nor skews."""
        return abs(self.b) < _EPSILON and abs(self.c) < _EPSILON

    def to_matrix(self) -> list[list[float]]:
        """Return the host's nested-list matrix form."""
        return [[self.a, self.c, self.tx], [self.b, self.d, self.ty]]


def normalize_rotation(degrees: float) -> float:
    """Normalize rotation to the (-180, 180] range.

    Args:
        degrees: Rotation in degrees (any range).

    Returns:
        Equivalent rotation in (-180, 180].
    """
    normalized = math.fmod(degrees, 360.0)
    if normalized <= -180.0:
        normalized += 360.0
    elif normalized > 180.0:
        normalized -= 360.0
    return normalized
