"""Host-reported values that may be indeterminate.

A text run whose characters do not share one font size, or a rectangle whose
corners have different radii, reports the ``"MIXED"`` marker instead of a
value. Numeric fields may also arrive as a bare number or as a
``{"value", "unit"}`` record. These variants are modelled explicitly so every
consumer has to handle all of them.
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from deckport.dsl.schema import FontName, Paint


MIXED = "MIXED"


class Uniform(BaseModel):
    """A single definite number."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["uniform"] = "uniform"
    value: float


class UniformWithUnit(BaseModel):
    """A definite number with a unit (``value`` is None for AUTO)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["unit"] = "unit"
    value: Optional[float] = None
    unit: Literal["PIXELS", "PERCENT", "AUTO"] = "PIXELS"


class Mixed(BaseModel):
    """The value differs across the node (e.g. a non-uniform text run)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["mixed"] = "mixed"


def _coerce_numeric(value: Any) -> Any:
    """Map the host's loose spellings onto the tagged variants."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return {"kind": "uniform", "value": value}
    if isinstance(value, str) and value.upper() == MIXED:
        return {"kind": "mixed"}
    if isinstance(value, dict) and "kind" not in value:
        if "unit" in value:
            return {"kind": "unit", **value}
        if "value" in value:
            return {"kind": "uniform", **value}
    return value


def _mixed_marker(value: Any) -> Any:
    if isinstance(value, str) and value.upper() == MIXED:
        return Mixed()
    return value


NumericValue = Annotated[
    Union[Uniform, UniformWithUnit, Mixed],
    Field(discriminator="kind"),
    BeforeValidator(_coerce_numeric),
]

MixedStr = Annotated[Union[Mixed, str], BeforeValidator(_mixed_marker)]
MixedFontName = Annotated[Union[Mixed, FontName], BeforeValidator(_mixed_marker)]
MixedPaints = Annotated[Union[Mixed, list[Paint]], BeforeValidator(_mixed_marker)]


def is_mixed(value: Any) -> bool:
    """Check whether a host value is the indeterminate marker."""
    return isinstance(value, Mixed)


def numeric_or(value: Optional[Union[Uniform, UniformWithUnit, Mixed]], default: float) -> float:
    """Collapse a numeric variant to a number, using ``default`` when indeterminate."""
    if value is None or isinstance(value, Mixed):
        return default
    if value.value is None:
        return default
    return float(value.value)
