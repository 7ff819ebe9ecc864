"""Definition variants produced by the line classifier.

Each committed input line becomes exactly one of the frozen dataclasses
below. The :data:`Definition` union is dispatched on with ``isinstance``
(see :func:`display_string`, :func:`domain_for` and
:mod:`axiomgraph.workspace`); the variants carry data only.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .config import EngineConfig
from .domain import DiscreteDomain, Domain, IntervalDomain

__all__ = [
    "RegularFunction",
    "Equation",
    "Inequation",
    "Parameter",
    "ExplicitSet",
    "RangeSet",
    "Point",
    "Constant",
    "Definition",
    "COMPARISON_OPERATORS",
    "display_string",
    "domain_for",
    "is_plottable",
]

COMPARISON_OPERATORS = (">=", "<=", ">", "<")


def _round_half_up(value: float) -> float:
    return float(math.floor(value + 0.5))


def _fmt(value: float) -> str:
    return f"{value:g}"


@dataclass(frozen=True)
class RegularFunction:
    """``y = expression``; ``name`` is set for ``f(x)=...`` lines."""

    name: Optional[str]
    expression: str


@dataclass(frozen=True)
class Equation:
    """``(left = right)``, drawn as its intersection points."""

    name: Optional[str]
    left: str
    right: str


@dataclass(frozen=True)
class Inequation:
    """``(left <op> right)``, drawn as a region boundary and fill."""

    name: Optional[str]
    left: str
    operator: str
    right: str

    def holds(self, left_value: float, right_value: float) -> bool:
        """Apply the comparison; non-finite sides never satisfy it."""
        if not (math.isfinite(left_value) and math.isfinite(right_value)):
            return False
        if self.operator == ">=":
            return left_value >= right_value
        if self.operator == "<=":
            return left_value <= right_value
        if self.operator == ">":
            return left_value > right_value
        if self.operator == "<":
            return left_value < right_value
        raise ValueError(f"Unknown comparison operator {self.operator!r}")


@dataclass(frozen=True)
class Parameter:
    """Slider-style value restricted to ``[minimum, maximum]``.

    Discrete parameters only take integer values.
    """

    name: str
    minimum: float
    maximum: float
    discrete: bool = False

    @property
    def initial_value(self) -> float:
        """Midpoint of the range (rounded for discrete parameters)."""
        return self.clamp(0.5 * (self.minimum + self.maximum))

    @property
    def step_count(self) -> int:
        """Number of integer positions for discrete parameters, else ``-1``."""
        if not self.discrete:
            return -1
        return int(self.maximum - self.minimum) + 1

    def clamp(self, value: float) -> float:
        clamped = max(self.minimum, min(self.maximum, float(value)))
        return _round_half_up(clamped) if self.discrete else clamped


@dataclass(frozen=True)
class ExplicitSet:
    name: str
    values: Tuple[float, ...]


@dataclass(frozen=True)
class RangeSet:
    """Every integer from ``minimum`` to ``maximum`` inclusive."""

    name: str
    minimum: int
    maximum: int

    @property
    def values(self) -> Tuple[float, ...]:
        return tuple(float(v) for v in range(self.minimum, self.maximum + 1))


@dataclass(frozen=True)
class Point:
    """``name=(x_expression, y_expression)``; coordinates may name parameters or sets."""

    name: str
    x_expression: str
    y_expression: str


@dataclass(frozen=True)
class Constant:
    """``name=<numeric expression>`` evaluated once at definition time."""

    name: str
    expression: str
    value: float


Definition = Union[RegularFunction, Equation, Inequation, Parameter, ExplicitSet, RangeSet, Point, Constant]


def _is_consecutive_run(values: Tuple[float, ...]) -> bool:
    if len(values) < 2 or not all(float(v).is_integer() for v in values):
        return False
    ordered = sorted(values)
    return all(b - a == 1 for a, b in zip(ordered, ordered[1:]))


def display_string(definition: Definition) -> str:
    """Render a definition back to its canonical input form.

    Examples
    --------
    >>> display_string(Parameter("a", 1, 5, discrete=True))
    'a=[1..5]'
    >>> display_string(ExplicitSet("s", (3.0, 1.0, 2.0)))
    's={1:3}'
    """
    if isinstance(definition, RegularFunction):
        if definition.name:
            return f"{definition.name}(x)={definition.expression}"
        return definition.expression
    if isinstance(definition, Equation):
        return f"({definition.left} = {definition.right})"
    if isinstance(definition, Inequation):
        return f"({definition.left} {definition.operator} {definition.right})"
    if isinstance(definition, Parameter):
        separator = ".." if definition.discrete else ":"
        return f"{definition.name}=[{_fmt(definition.minimum)}{separator}{_fmt(definition.maximum)}]"
    if isinstance(definition, (ExplicitSet, RangeSet)):
        values = definition.values
        if not values:
            return f"{definition.name}={{}}"
        if _is_consecutive_run(values):
            return f"{definition.name}={{{_fmt(min(values))}:{_fmt(max(values))}}}"
        return f"{definition.name}={{{','.join(_fmt(v) for v in values)}}}"
    if isinstance(definition, Point):
        return f"{definition.name}=({definition.x_expression}, {definition.y_expression})"
    if isinstance(definition, Constant):
        return f"{definition.name}={_fmt(definition.value)}"
    raise TypeError(f"Unsupported definition type: {type(definition).__name__}")


def domain_for(definition: Definition, *, config: Optional[EngineConfig] = None) -> Domain:
    """Return the input domain derived from a definition.

    Parameters range over their slider interval (integers only when
    discrete) and sets over their values. Every other definition gets the
    whole real line.
    """
    if isinstance(definition, Parameter):
        if definition.discrete:
            return DiscreteDomain(range(int(definition.minimum), int(definition.maximum) + 1))
        return IntervalDomain(definition.minimum, definition.maximum, config=config)
    if isinstance(definition, (ExplicitSet, RangeSet)):
        return DiscreteDomain(definition.values)
    return IntervalDomain(config=config)


def is_plottable(definition: Definition) -> bool:
    """Return True for definitions that produce points on the graph."""
    return isinstance(definition, (RegularFunction, Equation, Inequation, Point))
