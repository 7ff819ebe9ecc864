"""Classify one input line into a :data:`~axiomgraph.definitions.Definition`.

Line forms overlap (``(a=b)`` is also a valid parenthesised expression,
``k=(1,2)`` and ``k=2`` both start with ``name=``), so the rules are tried in
a fixed priority order and the first one that claims the line wins:

1. ``(a <op> b)`` with ``op`` in ``>= <= > <``  -> :class:`Inequation`
2. ``(a = b)``                                  -> :class:`Equation`
3. ``name(x) = rhs``                            -> named :class:`RegularFunction`
4. ``name=[min:max]`` / ``name=[min..max]``     -> :class:`Parameter`
5. ``name={v1,...}`` / ``name={min:max}``       -> :class:`ExplicitSet` / :class:`RangeSet`
6. ``name=(xExpr, yExpr)``                      -> :class:`Point`
7. ``name=<expression without x>``              -> :class:`Constant`
8. anything else                                -> anonymous :class:`RegularFunction`

A rule either returns ``None`` (not my line), a definition, or raises a
:class:`~axiomgraph.errors.DefinitionError` when the line is clearly its form
but malformed.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, List, Optional, Tuple

from .definitions import (
    COMPARISON_OPERATORS,
    Constant,
    Definition,
    Equation,
    ExplicitSet,
    Inequation,
    Parameter,
    Point,
    RangeSet,
    RegularFunction,
)
from .environment import Environment
from .errors import DefinitionError, InvalidRange, MalformedParameter, MalformedPoint, MalformedSet
from .evaluator import Evaluator
from .expression_ast import Variable, iter_nodes
from .parser import RESERVED_NAMES

__all__ = ["classify", "RULES"]

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

Rule = Callable[[str, Optional[Environment]], Optional[Definition]]

_WRAPPED = re.compile(r"^ *\((.*)\) *$")
_NAMED_FUNCTION = re.compile(r"^ *([A-Za-z]+) *\( *x *\) *= *(.+)$")
_PARAMETER = re.compile(r"^ *([a-z]+) *= *\[(.*)\] *$")
_CONTINUOUS_RANGE = re.compile(r"^ *(-?\d+\.?\d*) *: *(-?\d+\.?\d*) *$")
_DISCRETE_RANGE = re.compile(r"^ *(-?\d+) *\.\. *(-?\d+) *$")
_SET = re.compile(r"^ *([a-z]+) *= *\{(.*)\} *$")
_SET_RANGE = re.compile(r"^ *(-?\d+) *: *(-?\d+) *$")
_NUMBER = re.compile(r"^-?(\d+\.?\d*|\.\d+)$")
_POINT = re.compile(r"^ *([a-z]+) *= *\((.*)\) *$")
_CONSTANT = re.compile(r"^ *([a-z]+) *= *(.+)$")


def _check_name(name: str) -> str:
    if name in RESERVED_NAMES:
        raise DefinitionError(
            f"'{name}' is a reserved name and cannot be redefined",
            hint="Choose another name; x, pi, e and built-in function names are reserved.",
        )
    return name


def _outer_parens_wrap(inner: str) -> bool:
    """True if ``(inner)`` is one parenthesised group rather than ``(a)...(b)``."""
    depth = 0
    for ch in inner:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth < 0:
                return False
    return depth == 0


def _wrapped_content(line: str) -> Optional[str]:
    m = _WRAPPED.match(line)
    if m is None or not _outer_parens_wrap(m.group(1)):
        return None
    return m.group(1)


# ---------------------------------------------------------------------------
# Rules, in priority order


def _inequation(line: str, env: Optional[Environment]) -> Optional[Definition]:
    inner = _wrapped_content(line)
    if inner is None:
        return None
    # Two-character operators first so ">=" never splits as ">" plus "=...".
    for op in COMPARISON_OPERATORS:
        idx = inner.find(op)
        if idx < 0:
            continue
        left, right = inner[:idx].strip(" "), inner[idx + len(op):].strip(" ")
        if "=" in left or "=" in right:
            return None
        if left and right:
            return Inequation(None, left, op, right)
    return None


def _equation(line: str, env: Optional[Environment]) -> Optional[Definition]:
    inner = _wrapped_content(line)
    if inner is None or "=" not in inner:
        return None
    left, _, right = inner.partition("=")
    left, right = left.strip(" "), right.strip(" ")
    if not left or not right:
        return None
    return Equation(None, left, right)


def _named_function(line: str, env: Optional[Environment]) -> Optional[Definition]:
    m = _NAMED_FUNCTION.match(line)
    if m is None:
        return None
    name = _check_name(m.group(1).lower())
    body = m.group(2).strip(" ")
    if env is not None:
        env.define_function(name, body)
    return RegularFunction(name, body)


def _parameter(line: str, env: Optional[Environment]) -> Optional[Definition]:
    m = _PARAMETER.match(line)
    if m is None:
        return None
    name = _check_name(m.group(1))
    content = m.group(2)
    discrete = _DISCRETE_RANGE.match(content)
    if discrete is not None:
        lo, hi = int(discrete.group(1)), int(discrete.group(2))
        if lo >= hi:
            raise InvalidRange(lo, hi)
        return Parameter(name, float(lo), float(hi), discrete=True)
    continuous = _CONTINUOUS_RANGE.match(content)
    if continuous is not None:
        lo, hi = float(continuous.group(1)), float(continuous.group(2))
        if lo >= hi:
            raise InvalidRange(lo, hi)
        return Parameter(name, lo, hi, discrete=False)
    raise MalformedParameter(
        f"Malformed parameter range [{content}]",
        hint="Use name=[min:max] for a real range or name=[min..max] for integers.",
    )


def _set(line: str, env: Optional[Environment]) -> Optional[Definition]:
    m = _SET.match(line)
    if m is None:
        return None
    name = _check_name(m.group(1))
    content = m.group(2).strip(" ")
    if not content:
        return ExplicitSet(name, ())
    span = _SET_RANGE.match(content)
    if span is not None:
        a, b = int(span.group(1)), int(span.group(2))
        return RangeSet(name, min(a, b), max(a, b))
    items = [item.strip(" ") for item in content.split(",")]
    if not all(_NUMBER.match(item) for item in items):
        raise MalformedSet(
            f"Malformed set {{{content}}}",
            hint="List numbers separated by commas, e.g. s={1,2.5,4}, or an integer range s={1:5}.",
        )
    return ExplicitSet(name, tuple(float(item) for item in items))


def _split_top_level(text: str) -> Tuple[List[str], int]:
    parts: List[str] = []
    depth = 0
    start = 0
    for i, ch in enumerate(text):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        elif ch == "," and depth == 0:
            parts.append(text[start:i])
            start = i + 1
    parts.append(text[start:])
    return parts, depth


def _point(line: str, env: Optional[Environment]) -> Optional[Definition]:
    m = _POINT.match(line)
    if m is None:
        return None
    name = _check_name(m.group(1))
    inner = m.group(2)
    if not _outer_parens_wrap(inner):
        if inner.count("(") != inner.count(")"):
            raise MalformedPoint(f"Unbalanced parentheses in point ({inner})")
        # e.g. k=(1+2)*(3): an expression, not a coordinate pair.
        return None
    parts, _ = _split_top_level(inner)
    if len(parts) == 1:
        return None
    if len(parts) != 2:
        raise MalformedPoint(
            f"Point ({inner}) must have exactly two coordinates",
            hint="Write name=(xExpr, yExpr).",
        )
    x_expr, y_expr = parts[0].strip(" "), parts[1].strip(" ")
    if not x_expr or not y_expr:
        raise MalformedPoint(f"Point ({inner}) has an empty coordinate", hint="Write name=(xExpr, yExpr).")
    return Point(name, x_expr, y_expr)


def _constant(line: str, env: Optional[Environment]) -> Optional[Definition]:
    m = _CONSTANT.match(line)
    if m is None:
        return None
    name = _check_name(m.group(1))
    expression = m.group(2).strip(" ")
    evaluator = Evaluator(env)
    tree = evaluator.compile(expression)
    if any(isinstance(node, Variable) for node in iter_nodes(tree)):
        return None
    return Constant(name, expression, float(evaluator.evaluate(tree, 0.0)))


def _anonymous(line: str, env: Optional[Environment]) -> Optional[Definition]:
    return RegularFunction(None, line.strip(" "))


RULES: Tuple[Tuple[str, Rule], ...] = (
    ("inequation", _inequation),
    ("equation", _equation),
    ("named function", _named_function),
    ("parameter", _parameter),
    ("set", _set),
    ("point", _point),
    ("constant", _constant),
    ("anonymous function", _anonymous),
)


def classify(line: str, env: Optional[Environment] = None) -> Definition:
    """Classify ``line`` into a definition.

    Parameters
    ----------
    line : str
        One committed input line.
    env : Environment, optional
        Receives named function registrations and supplies names for
        constant evaluation.

    Raises
    ------
    DefinitionError
        If the line has a recognised form but is malformed (for example
        ``a=[5:2]``).
    ExpressionError
        If a ``name=<expr>`` constant cannot be parsed or evaluated.

    Examples
    --------
    >>> classify("(x^2=2*x+1)")
    Equation(name=None, left='x^2', right='2*x+1')
    >>> classify("s={5:2}")
    RangeSet(name='s', minimum=2, maximum=5)
    """
    for label, rule in RULES:
        definition = rule(line, env)
        if definition is not None:
            logger.debug("Classified %r as %s", line, label)
            return definition
    raise AssertionError("the anonymous-function rule always matches")
