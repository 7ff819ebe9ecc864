"""Immutable syntax-tree nodes produced by :mod:`axiomgraph.parser`.

Nodes are frozen dataclasses; a tree is built once per expression text and
never mutated. Evaluation lives in :mod:`axiomgraph.evaluator` so the node
types stay plain data.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Union

__all__ = [
    "NumberLiteral",
    "Variable",
    "Reference",
    "BinaryOp",
    "UnaryOp",
    "FunctionCall",
    "ParameterizedFunctionCall",
    "Node",
    "iter_nodes",
    "referenced_names",
    "called_functions",
]


@dataclass(frozen=True)
class NumberLiteral:
    """Numeric literal, also used for the constants ``pi`` and ``e``."""

    value: float


@dataclass(frozen=True)
class Variable:
    """The bound input variable ``x``."""

    name: str = "x"


@dataclass(frozen=True)
class Reference:
    """A named value (parameter or constant) resolved at evaluation time."""

    name: str


@dataclass(frozen=True)
class BinaryOp:
    left: "Node"
    operator: str
    right: "Node"


@dataclass(frozen=True)
class UnaryOp:
    operator: str
    operand: "Node"


@dataclass(frozen=True)
class FunctionCall:
    """Call of a built-in or user-defined single-argument function."""

    name: str
    argument: "Node"


@dataclass(frozen=True)
class ParameterizedFunctionCall:
    """Call such as ``root{3}(x)`` where ``parameter`` is the braced number."""

    name: str
    argument: "Node"
    parameter: float


Node = Union[
    NumberLiteral,
    Variable,
    Reference,
    BinaryOp,
    UnaryOp,
    FunctionCall,
    ParameterizedFunctionCall,
]


def iter_nodes(node: Node) -> Iterator[Node]:
    """Yield ``node`` and all of its descendants, depth first."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        if isinstance(current, BinaryOp):
            stack.append(current.right)
            stack.append(current.left)
        elif isinstance(current, UnaryOp):
            stack.append(current.operand)
        elif isinstance(current, (FunctionCall, ParameterizedFunctionCall)):
            stack.append(current.argument)


def referenced_names(node: Node) -> frozenset[str]:
    """Return the names of all :class:`Reference` leaves in ``node``."""
    return frozenset(n.name for n in iter_nodes(node) if isinstance(n, Reference))


def called_functions(node: Node) -> frozenset[str]:
    """Return the names of all non-parameterized function calls in ``node``."""
    return frozenset(n.name for n in iter_nodes(node) if isinstance(n, FunctionCall))
