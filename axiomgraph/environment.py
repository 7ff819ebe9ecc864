"""Named functions, parameter values, and sets visible during evaluation.

An :class:`Environment` is shared by reference across one evaluation pass
and is only written between passes: by the line classifier (function
registration) and by explicit parameter updates. It also owns the parse
cache, since whether a bare name parses as a call or a reference depends on
which names are defined.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple

from .ParameterSnapshot import ParameterSnapshot
from .expression_ast import Node
from .parser import Parser

__all__ = ["Environment"]

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


class Environment:
    """Mutable registry of user functions, values, and discrete sets.

    Function names are stored lower-cased. Every mutation bumps
    :attr:`version`; consumers compare versions to know when cached samples
    are stale.

    Examples
    --------
    >>> env = Environment()
    >>> env.define_function("F", "x^2")
    >>> env.function_source("f")
    'x^2'
    """

    def __init__(self) -> None:
        self._functions: Dict[str, str] = {}
        self._function_trees: Dict[str, Node] = {}
        self._values: Dict[str, float] = {}
        self._sets: Dict[str, Tuple[float, ...]] = {}
        self._parse_cache: Dict[str, Node] = {}
        self._version = 0

    @property
    def version(self) -> int:
        return self._version

    @property
    def functions(self) -> Mapping[str, str]:
        """Read-only ``name -> body text`` view."""
        return MappingProxyType(self._functions)

    @property
    def values(self) -> Mapping[str, float]:
        """Read-only ``name -> current value`` view."""
        return MappingProxyType(self._values)

    @property
    def sets(self) -> Mapping[str, Tuple[float, ...]]:
        return MappingProxyType(self._sets)

    # ------------------------------------------------------------------
    # Lookup

    def has_function(self, name: str) -> bool:
        return name.lower() in self._functions

    def has_value(self, name: str) -> bool:
        return name in self._values

    def has_set(self, name: str) -> bool:
        return name in self._sets

    def function_source(self, name: str) -> str:
        return self._functions[name.lower()]

    def function_tree(self, name: str) -> Node:
        """Return the parsed body of a user function (parsed once, then cached)."""
        key = name.lower()
        tree = self._function_trees.get(key)
        if tree is None:
            tree = Parser(self._functions[key].strip(" "), self).parse()
            self._function_trees[key] = tree
        return tree

    def value(self, name: str) -> float:
        return self._values[name]

    def set_values(self, name: str) -> Tuple[float, ...]:
        return self._sets[name]

    def compile(self, text: str) -> Node:
        """Parse ``text`` against the current names, reusing earlier parses."""
        key = text.strip(" ")
        tree = self._parse_cache.get(key)
        if tree is None:
            tree = Parser(key, self).parse()
            self._parse_cache[key] = tree
        return tree

    # ------------------------------------------------------------------
    # Mutation

    def define_function(self, name: str, body: str) -> None:
        """Register ``name(x) = body``; replaces any previous definition."""
        key = name.lower()
        self._functions[key] = body.strip(" ")
        self._names_changed()
        logger.debug("Registered function %s(x) = %s", key, body.strip(" "))

    def remove_function(self, name: str) -> None:
        if self._functions.pop(name.lower(), None) is not None:
            self._names_changed()

    def set_value(self, name: str, value: float) -> None:
        """Create or update a named value (parameter or constant)."""
        is_new = name not in self._values
        self._values[name] = float(value)
        if is_new:
            self._names_changed()
        else:
            self._version += 1

    def remove_value(self, name: str) -> None:
        if self._values.pop(name, None) is not None:
            self._names_changed()

    def define_set(self, name: str, values: Iterable[float]) -> None:
        self._sets[name] = tuple(float(v) for v in values)
        self._version += 1

    def remove_set(self, name: str) -> None:
        if self._sets.pop(name, None) is not None:
            self._version += 1

    def _names_changed(self) -> None:
        # Call-vs-reference decisions depend on the name set, so parses are stale.
        self._parse_cache.clear()
        self._function_trees.clear()
        self._version += 1

    # ------------------------------------------------------------------

    def snapshot(self, names: Optional[Iterable[str]] = None) -> ParameterSnapshot:
        """Return an immutable snapshot of values (restricted to ``names`` if given)."""
        if names is None:
            return ParameterSnapshot(self._values)
        return ParameterSnapshot({n: self._values[n] for n in sorted(set(names)) if n in self._values})

    def __repr__(self) -> str:
        return (
            f"Environment(functions={self._functions!r}, values={self._values!r}, "
            f"sets={self._sets!r})"
        )
