"""Immutable snapshots of parameter values.

A snapshot captures a ``name -> value`` mapping so code can perform
deterministic calculations (and key caches) without depending on the mutable
:class:`~axiomgraph.environment.Environment`.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Dict, Tuple


class ParameterSnapshot(Mapping[str, float]):
    """Immutable, hashable, ordered snapshot of parameter values.

    Parameters
    ----------
    values : Mapping[str, float]
        Source mapping keyed by parameter name. Values are coerced to
        ``float`` and insertion order is preserved.

    Examples
    --------
    >>> snap = ParameterSnapshot({"a": 1.5, "b": 2})
    >>> snap["b"]
    2.0
    >>> snap == ParameterSnapshot({"a": 1.5, "b": 2.0})
    True
    """

    def __init__(self, values: Mapping[str, float]) -> None:
        """Copy source values while preserving insertion order."""
        self._values: Dict[str, float] = {str(name): float(value) for name, value in values.items()}

    def __getitem__(self, key: str) -> float:
        """Return the value for ``key`` or raise a descriptive KeyError."""
        if not isinstance(key, str):
            raise KeyError(f"Unsupported key type {type(key).__name__}; use str.")
        try:
            return self._values[key]
        except KeyError:
            raise KeyError(
                f"Unknown parameter name {key!r}. Known names: {', '.join(self._values) or '(none)'}."
            ) from None

    def __iter__(self) -> Iterator[str]:
        """Iterate names in insertion order."""
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def items_key(self) -> Tuple[Tuple[str, float], ...]:
        """Return a name-sorted tuple usable as a cache key."""
        return tuple(sorted(self._values.items()))

    def __eq__(self, other: object) -> bool:
        """Compare snapshots by content, ignoring order."""
        if not isinstance(other, Mapping):
            return NotImplemented
        return dict(self.items()) == dict(other.items())

    def __hash__(self) -> int:
        return hash(self.items_key())

    def __repr__(self) -> str:
        return f"ParameterSnapshot({self._values!r})"
