"""Legal input sets for definitions.

Two domain kinds exist:

- :class:`IntervalDomain` -- a continuous ``[min, max]`` whose bounds may be
  infinite and may be edited live (range edits from a parameter entry),
- :class:`DiscreteDomain` -- a fixed list of values, kept in input order.

Both answer ``contains(x)`` and ``sample_points(view_min, view_max, n)``;
samples always lie inside the visible range.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional, Tuple, Union

import numpy as np

from .config import EngineConfig, resolve_config

__all__ = ["IntervalDomain", "DiscreteDomain", "Domain"]


class IntervalDomain:
    """Continuous interval ``[minimum, maximum]``.

    Parameters
    ----------
    minimum, maximum : float
        Bounds; either may be infinite. ``minimum <= maximum`` is required.
    config : EngineConfig, optional
        Supplies ``max_domain_samples``.

    Examples
    --------
    >>> d = IntervalDomain(-math.inf, math.inf)
    >>> d.sample_points(-5, 5, 11).tolist()
    [-5.0, -4.0, -3.0, -2.0, -1.0, 0.0, 1.0, 2.0, 3.0, 4.0, 5.0]
    """

    def __init__(
        self,
        minimum: float = -math.inf,
        maximum: float = math.inf,
        *,
        config: Optional[EngineConfig] = None,
    ) -> None:
        minimum, maximum = float(minimum), float(maximum)
        if math.isnan(minimum) or math.isnan(maximum):
            raise ValueError("Interval bounds must not be NaN.")
        if minimum > maximum:
            raise ValueError(f"Interval minimum {minimum} exceeds maximum {maximum}.")
        self._min = minimum
        self._max = maximum
        self._config = resolve_config(config)

    @property
    def minimum(self) -> float:
        return self._min

    @minimum.setter
    def minimum(self, value: float) -> None:
        value = float(value)
        if value > self._max:
            raise ValueError(f"Interval minimum {value} exceeds maximum {self._max}.")
        self._min = value

    @property
    def maximum(self) -> float:
        return self._max

    @maximum.setter
    def maximum(self, value: float) -> None:
        value = float(value)
        if value < self._min:
            raise ValueError(f"Interval maximum {value} is below minimum {self._min}.")
        self._max = value

    def contains(self, x: float) -> bool:
        return self._min <= x <= self._max

    def sample_points(self, view_min: float, view_max: float, n: int) -> np.ndarray:
        """Return evenly spaced points over the domain/view intersection.

        Infinite domain bounds are clamped to the view. An empty or inverted
        intersection yields an empty array; otherwise ``n`` is clamped to
        ``[2, max_domain_samples]`` and both endpoints are included.
        """
        start = max(self._min, view_min)
        end = min(self._max, view_max)
        if math.isinf(self._min):
            start = view_min
        if math.isinf(self._max):
            end = view_max
        if math.isnan(start) or math.isnan(end) or math.isinf(start) or math.isinf(end) or start > end:
            return np.empty(0, dtype=float)
        count = max(2, min(int(n), self._config.max_domain_samples))
        return np.linspace(start, end, count)

    def __repr__(self) -> str:
        return f"IntervalDomain({self._min!r}, {self._max!r})"


class DiscreteDomain:
    """Finite set of values, in their original order.

    ``contains`` compares stored doubles for exact equality.

    Examples
    --------
    >>> DiscreteDomain([1, 2, 3, 10]).sample_points(0, 5, 100).tolist()
    [1.0, 2.0, 3.0]
    """

    def __init__(self, values: Iterable[float]) -> None:
        self._values: Tuple[float, ...] = tuple(float(v) for v in values)

    @property
    def values(self) -> Tuple[float, ...]:
        return self._values

    @property
    def minimum(self) -> float:
        return min(self._values) if self._values else math.nan

    @property
    def maximum(self) -> float:
        return max(self._values) if self._values else math.nan

    def contains(self, x: float) -> bool:
        return any(v == x for v in self._values)

    def sample_points(self, view_min: float, view_max: float, n: int = 0) -> np.ndarray:
        """Return the stored values inside ``[view_min, view_max]``; ``n`` is ignored."""
        return np.array([v for v in self._values if view_min <= v <= view_max], dtype=float)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DiscreteDomain):
            return NotImplemented
        return self._values == other._values

    def __hash__(self) -> int:
        return hash(self._values)

    def __repr__(self) -> str:
        return f"DiscreteDomain({list(self._values)!r})"


Domain = Union[IntervalDomain, DiscreteDomain]

