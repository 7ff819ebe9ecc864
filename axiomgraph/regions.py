"""Sampling of inequality regions.

An inequation ``(left <op> right)`` is drawn as its boundary (the left side,
wherever both sides are finite) and a set of vertical fill spans covering the
x positions where the inequality holds.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

import numpy as np

from .config import EngineConfig, resolve_config
from .definitions import Inequation
from .evaluator import Evaluator
from .sampling import CurveSamples, VectorFunction, evaluate_samples, split_segments

__all__ = ["RegionSamples", "sample_region", "satisfies"]

_COMPARE: Dict[str, Callable[[np.ndarray, np.ndarray], np.ndarray]] = {
    ">=": operator.ge,
    "<=": operator.le,
    ">": operator.gt,
    "<": operator.lt,
}


@dataclass(frozen=True)
class RegionSamples:
    """Boundary curve plus fill spans ``(x, lower, upper)``."""

    boundary: CurveSamples
    spans: Tuple[Tuple[float, float, float], ...]

    def __len__(self) -> int:
        return len(self.spans)


def sample_region(
    left: VectorFunction,
    right: VectorFunction,
    op: str,
    x_min: float,
    x_max: float,
    *,
    config: Optional[EngineConfig] = None,
) -> RegionSamples:
    """Sample an inequality over ``[x_min, x_max]``.

    ``region_sample_count + 1`` evenly spaced positions are evaluated. A span
    runs between the two sides at each position where the comparison holds;
    positions where either side is non-finite produce neither boundary nor
    fill.

    Examples
    --------
    >>> region = sample_region(lambda x: x, lambda x: 0 * x, ">=", -1, 1)
    >>> region.spans[0][0] >= 0
    True
    """
    compare = _COMPARE.get(op)
    if compare is None:
        raise ValueError(f"Unknown comparison operator {op!r}")
    cfg = resolve_config(config)
    xs = np.linspace(x_min, x_max, cfg.region_sample_count + 1)
    ls = evaluate_samples(left, xs)
    rs = evaluate_samples(right, xs)
    valid = np.isfinite(ls) & np.isfinite(rs)
    boundary = CurveSamples(split_segments(xs, np.where(valid, ls, np.nan)))
    with np.errstate(invalid="ignore"):
        inside = valid & compare(ls, rs)
    lower = np.minimum(ls, rs)
    upper = np.maximum(ls, rs)
    spans = tuple((float(xs[i]), float(lower[i]), float(upper[i])) for i in np.flatnonzero(inside))
    return RegionSamples(boundary, spans)


def satisfies(inequation: Inequation, x: float, evaluator: Optional[Evaluator] = None) -> bool:
    """Return True if the inequality holds at ``x``.

    Evaluation failures and non-finite sides count as not satisfied.
    """
    evaluator = evaluator if evaluator is not None else Evaluator()
    xs = np.array([float(x)])
    left_value = float(evaluate_samples(evaluator.function(inequation.left), xs)[0])
    right_value = float(evaluate_samples(evaluator.function(inequation.right), xs)[0])
    return inequation.holds(left_value, right_value)
