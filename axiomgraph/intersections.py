"""Numeric intersection of two expressions.

``g(x) = left(x) - right(x)`` is probed at evenly spaced points; every
adjacent pair with a strict sign flip (both values finite) is refined by
bisection. A probe that lands exactly on a zero is reported directly.

This is best-effort: roots closer together than one probe interval and
tangential touches (no sign change) can be missed. The total cost is bounded
by ``samples * (1 + bisection_max_iterations)`` evaluations of each side.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Tuple, Union

import numpy as np

from .config import EngineConfig, resolve_config
from .environment import Environment
from .evaluator import Evaluator
from .expression_ast import Node
from .sampling import evaluate_samples

__all__ = ["IntersectionFinder", "find_intersections"]

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

Expression = Union[str, Node]


class IntersectionFinder:
    """Locate ``x`` where two expressions agree.

    Parameters
    ----------
    evaluator : Evaluator, optional
        Evaluator (and therefore environment) used for both sides.
    config : EngineConfig, optional
        Sampling bounds and bisection tolerances. Defaults to the
        evaluator's configuration.
    """

    def __init__(self, evaluator: Optional[Evaluator] = None, *, config: Optional[EngineConfig] = None) -> None:
        self.evaluator = evaluator if evaluator is not None else Evaluator(config=config)
        self.config = config if config is not None else self.evaluator.config

    def probe_count(self, sample_width: int) -> int:
        """Clamp the requested width to the configured probe bounds."""
        cfg = self.config
        return max(cfg.min_intersection_samples, min(cfg.max_intersection_samples, int(sample_width)))

    def find(
        self,
        left: Expression,
        right: Expression,
        x_min: float,
        x_max: float,
        sample_width: int,
    ) -> List[Tuple[float, float]]:
        """Return ``(x, y)`` intersection points in ascending ``x``.

        ``y`` is the value of ``left`` at the root. Points closer than
        ``deduplication_threshold`` along ``x`` are reported once.
        """
        left_fn = self.evaluator.function(left)
        right_fn = self.evaluator.function(right)

        def difference(xs: np.ndarray) -> np.ndarray:
            return evaluate_samples(left_fn, xs) - evaluate_samples(right_fn, xs)

        if x_min > x_max:
            x_min, x_max = x_max, x_min
        samples = self.probe_count(sample_width)
        xs = np.linspace(x_min, x_max, samples + 1)
        gs = difference(xs)

        roots: List[Tuple[float, float]] = []
        for i in range(len(xs)):
            if gs[i] == 0.0:
                self._accept(float(xs[i]), left_fn, roots)
            if i == 0:
                continue
            g_prev, g_cur = gs[i - 1], gs[i]
            if not (math.isfinite(g_prev) and math.isfinite(g_cur)):
                continue
            if (g_prev < 0.0 < g_cur) or (g_cur < 0.0 < g_prev):
                root = self._bisect(difference, float(xs[i - 1]), float(xs[i]), float(g_prev), float(g_cur))
                if root is not None:
                    self._accept(root, left_fn, roots)

        roots.sort()
        logger.debug("Found %d intersection(s) over [%g, %g] with %d probes", len(roots), x_min, x_max, samples)
        return roots

    def _bisect(self, difference, a: float, b: float, ga: float, gb: float) -> Optional[float]:
        cfg = self.config
        initial_residual = max(abs(ga), abs(gb))
        for _ in range(cfg.bisection_max_iterations):
            if b - a < cfg.bisection_epsilon:
                break
            m = 0.5 * (a + b)
            gm = float(difference(np.array([m]))[0])
            if not math.isfinite(gm):
                logger.debug("Abandoning bracket [%g, %g]: non-finite midpoint value", a, b)
                return None
            if gm == 0.0:
                return m
            if (gm < 0.0) == (ga < 0.0):
                a, ga = m, gm
            else:
                b, gb = m, gm
        root = 0.5 * (a + b)
        residual = float(difference(np.array([root]))[0])
        # A sign flip across a pole shrinks onto growing values, not a root.
        if not math.isfinite(residual) or abs(residual) > initial_residual:
            logger.debug("Rejecting bracket near x=%g: residual %g looks like a pole", root, residual)
            return None
        return root

    def _accept(self, root: float, left_fn, roots: List[Tuple[float, float]]) -> None:
        threshold = self.config.deduplication_threshold
        if any(abs(existing - root) < threshold for existing, _ in roots):
            return
        y = float(evaluate_samples(left_fn, np.array([root]))[0])
        if math.isfinite(y):
            roots.append((root, y))


def find_intersections(
    left_expr: Expression,
    right_expr: Expression,
    x_min: float,
    x_max: float,
    sample_width: int,
    *,
    env: Optional[Environment] = None,
    config: Optional[EngineConfig] = None,
) -> List[Tuple[float, float]]:
    """Find ``(x, y)`` where ``left_expr`` equals ``right_expr`` on ``[x_min, x_max]``.

    Examples
    --------
    >>> [(round(x, 6), round(y, 6)) for x, y in find_intersections("x^2", "4", -10, 10, 400)]
    [(-2.0, 4.0), (2.0, 4.0)]
    """
    cfg = resolve_config(config)
    finder = IntersectionFinder(Evaluator(env, config=cfg), config=cfg)
    return finder.find(left_expr, right_expr, x_min, x_max, sample_width)
