"""Adaptive sampling of continuous curves.

The sample count grows with the pixel width and with zoom: when the visible
x-span is narrower than ``reference_view_range`` the pixel width is scaled up
(bounded by ``max_zoom_multiplier``), and the result is clamped to
``[min_samples, max_samples]``.

Sampled curves are returned as :class:`CurveSamples`, a sequence of
*segments*. A non-finite or failed sample ends the current segment; consumers
must not interpolate across the gap.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import numpy as np

from .config import EngineConfig, resolve_config
from .domain import Domain, IntervalDomain
from .errors import ExpressionError

__all__ = ["sample_count", "evaluate_samples", "sample_curve", "split_segments", "CurveSamples"]

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

VectorFunction = Callable[[np.ndarray], np.ndarray]


def sample_count(pixel_width: int, view_range_x: float, *, config: Optional[EngineConfig] = None) -> int:
    """Return how many samples to take for a curve.

    Parameters
    ----------
    pixel_width : int
        Width of the drawing area in pixels.
    view_range_x : float
        Visible x-span (``x_max - x_min``).

    Examples
    --------
    >>> sample_count(800, 20.0)
    800
    >>> sample_count(800, 2.0)
    5000
    """
    cfg = resolve_config(config)
    if view_range_x > 0:
        multiplier = cfg.reference_view_range / view_range_x
    else:
        multiplier = cfg.max_zoom_multiplier
    multiplier = min(cfg.max_zoom_multiplier, max(cfg.min_zoom_multiplier, multiplier))
    count = int(round(max(0, pixel_width) * multiplier))
    return max(cfg.min_samples, min(cfg.max_samples, count))


def evaluate_samples(fn: VectorFunction, xs: np.ndarray) -> np.ndarray:
    """Evaluate ``fn`` over ``xs``; failed points become ``nan``.

    The whole array is tried first. If that raises an
    :class:`~axiomgraph.errors.ExpressionError`, points are evaluated one by
    one so a single bad sample only breaks its own neighbourhood.
    """
    xs = np.asarray(xs, dtype=float)
    try:
        with np.errstate(all="ignore"):
            ys = np.asarray(fn(xs), dtype=float)
        return np.array(np.broadcast_to(ys, xs.shape), dtype=float)
    except ExpressionError as exc:
        logger.debug("Vectorized evaluation failed (%s); falling back to pointwise", exc)

    ys = np.full(xs.shape, np.nan)
    for i, x in enumerate(xs):
        try:
            with np.errstate(all="ignore"):
                ys[i] = float(fn(np.float64(x)))
        except ExpressionError:
            continue
    return ys


def split_segments(xs: np.ndarray, ys: np.ndarray) -> Tuple[Tuple[np.ndarray, np.ndarray], ...]:
    """Split parallel arrays into runs where ``ys`` is finite."""
    finite = np.isfinite(ys)
    segments: List[Tuple[np.ndarray, np.ndarray]] = []
    start: Optional[int] = None
    for i, ok in enumerate(finite):
        if ok and start is None:
            start = i
        elif not ok and start is not None:
            segments.append((xs[start:i].copy(), ys[start:i].copy()))
            start = None
    if start is not None:
        segments.append((xs[start:].copy(), ys[start:].copy()))
    return tuple(segments)


@dataclass(frozen=True)
class CurveSamples:
    """Finite samples of one curve, grouped into unbroken segments."""

    segments: Tuple[Tuple[np.ndarray, np.ndarray], ...]

    @property
    def points(self) -> List[Tuple[float, float]]:
        """All finite samples as ``(x, y)`` pairs, in x order."""
        return [(float(x), float(y)) for xs, ys in self.segments for x, y in zip(xs, ys)]

    @property
    def break_count(self) -> int:
        return max(0, len(self.segments) - 1)

    def with_gaps(self) -> Tuple[np.ndarray, np.ndarray]:
        """Return flat ``x``/``y`` arrays with a ``nan`` between segments.

        This is the layout Plotly expects for a line with gaps.
        """
        if not self.segments:
            return np.empty(0), np.empty(0)
        xs_parts: List[np.ndarray] = []
        ys_parts: List[np.ndarray] = []
        for i, (xs, ys) in enumerate(self.segments):
            if i:
                xs_parts.append(np.array([np.nan]))
                ys_parts.append(np.array([np.nan]))
            xs_parts.append(xs)
            ys_parts.append(ys)
        return np.concatenate(xs_parts), np.concatenate(ys_parts)

    def __len__(self) -> int:
        return sum(len(xs) for xs, _ in self.segments)


def sample_curve(
    fn: VectorFunction,
    view_min: float,
    view_max: float,
    count: int,
    *,
    domain: Optional[Domain] = None,
) -> CurveSamples:
    """Sample ``fn`` at ``count`` evenly spaced x across the view.

    When ``domain`` is given the x positions come from
    ``domain.sample_points`` (a continuous domain restricts the span, a
    discrete one yields its visible values).
    """
    if domain is None:
        domain = IntervalDomain()
    xs = domain.sample_points(view_min, view_max, count)
    if xs.size == 0:
        return CurveSamples(())
    ys = evaluate_samples(fn, xs)
    return CurveSamples(split_segments(xs, ys))
