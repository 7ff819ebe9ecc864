"""Engine tunables.

All sampling densities, root-finder tolerances, and recursion guards live in
one frozen :class:`EngineConfig`. Components take an optional ``config=``
keyword and fall back to :data:`DEFAULT_CONFIG`, so a single override object
can be threaded through a whole workspace.

Examples
--------
>>> from axiomgraph.config import DEFAULT_CONFIG
>>> fine = DEFAULT_CONFIG.replace(max_samples=20000)
>>> fine.max_samples
20000
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Optional

__all__ = ["EngineConfig", "DEFAULT_CONFIG", "resolve_config"]


@dataclass(frozen=True)
class EngineConfig:
    """Immutable numeric settings shared by samplers and the root finder.

    Parameters
    ----------
    min_samples, max_samples : int
        Bounds for the adaptive curve sample count.
    reference_view_range : float
        Visible x-span at which the zoom multiplier is 1.
    min_zoom_multiplier, max_zoom_multiplier : float
        Bounds for the zoom multiplier applied to the pixel width.
    min_intersection_samples, max_intersection_samples : int
        Bounds for the number of sign-change probes in the root finder.
    bisection_max_iterations : int
        Hard cap on bisection steps per bracket.
    bisection_epsilon : float
        Bracket width (and residual) below which bisection stops.
    deduplication_threshold : float
        Roots closer than this along x are reported once.
    region_sample_count : int
        Samples used for inequality boundaries and fills.
    max_domain_samples : int
        Upper clamp on interval-domain sampling.
    max_call_depth : int
        Nesting limit for user-defined function calls.
    max_nesting_depth : int
        Nesting limit for parentheses, signs and function arguments while
        parsing.
    """

    min_samples: int = 50
    max_samples: int = 5000
    reference_view_range: float = 20.0
    min_zoom_multiplier: float = 1.0
    max_zoom_multiplier: float = 10.0
    min_intersection_samples: int = 200
    max_intersection_samples: int = 1000
    bisection_max_iterations: int = 40
    bisection_epsilon: float = 1e-8
    deduplication_threshold: float = 1e-6
    region_sample_count: int = 500
    max_domain_samples: int = 10000
    max_call_depth: int = 64
    max_nesting_depth: int = 100

    def __post_init__(self) -> None:
        """Validate bound pairs and positivity."""
        pairs = (
            ("min_samples", "max_samples"),
            ("min_zoom_multiplier", "max_zoom_multiplier"),
            ("min_intersection_samples", "max_intersection_samples"),
        )
        for low, high in pairs:
            if getattr(self, low) > getattr(self, high):
                raise ValueError(f"{low} must not exceed {high}")
        for name in (
            "min_samples",
            "min_intersection_samples",
            "bisection_max_iterations",
            "region_sample_count",
            "max_domain_samples",
            "max_call_depth",
            "max_nesting_depth",
        ):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be >= 1")
        for name in ("reference_view_range", "bisection_epsilon", "deduplication_threshold"):
            if not getattr(self, name) > 0:
                raise ValueError(f"{name} must be > 0")

    def replace(self, **changes: Any) -> "EngineConfig":
        """Return a copy with ``changes`` applied (validated again)."""
        return dataclasses.replace(self, **changes)


DEFAULT_CONFIG = EngineConfig()


def resolve_config(config: Optional[EngineConfig]) -> EngineConfig:
    """Return ``config`` or the module default when it is ``None``."""
    return DEFAULT_CONFIG if config is None else config
