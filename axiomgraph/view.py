"""Visible window state for sampling.

Purpose
-------
``View`` holds the x/y ranges and the drawing width in pixels. Sampling
density and the intersection probe count derive from it, and it is part of
every workspace cache key.

Notes
-----
Views are immutable; ``zoom`` and ``pan`` return new instances. Event handling
(mouse wheels, drags) is left to consumers.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class View:
    """Viewport state.

    Parameters
    ----------
    x_range : tuple[float, float]
        Visible ``(x_min, x_max)``.
    y_range : tuple[float, float]
        Visible ``(y_min, y_max)``.
    pixel_width : int
        Width of the drawing area in pixels.
    """

    x_range: tuple[float, float] = (-10.0, 10.0)
    y_range: tuple[float, float] = (-10.0, 10.0)
    pixel_width: int = 800

    def __post_init__(self) -> None:
        for label, (lo, hi) in (("x_range", self.x_range), ("y_range", self.y_range)):
            if not (math.isfinite(lo) and math.isfinite(hi)) or lo >= hi:
                raise ValueError(f"{label} must be finite with min < max, got ({lo}, {hi})")
        if self.pixel_width < 1:
            raise ValueError(f"pixel_width must be positive, got {self.pixel_width}")
        object.__setattr__(self, "x_range", (float(self.x_range[0]), float(self.x_range[1])))
        object.__setattr__(self, "y_range", (float(self.y_range[0]), float(self.y_range[1])))

    @property
    def x_span(self) -> float:
        return self.x_range[1] - self.x_range[0]

    @property
    def y_span(self) -> float:
        return self.y_range[1] - self.y_range[0]

    def zoom(self, factor: float, center_x: Optional[float] = None, center_y: Optional[float] = None) -> "View":
        """Scale both ranges by ``factor`` about ``(center_x, center_y)``.

        ``factor < 1`` zooms in. The centre defaults to the middle of the
        view and keeps its relative position on screen.

        Examples
        --------
        >>> View((-10, 10), (-10, 10)).zoom(0.5).x_range
        (-5.0, 5.0)
        """
        if not (factor > 0 and math.isfinite(factor)):
            raise ValueError(f"zoom factor must be positive and finite, got {factor}")
        cx = 0.5 * (self.x_range[0] + self.x_range[1]) if center_x is None else float(center_x)
        cy = 0.5 * (self.y_range[0] + self.y_range[1]) if center_y is None else float(center_y)
        x_range = (cx + (self.x_range[0] - cx) * factor, cx + (self.x_range[1] - cx) * factor)
        y_range = (cy + (self.y_range[0] - cy) * factor, cy + (self.y_range[1] - cy) * factor)
        return replace(self, x_range=x_range, y_range=y_range)

    def pan(self, dx: float, dy: float = 0.0) -> "View":
        """Shift the view by ``(dx, dy)`` in data units."""
        return replace(
            self,
            x_range=(self.x_range[0] + dx, self.x_range[1] + dx),
            y_range=(self.y_range[0] + dy, self.y_range[1] + dy),
        )

    def resized(self, pixel_width: int) -> "View":
        return replace(self, pixel_width=int(pixel_width))
