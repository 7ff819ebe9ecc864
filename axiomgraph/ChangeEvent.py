"""Standardized workspace change payloads.

This module defines ``ChangeEvent``, the immutable structure passed to
callbacks registered with :meth:`axiomgraph.workspace.Workspace.add_hook`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

__all__ = ["ChangeEvent", "REASONS"]

REASONS = frozenset({"added", "replaced", "removed", "parameter", "view"})


@dataclass(frozen=True)
class ChangeEvent:
    """Normalized change event emitted by a workspace.

    Parameters
    ----------
    reason : str
        One of ``"added"``, ``"replaced"``, ``"removed"``, ``"parameter"`` or
        ``"view"``.
    key : str or None
        Key of the affected definition (``None`` for view changes).
    old : Any
        Previous definition, parameter value or view.
    new : Any
        Updated definition, parameter value or view (``None`` on removal).

    Examples
    --------
    >>> ChangeEvent("parameter", "a", 1.0, 2.0).new
    2.0
    """

    reason: str
    key: Optional[str]
    old: Any
    new: Any

    def __post_init__(self) -> None:
        if self.reason not in REASONS:
            raise ValueError(f"Unknown change reason {self.reason!r}")
