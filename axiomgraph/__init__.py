"""Top-level public API for the ``axiomgraph`` package.

This module re-exports the expression engine and the workspace layer so users
can import from a single namespace, for example:

>>> from axiomgraph import Workspace, evaluate, find_intersections  # doctest: +SKIP

The low-level pieces (tokenizer, parser, evaluator, domains, samplers) are
exposed alongside the stateful :class:`Workspace` for consumers that drive
their own rendering.
"""

from typing import Tuple, Union

import numpy as np

from .ChangeEvent import ChangeEvent
from .classifier import classify
from .config import DEFAULT_CONFIG, EngineConfig
from .definitions import (
    Constant,
    Definition,
    Equation,
    ExplicitSet,
    Inequation,
    Parameter,
    Point,
    RangeSet,
    RegularFunction,
    display_string,
    domain_for,
)
from .domain import DiscreteDomain, Domain, IntervalDomain
from .environment import Environment
from .errors import *
from .evaluator import Evaluator, evaluate
from .InputConvert import InputConvert
from .intersections import IntersectionFinder, find_intersections
from .ParameterSnapshot import ParameterSnapshot
from .parser import Parser, parse
from .regions import RegionSamples, sample_region, satisfies
from .sampling import CurveSamples, sample_count, sample_curve
from .tokenizer import Tokenizer
from .traces import workspace_figure, workspace_traces
from .view import View
from .workspace import Workspace


def sample(domain: Domain, view: Union[View, Tuple[float, float]], n: int) -> np.ndarray:
    """Sample ``domain`` over the visible x-range.

    ``view`` is a :class:`View` (its ``x_range`` is used) or an
    ``(x_min, x_max)`` pair.

    >>> sample(IntervalDomain(), View((-1, 1), (-1, 1)), 3).tolist()
    [-1.0, 0.0, 1.0]
    """
    view_min, view_max = view.x_range if isinstance(view, View) else view
    return domain.sample_points(view_min, view_max, n)
