"""Workspace: ordered definitions, shared environment and point caches.

Purpose
-------
``Workspace`` is the stateful layer consumers talk to. It classifies committed
lines, keeps the :class:`~axiomgraph.environment.Environment` in step with
them (functions, parameter values, sets, constants), computes the points of
each plottable definition for the current :class:`~axiomgraph.view.View`, and
notifies registered hooks about changes.

Notes
-----
Computed points are cached per definition. The cache key is the definition,
the view (ranges and pixel width), and a snapshot of everything the
definition's expressions reach: parameter values, set contents and the
sources of user functions called directly or transitively. Any change to one
of those recomputes on the next request; unrelated parameter changes do not.
"""

from __future__ import annotations

import itertools
import logging
import math
from collections.abc import Mapping
from typing import Any, Callable, Dict, Hashable, Iterator, List, Optional, Tuple, Union

from .ChangeEvent import ChangeEvent
from .classifier import classify
from .config import EngineConfig, resolve_config
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
    _round_half_up,
    display_string,
    domain_for,
    is_plottable,
)
from .environment import Environment
from .errors import ExpressionError, InvalidRange
from .evaluator import Evaluator
from .expression_ast import called_functions, referenced_names
from .InputConvert import InputConvert
from .intersections import IntersectionFinder
from .regions import RegionSamples, sample_region
from .sampling import CurveSamples, sample_count, sample_curve
from .view import View

__all__ = ["Workspace", "PointList", "Result"]

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

PointList = Tuple[Tuple[float, float], ...]
Result = Union[CurveSamples, RegionSamples, PointList]


def _expression_texts(definition: Definition) -> Tuple[str, ...]:
    if isinstance(definition, RegularFunction):
        return (definition.expression,)
    if isinstance(definition, (Equation, Inequation)):
        return (definition.left, definition.right)
    if isinstance(definition, Point):
        return (definition.x_expression, definition.y_expression)
    return ()


class Workspace(Mapping[str, Definition]):
    """Ordered collection of definitions sharing one environment.

    Acts like a read-only dictionary from definition key to definition.
    Named definitions are keyed by name; anonymous curves, equations and
    inequations get ``"#1"``, ``"#2"``, ... in order of addition.

    Parameters
    ----------
    view : View, optional
        Initial viewport. Defaults to ``View()``.
    config : EngineConfig, optional
        Sampling and root-finding tunables shared by every computation.

    Examples
    --------
    >>> ws = Workspace()
    >>> ws.add("a=[0:4]")
    Parameter(name='a', minimum=0.0, maximum=4.0, discrete=False)
    >>> ws.parameter_value("a")
    2.0
    >>> key = ws.key_of(ws.add("(x^2=a)"))
    >>> [round(x, 6) for x, _ in ws.points_for(key)]
    [-1.414214, 1.414214]
    """

    def __init__(self, view: Optional[View] = None, *, config: Optional[EngineConfig] = None) -> None:
        self.config = resolve_config(config)
        self.env = Environment()
        self.evaluator = Evaluator(self.env, config=self.config)
        self._finder = IntersectionFinder(self.evaluator, config=self.config)
        self._view = view if view is not None else View()
        self._definitions: Dict[str, Definition] = {}
        self._cache: Dict[str, Tuple[Hashable, Optional[Result]]] = {}
        self._hooks: Dict[Hashable, Callable[[ChangeEvent], Any]] = {}
        self._hook_counter = 0
        self._anonymous_counter = itertools.count(1)

    # ------------------------------------------------------------------
    # Mapping interface

    def __getitem__(self, key: str) -> Definition:
        return self._definitions[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def key_of(self, definition: Definition) -> str:
        """Return the key under which ``definition`` is stored."""
        for key, stored in self._definitions.items():
            if stored is definition:
                return key
        raise KeyError(f"Definition {definition!r} is not in this workspace.")

    def display_lines(self) -> List[str]:
        """Canonical text of every definition, in order."""
        return [display_string(d) for d in self._definitions.values()]

    # ------------------------------------------------------------------
    # Definitions

    def add(self, line: str) -> Definition:
        """Classify ``line`` and store the resulting definition.

        A definition whose name matches an existing one replaces it in place.

        Raises
        ------
        DefinitionError
            If the line is malformed (the workspace is left unchanged).
        ParseError
            If an expression in the line cannot be parsed.
        """
        previous_function = None
        match = line.split("(", 1)[0].strip(" ").lower()
        if match and self.env.has_function(match):
            previous_function = self.env.function_source(match)

        definition = classify(line, self.env)
        try:
            for text in _expression_texts(definition):
                self.env.compile(text)
        except ExpressionError:
            if isinstance(definition, RegularFunction) and definition.name:
                if previous_function is not None:
                    self.env.define_function(definition.name, previous_function)
                else:
                    self.env.remove_function(definition.name)
            raise

        name = getattr(definition, "name", None)
        key = name if name else f"#{next(self._anonymous_counter)}"
        old = self._definitions.get(key)
        old_value = None
        if isinstance(old, Parameter) and self.env.has_value(old.name):
            old_value = self.env.value(old.name)
        if old is not None:
            self._unregister(old, keep_function=isinstance(definition, RegularFunction))
        self._register(definition, old_value)
        self._definitions[key] = definition
        self._cache.pop(key, None)

        reason = "replaced" if old is not None else "added"
        logger.info("%s %s: %s", reason.capitalize(), key, display_string(definition))
        self._emit(ChangeEvent(reason, key, old, definition))
        return definition

    def remove(self, key: str) -> Definition:
        """Remove the definition stored under ``key`` and return it."""
        definition = self._definitions.pop(key)
        self._unregister(definition, keep_function=False)
        self._cache.pop(key, None)
        logger.info("Removed %s: %s", key, display_string(definition))
        self._emit(ChangeEvent("removed", key, definition, None))
        return definition

    def _register(self, definition: Definition, previous_value: Optional[float]) -> None:
        if isinstance(definition, Parameter):
            value = definition.initial_value
            if previous_value is not None:
                value = definition.clamp(previous_value)
            self.env.set_value(definition.name, value)
        elif isinstance(definition, (ExplicitSet, RangeSet)):
            self.env.define_set(definition.name, definition.values)
        elif isinstance(definition, Constant):
            self.env.set_value(definition.name, definition.value)

    def _unregister(self, definition: Definition, *, keep_function: bool) -> None:
        if isinstance(definition, RegularFunction) and definition.name:
            if not keep_function:
                self.env.remove_function(definition.name)
        elif isinstance(definition, (Parameter, Constant)):
            self.env.remove_value(definition.name)
        elif isinstance(definition, (ExplicitSet, RangeSet)):
            self.env.remove_set(definition.name)

    # ------------------------------------------------------------------
    # Parameters

    def parameter_value(self, name: str) -> float:
        return self.env.value(name)

    def _parameter(self, name: str) -> Parameter:
        definition = self._definitions.get(name)
        if not isinstance(definition, Parameter):
            raise KeyError(f"No parameter named {name!r}.")
        return definition

    def set_parameter(self, name: str, value: Any) -> float:
        """Set a parameter's value, clamped to its range (rounded if discrete).

        ``value`` may be a number or numeric text such as ``"pi/2"``.
        Returns the value actually stored.
        """
        parameter = self._parameter(name)
        new = parameter.clamp(InputConvert(value, float))
        old = self.env.value(name)
        if new == old:
            return new
        self.env.set_value(name, new)
        logger.debug("Parameter %s: %g -> %g", name, old, new)
        self._emit(ChangeEvent("parameter", name, old, new))
        return new

    def set_parameter_range(self, name: str, minimum: float, maximum: float) -> Parameter:
        """Edit a parameter's range; the current value is clamped into it."""
        old = self._parameter(name)
        minimum, maximum = InputConvert(minimum, float), InputConvert(maximum, float)
        if old.discrete:
            minimum, maximum = _round_half_up(minimum), _round_half_up(maximum)
        if minimum >= maximum:
            raise InvalidRange(minimum, maximum)
        updated = Parameter(name, minimum, maximum, old.discrete)
        self._definitions[name] = updated
        self.env.set_value(name, updated.clamp(self.env.value(name)))
        logger.info("Replaced %s: %s", name, display_string(updated))
        self._emit(ChangeEvent("replaced", name, old, updated))
        return updated

    # ------------------------------------------------------------------
    # View

    @property
    def view(self) -> View:
        return self._view

    @view.setter
    def view(self, view: View) -> None:
        if view == self._view:
            return
        old, self._view = self._view, view
        self._emit(ChangeEvent("view", None, old, view))

    # ------------------------------------------------------------------
    # Points

    def points_for(self, key: str) -> Optional[Result]:
        """Return the computed points of the definition under ``key``.

        Returns
        -------
        CurveSamples
            For functions.
        tuple of (x, y)
            For equations (intersection points) and points.
        RegionSamples
            For inequations.
        None
            For parameters, sets and constants, which are not drawn.
        """
        definition = self._definitions[key]
        cache_key = (definition, self._view, self._dependency_key(definition))
        cached = self._cache.get(key)
        if cached is not None and cached[0] == cache_key:
            logger.debug("Cache hit for %s", key)
            return cached[1]
        logger.debug("Computing points for %s", key)
        result = self._compute(definition)
        self._cache[key] = (cache_key, result)
        return result

    def all_points(self) -> Dict[str, Result]:
        """Points of every drawable definition, in definition order."""
        out: Dict[str, Result] = {}
        for key, definition in self._definitions.items():
            if is_plottable(definition):
                out[key] = self.points_for(key)
        return out

    def _dependency_key(self, definition: Definition) -> Hashable:
        names: set = set()
        functions: set = set()
        pending = []
        for text in _expression_texts(definition):
            try:
                pending.append(self.env.compile(text))
            except ExpressionError:
                continue
        while pending:
            tree = pending.pop()
            names |= referenced_names(tree)
            for fn in called_functions(tree):
                if fn in functions or not self.env.has_function(fn):
                    continue
                functions.add(fn)
                try:
                    pending.append(self.env.function_tree(fn))
                except ExpressionError:
                    continue
        values = self.env.snapshot(names)
        sets = tuple((n, self.env.set_values(n)) for n in sorted(names) if self.env.has_set(n))
        sources = tuple((f, self.env.function_source(f)) for f in sorted(functions))
        return (values, sets, sources)

    def _compute(self, definition: Definition) -> Optional[Result]:
        x_min, x_max = self._view.x_range
        if isinstance(definition, RegularFunction):
            count = sample_count(self._view.pixel_width, self._view.x_span, config=self.config)
            return sample_curve(
                self.evaluator.function(definition.expression),
                x_min,
                x_max,
                count,
                domain=domain_for(definition, config=self.config),
            )
        if isinstance(definition, Equation):
            return tuple(
                self._finder.find(definition.left, definition.right, x_min, x_max, self._view.pixel_width)
            )
        if isinstance(definition, Inequation):
            return sample_region(
                self.evaluator.function(definition.left),
                self.evaluator.function(definition.right),
                definition.operator,
                x_min,
                x_max,
                config=self.config,
            )
        if isinstance(definition, Point):
            return self._point_coordinates(definition)
        return None

    def _coordinate_values(self, text: str) -> List[float]:
        stripped = text.strip(" ")
        if self.env.has_set(stripped):
            return list(self.env.set_values(stripped))
        try:
            return [float(self.evaluator.evaluate(stripped, 0.0))]
        except ExpressionError as exc:
            logger.debug("Point coordinate %r failed: %s", stripped, exc)
            return []

    def _point_coordinates(self, point: Point) -> PointList:
        xs = self._coordinate_values(point.x_expression)
        ys = self._coordinate_values(point.y_expression)
        return tuple(
            (x, y) for x, y in itertools.product(xs, ys) if math.isfinite(x) and math.isfinite(y)
        )

    # ------------------------------------------------------------------
    # Hooks

    def add_hook(self, callback: Callable[[ChangeEvent], Any], hook_id: Optional[Hashable] = None) -> Hashable:
        """Register a change hook and return its id.

        Hooks run synchronously after each change. A hook that raises is
        logged and the remaining hooks still run.
        """
        if hook_id is None:
            self._hook_counter += 1
            hook_id = f"hook:{self._hook_counter}"
        self._hooks[hook_id] = callback
        return hook_id

    def remove_hook(self, hook_id: Hashable) -> None:
        self._hooks.pop(hook_id, None)

    def _emit(self, event: ChangeEvent) -> None:
        for hook_id, callback in list(self._hooks.items()):
            try:
                callback(event)
            except Exception:
                logger.exception("Change hook %r failed for %s event", hook_id, event.reason)
