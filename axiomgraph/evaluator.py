"""Numeric evaluation of expression trees.

Evaluation is vectorized: ``x`` may be a scalar or a NumPy array, and every
operation is a NumPy ufunc so IEEE-754 semantics apply throughout. Division
by zero gives ``inf``/``nan``; a negative base with a fractional exponent
gives ``nan``. Neither is an error.

User-defined functions are looked up in the :class:`Environment` at call
time and evaluated with their own ``x`` bound to the argument. A depth
counter stops runaway (self- or mutually) recursive definitions with
:class:`~axiomgraph.errors.RecursionLimit`.

Examples
--------
>>> evaluate("2+3*4", 0.0)
14.0
>>> evaluate("-2^2", 5.0)
-4.0
>>> import numpy as np
>>> evaluate("x^2", np.array([1.0, 2.0, 3.0]))
array([1., 4., 9.])
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, Union

import numpy as np

from .config import EngineConfig, resolve_config
from .environment import Environment
from .errors import EvalError, InvalidFunctionParameter, RecursionLimit, UndefinedReference, UnknownFunction
from .expression_ast import (
    BinaryOp,
    FunctionCall,
    Node,
    NumberLiteral,
    ParameterizedFunctionCall,
    Reference,
    UnaryOp,
    Variable,
)

__all__ = ["Evaluator", "evaluate", "ArrayOrFloat"]

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

ArrayOrFloat = Union[float, np.ndarray]

_BUILTINS: Dict[str, Callable[[np.ndarray], np.ndarray]] = {
    "sqrt": np.sqrt,
    "sin": np.sin,
    "cos": np.cos,
    "tan": np.tan,
    "log": np.log10,
    "ln": np.log,
    "abs": np.abs,
}

_BINARY: Dict[str, Callable[[np.ndarray, np.ndarray], np.ndarray]] = {
    "+": np.add,
    "-": np.subtract,
    "*": np.multiply,
    "/": np.divide,
    "^": np.power,
}


def _root(value: np.ndarray, degree: float) -> np.ndarray:
    if degree <= 0:
        raise InvalidFunctionParameter("root", degree)
    return np.power(value, 1.0 / degree)


def _log_base(value: np.ndarray, base: float) -> np.ndarray:
    # log{0} falls back to base 10
    if base <= 0:
        return np.log10(value)
    return np.log(value) / np.log(base)


_PARAMETERIZED: Dict[str, Callable[[np.ndarray, float], np.ndarray]] = {
    "root": _root,
    "log": _log_base,
}


class Evaluator:
    """Evaluate expressions against an environment.

    Parameters
    ----------
    env : Environment, optional
        Source of user functions and parameter values. A private empty
        environment is used when omitted.
    config : EngineConfig, optional
        Supplies ``max_call_depth``.
    """

    def __init__(self, env: Optional[Environment] = None, *, config: Optional[EngineConfig] = None) -> None:
        self.env = env if env is not None else Environment()
        self.config = resolve_config(config)

    def compile(self, expression: Union[str, Node]) -> Node:
        if isinstance(expression, str):
            return self.env.compile(expression)
        return expression

    def evaluate(self, expression: Union[str, Node], x: ArrayOrFloat) -> ArrayOrFloat:
        """Evaluate ``expression`` at ``x``.

        Returns a ``float`` for scalar ``x`` and a float array of the same
        shape for array ``x``.
        """
        tree = self.compile(expression)
        xs = np.asarray(x, dtype=float)
        try:
            with np.errstate(all="ignore"):
                result = self._eval(tree, xs, 0)
        except RecursionError:
            raise EvalError(
                "Expression is nested too deeply to evaluate",
                hint="Split long chains into named functions.",
            ) from None
        if xs.ndim == 0:
            return float(result)
        return np.array(np.broadcast_to(result, xs.shape), dtype=float)

    def function(self, expression: Union[str, Node]) -> Callable[[ArrayOrFloat], ArrayOrFloat]:
        """Return a callable ``f(x)`` bound to this evaluator."""
        tree = self.compile(expression)
        return lambda x: self.evaluate(tree, x)

    def _eval(self, node: Node, x: np.ndarray, depth: int) -> np.ndarray:
        if isinstance(node, NumberLiteral):
            return np.float64(node.value)
        if isinstance(node, Variable):
            return x
        if isinstance(node, Reference):
            if not self.env.has_value(node.name):
                raise UndefinedReference(node.name)
            return np.float64(self.env.value(node.name))
        if isinstance(node, BinaryOp):
            left = self._eval(node.left, x, depth)
            right = self._eval(node.right, x, depth)
            return _BINARY[node.operator](left, right)
        if isinstance(node, UnaryOp):
            operand = self._eval(node.operand, x, depth)
            return np.negative(operand) if node.operator == "-" else operand
        if isinstance(node, FunctionCall):
            return self._call(node, x, depth)
        if isinstance(node, ParameterizedFunctionCall):
            impl = _PARAMETERIZED.get(node.name)
            if impl is None:
                raise UnknownFunction(f"{node.name}{{{node.parameter:g}}}")
            return impl(self._eval(node.argument, x, depth), node.parameter)
        raise TypeError(f"Unsupported node type: {type(node).__name__}")

    def _call(self, node: FunctionCall, x: np.ndarray, depth: int) -> np.ndarray:
        argument = self._eval(node.argument, x, depth)
        if self.env.has_function(node.name):
            if depth >= self.config.max_call_depth:
                logger.debug("Call depth limit %d hit in %s(...)", depth, node.name)
                raise RecursionLimit(node.name, depth)
            body = self.env.function_tree(node.name)
            return self._eval(body, np.asarray(argument, dtype=float), depth + 1)
        impl = _BUILTINS.get(node.name)
        if impl is None:
            raise UnknownFunction(node.name)
        return impl(argument)


def evaluate(
    expression: Union[str, Node],
    x: ArrayOrFloat,
    env: Optional[Environment] = None,
    *,
    config: Optional[EngineConfig] = None,
) -> ArrayOrFloat:
    """Evaluate ``expression`` at ``x`` in ``env`` (convenience wrapper)."""
    return Evaluator(env, config=config).evaluate(expression, x)
