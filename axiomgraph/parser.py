"""Recursive-descent parser for the expression mini-language.

Grammar, lowest precedence first::

    expression := term (('+' | '-') term)*
    term       := factor (('*' | '/') factor)*
    factor     := ('+' | '-') factor | primary ['^' factor]
    primary    := number | '(' expression ')' | identifier-form

``^`` is right-associative and binds tighter than a leading sign, so
``-2^2`` is ``-(2^2)``. A function name takes exactly one *factor* as its
argument, so ``sin x^2`` is ``sin(x^2)``.

Identifier resolution
---------------------
``pi`` and ``e`` become literals and ``x`` becomes the bound variable. Any
other name is a function call when it carries a ``{N}`` suffix, is a
built-in, or is a user function known to the environment. A name the
environment knows as a value becomes a :class:`Reference`. Names unknown at
parse time are calls when an argument follows directly (``(``, a digit or a
letter) and references otherwise; either way the lookup happens again at
evaluation time.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Optional

from .config import EngineConfig, resolve_config
from .errors import NestingTooDeep
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
from .tokenizer import Tokenizer

if TYPE_CHECKING:
    from .environment import Environment

__all__ = ["Parser", "parse", "BUILTIN_FUNCTIONS", "PARAMETERIZED_FUNCTIONS", "CONSTANTS", "RESERVED_NAMES"]

BUILTIN_FUNCTIONS = frozenset({"sqrt", "sin", "cos", "tan", "log", "ln", "abs"})
PARAMETERIZED_FUNCTIONS = frozenset({"root", "log"})
CONSTANTS = {"pi": math.pi, "e": math.e}
RESERVED_NAMES = frozenset({"x"}) | frozenset(CONSTANTS) | BUILTIN_FUNCTIONS | PARAMETERIZED_FUNCTIONS


class Parser:
    """Single-use parser over one expression string.

    Parameters
    ----------
    text : str
        Expression text, e.g. ``"2*sin(x)+a"``.
    env : Environment, optional
        Names known at parse time. Only used to decide between a call and a
        reference; values are never read here.
    config : EngineConfig, optional
        Supplies ``max_nesting_depth``.
    """

    def __init__(
        self, text: str, env: Optional["Environment"] = None, *, config: Optional[EngineConfig] = None
    ) -> None:
        self._tok = Tokenizer(text)
        self._env = env
        self._max_depth = resolve_config(config).max_nesting_depth
        self._depth = 0

    def parse(self) -> Node:
        """Parse the whole text or raise :class:`UnexpectedToken`."""
        node = self._expression()
        if not self._tok.at_end():
            raise self._tok.unexpected(hint="Check for a missing operator or a stray character.")
        return node

    def _expression(self) -> Node:
        node = self._term()
        while True:
            if self._tok.eat("+"):
                node = BinaryOp(node, "+", self._term())
            elif self._tok.eat("-"):
                node = BinaryOp(node, "-", self._term())
            else:
                return node

    def _term(self) -> Node:
        node = self._factor()
        while True:
            if self._tok.eat("*"):
                node = BinaryOp(node, "*", self._factor())
            elif self._tok.eat("/"):
                node = BinaryOp(node, "/", self._factor())
            else:
                return node

    def _factor(self) -> Node:
        if self._depth >= self._max_depth:
            raise NestingTooDeep(self._max_depth, self._tok.position)
        self._depth += 1
        try:
            return self._signed()
        finally:
            self._depth -= 1

    def _signed(self) -> Node:
        if self._tok.eat("+"):
            return UnaryOp("+", self._factor())
        if self._tok.eat("-"):
            return UnaryOp("-", self._factor())
        node = self._primary()
        if self._tok.eat("^"):
            node = BinaryOp(node, "^", self._factor())
        return node

    def _primary(self) -> Node:
        tok = self._tok
        if tok.eat("("):
            node = self._expression()
            tok.expect(")")
            return node
        if tok.at_number():
            return NumberLiteral(tok.read_number())
        if tok.at_letter():
            return self._identifier()
        raise tok.unexpected()

    def _identifier(self) -> Node:
        tok = self._tok
        name = tok.read_name()
        if name in CONSTANTS:
            return NumberLiteral(CONSTANTS[name])
        if name == "x":
            return Variable()

        parameter = tok.read_parameter()
        if parameter is not None:
            return ParameterizedFunctionCall(name, self._factor(), parameter)

        env = self._env
        if name in BUILTIN_FUNCTIONS or (env is not None and env.has_function(name)):
            return FunctionCall(name, self._factor())
        if env is not None and env.has_value(name):
            return Reference(name)
        if self._argument_follows():
            return FunctionCall(name, self._factor())
        return Reference(name)

    def _argument_follows(self) -> bool:
        char = self._tok.peek()
        return char is not None and (char == "(" or self._tok.at_number() or self._tok.at_letter())


def parse(text: str, env: Optional["Environment"] = None) -> Node:
    """Parse ``text`` into a syntax tree.

    Examples
    --------
    >>> parse("2+3*4")
    BinaryOp(left=NumberLiteral(value=2.0), operator='+', right=BinaryOp(left=NumberLiteral(value=3.0), operator='*', right=NumberLiteral(value=4.0)))
    """
    return Parser(text.strip(" "), env).parse()
