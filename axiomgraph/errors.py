"""Error taxonomy for parsing, evaluation, and line classification.

All errors derive from :class:`ExpressionError` (itself a ``ValueError``) so
callers that sample many points can recover from any single bad sample with
one ``except`` clause while unrelated failures still propagate.

Three families exist:

- :class:`ParseError` for malformed expression text,
- :class:`EvalError` for well-formed text that cannot be evaluated,
- :class:`DefinitionError` for input lines that look like a definition form
  but carry invalid content.

Division by zero and invalid powers are *not* errors; they surface as IEEE
``inf``/``nan`` and are filtered at the sampling boundary.
"""

from __future__ import annotations

from typing import Optional

__all__ = [
    "ExpressionError",
    "ParseError",
    "UnexpectedToken",
    "UnclosedParameter",
    "NestingTooDeep",
    "EvalError",
    "UnknownFunction",
    "UndefinedReference",
    "RecursionLimit",
    "InvalidFunctionParameter",
    "DefinitionError",
    "InvalidRange",
    "MalformedSet",
    "MalformedPoint",
    "MalformedParameter",
]


class ExpressionError(ValueError):
    """Base class for every engine error.

    Parameters
    ----------
    message:
        Primary explanation of the failure.
    hint:
        Optional actionable next step for the user.
    """

    def __init__(self, message: str, *, hint: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class ParseError(ExpressionError):
    """Expression text could not be turned into a syntax tree."""


class UnexpectedToken(ParseError):
    """A character appeared where the grammar allows none of its alternatives.

    ``character`` is ``None`` when the input ended early.
    """

    def __init__(self, character: Optional[str], position: int, *, hint: str = "") -> None:
        shown = "end of input" if character is None else repr(character)
        super().__init__(f"Unexpected {shown} at position {position}", hint=hint)
        self.character = character
        self.position = position


class UnclosedParameter(ParseError):
    """A ``{`` parameter suffix was not closed by digits followed by ``}``."""

    def __init__(self, position: int) -> None:
        super().__init__(
            f"Expected '}}' after function parameter at position {position}",
            hint="Write parameterized functions as root{3}(x) or log{2}(x).",
        )
        self.position = position


class NestingTooDeep(ParseError):
    def __init__(self, limit: int, position: int) -> None:
        super().__init__(
            f"Expression nested deeper than {limit} levels at position {position}",
            hint="Remove redundant parentheses or split the expression into named functions.",
        )
        self.limit = limit
        self.position = position


class EvalError(ExpressionError):
    """A parsed expression could not be evaluated."""


class UnknownFunction(EvalError):
    def __init__(self, name: str) -> None:
        super().__init__(
            f"Unknown function: {name}",
            hint="Built-ins are sqrt, sin, cos, tan, log, ln, abs, root{N}, log{N}.",
        )
        self.name = name


class UndefinedReference(EvalError):
    def __init__(self, name: str) -> None:
        super().__init__(
            f"Undefined name: {name}",
            hint=f"Define it first, for example {name}=[0:1].",
        )
        self.name = name


class RecursionLimit(EvalError):
    """User-defined functions called each other deeper than the allowed depth."""

    def __init__(self, name: str, depth: int) -> None:
        super().__init__(
            f"Call depth {depth} exceeded while evaluating {name}(...)",
            hint="A function probably refers to itself, directly or through another function.",
        )
        self.name = name
        self.depth = depth


class InvalidFunctionParameter(EvalError):
    """A parameterized function got a ``{N}`` it cannot use, such as ``root{0}``."""

    def __init__(self, name: str, parameter: float) -> None:
        super().__init__(
            f"Invalid parameter for {name}{{{parameter:g}}}",
            hint=f"The degree of {name}{{N}} must be a positive number.",
        )
        self.name = name
        self.parameter = parameter


class DefinitionError(ExpressionError):
    """An input line matched a definition form but its content is invalid."""


class InvalidRange(DefinitionError):
    def __init__(self, minimum: float, maximum: float) -> None:
        super().__init__(
            f"Invalid range [{minimum}, {maximum}]: minimum must be below maximum",
            hint="Swap the bounds, e.g. a=[2:5].",
        )
        self.minimum = minimum
        self.maximum = maximum


class MalformedSet(DefinitionError):
    pass


class MalformedPoint(DefinitionError):
    pass


class MalformedParameter(DefinitionError):
    pass
