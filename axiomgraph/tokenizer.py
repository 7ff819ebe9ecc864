"""Character-level scanner for the expression mini-language.

The scanner hands out one token at a time on request from the parser:
numbers (digit/decimal-point runs), lowercase identifiers, the operator and
punctuation characters ``+ - * / ^ ( )``, and the ``{N}`` parameter suffix
used by ``root{3}(x)`` or ``log{2}(x)``. Only the ASCII space is skipped.
"""

from __future__ import annotations

from typing import Optional

from .errors import UnclosedParameter, UnexpectedToken

__all__ = ["Tokenizer", "OPERATOR_CHARS"]

OPERATOR_CHARS = frozenset("+-*/^()")
_DIGITS = frozenset("0123456789.")


class Tokenizer:
    """Cursor over an expression string.

    Parameters
    ----------
    text : str
        Expression text. It is scanned as-is (no case folding).

    Examples
    --------
    >>> tok = Tokenizer("  12.5*x")
    >>> tok.skip_spaces(); tok.read_number()
    12.5
    >>> tok.eat("*")
    True
    >>> tok.read_name()
    'x'
    """

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    @property
    def text(self) -> str:
        return self._text

    @property
    def position(self) -> int:
        return self._pos

    def skip_spaces(self) -> None:
        while self._pos < len(self._text) and self._text[self._pos] == " ":
            self._pos += 1

    def at_end(self) -> bool:
        """Return True when only spaces remain."""
        self.skip_spaces()
        return self._pos >= len(self._text)

    def peek(self) -> Optional[str]:
        """Return the next non-space character without consuming it."""
        self.skip_spaces()
        if self._pos >= len(self._text):
            return None
        return self._text[self._pos]

    def eat(self, char: str) -> bool:
        """Consume ``char`` if it is the next non-space character."""
        if self.peek() == char:
            self._pos += 1
            return True
        return False

    def expect(self, char: str) -> None:
        """Consume ``char`` or raise :class:`UnexpectedToken`."""
        if not self.eat(char):
            raise self.unexpected(hint=f"Expected {char!r}.")

    def unexpected(self, *, hint: str = "") -> UnexpectedToken:
        """Build an error describing the character under the cursor."""
        return UnexpectedToken(self.peek(), self._pos, hint=hint)

    def at_number(self) -> bool:
        char = self.peek()
        return char is not None and char in _DIGITS

    def at_letter(self) -> bool:
        char = self.peek()
        return char is not None and "a" <= char <= "z"

    def read_number(self) -> float:
        """Consume a digit/decimal-point run and return its value."""
        self.skip_spaces()
        start = self._pos
        while self._pos < len(self._text) and self._text[self._pos] in _DIGITS:
            self._pos += 1
        literal = self._text[start:self._pos]
        try:
            return float(literal)
        except ValueError:
            raise UnexpectedToken(
                literal[0] if literal else None,
                start,
                hint=f"{literal!r} is not a valid number.",
            ) from None

    def read_name(self) -> str:
        """Consume a run of lowercase ASCII letters."""
        self.skip_spaces()
        start = self._pos
        while self._pos < len(self._text) and "a" <= self._text[self._pos] <= "z":
            self._pos += 1
        return self._text[start:self._pos]

    def read_parameter(self) -> Optional[float]:
        """Consume an optional ``{digits}`` suffix.

        Returns ``None`` when no ``{`` follows. Raises
        :class:`UnclosedParameter` when the brace is opened but not closed
        by digits then ``}``.
        """
        if not self.eat("{"):
            return None
        opened_at = self._pos - 1
        start = self._pos
        while self._pos < len(self._text) and self._text[self._pos] in _DIGITS:
            self._pos += 1
        literal = self._text[start:self._pos]
        if not literal or not self.eat("}"):
            raise UnclosedParameter(opened_at)
        try:
            return float(literal)
        except ValueError:
            raise UnclosedParameter(opened_at) from None
