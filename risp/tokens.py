"""Token and source-span types produced by the lexer."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Union

TokenValue = Union[int, float, str, None]


@dataclass(frozen=True)
class Span:
    """A half-open range ``[lo, hi)`` of byte offsets into the source."""

    lo: int
    hi: int

    def full(self, other: Span) -> Span:
        """Return the span running from the start of this one to the end of ``other``."""
        return Span(self.lo, other.hi)

    @classmethod
    def at(cls, offset: int) -> Span:
        """Return the one-byte span starting at ``offset``."""
        return cls(offset, offset + 1)


class TokenKind(Enum):
    LONG = "Long"
    DOUBLE = "Double"
    SYMBOL = "Symbol"
    STRING = "String"
    KEYWORD = "Keyword"
    LPAREN = "LParen"
    RPAREN = "RParen"
    LBRACKET = "LBracket"
    RBRACKET = "RBracket"
    LBRACE = "LBrace"
    RBRACE = "RBrace"
    HASH = "Hash"
    QUOTE = "Quote"

    @property
    def carries_value(self) -> bool:
        return self in _VALUE_KINDS


_VALUE_KINDS = frozenset(
    {
        TokenKind.LONG,
        TokenKind.DOUBLE,
        TokenKind.SYMBOL,
        TokenKind.STRING,
        TokenKind.KEYWORD,
    }
)


def _format_double(value: float) -> str:
    """Format a float in plain decimal notation, dropping a zero fraction."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


@dataclass(frozen=True, eq=False)
class Token:
    """A lexical token.

    Equality compares the kind and the value only; spans are ignored.
    """

    kind: TokenKind
    span: Span
    value: TokenValue = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return self.kind is other.kind and self.value == other.value

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        prefix = f"{self.span.lo}..{self.span.hi} {self.kind.value}"
        if not self.kind.carries_value:
            return prefix
        if self.kind is TokenKind.DOUBLE:
            shown = _format_double(float(self.value))  # type: ignore[arg-type]
        else:
            shown = str(self.value)
        return f"{prefix}({shown})"

    __repr__ = __str__