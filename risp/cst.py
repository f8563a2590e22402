"""Concrete syntax tree produced by the parser."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .tokens import Span


class ExprKind(Enum):
    """The shape of a parsed form.

    What ``Expr.value`` holds depends on the kind:

    * LONG: ``int``; DOUBLE: ``float``; BOOL: ``bool``; NIL: ``None``
    * STRING, KEYWORD, SYMBOL: ``str``
    * QUALIFIED_SYMBOL: a ``(ns, name)`` pair of strings
    * LIST, VECTOR, SET: a tuple of ``Expr``
    * MAP: a tuple of ``(key, value)`` pairs of ``Expr``
    * QUOTE: the quoted ``Expr``
    """

    LONG = "Long"
    DOUBLE = "Double"
    BOOL = "Bool"
    NIL = "Nil"
    STRING = "String"
    KEYWORD = "Keyword"
    SYMBOL = "Symbol"
    QUALIFIED_SYMBOL = "QualifiedSymbol"
    LIST = "List"
    VECTOR = "Vector"
    MAP = "Map"
    SET = "Set"
    QUOTE = "Quote"


@dataclass(frozen=True, eq=False)
class Expr:
    """A parsed form with its source span.

    Equality compares the kind and the value only; spans are ignored.
    """

    kind: ExprKind
    value: Any = None
    span: Span = Span(0, 0)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Expr):
            return NotImplemented
        return self.kind is other.kind and self.value == other.value

    def __hash__(self) -> int:
        return hash((self.kind, self.value))