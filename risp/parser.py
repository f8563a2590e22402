"""Build a concrete syntax tree from a list of tokens."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .cst import Expr, ExprKind
from .tokens import Span, Token, TokenKind


class ParseError(Exception):
    """Raised when the token stream does not form well-nested expressions."""

    def __init__(self, message: str, span: Span) -> None:
        super().__init__(message)
        self.span = span


class UnmatchedOpen(ParseError):
    """An opening delimiter or quote was never closed."""

    def __init__(self, span: Span) -> None:
        super().__init__(f"(unmatched-open :at {span.lo})", span)


class UnmatchedClose(ParseError):
    """A closing delimiter appeared with nothing open."""

    def __init__(self, char: str, span: Span) -> None:
        super().__init__(f"(unmatched-close :char '{char}' :at {span.lo})", span)
        self.char = char


class MismatchedDelimiter(ParseError):
    """A closing delimiter did not match the innermost open one."""

    def __init__(self, expected: str, found: str, span: Span) -> None:
        super().__init__(
            f"(mismatched-delimiter :expected '{expected}' :found '{found}' :at {span.lo})",
            span,
        )
        self.expected = expected
        self.found = found


class OddMapElements(ParseError):
    """A map literal held an odd number of forms."""

    def __init__(self, span: Span) -> None:
        super().__init__(f"(odd-map-elements :at {span.lo})", span)


_CLOSERS = {
    ExprKind.LIST: ")",
    ExprKind.VECTOR: "]",
    ExprKind.MAP: "}",
    ExprKind.SET: "}",
}

_ATOMS = {
    TokenKind.LONG: ExprKind.LONG,
    TokenKind.DOUBLE: ExprKind.DOUBLE,
    TokenKind.STRING: ExprKind.STRING,
    TokenKind.KEYWORD: ExprKind.KEYWORD,
}

_CLOSE_TOKENS = {
    TokenKind.RPAREN: ")",
    TokenKind.RBRACKET: "]",
    TokenKind.RBRACE: "}",
}


@dataclass
class _Frame:
    kind: ExprKind
    span: Span
    items: list[Expr] = field(default_factory=list)


def _classify_symbol(text: str) -> tuple[ExprKind, object]:
    if text == "true":
        return ExprKind.BOOL, True
    if text == "false":
        return ExprKind.BOOL, False
    if text == "nil":
        return ExprKind.NIL, None
    if "/" in text and not text.startswith("/"):
        ns, name = text.split("/", 1)
        if not name or ("/" in name and name != "/"):
            return ExprKind.SYMBOL, text
        return ExprKind.QUALIFIED_SYMBOL, (ns, name)
    return ExprKind.SYMBOL, text


class _Parser:
    def __init__(self) -> None:
        self.stack: list[_Frame] = []
        self.result: list[Expr] = []
        self.pending_hash = False

    def run(self, tokens: Iterable[Token]) -> list[Expr]:
        for token in tokens:
            self.feed(token)
        if self.stack:
            raise UnmatchedOpen(self.stack[-1].span)
        return self.result

    def feed(self, token: Token) -> None:
        kind = token.kind
        if kind is TokenKind.LPAREN:
            self.pending_hash = False
            self.stack.append(_Frame(ExprKind.LIST, token.span))
        elif kind is TokenKind.LBRACKET:
            self.pending_hash = False
            self.stack.append(_Frame(ExprKind.VECTOR, token.span))
        elif kind is TokenKind.LBRACE:
            frame_kind = ExprKind.SET if self.pending_hash else ExprKind.MAP
            self.pending_hash = False
            self.stack.append(_Frame(frame_kind, token.span))
        elif kind is TokenKind.HASH:
            self.pending_hash = True
        elif kind is TokenKind.QUOTE:
            self.stack.append(_Frame(ExprKind.QUOTE, token.span))
        elif kind in _CLOSE_TOKENS:
            self.close(_CLOSE_TOKENS[kind], token.span)
        elif kind is TokenKind.SYMBOL:
            expr_kind, value = _classify_symbol(token.value)  # type: ignore[arg-type]
            self.push(Expr(expr_kind, value, token.span))
        else:
            self.push(Expr(_ATOMS[kind], token.value, token.span))

    def push(self, expr: Expr) -> None:
        while self.stack and self.stack[-1].kind is ExprKind.QUOTE:
            quote = self.stack.pop()
            expr = Expr(ExprKind.QUOTE, expr, quote.span.full(expr.span))
        if self.stack:
            self.stack[-1].items.append(expr)
        else:
            self.result.append(expr)

    def close(self, char: str, span: Span) -> None:
        if not self.stack:
            raise UnmatchedClose(char, span)
        frame = self.stack.pop()
        if frame.kind is ExprKind.QUOTE:
            raise UnmatchedOpen(frame.span)
        expected = _CLOSERS[frame.kind]
        if expected != char:
            raise MismatchedDelimiter(expected, char, frame.span)

        full = frame.span.full(span)
        if frame.kind is ExprKind.MAP:
            if len(frame.items) % 2:
                raise OddMapElements(span)
            pairs = tuple(zip(frame.items[::2], frame.items[1::2]))
            self.push(Expr(ExprKind.MAP, pairs, full))
        else:
            self.push(Expr(frame.kind, tuple(frame.items), full))


def parse(tokens: Iterable[Token]) -> list[Expr]:
    """Parse ``tokens`` into a list of top-level expressions.

    Raises a ``ParseError`` subclass when delimiters are unbalanced or a map
    literal has an odd number of forms.
    """
    return _Parser().run(tokens)