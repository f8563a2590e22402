"""Turn program text into a flat list of tokens."""

from __future__ import annotations

import re

from .tokens import Span, Token, TokenKind

_DELIMITERS = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    "#": TokenKind.HASH,
    "'": TokenKind.QUOTE,
}

_WHITESPACE = frozenset(" \t\n\r")

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "\\": "\\", '"': '"'}

_LONG_RE = re.compile(r"[+-]?[0-9]+")
_DOUBLE_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)

_LONG_MIN = -(2**63)
_LONG_MAX = 2**63 - 1


def _parse_long(text: str) -> int | None:
    if not _LONG_RE.fullmatch(text):
        return None
    value = int(text)
    return value if _LONG_MIN <= value <= _LONG_MAX else None


def _parse_double(text: str) -> float | None:
    if not _DOUBLE_RE.fullmatch(text):
        return None
    return float(text)


class _Lexer:
    def __init__(self) -> None:
        self.tokens: list[Token] = []
        self.buffer: list[str] = []
        self.buffer_lo = 0
        self.in_comment = False
        self.in_string = False
        self.escape_next = False

    def feed(self, ch: str, offset: int) -> None:
        if self.in_comment:
            if ch in "\n\r":
                self.in_comment = False
            return

        if self.in_string:
            if self.escape_next:
                self.escape_next = False
                self.push_char(_ESCAPES.get(ch, ch), offset)
                return
            if ch != '"':
                if ch == "\\":
                    self.escape_next = True
                else:
                    self.push_char(ch, offset)
                return

        kind = _DELIMITERS.get(ch)
        if kind is not None:
            self.flush(offset)
            self.tokens.append(Token(kind, Span.at(offset)))
        elif ch in _WHITESPACE:
            self.flush(offset)
        elif ch == ";":
            self.flush(offset)
            self.in_comment = True
        elif ch == '"':
            if self.in_string:
                self.flush(offset + 1)
                self.in_string = False
            else:
                self.push_char(ch, offset)
                self.in_string = True
        else:
            self.push_char(ch, offset)

    def push_char(self, ch: str, offset: int) -> None:
        if not self.buffer:
            self.buffer_lo = offset
        self.buffer.append(ch)

    def flush(self, hi: int) -> None:
        if not self.buffer:
            return
        text = "".join(self.buffer)
        self.tokens.append(self.classify(text, Span(self.buffer_lo, hi)))
        self.buffer.clear()

    def classify(self, text: str, span: Span) -> Token:
        if self.in_string:
            return Token(TokenKind.STRING, span, text[1:])
        if text.startswith(":"):
            return Token(TokenKind.KEYWORD, span, text[1:])
        long_value = _parse_long(text)
        if long_value is not None:
            return Token(TokenKind.LONG, span, long_value)
        double_value = _parse_double(text)
        if double_value is not None:
            return Token(TokenKind.DOUBLE, span, double_value)
        return Token(TokenKind.SYMBOL, span, text)


def tokenize(program: str) -> list[Token]:
    """Split ``program`` into tokens; spans are byte offsets into its UTF-8 form."""
    lexer = _Lexer()
    offset = 0
    for ch in program:
        lexer.feed(ch, offset)
        offset += len(ch.encode("utf-8"))
    lexer.flush(offset)
    return lexer.tokens