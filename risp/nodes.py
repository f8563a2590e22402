"""Analysed syntax tree nodes and the errors raised while analysing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .tokens import Span


class AnalyzeError(Exception):
    """Raised when a parsed form is not a valid program."""

    def __init__(self, message: str, span: Span) -> None:
        super().__init__(message)
        self.span = span


class InvalidArity(AnalyzeError):
    """A special form was given the wrong number of parts."""

    def __init__(self, form: str, span: Span) -> None:
        super().__init__(f"(invalid-arity :form '{form}' :at {span.lo})", span)
        self.form = form


class InvalidFnParams(AnalyzeError):
    """A function's parameter list or arity set is malformed."""

    def __init__(self, span: Span) -> None:
        super().__init__(f"(invalid-fn-params :at {span.lo})", span)


class InvalidBindings(AnalyzeError):
    """A binding form was not given a vector of bindings."""

    def __init__(self, span: Span) -> None:
        super().__init__(f"(invalid-bindings :at {span.lo})", span)


class OddBindings(AnalyzeError):
    """A binding vector held an odd number of forms."""

    def __init__(self, span: Span) -> None:
        super().__init__(f"(odd-bindings :at {span.lo})", span)


class InvalidBindingKey(AnalyzeError):
    """Something other than a symbol stood where a name was expected."""

    def __init__(self, span: Span) -> None:
        super().__init__(f"(invalid-binding-key :at {span.lo})", span)


class InvalidExpression(AnalyzeError):
    """A form cannot be evaluated, such as an empty list."""

    def __init__(self, span: Span) -> None:
        super().__init__(f"(invalid-expression :at {span.lo})", span)


@dataclass(frozen=True)
class Long:
    value: int


@dataclass(frozen=True)
class Double:
    value: float


@dataclass(frozen=True)
class Bool:
    value: bool


@dataclass(frozen=True)
class Nil:
    pass


@dataclass(frozen=True)
class Str:
    value: str


@dataclass(frozen=True)
class Keyword:
    name: str


@dataclass(frozen=True)
class Var:
    """A reference to a local binding, by its id."""

    id: int


@dataclass(frozen=True)
class GlobalVar:
    """A reference to a name not bound locally."""

    name: str


@dataclass(frozen=True)
class QualifiedVar:
    """A reference to a name inside a namespace."""

    ns: str
    name: str


@dataclass(frozen=True)
class And:
    args: tuple[AstNode, ...] = ()


@dataclass(frozen=True)
class Or:
    args: tuple[AstNode, ...] = ()


@dataclass(frozen=True)
class Def:
    name: str
    value: AstNode


@dataclass(frozen=True)
class Let:
    bindings: tuple[tuple[int, AstNode], ...]
    body: AstNode


@dataclass(frozen=True)
class FnArity:
    """One arity of a function: fixed parameter ids, an optional rest id, a body."""

    params: tuple[int, ...]
    body: AstNode
    variadic: int | None = None


@dataclass(frozen=True)
class Fn:
    arities: tuple[FnArity, ...]


@dataclass(frozen=True)
class Call:
    callee: AstNode
    args: tuple[AstNode, ...] = ()


@dataclass(frozen=True)
class If:
    cond: AstNode
    then: AstNode
    else_: AstNode | None = None


@dataclass(frozen=True)
class Do:
    body: tuple[AstNode, ...] = ()


@dataclass(frozen=True)
class Loop:
    bindings: tuple[tuple[int, AstNode], ...]
    body: AstNode


@dataclass(frozen=True)
class Recur:
    args: tuple[AstNode, ...] = ()


@dataclass(frozen=True)
class List:
    items: tuple[AstNode, ...] = ()


@dataclass(frozen=True)
class Vector:
    items: tuple[AstNode, ...] = ()


@dataclass(frozen=True)
class Map:
    pairs: tuple[tuple[AstNode, AstNode], ...] = ()


@dataclass(frozen=True)
class Set:
    items: tuple[AstNode, ...] = ()


@dataclass(frozen=True)
class Symbol:
    """A quoted symbol, kept as data rather than resolved."""

    name: str


Node = Union[
    Long,
    Double,
    Bool,
    Nil,
    Str,
    Keyword,
    Var,
    GlobalVar,
    QualifiedVar,
    And,
    Or,
    Def,
    Let,
    Fn,
    Call,
    If,
    Do,
    Loop,
    Recur,
    List,
    Vector,
    Map,
    Set,
    Symbol,
]


@dataclass(frozen=True)
class AstNode:
    """An analysed node together with the span of source it came from."""

    node: Node
    span: Span