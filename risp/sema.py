"""Semantic analysis: turn parsed forms into a resolved syntax tree."""

from __future__ import annotations

from typing import Callable, Iterable

from .cst import Expr, ExprKind
from .nodes import (
    And,
    AstNode,
    Bool,
    Call,
    Def,
    Do,
    Double,
    Fn,
    FnArity,
    GlobalVar,
    If,
    InvalidArity,
    InvalidBindingKey,
    InvalidBindings,
    InvalidExpression,
    InvalidFnParams,
    Keyword,
    Let,
    List,
    Long,
    Loop,
    Map,
    Nil,
    OddBindings,
    Or,
    QualifiedVar,
    Recur,
    Set,
    Str,
    Symbol,
    Var,
    Vector,
)
from .scope import Scope
from .tokens import Span

_Forms = tuple[Expr, ...]


def analyze(cst: Iterable[Expr]) -> list[AstNode]:
    """Analyse top-level forms, resolving local names to binding ids.

    Raises an ``AnalyzeError`` subclass for a malformed special form.
    """
    scope = Scope()
    return [_analyze_expr(expr, scope) for expr in cst]


def _analyze_all(exprs: Iterable[Expr], scope: Scope) -> tuple[AstNode, ...]:
    return tuple(_analyze_expr(expr, scope) for expr in exprs)


def _analyze_expr(expr: Expr, scope: Scope) -> AstNode:
    kind, value, span = expr.kind, expr.value, expr.span
    if kind is ExprKind.LONG:
        return AstNode(Long(value), span)
    if kind is ExprKind.DOUBLE:
        return AstNode(Double(value), span)
    if kind is ExprKind.BOOL:
        return AstNode(Bool(value), span)
    if kind is ExprKind.NIL:
        return AstNode(Nil(), span)
    if kind is ExprKind.STRING:
        return AstNode(Str(value), span)
    if kind is ExprKind.KEYWORD:
        return AstNode(Keyword(value), span)
    if kind is ExprKind.SYMBOL:
        binding_id = scope.get_by_name(value)
        if binding_id is None:
            return AstNode(GlobalVar(value), span)
        return AstNode(Var(binding_id), span)
    if kind is ExprKind.QUALIFIED_SYMBOL:
        ns, name = value
        return AstNode(QualifiedVar(ns, name), span)
    if kind is ExprKind.LIST:
        return _analyze_list(value, span, scope)
    if kind is ExprKind.VECTOR:
        return AstNode(Vector(_analyze_all(value, scope)), span)
    if kind is ExprKind.MAP:
        pairs = tuple(
            (_analyze_expr(key, scope), _analyze_expr(val, scope)) for key, val in value
        )
        return AstNode(Map(pairs), span)
    if kind is ExprKind.SET:
        return AstNode(Set(_analyze_all(value, scope)), span)
    if kind is ExprKind.QUOTE:
        return _analyze_quoted(value, scope)
    raise InvalidExpression(span)


def _analyze_quoted(expr: Expr, scope: Scope) -> AstNode:
    if expr.kind is ExprKind.SYMBOL:
        return AstNode(Symbol(expr.value), expr.span)
    if expr.kind is ExprKind.LIST:
        items = tuple(_analyze_quoted(item, scope) for item in expr.value)
        return AstNode(List(items), expr.span)
    if expr.kind is ExprKind.VECTOR:
        items = tuple(_analyze_quoted(item, scope) for item in expr.value)
        return AstNode(Vector(items), expr.span)
    return _analyze_expr(expr, scope)


def _analyze_list(elems: _Forms, span: Span, scope: Scope) -> AstNode:
    if elems and elems[0].kind is ExprKind.SYMBOL:
        special = _SPECIAL_FORMS.get(elems[0].value)
        if special is not None:
            return special(elems, span, scope)
    return _analyze_call(elems, span, scope)


def _analyze_and(elems: _Forms, span: Span, scope: Scope) -> AstNode:
    return AstNode(And(_analyze_all(elems[1:], scope)), span)


def _analyze_or(elems: _Forms, span: Span, scope: Scope) -> AstNode:
    return AstNode(Or(_analyze_all(elems[1:], scope)), span)


def _analyze_do(elems: _Forms, span: Span, scope: Scope) -> AstNode:
    return AstNode(Do(_analyze_all(elems[1:], scope)), span)


def _analyze_recur(elems: _Forms, span: Span, scope: Scope) -> AstNode:
    return AstNode(Recur(_analyze_all(elems[1:], scope)), span)


def _symbol_name(expr: Expr) -> str:
    if expr.kind is not ExprKind.SYMBOL:
        raise InvalidBindingKey(expr.span)
    return expr.value


def _analyze_def(elems: _Forms, span: Span, scope: Scope) -> AstNode:
    if len(elems) != 3:
        raise InvalidArity("def", span)
    name = _symbol_name(elems[1])
    value = _analyze_expr(elems[2], scope)
    return AstNode(Def(name, value), span)


def _analyze_if(elems: _Forms, span: Span, scope: Scope) -> AstNode:
    if not 3 <= len(elems) <= 4:
        raise InvalidArity("if", span)
    cond = _analyze_expr(elems[1], scope)
    then = _analyze_expr(elems[2], scope)
    else_ = _analyze_expr(elems[3], scope) if len(elems) == 4 else None
    return AstNode(If(cond, then, else_), span)


def _analyze_bindings(
    bindings_expr: Expr, scope: Scope
) -> tuple[tuple[int, AstNode], ...]:
    if bindings_expr.kind is not ExprKind.VECTOR:
        raise InvalidBindings(bindings_expr.span)
    items = bindings_expr.value
    if len(items) % 2:
        raise OddBindings(bindings_expr.span)
    bindings = []
    for key, value in zip(items[::2], items[1::2]):
        binding_id = scope.bind(_symbol_name(key))
        bindings.append((binding_id, _analyze_expr(value, scope)))
    return tuple(bindings)


def _analyze_let(elems: _Forms, span: Span, scope: Scope) -> AstNode:
    if len(elems) != 3:
        raise InvalidArity("let", span)
    child = scope.enter_scope()
    bindings = _analyze_bindings(elems[1], child)
    body = _analyze_expr(elems[2], child)
    return AstNode(Let(bindings, body), span)


def _analyze_loop(elems: _Forms, span: Span, scope: Scope) -> AstNode:
    if len(elems) != 3:
        raise InvalidArity("loop", span)
    child = scope.enter_scope()
    bindings = _analyze_bindings(elems[1], child)
    body = _analyze_expr(elems[2], child)
    return AstNode(Loop(bindings, body), span)


def _analyze_fn_params(
    params_expr: Expr, scope: Scope
) -> tuple[tuple[int, ...], int | None]:
    if params_expr.kind is not ExprKind.VECTOR:
        raise InvalidFnParams(params_expr.span)
    param_exprs: _Forms = params_expr.value

    amp_pos = next(
        (
            pos
            for pos, expr in enumerate(param_exprs)
            if expr.kind is ExprKind.SYMBOL and expr.value == "&"
        ),
        None,
    )

    fixed = param_exprs
    variadic_name = None
    if amp_pos is not None:
        rest = param_exprs[amp_pos + 1 :]
        if len(rest) != 1:
            raise InvalidFnParams(params_expr.span)
        if rest[0].kind is not ExprKind.SYMBOL:
            raise InvalidFnParams(rest[0].span)
        variadic_name = rest[0].value
        fixed = param_exprs[:amp_pos]

    params = []
    for expr in fixed:
        if expr.kind is not ExprKind.SYMBOL:
            raise InvalidFnParams(expr.span)
        params.append(scope.bind(expr.value))

    variadic = scope.bind(variadic_name) if variadic_name is not None else None
    return tuple(params), variadic


def _analyze_fn_arity(params_expr: Expr, body_expr: Expr, scope: Scope) -> FnArity:
    child = scope.enter_scope()
    params, variadic = _analyze_fn_params(params_expr, child)
    body = _analyze_expr(body_expr, child)
    return FnArity(params, body, variadic)


def _validate_arities(arities: tuple[FnArity, ...], span: Span) -> None:
    seen_fixed: set[int] = set()
    variadic_count = 0
    for arity in arities:
        if arity.variadic is not None:
            variadic_count += 1
            continue
        count = len(arity.params)
        if count in seen_fixed:
            raise InvalidFnParams(span)
        seen_fixed.add(count)
    if variadic_count > 1:
        raise InvalidFnParams(span)


def _analyze_arities(
    arity_exprs: _Forms, form: str, span: Span, scope: Scope
) -> tuple[FnArity, ...]:
    if not arity_exprs:
        raise InvalidArity(form, span)
    first = arity_exprs[0]
    if len(arity_exprs) == 1 and first.kind is ExprKind.VECTOR:
        raise InvalidArity(form, span)
    if len(arity_exprs) == 2 and first.kind is ExprKind.VECTOR:
        return (_analyze_fn_arity(first, arity_exprs[1], scope),)

    arities = []
    for arity_expr in arity_exprs:
        if arity_expr.kind is not ExprKind.LIST or len(arity_expr.value) != 2:
            raise InvalidFnParams(arity_expr.span)
        params_expr, body_expr = arity_expr.value
        arities.append(_analyze_fn_arity(params_expr, body_expr, scope))
    return tuple(arities)


def _analyze_fn(elems: _Forms, span: Span, scope: Scope) -> AstNode:
    if len(elems) < 2:
        raise InvalidArity("fn", span)
    arities = _analyze_arities(elems[1:], "fn", span, scope)
    _validate_arities(arities, span)
    return AstNode(Fn(arities), span)


def _analyze_defn(elems: _Forms, span: Span, scope: Scope) -> AstNode:
    if len(elems) < 3:
        raise InvalidArity("defn", span)
    name = _symbol_name(elems[1])
    arities = _analyze_arities(elems[2:], "defn", span, scope)
    _validate_arities(arities, span)
    return AstNode(Def(name, AstNode(Fn(arities), span)), span)


def _analyze_call(elems: _Forms, span: Span, scope: Scope) -> AstNode:
    if not elems:
        raise InvalidExpression(span)
    callee = _analyze_expr(elems[0], scope)
    return AstNode(Call(callee, _analyze_all(elems[1:], scope)), span)


_SPECIAL_FORMS: dict[str, Callable[[_Forms, Span, Scope], AstNode]] = {
    "if": _analyze_if,
    "let": _analyze_let,
    "fn": _analyze_fn,
    "defn": _analyze_defn,
    "def": _analyze_def,
    "do": _analyze_do,
    "loop": _analyze_loop,
    "recur": _analyze_recur,
    "and": _analyze_and,
    "or": _analyze_or,
}