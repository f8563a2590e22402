import pytest

from risp.lexer import tokenize
from risp.nodes import (
    And,
    Bool,
    Call,
    Def,
    Do,
    Double,
    Fn,
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
from risp.parser import parse as parse_tokens
from risp.sema import analyze


def parse(source):
    return analyze(parse_tokens(tokenize(source)))


def first(source):
    return parse(source)[0].node


def analyze_error(source, error_type):
    with pytest.raises(error_type) as info:
        parse(source)
    return info.value


def test_analyzes_long():
    assert first("42") == Long(42)


def test_analyzes_double():
    assert first("3.14") == Double(3.14)


def test_analyzes_bool_true():
    assert first("true") == Bool(True)


def test_analyzes_bool_false():
    assert first("false") == Bool(False)


def test_analyzes_nil():
    assert first("nil") == Nil()


def test_analyzes_string():
    assert first('"hello"') == Str("hello")


def test_analyzes_keyword():
    assert first(":foo") == Keyword("foo")


def test_unknown_symbol_becomes_global_var():
    assert first("foo") == GlobalVar("foo")


def test_let_body_resolves_binding_as_var():
    node = first("(let [a 1] a)")
    assert isinstance(node, Let)
    assert node.body.node == Var(node.bindings[0][0])


def test_let_body_unknown_symbol_becomes_global_var():
    node = first("(let [a 1] foo)")
    assert node.body.node == GlobalVar("foo")


def test_let_sequential_bindings():
    node = first("(let [a 1 b a] b)")
    assert node.bindings[1][1].node == Var(node.bindings[0][0])


def test_fn_params_resolved_as_var_in_body():
    node = first("(fn [x] x)")
    arity = node.arities[0]
    assert arity.body.node == Var(arity.params[0])


def test_fn_body_unknown_symbol_becomes_global_var():
    node = first("(fn [x] foo)")
    assert node.arities[0].body.node == GlobalVar("foo")


def test_defn_body_resolves_params_as_var():
    node = first("(defn f [x] x)")
    assert isinstance(node, Def)
    arity = node.value.node.arities[0]
    assert arity.body.node == Var(arity.params[0])


def test_def_name_is_string():
    node = first("(def x 42)")
    assert node.name == "x"
    assert node.value.node == Long(42)


def test_defn_name_is_string():
    assert first("(defn foo [a] a)").name == "foo"


def test_let_binding_ids_are_unique():
    node = first("(let [a 1 b 2] a)")
    assert node.bindings[0][0] != node.bindings[1][0]
    assert node.body.node == Var(node.bindings[0][0])


def test_shadowed_var_resolves_to_inner_id():
    outer = first("(let [a 1] (let [a 2] a))")
    outer_id = outer.bindings[0][0]
    inner = outer.body.node
    inner_id = inner.bindings[0][0]
    assert inner.body.node == Var(inner_id)
    assert inner_id != outer_id


def test_analyzes_vector():
    node = first("[1 2 3]")
    assert isinstance(node, Vector)
    assert [item.node for item in node.items] == [Long(1), Long(2), Long(3)]


def test_analyzes_map():
    node = first("{:a 1}")
    assert isinstance(node, Map)
    assert len(node.pairs) == 1
    key, value = node.pairs[0]
    assert (key.node, value.node) == (Keyword("a"), Long(1))


def test_analyzes_set():
    node = first("#{1 2}")
    assert isinstance(node, Set)
    assert [item.node for item in node.items] == [Long(1), Long(2)]


def test_analyzes_if_with_else():
    node = first("(if true 1 2)")
    assert isinstance(node, If)
    assert node.cond.node == Bool(True)
    assert node.then.node == Long(1)
    assert node.else_.node == Long(2)


def test_analyzes_if_without_else():
    node = first("(if true 1)")
    assert isinstance(node, If)
    assert node.else_ is None


def test_error_if_too_few_args():
    assert analyze_error("(if true)", InvalidArity).form == "if"


def test_error_if_too_many_args():
    assert analyze_error("(if true 1 2 3)", InvalidArity).form == "if"


def test_analyzes_let():
    assert len(first("(let [a 1] a)").bindings) == 1


def test_analyzes_let_multiple_bindings():
    assert len(first("(let [a 1 b 2] a)").bindings) == 2


def test_error_let_bindings_not_vector():
    err = analyze_error("(let (a 1) a)", InvalidBindings)
    assert err.span.lo == 5


def test_error_let_odd_bindings():
    err = analyze_error("(let [a 1 b] a)", OddBindings)
    assert str(err) == "(odd-bindings :at 5)"


def test_error_let_non_symbol_key():
    err = analyze_error("(let [1 2] a)", InvalidBindingKey)
    assert err.span.lo == 6


def test_error_let_wrong_arity():
    assert analyze_error("(let [a 1])", InvalidArity).form == "let"


def test_analyzes_fn():
    assert len(first("(fn [a b] (+ a b))").arities[0].params) == 2


def test_analyzes_fn_no_params():
    node = first("(fn [] 42)")
    assert node.arities[0].params == ()
    assert node.arities[0].body.node == Long(42)


def test_error_fn_params_not_vector():
    analyze_error("(fn (a b) body)", InvalidFnParams)


def test_error_fn_non_symbol_param():
    err = analyze_error("(fn [a 1] body)", InvalidFnParams)
    assert err.span.lo == 7


def test_error_fn_wrong_arity():
    assert analyze_error("(fn [a b])", InvalidArity).form == "fn"


def test_analyzes_def():
    node = first("(def x 42)")
    assert node == Def("x", node.value)
    assert node.value.node == Long(42)


def test_error_def_non_symbol_name():
    analyze_error("(def 1 42)", InvalidBindingKey)


def test_error_def_wrong_arity():
    err = analyze_error("(def x)", InvalidArity)
    assert str(err) == "(invalid-arity :form 'def' :at 0)"


def test_analyzes_defn_as_def_fn():
    node = first("(defn foo [a b] (+ a b))")
    assert isinstance(node, Def)
    assert node.name == "foo"
    fn = node.value.node
    assert isinstance(fn, Fn)
    assert len(fn.arities) == 1
    arity = fn.arities[0]
    assert len(arity.params) == 2
    assert arity.variadic is None
    body = arity.body.node
    assert body.callee.node == GlobalVar("+")
    assert [arg.node for arg in body.args] == [Var(arity.params[0]), Var(arity.params[1])]


def test_error_defn_non_symbol_name():
    analyze_error("(defn 1 [a b] body)", InvalidBindingKey)


def test_error_defn_params_not_vector():
    analyze_error("(defn foo (a b) body)", InvalidFnParams)


def test_error_defn_wrong_arity():
    assert analyze_error("(defn foo [a b])", InvalidArity).form == "defn"


def test_analyzes_call():
    node = first("(foo 1 2)")
    assert isinstance(node, Call)
    assert [arg.node for arg in node.args] == [Long(1), Long(2)]


def test_analyzes_call_no_args():
    node = first("(foo)")
    assert isinstance(node, Call)
    assert node.args == ()


def test_call_callee_is_global_var():
    assert first("(foo 1 2)").callee.node == GlobalVar("foo")


def test_error_empty_list():
    err = analyze_error("()", InvalidExpression)
    assert str(err) == "(invalid-expression :at 0)"


def test_analyzes_fn_multi_arity():
    node = first("(fn ([] 0) ([x] x))")
    assert len(node.arities) == 2
    assert len(node.arities[0].params) == 0
    assert len(node.arities[1].params) == 1


def test_analyzes_fn_varargs():
    node = first("(fn [& rest] rest)")
    assert len(node.arities) == 1
    arity = node.arities[0]
    assert arity.params == ()
    assert arity.body.node == Var(arity.variadic)


def test_analyzes_fn_fixed_and_varargs():
    arity = first("(fn [a & rest] a)").arities[0]
    assert len(arity.params) == 1
    assert arity.variadic is not None
    assert arity.variadic != arity.params[0]
    assert arity.body.node == Var(arity.params[0])


def test_error_fn_duplicate_arity():
    analyze_error("(fn ([x] x) ([y] y))", InvalidFnParams)


def test_error_fn_multiple_variadics():
    analyze_error("(fn ([& a] a) ([& b] b))", InvalidFnParams)


def test_error_fn_varargs_missing_name():
    analyze_error("(fn [a &] a)", InvalidFnParams)


def test_error_fn_varargs_non_symbol_rest_name():
    err = analyze_error("(fn [a & 1] a)", InvalidFnParams)
    assert err.span.lo == 9


def test_error_fn_multi_arity_malformed_element():
    err = analyze_error("(fn ([] 0) bad)", InvalidFnParams)
    assert err.span.lo == 11


def test_error_fn_no_args():
    assert analyze_error("(fn)", InvalidArity).form == "fn"


def test_analyzes_loop():
    node = first("(loop [i 0] i)")
    assert isinstance(node, Loop)
    assert len(node.bindings) == 1


def test_analyzes_loop_multiple_bindings():
    assert len(first("(loop [i 0 acc 1] acc)").bindings) == 2


def test_analyzes_loop_bindings_resolve_as_var():
    node = first("(loop [i 0] i)")
    assert node.body.node == Var(node.bindings[0][0])


def test_error_loop_wrong_arity():
    assert analyze_error("(loop [i 0])", InvalidArity).form == "loop"


def test_error_loop_bindings_not_vector():
    analyze_error("(loop (i 0) i)", InvalidBindings)


def test_error_loop_odd_bindings():
    analyze_error("(loop [i] i)", OddBindings)


def test_analyzes_recur_no_args():
    assert first("(recur)") == Recur(())


def test_analyzes_recur_with_args():
    node = first("(recur 1 2)")
    assert isinstance(node, Recur)
    assert len(node.args) == 2


def test_analyzes_and_empty():
    assert first("(and)") == And(())


def test_analyzes_and_with_args():
    node = first("(and 1 2 3)")
    assert isinstance(node, And)
    assert len(node.args) == 3


def test_analyzes_or_empty():
    assert first("(or)") == Or(())


def test_analyzes_or_with_args():
    node = first("(or 1 2)")
    assert isinstance(node, Or)
    assert len(node.args) == 2


def test_analyzes_and_args_are_analyzed():
    assert first("(and foo)").args[0].node == GlobalVar("foo")


def test_analyzes_do():
    node = first("(do 1 2)")
    assert isinstance(node, Do)
    assert [item.node for item in node.body] == [Long(1), Long(2)]


def test_analyzes_qualified_symbol():
    assert first("risp.core/map") == QualifiedVar("risp.core", "map")


def test_analyzes_simple_qualified_symbol():
    assert first("foo/bar") == QualifiedVar("foo", "bar")


def test_qualified_symbol_is_not_a_local_var():
    node = first("(let [x 1] risp.core/x)")
    assert node.body.node == QualifiedVar("risp.core", "x")


def test_quoted_symbol_stays_a_symbol():
    assert first("'foo") == Symbol("foo")


def test_quoted_list_holds_symbols_and_literals():
    node = first("'(a 1)")
    assert isinstance(node, List)
    assert [item.node for item in node.items] == [Symbol("a"), Long(1)]


def test_quoted_literal_passes_through():
    assert first("'42") == Long(42)


def test_multiple_top_level_forms():
    nodes = parse("1 foo :k")
    assert [n.node for n in nodes] == [Long(1), GlobalVar("foo"), Keyword("k")]


def test_node_keeps_source_span():
    node = parse("  (foo 1)")[0]
    assert (node.span.lo, node.span.hi) == (2, 9)