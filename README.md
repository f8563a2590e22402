# risp

The front end of a small Clojure-flavoured Lisp. It has three parts. The
lexer splits source text into tokens. The reader builds a concrete syntax
tree from those tokens. The semantic analyser resolves local bindings and
recognises the special forms.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Pipeline

Source text goes through three stages.

1. `risp.lexer.tokenize(program)` turns a string into a list of
   `risp.tokens.Token` objects. Each token has a `kind`, which is a
   `TokenKind`, a `span`, and a `value`.
   - The `span` is a `Span` holding `lo` and `hi`, the byte offsets of the
     token in the UTF-8 form of the text.
   - The `value` is present only for `LONG`, `DOUBLE`, `SYMBOL`, `STRING`
     and `KEYWORD` tokens.
   - The lexer recognises `(`, `)`, `[`, `]`, `{`, `}`, `#`, `'`, strings
     with `\n`, `\t`, `\r`, `\\` and `\"` escapes, `:keywords`, 64-bit
     integers, floats, symbols and `;` line comments.
   - Two tokens compare equal when their kind and value match, whatever
     their spans. `str(token)` gives a form such as `1..2 Symbol(+)`.
2. `risp.parser.parse(tokens)` builds a list of `risp.cst.Expr` values.
   Each one has a `kind`, which is an `ExprKind`, a `value`, and a `span`.
   - The kinds cover lists, vectors, maps, sets (`#{...}`), quoted forms
     (`'x`), `true`, `false`, `nil`, and qualified symbols such as
     `ns/name`. A qualified symbol's value is the pair `(ns, name)`.
   - Malformed input raises a subclass of `ParseError`: `UnmatchedOpen`,
     `UnmatchedClose`, `MismatchedDelimiter` or `OddMapElements`.
3. `risp.sema.analyze(cst)` returns a list of `risp.nodes.AstNode`. Each
   one pairs a node with its span.
   - It recognises `if`, `let`, `fn`, `defn`, `def`, `do`, `loop`, `recur`,
     `and` and `or`. `fn` may be single-arity, multi-arity, or variadic
     with `&`. `defn` becomes a `Def` whose value is a `Fn`.
   - Any other non-empty list becomes a `Call`.
   - A symbol bound by `let`, `loop` or a function parameter becomes a
     `Var` carrying a unique integer id. Any other symbol becomes a
     `GlobalVar`, and a qualified symbol becomes a `QualifiedVar`.
   - Inside a quote, symbols stay `Symbol` nodes and lists stay `List`
     nodes.
   - Invalid forms raise a subclass of `AnalyzeError`: `InvalidArity`,
     `InvalidFnParams`, `InvalidBindings`, `OddBindings`,
     `InvalidBindingKey` or `InvalidExpression`.

The ids come from `risp.scope.Scope`. A scope binds names to fresh ids
through `bind`. `enter_scope` creates a nested scope that shares the same
counter. `get_by_name` looks a name up, working outwards through the
enclosing scopes.

## Example

```python
from risp.lexer import tokenize
from risp.parser import parse
from risp.sema import analyze
from risp.nodes import Let, Var

nodes = analyze(parse(tokenize("(let [a 1] a)")))
form = nodes[0].node
assert isinstance(form, Let)
assert isinstance(form.body.node, Var)
assert form.body.node.id == form.bindings[0][0]
```

Each error is printed as a compact s-expression that includes its source
offset. The error also carries that offset as `span`:

```python
from risp.lexer import tokenize
from risp.parser import ParseError, parse

try:
    parse(tokenize("(+ 1 2]"))
except ParseError as err:
    print(err)  # (mismatched-delimiter :expected ')' :found ']' :at 0)
```

## What it does not do

The package reads and analyses programs, but it does not evaluate them.
It has no runtime, no built-in functions, no interactive prompt and no
command for running a source file. The result of `analyze` is a tree for
an evaluator to walk.