"""Lexer, reader and semantic analyser for a small Clojure-flavoured Lisp."""

__version__ = "0.3.1"

__all__ = ["cst", "lexer", "nodes", "parser", "scope", "sema", "tokens"]