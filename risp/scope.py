"""Lexical scopes that give each local binding a unique numeric id."""

from __future__ import annotations

import itertools
from typing import Iterator


class Scope:
    """A table of local names that falls back to its enclosing scope.

    A scope and every scope entered from it draw ids from one shared counter,
    so no two bindings made anywhere in the same tree share an id.
    """

    def __init__(self) -> None:
        self._bindings: dict[str, int] = {}
        self._parent: Scope | None = None
        self._ids: Iterator[int] = itertools.count()

    def enter_scope(self) -> Scope:
        """Return a new child scope that shares this scope's id counter."""
        child = Scope()
        child._parent = self
        child._ids = self._ids
        return child

    def bind(self, name: str) -> int:
        """Bind ``name`` in this scope to a fresh id and return it."""
        binding_id = next(self._ids)
        self._bindings[name] = binding_id
        return binding_id

    def get_by_name(self, name: str) -> int | None:
        """Return the id bound to ``name`` here or in an enclosing scope."""
        scope: Scope | None = self
        while scope is not None:
            binding_id = scope._bindings.get(name)
            if binding_id is not None:
                return binding_id
            scope = scope._parent
        return None