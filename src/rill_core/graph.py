"""Dependency graph for reactive state bindings."""

from __future__ import annotations

from dataclasses import dataclass, field

from .errors import UnknownStateError
from .nodes import Node


@dataclass
class DependencyGraph:
    """Expressions and "depends-on" edges of every state binding.

    Pure bookkeeping: the graph never evaluates anything.  Edge sets are
    dicts used as insertion-ordered sets so that dependants come back in
    declaration order.
    """

    expressions: dict[str, Node] = field(default_factory=dict)
    depends_on: dict[str, dict[str, None]] = field(default_factory=dict)

    # -- Expressions ----------------------------------------------------

    def record_expression(self, name: str, expr: Node) -> None:
        self.expressions[name] = expr

    def has_expression(self, name: str) -> bool:
        return name in self.expressions

    def expression_of(self, name: str) -> Node:
        try:
            return self.expressions[name]
        except KeyError:
            raise UnknownStateError(name) from None

    # -- Edges ----------------------------------------------------------

    def add_edge(self, dependent: str, dependency: str) -> None:
        self.depends_on.setdefault(dependent, {})[dependency] = None

    def clear_edges_of(self, dependent: str) -> None:
        self.depends_on.pop(dependent, None)

    def dependencies_of(self, name: str) -> list[str]:
        return list(self.depends_on.get(name, ()))

    def dependants_of(self, name: str) -> list[str]:
        """Names whose dependency set contains *name*."""
        return [dep for dep, targets in self.depends_on.items() if name in targets]
