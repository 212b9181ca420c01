"""Scopes, constant bindings and the reactive state layer."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from .errors import DuplicateBindingError, RootOnlyError, UndefinedNameError, UnknownWatcherError
from .graph import DependencyGraph
from .nodes import Node
from .render import RenderBridge, RenderCallback
from .values import Value, VBuiltin

logger = logging.getLogger("rill_core.environment")

_UNSET: Any = object()


@dataclass(eq=False)
class Environment:
    """One lexical scope.

    The root scope (no parent) owns the dependency graph, the dirty
    worklist and the render bridge; every descendant shares the very same
    objects.  Reactive state lives only in the root.
    """

    parent: Environment | None = None
    constants: dict[str, Value] = field(default_factory=dict)
    state: dict[str, Value] = field(default_factory=dict)

    root: Environment = field(init=False, repr=False)
    graph: DependencyGraph = field(init=False, repr=False)
    renderer: RenderBridge = field(init=False, repr=False)
    dirty: dict[str, None] = field(init=False, repr=False)
    recalculating: bool = field(init=False, default=False, repr=False)

    def __post_init__(self) -> None:
        if self.parent is None:
            self.root = self
            self.graph = DependencyGraph()
            self.renderer = RenderBridge()
            self.dirty = {}
        else:
            self.root = self.parent.root
            self.graph = self.parent.graph
            self.renderer = self.parent.renderer
            self.dirty = self.parent.dirty

    def __repr__(self) -> str:
        kind = "root" if self.is_root else "child"
        return f"Environment({kind}, constants={list(self.constants)}, state={list(self.state)})"

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def child(self) -> Environment:
        return Environment(parent=self)

    def _require_root(self, operation: str) -> None:
        if not self.is_root:
            raise RootOnlyError(operation)

    # -- Constants ------------------------------------------------------

    def has_constant(self, name: str) -> bool:
        env: Environment | None = self
        while env is not None:
            if name in env.constants:
                return True
            env = env.parent
        return False

    def define(self, name: str, value: Value) -> Value:
        if self.has_constant(name):
            raise DuplicateBindingError(name)
        self.constants[name] = value
        return value

    def load_builtins(self, table: Iterable[tuple[str, Callable[..., Any] | VBuiltin]]) -> None:
        """Install ``(name, callable)`` pairs, in order, as constants."""
        for name, fn in table:
            self.define(name, fn if isinstance(fn, VBuiltin) else VBuiltin.wrap(name, fn))

    # -- Lookup ---------------------------------------------------------

    def lookup(self, name: str) -> Value:
        env: Environment | None = self
        while env is not None:
            if name in env.constants:
                return env.constants[name]
            if name in env.state:
                return env.state[name]
            env = env.parent
        raise UndefinedNameError(name)

    def __contains__(self, name: str) -> bool:
        env: Environment | None = self
        while env is not None:
            if name in env.constants or name in env.state:
                return True
            env = env.parent
        return False

    # -- Reactive state -------------------------------------------------

    def declare_or_update_state(self, name: str, body: Node, value: Value = _UNSET) -> Value:
        """Commit *name*; re-declaring an existing state marks its dependants dirty.

        When *value* is not supplied, *body* is evaluated in a fresh child
        of this (root) scope.
        """
        self._require_root("state")
        if value is _UNSET:
            from .evaluator import evaluate
            value = evaluate(body, self.child())

        if name not in self.state:
            self.state[name] = value
            logger.debug("state %s declared: %s", name, value)
        else:
            self.state[name] = value
            dependants = self.graph.dependants_of(name)
            logger.debug("state %s updated: %s, dirty: %s", name, value, dependants)
            for dependant in dependants:
                self.dirty[dependant] = None
            if not self.recalculating:
                self.recalculate()

        self.graph.record_expression(name, body)
        return value

    def watch(self, name: str, dependencies: Iterable[str]) -> None:
        if not self.graph.has_expression(name):
            raise UnknownWatcherError(name)
        # Purge old edges so re-declared watch lists never accumulate
        self.graph.clear_edges_of(name)
        for dep in dependencies:
            self.graph.add_edge(name, dep)
        logger.debug("state %s watches %s", name, self.graph.dependencies_of(name))

    def needs_recalculation(self) -> bool:
        return bool(self.dirty)

    def recalculate(self) -> None:
        """Drain the dirty worklist in snapshot rounds until it is empty.

        There is no cycle detection: a dependency cycle never drains.
        """
        self._require_root("recalculation")
        if self.recalculating:
            return
        self.recalculating = True
        try:
            rounds = 0
            while self.needs_recalculation():
                batch = list(self.dirty)
                self.dirty.clear()
                rounds += 1
                logger.debug("recalculation round %d: %s", rounds, batch)
                for name in batch:
                    self.declare_or_update_state(name, self.graph.expression_of(name))
        finally:
            self.recalculating = False

    # -- Rendering ------------------------------------------------------

    def register_render_callback(self, fn: RenderCallback) -> RenderCallback:
        return self.renderer.register(fn)

    def publish(self, tree: Value) -> None:
        self.renderer.publish(tree)
