"""Evaluator: tree-walking evaluation of a syntax tree against an Environment."""

from __future__ import annotations

import logging

from .environment import Environment
from .errors import ArityError, NotCallableError, RootOnlyError
from .nodes import Node, NodeKind
from .values import (
    Empty,
    Value,
    VBuiltin,
    VColor,
    VFunction,
    VList,
    VMap,
    VNumber,
    VText,
    VVector,
)

logger = logging.getLogger("rill_core.evaluator")


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------

def evaluate(node: Node | None, env: Environment) -> Value:
    """Evaluate *node* in *env* and return its Value."""
    if node is None:
        return Empty

    kind = node.kind

    # Literals
    if kind == NodeKind.NUMBER:
        return VNumber(float(node.value))
    if kind == NodeKind.STRING:
        return VText(node.value)
    if kind == NodeKind.COLOR:
        return VColor(node.value)

    # Compound data
    if kind == NodeKind.LIST:
        return VList(tuple(evaluate(v, env) for v in node.values))
    if kind == NodeKind.VECTOR:
        return _eval_vector(node, env)
    if kind == NodeKind.MAP:
        return _eval_map(node, env)

    # Functions
    if kind == NodeKind.FUNCTION:
        return _make_function(node, env)
    if kind == NodeKind.NAMED_FUNCTION:
        return env.define(node.name, _make_function(node, env, node.name))
    if kind == NodeKind.CALL:
        return _eval_call(node, env)

    if kind == NodeKind.CONDITION:
        return _eval_condition(node, env)
    if kind == NodeKind.VARIABLE:
        return env.lookup(node.value)
    if kind == NodeKind.SYMBOL:
        return VText(node.value[1:])
    if kind == NodeKind.EXPOSED:
        return evaluate(node.params[0], env)

    # Bindings
    if kind == NodeKind.PROGRAM:
        result: Value = Empty
        for form in node.params:
            result = evaluate(form, env)
        return result
    if kind == NodeKind.CONST:
        return env.define(node.name, evaluate(node.params[0], env))
    if kind == NodeKind.STATE:
        return _eval_state(node, env)

    logger.warning("unknown node kind %r evaluates to Empty", kind)
    return Empty


def apply_function(fn: Value, args: list[Value], name: str = "<anonymous>") -> Value:
    """Call a closure or builtin with already-evaluated *args*."""
    if isinstance(fn, VBuiltin):
        return fn.call(args)
    if not isinstance(fn, VFunction):
        raise NotCallableError(name, fn)

    scope = fn.env.child()
    for i, param in enumerate(fn.params):
        scope.define(param, args[i] if i < len(args) else Empty)
    return evaluate(fn.body, scope)


# ---------------------------------------------------------------------------
# Compound data
# ---------------------------------------------------------------------------

def _eval_vector(node: Node, env: Environment) -> VVector:
    if len(node.values) != 2:
        raise ArityError(2, len(node.values))
    x = evaluate(node.values[0], env)
    y = evaluate(node.values[1], env)
    return VVector(x, y)


def _eval_map(node: Node, env: Environment) -> VMap:
    """Alternating key / value expressions; a dangling key maps to Empty."""
    entries: dict[Value, Value] = {}
    values = node.values
    for i in range(0, len(values), 2):
        key = evaluate(values[i], env)
        entries[key] = evaluate(values[i + 1], env) if i + 1 < len(values) else Empty
    return VMap(entries)


# ---------------------------------------------------------------------------
# Functions
# ---------------------------------------------------------------------------

def _param_names(params_node: Node) -> tuple[str, ...]:
    return tuple(p.value for p in params_node.values)


def _make_function(node: Node, env: Environment, name: str | None = None) -> VFunction:
    params = _param_names(node.params[0])
    body = node.params[1] if len(node.params) > 1 else None
    return VFunction(params=params, body=body, env=env, name=name)


def _eval_call(node: Node, env: Environment) -> Value:
    fn = env.lookup(node.name)
    args = [evaluate(arg, env) for arg in node.params]
    return apply_function(fn, args, node.name)


# ---------------------------------------------------------------------------
# Control flow / state
# ---------------------------------------------------------------------------

def _eval_condition(node: Node, env: Environment) -> Value:
    guard = evaluate(node.params[0], env)
    if guard:
        return evaluate(node.params[1], env)
    if len(node.params) > 2:
        return evaluate(node.params[2], env)
    return Empty


def _is_observing(node: Node) -> bool:
    return len(node.params) == 2 and node.params[0].kind == NodeKind.LIST


def _eval_state(node: Node, env: Environment) -> Value:
    """``($ name body)`` or the observing form ``($ name [watched...] body)``."""
    if not env.is_root:
        raise RootOnlyError("state")

    if _is_observing(node):
        watched = [v.value for v in node.params[0].values]
        body = node.params[1]
    else:
        watched = None
        body = node.params[0]

    value = evaluate(body, env.child())
    env.declare_or_update_state(node.name, body, value)
    if watched is not None:
        env.watch(node.name, watched)
    return value
