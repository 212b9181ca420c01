"""Syntax-tree nodes consumed by the evaluator."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class NodeKind(str, Enum):
    PROGRAM = "Program"
    NUMBER = "NumberLiteral"
    STRING = "StringLiteral"
    COLOR = "ColorLiteral"
    LIST = "List"
    VECTOR = "Vector"
    MAP = "Map"
    FUNCTION = "Function"
    NAMED_FUNCTION = "NamedFunction"
    CONDITION = "Condition"
    VARIABLE = "Variable"
    CONST = "ConstAssignment"
    STATE = "StateAssignment"
    CALL = "CallExpression"
    SYMBOL = "Symbol"
    EXPOSED = "ExposedParameter"


@dataclass(slots=True)
class Node:
    """One syntax-tree node.

    Depending on *kind* a node carries a ``value`` (literals, Variable,
    Symbol), a ``name`` (NamedFunction, ConstAssignment, StateAssignment,
    CallExpression), ``params`` (sub-expressions of forms) or ``values``
    (List, Vector, Map elements).  *kind* is a plain string so trees from
    other producers can carry tags this module does not know.
    """

    kind: str
    value: Any = None
    name: str | None = None
    params: list[Node] = field(default_factory=list)
    values: list[Node] = field(default_factory=list)
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)
