"""Rill Core — evaluator and reactive state engine for the Rill sketching language."""

from .environment import Environment
from .errors import (
    ArityError,
    DuplicateBindingError,
    NotCallableError,
    ParseError,
    RillError,
    RootOnlyError,
    TypeMismatchError,
    UndefinedNameError,
    UnknownStateError,
    UnknownWatcherError,
)
from .evaluator import apply_function, evaluate
from .graph import DependencyGraph
from .nodes import Node, NodeKind
from .reader import parse
from .render import RenderBridge
from .builtins import core_builtins
from .sketch import Sketch
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
    _Empty,
)
from .repl import RillRepl

__all__ = [
    "evaluate",
    "apply_function",
    "parse",
    "Environment",
    "DependencyGraph",
    "RenderBridge",
    "Node",
    "NodeKind",
    "Sketch",
    "RillRepl",
    "core_builtins",
    "Empty",
    "Value",
    "VBuiltin",
    "VColor",
    "VFunction",
    "VList",
    "VMap",
    "VNumber",
    "VText",
    "VVector",
    "RillError",
    "ArityError",
    "DuplicateBindingError",
    "NotCallableError",
    "ParseError",
    "RootOnlyError",
    "TypeMismatchError",
    "UndefinedNameError",
    "UnknownStateError",
    "UnknownWatcherError",
]
