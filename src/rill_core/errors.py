"""Error taxonomy for Rill Core.

Every failure raised by the reader, the environment, the evaluator or the
builtins derives from :class:`RillError`.  Nothing inside the core catches
these; the host (CLI, REPL, embedding application) decides what to do.
"""

from __future__ import annotations

from typing import Any


class RillError(Exception):
    """Base class for all Rill errors."""


# ---------------------------------------------------------------------------
# Binding / scope errors
# ---------------------------------------------------------------------------

class DuplicateBindingError(RillError):
    def __init__(self, name: str) -> None:
        super().__init__(f"{name} is already assigned")
        self.name = name


class RootOnlyError(RillError):
    def __init__(self, operation: str) -> None:
        super().__init__(
            f"{operation} is only allowed in the root scope; use const instead"
        )
        self.operation = operation


class UndefinedNameError(RillError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Undefined variable {name}")
        self.name = name


# ---------------------------------------------------------------------------
# Reactive state errors
# ---------------------------------------------------------------------------

class UnknownStateError(RillError):
    """The dependency graph holds no expression for *name*."""

    def __init__(self, name: str) -> None:
        super().__init__(f"No state named {name}")
        self.name = name


class UnknownWatcherError(RillError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown watcher {name}: declare the state before watching")
        self.name = name


# ---------------------------------------------------------------------------
# Evaluation errors
# ---------------------------------------------------------------------------

class ArityError(RillError):
    def __init__(self, expected: int, got: int, what: str = "vector") -> None:
        super().__init__(f"{what} expects {expected} components, got {got}")
        self.expected = expected
        self.got = got


class NotCallableError(RillError):
    def __init__(self, name: str, value: Any) -> None:
        super().__init__(f"{name} is not a function ({value})")
        self.name = name
        self.value = value


class TypeMismatchError(RillError):
    """A builtin received an operand it cannot work with."""

    def __init__(self, operation: str, value: Any) -> None:
        super().__init__(f"{operation}: unsupported operand {value!r}")
        self.operation = operation
        self.value = value


# ---------------------------------------------------------------------------
# Reader errors
# ---------------------------------------------------------------------------

class ParseError(RillError):
    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"{line}:{column}: {message}")
        self.message = message
        self.line = line
        self.column = column
