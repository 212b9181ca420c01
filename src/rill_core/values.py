"""Value types for Rill Core."""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Union

if TYPE_CHECKING:
    from .environment import Environment
    from .nodes import Node


@dataclass(frozen=True, slots=True)
class VNumber:
    value: float

    def __bool__(self) -> bool:
        return self.value != 0 and self.value == self.value

    def __str__(self) -> str:
        v = self.value
        if v == v and v not in (float("inf"), float("-inf")) and v == int(v):
            return str(int(v))
        return str(v)


@dataclass(frozen=True, slots=True)
class VText:
    value: str

    def __bool__(self) -> bool:
        return self.value != ""

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class VColor:
    value: str  # "#rrggbb" as written

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class VVector:
    x: "Value"
    y: "Value"

    def __str__(self) -> str:
        return f"<{self.x} {self.y}>"


@dataclass(frozen=True, slots=True)
class VList:
    items: tuple["Value", ...] = ()

    def __str__(self) -> str:
        return "[" + " ".join(str(v) for v in self.items) + "]"


@dataclass(frozen=True, slots=True)
class VMap:
    entries: dict["Value", "Value"] = field(default_factory=dict)

    def __hash__(self) -> int:
        return hash(frozenset(self.entries.items()))

    def __str__(self) -> str:
        return "{" + " ".join(f"{k} {v}" for k, v in self.entries.items()) + "}"


@dataclass(frozen=True, slots=True, eq=False)
class VFunction:
    """Closure: parameter names, body node and the live defining scope."""

    params: tuple[str, ...]
    body: "Node | None"
    env: "Environment" = field(repr=False)
    name: str | None = None

    def __str__(self) -> str:
        label = self.name or "fn"
        return f"<{label} [{' '.join(self.params)}]>"


@dataclass(frozen=True, slots=True, eq=False)
class VBuiltin:
    """Host function exposed to Rill code.

    *arity* is the number of positional arguments *fn* takes, or ``None``
    when it accepts ``*args``.  Calls pad missing arguments with Empty and
    drop extras, exactly like closures.
    """

    name: str
    fn: Callable[..., Any] = field(repr=False)
    arity: int | None = None

    @classmethod
    def wrap(cls, name: str, fn: Callable[..., Any]) -> "VBuiltin":
        try:
            params = inspect.signature(fn).parameters.values()
        except (ValueError, TypeError):
            # C functions such as max() carry no introspectable signature
            return cls(name=name, fn=fn, arity=None)
        arity: int | None = 0
        for param in params:
            if param.kind is inspect.Parameter.VAR_POSITIONAL:
                arity = None
                break
            if param.kind in (
                inspect.Parameter.POSITIONAL_ONLY,
                inspect.Parameter.POSITIONAL_OR_KEYWORD,
            ):
                arity += 1
        return cls(name=name, fn=fn, arity=arity)

    def call(self, args: list["Value"]) -> "Value":
        if self.arity is not None:
            args = list(args[: self.arity])
            args.extend(Empty for _ in range(self.arity - len(args)))
        result = self.fn(*args)
        return Empty if result is None else result

    def __str__(self) -> str:
        return f"<builtin {self.name}>"


class _Empty:
    """Singleton falsy placeholder (missing argument, absent else-branch...)."""

    _instance: "_Empty | None" = None

    def __new__(cls) -> "_Empty":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "Empty"

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        return "Empty"


Empty = _Empty()

FunctionValue = Union[VFunction, VBuiltin]

Value = Union[VNumber, VText, VColor, VVector, VList, VMap, VFunction, VBuiltin, _Empty]
