"""Reference builtin table: arithmetic and output."""

from __future__ import annotations

import math
import sys
from typing import IO, Any, Callable

from .errors import TypeMismatchError
from .values import Empty, Value, VNumber, VText


def _num(op: str, value: Value) -> float:
    if not isinstance(value, VNumber):
        raise TypeMismatchError(op, value)
    return value.value


def add(a: Value, b: Value) -> Value:
    """Numeric addition; concatenates when either side is a string."""
    if isinstance(a, VText) or isinstance(b, VText):
        return VText(f"{a}{b}")
    return VNumber(_num("add", a) + _num("add", b))


def sub(a: Value, b: Value) -> Value:
    return VNumber(_num("sub", a) - _num("sub", b))


def mul(a: Value, b: Value) -> Value:
    return VNumber(_num("mul", a) * _num("mul", b))


def div(a: Value, b: Value) -> Value:
    x, y = _num("div", a), _num("div", b)
    if y == 0:
        if x == 0 or x != x:
            return VNumber(math.nan)
        return VNumber(math.copysign(math.inf, x) * math.copysign(1.0, y))
    return VNumber(x / y)


def mod(a: Value, b: Value) -> Value:
    x, y = _num("mod", a), _num("mod", b)
    if y == 0:
        return VNumber(math.nan)
    return VNumber(math.fmod(x, y))


def pow_(a: Value, b: Value) -> Value:
    try:
        return VNumber(math.pow(_num("pow", a), _num("pow", b)))
    except OverflowError:
        return VNumber(math.inf)
    except ValueError:
        return VNumber(math.nan)


def core_builtins(
    out: IO[str] | Callable[[], IO[str] | None] | None = None,
) -> list[tuple[str, Callable[..., Any]]]:
    """Ordered ``(name, callable)`` table.

    ``println`` writes to *out*, which is a stream or a zero-argument
    function returning one, resolved on every call. ``None`` means stdout.
    """

    def println(value: Value) -> Value:
        target = out() if callable(out) else out
        print(str(value), file=target if target is not None else sys.stdout)
        return Empty

    return [
        ("println", println),
        ("add", add),
        ("sub", sub),
        ("mul", mul),
        ("div", div),
        ("mod", mod),
        ("pow", pow_),
    ]
