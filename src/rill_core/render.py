"""Render bridge: hands finished draw trees to registered callbacks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from .values import Value

RenderCallback = Callable[[Value], None]


@dataclass
class RenderBridge:
    callbacks: list[RenderCallback] = field(default_factory=list)

    def register(self, fn: RenderCallback) -> RenderCallback:
        """Append *fn*; returns it so this also works as a decorator."""
        self.callbacks.append(fn)
        return fn

    def publish(self, tree: Value) -> None:
        for fn in list(self.callbacks):
            fn(tree)
