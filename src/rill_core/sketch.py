"""Sketch: a running Rill program and its root environment."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import IO

from .builtins import core_builtins
from .environment import Environment
from .evaluator import evaluate
from .nodes import Node
from .reader import parse
from .render import RenderCallback
from .values import Value


@dataclass
class Sketch:
    """Root environment seeded with builtins, plus the last draw tree.

    Every :meth:`run` publishes its result to the render callbacks.
    ``println`` writes to whatever :attr:`out` holds at call time.
    """

    environment: Environment | None = None
    out: IO[str] | None = field(default=None, repr=False)
    last_result: Value | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        if self.environment is None:
            self.environment = Environment()
            self.environment.load_builtins(core_builtins(lambda: self.out))

    # -- Convenience accessors ------------------------------------------

    @property
    def constants(self) -> dict[str, Value]:
        return self.environment.constants

    @property
    def state(self) -> dict[str, Value]:
        return self.environment.state

    @property
    def dependencies(self) -> dict[str, list[str]]:
        graph = self.environment.graph
        return {name: graph.dependencies_of(name) for name in self.environment.state}

    # -- Running --------------------------------------------------------

    def on_render(self, fn: RenderCallback) -> RenderCallback:
        return self.environment.register_render_callback(fn)

    def run(self, program: Node) -> Value:
        """Evaluate *program* in the root environment and publish the result.

        Bindings from earlier forms stay in place if a later form fails.
        """
        value = evaluate(program, self.environment)
        self.last_result = value
        self.environment.publish(value)
        return value

    def run_source(self, source: str) -> Value:
        return self.run(parse(source))
