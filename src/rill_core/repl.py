"""RillRepl — incremental REPL for live-coding sessions.

Also provides the ``rill-repl`` CLI entry point via ``main()``.
"""

from __future__ import annotations

import logging
import os
import sys
from contextlib import contextmanager
from typing import IO, Iterator

from .errors import RillError
from .reader import parse
from .sketch import Sketch
from .values import (
    Value,
    VBuiltin,
    VFunction,
    VList,
    VMap,
    VText,
    VVector,
    _Empty,
)

logger = logging.getLogger("rill_core.repl")


# ---------------------------------------------------------------------------
# RillRepl class (notebook / programmatic use)
# ---------------------------------------------------------------------------

class RillRepl:
    """Stateful REPL that accumulates constants and state across calls.

    Usage::

        repl = RillRepl()
        repl.eval("($ a 1)")
        repl.eval("($ b [a] (mul a 10))")
        repl.eval("($ a 5)")
        repl.eval("b")             # → VNumber(50)

        repl.sketch.state          # all reactive state
        repl.redirect("out.txt")   # println and ? results go to out.txt
        repl.redirect(None)        # back to the console
        repl.reset()               # clear everything

    ``println`` and ``?`` results share one destination, :attr:`dest`.
    """

    def __init__(self, out: IO[str] | None = None) -> None:
        self.console = out
        self.out = out
        self._file: IO[str] | None = None
        self.sketch = Sketch(out=out)

    @property
    def dest(self) -> IO[str]:
        return self.out if self.out is not None else sys.stdout

    def eval(self, text: str) -> Value | None:
        """Evaluate *text* in the accumulated root environment.

        Returns the value of the last form, or ``None`` if *text* held no
        forms at all.
        """
        program = parse(text)
        if not program.params:
            return None
        return self.sketch.run(program)

    def reset(self) -> None:
        self.sketch = Sketch(out=self.out)

    def redirect(self, filepath: str | None) -> None:
        """Send output to *filepath* (truncated), or back to the console.

        Raises ``OSError`` if the file cannot be opened; output then stays
        on the console.
        """
        if self._file is not None:
            self._file.close()
            self._file = None
        if filepath is not None:
            self._file = open(filepath, "w", encoding="utf-8")
            logger.debug("output redirected to %s", filepath)
        self.out = self._file if self._file is not None else self.console
        self.sketch.out = self.out

    @contextmanager
    def writing_to(self, dest: IO[str]) -> Iterator[IO[str]]:
        """Temporarily point ``println`` at *dest*."""
        previous = self.out
        self.out = self.sketch.out = dest
        try:
            yield dest
        finally:
            self.out = self.sketch.out = previous


# ---------------------------------------------------------------------------
# CLI helpers
# ---------------------------------------------------------------------------

def _fmt_inline(value: Value) -> str:
    """Format a single value for compact one-line display."""
    if isinstance(value, VText):
        return f'"{value.value}"'
    if isinstance(value, VVector):
        return f"<{_fmt_inline(value.x)} {_fmt_inline(value.y)}>"
    if isinstance(value, VList):
        return "[" + " ".join(_fmt_inline(v) for v in value.items) + "]"
    if isinstance(value, VMap):
        pairs = (f"{_fmt_inline(k)} {_fmt_inline(v)}" for k, v in value.entries.items())
        return "{" + " ".join(pairs) + "}"
    return str(value)


def _fmt_inspect(value: Value) -> str:
    """Pretty-print a value for inspect() / i()."""
    if isinstance(value, _Empty):
        return "Empty"

    if isinstance(value, VMap):
        if not value.entries:
            return "VMap {}"
        keys = {k: _fmt_inline(k) for k in value.entries}
        width = max(len(s) for s in keys.values())
        lines = ["VMap {"]
        for k, v in value.entries.items():
            lines.append(f"  {keys[k]:<{width}}: {_fmt_inline(v)}")
        lines.append("}")
        return "\n".join(lines)

    if isinstance(value, VList):
        lines = ["VList ["]
        for i, v in enumerate(value.items):
            lines.append(f"  {i}: {_fmt_inline(v)}")
        lines.append("]")
        return "\n".join(lines)

    if isinstance(value, VFunction):
        return f"VFunction {value.name or '(anonymous)'} [{' '.join(value.params)}]"

    return _fmt_inline(value)


def _eval_expr(repl: RillRepl, expr: str, dest: IO[str]) -> None:
    result = repl.eval(expr)
    if result is not None:
        print(_fmt_inline(result), file=dest)


def _inspect_expr(repl: RillRepl, expr: str, dest: IO[str]) -> None:
    result = repl.eval(expr)
    if result is not None:
        print(_fmt_inspect(result), file=dest)


def _show_vars(repl: RillRepl, dest: IO[str]) -> None:
    """Print user constants (builtins are hidden)."""
    entries = {
        k: v for k, v in repl.sketch.constants.items() if not isinstance(v, VBuiltin)
    }
    if not entries:
        print("  (no constants defined)", file=dest)
        return
    width = max(len(k) for k in entries)
    for name, value in entries.items():
        print(f"  {name:<{width}} : {_fmt_inline(value)}", file=dest)


def _show_state(repl: RillRepl, dest: IO[str]) -> None:
    """Print reactive state with the names each binding watches."""
    state = repl.sketch.state
    if not state:
        print("  (no state defined)", file=dest)
        return
    deps = repl.sketch.dependencies
    width = max(len(k) for k in state)
    for name, value in state.items():
        watched = f"  <- [{' '.join(deps[name])}]" if deps.get(name) else ""
        print(f"  ${name:<{width}} : {_fmt_inline(value)}{watched}", file=dest)


def _report(exc: RillError) -> None:
    print(f"{type(exc).__name__}: {exc}", file=sys.stderr)


def _redirect(repl: RillRepl, filepath: str | None) -> None:
    try:
        repl.redirect(filepath)
    except OSError as exc:
        print(f"Error opening '{filepath}': {exc}", file=sys.stderr)


def _run_file(repl: RillRepl, filepath: str, dest: IO[str]) -> None:
    """Feed each line of *filepath* through the REPL as if typed.

    A failing line is reported and the batch carries on with the next one.
    """
    try:
        with open(filepath, encoding="utf-8") as fh:
            for lineno, file_line in enumerate(fh, 1):
                try:
                    _process_line(repl, file_line.rstrip("\n"), dest)
                except RillError as exc:
                    print(f"{filepath}:{lineno}: ", end="", file=sys.stderr)
                    _report(exc)
    except OSError as exc:
        print(f"Error reading '{filepath}': {exc}", file=sys.stderr)


def _process_line(repl: RillRepl, line: str, dest: IO[str] | None = None) -> bool:
    """Process one input line.  Returns False when the session should end.

    Output, ``println`` included, goes to *dest* when given, else to the
    REPL's current destination.
    """
    line = line.strip()
    if not line:
        return True

    if line in (":q", ":quit"):
        return False

    # ── Output redirect: ?>> filepath  /  ?>> ────────────────────────────
    if line == "?>>" or line.startswith("?>> "):
        _redirect(repl, line[4:].strip() or None)
        return True

    if dest is None:
        return _dispatch(repl, line, repl.dest)
    with repl.writing_to(dest):
        return _dispatch(repl, line, dest)


def _dispatch(repl: RillRepl, line: str, dest: IO[str]) -> bool:
    if line == ":vars":
        _show_vars(repl, dest)
    elif line == ":state":
        _show_state(repl, dest)
    elif line == ":reset":
        repl.reset()
    elif line.startswith("? "):
        _eval_expr(repl, line[2:].strip(), dest)
    elif line.startswith("?<< "):
        _run_file(repl, line[4:].strip(), dest)
    else:
        for prefix in ("inspect(", "i("):
            if line.startswith(prefix) and line.endswith(")"):
                _inspect_expr(repl, line[len(prefix):-1].strip(), dest)
                break
        else:
            repl.eval(line)
    return True


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

BANNER = (
    "Rill REPL  (:q to quit  |  :vars  :state  :reset  |  ? <expr>  inspect(<expr>)"
    "  |  ?<< FILE  ?>> FILE)"
)


def main() -> None:
    """Interactive Rill shell (``rill-repl`` / ``python -m rill_core.repl``)."""
    logging.basicConfig(level=os.environ.get("RILL_LOG_LEVEL", "WARNING").upper())
    repl = RillRepl()
    print(BANNER)

    try:
        while True:
            try:
                line = input("rill> ")
            except EOFError:
                print()
                return
            except KeyboardInterrupt:
                print()
                continue
            try:
                if not _process_line(repl, line):
                    return
            except RillError as exc:
                _report(exc)
    finally:
        repl.redirect(None)


if __name__ == "__main__":
    main()
