"""``rill FILE`` — run a Rill source file.

Evaluation errors are not caught here; they reach the process boundary
with their traceback.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from .sketch import Sketch


def run_file(path: str | Path) -> Sketch:
    sketch = Sketch()
    sketch.run_source(Path(path).read_text(encoding="utf-8"))
    return sketch


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="rill", description="Run a Rill sketch")
    parser.add_argument("script", help="Rill source file")
    args = parser.parse_args(argv)

    logging.basicConfig(level=os.environ.get("RILL_LOG_LEVEL", "WARNING").upper())
    run_file(args.script)
    return 0


if __name__ == "__main__":
    sys.exit(main())
