"""Print arguments separated by spaces."""

from __future__ import annotations

import sys
from typing import Sequence


def echo(args: Sequence[str]) -> str:
    """Return the arguments joined by spaces and ended by a newline.

    With no arguments nothing at all is produced.
    """
    return " ".join(args) + "\n" if args else ""


def main(argv=None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    sys.stdout.write(echo(args))
    return 0


if __name__ == "__main__":
    sys.exit(main())