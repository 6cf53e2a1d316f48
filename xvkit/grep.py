"""Simple grep supporting only the ^ . * $ operators."""

from __future__ import annotations

import sys
from typing import Iterator, TextIO


def _matchhere(re: str, text: str) -> bool:
    while True:
        if not re:
            return True
        if len(re) > 1 and re[1] == "*":
            return _matchstar(re[0], re[2:], text)
        if re == "$":
            return not text
        if text and (re[0] == "." or re[0] == text[0]):
            re, text = re[1:], text[1:]
            continue
        return False


def _matchstar(c: str, re: str, text: str) -> bool:
    while True:
        if _matchhere(re, text):
            return True
        if not text:
            return False
        head, text = text[0], text[1:]
        if head != c and c != ".":
            return False


def match(re: str, text: str) -> bool:
    """Return whether ``re`` matches anywhere in ``text``."""
    if re.startswith("^"):
        return _matchhere(re[1:], text)
    return any(_matchhere(re, text[i:]) for i in range(len(text) + 1))


def grep(pattern: str, stream: TextIO) -> Iterator[str]:
    """Yield the newline-terminated lines of ``stream`` matching ``pattern``.

    A final line without a newline is never reported.
    """
    for line in stream:
        if line.endswith("\n") and match(pattern, line[:-1]):
            yield line


def main(argv=None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        sys.stderr.write("usage: grep pattern [file ...]\n")
        return 1
    pattern, paths = args[0], args[1:]
    if not paths:
        sys.stdout.writelines(grep(pattern, sys.stdin))
        return 0
    for path in paths:
        try:
            stream = open(path, newline="", errors="replace")
        except OSError:
            sys.stdout.write(f"grep: cannot open {path}\n")
            return 1
        with stream:
            sys.stdout.writelines(grep(pattern, stream))
    return 0


if __name__ == "__main__":
    sys.exit(main())