"""Count lines, words and bytes."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import IO

_SPACE = frozenset(b" \r\t\n\v\0")


@dataclass(frozen=True)
class Counts:
    lines: int = 0
    words: int = 0
    chars: int = 0


def wc(stream: IO) -> Counts:
    """Count lines, words and bytes read from ``stream``.

    Text read from a text stream is counted as its UTF-8 bytes.
    """
    lines = words = chars = 0
    inword = False
    while True:
        chunk = stream.read(512)
        if not chunk:
            break
        if isinstance(chunk, str):
            chunk = chunk.encode("utf-8", "surrogateescape")
        for byte in chunk:
            chars += 1
            if byte == 0x0A:
                lines += 1
            if byte in _SPACE:
                inword = False
            elif not inword:
                words += 1
                inword = True
    return Counts(lines, words, chars)


def _report(counts: Counts, name: str) -> None:
    print(f"{counts.lines} {counts.words} {counts.chars} {name}")


def main(argv=None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        _report(wc(sys.stdin.buffer), "")
        return 0
    for path in args:
        try:
            stream = open(path, "rb")
        except OSError:
            print(f"cat: cannot open {path}")
            return 1
        with stream:
            try:
                counts = wc(stream)
            except OSError:
                print("wc: read error")
                return 1
        _report(counts, path)
    return 0


if __name__ == "__main__":
    sys.exit(main())