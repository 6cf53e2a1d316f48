"""Small user-library helpers with no direct built-in equivalent."""

from __future__ import annotations

from typing import TextIO


def atoi(s: str) -> int:
    """Value of the leading decimal digits of ``s``, as a 32-bit int.

    No sign and no leading blanks are accepted; with no digits the result
    is 0.
    """
    n = 0
    for ch in s:
        if not "0" <= ch <= "9":
            break
        n = n * 10 + ord(ch) - ord("0")
    n &= 0xFFFFFFFF
    return n - (1 << 32) if n & 0x80000000 else n


def gets(stream: TextIO, max: int) -> str:
    """Read at most ``max - 1`` characters, stopping after a newline or return."""
    chars = []
    while len(chars) + 1 < max:
        c = stream.read(1)
        if not c:
            break
        chars.append(c)
        if c in ("\n", "\r"):
            break
    return "".join(chars)