"""Minimal formatted output understanding %d, %x, %p, %s, %c and %%."""

from __future__ import annotations

from typing import Any, TextIO

_DIGITS = "0123456789ABCDEF"
_MASK32 = 0xFFFFFFFF


def format_int(value: int, base: int, signed: bool) -> str:
    """Render a 32-bit integer in ``base``, upper-case digits.

    Unsigned rendering shows the two's complement bit pattern of negative
    values.
    """
    if not 2 <= base <= len(_DIGITS):
        raise ValueError(f"base must be between 2 and {len(_DIGITS)}, got {base}")
    x = int(value) & _MASK32
    negative = bool(signed and x & 0x80000000)
    if negative:
        x = (-x) & _MASK32
    digits = []
    while True:
        x, rem = divmod(x, base)
        digits.append(_DIGITS[rem])
        if x == 0:
            break
    if negative:
        digits.append("-")
    return "".join(reversed(digits))


def sprintf(fmt: str, *args: Any) -> str:
    """Format ``args`` according to ``fmt`` and return the text.

    Unknown conversions are copied out unchanged to draw attention; a lone
    '%' at the end of the format is dropped.
    """
    values = iter(args)

    def take() -> Any:
        try:
            return next(values)
        except StopIteration:
            raise ValueError(f"format {fmt!r} needs more arguments") from None

    out = []
    pending = False
    for c in fmt:
        if not pending:
            if c == "%":
                pending = True
            else:
                out.append(c)
            continue
        pending = False
        if c == "d":
            out.append(format_int(take(), 10, True))
        elif c in ("x", "p"):
            out.append(format_int(take(), 16, False))
        elif c == "s":
            s = take()
            out.append("(null)" if s is None else str(s))
        elif c == "c":
            v = take()
            out.append(v[:1] if isinstance(v, str) else chr(int(v) & 0xFF))
        elif c == "%":
            out.append("%")
        else:
            out.append("%" + c)
    return "".join(out)


def printf(stream: TextIO, fmt: str, *args: Any) -> None:
    """Write the formatted text to ``stream``."""
    stream.write(sprintf(fmt, *args))