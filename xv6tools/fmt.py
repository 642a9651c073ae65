"""Minimal printf supporting %d, %l, %x, %p, %s, %c and %%."""

from __future__ import annotations

import operator
import sys
from typing import Any, TextIO

_U32 = 1 << 32
_U64 = 1 << 64


def _signed32(value: Any) -> int:
    v = operator.index(value) % _U32
    return v - _U32 if v >= 1 << 31 else v


def _char(value: Any) -> str:
    if isinstance(value, str) and len(value) == 1:
        return value
    return chr(operator.index(value) & 0xFF)


def _string(value: Any) -> str:
    if value is None:
        return "(null)"
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("latin-1")
    return str(value)


def format(fmt: str, *args: Any) -> str:
    """Render ``fmt`` with ``args`` the way the user-level printf does."""
    fmt = fmt.partition("\0")[0]
    values = iter(args)

    def take() -> Any:
        try:
            return next(values)
        except StopIteration:
            raise TypeError("not enough arguments for format string") from None

    out: list[str] = []
    chars = iter(fmt)
    for c in chars:
        if c != "%":
            out.append(c)
            continue
        spec = next(chars, None)
        if spec is None:
            break
        if spec == "d":
            out.append(str(_signed32(take())))
        elif spec == "l":
            out.append(str(operator.index(take()) % _U64))
        elif spec == "x":
            out.append(f"{operator.index(take()) % _U32:X}")
        elif spec == "p":
            out.append(f"0x{operator.index(take()) % _U64:016X}")
        elif spec == "s":
            out.append(_string(take()))
        elif spec == "c":
            out.append(_char(take()))
        elif spec == "%":
            out.append("%")
        else:
            out.append("%" + spec)
    return "".join(out)


def fprintf(stream: TextIO, fmt: str, *args: Any) -> None:
    """Write formatted output to ``stream``."""
    stream.write(format(fmt, *args))


def printf(fmt: str, *args: Any) -> None:
    """Write formatted output to standard output."""
    fprintf(sys.stdout, fmt, *args)