"""Small C-style string helpers used by the user programs."""

from __future__ import annotations

from itertools import takewhile
from typing import BinaryIO

_DIGITS = "0123456789"


def _cstr(value: str | bytes) -> bytes:
    """Return the bytes of ``value`` up to, not including, the first NUL."""
    data = value.encode("utf-8") if isinstance(value, str) else bytes(value)
    return data.partition(b"\0")[0]


def atoi(s: str) -> int:
    """Convert the leading decimal digits of ``s``; no sign, no whitespace."""
    n = 0
    for ch in takewhile(lambda c: c in _DIGITS, s):
        n = n * 10 + ord(ch) - ord("0")
    return n


def strcmp(p: str | bytes, q: str | bytes) -> int:
    """Compare two NUL-terminated strings as unsigned bytes.

    Returns the difference of the first differing bytes, or 0 if equal.
    """
    a = _cstr(p) + b"\0"
    b = _cstr(q) + b"\0"
    for x, y in zip(a, b):
        if x != y or x == 0:
            return x - y
    return 0


def gets(stream: BinaryIO, max_len: int) -> bytes:
    """Read one line of at most ``max_len - 1`` bytes from ``stream``.

    Reading stops after a newline or carriage return, at end of input,
    or when the limit is reached. The terminator is kept.
    """
    line = bytearray()
    while len(line) + 1 < max_len:
        c = stream.read(1)
        if not c:
            break
        line += c
        if c in (b"\n", b"\r"):
            break
    return bytes(line)