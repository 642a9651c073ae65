"""A tiny grep supporting only the ^ . * $ operators."""

from __future__ import annotations

import sys
from typing import BinaryIO

_BUFSIZE = 1024


def match(re: str, text: str) -> bool:
    """Return True if ``re`` matches anywhere in ``text``."""
    if re.startswith("^"):
        return _matchhere(re, 1, text, 0)
    return any(_matchhere(re, 0, text, j) for j in range(len(text) + 1))


def _matchhere(re: str, i: int, text: str, j: int) -> bool:
    if i == len(re):
        return True
    if i + 1 < len(re) and re[i + 1] == "*":
        return _matchstar(re[i], re, i + 2, text, j)
    if re[i] == "$" and i + 1 == len(re):
        return j == len(text)
    if j < len(text) and (re[i] == "." or re[i] == text[j]):
        return _matchhere(re, i + 1, text, j + 1)
    return False


def _matchstar(c: str, re: str, i: int, text: str, j: int) -> bool:
    while True:
        if _matchhere(re, i, text, j):
            return True
        if not (j < len(text) and (text[j] == c or c == ".")):
            return False
        j += 1


def grep(pattern: str, stream: BinaryIO, out: BinaryIO) -> None:
    """Copy to ``out`` every newline-terminated line of ``stream`` that matches.

    A partial line that fills the 1 KiB line buffer ends the search.
    """
    pending = b""
    while True:
        room = _BUFSIZE - 1 - len(pending)
        chunk = stream.read(room) if room > 0 else b""
        if not chunk:
            break
        pending += chunk
        *lines, pending = pending.split(b"\n")
        for line in lines:
            if match(pattern, line.decode("latin-1")):
                out.write(line + b"\n")


def main(argv: list[str] | None = None) -> int:
    """Run grep over the named files, or standard input; return the status."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        sys.stderr.write("usage: grep pattern [file ...]\n")
        return 1
    pattern, files = args[0], args[1:]
    out = sys.stdout.buffer
    try:
        if not files:
            grep(pattern, sys.stdin.buffer, out)
            return 0
        for name in files:
            try:
                handle = open(name, "rb")
            except OSError:
                out.write(f"grep: cannot open {name}\n".encode())
                return 1
            with handle:
                grep(pattern, handle, out)
        return 0
    finally:
        out.flush()