"""Small file utilities: cat, echo, wc, ls, ln, mkdir, rm and kill."""

from __future__ import annotations

import os
import re
import signal
import stat as _stat
import sys
from typing import BinaryIO, Iterable, NamedTuple, TextIO

from xv6tools.records import FileType
from xv6tools.ulib import atoi

DIRSIZ = 14
_BUFSIZE = 512
_PATHBUF = 512
_WORD = re.compile(rb"[^ \r\t\n\v\0]+")


def _args(argv: list[str] | None) -> list[str]:
    return sys.argv[1:] if argv is None else list(argv)


def cat(streams: Iterable[BinaryIO], out: BinaryIO) -> None:
    """Copy every stream to ``out`` in turn.

    Raises OSError("read error") or OSError("write error") on failure.
    """
    for stream in streams:
        while True:
            try:
                chunk = stream.read(_BUFSIZE)
            except OSError as exc:
                raise OSError("read error") from exc
            if not chunk:
                break
            try:
                written = out.write(chunk)
            except OSError as exc:
                raise OSError("write error") from exc
            if written is not None and written != len(chunk):
                raise OSError("write error")


def echo(args: Iterable[str], out: TextIO) -> None:
    """Write the arguments separated by spaces; a newline ends a non-empty list."""
    words = list(args)
    if words:
        out.write(" ".join(words) + "\n")


class Counts(NamedTuple):
    """Line, word and byte counts."""

    lines: int
    words: int
    chars: int


def count(data: bytes) -> Counts:
    """Count newlines, words and bytes; NUL separates words like white space."""
    data = bytes(data)
    return Counts(data.count(b"\n"), len(_WORD.findall(data)), len(data))


def fmtname(path: str) -> str:
    """Return the last path component, blank-padded to DIRSIZ characters."""
    name = path.rpartition("/")[2]
    if len(name) >= DIRSIZ:
        return name
    return name.ljust(DIRSIZ)


def _file_type(st: os.stat_result) -> FileType:
    if _stat.S_ISDIR(st.st_mode):
        return FileType.DIR
    if _stat.S_ISREG(st.st_mode):
        return FileType.FILE
    return FileType.DEVICE


def _entry_line(path: str, st: os.stat_result) -> str:
    return f"{fmtname(path)} {int(_file_type(st))} {st.st_ino} {st.st_size}\n"


def ls(path: str, out: TextIO) -> None:
    """List a file, or every entry of a directory, with type, inode and size."""
    try:
        st = os.stat(path)
    except OSError:
        sys.stderr.write(f"ls: cannot open {path}\n")
        return
    kind = _file_type(st)
    if kind is FileType.FILE:
        out.write(_entry_line(path, st))
    elif kind is FileType.DIR:
        if len(path) + 1 + DIRSIZ + 1 > _PATHBUF:
            out.write("ls: path too long\n")
            return
        try:
            names = sorted(os.listdir(path))
        except OSError:
            sys.stderr.write(f"ls: cannot open {path}\n")
            return
        for name in [".", ".."] + names:
            entry = f"{path}/{name}"
            try:
                entry_st = os.stat(entry)
            except OSError:
                out.write(f"ls: cannot stat {entry}\n")
                continue
            out.write(_entry_line(entry, entry_st))


def cat_main(argv: list[str] | None = None) -> int:
    """Concatenate the named files, or standard input, to standard output."""
    args = _args(argv)
    out = sys.stdout.buffer
    try:
        if not args:
            cat([sys.stdin.buffer], out)
            return 0
        for name in args:
            try:
                handle = open(name, "rb")
            except OSError:
                sys.stderr.write(f"cat: cannot open {name}\n")
                return 1
            with handle:
                cat([handle], out)
        return 0
    except OSError as exc:
        sys.stderr.write(f"cat: {exc}\n")
        return 1
    finally:
        out.flush()


def echo_main(argv: list[str] | None = None) -> int:
    """Print the arguments."""
    echo(_args(argv), sys.stdout)
    return 0


def _wc(stream: BinaryIO, name: str) -> bool:
    try:
        data = stream.read()
    except OSError:
        sys.stdout.write("wc: read error\n")
        return False
    c = count(data)
    sys.stdout.write(f"{c.lines} {c.words} {c.chars} {name}\n")
    return True


def wc_main(argv: list[str] | None = None) -> int:
    """Print line, word and byte counts for each file, or standard input."""
    args = _args(argv)
    if not args:
        return 0 if _wc(sys.stdin.buffer, "") else 1
    for name in args:
        try:
            handle = open(name, "rb")
        except OSError:
            sys.stdout.write(f"wc: cannot open {name}\n")
            return 1
        with handle:
            if not _wc(handle, name):
                return 1
    return 0


def ls_main(argv: list[str] | None = None) -> int:
    """List each named path, or the current directory."""
    args = _args(argv) or ["."]
    for path in args:
        ls(path, sys.stdout)
    return 0


def ln_main(argv: list[str] | None = None) -> int:
    """Create a hard link: ln old new."""
    args = _args(argv)
    if len(args) != 2:
        sys.stderr.write("Usage: ln old new\n")
        return 1
    old, new = args
    try:
        os.link(old, new)
    except OSError:
        sys.stderr.write(f"link {old} {new}: failed\n")
    return 0


def mkdir_main(argv: list[str] | None = None) -> int:
    """Create directories, stopping at the first failure."""
    args = _args(argv)
    if not args:
        sys.stderr.write("Usage: mkdir files...\n")
        return 1
    for name in args:
        try:
            os.mkdir(name)
        except OSError:
            sys.stderr.write(f"mkdir: {name} failed to create\n")
            break
    return 0


def _unlink(name: str) -> None:
    if os.path.isdir(name) and not os.path.islink(name):
        os.rmdir(name)
    else:
        os.unlink(name)


def rm_main(argv: list[str] | None = None) -> int:
    """Remove files or empty directories, stopping at the first failure."""
    args = _args(argv)
    if not args:
        sys.stderr.write("Usage: rm files...\n")
        return 1
    for name in args:
        try:
            _unlink(name)
        except OSError:
            sys.stderr.write(f"rm: {name} failed to delete\n")
            break
    return 0


def kill_main(argv: list[str] | None = None) -> int:
    """Kill each process whose id is given; failures are ignored."""
    args = _args(argv)
    if not args:
        sys.stderr.write("usage: kill pid...\n")
        return 1
    sig = getattr(signal, "SIGKILL", signal.SIGTERM)
    for arg in args:
        pid = atoi(arg)
        if pid < 1:
            continue
        try:
            os.kill(pid, sig)
        except OSError:
            pass
    return 0