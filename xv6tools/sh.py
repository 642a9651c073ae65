"""Command-line parser for the small shell: pipes, lists, background jobs and redirections."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union

WHITESPACE = " \t\r\n\v"
SYMBOLS = "<|>&;()"
MAXARGS = 10


class ShellSyntaxError(ValueError):
    """Raised when a command line cannot be parsed."""


class RedirMode(Enum):
    """How a redirected file is opened."""

    INPUT = "<"
    OUTPUT = ">"
    APPEND = ">>"


@dataclass
class ExecCmd:
    """Run a program with arguments."""

    argv: list = field(default_factory=list)


@dataclass
class RedirCmd:
    """Run ``cmd`` with descriptor ``fd`` redirected to ``file``."""

    cmd: "Command"
    file: str
    mode: RedirMode
    fd: int


@dataclass
class PipeCmd:
    """Connect the output of ``left`` to the input of ``right``."""

    left: "Command"
    right: "Command"


@dataclass
class ListCmd:
    """Run ``left`` to completion, then ``right``."""

    left: "Command"
    right: "Command"


@dataclass
class BackCmd:
    """Run ``cmd`` without waiting for it."""

    cmd: "Command"


Command = Union[ExecCmd, RedirCmd, PipeCmd, ListCmd, BackCmd]

_REDIRECTS = {
    "<": (RedirMode.INPUT, 0),
    ">": (RedirMode.OUTPUT, 1),
    "+": (RedirMode.APPEND, 1),
}


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def skip_space(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos] in WHITESPACE:
            self.pos += 1

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self, toks: str) -> bool:
        self.skip_space()
        return not self.at_end() and self.text[self.pos] in toks

    def token(self) -> Tuple[Optional[str], str]:
        """Return the next token kind and its text; kind is None at end."""
        self.skip_space()
        start = self.pos
        kind: Optional[str]
        if self.at_end():
            kind = None
        else:
            c = self.text[self.pos]
            if c in "|();&<":
                self.pos += 1
                kind = c
            elif c == ">":
                self.pos += 1
                kind = ">"
                if not self.at_end() and self.text[self.pos] == ">":
                    self.pos += 1
                    kind = "+"
            else:
                kind = "a"
                while not self.at_end() and self.text[self.pos] not in WHITESPACE + SYMBOLS:
                    self.pos += 1
        word = self.text[start:self.pos]
        self.skip_space()
        return kind, word

    def line(self) -> Command:
        cmd = self.pipe()
        while self.peek("&"):
            self.token()
            cmd = BackCmd(cmd)
        if self.peek(";"):
            self.token()
            cmd = ListCmd(cmd, self.line())
        return cmd

    def pipe(self) -> Command:
        cmd = self.exec_()
        if self.peek("|"):
            self.token()
            cmd = PipeCmd(cmd, self.pipe())
        return cmd

    def redirs(self, cmd: Command) -> Command:
        while self.peek("<>"):
            kind, _ = self.token()
            file_kind, name = self.token()
            if file_kind != "a":
                raise ShellSyntaxError("missing file for redirection")
            mode, fd = _REDIRECTS[kind]
            cmd = RedirCmd(cmd, name, mode, fd)
        return cmd

    def block(self) -> Command:
        if not self.peek("("):
            raise ShellSyntaxError("parseblock")
        self.token()
        cmd = self.line()
        if not self.peek(")"):
            raise ShellSyntaxError("syntax - missing )")
        self.token()
        return self.redirs(cmd)

    def exec_(self) -> Command:
        if self.peek("("):
            return self.block()
        node = ExecCmd()
        ret = self.redirs(node)
        while not self.peek("|)&;"):
            kind, word = self.token()
            if kind is None:
                break
            if kind != "a":
                raise ShellSyntaxError("syntax")
            node.argv.append(word)
            if len(node.argv) >= MAXARGS:
                raise ShellSyntaxError("too many args")
            ret = self.redirs(ret)
        return ret


def parse_command(s: str) -> Command:
    """Parse one command line into a command tree.

    Raises ShellSyntaxError on malformed input.
    """
    text = s.partition("\0")[0]
    parser = _Parser(text)
    cmd = parser.line()
    parser.skip_space()
    if not parser.at_end():
        raise ShellSyntaxError(f"syntax: leftovers: {text[parser.pos:]}")
    return cmd