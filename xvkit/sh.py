"""Command-line parser for the shell's command language."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Union

from xvkit.layout import OpenFlag

WHITESPACE = " \t\r\n\v"
SYMBOLS = "<|>&;()"
MAXARGS = 10

_LEXEME_PATTERN = re.compile(r">>|[<|>&;()]|[^ \t\r\n\v<|>&;()]+")


class ShellSyntaxError(ValueError):
    """The command line cannot be parsed."""


@dataclass(frozen=True)
class Token:
    """A lexical token: ``kind`` is the symbol, '+' for '>>', or 'a' for a word."""

    kind: str
    text: str
    pos: int


@dataclass
class ExecCmd:
    argv: List[str] = field(default_factory=list)


@dataclass
class RedirCmd:
    cmd: "Command"
    file: str
    mode: OpenFlag
    fd: int


@dataclass
class PipeCmd:
    left: "Command"
    right: "Command"


@dataclass
class ListCmd:
    left: "Command"
    right: "Command"


@dataclass
class BackCmd:
    cmd: "Command"


Command = Union[ExecCmd, RedirCmd, PipeCmd, ListCmd, BackCmd]


def _truncate(s: str) -> str:
    return s.split("\0", 1)[0]


def tokenize(s: str) -> List[Token]:
    """Split a command line into tokens; text after a NUL is ignored."""
    text = _truncate(s)
    tokens = []
    for m in _LEXEME_PATTERN.finditer(text):
        lexeme = m.group()
        if lexeme == ">>":
            kind = "+"
        elif lexeme in SYMBOLS:
            kind = lexeme
        else:
            kind = "a"
        tokens.append(Token(kind, lexeme, m.start()))
    return tokens


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = _truncate(text)
        self.tokens = tokenize(self.text)
        self.index = 0

    def peek(self, chars: str) -> bool:
        if self.index >= len(self.tokens):
            return False
        return self.tokens[self.index].text[0] in chars

    def take(self) -> Optional[Token]:
        if self.index >= len(self.tokens):
            return None
        tok = self.tokens[self.index]
        self.index += 1
        return tok

    def leftovers(self) -> Optional[str]:
        if self.index >= len(self.tokens):
            return None
        return self.text[self.tokens[self.index].pos :]

    def parse_line(self) -> Command:
        cmd = self.parse_pipe()
        while self.peek("&"):
            self.take()
            cmd = BackCmd(cmd)
        if self.peek(";"):
            self.take()
            cmd = ListCmd(cmd, self.parse_line())
        return cmd

    def parse_pipe(self) -> Command:
        cmd = self.parse_exec()
        if self.peek("|"):
            self.take()
            cmd = PipeCmd(cmd, self.parse_pipe())
        return cmd

    def parse_redirs(self, cmd: Command) -> Command:
        while self.peek("<>"):
            tok = self.take()
            target = self.take()
            if target is None or target.kind != "a":
                raise ShellSyntaxError("missing file for redirection")
            if tok.kind == "<":
                cmd = RedirCmd(cmd, target.text, OpenFlag.RDONLY, 0)
            else:
                cmd = RedirCmd(cmd, target.text, OpenFlag.WRONLY | OpenFlag.CREATE, 1)
        return cmd

    def parse_block(self) -> Command:
        if not self.peek("("):
            raise ShellSyntaxError("parseblock")
        self.take()
        cmd = self.parse_line()
        if not self.peek(")"):
            raise ShellSyntaxError("syntax - missing )")
        self.take()
        return self.parse_redirs(cmd)

    def parse_exec(self) -> Command:
        if self.peek("("):
            return self.parse_block()
        cmd = ExecCmd()
        ret: Command = self.parse_redirs(cmd)
        while not self.peek("|)&;"):
            tok = self.take()
            if tok is None:
                break
            if tok.kind != "a":
                raise ShellSyntaxError("syntax")
            cmd.argv.append(tok.text)
            if len(cmd.argv) >= MAXARGS:
                raise ShellSyntaxError("too many args")
            ret = self.parse_redirs(ret)
        return ret


def parse_cmd(s: str) -> Command:
    """Parse a whole command line into a command tree."""
    parser = _Parser(s)
    cmd = parser.parse_line()
    rest = parser.leftovers()
    if rest is not None:
        raise ShellSyntaxError(f"leftovers: {rest}")
    return cmd