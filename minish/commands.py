"""Commands of a pipeline: splitting tokens, pipes, redirections and here-documents."""

from __future__ import annotations

import os
import sys
import tempfile
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import TextIO

from .conditions import TokenType, is_redirection
from .errors import ShellExit
from .state import Shell
from .tokens import Token

UNSET_FD = -2
FAILED_FD = -1
INTERRUPTED_FD = -3

_OUTPUT_KINDS = frozenset({TokenType.APPEND, TokenType.REDIR_OUT})
_INPUT_KINDS = frozenset({TokenType.HEREDOC, TokenType.REDIR_IN})


@dataclass
class Command:
    """One simple command of a pipeline with its words, redirections and descriptors."""

    words: list[Token] = field(default_factory=list)
    redirections: list[Token] = field(default_factory=list)
    endpoint: TokenType | None = None
    is_piped: bool = False
    argv: list[str] = field(default_factory=list)
    exe_path: str | None = None
    envp: list[str] = field(default_factory=list)
    fd_in: int = UNSET_FD
    fd_out: int = UNSET_FD
    fd_pipe: tuple[int, int] | None = None
    error_number: int = 0
    error_file: str | None = None
    id: int = 0


def split_pipeline(tokens: Iterable[Token]) -> list[Command]:
    """Group tokens into commands separated by pipes.

    Redirection operators and the word after each go to ``redirections``;
    every other token goes to ``words``.
    """
    commands: list[Command] = []
    current: Command | None = None
    prev: TokenType | None = None
    for token in tokens:
        if current is None:
            current = Command(id=len(commands))
            commands.append(current)
        if token.kind < TokenType.PIPE:
            target = current.redirections if is_redirection(prev, token.kind) else current.words
            target.append(Token(token.value, token.kind))
        else:
            current.endpoint = token.kind
            current = None
        prev = token.kind
    for command in commands:
        command.argv = [token.value for token in command.words]
    return commands


def open_pipes(commands: Sequence[Command]) -> None:
    """Connect each command that ends in a pipe to the command after it."""
    for current, following in zip(commands, commands[1:]):
        if current.endpoint != TokenType.PIPE:
            continue
        try:
            read_fd, write_fd = os.pipe()
        except OSError as exc:
            raise ShellExit(11) from exc
        current.fd_pipe = (read_fd, write_fd)
        current.fd_out = write_fd
        current.is_piped = True
        following.fd_in = read_fd
        following.is_piped = True


def _prompt_lines() -> Iterator[str]:
    while True:
        try:
            yield input("> ")
        except EOFError:
            return


def read_heredoc(
    limiter: str, lines: Iterable[str] | None = None, stream: TextIO | None = None
) -> str:
    """Collect lines up to one equal to ``limiter``; each collected line ends in a newline.

    Lines are read from the terminal when ``lines`` is None. Reaching the end
    of input first writes a warning to ``stream`` (standard output by default).
    """
    source = iter(lines) if lines is not None else _prompt_lines()
    collected: list[str] = []
    for raw in source:
        line = raw[:-1] if raw.endswith("\n") else raw
        if line == limiter:
            return "".join(collected)
        collected.append(line + "\n")
    out = stream if stream is not None else sys.stdout
    out.write(f"minishell: warning: here-doc delimited by {limiter}\n")
    out.flush()
    return "".join(collected)


def heredoc(
    limiter: str, lines: Iterable[str] | None = None, stream: TextIO | None = None
) -> int:
    """Read a here-document and return a descriptor open for reading its text.

    Returns -3 when the input is interrupted.
    """
    try:
        text = read_heredoc(limiter, lines, stream)
    except KeyboardInterrupt:
        out = stream if stream is not None else sys.stdout
        out.write("\n")
        out.flush()
        return INTERRUPTED_FD
    with tempfile.TemporaryFile() as buffer:
        buffer.write(text.encode("utf-8", "surrogateescape"))
        buffer.flush()
        buffer.seek(0)
        return os.dup(buffer.fileno())


def _close(fd: int) -> None:
    if fd > 2:
        try:
            os.close(fd)
        except OSError:
            pass


def apply_redirection(command: Command, kind: TokenType, filename: str) -> None:
    """Open ``filename`` for the redirection ``kind`` and store the descriptor.

    The descriptor it replaces is closed. A failure stores -1 together with
    the error number and the file name.
    """
    if kind in _OUTPUT_KINDS:
        _close(command.fd_out)
    elif kind in _INPUT_KINDS:
        _close(command.fd_in)
    try:
        if kind == TokenType.APPEND:
            command.fd_out = os.open(filename, os.O_RDWR | os.O_APPEND | os.O_CREAT, 0o777)
        elif kind == TokenType.REDIR_OUT:
            command.fd_out = os.open(filename, os.O_RDWR | os.O_TRUNC | os.O_CREAT, 0o777)
        elif kind == TokenType.REDIR_IN:
            command.fd_in = os.open(filename, os.O_RDONLY)
        elif kind == TokenType.HEREDOC:
            command.fd_in = heredoc(filename)
    except OSError as exc:
        if kind in _OUTPUT_KINDS:
            command.fd_out = FAILED_FD
        else:
            command.fd_in = FAILED_FD
        command.error_number = exc.errno or 0
        command.error_file = filename


def define_redirections(commands: Sequence[Command], shell: Shell) -> bool:
    """Apply every command's redirections and fill in the standard descriptors.

    Returns False, with exit status 130, when a here-document was interrupted.
    """
    for command in commands:
        items = iter(command.redirections)
        for operator, target in zip(items, items):
            if command.fd_out == FAILED_FD and command.fd_in == FAILED_FD:
                break
            apply_redirection(command, operator.kind, target.value)
        if command.fd_in == INTERRUPTED_FD:
            shell.exit_code = 130
            return False
        if command.fd_in == UNSET_FD:
            command.fd_in = 0
        if command.fd_out == UNSET_FD:
            command.fd_out = 1
    return True