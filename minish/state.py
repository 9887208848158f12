"""The state of one running shell."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, TextIO

from .envtable import EnvTable
from .errors import ShellExit

_NO_ENVIRONMENT = "Error! No environment variables detected."


@dataclass
class Shell:
    """Variables, the current input line and its parse, and the last exit status."""

    env: EnvTable
    exit_code: int = 0
    stdout: TextIO = field(default_factory=lambda: sys.stdout)
    stderr: TextIO = field(default_factory=lambda: sys.stderr)
    input: str | None = None
    tokens: list[Any] = field(default_factory=list)
    commands: list[Any] = field(default_factory=list)


def create_shell(
    environ: Iterable[str] | Mapping[str, str] | None = None,
    shlvl: str | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> Shell:
    """Create a shell from an environment (the process environment by default).

    Raises ShellExit with status 12 when the environment is empty.
    """
    err = stderr if stderr is not None else sys.stderr
    if environ is None:
        environ = dict(os.environ)
    entries = (
        [f"{name}={value}" for name, value in environ.items()]
        if isinstance(environ, Mapping)
        else list(environ)
    )
    if not entries:
        err.write(_NO_ENVIRONMENT)
        err.flush()
        raise ShellExit(12)
    return Shell(
        env=EnvTable.from_environ(entries, shlvl),
        stdout=stdout if stdout is not None else sys.stdout,
        stderr=err,
    )