"""Finding the program a command name refers to."""

from __future__ import annotations

import os
from collections.abc import Iterable, Sequence

from .conditions import is_builtin
from .envtable import EnvTable
from .errors import report
from .state import Shell
from .textutils import split_fields

_SILENT_NAMES = frozenset({":", "!", "#"})


def path_list(env: EnvTable) -> list[str] | None:
    """Return the directories named by PATH, or None when PATH has no value."""
    value = env.search("PATH")
    if value is None:
        return None
    return split_fields(value, ":")


def find_in_path(name: str, directories: Iterable[str]) -> str | None:
    """Return ``directory/name`` for the first directory where that file exists."""
    for directory in directories:
        candidate = f"{directory}/{name}"
        if os.access(candidate, os.F_OK):
            return candidate
    return None


def setup_path(name: str, env: EnvTable) -> str | None:
    """Return the path to run for ``name``.

    A name holding a slash is used as it is; otherwise PATH is searched and,
    failing that, an executable file of that name in the working directory
    is used.
    """
    if "/" in name:
        return name
    path = None
    directories = path_list(env)
    if directories is not None:
        path = find_in_path(name, directories)
    if path is None and os.access(name, os.F_OK | os.X_OK):
        path = name
    return path


def resolve_command(argv: Sequence[str], shell: Shell) -> str | None:
    """Return what to run for ``argv``: the builtin's name or a program path.

    When nothing is found the error is reported and the exit status set to
    127, except for the names ``:``, ``!`` and ``#`` which fail silently.
    """
    if not argv:
        return None
    name = argv[0]
    if is_builtin(name):
        return name
    path = setup_path(name, shell.env)
    if path is None:
        if shell.env.search("PATH") is None:
            shell.exit_code = 127
            report("cmd: ", name, ": no such file in directory", shell.stderr)
        elif name not in _SILENT_NAMES:
            shell.exit_code = 127
            report("cmd: `", name, "': command not found.", shell.stderr)
    return path


def folder_path() -> str:
    """Return the working directory without its leading slash, followed by a slash."""
    cwd = os.getcwd()
    if "/" not in cwd:
        raise ValueError(f"working directory has no '/': {cwd}")
    return cwd[1:] + "/"