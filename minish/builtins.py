"""The shell's own commands: cd, echo, env, exit, export, pwd and unset."""

from __future__ import annotations

import errno
import os
from collections.abc import Callable, Sequence

from .commands import Command
from .conditions import has_meta, is_option, starts_with_digit
from .envtable import Attribute, key_of, value_of
from .errors import ShellExit, report
from .state import Shell
from .textutils import atol, has_non_name_char, is_long


def _write(shell: Shell, text: str) -> None:
    shell.stdout.write(text)
    shell.stdout.flush()


def _arg(argv: Sequence[str], position: int) -> str | None:
    return argv[position] if position < len(argv) else None


# cd


def _change_directory(shell: Shell, path: str) -> int:
    try:
        os.chdir(path)
    except OSError as exc:
        if exc.errno == errno.ENOTDIR:
            report("cd: ", path, ": Not a directory.", shell.stderr)
        else:
            report("cd: ", path, ": No such file or directory.", shell.stderr)
        shell.exit_code = 1
        return 1
    old = "OLDPWD=" + (shell.env.search("PWD") or "")
    current = "PWD=" + os.getcwd()
    export(shell, ["export", current, old])
    return 0


def _cd_to_variable(shell: Shell, variable: str) -> int:
    path = shell.env.search(variable)
    if not path:
        report("cd: `", variable, "': is not set.", shell.stderr)
        shell.exit_code = 1
        return 1
    if variable == "OLDPWD":
        _write(shell, f"{path}\n")
    return _change_directory(shell, path)


def cd(shell: Shell, argv: Sequence[str]) -> int:
    """Change the working directory and update PWD and OLDPWD.

    No argument, ``~`` or ``#`` goes to HOME; ``-`` goes to OLDPWD and prints it.
    """
    param = _arg(argv, 1)
    if param is not None and _arg(argv, 2) is not None:
        report("cd:", None, " too many arguments.", shell.stderr)
        return 1
    if param is not None and param.startswith("-") and len(param) > 1:
        report("cd: `", param, "': invalid option.", shell.stderr)
        return 2
    if not param or param in ("~", "#"):
        return _cd_to_variable(shell, "HOME")
    if param == "-":
        return _cd_to_variable(shell, "OLDPWD")
    return _change_directory(shell, param)


# echo


def _is_no_newline_flag(word: str) -> bool:
    return word.startswith("-") and all(char == "n" for char in word[1:])


def echo(shell: Shell, argv: Sequence[str]) -> int:
    """Print the arguments separated by spaces; leading ``-n`` flags drop the newline."""
    words = list(argv[1:])
    flags = 0
    while flags < len(words) and _is_no_newline_flag(words[flags]):
        flags += 1
    text = " ".join(words[flags:])
    if flags == 0:
        text += "\n"
    _write(shell, text)
    return 0


# env


def env(shell: Shell, argv: Sequence[str], envp: Sequence[str] | None = None) -> int:
    """Print the exported variables, one ``NAME=value`` per line."""
    if shell.env.search("PATH") is None:
        name = argv[0] if argv else "env"
        report("env: ", name, ": no such file or directory.", shell.stderr)
        return 127
    if not _arg(argv, 1):
        entries = envp if envp is not None else shell.env.envp()
        _write(shell, "".join(f"{entry}\n" for entry in entries))
        return 0
    return 127


# exit


def _numeric_argument_required(shell: Shell, argument: str) -> ShellExit:
    report("exit: ", argument, ": numeric argument required.", shell.stderr)
    return ShellExit(2)


def exit_shell(shell: Shell, argv: Sequence[str]) -> int:
    """Leave the shell by raising ShellExit.

    A numeric argument gives the status (0 without one); a non-numeric
    argument leaves with status 2. Two or more arguments whose first is
    numeric only report an error and return 1.
    """
    first = _arg(argv, 1)
    if first is not None and _arg(argv, 2) is not None:
        if not is_long(first):
            raise _numeric_argument_required(shell, first)
        report("exit: ", None, "too many arguments.", shell.stderr)
        shell.exit_code = 1
        return 1
    result = 0
    if first is not None:
        if not is_long(first):
            raise _numeric_argument_required(shell, first)
        result = atol(first)
    status = result % 256
    shell.exit_code = status
    _write(shell, "exit\n")
    raise ShellExit(status)


# export


def _print_declarations(shell: Shell) -> None:
    lines = []
    for key, value in shell.env.exported():
        if value is None:
            lines.append(f"declare -x {key}\n")
        else:
            lines.append(f'declare -x {key}="{value}"\n')
    _write(shell, "".join(lines))


def _set_exported(shell: Shell, key: str, value: str | None) -> None:
    location = shell.env.location(key)
    if location is None:
        shell.env.insert(key, value, Attribute.GLOBAL)
    elif location == Attribute.GLOBAL and value is not None:
        shell.env.substitute(key, value)
    elif location == Attribute.LOCAL:
        shell.env.export(key, Attribute.GLOBAL)


def export(shell: Shell, argv: Sequence[str]) -> int:
    """Set and export variables; with no argument list the exported ones."""
    if _arg(argv, 1) is None:
        _print_declarations(shell)
    for argument in argv[1:]:
        key = key_of(argument) or argument
        if is_option(key):
            report("export:`", key, "': not a valid option.", shell.stderr)
            return 2
        if not key or starts_with_digit(key) or has_non_name_char(key):
            report("export:`", key, "': not a valid identifier.", shell.stderr)
            return 1
        _set_exported(shell, key, value_of(argument))
    return 0


# pwd


def pwd(shell: Shell, argv: Sequence[str]) -> int:
    """Print the working directory, falling back to PWD when it cannot be read."""
    option = _arg(argv, 1)
    if option is not None and option.startswith("-"):
        report("pwd:`", option, "': invalid option.", shell.stderr)
        return 2
    try:
        current = os.getcwd()
    except OSError:
        current = shell.env.search("PWD") or ""
    _write(shell, f"{current}\n")
    return 0


# unset


def unset(shell: Shell, argv: Sequence[str]) -> int:
    """Remove variables; stop at the first name that is not valid."""
    for name in argv[1:]:
        if has_meta(name) or starts_with_digit(name):
            if is_option(name):
                report("unset:`", name, "': not an option.", shell.stderr)
                return 2
            report("unset:`", name, "': not a valid identifier ", shell.stderr)
            return 1
        shell.env.unset(name)
    return 0


# dispatch

_Builtin = Callable[[Shell, Command], int]

_PARENT: dict[str, _Builtin] = {
    "cd": lambda shell, command: cd(shell, command.argv),
    "export": lambda shell, command: export(shell, command.argv),
    "unset": lambda shell, command: unset(shell, command.argv),
    "exit": lambda shell, command: exit_shell(shell, command.argv),
}

_CHILD: dict[str, _Builtin] = {
    "env": lambda shell, command: env(shell, command.argv, command.envp),
    "export": lambda shell, command: export(shell, command.argv),
    "echo": lambda shell, command: echo(shell, command.argv),
    "pwd": lambda shell, command: pwd(shell, command.argv),
}


def run_parent(shell: Shell, command: Command) -> int:
    """Run a builtin that changes the shell itself, then rebuild the command's environment."""
    handler = _PARENT.get(command.exe_path or "")
    if handler is not None:
        shell.exit_code = handler(shell, command)
    command.envp = shell.env.envp()
    return shell.exit_code


def run_child(shell: Shell, command: Command) -> int:
    """Run a builtin that only produces output; return the new exit status."""
    handler = _CHILD.get(command.exe_path or "")
    if handler is not None:
        shell.exit_code = handler(shell, command)
    return shell.exit_code