"""Running the commands of a pipeline and the signal handling around it."""

from __future__ import annotations

import io
import os
import signal
import subprocess
import sys
import threading
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from typing import Any

from .builtins import run_child, run_parent
from .commands import (
    FAILED_FD,
    UNSET_FD,
    Command,
    define_redirections,
    open_pipes,
)
from .conditions import is_builtin
from .errors import file_error, report
from .paths import resolve_command
from .state import Shell

_PARENT_ONLY = frozenset({"cd", "unset", "exit"})


@dataclass
class _Job:
    """A started command: a child process, or the status of a builtin run in-process."""

    process: subprocess.Popen[bytes] | None = None
    status: int = 0
    writer: threading.Thread | None = None

    def wait(self) -> int:
        if self.writer is not None:
            self.writer.join()
        if self.process is not None:
            return self.process.wait()
        return self.status


def needs_fork(shell: Shell, command: Command) -> bool:
    """Return False for builtins that must change the shell itself.

    ``cd``, ``unset``, ``exit`` and ``export`` with arguments run here in the
    shell when they are not part of a pipeline, and are skipped when they are.
    Everything else needs a child of its own.
    """
    name = command.exe_path or ""
    first = command.argv[1] if len(command.argv) > 1 else ""
    if name in _PARENT_ONLY or (name == "export" and first):
        if not command.is_piped:
            run_parent(shell, command)
        return False
    return True


def build_envp(shell: Shell) -> list[str]:
    """Return the exported variables as ``NAME=value`` strings."""
    return shell.env.envp()


def _environment(envp: Iterable[str]) -> dict[str, str]:
    pairs = (entry.split("=", 1) for entry in envp if "=" in entry)
    return {name: value for name, value in pairs}


def _close_fds(command: Command) -> None:
    for attribute in ("fd_in", "fd_out"):
        fd = getattr(command, attribute)
        if fd > 2:
            try:
                os.close(fd)
            except OSError:
                pass
            setattr(command, attribute, UNSET_FD)


def _write_all(fd: int, data: bytes) -> None:
    view = memoryview(data)
    try:
        while view:
            written = os.write(fd, view)
            view = view[written:]
    except BrokenPipeError:
        pass
    finally:
        os.close(fd)


def _run_builtin(shell: Shell, command: Command) -> _Job:
    """Run a builtin the way a child would: its exit status does not touch the shell."""
    if command.fd_out > 2:
        buffer = io.StringIO()
        status = run_child(replace(shell, stdout=buffer), command)
        data = buffer.getvalue().encode("utf-8", "surrogateescape")
        writer = threading.Thread(
            target=_write_all, args=(os.dup(command.fd_out), data), daemon=True
        )
        writer.start()
        return _Job(status=status, writer=writer)
    return _Job(status=run_child(replace(shell), command))


def _spawn(shell: Shell, command: Command) -> _Job:
    stdin = command.fd_in if command.fd_in > 2 else None
    stdout = command.fd_out if command.fd_out > 2 else None
    try:
        process = subprocess.Popen(
            command.argv,
            executable=command.exe_path,
            env=_environment(command.envp),
            stdin=stdin,
            stdout=stdout,
        )
    except OSError as exc:
        return _Job(status=file_error(command.argv[0], exc.errno or 0, shell.stderr))
    return _Job(process=process)


def _empty_command(shell: Shell, name: str) -> None:
    if name == "":
        report("cmd: `", name, "': Command not found.", shell.stderr)
        shell.exit_code = 127
    elif name == ".":
        report("cmd: `", name, "': Filename argument required.", shell.stderr)
        shell.exit_code = 2


def _wait(shell: Shell, jobs: Sequence[_Job]) -> None:
    statuses = [job.wait() for job in jobs]
    if statuses and statuses[-1] >= 0:
        shell.exit_code = statuses[-1]


def run_commands(shell: Shell, commands: Sequence[Command]) -> int:
    """Start every command, wait for all of them and return the new exit status.

    The status is the one of the last started command, when it exited normally.
    """
    jobs: list[_Job] = []
    try:
        for command in commands:
            command.exe_path = resolve_command(command.argv, shell)
            command.envp = build_envp(shell)
            name = command.argv[0] if command.argv else None
            if name is not None and name in ("", "."):
                _empty_command(shell, name)
            elif command.fd_in == FAILED_FD or command.fd_out == FAILED_FD:
                shell.exit_code = file_error(
                    command.error_file, command.error_number, shell.stderr
                )
            elif command.exe_path and needs_fork(shell, command):
                if is_builtin(name):
                    jobs.append(_run_builtin(shell, command))
                else:
                    jobs.append(_spawn(shell, command))
            _close_fds(command)
    finally:
        for command in commands:
            _close_fds(command)
    _wait(shell, jobs)
    return shell.exit_code


def start_execution(shell: Shell, commands: Iterable[Command]) -> int:
    """Open the pipes, apply the redirections and run the commands."""
    pipeline = list(commands)
    shell.commands = pipeline
    open_pipes(pipeline)
    try:
        ready = define_redirections(pipeline, shell)
    except BaseException:
        for command in pipeline:
            _close_fds(command)
        raise
    if not ready:
        for command in pipeline:
            _close_fds(command)
        return shell.exit_code
    return run_commands(shell, pipeline)


def _quit_signal() -> int | None:
    return getattr(signal, "SIGQUIT", None)


def _install(handlers: dict[int, Any]) -> dict[int, Any]:
    return {signum: signal.signal(signum, handler) for signum, handler in handlers.items()}


def prompt_signals() -> dict[int, Any]:
    """Set the handlers used while waiting for input; return the previous ones.

    Ctrl-C prints a newline and raises KeyboardInterrupt so that a fresh
    prompt can be shown; the quit signal is ignored.
    """

    def on_interrupt(signum: int, frame: Any) -> None:
        sys.stdout.write("\n")
        sys.stdout.flush()
        raise KeyboardInterrupt

    handlers: dict[int, Any] = {signal.SIGINT: on_interrupt}
    quit_signal = _quit_signal()
    if quit_signal is not None:
        handlers[quit_signal] = signal.SIG_IGN
    return _install(handlers)


def execution_signals(shell: Shell) -> dict[int, Any]:
    """Set the handlers used while commands run; return the previous ones.

    An interrupt sets the exit status to 130 and a quit to 131.
    """
    quit_signal = _quit_signal()

    def on_signal(signum: int, frame: Any) -> None:
        if quit_signal is not None and signum == quit_signal:
            shell.stderr.write("Quit (core dumped)\n")
            shell.stderr.flush()
            shell.exit_code = 131
        if signum == signal.SIGINT:
            shell.stdout.write("\n")
            shell.stdout.flush()
            shell.exit_code = 130

    handlers: dict[int, Any] = {signal.SIGINT: on_signal}
    if quit_signal is not None:
        handlers[quit_signal] = on_signal
    return _install(handlers)