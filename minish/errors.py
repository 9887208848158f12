"""Error types and the shell's error messages."""

from __future__ import annotations

import errno
import sys
from typing import TextIO

PREFIX = "minishell: "
ELEMENT_MARK = "\001\033[0;30m"


class ShellExit(Exception):
    """Raised to leave the shell with a given status."""

    def __init__(self, status: int = 0) -> None:
        super().__init__(status)
        self.status = status


class ParseError(Exception):
    """Raised when an input line is not valid shell grammar."""

    def __init__(self, message: str, status: int = 2) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


def format_error(source: str | None, element: str | None, text: str | None) -> str:
    """Build one error line: prefix, source, the marked element and the text."""
    parts = [PREFIX, source or ""]
    if element is not None:
        parts.extend((ELEMENT_MARK, element, ELEMENT_MARK))
    parts.append(text or "")
    parts.append("\n")
    return "".join(parts)


def report(
    source: str | None,
    element: str | None,
    text: str | None,
    stream: TextIO | None = None,
) -> str:
    """Write an error line to ``stream`` (standard error by default) and return it."""
    message = format_error(source, element, text)
    out = stream if stream is not None else sys.stderr
    out.write(message)
    out.flush()
    return message


def file_error(filename: str | None, error_number: int, stream: TextIO | None = None) -> int:
    """Report a failure to open or run ``filename`` and return the exit status for it."""
    if error_number == errno.EACCES:
        report(None, filename, ": Is a directory.", stream)
        return 126
    if error_number == errno.ENOENT:
        report(None, filename, ": no such file or directory.", stream)
        return 1
    report(None, filename, ": command not found.", stream)
    return 127