"""Predicates used while splitting and classifying an input line."""

from __future__ import annotations

from enum import IntEnum

from .textutils import has_non_name_char, is_alnum, is_space, same_prefix

_SEPARATORS = "|<> "
_QUOTES = "\"'"
_BUILTINS = frozenset({"cd", "echo", "export", "env", "exit", "pwd", "unset"})
_DOUBLED = frozenset("|><& ")


class TokenType(IntEnum):
    """Kind of a token; everything below PIPE belongs to one command."""

    WORD = 0
    REDIR_OUT = 1
    APPEND = 2
    REDIR_IN = 3
    HEREDOC = 4
    PIPE = 5


_REDIRECTIONS = frozenset(
    {TokenType.REDIR_OUT, TokenType.APPEND, TokenType.REDIR_IN, TokenType.HEREDOC}
)


def token_type(text: str) -> TokenType:
    """Classify the text of one token."""
    if same_prefix(text, "<", 2) and not same_prefix(text, "<<", 2):
        return TokenType.REDIR_IN
    if (same_prefix(text, ">", 2) or same_prefix(text, ">|", 2)) and not same_prefix(
        text, ">>", 2
    ):
        return TokenType.REDIR_OUT
    if same_prefix(text, "|", 1):
        return TokenType.PIPE
    if same_prefix(text, ">>", 2):
        return TokenType.APPEND
    if same_prefix(text, "<<", 2):
        return TokenType.HEREDOC
    return TokenType.WORD


def is_redirection(prev: int | None, kind: int | None) -> bool:
    """Return True if ``kind`` is a redirection operator or follows one."""
    return kind in _REDIRECTIONS or prev in _REDIRECTIONS


def is_builtin(name: str | None) -> bool:
    """Return True if ``name`` is one of the shell's own commands."""
    return name is not None and name.split("\0", 1)[0] in _BUILTINS


def is_expandable(char: str) -> bool:
    """Return True if ``char`` may follow ``$`` in a parameter expansion."""
    return is_alnum(char) or char in ("_", "?")


def in_quotes(text: str, index: int) -> bool:
    """Return True if position ``index`` lies inside an unclosed quote."""
    open_quote: str | None = None
    for char in text[:index]:
        if char in _QUOTES:
            if open_quote is None:
                open_quote = char
            elif open_quote == char:
                open_quote = None
    return open_quote is not None


def is_boundary(text: str, index: int, prev: int) -> bool:
    """Return True if a new token starts at ``index``.

    ``prev`` is the position where the current token started.
    """
    if index >= len(text) or index == 0:
        return True
    if in_quotes(text, index):
        return False
    char = text[index]
    if char in _SEPARATORS:
        if index - prev == 1 and char in "<> " and text[prev] == char:
            return False
        if is_space(char) and is_space(text[index - 1]):
            return False
        return True
    return text[index - 1] in _SEPARATORS


def is_double_operator(current: str, previous: str) -> bool:
    """Return True if the two characters form a doubled operator such as ``||`` or ``>>``."""
    return current == previous and current in _DOUBLED


def identifier_valid(key: str) -> bool:
    """Return True if ``key`` is made of ASCII letters and digits only."""
    for position, char in enumerate(key):
        if not is_alnum(char):
            return False
        if char == "+" and key[position + 1 : position + 2] != "=":
            return False
    return True


def has_meta(key: str) -> bool:
    """Return True if ``key`` holds a character not allowed in a variable name."""
    return has_non_name_char(key)


def is_option(key: str) -> bool:
    """Return True if ``key`` looks like an option (starts with ``-``)."""
    return key.startswith("-")


def starts_with_digit(key: str) -> bool:
    """Return True if ``key`` starts with an ASCII digit."""
    return bool(key) and "0" <= key[0] <= "9"