"""Splitting an input line into tokens and checking their grammar."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .conditions import TokenType, in_quotes, is_boundary, token_type
from .errors import ParseError, format_error
from .textutils import is_space

_REDIRECTIONS = frozenset(
    {TokenType.REDIR_IN, TokenType.APPEND, TokenType.REDIR_OUT, TokenType.HEREDOC}
)


@dataclass
class Token:
    """One word or operator of an input line."""

    value: str
    kind: TokenType = TokenType.WORD


def _make_token(chunk: str) -> Token | None:
    start = 0
    while start < len(chunk) and is_space(chunk[start]):
        start += 1
    value = chunk[start:]
    if not value:
        return None
    return Token(value, token_type(value))


def tokenize(line: str) -> list[Token]:
    """Split ``line`` at blanks and at ``|``, ``<`` and ``>``, keeping quoted text together."""
    tokens: list[Token] = []
    prev = 0
    boundary = 0
    for index in range(len(line) + 1):
        if is_boundary(line, index, prev):
            boundary = index
        chunk = line[prev:boundary]
        if chunk:
            token = _make_token(chunk)
            if token is not None:
                tokens.append(token)
        prev = boundary
    return tokens


def _check_pipe(tokens: Sequence[Token], position: int) -> None:
    token = tokens[position]
    if token.kind != TokenType.PIPE:
        return
    following = tokens[position + 1] if position + 1 < len(tokens) else None
    if position == 0 or following is None or following.value.startswith("|"):
        raise ParseError(format_error("syntax:", None, " : unexpected token."), 2)


def _check_redirection(tokens: Sequence[Token], position: int) -> None:
    token = tokens[position]
    if token.kind not in _REDIRECTIONS:
        return
    following = tokens[position + 1] if position + 1 < len(tokens) else None
    if following is None or following.kind != TokenType.WORD:
        raise ParseError(format_error("syntax: ", None, "unexpected token."), 2)


def _check_quotes(tokens: Sequence[Token], position: int) -> None:
    if position != len(tokens) - 1:
        return
    value = tokens[position].value
    if in_quotes(value, len(value)):
        raise ParseError(
            format_error("quotes", ">", " ':EOF while expecting quote\n"), 2
        )


def validate_grammar(tokens: Sequence[Token]) -> Sequence[Token]:
    """Check pipes, redirections and quotes; return the tokens or raise ParseError."""
    for position in range(len(tokens)):
        _check_pipe(tokens, position)
        _check_redirection(tokens, position)
        _check_quotes(tokens, position)
    return tokens