"""Small string helpers shared by the parser, the builtins and the environment table."""

from __future__ import annotations

_ATOI_SPACES = frozenset("\t\n\v\f\r ")
_LONG_MAX = 9223372036854775807
_LONG_MIN_MAGNITUDE = 9223372036854775808


def is_space(char: str) -> bool:
    """Return True for a blank: space or a control character from tab to carriage return."""
    if len(char) != 1:
        return False
    return char == " " or 9 <= ord(char) <= 13


def is_alnum(char: str) -> bool:
    """Return True for an ASCII letter or digit."""
    return len(char) == 1 and char.isascii() and char.isalnum()


def _is_digit(char: str) -> bool:
    return len(char) == 1 and "0" <= char <= "9"


def _leading_digits(text: str, start: int) -> tuple[int, int]:
    """Parse decimal digits from ``start``; return the number and the index after them."""
    value = 0
    pos = start
    while pos < len(text) and _is_digit(text[pos]):
        value = value * 10 + int(text[pos])
        pos += 1
    return value, pos


def atoi(text: str) -> int:
    """Parse a leading integer; any run of signs is allowed, each minus flips the sign."""
    pos = 0
    while pos < len(text) and text[pos] in _ATOI_SPACES:
        pos += 1
    sign = 1
    while pos < len(text) and text[pos] in "+-":
        if text[pos] == "-":
            sign = -sign
        pos += 1
    value, _ = _leading_digits(text, pos)
    return sign * value


def atol(text: str) -> int:
    """Parse a leading integer with at most one sign."""
    pos = 0
    while pos < len(text) and is_space(text[pos]):
        pos += 1
    sign = 1
    if pos < len(text) and text[pos] in "+-":
        if text[pos] == "-":
            sign = -1
        pos += 1
    value, _ = _leading_digits(text, pos)
    return sign * value


def is_long(text: str) -> bool:
    """Return True if the whole text is one integer that fits in a signed 64-bit value.

    Blanks are allowed around the number and one sign before it.
    """
    pos = 0
    while pos < len(text) and is_space(text[pos]):
        pos += 1
    negative = pos < len(text) and text[pos] == "-"
    if pos < len(text) and text[pos] in "+-":
        pos += 1
    if pos >= len(text) or not _is_digit(text[pos]):
        return False
    value, pos = _leading_digits(text, pos)
    limit = _LONG_MIN_MAGNITUDE if negative else _LONG_MAX
    if value > limit:
        return False
    while pos < len(text) and is_space(text[pos]):
        pos += 1
    return pos == len(text)


def split_fields(text: str, sep: str) -> list[str]:
    """Split on ``sep`` and drop the empty fields."""
    return [field for field in text.split(sep) if field]


def has_non_name_char(text: str) -> bool:
    """Return True if the text holds anything but ASCII letters, digits and underscores."""
    return any(not is_alnum(char) and char != "_" for char in text)


def _terminated(text: str) -> str:
    return text.split("\0", 1)[0]


def same_prefix(left: str | None, right: str | None, count: int) -> bool:
    """Return True if the first ``count`` characters of both strings agree.

    A NUL character ends a string, so ``"cd\\0"`` with a count of 3 only
    matches ``"cd"`` itself. A missing string never matches.
    """
    if left is None or right is None:
        return False
    if count <= 0:
        return True
    return _terminated(left)[:count] == _terminated(right)[:count]