"""Parameter expansion inside quoted parts of a token."""

from __future__ import annotations

from .conditions import is_expandable
from .state import Shell
from .textutils import is_alnum, same_prefix


def _char_at(text: str, position: int) -> str:
    """Return the character at ``position``, or an empty string outside the text."""
    return text[position] if 0 <= position < len(text) else ""


def replacement_expansion(text: str, index: int, shell: Shell) -> tuple[str | None, int]:
    """Expand the parameter whose name starts at ``index`` (just after ``$``).

    Returns the replacement (None when there is none) and the index just past
    the consumed name. ``?`` gives the last exit status, a digit gives nothing,
    and otherwise the longest run of ASCII letters and digits names a variable.
    """
    char = _char_at(text, index)
    if char == "?":
        return str(shell.exit_code), index + 1
    if char and "0" <= char <= "9":
        return None, index + 1
    end = index
    while is_alnum(_char_at(text, end)):
        end += 1
    name = text[index:end]
    if not name:
        return None, index
    return shell.env.search(name), end


def count_in_quote(text: str, start: int, quote: str) -> int:
    """Return how many characters from ``start`` come before ``quote`` or the end."""
    end = text.find(quote, start)
    if end == -1:
        end = len(text)
    return max(0, end - start)


def trim_quoted(text: str, quote: str, start: int) -> str:
    """Return the text from ``start`` up to the next ``quote`` or the end."""
    return text[start : start + count_in_quote(text, start, quote)]


def expand_quote_dollar(
    text: str, start: int, size: int, quote: str, shell: Shell
) -> tuple[bool, str, int]:
    """Expand the ``$`` found at ``start + size`` inside a quoted part.

    Returns whether the quoted part is kept, the new text and the new offset
    of the scan relative to ``start``.
    """
    position = start + size
    if (
        _char_at(text, position) == "$"
        and _char_at(text, position + 1) == '"'
        and _char_at(text, position - 1) == '"'
    ):
        return True, text, size
    word = trim_quoted(text, quote, position)
    if is_expandable(_char_at(text, position + 1)) or shell.env.contains_clean(word):
        expansion, after = replacement_expansion(text, position + 1, shell)
        value = expansion or ""
        text = text[:position] + value + text[after:]
        return True, text, size + len(value) - 2
    return False, text, size


def expand_quotes(text: str, index: int, quote: str, shell: Shell) -> tuple[str, int]:
    """Remove the opening quote at ``index`` and expand what it encloses.

    Inside double quotes ``$`` parameters are expanded; inside single quotes
    the text is kept as it is. The closing quote stays in the text. Returns
    the new text and the index of the last character of the processed part.
    """
    if ("$" in text and is_expandable(_char_at(text, index + 1))) or same_prefix(
        text, '$""', 4
    ):
        prefix = ""
    else:
        prefix = text[:index]
    start = index + 1
    size = 0
    kept = True
    while True:
        char = _char_at(text, start + size)
        if not char or char == quote:
            break
        if char == "$" and quote == '"':
            kept, text, size = expand_quote_dollar(text, start, size, quote, shell)
        size += 1
    inner = text[start : start + size] if kept and size > 0 else ""
    joined = prefix + inner
    rest = text[start + size :]
    return joined + rest, len(joined) - 1