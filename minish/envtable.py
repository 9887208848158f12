"""The shell's variable table: a chained hash table keyed by variable name."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import IntEnum

from .textutils import atoi, same_prefix

_HASH_SEED = 5381
_WORD_MASK = (1 << 64) - 1


class Attribute(IntEnum):
    """Whether a variable is exported to child processes."""

    GLOBAL = 0
    LOCAL = 1


@dataclass
class _Pair:
    key: str
    value: str | None
    attribute: Attribute


def hash_key(key: str | None, size: int) -> int:
    """Return the bucket index of ``key`` (djb2 over the key's bytes, modulo ``size``)."""
    value = _HASH_SEED
    for byte in (key or "").encode("utf-8", "surrogateescape"):
        signed = byte - 256 if byte >= 128 else byte
        value = (value * 33 + signed) & _WORD_MASK
    return value % size


def key_of(assignment: str | None) -> str | None:
    """Return the name before the first ``=``, or None if there is no ``=``."""
    if assignment is None or "=" not in assignment:
        return None
    return assignment.split("=", 1)[0]


def value_of(assignment: str | None) -> str | None:
    """Return the text after the first ``=``, or None if there is no ``=``."""
    if assignment is None or "=" not in assignment:
        return None
    return assignment.split("=", 1)[1]


def clean(text: str, first: str, second: str) -> str:
    """Return ``text`` with every occurrence of the two characters removed."""
    return "".join(char for char in text if char != first and char != second)


class EnvTable:
    """Shell variables with their export attribute.

    Lookups by name match any stored name in the key's bucket that starts
    with the searched name; only ``unset`` requires an exact match.
    """

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError("table size must be at least 1")
        self.size = size
        self._buckets: list[list[_Pair]] = [[] for _ in range(size)]

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._buckets)

    def _bucket(self, key: str) -> list[_Pair]:
        return self._buckets[hash_key(key, self.size)]

    def _find(self, key: str) -> _Pair | None:
        for pair in self._bucket(key):
            if same_prefix(pair.key, key, len(key)):
                return pair
        return None

    def insert(self, key: str, value: str | None, attribute: Attribute = Attribute.GLOBAL) -> None:
        """Append a new variable to the end of its bucket."""
        self._bucket(key).append(_Pair(key, value, Attribute(attribute)))

    def search(self, key: str) -> str | None:
        """Return the value stored under ``key``, or None."""
        pair = self._find(key)
        return pair.value if pair is not None else None

    def location(self, key: str) -> Attribute | None:
        """Return the attribute of ``key``, or None if it is not set."""
        pair = self._find(key)
        return pair.attribute if pair is not None else None

    def substitute(self, key: str, value: str | None) -> None:
        """Replace the value of an existing variable; a None value keeps the old one."""
        pair = self._find(key)
        if pair is None:
            raise KeyError(key)
        if value is not None:
            pair.value = value

    def export(self, key: str, attribute: Attribute = Attribute.GLOBAL) -> None:
        """Change the attribute of an existing variable."""
        pair = self._find(key)
        if pair is None:
            raise KeyError(key)
        pair.attribute = Attribute(attribute)

    def unset(self, key: str) -> bool:
        """Remove the variable named exactly ``key``; return True if one was removed."""
        bucket = self._bucket(key)
        for position, pair in enumerate(bucket):
            if pair.key == key:
                del bucket[position]
                return True
        return False

    def contains_clean(self, key: str) -> bool:
        """Return True if ``key`` with ``$`` and ``"`` removed names a variable."""
        return self._find(clean(key, "$", '"')) is not None

    def exported(self) -> list[tuple[str, str | None]]:
        """Return the exported variables as (name, value) pairs in table order."""
        return [
            (pair.key, pair.value)
            for bucket in self._buckets
            for pair in bucket
            if pair.attribute == Attribute.GLOBAL
        ]

    def envp(self) -> list[str]:
        """Return the exported variables as ``NAME=value`` strings for a child process."""
        return [f"{key}={value or ''}" for key, value in self.exported()]

    @classmethod
    def from_environ(
        cls,
        variables: Iterable[str] | Mapping[str, str],
        shlvl: str | None = None,
    ) -> EnvTable:
        """Build the table from an environment.

        SHLVL is raised by one (from ``shlvl`` if given, else from the
        environment itself), UID is set to 1000, and OLDPWD is added
        without a value when it has none.
        """
        if isinstance(variables, Mapping):
            entries = [f"{name}={value}" for name, value in variables.items()]
        else:
            entries = list(variables)
        if not entries:
            raise ValueError("no environment variables")
        if shlvl is None:
            shlvl = next(
                (value_of(entry) for entry in entries if key_of(entry) == "SHLVL"),
                None,
            )
        table = cls(len(entries[0]) + 1)
        for entry in entries:
            key = key_of(entry)
            if key is None:
                table.insert(entry, None, Attribute.GLOBAL)
                continue
            if same_prefix(key, "SHLVL", 5):
                value: str | None = str(atoi(shlvl or "") + 1)
            else:
                value = value_of(entry)
            table.insert(key, value, Attribute.GLOBAL)
        table.insert("UID", "1000", Attribute.GLOBAL)
        if table.search("OLDPWD") is None:
            table.insert("OLDPWD", None, Attribute.GLOBAL)
        return table