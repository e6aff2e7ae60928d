"""Read-only, case-insensitive name mappings.

Command, module, alias, and type names on the captured platforms are
compared as ordinal strings ignoring case: each character is upper-cased
on its own, with no culture rules and no change in length.
``CaseInsensitiveMapping`` folds keys with ``fold`` for both insertion
and lookup, so the two can never disagree, while iteration still yields
the spelling that was inserted.
"""
from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Generic, TypeVar

from pscompat.errors import DuplicateKeyError

V = TypeVar("V")


def _upper_char(char: str) -> str:
    upper = char.upper()
    # Characters without a one-to-one upper case ("ß") compare as themselves.
    return upper if len(upper) == 1 else char


def fold(name: str) -> str:
    """Return the comparison key used for every case-insensitive name.

    >>> fold("Get-ChildItem") == fold("GET-CHILDITEM")
    True
    >>> fold("Straße") == fold("STRASSE")
    False
    """
    if name.isascii():
        return name.upper()
    return "".join(_upper_char(char) for char in name)


class CaseInsensitiveMapping(Mapping[str, V], Generic[V]):
    """Immutable ``Mapping[str, V]`` with case-insensitive keys.

    Parameters
    ----------
    items:
        A mapping or an iterable of ``(key, value)`` pairs.  Keys that
        collide after folding raise ``DuplicateKeyError``.
    """

    __slots__ = ("_data",)

    def __init__(self, items: Mapping[str, V] | Iterable[tuple[str, V]] = ()) -> None:
        data: dict[str, tuple[str, V]] = {}
        pairs = items.items() if isinstance(items, Mapping) else items
        for key, value in pairs:
            folded = fold(key)
            if folded in data:
                raise DuplicateKeyError(key, data[folded][0])
            data[folded] = (key, value)
        self._data = data

    @classmethod
    def _from_folded(cls, data: dict[str, tuple[str, V]]) -> "CaseInsensitiveMapping[V]":
        """Wrap an already-folded dict without copying it."""
        mapping = cls.__new__(cls)
        mapping._data = data
        return mapping

    def __getitem__(self, key: str) -> V:
        if not isinstance(key, str):
            raise KeyError(key)
        return self._data[fold(key)][1]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and fold(key) in self._data

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._data.values())

    def __len__(self) -> int:
        return len(self._data)

    def __hash__(self) -> int:
        # Equal mappings have equal folded keys, so the hash agrees with
        # ``Mapping.__eq__``.  Raises TypeError if a value is unhashable.
        return hash(frozenset((key, value) for key, (_, value) in self._data.items()))

    def canonical_key(self, key: str) -> str | None:
        """Return the inserted spelling of ``key``, or ``None`` if absent."""
        entry = self._data.get(fold(key))
        return entry[0] if entry is not None else None

    def __repr__(self) -> str:
        inner = ", ".join(f"{k!r}: {v!r}" for k, v in self.items())
        return f"{type(self).__name__}({{{inner}}})"
