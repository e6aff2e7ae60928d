"""Dotted numeric versions as used by module and platform captures.

Profiles key every module by a version string such as ``"7.2.1"`` or
``"10.0.19041.1"``.  Only 2 to 4 non-negative decimal components are
accepted; semantic-version suffixes and single numbers are rejected.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field

from pscompat.errors import VersionParseError

_VERSION_RE = re.compile(r"\A[0-9]+(?:\.[0-9]+){1,3}\Z")


@dataclass(frozen=True, slots=True, order=True)
class Version:
    """A parsed 2-4 component version.

    Equality and ordering use the numeric components only, so
    ``Version.parse("7.0") == Version.parse("7.00")``.  The original text
    is kept for encoding.

    Parameters
    ----------
    components:
        The numeric components, most significant first.
    text:
        The exact string this version was parsed from.
    """

    components: tuple[int, ...]
    text: str = field(compare=False)

    @classmethod
    def parse(cls, text: object, location: str = "") -> "Version":
        """Parse ``text`` into a ``Version``.

        Raises
        ------
        VersionParseError
            If ``text`` is not a string of 2 to 4 dotted numbers.
        """
        if not isinstance(text, str) or not _VERSION_RE.match(text):
            raise VersionParseError(text, location)
        return cls(components=tuple(int(part) for part in text.split(".")), text=text)

    @property
    def major(self) -> int:
        return self.components[0]

    @property
    def minor(self) -> int:
        return self.components[1]

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"Version({self.text!r})"
