"""pscompat — command and type compatibility profiles for script analysis.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import pscompat

    # Decode a captured profile
    profile = pscompat.load("profiles/win-10_x64_5.1.json")

    # Wrap it for lookups
    runtime = pscompat.RuntimeQuery(profile)
    runtime.get_commands("gci")          # descriptors behind the alias
    runtime.types.resolve("[int]")       # 'System.Int32'

    # Check names against several targets at once
    findings = pscompat.check([runtime], commands=["Get-Foo"])

    # Re-encode
    data = pscompat.encode(profile, pretty=True)

    pscompat.__version__
    '0.1.0'
"""
from __future__ import annotations

import os
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from pscompat.errors import (
    DuplicateKeyError,
    FormatError,
    ProfileError,
    ResourceAccessError,
    VersionParseError,
)
from pscompat.query.runtime import RuntimeQuery

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from pscompat.checker.diagnostics import Diagnostic
    from pscompat.data.nodes import Profile


def load(path: str | os.PathLike[str]) -> "Profile":
    """Read and decode the profile stored at ``path``.

    Raises
    ------
    pscompat.ResourceAccessError
        If the file cannot be read.
    pscompat.FormatError
        If the document is malformed or misses ``Types``/``Modules``.
    pscompat.VersionParseError
        If a version string cannot be parsed.
    """
    from pscompat.codec.serializer import load_profile

    return load_profile(path)


def save(profile: "Profile", path: str | os.PathLike[str], pretty: bool = False) -> None:
    """Encode ``profile`` and write it to ``path``."""
    from pscompat.codec.serializer import save_profile

    save_profile(profile, path, pretty=pretty)


def decode(data: bytes | bytearray | str) -> "Profile":
    """Decode a ``Profile`` from JSON bytes or text."""
    from pscompat.codec.serializer import decode as _decode

    return _decode(data)


def encode(profile: "Profile", pretty: bool = False) -> bytes:
    """Encode a ``Profile`` as JSON bytes."""
    from pscompat.codec.serializer import encode as _encode

    return _encode(profile, pretty=pretty)


def check(
    targets: Sequence[RuntimeQuery],
    commands: Iterable[str] = (),
    types: Iterable[str] = (),
    strict: bool = False,
) -> list["Diagnostic"]:
    """Check command and type names against every target.

    Parameters
    ----------
    targets:
        Query objects for the platforms a script must run on.
    commands:
        Command names referenced by the script.
    types:
        Type names or accelerators referenced by the script.
    strict:
        When ``True``, warnings are promoted to errors.

    Returns
    -------
    list[Diagnostic]
        All findings, sorted by target then name.
    """
    from pscompat.checker.checker import check as _check

    return _check(targets, commands=commands, types=types, strict=strict)


__all__ = [
    "__version__",
    "load",
    "save",
    "decode",
    "encode",
    "check",
    "RuntimeQuery",
    "ProfileError",
    "FormatError",
    "VersionParseError",
    "ResourceAccessError",
    "DuplicateKeyError",
]
