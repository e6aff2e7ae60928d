"""Error types raised while reading, writing, and indexing profiles.

Every error carries enough context (a wire location, the offending
text, or the file path) for the CLI and for reporting collaborators to
print an actionable message.  Decoding either returns a complete
``Profile`` or raises one of these; it never yields a partial object.
"""
from __future__ import annotations

import os


class ProfileError(Exception):
    """Base class for all compatibility-profile errors."""


class FormatError(ProfileError, ValueError):
    """Raised when a profile document is malformed or misses required fields.

    Parameters
    ----------
    message:
        Human-readable description of the problem.
    location:
        Slash-separated path to the offending field within the document,
        e.g. ``"Modules/PSReadLine/2.1.0/Cmdlets"``.  Empty for problems
        with the document as a whole.
    """

    def __init__(self, message: str, location: str = "") -> None:
        self.message = message
        self.location = location
        if location:
            super().__init__(f"{message} (at {location})")
        else:
            super().__init__(message)


class VersionParseError(ProfileError, ValueError):
    """Raised when a version string is not 2-4 dotted numeric components.

    Parameters
    ----------
    text:
        The value that failed to parse.
    location:
        Where in the document the value was found, if known.
    """

    def __init__(self, text: object, location: str = "") -> None:
        self.text = text
        self.location = location
        message = f"Cannot parse {text!r} as a version: expected 2 to 4 dotted numbers"
        if location:
            message = f"{message} (at {location})"
        super().__init__(message)


class DuplicateKeyError(ProfileError, ValueError):
    """Raised when two names collide under case-insensitive comparison."""

    def __init__(self, key: str, existing: str) -> None:
        self.key = key
        self.existing = existing
        super().__init__(
            f"Duplicate key {key!r}: collides with {existing!r} under "
            "case-insensitive comparison"
        )


class ResourceAccessError(ProfileError, OSError):
    """Raised when the underlying file cannot be read or written.

    The original ``OSError`` is chained as ``__cause__`` and its
    ``errno`` is preserved so callers can still branch on it.
    """

    def __init__(self, path: str | os.PathLike[str], cause: OSError) -> None:
        self.path = os.fspath(path)
        message = f"Cannot access profile {self.path}: {cause.strerror or cause}"
        if cause.errno is None:
            super().__init__(message)
        else:
            super().__init__(cause.errno, message)
