"""CLI package.

The ``cli`` sub-package contains the Click application used to inspect
profiles and run compatibility checks from a shell.  It sits outside
the query engine and only calls its public API.
"""
from __future__ import annotations
