"""Query engine over decoded profiles.

Exports ``RuntimeQuery`` and the derived lookup structures it builds.
"""
from __future__ import annotations

from pscompat.query.commands import CommandTable, build_command_table
from pscompat.query.lazy import Lazy
from pscompat.query.native import NativeCommandLookupTable
from pscompat.query.runtime import RuntimeQuery
from pscompat.query.types import TypeCatalog

__all__ = [
    "RuntimeQuery",
    "TypeCatalog",
    "CommandTable",
    "NativeCommandLookupTable",
    "build_command_table",
    "Lazy",
]
