"""Compatibility checker.

Exports ``CompatibilityChecker``, the ``check`` convenience function, and
the diagnostic types it produces.
"""
from __future__ import annotations

from pscompat.checker.checker import CompatibilityChecker, check
from pscompat.checker.diagnostics import Diagnostic, DiagnosticSeverity

__all__ = [
    "CompatibilityChecker",
    "check",
    "Diagnostic",
    "DiagnosticSeverity",
]
