"""Diagnostic types produced by the compatibility checker.

A ``Diagnostic`` reports that something a script references is missing
or only partly available on one target platform.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostics, aligned with LSP conventions."""

    ERROR = auto()
    WARNING = auto()
    INFORMATION = auto()
    HINT = auto()


@dataclass(frozen=True)
class Diagnostic:
    """A single compatibility finding.

    Parameters
    ----------
    severity:
        How serious this finding is.
    code:
        A short machine-readable identifier, e.g. ``"PSC001"``.
    message:
        Human-readable description of the problem.
    target:
        Name of the target platform the finding applies to.
    subject:
        The command or type name that was checked.
    suggestion:
        Optional human-readable fix suggestion.
    """

    severity: DiagnosticSeverity
    code: str
    message: str
    target: str
    subject: str
    suggestion: str | None = field(default=None)

    def __str__(self) -> str:
        prefix = f"[{self.code}] {self.severity.name}"
        suggestion_part = f" (hint: {self.suggestion})" if self.suggestion else ""
        return f"{prefix} on {self.target}: {self.message}{suggestion_part}"

    @property
    def is_error(self) -> bool:
        """Return True if this diagnostic should fail a compatibility check."""
        return self.severity == DiagnosticSeverity.ERROR

    def to_dict(self) -> dict[str, object]:
        return {
            "severity": self.severity.name,
            "code": self.code,
            "message": self.message,
            "target": self.target,
            "subject": self.subject,
            "suggestion": self.suggestion,
        }
