"""Compatibility checks of command and type names against target profiles.

The ``CompatibilityChecker`` asks each target's ``RuntimeQuery`` whether
the names a script references are available and returns a list of
``Diagnostic`` objects.  In strict mode, warnings are promoted to errors
so that CI pipelines can fail on any incompatibility.

Usage
-----
::

    from pscompat.checker import CompatibilityChecker
    from pscompat.query import RuntimeQuery

    targets = [RuntimeQuery.from_file(p) for p in profile_paths]
    checker = CompatibilityChecker(targets)
    diagnostics = checker.check(commands=["Get-Foo"], types=["[pscustomobject]"])
    errors = [d for d in diagnostics if d.is_error]
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import replace

from pscompat.checker.diagnostics import Diagnostic, DiagnosticSeverity
from pscompat.data.mapping import fold
from pscompat.query.runtime import RuntimeQuery


class CompatibilityChecker:
    """Checks command and type names against one or more target profiles.

    Parameters
    ----------
    targets:
        The platforms a script must run on.
    strict:
        When ``True``, WARNING-level diagnostics are promoted to ERROR
        severity.
    """

    def __init__(self, targets: Sequence[RuntimeQuery], strict: bool = False) -> None:
        self._targets: list[RuntimeQuery] = list(targets)
        self._strict: bool = strict

    @property
    def targets(self) -> list[RuntimeQuery]:
        return list(self._targets)

    def check_command(self, name: str) -> list[Diagnostic]:
        """Report every target on which command ``name`` is unavailable."""
        diagnostics: list[Diagnostic] = []
        for target in self._targets:
            descriptors = target.commands.get(name)
            if descriptors:
                continue
            if descriptors is not None:
                # An alias whose target was not captured.
                diagnostics.append(
                    Diagnostic(
                        severity=DiagnosticSeverity.INFORMATION,
                        code="PSC004",
                        message=f"Alias {name!r} exists but its target was not captured",
                        target=target.name,
                        subject=name,
                    )
                )
                continue
            native = target.native_commands.try_get(name)
            if native is not None:
                diagnostics.append(
                    Diagnostic(
                        severity=DiagnosticSeverity.HINT,
                        code="PSC003",
                        message=f"{name!r} is only available as a native executable",
                        target=target.name,
                        subject=name,
                        suggestion=", ".join(native.paths) or None,
                    )
                )
                continue
            diagnostics.append(
                Diagnostic(
                    severity=DiagnosticSeverity.WARNING,
                    code="PSC001",
                    message=f"Command {name!r} is not available",
                    target=target.name,
                    subject=name,
                )
            )
        return self._finish(diagnostics)

    def check_type(self, name: str) -> list[Diagnostic]:
        """Report every target on which type ``name`` is unavailable."""
        diagnostics = [
            Diagnostic(
                severity=DiagnosticSeverity.WARNING,
                code="PSC002",
                message=f"Type {name!r} is not available",
                target=target.name,
                subject=name,
            )
            for target in self._targets
            if not target.types.has_type(name)
        ]
        return self._finish(diagnostics)

    def check(self, commands: Iterable[str] = (), types: Iterable[str] = ()) -> list[Diagnostic]:
        """Check every command and type name.

        Returns
        -------
        list[Diagnostic]
            All findings, sorted by target then subject.  Empty when
            everything is available on every target.
        """
        all_diagnostics: list[Diagnostic] = []
        for command in commands:
            all_diagnostics.extend(self.check_command(command))
        for type_name in types:
            all_diagnostics.extend(self.check_type(type_name))
        all_diagnostics.sort(key=lambda d: (d.target, fold(d.subject), d.code))
        return all_diagnostics

    def _finish(self, diagnostics: list[Diagnostic]) -> list[Diagnostic]:
        if not self._strict:
            return diagnostics
        return [
            replace(d, severity=DiagnosticSeverity.ERROR)
            if d.severity == DiagnosticSeverity.WARNING
            else d
            for d in diagnostics
        ]


def check(
    targets: Sequence[RuntimeQuery],
    commands: Iterable[str] = (),
    types: Iterable[str] = (),
    strict: bool = False,
) -> list[Diagnostic]:
    """Convenience function: check names against ``targets``."""
    return CompatibilityChecker(targets, strict=strict).check(commands=commands, types=types)
