"""CLI entry point for pscompat.

Invoked as::

    pscompat [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m pscompat.cli.main

Commands
--------
validate    Decode a profile and summarise its contents
lookup      Show every descriptor providing a command name
types       Resolve a type name or accelerator
fmt         Re-encode a profile as canonical JSON or YAML
check       Check command and type names against target profiles
version     Show version information
"""
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

if TYPE_CHECKING:
    from pscompat.data.nodes import Profile

console = Console()
err_console = Console(stderr=True)


def _load_or_exit(path: str) -> "Profile":
    """Load a profile, printing errors and exiting on failure."""
    from pscompat.codec import load_profile
    from pscompat.errors import ProfileError

    try:
        return load_profile(path)
    except ProfileError as exc:
        err_console.print(f"[red]Error:[/red] {escape(path)}: {escape(str(exc))}")
        sys.exit(1)


def _severity_color(severity_name: str) -> str:
    """Map a DiagnosticSeverity name to a Rich color string."""
    colors = {
        "ERROR": "red",
        "WARNING": "yellow",
        "INFORMATION": "blue",
        "HINT": "dim",
    }
    return colors.get(severity_name, "white")


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="pscompat")
def cli() -> None:
    """Query captured platform compatibility profiles."""


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from pscompat import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]pscompat[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# validate command
# ---------------------------------------------------------------------------


@cli.command(name="validate")
@click.argument("file", type=click.Path(exists=False))
def validate_command(file: str) -> None:
    """Decode a profile and summarise what it describes.

    FILE is the path to the profile JSON document.
    """
    from pscompat.query import RuntimeQuery

    runtime = RuntimeQuery(_load_or_exit(file))
    profile = runtime.profile
    module_versions = list(profile.iter_modules())
    alias_count = sum(len(m.aliases) for m in module_versions)
    unresolved = sum(1 for descriptors in runtime.commands.values() if not descriptors)

    table = Table(title=escape(f"Profile: {file}"), show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Target", escape(runtime.name))
    if profile.platform is not None:
        table.add_row("Runtime version", str(profile.platform.runtime_version or "-"))
    table.add_row("Modules", f"{len(profile.modules)} ({len(module_versions)} versions)")
    table.add_row("Command names", str(len(runtime.commands)))
    table.add_row("Aliases", f"{alias_count} ({unresolved} unresolved)")
    table.add_row("Types", str(len(runtime.types)))
    table.add_row("Type accelerators", str(len(runtime.types.accelerators)))
    table.add_row("Native commands", str(len(runtime.native_commands)))
    console.print(table)
    console.print(f"[green]OK[/green] {escape(file)}")


# ---------------------------------------------------------------------------
# lookup command
# ---------------------------------------------------------------------------


@cli.command(name="lookup")
@click.argument("file", type=click.Path(exists=False))
@click.argument("name")
def lookup_command(file: str, name: str) -> None:
    """Show every module command that NAME resolves to.

    FILE is the path to the profile JSON document.
    """
    from pscompat.query import RuntimeQuery

    runtime = RuntimeQuery(_load_or_exit(file))
    descriptors = runtime.get_commands(name)
    if not descriptors:
        native = runtime.native_commands.try_get(name)
        if native is not None:
            paths = escape(", ".join(native.paths))
            console.print(f"[blue]{escape(name)}[/blue] is a native command: {paths}")
            return
        if name in runtime.commands:
            console.print(f"[yellow]{escape(name)}[/yellow] is an alias with no captured target")
        else:
            console.print(f"[red]{escape(name)}[/red] is not available on {escape(runtime.name)}")
        sys.exit(1)

    table = Table(title=escape(f"{name} on {runtime.name}"))
    table.add_column("Command", style="bold")
    table.add_column("Kind")
    table.add_column("Module")
    table.add_column("Cmdlet binding")
    for descriptor in descriptors:
        table.add_row(
            escape(descriptor.name),
            descriptor.kind,
            escape(descriptor.module_name or "-"),
            "yes" if descriptor.is_cmdlet_binding else "no",
        )
    console.print(table)


# ---------------------------------------------------------------------------
# types command
# ---------------------------------------------------------------------------


@cli.command(name="types")
@click.argument("file", type=click.Path(exists=False))
@click.argument("name")
def types_command(file: str, name: str) -> None:
    """Resolve type NAME against a profile's type catalog.

    FILE is the path to the profile JSON document.
    """
    from pscompat.query import TypeCatalog

    catalog = TypeCatalog(_load_or_exit(file).types)
    full_name = catalog.resolve(name)
    if full_name is None:
        console.print(f"[red]{escape(name)}[/red] is not available")
        sys.exit(1)
    console.print(f"[green]{escape(name)}[/green] -> {escape(full_name)}")


# ---------------------------------------------------------------------------
# fmt command
# ---------------------------------------------------------------------------


@cli.command(name="fmt")
@click.argument("file", type=click.Path(exists=False))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "yaml"], case_sensitive=False),
    default="json",
    help="Output format",
)
@click.option("--pretty/--compact", default=True, help="Indent JSON output")
@click.option("--output", "-o", default=None, help="Output file path (defaults to stdout)")
def fmt_command(file: str, output_format: str, pretty: bool, output: str | None) -> None:
    """Re-encode a profile in canonical form.

    FILE is the path to the profile JSON document.
    """
    from pscompat.codec import ProfileSerializer

    profile = _load_or_exit(file)
    serializer = ProfileSerializer(pretty=pretty)

    if output_format.lower() == "yaml":
        text = serializer.to_yaml(profile)
        lang = "yaml"
    else:
        text = serializer.to_json(profile)
        lang = "json"

    if output:
        try:
            if lang == "json":
                serializer.dump(profile, output)
            else:
                Path(output).write_text(text, encoding="utf-8")
        except OSError as exc:
            err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
            sys.exit(1)
        console.print(f"[green]Profile written to[/green] {escape(output)}")
    elif sys.stdout.isatty():
        console.print(Syntax(text, lang, line_numbers=True))
    else:
        click.echo(text)


# ---------------------------------------------------------------------------
# check command
# ---------------------------------------------------------------------------


@cli.command(name="check")
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=False))
@click.option("--command", "-c", "commands", multiple=True, help="Command name to check")
@click.option("--type", "-t", "type_names", multiple=True, help="Type name to check")
@click.option("--strict", is_flag=True, default=False, help="Treat warnings as errors")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print findings as JSON")
def check_command(
    files: tuple[str, ...],
    commands: tuple[str, ...],
    type_names: tuple[str, ...],
    strict: bool,
    as_json: bool,
) -> None:
    """Check command and type names against every target profile.

    FILES are the paths to the target profile JSON documents.
    """
    from pscompat.checker import CompatibilityChecker
    from pscompat.query import RuntimeQuery

    targets = [RuntimeQuery(_load_or_exit(f), name=Path(f).stem) for f in files]
    checker = CompatibilityChecker(targets, strict=strict)
    diagnostics = checker.check(commands=commands, types=type_names)
    errors = [d for d in diagnostics if d.is_error]

    if as_json:
        click.echo(json.dumps([d.to_dict() for d in diagnostics], indent=2))
        if errors:
            sys.exit(1)
        return

    if not diagnostics:
        console.print(f"[green]OK[/green] all names available on {len(targets)} target(s)")
        return

    table = Table(title="Compatibility", show_lines=True)
    table.add_column("Severity", style="bold", min_width=10)
    table.add_column("Code", min_width=8)
    table.add_column("Target", min_width=10)
    table.add_column("Message")

    for d in diagnostics:
        color = _severity_color(d.severity.name)
        table.add_row(
            f"[{color}]{d.severity.name}[/{color}]",
            d.code,
            escape(d.target),
            escape(d.message)
            + (f"\n[dim]hint: {escape(d.suggestion)}[/dim]" if d.suggestion else ""),
        )

    console.print(table)
    console.print(
        f"\n[bold]Summary:[/bold] {len(errors)} error(s), "
        f"{len(diagnostics) - len(errors)} other finding(s)"
    )

    if errors:
        sys.exit(1)


if __name__ == "__main__":
    cli()
