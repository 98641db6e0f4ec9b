"""Directive inspection and maintenance commands.

``directives`` lists parsed directives, ``status`` reports ignore
resolution for a backend, ``mute`` / ``unmute`` edit the leading comment
block the same way the lifecycle wrapper does.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from snapguard.backends import IGNORE_BACKEND_DIRECTIVE_PREFIXES, TargetBackend, ignore_directive
from snapguard.directives import (
    directive_name,
    insert_directive,
    parse_directives,
    remove_directive_value,
)
from snapguard.fileio import read_text, rewrite_if_changed
from snapguard.ignore import IgnoreResolver, matching_directive

console = Console()


def load_text_or_exit(path: Path) -> str:
    """Read an artifact, or print the error and exit 1."""
    try:
        return read_text(path)
    except OSError as exc:
        console.print(f"[red]Error:[/red] cannot read {path}: {exc}")
        raise typer.Exit(1)


def _backend(name: str) -> TargetBackend:
    try:
        return TargetBackend.parse(name)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--backend")


def directives(
    path: Path = typer.Argument(..., help="Test data file to scan"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
) -> None:
    """Show every directive found in a test data file."""
    parsed = parse_directives(load_text_or_exit(path))

    if json_output:
        payload = [{"name": name, "value": value} for name, value in parsed.items()]
        print(json.dumps(payload, indent=2))
        return

    if not len(parsed):
        console.print(f"[dim]No directives in {path}[/dim]")
        return

    table = Table(title=f"Directives in {path.name}")
    table.add_column("Name", style="cyan")
    table.add_column("Value")
    for name, value in parsed.items():
        table.add_row(name, value if value is not None else "[dim]-[/dim]")
    console.print(table)


def status(
    path: Path = typer.Argument(..., help="Test data file to check"),
    backend: str = typer.Option(..., "--backend", "-b", help="Backend name (e.g. JVM, JS_IR)"),
    prefix: Optional[List[str]] = typer.Option(
        None,
        "--prefix",
        help="Ignore directive prefix (repeatable, default: IGNORE_BACKEND family)",
    ),
    require_compatible: bool = typer.Option(
        False,
        "--require-compatible",
        help="Only count as ignored when the compatible backend is ignored too",
    ),
) -> None:
    """Report whether a test data file is ignored for a backend."""
    target = _backend(backend)
    prefixes = tuple(prefix) if prefix else IGNORE_BACKEND_DIRECTIVE_PREFIXES
    text = load_text_or_exit(path)

    resolver = IgnoreResolver(prefixes=prefixes, require_compatible_agreement=require_compatible)
    if resolver.is_ignored(target, text):
        reason = matching_directive(target, text, prefixes)
        console.print(f"[yellow]ignored[/yellow] for {target.name} ({reason})")
    else:
        console.print(f"[green]active[/green] for {target.name}")


def mute(
    path: Path = typer.Argument(..., help="Test data file to edit"),
    backend: str = typer.Option(..., "--backend", "-b", help="Backend name to ignore"),
    prefix: str = typer.Option(
        IGNORE_BACKEND_DIRECTIVE_PREFIXES[0],
        "--prefix",
        help="Ignore directive prefix",
    ),
) -> None:
    """Add an ignore directive for a backend to the file header."""
    directive = ignore_directive(prefix, _backend(backend))
    text = load_text_or_exit(path)
    if rewrite_if_changed(path, text, insert_directive(text, directive)):
        console.print(f'[green]Added[/green] "{directive}" to {path}')
    else:
        console.print(f'[dim]"{directive}" already present in {path}[/dim]')


def unmute(
    path: Path = typer.Argument(..., help="Test data file to edit"),
    backend: str = typer.Option(..., "--backend", "-b", help="Backend name to stop ignoring"),
    prefix: Optional[List[str]] = typer.Option(
        None,
        "--prefix",
        help="Ignore directive prefix (repeatable, default: IGNORE_BACKEND family)",
    ),
) -> None:
    """Remove ignore directives for a backend from the file header."""
    target = _backend(backend)
    prefixes = tuple(prefix) if prefix else IGNORE_BACKEND_DIRECTIVE_PREFIXES
    text = load_text_or_exit(path)

    new_text = text
    for directive_prefix in prefixes:
        new_text = remove_directive_value(new_text, directive_name(directive_prefix), target.name)

    if rewrite_if_changed(path, text, new_text):
        console.print(f"[green]Removed[/green] {target.name} ignore directives from {path}")
    else:
        console.print(f"[dim]No {target.name} ignore directives in the header of {path}[/dim]")


__all__ = ["directives", "mute", "status", "unmute"]
