"""Golden file commands: compare actual output and accept a new baseline."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.syntax import Syntax

from snapguard.errors import ContentMismatchError, MissingGoldenFileError
from snapguard.golden import accept_actual, assert_equals_to_file

from .directives_cmd import load_text_or_exit

console = Console()


def compare(
    golden: Path = typer.Argument(..., help="Golden (expected) file"),
    actual: Path = typer.Argument(..., help="File holding the actual output"),
    ci: Optional[bool] = typer.Option(
        None,
        "--ci/--no-ci",
        help="Never create a missing golden file (default: detect from environment)",
    ),
) -> None:
    """Compare actual output with a golden file and show a diff on mismatch."""
    actual_text = load_text_or_exit(actual)
    try:
        assert_equals_to_file(golden, actual_text, ci=ci)
    except MissingGoldenFileError as exc:
        console.print(f"[red]✗[/red] {exc}")
        raise typer.Exit(1)
    except ContentMismatchError as exc:
        console.print(f"[red]✗[/red] {exc}")
        console.print(Syntax(exc.unified_diff(), "diff", theme="ansi_dark"))
        raise typer.Exit(1)
    console.print(f"[green]✓[/green] {golden} matches")


def accept(
    golden: Path = typer.Argument(..., help="Golden (expected) file to overwrite"),
    actual: Path = typer.Argument(..., help="File holding the actual output"),
) -> None:
    """Accept the actual output as the new golden baseline."""
    if accept_actual(golden, load_text_or_exit(actual)):
        console.print(f"[green]Updated[/green] {golden}")
    else:
        console.print(f"[dim]{golden} already up to date[/dim]")


__all__ = ["accept", "compare"]
