"""Top-level ``snapguard config`` command.

Shows the effective lifecycle policy and where each value comes from, and
updates the ``lifecycle`` section of ``.snapguard/config.yaml``.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from snapguard.config import (
    ENV_TOGGLES,
    ConfigError,
    LifecyclePolicy,
    config_path,
    load_policy,
    save_policy,
)

console = Console()


def _parse_assignments(assignments: List[str]) -> dict[str, str]:
    parsed: dict[str, str] = {}
    for item in assignments:
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            raise typer.BadParameter(f"Expected NAME=VALUE, got {item!r}", param_hint="--set")
        parsed[name.strip()] = value.strip()
    return parsed


def config(
    root: Path = typer.Option(
        Path("."),
        "--root",
        help="Project root holding .snapguard/config.yaml",
    ),
    assignments: Optional[List[str]] = typer.Option(
        None,
        "--set",
        help="Store a lifecycle option, e.g. --set auto_mute_failures=true (repeatable)",
    ),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
) -> None:
    """Display or update the lifecycle policy."""
    try:
        if assignments:
            stored = load_policy(root, environ={}).to_dict()
            stored.update(_parse_assignments(assignments))
            save_policy(root, LifecyclePolicy.from_dict(stored))
            console.print(f"[green]Saved[/green] {config_path(root)}")
        file_policy = load_policy(root, environ={})
        effective = load_policy(root)
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if json_output:
        print(json.dumps(effective.to_dict(), indent=2))
        return

    table = Table(title="Lifecycle policy")
    table.add_column("Option", style="cyan")
    table.add_column("Value", style="bold")
    table.add_column("Source", style="magenta")

    file_values = file_policy.to_dict()
    defaults = LifecyclePolicy().to_dict()
    for name, value in effective.to_dict().items():
        env_var = ENV_TOGGLES[name]
        if env_var in os.environ:
            source = f"env {env_var}"
        elif file_values[name] != defaults[name]:
            source = "config"
        else:
            source = "[dim]default[/dim]"
        table.add_row(name, "on" if value else "off", source)

    console.print(table)


__all__ = ["config"]
