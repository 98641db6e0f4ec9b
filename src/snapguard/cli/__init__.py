"""snapguard command line: golden file and ignore directive maintenance."""

from __future__ import annotations

import typer

from .commands import accept, compare, config, directives, mute, status, unmute

app = typer.Typer(
    name="snapguard",
    help="Maintain golden files and in-text ignore directives",
    add_completion=False,
    no_args_is_help=True,
)

app.command()(directives)
app.command()(status)
app.command()(mute)
app.command()(unmute)
app.command()(compare)
app.command()(accept)
app.command()(config)


def main() -> None:
    app()


__all__ = ["app", "main"]
