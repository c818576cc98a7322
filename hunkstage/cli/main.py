"""Top-level callback for the hunkstage CLI."""

import typer

from hunkstage import __version__


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"hunkstage {__version__}")
        raise typer.Exit()


def main_command(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Stage or revert individual lines and hunks of a file."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
