"""CLI commands for repository configuration management."""

import typer

from hunkstage.git import GitError, get_repo_root
from hunkstage.user_config import get_config_file, load_config

# Subcommand group for configuration management
config_app = typer.Typer(
    name="config",
    help="Manage hunkstage configuration in .hunkstage/config.yaml",
    add_completion=False,
)


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration for this repository."""
    try:
        repo_root = get_repo_root()
        config_file = get_config_file(repo_root)
        config = load_config(repo_root)

        if config_file.exists():
            typer.echo(f"Configuration from {config_file}:")
        else:
            typer.echo("No .hunkstage/config.yaml found, using defaults:")
        typer.echo()
        typer.echo(f"  Context lines: {config.context_lines}")
        viewport = config.viewport_height if config.viewport_height is not None else "terminal"
        typer.echo(f"  Viewport height: {viewport}")
        typer.echo(f"  Keep patches: {config.keep_patches}")
        typer.echo(f"  Color: {config.color}")

    except GitError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
