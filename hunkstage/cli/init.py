"""CLI command for initializing hunkstage configuration."""

import typer

from hunkstage.git import GitError, get_repo_root
from hunkstage.user_config import StagingConfig, get_config_file, save_config


def init_config(
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite an existing configuration without asking",
    ),
) -> None:
    """Write a default .hunkstage/config.yaml for this repository."""
    try:
        repo_root = get_repo_root()
    except GitError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    config_file = get_config_file(repo_root)
    if config_file.exists() and not force:
        overwrite = typer.confirm(
            f"Configuration already exists at {config_file}. Overwrite?",
            default=False,
        )
        if not overwrite:
            typer.echo("Keeping existing configuration.")
            raise typer.Exit(0)

    try:
        written = save_config(repo_root, StagingConfig())
    except OSError as e:
        typer.echo(f"Error saving configuration: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"✓ Configuration saved to {written}")
