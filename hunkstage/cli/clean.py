"""CLI command for removing kept patch files."""

from typing import Optional

import typer

from hunkstage.git import GitError, cleanup_patch_files, get_repo_root


def clean_command(
    pid: Optional[int] = typer.Option(
        None,
        "--pid",
        help="Only remove patch files written by this process ID",
    ),
) -> None:
    """Remove patch files kept in .tmp/ by --debug or keep_patches."""
    try:
        repo_root = get_repo_root()
    except GitError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    removed = cleanup_patch_files(repo_root, pid)
    if removed == 0:
        typer.echo("No patch files to remove.")
    else:
        typer.echo(f"✓ Removed {removed} patch file(s) from {repo_root / '.tmp'}")
