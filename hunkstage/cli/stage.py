"""CLI commands for staging and unstaging parts of a file."""

from enum import Enum
from pathlib import Path
from typing import Optional

import typer

from hunkstage.cli.utils import annotate_diff, colorize_diff, open_panel, setup_logging
from hunkstage.git import GitError
from hunkstage.staging import (
    RollbackFailed,
    Scope,
    StagingError,
    UnstageOutcome,
    extract_hunk,
    extract_hunk_without_line,
    extract_line,
)


class PatchMode(str, Enum):
    """Which sub-patch the patch command prints."""

    LINE = "line"
    HUNK = "hunk"
    WITHOUT_LINE = "without-line"


_FILE_ARGUMENT = typer.Argument(..., help="File with unstaged changes")


def _line_option() -> int:
    return typer.Option(
        0,
        "--line",
        "-l",
        min=0,
        help="Stageable line to act on (the [n] index shown by 'hunkstage show')",
    )


def _report_rollback_failure(error: RollbackFailed) -> None:
    typer.echo("", err=True)
    typer.echo("=" * 60, err=True)
    typer.echo("FATAL: could not restore the file after a failed unstage.", err=True)
    typer.echo("The index and working tree may be in an intermediate state.", err=True)
    typer.echo(f"Unstage error: {error.original}", err=True)
    typer.echo(f"Rollback error: {error.rollback}", err=True)
    typer.echo("Inspect 'git diff' and 'git diff --cached' before continuing.", err=True)
    typer.echo("=" * 60, err=True)


def show_command(
    file: Path = _FILE_ARGUMENT,
    line: Optional[int] = typer.Option(
        None,
        "--line",
        "-l",
        min=0,
        help="Only show the focus window around this stageable line",
    ),
    height: Optional[int] = typer.Option(
        None,
        "--height",
        min=1,
        help="Viewport height used for the focus window",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable ANSI colors",
    ),
) -> None:
    """Show a file's unstaged diff with hunk and line indices."""
    try:
        panel = open_panel(file, line)
        session = panel.session
        focus = None
        if line is not None:
            viewport = height or panel.viewport_height()
            focus = session.focus_region(viewport, panel.config.context_lines)

        color = panel.config.color and not no_color
        for text in annotate_diff(session, focus, color=color):
            typer.echo(text)

        if focus is None:
            typer.echo()
            typer.echo(
                f"{len(session.stageable_lines)} stageable line(s) "
                f"in {len(session.hunk_starts)} hunk(s)"
            )

    except (GitError, StagingError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def stage_command(
    file: Path = _FILE_ARGUMENT,
    line: int = _line_option(),
    hunk: bool = typer.Option(
        False,
        "--hunk",
        help="Stage the whole hunk containing the line",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Print the patch instead of applying it",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Log the patches and keep them in .tmp/",
    ),
) -> None:
    """Stage a single line, or its hunk, into the index."""
    setup_logging(debug)
    scope = Scope.HUNK if hunk else Scope.LINE

    try:
        panel = open_panel(file, line, debug=debug)

        if dry_run:
            typer.echo(panel.session.build_patch(scope), nl=False)
            return

        current = panel.session.current_line
        if hunk:
            panel.stage_hunk()
        else:
            panel.stage_line()

        typer.echo(f"Staged {scope.value} at diff line {current} of {panel.path}")
        if not panel.is_active:
            typer.echo("No unstaged changes left in this file.")

    except (GitError, StagingError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def unstage_command(
    file: Path = _FILE_ARGUMENT,
    line: int = _line_option(),
    hunk: bool = typer.Option(
        False,
        "--hunk",
        help="Revert the whole hunk containing the line",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Log the patches and keep them in .tmp/",
    ),
) -> None:
    """Revert a single line, or its hunk, from the unstaged changes."""
    setup_logging(debug)

    try:
        panel = open_panel(file, line, debug=debug)
        current = panel.session.current_line
        result = panel.unstage_hunk() if hunk else panel.unstage_line()

        if result.outcome == UnstageOutcome.ROLLED_BACK:
            typer.echo(f"Error: {result.error}", err=True)
            typer.echo("The file was restored to its previous state.", err=True)
            raise typer.Exit(1)

        scope = Scope.HUNK if hunk else Scope.LINE
        typer.echo(f"Unstaged {scope.value} at diff line {current} of {panel.path}")

    except RollbackFailed as e:
        _report_rollback_failure(e)
        raise typer.Exit(2)
    except (GitError, StagingError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def patch_command(
    file: Path = _FILE_ARGUMENT,
    line: int = _line_option(),
    mode: PatchMode = typer.Option(
        PatchMode.LINE,
        "--mode",
        "-m",
        help="Sub-patch to build: line, hunk or without-line",
    ),
    color: bool = typer.Option(
        False,
        "--color",
        help="Colorize the patch",
    ),
) -> None:
    """Print the sub-patch for a line without applying it."""
    try:
        panel = open_panel(file, line)
        session = panel.session

        if mode == PatchMode.HUNK:
            patch = extract_hunk(session.diff, session.hunk_starts, session.current_line)
        elif mode == PatchMode.WITHOUT_LINE:
            patch = extract_hunk_without_line(session.diff, session.current_line)
        else:
            patch = extract_line(session.diff, session.current_line)

        typer.echo(colorize_diff(patch) if color else patch, nl=False)

    except (GitError, StagingError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def focus_command(
    file: Path = _FILE_ARGUMENT,
    line: int = _line_option(),
    height: Optional[int] = typer.Option(
        None,
        "--height",
        min=1,
        help="Viewport height (defaults to config or terminal height)",
    ),
) -> None:
    """Print the focus window for a line as 'top bottom selected'."""
    try:
        panel = open_panel(file, line)
        viewport = height or panel.viewport_height()
        focus = panel.session.focus_region(viewport, panel.config.context_lines)
        typer.echo(f"{focus.top_line} {focus.bottom_line} {focus.selected_line}")

    except (GitError, StagingError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
