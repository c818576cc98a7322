"""Shared helpers for hunkstage CLI commands."""

import logging
from pathlib import Path
from typing import Optional

import typer

from hunkstage.git import (
    GitDiffSource,
    GitPatchApplier,
    NoUnstagedChangesError,
    get_repo_root,
)
from hunkstage.staging import FocusRegion, StagingPanel, StagingSession, split_diff_lines
from hunkstage.user_config import load_config


def setup_logging(debug: bool) -> None:
    """Send engine logs to stderr when --debug is given."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def resolve_repo_path(file: Path, repo_root: Path) -> str:
    """Express a user-supplied path relative to the repository root."""
    try:
        return Path(file).resolve().relative_to(repo_root.resolve()).as_posix()
    except ValueError:
        return Path(file).as_posix()


def open_panel(file: Path, line: Optional[int] = None, debug: bool = False) -> StagingPanel:
    """Open the staging panel for a file and place the cursor.

    Args:
        file: File with unstaged changes.
        line: Cursor position (index into the stageable lines).
        debug: Keep generated patch files for inspection.

    Returns:
        An active StagingPanel.

    Raises:
        GitError: If not in a repository or git fails.
        NoUnstagedChangesError: If the file has nothing to stage.
        NoStageableLinesError: If the diff has no stageable lines.
        typer.BadParameter: If line is out of range.
    """
    repo_root = get_repo_root()
    config = load_config(repo_root)
    path = resolve_repo_path(file, repo_root)

    panel = StagingPanel(
        path,
        GitDiffSource(repo_root),
        GitPatchApplier(repo_root, keep_patches=config.keep_patches or debug),
        config,
    )
    if panel.refresh() is None:
        raise NoUnstagedChangesError(f"No unstaged changes in {path}")

    if line is not None:
        try:
            panel.session.select(line)
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint="--line")

    return panel


_RED = "\033[31m"
_GREEN = "\033[32m"
_CYAN = "\033[36m"
_BOLD = "\033[1m"
_RESET = "\033[0m"


def colorize_line(line: str, in_header: bool = False) -> str:
    """Color a single diff line the way git diff does."""
    if line.startswith("@@"):
        return f"{_CYAN}{line}{_RESET}"
    if in_header:
        return f"{_BOLD}{line}{_RESET}" if line else line
    if line.startswith("-"):
        return f"{_RED}{line}{_RESET}"
    if line.startswith("+"):
        return f"{_GREEN}{line}{_RESET}"
    return line


def colorize_diff(text: str) -> str:
    """Add ANSI color codes to diff lines like git diff.

    - Red for removed lines (-)
    - Green for added lines (+)
    - Cyan for hunk headers (@@)
    - Bold for file header lines

    Args:
        text: Raw diff text.

    Returns:
        Colorized diff text with ANSI escape codes.
    """
    colorized = []
    in_header = True
    for line in text.split("\n"):
        if line.startswith("@@"):
            in_header = False
        colorized.append(colorize_line(line, in_header))
    return "\n".join(colorized)


def annotate_diff(
    session: StagingSession,
    focus: Optional[FocusRegion] = None,
    color: bool = False,
) -> list[str]:
    """Prefix each diff line with its hunk number or cursor index.

    Hunk headers get "#k", stageable lines get "[n]" and the selected line
    is marked with ">". When focus is given only its window is returned.
    """
    hunk_numbers = {line: k for k, line in enumerate(session.hunk_starts)}
    cursor_numbers = {line: n for n, line in enumerate(session.stageable_lines)}
    width = len(str(max(len(session.stageable_lines), len(session.hunk_starts)))) + 2

    lines = split_diff_lines(session.diff)
    header_length = session.hunk_starts[0]

    start, end = 0, len(lines) - 1
    if focus is not None:
        start, end = focus.top_line, min(focus.bottom_line, len(lines) - 1)

    annotated = []
    for index in range(start, end + 1):
        if index in hunk_numbers:
            label = f"#{hunk_numbers[index]}"
        elif index in cursor_numbers:
            label = f"[{cursor_numbers[index]}]"
        else:
            label = ""
        marker = ">" if index == session.current_line else " "
        text = lines[index]
        if color:
            text = colorize_line(text, in_header=index < header_length)
        annotated.append(f"{marker}{label:>{width}} {text}")
    return annotated
