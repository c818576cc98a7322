"""Git diff utilities.

Contains:
- get_file_diff: Get the unstaged diff of a single file
- has_unstaged_changes: Check whether a file differs from the index
- GitDiffSource: Diff source bound to a repository, used by the staging panel
"""

from pathlib import Path
from typing import Optional

from hunkstage.git.runner import _run_git_command


def get_file_diff(path: str, repo_root: Optional[Path] = None) -> str:
    """Get the unstaged diff (working tree vs index) of a single file.

    Colors and external diff drivers are disabled so the output is plain
    unified diff text.

    Args:
        path: File path relative to the repository root.
        repo_root: The root directory of the git repository (optional).

    Returns:
        The raw diff, including its trailing newline.
    """
    return _run_git_command(
        ["diff", "--no-color", "--no-ext-diff", "--", path],
        cwd=repo_root,
        strip=False,
    )


def has_unstaged_changes(path: str, repo_root: Optional[Path] = None) -> bool:
    """Check whether a file has unstaged changes.

    Args:
        path: File path relative to the repository root.
        repo_root: The root directory of the git repository (optional).

    Returns:
        True if git diff lists the file.
    """
    output = _run_git_command(["diff", "--name-only", "--", path], cwd=repo_root)
    return bool(output)


class GitDiffSource:
    """Fetches unstaged diffs from a repository."""

    def __init__(self, repo_root: Optional[Path] = None):
        self.repo_root = repo_root

    def has_unstaged_changes(self, path: str) -> bool:
        return has_unstaged_changes(path, self.repo_root)

    def get_file_diff(self, path: str) -> str:
        return get_file_diff(path, self.repo_root)
