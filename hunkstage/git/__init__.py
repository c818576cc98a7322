"""Git collaborators for hunkstage.

This package provides the repository side of partial staging with:
- exceptions: GitError, NoUnstagedChangesError
- runner: _run_git_command, get_repo_root
- diff: get_file_diff, has_unstaged_changes, GitDiffSource
- apply: apply_patch, GitPatchApplier, cleanup_patch_files
"""

# Exceptions
from hunkstage.git.exceptions import (
    GitError,
    NoUnstagedChangesError,
)

# Runner utilities
from hunkstage.git.runner import (
    _run_git_command,
    get_repo_root,
)

# Diff utilities
from hunkstage.git.diff import (
    GitDiffSource,
    get_file_diff,
    has_unstaged_changes,
)

# Patch application
from hunkstage.git.apply import (
    GitPatchApplier,
    apply_patch,
    cleanup_patch_files,
)


__all__ = [
    # Exceptions
    "GitError",
    "NoUnstagedChangesError",
    # Runner
    "_run_git_command",
    "get_repo_root",
    # Diff
    "get_file_diff",
    "has_unstaged_changes",
    "GitDiffSource",
    # Apply
    "apply_patch",
    "GitPatchApplier",
    "cleanup_patch_files",
]
