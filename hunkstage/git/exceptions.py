"""Git-related exception classes.

Contains all exception classes for Git operations:
- GitError: Base exception for git-related errors
- NoUnstagedChangesError: Raised when a file has nothing left to stage
"""


class GitError(Exception):
    """Custom exception for git-related errors."""

    pass


class NoUnstagedChangesError(GitError):
    """Raised when a file has no unstaged changes."""

    pass
