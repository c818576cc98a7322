"""Exception classes for the staging engine.

Contains:
- StagingError: Base exception for staging errors
- MalformedPatch: No hunk-start line where one was expected
- MalformedHeader: A hunk header cannot be parsed or rewritten
- ApplyFailed: The patch-apply collaborator rejected a patch
- RollbackFailed: The recovery re-apply of an unstage failed (fatal)
- NoStageableLinesError: The file's diff has nothing to stage
"""

from typing import Optional

from hunkstage.staging.models import UnstageOutcome


class StagingError(Exception):
    """Base exception for staging errors."""

    pass


class MalformedPatch(StagingError):
    """Raised when no hunk-start line can be found."""

    pass


class MalformedHeader(StagingError):
    """Raised when a hunk header lacks the post-image line count."""

    pass


class ApplyFailed(StagingError):
    """Raised when a patch is rejected by git apply."""

    def __init__(self, message: str, patch: Optional[str] = None):
        super().__init__(message)
        self.patch = patch


class RollbackFailed(StagingError):
    """Raised when restoring the original hunk after a failed unstage fails.

    The index and working tree may be in neither the pre- nor the
    post-operation state. Callers must report this and abandon the session.
    """

    outcome = UnstageOutcome.ROLLBACK_FAILED

    def __init__(self, original: ApplyFailed, rollback: ApplyFailed):
        super().__init__(
            f"Rollback failed after unstage error.\n"
            f"Unstage error: {original}\n"
            f"Rollback error: {rollback}"
        )
        self.original = original
        self.rollback = rollback


class NoStageableLinesError(StagingError):
    """Raised when a refreshed diff has no lines to stage."""

    pass
