"""Staging session: cursor, navigation and the stage/unstage protocol.

Contains:
- PatchApplier: Protocol for the object that applies patches
- StagingSession: Active state of the staging panel for one file's diff
"""

import logging
from typing import Callable, Optional, Protocol, Sequence

from hunkstage.staging.errors import ApplyFailed, RollbackFailed
from hunkstage.staging.models import FocusRegion, Scope, UnstageOutcome, UnstageResult
from hunkstage.staging.mutator import (
    extract_hunk,
    extract_hunk_without_line,
    extract_line,
    is_empty,
)
from hunkstage.staging.parser import parse_diff, split_diff_lines
from hunkstage.staging.search import next_index, prev_index

logger = logging.getLogger(__name__)


class PatchApplier(Protocol):
    """Anything that can apply a textual patch to the repository."""

    def apply_patch(self, patch: str, reverse: bool = False, index_only: bool = False) -> None:
        ...


class StagingSession:
    """Diff, index tables and cursor for a file with unstaged changes.

    The cursor (selected_line) is a position in stageable_lines, not a raw
    line number, so it survives the diff being re-parsed after a mutation.
    A session is never patched in place across a refresh: the owner builds
    a new one with from_diff().
    """

    def __init__(
        self,
        diff: str,
        hunk_starts: Sequence[int],
        stageable_lines: Sequence[int],
        selected_line: int = 0,
        *,
        applier: PatchApplier,
        on_refresh: Optional[Callable[[], None]] = None,
    ):
        if not stageable_lines:
            raise ValueError("A staging session needs at least one stageable line")
        if not 0 <= selected_line < len(stageable_lines):
            raise ValueError(f"Selected line {selected_line} is out of range")

        self.diff = diff
        self.hunk_starts = list(hunk_starts)
        self.stageable_lines = list(stageable_lines)
        self.selected_line = selected_line
        self._applier = applier
        self._on_refresh = on_refresh

    @classmethod
    def from_diff(
        cls,
        diff: str,
        previous: Optional["StagingSession"] = None,
        *,
        applier: PatchApplier,
        on_refresh: Optional[Callable[[], None]] = None,
    ) -> "StagingSession":
        """Parse a diff and build a session, keeping the previous cursor.

        Raises:
            MalformedPatch: If the diff has no hunks.
            ValueError: If the diff has no stageable lines.
        """
        hunk_starts, stageable_lines = parse_diff(diff)
        return cls.from_parsed(
            diff,
            hunk_starts,
            stageable_lines,
            previous,
            applier=applier,
            on_refresh=on_refresh,
        )

    @classmethod
    def from_parsed(
        cls,
        diff: str,
        hunk_starts: Sequence[int],
        stageable_lines: Sequence[int],
        previous: Optional["StagingSession"] = None,
        *,
        applier: PatchApplier,
        on_refresh: Optional[Callable[[], None]] = None,
    ) -> "StagingSession":
        """Build a session from an already parsed diff, keeping the previous cursor."""
        selected_line = 0
        if previous is not None:
            selected_line = min(previous.selected_line, len(stageable_lines) - 1)
            selected_line = max(selected_line, 0)

        return cls(
            diff,
            hunk_starts,
            stageable_lines,
            selected_line,
            applier=applier,
            on_refresh=on_refresh,
        )

    @property
    def current_line(self) -> int:
        """Line number in the diff of the selected stageable line."""
        return self.stageable_lines[self.selected_line]

    @property
    def current_hunk(self) -> int:
        """Position in hunk_starts of the hunk holding the selection."""
        return prev_index(self.hunk_starts, self.current_line, inclusive=True)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def select(self, selected_line: int) -> None:
        """Move the cursor to a position in stageable_lines."""
        if not 0 <= selected_line < len(self.stageable_lines):
            raise ValueError(
                f"Selected line {selected_line} is out of range "
                f"(0-{len(self.stageable_lines) - 1})"
            )
        self.selected_line = selected_line

    def cycle_line(self, forward: bool = True) -> None:
        """Move the cursor to the next or previous stageable line, wrapping."""
        if forward:
            self.selected_line = next_index(self.stageable_lines, self.current_line)
        else:
            self.selected_line = prev_index(self.stageable_lines, self.current_line)

    def cycle_hunk(self, forward: bool = True) -> None:
        """Move the cursor to the first stageable line of the next or previous hunk."""
        step = 1 if forward else -1
        new_hunk = (self.current_hunk + step) % len(self.hunk_starts)
        self.selected_line = next_index(
            self.stageable_lines, self.hunk_starts[new_hunk], inclusive=True
        )

    def focus_region(self, viewport_height: int, context_lines: int = 3) -> FocusRegion:
        """Work out the best window for the selected line.

        Ideally the bottom of the window is the bottom of the hunk, but when
        the hunk is taller than the viewport only context_lines lines below
        the cursor are guaranteed to be visible.
        """
        line_number = self.current_line

        next_hunk = next_index(self.hunk_starts, line_number)
        if next_hunk == 0:
            bottom_line = len(split_diff_lines(self.diff)) - 1
        else:
            bottom_line = self.hunk_starts[next_hunk] - 1

        hunk_index = self.current_hunk
        # the first hunk also shows the file header
        top_line = 0 if hunk_index == 0 else self.hunk_starts[hunk_index]

        if bottom_line - top_line > viewport_height:
            bottom_line = line_number + context_lines

        return FocusRegion(
            top_line=top_line,
            bottom_line=bottom_line,
            selected_line=line_number,
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def build_patch(self, scope: Scope) -> str:
        """Build the sub-patch that stage(scope) would apply."""
        if scope == Scope.HUNK:
            return extract_hunk(self.diff, self.hunk_starts, self.current_line)
        return extract_line(self.diff, self.current_line)

    def stage(self, scope: Scope = Scope.LINE) -> None:
        """Apply the selected line or hunk to the index.

        Raises:
            MalformedPatch, MalformedHeader: If the sub-patch cannot be built.
            ApplyFailed: If git rejects the sub-patch.
        """
        patch = self.build_patch(scope)
        logger.debug("Staging %s at line %d:\n%s", scope.value, self.current_line, patch)
        self._applier.apply_patch(patch, reverse=False, index_only=True)
        self._refresh()

    def unstage(self, scope: Scope = Scope.LINE) -> UnstageResult:
        """Revert the selected line or hunk.

        The whole hunk is reverse-applied first. For a single line, the
        hunk minus that line is then applied again. If that second step
        fails, the original hunk is re-applied to restore the starting state.

        Returns:
            UnstageResult with APPLIED, or ROLLED_BACK plus the error that
            caused the rollback.

        Raises:
            MalformedPatch, MalformedHeader: If a sub-patch cannot be built.
            ApplyFailed: If the reverse apply fails. Nothing has changed.
            RollbackFailed: If restoring the original hunk fails.
        """
        line_number = self.current_line
        hunk_patch = extract_hunk(self.diff, self.hunk_starts, line_number)
        patch_without_line = extract_hunk_without_line(self.diff, line_number)

        logger.debug("Reverse-applying hunk at line %d:\n%s", line_number, hunk_patch)
        self._applier.apply_patch(hunk_patch, reverse=True, index_only=False)

        if scope == Scope.HUNK or is_empty(patch_without_line):
            self._refresh()
            return UnstageResult(UnstageOutcome.APPLIED)

        logger.debug("Re-applying hunk without line %d:\n%s", line_number, patch_without_line)
        try:
            self._applier.apply_patch(patch_without_line, reverse=False, index_only=False)
        except ApplyFailed as original:
            logger.warning("Unstaging line %d failed, restoring hunk: %s", line_number, original)
            try:
                self._applier.apply_patch(hunk_patch, reverse=False, index_only=False)
            except ApplyFailed as rollback:
                raise RollbackFailed(original, rollback) from rollback
            return UnstageResult(UnstageOutcome.ROLLED_BACK, error=original)

        self._refresh()
        return UnstageResult(UnstageOutcome.APPLIED)

    def _refresh(self) -> None:
        if self._on_refresh is not None:
            self._on_refresh()
