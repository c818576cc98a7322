"""Staging panel controller.

Owns the StagingSession slot for one file and drives its lifecycle:
created on refresh, replaced wholesale after every successful mutation,
and destroyed on escape or when the file has nothing left to stage.
"""

import shutil
from typing import Callable, Optional, Protocol

from hunkstage.staging.errors import NoStageableLinesError, RollbackFailed
from hunkstage.staging.models import PanelView, Scope, UnstageResult
from hunkstage.staging.parser import parse_diff
from hunkstage.staging.session import PatchApplier, StagingSession
from hunkstage.user_config import StagingConfig


class DiffSource(Protocol):
    """Where the panel fetches a file's unstaged diff from."""

    def has_unstaged_changes(self, path: str) -> bool:
        ...

    def get_file_diff(self, path: str) -> str:
        ...


class StagingPanel:
    """Panel state for staging parts of a single file."""

    def __init__(
        self,
        path: str,
        source: DiffSource,
        applier: PatchApplier,
        config: Optional[StagingConfig] = None,
        on_redraw: Optional[Callable[[PanelView], None]] = None,
    ):
        self.path = path
        self.source = source
        self.applier = applier
        self.config = config or StagingConfig()
        self.on_redraw = on_redraw
        self._session: Optional[StagingSession] = None

    @property
    def session(self) -> Optional[StagingSession]:
        return self._session

    @property
    def is_active(self) -> bool:
        return self._session is not None

    def refresh(self) -> Optional[PanelView]:
        """Re-fetch the diff and rebuild the session.

        Returns:
            The new view, or None if the panel was closed.

        Raises:
            NoStageableLinesError: If the diff has no lines to stage.
            MalformedPatch: If the diff has no hunks.
            GitError: If the diff cannot be fetched.
        """
        if not self.source.has_unstaged_changes(self.path):
            self.escape()
            return None

        diff = self.source.get_file_diff(self.path)
        if len(diff) < 2:
            self.escape()
            return None

        hunk_starts, stageable_lines = parse_diff(diff)
        if not stageable_lines:
            self.escape()
            raise NoStageableLinesError(f"No lines to stage in {self.path}")

        self._session = StagingSession.from_parsed(
            diff,
            hunk_starts,
            stageable_lines,
            self._session,
            applier=self.applier,
            on_refresh=self.refresh,
        )

        view = self.view()
        if self.on_redraw is not None:
            self.on_redraw(view)
        return view

    def escape(self) -> None:
        """Close the panel and drop the session."""
        self._session = None

    def view(self) -> PanelView:
        """Describe what the renderer should show for the current selection."""
        session = self._require_session()
        return PanelView(
            path=self.path,
            diff=session.diff,
            focus=session.focus_region(self.viewport_height(), self.config.context_lines),
        )

    def viewport_height(self) -> int:
        if self.config.viewport_height is not None:
            return self.config.viewport_height
        return shutil.get_terminal_size().lines

    def next_line(self) -> PanelView:
        self._require_session().cycle_line(forward=True)
        return self.view()

    def prev_line(self) -> PanelView:
        self._require_session().cycle_line(forward=False)
        return self.view()

    def next_hunk(self) -> PanelView:
        self._require_session().cycle_hunk(forward=True)
        return self.view()

    def prev_hunk(self) -> PanelView:
        self._require_session().cycle_hunk(forward=False)
        return self.view()

    def stage_line(self) -> None:
        self._require_session().stage(Scope.LINE)

    def stage_hunk(self) -> None:
        self._require_session().stage(Scope.HUNK)

    def unstage_line(self) -> UnstageResult:
        return self._unstage(Scope.LINE)

    def unstage_hunk(self) -> UnstageResult:
        return self._unstage(Scope.HUNK)

    def _unstage(self, scope: Scope) -> UnstageResult:
        try:
            return self._require_session().unstage(scope)
        except RollbackFailed:
            # the working tree state is unknown, so the session cannot be trusted
            self.escape()
            raise

    def _require_session(self) -> StagingSession:
        if self._session is None:
            raise RuntimeError("The staging panel has no active session")
        return self._session
