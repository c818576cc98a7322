"""Data models for the hunkstage staging engine.

Contains:
- Scope: Whether a stage/unstage call targets a single line or a whole hunk
- UnstageOutcome: Tagged result of the two-phase unstage protocol
- UnstageResult: Outcome plus the error that triggered a rollback, if any
- FocusRegion: Visible window for the selected line
- PanelView: What the panel hands to the renderer after a refresh
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from hunkstage.staging.errors import ApplyFailed


class Scope(str, Enum):
    """Granularity of a stage or unstage call."""

    LINE = "line"
    HUNK = "hunk"


class UnstageOutcome(str, Enum):
    """Tagged outcome of StagingSession.unstage."""

    APPLIED = "applied"
    ROLLED_BACK = "rolled_back"
    ROLLBACK_FAILED = "rollback_failed"


@dataclass
class UnstageResult:
    """Result of an unstage call that did not end in a fatal state."""

    outcome: UnstageOutcome
    error: Optional["ApplyFailed"] = None

    @property
    def ok(self) -> bool:
        return self.outcome == UnstageOutcome.APPLIED


@dataclass(frozen=True)
class FocusRegion:
    """Visible window for the staging panel.

    The renderer should show lines top_line..bottom_line (inclusive) with
    selected_line highlighted and line wrapping disabled.
    """

    top_line: int
    bottom_line: int
    selected_line: int
    highlight: bool = True
    wrap: bool = False


@dataclass(frozen=True)
class PanelView:
    """Snapshot handed to the redraw callback after a refresh."""

    path: str
    diff: str
    focus: FocusRegion
