"""Partial staging engine for hunkstage.

This package provides line- and hunk-level staging with:
- models: Scope, UnstageOutcome, UnstageResult, FocusRegion, PanelView
- errors: StagingError, MalformedPatch, MalformedHeader, ApplyFailed,
          RollbackFailed, NoStageableLinesError
- search: prev_index, next_index
- parser: parse_diff, split_diff_lines
- mutator: extract_hunk, extract_line, extract_hunk_without_line,
           update_hunk_header, is_empty
- session: StagingSession, PatchApplier
- panel: StagingPanel, DiffSource
"""

# Models
from hunkstage.staging.models import (
    FocusRegion,
    PanelView,
    Scope,
    UnstageOutcome,
    UnstageResult,
)

# Errors
from hunkstage.staging.errors import (
    ApplyFailed,
    MalformedHeader,
    MalformedPatch,
    NoStageableLinesError,
    RollbackFailed,
    StagingError,
)

# Circular search
from hunkstage.staging.search import (
    next_index,
    prev_index,
)

# Parser
from hunkstage.staging.parser import (
    parse_diff,
    split_diff_lines,
)

# Patch mutation
from hunkstage.staging.mutator import (
    extract_hunk,
    extract_hunk_without_line,
    extract_line,
    get_header_length,
    is_empty,
    update_hunk_header,
)

# Session and panel
from hunkstage.staging.session import (
    PatchApplier,
    StagingSession,
)
from hunkstage.staging.panel import (
    DiffSource,
    StagingPanel,
)


__all__ = [
    # Models
    "Scope",
    "UnstageOutcome",
    "UnstageResult",
    "FocusRegion",
    "PanelView",
    # Errors
    "StagingError",
    "MalformedPatch",
    "MalformedHeader",
    "ApplyFailed",
    "RollbackFailed",
    "NoStageableLinesError",
    # Search
    "prev_index",
    "next_index",
    # Parser
    "parse_diff",
    "split_diff_lines",
    # Mutator
    "get_header_length",
    "extract_hunk",
    "extract_line",
    "extract_hunk_without_line",
    "update_hunk_header",
    "is_empty",
    # Session and panel
    "PatchApplier",
    "StagingSession",
    "DiffSource",
    "StagingPanel",
]
