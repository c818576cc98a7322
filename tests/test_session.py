"""Tests for hunkstage.staging.session module."""

import pytest

from hunkstage.staging import (
    ApplyFailed,
    MalformedHeader,
    MalformedPatch,
    RollbackFailed,
    Scope,
    StagingSession,
    UnstageOutcome,
    extract_hunk,
    extract_hunk_without_line,
    extract_line,
)


HUNK_STARTS = [4, 11, 15]
STAGEABLE_LINES = [6, 7, 8, 13, 17]


@pytest.fixture
def make_session(multi_hunk_diff, fake_applier):
    """Build a session over the three-hunk diff."""

    def _make(selected_line=0, failures=(), on_refresh=None):
        applier = fake_applier(failures)
        session = StagingSession(
            multi_hunk_diff,
            HUNK_STARTS,
            STAGEABLE_LINES,
            selected_line,
            applier=applier,
            on_refresh=on_refresh,
        )
        return session, applier

    return _make


class TestConstruction:
    """Tests for building a StagingSession."""

    def test_requires_stageable_lines(self, multi_hunk_diff, fake_applier):
        """Test a session cannot exist without stageable lines."""
        with pytest.raises(ValueError):
            StagingSession(multi_hunk_diff, HUNK_STARTS, [], applier=fake_applier())

    def test_rejects_out_of_range_cursor(self, multi_hunk_diff, fake_applier):
        """Test the cursor must index into the stageable lines."""
        with pytest.raises(ValueError):
            StagingSession(
                multi_hunk_diff, HUNK_STARTS, STAGEABLE_LINES, 5, applier=fake_applier()
            )

    def test_from_diff_starts_at_zero(self, multi_hunk_diff, fake_applier):
        """Test a fresh session selects the first stageable line."""
        session = StagingSession.from_diff(multi_hunk_diff, applier=fake_applier())

        assert session.hunk_starts == HUNK_STARTS
        assert session.stageable_lines == STAGEABLE_LINES
        assert session.selected_line == 0
        assert session.current_line == 6

    def test_from_diff_keeps_previous_cursor(self, make_session, multi_hunk_diff, fake_applier):
        """Test the cursor survives a re-parse of an equally long diff."""
        previous, _ = make_session(selected_line=3)

        session = StagingSession.from_diff(multi_hunk_diff, previous, applier=fake_applier())

        assert session.selected_line == 3

    def test_from_diff_clamps_previous_cursor(self, make_session, fake_applier):
        """Test the cursor is clamped when the new diff is shorter."""
        previous, _ = make_session(selected_line=4)
        shorter = "--- a/f\n+++ b/f\n@@ -1,2 +1,2 @@\n-a\n+b\n"

        session = StagingSession.from_diff(shorter, previous, applier=fake_applier())

        assert session.stageable_lines == [3, 4]
        assert session.selected_line == 1

    def test_from_diff_without_hunks_raises(self, fake_applier):
        """Test that a diff without hunks cannot start a session."""
        with pytest.raises(MalformedPatch):
            StagingSession.from_diff("--- a/f\n+++ b/f\n", applier=fake_applier())

    def test_from_parsed_skips_parsing(self, make_session, multi_hunk_diff, fake_applier, mocker):
        """Test a pre-parsed diff builds the same session without re-parsing."""
        previous, _ = make_session(selected_line=2)
        mock_parse = mocker.patch("hunkstage.staging.session.parse_diff")

        session = StagingSession.from_parsed(
            multi_hunk_diff, HUNK_STARTS, STAGEABLE_LINES, previous, applier=fake_applier()
        )

        mock_parse.assert_not_called()
        assert session.selected_line == 2
        assert session.current_line == 8

    def test_select(self, make_session):
        """Test moving the cursor directly."""
        session, _ = make_session()

        session.select(4)
        assert session.current_line == 17

        with pytest.raises(ValueError):
            session.select(5)


class TestCycleLine:
    """Tests for StagingSession.cycle_line."""

    def test_forward(self, make_session):
        """Test moving to the next stageable line."""
        session, _ = make_session()

        session.cycle_line(forward=True)

        assert session.selected_line == 1
        assert session.current_line == 7

    def test_forward_crosses_hunks(self, make_session):
        """Test the next line may be in the next hunk."""
        session, _ = make_session(selected_line=2)

        session.cycle_line(forward=True)

        assert session.current_line == 13

    def test_backward_wraps(self, make_session):
        """Test moving back from the first line wraps to the last."""
        session, _ = make_session()

        session.cycle_line(forward=False)

        assert session.selected_line == 4

    def test_forward_wraps(self, make_session):
        """Test moving past the last line wraps to the first."""
        session, _ = make_session(selected_line=4)

        session.cycle_line(forward=True)

        assert session.selected_line == 0

    @pytest.mark.parametrize("forward", [True, False])
    def test_full_cycle_returns_to_start(self, make_session, forward):
        """Test cycling len(stageable_lines) times is the identity."""
        session, _ = make_session(selected_line=2)

        for _ in STAGEABLE_LINES:
            session.cycle_line(forward=forward)

        assert session.selected_line == 2


class TestCycleHunk:
    """Tests for StagingSession.cycle_hunk."""

    def test_forward_selects_first_line_of_next_hunk(self, make_session):
        """Test jumping from the first hunk to the second."""
        session, _ = make_session(selected_line=2)

        session.cycle_hunk(forward=True)

        assert session.current_line == 13

    def test_forward_wraps(self, make_session):
        """Test jumping forward from the last hunk lands on the first."""
        session, _ = make_session(selected_line=4)

        session.cycle_hunk(forward=True)

        assert session.selected_line == 0

    def test_backward_wraps(self, make_session):
        """Test jumping back from the first hunk lands on the last."""
        session, _ = make_session(selected_line=1)

        session.cycle_hunk(forward=False)

        assert session.current_line == 17

    @pytest.mark.parametrize("forward", [True, False])
    def test_full_cycle_returns_to_start(self, make_session, forward):
        """Test cycling once per hunk returns to the starting hunk."""
        session, _ = make_session(selected_line=3)

        for _ in HUNK_STARTS:
            session.cycle_hunk(forward=forward)

        assert session.selected_line == 3


class TestFocusRegion:
    """Tests for StagingSession.focus_region."""

    def test_first_hunk_includes_file_header(self, make_session):
        """Test the first hunk's window starts at line 0."""
        session, _ = make_session()

        region = session.focus_region(viewport_height=40)

        assert region.top_line == 0
        assert region.bottom_line == 10
        assert region.selected_line == 6
        assert region.highlight is True
        assert region.wrap is False

    def test_middle_hunk(self, make_session):
        """Test a middle hunk is framed by its own header and the next hunk."""
        session, _ = make_session(selected_line=3)

        region = session.focus_region(viewport_height=40)

        assert (region.top_line, region.bottom_line) == (11, 14)

    def test_last_hunk_runs_to_end_of_diff(self, make_session):
        """Test the last hunk's window ends on the last diff line."""
        session, _ = make_session(selected_line=4)

        region = session.focus_region(viewport_height=40)

        assert (region.top_line, region.bottom_line) == (15, 18)

    def test_tall_hunk_clamped_to_cursor_context(self, make_session):
        """Test an oversized hunk only guarantees three lines below the cursor."""
        session, _ = make_session()

        region = session.focus_region(viewport_height=5)

        assert region.top_line == 0
        assert region.bottom_line == 6 + 3

    def test_custom_context_lines(self, make_session):
        """Test the trailing context is configurable."""
        session, _ = make_session(selected_line=1)

        region = session.focus_region(viewport_height=5, context_lines=1)

        assert region.bottom_line == 8


class TestStage:
    """Tests for StagingSession.stage."""

    def test_stage_line_applies_to_index(self, make_session, multi_hunk_diff):
        """Test staging a line applies the line patch forward to the index."""
        refreshes = []
        session, applier = make_session(selected_line=1, on_refresh=lambda: refreshes.append(1))

        session.stage(Scope.LINE)

        assert applier.calls == [(extract_line(multi_hunk_diff, 7), False, True)]
        assert refreshes == [1]

    def test_stage_hunk_applies_whole_hunk(self, make_session, multi_hunk_diff):
        """Test staging a hunk applies the unmodified hunk."""
        session, applier = make_session(selected_line=3)

        session.stage(Scope.HUNK)

        assert applier.calls == [(extract_hunk(multi_hunk_diff, HUNK_STARTS, 13), False, True)]

    def test_apply_failure_propagates(self, make_session):
        """Test a rejected patch surfaces and no refresh happens."""
        refreshes = []
        session, _ = make_session(failures=[1], on_refresh=lambda: refreshes.append(1))

        with pytest.raises(ApplyFailed):
            session.stage(Scope.LINE)

        assert refreshes == []
        assert session.selected_line == 0

    def test_build_failure_applies_nothing(self, fake_applier):
        """Test a malformed hunk header fails before anything is applied."""
        applier = fake_applier()
        session = StagingSession(
            "--- a/f\n+++ b/f\n@@ junk @@\n+x\n", [2], [3], applier=applier
        )

        with pytest.raises(MalformedHeader):
            session.stage(Scope.LINE)

        assert applier.calls == []


class TestUnstage:
    """Tests for StagingSession.unstage."""

    def test_unstage_line_two_phases(self, make_session, multi_hunk_diff):
        """Test reverse-applying the hunk then re-applying it without the line."""
        refreshes = []
        session, applier = make_session(on_refresh=lambda: refreshes.append(1))

        result = session.unstage(Scope.LINE)

        hunk_patch = extract_hunk(multi_hunk_diff, HUNK_STARTS, 6)
        without_line = extract_hunk_without_line(multi_hunk_diff, 6)
        assert applier.calls == [
            (hunk_patch, True, False),
            (without_line, False, False),
        ]
        assert result.outcome == UnstageOutcome.APPLIED
        assert result.ok
        assert refreshes == [1]

    def test_unstage_hunk_single_phase(self, make_session, multi_hunk_diff):
        """Test unstaging a hunk only reverse-applies it."""
        session, applier = make_session()

        result = session.unstage(Scope.HUNK)

        assert applier.calls == [(extract_hunk(multi_hunk_diff, HUNK_STARTS, 6), True, False)]
        assert result.outcome == UnstageOutcome.APPLIED

    def test_unstage_only_change_skips_empty_patch(self, make_session):
        """Test no second phase runs when the rest of the hunk is empty."""
        session, applier = make_session(selected_line=3)

        result = session.unstage(Scope.LINE)

        assert len(applier.calls) == 1
        assert result.outcome == UnstageOutcome.APPLIED

    def test_reverse_failure_aborts(self, make_session):
        """Test a failed first phase stops immediately."""
        session, applier = make_session(failures=[1])

        with pytest.raises(ApplyFailed):
            session.unstage(Scope.LINE)

        assert len(applier.calls) == 1

    def test_second_phase_failure_rolls_back_once(self, make_session, multi_hunk_diff):
        """Test the original hunk is re-applied exactly once after a failure."""
        refreshes = []
        session, applier = make_session(failures=[2], on_refresh=lambda: refreshes.append(1))

        result = session.unstage(Scope.LINE)

        hunk_patch = extract_hunk(multi_hunk_diff, HUNK_STARTS, 6)
        assert len(applier.calls) == 3
        assert applier.calls[2] == (hunk_patch, False, False)
        assert result.outcome == UnstageOutcome.ROLLED_BACK
        assert isinstance(result.error, ApplyFailed)
        assert "patch 2" in str(result.error)
        assert not result.ok
        assert refreshes == []

    def test_rollback_failure_is_fatal(self, make_session):
        """Test a failed rollback raises RollbackFailed with both errors."""
        session, applier = make_session(failures=[2, 3])

        with pytest.raises(RollbackFailed) as exc_info:
            session.unstage(Scope.LINE)

        error = exc_info.value
        assert len(applier.calls) == 3
        assert error.outcome == UnstageOutcome.ROLLBACK_FAILED
        assert "patch 2" in str(error.original)
        assert "patch 3" in str(error.rollback)
        assert not isinstance(error, ApplyFailed)
