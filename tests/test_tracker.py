"""Tests for the progress state machine and mastery figures."""

import time

import pytest

from journal_drill.catalog import UnknownScenarioError, build_catalog
from journal_drill.models.progress import ProgressState
from journal_drill.progression import (
    ProgressTracker,
    calculate_mastery_level,
    next_version,
    summarize_progress,
)

from tests.factories import raw_scenario


class TestMastery:
    """Tests for mastery calculation."""

    def test_half_solved(self):
        """Test that two of four solved is 0.5."""
        assert calculate_mastery_level({1: True, 2: False, 3: True}, 4) == 0.5

    def test_empty_catalog(self):
        """Test that an empty catalog is 0 instead of dividing by zero."""
        assert calculate_mastery_level({}, 0) == 0.0

    def test_nothing_attempted(self):
        """Test a fresh student."""
        assert calculate_mastery_level({}, 8) == 0.0

    def test_everything_solved(self):
        """Test full mastery."""
        assert calculate_mastery_level({1: True, 2: True}, 2) == 1.0

    def test_stale_ids_cannot_exceed_one(self):
        """Test that completions for removed scenarios never push mastery past 1."""
        assert calculate_mastery_level({1: True, 2: True, 9: True}, 2) == 1.0

    def test_summary(self):
        """Test the header figures."""
        summary = summarize_progress({1: True, 2: False, 3: True}, 8)
        assert summary.solved_count == 2
        assert summary.attempted_count == 3
        assert summary.total_scenarios == 8
        assert summary.mastery_level == 0.25
        assert summary.progress_percentage == 38

    def test_progress_counts_attempts_not_solves(self):
        """Test that wrong answers move the progress bar but not mastery."""
        summary = summarize_progress({1: False, 2: False}, 4)
        assert summary.mastery_level == 0.0
        assert summary.progress_percentage == 50


class TestTrackerStart:
    """Tests for the initial state."""

    def test_starts_at_first_id(self, sparse_catalog):
        """Test the default starting state."""
        tracker = ProgressTracker(sparse_catalog)
        assert tracker.current_scenario_id == 1
        assert tracker.completed_scenarios == {}
        assert not tracker.is_done
        assert not tracker.ready_to_advance

    def test_resumes_loaded_state(self, sparse_catalog):
        """Test that a loaded state is used as is."""
        state = ProgressState(current_scenario_id=3, completed_scenarios={1: True}, version=4)
        tracker = ProgressTracker(sparse_catalog, state)
        assert tracker.current_scenario_id == 3
        assert tracker.is_solved(1)
        assert tracker.state.version == 4

    def test_resumes_done_state(self, sparse_catalog):
        """Test that a student who finished stays finished."""
        state = ProgressState(current_scenario_id=None, completed_scenarios={1: True})
        tracker = ProgressTracker(sparse_catalog, state)
        assert tracker.is_done
        assert tracker.current_scenario is None

    def test_unknown_loaded_pointer_goes_to_first(self, sparse_catalog):
        """Test that a pointer to a removed scenario is moved to the first one."""
        state = ProgressState(current_scenario_id=42, completed_scenarios={1: True})
        tracker = ProgressTracker(sparse_catalog, state)
        assert tracker.current_scenario_id == 1
        assert tracker.is_solved(1)

    def test_completed_scenarios_is_a_copy(self, sparse_catalog):
        """Test that callers cannot mutate tracker state."""
        tracker = ProgressTracker(sparse_catalog)
        tracker.completed_scenarios[1] = True
        assert not tracker.is_solved(1)


class TestAttempt:
    """Tests for recording attempts."""

    def test_correct_attempt_marks_solved(self, sparse_catalog):
        """Test that a correct attempt is recorded and the pointer holds."""
        tracker = ProgressTracker(sparse_catalog)
        tracker.attempt(1, True)
        assert tracker.completed_scenarios == {1: True}
        assert tracker.current_scenario_id == 1
        assert tracker.ready_to_advance

    def test_wrong_attempt_recorded(self, sparse_catalog):
        """Test that a wrong attempt is recorded as False without moving."""
        tracker = ProgressTracker(sparse_catalog)
        tracker.attempt(1, False)
        assert tracker.completed_scenarios == {1: False}
        assert tracker.current_scenario_id == 1
        assert not tracker.ready_to_advance

    def test_solved_stays_solved(self, sparse_catalog):
        """Test that a later wrong attempt does not clear a solved scenario."""
        tracker = ProgressTracker(sparse_catalog)
        tracker.attempt(1, True)
        tracker.attempt(1, False)
        assert tracker.is_solved(1)

    def test_wrong_then_right(self, sparse_catalog):
        """Test that a retry can solve a scenario."""
        tracker = ProgressTracker(sparse_catalog)
        tracker.attempt(1, False)
        tracker.attempt(1, True)
        assert tracker.is_solved(1)

    def test_attempt_on_other_scenario_does_not_signal_advance(self, sparse_catalog):
        """Test that only the current scenario raises ready_to_advance."""
        tracker = ProgressTracker(sparse_catalog)
        tracker.attempt(3, True)
        assert tracker.is_solved(3)
        assert not tracker.ready_to_advance

    def test_unknown_scenario_raises(self, sparse_catalog):
        """Test that an id outside the catalog is rejected."""
        tracker = ProgressTracker(sparse_catalog)
        with pytest.raises(UnknownScenarioError):
            tracker.attempt(2, True)

    def test_every_transition_bumps_version(self, sparse_catalog):
        """Test that each transition produces a newer snapshot."""
        tracker = ProgressTracker(sparse_catalog)
        versions = [tracker.state.version]
        tracker.attempt(1, False)
        versions.append(tracker.state.version)
        tracker.advance()
        versions.append(tracker.state.version)
        tracker.reset()
        versions.append(tracker.state.version)
        assert versions[0] == 0
        assert versions == sorted(set(versions))

    def test_version_outruns_an_old_snapshot(self, sparse_catalog):
        """Test that a session resumed from an old version still writes newer ones."""
        tracker = ProgressTracker(sparse_catalog, ProgressState(current_scenario_id=1, version=3))
        tracker.advance()
        assert tracker.state.version > 3

    def test_next_version(self, monkeypatch):
        """Test that versions follow the clock but always move forward."""
        monkeypatch.setattr(time, "time_ns", lambda: 5_000_000)
        assert next_version(0) == 5_000
        assert next_version(9_000) == 9_001

    def test_old_snapshot_unchanged(self, sparse_catalog):
        """Test that a handed-out state is never modified afterwards."""
        tracker = ProgressTracker(sparse_catalog)
        before = tracker.state
        tracker.attempt(1, True)
        assert before.completed_scenarios == {}
        assert before.version == 0


class TestAdvance:
    """Tests for moving through the catalog."""

    def test_advance_follows_id_order(self, sparse_catalog):
        """Test that advance visits ids in increasing order, then DONE."""
        tracker = ProgressTracker(sparse_catalog)
        visited = [tracker.current_scenario_id]
        while not tracker.is_done:
            visited.append(tracker.advance())
        assert visited == [1, 3, 7, None]

    def test_skip_without_solving(self, sparse_catalog):
        """Test that advance does not require a correct answer."""
        tracker = ProgressTracker(sparse_catalog)
        assert tracker.advance() == 3
        assert tracker.completed_scenarios == {}

    def test_advance_clears_ready_signal(self, sparse_catalog):
        """Test that ready_to_advance resets on the next scenario."""
        tracker = ProgressTracker(sparse_catalog)
        tracker.attempt(1, True)
        tracker.advance()
        assert not tracker.ready_to_advance

    def test_last_scenario(self, sparse_catalog):
        """Test is_last_scenario on the highest id."""
        tracker = ProgressTracker(
            sparse_catalog, ProgressState(current_scenario_id=7, completed_scenarios={})
        )
        assert tracker.is_last_scenario
        assert tracker.advance() is None
        assert tracker.is_done
        assert not tracker.is_last_scenario

    def test_advance_when_done_is_noop(self, sparse_catalog):
        """Test that DONE is terminal for advance."""
        tracker = ProgressTracker(
            sparse_catalog, ProgressState(current_scenario_id=None, completed_scenarios={})
        )
        version = tracker.state.version
        assert tracker.advance() is None
        assert tracker.is_done
        assert tracker.state.version == version


class TestReset:
    """Tests for clearing progress."""

    def test_reset_from_middle(self, sparse_catalog):
        """Test reset mid-catalog."""
        tracker = ProgressTracker(sparse_catalog)
        tracker.attempt(1, True)
        tracker.advance()
        tracker.attempt(3, False)
        tracker.reset()
        assert tracker.current_scenario_id == 1
        assert tracker.completed_scenarios == {}
        assert not tracker.ready_to_advance

    def test_reset_from_done(self, sparse_catalog):
        """Test that reset is the way out of DONE."""
        tracker = ProgressTracker(
            sparse_catalog,
            ProgressState(current_scenario_id=None, completed_scenarios={1: True, 3: True}),
        )
        tracker.reset()
        assert not tracker.is_done
        assert tracker.current_scenario_id == 1
        assert tracker.completed_scenarios == {}

    def test_mastery_follows_state(self, sparse_catalog):
        """Test mastery derived from the tracker's completions."""
        tracker = ProgressTracker(sparse_catalog)
        tracker.attempt(1, True)
        tracker.attempt(3, False)
        assert tracker.mastery_level == pytest.approx(1 / 3)
        assert tracker.summary.progress_percentage == 67

    def test_single_scenario_catalog(self):
        """Test a one-scenario catalog from start to DONE."""
        tracker = ProgressTracker(build_catalog([raw_scenario(5)]))
        assert tracker.is_last_scenario
        tracker.attempt(5, True)
        assert tracker.advance() is None
        assert tracker.mastery_level == 1.0
