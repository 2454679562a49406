"""
Progress Tracker

The session state machine. The tracker is the only code that changes
a ProgressState; every transition replaces the state with a new
snapshot with a higher `version` (see next_version), so a snapshot
handed to the storage layer never changes underneath it.

States: the current scenario id, or DONE (current_scenario_id is None).

    attempt(id, correct)  completed[id] |= correct, pointer unchanged
    advance()             next larger id, or DONE after the last one
    reset()               empty completion map, pointer at first id

DONE is reached only by advancing past the last scenario; reset() is
the only way out.
"""

import time
from typing import Optional

from journal_drill.catalog import ScenarioCatalog, UnknownScenarioError
from journal_drill.models.progress import ProgressState, ProgressSummary
from journal_drill.models.scenario import Scenario
from journal_drill.progression.mastery import calculate_mastery_level, summarize_progress


def next_version(previous: int) -> int:
    """
    Version for the snapshot after `previous`.

    Versions are microsecond timestamps, never below previous + 1, so
    they keep growing across sessions for the same student. A session
    that started from a stale or missing snapshot still writes versions
    newer than whatever an earlier session stored.
    """
    return max(previous + 1, time.time_ns() // 1000)


class ProgressTracker:
    """
    Owns one student's ProgressState for the length of a session.

    A correct attempt on the current scenario raises `ready_to_advance`;
    the pointer only moves when advance() is called.
    """

    def __init__(
        self,
        catalog: ScenarioCatalog,
        state: Optional[ProgressState] = None,
    ):
        """
        Initialize tracker.

        Args:
            catalog: The scenario catalog
            state: Previously saved state. If None, starts at the first
                   scenario with nothing completed. A saved pointer that
                   no longer names a catalog scenario is moved back to
                   the first scenario.
        """
        self._catalog = catalog
        self._ready_to_advance = False

        if state is None:
            state = ProgressState.initial(catalog.first_id)
        elif state.current_scenario_id is not None and state.current_scenario_id not in catalog:
            state = state.model_copy(update={"current_scenario_id": catalog.first_id})

        self._state = state

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def catalog(self) -> ScenarioCatalog:
        return self._catalog

    @property
    def state(self) -> ProgressState:
        """Current immutable snapshot."""
        return self._state

    @property
    def current_scenario_id(self) -> Optional[int]:
        return self._state.current_scenario_id

    @property
    def current_scenario(self) -> Optional[Scenario]:
        if self._state.current_scenario_id is None:
            return None
        return self._catalog.get(self._state.current_scenario_id)

    @property
    def completed_scenarios(self) -> dict[int, bool]:
        return dict(self._state.completed_scenarios)

    @property
    def is_done(self) -> bool:
        return self._state.is_done

    @property
    def ready_to_advance(self) -> bool:
        """True after the current scenario was answered correctly."""
        return self._ready_to_advance

    @property
    def is_last_scenario(self) -> bool:
        """True while the pointer is on the highest-id scenario."""
        current = self._state.current_scenario_id
        return current is not None and self._catalog.next_id(current) is None

    def is_solved(self, scenario_id: int) -> bool:
        return self._state.completed_scenarios.get(scenario_id, False)

    @property
    def mastery_level(self) -> float:
        return calculate_mastery_level(self._state.completed_scenarios, len(self._catalog))

    @property
    def summary(self) -> ProgressSummary:
        return summarize_progress(self._state.completed_scenarios, len(self._catalog))

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def _replace(self, **changes) -> None:
        changes["version"] = next_version(self._state.version)
        self._state = self._state.model_copy(update=changes)

    def attempt(self, scenario_id: int, correct: bool) -> None:
        """
        Record the outcome of checking an answer.

        Once a scenario is solved it stays solved; a later wrong answer
        does not clear it.

        Raises:
            UnknownScenarioError: If the scenario is not in the catalog
        """
        if scenario_id not in self._catalog:
            raise UnknownScenarioError(scenario_id)

        completed = dict(self._state.completed_scenarios)
        completed[scenario_id] = completed.get(scenario_id, False) or correct
        self._replace(completed_scenarios=completed)

        if correct and scenario_id == self._state.current_scenario_id:
            self._ready_to_advance = True

    def advance(self) -> Optional[int]:
        """
        Move to the next scenario, solved or not.

        Returns:
            The new current scenario id, or None when the student has
            moved past the last scenario (the session is complete).
            Advancing while already DONE changes nothing.
        """
        current = self._state.current_scenario_id
        if current is None:
            return None

        self._ready_to_advance = False
        next_id = self._catalog.next_id(current)
        self._replace(current_scenario_id=next_id)
        return next_id

    def reset(self) -> None:
        """Forget all completions and go back to the first scenario."""
        self._ready_to_advance = False
        self._replace(
            current_scenario_id=self._catalog.first_id,
            completed_scenarios={},
        )
