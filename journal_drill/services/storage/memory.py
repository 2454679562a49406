"""
In-Memory Storage Implementation

Used for tests and for local runs without Google Sheets credentials.
Everything is lost when the process exits.
"""

from typing import Optional

from journal_drill.models.progress import AttemptRecord, ProgressState
from journal_drill.services.storage.interface import ProgressStorageInterface


class InMemoryProgressStorage(ProgressStorageInterface):
    """Dict-backed progress store with a list as the attempt log."""

    def __init__(self):
        self._progress: dict[str, ProgressState] = {}
        self._attempts: list[AttemptRecord] = []

    async def load_progress(self, identity: str) -> Optional[ProgressState]:
        return self._progress.get(identity)

    async def save_progress(self, identity: str, state: ProgressState) -> bool:
        stored = self._progress.get(identity)
        if stored is not None and state.version <= stored.version:
            return False
        self._progress[identity] = state
        return True

    async def record_attempt(
        self,
        identity: str,
        scenario_id: int,
        is_correct: bool,
    ) -> bool:
        self._attempts.append(AttemptRecord(
            identity=identity,
            scenario_id=scenario_id,
            is_correct=is_correct,
        ))
        return True

    async def list_attempts(
        self,
        identity: Optional[str] = None,
    ) -> list[AttemptRecord]:
        if identity is None:
            return list(self._attempts)
        return [a for a in self._attempts if a.identity == identity]
