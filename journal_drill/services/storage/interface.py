"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap Google Sheets for a real database later
2. Use in-memory storage for testing and local runs
3. Keep the drill engine decoupled from storage implementation

Progress is one record per student identity (an email), upserted.
Attempts are an append-only log.

STALE WRITES: every ProgressState carries a version that grows with
each transition. save_progress ignores a state that is not newer than
the stored one, so saves completing out of order cannot roll a
student's progress back.
"""

from abc import ABC, abstractmethod
from typing import Optional

from journal_drill.models.progress import AttemptRecord, ProgressState


class ProgressStorageInterface(ABC):
    """
    Abstract interface for progress and attempt storage.

    Any storage implementation (Google Sheets, PostgreSQL, etc.)
    must implement these methods.
    """

    @abstractmethod
    async def load_progress(self, identity: str) -> Optional[ProgressState]:
        """
        Load a student's saved progress.

        Args:
            identity: The student's email

        Returns:
            The saved state, or None if nothing was saved yet

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    async def save_progress(self, identity: str, state: ProgressState) -> bool:
        """
        Insert or replace a student's progress.

        Args:
            identity: The student's email
            state: Snapshot to store

        Returns:
            True if stored, False if ignored because a state with the
            same or a higher version is already stored

        Raises:
            StorageError: If save fails
        """
        pass

    @abstractmethod
    async def record_attempt(
        self,
        identity: str,
        scenario_id: int,
        is_correct: bool,
    ) -> bool:
        """
        Append one checked answer to the attempt log.

        Returns:
            True if logged successfully

        Raises:
            StorageError: If the append fails
        """
        pass

    @abstractmethod
    async def list_attempts(
        self,
        identity: Optional[str] = None,
    ) -> list[AttemptRecord]:
        """
        Read back the attempt log, oldest first.

        Args:
            identity: Only this student's attempts; all attempts if None
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
