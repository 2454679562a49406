"""
Main Orchestrator for Bond Journal Drill

This module ties together all the components and defines the flow
of one student action:

    check answer → verify → tracker.attempt → audit → persist
    next / skip  → tracker.advance → audit → persist
    reset        → tracker.reset → audit → persist

DESIGN DECISION: Persistence is fire-and-forget. State transitions
complete synchronously; the save and the attempt-log append run as
background tasks that the transition does not wait for. A failed save
is logged and dropped - the in-memory state stays authoritative for
the rest of the session. drain() waits for outstanding writes.

A correct answer never moves the pointer by itself. The session
reports ready_to_advance and waits for the student to press Next.
"""

import asyncio
from typing import Iterable, Optional, Union
from uuid import UUID

import structlog
from pydantic import BaseModel

from journal_drill.audit import AuditLogger, create_correlation_id
from journal_drill.catalog import ScenarioCatalog, get_catalog
from journal_drill.config import get_settings
from journal_drill.models.progress import (
    ProgressState,
    ProgressSummary,
    VerificationResult,
)
from journal_drill.models.scenario import CandidateLine, Scenario
from journal_drill.progression import ProgressTracker
from journal_drill.services.storage import (
    GoogleSheetsClient,
    GoogleSheetsProgressStorage,
    InMemoryProgressStorage,
    ProgressStorageInterface,
)
from journal_drill.validation import JournalEntryVerifier


PROGRESS_MESSAGE = "Great job! You're making progress!"
RETRY_MESSAGE = "Keep practicing! You'll get better with each attempt."
COMPLETION_MESSAGE = "Congratulations! You have finished all the bond journal entries in this app!"


class SessionCompleteError(Exception):
    """An answer was submitted after the last scenario was passed."""
    pass


class SubmissionOutcome(BaseModel):
    """Everything the page needs after a Check My Answer click."""

    scenario_id: int
    result: VerificationResult
    message: str
    feedback: str
    ready_to_advance: bool
    summary: ProgressSummary


class DrillSession:
    """
    One student's pass through the scenario catalog.

    Owns the ProgressTracker; presentation code reads state through
    this class and changes it only with submit / advance / reset.
    """

    def __init__(
        self,
        catalog: ScenarioCatalog,
        storage: Optional[ProgressStorageInterface] = None,
        identity: Optional[str] = None,
        state: Optional[ProgressState] = None,
        verifier: Optional[JournalEntryVerifier] = None,
        audit_logger: Optional[AuditLogger] = None,
        correlation_id: Optional[UUID] = None,
    ):
        """
        Initialize a session.

        Args:
            catalog: The scenario catalog
            storage: Where progress is saved. Nothing is persisted if None.
            identity: Student email. Nothing is persisted without one.
            state: Starting state, e.g. loaded progress
        """
        self._catalog = catalog
        self._storage = storage
        self._identity = identity or None
        self._tracker = ProgressTracker(catalog, state)
        self._verifier = verifier or JournalEntryVerifier()
        self._audit_logger = audit_logger or AuditLogger()
        self._correlation_id = correlation_id or create_correlation_id()
        self._pending: set[asyncio.Task] = set()

    @classmethod
    async def start(
        cls,
        catalog: ScenarioCatalog,
        storage: Optional[ProgressStorageInterface] = None,
        identity: Optional[str] = None,
        verifier: Optional[JournalEntryVerifier] = None,
        audit_logger: Optional[AuditLogger] = None,
    ) -> "DrillSession":
        """
        Create a session, resuming saved progress when there is any.

        A failed load is logged and the student starts fresh.
        """
        audit_logger = audit_logger or AuditLogger()
        correlation_id = create_correlation_id()
        state = None

        if storage is not None and identity:
            try:
                state = await storage.load_progress(identity)
            except Exception as e:
                await audit_logger.log_persistence_failed(
                    operation="load_progress",
                    identity=identity,
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            else:
                await audit_logger.log_progress_loaded(
                    identity=identity,
                    found=state is not None,
                    current_scenario_id=state.current_scenario_id if state else None,
                    correlation_id=correlation_id,
                )

        return cls(
            catalog=catalog,
            storage=storage,
            identity=identity,
            state=state,
            verifier=verifier,
            audit_logger=audit_logger,
            correlation_id=correlation_id,
        )

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def identity(self) -> Optional[str]:
        return self._identity

    @property
    def catalog(self) -> ScenarioCatalog:
        return self._catalog

    @property
    def state(self) -> ProgressState:
        return self._tracker.state

    @property
    def current_scenario(self) -> Optional[Scenario]:
        return self._tracker.current_scenario

    @property
    def is_done(self) -> bool:
        return self._tracker.is_done

    @property
    def ready_to_advance(self) -> bool:
        return self._tracker.ready_to_advance

    @property
    def summary(self) -> ProgressSummary:
        return self._tracker.summary

    @property
    def pending_writes(self) -> int:
        return len(self._pending)

    # -------------------------------------------------------------------------
    # Student actions
    # -------------------------------------------------------------------------

    async def submit(
        self,
        candidate_lines: Iterable[Union[CandidateLine, dict]],
    ) -> SubmissionOutcome:
        """
        Check the student's entry for the current scenario.

        Raises:
            SessionCompleteError: If every scenario has been passed
        """
        scenario = self._tracker.current_scenario
        if scenario is None:
            raise SessionCompleteError("All scenarios are complete; reset to start again")

        result = self._verifier.verify_scenario(candidate_lines, scenario)
        self._tracker.attempt(scenario.id, result.matches)

        await self._audit_logger.log_answer_checked(
            identity=self._identity,
            scenario_id=scenario.id,
            is_correct=result.matches,
            reason=result.reason.value if result.reason else None,
            correlation_id=self._correlation_id,
        )

        self._dispatch_record_attempt(scenario.id, result.matches)
        self._dispatch_save()

        if not result.matches:
            feedback = RETRY_MESSAGE
        elif self._tracker.is_last_scenario:
            feedback = COMPLETION_MESSAGE
        else:
            feedback = PROGRESS_MESSAGE

        return SubmissionOutcome(
            scenario_id=scenario.id,
            result=result,
            message=self._verifier.get_user_friendly_message(result, scenario),
            feedback=feedback,
            ready_to_advance=self._tracker.ready_to_advance,
            summary=self._tracker.summary,
        )

    async def advance(self) -> Optional[int]:
        """
        Go to the next scenario (Next Question and Skip Question).

        Returns:
            The new scenario id, or None once the catalog is finished
        """
        from_id = self._tracker.current_scenario_id
        if from_id is None:
            return None

        was_solved = self._tracker.is_solved(from_id)
        next_id = self._tracker.advance()

        await self._audit_logger.log_scenario_advanced(
            identity=self._identity,
            from_scenario_id=from_id,
            to_scenario_id=next_id,
            was_solved=was_solved,
            correlation_id=self._correlation_id,
        )
        if next_id is None:
            await self._audit_logger.log_session_completed(
                identity=self._identity,
                mastery_level=self._tracker.mastery_level,
                correlation_id=self._correlation_id,
            )

        self._dispatch_save()
        return next_id

    async def reset(self) -> None:
        """Clear all progress and return to the first scenario."""
        self._tracker.reset()
        await self._audit_logger.log_progress_reset(
            identity=self._identity,
            correlation_id=self._correlation_id,
        )
        self._dispatch_save()

    async def drain(self) -> None:
        """Wait for every outstanding persistence task."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    @property
    def _persists(self) -> bool:
        return self._storage is not None and self._identity is not None

    def _dispatch(self, coro) -> None:
        task = asyncio.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def _dispatch_save(self) -> None:
        if self._persists:
            self._dispatch(self._save(self._tracker.state))

    def _dispatch_record_attempt(self, scenario_id: int, is_correct: bool) -> None:
        if self._persists:
            self._dispatch(self._record_attempt(scenario_id, is_correct))

    async def _save(self, state: ProgressState) -> None:
        try:
            saved = await self._storage.save_progress(self._identity, state)
        except Exception as e:
            await self._audit_logger.log_persistence_failed(
                operation="save_progress",
                identity=self._identity,
                error_message=str(e),
                correlation_id=self._correlation_id,
            )
            return

        if saved:
            await self._audit_logger.log_progress_saved(
                identity=self._identity,
                version=state.version,
                correlation_id=self._correlation_id,
            )
        else:
            await self._audit_logger.log_stale_write_ignored(
                identity=self._identity,
                version=state.version,
                correlation_id=self._correlation_id,
            )

    async def _record_attempt(self, scenario_id: int, is_correct: bool) -> None:
        try:
            await self._storage.record_attempt(self._identity, scenario_id, is_correct)
        except Exception as e:
            await self._audit_logger.log_persistence_failed(
                operation="record_attempt",
                identity=self._identity,
                error_message=str(e),
                correlation_id=self._correlation_id,
            )
            return

        await self._audit_logger.log_attempt_recorded(
            identity=self._identity,
            scenario_id=scenario_id,
            is_correct=is_correct,
            correlation_id=self._correlation_id,
        )


def create_app_components(
    use_storage: bool = True,
) -> tuple[ScenarioCatalog, Optional[ProgressStorageInterface], AuditLogger]:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to set up the configured storage backend.
                    Set to False for running without persistence.

    Returns:
        (catalog, storage, audit_logger)
    """
    catalog = get_catalog()
    audit_logger = AuditLogger()
    storage: Optional[ProgressStorageInterface] = None

    if use_storage:
        backend = get_settings().drill.storage_backend
        if backend == "google_sheets":
            try:
                storage = GoogleSheetsProgressStorage(GoogleSheetsClient())
            except Exception as e:
                # Storage not configured - keep progress in memory
                structlog.get_logger(__name__).warning(
                    "storage_not_configured",
                    backend=backend,
                    error=str(e),
                )
                storage = InMemoryProgressStorage()
        else:
            storage = InMemoryProgressStorage()

    return catalog, storage, audit_logger
