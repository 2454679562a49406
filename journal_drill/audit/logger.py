"""
Audit Logger

DESIGN DECISION: Every student action and every persistence outcome
is logged. This provides:
1. Traceability of a student's path through the catalog
2. A record of saves that were lost or ignored
3. Debugging capability

The audit logger:
- Is async so callers can await it next to storage calls
- Never raises into the caller
- Supports correlation IDs to trace one session's events
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from journal_drill.config import get_settings
from journal_drill.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


def configure_logging(level: Optional[int] = None) -> None:
    """
    Configure stdlib logging and structlog for JSON output.

    Level defaults to DEBUG in debug mode, INFO otherwise.
    """
    if level is None:
        level = logging.DEBUG if get_settings().app.debug_mode else logging.INFO

    logging.basicConfig(format="%(message)s", level=level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()


class AuditLogger:
    """
    Central audit logging service.

    Writes each AuditEvent as one structured JSON log line.
    """

    def __init__(self, logger_name: str = "journal_drill.audit"):
        self._logger = structlog.get_logger(logger_name)

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the event was written.
        """
        log_dict = event.to_log_dict()

        try:
            if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception:
            # A broken log handler must not break the drill
            return False

        return True

    async def log_answer_checked(
        self,
        identity: Optional[str],
        scenario_id: int,
        is_correct: bool,
        reason: Optional[str],
        correlation_id: Optional[UUID],
    ) -> None:
        """Log a checked answer."""
        event = AuditEventBuilder.answer_checked(
            identity=identity,
            scenario_id=scenario_id,
            is_correct=is_correct,
            reason=reason,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_scenario_advanced(
        self,
        identity: Optional[str],
        from_scenario_id: int,
        to_scenario_id: Optional[int],
        was_solved: bool,
        correlation_id: Optional[UUID],
    ) -> None:
        """Log a move to the next scenario (or a skip)."""
        event = AuditEventBuilder.scenario_advanced(
            identity=identity,
            from_scenario_id=from_scenario_id,
            to_scenario_id=to_scenario_id,
            was_solved=was_solved,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_session_completed(
        self,
        identity: Optional[str],
        mastery_level: float,
        correlation_id: Optional[UUID],
    ) -> None:
        """Log that the student moved past the last scenario."""
        event = AuditEventBuilder.session_completed(
            identity=identity,
            mastery_level=mastery_level,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_progress_reset(
        self,
        identity: Optional[str],
        correlation_id: Optional[UUID],
    ) -> None:
        """Log a progress reset."""
        event = AuditEventBuilder.progress_reset(
            identity=identity,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_progress_loaded(
        self,
        identity: str,
        found: bool,
        current_scenario_id: Optional[int],
        correlation_id: Optional[UUID],
    ) -> None:
        """Log the outcome of loading saved progress."""
        event = AuditEventBuilder.progress_loaded(
            identity=identity,
            found=found,
            current_scenario_id=current_scenario_id,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_progress_saved(
        self,
        identity: str,
        version: int,
        correlation_id: Optional[UUID],
    ) -> None:
        """Log a stored progress snapshot."""
        event = AuditEventBuilder.progress_saved(
            identity=identity,
            version=version,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_stale_write_ignored(
        self,
        identity: str,
        version: int,
        correlation_id: Optional[UUID],
    ) -> None:
        """Log a snapshot the storage refused because it was out of date."""
        event = AuditEventBuilder.stale_write_ignored(
            identity=identity,
            version=version,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_attempt_recorded(
        self,
        identity: str,
        scenario_id: int,
        is_correct: bool,
        correlation_id: Optional[UUID],
    ) -> None:
        """Log an appended attempt."""
        event = AuditEventBuilder.attempt_recorded(
            identity=identity,
            scenario_id=scenario_id,
            is_correct=is_correct,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_persistence_failed(
        self,
        operation: str,
        identity: Optional[str],
        error_message: str,
        correlation_id: Optional[UUID],
    ) -> None:
        """Log a failed storage call."""
        event = AuditEventBuilder.persistence_failed(
            operation=operation,
            identity=identity,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use one per drill session and pass it to every log call.
    """
    return uuid4()
