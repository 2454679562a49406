"""
Audit Models for Bond Journal Drill

Every student action and every persistence outcome is logged for audit
purposes. This provides:
1. Traceability of how a student moved through the catalog
2. Debugging information when a save is lost
3. Raw material for difficulty analysis per scenario

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.
    """
    # Student actions
    ANSWER_CHECKED = "answer_checked"
    SCENARIO_ADVANCED = "scenario_advanced"
    SESSION_COMPLETED = "session_completed"
    PROGRESS_RESET = "progress_reset"

    # Persistence
    PROGRESS_LOADED = "progress_loaded"
    PROGRESS_SAVED = "progress_saved"
    STALE_WRITE_IGNORED = "stale_write_ignored"
    ATTEMPT_RECORDED = "attempt_recorded"
    PERSISTENCE_FAILED = "persistence_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - who and which scenario
    identity: Optional[str] = Field(
        default=None,
        description="Student identity (email) the event belongs to"
    )
    scenario_id: Optional[int] = Field(
        default=None,
        description="Scenario the event relates to"
    )

    # Correlation - all events of one drill session
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID shared by every event of one session"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a student action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "identity": self.identity,
            "scenario_id": self.scenario_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.answer_checked(identity, 3, True, "amount_mismatch", cid)
        event = AuditEventBuilder.progress_reset(identity, cid)
    """

    @staticmethod
    def answer_checked(
        identity: Optional[str],
        scenario_id: int,
        is_correct: bool,
        reason: Optional[str],
        correlation_id: Optional[UUID],
    ) -> AuditEvent:
        outcome = "correct" if is_correct else f"incorrect ({reason})"
        return AuditEvent(
            event_type=AuditEventType.ANSWER_CHECKED,
            identity=identity,
            scenario_id=scenario_id,
            correlation_id=correlation_id,
            description=f"Scenario {scenario_id} answer checked: {outcome}",
            details={
                "is_correct": is_correct,
                "reason": reason,
            },
            is_user_action=True,
        )

    @staticmethod
    def scenario_advanced(
        identity: Optional[str],
        from_scenario_id: int,
        to_scenario_id: Optional[int],
        was_solved: bool,
        correlation_id: Optional[UUID],
    ) -> AuditEvent:
        target = "end of catalog" if to_scenario_id is None else f"scenario {to_scenario_id}"
        verb = "Advanced" if was_solved else "Skipped"
        return AuditEvent(
            event_type=AuditEventType.SCENARIO_ADVANCED,
            identity=identity,
            scenario_id=from_scenario_id,
            correlation_id=correlation_id,
            description=f"{verb} from scenario {from_scenario_id} to {target}",
            details={
                "to_scenario_id": to_scenario_id,
                "was_solved": was_solved,
            },
            is_user_action=True,
        )

    @staticmethod
    def session_completed(
        identity: Optional[str],
        mastery_level: float,
        correlation_id: Optional[UUID],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SESSION_COMPLETED,
            identity=identity,
            correlation_id=correlation_id,
            description=f"All scenarios passed with {mastery_level:.0%} mastery",
            details={
                "mastery_level": mastery_level,
            },
        )

    @staticmethod
    def progress_reset(
        identity: Optional[str],
        correlation_id: Optional[UUID],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROGRESS_RESET,
            identity=identity,
            correlation_id=correlation_id,
            description="Student reset their progress",
            is_user_action=True,
        )

    @staticmethod
    def progress_loaded(
        identity: str,
        found: bool,
        current_scenario_id: Optional[int],
        correlation_id: Optional[UUID],
    ) -> AuditEvent:
        description = (
            "Saved progress loaded" if found else "No saved progress, starting fresh"
        )
        return AuditEvent(
            event_type=AuditEventType.PROGRESS_LOADED,
            identity=identity,
            scenario_id=current_scenario_id,
            correlation_id=correlation_id,
            description=description,
            details={
                "found": found,
            },
        )

    @staticmethod
    def progress_saved(
        identity: str,
        version: int,
        correlation_id: Optional[UUID],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROGRESS_SAVED,
            severity=AuditSeverity.DEBUG,
            identity=identity,
            correlation_id=correlation_id,
            description=f"Progress version {version} saved",
            details={
                "version": version,
            },
        )

    @staticmethod
    def stale_write_ignored(
        identity: str,
        version: int,
        correlation_id: Optional[UUID],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STALE_WRITE_IGNORED,
            identity=identity,
            correlation_id=correlation_id,
            description=f"Progress version {version} ignored, a newer version is stored",
            details={
                "version": version,
            },
        )

    @staticmethod
    def attempt_recorded(
        identity: str,
        scenario_id: int,
        is_correct: bool,
        correlation_id: Optional[UUID],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ATTEMPT_RECORDED,
            severity=AuditSeverity.DEBUG,
            identity=identity,
            scenario_id=scenario_id,
            correlation_id=correlation_id,
            description=f"Attempt on scenario {scenario_id} appended to log",
            details={
                "is_correct": is_correct,
            },
        )

    @staticmethod
    def persistence_failed(
        operation: str,
        identity: Optional[str],
        error_message: str,
        correlation_id: Optional[UUID],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERSISTENCE_FAILED,
            severity=AuditSeverity.ERROR,
            identity=identity,
            correlation_id=correlation_id,
            description=f"Persistence failed: {operation}",
            error_message=error_message,
            details={
                "operation": operation,
            },
        )
