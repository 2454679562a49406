"""
Data Models Package

This package contains all Pydantic models used in the Bond Journal Drill.
All data flowing through the system must conform to these schemas.
"""

from journal_drill.models.scenario import (
    BALANCE_TOLERANCE,
    BondType,
    CandidateLine,
    Scenario,
    SolutionLine,
)
from journal_drill.models.progress import (
    AttemptRecord,
    ProgressState,
    ProgressSummary,
    VerificationReason,
    VerificationResult,
)
from journal_drill.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Scenario models
    "BALANCE_TOLERANCE",
    "BondType",
    "CandidateLine",
    "Scenario",
    "SolutionLine",
    # Progress models
    "AttemptRecord",
    "ProgressState",
    "ProgressSummary",
    "VerificationReason",
    "VerificationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
