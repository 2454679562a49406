"""
Progress and Verification Models

ProgressState is the single value the tracker owns and the storage
layer persists. VerificationResult is what the verifier returns for
every submission - a failed check is a normal result, not an error.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class VerificationReason(str, Enum):
    """
    Why a submitted journal entry was not accepted.

    Checks run in this order; the first failing one is reported.
    """
    EMPTY_ENTRY = "empty_entry"                  # No filled lines at all
    UNBALANCED = "unbalanced"                    # Debits != credits
    LINE_COUNT_MISMATCH = "line_count_mismatch"  # Wrong number of lines
    DUPLICATE_ACCOUNT = "duplicate_account"      # Same account on two lines
    UNKNOWN_ACCOUNT = "unknown_account"          # Account not in the answer
    AMOUNT_MISMATCH = "amount_mismatch"          # Right account, wrong amount


class VerificationResult(BaseModel):
    """Outcome of checking one journal entry against a solution."""

    model_config = ConfigDict(frozen=True)

    balanced: bool = Field(
        ...,
        description="Did debits equal credits within tolerance?"
    )
    matches: bool = Field(
        ...,
        description="Does the entry match the canonical solution?"
    )
    reason: Optional[VerificationReason] = Field(
        default=None,
        description="First failed check, None when the entry matches"
    )
    total_debit: Decimal = Field(default=Decimal("0"))
    total_credit: Decimal = Field(default=Decimal("0"))
    filled_line_count: int = Field(default=0, ge=0)
    account: Optional[str] = Field(
        default=None,
        description="Account name that triggered the failure, if any"
    )

    @property
    def is_correct(self) -> bool:
        return self.matches


class ProgressState(BaseModel):
    """
    A student's position in the catalog and what they have solved.

    current_scenario_id is None once the student has advanced past the
    last scenario (the DONE state). Snapshots are immutable; the tracker
    replaces its state on every transition and bumps `version`.
    """

    model_config = ConfigDict(frozen=True)

    current_scenario_id: Optional[int] = Field(
        ...,
        description="Scenario on screen, None when all scenarios are done"
    )
    completed_scenarios: dict[int, bool] = Field(
        default_factory=dict,
        description="Scenario id -> solved correctly at least once"
    )
    version: int = Field(
        default=0,
        ge=0,
        description="Write sequence number, increases on every transition"
    )

    @property
    def is_done(self) -> bool:
        return self.current_scenario_id is None

    @classmethod
    def initial(cls, first_scenario_id: Optional[int]) -> "ProgressState":
        """Fresh state pointing at the first scenario."""
        return cls(current_scenario_id=first_scenario_id, completed_scenarios={})


class AttemptRecord(BaseModel):
    """One row of the append-only attempt log."""

    attempt_id: UUID = Field(default_factory=uuid4)
    identity: str = Field(..., min_length=1)
    scenario_id: int = Field(..., gt=0)
    is_correct: bool
    recorded_at: datetime = Field(default_factory=_utcnow)


class ProgressSummary(BaseModel):
    """Header figures: how far the student is and how much they have mastered."""

    solved_count: int = Field(..., ge=0)
    attempted_count: int = Field(..., ge=0)
    total_scenarios: int = Field(..., ge=0)
    mastery_level: float = Field(..., ge=0.0, le=1.0)
    progress_percentage: int = Field(..., ge=0, le=100)
