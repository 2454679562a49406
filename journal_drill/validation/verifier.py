"""
Journal Entry Verification

DESIGN DECISION: Verification runs as an ordered list of checks and
reports the first one that fails:

1. FILLED LINES - only lines with an account AND an amount count
2. EMPTY ENTRY - nothing filled in at all
3. BALANCE - total debits must equal total credits
4. SOLUTION MATCH - same number of lines, each account in the
   canonical answer exactly once, each amount equal within tolerance

Matching is done by account name, not by row, so a correct entry may
be typed in any order. Account names are compared trimmed and
case-insensitively ("  cash " matches "Cash").

IMPORTANT: A wrong answer is a normal result, never an exception.
The only exception raised here is InvalidSolutionError, for content
that could never be answered correctly.
"""

from decimal import Decimal
from typing import Iterable, Optional, Union

from journal_drill.config import get_settings
from journal_drill.formatting import format_currency
from journal_drill.models.progress import VerificationReason, VerificationResult
from journal_drill.models.scenario import (
    ZERO,
    CandidateLine,
    Scenario,
    SolutionLine,
)


DEFAULT_SUCCESS_MESSAGE = "Correct! Review the calculations below."
EMPTY_ENTRY_MESSAGE = "Please enter at least one journal entry line."
INCORRECT_MESSAGE = "Your journal entry isn't quite right. Try again or check the solution."
DUPLICATE_ACCOUNT_HINT = "Each account should appear on only one line."


class InvalidSolutionError(ValueError):
    """The canonical solution itself does not balance."""
    pass


def normalize_account(name: str) -> str:
    """Key used to compare account names."""
    return name.strip().lower()


def filled_lines(
    lines: Iterable[Union[CandidateLine, dict]],
) -> list[CandidateLine]:
    """
    Lines with an account name and at least one amount, in input order.

    Raw dict rows are read leniently: a cell that is not a usable
    amount still fills the line, with amount 0.
    """
    parsed = [
        line if isinstance(line, CandidateLine) else CandidateLine.from_form(line)
        for line in lines
    ]
    return [line for line in parsed if line.is_filled]


class JournalEntryVerifier:
    """
    Checks a student's journal entry against a canonical solution.

    Stateless apart from the tolerance, so one instance can be shared
    by every session.
    """

    def __init__(self, tolerance: Optional[Decimal] = None):
        """
        Initialize verifier.

        Args:
            tolerance: Largest amount difference treated as equal.
                       Defaults to DRILL_AMOUNT_TOLERANCE (0.01).
        """
        if tolerance is None:
            tolerance = Decimal(str(get_settings().drill.amount_tolerance))
        self._tolerance = tolerance

    @property
    def tolerance(self) -> Decimal:
        return self._tolerance

    def _amounts_differ(self, left: Decimal, right: Decimal) -> bool:
        return abs(left - right) > self._tolerance

    def _match_solution(
        self,
        filled: list[CandidateLine],
        solution: list[SolutionLine],
    ) -> tuple[Optional[VerificationReason], Optional[str]]:
        """
        Compare filled lines with the solution by account name.

        Returns: (first failing reason or None, offending account or None)
        """
        if len(filled) != len(solution):
            return VerificationReason.LINE_COUNT_MISMATCH, None

        seen: set[str] = set()
        for line in filled:
            key = normalize_account(line.account)
            if key in seen:
                return VerificationReason.DUPLICATE_ACCOUNT, line.account
            seen.add(key)

        lookup = {normalize_account(line.account): line for line in solution}

        for line in filled:
            expected = lookup.get(normalize_account(line.account))
            if expected is None:
                return VerificationReason.UNKNOWN_ACCOUNT, line.account

            if (
                self._amounts_differ(line.debit_amount, expected.debit_amount)
                or self._amounts_differ(line.credit_amount, expected.credit_amount)
            ):
                return VerificationReason.AMOUNT_MISMATCH, line.account

        return None, None

    def verify(
        self,
        candidate_lines: Iterable[Union[CandidateLine, dict]],
        solution_lines: Iterable[Union[SolutionLine, dict]],
    ) -> VerificationResult:
        """
        Classify a candidate entry against a solution.

        Args:
            candidate_lines: Lines as entered (blank lines allowed)
            solution_lines: The canonical answer

        Returns:
            VerificationResult; `matches` is True only if every check passed

        Raises:
            InvalidSolutionError: If the solution's own debits and
                                  credits do not balance
        """
        solution = [
            line if isinstance(line, SolutionLine) else SolutionLine.model_validate(line)
            for line in solution_lines
        ]
        solution_debit = sum((line.debit_amount for line in solution), ZERO)
        solution_credit = sum((line.credit_amount for line in solution), ZERO)
        if self._amounts_differ(solution_debit, solution_credit):
            raise InvalidSolutionError(
                f"Solution does not balance: debits {solution_debit} != "
                f"credits {solution_credit}"
            )

        filled = filled_lines(candidate_lines)

        if not filled:
            return VerificationResult(
                balanced=False,
                matches=False,
                reason=VerificationReason.EMPTY_ENTRY,
            )

        total_debit = sum((line.debit_amount for line in filled), ZERO)
        total_credit = sum((line.credit_amount for line in filled), ZERO)
        balanced = not self._amounts_differ(total_debit, total_credit)

        if not balanced:
            return VerificationResult(
                balanced=False,
                matches=False,
                reason=VerificationReason.UNBALANCED,
                total_debit=total_debit,
                total_credit=total_credit,
                filled_line_count=len(filled),
            )

        reason, account = self._match_solution(filled, solution)

        return VerificationResult(
            balanced=True,
            matches=reason is None,
            reason=reason,
            total_debit=total_debit,
            total_credit=total_credit,
            filled_line_count=len(filled),
            account=account,
        )

    def verify_scenario(
        self,
        candidate_lines: Iterable[Union[CandidateLine, dict]],
        scenario: Scenario,
    ) -> VerificationResult:
        """Check a candidate entry against a scenario's solution."""
        return self.verify(candidate_lines, scenario.solution)

    def get_user_friendly_message(
        self,
        result: VerificationResult,
        scenario: Optional[Scenario] = None,
    ) -> str:
        """
        Guidance text shown under the journal entry form.
        """
        if result.matches:
            if scenario is not None and scenario.success_message:
                return scenario.success_message
            return DEFAULT_SUCCESS_MESSAGE

        if result.reason == VerificationReason.EMPTY_ENTRY:
            return EMPTY_ENTRY_MESSAGE

        if result.reason == VerificationReason.UNBALANCED:
            return (
                f"Debits ({format_currency(result.total_debit)}) don't equal "
                f"credits ({format_currency(result.total_credit)})"
            )

        if result.reason == VerificationReason.DUPLICATE_ACCOUNT:
            return f"{INCORRECT_MESSAGE} {DUPLICATE_ACCOUNT_HINT}"

        return INCORRECT_MESSAGE
