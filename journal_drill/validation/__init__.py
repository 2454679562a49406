"""Journal entry verification package."""

from journal_drill.validation.verifier import (
    DEFAULT_SUCCESS_MESSAGE,
    InvalidSolutionError,
    JournalEntryVerifier,
    filled_lines,
    normalize_account,
)

__all__ = [
    "DEFAULT_SUCCESS_MESSAGE",
    "InvalidSolutionError",
    "JournalEntryVerifier",
    "filled_lines",
    "normalize_account",
]
