"""Scenario progression package."""

from journal_drill.progression.mastery import calculate_mastery_level, summarize_progress
from journal_drill.progression.tracker import ProgressTracker, next_version

__all__ = [
    "ProgressTracker",
    "calculate_mastery_level",
    "summarize_progress",
    "next_version",
]
