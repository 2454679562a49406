"""
Mastery Calculation

Mastery is the fraction of the catalog solved correctly at least once.
It is derived from the completion map on demand and never stored.
"""

from typing import Mapping

from journal_drill.models.progress import ProgressSummary


def calculate_mastery_level(
    completed_scenarios: Mapping[int, bool],
    catalog_size: int,
) -> float:
    """
    Fraction of scenarios solved correctly, in [0, 1].

    An empty catalog has a mastery of 0.
    """
    if catalog_size <= 0:
        return 0.0
    solved = sum(1 for is_correct in completed_scenarios.values() if is_correct)
    return min(solved / catalog_size, 1.0)


def summarize_progress(
    completed_scenarios: Mapping[int, bool],
    catalog_size: int,
) -> ProgressSummary:
    """
    Figures shown in the page header.

    Progress counts every attempted scenario, right or wrong; mastery
    counts only the solved ones.
    """
    solved = sum(1 for is_correct in completed_scenarios.values() if is_correct)
    attempted = len(completed_scenarios)
    mastery = calculate_mastery_level(completed_scenarios, catalog_size)
    progress = min(attempted / catalog_size, 1.0) if catalog_size > 0 else 0.0
    return ProgressSummary(
        solved_count=solved,
        attempted_count=attempted,
        total_scenarios=max(catalog_size, 0),
        mastery_level=mastery,
        progress_percentage=round(progress * 100),
    )
