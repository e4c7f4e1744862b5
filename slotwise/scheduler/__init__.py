from .evaluate import classify_slot, daily_load, evaluate_grid, status_counts
from .fairness import (
    compute_fairness,
    day_schedules,
    merge_roster,
    preferred_summary,
    summarize_grid,
    teacher_cards,
)
from .session import GridSession

__all__ = [
    "GridSession",
    "classify_slot",
    "compute_fairness",
    "daily_load",
    "day_schedules",
    "evaluate_grid",
    "merge_roster",
    "preferred_summary",
    "status_counts",
    "summarize_grid",
    "teacher_cards",
]
