from .scheduler import GridSession, compute_fairness, evaluate_grid
from .timeutil import intervals_overlap, parse_time_to_minutes
from .validate.conflicts import detect_conflicts, find_conflicts

__all__ = [
    "GridSession",
    "compute_fairness",
    "detect_conflicts",
    "evaluate_grid",
    "find_conflicts",
    "intervals_overlap",
    "parse_time_to_minutes",
]
