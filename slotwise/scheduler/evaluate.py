from __future__ import annotations

from collections import Counter
from dataclasses import replace
from typing import Dict

from ..models.grid import Key, ScheduleGrid
from ..models.preference import PreferenceBook, TeacherPreference
from ..models.slot import ScheduleSlot, SlotStatus


def daily_load(grid: ScheduleGrid) -> Counter:
    """Occupied-slot count per (teacher_id, day) across the whole grid."""
    load: Counter = Counter()
    for s in grid:
        if s.occupied:
            load[(s.teacher_id, s.day_of_week)] += 1
    return load


def classify_slot(
    slot: ScheduleSlot,
    preference: TeacherPreference | None,
    load: Counter,
) -> SlotStatus:
    if not slot.occupied:
        return SlotStatus.EMPTY
    if preference is None:
        # No constraints known: never a conflict, never a preference match
        return SlotStatus.COMPROMISE
    day, period = slot.day_of_week, slot.period
    # Blocked is checked before preferred, so a day listed in both is a conflict
    blocked = day in preference.blocked_days
    overload = load[(slot.teacher_id, day)] > preference.max_daily_sessions
    if blocked or overload:
        return SlotStatus.CONFLICT
    if not (day in preference.preferred_days and period in preference.preferred_periods):
        return SlotStatus.COMPROMISE
    return SlotStatus.PREFERENCE


def evaluate_grid(grid: ScheduleGrid, preferences: PreferenceBook) -> ScheduleGrid:
    load = daily_load(grid)
    evaluated: Dict[Key, ScheduleSlot] = {}
    for key, s in grid.cells.items():
        status = classify_slot(s, preferences.get(s.teacher_id), load)
        evaluated[key] = s if s.status == status else replace(s, status=status)
    return grid.with_cells(evaluated)


def status_counts(grid: ScheduleGrid) -> Dict[SlotStatus, int]:
    counts: Dict[SlotStatus, int] = {st: 0 for st in SlotStatus}
    for s in grid:
        counts[s.status] += 1
    return counts
