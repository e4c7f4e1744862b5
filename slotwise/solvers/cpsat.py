from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Set, Tuple

from ..models.lesson import ClassSubjectMapping
from ..models.preference import PreferenceBook
from ..models.slot import ScheduleSlot, slot_id_for


@dataclass
class SolverConfig:
    timeout_sec: float = 10.0
    workers: int = 4
    weight_filled: int = 10
    weight_preference: int = 5


def _preference_match(prefs: PreferenceBook, teacher_id: str, day: int, period: int) -> bool:
    pref = prefs.get(teacher_id)
    if pref is None:
        return False
    return day in pref.preferred_days and period in pref.preferred_periods


def solve_class_grid(
    *,
    class_id: str,
    days: Iterable[int],
    periods: Iterable[int],
    mappings: List[ClassSubjectMapping],
    preferences: PreferenceBook,
    locked: Iterable[ScheduleSlot] = (),
    busy: Set[Tuple[str, int, int]] | None = None,
    cfg: SolverConfig | None = None,
) -> Tuple[bool, List[ScheduleSlot], List[str]]:
    """Fill one class grid from its subject mappings.

    Hard: at most one mapping per cell, no blocked days, per-day cap from
    max_daily_sessions, no teacher already busy at that time in another class,
    locked cells untouched. Soft: fill cells, then favor preference matches.
    Mappings are spread evenly (each at most ceil(free_cells / mappings)).
    """
    try:
        from ortools.sat.python import cp_model
    except Exception as e:
        raise RuntimeError(
            "OR-Tools (ortools) is not installed. Please install it: python -m pip install ortools"
        ) from e

    cfg = cfg or SolverConfig()
    days = list(days)
    periods = list(periods)
    busy = busy or set()
    locked_cells: Dict[Tuple[int, int], ScheduleSlot] = {
        (s.day_of_week, s.period): s for s in locked
    }
    locked_load: Counter = Counter(
        (s.teacher_id, s.day_of_week) for s in locked_cells.values() if s.occupied
    )
    free_cells = [(d, p) for d in days for p in periods if (d, p) not in locked_cells]

    model = cp_model.CpModel()
    X: Dict[Tuple[int, int, int], cp_model.IntVar] = {}
    for mi, m in enumerate(mappings):
        pref = preferences.get(m.teacher_id)
        for d, p in free_cells:
            if pref is not None and d in pref.blocked_days:
                continue
            if (m.teacher_id, d, p) in busy:
                continue
            X[(mi, d, p)] = model.NewBoolVar(f"x[{m.id},{d},{p}]")

    # One mapping per cell
    for d, p in free_cells:
        terms = [X[(mi, d, p)] for mi in range(len(mappings)) if (mi, d, p) in X]
        if terms:
            model.Add(sum(terms) <= 1)

    # A teacher can only be in one cell at a time and within the daily cap
    teachers = sorted({m.teacher_id for m in mappings})
    for t in teachers:
        pref = preferences.get(t)
        for d in days:
            day_terms = [
                v for (mi, dd, _), v in X.items() if dd == d and mappings[mi].teacher_id == t
            ]
            if not day_terms:
                continue
            if pref is not None:
                cap = max(0, pref.max_daily_sessions - locked_load[(t, d)])
                model.Add(sum(day_terms) <= cap)
            for p in periods:
                cell_terms = [
                    X[(mi, d, p)]
                    for mi, m in enumerate(mappings)
                    if m.teacher_id == t and (mi, d, p) in X
                ]
                if len(cell_terms) > 1:
                    model.Add(sum(cell_terms) <= 1)

    # Even spread
    share = math.ceil(len(free_cells) / len(mappings)) if mappings else 0
    for mi in range(len(mappings)):
        terms = [v for (m_idx, _, _), v in X.items() if m_idx == mi]
        if terms:
            model.Add(sum(terms) <= share)

    objective = []
    for (mi, d, p), v in X.items():
        w = cfg.weight_filled
        if _preference_match(preferences, mappings[mi].teacher_id, d, p):
            w += cfg.weight_preference
        objective.append(w * v)
    if objective:
        model.Maximize(sum(objective))

    solver = cp_model.CpSolver()
    solver.parameters.max_time_in_seconds = float(cfg.timeout_sec)
    solver.parameters.num_search_workers = int(cfg.workers)
    status = solver.Solve(model)
    audit: List[str] = [
        f"workers={cfg.workers} timeout={cfg.timeout_sec}",
        f"mappings={len(mappings)} free_cells={len(free_cells)} locked={len(locked_cells)} vars={len(X)}",
        f"status={solver.StatusName(status)}",
    ]
    if status not in (cp_model.OPTIMAL, cp_model.FEASIBLE):
        return False, [], audit

    slots: List[ScheduleSlot] = []
    for d in days:
        for p in periods:
            kept = locked_cells.get((d, p))
            if kept is not None:
                slots.append(replace(kept, class_id=class_id, id=slot_id_for(d, p)))
                continue
            picked = None
            for mi, m in enumerate(mappings):
                v = X.get((mi, d, p))
                if v is not None and solver.Value(v) == 1:
                    picked = m
                    break
            slots.append(
                ScheduleSlot(
                    id=slot_id_for(d, p),
                    class_id=class_id,
                    day_of_week=d,
                    period=p,
                    teacher_id=picked.teacher_id if picked else None,
                    subject_id=picked.subject_id if picked else None,
                )
            )
    filled = sum(1 for s in slots if s.occupied)
    audit.append(f"filled={filled}/{len(slots)} objective={solver.ObjectiveValue()}")
    return True, slots, audit
