from __future__ import annotations

from typing import Dict, Iterable, List, Sequence, Set

from ..models.grid import ScheduleGrid
from ..models.period import DAY_LABELS
from ..models.preference import PreferenceBook, TeacherPreference
from ..models.slot import SlotStatus
from ..models.summary import DaySchedule, FairnessEntry, GenerateSummary, TeacherCard
from ..models.teacher import Teacher
from .evaluate import status_counts


def compute_fairness(grid: ScheduleGrid) -> List[FairnessEntry]:
    # Insertion order follows the day-major grid walk
    days_by_teacher: Dict[str, Set[int]] = {}
    sessions: Dict[str, int] = {}
    for s in grid:
        if not s.occupied or s.status == SlotStatus.EMPTY:
            continue
        days_by_teacher.setdefault(s.teacher_id, set()).add(s.day_of_week)
        sessions[s.teacher_id] = sessions.get(s.teacher_id, 0) + 1
    return [
        FairnessEntry(teacher_id=t, days_count=len(days), session_count=sessions[t])
        for t, days in days_by_teacher.items()
    ]


def merge_roster(
    entries: Iterable[FairnessEntry],
    teachers: Iterable[Teacher],
    preferences: PreferenceBook | None = None,
) -> List[FairnessEntry]:
    """Zero-filled roster view: one entry per teacher, in roster order."""
    by_id = {e.teacher_id: e for e in entries}
    out: List[FairnessEntry] = []
    for t in teachers:
        e = by_id.get(t.id)
        pref = preferences.get(t.id) if preferences is not None else None
        out.append(
            FairnessEntry(
                teacher_id=t.id,
                days_count=e.days_count if e else 0,
                session_count=e.session_count if e else 0,
                teacher_name=t.full_name,
                availability_level=pref.availability_level if pref else "HIGH",
            )
        )
    return out


def summarize_grid(grid: ScheduleGrid) -> GenerateSummary:
    counts = status_counts(grid)
    occupied = (
        counts[SlotStatus.PREFERENCE] + counts[SlotStatus.COMPROMISE] + counts[SlotStatus.CONFLICT]
    )
    confidence = 100.0 * counts[SlotStatus.PREFERENCE] / occupied if occupied else 0.0
    return GenerateSummary(
        preference_matches=counts[SlotStatus.PREFERENCE],
        compromise=counts[SlotStatus.COMPROMISE],
        conflicts=counts[SlotStatus.CONFLICT],
        empty=counts[SlotStatus.EMPTY],
        confidence=round(confidence, 1),
    )


def day_schedules(grid: ScheduleGrid) -> List[DaySchedule]:
    """Per-day view of every cell; cells never written come back as EMPTY."""
    return [DaySchedule(d, DAY_LABELS.get(d, f"Day {d}"), grid.day(d)) for d in grid.days]


def preferred_summary(pref: TeacherPreference | None) -> str:
    if pref is None:
        return "No specific preference"
    days = ", ".join(DAY_LABELS.get(d, f"Day {d}") for d in sorted(pref.preferred_days))
    periods = ", ".join(f"Period {p}" for p in sorted(pref.preferred_periods))
    return f"{days or 'All days'} · {periods or 'All periods'}"


def teacher_cards(
    grid: ScheduleGrid,
    teachers: Iterable[Teacher],
    subjects_by_teacher: Dict[str, Sequence[str]],
    subject_names: Dict[str, str] | None = None,
    preferences: PreferenceBook | None = None,
) -> List[TeacherCard]:
    subject_names = subject_names or {}
    assigned: Dict[str, int] = {}
    for s in grid:
        if s.teacher_id:
            assigned[s.teacher_id] = assigned.get(s.teacher_id, 0) + 1
    cards: List[TeacherCard] = []
    for t in teachers:
        pref = preferences.get(t.id) if preferences is not None else None
        subjects = subjects_by_teacher.get(t.id, ())
        # dict.fromkeys drops repeated names but keeps mapping order
        names = tuple(dict.fromkeys(subject_names.get(sid, sid) for sid in subjects))
        cards.append(
            TeacherCard(
                teacher_id=t.id,
                name=t.full_name,
                subject_names=names,
                availability_level=pref.availability_level if pref else "HIGH",
                preferred_summary=preferred_summary(pref),
                assigned_count=assigned.get(t.id, 0),
                total_sessions=len(subjects),
            )
        )
    return cards
