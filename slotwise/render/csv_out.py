from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Sequence

from ..models.grid import ScheduleGrid
from ..models.period import DAY_LABELS, Period
from ..models.summary import FairnessEntry, TeacherCard

GRID_HEADER = "Class,Day,PeriodStart,PeriodEnd,Subject,Teacher,Status,Locked"


def csv_grid(
    grid: ScheduleGrid,
    periods: Sequence[Period],
    teacher_names: Dict[str, str] | None = None,
    subject_names: Dict[str, str] | None = None,
) -> str:
    teacher_names = teacher_names or {}
    subject_names = subject_names or {}
    by_number = {p.number: p for p in periods}
    lines: List[str] = [GRID_HEADER]
    for d in grid.days:
        day = DAY_LABELS.get(d, str(d))
        for s in grid.day(d):
            p = by_number.get(s.period)
            start, end = (p.start, p.end) if p else ("", "")
            subject = subject_names.get(s.subject_id or "", s.subject_id or "")
            teacher = teacher_names.get(s.teacher_id or "", s.teacher_id or "")
            locked = "yes" if s.locked else ""
            lines.append(
                f"{grid.class_id},{day},{start},{end},{subject},{teacher},{s.status.value},{locked}"
            )
    return "\n".join(lines)


def csv_fairness(entries: Sequence[FairnessEntry]) -> str:
    lines = ["Teacher,Days,Sessions"]
    for e in entries:
        lines.append(f"{e.teacher_name or e.teacher_id},{e.days_count},{e.session_count}")
    return "\n".join(lines)


def csv_teacher_cards(cards: Sequence[TeacherCard]) -> str:
    lines = ["Teacher,Subjects,Availability,Preferred,Assigned,Sessions"]
    for c in cards:
        # Preferred text holds commas, so it is quoted
        lines.append(
            f"{c.name},{'; '.join(c.subject_names)},{c.availability_level},"
            f"\"{c.preferred_summary}\",{c.assigned_count},{c.total_sessions}"
        )
    return "\n".join(lines)


def write_csv(text: str, outputs_dir: Path, name: str) -> Path:
    outputs_dir.mkdir(parents=True, exist_ok=True)
    path = outputs_dir / name
    with path.open("w", encoding="utf-8") as f:
        f.write(text)
    return path
