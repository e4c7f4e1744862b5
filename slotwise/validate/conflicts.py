from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple

from ..models.grid import ScheduleGrid
from ..models.lesson import ClassSubjectMapping, LessonRecord
from ..models.period import DEFAULT_PERIODS, Period
from ..timeutil import intervals_overlap, is_valid_time, parse_time_to_minutes, period_bounds

MIN_DAY, MAX_DAY = 1, 6


class LessonValidationError(ValueError):
    pass


@dataclass(frozen=True)
class LessonConflict:
    first: LessonRecord
    second: LessonRecord
    same_class: bool
    same_teacher: bool
    same_room: bool

    @property
    def resources(self) -> List[str]:
        out = []
        if self.same_class:
            out.append("class")
        if self.same_teacher:
            out.append("teacher")
        if self.same_room:
            out.append("room")
        return out


def _shared(
    a: LessonRecord,
    b: LessonRecord,
    mappings: Dict[str, ClassSubjectMapping],
) -> Tuple[bool, bool, bool]:
    ma = mappings.get(a.class_subject_mapping_id)
    mb = mappings.get(b.class_subject_mapping_id)
    same_class = ma is not None and mb is not None and ma.classroom_id == mb.classroom_id
    same_teacher = (
        ma is not None and mb is not None and bool(ma.teacher_id) and ma.teacher_id == mb.teacher_id
    )
    same_room = bool(a.room) and bool(b.room) and a.room == b.room
    return same_class, same_teacher, same_room


def _pair_conflict(
    a: LessonRecord, b: LessonRecord, mappings: Dict[str, ClassSubjectMapping]
) -> LessonConflict | None:
    if a.day_of_week != b.day_of_week:
        return None
    same_class, same_teacher, same_room = _shared(a, b, mappings)
    if not (same_class or same_teacher or same_room):
        return None
    if not intervals_overlap(
        parse_time_to_minutes(a.start_time),
        parse_time_to_minutes(a.end_time),
        parse_time_to_minutes(b.start_time),
        parse_time_to_minutes(b.end_time),
    ):
        return None
    return LessonConflict(a, b, same_class, same_teacher, same_room)


def find_conflicts(
    lessons: Iterable[LessonRecord], mappings: Iterable[ClassSubjectMapping]
) -> List[LessonConflict]:
    mapping_by_id = {m.id: m for m in mappings}
    # Bucket by day; only same-day pairs can conflict
    by_day: Dict[int, List[LessonRecord]] = defaultdict(list)
    for lesson in lessons:
        by_day[lesson.day_of_week].append(lesson)
    found: List[LessonConflict] = []
    for day in sorted(by_day):
        bucket = by_day[day]
        for i in range(len(bucket)):
            for j in range(i + 1, len(bucket)):
                c = _pair_conflict(bucket[i], bucket[j], mapping_by_id)
                if c is not None:
                    found.append(c)
    return found


def detect_conflicts(
    lessons: Iterable[LessonRecord], mappings: Iterable[ClassSubjectMapping]
) -> int:
    return len(find_conflicts(lessons, mappings))


def validate_lesson(lesson: LessonRecord) -> None:
    for name in ("start_time", "end_time"):
        value = getattr(lesson, name)
        if not is_valid_time(value):
            raise LessonValidationError(f"{lesson.id}: {name} {value!r} is not HH:MM")
    if parse_time_to_minutes(lesson.end_time) <= parse_time_to_minutes(lesson.start_time):
        raise LessonValidationError(f"{lesson.id}: end time must be after start time")
    if not MIN_DAY <= lesson.day_of_week <= MAX_DAY:
        raise LessonValidationError(f"{lesson.id}: day {lesson.day_of_week} outside 1..6")


def split_valid_lessons(
    lessons: Iterable[LessonRecord],
) -> Tuple[List[LessonRecord], List[str]]:
    valid: List[LessonRecord] = []
    rejected: List[str] = []
    for lesson in lessons:
        try:
            validate_lesson(lesson)
        except LessonValidationError as e:
            rejected.append(str(e))
            continue
        valid.append(lesson)
    return valid, rejected


def check_new_lesson(
    candidate: LessonRecord,
    existing: Iterable[LessonRecord],
    mappings: Iterable[ClassSubjectMapping],
) -> List[LessonConflict]:
    validate_lesson(candidate)
    mapping_by_id = {m.id: m for m in mappings}
    found: List[LessonConflict] = []
    for other in existing:
        # Same id is the record being edited
        if other.id == candidate.id:
            continue
        c = _pair_conflict(candidate, other, mapping_by_id)
        if c is not None:
            found.append(c)
    return found


def lessons_from_grid(
    grid: ScheduleGrid,
    mappings: Iterable[ClassSubjectMapping],
    periods: Sequence[Period] = DEFAULT_PERIODS,
) -> List[LessonRecord]:
    table = {p.number: (p.start, p.end) for p in periods}
    mapping_ids: Dict[Tuple[str, str, str], str] = {}
    by_teacher: Dict[Tuple[str, str], str] = {}
    for m in mappings:
        mapping_ids.setdefault((m.classroom_id, m.teacher_id, m.subject_id), m.id)
        by_teacher.setdefault((m.classroom_id, m.teacher_id), m.id)
    out: List[LessonRecord] = []
    for s in grid.occupied():
        if s.period not in table:
            continue
        start, end = period_bounds(s.period, table)
        # Unmapped subject: keep the teacher identity via the first class mapping
        mapping_id = mapping_ids.get(
            (grid.class_id, s.teacher_id, s.subject_id),
            by_teacher.get((grid.class_id, s.teacher_id), ""),
        )
        out.append(
            LessonRecord(
                id=f"{grid.class_id}:{s.id}",
                class_subject_mapping_id=mapping_id,
                day_of_week=s.day_of_week,
                start_time=start,
                end_time=end,
            )
        )
    return out
