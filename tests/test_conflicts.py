from __future__ import annotations

import pytest

from slotwise.models import ClassSubjectMapping, LessonRecord, ScheduleGrid, ScheduleSlot
from slotwise.validate.conflicts import (
    LessonValidationError,
    check_new_lesson,
    detect_conflicts,
    find_conflicts,
    lessons_from_grid,
    validate_lesson,
)
from slotwise.validate.report import conflict_report, format_conflict_report

MAPPINGS = [
    ClassSubjectMapping("m1", "c1", "math", "t1"),
    ClassSubjectMapping("m2", "c2", "bio", "t2"),
    ClassSubjectMapping("m3", "c3", "eng", "t1"),
    ClassSubjectMapping("m4", "c1", "art", "t4"),
    ClassSubjectMapping("m5", "c5", "music", ""),
    ClassSubjectMapping("m6", "c6", "pe", ""),
]


def lesson(id: str, mapping: str, day: int, start: str, end: str, room: str = "") -> LessonRecord:
    return LessonRecord(id, mapping, day, start, end, room)


def test_back_to_back_same_room_is_clear() -> None:
    lessons = [
        lesson("a", "m1", 1, "08:00", "09:00", "R1"),
        lesson("b", "m2", 1, "09:00", "10:00", "R1"),
    ]
    assert detect_conflicts(lessons, MAPPINGS) == 0


def test_no_shared_resource_is_clear() -> None:
    lessons = [
        lesson("a", "m1", 1, "08:00", "09:00", "R1"),
        lesson("b", "m2", 1, "08:00", "09:00", "R2"),
    ]
    assert detect_conflicts(lessons, MAPPINGS) == 0


def test_different_days_never_conflict() -> None:
    lessons = [
        lesson("a", "m1", 1, "08:00", "09:00", "R1"),
        lesson("b", "m1", 2, "08:00", "09:00", "R1"),
    ]
    assert detect_conflicts(lessons, MAPPINGS) == 0


def test_each_shared_resource_triggers() -> None:
    # same teacher (t1), different class and room
    assert detect_conflicts(
        [lesson("a", "m1", 3, "08:00", "09:00", "R1"), lesson("b", "m3", 3, "08:30", "09:30", "R2")],
        MAPPINGS,
    ) == 1
    # same class (c1), different teacher
    assert detect_conflicts(
        [lesson("a", "m1", 3, "08:00", "09:00"), lesson("b", "m4", 3, "08:59", "09:30")],
        MAPPINGS,
    ) == 1
    # same room only
    assert detect_conflicts(
        [lesson("a", "m1", 3, "08:00", "09:00", "Lab"), lesson("b", "m2", 3, "07:00", "08:01", "Lab")],
        MAPPINGS,
    ) == 1


def test_empty_teacher_ids_do_not_match() -> None:
    lessons = [
        lesson("a", "m5", 1, "08:00", "09:00"),
        lesson("b", "m6", 1, "08:00", "09:00"),
    ]
    assert detect_conflicts(lessons, MAPPINGS) == 0


def test_unknown_mapping_only_matches_on_room() -> None:
    lessons = [
        lesson("a", "missing", 1, "08:00", "09:00", "R1"),
        lesson("b", "m1", 1, "08:00", "09:00", "R2"),
        lesson("c", "missing", 1, "08:30", "09:30", "R1"),
    ]
    found = find_conflicts(lessons, MAPPINGS)
    assert [(c.first.id, c.second.id) for c in found] == [("a", "c")]
    assert found[0].resources == ["room"]


def test_counts_every_pair() -> None:
    lessons = [
        lesson("a", "m1", 1, "08:00", "10:00"),
        lesson("b", "m1", 1, "08:30", "09:00"),
        lesson("c", "m1", 1, "09:30", "10:30"),
        lesson("d", "m2", 2, "08:00", "10:00"),
    ]
    # a-b, a-c overlap; b-c do not
    assert detect_conflicts(lessons, MAPPINGS) == 2
    assert len(find_conflicts(lessons, MAPPINGS)) == detect_conflicts(lessons, MAPPINGS)


def test_inverted_lesson_still_participates() -> None:
    # end before start: treated as given, never rejected by the detector
    lessons = [
        lesson("a", "m1", 1, "09:00", "08:00", "R1"),
        lesson("b", "m1", 1, "08:00", "10:00", "R2"),
    ]
    assert detect_conflicts(lessons, MAPPINGS) == 0
    assert detect_conflicts([], MAPPINGS) == 0
    # reversed bounds inside a real window still overlap it
    covering = [
        lesson("a", "m1", 1, "09:00", "08:00", "R1"),
        lesson("b", "m1", 1, "07:00", "10:00", "R2"),
    ]
    assert detect_conflicts(covering, MAPPINGS) == 1


def test_validate_lesson() -> None:
    validate_lesson(lesson("ok", "m1", 6, "07:00", "07:45"))
    with pytest.raises(LessonValidationError):
        validate_lesson(lesson("bad", "m1", 1, "7:00", "07:45"))
    with pytest.raises(LessonValidationError):
        validate_lesson(lesson("bad", "m1", 1, "08:00", "08:00"))
    with pytest.raises(LessonValidationError):
        validate_lesson(lesson("bad", "m1", 7, "08:00", "09:00"))


def test_check_new_lesson_ignores_itself() -> None:
    existing = [
        lesson("a", "m1", 1, "08:00", "09:00", "R1"),
        lesson("b", "m2", 1, "08:00", "09:00", "R9"),
    ]
    edited = lesson("a", "m1", 1, "08:15", "09:15", "R1")
    assert check_new_lesson(edited, existing, MAPPINGS) == []
    candidate = lesson("new", "m3", 1, "08:30", "09:30", "R3")
    found = check_new_lesson(candidate, existing, MAPPINGS)
    assert [c.second.id for c in found] == ["a"]
    assert found[0].same_teacher
    with pytest.raises(LessonValidationError):
        check_new_lesson(lesson("x", "m1", 1, "bad", "09:00"), existing, MAPPINGS)


def test_lessons_from_grid_detects_cross_class_double_booking() -> None:
    c1 = ScheduleGrid.from_slots(
        "c1", [ScheduleSlot("s", "c1", 2, 3, teacher_id="t1", subject_id="math")]
    )
    c3 = ScheduleGrid.from_slots(
        "c3", [ScheduleSlot("s", "c3", 2, 3, teacher_id="t1", subject_id="eng")]
    )
    lessons = lessons_from_grid(c1, MAPPINGS) + lessons_from_grid(c3, MAPPINGS)
    assert [(x.start_time, x.end_time) for x in lessons] == [("08:40", "09:25")] * 2
    assert [x.class_subject_mapping_id for x in lessons] == ["m1", "m3"]
    assert detect_conflicts(lessons, MAPPINGS) == 1


def test_lessons_from_grid_falls_back_to_teacher_mapping() -> None:
    # chem is not mapped for c1, t1 is still the teacher
    c1 = ScheduleGrid.from_slots(
        "c1", [ScheduleSlot("s", "c1", 2, 3, teacher_id="t1", subject_id="chem")]
    )
    c3 = ScheduleGrid.from_slots(
        "c3", [ScheduleSlot("s", "c3", 2, 3, teacher_id="t1", subject_id="eng")]
    )
    lessons = lessons_from_grid(c1, MAPPINGS) + lessons_from_grid(c3, MAPPINGS)
    assert [x.class_subject_mapping_id for x in lessons] == ["m1", "m3"]
    found = find_conflicts(lessons, MAPPINGS)
    assert len(found) == 1
    assert found[0].same_teacher

    stranger = ScheduleGrid.from_slots(
        "c1", [ScheduleSlot("s", "c1", 2, 3, teacher_id="t9", subject_id="chem")]
    )
    assert lessons_from_grid(stranger, MAPPINGS)[0].class_subject_mapping_id == ""


def test_report_formatting() -> None:
    lessons = [
        lesson("a", "m1", 1, "08:00", "09:00", "R1"),
        lesson("b", "m1", 1, "08:30", "09:30", "R1"),
    ]
    report = conflict_report(find_conflicts(lessons, MAPPINGS))
    assert report["conflict_count"] == 1
    assert report["by_resource"] == {"class": 1, "teacher": 1, "room": 1}
    text = format_conflict_report(report)
    assert "conflict_count: 1" in text
    assert "Monday: a (08:00-09:00) x b (08:30-09:30) [class, teacher, room]" in text
