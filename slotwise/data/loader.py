from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List

from ..models.lesson import ClassSubjectMapping, LessonRecord
from ..models.preference import PreferenceBook, TeacherPreference
from ..models.teacher import Subject, Teacher


@dataclass
class ReferenceData:
    teachers: List[Teacher] = field(default_factory=list)
    subjects: List[Subject] = field(default_factory=list)
    mappings: List[ClassSubjectMapping] = field(default_factory=list)
    preferences: PreferenceBook = field(default_factory=PreferenceBook)
    lessons: List[LessonRecord] = field(default_factory=list)


def load_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def _records(path: Path) -> List[dict]:
    # Feeds are either a bare list or {"data": [...]} pages
    if not path.exists():
        return []
    payload = load_json(path)
    if isinstance(payload, dict):
        return list(payload.get("data", []))
    return list(payload)


def parse_mapping(r: dict) -> ClassSubjectMapping:
    return ClassSubjectMapping(
        id=r["id"],
        classroom_id=r.get("classroomId", ""),
        subject_id=r.get("subjectId", ""),
        teacher_id=r.get("teacherId", ""),
        term_id=r.get("termId"),
    )


def parse_preference(r: dict) -> TeacherPreference:
    return TeacherPreference(
        teacher_id=r["teacherId"],
        preferred_days=r.get("preferredDays", []),
        blocked_days=r.get("blockedDays", []),
        preferred_periods=r.get("preferredSlots", r.get("preferredPeriods", [])),
        max_daily_sessions=int(r.get("maxDailySessions", 1)),
        availability_level=r.get("availabilityLevel", "HIGH"),
        notes=r.get("notes", ""),
    )


def parse_lesson(r: dict) -> LessonRecord:
    return LessonRecord(
        id=r["id"],
        class_subject_mapping_id=r.get("classSubjectId", r.get("classSubjectMappingId", "")),
        day_of_week=int(r.get("dayOfWeek", 0)),
        start_time=r.get("startTime", ""),
        end_time=r.get("endTime", ""),
        room=r.get("room") or "",
    )


def load_reference(data_dir: Path) -> ReferenceData:
    return ReferenceData(
        teachers=[
            Teacher(id=r["id"], full_name=r.get("fullName", r["id"]))
            for r in _records(data_dir / "teachers.json")
        ],
        subjects=[
            Subject(id=r["id"], name=r.get("name", r["id"]))
            for r in _records(data_dir / "subjects.json")
        ],
        mappings=[parse_mapping(r) for r in _records(data_dir / "mappings.json")],
        preferences=PreferenceBook.from_records(
            parse_preference(r) for r in _records(data_dir / "preferences.json")
        ),
        lessons=[parse_lesson(r) for r in _records(data_dir / "lessons.json")],
    )
