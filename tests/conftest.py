from __future__ import annotations

import pytest

from slotwise.models import ClassSubjectMapping, PreferenceBook, TeacherPreference


@pytest.fixture
def teacher_t() -> TeacherPreference:
    return TeacherPreference(
        teacher_id="T",
        preferred_days=[1, 2, 3],
        blocked_days=[6],
        preferred_periods=[1, 2],
        max_daily_sessions=2,
    )


@pytest.fixture
def book(teacher_t: TeacherPreference) -> PreferenceBook:
    return PreferenceBook.from_records([teacher_t])


@pytest.fixture
def mappings() -> list[ClassSubjectMapping]:
    return [
        ClassSubjectMapping("cs_math", "c1", "math", "T"),
        ClassSubjectMapping("cs_phys", "c1", "physics", "T"),
        ClassSubjectMapping("cs_bio", "c1", "bio", "U"),
        ClassSubjectMapping("cs_c2_math", "c2", "math", "T"),
    ]
