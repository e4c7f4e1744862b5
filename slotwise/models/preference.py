from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable

AVAILABILITY_LEVELS = ("HIGH", "MEDIUM", "LOW")


class DuplicatePreferenceError(ValueError):
    pass


@dataclass(frozen=True)
class TeacherPreference:
    teacher_id: str
    preferred_days: FrozenSet[int] = frozenset()
    blocked_days: FrozenSet[int] = frozenset()
    preferred_periods: FrozenSet[int] = frozenset()
    max_daily_sessions: int = 1
    availability_level: str = "HIGH"
    notes: str = ""

    def __post_init__(self) -> None:
        # Accept lists/tuples from JSON feeds
        object.__setattr__(self, "preferred_days", frozenset(self.preferred_days))
        object.__setattr__(self, "blocked_days", frozenset(self.blocked_days))
        object.__setattr__(self, "preferred_periods", frozenset(self.preferred_periods))
        if self.max_daily_sessions < 1:
            raise ValueError(f"max_daily_sessions must be positive for {self.teacher_id}")
        if self.availability_level not in AVAILABILITY_LEVELS:
            raise ValueError(f"Unknown availability level {self.availability_level!r}")


@dataclass
class PreferenceBook:
    """Lookup of preferences keyed by teacher id; one record per teacher."""

    by_teacher: Dict[str, TeacherPreference] = field(default_factory=dict)

    @classmethod
    def from_records(cls, records: Iterable[TeacherPreference]) -> "PreferenceBook":
        book = cls()
        for pref in records:
            book.add(pref)
        return book

    def add(self, pref: TeacherPreference) -> None:
        if pref.teacher_id in self.by_teacher:
            raise DuplicatePreferenceError(f"Duplicate preference for teacher {pref.teacher_id}")
        self.by_teacher[pref.teacher_id] = pref

    def get(self, teacher_id: str | None) -> TeacherPreference | None:
        if not teacher_id:
            return None
        return self.by_teacher.get(teacher_id)
