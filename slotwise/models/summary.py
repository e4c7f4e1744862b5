from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import List, Tuple

from .slot import ScheduleSlot


@dataclass(frozen=True)
class FairnessEntry:
    teacher_id: str
    days_count: int
    session_count: int
    teacher_name: str | None = None
    availability_level: str | None = None


@dataclass(frozen=True)
class GenerateSummary:
    preference_matches: int
    compromise: int
    conflicts: int
    empty: int
    confidence: float  # percent of occupied slots in PREFERENCE

    def to_dict(self) -> dict:
        data = asdict(self)
        return {
            "preferenceMatches": data["preference_matches"],
            "compromise": data["compromise"],
            "conflicts": data["conflicts"],
            "empty": data["empty"],
            "confidence": data["confidence"],
        }


@dataclass(frozen=True)
class TeacherCard:
    teacher_id: str
    name: str
    subject_names: Tuple[str, ...]
    availability_level: str
    preferred_summary: str
    assigned_count: int
    total_sessions: int  # class-subject mappings this teacher holds in the class


@dataclass(frozen=True)
class DaySchedule:
    day: int
    label: str
    slots: List[ScheduleSlot]
