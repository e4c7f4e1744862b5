from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SlotStatus(str, Enum):
    EMPTY = "EMPTY"
    PREFERENCE = "PREFERENCE"
    COMPROMISE = "COMPROMISE"
    CONFLICT = "CONFLICT"


def slot_id_for(day: int, period: int) -> str:
    return f"slot_{day}_{period}"


@dataclass(frozen=True)
class ScheduleSlot:
    id: str
    class_id: str
    day_of_week: int
    period: int
    teacher_id: str | None = None
    subject_id: str | None = None
    status: SlotStatus = SlotStatus.EMPTY
    locked: bool = False

    @classmethod
    def empty(cls, class_id: str, day: int, period: int) -> "ScheduleSlot":
        return cls(id=slot_id_for(day, period), class_id=class_id, day_of_week=day, period=period)

    @property
    def occupied(self) -> bool:
        return bool(self.teacher_id) and bool(self.subject_id)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "classId": self.class_id,
            "dayOfWeek": self.day_of_week,
            "slot": self.period,
            "teacherId": self.teacher_id,
            "subjectId": self.subject_id,
            "status": self.status.value,
            "locked": self.locked,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ScheduleSlot":
        day = int(data["dayOfWeek"])
        period = int(data.get("slot", data.get("period")))
        return cls(
            id=data.get("id") or slot_id_for(day, period),
            class_id=data.get("classId", ""),
            day_of_week=day,
            period=period,
            teacher_id=data.get("teacherId") or None,
            subject_id=data.get("subjectId") or None,
            status=SlotStatus(data.get("status") or SlotStatus.EMPTY.value),
            locked=bool(data.get("locked", False)),
        )
