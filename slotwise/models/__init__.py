# Re-export common types
from .grid import ScheduleGrid, SlotOutOfRangeError
from .lesson import ClassSubjectMapping, LessonRecord
from .period import DAY_LABELS, DEFAULT_PERIODS, Period
from .preference import DuplicatePreferenceError, PreferenceBook, TeacherPreference
from .slot import ScheduleSlot, SlotStatus, slot_id_for
from .summary import DaySchedule, FairnessEntry, GenerateSummary, TeacherCard
from .teacher import Subject, Teacher

__all__ = [
    "ClassSubjectMapping",
    "DAY_LABELS",
    "DEFAULT_PERIODS",
    "DaySchedule",
    "DuplicatePreferenceError",
    "FairnessEntry",
    "GenerateSummary",
    "LessonRecord",
    "Period",
    "PreferenceBook",
    "ScheduleGrid",
    "ScheduleSlot",
    "SlotOutOfRangeError",
    "SlotStatus",
    "Subject",
    "Teacher",
    "TeacherCard",
    "TeacherPreference",
    "slot_id_for",
]
