from dataclasses import dataclass


@dataclass(frozen=True)
class ClassSubjectMapping:
    id: str
    classroom_id: str
    subject_id: str
    teacher_id: str
    term_id: str | None = None


@dataclass(frozen=True)
class LessonRecord:
    id: str
    class_subject_mapping_id: str
    day_of_week: int
    start_time: str  # HH:MM
    end_time: str  # HH:MM
    room: str = ""
