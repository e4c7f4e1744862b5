from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Tuple

from ..models.grid import DEFAULT_DAYS, DEFAULT_PERIOD_NUMBERS, ScheduleGrid, SlotOutOfRangeError
from ..models.lesson import ClassSubjectMapping
from ..models.preference import PreferenceBook
from ..models.slot import ScheduleSlot, SlotStatus
from ..models.summary import DaySchedule, FairnessEntry, GenerateSummary, TeacherCard
from ..models.teacher import Teacher
from .evaluate import evaluate_grid
from .fairness import compute_fairness, day_schedules, summarize_grid, teacher_cards

logger = logging.getLogger(__name__)


class GridSession:
    """Interactive editing state for one class grid.

    Every assign/clear/load re-evaluates the whole grid; toggle_lock does not,
    since the lock flag never affects classification. Locks are advisory:
    assign writes to locked slots too.
    """

    def __init__(
        self,
        class_id: str,
        preferences: PreferenceBook,
        mappings: Iterable[ClassSubjectMapping] = (),
        grid: ScheduleGrid | None = None,
        *,
        days: Tuple[int, ...] = DEFAULT_DAYS,
        periods: Tuple[int, ...] = DEFAULT_PERIOD_NUMBERS,
    ):
        self.class_id = class_id
        self.preferences = preferences
        # teacher -> subjects taught to this class, in feed order
        self.subjects_by_teacher: Dict[str, List[str]] = {}
        for m in mappings:
            if m.classroom_id == class_id:
                self.subjects_by_teacher.setdefault(m.teacher_id, []).append(m.subject_id)
        base = grid if grid is not None else ScheduleGrid(class_id=class_id, days=days, periods=periods)
        self.grid = evaluate_grid(base, preferences)
        self.generate_summary: GenerateSummary | None = None

    def _check(self, day: int, period: int) -> None:
        if not self.grid.contains(day, period):
            raise SlotOutOfRangeError(f"({day}, {period}) is outside the grid for {self.class_id}")

    def _commit(self, slot: ScheduleSlot) -> ScheduleSlot:
        self.grid = evaluate_grid(self.grid.with_slot(slot), self.preferences)
        return self.grid.get(slot.day_of_week, slot.period)

    def slot(self, day: int, period: int) -> ScheduleSlot:
        return self.grid.get(day, period)

    def subject_for(self, teacher_id: str) -> str | None:
        # First mapping wins when a teacher has several subjects in this class
        subjects = self.subjects_by_teacher.get(teacher_id) or []
        return subjects[0] if subjects else None

    def assign(
        self, teacher_id: str, day: int, period: int, *, subject_id: str | None = None
    ) -> ScheduleSlot:
        self._check(day, period)
        existing = self.grid.get(day, period)
        subject = subject_id if subject_id is not None else self.subject_for(teacher_id)
        updated = self._commit(replace(existing, teacher_id=teacher_id, subject_id=subject))
        logger.info(
            f"Assign {self.class_id} day={day} period={period} -> {teacher_id}/{subject} [{updated.status.value}]"
        )
        return updated

    def clear(self, day: int, period: int) -> ScheduleSlot:
        self._check(day, period)
        existing = self.grid.get(day, period)
        cleared = replace(
            existing, teacher_id=None, subject_id=None, status=SlotStatus.EMPTY, locked=False
        )
        logger.info(f"Clear {self.class_id} day={day} period={period}")
        return self._commit(cleared)

    def toggle_lock(self, day: int, period: int) -> ScheduleSlot:
        self._check(day, period)
        existing = self.grid.get(day, period)
        toggled = replace(existing, locked=not existing.locked)
        self.grid = self.grid.with_slot(toggled)
        return toggled

    def load(self, slots: Iterable[ScheduleSlot]) -> None:
        self.grid = evaluate_grid(
            ScheduleGrid.from_slots(self.class_id, slots, self.grid.days, self.grid.periods),
            self.preferences,
        )

    def generate(self, backend, term_id: str | None = None) -> GenerateSummary | None:
        from ..service.backend import GenerateRequest

        # Backend errors propagate before any local state changes
        result = backend.generate(GenerateRequest(class_id=self.class_id, term_id=term_id))
        if result.slots:
            self.load(result.slots)
        self.generate_summary = result.summary
        if result.summary is not None:
            logger.info(f"Generated {self.class_id}: confidence {result.summary.confidence:.1f}%")
        return result.summary

    def save(self, backend) -> None:
        from ..service.backend import SaveRequest

        backend.save(SaveRequest(class_id=self.class_id, slots=list(self.grid.stored())))

    def fairness(self) -> List[FairnessEntry]:
        return compute_fairness(self.grid)

    def summary(self) -> GenerateSummary:
        return summarize_grid(self.grid)

    def day_schedules(self) -> List[DaySchedule]:
        return day_schedules(self.grid)

    def teacher_cards(
        self, teachers: Iterable[Teacher], subject_names: Dict[str, str] | None = None
    ) -> List[TeacherCard]:
        return teacher_cards(
            self.grid, teachers, self.subjects_by_teacher, subject_names, self.preferences
        )
