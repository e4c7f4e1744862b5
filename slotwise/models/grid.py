from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, Iterator, List, Tuple

from .slot import ScheduleSlot

Key = Tuple[int, int]  # (day_of_week, period)

DEFAULT_DAYS: Tuple[int, ...] = (1, 2, 3, 4, 5, 6)
DEFAULT_PERIOD_NUMBERS: Tuple[int, ...] = (1, 2, 3, 4, 5, 6, 7, 8)


class SlotOutOfRangeError(KeyError):
    pass


@dataclass(frozen=True)
class ScheduleGrid:
    """Immutable weekly grid for one class; every update returns a new grid."""

    class_id: str
    days: Tuple[int, ...] = DEFAULT_DAYS
    periods: Tuple[int, ...] = DEFAULT_PERIOD_NUMBERS
    cells: Dict[Key, ScheduleSlot] = field(default_factory=dict)

    @classmethod
    def from_slots(
        cls,
        class_id: str,
        slots: Iterable[ScheduleSlot],
        days: Iterable[int] = DEFAULT_DAYS,
        periods: Iterable[int] = DEFAULT_PERIOD_NUMBERS,
    ) -> "ScheduleGrid":
        days, periods = tuple(days), tuple(periods)
        cells: Dict[Key, ScheduleSlot] = {}
        for s in slots:
            # Cells outside the configured week are dropped
            if s.day_of_week not in days or s.period not in periods:
                continue
            # Last write wins when a feed repeats a cell
            cells[(s.day_of_week, s.period)] = s
        return cls(class_id=class_id, days=days, periods=periods, cells=cells)

    def contains(self, day: int, period: int) -> bool:
        return day in self.days and period in self.periods

    def get(self, day: int, period: int) -> ScheduleSlot:
        existing = self.cells.get((day, period))
        if existing is not None:
            return existing
        return ScheduleSlot.empty(self.class_id, day, period)

    def with_slot(self, slot: ScheduleSlot) -> "ScheduleGrid":
        if not self.contains(slot.day_of_week, slot.period):
            raise SlotOutOfRangeError(f"({slot.day_of_week}, {slot.period}) is outside the grid")
        cells = dict(self.cells)
        cells[(slot.day_of_week, slot.period)] = slot
        return replace(self, cells=cells)

    def with_cells(self, cells: Dict[Key, ScheduleSlot]) -> "ScheduleGrid":
        return replace(self, cells=dict(cells))

    def stored(self) -> Iterable[ScheduleSlot]:
        return self.cells.values()

    def __iter__(self) -> Iterator[ScheduleSlot]:
        # Full day-major walk, synthesizing missing cells
        for d in self.days:
            for p in self.periods:
                yield self.get(d, p)

    def day(self, day: int) -> List[ScheduleSlot]:
        return [self.get(day, p) for p in self.periods]

    def occupied(self) -> List[ScheduleSlot]:
        return [s for s in self if s.occupied]
