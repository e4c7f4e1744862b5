from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import List, Protocol, Set, Tuple

from ..data.loader import ReferenceData
from ..models.grid import ScheduleGrid
from ..models.slot import ScheduleSlot
from ..models.summary import GenerateSummary
from ..scheduler.evaluate import evaluate_grid
from ..scheduler.fairness import summarize_grid

logger = logging.getLogger(__name__)


class ScheduleServiceError(RuntimeError):
    """Single failure signal for generate/save; the message is shown to the user."""


@dataclass(frozen=True)
class GenerateRequest:
    class_id: str
    term_id: str | None = None


@dataclass(frozen=True)
class GenerateResult:
    slots: List[ScheduleSlot]
    summary: GenerateSummary | None = None


@dataclass(frozen=True)
class SaveRequest:
    class_id: str
    slots: List[ScheduleSlot] = field(default_factory=list)


class ScheduleBackend(Protocol):
    def generate(self, request: GenerateRequest) -> GenerateResult: ...

    def save(self, request: SaveRequest) -> None: ...


class JsonScheduleStore:
    """One JSON file per class grid: <root>/<class_id>.json."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def path_for(self, class_id: str) -> Path:
        return self.root / f"{class_id}.json"

    def read(self, class_id: str) -> List[ScheduleSlot]:
        path = self.path_for(class_id)
        if not path.exists():
            return []
        with path.open("r", encoding="utf-8") as f:
            payload = json.load(f)
        return [ScheduleSlot.from_dict(s) for s in payload.get("slots", [])]

    def write(self, class_id: str, slots: List[ScheduleSlot]) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        path = self.path_for(class_id)
        ordered = sorted(slots, key=lambda s: (s.day_of_week, s.period))
        with path.open("w", encoding="utf-8") as f:
            json.dump({"classId": class_id, "slots": [s.to_dict() for s in ordered]}, f, indent=2)
        return path

    def class_ids(self) -> List[str]:
        if not self.root.exists():
            return []
        return sorted(p.stem for p in self.root.glob("*.json"))


class LocalScheduleBackend:
    """Reference backend: CP-SAT generation plus a JSON store."""

    def __init__(
        self,
        reference: ReferenceData,
        store: JsonScheduleStore,
        *,
        days: Tuple[int, ...],
        periods: Tuple[int, ...],
        timeout_sec: float = 10.0,
        workers: int = 4,
    ):
        self.reference = reference
        self.store = store
        self.days = days
        self.periods = periods
        self.timeout_sec = timeout_sec
        self.workers = workers

    def _busy_elsewhere(self, class_id: str) -> Set[Tuple[str, int, int]]:
        busy: Set[Tuple[str, int, int]] = set()
        for other in self.store.class_ids():
            if other == class_id:
                continue
            for s in self.store.read(other):
                if s.occupied:
                    busy.add((s.teacher_id, s.day_of_week, s.period))
        return busy

    def generate(self, request: GenerateRequest) -> GenerateResult:
        from ..solvers.cpsat import SolverConfig, solve_class_grid

        mappings = [
            m
            for m in self.reference.mappings
            if m.classroom_id == request.class_id
            and (request.term_id is None or m.term_id in (None, request.term_id))
        ]
        if not mappings:
            raise ScheduleServiceError(f"No subject mappings for class {request.class_id}")
        try:
            saved = self.store.read(request.class_id)
        except (OSError, ValueError, KeyError) as e:
            raise ScheduleServiceError(f"Could not read saved grid for {request.class_id}: {e}") from e
        # Locked empty cells are kept empty too
        locked = [s for s in saved if s.locked]
        cfg = SolverConfig(timeout_sec=self.timeout_sec, workers=self.workers)
        try:
            ok, slots, audit = solve_class_grid(
                class_id=request.class_id,
                days=self.days,
                periods=self.periods,
                mappings=mappings,
                preferences=self.reference.preferences,
                locked=locked,
                busy=self._busy_elsewhere(request.class_id),
                cfg=cfg,
            )
        except RuntimeError as e:
            raise ScheduleServiceError(f"Generator unavailable for {request.class_id}: {e}") from e
        for line in audit:
            logger.info(f"Generate {request.class_id}: {line}")
        if not ok:
            raise ScheduleServiceError(f"Generator found no schedule for {request.class_id}")
        grid = evaluate_grid(
            ScheduleGrid.from_slots(request.class_id, slots, self.days, self.periods),
            self.reference.preferences,
        )
        return GenerateResult(slots=list(grid.stored()), summary=summarize_grid(grid))

    def save(self, request: SaveRequest) -> None:
        slots = [replace(s, class_id=request.class_id) for s in request.slots]
        try:
            path = self.store.write(request.class_id, slots)
        except OSError as e:
            raise ScheduleServiceError(f"Could not save schedule for {request.class_id}: {e}") from e
        logger.info(f"Saved {len(slots)} slots for {request.class_id} -> {path}")
