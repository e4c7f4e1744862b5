from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Tuple

from .models.period import DEFAULT_PERIODS, Period
from .timeutil import is_valid_time

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    days: Tuple[int, ...] = (1, 2, 3, 4, 5, 6)
    periods: Tuple[Period, ...] = DEFAULT_PERIODS
    data_dir: str = "data"
    outputs_dir: str = "outputs"
    log_level: str = "INFO"
    solver_timeout_sec: float = 10.0
    solver_workers: int = 4

    @property
    def period_numbers(self) -> Tuple[int, ...]:
        return tuple(p.number for p in self.periods)


def _project_root() -> Path:
    # slotwise/config.py -> project root is parents[1]
    return Path(__file__).resolve().parents[1]


def _periods(raw: Any, default: Tuple[Period, ...]) -> Tuple[Period, ...]:
    if not isinstance(raw, list) or not raw:
        return default
    out = []
    for i, item in enumerate(raw, start=1):
        if not isinstance(item, dict):
            return default
        start, end = item.get("start"), item.get("end")
        if not (is_valid_time(start) and is_valid_time(end)):
            logger.warning(f"Ignoring period table: entry {i} has invalid times")
            return default
        out.append(Period(int(item.get("number", i)), start, end, item.get("label")))
    return tuple(out)


def load_settings(project_root: Path | str | None = None) -> Settings:
    """Load settings from configs/engine.toml if present, else defaults.

    Recognized tables: [grid] days and [[grid.periods]] {number, start, end},
    [paths] data_dir and outputs_dir, [logging] level, [solver] timeout_sec
    and workers.
    """
    base = Settings()
    root = _project_root() if project_root is None else Path(project_root)
    cfg = root / "configs" / "engine.toml"
    if not cfg.exists():
        return base
    try:
        data: Dict[str, Any] = tomllib.loads(cfg.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning(f"Falling back to default settings; could not read {cfg}: {e}")
        return base

    grid = data.get("grid", {}) if isinstance(data.get("grid"), dict) else {}
    paths = data.get("paths", {}) if isinstance(data.get("paths"), dict) else {}
    logging_cfg = data.get("logging", {}) if isinstance(data.get("logging"), dict) else {}
    solver = data.get("solver", {}) if isinstance(data.get("solver"), dict) else {}

    days = grid.get("days", base.days)
    return Settings(
        days=tuple(int(d) for d in days) if isinstance(days, list) else base.days,
        periods=_periods(grid.get("periods"), base.periods),
        data_dir=str(paths.get("data_dir", base.data_dir)),
        outputs_dir=str(paths.get("outputs_dir", base.outputs_dir)),
        log_level=str(logging_cfg.get("level", base.log_level)),
        solver_timeout_sec=float(solver.get("timeout_sec", base.solver_timeout_sec)),
        solver_workers=int(solver.get("workers", base.solver_workers)),
    )
