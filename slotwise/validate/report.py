from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List

from ..models.period import DAY_LABELS
from .conflicts import LessonConflict


def conflict_report(conflicts: List[LessonConflict]) -> Dict[str, object]:
    by_resource: Dict[str, int] = {"class": 0, "teacher": 0, "room": 0}
    pairs: List[Dict[str, object]] = []
    for c in conflicts:
        for r in c.resources:
            by_resource[r] += 1
        pairs.append(
            {
                "day": c.first.day_of_week,
                "first": c.first.id,
                "second": c.second.id,
                "first_time": f"{c.first.start_time}-{c.first.end_time}",
                "second_time": f"{c.second.start_time}-{c.second.end_time}",
                "shared": c.resources,
            }
        )
    return {"conflict_count": len(conflicts), "by_resource": by_resource, "pairs": pairs}


def write_conflict_report(report: Dict[str, object], outputs_dir: Path) -> Path:
    outputs_dir.mkdir(parents=True, exist_ok=True)
    path = outputs_dir / "conflicts.json"
    with path.open("w", encoding="utf-8") as f:
        json.dump(report, f, indent=2)
    return path


def format_conflict_report(report: Dict[str, object]) -> str:
    lines: list[str] = []
    lines.append(f"conflict_count: {report.get('conflict_count')}")
    by_resource = report.get("by_resource", {})
    if isinstance(by_resource, dict):
        lines.append("by_resource:")
        for k, v in by_resource.items():
            lines.append(f"  - {k}: {v}")
    pairs = report.get("pairs", [])
    if isinstance(pairs, list) and pairs:
        lines.append("pairs:")
        for p in pairs:
            day = DAY_LABELS.get(p["day"], f"Day {p['day']}")
            lines.append(
                f"  - {day}: {p['first']} ({p['first_time']}) x {p['second']} ({p['second_time']})"
                f" [{', '.join(p['shared'])}]"
            )
    return "\n".join(lines)
