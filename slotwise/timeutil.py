from __future__ import annotations

import re
from typing import Dict, Tuple

TIME_PATTERN = re.compile(r"^\d{2}:\d{2}$")


def parse_time_to_minutes(time: str) -> int:
    # Permissive: malformed input maps to 0, callers validate with is_valid_time first
    parts = (time or "").split(":")
    try:
        hours = int(parts[0])
        minutes = int(parts[1])
    except (IndexError, ValueError):
        return 0
    return hours * 60 + minutes


def intervals_overlap(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    # Half-open: 08:00-09:00 and 09:00-10:00 do not overlap
    return start_a < end_b and start_b < end_a


def is_valid_time(time: object) -> bool:
    return isinstance(time, str) and TIME_PATTERN.match(time) is not None


def period_bounds(period: int, table: Dict[int, Tuple[str, str]]) -> Tuple[str, str]:
    try:
        return table[period]
    except KeyError:
        raise KeyError(f"Unknown period {period}") from None
