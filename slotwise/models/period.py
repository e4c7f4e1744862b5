from dataclasses import dataclass

DAY_LABELS = {
    1: "Monday",
    2: "Tuesday",
    3: "Wednesday",
    4: "Thursday",
    5: "Friday",
    6: "Saturday",
}


@dataclass(frozen=True)
class Period:
    number: int
    start: str
    end: str
    label: str | None = None


DEFAULT_PERIODS = (
    Period(1, "07:00", "07:45"),
    Period(2, "07:50", "08:35"),
    Period(3, "08:40", "09:25"),
    Period(4, "09:40", "10:25"),
    Period(5, "10:30", "11:15"),
    Period(6, "11:20", "12:05"),
    Period(7, "12:45", "13:30"),
    Period(8, "13:35", "14:20"),
)
