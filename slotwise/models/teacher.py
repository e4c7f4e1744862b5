from dataclasses import dataclass


@dataclass(frozen=True)
class Teacher:
    id: str
    full_name: str


@dataclass(frozen=True)
class Subject:
    id: str
    name: str
