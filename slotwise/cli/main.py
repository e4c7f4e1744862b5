from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer

from ..config import Settings, load_settings
from ..data.loader import ReferenceData, load_reference
from ..models.grid import ScheduleGrid
from ..models.lesson import LessonRecord
from ..render.csv_out import csv_fairness, csv_grid, csv_teacher_cards, write_csv
from ..scheduler.fairness import merge_roster
from ..scheduler.session import GridSession
from ..service.backend import JsonScheduleStore, LocalScheduleBackend, ScheduleServiceError
from ..validate.conflicts import (
    LessonValidationError,
    check_new_lesson,
    find_conflicts,
    lessons_from_grid,
    split_valid_lessons,
)
from ..validate.report import conflict_report, format_conflict_report, write_conflict_report

logger = logging.getLogger(__name__)


def _setup_logging(project_root: Path, level: str = "INFO") -> None:
    logs_dir = project_root / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(logs_dir / "engine.log", encoding="utf-8"),
            logging.StreamHandler(),
        ],
    )


def _context(project_root: Path) -> tuple[Settings, ReferenceData]:
    settings = load_settings(project_root)
    _setup_logging(project_root, settings.log_level)
    return settings, load_reference(project_root / settings.data_dir)


def _store(project_root: Path, settings: Settings) -> JsonScheduleStore:
    return JsonScheduleStore(project_root / settings.outputs_dir / "schedules")


def _valid_lessons(ref: ReferenceData) -> tuple[List[LessonRecord], List[str]]:
    # Malformed stored times would parse as 00:00 and fake overlaps
    valid, rejected = split_valid_lessons(ref.lessons)
    for msg in rejected:
        logger.warning(f"Skipping invalid lesson {msg}")
    return valid, rejected


def run_conflicts(project_root: Path) -> tuple[int, str]:
    settings, ref = _context(project_root)
    valid, rejected = _valid_lessons(ref)
    conflicts = find_conflicts(valid, ref.mappings)
    report = conflict_report(conflicts)
    report["rejected_lessons"] = rejected
    write_conflict_report(report, project_root / settings.outputs_dir)
    text = format_conflict_report(report)
    if rejected:
        text += f"\nrejected_lessons: {len(rejected)}"
    return len(conflicts), text


def _session(project_root: Path, settings: Settings, ref: ReferenceData, class_id: str) -> GridSession:
    session = GridSession(
        class_id,
        ref.preferences,
        ref.mappings,
        days=settings.days,
        periods=settings.period_numbers,
    )
    session.load(_store(project_root, settings).read(class_id))
    return session


def run_evaluate(project_root: Path, class_id: str) -> str:
    settings, ref = _context(project_root)
    session = _session(project_root, settings, ref, class_id)
    return _render(project_root, settings, ref, session)


def _render(project_root: Path, settings: Settings, ref: ReferenceData, session: GridSession) -> str:
    subject_names = {s.id: s.name for s in ref.subjects}
    grid_csv = csv_grid(
        session.grid,
        settings.periods,
        {t.id: t.full_name for t in ref.teachers},
        subject_names,
    )
    entries = session.fairness()
    if ref.teachers:
        entries = merge_roster(entries, ref.teachers, ref.preferences)
    fairness_csv = csv_fairness(entries)
    outputs = project_root / settings.outputs_dir
    write_csv(grid_csv, outputs, f"{session.class_id}_grid.csv")
    write_csv(fairness_csv, outputs, f"{session.class_id}_fairness.csv")
    cards_csv = csv_teacher_cards(session.teacher_cards(ref.teachers, subject_names))
    write_csv(cards_csv, outputs, f"{session.class_id}_teachers.csv")
    s = session.summary()
    summary = (
        f"preference={s.preference_matches} compromise={s.compromise} "
        f"conflict={s.conflicts} empty={s.empty} confidence={s.confidence:.1f}%"
    )
    return "\n\n".join([grid_csv, summary, fairness_csv, cards_csv])


def run_generate(project_root: Path, class_id: str, term_id: Optional[str] = None) -> str:
    settings, ref = _context(project_root)
    store = _store(project_root, settings)
    backend = LocalScheduleBackend(
        ref,
        store,
        days=settings.days,
        periods=settings.period_numbers,
        timeout_sec=settings.solver_timeout_sec,
        workers=settings.solver_workers,
    )
    session = _session(project_root, settings, ref, class_id)
    session.generate(backend, term_id)
    session.save(backend)
    return _render(project_root, settings, ref, session)


def run_check_grids(project_root: Path) -> tuple[int, str]:
    """Check every saved class grid together for teacher double-booking."""
    settings, ref = _context(project_root)
    store = _store(project_root, settings)
    lessons: List[LessonRecord] = []
    for class_id in store.class_ids():
        grid = ScheduleGrid.from_slots(
            class_id, store.read(class_id), settings.days, settings.period_numbers
        )
        lessons.extend(lessons_from_grid(grid, ref.mappings, settings.periods))
    conflicts = find_conflicts(lessons, ref.mappings)
    return len(conflicts), format_conflict_report(conflict_report(conflicts))


def run_validate_lesson(project_root: Path, candidate: LessonRecord) -> tuple[int, str]:
    _, ref = _context(project_root)
    existing, _ = _valid_lessons(ref)
    conflicts = check_new_lesson(candidate, existing, ref.mappings)
    return len(conflicts), format_conflict_report(conflict_report(conflicts))


app = typer.Typer(add_completion=False, help="Timetable slot evaluation and conflict checks")

ROOT_OPTION = typer.Option(Path("."), "--root", help="Project root holding configs/ and data/")


@app.command("conflicts")
def cli_conflicts(root: Path = ROOT_OPTION) -> None:
    count, text = run_conflicts(root.resolve())
    typer.echo(text)
    if count:
        raise typer.Exit(code=1)


@app.command("evaluate")
def cli_evaluate(
    class_id: str = typer.Argument(..., help="Class whose saved grid is evaluated"),
    root: Path = ROOT_OPTION,
) -> None:
    typer.echo(run_evaluate(root.resolve(), class_id))


@app.command("generate")
def cli_generate(
    class_id: str = typer.Argument(..., help="Class to generate"),
    term_id: Optional[str] = typer.Option(None, help="Restrict mappings to this term"),
    root: Path = ROOT_OPTION,
) -> None:
    try:
        typer.echo(run_generate(root.resolve(), class_id, term_id))
    except ScheduleServiceError as e:
        typer.echo(f"Generate failed: {e}", err=True)
        raise typer.Exit(code=2) from e


@app.command("check-grids")
def cli_check_grids(root: Path = ROOT_OPTION) -> None:
    count, text = run_check_grids(root.resolve())
    typer.echo(text)
    if count:
        raise typer.Exit(code=1)


@app.command("validate-lesson")
def cli_validate_lesson(
    mapping_id: str = typer.Argument(..., help="Class-subject mapping id"),
    day: int = typer.Argument(..., help="Day of week, 1=Monday .. 6=Saturday"),
    start: str = typer.Argument(..., help="Start time HH:MM"),
    end: str = typer.Argument(..., help="End time HH:MM"),
    room: str = typer.Option("", help="Room"),
    lesson_id: str = typer.Option("candidate", "--id", help="Id of the lesson being edited"),
    root: Path = ROOT_OPTION,
) -> None:
    candidate = LessonRecord(lesson_id, mapping_id, day, start, end, room)
    try:
        count, text = run_validate_lesson(root.resolve(), candidate)
    except LessonValidationError as e:
        typer.echo(f"Invalid lesson: {e}", err=True)
        raise typer.Exit(code=2) from e
    typer.echo(text)
    if count:
        raise typer.Exit(code=1)
