from __future__ import annotations

import json
import shutil
from pathlib import Path

from typer.testing import CliRunner

from slotwise.cli.main import app, run_check_grids, run_conflicts, run_evaluate, run_validate_lesson
from slotwise.models import LessonRecord

REPO = Path(__file__).resolve().parents[1]

runner = CliRunner()


def make_project(tmp_path: Path) -> Path:
    shutil.copytree(REPO / "data", tmp_path / "data")
    shutil.copytree(REPO / "configs", tmp_path / "configs")
    return tmp_path


def test_run_conflicts_on_sample_data(tmp_path: Path) -> None:
    root = make_project(tmp_path)
    count, text = run_conflicts(root)
    # les_1 and les_2 share a teacher and overlap on Monday
    assert count == 1
    assert "teacher: 1" in text
    report = json.loads((root / "outputs" / "conflicts.json").read_text(encoding="utf-8"))
    assert report["pairs"][0]["first"] == "les_1"
    assert report["pairs"][0]["second"] == "les_2"


def test_invalid_lessons_are_rejected_before_detection(tmp_path: Path) -> None:
    root = make_project(tmp_path)
    lessons = json.loads((root / "data" / "lessons.json").read_text(encoding="utf-8"))
    lessons.append(
        {"id": "les_bad", "classSubjectId": "cs_7a_math", "dayOfWeek": 1, "startTime": "7am", "endTime": "08:00"}
    )
    (root / "data" / "lessons.json").write_text(json.dumps(lessons), encoding="utf-8")
    count, text = run_conflicts(root)
    assert count == 1
    assert "rejected_lessons: 1" in text


def test_evaluate_saved_grid(tmp_path: Path) -> None:
    root = make_project(tmp_path)
    store = root / "outputs" / "schedules"
    store.mkdir(parents=True)
    slots = [
        {"id": "slot_1_1", "classId": "class_7a", "dayOfWeek": 1, "slot": 1, "teacherId": "t_ani", "subjectId": "sub_math", "status": "EMPTY"},
        {"id": "slot_1_2", "classId": "class_7a", "dayOfWeek": 1, "slot": 2, "teacherId": "t_budi", "subjectId": "sub_bio", "status": "PREFERENCE", "locked": True},
    ]
    (store / "class_7a.json").write_text(json.dumps({"classId": "class_7a", "slots": slots}), encoding="utf-8")
    text = run_evaluate(root, "class_7a")
    assert "class_7a,Monday,07:00,07:45,Mathematics,Ani Rahma,PREFERENCE," in text
    # Budi is blocked on Mondays
    assert "class_7a,Monday,07:50,08:35,Biology,Budi Santoso,CONFLICT,yes" in text
    assert "Citra Lestari,0,0" in text
    assert 'Ani Rahma,Mathematics,MEDIUM,"Monday, Tuesday, Wednesday · Period 1, Period 2, Period 3, Period 4",1,1' in text
    assert (root / "outputs" / "class_7a_teachers.csv").exists()
    assert (root / "outputs" / "class_7a_grid.csv").exists()


def test_cli_validate_lesson(tmp_path: Path) -> None:
    root = make_project(tmp_path)
    clash = runner.invoke(app, ["validate-lesson", "cs_7a_eng", "1", "07:10", "07:40", "--room", "Room 101", "--root", str(root)])
    assert clash.exit_code == 1
    assert "conflict_count: 1" in clash.output
    ok = runner.invoke(app, ["validate-lesson", "cs_7a_eng", "3", "07:10", "07:40", "--root", str(root)])
    assert ok.exit_code == 0
    bad = runner.invoke(app, ["validate-lesson", "cs_7a_eng", "3", "07:40", "07:10", "--root", str(root)])
    assert bad.exit_code == 2


def test_validate_lesson_skips_malformed_existing_lessons(tmp_path: Path) -> None:
    root = make_project(tmp_path)
    lessons = json.loads((root / "data" / "lessons.json").read_text(encoding="utf-8"))
    # "7am" would parse as 00:00 and span the whole morning
    lessons.append(
        {"id": "bad", "classSubjectId": "cs_7b_eng", "dayOfWeek": 4, "startTime": "7am", "endTime": "10:00", "room": "Lab"}
    )
    (root / "data" / "lessons.json").write_text(json.dumps(lessons), encoding="utf-8")
    count, text = run_validate_lesson(root, LessonRecord("new", "cs_7a_eng", 4, "08:00", "08:45", "Lab"))
    assert count == 0
    assert "conflict_count: 0" in text
    result = runner.invoke(app, ["validate-lesson", "cs_7a_eng", "4", "08:00", "08:45", "--room", "Lab", "--root", str(root)])
    assert result.exit_code == 0


def test_cli_generate(tmp_path: Path) -> None:
    root = make_project(tmp_path)
    result = runner.invoke(app, ["generate", "class_7a", "--term-id", "term_2024_1", "--root", str(root)])
    assert result.exit_code == 0, result.output
    assert "confidence=" in result.output
    assert (root / "outputs" / "schedules" / "class_7a.json").exists()
    missing = runner.invoke(app, ["generate", "class_none", "--root", str(root)])
    assert missing.exit_code == 2


def test_check_grids_finds_teacher_in_two_classes(tmp_path: Path) -> None:
    root = make_project(tmp_path)
    store = root / "outputs" / "schedules"
    store.mkdir(parents=True)
    for class_id, period in (("class_7a", 2), ("class_7b", 2)):
        slot = {"id": f"slot_3_{period}", "classId": class_id, "dayOfWeek": 3, "slot": period,
                "teacherId": "t_ani", "subjectId": "sub_math", "status": "EMPTY"}
        (store / f"{class_id}.json").write_text(json.dumps({"classId": class_id, "slots": [slot]}), encoding="utf-8")
    count, text = run_check_grids(root)
    assert count == 1
    assert "Wednesday: class_7a:slot_3_2 (07:50-08:35) x class_7b:slot_3_2 (07:50-08:35) [teacher]" in text
    result = runner.invoke(app, ["check-grids", "--root", str(root)])
    assert result.exit_code == 1
