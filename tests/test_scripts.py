from __future__ import annotations

import json
from pathlib import Path

from scripts import build_snapshot, evaluate_golden_students, run_student_plan

STUDENTS = [
    {
        "student_id": "s1",
        "gpa": 3.6,
        "grade_level": 12,
        "state_of_residence": "FL",
        "income_bracket": "0_30k",
        "is_first_gen": True,
        "intended_major": "Computer Science",
    }
]
COLLEGES = [
    {"college_id": "reach", "name": "Ivy Point College", "ownership": 2, "state": "MA", "admission_rate": 0.2},
    {"college_id": "match", "name": "Gulf State University", "ownership": 1, "state": "FL", "admission_rate": 0.5, "net_price_0_30k": 9000},
    {"college_id": "likely", "name": "Palm Valley College", "ownership": 1, "state": "FL", "admission_rate": 0.9},
]
SCHOLARSHIPS = [
    {"scholarship_id": "open", "name": "Open Door Award", "amount": 1000},
    {"scholarship_id": "fl", "name": "Sunshine Award", "eligible_states": '["FL"]', "deadline_month": 3, "deadline_day": 1},
]


def _write(path: Path, payload: object) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_evaluate_golden_students_writes_report_and_artifact(tmp_path: Path) -> None:
    assert evaluate_golden_students.main(["--reports-dir", str(tmp_path)]) == 0

    (markdown_path,) = tmp_path.glob("golden_eval_*.md")
    (json_path,) = (tmp_path / "artifacts").glob("golden_eval_*.json")
    markdown = markdown_path.read_text(encoding="utf-8")
    payload = json.loads(json_path.read_text(encoding="utf-8"))

    assert "# Golden Student Offline Evaluation" in markdown
    assert "- Policy: baseline defaults" in markdown
    assert "### golden_fl_cs_low_income_first_gen" in markdown
    assert "Employer matches:" in markdown
    assert payload["golden_profiles_count"] == 4
    assert payload["metrics"]["ranking_stability"]["is_stable"] is True
    assert len(payload["profiles"]) == 4
    assert all("employers" in profile for profile in payload["profiles"])


def test_build_snapshot_main_writes_snapshot_and_changes(tmp_path: Path, capsys) -> None:
    input_path = _write(tmp_path / "colleges.json", COLLEGES)
    processed_dir = tmp_path / "processed"

    exit_code = build_snapshot.main(
        ["--input", str(input_path), "--processed-dir", str(processed_dir), "--date", "20261001"]
    )

    assert exit_code == 0
    assert (processed_dir / "colleges_snapshot_20261001.parquet").exists()
    changes = json.loads((processed_dir / "college_changes_20261001.json").read_text(encoding="utf-8"))
    assert sorted(entry["college_id"] for entry in changes["added"]) == ["likely", "match", "reach"]
    assert "Delta counts: added=3, removed=0, changed=0" in capsys.readouterr().out


def test_run_student_plan_runs_every_agent(tmp_path: Path) -> None:
    output_path = tmp_path / "plan.json"
    argv = [
        "--student-id",
        "s1",
        "--students",
        str(_write(tmp_path / "students.json", STUDENTS)),
        "--colleges",
        str(_write(tmp_path / "colleges.json", COLLEGES)),
        "--scholarships",
        str(_write(tmp_path / "scholarships.json", SCHOLARSHIPS)),
        "--today",
        "2026-09-15",
        "--output",
        str(output_path),
    ]

    assert run_student_plan.main(argv) == 0

    plan = json.loads(output_path.read_text(encoding="utf-8"))
    assert plan["outcomes"]["discovery"] == "Found 3 colleges: 1 reach, 1 match, 1 likely"
    assert plan["outcomes"]["career"].endswith("(4 career options, 3 wage datasets cached)")
    assert [entry["tier"] for entry in plan["college_list"]] == ["reach", "match", "likely"]
    assert len(plan["application_tasks"]) == 7
    assert {match["scholarship_id"] for match in plan["scholarships"]} == {"open", "fl"}
    assert plan["status"]["milestones"]["college_list"] == "complete"
    assert len(plan["runs"]) == 5


def test_run_student_plan_reports_failed_agents(tmp_path: Path) -> None:
    argv = [
        "--student-id",
        "s1",
        "--students",
        str(_write(tmp_path / "students.json", STUDENTS)),
        "--colleges",
        str(_write(tmp_path / "colleges.json", COLLEGES)),
        "--today",
        "2026-09-15",
    ]
    args = run_student_plan.parse_args(argv)
    context = run_student_plan.build_context(args)

    outcomes = run_student_plan.run_all_agents(context, "s1")

    assert outcomes["scholarships"] == "failed: No scholarships in database. Seed the scholarship database first."
    assert outcomes["financial_aid"].startswith("Computed financial summaries for 3 colleges")
    assert run_student_plan.main(argv) == 1
