from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pandas as pd
import pytest

from college_match.io.catalog import (
    build_and_write_catalog_snapshot,
    build_catalog_delta,
    colleges_to_frame,
    get_latest_snapshot_path,
    load_colleges,
    load_records,
    prepare_snapshot_df,
)
from college_match.normalize.schema import College, Ownership


def _frame(*rows: dict[str, object]) -> pd.DataFrame:
    return prepare_snapshot_df(pd.DataFrame(list(rows)))


def test_build_catalog_delta_reports_added_removed_and_tracked_changes() -> None:
    prior_df = _frame(
        {"college_id": "100", "name": "Harbor State", "ownership": 1, "admission_rate": 0.5, "net_price_0_30k": 9000.0},
        {"college_id": "200", "name": "Old Campus", "ownership": 2, "admission_rate": 0.2},
    )
    current_df = _frame(
        {
            "college_id": "100",
            "name": "Harbor State University",
            "ownership": 1,
            "admission_rate": 0.45,
            "net_price_0_30k": 9500.0,
        },
        {"college_id": "300", "name": "New Campus", "ownership": 1, "admission_rate": 0.7},
    )

    delta = build_catalog_delta(current_df, prior_df)

    assert [entry["college_id"] for entry in delta["added"]] == ["300"]
    assert [entry["college_id"] for entry in delta["removed"]] == ["200"]
    assert len(delta["changed"]) == 1

    changed = delta["changed"][0]
    assert changed["college_id"] == "100"
    assert set(changed["fields_changed"]) == {"admission_rate", "net_price"}
    assert changed["fields_changed"]["admission_rate"] == {"old": 0.5, "new": 0.45}
    assert changed["fields_changed"]["net_price"]["old"]["net_price_0_30k"] == 9000.0
    assert changed["fields_changed"]["net_price"]["new"]["net_price_0_30k"] == 9500.0
    assert changed["fields_changed"]["net_price"]["new"]["net_price_48_75k"] is None


def test_first_snapshot_marks_everything_added(tmp_path: Path) -> None:
    colleges = [
        College(college_id="b", name="Bay College", admission_rate=0.8),
        College(college_id="a", name="Alder University", ownership=Ownership.PRIVATE_NONPROFIT),
    ]

    snapshot_path, changes_path, delta = build_and_write_catalog_snapshot(
        colleges_to_frame(colleges),
        processed_dir=tmp_path,
        run_date=date(2026, 10, 1),
    )

    assert snapshot_path.name == "colleges_snapshot_20261001.parquet"
    assert changes_path.name == "college_changes_20261001.json"
    assert [entry["college_id"] for entry in delta["added"]] == ["a", "b"]
    assert delta["removed"] == [] and delta["changed"] == []
    assert json.loads(changes_path.read_text(encoding="utf-8"))["added"][0]["ownership"] == 2
    assert list(pd.read_parquet(snapshot_path)["college_id"]) == ["a", "b"]


def test_second_snapshot_diffs_against_prior_file(tmp_path: Path) -> None:
    first = [College(college_id="a", name="Alder University", admission_rate=0.3)]
    second = [College(college_id="a", name="Alder University", admission_rate=0.3, completion_rate=0.7)]

    build_and_write_catalog_snapshot(colleges_to_frame(first), processed_dir=tmp_path, run_date="20261001")
    _, _, delta = build_and_write_catalog_snapshot(
        colleges_to_frame(second),
        processed_dir=tmp_path,
        run_date="20261008",
    )

    assert delta["added"] == [] and delta["removed"] == []
    assert delta["changed"] == [
        {"college_id": "a", "fields_changed": {"completion_rate": {"old": None, "new": 0.7}}}
    ]
    assert get_latest_snapshot_path(tmp_path).name == "colleges_snapshot_20261008.parquet"


def test_load_records_accepts_wrapped_json_and_rejects_other_types(tmp_path: Path) -> None:
    path = tmp_path / "colleges.json"
    path.write_text(
        json.dumps({"records": [{"college_id": 7, "name": "Seven Oaks", "ownership": 2, "admission_rate": None}]}),
        encoding="utf-8",
    )

    colleges = load_colleges(path)

    assert colleges == [College(college_id="7", name="Seven Oaks", ownership=Ownership.PRIVATE_NONPROFIT)]
    with pytest.raises(ValueError, match="Unsupported catalog file type"):
        load_records(tmp_path / "colleges.csv")
