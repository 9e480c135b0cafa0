from __future__ import annotations

import json
import re
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any, Callable, TypeVar
from uuid import uuid4

import pandas as pd

from college_match.normalize.records import (
    college_from_mapping,
    employer_from_mapping,
    scholarship_from_mapping,
    student_from_mapping,
)
from college_match.normalize.schema import College, Employer, Scholarship, StudentProfile

SNAPSHOT_PREFIX = "colleges_snapshot_"
CHANGES_PREFIX = "college_changes_"
SNAPSHOT_PATTERN = re.compile(r"^colleges_snapshot_(\d{8})\.parquet$")

COLLEGE_COLUMNS = [
    "college_id",
    "name",
    "ownership",
    "city",
    "state",
    "admission_rate",
    "net_price_0_30k",
    "net_price_30_48k",
    "net_price_48_75k",
    "net_price_75_110k",
    "net_price_110k_plus",
    "completion_rate",
    "median_earnings_10yr",
    "cost_of_attendance",
]

NET_PRICE_COLUMNS = (
    "net_price_0_30k",
    "net_price_30_48k",
    "net_price_48_75k",
    "net_price_75_110k",
    "net_price_110k_plus",
)
TRACKED_DIFF_FIELDS = ("admission_rate", "net_price", "completion_rate", "median_earnings_10yr", "ownership")

RecordT = TypeVar("RecordT")


def _coerce_output_date(run_date: date | str | None) -> date:
    if run_date is None:
        return datetime.now(tz=UTC).date()
    if isinstance(run_date, date):
        return run_date
    return datetime.strptime(run_date, "%Y%m%d").date()


def _snapshot_filename(run_date: date) -> str:
    return f"{SNAPSHOT_PREFIX}{run_date.strftime('%Y%m%d')}.parquet"


def _changes_filename(run_date: date) -> str:
    return f"{CHANGES_PREFIX}{run_date.strftime('%Y%m%d')}.json"


def _jsonable(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, list):
        return [_jsonable(item) for item in value]
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if pd.isna(value):
        return None
    if hasattr(value, "item"):
        return value.item()
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return value


def load_records(path: Path) -> list[dict[str, Any]]:
    """Read catalog rows from a JSON array (or `{"records": [...]}`) or a parquet file."""
    suffix = path.suffix.lower()
    if suffix == ".parquet":
        return pd.read_parquet(path).to_dict(orient="records")
    if suffix == ".json":
        payload = json.loads(path.read_text(encoding="utf-8"))
        if isinstance(payload, dict):
            payload = payload.get("records", [])
        if not isinstance(payload, list):
            raise ValueError(f"Catalog file '{path}' must contain a JSON array of records.")
        return [dict(item) for item in payload]
    raise ValueError(f"Unsupported catalog file type '{path.suffix}' for {path}.")


def _decode(path: Path, decoder: Callable[[dict[str, Any]], RecordT]) -> list[RecordT]:
    return [decoder(row) for row in load_records(path)]


def load_colleges(path: Path) -> list[College]:
    return _decode(path, college_from_mapping)


def load_scholarships(path: Path) -> list[Scholarship]:
    return _decode(path, scholarship_from_mapping)


def load_employers(path: Path) -> list[Employer]:
    return _decode(path, employer_from_mapping)


def load_students(path: Path) -> list[StudentProfile]:
    return _decode(path, student_from_mapping)


def colleges_to_frame(colleges: list[College]) -> pd.DataFrame:
    rows = [
        {column: getattr(college, column) for column in COLLEGE_COLUMNS}
        for college in colleges
    ]
    frame = pd.DataFrame(rows, columns=COLLEGE_COLUMNS)
    frame["ownership"] = frame["ownership"].map(lambda value: int(value) if value is not None else None)
    return frame


def list_snapshot_files(processed_dir: Path) -> list[Path]:
    snapshots: list[tuple[datetime, Path]] = []
    for candidate in processed_dir.glob(f"{SNAPSHOT_PREFIX}*.parquet"):
        match = SNAPSHOT_PATTERN.match(candidate.name)
        if not match:
            continue
        snapshots.append((datetime.strptime(match.group(1), "%Y%m%d"), candidate))

    snapshots.sort(key=lambda item: item[0])
    return [item[1] for item in snapshots]


def get_latest_snapshot_path(processed_dir: Path) -> Path | None:
    snapshots = list_snapshot_files(processed_dir)
    return snapshots[-1] if snapshots else None


def find_prior_snapshot(processed_dir: Path, target_date: date) -> Path | None:
    target_name = _snapshot_filename(target_date)
    candidates = [path for path in list_snapshot_files(processed_dir) if path.name != target_name]
    return candidates[-1] if candidates else None


def prepare_snapshot_df(records: pd.DataFrame) -> pd.DataFrame:
    snapshot_df = records.copy()
    for column in COLLEGE_COLUMNS:
        if column not in snapshot_df.columns:
            snapshot_df[column] = None

    ordered = snapshot_df[COLLEGE_COLUMNS].copy()
    ordered["college_id"] = ordered["college_id"].astype(str)
    return ordered.sort_values(by=["college_id"], kind="mergesort").reset_index(drop=True)


def write_parquet_atomic(df: pd.DataFrame, output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = output_path.parent / f"{output_path.name}.{uuid4().hex}.tmp"
    try:
        df.to_parquet(temp_path, index=False, engine="pyarrow")
        temp_path.replace(output_path)
    finally:
        if temp_path.exists():
            temp_path.unlink()


def write_json_atomic(payload: dict[str, Any], output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = output_path.parent / f"{output_path.name}.{uuid4().hex}.tmp"
    try:
        temp_path.write_text(json.dumps(payload, indent=2, sort_keys=True, default=str), encoding="utf-8")
        temp_path.replace(output_path)
    finally:
        if temp_path.exists():
            temp_path.unlink()


def _records_by_id(df: pd.DataFrame) -> dict[str, dict[str, Any]]:
    if df.empty:
        return {}
    keyed = df.set_index("college_id", drop=False).to_dict(orient="index")
    return {str(key): value for key, value in keyed.items()}


def _tracked_value(record: dict[str, Any], field: str) -> Any:
    if field == "net_price":
        return {column: _jsonable(record.get(column)) for column in NET_PRICE_COLUMNS}
    return _jsonable(record.get(field))


def build_catalog_delta(current_df: pd.DataFrame, prior_df: pd.DataFrame | None) -> dict[str, Any]:
    """Added, removed and changed colleges between two snapshots, keyed by `college_id`."""
    prior = prior_df if prior_df is not None else pd.DataFrame(columns=current_df.columns)
    current_records = _records_by_id(current_df)
    prior_records = _records_by_id(prior)

    current_ids = set(current_records)
    prior_ids = set(prior_records)

    added = [_jsonable(current_records[college_id]) for college_id in sorted(current_ids - prior_ids)]
    removed = [_jsonable(prior_records[college_id]) for college_id in sorted(prior_ids - current_ids)]

    changed: list[dict[str, Any]] = []
    for college_id in sorted(current_ids & prior_ids):
        old_record = prior_records[college_id]
        new_record = current_records[college_id]
        fields_changed: dict[str, Any] = {}
        for field in TRACKED_DIFF_FIELDS:
            old_value = _tracked_value(old_record, field)
            new_value = _tracked_value(new_record, field)
            if old_value != new_value:
                fields_changed[field] = {"old": old_value, "new": new_value}

        if fields_changed:
            changed.append({"college_id": college_id, "fields_changed": fields_changed})

    return {"added": added, "removed": removed, "changed": changed}


def build_and_write_catalog_snapshot(
    records: pd.DataFrame,
    *,
    processed_dir: Path,
    run_date: date | str | None = None,
) -> tuple[Path, Path, dict[str, Any]]:
    snapshot_date = _coerce_output_date(run_date)
    snapshot_df = prepare_snapshot_df(records)

    processed_dir.mkdir(parents=True, exist_ok=True)
    prior_snapshot_path = find_prior_snapshot(processed_dir, snapshot_date)
    prior_df = pd.read_parquet(prior_snapshot_path) if prior_snapshot_path else None

    snapshot_path = processed_dir / _snapshot_filename(snapshot_date)
    changes_path = processed_dir / _changes_filename(snapshot_date)

    delta = build_catalog_delta(snapshot_df, prior_df)
    write_parquet_atomic(snapshot_df, snapshot_path)
    write_json_atomic(delta, changes_path)
    return snapshot_path, changes_path, delta
