from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import pandas as pd

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from college_match.io.catalog import build_and_write_catalog_snapshot, colleges_to_frame, load_colleges

logger = logging.getLogger("build_snapshot")


def _load_records(input_path: Path) -> pd.DataFrame:
    if not input_path.exists():
        raise FileNotFoundError(f"Input file not found: {input_path}")
    return colleges_to_frame(load_colleges(input_path))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build college catalog snapshot and delta artifacts.")
    parser.add_argument(
        "--input",
        type=Path,
        default=Path("data/processed/colleges.json"),
        help="Input college catalog records (.parquet or .json).",
    )
    parser.add_argument(
        "--processed-dir",
        type=Path,
        default=Path("data/processed"),
        help="Directory for output artifacts.",
    )
    parser.add_argument(
        "--date",
        type=str,
        default=None,
        help="Run date in YYYYMMDD format. Defaults to current UTC date.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    records = _load_records(args.input)
    snapshot_path, changes_path, delta = build_and_write_catalog_snapshot(
        records,
        processed_dir=args.processed_dir,
        run_date=args.date,
    )

    logger.info("Wrote snapshot: %s", snapshot_path)
    logger.info("Wrote changes: %s", changes_path)
    print(
        "Delta counts: "
        f"added={len(delta['added'])}, "
        f"removed={len(delta['removed'])}, "
        f"changed={len(delta['changed'])}"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
