"""Catalog loading, snapshots and change deltas."""

from college_match.io.catalog import get_latest_snapshot_path, load_colleges, load_records

__all__ = ["get_latest_snapshot_path", "load_colleges", "load_records"]
