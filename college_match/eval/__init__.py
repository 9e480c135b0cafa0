"""Offline evaluation helpers."""

from college_match.eval.golden_students import GoldenStudent, get_golden_students

__all__ = ["GoldenStudent", "get_golden_students"]
