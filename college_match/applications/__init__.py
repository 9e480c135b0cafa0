"""Application checklist generation, deadline conflicts, and counselor urgency."""

from college_match.applications.task_builder import build_tasks_for_college_list, detect_conflicts
from college_match.applications.urgency import build_flagged_reason, compute_urgency_score

__all__ = [
    "build_flagged_reason",
    "build_tasks_for_college_list",
    "compute_urgency_score",
    "detect_conflicts",
]
