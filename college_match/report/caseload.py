from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Iterable, Literal

import numpy as np
import pandas as pd

from college_match.agents.store import DerivedStore
from college_match.applications.fafsa_steps import fafsa_status
from college_match.applications.urgency import build_flagged_reason, compute_urgency_score
from college_match.errors import StudentNotFoundError
from college_match.normalize.schema import UrgencyInput
from college_match.rank.policy import UrgencyPolicy

MilestoneState = Literal["not-started", "in-progress", "complete"]


@dataclass(frozen=True, slots=True)
class StudentSnapshot:
    """What a counselor's view needs to know about one student's progress."""

    student_id: str
    display_name: str = "Unknown"
    grade_level: int | None = None
    is_first_gen: bool = False
    onboarding_completed: bool = False
    college_list_count: int = 0
    scholarship_match_count: int = 0
    has_financial_aid_run: bool = False
    fafsa_current_step: int = 0
    pending_task_deadlines: tuple[date | datetime | None, ...] = field(default_factory=tuple)
    last_agent_run_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class StudentStatus:
    student_id: str
    display_name: str
    grade_level: int | None
    is_first_gen: bool
    urgency_score: int
    flagged_reason: str
    milestones: dict[str, MilestoneState]
    college_list_count: int
    scholarship_match_count: int
    has_application_tasks: bool
    last_agent_run_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "student_id": self.student_id,
            "display_name": self.display_name,
            "grade_level": self.grade_level,
            "is_first_gen": self.is_first_gen,
            "urgency_score": self.urgency_score,
            "flagged_reason": self.flagged_reason,
            "milestones": dict(self.milestones),
            "college_list_count": self.college_list_count,
            "scholarship_match_count": self.scholarship_match_count,
            "has_application_tasks": self.has_application_tasks,
            "last_agent_run_at": self.last_agent_run_at.isoformat() if self.last_agent_run_at else None,
        }


def snapshot_from_store(store: DerivedStore, student_id: str, *, display_name: str = "Unknown") -> StudentSnapshot:
    student = store.get_student(student_id)
    if student is None:
        raise StudentNotFoundError(student_id)

    pending = tuple(
        task.deadline_date for task in store.get_application_tasks(student_id) if task.status != "completed"
    )
    completed_runs = [run for run in store.list_runs(student_id) if run.completed_at is not None]
    return StudentSnapshot(
        student_id=student_id,
        display_name=display_name,
        grade_level=student.grade_level,
        is_first_gen=student.is_first_gen,
        onboarding_completed=student.income_bracket is not None,
        college_list_count=len(store.get_college_list(student_id)),
        scholarship_match_count=len(store.get_scholarship_matches(student_id)),
        has_financial_aid_run=bool(store.get_financial_summaries(student_id)),
        fafsa_current_step=store.get_fafsa_progress(student_id).current_step,
        pending_task_deadlines=pending,
        last_agent_run_at=completed_runs[-1].completed_at if completed_runs else None,
    )


def _complete_if(flag: bool) -> MilestoneState:
    return "complete" if flag else "not-started"


def build_student_status(
    snapshot: StudentSnapshot,
    *,
    now: date | datetime | None = None,
    policy: UrgencyPolicy | None = None,
) -> StudentStatus:
    active = policy or UrgencyPolicy.baseline()
    urgency_input = UrgencyInput(
        has_college_list=snapshot.college_list_count > 0,
        has_financial_aid_run=snapshot.has_financial_aid_run,
        has_scholarship_matches=snapshot.scholarship_match_count > 0,
        fafsa_current_step=snapshot.fafsa_current_step,
        pending_tasks=snapshot.pending_task_deadlines,
        grade_level=snapshot.grade_level,
    )
    has_tasks = bool(snapshot.pending_task_deadlines)
    return StudentStatus(
        student_id=snapshot.student_id,
        display_name=snapshot.display_name,
        grade_level=snapshot.grade_level,
        is_first_gen=snapshot.is_first_gen,
        urgency_score=compute_urgency_score(urgency_input, now=now, policy=active),
        flagged_reason=build_flagged_reason(urgency_input, now=now, policy=active),
        milestones={
            "onboarding": _complete_if(snapshot.onboarding_completed),
            "college_list": _complete_if(snapshot.college_list_count > 0),
            "financial_aid": _complete_if(snapshot.has_financial_aid_run),
            "scholarships": _complete_if(snapshot.scholarship_match_count > 0),
            "fafsa": fafsa_status(snapshot.fafsa_current_step, total_steps=active.total_fafsa_steps),
            "applications": "in-progress" if has_tasks else "not-started",
        },
        college_list_count=snapshot.college_list_count,
        scholarship_match_count=snapshot.scholarship_match_count,
        has_application_tasks=has_tasks,
        last_agent_run_at=snapshot.last_agent_run_at,
    )


def caseload_frame(statuses: Iterable[StudentStatus]) -> pd.DataFrame:
    """One row per student, most urgent first; ties keep their input order."""
    rows = []
    for status in statuses:
        row = status.to_dict()
        milestones = row.pop("milestones")
        row.update({f"milestone_{name}": state for name, state in milestones.items()})
        rows.append(row)
    if not rows:
        return pd.DataFrame(columns=["student_id", "display_name", "urgency_score", "flagged_reason"])
    frame = pd.DataFrame(rows)
    return frame.sort_values("urgency_score", ascending=False, kind="mergesort").reset_index(drop=True)


def compute_cohort_stats(
    statuses: Iterable[StudentStatus],
    *,
    policy: UrgencyPolicy | None = None,
) -> dict[str, float | int]:
    active = policy or UrgencyPolicy.baseline()
    frame = pd.DataFrame(
        [
            {
                "fafsa_complete": status.milestones.get("fafsa") == "complete",
                "scholarship_match_count": status.scholarship_match_count,
                "college_list_count": status.college_list_count,
                "has_application_tasks": status.has_application_tasks,
                "urgency_score": status.urgency_score,
            }
            for status in statuses
        ],
        columns=[
            "fafsa_complete",
            "scholarship_match_count",
            "college_list_count",
            "has_application_tasks",
            "urgency_score",
        ],
    )
    total = int(len(frame))
    if total == 0:
        return {
            "total_students": 0,
            "fafsa_completion_rate": 0.0,
            "avg_scholarships_matched": 0.0,
            "avg_colleges_on_list": 0.0,
            "students_with_application_tasks": 0,
            "high_urgency_count": 0,
        }

    return {
        "total_students": total,
        "fafsa_completion_rate": float(frame["fafsa_complete"].astype(bool).mean()),
        "avg_scholarships_matched": float(np.round(frame["scholarship_match_count"].mean(), 1)),
        "avg_colleges_on_list": float(np.round(frame["college_list_count"].mean(), 1)),
        "students_with_application_tasks": int(frame["has_application_tasks"].astype(bool).sum()),
        "high_urgency_count": int((frame["urgency_score"] >= active.high_urgency_threshold).sum()),
    }
