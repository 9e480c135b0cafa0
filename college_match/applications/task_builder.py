from __future__ import annotations

from dataclasses import replace
from datetime import date, timedelta
from typing import Iterable

from college_match.normalize.schema import (
    ApplicationTask,
    CollegeListEntry,
    CollegeTier,
    Ownership,
    TaskType,
)

FAFSA_OPEN_MONTH = 10
CSS_PROFILE_LEAD_DAYS = 14
CSS_PROFILE_NOTE = "CSS Profile deadline is 2 weeks before admission deadline — complete this first"
REGULAR_DECISION_LABEL = "Regular Decision"

# (month, day) of the following calendar year.
TIER_DEADLINES: dict[CollegeTier, tuple[int, int]] = {
    CollegeTier.REACH: (1, 1),
    CollegeTier.MATCH: (1, 15),
    CollegeTier.LIKELY: (2, 1),
}


def get_deadline_for_tier(tier: CollegeTier | str, *, today: date | None = None) -> date:
    effective_today = today or date.today()
    month, day = TIER_DEADLINES[CollegeTier(tier)]
    return date(effective_today.year + 1, month, day)


def get_fafsa_priority_deadline(*, today: date | None = None) -> date:
    """December 1 of the most recently opened FAFSA cycle."""
    effective_today = today or date.today()
    year = effective_today.year if effective_today.month >= FAFSA_OPEN_MONTH else effective_today.year - 1
    return date(year, 12, 1)


def format_task_date(value: date) -> str:
    return f"{value.month}/{value.day}/{value.year}"


def _fafsa_task(student_id: str, today: date) -> ApplicationTask:
    return ApplicationTask(
        student_id=student_id,
        college_id=None,
        college_name="",
        task_type=TaskType.FAFSA,
        title="Complete FAFSA",
        description=(
            "The Free Application for Federal Student Aid unlocks Pell Grants, subsidized loans, "
            "and most institutional aid. Priority deadlines are typically December 1."
        ),
        deadline_date=get_fafsa_priority_deadline(today=today),
        deadline_label="Priority Deadline",
    )


def _tasks_for_entry(entry: CollegeListEntry, student_id: str, today: date) -> list[ApplicationTask]:
    college = entry.college
    tier = CollegeTier(entry.tier)
    admission_deadline = get_deadline_for_tier(tier, today=today)

    tasks = [
        ApplicationTask(
            student_id=student_id,
            college_id=college.college_id,
            college_name=college.name,
            task_type=TaskType.COMMON_APP,
            title=f"Common App — {college.name}",
            description=f"Submit your Common Application for {college.name}.",
            deadline_date=admission_deadline,
            deadline_label=REGULAR_DECISION_LABEL,
        )
    ]

    if tier in (CollegeTier.REACH, CollegeTier.MATCH):
        tasks.append(
            ApplicationTask(
                student_id=student_id,
                college_id=college.college_id,
                college_name=college.name,
                task_type=TaskType.SUPPLEMENT,
                title=f"Essays/Supplement — {college.name}",
                description=(
                    f"Complete supplemental essays and school-specific questions for {college.name}."
                ),
                deadline_date=admission_deadline,
                deadline_label=REGULAR_DECISION_LABEL,
            )
        )

    if college.ownership == Ownership.PRIVATE_NONPROFIT:
        # Flagged at creation: the CSS Profile always has to land before the deadline it gates.
        tasks.append(
            ApplicationTask(
                student_id=student_id,
                college_id=college.college_id,
                college_name=college.name,
                task_type=TaskType.CSS_PROFILE,
                title=f"CSS Profile — {college.name}",
                description=(
                    f"{college.name} requires the CSS Profile for institutional aid. "
                    "Complete it before the admission deadline."
                ),
                deadline_date=admission_deadline - timedelta(days=CSS_PROFILE_LEAD_DAYS),
                deadline_label="CSS Profile Deadline",
                is_conflict=True,
                conflict_note=CSS_PROFILE_NOTE,
            )
        )

    return tasks


def build_tasks_for_college_list(
    entries: Iterable[CollegeListEntry],
    student_id: str,
    *,
    today: date | None = None,
) -> list[ApplicationTask]:
    """Derive the full application checklist for a tiered college list.

    One FAFSA task per student, then per college: a Common App task, a
    supplement for reach and match tiers, and a CSS Profile task for
    private nonprofit colleges. An empty list still yields the FAFSA
    task; refusing to run without a college list is the caller's rule.
    """
    effective_today = today or date.today()
    tasks = [_fafsa_task(student_id, effective_today)]
    for entry in entries:
        tasks.extend(_tasks_for_entry(entry, student_id, effective_today))
    return tasks


def detect_conflicts(tasks: list[ApplicationTask]) -> list[ApplicationTask]:
    css_deadlines: dict[str, date | None] = {}
    for task in tasks:
        if task.task_type == TaskType.CSS_PROFILE and task.college_id not in css_deadlines:
            css_deadlines[task.college_id] = task.deadline_date

    checked: list[ApplicationTask] = []
    for task in tasks:
        if task.task_type in (TaskType.COMMON_APP, TaskType.SUPPLEMENT):
            css_deadline = css_deadlines.get(task.college_id)
            if css_deadline and task.deadline_date and css_deadline < task.deadline_date:
                task = replace(
                    task,
                    is_conflict=True,
                    conflict_note=(
                        f"Complete CSS Profile (due {format_task_date(css_deadline)}) before this deadline"
                    ),
                )
        checked.append(task)
    return checked


def summarize_checklist(tasks: Iterable[ApplicationTask], *, today: date | None = None) -> dict[str, object]:
    effective_today = today or date.today()
    task_list = list(tasks)
    upcoming = sorted(
        task.deadline_date
        for task in task_list
        if task.status != "completed" and task.deadline_date is not None and task.deadline_date >= effective_today
    )
    return {
        "total_tasks": len(task_list),
        "completed_tasks": sum(1 for task in task_list if task.status == "completed"),
        "conflicts": [task for task in task_list if task.is_conflict],
        "next_deadline": upcoming[0] if upcoming else None,
    }
