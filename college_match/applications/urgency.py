from __future__ import annotations

import math
from datetime import date, datetime

from college_match.normalize.schema import UrgencyInput
from college_match.rank.policy import UrgencyPolicy

SECONDS_PER_DAY = 86_400


def _as_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    return datetime(value.year, value.month, value.day)


def _resolve_now(now: date | datetime | None) -> datetime:
    return _as_datetime(now) if now is not None else datetime.now()


def days_until(target: date | datetime, *, now: date | datetime | None = None) -> int:
    """Whole days until `target`, floored; negative once it has passed."""
    delta = _as_datetime(target) - _resolve_now(now)
    return math.floor(delta.total_seconds() / SECONDS_PER_DAY)


def is_fafsa_open(*, now: date | datetime | None = None, policy: UrgencyPolicy | None = None) -> bool:
    active = policy or UrgencyPolicy.baseline()
    return _resolve_now(now).month >= active.fafsa_open_month


def _pending_days(urgency_input: UrgencyInput, now: datetime) -> list[int]:
    return [
        days_until(deadline, now=now)
        for deadline in urgency_input.pending_tasks
        if deadline is not None
    ]


def compute_urgency_score(
    urgency_input: UrgencyInput,
    *,
    now: date | datetime | None = None,
    policy: UrgencyPolicy | None = None,
) -> int:
    active = policy or UrgencyPolicy.baseline()
    current = _resolve_now(now)
    score = 0

    if not urgency_input.has_college_list:
        score += active.missing_college_list
    if not urgency_input.has_scholarship_matches:
        score += active.missing_scholarship_matches

    if is_fafsa_open(now=current, policy=active):
        step = urgency_input.fafsa_current_step
        if step == 0:
            score += active.fafsa_not_started
        elif step < active.total_fafsa_steps:
            score += active.fafsa_in_progress

    pending = _pending_days(urgency_input, current)
    if pending:
        # Overdue tasks have negative days and land in the tightest band.
        earliest = min(pending)
        for limit, points in active.deadline_bands:
            if earliest <= limit:
                score += points
                break

    return min(active.ceiling, score)


def build_flagged_reason(
    urgency_input: UrgencyInput,
    *,
    now: date | datetime | None = None,
    policy: UrgencyPolicy | None = None,
) -> str:
    active = policy or UrgencyPolicy.baseline()
    current = _resolve_now(now)
    parts: list[str] = []

    if not urgency_input.has_college_list:
        parts.append("No college list")
    if is_fafsa_open(now=current, policy=active) and urgency_input.fafsa_current_step == 0:
        parts.append("FAFSA not started")
    if not urgency_input.has_scholarship_matches:
        parts.append("Scholarships not matched")

    imminent = [days for days in _pending_days(urgency_input, current) if days <= active.reason_window_days]
    if imminent:
        earliest = min(imminent)
        parts.append(f"Application deadline in {earliest} day{'' if earliest == 1 else 's'}")

    return ", ".join(parts) or "On track"
