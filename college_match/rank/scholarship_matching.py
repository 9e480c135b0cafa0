from __future__ import annotations

import math
from datetime import date, datetime, timedelta
from typing import Iterable, Iterator

from college_match.normalize.schema import Scholarship, ScholarshipMatch, StudentProfile
from college_match.rank.numeric import clamp_score, round_half_up
from college_match.rank.policy import ScholarshipPolicy

REMINDER_DAYS = (1, 3, 7)
SECONDS_PER_DAY = 86_400


def _format_number(value: float) -> str:
    return f"{value:g}"


def _major_matches(student_major: str, eligible_majors: Iterable[str]) -> bool:
    major_lower = student_major.lower()
    for candidate in eligible_majors:
        candidate_lower = candidate.lower()
        if candidate_lower in major_lower or major_lower in candidate_lower:
            return True
    return False


def is_disqualified(scholarship: Scholarship, student: StudentProfile) -> bool:
    if scholarship.requires_first_gen and not student.is_first_gen:
        return True
    if (
        scholarship.min_gpa is not None
        and student.gpa is not None
        and student.gpa < scholarship.min_gpa
    ):
        return True
    state = student.state_of_residence
    if scholarship.eligible_states is not None and state and state not in scholarship.eligible_states:
        return True
    return False


def score_scholarship(
    scholarship: Scholarship,
    student: StudentProfile,
    *,
    policy: ScholarshipPolicy | None = None,
) -> ScholarshipMatch | None:
    """Score one scholarship for one student.

    Returns None for a hard disqualification or when the additive score
    stays under the relevance floor; a returned match always has a score
    in [floor, 100].
    """
    active = policy or ScholarshipPolicy.baseline()
    if is_disqualified(scholarship, student):
        return None

    reasons: list[str] = []
    score = 0

    state = student.state_of_residence
    if scholarship.eligible_states is not None:
        if state and state in scholarship.eligible_states:
            score += active.in_state_bonus
            reasons.append(f"eligible in {state}")
    else:
        score += active.national_bonus
        reasons.append("nationally available")

    if scholarship.requires_first_gen and student.is_first_gen:
        score += active.first_gen_targeted_bonus
        reasons.append("first-generation student")
    elif student.is_first_gen:
        score += active.first_gen_general_bonus

    if scholarship.min_gpa is None:
        score += active.no_gpa_requirement_bonus
    elif student.gpa is not None:
        excess = student.gpa - scholarship.min_gpa
        score += min(active.gpa_bonus_cap, round_half_up(excess * active.gpa_excess_multiplier))
        reasons.append(f"GPA {student.gpa:.1f} meets minimum {_format_number(scholarship.min_gpa)}")

    if scholarship.eligible_majors is None:
        score += active.no_major_restriction_bonus
    elif student.intended_major:
        if _major_matches(student.intended_major, scholarship.eligible_majors):
            score += active.major_match_bonus
            reasons.append(f"matches your major: {student.intended_major}")
        else:
            score -= active.major_mismatch_penalty

    tags = scholarship.demographic_tags or ()
    bracket = student.income_bracket.value if student.income_bracket is not None else None
    if "low_income" in tags and bracket in active.low_income_brackets:
        score += active.low_income_bonus
        reasons.append("low-income eligible")

    if not scholarship.requires_essay:
        score += active.no_essay_bonus
        reasons.append("no essay required")

    if score < active.relevance_floor:
        return None

    return ScholarshipMatch(scholarship=scholarship, score=clamp_score(score), reasons=tuple(reasons))


def match_scholarships(
    scholarships: Iterable[Scholarship],
    student: StudentProfile,
    *,
    policy: ScholarshipPolicy | None = None,
) -> list[ScholarshipMatch]:
    matches: list[ScholarshipMatch] = []
    for scholarship in scholarships:
        if not scholarship.is_active:
            continue
        match = score_scholarship(scholarship, student, policy=policy)
        if match is not None:
            matches.append(match)
    return sorted(matches, key=lambda match: match.score, reverse=True)


def _calendar_date(year: int, month: int, day: int) -> datetime:
    # Out-of-range days overflow into the next month (Feb 29 -> Mar 1 in common years).
    return datetime(year, month, 1) + timedelta(days=day - 1)


def _as_datetime(now: date | datetime | None) -> datetime:
    if now is None:
        return datetime.now()
    if isinstance(now, datetime):
        return now.replace(tzinfo=None)
    return datetime(now.year, now.month, now.day)


def calc_days_until_deadline(
    deadline_month: int | None,
    deadline_day: int | None,
    *,
    now: date | datetime | None = None,
) -> int | None:
    """Days until the next occurrence of a month/day deadline; None for rolling deadlines."""
    if deadline_month is None or deadline_day is None:
        return None

    current = _as_datetime(now)
    deadline = _calendar_date(current.year, deadline_month, deadline_day)
    if deadline < current:
        deadline = _calendar_date(current.year + 1, deadline_month, deadline_day)

    seconds = (deadline - current).total_seconds()
    return math.ceil(seconds / SECONDS_PER_DAY)


def reminders_due(
    matches: Iterable[ScholarshipMatch],
    *,
    now: date | datetime | None = None,
    days: tuple[int, ...] = REMINDER_DAYS,
) -> Iterator[tuple[ScholarshipMatch, int]]:
    """Yield un-notified matches whose deadline is exactly one of `days` away."""
    for match in matches:
        if match.notified_at is not None:
            continue
        remaining = calc_days_until_deadline(
            match.scholarship.deadline_month,
            match.scholarship.deadline_day,
            now=now,
        )
        if remaining is not None and remaining in days:
            yield match, remaining


def format_award_amount(scholarship: Scholarship) -> str:
    if scholarship.amount:
        return f"${scholarship.amount:,}"
    if scholarship.amount_max:
        return f"up to ${scholarship.amount_max:,}"
    return "varies"
