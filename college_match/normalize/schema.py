from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum, IntEnum
from typing import Any, Optional


class IncomeBracket(str, Enum):
    """Ordered household income buckets used by the College Scorecard net price fields."""

    B0_30K = "0_30k"
    B30_48K = "30_48k"
    B48_75K = "48_75k"
    B75_110K = "75_110k"
    B110K_PLUS = "110k_plus"


class CollegeTier(str, Enum):
    REACH = "reach"
    MATCH = "match"
    LIKELY = "likely"


class Ownership(IntEnum):
    PUBLIC = 1
    PRIVATE_NONPROFIT = 2
    FOR_PROFIT = 3


class TaskType(str, Enum):
    COMMON_APP = "common_app"
    SUPPLEMENT = "supplement"
    FAFSA = "fafsa"
    CSS_PROFILE = "css_profile"
    SCHOLARSHIP_APP = "scholarship_app"
    INSTITUTIONAL_APP = "institutional_app"


@dataclass(frozen=True, slots=True)
class StudentProfile:
    student_id: str = ""
    gpa: Optional[float] = None
    grade_level: Optional[int] = None
    state_of_residence: Optional[str] = None
    income_bracket: Optional[IncomeBracket] = None
    is_first_gen: bool = False
    intended_major: str = ""
    college_type_preference: Optional[str] = None
    location_preference: Optional[str] = None


@dataclass(frozen=True, slots=True)
class College:
    """Cached catalog record; every statistic may be missing."""

    college_id: str
    name: str
    ownership: Ownership = Ownership.PUBLIC
    city: Optional[str] = None
    state: Optional[str] = None
    admission_rate: Optional[float] = None
    net_price_0_30k: Optional[float] = None
    net_price_30_48k: Optional[float] = None
    net_price_48_75k: Optional[float] = None
    net_price_75_110k: Optional[float] = None
    net_price_110k_plus: Optional[float] = None
    completion_rate: Optional[float] = None
    median_earnings_10yr: Optional[int] = None
    cost_of_attendance: Optional[float] = None


@dataclass(frozen=True, slots=True)
class CollegeScore:
    college: College
    admission_score: int
    net_price_score: int
    outcome_score: int
    composite_score: int
    tier: CollegeTier

    def to_dict(self) -> dict[str, Any]:
        return {
            "college_id": self.college.college_id,
            "name": self.college.name,
            "tier": self.tier.value,
            "admission_score": self.admission_score,
            "net_price_score": self.net_price_score,
            "outcome_score": self.outcome_score,
            "composite_score": self.composite_score,
        }


@dataclass(frozen=True, slots=True)
class CollegeListEntry:
    """A persisted college list row: the college, its tier, and the scores it was chosen with."""

    college: College
    tier: CollegeTier
    admission_score: Optional[int] = None
    net_price_score: Optional[int] = None
    outcome_score: Optional[int] = None
    composite_score: Optional[int] = None
    explanation: str = ""

    @classmethod
    def from_score(cls, score: CollegeScore, explanation: str = "") -> CollegeListEntry:
        return cls(
            college=score.college,
            tier=score.tier,
            admission_score=score.admission_score,
            net_price_score=score.net_price_score,
            outcome_score=score.outcome_score,
            composite_score=score.composite_score,
            explanation=explanation,
        )


@dataclass(frozen=True, slots=True)
class Scholarship:
    scholarship_id: str
    name: str
    amount: Optional[int] = None
    amount_min: Optional[int] = None
    amount_max: Optional[int] = None
    min_gpa: Optional[float] = None
    requires_first_gen: bool = False
    requires_essay: bool = False
    eligible_states: Optional[tuple[str, ...]] = None
    eligible_majors: Optional[tuple[str, ...]] = None
    demographic_tags: Optional[tuple[str, ...]] = None
    deadline_month: Optional[int] = None
    deadline_day: Optional[int] = None
    deadline_text: Optional[str] = None
    application_url: Optional[str] = None
    is_active: bool = True


@dataclass(frozen=True, slots=True)
class ScholarshipMatch:
    scholarship: Scholarship
    score: int
    reasons: tuple[str, ...]
    notified_at: Optional[datetime] = None


@dataclass(frozen=True, slots=True)
class RecruitingPref:
    college_tiers: tuple[str, ...] = ()
    major_keywords: tuple[str, ...] = ()
    min_gpa: Optional[float] = None
    role_type: str = "both"
    target_grad_year: Optional[int] = None
    is_active: bool = True


@dataclass(frozen=True, slots=True)
class Employer:
    employer_id: str
    name: str
    industry: Optional[str] = None
    description: Optional[str] = None
    website: Optional[str] = None
    is_verified: bool = False
    recruiting_prefs: tuple[RecruitingPref, ...] = ()


@dataclass(frozen=True, slots=True)
class EmployerMatch:
    employer: Employer
    pref: RecruitingPref
    matched_tiers: tuple[str, ...]
    matched_major: bool


@dataclass(frozen=True, slots=True)
class ApplicationTask:
    student_id: str
    college_id: Optional[str]
    college_name: str
    task_type: TaskType
    title: str
    description: str
    deadline_date: Optional[date]
    deadline_label: str
    is_conflict: bool = False
    conflict_note: str = ""
    status: str = "pending"

    def to_dict(self) -> dict[str, Any]:
        return {
            "student_id": self.student_id,
            "college_id": self.college_id,
            "college_name": self.college_name,
            "task_type": self.task_type.value,
            "title": self.title,
            "description": self.description,
            "deadline_date": self.deadline_date.isoformat() if self.deadline_date else None,
            "deadline_label": self.deadline_label,
            "is_conflict": self.is_conflict,
            "conflict_note": self.conflict_note,
            "status": self.status,
        }


@dataclass(frozen=True, slots=True)
class UrgencyInput:
    has_college_list: bool
    has_financial_aid_run: bool
    has_scholarship_matches: bool
    fafsa_current_step: int = 0
    pending_tasks: tuple[Optional[date | datetime], ...] = field(default_factory=tuple)
    grade_level: Optional[int] = None
