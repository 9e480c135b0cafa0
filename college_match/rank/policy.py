from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from college_match.normalize.schema import IncomeBracket

WEIGHT_TOLERANCE = 1e-6

# Approximate household income midpoint per bracket.
BRACKET_MIDPOINTS: dict[str, float] = {
    IncomeBracket.B0_30K.value: 20_000.0,
    IncomeBracket.B30_48K.value: 39_000.0,
    IncomeBracket.B48_75K.value: 61_000.0,
    IncomeBracket.B75_110K.value: 92_000.0,
    IncomeBracket.B110K_PLUS.value: 140_000.0,
}

# What a family can cover per year from income and savings without borrowing.
POCKET_CAPACITY: dict[str, float] = {
    IncomeBracket.B0_30K.value: 3_000.0,
    IncomeBracket.B30_48K.value: 5_000.0,
    IncomeBracket.B48_75K.value: 8_000.0,
    IncomeBracket.B75_110K.value: 12_000.0,
    IncomeBracket.B110K_PLUS.value: 18_000.0,
}


def _require_finite(owner: str, field_name: str, value: float) -> float:
    numeric = float(value)
    if not math.isfinite(numeric):
        raise ValueError(f"{owner} value '{field_name}' must be finite.")
    return numeric


def _require_fraction(owner: str, field_name: str, value: float) -> None:
    numeric = _require_finite(owner, field_name, value)
    if numeric < 0.0 or numeric > 1.0:
        raise ValueError(f"{owner} value '{field_name}' must be between 0.0 and 1.0.")


def _require_sum_of_one(owner: str, values: Mapping[str, float]) -> None:
    total = sum(values.values())
    if not math.isclose(total, 1.0, abs_tol=WEIGHT_TOLERANCE):
        names = ", ".join(values)
        raise ValueError(
            f"{owner} weights ({names}) must sum to 1.0 "
            f"(received {total:.6f}, tolerance={WEIGHT_TOLERANCE})."
        )


def _require_bracket_table(owner: str, field_name: str, table: Mapping[str, float]) -> None:
    missing = [bracket.value for bracket in IncomeBracket if bracket.value not in table]
    if missing:
        raise ValueError(f"{owner} table '{field_name}' is missing brackets: {missing}")
    for bracket, value in table.items():
        if _require_finite(owner, f"{field_name}[{bracket}]", value) < 0.0:
            raise ValueError(f"{owner} table '{field_name}[{bracket}]' must be non-negative.")


def _overlay_table(base: Mapping[str, float], override: Any) -> dict[str, float]:
    merged = dict(base)
    if override:
        merged.update({str(key): float(value) for key, value in override.items()})
    return merged


@dataclass(frozen=True, slots=True)
class CollegeScoringPolicy:
    """Heuristic constants for college fit scoring.

    The affordability ratios and the national median earnings figure are
    uncited heuristics; they are kept here so they can be tuned without
    touching the scoring code.
    """

    admission_weight: float = 0.3
    net_price_weight: float = 0.4
    outcome_weight: float = 0.3
    full_affordability_ratio: float = 0.25
    zero_affordability_ratio: float = 0.75
    national_median_earnings: float = 45_000.0
    median_earnings_score: float = 50.0
    completion_weight: float = 0.4
    earnings_weight: float = 0.6
    neutral_admission_score: int = 50
    neutral_net_price_score: int = 40
    neutral_completion_score: int = 50
    neutral_earnings_score: int = 50
    likely_threshold: int = 70
    match_threshold: int = 35
    bracket_midpoints: Mapping[str, float] = field(default_factory=lambda: dict(BRACKET_MIDPOINTS))

    def __post_init__(self) -> None:
        owner = "CollegeScoringPolicy"
        for field_name in (
            "admission_weight",
            "net_price_weight",
            "outcome_weight",
            "full_affordability_ratio",
            "zero_affordability_ratio",
            "completion_weight",
            "earnings_weight",
        ):
            _require_fraction(owner, field_name, getattr(self, field_name))
        _require_sum_of_one(
            owner,
            {
                "admission_weight": self.admission_weight,
                "net_price_weight": self.net_price_weight,
                "outcome_weight": self.outcome_weight,
            },
        )
        _require_sum_of_one(
            owner,
            {"completion_weight": self.completion_weight, "earnings_weight": self.earnings_weight},
        )
        if self.zero_affordability_ratio <= self.full_affordability_ratio:
            raise ValueError(
                "CollegeScoringPolicy 'zero_affordability_ratio' must exceed 'full_affordability_ratio'."
            )
        if _require_finite(owner, "national_median_earnings", self.national_median_earnings) <= 0.0:
            raise ValueError("CollegeScoringPolicy 'national_median_earnings' must be positive.")
        if not 0 <= self.match_threshold <= self.likely_threshold <= 100:
            raise ValueError("CollegeScoringPolicy tier thresholds must satisfy 0 <= match <= likely <= 100.")
        _require_bracket_table(owner, "bracket_midpoints", self.bracket_midpoints)
        if any(value <= 0.0 for value in self.bracket_midpoints.values()):
            raise ValueError("CollegeScoringPolicy 'bracket_midpoints' must be positive.")

    @classmethod
    def baseline(cls) -> CollegeScoringPolicy:
        return cls()

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any] | None) -> CollegeScoringPolicy:
        values = dict(payload or {})
        baseline = cls.baseline()
        midpoints = _overlay_table(baseline.bracket_midpoints, values.pop("bracket_midpoints", None))
        merged = {**baseline.to_dict(), **values, "bracket_midpoints": midpoints}
        return cls(**merged)

    def to_dict(self) -> dict[str, Any]:
        return {
            "admission_weight": self.admission_weight,
            "net_price_weight": self.net_price_weight,
            "outcome_weight": self.outcome_weight,
            "full_affordability_ratio": self.full_affordability_ratio,
            "zero_affordability_ratio": self.zero_affordability_ratio,
            "national_median_earnings": self.national_median_earnings,
            "median_earnings_score": self.median_earnings_score,
            "completion_weight": self.completion_weight,
            "earnings_weight": self.earnings_weight,
            "neutral_admission_score": self.neutral_admission_score,
            "neutral_net_price_score": self.neutral_net_price_score,
            "neutral_completion_score": self.neutral_completion_score,
            "neutral_earnings_score": self.neutral_earnings_score,
            "likely_threshold": self.likely_threshold,
            "match_threshold": self.match_threshold,
            "bracket_midpoints": dict(self.bracket_midpoints),
        }


@dataclass(frozen=True, slots=True)
class ScholarshipPolicy:
    in_state_bonus: int = 15
    national_bonus: int = 10
    first_gen_targeted_bonus: int = 30
    first_gen_general_bonus: int = 5
    gpa_excess_multiplier: float = 7.0
    gpa_bonus_cap: int = 15
    no_gpa_requirement_bonus: int = 10
    major_match_bonus: int = 20
    major_mismatch_penalty: int = 10
    no_major_restriction_bonus: int = 5
    low_income_bonus: int = 15
    no_essay_bonus: int = 5
    relevance_floor: int = 15
    low_income_brackets: tuple[str, ...] = (IncomeBracket.B0_30K.value, IncomeBracket.B30_48K.value)

    def __post_init__(self) -> None:
        for field_name in (
            "in_state_bonus",
            "national_bonus",
            "first_gen_targeted_bonus",
            "first_gen_general_bonus",
            "gpa_excess_multiplier",
            "gpa_bonus_cap",
            "no_gpa_requirement_bonus",
            "major_match_bonus",
            "major_mismatch_penalty",
            "no_major_restriction_bonus",
            "low_income_bonus",
            "no_essay_bonus",
            "relevance_floor",
        ):
            value = _require_finite("ScholarshipPolicy", field_name, getattr(self, field_name))
            if value < 0.0:
                raise ValueError(f"ScholarshipPolicy value '{field_name}' must be non-negative.")

    @classmethod
    def baseline(cls) -> ScholarshipPolicy:
        return cls()

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any] | None) -> ScholarshipPolicy:
        values = dict(payload or {})
        if "low_income_brackets" in values:
            values["low_income_brackets"] = tuple(str(item) for item in values["low_income_brackets"])
        return cls(**{**cls.baseline().to_dict(), **values})

    def to_dict(self) -> dict[str, Any]:
        return {
            "in_state_bonus": self.in_state_bonus,
            "national_bonus": self.national_bonus,
            "first_gen_targeted_bonus": self.first_gen_targeted_bonus,
            "first_gen_general_bonus": self.first_gen_general_bonus,
            "gpa_excess_multiplier": self.gpa_excess_multiplier,
            "gpa_bonus_cap": self.gpa_bonus_cap,
            "no_gpa_requirement_bonus": self.no_gpa_requirement_bonus,
            "major_match_bonus": self.major_match_bonus,
            "major_mismatch_penalty": self.major_mismatch_penalty,
            "no_major_restriction_bonus": self.no_major_restriction_bonus,
            "low_income_bonus": self.low_income_bonus,
            "no_essay_bonus": self.no_essay_bonus,
            "relevance_floor": self.relevance_floor,
            "low_income_brackets": tuple(self.low_income_brackets),
        }


@dataclass(frozen=True, slots=True)
class UrgencyPolicy:
    missing_college_list: int = 15
    missing_scholarship_matches: int = 10
    fafsa_not_started: int = 30
    fafsa_in_progress: int = 10
    deadline_bands: tuple[tuple[int, int], ...] = ((3, 40), (7, 30), (14, 20), (30, 10))
    ceiling: int = 100
    fafsa_open_month: int = 10
    total_fafsa_steps: int = 12
    high_urgency_threshold: int = 60

    def __post_init__(self) -> None:
        if not 1 <= self.fafsa_open_month <= 12:
            raise ValueError("UrgencyPolicy 'fafsa_open_month' must be a calendar month (1-12).")
        if self.total_fafsa_steps <= 0:
            raise ValueError("UrgencyPolicy 'total_fafsa_steps' must be positive.")
        limits = [limit for limit, _ in self.deadline_bands]
        if limits != sorted(limits):
            raise ValueError("UrgencyPolicy 'deadline_bands' must be ordered by ascending day limit.")
        for field_name in ("missing_college_list", "missing_scholarship_matches", "fafsa_not_started", "fafsa_in_progress"):
            if getattr(self, field_name) < 0:
                raise ValueError(f"UrgencyPolicy value '{field_name}' must be non-negative.")

    @property
    def reason_window_days(self) -> int:
        return self.deadline_bands[-1][0] if self.deadline_bands else 0

    @classmethod
    def baseline(cls) -> UrgencyPolicy:
        return cls()

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any] | None) -> UrgencyPolicy:
        values = dict(payload or {})
        if "deadline_bands" in values:
            values["deadline_bands"] = tuple((int(limit), int(points)) for limit, points in values["deadline_bands"])
        return cls(**{**cls.baseline().to_dict(), **values})

    def to_dict(self) -> dict[str, Any]:
        return {
            "missing_college_list": self.missing_college_list,
            "missing_scholarship_matches": self.missing_scholarship_matches,
            "fafsa_not_started": self.fafsa_not_started,
            "fafsa_in_progress": self.fafsa_in_progress,
            "deadline_bands": tuple(self.deadline_bands),
            "ceiling": self.ceiling,
            "fafsa_open_month": self.fafsa_open_month,
            "total_fafsa_steps": self.total_fafsa_steps,
            "high_urgency_threshold": self.high_urgency_threshold,
        }


@dataclass(frozen=True, slots=True)
class FinancePolicy:
    annual_rate: float = 0.068
    term_months: int = 120
    years_of_study: int = 4
    default_bracket: str = IncomeBracket.B48_75K.value
    pocket_capacity: Mapping[str, float] = field(default_factory=lambda: dict(POCKET_CAPACITY))

    def __post_init__(self) -> None:
        _require_fraction("FinancePolicy", "annual_rate", self.annual_rate)
        if self.term_months <= 0 or self.years_of_study <= 0:
            raise ValueError("FinancePolicy 'term_months' and 'years_of_study' must be positive.")
        IncomeBracket(self.default_bracket)
        _require_bracket_table("FinancePolicy", "pocket_capacity", self.pocket_capacity)

    @property
    def monthly_rate(self) -> float:
        return self.annual_rate / 12

    @classmethod
    def baseline(cls) -> FinancePolicy:
        return cls()

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any] | None) -> FinancePolicy:
        values = dict(payload or {})
        baseline = cls.baseline()
        capacity = _overlay_table(baseline.pocket_capacity, values.pop("pocket_capacity", None))
        return cls(**{**baseline.to_dict(), **values, "pocket_capacity": capacity})

    def to_dict(self) -> dict[str, Any]:
        return {
            "annual_rate": self.annual_rate,
            "term_months": self.term_months,
            "years_of_study": self.years_of_study,
            "default_bracket": self.default_bracket,
            "pocket_capacity": dict(self.pocket_capacity),
        }


@dataclass(frozen=True, slots=True)
class PolicyBundle:
    college: CollegeScoringPolicy
    scholarship: ScholarshipPolicy
    urgency: UrgencyPolicy
    finance: FinancePolicy

    @classmethod
    def baseline(cls) -> PolicyBundle:
        return cls(
            college=CollegeScoringPolicy.baseline(),
            scholarship=ScholarshipPolicy.baseline(),
            urgency=UrgencyPolicy.baseline(),
            finance=FinancePolicy.baseline(),
        )

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any] | None) -> PolicyBundle:
        values = payload or {}
        return cls(
            college=CollegeScoringPolicy.from_mapping(values.get("college")),
            scholarship=ScholarshipPolicy.from_mapping(values.get("scholarship")),
            urgency=UrgencyPolicy.from_mapping(values.get("urgency")),
            finance=FinancePolicy.from_mapping(values.get("finance")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "college": self.college.to_dict(),
            "scholarship": self.scholarship.to_dict(),
            "urgency": self.urgency.to_dict(),
            "finance": self.finance.to_dict(),
        }


def load_policy_bundle(path: Path | None) -> PolicyBundle:
    if path is None:
        return PolicyBundle.baseline()
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(f"Policy file '{path}' must contain a JSON object.")
    return PolicyBundle.from_mapping(payload)
