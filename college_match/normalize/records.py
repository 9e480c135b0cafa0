from __future__ import annotations

import json
from typing import Any, Mapping

import pandas as pd

from college_match.errors import InvalidRecordError
from college_match.normalize.schema import (
    College,
    Employer,
    IncomeBracket,
    Ownership,
    RecruitingPref,
    Scholarship,
    StudentProfile,
)

# Stored rows encode small string collections as JSON text; records only ever hold tuples.

GPA_RANGE = (0.0, 4.0)
GRADE_LEVEL_RANGE = (9, 12)
COLLEGE_TYPE_PREFERENCES = frozenset({"public", "private", "either"})
LOCATION_PREFERENCES = frozenset({"in_state", "anywhere", "regional"})


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (list, tuple, dict)):
        return False
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _optional_float(value: Any) -> float | None:
    if _is_missing(value):
        return None
    return float(value)


def _optional_int(value: Any) -> int | None:
    if _is_missing(value):
        return None
    return int(round(float(value)))


def _optional_text(value: Any) -> str | None:
    if _is_missing(value):
        return None
    text = str(value).strip()
    return text or None


def _as_bool(value: Any, default: bool = False) -> bool:
    if _is_missing(value):
        return default
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "y"}
    return bool(value)


def decode_string_list(value: Any) -> tuple[str, ...] | None:
    """Decode a list column that may arrive as JSON text, a native sequence, or an array."""
    if _is_missing(value):
        return None
    if isinstance(value, str):
        cleaned = value.strip()
        if not cleaned:
            return None
        if cleaned.startswith("["):
            decoded = json.loads(cleaned)
            if not isinstance(decoded, list):
                raise ValueError(f"Expected a JSON array, received: {cleaned!r}")
            return tuple(str(item) for item in decoded if item is not None)
        return (cleaned,)
    if hasattr(value, "tolist"):
        value = value.tolist()
    return tuple(str(item) for item in value if item is not None)


def _income_bracket(value: Any) -> IncomeBracket | None:
    text = _optional_text(value)
    if text is None:
        return None
    return IncomeBracket(text)


def _in_range(record: str, field: str, value: float | None, bounds: tuple[float, float]) -> None:
    low, high = bounds
    if value is not None and not low <= value <= high:
        raise InvalidRecordError(record, field, value, f"between {low} and {high}")


def _one_of(record: str, field: str, value: str | None, allowed: frozenset[str]) -> str | None:
    if value is not None and value not in allowed:
        raise InvalidRecordError(record, field, value, f"one of {sorted(allowed)}")
    return value


def _state_code(value: Any) -> str | None:
    text = _optional_text(value)
    if text is None:
        return None
    if len(text) != 2 or not text.isalpha():
        raise InvalidRecordError("StudentProfile", "state_of_residence", text, "a 2-letter state code")
    return text.upper()


def student_from_mapping(payload: Mapping[str, Any]) -> StudentProfile:
    """Decode one student row, rejecting values outside the onboarding ranges."""
    gpa = _optional_float(payload.get("gpa"))
    _in_range("StudentProfile", "gpa", gpa, GPA_RANGE)
    grade_level = _optional_int(payload.get("grade_level"))
    _in_range("StudentProfile", "grade_level", grade_level, GRADE_LEVEL_RANGE)
    return StudentProfile(
        student_id=str(payload.get("student_id") or ""),
        gpa=gpa,
        grade_level=grade_level,
        state_of_residence=_state_code(payload.get("state_of_residence")),
        income_bracket=_income_bracket(payload.get("income_bracket")),
        is_first_gen=_as_bool(payload.get("is_first_gen")),
        intended_major=_optional_text(payload.get("intended_major")) or "",
        college_type_preference=_one_of(
            "StudentProfile",
            "college_type_preference",
            _optional_text(payload.get("college_type_preference")),
            COLLEGE_TYPE_PREFERENCES,
        ),
        location_preference=_one_of(
            "StudentProfile",
            "location_preference",
            _optional_text(payload.get("location_preference")),
            LOCATION_PREFERENCES,
        ),
    )


def college_from_mapping(payload: Mapping[str, Any]) -> College:
    ownership = _optional_int(payload.get("ownership"))
    return College(
        college_id=str(payload["college_id"]),
        name=str(payload["name"]),
        ownership=Ownership(ownership) if ownership is not None else Ownership.PUBLIC,
        city=_optional_text(payload.get("city")),
        state=_optional_text(payload.get("state")),
        admission_rate=_optional_float(payload.get("admission_rate")),
        net_price_0_30k=_optional_float(payload.get("net_price_0_30k")),
        net_price_30_48k=_optional_float(payload.get("net_price_30_48k")),
        net_price_48_75k=_optional_float(payload.get("net_price_48_75k")),
        net_price_75_110k=_optional_float(payload.get("net_price_75_110k")),
        net_price_110k_plus=_optional_float(payload.get("net_price_110k_plus")),
        completion_rate=_optional_float(payload.get("completion_rate")),
        median_earnings_10yr=_optional_int(payload.get("median_earnings_10yr")),
        cost_of_attendance=_optional_float(payload.get("cost_of_attendance")),
    )


def scholarship_from_mapping(payload: Mapping[str, Any]) -> Scholarship:
    deadline_month = _optional_int(payload.get("deadline_month"))
    _in_range("Scholarship", "deadline_month", deadline_month, (1, 12))
    deadline_day = _optional_int(payload.get("deadline_day"))
    _in_range("Scholarship", "deadline_day", deadline_day, (1, 31))
    return Scholarship(
        scholarship_id=str(payload["scholarship_id"]),
        name=str(payload["name"]),
        amount=_optional_int(payload.get("amount")),
        amount_min=_optional_int(payload.get("amount_min")),
        amount_max=_optional_int(payload.get("amount_max")),
        min_gpa=_optional_float(payload.get("min_gpa")),
        requires_first_gen=_as_bool(payload.get("requires_first_gen")),
        requires_essay=_as_bool(payload.get("requires_essay")),
        eligible_states=decode_string_list(payload.get("eligible_states")),
        eligible_majors=decode_string_list(payload.get("eligible_majors")),
        demographic_tags=decode_string_list(payload.get("demographic_tags")),
        deadline_month=deadline_month,
        deadline_day=deadline_day,
        deadline_text=_optional_text(payload.get("deadline_text")),
        application_url=_optional_text(payload.get("application_url")),
        is_active=_as_bool(payload.get("is_active"), default=True),
    )


def recruiting_pref_from_mapping(payload: Mapping[str, Any]) -> RecruitingPref:
    return RecruitingPref(
        college_tiers=decode_string_list(payload.get("college_tiers")) or (),
        major_keywords=decode_string_list(payload.get("major_keywords")) or (),
        min_gpa=_optional_float(payload.get("min_gpa")),
        role_type=_optional_text(payload.get("role_type")) or "both",
        target_grad_year=_optional_int(payload.get("target_grad_year")),
        is_active=_as_bool(payload.get("is_active"), default=True),
    )


def employer_from_mapping(payload: Mapping[str, Any]) -> Employer:
    prefs = payload.get("recruiting_prefs")
    if _is_missing(prefs):
        prefs = []
    elif isinstance(prefs, str):
        prefs = json.loads(prefs)
    return Employer(
        employer_id=str(payload["employer_id"]),
        name=str(payload["name"]),
        industry=_optional_text(payload.get("industry")),
        description=_optional_text(payload.get("description")),
        website=_optional_text(payload.get("website")),
        is_verified=_as_bool(payload.get("is_verified")),
        recruiting_prefs=tuple(recruiting_pref_from_mapping(pref) for pref in prefs),
    )
