from __future__ import annotations

import json

import numpy as np
import pytest

from college_match.errors import InvalidRecordError, PreconditionError
from college_match.normalize.records import (
    college_from_mapping,
    decode_string_list,
    employer_from_mapping,
    scholarship_from_mapping,
    student_from_mapping,
)
from college_match.normalize.schema import IncomeBracket, Ownership


def test_decode_string_list_accepts_json_text_sequences_and_arrays() -> None:
    assert decode_string_list('["FL", "GA"]') == ("FL", "GA")
    assert decode_string_list("FL") == ("FL",)
    assert decode_string_list(["nursing", None]) == ("nursing",)
    assert decode_string_list(np.array(["low_income"])) == ("low_income",)
    assert decode_string_list("  ") is None
    assert decode_string_list(None) is None
    assert decode_string_list(float("nan")) is None
    with pytest.raises(ValueError):
        decode_string_list('["unterminated"')


def test_scholarship_from_stored_row() -> None:
    scholarship = scholarship_from_mapping(
        {
            "scholarship_id": 42,
            "name": "Sunshine Scholars",
            "amount": 2500.0,
            "min_gpa": float("nan"),
            "requires_first_gen": "true",
            "eligible_states": '["FL"]',
            "eligible_majors": None,
            "demographic_tags": '["low_income", "first_gen"]',
            "deadline_month": 3.0,
            "deadline_day": 1,
            "is_active": "false",
        }
    )

    assert scholarship.scholarship_id == "42"
    assert scholarship.amount == 2500
    assert scholarship.min_gpa is None
    assert scholarship.requires_first_gen is True
    assert scholarship.requires_essay is False
    assert scholarship.eligible_states == ("FL",)
    assert scholarship.eligible_majors is None
    assert scholarship.demographic_tags == ("low_income", "first_gen")
    assert (scholarship.deadline_month, scholarship.deadline_day) == (3, 1)
    assert scholarship.is_active is False


def test_student_from_mapping_normalizes_blank_and_missing_fields() -> None:
    student = student_from_mapping(
        {
            "student_id": "s1",
            "gpa": float("nan"),
            "grade_level": 11.0,
            "state_of_residence": " TX ",
            "income_bracket": "30_48k",
            "is_first_gen": "yes",
            "intended_major": "",
        }
    )

    assert student.gpa is None
    assert student.grade_level == 11
    assert student.state_of_residence == "TX"
    assert student.income_bracket == IncomeBracket.B30_48K
    assert student.is_first_gen is True
    assert student.intended_major == ""
    assert student.location_preference is None


def test_college_from_mapping_defaults_to_public() -> None:
    assert college_from_mapping({"college_id": 1, "name": "A", "ownership": 2.0}).ownership == Ownership.PRIVATE_NONPROFIT
    assert college_from_mapping({"college_id": 1, "name": "A"}).ownership == Ownership.PUBLIC


def test_employer_prefs_decode_from_json_text_or_lists() -> None:
    stored = employer_from_mapping(
        {
            "employer_id": "e1",
            "name": "Gulf Coast Health",
            "recruiting_prefs": json.dumps(
                [
                    {"college_tiers": '["match", "likely"]', "major_keywords": ["nursing"], "is_active": True},
                    {"college_tiers": ["reach"], "is_active": False},
                ]
            ),
        }
    )
    bare = employer_from_mapping({"employer_id": "e2", "name": "No Prefs", "recruiting_prefs": None})

    assert [pref.college_tiers for pref in stored.recruiting_prefs] == [("match", "likely"), ("reach",)]
    assert stored.recruiting_prefs[0].major_keywords == ("nursing",)
    assert stored.recruiting_prefs[1].is_active is False
    assert stored.recruiting_prefs[1].role_type == "both"
    assert bare.recruiting_prefs == ()


@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("gpa", 92),
        ("gpa", -0.1),
        ("grade_level", 3),
        ("grade_level", 13),
        ("state_of_residence", "Florida"),
        ("state_of_residence", "F1"),
        ("college_type_preference", "community"),
        ("location_preference", "abroad"),
    ],
)
def test_student_from_mapping_rejects_out_of_range_values(field: str, value: object) -> None:
    row = {"student_id": "s1", "gpa": 3.2, "grade_level": 12, "state_of_residence": "FL", field: value}

    with pytest.raises(InvalidRecordError) as excinfo:
        student_from_mapping(row)

    assert isinstance(excinfo.value, PreconditionError)
    assert isinstance(excinfo.value, ValueError)
    assert excinfo.value.details["field"] == field
    assert excinfo.value.details["value"] == value


def test_student_from_mapping_accepts_range_edges_and_uppercases_state() -> None:
    low = student_from_mapping({"gpa": 0.0, "grade_level": 9, "state_of_residence": "fl"})
    high = student_from_mapping(
        {
            "gpa": 4.0,
            "grade_level": 12,
            "state_of_residence": "GA",
            "college_type_preference": "either",
            "location_preference": "regional",
        }
    )

    assert (low.gpa, low.grade_level, low.state_of_residence) == (0.0, 9, "FL")
    assert (high.gpa, high.grade_level) == (4.0, 12)
    assert high.college_type_preference == "either"
    assert high.location_preference == "regional"


@pytest.mark.parametrize(("field", "value"), [("deadline_month", 0), ("deadline_month", 13), ("deadline_day", 32)])
def test_scholarship_from_mapping_rejects_impossible_deadlines(field: str, value: int) -> None:
    row = {"scholarship_id": "s1", "name": "Spring Award", "deadline_month": 4, "deadline_day": 15, field: value}

    with pytest.raises(InvalidRecordError, match=field):
        scholarship_from_mapping(row)


def test_scholarship_from_mapping_keeps_leap_day_deadline() -> None:
    scholarship = scholarship_from_mapping(
        {"scholarship_id": "s1", "name": "Leap Award", "deadline_month": 2, "deadline_day": 29}
    )

    assert (scholarship.deadline_month, scholarship.deadline_day) == (2, 29)
