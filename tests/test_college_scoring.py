from __future__ import annotations

import pytest

from college_match.errors import MissingIncomeBracketError
from college_match.normalize.schema import College, CollegeScore, CollegeTier, IncomeBracket, StudentProfile
from college_match.rank.college_scoring import (
    classify_tier,
    composite_score,
    get_net_price,
    score_admission,
    score_college_for_student,
    score_colleges,
    score_net_price,
    score_outcome,
    select_college_list,
    tier_counts,
)


def _college(college_id: str = "c1", **overrides: object) -> College:
    return College(college_id=college_id, name=f"College {college_id}", **overrides)


def _score(college_id: str, tier: CollegeTier, composite: int) -> CollegeScore:
    return CollegeScore(
        college=_college(college_id),
        admission_score=50,
        net_price_score=50,
        outcome_score=50,
        composite_score=composite,
        tier=tier,
    )


def test_admission_score_is_rounded_percentage_with_neutral_default() -> None:
    assert score_admission(_college(admission_rate=0.25)) == 25
    assert score_admission(_college(admission_rate=1.0)) == 100
    assert score_admission(_college(admission_rate=0.0)) == 0
    assert score_admission(_college(admission_rate=None)) == 50


@pytest.mark.parametrize(
    ("admission_score", "expected"),
    [
        (0, CollegeTier.REACH),
        (34, CollegeTier.REACH),
        (35, CollegeTier.MATCH),
        (69, CollegeTier.MATCH),
        (70, CollegeTier.LIKELY),
        (100, CollegeTier.LIKELY),
    ],
)
def test_classify_tier_boundaries(admission_score: int, expected: CollegeTier) -> None:
    assert classify_tier(admission_score) == expected


def test_composite_score_weights() -> None:
    assert composite_score(100, 100, 100) == 100
    assert composite_score(0, 0, 0) == 0
    assert composite_score(100, 0, 0) == 30
    assert composite_score(0, 100, 0) == 40
    assert composite_score(0, 0, 100) == 30


def test_net_price_score_scales_against_bracket_midpoint() -> None:
    bracket = IncomeBracket.B0_30K
    assert score_net_price(_college(net_price_0_30k=5_000), bracket) == 100
    assert score_net_price(_college(net_price_0_30k=2_000), bracket) == 100
    assert score_net_price(_college(net_price_0_30k=10_000), bracket) == 50
    assert score_net_price(_college(net_price_0_30k=15_000), bracket) == 0
    assert score_net_price(_college(net_price_0_30k=40_000), bracket) == 0
    assert score_net_price(_college(net_price_48_75k=9_000), bracket) == 40


def test_get_net_price_reads_the_bracket_column() -> None:
    college = _college(net_price_30_48k=7_500.0, net_price_110k_plus=None)
    assert get_net_price(college, IncomeBracket.B30_48K) == 7_500.0
    assert get_net_price(college, "30_48k") == 7_500.0
    assert get_net_price(college, IncomeBracket.B110K_PLUS) is None


def test_outcome_score_blends_completion_and_capped_earnings() -> None:
    assert score_outcome(_college(completion_rate=0.8, median_earnings_10yr=45_000)) == 62
    assert score_outcome(_college(completion_rate=1.0, median_earnings_10yr=135_000)) == 100
    assert score_outcome(_college()) == 50


def test_score_college_for_student_requires_income_bracket() -> None:
    student = StudentProfile(gpa=3.5)
    with pytest.raises(MissingIncomeBracketError) as excinfo:
        score_college_for_student(_college(admission_rate=0.5), student)

    assert isinstance(excinfo.value, ValueError)
    assert excinfo.value.details == {"field": "income_bracket"}


def test_reach_tier_can_carry_high_composite() -> None:
    college = _college(
        admission_rate=0.10,
        net_price_0_30k=3_000,
        completion_rate=0.95,
        median_earnings_10yr=90_000,
    )
    score = score_college_for_student(college, StudentProfile(income_bracket=IncomeBracket.B0_30K))

    assert score.tier == CollegeTier.REACH
    assert score.admission_score == 10
    assert score.net_price_score == 100
    assert score.outcome_score == 98
    assert score.composite_score == 72


def test_score_colleges_orders_by_composite_descending() -> None:
    student = StudentProfile(income_bracket=IncomeBracket.B48_75K)
    colleges = [
        _college("low", admission_rate=0.1, net_price_48_75k=60_000),
        _college("high", admission_rate=0.9, net_price_48_75k=10_000, completion_rate=0.9),
        _college("mid", admission_rate=0.5),
    ]

    ranked = score_colleges(colleges, student)

    assert [score.college.college_id for score in ranked] == ["high", "mid", "low"]


def test_select_college_list_keeps_top_per_tier_in_tier_order() -> None:
    scores = [
        _score("likely-a", CollegeTier.LIKELY, 95),
        _score("reach-a", CollegeTier.REACH, 90),
        _score("reach-b", CollegeTier.REACH, 80),
        _score("reach-c", CollegeTier.REACH, 80),
        _score("match-a", CollegeTier.MATCH, 60),
        _score("likely-b", CollegeTier.LIKELY, 50),
        _score("likely-c", CollegeTier.LIKELY, 40),
    ]

    selected = select_college_list(scores, per_tier=2)

    assert [score.college.college_id for score in selected] == [
        "reach-a",
        "reach-b",
        "match-a",
        "likely-a",
        "likely-b",
    ]
    assert tier_counts(selected) == {"reach": 2, "match": 1, "likely": 2}


def test_select_college_list_handles_empty_input() -> None:
    assert select_college_list([]) == []
    assert tier_counts([]) == {"reach": 0, "match": 0, "likely": 0}
