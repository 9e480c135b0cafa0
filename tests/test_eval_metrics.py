from __future__ import annotations

import pytest

from college_match.eval.golden_students import (
    get_golden_students,
    get_sample_colleges,
    get_sample_employers,
    get_sample_scholarships,
)
from college_match.eval.metrics import (
    affordability_stats,
    ranking_stability,
    scholarship_coverage,
    tier_distribution,
)
from college_match.finance.net_price import FinancialSummary
from college_match.normalize.schema import College, CollegeScore, CollegeTier, Scholarship, ScholarshipMatch
from college_match.rank.college_scoring import score_colleges, select_college_list
from college_match.rank.employer_matching import match_employers


def _score(college_id: str, tier: CollegeTier) -> CollegeScore:
    return CollegeScore(College(college_id, college_id), 50, 50, 50, 50, tier)


def _summary(net_price: float | None, debt: int | None, payment: int | None) -> FinancialSummary:
    return FinancialSummary("c", "C", net_price, None, None, debt, payment)


def test_golden_profiles_score_against_sample_catalog() -> None:
    colleges = get_sample_colleges()
    for student in get_golden_students():
        selected = select_college_list(score_colleges(colleges, student.profile))
        assert selected
        assert len({score.college.college_id for score in selected}) == len(selected)


def test_sample_catalogs_include_inactive_rows() -> None:
    assert any(not scholarship.is_active for scholarship in get_sample_scholarships())
    employers = get_sample_employers()
    matches = match_employers(employers, ["reach", "match", "likely"], "Nursing")
    assert "emp-paused" not in {match.employer.employer_id for match in matches}
    assert matches[0].matched_major is True


def test_tier_distribution_flags_profiles_missing_a_tier() -> None:
    distribution = tier_distribution(
        {
            "full": [_score("a", CollegeTier.REACH), _score("b", CollegeTier.MATCH), _score("c", CollegeTier.LIKELY)],
            "partial": [_score("d", CollegeTier.LIKELY), _score("e", CollegeTier.LIKELY)],
        }
    )

    assert distribution["totals"] == {"reach": 1, "match": 1, "likely": 3}
    assert distribution["per_profile"]["partial"] == {"reach": 0, "match": 0, "likely": 2}
    assert distribution["profiles_missing_a_tier"] == ["partial"]


def test_scholarship_coverage_counts_unique_matches() -> None:
    shared = Scholarship("s1", "Shared")
    coverage = scholarship_coverage(
        {
            "p1": [ScholarshipMatch(shared, 40, ()), ScholarshipMatch(Scholarship("s2", "Other"), 30, ())],
            "p2": [ScholarshipMatch(shared, 40, ())],
            "p3": [],
        },
        active_scholarship_count=4,
    )

    assert coverage["unique_matched_count"] == 2
    assert coverage["coverage"] == 0.5
    assert coverage["avg_matches_per_profile"] == 1.0
    assert coverage["profiles_without_matches"] == ["p3"]


def test_affordability_stats_ignore_missing_net_prices() -> None:
    stats = affordability_stats(
        {"p1": [_summary(10_000.0, 28_000, 322), _summary(None, None, None)], "p2": [_summary(20_000.0, 60_000, 690)]}
    )

    assert stats["count"] == 3
    assert stats["with_net_price"] == 2
    assert stats["mean_net_price"] == 15_000.0
    assert stats["mean_debt"] == 44_000.0
    assert stats["max_monthly_payment"] == 690.0
    assert affordability_stats({})["with_net_price"] == 0


def test_ranking_stability_raises_on_mismatch() -> None:
    assert ranking_stability({"p": ["a", "b"]}, {"p": ["a", "b"]})["is_stable"] is True
    with pytest.raises(AssertionError, match="Ranking stability check failed"):
        ranking_stability({"p": ["a", "b"]}, {"p": ["b", "a"]})
