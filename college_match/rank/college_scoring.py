from __future__ import annotations

from typing import Iterable

import pandas as pd

from college_match.errors import MissingIncomeBracketError
from college_match.normalize.schema import (
    College,
    CollegeScore,
    CollegeTier,
    IncomeBracket,
    StudentProfile,
)
from college_match.rank.numeric import clamp_score, round_half_up
from college_match.rank.policy import CollegeScoringPolicy

COLLEGES_PER_TIER = 5
TIER_ORDER = (CollegeTier.REACH, CollegeTier.MATCH, CollegeTier.LIKELY)


def _policy(policy: CollegeScoringPolicy | None) -> CollegeScoringPolicy:
    return policy or CollegeScoringPolicy.baseline()


def get_net_price(college: College, bracket: IncomeBracket | str) -> float | None:
    prices = {
        IncomeBracket.B0_30K: college.net_price_0_30k,
        IncomeBracket.B30_48K: college.net_price_30_48k,
        IncomeBracket.B48_75K: college.net_price_48_75k,
        IncomeBracket.B75_110K: college.net_price_75_110k,
        IncomeBracket.B110K_PLUS: college.net_price_110k_plus,
    }
    return prices[IncomeBracket(bracket)]


def score_admission(college: College, *, policy: CollegeScoringPolicy | None = None) -> int:
    """Acceptance rate as a 0-100 proxy for admission odds; neutral when unknown."""
    active = _policy(policy)
    if college.admission_rate is None:
        return active.neutral_admission_score
    return clamp_score(round_half_up(college.admission_rate * 100))


def score_net_price(
    college: College,
    bracket: IncomeBracket | str,
    *,
    policy: CollegeScoringPolicy | None = None,
) -> int:
    """Affordability against the bracket's income midpoint.

    100 at or below the full-affordability ratio, 0 at or above the
    zero-affordability ratio, linear in between.
    """
    active = _policy(policy)
    net_price = get_net_price(college, bracket)
    if net_price is None:
        return active.neutral_net_price_score

    family_income = active.bracket_midpoints[IncomeBracket(bracket).value]
    ratio = net_price / family_income
    span = active.zero_affordability_ratio - active.full_affordability_ratio
    raw = (1 - (ratio - active.full_affordability_ratio) / span) * 100
    return clamp_score(round_half_up(raw))


def score_outcome(college: College, *, policy: CollegeScoringPolicy | None = None) -> int:
    active = _policy(policy)
    if college.completion_rate is not None:
        completion_score = round_half_up(college.completion_rate * 100)
    else:
        completion_score = active.neutral_completion_score

    if college.median_earnings_10yr is not None:
        earnings_ratio = college.median_earnings_10yr / active.national_median_earnings
        earnings_score = min(100, round_half_up(earnings_ratio * active.median_earnings_score))
    else:
        earnings_score = active.neutral_earnings_score

    blended = completion_score * active.completion_weight + earnings_score * active.earnings_weight
    return clamp_score(round_half_up(blended))


def composite_score(
    admission_score: int,
    net_price_score: int,
    outcome_score: int,
    *,
    policy: CollegeScoringPolicy | None = None,
) -> int:
    active = _policy(policy)
    blended = (
        admission_score * active.admission_weight
        + net_price_score * active.net_price_weight
        + outcome_score * active.outcome_weight
    )
    return clamp_score(round_half_up(blended))


def classify_tier(admission_score: int, *, policy: CollegeScoringPolicy | None = None) -> CollegeTier:
    # Tier reflects admission odds only; composite is for ranking within a tier.
    active = _policy(policy)
    if admission_score >= active.likely_threshold:
        return CollegeTier.LIKELY
    if admission_score >= active.match_threshold:
        return CollegeTier.MATCH
    return CollegeTier.REACH


def score_college_for_student(
    college: College,
    student: StudentProfile,
    *,
    policy: CollegeScoringPolicy | None = None,
) -> CollegeScore:
    if student.income_bracket is None:
        raise MissingIncomeBracketError()

    admission = score_admission(college, policy=policy)
    net_price = score_net_price(college, student.income_bracket, policy=policy)
    outcome = score_outcome(college, policy=policy)
    return CollegeScore(
        college=college,
        admission_score=admission,
        net_price_score=net_price,
        outcome_score=outcome,
        composite_score=composite_score(admission, net_price, outcome, policy=policy),
        tier=classify_tier(admission, policy=policy),
    )


def score_colleges(
    colleges: Iterable[College],
    student: StudentProfile,
    *,
    policy: CollegeScoringPolicy | None = None,
) -> list[CollegeScore]:
    scored = [score_college_for_student(college, student, policy=policy) for college in colleges]
    return sorted(scored, key=lambda score: score.composite_score, reverse=True)


def scores_to_frame(scores: list[CollegeScore]) -> pd.DataFrame:
    columns = [
        "position",
        "college_id",
        "name",
        "tier",
        "admission_score",
        "net_price_score",
        "outcome_score",
        "composite_score",
    ]
    rows = [{"position": index, **score.to_dict()} for index, score in enumerate(scores)]
    return pd.DataFrame(rows, columns=columns)


def select_college_list(
    scores: list[CollegeScore],
    per_tier: int = COLLEGES_PER_TIER,
) -> list[CollegeScore]:
    """Keep the best `per_tier` colleges by composite score in each tier, ordered reach, match, likely."""
    if not scores:
        return []

    frame = scores_to_frame(scores)
    tier_rank = {tier.value: index for index, tier in enumerate(TIER_ORDER)}
    frame["_tier_rank"] = frame["tier"].map(tier_rank)
    ordered = frame.sort_values(
        by=["_tier_rank", "composite_score", "position"],
        ascending=[True, False, True],
        kind="mergesort",
    )
    selected = ordered.groupby("_tier_rank", sort=True).head(per_tier)
    return [scores[int(position)] for position in selected["position"]]


def tier_counts(scores: Iterable[CollegeScore]) -> dict[str, int]:
    counts = {tier.value: 0 for tier in TIER_ORDER}
    for score in scores:
        counts[score.tier.value] += 1
    return counts
