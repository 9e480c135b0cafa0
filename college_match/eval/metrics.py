from __future__ import annotations

from collections import Counter
from typing import Any

import pandas as pd

from college_match.finance.net_price import FinancialSummary
from college_match.normalize.schema import CollegeScore, ScholarshipMatch
from college_match.rank.college_scoring import TIER_ORDER


def tier_distribution(per_profile_lists: dict[str, list[CollegeScore]]) -> dict[str, Any]:
    totals: Counter[str] = Counter({tier.value: 0 for tier in TIER_ORDER})
    per_profile: dict[str, dict[str, int]] = {}
    for profile_id, scores in per_profile_lists.items():
        counts = Counter(score.tier.value for score in scores)
        per_profile[profile_id] = {tier.value: int(counts.get(tier.value, 0)) for tier in TIER_ORDER}
        totals.update(counts)

    return {
        "totals": {tier.value: int(totals[tier.value]) for tier in TIER_ORDER},
        "per_profile": per_profile,
        "profiles_missing_a_tier": sorted(
            profile_id for profile_id, counts in per_profile.items() if min(counts.values()) == 0
        ),
    }


def scholarship_coverage(
    per_profile_matches: dict[str, list[ScholarshipMatch]],
    active_scholarship_count: int,
) -> dict[str, Any]:
    unique_ids: set[str] = set()
    total_matches = 0
    for matches in per_profile_matches.values():
        total_matches += len(matches)
        unique_ids.update(match.scholarship.scholarship_id for match in matches)

    profile_count = len(per_profile_matches)
    return {
        "unique_matched_count": len(unique_ids),
        "active_scholarship_count": active_scholarship_count,
        "coverage": (len(unique_ids) / active_scholarship_count) if active_scholarship_count else 0.0,
        "avg_matches_per_profile": (total_matches / profile_count) if profile_count else 0.0,
        "profiles_without_matches": sorted(
            profile_id for profile_id, matches in per_profile_matches.items() if not matches
        ),
    }


def affordability_stats(per_profile_summaries: dict[str, list[FinancialSummary]]) -> dict[str, Any]:
    rows = [
        {
            "net_price_per_year": summary.net_price_per_year,
            "total_debt_estimate": summary.total_debt_estimate,
            "monthly_payment": summary.monthly_payment,
        }
        for summaries in per_profile_summaries.values()
        for summary in summaries
    ]
    frame = pd.DataFrame(rows, columns=["net_price_per_year", "total_debt_estimate", "monthly_payment"], dtype="float64")
    with_price = frame.dropna(subset=["net_price_per_year"])
    if with_price.empty:
        return {
            "count": int(len(frame)),
            "with_net_price": 0,
            "mean_net_price": 0.0,
            "median_net_price": 0.0,
            "mean_debt": 0.0,
            "max_monthly_payment": 0.0,
        }

    return {
        "count": int(len(frame)),
        "with_net_price": int(len(with_price)),
        "mean_net_price": float(with_price["net_price_per_year"].mean()),
        "median_net_price": float(with_price["net_price_per_year"].median()),
        "mean_debt": float(with_price["total_debt_estimate"].mean()),
        "max_monthly_payment": float(with_price["monthly_payment"].max()),
    }


def ranking_stability(
    run_one: dict[str, list[str]],
    run_two: dict[str, list[str]],
) -> dict[str, Any]:
    mismatches: list[dict[str, Any]] = []
    for profile_id in sorted(set(run_one) | set(run_two)):
        ids_one = run_one.get(profile_id, [])
        ids_two = run_two.get(profile_id, [])
        if ids_one != ids_two:
            mismatches.append({"profile_id": profile_id, "run_one": ids_one, "run_two": ids_two})

    is_stable = len(mismatches) == 0
    if not is_stable:
        raise AssertionError(f"Ranking stability check failed: {mismatches}")

    return {"is_stable": is_stable, "mismatches": mismatches}
