from __future__ import annotations

from typing import Iterable

from college_match.normalize.schema import CollegeTier, Employer, EmployerMatch, RecruitingPref


def _tier_value(tier: CollegeTier | str) -> str:
    return tier.value if isinstance(tier, CollegeTier) else str(tier)


def _major_matches(pref: RecruitingPref, major_lower: str) -> bool:
    # An empty keyword list means every major is welcome.
    if not pref.major_keywords:
        return True
    return any(keyword.lower() in major_lower for keyword in pref.major_keywords)


def match_employer(
    employer: Employer,
    student_tiers: Iterable[CollegeTier | str],
    student_major: str,
) -> EmployerMatch | None:
    """Return the first active recruiting preference that overlaps the student's tiers."""
    tiers = [_tier_value(tier) for tier in student_tiers]
    major_lower = student_major.lower()
    for pref in employer.recruiting_prefs:
        if not pref.is_active:
            continue
        matched_tiers = tuple(tier for tier in tiers if tier in pref.college_tiers)
        if not matched_tiers:
            continue
        return EmployerMatch(
            employer=employer,
            pref=pref,
            matched_tiers=matched_tiers,
            matched_major=_major_matches(pref, major_lower),
        )
    return None


def match_employers(
    employers: Iterable[Employer],
    student_tiers: Iterable[CollegeTier | str],
    student_major: str,
) -> list[EmployerMatch]:
    tiers = list(student_tiers)
    matches = [
        match
        for match in (match_employer(employer, tiers, student_major) for employer in employers)
        if match is not None
    ]
    return sorted(
        matches,
        key=lambda match: (not match.matched_major, match.employer.name.casefold(), match.employer.name),
    )
