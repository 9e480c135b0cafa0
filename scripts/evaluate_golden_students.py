from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import UTC, datetime, time
from pathlib import Path
from typing import Any

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from college_match.eval.golden_students import (
    EVAL_TODAY,
    GoldenStudent,
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
from college_match.finance.net_price import FinancialSummary, build_financial_summary
from college_match.io.catalog import load_colleges, load_employers, load_scholarships
from college_match.normalize.schema import College, CollegeScore, Employer, EmployerMatch, Scholarship, ScholarshipMatch
from college_match.rank.college_scoring import score_colleges, select_college_list
from college_match.rank.employer_matching import match_employers
from college_match.rank.policy import PolicyBundle, load_policy_bundle
from college_match.rank.scholarship_matching import calc_days_until_deadline, match_scholarships

logger = logging.getLogger("evaluate_golden_students")

MAX_SCHOLARSHIPS = 20


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Offline evaluation against golden student profiles.")
    parser.add_argument(
        "--colleges",
        type=Path,
        default=None,
        help="College catalog (.json or .parquet). Defaults to the built-in sample catalog.",
    )
    parser.add_argument(
        "--scholarships",
        type=Path,
        default=None,
        help="Scholarship catalog (.json or .parquet). Defaults to the built-in sample catalog.",
    )
    parser.add_argument(
        "--employers",
        type=Path,
        default=None,
        help="Employer catalog (.json). Defaults to the built-in sample employers.",
    )
    parser.add_argument(
        "--policy",
        type=Path,
        default=None,
        help="Optional JSON file overriding college, scholarship, urgency and finance policy constants.",
    )
    parser.add_argument(
        "--reports-dir",
        type=Path,
        default=ROOT_DIR / "reports",
        help="Output directory for markdown and JSON artifacts.",
    )
    return parser.parse_args(argv)


def _run_per_profile(
    students: list[GoldenStudent],
    colleges: list[College],
    scholarships: list[Scholarship],
    policies: PolicyBundle,
) -> tuple[dict[str, list[CollegeScore]], dict[str, list[ScholarshipMatch]], dict[str, list[FinancialSummary]]]:
    college_lists: dict[str, list[CollegeScore]] = {}
    matches: dict[str, list[ScholarshipMatch]] = {}
    summaries: dict[str, list[FinancialSummary]] = {}
    for student in students:
        selected = select_college_list(score_colleges(colleges, student.profile, policy=policies.college))
        college_lists[student.student_id] = selected
        matches[student.student_id] = match_scholarships(
            scholarships, student.profile, policy=policies.scholarship
        )[:MAX_SCHOLARSHIPS]
        summaries[student.student_id] = [
            build_financial_summary(score.college, student.profile, policy=policies.finance) for score in selected
        ]
    return college_lists, matches, summaries


def _employer_matches(
    students: list[GoldenStudent],
    college_lists: dict[str, list[CollegeScore]],
    employers: list[Employer],
) -> dict[str, list[EmployerMatch]]:
    matches: dict[str, list[EmployerMatch]] = {}
    for student in students:
        tiers = list(dict.fromkeys(score.tier for score in college_lists[student.student_id]))
        matches[student.student_id] = match_employers(employers, tiers, student.profile.intended_major)
    return matches


def _ranked_ids(college_lists: dict[str, list[CollegeScore]]) -> dict[str, list[str]]:
    return {profile_id: [score.college.college_id for score in scores] for profile_id, scores in college_lists.items()}


def _metrics_payload(
    college_lists: dict[str, list[CollegeScore]],
    matches: dict[str, list[ScholarshipMatch]],
    summaries: dict[str, list[FinancialSummary]],
    active_scholarship_count: int,
    rerun_ids: dict[str, list[str]],
) -> dict[str, Any]:
    return {
        "tier_distribution": tier_distribution(college_lists),
        "scholarship_coverage": scholarship_coverage(matches, active_scholarship_count),
        "affordability": affordability_stats(summaries),
        "ranking_stability": ranking_stability(_ranked_ids(college_lists), rerun_ids),
    }


def _write_json(path: Path, payload: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")


def _markdown_report(
    *,
    generated_at: str,
    policy_path: Path | None,
    college_count: int,
    metrics: dict[str, Any],
    students: list[GoldenStudent],
    college_lists: dict[str, list[CollegeScore]],
    matches: dict[str, list[ScholarshipMatch]],
    employer_matches: dict[str, list[EmployerMatch]],
) -> str:
    lines: list[str] = []
    lines.append("# Golden Student Offline Evaluation")
    lines.append("")
    lines.append(f"- Generated at (UTC): {generated_at}")
    lines.append(f"- Evaluation date: {EVAL_TODAY.isoformat()}")
    lines.append(f"- Catalog colleges: {college_count}")
    lines.append(f"- Golden profiles: {len(students)}")
    if policy_path is None:
        lines.append("- Policy: baseline defaults")
    else:
        lines.append(f"- Policy file: `{policy_path}`")
    lines.append("")
    lines.append("## Metrics Summary")
    lines.append("")

    totals = metrics["tier_distribution"]["totals"]
    lines.append(f"- Tier totals (reach/match/likely): {totals['reach']} / {totals['match']} / {totals['likely']}")
    missing_tier = metrics["tier_distribution"]["profiles_missing_a_tier"]
    lines.append(f"- Profiles missing a tier: {', '.join(missing_tier) if missing_tier else 'None'}")
    coverage = metrics["scholarship_coverage"]
    lines.append(
        f"- Scholarship coverage: {coverage['coverage']:.4f} "
        f"({coverage['unique_matched_count']} of {coverage['active_scholarship_count']})"
    )
    lines.append(f"- Average matches per profile: {coverage['avg_matches_per_profile']:.2f}")
    affordability = metrics["affordability"]
    lines.append(
        f"- Net price (mean/median): {affordability['mean_net_price']:.2f} / {affordability['median_net_price']:.2f}"
    )
    lines.append(f"- Mean four-year debt: {affordability['mean_debt']:.2f}")
    lines.append(f"- Ranking stability: {metrics['ranking_stability']['is_stable']}")
    lines.append("")
    lines.append("## Per Profile Results")
    lines.append("")

    for student in students:
        profile_id = student.student_id
        lines.append(f"### {profile_id}")
        lines.append("")
        lines.append(f"- Description: {student.description}")
        lines.append("")
        scores = college_lists.get(profile_id, [])
        if not scores:
            lines.append("No colleges selected for this profile.")
            lines.append("")
        else:
            lines.append("| college_id | tier | composite | admission | net_price | outcome | name |")
            lines.append("|---|---|---:|---:|---:|---:|---|")
            for score in scores:
                lines.append(
                    f"| {score.college.college_id} | {score.tier.value} | {score.composite_score} | "
                    f"{score.admission_score} | {score.net_price_score} | {score.outcome_score} | "
                    f"{score.college.name.replace('|', '/')} |"
                )
            lines.append("")

        profile_matches = matches.get(profile_id, [])
        lines.append(f"Scholarship matches: {len(profile_matches)}")
        for match in profile_matches:
            days = calc_days_until_deadline(
                match.scholarship.deadline_month,
                match.scholarship.deadline_day,
                now=datetime.combine(EVAL_TODAY, time()),
            )
            deadline = f"{days} days" if days is not None else "no deadline"
            lines.append(f"- {match.scholarship.name} ({match.score}, {deadline}): {', '.join(match.reasons)}")
        lines.append("")

        recruiters = employer_matches.get(profile_id, [])
        lines.append(f"Employer matches: {len(recruiters)}")
        for recruiter in recruiters:
            major_note = "major match" if recruiter.matched_major else "tier match only"
            lines.append(f"- {recruiter.employer.name} ({', '.join(recruiter.matched_tiers)}; {major_note})")
        lines.append("")

    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    policies = load_policy_bundle(args.policy)
    colleges = load_colleges(args.colleges) if args.colleges else get_sample_colleges()
    scholarships = load_scholarships(args.scholarships) if args.scholarships else get_sample_scholarships()
    employers = load_employers(args.employers) if args.employers else get_sample_employers()
    active_scholarships = [scholarship for scholarship in scholarships if scholarship.is_active]
    students = get_golden_students()

    college_lists, matches, summaries = _run_per_profile(students, colleges, scholarships, policies)
    rerun_lists, _, _ = _run_per_profile(students, colleges, scholarships, policies)
    employer_matches = _employer_matches(students, college_lists, employers)
    metrics = _metrics_payload(
        college_lists,
        matches,
        summaries,
        len(active_scholarships),
        _ranked_ids(rerun_lists),
    )

    timestamp = datetime.now(tz=UTC).strftime("%Y%m%d_%H%M%S")
    generated_at = datetime.now(tz=UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
    reports_dir = args.reports_dir if args.reports_dir.is_absolute() else ROOT_DIR / args.reports_dir
    markdown_path = reports_dir / f"golden_eval_{timestamp}.md"
    json_path = reports_dir / "artifacts" / f"golden_eval_{timestamp}.json"

    markdown_text = _markdown_report(
        generated_at=generated_at,
        policy_path=args.policy,
        college_count=len(colleges),
        metrics=metrics,
        students=students,
        college_lists=college_lists,
        matches=matches,
        employer_matches=employer_matches,
    )
    markdown_path.parent.mkdir(parents=True, exist_ok=True)
    markdown_path.write_text(markdown_text, encoding="utf-8")

    payload = {
        "generated_at": generated_at,
        "policy_path": str(args.policy) if args.policy else None,
        "policy": policies.to_dict(),
        "college_count": len(colleges),
        "golden_profiles_count": len(students),
        "metrics": metrics,
        "profiles": [
            {
                "student_id": student.student_id,
                "description": student.description,
                "college_list": [score.to_dict() for score in college_lists[student.student_id]],
                "scholarships": [
                    {
                        "scholarship_id": match.scholarship.scholarship_id,
                        "score": match.score,
                        "reasons": list(match.reasons),
                    }
                    for match in matches[student.student_id]
                ],
                "financial_summaries": [summary.to_dict() for summary in summaries[student.student_id]],
                "employers": [
                    {
                        "employer_id": match.employer.employer_id,
                        "matched_tiers": list(match.matched_tiers),
                        "matched_major": match.matched_major,
                    }
                    for match in employer_matches[student.student_id]
                ],
            }
            for student in students
        ],
    }
    _write_json(json_path, payload)

    logger.info("Wrote markdown report: %s", markdown_path)
    logger.info("Wrote JSON artifact: %s", json_path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
