from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from datetime import date, datetime, time
from pathlib import Path
from typing import Any, Callable

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from college_match.agents import (
    AgentContext,
    InMemoryDerivedStore,
    employer_matches_for_student,
    run_application_agent,
    run_career_agent,
    run_discovery_agent,
    run_financial_aid_agent,
    run_scholarship_agent,
)
from college_match.career.wages import WageData, fetch_occupation_wages
from college_match.errors import CollegeMatchError
from college_match.io.catalog import load_colleges, load_employers, load_scholarships, load_students, write_json_atomic
from college_match.narrative.http import HttpTextGenerator
from college_match.rank.policy import load_policy_bundle
from college_match.rank.scholarship_matching import format_award_amount
from college_match.report.caseload import build_student_status, snapshot_from_store
from college_match.report.formatting import format_money, reasons_to_text

logger = logging.getLogger("run_student_plan")

TEXT_API_KEY_ENV = "COLLEGE_MATCH_TEXT_API_KEY"
AGENT_SEQUENCE: tuple[tuple[str, Callable[[AgentContext, str], str]], ...] = (
    ("discovery", run_discovery_agent),
    ("application_management", run_application_agent),
    ("scholarships", run_scholarship_agent),
    ("financial_aid", run_financial_aid_agent),
    ("career", run_career_agent),
)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run every planning agent for one student from catalog files.")
    parser.add_argument("--student-id", required=True, help="Student to plan for.")
    parser.add_argument("--students", type=Path, required=True, help="Student profiles (.json or .parquet).")
    parser.add_argument("--colleges", type=Path, required=True, help="College catalog (.json or .parquet).")
    parser.add_argument("--scholarships", type=Path, default=None, help="Scholarship catalog (.json or .parquet).")
    parser.add_argument("--employers", type=Path, default=None, help="Employer catalog (.json).")
    parser.add_argument(
        "--policy",
        type=Path,
        default=None,
        help="Optional JSON file overriding college, scholarship, urgency and finance policy constants.",
    )
    parser.add_argument(
        "--text-endpoint",
        type=str,
        default=None,
        help=f"Text generation endpoint for explanations. API key is read from ${TEXT_API_KEY_ENV}.",
    )
    parser.add_argument(
        "--fetch-wages",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Fetch live wage data for career options. Disabled by default.",
    )
    parser.add_argument(
        "--today",
        type=date.fromisoformat,
        default=None,
        help="Planning date in YYYY-MM-DD format. Defaults to the current local date.",
    )
    parser.add_argument("--output", type=Path, default=None, help="Optional JSON output path for the plan.")
    return parser.parse_args(argv)


def _offline_wages(occupation_code: str) -> WageData:
    return WageData()


def build_context(args: argparse.Namespace) -> AgentContext:
    store = InMemoryDerivedStore(
        students=load_students(args.students),
        colleges=load_colleges(args.colleges),
        scholarships=load_scholarships(args.scholarships) if args.scholarships else (),
        employers=load_employers(args.employers) if args.employers else (),
    )
    text_generator = None
    if args.text_endpoint:
        text_generator = HttpTextGenerator(endpoint_url=args.text_endpoint, api_key=os.environ.get(TEXT_API_KEY_ENV))

    if args.today is not None:
        planning_now = datetime.combine(args.today, time(hour=9))

        def clock() -> datetime:
            return planning_now
    else:
        clock = datetime.now

    return AgentContext(
        store=store,
        text_generator=text_generator,
        wage_fetcher=fetch_occupation_wages if args.fetch_wages else _offline_wages,
        policies=load_policy_bundle(args.policy),
        clock=clock,
    )


def run_all_agents(context: AgentContext, student_id: str) -> dict[str, str]:
    """Run each agent in order; a failed agent is recorded and the next one still runs."""
    outcomes: dict[str, str] = {}
    for agent_type, runner in AGENT_SEQUENCE:
        try:
            outcomes[agent_type] = runner(context, student_id)
        except CollegeMatchError as exc:
            outcomes[agent_type] = f"failed: {exc.message}"
    return outcomes


def build_plan_payload(context: AgentContext, student_id: str, outcomes: dict[str, str]) -> dict[str, Any]:
    store = context.store
    status = build_student_status(
        snapshot_from_store(store, student_id),
        now=context.clock(),
        policy=context.policies.urgency,
    )
    career = store.get_career_snapshot(student_id)
    return {
        "student_id": student_id,
        "outcomes": outcomes,
        "status": status.to_dict(),
        "college_list": [
            {
                "college_id": entry.college.college_id,
                "name": entry.college.name,
                "tier": entry.tier.value,
                "composite_score": entry.composite_score,
                "explanation": entry.explanation,
            }
            for entry in store.get_college_list(student_id)
        ],
        "application_tasks": [task.to_dict() for task in store.get_application_tasks(student_id)],
        "scholarships": [
            {
                "scholarship_id": match.scholarship.scholarship_id,
                "name": match.scholarship.name,
                "score": match.score,
                "award": format_award_amount(match.scholarship),
                "reasons": reasons_to_text(match.reasons),
            }
            for match in store.get_scholarship_matches(student_id)
        ],
        "financial_summaries": [summary.to_dict() for summary in store.get_financial_summaries(student_id)],
        "career": career.to_dict() if career else None,
        "employers": [
            {
                "employer_id": match.employer.employer_id,
                "name": match.employer.name,
                "matched_tiers": list(match.matched_tiers),
                "matched_major": match.matched_major,
            }
            for match in employer_matches_for_student(context, student_id)
        ],
        "runs": [run.to_dict() for run in store.list_runs(student_id)],
    }


def _print_plan(payload: dict[str, Any]) -> None:
    print(f"Plan for {payload['student_id']}")
    for agent_type, outcome in payload["outcomes"].items():
        print(f"  {agent_type}: {outcome}")
    status = payload["status"]
    print(f"  urgency: {status['urgency_score']} ({status['flagged_reason']})")
    for summary in payload["financial_summaries"]:
        print(
            f"  {summary['college_name']}: {format_money(summary['net_price_per_year'], suffix='/yr')}, "
            f"debt {format_money(summary['total_debt_estimate'])}, "
            f"{format_money(summary['monthly_payment'], suffix='/mo')}"
        )


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    context = build_context(args)
    context.require_student(args.student_id)
    outcomes = run_all_agents(context, args.student_id)
    payload = build_plan_payload(context, args.student_id, outcomes)

    if args.output is not None:
        write_json_atomic(payload, args.output)
        logger.info("Wrote plan: %s", args.output)
    _print_plan(payload)
    return 0 if not any(outcome.startswith("failed:") for outcome in outcomes.values()) else 1


if __name__ == "__main__":
    raise SystemExit(main())
