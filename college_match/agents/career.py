from __future__ import annotations

from college_match.agents.runs import AgentContext, AgentRun, execute_run
from college_match.agents.store import CareerSnapshot
from college_match.career.pathways import find_pathway_for_major
from college_match.career.wages import MAX_WAGE_CODES, collect_wage_data
from college_match.errors import NoIntendedMajorError
from college_match.normalize.schema import EmployerMatch
from college_match.rank.employer_matching import match_employers


def run_career_agent(context: AgentContext, student_id: str) -> str:
    def work(run: AgentRun) -> str:
        student = context.require_student(student_id)
        if not student.intended_major:
            raise NoIntendedMajorError()

        pathway = find_pathway_for_major(student.intended_major)
        wage_data = {}
        if pathway is not None:
            codes = [career.occupation_code for career in pathway.careers[:MAX_WAGE_CODES]]
            wage_data = collect_wage_data(codes, context.wage_fetcher)

        context.store.save_career_snapshot(
            CareerSnapshot(
                student_id=student_id,
                major=student.intended_major,
                pathway=pathway,
                wage_data=wage_data,
                last_refreshed_at=context.clock(),
            )
        )
        career_count = len(pathway.careers) if pathway else 0
        return (
            f"Career snapshot updated for major: {student.intended_major} "
            f"({career_count} career options, {len(wage_data)} wage datasets cached)"
        )

    return execute_run(context, student_id, "career", work)


def employer_matches_for_student(context: AgentContext, student_id: str) -> list[EmployerMatch]:
    """Employers recruiting from the tiers on the student's current college list."""
    student = context.require_student(student_id)
    tiers = list(dict.fromkeys(entry.tier for entry in context.store.get_college_list(student_id)))
    if not tiers:
        return []
    return match_employers(context.store.list_employers(), tiers, student.intended_major)
