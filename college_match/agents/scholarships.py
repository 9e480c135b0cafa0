from __future__ import annotations

from college_match.agents.runs import AgentContext, AgentRun, execute_run
from college_match.errors import NoActiveScholarshipsError
from college_match.rank.scholarship_matching import match_scholarships

MAX_MATCHES = 20


def run_scholarship_agent(context: AgentContext, student_id: str, *, max_matches: int = MAX_MATCHES) -> str:
    def work(run: AgentRun) -> str:
        student = context.require_student(student_id)
        scholarships = context.store.list_scholarships(active_only=True)
        if not scholarships:
            raise NoActiveScholarshipsError()

        top_matches = match_scholarships(scholarships, student, policy=context.policies.scholarship)[:max_matches]
        context.store.replace_scholarship_matches(student_id, top_matches)
        return f"Matched {len(top_matches)} scholarships from {len(scholarships)} evaluated"

    return execute_run(context, student_id, "scholarships", work)
