from __future__ import annotations

from college_match.agents.runs import AgentContext, AgentRun, execute_run
from college_match.errors import EmptyCollegeListError, MissingIncomeBracketError
from college_match.finance.net_price import build_financial_summary


def run_financial_aid_agent(context: AgentContext, student_id: str) -> str:
    """Project yearly net price, four-year cost, debt and loan payment for every listed college."""

    def work(run: AgentRun) -> str:
        student = context.require_student(student_id)
        if student.income_bracket is None:
            raise MissingIncomeBracketError(
                "Student must complete financial onboarding before running the Financial Aid Agent"
            )

        entries = context.store.get_college_list(student_id)
        if not entries:
            raise EmptyCollegeListError()

        summaries = [
            build_financial_summary(entry.college, student, policy=context.policies.finance)
            for entry in entries
        ]
        context.store.replace_financial_summaries(student_id, summaries)

        with_data = sum(1 for summary in summaries if summary.net_price_per_year is not None)
        return (
            f"Computed financial summaries for {len(entries)} colleges "
            f"({with_data} with net price data for your income bracket)"
        )

    return execute_run(context, student_id, "financial_aid", work)
