from __future__ import annotations

import logging

from college_match.agents.runs import AgentContext, AgentRun, execute_run
from college_match.errors import MissingIncomeBracketError, NoCandidateCollegesError
from college_match.narrative.explanations import EXPLANATION_BATCH_SIZE, explain_in_batches
from college_match.normalize.schema import College, CollegeListEntry, Ownership, StudentProfile
from college_match.rank.college_scoring import (
    COLLEGES_PER_TIER,
    score_colleges,
    select_college_list,
    tier_counts,
)

logger = logging.getLogger(__name__)

_OWNERSHIP_PREFERENCES = {
    "public": Ownership.PUBLIC,
    "private": Ownership.PRIVATE_NONPROFIT,
}


def candidate_colleges(colleges: list[College], student: StudentProfile) -> list[College]:
    """Narrow the catalog by the student's in-state and public/private preferences."""
    candidates = colleges
    if student.location_preference == "in_state" and student.state_of_residence:
        candidates = [college for college in candidates if college.state == student.state_of_residence]
    ownership = _OWNERSHIP_PREFERENCES.get(student.college_type_preference or "")
    if ownership is not None:
        candidates = [college for college in candidates if college.ownership == ownership]
    return candidates


def run_discovery_agent(
    context: AgentContext,
    student_id: str,
    *,
    per_tier: int = COLLEGES_PER_TIER,
    batch_size: int = EXPLANATION_BATCH_SIZE,
) -> str:
    def work(run: AgentRun) -> str:
        student = context.require_student(student_id)
        if student.income_bracket is None:
            raise MissingIncomeBracketError(
                "Student must complete onboarding before running the discovery agent"
            )

        candidates = candidate_colleges(context.store.list_colleges(), student)
        if not candidates:
            raise NoCandidateCollegesError()

        scored = score_colleges(candidates, student, policy=context.policies.college)
        selected = select_college_list(scored, per_tier=per_tier)
        logger.info("Scored %d candidate colleges for %s; kept %d.", len(scored), student_id, len(selected))

        explanations = explain_in_batches(selected, student, context.text_generator, batch_size=batch_size)
        context.store.replace_college_list(
            student_id,
            [CollegeListEntry.from_score(score, explanation) for score, explanation in zip(selected, explanations)],
        )

        counts = tier_counts(selected)
        return (
            f"Found {len(selected)} colleges: {counts['reach']} reach, "
            f"{counts['match']} match, {counts['likely']} likely"
        )

    return execute_run(context, student_id, "discovery", work)
