from __future__ import annotations

import logging
import re

from college_match.narrative.http import TextGenerator
from college_match.normalize.schema import CollegeScore, IncomeBracket, StudentProfile
from college_match.rank.college_scoring import get_net_price
from college_match.rank.numeric import round_half_up

logger = logging.getLogger(__name__)

EXPLANATION_BATCH_SIZE = 10
DISPLAY_BRACKET = IncomeBracket.B48_75K
_NUMBERED_LINE = re.compile(r"^(\d+)\.\s+(.+)")

PROMPT_TEMPLATE = """You are a friendly, encouraging college counselor writing personalized college list explanations for a high school student.

Student profile: Grade {grade}, GPA {gpa}, state {state}. {first_gen_note} {major_note}

Here are the colleges on their list with data:
{colleges}

Write a 2-3 sentence plain-English explanation for EACH college, numbered to match. For each, explain:
- Why it appears on their list (admission likelihood, affordability, or strong outcomes)
- The single most compelling reason to consider it
- One caveat if relevant (highly competitive, missing net price data, etc.)

Rules:
- Use plain language. Never use jargon without explaining it.
- Address the student directly as "you."
- Each explanation must be under 65 words.
- Do not repeat the same opening phrase across explanations.

Format your response exactly as:
1. [explanation for college 1]
2. [explanation for college 2]
(continue for all colleges)"""


def _describe_score(position: int, score: CollegeScore, bracket: IncomeBracket) -> str:
    college = score.college
    price = get_net_price(college, bracket)
    net_price = f"${price:,.0f}/year" if price else "net price data not available"
    completion = (
        f"{round_half_up(college.completion_rate * 100)}% graduation rate"
        if college.completion_rate
        else "graduation rate unavailable"
    )
    earnings = (
        f"${college.median_earnings_10yr:,} median earnings 10 years out"
        if college.median_earnings_10yr
        else "earnings data unavailable"
    )
    location = ", ".join(part for part in (college.city, college.state) if part) or "location unknown"
    return (
        f"{position}. {college.name} ({location}): {score.admission_score}% acceptance rate, "
        f"net price {net_price} for your income bracket, {completion}, {earnings}. "
        f"Tier: {score.tier.value}."
    )


def build_explanation_prompt(scores: list[CollegeScore], student: StudentProfile) -> str:
    bracket = student.income_bracket or DISPLAY_BRACKET
    colleges = "\n".join(_describe_score(index + 1, score, bracket) for index, score in enumerate(scores))
    return PROMPT_TEMPLATE.format(
        grade=student.grade_level if student.grade_level is not None else "unknown",
        gpa=student.gpa if student.gpa is not None else "unknown",
        state=student.state_of_residence or "unknown",
        first_gen_note=(
            "This student is first-generation (neither parent has a 4-year degree)."
            if student.is_first_gen
            else ""
        ),
        major_note=f"Intended major: {student.intended_major}." if student.intended_major else "",
        colleges=colleges,
    )


def parse_numbered_explanations(text: str, count: int) -> dict[int, str]:
    """Map a 1-indexed numbered list onto 0-based positions, ignoring out-of-range numbers."""
    parsed: dict[int, str] = {}
    for line in text.splitlines():
        match = _NUMBERED_LINE.match(line.strip())
        if not match:
            continue
        index = int(match.group(1)) - 1
        if 0 <= index < count:
            parsed[index] = match.group(2).strip()
    return parsed


def fallback_explanation(score: CollegeScore) -> str:
    return (
        f"{score.college.name} is a {score.tier.value} school for you based on its "
        f"{score.admission_score}% acceptance rate and affordability for your income bracket."
    )


def generate_explanations(
    scores: list[CollegeScore],
    student: StudentProfile,
    generator: TextGenerator | None,
    *,
    max_tokens: int = 2048,
) -> dict[int, str]:
    if not scores:
        return {}

    parsed: dict[int, str] = {}
    if generator is not None:
        try:
            text = generator.generate(build_explanation_prompt(scores, student), max_tokens=max_tokens)
            parsed = parse_numbered_explanations(text, len(scores))
        except Exception:
            logger.warning(
                "Explanation generation failed for %d colleges; using templated text.",
                len(scores),
                exc_info=True,
            )

    return {index: parsed.get(index) or fallback_explanation(score) for index, score in enumerate(scores)}


def explain_in_batches(
    scores: list[CollegeScore],
    student: StudentProfile,
    generator: TextGenerator | None,
    *,
    batch_size: int = EXPLANATION_BATCH_SIZE,
) -> list[str]:
    explanations: list[str] = []
    for start in range(0, len(scores), batch_size):
        batch = scores[start : start + batch_size]
        batch_explanations = generate_explanations(batch, student, generator)
        explanations.extend(batch_explanations[index] for index in range(len(batch)))
    return explanations
