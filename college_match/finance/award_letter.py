from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Literal

from college_match.narrative.http import TextGenerator
from college_match.rank.numeric import round_half_up

logger = logging.getLogger(__name__)

AidCategory = Literal["grant", "scholarship", "loan", "work_study"]
AID_CATEGORIES: tuple[str, ...] = ("grant", "scholarship", "loan", "work_study")
FREE_MONEY_CATEGORIES = ("grant", "scholarship")
_CODE_FENCE_PATTERN = re.compile(r"```(?:json)?\n?")

PARSE_PROMPT = """You are a financial aid award letter parser helping first-generation college students understand their aid packages.

Parse the following award letter text and return a JSON array of aid components.

Rules:
- "grant" = free money from school or government (Pell Grant, institutional grants, state grants); student does NOT repay
- "scholarship" = merit or outside scholarships; student does NOT repay
- "loan" = any loan (subsidized, unsubsidized, PLUS, private); student MUST repay
- "work_study" = work-study funds the student earns by working
- mustRepay = true ONLY for loans
- renewable = true if the letter indicates the award continues in future years
- amount must be an integer (remove $ and commas)

Some award letters present loans as "aid" without using the word "loan". Terms like "Direct Subsidized", "Direct Unsubsidized", "Federal PLUS" or "Perkins", or any repayable amount, are loans.

Return ONLY a valid JSON array with no markdown and no explanation:
[{{"name":"...","amount":0,"category":"grant","mustRepay":false,"renewable":true}}]

Award letter text:
{text}"""


@dataclass(frozen=True, slots=True)
class AidComponent:
    name: str
    amount: int
    category: AidCategory
    must_repay: bool
    renewable: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "amount": self.amount,
            "category": self.category,
            "must_repay": self.must_repay,
            "renewable": self.renewable,
        }


@dataclass(frozen=True, slots=True)
class ParsedAwardLetter:
    components: tuple[AidComponent, ...] = field(default_factory=tuple)
    free_money_total: int = 0
    loan_total: int = 0
    work_study_total: int = 0
    out_of_pocket: float = 0


def summarize_components(
    components: list[AidComponent] | tuple[AidComponent, ...],
    cost_of_attendance: float | None = None,
) -> ParsedAwardLetter:
    free_money = sum(c.amount for c in components if c.category in FREE_MONEY_CATEGORIES)
    loans = sum(c.amount for c in components if c.category == "loan")
    work_study = sum(c.amount for c in components if c.category == "work_study")
    # Without a cost of attendance there is nothing to subtract from.
    out_of_pocket = max(0, cost_of_attendance - free_money) if cost_of_attendance is not None else 0
    return ParsedAwardLetter(
        components=tuple(components),
        free_money_total=free_money,
        loan_total=loans,
        work_study_total=work_study,
        out_of_pocket=out_of_pocket,
    )


def _coerce_component(item: Any) -> AidComponent | None:
    if not isinstance(item, dict):
        return None
    name = item.get("name")
    amount = item.get("amount")
    category = item.get("category")
    if not isinstance(name, str) or category not in AID_CATEGORIES:
        return None
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        return None
    return AidComponent(
        name=name.strip(),
        amount=round_half_up(float(amount)),
        category=category,
        must_repay=category == "loan",
        renewable=bool(item.get("renewable")),
    )


def parse_award_letter_response(text: str) -> list[AidComponent]:
    """Extract aid components from a model response; raises ValueError if no JSON array is present."""
    cleaned = _CODE_FENCE_PATTERN.sub("", text).strip()
    start = cleaned.find("[")
    end = cleaned.rfind("]")
    if start == -1 or end == -1 or end < start:
        raise ValueError("Award letter response does not contain a JSON array.")

    parsed = json.loads(cleaned[start : end + 1])
    if not isinstance(parsed, list):
        raise ValueError("Award letter response is not a JSON array.")
    return [component for component in (_coerce_component(item) for item in parsed) if component]


def parse_award_letter(
    raw_text: str,
    generator: TextGenerator,
    cost_of_attendance: float | None = None,
    *,
    max_tokens: int = 2048,
) -> ParsedAwardLetter:
    if not raw_text.strip():
        return ParsedAwardLetter()

    try:
        response = generator.generate(PARSE_PROMPT.format(text=raw_text), max_tokens=max_tokens)
        components = parse_award_letter_response(response)
    except Exception:
        logger.warning("Award letter parsing failed; returning an empty summary.", exc_info=True)
        return ParsedAwardLetter()

    return summarize_components(components, cost_of_attendance)
