from __future__ import annotations

import json

import pytest

from college_match.finance.award_letter import (
    AidComponent,
    parse_award_letter,
    parse_award_letter_response,
    summarize_components,
)


class _StaticGenerator:
    def __init__(self, response: str) -> None:
        self.response = response
        self.prompts: list[str] = []

    def generate(self, prompt: str, *, max_tokens: int = 1024) -> str:
        self.prompts.append(prompt)
        return self.response


class _FailingGenerator:
    def generate(self, prompt: str, *, max_tokens: int = 1024) -> str:
        raise RuntimeError("service unavailable")


LETTER_RESPONSE = json.dumps(
    [
        {"name": "Federal Pell Grant", "amount": 7395, "category": "grant", "mustRepay": False, "renewable": True},
        {"name": "Presidential Scholarship", "amount": 5000, "category": "scholarship", "renewable": True},
        {"name": "Direct Subsidized", "amount": 3500, "category": "loan", "mustRepay": False},
        {"name": "Federal Work-Study", "amount": 2000.4, "category": "work_study"},
        {"name": "Mystery", "amount": 100, "category": "gift"},
        {"name": "Broken", "amount": "lots", "category": "grant"},
    ]
)


def test_parse_award_letter_totals_by_category() -> None:
    generator = _StaticGenerator(f"```json\n{LETTER_RESPONSE}\n```")

    parsed = parse_award_letter("Pell Grant $7,395 ...", generator, cost_of_attendance=30_000)

    assert [component.name for component in parsed.components] == [
        "Federal Pell Grant",
        "Presidential Scholarship",
        "Direct Subsidized",
        "Federal Work-Study",
    ]
    assert parsed.free_money_total == 12_395
    assert parsed.loan_total == 3_500
    assert parsed.work_study_total == 2_000
    assert parsed.out_of_pocket == 30_000 - 12_395
    assert "Pell Grant $7,395" in generator.prompts[0]


def test_loans_always_must_be_repaid() -> None:
    components = parse_award_letter_response(LETTER_RESPONSE)

    loan = next(component for component in components if component.category == "loan")
    grant = next(component for component in components if component.category == "grant")
    assert loan.must_repay is True
    assert grant.must_repay is False


def test_out_of_pocket_never_negative_and_zero_without_cost() -> None:
    components = [AidComponent("Grant", 40_000, "grant", False, True)]

    assert summarize_components(components, 30_000).out_of_pocket == 0
    assert summarize_components(components).out_of_pocket == 0


def test_blank_letter_skips_generator() -> None:
    generator = _StaticGenerator(LETTER_RESPONSE)

    parsed = parse_award_letter("   ", generator, cost_of_attendance=20_000)

    assert parsed.components == ()
    assert generator.prompts == []


def test_generator_failure_or_garbage_returns_empty_summary() -> None:
    assert parse_award_letter("letter", _FailingGenerator(), 20_000).components == ()
    assert parse_award_letter("letter", _StaticGenerator("no json here"), 20_000).free_money_total == 0


def test_response_without_array_raises() -> None:
    with pytest.raises(ValueError):
        parse_award_letter_response('{"name": "Pell"}')
