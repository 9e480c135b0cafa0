from __future__ import annotations

from college_match.narrative.explanations import (
    build_explanation_prompt,
    explain_in_batches,
    fallback_explanation,
    generate_explanations,
    parse_numbered_explanations,
)
from college_match.normalize.schema import College, CollegeScore, CollegeTier, IncomeBracket, StudentProfile

STUDENT = StudentProfile(
    gpa=3.4,
    grade_level=12,
    state_of_residence="FL",
    income_bracket=IncomeBracket.B0_30K,
    is_first_gen=True,
    intended_major="Computer Science",
)


def _score(college_id: str, tier: CollegeTier = CollegeTier.MATCH) -> CollegeScore:
    return CollegeScore(
        college=College(college_id=college_id, name=f"College {college_id}", city="Tampa", state="FL"),
        admission_score=48,
        net_price_score=60,
        outcome_score=55,
        composite_score=55,
        tier=tier,
    )


class _ScriptedGenerator:
    def __init__(self, responses: list[str]) -> None:
        self.responses = list(responses)
        self.prompts: list[str] = []

    def generate(self, prompt: str, *, max_tokens: int = 2048) -> str:
        self.prompts.append(prompt)
        return self.responses.pop(0)


class _BrokenGenerator:
    def generate(self, prompt: str, *, max_tokens: int = 2048) -> str:
        raise ConnectionError("unreachable")


def test_prompt_mentions_profile_and_numbered_colleges() -> None:
    prompt = build_explanation_prompt([_score("a"), _score("b", CollegeTier.REACH)], STUDENT)

    assert "Grade 12, GPA 3.4, state FL" in prompt
    assert "first-generation" in prompt
    assert "Intended major: Computer Science." in prompt
    assert "1. College a (Tampa, FL): 48% acceptance rate" in prompt
    assert "net price data not available" in prompt
    assert "2. College b" in prompt
    assert "Tier: reach." in prompt


def test_parse_numbered_explanations_ignores_noise_and_out_of_range() -> None:
    text = "Here you go:\n1. First one.\n  2.   Second one.  \n7. Stray.\n0. Zero.\nnot numbered"

    assert parse_numbered_explanations(text, 3) == {0: "First one.", 1: "Second one."}


def test_missing_numbers_fall_back_to_template() -> None:
    scores = [_score("a"), _score("b")]
    generator = _ScriptedGenerator(["2. Only the second."])

    explanations = generate_explanations(scores, STUDENT, generator)

    assert explanations == {0: fallback_explanation(scores[0]), 1: "Only the second."}


def test_generator_failure_uses_templates_for_every_college() -> None:
    scores = [_score("a"), _score("b")]

    explanations = generate_explanations(scores, STUDENT, _BrokenGenerator())

    assert explanations[0] == "College a is a match school for you based on its 48% acceptance rate and affordability for your income bracket."
    assert explanations[1] == fallback_explanation(scores[1])


def test_no_generator_and_empty_input() -> None:
    assert generate_explanations([], STUDENT, _BrokenGenerator()) == {}
    assert generate_explanations([_score("a")], STUDENT, None) == {0: fallback_explanation(_score("a"))}


def test_explain_in_batches_calls_generator_once_per_batch() -> None:
    scores = [_score(str(index)) for index in range(5)]
    generator = _ScriptedGenerator(["1. a\n2. b", "1. c\n2. d", "1. e"])

    explanations = explain_in_batches(scores, STUDENT, generator, batch_size=2)

    assert explanations == ["a", "b", "c", "d", "e"]
    assert len(generator.prompts) == 3
    assert "1. College 4" in generator.prompts[2]
