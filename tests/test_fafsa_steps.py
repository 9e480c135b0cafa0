from __future__ import annotations

from college_match.applications.fafsa_steps import (
    FAFSA_STEPS,
    TOTAL_FAFSA_STEPS,
    fafsa_status,
    steps_with_progress,
)


def test_guide_has_twelve_numbered_steps() -> None:
    assert TOTAL_FAFSA_STEPS == 12
    assert [step.step for step in FAFSA_STEPS] == list(range(1, 13))


def test_fafsa_status_thresholds() -> None:
    assert fafsa_status(0) == "not-started"
    assert fafsa_status(1) == "in-progress"
    assert fafsa_status(11) == "in-progress"
    assert fafsa_status(12) == "complete"
    assert fafsa_status(3, total_steps=3) == "complete"


def test_steps_with_progress_marks_completed_steps() -> None:
    steps = steps_with_progress([1, 2, 2, 5])

    assert [step["step"] for step in steps if step["is_completed"]] == [1, 2, 5]
    assert steps[0]["title"] == "Create Your FSA ID"
    assert isinstance(steps[1]["documents"], list)
    assert steps[1]["url"] is None
