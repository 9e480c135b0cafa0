from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal

FafsaStatus = Literal["not-started", "in-progress", "complete"]


@dataclass(frozen=True, slots=True)
class FafsaStep:
    step: int
    title: str
    description: str
    documents: tuple[str, ...] = ()
    tips: tuple[str, ...] = ()
    url: str | None = None


FAFSA_STEPS: tuple[FafsaStep, ...] = (
    FafsaStep(
        step=1,
        title="Create Your FSA ID",
        description=(
            "You and one parent (if dependent) each need a separate FSA ID, the username and "
            "password that serves as your legal signature."
        ),
        documents=("Social Security Number", "Email address"),
        tips=(
            "Each person needs their own email address.",
            "SSN verification can take up to 3 days, so do this first.",
        ),
        url="https://studentaid.gov/fsa-id/create-account/launch",
    ),
    FafsaStep(
        step=2,
        title="Gather Your Documents",
        description="Collect everything you need before starting the form to avoid errors.",
        documents=(
            "Your Social Security Number",
            "Your parent's Social Security Number (if dependent)",
            "Federal tax returns from two years ago",
            "W-2 forms and records of other income",
            "Bank statements and investment records",
        ),
        tips=(
            "The FAFSA uses prior-prior year tax information.",
            "A significant change in family finances can be appealed through professional judgment.",
        ),
    ),
    FafsaStep(
        step=3,
        title="Start Your FAFSA at studentaid.gov",
        description="Log in with your FSA ID and start a new FAFSA for the correct award year.",
        tips=(
            "Pick the award year that matches your fall enrollment.",
            "Save as you go; the form times out after 45 minutes.",
        ),
        url="https://studentaid.gov/h/apply-for-aid/fafsa",
    ),
    FafsaStep(
        step=4,
        title="Enter Your Student Information",
        description="Provide your personal information exactly as it appears on your Social Security card.",
        documents=("Social Security card", "Driver's license or state ID"),
        tips=("Your name must match your Social Security card exactly.",),
    ),
    FafsaStep(
        step=5,
        title="Determine Your Dependency Status",
        description="Answer the dependency questions. Most high school seniors are dependent students.",
        tips=("Living on your own does not make you independent under FAFSA rules.",),
    ),
    FafsaStep(
        step=6,
        title="Enter Parent Information",
        description="Provide information for the parent the FAFSA rules ask you to report.",
        documents=(
            "Parent's Social Security Number",
            "Parent's FSA ID login",
            "Parent's tax returns and W-2s",
        ),
        tips=("With divorced parents, report the parent you lived with most in the past 12 months.",),
    ),
    FafsaStep(
        step=7,
        title="Link IRS Tax Data",
        description="Use the IRS direct data exchange to import tax information and reduce errors.",
        tips=("Importing IRS data lowers the chance of being selected for verification.",),
    ),
    FafsaStep(
        step=8,
        title="Enter Financial Information",
        description="Report savings and investments. Do not include retirement accounts or your primary home.",
        documents=("Bank account balances", "Investment account balances", "529 plan balances"),
        tips=("Report asset values as of the day you sign.",),
    ),
    FafsaStep(
        step=9,
        title="Add Your School Codes",
        description="Enter the Federal School Code for each college you are considering (up to 20).",
        tips=("Add every school you are applying to; you can remove them later.",),
        url="https://studentaid.gov/fafsa/school-search",
    ),
    FafsaStep(
        step=10,
        title="Sign and Submit",
        description="You and your parent (if dependent) each sign with your FSA IDs and submit.",
        tips=("Save the confirmation number from the email receipt.",),
    ),
    FafsaStep(
        step=11,
        title="Review Your FAFSA Submission Summary",
        description="Review the summary you receive within a few days and correct any errors.",
        tips=("Your Student Aid Index is not what you will pay.",),
    ),
    FafsaStep(
        step=12,
        title="Respond to Verification Requests",
        description="If selected for verification, send the requested documents to each financial aid office.",
        documents=("Verification worksheet", "IRS tax transcripts", "Identity documents"),
        tips=("Missing verification deadlines can cost you all of your aid.",),
    ),
)

TOTAL_FAFSA_STEPS = len(FAFSA_STEPS)


def fafsa_status(current_step: int, *, total_steps: int = TOTAL_FAFSA_STEPS) -> FafsaStatus:
    if current_step >= total_steps:
        return "complete"
    if current_step > 0:
        return "in-progress"
    return "not-started"


def steps_with_progress(completed_steps: Iterable[int]) -> list[dict[str, object]]:
    completed = set(completed_steps)
    return [
        {
            "step": step.step,
            "title": step.title,
            "description": step.description,
            "documents": list(step.documents),
            "tips": list(step.tips),
            "url": step.url,
            "is_completed": step.step in completed,
        }
        for step in FAFSA_STEPS
    ]
