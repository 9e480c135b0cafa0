"""Agent runs: load inputs, call the pure scoring core, replace derived rows, record the run."""

from college_match.agents.applications import run_application_agent
from college_match.agents.career import employer_matches_for_student, run_career_agent
from college_match.agents.discovery import run_discovery_agent
from college_match.agents.financial_aid import run_financial_aid_agent
from college_match.agents.runs import AgentContext, AgentRun, execute_run
from college_match.agents.scholarships import run_scholarship_agent
from college_match.agents.store import DerivedStore, InMemoryDerivedStore

__all__ = [
    "AgentContext",
    "AgentRun",
    "DerivedStore",
    "InMemoryDerivedStore",
    "employer_matches_for_student",
    "execute_run",
    "run_application_agent",
    "run_career_agent",
    "run_discovery_agent",
    "run_financial_aid_agent",
    "run_scholarship_agent",
]
