from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Callable, Literal
from uuid import uuid4

from college_match.agents.store import DerivedStore
from college_match.career.wages import WageFetcher, fetch_occupation_wages
from college_match.errors import StudentNotFoundError
from college_match.narrative.http import TextGenerator
from college_match.normalize.schema import StudentProfile
from college_match.rank.policy import PolicyBundle

logger = logging.getLogger(__name__)

AgentType = Literal["discovery", "application_management", "scholarships", "financial_aid", "career"]
RunStatus = Literal["pending", "running", "completed", "failed"]


@dataclass(frozen=True, slots=True)
class AgentRun:
    run_id: str
    student_id: str
    agent_type: AgentType
    status: RunStatus
    started_at: datetime
    completed_at: datetime | None = None
    duration_ms: int | None = None
    summary: str | None = None
    error_message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "student_id": self.student_id,
            "agent_type": self.agent_type,
            "status": self.status,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_ms": self.duration_ms,
            "summary": self.summary,
            "error_message": self.error_message,
        }


@dataclass(slots=True)
class AgentContext:
    """Everything an agent run needs from the outside world, passed in explicitly."""

    store: DerivedStore
    text_generator: TextGenerator | None = None
    wage_fetcher: WageFetcher = fetch_occupation_wages
    policies: PolicyBundle = field(default_factory=PolicyBundle.baseline)
    clock: Callable[[], datetime] = datetime.now

    def require_student(self, student_id: str) -> StudentProfile:
        student = self.store.get_student(student_id)
        if student is None:
            raise StudentNotFoundError(student_id)
        return student


def _elapsed_ms(started_at: datetime, finished_at: datetime) -> int:
    return max(0, int((finished_at - started_at).total_seconds() * 1000))


def execute_run(
    context: AgentContext,
    student_id: str,
    agent_type: AgentType,
    work: Callable[[AgentRun], str],
) -> str:
    """Record a running `AgentRun`, execute `work`, then mark it completed or failed.

    `work` returns the run summary. Failures are recorded with their message
    and re-raised unchanged; nothing is retried here.
    """
    run = AgentRun(
        run_id=uuid4().hex,
        student_id=student_id,
        agent_type=agent_type,
        status="running",
        started_at=context.clock(),
    )
    context.store.save_run(run)
    logger.info("Agent run %s for %s started (%s).", agent_type, student_id, run.run_id)

    try:
        summary = work(run)
    except Exception as exc:
        finished_at = context.clock()
        context.store.save_run(
            replace(
                run,
                status="failed",
                error_message=str(exc) or type(exc).__name__,
                completed_at=finished_at,
                duration_ms=_elapsed_ms(run.started_at, finished_at),
            )
        )
        logger.exception("Agent run %s for %s failed.", agent_type, student_id)
        raise

    finished_at = context.clock()
    context.store.save_run(
        replace(
            run,
            status="completed",
            summary=summary,
            completed_at=finished_at,
            duration_ms=_elapsed_ms(run.started_at, finished_at),
        )
    )
    logger.info("Agent run %s for %s completed: %s", agent_type, student_id, summary)
    return summary
