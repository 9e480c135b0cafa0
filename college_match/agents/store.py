from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Iterable, Protocol

from college_match.normalize.schema import (
    ApplicationTask,
    College,
    CollegeListEntry,
    Employer,
    Scholarship,
    ScholarshipMatch,
    StudentProfile,
)

if TYPE_CHECKING:
    from college_match.agents.runs import AgentRun
    from college_match.career.pathways import CareerPathway
    from college_match.career.wages import WageData
    from college_match.finance.net_price import FinancialSummary


@dataclass(frozen=True, slots=True)
class CareerSnapshot:
    student_id: str
    major: str
    pathway: CareerPathway | None
    wage_data: dict[str, WageData]
    last_refreshed_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "student_id": self.student_id,
            "major": self.major,
            "pathway": self.pathway.to_dict() if self.pathway else None,
            "wage_data": {code: wages.to_dict() for code, wages in self.wage_data.items()},
            "last_refreshed_at": self.last_refreshed_at.isoformat(),
        }


@dataclass(frozen=True, slots=True)
class FafsaProgress:
    current_step: int = 0
    completed_steps: tuple[int, ...] = ()


class DerivedStore(Protocol):
    """Row storage for student inputs, catalog data and per-student derived rows.

    Every `replace_*` method swaps all rows of one student in a single
    operation, so re-running an agent never merges with a previous run.
    """

    def get_student(self, student_id: str) -> StudentProfile | None: ...

    def list_colleges(self) -> list[College]: ...

    def list_scholarships(self, *, active_only: bool = True) -> list[Scholarship]: ...

    def list_employers(self) -> list[Employer]: ...

    def get_college_list(self, student_id: str) -> list[CollegeListEntry]: ...

    def replace_college_list(self, student_id: str, entries: Iterable[CollegeListEntry]) -> None: ...

    def get_application_tasks(self, student_id: str) -> list[ApplicationTask]: ...

    def replace_application_tasks(self, student_id: str, tasks: Iterable[ApplicationTask]) -> None: ...

    def get_scholarship_matches(self, student_id: str) -> list[ScholarshipMatch]: ...

    def replace_scholarship_matches(self, student_id: str, matches: Iterable[ScholarshipMatch]) -> None: ...

    def get_financial_summaries(self, student_id: str) -> list[FinancialSummary]: ...

    def replace_financial_summaries(self, student_id: str, summaries: Iterable[FinancialSummary]) -> None: ...

    def get_career_snapshot(self, student_id: str) -> CareerSnapshot | None: ...

    def save_career_snapshot(self, snapshot: CareerSnapshot) -> None: ...

    def get_fafsa_progress(self, student_id: str) -> FafsaProgress: ...

    def save_run(self, run: AgentRun) -> None: ...

    def list_runs(self, student_id: str) -> list[AgentRun]: ...


class InMemoryDerivedStore:
    """Thread-safe `DerivedStore` backed by plain dictionaries."""

    def __init__(
        self,
        *,
        students: Iterable[StudentProfile] = (),
        colleges: Iterable[College] = (),
        scholarships: Iterable[Scholarship] = (),
        employers: Iterable[Employer] = (),
    ) -> None:
        self._lock = threading.Lock()
        self._students = {student.student_id: student for student in students}
        self._colleges = list(colleges)
        self._scholarships = list(scholarships)
        self._employers = list(employers)
        self._college_lists: dict[str, list[CollegeListEntry]] = {}
        self._tasks: dict[str, list[ApplicationTask]] = {}
        self._matches: dict[str, list[ScholarshipMatch]] = {}
        self._summaries: dict[str, list[FinancialSummary]] = {}
        self._career: dict[str, CareerSnapshot] = {}
        self._fafsa: dict[str, FafsaProgress] = {}
        self._runs: dict[str, AgentRun] = {}

    def save_student(self, student: StudentProfile) -> None:
        with self._lock:
            self._students[student.student_id] = student

    def get_student(self, student_id: str) -> StudentProfile | None:
        with self._lock:
            return self._students.get(student_id)

    def list_students(self) -> list[StudentProfile]:
        with self._lock:
            return list(self._students.values())

    def list_colleges(self) -> list[College]:
        with self._lock:
            return list(self._colleges)

    def list_scholarships(self, *, active_only: bool = True) -> list[Scholarship]:
        with self._lock:
            return [item for item in self._scholarships if item.is_active or not active_only]

    def list_employers(self) -> list[Employer]:
        with self._lock:
            return list(self._employers)

    def get_college_list(self, student_id: str) -> list[CollegeListEntry]:
        with self._lock:
            return list(self._college_lists.get(student_id, []))

    def replace_college_list(self, student_id: str, entries: Iterable[CollegeListEntry]) -> None:
        rows = list(entries)
        with self._lock:
            self._college_lists[student_id] = rows

    def get_application_tasks(self, student_id: str) -> list[ApplicationTask]:
        with self._lock:
            return list(self._tasks.get(student_id, []))

    def replace_application_tasks(self, student_id: str, tasks: Iterable[ApplicationTask]) -> None:
        rows = list(tasks)
        with self._lock:
            self._tasks[student_id] = rows

    def get_scholarship_matches(self, student_id: str) -> list[ScholarshipMatch]:
        with self._lock:
            return list(self._matches.get(student_id, []))

    def replace_scholarship_matches(self, student_id: str, matches: Iterable[ScholarshipMatch]) -> None:
        rows = list(matches)
        with self._lock:
            self._matches[student_id] = rows

    def get_financial_summaries(self, student_id: str) -> list[FinancialSummary]:
        with self._lock:
            return list(self._summaries.get(student_id, []))

    def replace_financial_summaries(self, student_id: str, summaries: Iterable[FinancialSummary]) -> None:
        rows = list(summaries)
        with self._lock:
            self._summaries[student_id] = rows

    def get_career_snapshot(self, student_id: str) -> CareerSnapshot | None:
        with self._lock:
            return self._career.get(student_id)

    def save_career_snapshot(self, snapshot: CareerSnapshot) -> None:
        with self._lock:
            self._career[snapshot.student_id] = snapshot

    def get_fafsa_progress(self, student_id: str) -> FafsaProgress:
        with self._lock:
            return self._fafsa.get(student_id, FafsaProgress())

    def save_fafsa_progress(self, student_id: str, progress: FafsaProgress) -> None:
        with self._lock:
            self._fafsa[student_id] = progress

    def save_run(self, run: AgentRun) -> None:
        with self._lock:
            self._runs[run.run_id] = run

    def list_runs(self, student_id: str) -> list[AgentRun]:
        with self._lock:
            runs = [run for run in self._runs.values() if run.student_id == student_id]
        return sorted(runs, key=lambda run: run.started_at)
