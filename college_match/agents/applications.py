from __future__ import annotations

from college_match.agents.runs import AgentContext, AgentRun, execute_run
from college_match.applications.task_builder import build_tasks_for_college_list, detect_conflicts
from college_match.errors import EmptyCollegeListError


def run_application_agent(context: AgentContext, student_id: str) -> str:
    def work(run: AgentRun) -> str:
        context.require_student(student_id)
        entries = context.store.get_college_list(student_id)
        if not entries:
            raise EmptyCollegeListError()

        tasks = detect_conflicts(
            build_tasks_for_college_list(entries, student_id, today=context.clock().date())
        )
        context.store.replace_application_tasks(student_id, tasks)

        conflicts = sum(1 for task in tasks if task.is_conflict)
        summary = f"Created {len(tasks)} application tasks for {len(entries)} colleges"
        if conflicts:
            summary += f" ({conflicts} deadline conflicts detected)"
        return summary

    return execute_run(context, student_id, "application_management", work)
