"""
MONTHLY PROJECT BREAKDOWN
Month -> project -> task -> time entries for one retainer client

RULES:
- A task belongs to every month it has time logged in
- A task with a timeline also belongs to every month the timeline spans,
  clipped to the retainer start; a timeline beginning before the retainer
  start contributes no months
- An open-ended timeline runs until `today`
- Task hours are summed per month, never across the task's whole life
- Months come back most recent first
"""

from collections import defaultdict
from datetime import date
from typing import Iterable, Optional

from studio_ops.domain.models import (
    MonthProjectBreakdown,
    ProjectMonthBreakdown,
    ProjectTask,
    TaskMonthBreakdown,
    TimeEntry,
)
from studio_ops.utils.time import iter_month_keys, month_end, month_key, month_start


def task_month_keys(
    task: ProjectTask,
    entries: Iterable[TimeEntry],
    retainer_start: Optional[date],
    today: date,
) -> set[str]:
    months = {month_key(e.date) for e in entries}

    if task.timeline_start is None:
        return months
    if retainer_start is not None and task.timeline_start < retainer_start:
        return months

    start = max(task.timeline_start, retainer_start) if retainer_start else task.timeline_start
    end = task.timeline_end or today
    months.update(iter_month_keys(start, end))
    return months


def _task_sort_key(task: TaskMonthBreakdown):
    # Scheduled tasks first by timeline start, the rest by name
    return (task.timeline_start is None, task.timeline_start or date.min, task.name)


def _month_in_window(month: str, start_date: Optional[date], end_date: Optional[date]) -> bool:
    """Only whole months inside the window are kept"""
    if start_date is not None and month_start(month) < start_date:
        return False
    if end_date is not None and month_end(month) > end_date:
        return False
    return True


def build_monthly_breakdown(
    tasks: Iterable[ProjectTask],
    entries: Iterable[TimeEntry],
    today: date,
    retainer_start: Optional[date] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> list[MonthProjectBreakdown]:
    """
    Group a client's tasks and time into months

    Args:
        tasks: Client subtasks, in project display order
        entries: Time entries already bounded to the reporting window.
            Entries on tasks not in `tasks` are ignored.
        today: End of open-ended task timelines
        retainer_start: Effective retainer start used to clip timelines
        start_date: Requested window start (month-level filter)
        end_date: Requested window end (month-level filter)

    Returns:
        One MonthProjectBreakdown per month, most recent first
    """
    entries_by_task: dict[int, list[TimeEntry]] = defaultdict(list)
    for entry in entries:
        entries_by_task[entry.task_id].append(entry)

    # month -> project_id -> ProjectMonthBreakdown (insertion keeps project order)
    months: dict[str, dict[int, ProjectMonthBreakdown]] = defaultdict(dict)

    for task in tasks:
        task_entries = sorted(entries_by_task.get(task.task_id, []), key=lambda e: e.date)

        for key in task_month_keys(task, task_entries, retainer_start, today):
            project = months[key].get(task.project_id)
            if project is None:
                project = ProjectMonthBreakdown(
                    project_id=task.project_id,
                    name=task.project_name,
                    status=task.project_status,
                    tasks=[],
                )
                months[key][task.project_id] = project

            project.tasks.append(TaskMonthBreakdown(
                task_id=task.task_id,
                name=task.name,
                quoted_hours=task.quoted_hours,
                timeline_start=task.timeline_start,
                timeline_end=task.timeline_end,
                entries=[e for e in task_entries if month_key(e.date) == key],
            ))

    result = []
    for key in sorted(months, reverse=True):
        if not _month_in_window(key, start_date, end_date):
            continue
        projects = [
            ProjectMonthBreakdown(
                project_id=p.project_id,
                name=p.name,
                status=p.status,
                tasks=sorted(p.tasks, key=_task_sort_key),
            )
            for p in months[key].values()
        ]
        result.append(MonthProjectBreakdown(month=key, projects=projects))

    return result
