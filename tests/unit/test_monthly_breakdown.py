from datetime import date
from decimal import Decimal

from studio_ops.domain.models import ProjectTask, TimeEntry
from studio_ops.domain.services.monthly_breakdown import build_monthly_breakdown, task_month_keys
from studio_ops.utils.time import iter_month_keys, month_end

TODAY = date(2026, 6, 15)


def task(task_id: int, name: str, project_id: int = 1, **kwargs) -> ProjectTask:
    return ProjectTask(
        task_id=task_id,
        name=name,
        project_id=project_id,
        project_name=f"Project {project_id}",
        project_status="active",
        **kwargs,
    )


def entry(task_id: int, day: date, hours: str) -> TimeEntry:
    return TimeEntry(date=day, hours=Decimal(hours), task_id=task_id)


def test_iter_month_keys_crosses_year():
    assert list(iter_month_keys(date(2025, 11, 20), date(2026, 2, 1))) == [
        "2025-11", "2025-12", "2026-01", "2026-02",
    ]
    assert list(iter_month_keys(date(2026, 3, 1), date(2026, 2, 1))) == []


def test_month_end_handles_leap_year():
    assert month_end("2024-02") == date(2024, 2, 29)
    assert month_end("2026-12") == date(2026, 12, 31)


def test_task_months_from_entries_and_timeline():
    scheduled = task(1, "Design", timeline_start=date(2026, 3, 10), timeline_end=date(2026, 5, 2))

    months = task_month_keys(scheduled, [entry(1, date(2026, 1, 5), "2")], None, TODAY)

    assert months == {"2026-01", "2026-03", "2026-04", "2026-05"}


def test_open_timeline_runs_to_today():
    scheduled = task(1, "Design", timeline_start=date(2026, 5, 20))

    assert task_month_keys(scheduled, [], None, TODAY) == {"2026-05", "2026-06"}


def test_timeline_before_retainer_start_adds_no_months():
    early = task(1, "Design", timeline_start=date(2026, 2, 1), timeline_end=date(2026, 5, 1))

    assert task_month_keys(early, [], date(2026, 3, 1), TODAY) == set()


def test_timeline_clipped_to_retainer_start():
    scheduled = task(1, "Design", timeline_start=date(2026, 3, 15), timeline_end=date(2026, 4, 2))

    assert task_month_keys(scheduled, [], date(2026, 3, 1), TODAY) == {"2026-03", "2026-04"}


def test_breakdown_groups_and_orders():
    tasks = [
        task(1, "Zine", project_id=2),
        task(2, "Build", project_id=1, timeline_start=date(2026, 5, 3), timeline_end=date(2026, 5, 30)),
        task(3, "Audit", project_id=1),
        task(4, "Idle", project_id=1),
    ]
    entries = [
        entry(3, date(2026, 5, 12), "3"),
        entry(1, date(2026, 6, 2), "1.5"),
        entry(3, date(2026, 6, 1), "2"),
        entry(1, date(2026, 5, 7), "4"),
        entry(99, date(2026, 5, 7), "8"),
    ]

    months = build_monthly_breakdown(tasks, entries, today=TODAY)

    assert [m.month for m in months] == ["2026-06", "2026-05"]

    june, may = months
    assert [p.name for p in may.projects] == ["Project 2", "Project 1"]
    assert [t.name for t in may.projects[1].tasks] == ["Build", "Audit"]
    assert may.projects[1].tasks[0].entries == []
    assert may.projects[1].tasks[0].total_hours == Decimal('0')
    assert may.projects[1].tasks[1].total_hours == Decimal('3')

    zine_june = june.projects[0].tasks[0]
    assert zine_june.total_hours == Decimal('1.5')
    assert [e.date for e in zine_june.entries] == [date(2026, 6, 2)]


def test_breakdown_drops_partial_months_outside_window():
    tasks = [task(1, "Design")]
    entries = [entry(1, date(2026, 4, 20), "2"), entry(1, date(2026, 5, 2), "3"), entry(1, date(2026, 6, 1), "1")]

    months = build_monthly_breakdown(
        tasks,
        entries,
        today=TODAY,
        start_date=date(2026, 4, 15),
        end_date=date(2026, 6, 10),
    )

    assert [m.month for m in months] == ["2026-05"]
