"""
Unit Tests for RetainerReportService

Uses in-memory repositories in place of the database.
"""

import pytest
from datetime import date
from decimal import Decimal
from typing import Optional

from studio_ops.domain.errors import (
    InvalidDateRangeError,
    InvalidTimeEntryError,
    RetainerNotFoundError,
)
from studio_ops.domain.models import FillLikelihood, ProjectHours, ProjectTask, RetainerConfig, TimeEntry
from studio_ops.domain.services.retainer_report_service import RetainerReportService


# Mock Repositories for Testing
class MockRetainerConfigRepository:
    """Mock repository for testing"""

    def __init__(self):
        self.configs = {}

    async def get_by_client_name(self, client_name: str) -> Optional[RetainerConfig]:
        return self.configs.get(client_name)

    def add_config(self, config: RetainerConfig):
        self.configs[config.client_name] = config


class MockTimeEntryRepository:
    """Mock repository for testing; records the window it was asked for"""

    def __init__(self):
        self.entries = {}
        self.calls = []

    async def list_for_client(
        self,
        client_name: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[TimeEntry]:
        self.calls.append((client_name, start_date, end_date))
        return [
            e for e in self.entries.get(client_name, [])
            if (start_date is None or e.date >= start_date)
            and (end_date is None or e.date <= end_date)
        ]

    def add_entry(self, client_name: str, entry: TimeEntry):
        self.entries.setdefault(client_name, []).append(entry)


class MockProjectRepository:
    """Mock repository for testing; records the start date it was asked for"""

    def __init__(self):
        self.projects = {}
        self.tasks = {}
        self.calls = []

    async def list_project_hours(
        self,
        client_name: str,
        start_date: Optional[date] = None,
    ) -> list[ProjectHours]:
        self.calls.append((client_name, start_date))
        return self.projects.get(client_name, [])

    async def list_tasks(self, client_name: str) -> list[ProjectTask]:
        return self.tasks.get(client_name, [])


TASK_IDS = {"Design": 11, "Review": 12, "Build": 13}


# Fixtures
@pytest.fixture
def mock_repos():
    return (
        MockRetainerConfigRepository(),
        MockTimeEntryRepository(),
        MockProjectRepository(),
    )


@pytest.fixture
def service(mock_repos):
    config_repo, entry_repo, project_repo = mock_repos
    return RetainerReportService(
        config_repo=config_repo,
        time_entry_repo=entry_repo,
        project_repo=project_repo,
    )


@pytest.fixture
def acme(mock_repos):
    config_repo, entry_repo, project_repo = mock_repos
    config_repo.add_config(RetainerConfig(
        client_name="Acme",
        monthly_hours=Decimal('20'),
        rollover_hours=Decimal('4'),
        hours_per_day=Decimal('6'),
    ))
    for day, hours, task in [
        (date(2026, 5, 4), "8", "Design"),
        (date(2026, 5, 4), "1", "Review"),
        (date(2026, 5, 5), "5", "Build"),
        (date(2026, 6, 1), "10", "Build"),
    ]:
        entry_repo.add_entry("Acme", TimeEntry(
            date=day,
            hours=Decimal(hours),
            task_name=task,
            project_name="Website",
            user_name="Sam",
            task_id=TASK_IDS[task],
        ))
    project_repo.projects["Acme"] = [
        ProjectHours(1, "Website", "active", Decimal('40'), Decimal('24')),
        ProjectHours(2, "Brand", "locked", Decimal('30'), Decimal('10')),
    ]
    project_repo.tasks["Acme"] = [
        ProjectTask(task_id, name, 1, "Website", "active", Decimal('10'))
        for name, task_id in TASK_IDS.items()
    ]
    return config_repo.configs["Acme"]


class TestBuildReport:
    """Tests for build_report"""

    @pytest.mark.asyncio
    async def test_report_splits_and_months(self, service, acme):
        report = await service.build_report("Acme", today=date(2026, 6, 15))

        assert report.entry_count == 4
        assert list(report.splits) == ["2026-05-04", "2026-05-05", "2026-06-01"]

        may4 = report.splits["2026-05-04"]
        assert may4.total_hours == Decimal('9')
        assert may4.monthly_hours_used == Decimal('6')
        assert may4.rollover_hours_used == Decimal('3')

        june1 = report.splits["2026-06-01"]
        assert june1.rollover_hours_used == Decimal('1')
        assert june1.unaccounted_hours == Decimal('3')

        assert report.allocation.cumulative_rollover_used == Decimal('4')
        assert report.rollover_remaining == Decimal('0')

        assert [m.month for m in report.months] == ["2026-06", "2026-05"]
        assert report.months[1].total_hours == Decimal('14')
        assert report.months[1].capacity_remaining == Decimal('6')

    @pytest.mark.asyncio
    async def test_forecast_uses_today_month(self, service, acme):
        report = await service.build_report("Acme", today=date(2026, 6, 15))

        assert report.forecast.month == "2026-06"
        assert report.forecast.current_month_hours == Decimal('10')
        assert report.forecast.current_month_capacity == Decimal('10')
        assert report.forecast.remaining_project_hours == Decimal('16')
        assert report.forecast.likelihood == FillLikelihood.VERY_LIKELY

    @pytest.mark.asyncio
    async def test_rollover_remaining_as_of_today(self, service, acme):
        report = await service.build_report("Acme", today=date(2026, 5, 31))

        assert report.rollover_remaining == Decimal('1')

    @pytest.mark.asyncio
    async def test_unaccounted_hours_warned(self, service, acme):
        report = await service.build_report("Acme", today=date(2026, 6, 15))

        assert len(report.warnings) == 1
        assert "2026-06-01" in report.warnings[0]

    @pytest.mark.asyncio
    async def test_unknown_client(self, service):
        with pytest.raises(RetainerNotFoundError):
            await service.build_report("Nobody")

    @pytest.mark.asyncio
    async def test_retainer_start_date_overrides_argument(self, service, mock_repos):
        config_repo, entry_repo, _ = mock_repos
        config_repo.add_config(RetainerConfig(client_name="Globex", start_date=date(2026, 5, 5)))
        entry_repo.add_entry("Globex", TimeEntry(date=date(2026, 5, 1), hours=Decimal('3')))
        entry_repo.add_entry("Globex", TimeEntry(date=date(2026, 5, 6), hours=Decimal('2')))

        report = await service.build_report("Globex", start_date=date(2026, 1, 1), today=date(2026, 5, 6))

        assert entry_repo.calls[-1] == ("Globex", date(2026, 5, 5), None)
        assert report.start_date == date(2026, 5, 5)
        assert list(report.splits) == ["2026-05-06"]
        assert "No monthly hours set" in report.warnings
        assert report.forecast.likelihood == FillLikelihood.NOT_APPLICABLE

    @pytest.mark.asyncio
    async def test_project_hours_counted_from_effective_start(self, service, mock_repos):
        config_repo, _, project_repo = mock_repos
        config_repo.add_config(RetainerConfig(client_name="Globex", start_date=date(2026, 3, 1)))

        await service.build_report("Globex", start_date=date(2026, 1, 1), today=date(2026, 3, 20))

        assert project_repo.calls[-1] == ("Globex", date(2026, 3, 1))

    @pytest.mark.asyncio
    async def test_monthly_projects_sum_hours_per_month(self, service, acme):
        report = await service.build_report("Acme", today=date(2026, 6, 15))

        assert [m.month for m in report.monthly_projects] == ["2026-06", "2026-05"]

        june, may = report.monthly_projects
        [june_website] = june.projects
        assert [t.name for t in june_website.tasks] == ["Build"]
        assert june_website.tasks[0].total_hours == Decimal('10')

        [may_website] = may.projects
        assert [t.name for t in may_website.tasks] == ["Build", "Design", "Review"]
        assert may_website.tasks[0].total_hours == Decimal('5')
        assert may_website.total_hours == Decimal('14')

    @pytest.mark.asyncio
    async def test_monthly_projects_keep_whole_months_in_window(self, service, acme):
        report = await service.build_report(
            "Acme",
            start_date=date(2026, 5, 1),
            end_date=date(2026, 6, 15),
            today=date(2026, 6, 15),
        )

        assert list(report.splits) == ["2026-05-04", "2026-05-05", "2026-06-01"]
        assert [m.month for m in report.monthly_projects] == ["2026-05"]

    @pytest.mark.asyncio
    async def test_zero_monthly_hours_warned_as_unset(self, service, mock_repos):
        config_repo, _, _ = mock_repos
        config_repo.add_config(RetainerConfig(client_name="Initech", monthly_hours=Decimal('0')))

        report = await service.build_report("Initech", today=date(2026, 5, 6))

        assert "No monthly hours set" in report.warnings
        assert report.forecast.current_month_capacity is None

    @pytest.mark.asyncio
    async def test_end_before_start_rejected(self, service, acme):
        with pytest.raises(InvalidDateRangeError):
            await service.build_report("Acme", start_date=date(2026, 6, 1), end_date=date(2026, 5, 1))

    @pytest.mark.asyncio
    async def test_non_positive_hours_rejected(self, service, acme, mock_repos):
        _, entry_repo, _ = mock_repos
        entry_repo.add_entry("Acme", TimeEntry(id=99, date=date(2026, 6, 2), hours=Decimal('-1')))

        with pytest.raises(InvalidTimeEntryError, match="99"):
            await service.build_report("Acme", today=date(2026, 6, 15))

    @pytest.mark.asyncio
    async def test_repeatable(self, service, acme):
        first = await service.build_report("Acme", today=date(2026, 6, 15))
        second = await service.build_report("Acme", today=date(2026, 6, 15))

        assert first.allocation == second.allocation
        assert first.months == second.months


class TestDateBreakdown:
    """Tests for date_breakdown"""

    @pytest.mark.asyncio
    async def test_grouped_by_project(self, service, acme, mock_repos):
        _, entry_repo, _ = mock_repos
        entry_repo.add_entry("Acme", TimeEntry(
            date=date(2026, 5, 4), hours=Decimal('2'), task_name="Copy", project_name="Newsletter",
        ))

        breakdown = await service.date_breakdown("Acme", date(2026, 5, 4))

        assert set(breakdown) == {"Website", "Newsletter"}
        assert [item.task_name for item in breakdown["Website"]] == ["Design", "Review"]
        assert sum(item.hours for item in breakdown["Website"]) == Decimal('9')
        assert breakdown["Newsletter"][0].hours == Decimal('2')

    @pytest.mark.asyncio
    async def test_unknown_client(self, service):
        with pytest.raises(RetainerNotFoundError):
            await service.date_breakdown("Nobody", date(2026, 5, 4))
