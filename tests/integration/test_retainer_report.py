"""
Retainer report built against the real repositories
"""

from datetime import date
from decimal import Decimal

import pytest

from studio_ops.domain.models import FillLikelihood
from studio_ops.domain.services.retainer_report_service import RetainerReportService
from studio_ops.infrastructure.db.repositories.project_repository import ProjectRepository
from studio_ops.infrastructure.db.repositories.retainer_client_repository import RetainerClientRepository
from studio_ops.infrastructure.db.repositories.time_entry_repository import TimeEntryRepository


@pytest.fixture
async def report_service(db_session):
    return RetainerReportService(
        config_repo=RetainerClientRepository(db_session),
        time_entry_repo=TimeEntryRepository(db_session),
        project_repo=ProjectRepository(db_session),
    )


@pytest.mark.asyncio
@pytest.mark.integration
async def test_forecast_ignores_time_before_retainer_start(db_session, report_service):
    clients = RetainerClientRepository(db_session)
    projects = ProjectRepository(db_session)
    entries = TimeEntryRepository(db_session)

    await clients.create("Acme")
    await clients.update_settings(
        "Acme",
        monthly_hours=Decimal("40"),
        rollover_hours=None,
        start_date=date(2026, 3, 1),
        agreed_days_per_week=None,
        agreed_days_per_month=None,
        hours_per_day=None,
    )
    website = await projects.create_project("Website", client_name="Acme", status="active")
    design = await projects.create_task(website, "Design", quoted_hours=Decimal("20"))
    await entries.create(design, date(2026, 2, 10), Decimal("15"))
    await entries.create(design, date(2026, 3, 10), Decimal("2"))

    report = await report_service.build_report("Acme", today=date(2026, 3, 20))

    assert report.forecast.remaining_project_hours == Decimal("18")
    assert report.forecast.current_month_capacity == Decimal("38")
    assert report.forecast.likelihood == FillLikelihood.POSSIBLE

    [march] = report.monthly_projects
    assert march.month == "2026-03"
    [task] = march.projects[0].tasks
    assert task.total_hours == Decimal("2")
