"""
RETAINER REPORT SERVICE - ASYNC
Fetch, validate and allocate one client's retainer usage

RESPONSIBILITIES:
- Resolve the retainer config and reporting window
- Reject malformed time entries before allocation
- Run the capacity allocator and derive month summaries
- Build the current-month capacity forecast
- Group tasks and time into the month / project / task breakdown
- NO PERSISTENCE LOGIC, NO HTTP
"""

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Optional, Protocol

from studio_ops.domain.errors import (
    InvalidDateRangeError,
    InvalidTimeEntryError,
    RetainerNotFoundError,
)
from studio_ops.domain.models import (
    DateBreakdownItem,
    ProjectHours,
    ProjectTask,
    RetainerConfig,
    RetainerReport,
    TimeEntry,
)
from studio_ops.domain.services.capacity_allocator import (
    allocate_for_config,
    rollover_remaining,
    summarize_months,
)
from studio_ops.domain.services.capacity_forecast import build_forecast
from studio_ops.domain.services.monthly_breakdown import build_monthly_breakdown
from studio_ops.utils.time import month_key, today_local

logger = logging.getLogger(__name__)


class RetainerConfigRepository(Protocol):
    """Protocol for retainer config data access - ASYNC"""

    async def get_by_client_name(self, client_name: str) -> Optional[RetainerConfig]:
        ...


class TimeEntryRepository(Protocol):
    """Protocol for time entry data access - ASYNC"""

    async def list_for_client(
        self,
        client_name: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[TimeEntry]:
        ...


class ProjectRepository(Protocol):
    """Protocol for project and task data access - ASYNC"""

    async def list_project_hours(
        self,
        client_name: str,
        start_date: Optional[date] = None,
    ) -> list[ProjectHours]:
        ...

    async def list_tasks(self, client_name: str) -> list[ProjectTask]:
        ...


def validate_entries(entries: list[TimeEntry]) -> list[TimeEntry]:
    """
    Reject entries the allocator cannot take

    Raises:
        InvalidTimeEntryError: On a missing date or non-positive hours
    """
    for entry in entries:
        if entry.date is None:
            raise InvalidTimeEntryError(f"Time entry {entry.id} has no date")
        if entry.hours is None or entry.hours <= Decimal('0'):
            raise InvalidTimeEntryError(
                f"Time entry {entry.id} on {entry.date} has non-positive hours: {entry.hours}"
            )
    return entries


class RetainerReportService:
    """
    Retainer Report Service
    Builds the per-day and per-month retainer picture for a client
    """

    def __init__(
        self,
        config_repo: RetainerConfigRepository,
        time_entry_repo: TimeEntryRepository,
        project_repo: ProjectRepository,
    ):
        self.config_repo = config_repo
        self.time_entry_repo = time_entry_repo
        self.project_repo = project_repo

    async def get_config(self, client_name: str) -> RetainerConfig:
        """
        Raises:
            RetainerNotFoundError: If the client has no retainer
        """
        config = await self.config_repo.get_by_client_name(client_name)
        if config is None:
            raise RetainerNotFoundError(f"No retainer configured for {client_name!r}")
        return config

    async def build_report(
        self,
        client_name: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        today: Optional[date] = None,
    ) -> RetainerReport:
        """
        Build the full retainer report

        Args:
            client_name: Retainer client name
            start_date: Window start, ignored when the retainer has its own start date
            end_date: Window end (inclusive)
            today: Reference day for rollover remaining and the forecast

        Returns:
            RetainerReport

        Raises:
            RetainerNotFoundError: Unknown client
            InvalidDateRangeError: end_date before the effective start
            InvalidTimeEntryError: Malformed entry from the data layer
        """
        today = today or today_local()
        config = await self.get_config(client_name)

        effective_start = config.start_date or start_date
        if effective_start and end_date and end_date < effective_start:
            raise InvalidDateRangeError(
                f"End date {end_date} is before start date {effective_start}"
            )

        entries = validate_entries(
            await self.time_entry_repo.list_for_client(client_name, effective_start, end_date)
        )
        projects = await self.project_repo.list_project_hours(client_name, effective_start)
        tasks = await self.project_repo.list_tasks(client_name)

        allocation = allocate_for_config(config, entries)
        months = summarize_months(config, allocation.splits)
        forecast = build_forecast(config.monthly_hours, allocation.splits, projects, month_key(today))
        monthly_projects = build_monthly_breakdown(
            tasks,
            entries,
            today=today,
            retainer_start=effective_start,
            start_date=start_date,
            end_date=end_date,
        )

        warnings = []
        if not config.has_monthly_hours:
            warnings.append("No monthly hours set")
        for split in allocation.splits.values():
            if split.unaccounted_hours > Decimal('0'):
                warnings.append(
                    f"{split.unaccounted_hours}h on {split.date.isoformat()} exceeded both monthly and rollover pools"
                )

        logger.info(
            f"Retainer report for {client_name}: {len(entries)} entries, "
            f"{len(allocation.splits)} days, {len(months)} months, "
            f"rollover used {allocation.cumulative_rollover_used}h of {allocation.rollover_budget}h"
        )

        return RetainerReport(
            config=config,
            start_date=effective_start,
            end_date=end_date,
            allocation=allocation,
            months=months,
            rollover_remaining=rollover_remaining(config.rollover_hours, allocation.splits, up_to=today),
            forecast=forecast,
            monthly_projects=monthly_projects,
            entry_count=len(entries),
            warnings=warnings,
        )

    async def date_breakdown(self, client_name: str, day: date) -> dict[str, list[DateBreakdownItem]]:
        """
        Entries logged on `day`, grouped by project name

        Raises:
            RetainerNotFoundError: Unknown client
        """
        await self.get_config(client_name)
        entries = await self.time_entry_repo.list_for_client(client_name, day, day)

        by_project: dict[str, list[DateBreakdownItem]] = defaultdict(list)
        for entry in entries:
            project_name = entry.project_name or "Unknown project"
            by_project[project_name].append(DateBreakdownItem(
                project_name=project_name,
                task_name=entry.task_name,
                hours=entry.hours,
                user_name=entry.user_name,
                notes=entry.notes,
            ))
        return dict(by_project)
