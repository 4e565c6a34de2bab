"""
Retainer API Routes
Manage retainer clients and report monthly/rollover usage

Date Rules:
- `start` / `end` are YYYY-MM-DD and inclusive
- A retainer's own start date overrides `start`
"""

from fastapi import APIRouter, HTTPException, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import BaseModel, Field
from datetime import date
from decimal import Decimal
from typing import Optional, List, Dict

from studio_ops.infrastructure.db.database import get_db
from studio_ops.infrastructure.db.repositories.retainer_client_repository import RetainerClientRepository
from studio_ops.infrastructure.db.repositories.time_entry_repository import TimeEntryRepository
from studio_ops.infrastructure.db.repositories.project_repository import ProjectRepository
from studio_ops.domain.errors import InvalidDateRangeError, InvalidTimeEntryError, RetainerNotFoundError
from studio_ops.domain.models import MonthProjectBreakdown, RetainerConfig, RetainerReport
from studio_ops.domain.services.capacity_allocator import hours_to_days
from studio_ops.domain.services.retainer_report_service import RetainerReportService

router = APIRouter()


# -------------------------------------------------------------------
# Request / Response models
# -------------------------------------------------------------------

class AddRetainerClientRequest(BaseModel):
    client_name: str = Field(..., min_length=1, max_length=255)


class UpdateRetainerClientRequest(BaseModel):
    """Retainer settings; omitted fields are cleared"""
    monthly_hours: Optional[float] = Field(None, ge=0, description="Hours included per month")
    rollover_hours: Optional[float] = Field(None, ge=0, description="Rollover pool for the period")
    start_date: Optional[date] = Field(None, description="Ignore time logged before this date")
    agreed_days_per_week: Optional[float] = Field(None, ge=0, le=7, description="Informational only")
    agreed_days_per_month: Optional[float] = Field(None, ge=0, le=31, description="Informational only")
    hours_per_day: Optional[float] = Field(None, ge=0, le=24, description="Daily cap before rollover (default 6)")


class RetainerClientResponse(BaseModel):
    id: Optional[int]
    client_name: str
    display_order: int
    monthly_hours: Optional[float]
    rollover_hours: Optional[float]
    hours_per_day: Optional[float]
    agreed_days_per_week: Optional[float]
    agreed_days_per_month: Optional[float]
    start_date: Optional[date]


class DailySplitResponse(BaseModel):
    monthly_hours_used: float
    rollover_hours_used: float
    total_hours: float
    unaccounted_hours: float


class MonthSummaryResponse(BaseModel):
    month: str
    total_hours: float
    total_days: float
    rollover_hours: float
    rollover_days: float
    days_with_entries: int
    monthly_hours: Optional[float]
    capacity_remaining: Optional[float]
    is_over_capacity: bool
    utilisation_pct: float


class CapacityForecastResponse(BaseModel):
    month: str
    remaining_project_hours: float
    remaining_project_days: float
    current_month_hours: float
    current_month_capacity: Optional[float]
    likelihood: str


class TimeEntryResponse(BaseModel):
    id: Optional[int]
    date: date
    hours: float
    notes: Optional[str]
    user_name: Optional[str]


class TaskMonthResponse(BaseModel):
    id: int
    name: str
    quoted_hours: Optional[float]
    timeline_start: Optional[date]
    timeline_end: Optional[date]
    time_entries: List[TimeEntryResponse]
    total_hours: float


class ProjectMonthResponse(BaseModel):
    id: int
    name: str
    status: Optional[str]
    tasks: List[TaskMonthResponse]


class MonthProjectsResponse(BaseModel):
    month: str
    projects: List[ProjectMonthResponse]


class RetainerReportResponse(BaseModel):
    client: RetainerClientResponse
    start_date: Optional[date]
    end_date: Optional[date]
    daily_allocation: float
    rollover_budget: float
    rollover_used: float
    rollover_remaining: float
    entry_count: int
    days: Dict[str, DailySplitResponse]
    months: List[MonthSummaryResponse]
    forecast: CapacityForecastResponse
    monthly_projects: List[MonthProjectsResponse]
    warnings: List[str]


class DateBreakdownItemResponse(BaseModel):
    task_name: Optional[str]
    hours: float
    user_name: Optional[str]
    notes: Optional[str]


class DateBreakdownResponse(BaseModel):
    date: date
    total_hours: float
    projects: Dict[str, List[DateBreakdownItemResponse]]


# -------------------------------------------------------------------
# Helper utilities
# -------------------------------------------------------------------

def _opt_float(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None


def _opt_decimal(value: Optional[float]) -> Optional[Decimal]:
    return Decimal(str(value)) if value is not None else None


def to_client_response(config: RetainerConfig) -> RetainerClientResponse:
    return RetainerClientResponse(
        id=config.id,
        client_name=config.client_name,
        display_order=config.display_order,
        monthly_hours=_opt_float(config.monthly_hours),
        rollover_hours=_opt_float(config.rollover_hours),
        hours_per_day=_opt_float(config.hours_per_day),
        agreed_days_per_week=_opt_float(config.agreed_days_per_week),
        agreed_days_per_month=_opt_float(config.agreed_days_per_month),
        start_date=config.start_date,
    )


def to_month_projects_response(breakdown: MonthProjectBreakdown) -> MonthProjectsResponse:
    return MonthProjectsResponse(
        month=breakdown.month,
        projects=[
            ProjectMonthResponse(
                id=project.project_id,
                name=project.name,
                status=project.status,
                tasks=[
                    TaskMonthResponse(
                        id=task.task_id,
                        name=task.name,
                        quoted_hours=_opt_float(task.quoted_hours),
                        timeline_start=task.timeline_start,
                        timeline_end=task.timeline_end,
                        time_entries=[
                            TimeEntryResponse(
                                id=e.id,
                                date=e.date,
                                hours=float(e.hours),
                                notes=e.notes,
                                user_name=e.user_name,
                            )
                            for e in task.entries
                        ],
                        total_hours=float(task.total_hours),
                    )
                    for task in project.tasks
                ],
            )
            for project in breakdown.projects
        ],
    )


def to_report_response(report: RetainerReport) -> RetainerReportResponse:
    hours_per_day = report.config.effective_hours_per_day
    forecast = report.forecast

    return RetainerReportResponse(
        client=to_client_response(report.config),
        start_date=report.start_date,
        end_date=report.end_date,
        daily_allocation=float(report.allocation.daily_allocation),
        rollover_budget=float(report.allocation.rollover_budget),
        rollover_used=float(report.allocation.cumulative_rollover_used),
        rollover_remaining=float(report.rollover_remaining),
        entry_count=report.entry_count,
        days={
            key: DailySplitResponse(
                monthly_hours_used=float(split.monthly_hours_used),
                rollover_hours_used=float(split.rollover_hours_used),
                total_hours=float(split.total_hours),
                unaccounted_hours=float(split.unaccounted_hours),
            )
            for key, split in report.splits.items()
        },
        months=[
            MonthSummaryResponse(
                month=m.month,
                total_hours=float(m.total_hours),
                total_days=float(round(m.total_days, 2)),
                rollover_hours=float(m.rollover_hours),
                rollover_days=float(round(m.rollover_days, 2)),
                days_with_entries=m.days_with_entries,
                monthly_hours=_opt_float(m.monthly_hours),
                capacity_remaining=_opt_float(m.capacity_remaining),
                is_over_capacity=m.is_over_capacity,
                utilisation_pct=float(round(m.utilisation_pct, 1)),
            )
            for m in report.months
        ],
        forecast=CapacityForecastResponse(
            month=forecast.month,
            remaining_project_hours=float(forecast.remaining_project_hours),
            remaining_project_days=float(round(hours_to_days(forecast.remaining_project_hours, hours_per_day), 2)),
            current_month_hours=float(forecast.current_month_hours),
            current_month_capacity=_opt_float(forecast.current_month_capacity),
            likelihood=forecast.likelihood.value,
        ),
        monthly_projects=[to_month_projects_response(m) for m in report.monthly_projects],
        warnings=report.warnings,
    )


def get_report_service(db: AsyncSession) -> RetainerReportService:
    return RetainerReportService(
        config_repo=RetainerClientRepository(db),
        time_entry_repo=TimeEntryRepository(db),
        project_repo=ProjectRepository(db),
    )


# -------------------------------------------------------------------
# Routes
# -------------------------------------------------------------------

@router.get("", response_model=List[RetainerClientResponse])
async def list_retainer_clients(db: AsyncSession = Depends(get_db)):
    """All retainer clients in display order"""
    repo = RetainerClientRepository(db)
    return [to_client_response(c) for c in await repo.list_all()]


@router.get("/available-clients", response_model=List[str])
async def list_available_clients(db: AsyncSession = Depends(get_db)):
    """Client names found on projects, for adding new retainers"""
    return await ProjectRepository(db).list_client_names()


@router.post("", response_model=RetainerClientResponse, status_code=201)
async def add_retainer_client(
    request: AddRetainerClientRequest,
    db: AsyncSession = Depends(get_db)
):
    repo = RetainerClientRepository(db)

    if await repo.get_by_client_name(request.client_name.strip()):
        raise HTTPException(
            status_code=409,
            detail=f"{request.client_name.strip()} is already a retainer client"
        )

    config = await repo.create(request.client_name)
    return to_client_response(config)


@router.put("/{client_name}", response_model=RetainerClientResponse)
async def update_retainer_client(
    client_name: str,
    request: UpdateRetainerClientRequest,
    db: AsyncSession = Depends(get_db)
):
    repo = RetainerClientRepository(db)
    config = await repo.update_settings(
        client_name,
        monthly_hours=_opt_decimal(request.monthly_hours),
        rollover_hours=_opt_decimal(request.rollover_hours),
        start_date=request.start_date,
        agreed_days_per_week=_opt_decimal(request.agreed_days_per_week),
        agreed_days_per_month=_opt_decimal(request.agreed_days_per_month),
        hours_per_day=_opt_decimal(request.hours_per_day),
    )
    if config is None:
        raise HTTPException(status_code=404, detail=f"No retainer configured for {client_name!r}")
    return to_client_response(config)


@router.delete("/{client_name}", status_code=204)
async def remove_retainer_client(client_name: str, db: AsyncSession = Depends(get_db)):
    repo = RetainerClientRepository(db)
    if not await repo.delete(client_name):
        raise HTTPException(status_code=404, detail=f"No retainer configured for {client_name!r}")
    return Response(status_code=204)


@router.get("/{client_name}/report", response_model=RetainerReportResponse)
async def retainer_report(
    client_name: str,
    start: Optional[date] = Query(None, description="Start date YYYY-MM-DD"),
    end: Optional[date] = Query(None, description="End date YYYY-MM-DD"),
    db: AsyncSession = Depends(get_db)
):
    """Per-day monthly/rollover split, month summaries and capacity forecast"""
    service = get_report_service(db)
    try:
        report = await service.build_report(client_name, start_date=start, end_date=end)
    except RetainerNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidDateRangeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except InvalidTimeEntryError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return to_report_response(report)


@router.get("/{client_name}/days/{day}", response_model=DateBreakdownResponse)
async def retainer_day_breakdown(
    client_name: str,
    day: date,
    db: AsyncSession = Depends(get_db)
):
    """Time logged on one day, grouped by project"""
    service = get_report_service(db)
    try:
        by_project = await service.date_breakdown(client_name, day)
    except RetainerNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    total = sum((item.hours for items in by_project.values() for item in items), Decimal('0'))

    return DateBreakdownResponse(
        date=day,
        total_hours=float(total),
        projects={
            project: [
                DateBreakdownItemResponse(
                    task_name=item.task_name,
                    hours=float(item.hours),
                    user_name=item.user_name,
                    notes=item.notes,
                )
                for item in items
            ]
            for project, items in by_project.items()
        },
    )
