"""
Domain Models - Retainers
Pure domain objects with no infrastructure dependencies
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

DEFAULT_HOURS_PER_DAY = Decimal('6')

# Project status used for completed work; excluded from forecasts
LOCKED_STATUS = "locked"


class FillLikelihood(str, Enum):
    """Likelihood that remaining project work fills this month's capacity"""
    VERY_LIKELY = "Very Likely"
    LIKELY = "Likely"
    POSSIBLE = "Possible"
    UNLIKELY = "Unlikely"
    NOT_APPLICABLE = "N/A"


@dataclass(frozen=True)
class RetainerConfig:
    """
    Retainer settings for a single client - Immutable

    agreed_days_per_week / agreed_days_per_month are informational only
    and play no part in the daily cap.
    """
    client_name: str
    monthly_hours: Optional[Decimal] = None
    rollover_hours: Optional[Decimal] = None
    hours_per_day: Optional[Decimal] = None
    agreed_days_per_week: Optional[Decimal] = None
    agreed_days_per_month: Optional[Decimal] = None
    start_date: Optional[date] = None
    display_order: int = 0
    id: Optional[int] = None

    def __post_init__(self):
        if not self.client_name or not self.client_name.strip():
            raise ValueError("Retainer client name cannot be empty")

    @property
    def effective_hours_per_day(self) -> Decimal:
        """Hours per day, falling back to the studio default when unset"""
        if self.hours_per_day is None:
            return DEFAULT_HOURS_PER_DAY
        return self.hours_per_day

    @property
    def has_monthly_hours(self) -> bool:
        """Zero monthly hours counts as unset, the same as None"""
        return bool(self.monthly_hours)

    @property
    def effective_rollover_hours(self) -> Decimal:
        """Rollover budget, zero when unset"""
        if self.rollover_hours is None:
            return Decimal('0')
        return self.rollover_hours


@dataclass(frozen=True)
class TimeEntry:
    """A single logged block of time - Immutable"""
    date: date
    hours: Decimal
    task_name: Optional[str] = None
    project_name: Optional[str] = None
    user_name: Optional[str] = None
    notes: Optional[str] = None
    project_id: Optional[int] = None
    task_id: Optional[int] = None
    id: Optional[int] = None


@dataclass(frozen=True)
class DailySplit:
    """How one day's logged hours were drawn from the monthly and rollover pools"""
    date: date
    monthly_hours_used: Decimal
    rollover_hours_used: Decimal
    total_hours: Decimal

    @property
    def unaccounted_hours(self) -> Decimal:
        """Hours left over once both pools are exhausted (never charged)"""
        return self.total_hours - self.monthly_hours_used - self.rollover_hours_used

    @property
    def month_key(self) -> str:
        return f"{self.date.year:04d}-{self.date.month:02d}"


@dataclass(frozen=True)
class AllocationResult:
    """Output of one allocator run"""
    splits: dict[str, DailySplit]
    cumulative_rollover_used: Decimal
    daily_allocation: Decimal
    rollover_budget: Decimal


@dataclass(frozen=True)
class MonthSummary:
    """Aggregated hours for a single YYYY-MM month"""
    month: str
    total_hours: Decimal
    total_days: Decimal
    rollover_hours: Decimal
    rollover_days: Decimal
    days_with_entries: int
    monthly_hours: Optional[Decimal]
    capacity_remaining: Optional[Decimal]

    @property
    def is_over_capacity(self) -> bool:
        return self.capacity_remaining is not None and self.capacity_remaining < Decimal('0')

    @property
    def utilisation_pct(self) -> Decimal:
        """Share of monthly hours used, capped at 100"""
        if not self.monthly_hours or self.monthly_hours <= Decimal('0'):
            return Decimal('0')
        pct = self.total_hours / self.monthly_hours * Decimal('100')
        return min(pct, Decimal('100'))


@dataclass(frozen=True)
class ProjectHours:
    """Quoted vs logged hours for one client project"""
    project_id: int
    name: str
    status: Optional[str]
    quoted_hours: Decimal
    logged_hours: Decimal

    @property
    def is_active(self) -> bool:
        return self.status != LOCKED_STATUS


@dataclass(frozen=True)
class ProjectTask:
    """A quotable subtask together with its owning project"""
    task_id: int
    name: str
    project_id: int
    project_name: str
    project_status: Optional[str] = None
    quoted_hours: Optional[Decimal] = None
    timeline_start: Optional[date] = None
    timeline_end: Optional[date] = None


@dataclass(frozen=True)
class TaskMonthBreakdown:
    """One task's time within a single month"""
    task_id: int
    name: str
    quoted_hours: Optional[Decimal]
    timeline_start: Optional[date]
    timeline_end: Optional[date]
    entries: list[TimeEntry]

    @property
    def total_hours(self) -> Decimal:
        """Hours logged in this month only"""
        return sum((e.hours for e in self.entries), Decimal('0'))


@dataclass(frozen=True)
class ProjectMonthBreakdown:
    project_id: int
    name: str
    status: Optional[str]
    tasks: list[TaskMonthBreakdown]

    @property
    def total_hours(self) -> Decimal:
        return sum((t.total_hours for t in self.tasks), Decimal('0'))


@dataclass(frozen=True)
class MonthProjectBreakdown:
    """Projects and tasks worked on (or scheduled) in one YYYY-MM month"""
    month: str
    projects: list[ProjectMonthBreakdown]


@dataclass(frozen=True)
class CapacityForecast:
    """Capacity outlook for the current month"""
    month: str
    remaining_project_hours: Decimal
    current_month_hours: Decimal
    current_month_capacity: Optional[Decimal]
    likelihood: FillLikelihood


@dataclass(frozen=True)
class DateBreakdownItem:
    """One entry in a single day's breakdown"""
    project_name: str
    task_name: Optional[str]
    hours: Decimal
    user_name: Optional[str]
    notes: Optional[str]


@dataclass(frozen=True)
class RetainerReport:
    """Everything the presentation layer needs for one client"""
    config: RetainerConfig
    start_date: Optional[date]
    end_date: Optional[date]
    allocation: AllocationResult
    months: list[MonthSummary]
    rollover_remaining: Decimal
    forecast: CapacityForecast
    monthly_projects: list[MonthProjectBreakdown] = field(default_factory=list)
    entry_count: int = 0
    warnings: list[str] = field(default_factory=list)

    @property
    def splits(self) -> dict[str, DailySplit]:
        return self.allocation.splits
