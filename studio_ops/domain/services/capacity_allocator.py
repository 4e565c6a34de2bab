"""
CAPACITY ALLOCATOR
Split logged hours between the monthly and rollover pools

RESPONSIBILITIES:
- Group time entries by day
- Charge each day up to the daily cap against the monthly pool
- Charge the excess against a rollover budget shared by the whole period
- Month-level aggregates over the resulting splits

RULES:
- No I/O, no clock, no shared state
- Never raises on well-formed input
- Rollover budget is NOT reset per month
- Hours beyond both pools stay unaccounted
"""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from functools import reduce
from typing import Iterable, Mapping, Optional

from studio_ops.domain.models import (
    DEFAULT_HOURS_PER_DAY,
    AllocationResult,
    DailySplit,
    MonthSummary,
    RetainerConfig,
    TimeEntry,
)

ZERO = Decimal('0')

# (splits so far in date order, cumulative rollover used)
_FoldState = tuple[list[DailySplit], Decimal]


def resolve_daily_allocation(config: RetainerConfig) -> Decimal:
    """Daily monthly-pool cap: hours_per_day, or the default of 6"""
    return config.effective_hours_per_day


def group_hours_by_date(entries: Iterable[TimeEntry]) -> dict[date, Decimal]:
    """Sum logged hours per calendar day"""
    totals: dict[date, Decimal] = defaultdict(lambda: ZERO)
    for entry in entries:
        totals[entry.date] += entry.hours
    return dict(totals)


def _allocate_day(
    daily_allocation: Decimal,
    rollover_budget: Decimal,
    state: _FoldState,
    day: tuple[date, Decimal],
) -> _FoldState:
    splits, cumulative = state
    day_date, day_hours = day

    if daily_allocation <= ZERO:
        monthly_used = day_hours
        rollover_used = ZERO
    else:
        monthly_used = min(day_hours, daily_allocation)
        excess = max(ZERO, day_hours - daily_allocation)
        rollover_available = max(ZERO, rollover_budget - cumulative)
        rollover_used = min(excess, rollover_available)

    splits.append(DailySplit(
        date=day_date,
        monthly_hours_used=monthly_used,
        rollover_hours_used=rollover_used,
        total_hours=day_hours,
    ))
    return splits, cumulative + rollover_used


def allocate(
    entries: Iterable[TimeEntry],
    daily_allocation: Decimal,
    rollover_budget: Decimal = ZERO,
) -> AllocationResult:
    """
    Allocate logged hours day by day.

    Args:
        entries: Time entries for one client and period, any order
        daily_allocation: Max hours per day charged to the monthly pool.
            Zero or negative disables rollover accounting entirely.
        rollover_budget: Rollover hours available across the whole period

    Returns:
        AllocationResult with splits keyed by ISO date, in date order
    """
    days = sorted(group_hours_by_date(entries).items())

    def step(state: _FoldState, day: tuple[date, Decimal]) -> _FoldState:
        return _allocate_day(daily_allocation, rollover_budget, state, day)

    ordered, cumulative = reduce(step, days, ([], ZERO))

    return AllocationResult(
        splits={split.date.isoformat(): split for split in ordered},
        cumulative_rollover_used=cumulative,
        daily_allocation=daily_allocation,
        rollover_budget=rollover_budget,
    )


def allocate_for_config(config: RetainerConfig, entries: Iterable[TimeEntry]) -> AllocationResult:
    """Allocate using a retainer's own cap and rollover budget"""
    return allocate(
        entries,
        daily_allocation=resolve_daily_allocation(config),
        rollover_budget=config.effective_rollover_hours,
    )


# -------------------------------------------------------------------
# Month aggregates
# -------------------------------------------------------------------

def _in_month(splits: Mapping[str, DailySplit], month: str) -> list[DailySplit]:
    return [s for key, s in splits.items() if key.startswith(f"{month}-")]


def month_total_hours(splits: Mapping[str, DailySplit], month: str) -> Decimal:
    return sum((s.total_hours for s in _in_month(splits, month)), ZERO)


def month_total_rollover_hours(splits: Mapping[str, DailySplit], month: str) -> Decimal:
    return sum((s.rollover_hours_used for s in _in_month(splits, month)), ZERO)


def monthly_capacity_remaining(
    monthly_hours: Decimal,
    splits: Mapping[str, DailySplit],
    month: str,
) -> Decimal:
    """Monthly hours left; negative means the month ran over"""
    return monthly_hours - month_total_hours(splits, month)


def rollover_remaining(
    rollover_hours: Optional[Decimal],
    splits: Mapping[str, DailySplit],
    up_to: Optional[date] = None,
) -> Decimal:
    """Rollover budget minus everything drawn up to and including `up_to`"""
    budget = rollover_hours if rollover_hours is not None else ZERO
    used = sum(
        (s.rollover_hours_used for s in splits.values() if up_to is None or s.date <= up_to),
        ZERO,
    )
    return budget - used


def hours_to_days(hours: Decimal, hours_per_day: Optional[Decimal] = None) -> Decimal:
    """Display conversion; falls back to the default day length for unset or non-positive values"""
    if hours_per_day is None or hours_per_day <= ZERO:
        hours_per_day = DEFAULT_HOURS_PER_DAY
    return hours / hours_per_day


def month_keys(splits: Mapping[str, DailySplit]) -> list[str]:
    """Distinct YYYY-MM keys present in the splits, ascending"""
    return sorted({s.month_key for s in splits.values()})


def summarize_month(
    config: RetainerConfig,
    splits: Mapping[str, DailySplit],
    month: str,
) -> MonthSummary:
    total = month_total_hours(splits, month)
    rollover = month_total_rollover_hours(splits, month)
    hours_per_day = config.effective_hours_per_day

    capacity = None
    if config.has_monthly_hours:
        capacity = monthly_capacity_remaining(config.monthly_hours, splits, month)

    return MonthSummary(
        month=month,
        total_hours=total,
        total_days=hours_to_days(total, hours_per_day),
        rollover_hours=rollover,
        rollover_days=hours_to_days(rollover, hours_per_day),
        days_with_entries=len(_in_month(splits, month)),
        monthly_hours=config.monthly_hours,
        capacity_remaining=capacity,
    )


def summarize_months(config: RetainerConfig, splits: Mapping[str, DailySplit]) -> list[MonthSummary]:
    """One summary per month with entries, most recent first"""
    return [summarize_month(config, splits, m) for m in reversed(month_keys(splits))]
