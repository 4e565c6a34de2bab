"""
CAPACITY FORECAST
Will the work still on the books fill this month's retainer?

Remaining project hours come from active (not locked) projects only:
quoted hours minus logged hours, never below zero per project.
"""

from decimal import Decimal
from typing import Iterable, Mapping, Optional

from studio_ops.domain.models import (
    CapacityForecast,
    DailySplit,
    FillLikelihood,
    ProjectHours,
)
from studio_ops.domain.services.capacity_allocator import month_total_hours

ZERO = Decimal('0')

LIKELY_RATIO = Decimal('0.7')
POSSIBLE_RATIO = Decimal('0.4')


def remaining_project_hours(projects: Iterable[ProjectHours]) -> Decimal:
    total = ZERO
    for project in projects:
        if not project.is_active:
            continue
        total += max(ZERO, project.quoted_hours - project.logged_hours)
    return total


def current_month_capacity(
    monthly_hours: Optional[Decimal],
    splits: Mapping[str, DailySplit],
    month: str,
) -> Optional[Decimal]:
    """Hours left in `month`, or None when monthly hours are unset or zero"""
    if not monthly_hours:
        return None
    return monthly_hours - month_total_hours(splits, month)


def likelihood_to_fill(remaining: Decimal, capacity: Optional[Decimal]) -> FillLikelihood:
    if capacity is None or capacity <= ZERO:
        return FillLikelihood.NOT_APPLICABLE

    if remaining >= capacity:
        return FillLikelihood.VERY_LIKELY
    if remaining >= capacity * LIKELY_RATIO:
        return FillLikelihood.LIKELY
    if remaining >= capacity * POSSIBLE_RATIO:
        return FillLikelihood.POSSIBLE
    return FillLikelihood.UNLIKELY


def build_forecast(
    monthly_hours: Optional[Decimal],
    splits: Mapping[str, DailySplit],
    projects: Iterable[ProjectHours],
    month: str,
) -> CapacityForecast:
    remaining = remaining_project_hours(projects)
    capacity = current_month_capacity(monthly_hours, splits, month)

    return CapacityForecast(
        month=month,
        remaining_project_hours=remaining,
        current_month_hours=month_total_hours(splits, month),
        current_month_capacity=capacity,
        likelihood=likelihood_to_fill(remaining, capacity),
    )
