from datetime import date
from decimal import Decimal

import pytest

from studio_ops.domain.models import FillLikelihood, ProjectHours, TimeEntry
from studio_ops.domain.services.capacity_allocator import allocate
from studio_ops.domain.services.capacity_forecast import (
    build_forecast,
    current_month_capacity,
    likelihood_to_fill,
    remaining_project_hours,
)


def project(pid: int, quoted: str, logged: str, status: str = "active") -> ProjectHours:
    return ProjectHours(
        project_id=pid,
        name=f"Project {pid}",
        status=status,
        quoted_hours=Decimal(quoted),
        logged_hours=Decimal(logged),
    )


def test_remaining_project_hours_skips_locked_and_floors_at_zero():
    projects = [
        project(1, "20", "5"),
        project(2, "10", "14"),
        project(3, "40", "0", status="locked"),
        project(4, "8", "2", status=None),
    ]

    assert remaining_project_hours(projects) == Decimal('21')


def test_current_month_capacity():
    splits = allocate(
        [TimeEntry(date=date(2026, 5, 4), hours=Decimal('7'))],
        Decimal('6'),
        Decimal('0'),
    ).splits

    assert current_month_capacity(Decimal('30'), splits, "2026-05") == Decimal('23')
    assert current_month_capacity(Decimal('30'), splits, "2026-06") == Decimal('30')
    assert current_month_capacity(None, splits, "2026-05") is None
    assert current_month_capacity(Decimal('0'), splits, "2026-05") is None


@pytest.mark.parametrize(
    "remaining,capacity,expected",
    [
        ("20", "20", FillLikelihood.VERY_LIKELY),
        ("14", "20", FillLikelihood.LIKELY),
        ("8", "20", FillLikelihood.POSSIBLE),
        ("7.9", "20", FillLikelihood.UNLIKELY),
        ("50", "0", FillLikelihood.NOT_APPLICABLE),
        ("50", "-4", FillLikelihood.NOT_APPLICABLE),
    ],
)
def test_likelihood_thresholds(remaining, capacity, expected):
    assert likelihood_to_fill(Decimal(remaining), Decimal(capacity)) == expected


def test_likelihood_without_monthly_hours():
    assert likelihood_to_fill(Decimal('10'), None) == FillLikelihood.NOT_APPLICABLE


def test_build_forecast():
    splits = allocate(
        [
            TimeEntry(date=date(2026, 5, 4), hours=Decimal('6')),
            TimeEntry(date=date(2026, 5, 5), hours=Decimal('4')),
        ],
        Decimal('6'),
        Decimal('0'),
    ).splits

    forecast = build_forecast(Decimal('30'), splits, [project(1, "30", "22")], "2026-05")

    assert forecast.month == "2026-05"
    assert forecast.current_month_hours == Decimal('10')
    assert forecast.current_month_capacity == Decimal('20')
    assert forecast.remaining_project_hours == Decimal('8')
    assert forecast.likelihood == FillLikelihood.POSSIBLE
