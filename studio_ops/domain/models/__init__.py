"""
Domain Models Package
Export all domain entities
"""

from .retainer import (
    # Constants
    DEFAULT_HOURS_PER_DAY,
    LOCKED_STATUS,

    # Enums
    FillLikelihood,

    # Entities
    AllocationResult,
    CapacityForecast,
    DailySplit,
    DateBreakdownItem,
    MonthProjectBreakdown,
    MonthSummary,
    ProjectHours,
    ProjectMonthBreakdown,
    ProjectTask,
    RetainerConfig,
    RetainerReport,
    TaskMonthBreakdown,
    TimeEntry,
)

__all__ = [
    # Constants
    "DEFAULT_HOURS_PER_DAY",
    "LOCKED_STATUS",

    # Enums
    "FillLikelihood",

    # Entities
    "AllocationResult",
    "CapacityForecast",
    "DailySplit",
    "DateBreakdownItem",
    "MonthProjectBreakdown",
    "MonthSummary",
    "ProjectHours",
    "ProjectMonthBreakdown",
    "ProjectTask",
    "RetainerConfig",
    "RetainerReport",
    "TaskMonthBreakdown",
    "TimeEntry",
]
