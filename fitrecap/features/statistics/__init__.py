"""
Year statistics for the dashboard.

Usage:
    from fitrecap.features.statistics import build_statistics
    bundle = build_statistics(activities, year=2024)
"""

from .models import (
    CoreSummary,
    WeeklyAverage,
    ActivityTypeBreakdown,
    MonthlyStats,
    BestPerformances,
    WeeklyInsights,
    TimeOfDayStats,
    LocationInsights,
    StatisticsBundle,
)
from .calculator import (
    calculate_core_summary,
    calculate_activity_type_breakdown,
    calculate_monthly_stats,
    calculate_best_performances,
    calculate_weekly_insights,
    calculate_time_of_day,
    calculate_location_insights,
    generate_fun_facts,
    build_statistics,
    time_of_day_bucket,
)
from .schemas import StatisticsResponse

__all__ = [
    # Models
    "CoreSummary",
    "WeeklyAverage",
    "ActivityTypeBreakdown",
    "MonthlyStats",
    "BestPerformances",
    "WeeklyInsights",
    "TimeOfDayStats",
    "LocationInsights",
    "StatisticsBundle",
    # Calculators
    "calculate_core_summary",
    "calculate_activity_type_breakdown",
    "calculate_monthly_stats",
    "calculate_best_performances",
    "calculate_weekly_insights",
    "calculate_time_of_day",
    "calculate_location_insights",
    "generate_fun_facts",
    "build_statistics",
    "time_of_day_bucket",
    # Schemas
    "StatisticsResponse",
]
