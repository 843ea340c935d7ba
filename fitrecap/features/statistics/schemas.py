"""
Statistics response schemas.

Built from the calculator dataclasses with from_attributes, so nested
Activity rows in BestPerformances serialize as ActivityResponse.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from fitrecap.features.activities import ActivityResponse


class _FromAttributes(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class WeeklyAverageSchema(_FromAttributes):
    activities: float
    distance: float
    time: float


class CoreSummarySchema(_FromAttributes):
    total_activities: int
    total_distance: float
    total_time: int
    total_elevation: float
    active_days: int
    average_per_week: WeeklyAverageSchema


class ActivityTypeBreakdownSchema(_FromAttributes):
    type: str
    count: int
    distance: float
    percentage: float
    icon: str


class MonthlyStatsSchema(_FromAttributes):
    month: int
    month_name: str
    activities: int
    distance: float
    time: int
    elevation: float


class MonthCountSchema(_FromAttributes):
    month: int
    count: int


class DayCountSchema(_FromAttributes):
    date: str
    count: int


class BestPerformancesSchema(_FromAttributes):
    longest_activity: Optional[ActivityResponse] = None
    longest_run: Optional[ActivityResponse] = None
    longest_ride: Optional[ActivityResponse] = None
    highest_elevation: Optional[ActivityResponse] = None
    fastest_pace: Optional[ActivityResponse] = None
    most_active_month: Optional[MonthCountSchema] = None
    most_active_day: Optional[DayCountSchema] = None


class WeekdayCountSchema(_FromAttributes):
    day: str
    count: int


class PeriodCountSchema(_FromAttributes):
    period: str
    count: int


class WeeklyInsightsSchema(_FromAttributes):
    average_per_week: float
    longest_streak: int
    most_common_day: Optional[WeekdayCountSchema] = None
    most_common_time: Optional[PeriodCountSchema] = None


class TimeOfDaySchema(_FromAttributes):
    morning: int
    afternoon: int
    evening: int
    night: int


class CityCountSchema(_FromAttributes):
    city: str
    count: int


class CountryCountSchema(_FromAttributes):
    country: str
    count: int


class LocationInsightsSchema(_FromAttributes):
    top_cities: list[CityCountSchema]
    top_countries: list[CountryCountSchema]
    total_locations: int


class StatisticsResponse(_FromAttributes):
    """Full statistics bundle for one year."""

    year: int
    core_summary: CoreSummarySchema
    activity_breakdown: list[ActivityTypeBreakdownSchema]
    monthly_stats: list[MonthlyStatsSchema]
    best_performances: BestPerformancesSchema
    weekly_insights: WeeklyInsightsSchema
    time_of_day: TimeOfDaySchema
    location_insights: LocationInsightsSchema
    fun_facts: list[str]
