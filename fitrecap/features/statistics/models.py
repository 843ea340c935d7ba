"""Derived statistics (dataclasses, not persisted)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from fitrecap.features.activities import Activity


@dataclass
class WeeklyAverage:
    """Totals divided by the number of weeks spanned."""

    activities: float = 0.0
    distance: float = 0.0  # meters
    time: float = 0.0  # seconds


@dataclass
class CoreSummary:
    """Year totals."""

    total_activities: int = 0
    total_distance: float = 0.0  # meters
    total_time: int = 0  # moving time, seconds
    total_elevation: float = 0.0  # meters
    active_days: int = 0
    average_per_week: WeeklyAverage = field(default_factory=WeeklyAverage)


@dataclass
class ActivityTypeBreakdown:
    """One activity type's share of the year."""

    type: str  # "Run"
    count: int
    distance: float  # meters
    percentage: float  # of total activity count
    icon: str


@dataclass
class MonthlyStats:
    """Totals for one calendar month."""

    month: int  # 1 = January
    month_name: str  # "Jan"
    activities: int = 0
    distance: float = 0.0
    time: int = 0
    elevation: float = 0.0


@dataclass
class MonthCount:
    month: int
    count: int


@dataclass
class DayCount:
    date: str  # ISO local date "2024-03-17"
    count: int


@dataclass
class BestPerformances:
    """Records of the year; each is None when there is nothing to rank."""

    longest_activity: Optional[Activity] = None
    longest_run: Optional[Activity] = None
    longest_ride: Optional[Activity] = None
    highest_elevation: Optional[Activity] = None
    fastest_pace: Optional[Activity] = None
    most_active_month: Optional[MonthCount] = None
    most_active_day: Optional[DayCount] = None


@dataclass
class WeekdayCount:
    day: str  # "Monday"
    count: int


@dataclass
class PeriodCount:
    period: str  # "morning"
    count: int


@dataclass
class WeeklyInsights:
    average_per_week: float = 0.0
    longest_streak: int = 0  # consecutive active days
    most_common_day: Optional[WeekdayCount] = None
    most_common_time: Optional[PeriodCount] = None


@dataclass
class TimeOfDayStats:
    """Activity counts by local start hour."""

    morning: int = 0  # 05:00-11:59
    afternoon: int = 0  # 12:00-16:59
    evening: int = 0  # 17:00-20:59
    night: int = 0  # 21:00-04:59


@dataclass
class CityCount:
    city: str
    count: int


@dataclass
class CountryCount:
    country: str
    count: int


@dataclass
class LocationInsights:
    top_cities: list[CityCount] = field(default_factory=list)
    top_countries: list[CountryCount] = field(default_factory=list)
    total_locations: int = 0


@dataclass
class StatisticsBundle:
    """Everything the dashboard shows for one year."""

    year: int
    core_summary: CoreSummary
    activity_breakdown: list[ActivityTypeBreakdown]
    monthly_stats: list[MonthlyStats]
    best_performances: BestPerformances
    weekly_insights: WeeklyInsights
    time_of_day: TimeOfDayStats
    location_insights: LocationInsights
    fun_facts: list[str]
