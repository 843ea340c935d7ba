"""Year statistics computed from a user's activities.

All functions are pure: they read the given activities and return new
objects. Dates and hours are taken in each activity's local timezone;
the week span uses absolute start times.
"""

from __future__ import annotations

import math
from datetime import date, timedelta
from typing import Optional, Sequence

from fitrecap.features.activities import Activity
from fitrecap.shared.constants import (
    ACTIVITY_TYPE_ICONS,
    DEFAULT_ACTIVITY_ICON,
    EARTH_CIRCUMFERENCE_KM,
    EVEREST_HEIGHT_M,
    MONTH_NAMES,
    WEEKDAY_NAMES,
    StravaActivityType,
)
from .models import (
    ActivityTypeBreakdown,
    BestPerformances,
    CityCount,
    CoreSummary,
    CountryCount,
    DayCount,
    LocationInsights,
    MonthCount,
    MonthlyStats,
    PeriodCount,
    StatisticsBundle,
    TimeOfDayStats,
    WeekdayCount,
    WeeklyAverage,
    WeeklyInsights,
)

TOP_LOCATIONS = 5
TIME_PERIODS = ("morning", "afternoon", "evening", "night")


def time_of_day_bucket(hour: int) -> str:
    """Map a local start hour (0-23) to its time-of-day period."""
    if 5 <= hour < 12:
        return "morning"
    if 12 <= hour < 17:
        return "afternoon"
    if 17 <= hour < 21:
        return "evening"
    return "night"


def calculate_core_summary(activities: Sequence[Activity]) -> CoreSummary:
    """Totals, active days and per-week averages."""
    if not activities:
        return CoreSummary()

    total_distance = sum(_distance(a) for a in activities)
    total_time = sum(a.moving_time_s or 0 for a in activities)
    total_elevation = sum(_elevation(a) for a in activities)
    active_days = len({_local_date(a) for a in activities})
    weeks = _weeks_spanned(activities)

    return CoreSummary(
        total_activities=len(activities),
        total_distance=total_distance,
        total_time=total_time,
        total_elevation=total_elevation,
        active_days=active_days,
        average_per_week=WeeklyAverage(
            activities=len(activities) / weeks,
            distance=total_distance / weeks,
            time=total_time / weeks,
        ),
    )


def calculate_activity_type_breakdown(
    activities: Sequence[Activity],
) -> list[ActivityTypeBreakdown]:
    """Count and distance per activity type, most frequent first."""
    groups: dict[str, list[float]] = {}
    for a in activities:
        group = groups.setdefault(a.activity_type, [0, 0.0])
        group[0] += 1
        group[1] += _distance(a)

    total = len(activities)
    breakdown = [
        ActivityTypeBreakdown(
            type=activity_type,
            count=count,
            distance=distance,
            percentage=count / total * 100,
            icon=ACTIVITY_TYPE_ICONS.get(activity_type, DEFAULT_ACTIVITY_ICON),
        )
        for activity_type, (count, distance) in groups.items()
    ]
    return sorted(breakdown, key=lambda b: b.count, reverse=True)


def calculate_monthly_stats(
    activities: Sequence[Activity], year: int
) -> list[MonthlyStats]:
    """Always 12 entries (January first), zeros for inactive months."""
    months = [
        MonthlyStats(month=i + 1, month_name=MONTH_NAMES[i]) for i in range(12)
    ]

    for a in activities:
        start = a.local_start
        if start.year != year:
            continue
        stats = months[start.month - 1]
        stats.activities += 1
        stats.distance += _distance(a)
        stats.time += a.moving_time_s or 0
        stats.elevation += _elevation(a)

    return months


def calculate_best_performances(activities: Sequence[Activity]) -> BestPerformances:
    """Longest, highest and fastest efforts plus the busiest month and day."""
    if not activities:
        return BestPerformances()

    runs = [a for a in activities if a.activity_type == StravaActivityType.RUN]
    rides = [a for a in activities if a.activity_type == StravaActivityType.RIDE]

    highest = _max_by(activities, _elevation)

    month_counts: dict[int, int] = {}
    day_counts: dict[str, int] = {}
    for a in activities:
        start = a.local_start
        month_counts[start.month] = month_counts.get(start.month, 0) + 1
        key = start.date().isoformat()
        day_counts[key] = day_counts.get(key, 0) + 1

    most_active_month = None
    for month in sorted(month_counts):
        if most_active_month is None or month_counts[month] > most_active_month.count:
            most_active_month = MonthCount(month=month, count=month_counts[month])

    most_active_day = None
    for day, count in day_counts.items():
        if most_active_day is None or count > most_active_day.count:
            most_active_day = DayCount(date=day, count=count)

    return BestPerformances(
        longest_activity=_max_by(activities, _distance),
        longest_run=_max_by(runs, _distance),
        longest_ride=_max_by(rides, _distance),
        highest_elevation=highest if highest and _elevation(highest) else None,
        fastest_pace=_fastest_run(runs),
        most_active_month=most_active_month,
        most_active_day=most_active_day,
    )


def calculate_weekly_insights(activities: Sequence[Activity]) -> WeeklyInsights:
    """Weekly average, longest daily streak, favourite weekday and time."""
    if not activities:
        return WeeklyInsights()

    active_dates = sorted({_local_date(a) for a in activities})
    longest_streak = current = 1
    for prev, curr in zip(active_dates, active_dates[1:]):
        if curr - prev == timedelta(days=1):
            current += 1
            longest_streak = max(longest_streak, current)
        else:
            current = 1

    day_counts: dict[str, int] = {}
    for a in activities:
        name = WEEKDAY_NAMES[a.local_start.weekday()]
        day_counts[name] = day_counts.get(name, 0) + 1

    most_common_day = None
    for day, count in day_counts.items():
        if most_common_day is None or count > most_common_day.count:
            most_common_day = WeekdayCount(day=day, count=count)

    time_counts = calculate_time_of_day(activities)
    most_common_time = None
    for period in TIME_PERIODS:
        count = getattr(time_counts, period)
        if count > (most_common_time.count if most_common_time else 0):
            most_common_time = PeriodCount(period=period, count=count)

    return WeeklyInsights(
        average_per_week=len(activities) / _weeks_spanned(activities),
        longest_streak=longest_streak,
        most_common_day=most_common_day,
        most_common_time=most_common_time,
    )


def calculate_time_of_day(activities: Sequence[Activity]) -> TimeOfDayStats:
    stats = TimeOfDayStats()
    for a in activities:
        period = time_of_day_bucket(a.local_start.hour)
        setattr(stats, period, getattr(stats, period) + 1)
    return stats


def calculate_location_insights(activities: Sequence[Activity]) -> LocationInsights:
    """Top cities/countries and the number of distinct places."""
    city_counts: dict[str, int] = {}
    country_counts: dict[str, int] = {}
    locations: set[str] = set()

    for a in activities:
        city, country = a.location_city, a.location_country
        if city:
            city_counts[city] = city_counts.get(city, 0) + 1
            locations.add(f"{city}, {country or ''}")
        if country:
            country_counts[country] = country_counts.get(country, 0) + 1

    top_cities = sorted(city_counts.items(), key=lambda kv: kv[1], reverse=True)
    top_countries = sorted(country_counts.items(), key=lambda kv: kv[1], reverse=True)

    return LocationInsights(
        top_cities=[CityCount(city=c, count=n) for c, n in top_cities[:TOP_LOCATIONS]],
        top_countries=[
            CountryCount(country=c, count=n) for c, n in top_countries[:TOP_LOCATIONS]
        ],
        total_locations=len(locations),
    )


def generate_fun_facts(summary: CoreSummary) -> list[str]:
    """Comparisons that kick in once the year's totals pass a threshold."""
    facts = []

    km = summary.total_distance / 1000
    if km > EVEREST_HEIGHT_M:
        facts.append(f"You climbed higher than Mount Everest! ({km / EVEREST_HEIGHT_M:.1f}x)")
    if km > EARTH_CIRCUMFERENCE_KM:
        facts.append(f"You traveled around the Earth! ({km / EARTH_CIRCUMFERENCE_KM:.2f}x)")

    hours = summary.total_time / 3600
    if hours > 24:
        facts.append(f"You moved for {math.floor(hours / 24 + 0.5)} full days!")

    if summary.total_activities > 365:
        facts.append("You did more activities than days in a year!")

    if summary.total_elevation > EVEREST_HEIGHT_M:
        facts.append(
            f"You climbed {summary.total_elevation / EVEREST_HEIGHT_M:.1f} Mount Everests!"
        )

    return facts


def build_statistics(activities: Sequence[Activity], year: int) -> StatisticsBundle:
    """All statistics for one user and year."""
    summary = calculate_core_summary(activities)
    return StatisticsBundle(
        year=year,
        core_summary=summary,
        activity_breakdown=calculate_activity_type_breakdown(activities),
        monthly_stats=calculate_monthly_stats(activities, year),
        best_performances=calculate_best_performances(activities),
        weekly_insights=calculate_weekly_insights(activities),
        time_of_day=calculate_time_of_day(activities),
        location_insights=calculate_location_insights(activities),
        fun_facts=generate_fun_facts(summary),
    )


def _distance(a: Activity) -> float:
    return a.distance_m or 0.0


def _elevation(a: Activity) -> float:
    return a.elevation_gain_m or 0.0


def _local_date(a: Activity) -> date:
    return a.local_start.date()


def _weeks_spanned(activities: Sequence[Activity]) -> int:
    """Whole weeks between first and last start, at least 1."""
    starts = [a.start_date for a in activities]
    span = max(starts) - min(starts)
    return max(1, math.ceil(span / timedelta(weeks=1)))


def _max_by(activities: Sequence[Activity], key) -> Optional[Activity]:
    """First activity with the strictly greatest key."""
    best = None
    for a in activities:
        if best is None or key(a) > key(best):
            best = a
    return best


def _fastest_run(runs: Sequence[Activity]) -> Optional[Activity]:
    """Run with the lowest seconds-per-km."""
    fastest = None
    fastest_pace = math.inf
    for a in runs:
        if not a.distance_m:
            continue
        pace = (a.moving_time_s or 0) / (a.distance_m / 1000)
        if pace < fastest_pace:
            fastest, fastest_pace = a, pace
    return fastest
