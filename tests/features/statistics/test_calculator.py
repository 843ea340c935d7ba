"""
Tests for the year statistics calculator.

Activities are transient (never stored); every function under test is pure.
"""

from datetime import datetime, timedelta

import pytest

from fitrecap.features.statistics import (
    CoreSummary,
    build_statistics,
    calculate_activity_type_breakdown,
    calculate_best_performances,
    calculate_core_summary,
    calculate_location_insights,
    calculate_monthly_stats,
    calculate_time_of_day,
    calculate_weekly_insights,
    generate_fun_facts,
    time_of_day_bucket,
)
from tests.factories import make_activity


BERLIN = "(GMT+01:00) Europe/Berlin"


def on_days(*days, month=3, year=2024, hour=8):
    """One activity per given day of month."""
    return [
        make_activity(strava_id=i, start_date=datetime(year, month, day, hour))
        for i, day in enumerate(days, start=1)
    ]


# =============================================================================
# Time of Day
# =============================================================================

class TestTimeOfDayBucket:
    """Tests for hour -> period mapping."""

    @pytest.mark.parametrize("hour,period", [
        (0, "night"),
        (4, "night"),
        (5, "morning"),
        (11, "morning"),
        (12, "afternoon"),
        (16, "afternoon"),
        (17, "evening"),
        (20, "evening"),
        (21, "night"),
        (23, "night"),
    ])
    def test_bucket_boundaries(self, hour, period):
        assert time_of_day_bucket(hour) == period

    def test_counts_use_local_hour(self):
        """20:30 UTC in Berlin is 21:30 local, so night, not evening."""
        activities = [
            make_activity(start_date=datetime(2024, 3, 17, 20, 30), timezone=BERLIN),
            make_activity(start_date=datetime(2024, 3, 17, 6, 0)),
        ]
        stats = calculate_time_of_day(activities)
        assert stats.night == 1
        assert stats.morning == 1
        assert stats.evening == 0
        assert stats.afternoon == 0


# =============================================================================
# Core Summary
# =============================================================================

class TestCoreSummary:
    """Tests for year totals and weekly averages."""

    def test_empty_is_all_zero(self):
        summary = calculate_core_summary([])
        assert summary.total_activities == 0
        assert summary.total_distance == 0
        assert summary.total_time == 0
        assert summary.total_elevation == 0
        assert summary.active_days == 0
        assert summary.average_per_week.activities == 0

    def test_total_distance_is_sum_in_any_order(self):
        activities = [
            make_activity(strava_id=1, distance_m=1234.5),
            make_activity(strava_id=2, distance_m=10000.0, start_date=datetime(2024, 5, 1)),
            make_activity(strava_id=3, distance_m=42195.0, start_date=datetime(2024, 9, 1)),
        ]
        forward = calculate_core_summary(activities)
        backward = calculate_core_summary(list(reversed(activities)))

        assert forward.total_distance == pytest.approx(1234.5 + 10000.0 + 42195.0)
        assert backward.total_distance == pytest.approx(forward.total_distance)

    def test_sums_time_and_elevation(self):
        activities = [
            make_activity(strava_id=1, moving_time_s=600, elevation_gain_m=10.0),
            make_activity(strava_id=2, moving_time_s=900, elevation_gain_m=None),
        ]
        summary = calculate_core_summary(activities)
        assert summary.total_time == 1500
        assert summary.total_elevation == 10.0

    def test_active_days_by_local_date(self):
        """23:30 UTC on the 17th is already the 18th in Berlin."""
        activities = [
            make_activity(strava_id=1, start_date=datetime(2024, 3, 17, 23, 30), timezone=BERLIN),
            make_activity(strava_id=2, start_date=datetime(2024, 3, 18, 8, 0), timezone=BERLIN),
        ]
        assert calculate_core_summary(activities).active_days == 1

    def test_single_day_counts_as_one_week(self):
        summary = calculate_core_summary(on_days(17, 17))
        assert summary.average_per_week.activities == 2
        assert summary.average_per_week.distance == 10000.0

    def test_weeks_rounded_up(self):
        """15 days between first and last start -> 3 weeks."""
        summary = calculate_core_summary(on_days(1, 16))
        assert summary.average_per_week.activities == pytest.approx(2 / 3)
        assert summary.average_per_week.time == pytest.approx(3000 / 3)


# =============================================================================
# Activity Type Breakdown
# =============================================================================

class TestActivityTypeBreakdown:
    """Tests for per-type grouping."""

    def test_percentages_sum_to_100(self):
        activities = [
            make_activity(strava_id=i, activity_type=t)
            for i, t in enumerate(["Run", "Run", "Ride", "Swim", "Walk", "Run", "Yoga"])
        ]
        breakdown = calculate_activity_type_breakdown(activities)
        assert sum(b.percentage for b in breakdown) == pytest.approx(100.0)

    def test_sorted_by_count(self):
        activities = [
            make_activity(strava_id=1, activity_type="Ride", distance_m=30000.0),
            make_activity(strava_id=2, activity_type="Run"),
            make_activity(strava_id=3, activity_type="Run"),
        ]
        breakdown = calculate_activity_type_breakdown(activities)

        assert [b.type for b in breakdown] == ["Run", "Ride"]
        assert breakdown[0].count == 2
        assert breakdown[0].distance == 10000.0
        assert breakdown[1].distance == 30000.0

    def test_unknown_type_gets_default_icon(self):
        breakdown = calculate_activity_type_breakdown([
            make_activity(activity_type="Kitesurf"),
        ])
        assert breakdown[0].icon == "🏃"

    def test_empty(self):
        assert calculate_activity_type_breakdown([]) == []


# =============================================================================
# Monthly Stats
# =============================================================================

class TestMonthlyStats:
    """Tests for the 12-month series."""

    def test_empty_year_has_twelve_months(self):
        months = calculate_monthly_stats([], 2024)
        assert len(months) == 12
        assert [m.month for m in months] == list(range(1, 13))
        assert months[0].month_name == "Jan"
        assert all(m.activities == 0 for m in months)

    def test_activity_lands_in_its_month(self):
        activities = [
            make_activity(strava_id=1, start_date=datetime(2024, 3, 2), moving_time_s=100),
            make_activity(strava_id=2, start_date=datetime(2024, 3, 20), moving_time_s=200),
            make_activity(strava_id=3, start_date=datetime(2024, 11, 5), elevation_gain_m=55.0),
        ]
        months = calculate_monthly_stats(activities, 2024)

        assert len(months) == 12
        assert months[2].activities == 2
        assert months[2].time == 300
        assert months[2].distance == 10000.0
        assert months[10].elevation == 55.0
        assert months[0].activities == 0

    def test_other_years_ignored(self):
        activities = [make_activity(start_date=datetime(2023, 3, 2))]
        months = calculate_monthly_stats(activities, 2024)
        assert sum(m.activities for m in months) == 0


# =============================================================================
# Best Performances
# =============================================================================

class TestBestPerformances:
    """Tests for year records."""

    def test_empty(self):
        best = calculate_best_performances([])
        assert best.longest_activity is None
        assert best.longest_run is None
        assert best.longest_ride is None
        assert best.highest_elevation is None
        assert best.fastest_pace is None
        assert best.most_active_month is None
        assert best.most_active_day is None

    def test_longest_by_type(self):
        run = make_activity(strava_id=1, activity_type="Run", distance_m=21100.0)
        ride = make_activity(strava_id=2, activity_type="Ride", distance_m=80000.0)
        walk = make_activity(strava_id=3, activity_type="Walk", distance_m=3000.0)

        best = calculate_best_performances([run, ride, walk])

        assert best.longest_activity is ride
        assert best.longest_run is run
        assert best.longest_ride is ride

    def test_no_rides(self):
        best = calculate_best_performances([make_activity(activity_type="Run")])
        assert best.longest_ride is None

    def test_highest_elevation_requires_climbing(self):
        flat = [make_activity(strava_id=i, elevation_gain_m=0.0) for i in range(3)]
        assert calculate_best_performances(flat).highest_elevation is None

        hilly = make_activity(strava_id=9, elevation_gain_m=850.0)
        assert calculate_best_performances(flat + [hilly]).highest_elevation is hilly

    def test_fastest_pace(self):
        slow = make_activity(strava_id=1, distance_m=10000.0, moving_time_s=3600)
        fast = make_activity(strava_id=2, distance_m=5000.0, moving_time_s=1200)
        ride = make_activity(strava_id=3, activity_type="Ride", distance_m=40000.0, moving_time_s=3600)

        assert calculate_best_performances([slow, fast, ride]).fastest_pace is fast

    def test_fastest_pace_skips_zero_distance(self):
        treadmill = make_activity(strava_id=1, distance_m=0.0, moving_time_s=600)
        run = make_activity(strava_id=2, distance_m=5000.0, moving_time_s=1800)

        assert calculate_best_performances([treadmill, run]).fastest_pace is run

    def test_most_active_month_tie_goes_to_earlier_month(self):
        activities = [
            make_activity(strava_id=1, start_date=datetime(2024, 6, 1)),
            make_activity(strava_id=2, start_date=datetime(2024, 2, 1)),
            make_activity(strava_id=3, start_date=datetime(2024, 6, 2)),
            make_activity(strava_id=4, start_date=datetime(2024, 2, 2)),
        ]
        best = calculate_best_performances(activities)
        assert best.most_active_month.month == 2
        assert best.most_active_month.count == 2

    def test_most_active_day(self):
        activities = [
            make_activity(strava_id=1, start_date=datetime(2024, 4, 1, 7)),
            make_activity(strava_id=2, start_date=datetime(2024, 4, 2, 7)),
            make_activity(strava_id=3, start_date=datetime(2024, 4, 2, 18)),
        ]
        best = calculate_best_performances(activities)
        assert best.most_active_day.date == "2024-04-02"
        assert best.most_active_day.count == 2


# =============================================================================
# Weekly Insights
# =============================================================================

class TestWeeklyInsights:
    """Tests for streaks and favourite day/time."""

    def test_empty(self):
        insights = calculate_weekly_insights([])
        assert insights.longest_streak == 0
        assert insights.average_per_week == 0
        assert insights.most_common_day is None
        assert insights.most_common_time is None

    def test_streak_with_gap(self):
        """Days 1, 2, 3, 5, 6 -> longest streak 3."""
        assert calculate_weekly_insights(on_days(1, 2, 3, 5, 6)).longest_streak == 3

    def test_streak_ignores_repeat_days(self):
        assert calculate_weekly_insights(on_days(10, 10, 11, 11)).longest_streak == 2

    def test_single_activity_streak(self):
        assert calculate_weekly_insights(on_days(4)).longest_streak == 1

    def test_streak_across_month_end(self):
        activities = on_days(30, 31) + [
            make_activity(strava_id=9, start_date=datetime(2024, 4, 1, 8))
        ]
        assert calculate_weekly_insights(activities).longest_streak == 3

    def test_most_common_day_and_time(self):
        # 2024-03-18 and 2024-03-25 are Mondays
        activities = [
            make_activity(strava_id=1, start_date=datetime(2024, 3, 18, 18)),
            make_activity(strava_id=2, start_date=datetime(2024, 3, 25, 19)),
            make_activity(strava_id=3, start_date=datetime(2024, 3, 20, 7)),
        ]
        insights = calculate_weekly_insights(activities)

        assert insights.most_common_day.day == "Monday"
        assert insights.most_common_day.count == 2
        assert insights.most_common_time.period == "evening"
        assert insights.most_common_time.count == 2

    def test_average_per_week_matches_summary(self):
        activities = on_days(1, 16)
        summary = calculate_core_summary(activities)
        insights = calculate_weekly_insights(activities)
        assert insights.average_per_week == summary.average_per_week.activities


# =============================================================================
# Location Insights
# =============================================================================

class TestLocationInsights:
    """Tests for city/country rankings."""

    def test_top_five_limit(self):
        cities = ["A", "B", "C", "D", "E", "F", "A", "B", "A"]
        activities = [
            make_activity(strava_id=i, location_city=c, location_country="X")
            for i, c in enumerate(cities)
        ]
        insights = calculate_location_insights(activities)

        assert len(insights.top_cities) == 5
        assert insights.top_cities[0].city == "A"
        assert insights.top_cities[0].count == 3
        assert insights.top_cities[1].city == "B"
        assert insights.top_countries[0].country == "X"
        assert insights.top_countries[0].count == 9
        assert insights.total_locations == 6

    def test_same_city_different_country(self):
        activities = [
            make_activity(strava_id=1, location_city="Paris", location_country="France"),
            make_activity(strava_id=2, location_city="Paris", location_country="United States"),
            make_activity(strava_id=3, location_city="Paris", location_country="France"),
        ]
        assert calculate_location_insights(activities).total_locations == 2

    def test_unknown_city_not_counted(self):
        activities = [make_activity(location_city=None, location_country="Kazakhstan")]
        insights = calculate_location_insights(activities)

        assert insights.top_cities == []
        assert insights.total_locations == 0
        assert insights.top_countries[0].country == "Kazakhstan"


# =============================================================================
# Fun Facts
# =============================================================================

class TestFunFacts:
    """Tests for threshold-triggered comparisons."""

    def test_nothing_for_small_year(self):
        summary = CoreSummary(total_activities=10, total_distance=50000.0, total_time=3600)
        assert generate_fun_facts(summary) == []

    def test_all_thresholds(self):
        summary = CoreSummary(
            total_activities=400,
            total_distance=41_000_000.0,  # 41,000 km
            total_time=50 * 3600,
            total_elevation=20000.0,
        )
        facts = generate_fun_facts(summary)

        assert any("around the Earth" in f for f in facts)
        assert any("higher than Mount Everest" in f for f in facts)
        assert any("2 full days" in f for f in facts)
        assert any("more activities than days" in f for f in facts)
        assert any("2.3 Mount Everests" in f for f in facts)

    def test_each_threshold_independent(self):
        facts = generate_fun_facts(CoreSummary(total_activities=366))
        assert facts == ["You did more activities than days in a year!"]


# =============================================================================
# Bundle
# =============================================================================

class TestBuildStatistics:
    """Tests for the combined result."""

    def test_empty_year(self):
        bundle = build_statistics([], 2024)
        assert bundle.year == 2024
        assert bundle.core_summary.total_activities == 0
        assert len(bundle.monthly_stats) == 12
        assert bundle.activity_breakdown == []
        assert bundle.fun_facts == []

    def test_populated_year(self):
        start = datetime(2024, 1, 1, 7)
        activities = [
            make_activity(strava_id=i, start_date=start + timedelta(days=i))
            for i in range(10)
        ]
        bundle = build_statistics(activities, 2024)

        assert bundle.core_summary.total_activities == 10
        assert bundle.weekly_insights.longest_streak == 10
        assert bundle.monthly_stats[0].activities == 10
        assert bundle.time_of_day.morning == 10
