"""
Utility Tests: geo distance, experiment bucketing, and time helpers.

Run:
----
    pytest tests/test_utils.py -v
"""

from datetime import datetime, timedelta, timezone

import pytest

from activity_recommender.taxonomy import Season, TimeOfDay
from activity_recommender.utils import (
    bucket,
    days_between,
    ensure_aware,
    haversine_m,
    season_for,
    time_of_day,
)


class TestHaversine:
    def test_same_point_is_zero(self):
        assert haversine_m(40.0, -74.0, 40.0, -74.0) == pytest.approx(0.0, abs=1e-6)

    def test_one_degree_of_latitude(self):
        # 2 * pi * 6371 km / 360
        assert haversine_m(0.0, 0.0, 1.0, 0.0) == pytest.approx(111_194.9, rel=1e-4)

    def test_symmetric(self):
        a = haversine_m(40.7128, -74.0060, 34.0522, -118.2437)
        b = haversine_m(34.0522, -118.2437, 40.7128, -74.0060)
        assert a == pytest.approx(b)
        # New York to Los Angeles, roughly 3,936 km
        assert 3_900_000 < a < 3_970_000


class TestBucket:
    def test_stable(self):
        assert bucket("user-42", "exp") == bucket("user-42", "exp")

    def test_range(self):
        for i in range(500):
            assert 0 <= bucket(f"user-{i}", "exp") < 100

    def test_salt_changes_assignment(self):
        ids = [f"user-{i}" for i in range(50)]
        assert [bucket(i, "a") for i in ids] != [bucket(i, "b") for i in ids]

    def test_spreads_users(self):
        slots = {bucket(f"user-{i}", "exp") for i in range(1000)}
        assert len(slots) > 90


class TestTimeParts:
    @pytest.mark.parametrize(
        "hour, expected",
        [
            (0, TimeOfDay.NIGHT),
            (5, TimeOfDay.NIGHT),
            (6, TimeOfDay.MORNING),
            (11, TimeOfDay.MORNING),
            (12, TimeOfDay.AFTERNOON),
            (17, TimeOfDay.AFTERNOON),
            (18, TimeOfDay.EVENING),
            (23, TimeOfDay.EVENING),
        ],
    )
    def test_time_of_day_boundaries(self, hour, expected):
        assert time_of_day(datetime(2024, 1, 1, hour, 30)) == expected

    @pytest.mark.parametrize(
        "month, expected",
        [
            (1, Season.WINTER),
            (3, Season.SPRING),
            (5, Season.SPRING),
            (7, Season.SUMMER),
            (9, Season.FALL),
            (11, Season.FALL),
            (12, Season.WINTER),
        ],
    )
    def test_season_for(self, month, expected):
        assert season_for(datetime(2024, month, 15)) == expected

    def test_ensure_aware_attaches_utc(self):
        naive = datetime(2024, 7, 1, 12, 0)
        aware = ensure_aware(naive)
        assert aware.tzinfo == timezone.utc
        assert aware.hour == 12

    def test_ensure_aware_keeps_existing_zone(self):
        tz = timezone(timedelta(hours=-5))
        dt = datetime(2024, 7, 1, 12, 0, tzinfo=tz)
        assert ensure_aware(dt) is dt

    def test_days_between_mixes_naive_and_aware(self):
        later = datetime(2024, 7, 15, 12, 0, tzinfo=timezone.utc)
        earlier = datetime(2024, 7, 14, 0, 0)
        assert days_between(earlier, later) == pytest.approx(1.5)
