"""Shared utilities: distance, time buckets, experiment bucketing, logging setup."""

from .bucketing import bucket
from .geo import haversine_m
from .timeparts import days_between, ensure_aware, season_for, time_of_day

__all__ = [
    "bucket",
    "haversine_m",
    "days_between",
    "ensure_aware",
    "season_for",
    "time_of_day",
]
