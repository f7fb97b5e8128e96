"""
Activity category taxonomy and the situational lookup tables used by the scorers.

CATEGORY_PROFILES is the canonical table: every category has a base popularity
weight (below 1.0 = less common, boosted by novelty) and the time windows it is
best suited for. WEATHER_CATEGORIES and SEASON_CATEGORIES may only reference
categories listed here; tests/test_taxonomy.py checks that contract.

Categories outside the table are still valid candidate tags. They get weight 1.0
and no preferred time windows.

This module has no imports from other activity_recommender packages.
"""

from enum import Enum
from typing import Dict, FrozenSet, NamedTuple, Tuple


class TimeOfDay(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"


# Canonical order, used to break ties when ranking time windows by frequency.
TIME_WINDOW_ORDER: Tuple[TimeOfDay, ...] = (
    TimeOfDay.MORNING,
    TimeOfDay.AFTERNOON,
    TimeOfDay.EVENING,
    TimeOfDay.NIGHT,
)


class Weather(str, Enum):
    SUNNY = "sunny"
    CLOUDY = "cloudy"
    RAINY = "rainy"
    SNOWY = "snowy"


class Season(str, Enum):
    SPRING = "spring"
    SUMMER = "summer"
    FALL = "fall"
    WINTER = "winter"


class CategoryProfile(NamedTuple):
    weight: float
    time_windows: FrozenSet[TimeOfDay]


def _windows(*names: TimeOfDay) -> FrozenSet[TimeOfDay]:
    return frozenset(names)


CATEGORY_PROFILES: Dict[str, CategoryProfile] = {
    "active": CategoryProfile(1.0, _windows(TimeOfDay.MORNING, TimeOfDay.AFTERNOON)),
    "social": CategoryProfile(1.0, _windows(TimeOfDay.AFTERNOON, TimeOfDay.EVENING)),
    "cultural": CategoryProfile(0.8, _windows(TimeOfDay.AFTERNOON, TimeOfDay.EVENING)),
    "outdoor": CategoryProfile(1.2, _windows(TimeOfDay.MORNING, TimeOfDay.AFTERNOON)),
    "indoor": CategoryProfile(0.9, _windows(TimeOfDay.EVENING, TimeOfDay.NIGHT)),
    "food": CategoryProfile(1.1, _windows(TimeOfDay.AFTERNOON, TimeOfDay.EVENING)),
    "entertainment": CategoryProfile(1.0, _windows(TimeOfDay.EVENING, TimeOfDay.NIGHT)),
    "romantic": CategoryProfile(1.3, _windows(TimeOfDay.EVENING)),
    "casual": CategoryProfile(
        1.0, _windows(TimeOfDay.MORNING, TimeOfDay.AFTERNOON, TimeOfDay.EVENING)
    ),
}

DEFAULT_CATEGORY_PROFILE = CategoryProfile(1.0, frozenset())

WEATHER_CATEGORIES: Dict[Weather, FrozenSet[str]] = {
    Weather.SUNNY: frozenset({"outdoor", "active", "social"}),
    Weather.CLOUDY: frozenset({"cultural", "social", "casual"}),
    Weather.RAINY: frozenset({"indoor", "cultural", "entertainment"}),
    Weather.SNOWY: frozenset({"indoor", "romantic", "entertainment"}),
}

# Shelter categories that still work when the weather turns bad.
BAD_WEATHER: FrozenSet[Weather] = frozenset({Weather.RAINY, Weather.SNOWY})
SHELTER_CATEGORIES: FrozenSet[str] = frozenset({"indoor", "entertainment", "cultural"})

SEASON_CATEGORIES: Dict[Season, FrozenSet[str]] = {
    Season.SPRING: frozenset({"outdoor", "active", "social"}),
    Season.SUMMER: frozenset({"outdoor", "active", "social", "food"}),
    Season.FALL: frozenset({"cultural", "social", "food"}),
    Season.WINTER: frozenset({"indoor", "romantic", "entertainment", "cultural"}),
}

# Categories and tags that mark a candidate as a social (group) activity.
SOCIAL_CATEGORIES: FrozenSet[str] = frozenset({"social", "entertainment"})
SOCIAL_TAGS: FrozenSet[str] = frozenset({"social", "group", "meetup", "party", "team"})


def category_profile(category: str) -> CategoryProfile:
    """Profile for a category, or the neutral default for categories outside the table."""
    return CATEGORY_PROFILES.get(category.strip().lower(), DEFAULT_CATEGORY_PROFILE)
