"""
Situational signals: where, when, and under what sky the request is made.

contextual_relevance, time_optimality, weather_suitability, seasonal_relevance.
"""

from ...models.behavior import BehaviorProfile
from ...models.candidate import Candidate
from ...models.config import DEFAULT_CONFIG, RecommendationConfig
from ...models.context import RecommendationContext
from ...models.user import SocialSnapshot, UserProfile
from ...taxonomy import (
    BAD_WEATHER,
    SEASON_CATEGORIES,
    SHELTER_CATEGORIES,
    WEATHER_CATEGORIES,
    category_profile,
)
from ...utils.geo import haversine_m
from .base import NEUTRAL, clamp


def contextual_relevance(
    user: UserProfile,
    candidate: Candidate,
    context: RecommendationContext,
    behavior: BehaviorProfile,
    social: SocialSnapshot,
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> float:
    """
    Linear proximity bonus (up to +0.3) inside proximity_cutoff_m, plus +0.2 when
    the candidate is available right now.

    Distance is measured from the live request coordinates, falling back to the
    user's profile location.
    """
    score = NEUTRAL

    origin = context.coordinates or user.location
    if origin is not None and candidate.location is not None:
        distance = haversine_m(origin.lat, origin.lon, candidate.location.lat, candidate.location.lon)
        if distance <= config.proximity_cutoff_m:
            score += 0.3 * (1 - distance / config.proximity_cutoff_m)

    if candidate.available_now:
        score += 0.2

    return clamp(score)


def time_optimality(
    user: UserProfile,
    candidate: Candidate,
    context: RecommendationContext,
    behavior: BehaviorProfile,
    social: SocialSnapshot,
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> float:
    if context.time_of_day in category_profile(candidate.category).time_windows:
        return 0.8
    return 0.3


def weather_suitability(
    user: UserProfile,
    candidate: Candidate,
    context: RecommendationContext,
    behavior: BehaviorProfile,
    social: SocialSnapshot,
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> float:
    if context.weather is None:
        return NEUTRAL
    if candidate.category in WEATHER_CATEGORIES[context.weather]:
        return 0.8
    if context.weather in BAD_WEATHER and candidate.category in SHELTER_CATEGORIES:
        return 0.7
    return 0.4


def seasonal_relevance(
    user: UserProfile,
    candidate: Candidate,
    context: RecommendationContext,
    behavior: BehaviorProfile,
    social: SocialSnapshot,
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> float:
    if context.season is not None and candidate.category in SEASON_CATEGORIES[context.season]:
        return 0.7
    return NEUTRAL
