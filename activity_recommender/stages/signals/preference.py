"""
Declared and learned preference signals: personal_preference and behavioral_match.
"""

from typing import Dict

from ...models.behavior import BehaviorProfile
from ...models.candidate import Candidate, EnergyLevel
from ...models.config import DEFAULT_CONFIG, RecommendationConfig
from ...models.context import RecommendationContext
from ...models.user import SocialSnapshot, UserProfile
from ...taxonomy import category_profile
from .base import NEUTRAL, clamp

# Energy match by level distance: identical, adjacent, opposite.
ENERGY_MATCH: Dict[int, float] = {0: 1.0, 1: 0.33, 2: 0.0}


def energy_match(user_level: EnergyLevel, candidate_level: EnergyLevel) -> float:
    return ENERGY_MATCH[abs(user_level.rank - candidate_level.rank)]


def interest_overlap(user: UserProfile, candidate: Candidate) -> float:
    """Share of the user's interests that the candidate's tags or category cover."""
    if not user.interests:
        return 0.0
    matched = [i for i in user.interests if i in candidate.tags or i == candidate.category]
    return len(matched) / len(user.interests)


def personal_preference(
    user: UserProfile,
    candidate: Candidate,
    context: RecommendationContext,
    behavior: BehaviorProfile,
    social: SocialSnapshot,
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> float:
    """Interest overlap (up to +0.3), energy match (up to +0.2), age range fit (+0.1)."""
    score = NEUTRAL
    score += 0.3 * interest_overlap(user, candidate)

    if user.energy_level is not None:
        candidate_level = candidate.energy_level or EnergyLevel.MEDIUM
        score += 0.2 * energy_match(user.energy_level, candidate_level)

    if candidate.age_range is not None and user.age is not None:
        if candidate.age_range.contains(user.age):
            score += 0.1

    return clamp(score)


def behavioral_match(
    user: UserProfile,
    candidate: Candidate,
    context: RecommendationContext,
    behavior: BehaviorProfile,
    social: SocialSnapshot,
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> float:
    """Category preference (+0.3), time-window overlap (+0.2), group-size fit (+0.2)."""
    score = NEUTRAL

    if candidate.category in behavior.preferred_categories:
        score += 0.3

    windows = category_profile(candidate.category).time_windows
    if windows.intersection(behavior.active_time_windows):
        score += 0.2

    if candidate.is_multi_participant and behavior.sociability_index > 0.6:
        score += 0.2
    elif candidate.is_solo and behavior.sociability_index < 0.4:
        score += 0.2

    return clamp(score)
