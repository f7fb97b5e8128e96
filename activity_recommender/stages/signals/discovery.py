"""
Discovery signals: novelty_factor favors fresh and less common activities,
popularity_boost favors activities that are filling up but not full.
"""

from ...errors import ComputationError
from ...models.behavior import BehaviorProfile
from ...models.candidate import Candidate
from ...models.config import DEFAULT_CONFIG, RecommendationConfig
from ...models.context import RecommendationContext
from ...models.user import SocialSnapshot, UserProfile
from ...taxonomy import category_profile
from ...utils.timeparts import days_between
from .base import NEUTRAL, clamp


def novelty_factor(
    user: UserProfile,
    candidate: Candidate,
    context: RecommendationContext,
    behavior: BehaviorProfile,
    social: SocialSnapshot,
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> float:
    """+0.3 for candidates younger than novelty_window_days, +0.2 for less common categories."""
    score = NEUTRAL
    # Age is measured against the request time, not the wall clock, so scores are reproducible.
    if days_between(candidate.created_at, context.timestamp) < config.novelty_window_days:
        score += 0.3
    if category_profile(candidate.category).weight < 1.0:
        score += 0.2
    return clamp(score)


def popularity_boost(
    user: UserProfile,
    candidate: Candidate,
    context: RecommendationContext,
    behavior: BehaviorProfile,
    social: SocialSnapshot,
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> float:
    """0.8 in the 40-80% fill sweet spot, 0.6 below it (still has space), 0.3 above (nearly full)."""
    capacity = candidate.max_participants
    if capacity is None:
        capacity = config.default_capacity
    if capacity <= 0:
        raise ComputationError(candidate.id, f"max_participants must be positive, got {capacity}")

    ratio = candidate.participants / capacity
    if 0.4 <= ratio <= 0.8:
        return 0.8
    if ratio < 0.4:
        return 0.6
    return 0.3
