"""
Signal scorers: nine independent functions, one per signal.

Every scorer has the signature
    (user, candidate, context, behavior, social, config) -> float in [0, 1]
and no hidden state; 0.5 is the neutral "no signal" baseline. SIGNAL_SCORERS is
ordered like SIGNAL_NAMES.
"""

from typing import Callable, Dict

from ...models.behavior import BehaviorProfile
from ...models.candidate import Candidate
from ...models.config import DEFAULT_CONFIG, RecommendationConfig
from ...models.context import RecommendationContext
from ...models.user import SocialSnapshot, UserProfile
from .discovery import novelty_factor, popularity_boost
from .preference import behavioral_match, personal_preference
from .situational import (
    contextual_relevance,
    seasonal_relevance,
    time_optimality,
    weather_suitability,
)
from .social import build_cohort_query, load_social_snapshot, social_factors

SignalScorer = Callable[..., float]

SIGNAL_SCORERS: Dict[str, SignalScorer] = {
    "personal_preference": personal_preference,
    "behavioral_match": behavioral_match,
    "contextual_relevance": contextual_relevance,
    "social_factors": social_factors,
    "novelty_factor": novelty_factor,
    "time_optimality": time_optimality,
    "weather_suitability": weather_suitability,
    "popularity_boost": popularity_boost,
    "seasonal_relevance": seasonal_relevance,
}


def score_signals(
    user: UserProfile,
    candidate: Candidate,
    context: RecommendationContext,
    behavior: BehaviorProfile,
    social: SocialSnapshot,
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> Dict[str, float]:
    """Run every scorer for one candidate. Exceptions propagate to the caller."""
    return {
        name: scorer(user, candidate, context, behavior, social, config)
        for name, scorer in SIGNAL_SCORERS.items()
    }


__all__ = [
    "SIGNAL_SCORERS",
    "build_cohort_query",
    "load_social_snapshot",
    "score_signals",
    "behavioral_match",
    "contextual_relevance",
    "novelty_factor",
    "personal_preference",
    "popularity_boost",
    "seasonal_relevance",
    "social_factors",
    "time_optimality",
    "weather_suitability",
]
