"""
Score Fuser

Combines the nine signal scores into one total with a fixed (or experiment-assigned)
weight table, attaches a confidence based on input completeness, and the reasons
for strong signals.
"""

from typing import Dict, Tuple

import numpy as np

from ..models.behavior import BehaviorProfile
from ..models.candidate import Candidate
from ..models.config import (
    DEFAULT_CONFIG,
    SIGNAL_NAMES,
    RecommendationConfig,
    SignalWeights,
)
from ..models.scoring import ScoredCandidate
from ..models.user import UserProfile
from ..utils.bucketing import bucket
from .explanations import explain
from .signals.base import clamp

DEFAULT_VARIANT = "default"

# Confidence: 0.5 base, +0.2 declared interests, +0.2 behavior sample above
# this size, +0.1 candidate rated at least this often.
CONFIDENCE_SAMPLE_SIZE = 10
CONFIDENCE_RATING_COUNT = 5


def select_weights(
    user_id: str,
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> Tuple[str, SignalWeights]:
    """
    Weight table for this user. Without experiment variants the configured table is
    used; otherwise bucket(user_id, experiment_salt) walks the cumulative traffic.
    """
    if not config.weight_variants:
        return DEFAULT_VARIANT, config.weights
    slot = bucket(user_id, config.experiment_salt)
    cumulative = 0
    for variant in config.weight_variants:
        cumulative += variant.traffic
        if slot < cumulative:
            return variant.name, variant.weights
    first = config.weight_variants[0]
    return first.name, first.weights


def fuse(breakdown: Dict[str, float], weights: SignalWeights) -> float:
    """total = sum(component * weight) over SIGNAL_NAMES, clamped to [0, 1]."""
    scores = np.array([breakdown.get(name, 0.5) for name in SIGNAL_NAMES], dtype=float)
    w = np.array([getattr(weights, name) for name in SIGNAL_NAMES], dtype=float)
    return clamp(float(np.dot(scores, w)))


def confidence(
    user: UserProfile,
    candidate: Candidate,
    behavior: BehaviorProfile,
) -> float:
    value = 0.5
    if user.interests:
        value += 0.2
    if behavior.sample_size > CONFIDENCE_SAMPLE_SIZE:
        value += 0.2
    if candidate.rating_count >= CONFIDENCE_RATING_COUNT:
        value += 0.1
    return clamp(value)


def build_scored_candidate(
    user: UserProfile,
    candidate: Candidate,
    breakdown: Dict[str, float],
    behavior: BehaviorProfile,
    weights: SignalWeights,
    variant: str = DEFAULT_VARIANT,
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> ScoredCandidate:
    """Fuse one candidate's breakdown into a ScoredCandidate."""
    return ScoredCandidate(
        candidate=candidate,
        total_score=fuse(breakdown, weights),
        breakdown=dict(breakdown),
        confidence=confidence(user, candidate, behavior),
        reasons=explain(breakdown, config.reason_threshold),
        weight_variant=variant,
    )
