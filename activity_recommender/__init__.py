"""
Activity Recommendation Engine

Ranks candidate activities for a user from nine weighted signals (declared
preferences, behavior history, location and time, social proof, novelty, timing,
weather, popularity, season), with explanations and a per-category diversity cap.

- models/: RecommendationConfig, Candidate, UserProfile, ScoredCandidate, ...
- stages/: candidate_pool, behavior_profile, signals, fusion, ranking, orchestrator
- services/: store and cache protocols, in-memory implementations
- engine.py: RecommendationEngine (async entry point)
"""

from .config import EngineSettings, get_settings, reload_settings
from .engine import RecommendationEngine
from .errors import (
    ComputationError,
    InputError,
    RecommendationError,
    RecommendationTimeout,
    UpstreamUnavailable,
)
from .models import (
    DEFAULT_CONFIG,
    BehaviorProfile,
    Candidate,
    RankingResult,
    RecommendationConfig,
    RecommendationContext,
    RecommendationFilters,
    ScoredCandidate,
    SignalWeights,
    UserProfile,
)
from .stages.orchestrator import rank_candidates
from .utils.logging import configure_logging

__all__ = [
    "RecommendationEngine",
    "rank_candidates",
    "EngineSettings",
    "get_settings",
    "reload_settings",
    "configure_logging",
    "RecommendationError",
    "InputError",
    "UpstreamUnavailable",
    "ComputationError",
    "RecommendationTimeout",
    "DEFAULT_CONFIG",
    "RecommendationConfig",
    "SignalWeights",
    "Candidate",
    "UserProfile",
    "BehaviorProfile",
    "RecommendationContext",
    "RecommendationFilters",
    "ScoredCandidate",
    "RankingResult",
]
