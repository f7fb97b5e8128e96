"""Data models for the recommendation engine."""

from .behavior import BehaviorEvent, BehaviorProfile, EventAction
from .candidate import (
    AgeRange,
    Candidate,
    CandidateStatus,
    EnergyLevel,
    GeoPoint,
    ensure_candidates,
)
from .config import (
    DEFAULT_CONFIG,
    DEFAULT_WEIGHTS,
    SIGNAL_NAMES,
    RecommendationConfig,
    SignalWeights,
    WeightVariant,
    resolve_config,
)
from .context import RecommendationContext, ensure_context
from .filters import PoolQuery, RecommendationFilters, ensure_filters
from .scoring import RankingResult, ScoredCandidate
from .user import (
    CohortQuery,
    SocialConnection,
    SocialSnapshot,
    UserProfile,
    ensure_connections,
    ensure_user,
)

__all__ = [
    "AgeRange",
    "BehaviorEvent",
    "BehaviorProfile",
    "Candidate",
    "CandidateStatus",
    "CohortQuery",
    "DEFAULT_CONFIG",
    "DEFAULT_WEIGHTS",
    "EnergyLevel",
    "EventAction",
    "GeoPoint",
    "PoolQuery",
    "RankingResult",
    "RecommendationConfig",
    "RecommendationContext",
    "RecommendationFilters",
    "SIGNAL_NAMES",
    "ScoredCandidate",
    "SignalWeights",
    "SocialConnection",
    "SocialSnapshot",
    "UserProfile",
    "WeightVariant",
    "ensure_candidates",
    "ensure_connections",
    "ensure_context",
    "ensure_filters",
    "ensure_user",
    "resolve_config",
]
