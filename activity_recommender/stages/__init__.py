"""Pipeline stages: candidate pool, behavior profile, signals, fusion, ranking, orchestration."""

from .behavior_profile import build_behavior_profile, load_behavior_profile
from .candidate_pool import build_candidate_pool, build_pool_query
from .explanations import explain
from .fusion import select_weights
from .orchestrator import rank_candidates, score_pool
from .ranking import apply_diversity_cap, rank_and_diversify

__all__ = [
    "build_behavior_profile",
    "load_behavior_profile",
    "build_candidate_pool",
    "build_pool_query",
    "explain",
    "select_weights",
    "rank_candidates",
    "score_pool",
    "apply_diversity_cap",
    "rank_and_diversify",
]
