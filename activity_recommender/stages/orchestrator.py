"""
Pipeline orchestrator: scores every pool candidate (nine signals, then fusion),
then hands the scored list to the ranker.

rank_candidates is the pure, synchronous entry point: given the same inputs it
returns the same ranked list. score_pool is its concurrent counterpart used by the
engine; scoring fans out over worker threads bounded by max_workers, and the
result order never depends on completion order because ranking re-sorts.

A candidate whose scoring raises is dropped (and its id reported); it never
aborts the request.
"""

import asyncio
import logging
from typing import List, Optional, Tuple

from ..errors import ComputationError
from ..models.behavior import BehaviorProfile
from ..models.candidate import Candidate
from ..models.config import RecommendationConfig, SignalWeights, resolve_config
from ..models.context import RecommendationContext
from ..models.filters import RecommendationFilters
from ..models.scoring import ScoredCandidate
from ..models.user import SocialSnapshot, UserProfile
from .fusion import DEFAULT_VARIANT, build_scored_candidate, select_weights
from .ranking import rank_and_diversify
from .signals import score_signals

logger = logging.getLogger(__name__)

# Errors a single candidate may raise while being scored. Anything else is a bug
# and propagates.
SCORING_ERRORS = (ComputationError, ArithmeticError, TypeError, ValueError)


def score_candidate(
    user: UserProfile,
    candidate: Candidate,
    context: RecommendationContext,
    behavior: BehaviorProfile,
    social: SocialSnapshot,
    weights: SignalWeights,
    variant: str = DEFAULT_VARIANT,
    config: Optional[RecommendationConfig] = None,
) -> ScoredCandidate:
    """All nine signals for one candidate, fused. Raises on a malformed candidate."""
    config = resolve_config(config)
    breakdown = score_signals(user, candidate, context, behavior, social, config)
    return build_scored_candidate(user, candidate, breakdown, behavior, weights, variant, config)


def _try_score(
    user: UserProfile,
    candidate: Candidate,
    context: RecommendationContext,
    behavior: BehaviorProfile,
    social: SocialSnapshot,
    weights: SignalWeights,
    variant: str,
    config: RecommendationConfig,
) -> Optional[ScoredCandidate]:
    try:
        return score_candidate(user, candidate, context, behavior, social, weights, variant, config)
    except SCORING_ERRORS as e:
        logger.warning(
            "[dropped] CANDIDATE_SCORING_FAILED candidate_id=%s error=%s",
            candidate.id, e,
        )
        return None


def _split(
    candidates: List[Candidate],
    results: List[Optional[ScoredCandidate]],
) -> Tuple[List[ScoredCandidate], List[str]]:
    scored: List[ScoredCandidate] = []
    dropped: List[str] = []
    for candidate, result in zip(candidates, results):
        if result is None:
            dropped.append(candidate.id)
        else:
            scored.append(result)
    return scored, dropped


def rank_candidates(
    user: UserProfile,
    candidates: List[Candidate],
    context: RecommendationContext,
    behavior: Optional[BehaviorProfile] = None,
    social: Optional[SocialSnapshot] = None,
    filters: Optional[RecommendationFilters] = None,
    config: Optional[RecommendationConfig] = None,
) -> Tuple[List[ScoredCandidate], List[str]]:
    """
    Score, fuse, rank, and diversify a prepared pool.

    behavior and social default to the neutral profile and an unavailable social
    snapshot. The weight table is chosen by the user's experiment bucket.

    Returns:
        ranked: ScoredCandidates after min_score, diversity cap, and limit
        dropped_ids: candidates whose scoring failed
    """
    config = resolve_config(config)
    behavior = behavior or BehaviorProfile.neutral()
    social = social or SocialSnapshot.unavailable()
    variant, weights = select_weights(user.id, config)

    results = [
        _try_score(user, c, context, behavior, social, weights, variant, config)
        for c in candidates
    ]
    scored, dropped = _split(candidates, results)
    return rank_and_diversify(scored, filters, config), dropped


async def score_pool(
    user: UserProfile,
    candidates: List[Candidate],
    context: RecommendationContext,
    behavior: BehaviorProfile,
    social: SocialSnapshot,
    weights: SignalWeights,
    variant: str = DEFAULT_VARIANT,
    config: Optional[RecommendationConfig] = None,
    max_workers: int = 8,
) -> Tuple[List[ScoredCandidate], List[str]]:
    """
    Score candidates concurrently, at most max_workers at a time.

    Returns (scored, dropped_ids) in pool order.
    """
    config = resolve_config(config)
    semaphore = asyncio.Semaphore(max(1, max_workers))

    async def _bounded(candidate: Candidate) -> Optional[ScoredCandidate]:
        async with semaphore:
            return await asyncio.to_thread(
                _try_score, user, candidate, context, behavior, social, weights, variant, config
            )

    results = await asyncio.gather(*(_bounded(c) for c in candidates))
    return _split(candidates, list(results))
