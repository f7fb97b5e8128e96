"""
Social proof signal and the per-request social-graph reads behind it.

social_factors itself is pure: it reads a SocialSnapshot built once per request by
load_social_snapshot, which issues exactly two reads (connections, and cohort
participation for the whole pool in one batch) regardless of pool size.
"""

import asyncio
import logging
from typing import Sequence

from ...models.behavior import BehaviorProfile
from ...models.candidate import Candidate
from ...models.config import DEFAULT_CONFIG, RecommendationConfig
from ...models.context import RecommendationContext
from ...models.user import (
    CohortQuery,
    SocialConnection,
    SocialSnapshot,
    UserProfile,
    ensure_connections,
)
from ...services.stores import SocialGraph
from .base import NEUTRAL, clamp

logger = logging.getLogger(__name__)

CONNECTION_BONUS = 0.1
COHORT_BONUS = 0.2


def _shares_interest(connection: SocialConnection, candidate: Candidate) -> bool:
    return any(i in candidate.tags or i == candidate.category for i in connection.interests)


def social_factors(
    user: UserProfile,
    candidate: Candidate,
    context: RecommendationContext,
    behavior: BehaviorProfile,
    social: SocialSnapshot,
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> float:
    """
    +0.1 per connection interested in the candidate (capped at connection_bonus_cap),
    plus up to +0.2 scaled by how many cohort members already joined.
    Neutral when the social graph could not be read.
    """
    if not social.available:
        return NEUTRAL

    score = NEUTRAL
    interested = sum(1 for c in social.connections if _shares_interest(c, candidate))
    score += min(config.connection_bonus_cap, CONNECTION_BONUS * interested)

    participation = social.cohort_participation.get(candidate.id, 0)
    if participation > 0:
        score += COHORT_BONUS * min(1.0, participation / config.cohort_participation_scale)

    return clamp(score)


def build_cohort_query(
    user: UserProfile,
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> CohortQuery:
    """Users within cohort_age_span years of the user who share at least one interest."""
    age_min = age_max = None
    if user.age is not None:
        age_min = max(0, user.age - config.cohort_age_span)
        age_max = user.age + config.cohort_age_span
    return CohortQuery(
        exclude_user_id=user.id,
        interests=list(user.interests),
        age_min=age_min,
        age_max=age_max,
        max_members=config.cohort_max_members,
    )


async def load_social_snapshot(
    user: UserProfile,
    candidate_ids: Sequence[str],
    social_graph: SocialGraph,
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> SocialSnapshot:
    """
    Issue both social reads concurrently, once for the whole request.

    Either read failing makes the snapshot unavailable (neutral social scores for
    every candidate); the failure is logged, not raised.
    """
    cohort = build_cohort_query(user, config)

    async def _cohort():
        # No shared interests means an empty cohort; skip the read.
        if not cohort.interests or not candidate_ids:
            return {}
        return await social_graph.fetch_cohort_participation(list(candidate_ids), cohort)

    try:
        connections, participation = await asyncio.gather(
            social_graph.fetch_connections(user.id),
            _cohort(),
        )
        return SocialSnapshot(
            connections=ensure_connections(list(connections or [])),
            cohort_participation={str(k): int(v) for k, v in (participation or {}).items()},
        )
    except Exception as e:
        logger.warning(
            "[degraded] SOCIAL_GRAPH_UNAVAILABLE user_id=%s error=%s",
            user.id, e,
        )
        return SocialSnapshot.unavailable()
