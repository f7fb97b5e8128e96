"""
Recommendation engine: the in-process entry point.

    engine = RecommendationEngine(candidate_store, user_store, event_log, social_graph)
    items = await engine.get_recommendations("u1", {"timestamp": now}, {"limit": 10})

One request:
  1. Validate inputs (InputError before any read completes)
  2. Concurrently: load the behavior profile | fetch user -> build pool -> social snapshot
  3. Score the pool with bounded concurrency, fuse, explain
  4. Rank, diversity-cap, truncate

The engine keeps no state between requests apart from the optional caller-owned
cache. The whole request runs under the configured timeout.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import ValidationError

from .config import EngineSettings, get_settings
from .errors import InputError, RecommendationTimeout, UpstreamUnavailable
from .models.behavior import BehaviorProfile
from .models.candidate import Candidate
from .models.config import RecommendationConfig
from .models.context import RecommendationContext, ensure_context
from .models.filters import RecommendationFilters, ensure_filters
from .models.scoring import RankingResult, ScoredCandidate
from .models.user import SocialSnapshot, UserProfile, ensure_user
from .services.cache import Cache
from .services.stores import CandidateStore, EventLog, SocialGraph, UserStore
from .stages.behavior_profile import load_behavior_profile
from .stages.candidate_pool import build_candidate_pool
from .stages.fusion import select_weights
from .stages.orchestrator import score_pool
from .stages.ranking import rank_and_diversify
from .stages.signals import load_social_snapshot

logger = logging.getLogger(__name__)

BEHAVIOR_HISTORY_UNAVAILABLE = "BEHAVIOR_HISTORY_UNAVAILABLE"
SOCIAL_GRAPH_UNAVAILABLE = "SOCIAL_GRAPH_UNAVAILABLE"


def _validate_request(
    user_id: Any,
    context: Union[Dict[str, Any], RecommendationContext, None],
    filters: Union[Dict[str, Any], RecommendationFilters, None],
) -> Tuple[str, RecommendationContext, RecommendationFilters]:
    if not isinstance(user_id, str) or not user_id.strip():
        raise InputError("user_id is required")
    if context is None:
        raise InputError("context is required")
    try:
        return user_id.strip(), ensure_context(context), ensure_filters(filters)
    except ValidationError as e:
        raise InputError(f"Invalid request: {e}") from e


class RecommendationEngine:
    """
    Ranks activities for one user per call.

    Collaborators are async read-only stores (see services/stores.py). config
    defaults to the settings' ENGINE_CONFIG_PATH file, or the built-in defaults.
    """

    def __init__(
        self,
        candidate_store: CandidateStore,
        user_store: UserStore,
        event_log: EventLog,
        social_graph: SocialGraph,
        config: Optional[RecommendationConfig] = None,
        settings: Optional[EngineSettings] = None,
        cache: Optional[Cache] = None,
    ):
        self.candidate_store = candidate_store
        self.user_store = user_store
        self.event_log = event_log
        self.social_graph = social_graph
        self.settings = settings or get_settings()
        self.config = config if config is not None else self.settings.load_recommendation_config()
        self.cache = cache

    async def get_recommendations(
        self,
        user_id: str,
        context: Union[Dict[str, Any], RecommendationContext],
        filters: Union[Dict[str, Any], RecommendationFilters, None] = None,
    ) -> List[ScoredCandidate]:
        """Ranked, explained, diversity-capped recommendations for user_id."""
        result = await self.run(user_id, context, filters)
        return result.items

    async def run(
        self,
        user_id: str,
        context: Union[Dict[str, Any], RecommendationContext],
        filters: Union[Dict[str, Any], RecommendationFilters, None] = None,
    ) -> RankingResult:
        """
        Same as get_recommendations, plus diagnostics.

        Raises:
            InputError: blank user id, malformed context or filters, unknown user
            UpstreamUnavailable: the user store or candidate store failed
            RecommendationTimeout: the request took longer than request_timeout
        """
        user_id, ctx, flt = _validate_request(user_id, context, filters)
        try:
            return await asyncio.wait_for(
                self._run(user_id, ctx, flt),
                timeout=self.settings.request_timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error(
                "[fatal] REQUEST_TIMEOUT user_id=%s timeout=%s",
                user_id, self.settings.request_timeout,
            )
            raise RecommendationTimeout(
                f"Recommendation for {user_id} exceeded {self.settings.request_timeout}s"
            ) from e

    async def _fetch_user(self, user_id: str) -> UserProfile:
        try:
            record = await self.user_store.fetch_user(user_id)
        except Exception as e:
            logger.error("[fatal] USER_PROFILE_UNAVAILABLE user_id=%s error=%s", user_id, e)
            raise UpstreamUnavailable("user_store", str(e)) from e
        if record is None:
            raise InputError(f"Unknown user: {user_id}")
        try:
            return ensure_user(record)
        except ValidationError as e:
            raise InputError(f"Invalid user profile for {user_id}: {e}") from e

    async def _user_pool_social(
        self,
        user_id: str,
        context: RecommendationContext,
        filters: RecommendationFilters,
    ) -> Tuple[UserProfile, List[Candidate], List[str], SocialSnapshot]:
        user = await self._fetch_user(user_id)
        pool, dropped = await build_candidate_pool(
            user, context, filters, self.candidate_store, self.config, self.cache
        )
        social = await load_social_snapshot(
            user, [c.id for c in pool], self.social_graph, self.config
        )
        return user, pool, dropped, social

    async def _run(
        self,
        user_id: str,
        context: RecommendationContext,
        filters: RecommendationFilters,
    ) -> RankingResult:
        behavior, (user, pool, dropped, social) = await asyncio.gather(
            load_behavior_profile(user_id, self.event_log, self.config, self.cache),
            self._user_pool_social(user_id, context, filters),
        )

        degraded = _degraded_codes(behavior, social)
        variant, weights = select_weights(user.id, self.config)
        scored, failed = await score_pool(
            user, pool, context, behavior, social, weights, variant,
            self.config, self.settings.max_workers,
        )
        items = rank_and_diversify(scored, filters, self.config)

        logger.info(
            "[ranked] RECOMMENDATIONS_READY user_id=%s pool=%d returned=%d variant=%s degraded=%s dropped=%d",
            user.id, len(pool), len(items), variant, ",".join(degraded) or "-",
            len(dropped) + len(failed),
        )
        return RankingResult(
            items=items,
            pool_size=len(pool),
            behavior_sample_size=behavior.sample_size,
            weight_variant=variant,
            degraded=degraded,
            dropped_ids=dropped + failed,
            user_id=user.id,
        )


def _degraded_codes(behavior: BehaviorProfile, social: SocialSnapshot) -> List[str]:
    codes = []
    if behavior.degraded:
        codes.append(BEHAVIOR_HISTORY_UNAVAILABLE)
    if not social.available:
        codes.append(SOCIAL_GRAPH_UNAVAILABLE)
    return codes
