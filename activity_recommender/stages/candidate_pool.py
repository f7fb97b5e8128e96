"""
Candidate Pool Builder

Applies only hard filters before scoring:
- status == active
- start date (when the candidate has one) not before the request time
- optional category
- optional radius in meters around the request coordinates (or the user's location)
- optional price bounds

The radius is pushed to the store when it declares supports_radius; every filter is
re-applied after the fetch either way. The pool is capped at candidate_pool_size
to keep per-request scoring cost linear.

The public entry point is build_candidate_pool. A store failure is fatal.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import ValidationError

from ..errors import UpstreamUnavailable
from ..models.candidate import Candidate, CandidateStatus
from ..models.config import DEFAULT_CONFIG, RecommendationConfig
from ..models.context import RecommendationContext
from ..models.filters import PoolQuery, RecommendationFilters
from ..models.user import UserProfile
from ..services.cache import Cache
from ..services.stores import CandidateStore
from ..utils.geo import haversine_m

logger = logging.getLogger(__name__)


def build_pool_query(
    user: UserProfile,
    context: RecommendationContext,
    filters: RecommendationFilters,
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> PoolQuery:
    """
    Translate request filters into a store query.

    The radius comes from the filters, falling back to the user's preferred radius;
    it only applies when there is a center (live coordinates or profile location).
    """
    center = context.coordinates or user.location
    radius = filters.max_distance_m or user.preferred_radius_m
    if center is None:
        radius = None
    return PoolQuery(
        category=filters.category,
        center=center if radius is not None else None,
        radius_m=radius,
        price_min=filters.price_min,
        price_max=filters.price_max,
        limit=config.candidate_pool_size,
    )


def _within_radius(candidate: Candidate, query: PoolQuery) -> bool:
    if query.center is None or query.radius_m is None:
        return True
    if candidate.location is None:
        return False
    distance = haversine_m(
        query.center.lat, query.center.lon,
        candidate.location.lat, candidate.location.lon,
    )
    return distance <= query.radius_m


def _within_price(candidate: Candidate, query: PoolQuery) -> bool:
    # Free (or unpriced) activities cost 0.
    price = candidate.price or 0.0
    if query.price_min is not None and price < query.price_min:
        return False
    if query.price_max is not None and price > query.price_max:
        return False
    return True


def passes_hard_filters(candidate: Candidate, query: PoolQuery, now: datetime) -> bool:
    """True if candidate is active, upcoming, and matches category, radius, and price."""
    if candidate.status != CandidateStatus.ACTIVE:
        return False
    if candidate.start_date is not None and candidate.start_date < now:
        return False
    if query.category and candidate.category != query.category:
        return False
    if not _within_price(candidate, query):
        return False
    return _within_radius(candidate, query)


def _validate_records(
    raw: List[Union[Candidate, Dict[str, Any]]],
) -> Tuple[List[Candidate], List[str]]:
    """Validate store records; invalid ones are dropped and their ids returned."""
    candidates: List[Candidate] = []
    dropped: List[str] = []
    for item in raw:
        if isinstance(item, Candidate):
            candidates.append(item)
            continue
        try:
            candidates.append(Candidate.model_validate(item))
        except ValidationError as e:
            record_id = str(item.get("id", "?")) if isinstance(item, dict) else "?"
            logger.warning(
                "[dropped] CANDIDATE_INVALID candidate_id=%s errors=%d",
                record_id, e.error_count(),
            )
            dropped.append(record_id)
    return candidates, dropped


async def _fetch(store: CandidateStore, query: PoolQuery) -> List:
    store_query = query
    if not getattr(store, "supports_radius", False):
        store_query = query.model_copy(update={"center": None, "radius_m": None})
    try:
        return list(await store.fetch_candidate_pool(store_query) or [])
    except Exception as e:
        logger.error("[fatal] CANDIDATE_POOL_UNAVAILABLE query=%s error=%s", query.cache_key(), e)
        raise UpstreamUnavailable("candidate_store", str(e)) from e


async def build_candidate_pool(
    user: UserProfile,
    context: RecommendationContext,
    filters: RecommendationFilters,
    store: CandidateStore,
    config: RecommendationConfig = DEFAULT_CONFIG,
    cache: Optional[Cache] = None,
) -> Tuple[List[Candidate], List[str]]:
    """
    Fetch, validate, and hard-filter the candidate pool.

    Returns (candidates, dropped_ids). Candidates keep store order and number at
    most candidate_pool_size. Raises UpstreamUnavailable when the store fails.
    """
    query = build_pool_query(user, context, filters, config)

    # Cached as (candidates, dropped_ids) so a hit reports the same drops.
    cached: Optional[Tuple[List[Candidate], List[str]]] = None
    if cache is not None:
        cached = await cache.get(query.cache_key())

    if cached is None:
        raw = await _fetch(store, query)
        cached = _validate_records(raw)
        if cache is not None:
            await cache.set(query.cache_key(), cached, config.cache_ttl_seconds)
    fetched, dropped = cached

    pool = [c for c in fetched if passes_hard_filters(c, query, context.timestamp)]
    return pool[: config.candidate_pool_size], list(dropped)
