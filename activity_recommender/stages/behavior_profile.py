"""
Behavior Profiler

Aggregates a bounded window of accept/reject/message events into a BehaviorProfile:
- preferred_categories: top 3 categories among accepted events
- active_time_windows: top 2 time windows across all events
- sociability_index: share of accepted candidates that are group activities
- sample_size: number of events considered (drives confidence)

The profiler never fails the request. Empty history yields the neutral profile;
an unreadable event log yields the neutral profile flagged as degraded.

The public entry points are build_behavior_profile (pure) and load_behavior_profile.
"""

import logging
from collections import Counter
from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import ValidationError

from ..models.behavior import BehaviorEvent, BehaviorProfile, EventAction
from ..models.config import DEFAULT_CONFIG, RecommendationConfig
from ..services.cache import Cache
from ..services.stores import EventLog
from ..taxonomy import SOCIAL_CATEGORIES, SOCIAL_TAGS, TIME_WINDOW_ORDER
from ..utils.timeparts import time_of_day

logger = logging.getLogger(__name__)

MAX_PREFERRED_CATEGORIES = 3
MAX_ACTIVE_WINDOWS = 2


def _preferred_categories(accepted: Sequence[BehaviorEvent]) -> List[str]:
    """Most frequent categories among accepted events; ties keep first-seen order."""
    counts = Counter(e.category for e in accepted if e.category)
    return [cat for cat, _ in counts.most_common(MAX_PREFERRED_CATEGORIES)]


def _active_time_windows(events: Sequence[BehaviorEvent]) -> List:
    """Most frequent non-empty time windows; ties follow morning/afternoon/evening/night."""
    counts = Counter(time_of_day(e.timestamp) for e in events)
    ranked = sorted(
        (w for w in TIME_WINDOW_ORDER if counts[w] > 0),
        key=lambda w: (-counts[w], TIME_WINDOW_ORDER.index(w)),
    )
    return ranked[:MAX_ACTIVE_WINDOWS]


def _is_social(event: BehaviorEvent) -> bool:
    if event.max_participants is not None and event.max_participants > 1:
        return True
    if event.category in SOCIAL_CATEGORIES:
        return True
    return bool(event.tags & SOCIAL_TAGS)


def _sociability_index(accepted: Sequence[BehaviorEvent]) -> float:
    if not accepted:
        return 0.5
    social = sum(1 for e in accepted if _is_social(e))
    return social / len(accepted)


def build_behavior_profile(events: Sequence[BehaviorEvent]) -> BehaviorProfile:
    """
    Derive a BehaviorProfile from a time-ordered event window.

    Empty input returns the neutral profile: no preferred categories,
    ["afternoon"], sociability 0.5, sample size 0.
    """
    if not events:
        return BehaviorProfile.neutral()

    accepted = [e for e in events if e.action == EventAction.ACCEPT]
    windows = _active_time_windows(events) or BehaviorProfile.neutral().active_time_windows
    return BehaviorProfile(
        preferred_categories=_preferred_categories(accepted),
        active_time_windows=windows,
        sociability_index=_sociability_index(accepted),
        sample_size=len(events),
    )


def _valid_events(
    user_id: str,
    raw: List[Union[BehaviorEvent, Dict[str, Any]]],
) -> List[BehaviorEvent]:
    """Validate event records, skipping (and logging) records that do not parse."""
    events = []
    skipped = 0
    for item in raw:
        if isinstance(item, BehaviorEvent):
            events.append(item)
            continue
        try:
            events.append(BehaviorEvent.model_validate(item))
        except ValidationError:
            skipped += 1
    if skipped:
        logger.warning(
            "[degraded] BEHAVIOR_EVENTS_SKIPPED user_id=%s skipped=%d kept=%d",
            user_id, skipped, len(events),
        )
    return sorted(events, key=lambda e: e.timestamp)


async def load_behavior_profile(
    user_id: str,
    event_log: EventLog,
    config: RecommendationConfig = DEFAULT_CONFIG,
    cache: Optional[Cache] = None,
) -> BehaviorProfile:
    """
    Read the user's recent events and build their profile.

    A cached profile is returned when present. Event-log failures return the
    neutral profile with degraded=True; degraded profiles are not cached.
    """
    cache_key = f"behavior:{user_id}:{config.event_window_size}"
    if cache is not None:
        cached = await cache.get(cache_key)
        if cached is not None:
            return cached

    try:
        raw = await event_log.fetch_recent_events(user_id, config.event_window_size)
    except Exception as e:
        logger.warning(
            "[degraded] BEHAVIOR_HISTORY_UNAVAILABLE user_id=%s error=%s",
            user_id, e,
        )
        return BehaviorProfile.neutral(degraded=True)

    events = _valid_events(user_id, list(raw or [])[-config.event_window_size:])
    profile = build_behavior_profile(events)
    if cache is not None:
        await cache.set(cache_key, profile, config.cache_ttl_seconds)
    return profile
