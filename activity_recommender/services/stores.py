"""
Read-only collaborator abstractions.

The engine never writes. Each Protocol below is one external system; production
implementations wrap the real database, event log, and social graph, and the
in-memory versions in services/memory.py serve local runs and tests.

Implementations raise (any exception) when the read fails; the engine maps that to
UpstreamUnavailable and decides whether to degrade or fail the request.
"""

from typing import Any, Dict, List, Optional, Protocol, Sequence, Union

from ..models.behavior import BehaviorEvent
from ..models.candidate import Candidate
from ..models.filters import PoolQuery
from ..models.user import CohortQuery, SocialConnection, UserProfile


class CandidateStore(Protocol):
    """Storage-layer query for the candidate pool (bounded result size)."""

    # True when the store applies PoolQuery.center/radius_m itself.
    supports_radius: bool

    async def fetch_candidate_pool(
        self,
        query: PoolQuery,
    ) -> List[Union[Candidate, Dict[str, Any]]]:
        """
        Return at most query.limit active candidates matching the query's hard filters.
        Stores may return more loosely filtered results; the pool builder re-applies
        every filter.
        """
        ...


class UserStore(Protocol):
    async def fetch_user(self, user_id: str) -> Optional[Union[UserProfile, Dict[str, Any]]]:
        """Return the user's declared profile, or None when the user does not exist."""
        ...


class EventLog(Protocol):
    async def fetch_recent_events(
        self,
        user_id: str,
        window_size: int,
    ) -> List[Union[BehaviorEvent, Dict[str, Any]]]:
        """Return up to window_size most recent accept/reject/message events, oldest first."""
        ...


class SocialGraph(Protocol):
    async def fetch_connections(
        self,
        user_id: str,
    ) -> List[Union[SocialConnection, Dict[str, Any], str]]:
        """Return the user's connections with their declared interests."""
        ...

    async def fetch_cohort_participation(
        self,
        candidate_ids: Sequence[str],
        cohort: CohortQuery,
    ) -> Dict[str, int]:
        """
        For every candidate id, count participants who belong to the cohort.
        One batched call per request; ids missing from the result count as 0.
        """
        ...
