"""
In-memory collaborators for local runs, evaluation, and tests.

Each class satisfies one Protocol from services/stores.py over plain Python data.
InMemoryDataset loads all four from one JSON file:

    {
      "users": [{"id": "u1", "interests": ["hiking"], "age": 30, ...}],
      "candidates": [{"id": "a1", "category": "outdoor", "created_at": "...", ...}],
      "events": {"u1": [{"action": "accept", "category": "outdoor", "timestamp": "..."}]},
      "connections": {"u1": ["u2", "u3"]},
      "participants": {"a1": ["u2"]}
    }
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from ..models.behavior import BehaviorEvent
from ..models.candidate import Candidate, CandidateStatus, ensure_candidates
from ..models.filters import PoolQuery
from ..models.user import CohortQuery, SocialConnection, UserProfile, ensure_user
from ..utils.geo import haversine_m


class InMemoryCandidateStore:
    """Candidate store over a list. Applies status, category, price, and (optionally) radius."""

    def __init__(
        self,
        candidates: Iterable[Union[Candidate, Dict[str, Any]]],
        supports_radius: bool = False,
    ):
        self._candidates = ensure_candidates(list(candidates))
        self.supports_radius = supports_radius
        self.queries: List[PoolQuery] = []

    async def fetch_candidate_pool(self, query: PoolQuery) -> List[Candidate]:
        self.queries.append(query)
        out = []
        for c in self._candidates:
            if c.status != CandidateStatus.ACTIVE:
                continue
            if query.category and c.category != query.category:
                continue
            if query.price_min is not None and (c.price or 0.0) < query.price_min:
                continue
            if query.price_max is not None and (c.price or 0.0) > query.price_max:
                continue
            if self.supports_radius and query.center and query.radius_m is not None:
                if c.location is None:
                    continue
                d = haversine_m(query.center.lat, query.center.lon, c.location.lat, c.location.lon)
                if d > query.radius_m:
                    continue
            out.append(c)
            if len(out) >= query.limit:
                break
        return out


class InMemoryUserStore:
    def __init__(self, users: Iterable[Union[UserProfile, Dict[str, Any]]]):
        self._users: Dict[str, UserProfile] = {}
        for u in users:
            profile = ensure_user(u)
            self._users[profile.id] = profile

    async def fetch_user(self, user_id: str) -> Optional[UserProfile]:
        return self._users.get(user_id)

    def all_users(self) -> List[UserProfile]:
        return list(self._users.values())


class InMemoryEventLog:
    def __init__(self, events_by_user: Optional[Dict[str, List[Any]]] = None):
        self._events = {uid: list(evs) for uid, evs in (events_by_user or {}).items()}

    async def fetch_recent_events(self, user_id: str, window_size: int) -> List[Any]:
        events = self._events.get(user_id, [])
        return events[-window_size:] if window_size > 0 else []


class InMemorySocialGraph:
    """
    Social graph over adjacency lists. Connection interests and cohort membership
    come from the user store's profiles.
    """

    def __init__(
        self,
        users: InMemoryUserStore,
        connections: Optional[Dict[str, List[str]]] = None,
        participants: Optional[Dict[str, List[str]]] = None,
    ):
        self._users = users
        self._connections = {k: list(v) for k, v in (connections or {}).items()}
        self._participants = {k: set(v) for k, v in (participants or {}).items()}
        self.cohort_calls = 0
        self.connection_calls = 0

    async def fetch_connections(self, user_id: str) -> List[SocialConnection]:
        self.connection_calls += 1
        out = []
        for other_id in self._connections.get(user_id, []):
            other = await self._users.fetch_user(other_id)
            interests = list(other.interests) if other else []
            out.append(SocialConnection(user_id=other_id, interests=interests))
        return out

    def _cohort_members(self, cohort: CohortQuery) -> List[str]:
        wanted = set(cohort.interests)
        members = []
        for user in sorted(self._users.all_users(), key=lambda u: u.id):
            if user.id == cohort.exclude_user_id:
                continue
            if cohort.age_min is not None and (user.age is None or user.age < cohort.age_min):
                continue
            if cohort.age_max is not None and (user.age is None or user.age > cohort.age_max):
                continue
            if not wanted.intersection(user.interests):
                continue
            members.append(user.id)
            if len(members) >= cohort.max_members:
                break
        return members

    async def fetch_cohort_participation(
        self,
        candidate_ids: Sequence[str],
        cohort: CohortQuery,
    ) -> Dict[str, int]:
        self.cohort_calls += 1
        members = set(self._cohort_members(cohort))
        return {
            cid: len(self._participants.get(cid, set()) & members)
            for cid in candidate_ids
        }


class InMemoryDataset:
    """All four in-memory collaborators built from one dataset."""

    def __init__(
        self,
        users: List[Dict[str, Any]],
        candidates: List[Dict[str, Any]],
        events: Optional[Dict[str, List[Dict[str, Any]]]] = None,
        connections: Optional[Dict[str, List[str]]] = None,
        participants: Optional[Dict[str, List[str]]] = None,
        supports_radius: bool = False,
    ):
        self.user_store = InMemoryUserStore(users)
        self.candidate_store = InMemoryCandidateStore(candidates, supports_radius=supports_radius)
        self.event_log = InMemoryEventLog(
            {uid: [BehaviorEvent.model_validate(e) for e in evs] for uid, evs in (events or {}).items()}
        )
        self.social_graph = InMemorySocialGraph(self.user_store, connections, participants)

    @classmethod
    def from_json(cls, path: Union[Path, str], supports_radius: bool = False) -> "InMemoryDataset":
        with open(path) as f:
            data = json.load(f)
        return cls(
            users=data.get("users", []),
            candidates=data.get("candidates", []),
            events=data.get("events"),
            connections=data.get("connections"),
            participants=data.get("participants"),
            supports_radius=supports_radius,
        )
