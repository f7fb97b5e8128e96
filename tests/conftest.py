"""
Shared fixtures: synthetic users, candidates, contexts, and in-memory collaborators.

All requests default to NOW, a summer Monday afternoon in UTC, so time-of-day,
season, and novelty signals are reproducible.
"""

from datetime import datetime, timedelta, timezone

import pytest

from activity_recommender.config import EngineSettings
from activity_recommender.models import (
    BehaviorEvent,
    BehaviorProfile,
    Candidate,
    GeoPoint,
    RecommendationContext,
    SocialSnapshot,
    UserProfile,
)
from activity_recommender.services import InMemoryDataset

NOW = datetime(2024, 7, 15, 14, 0, tzinfo=timezone.utc)
DOWNTOWN = GeoPoint(lat=40.7128, lon=-74.0060)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_candidate():
    """Factory: a 30-day-old, half-full, active casual activity unless overridden."""

    def _make(id="a1", category="casual", **overrides):
        data = {
            "id": id,
            "category": category,
            "created_at": NOW - timedelta(days=30),
            "participants": 5,
            "max_participants": 10,
        }
        data.update(overrides)
        return Candidate.model_validate(data)

    return _make


@pytest.fixture
def make_user():
    def _make(id="u1", **overrides):
        data = {"id": id}
        data.update(overrides)
        return UserProfile.model_validate(data)

    return _make


@pytest.fixture
def make_context():
    def _make(**overrides):
        data = {"timestamp": NOW}
        data.update(overrides)
        return RecommendationContext.model_validate(data)

    return _make


@pytest.fixture
def make_event():
    def _make(action="accept", hour=14, days_ago=1, **overrides):
        ts = (NOW - timedelta(days=days_ago)).replace(hour=hour)
        data = {"action": action, "timestamp": ts}
        data.update(overrides)
        return BehaviorEvent.model_validate(data)

    return _make


@pytest.fixture
def neutral_behavior():
    return BehaviorProfile.neutral()


@pytest.fixture
def no_social():
    return SocialSnapshot.unavailable()


@pytest.fixture
def settings():
    return EngineSettings(max_workers=4, request_timeout=5.0)


@pytest.fixture
def dataset():
    """
    Small city dataset: three users (u1 hikes and likes coffee; u2 and u3 are in
    u1's cohort), eight candidates across categories, and a short accept history.
    """
    created = (NOW - timedelta(days=30)).isoformat()
    fresh = (NOW - timedelta(hours=1)).isoformat()
    near = {"lat": 40.7130, "lon": -74.0050}
    return InMemoryDataset(
        users=[
            {"id": "u1", "interests": ["hiking", "coffee"], "energy_level": "high", "age": 30,
             "location": {"lat": DOWNTOWN.lat, "lon": DOWNTOWN.lon}},
            {"id": "u2", "interests": ["hiking"], "age": 28},
            {"id": "u3", "interests": ["coffee", "art"], "age": 33},
        ],
        candidates=[
            {"id": "hike", "category": "outdoor", "tags": ["hiking"], "created_at": fresh,
             "energy_level": "high", "location": near, "participants": 6, "max_participants": 10},
            {"id": "cafe", "category": "food", "tags": ["coffee"], "created_at": created,
             "location": near, "participants": 2, "max_participants": 8, "rating_count": 12},
            {"id": "museum", "category": "cultural", "tags": ["art"], "created_at": created,
             "participants": 10, "max_participants": 40},
            {"id": "cinema", "category": "indoor", "tags": ["movies"], "created_at": created,
             "participants": 1, "max_participants": 2},
            {"id": "party", "category": "social", "tags": ["party"], "created_at": fresh,
             "participants": 12, "max_participants": 20},
            {"id": "climb", "category": "active", "tags": ["climbing"], "created_at": created,
             "energy_level": "high", "participants": 3, "max_participants": 6},
            {"id": "draft", "category": "outdoor", "status": "draft", "created_at": created},
            {"id": "dinner", "category": "romantic", "created_at": created,
             "participants": 0, "max_participants": 2},
        ],
        events={
            "u1": [
                {"action": "accept", "category": "outdoor", "max_participants": 10,
                 "timestamp": (NOW - timedelta(days=3)).replace(hour=9).isoformat()},
                {"action": "accept", "category": "outdoor", "max_participants": 8,
                 "timestamp": (NOW - timedelta(days=2)).replace(hour=10).isoformat()},
                {"action": "reject", "category": "indoor",
                 "timestamp": (NOW - timedelta(days=1)).replace(hour=20).isoformat()},
            ],
        },
        connections={"u1": ["u2", "u3"]},
        participants={"hike": ["u2"], "cafe": ["u3"]},
    )
