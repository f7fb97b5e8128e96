"""
Recommendation Engine Tests (end to end over in-memory collaborators)

Scenarios:
----------
1. Hiking/coffee user gets hiking and coffee activities on top, with reasons
2. Deterministic across runs and worker counts
3. Social graph read once per request regardless of pool size
4. Event log or social graph failure → degraded result, still ranked
5. Malformed candidate → dropped and reported, request succeeds
6. Blank user id / malformed context / unknown user → InputError
7. Pool or user store failure → UpstreamUnavailable
8. Slow store → RecommendationTimeout, no partial result

Run:
----
    pytest tests/test_engine.py -v
"""

import asyncio
from collections import Counter
from datetime import timedelta

import pytest

from activity_recommender import (
    EngineSettings,
    InputError,
    RecommendationEngine,
    RecommendationTimeout,
    UpstreamUnavailable,
)
from activity_recommender.engine import BEHAVIOR_HISTORY_UNAVAILABLE, SOCIAL_GRAPH_UNAVAILABLE
from activity_recommender.models import SIGNAL_NAMES
from activity_recommender.services import (
    InMemoryCache,
    InMemoryCandidateStore,
    InMemoryDataset,
)


class FailingEventLog:
    async def fetch_recent_events(self, user_id, window_size):
        raise ConnectionError("event log down")


class FailingSocialGraph:
    async def fetch_connections(self, user_id):
        raise ConnectionError("graph down")

    async def fetch_cohort_participation(self, candidate_ids, cohort):
        raise ConnectionError("graph down")


class FailingStore:
    supports_radius = False

    async def fetch_candidate_pool(self, query):
        raise ConnectionError("database unreachable")

    async def fetch_user(self, user_id):
        raise ConnectionError("database unreachable")


class SlowStore(InMemoryCandidateStore):
    async def fetch_candidate_pool(self, query):
        await asyncio.sleep(2)
        return await super().fetch_candidate_pool(query)


def _engine(dataset, settings, **overrides):
    parts = {
        "candidate_store": dataset.candidate_store,
        "user_store": dataset.user_store,
        "event_log": dataset.event_log,
        "social_graph": dataset.social_graph,
        "settings": settings,
    }
    parts.update(overrides)
    return RecommendationEngine(**parts)


class TestRecommendations:
    @pytest.fixture(autouse=True)
    def setup(self, dataset, settings, now):
        self.dataset = dataset
        self.settings = settings
        self.context = {"timestamp": now, "coordinates": {"lat": 40.7128, "lon": -74.0060}, "weather": "sunny"}

    def test_returns_ranked_explained_items(self):
        engine = _engine(self.dataset, self.settings)
        items = asyncio.run(engine.get_recommendations("u1", self.context))
        ids = [s.candidate.id for s in items]
        assert "draft" not in ids
        assert ids[0] == "hike"
        assert items == sorted(items, key=lambda s: -s.total_score)
        for s in items:
            assert 0.0 <= s.total_score <= 1.0
            assert 0.0 <= s.confidence <= 1.0
            assert tuple(s.breakdown) == SIGNAL_NAMES
        assert "Matches your interests and preferences" in items[0].reasons

    def test_run_diagnostics(self):
        engine = _engine(self.dataset, self.settings)
        result = asyncio.run(engine.run("u1", self.context))
        assert result.user_id == "u1"
        assert result.pool_size == 7
        assert result.behavior_sample_size == 3
        assert result.weight_variant == "default"
        assert result.degraded == []
        assert result.dropped_ids == []

    def test_deterministic_across_runs_and_workers(self):
        one = _engine(self.dataset, EngineSettings(max_workers=1))
        many = _engine(self.dataset, EngineSettings(max_workers=16))
        first = asyncio.run(one.get_recommendations("u1", self.context))
        second = asyncio.run(many.get_recommendations("u1", self.context))
        third = asyncio.run(many.get_recommendations("u1", self.context))
        assert first == second == third

    def test_social_graph_read_once(self):
        engine = _engine(self.dataset, self.settings)
        asyncio.run(engine.get_recommendations("u1", self.context))
        assert self.dataset.social_graph.connection_calls == 1
        assert self.dataset.social_graph.cohort_calls == 1

    def test_social_proof_reaches_scores(self):
        engine = _engine(self.dataset, self.settings)
        items = asyncio.run(engine.get_recommendations("u1", self.context))
        by_id = {s.candidate.id: s for s in items}
        # u2 (connection, cohort member) likes hiking and joined "hike".
        assert by_id["hike"].breakdown["social_factors"] > 0.5
        assert by_id["climb"].breakdown["social_factors"] == 0.5

    def test_filters(self):
        engine = _engine(self.dataset, self.settings)
        items = asyncio.run(engine.get_recommendations("u1", self.context, {"category": "food"}))
        assert [s.candidate.id for s in items] == ["cafe"]

        items = asyncio.run(engine.get_recommendations("u1", self.context, {"limit": 2}))
        assert len(items) == 2

    def test_radius_filter(self):
        engine = _engine(self.dataset, self.settings)
        items = asyncio.run(engine.get_recommendations("u1", self.context, {"max_distance_m": 1000}))
        assert {s.candidate.id for s in items} == {"hike", "cafe"}

    def test_cache_reuses_pool_and_profile(self):
        cache = InMemoryCache()
        engine = _engine(self.dataset, self.settings, cache=cache)
        first = asyncio.run(engine.get_recommendations("u1", self.context))
        second = asyncio.run(engine.get_recommendations("u1", self.context))
        assert first == second
        assert len(self.dataset.candidate_store.queries) == 1

    def test_config_from_settings_file(self, tmp_path):
        path = tmp_path / "engine.json"
        path.write_text('{"ranking": {"default_limit": 3}}')
        engine = _engine(self.dataset, EngineSettings(config_path=path))
        assert engine.config.default_limit == 3
        assert len(asyncio.run(engine.get_recommendations("u1", self.context))) == 3


class TestDiversity:
    def test_ten_dining_candidates_yield_three(self, now):
        created = (now - timedelta(days=20)).isoformat()
        dataset = InMemoryDataset(
            users=[{"id": "u1", "interests": ["dining"]}],
            candidates=[{"id": f"d{i}", "category": "dining", "created_at": created} for i in range(10)]
            + [{"id": f"x{i}", "category": f"other{i}", "created_at": created} for i in range(5)],
        )
        engine = _engine(dataset, EngineSettings())
        items = asyncio.run(engine.get_recommendations("u1", {"timestamp": now}))
        counts = Counter(s.candidate.category for s in items)
        assert counts["dining"] == 3
        assert len(items) == 8


class TestDegradedPaths:
    @pytest.fixture(autouse=True)
    def setup(self, dataset, settings, now):
        self.dataset = dataset
        self.settings = settings
        self.context = {"timestamp": now}

    def test_event_log_failure(self):
        engine = _engine(self.dataset, self.settings, event_log=FailingEventLog())
        result = asyncio.run(engine.run("u1", self.context))
        assert result.degraded == [BEHAVIOR_HISTORY_UNAVAILABLE]
        assert result.behavior_sample_size == 0
        assert result.items

    def test_social_graph_failure(self):
        engine = _engine(self.dataset, self.settings, social_graph=FailingSocialGraph())
        result = asyncio.run(engine.run("u1", self.context))
        assert result.degraded == [SOCIAL_GRAPH_UNAVAILABLE]
        assert all(s.breakdown["social_factors"] == 0.5 for s in result.items)

    def test_both_fail(self):
        engine = _engine(
            self.dataset, self.settings,
            event_log=FailingEventLog(), social_graph=FailingSocialGraph(),
        )
        result = asyncio.run(engine.run("u1", self.context))
        assert result.degraded == [BEHAVIOR_HISTORY_UNAVAILABLE, SOCIAL_GRAPH_UNAVAILABLE]

    def test_malformed_candidate_dropped(self, make_candidate):
        store = InMemoryCandidateStore([
            make_candidate(id="ok", category="food"),
            make_candidate(id="broken", category="outdoor", max_participants=0),
        ])
        engine = _engine(self.dataset, self.settings, candidate_store=store)
        result = asyncio.run(engine.run("u1", self.context))
        assert [s.candidate.id for s in result.items] == ["ok"]
        assert result.dropped_ids == ["broken"]

    def test_empty_history_user(self):
        engine = _engine(self.dataset, self.settings)
        result = asyncio.run(engine.run("u2", self.context))
        assert result.behavior_sample_size == 0
        assert result.degraded == []


class TestErrors:
    @pytest.fixture(autouse=True)
    def setup(self, dataset, settings, now):
        self.dataset = dataset
        self.settings = settings
        self.context = {"timestamp": now}

    @pytest.mark.parametrize("user_id", ["", "   ", None])
    def test_blank_user_id(self, user_id):
        engine = _engine(self.dataset, self.settings)
        with pytest.raises(InputError):
            asyncio.run(engine.get_recommendations(user_id, self.context))

    def test_input_error_is_value_error(self):
        engine = _engine(self.dataset, self.settings)
        with pytest.raises(ValueError):
            asyncio.run(engine.get_recommendations("", self.context))

    def test_malformed_context(self):
        engine = _engine(self.dataset, self.settings)
        with pytest.raises(InputError):
            asyncio.run(engine.get_recommendations("u1", {"timestamp": "not a date"}))
        with pytest.raises(InputError):
            asyncio.run(engine.get_recommendations("u1", None))

    @pytest.mark.parametrize("context", ["2024-07-15T14:00:00Z", ["timestamp"], 42])
    def test_non_mapping_context(self, context):
        engine = _engine(self.dataset, self.settings)
        with pytest.raises(InputError):
            asyncio.run(engine.get_recommendations("u1", context))

    def test_malformed_filters(self):
        engine = _engine(self.dataset, self.settings)
        with pytest.raises(InputError):
            asyncio.run(engine.get_recommendations("u1", self.context, {"price_min": 50, "price_max": 10}))

    @pytest.mark.parametrize("filters", ["food", ["category"]])
    def test_non_mapping_filters(self, filters):
        engine = _engine(self.dataset, self.settings)
        with pytest.raises(InputError):
            asyncio.run(engine.get_recommendations("u1", self.context, filters))

    def test_unrecognized_season_accepted(self, now):
        engine = _engine(self.dataset, self.settings)
        items = asyncio.run(
            engine.get_recommendations("u1", {"timestamp": now, "season": "monsoon", "weather": "foggy"})
        )
        assert items
        assert all(i.breakdown["seasonal_relevance"] == 0.5 for i in items)

    def test_unknown_user(self):
        engine = _engine(self.dataset, self.settings)
        with pytest.raises(InputError, match="Unknown user"):
            asyncio.run(engine.get_recommendations("ghost", self.context))

    def test_pool_store_failure(self):
        engine = _engine(self.dataset, self.settings, candidate_store=FailingStore())
        with pytest.raises(UpstreamUnavailable) as exc:
            asyncio.run(engine.get_recommendations("u1", self.context))
        assert exc.value.source == "candidate_store"

    def test_user_store_failure(self):
        engine = _engine(self.dataset, self.settings, user_store=FailingStore())
        with pytest.raises(UpstreamUnavailable) as exc:
            asyncio.run(engine.get_recommendations("u1", self.context))
        assert exc.value.source == "user_store"

    def test_timeout(self, make_candidate):
        store = SlowStore([make_candidate(id="a")])
        engine = _engine(self.dataset, EngineSettings(request_timeout=0.05), candidate_store=store)
        with pytest.raises(RecommendationTimeout):
            asyncio.run(engine.get_recommendations("u1", self.context))
