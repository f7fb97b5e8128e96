"""
Score Fuser Tests

- total = weighted sum of the nine components, clamped to [0, 1]
- confidence from input completeness
- reasons for components strictly above 0.7, in canonical order
- weight-table experiment assignment is stable per user

Run:
----
    pytest tests/test_fusion.py -v
"""

import pytest

from activity_recommender.models import (
    DEFAULT_CONFIG,
    DEFAULT_WEIGHTS,
    SIGNAL_NAMES,
    BehaviorProfile,
    RecommendationConfig,
    SignalWeights,
)
from activity_recommender.stages.explanations import FALLBACK_REASON, REASON_TEXT, explain
from activity_recommender.stages.fusion import (
    DEFAULT_VARIANT,
    build_scored_candidate,
    confidence,
    fuse,
    select_weights,
)

HEAVY = SignalWeights(personal_preference=0.45, behavioral_match=0.0)


def _experiment(*traffic):
    variants = [
        {"name": f"v{i}", "traffic": t, "weights": HEAVY if i else DEFAULT_WEIGHTS}
        for i, t in enumerate(traffic)
    ]
    return RecommendationConfig(weight_variants=variants)


class TestFuse:
    def test_all_neutral_is_neutral(self):
        breakdown = {name: 0.5 for name in SIGNAL_NAMES}
        assert fuse(breakdown, DEFAULT_WEIGHTS) == pytest.approx(0.5)

    def test_all_max_is_one(self):
        breakdown = {name: 1.0 for name in SIGNAL_NAMES}
        assert fuse(breakdown, DEFAULT_WEIGHTS) == pytest.approx(1.0)

    def test_weighted_sum(self):
        breakdown = {name: 0.0 for name in SIGNAL_NAMES}
        breakdown["personal_preference"] = 1.0
        breakdown["seasonal_relevance"] = 1.0
        assert fuse(breakdown, DEFAULT_WEIGHTS) == pytest.approx(0.27)

    def test_weights_change_the_total(self):
        breakdown = {name: 0.5 for name in SIGNAL_NAMES}
        breakdown["personal_preference"] = 1.0
        assert fuse(breakdown, HEAVY) > fuse(breakdown, DEFAULT_WEIGHTS)


class TestConfidence:
    def test_base(self, make_user, make_candidate):
        assert confidence(make_user(), make_candidate(), BehaviorProfile.neutral()) == 0.5

    def test_fully_informed(self, make_user, make_candidate):
        behavior = BehaviorProfile(sample_size=11)
        value = confidence(make_user(interests=["art"]), make_candidate(rating_count=5), behavior)
        assert value == pytest.approx(1.0)

    def test_sample_size_must_exceed_ten(self, make_user, make_candidate):
        behavior = BehaviorProfile(sample_size=10)
        assert confidence(make_user(), make_candidate(), behavior) == 0.5


class TestExplain:
    def test_threshold_is_strict(self):
        reasons = explain({"personal_preference": 0.71, "behavioral_match": 0.7, "novelty_factor": 0.9})
        assert reasons == [REASON_TEXT["personal_preference"], REASON_TEXT["novelty_factor"]]

    def test_canonical_order(self):
        breakdown = {name: 0.9 for name in reversed(SIGNAL_NAMES)}
        assert explain(breakdown) == [REASON_TEXT[name] for name in SIGNAL_NAMES]

    def test_unknown_component_gets_fallback(self):
        assert explain({"mystery_signal": 0.95}) == [FALLBACK_REASON]

    def test_nothing_strong(self):
        assert explain({name: 0.5 for name in SIGNAL_NAMES}) == []


class TestSelectWeights:
    def test_no_experiment(self):
        assert select_weights("u1") == (DEFAULT_VARIANT, DEFAULT_CONFIG.weights)

    def test_stable_per_user(self):
        config = _experiment(50, 50)
        assert all(select_weights(f"u{i}", config) == select_weights(f"u{i}", config) for i in range(50))

    def test_traffic_split(self):
        config = _experiment(50, 50)
        names = {select_weights(f"user-{i}", config)[0] for i in range(200)}
        assert names == {"v0", "v1"}

    def test_full_traffic_variant(self):
        config = _experiment(0, 100)
        for i in range(50):
            name, weights = select_weights(f"user-{i}", config)
            assert name == "v1"
            assert weights == HEAVY


class TestBuildScoredCandidate:
    def test_scored_candidate(self, make_user, make_candidate):
        breakdown = {name: 0.5 for name in SIGNAL_NAMES}
        breakdown["time_optimality"] = 0.8
        scored = build_scored_candidate(
            make_user(interests=["art"]), make_candidate(), breakdown,
            BehaviorProfile.neutral(), DEFAULT_WEIGHTS, "control",
        )
        assert scored.total_score == pytest.approx(0.5 + 0.08 * 0.3)
        assert scored.confidence == pytest.approx(0.7)
        assert scored.reasons == ["Great timing for this activity"]
        assert scored.weight_variant == "control"
        assert scored.breakdown == breakdown
