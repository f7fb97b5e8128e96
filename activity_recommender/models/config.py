"""
Engine configuration: signal weights, pool, ranking, and social parameters.

RecommendationConfig defaults are defined here. A service may pass a dict (e.g. a
JSON file named by ENGINE_CONFIG_PATH); from_dict() merges its groups with these
defaults.
"""

import math
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Canonical component order: fusion, reasons, and breakdowns all follow it.
SIGNAL_NAMES = (
    "personal_preference",
    "behavioral_match",
    "contextual_relevance",
    "social_factors",
    "novelty_factor",
    "time_optimality",
    "weather_suitability",
    "popularity_boost",
    "seasonal_relevance",
)


class SignalWeights(BaseModel):
    """One weight per signal. Must sum to 1.0."""

    model_config = ConfigDict(frozen=True)

    personal_preference: float = Field(0.25, ge=0.0, le=1.0)
    behavioral_match: float = Field(0.20, ge=0.0, le=1.0)
    contextual_relevance: float = Field(0.15, ge=0.0, le=1.0)
    social_factors: float = Field(0.12, ge=0.0, le=1.0)
    novelty_factor: float = Field(0.10, ge=0.0, le=1.0)
    time_optimality: float = Field(0.08, ge=0.0, le=1.0)
    weather_suitability: float = Field(0.05, ge=0.0, le=1.0)
    popularity_boost: float = Field(0.03, ge=0.0, le=1.0)
    seasonal_relevance: float = Field(0.02, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def weights_sum_to_one(self):
        total = math.fsum(self.as_dict().values())
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError(f"Signal weights must sum to 1.0, got {total}")
        return self

    def as_dict(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in SIGNAL_NAMES}


DEFAULT_WEIGHTS = SignalWeights()


class WeightVariant(BaseModel):
    """A named weight table served to `traffic` percent of users."""

    name: str
    traffic: int = Field(ge=0, le=100)
    weights: SignalWeights = DEFAULT_WEIGHTS


class RecommendationConfig(BaseModel):
    """Configuration for the recommendation engine."""

    # -------------------------------------------------------------------------
    # Signal fusion
    # total = sum(component * weight), clamped to [0, 1]
    # -------------------------------------------------------------------------

    weights: SignalWeights = DEFAULT_WEIGHTS

    # Optional weight-table experiment. Users are bucketed with
    # bucket(user_id, experiment_salt) and walk the cumulative traffic.
    # Traffic must add up to 100 when variants are given.
    weight_variants: List[WeightVariant] = Field(default_factory=list)
    experiment_salt: str = "signal-weights"

    # Components strictly above this value contribute a reason string.
    reason_threshold: float = 0.7

    # -------------------------------------------------------------------------
    # Candidate pool
    # -------------------------------------------------------------------------

    # Upper bound on the pool handed to the scorers (keeps per-request cost linear).
    candidate_pool_size: int = Field(100, ge=1)

    # -------------------------------------------------------------------------
    # Ranking
    # -------------------------------------------------------------------------

    # Max items returned when filters do not set a limit.
    default_limit: int = Field(20, ge=1)
    # Max items per category in one ranked output when filters do not set one.
    diversity_cap: int = Field(3, ge=1)

    # -------------------------------------------------------------------------
    # Behavior profile
    # -------------------------------------------------------------------------

    # Most recent events read from the event log per request.
    event_window_size: int = Field(100, ge=1)

    # -------------------------------------------------------------------------
    # Signal parameters
    # -------------------------------------------------------------------------

    # Candidates within this many meters get a linear proximity bonus.
    proximity_cutoff_m: float = Field(5000.0, gt=0)
    # Candidates created less than this many days ago count as new.
    novelty_window_days: float = Field(7.0, gt=0)
    # Capacity assumed when a candidate does not declare max_participants.
    default_capacity: int = Field(10, ge=1)

    # -------------------------------------------------------------------------
    # Social factors
    # -------------------------------------------------------------------------

    # +0.1 per connection sharing an interest with the candidate, up to this cap.
    connection_bonus_cap: float = Field(0.3, ge=0.0)
    # Cohort participation at or above this count earns the full +0.2.
    cohort_participation_scale: int = Field(10, ge=1)
    # Cohort = users within +/- this many years sharing at least one interest.
    cohort_age_span: int = Field(5, ge=0)
    cohort_max_members: int = Field(20, ge=1)

    # -------------------------------------------------------------------------
    # Caching (caller-owned cache in front of the pool builder and profiler)
    # -------------------------------------------------------------------------

    cache_ttl_seconds: int = Field(300, ge=0)

    @model_validator(mode="after")
    def variant_traffic_sums_to_100(self):
        if self.weight_variants:
            total = sum(v.traffic for v in self.weight_variants)
            if total != 100:
                raise ValueError(f"Weight variant traffic must sum to 100, got {total}")
        return self

    @classmethod
    def from_dict(cls, config_dict: Dict) -> "RecommendationConfig":
        """Create config from a grouped dictionary (e.g., loaded from JSON)."""
        flat: Dict = {}
        if "weights" in config_dict:
            flat["weights"] = SignalWeights.model_validate(config_dict["weights"])
        if "experiment" in config_dict:
            exp = config_dict["experiment"]
            if "salt" in exp:
                flat["experiment_salt"] = exp["salt"]
            if "variants" in exp:
                flat["weight_variants"] = exp["variants"]
        for group in ("pool", "ranking", "behavior", "signals", "social", "cache"):
            if group in config_dict:
                flat.update(config_dict[group])
        allowed = set(cls.model_fields)
        filtered = {k: v for k, v in flat.items() if k in allowed}
        return cls.model_validate(filtered)


DEFAULT_CONFIG = RecommendationConfig()


def resolve_config(config: Optional[RecommendationConfig]) -> RecommendationConfig:
    """Return config or DEFAULT_CONFIG when none is provided."""
    return config if config is not None else DEFAULT_CONFIG
