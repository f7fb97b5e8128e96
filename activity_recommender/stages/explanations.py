"""
Human-readable reasons for strong signals.

Used by the score fuser to attach one short justification per component that
scored above the reason threshold, in canonical component order.
"""

from typing import Dict, List

from ..models.config import SIGNAL_NAMES

REASON_TEXT: Dict[str, str] = {
    "personal_preference": "Matches your interests and preferences",
    "behavioral_match": "Based on your activity patterns",
    "contextual_relevance": "Perfect for your current location and time",
    "social_factors": "Popular among people like you",
    "novelty_factor": "Something new to try",
    "time_optimality": "Great timing for this activity",
    "weather_suitability": "Perfect for current weather",
    "popularity_boost": "Trending activity",
    "seasonal_relevance": "Seasonal favorite",
}

FALLBACK_REASON = "Recommended for you"


def reason_for(component: str) -> str:
    return REASON_TEXT.get(component, FALLBACK_REASON)


def explain(breakdown: Dict[str, float], threshold: float = 0.7) -> List[str]:
    """Reasons for every component strictly above threshold; known components first, in order."""
    ordered = [name for name in SIGNAL_NAMES if name in breakdown]
    ordered += sorted(name for name in breakdown if name not in REASON_TEXT)
    return [reason_for(name) for name in ordered if breakdown[name] > threshold]
