"""
Scoring models: a candidate with its fused score, and the result of one ranking run.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .candidate import Candidate


class ScoredCandidate(BaseModel):
    """A candidate with all its scoring components."""

    candidate: Candidate
    total_score: float = Field(ge=0.0, le=1.0)
    breakdown: Dict[str, float]
    confidence: float = Field(ge=0.0, le=1.0)
    reasons: List[str] = Field(default_factory=list)
    weight_variant: str = "default"


class RankingResult(BaseModel):
    """
    Ranked, explained, capped output of one request plus what went wrong on the way.

    degraded holds codes such as BEHAVIOR_HISTORY_UNAVAILABLE and
    SOCIAL_GRAPH_UNAVAILABLE; dropped_ids lists candidates removed because they
    could not be validated or scored.
    """

    items: List[ScoredCandidate] = Field(default_factory=list)
    pool_size: int = 0
    behavior_sample_size: int = 0
    weight_variant: str = "default"
    degraded: List[str] = Field(default_factory=list)
    dropped_ids: List[str] = Field(default_factory=list)
    user_id: Optional[str] = None
