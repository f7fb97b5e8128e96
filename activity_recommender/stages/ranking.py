"""
Ranker & Diversity Filter

Sorts scored candidates by total score and walks the sorted list with a
per-category counter so that no category takes more than `cap` slots. Items over
the cap are skipped for this output, not discarded from the pool. Truncation to
the requested limit happens after the diversity pass; a short pool is returned as
is, without padding.
"""

from typing import Dict, List, Optional

from ..models.config import DEFAULT_CONFIG, RecommendationConfig
from ..models.filters import RecommendationFilters
from ..models.scoring import ScoredCandidate


def _sort_key(scored: ScoredCandidate):
    # Ties: newest created first, then id for a total order.
    return (
        -scored.total_score,
        -scored.candidate.created_at.timestamp(),
        scored.candidate.id,
    )


def sort_by_score(scored: List[ScoredCandidate]) -> List[ScoredCandidate]:
    """Total score descending; deterministic for any input order."""
    return sorted(scored, key=_sort_key)


def apply_diversity_cap(
    ranked: List[ScoredCandidate],
    cap: int = 3,
) -> List[ScoredCandidate]:
    """
    Keep ranked order, admitting an item only while its category has fewer than
    `cap` admitted items.
    """
    admitted: List[ScoredCandidate] = []
    per_category: Dict[str, int] = {}
    for scored in ranked:
        category = scored.candidate.category
        count = per_category.get(category, 0)
        if count >= cap:
            continue
        admitted.append(scored)
        per_category[category] = count + 1
    return admitted


def rank_and_diversify(
    scored: List[ScoredCandidate],
    filters: Optional[RecommendationFilters] = None,
    config: RecommendationConfig = DEFAULT_CONFIG,
) -> List[ScoredCandidate]:
    """
    Final ranking: optional min_score floor, sort, diversity cap, then limit.
    Filter values override the configured defaults.
    """
    filters = filters or RecommendationFilters()
    cap = filters.diversity_cap or config.diversity_cap
    limit = filters.limit or config.default_limit

    if filters.min_score is not None:
        scored = [s for s in scored if s.total_score >= filters.min_score]

    ranked = sort_by_score(scored)
    diverse = apply_diversity_cap(ranked, cap)
    return diverse[:limit]
