"""
Caller filters and the pool query derived from them.

RecommendationFilters are the user-applied knobs of one request. PoolQuery is what
the candidate store receives: only hard filters, with the search center resolved.
"""

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .candidate import GeoPoint


class RecommendationFilters(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    category: Optional[str] = None
    # Radius around the request coordinates (or the user's location), in meters.
    max_distance_m: Optional[float] = Field(None, gt=0)
    price_min: Optional[float] = Field(None, ge=0)
    price_max: Optional[float] = Field(None, ge=0)
    # None = use the configured default.
    limit: Optional[int] = Field(None, ge=1)
    min_score: Optional[float] = Field(None, ge=0.0, le=1.0)
    diversity_cap: Optional[int] = Field(None, ge=1)

    @field_validator("category")
    @classmethod
    def normalize_category(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip().lower()
        return value or None

    @model_validator(mode="after")
    def price_bounds_ordered(self):
        if (
            self.price_min is not None
            and self.price_max is not None
            and self.price_min > self.price_max
        ):
            raise ValueError(f"price_min {self.price_min} is above price_max {self.price_max}")
        return self


class PoolQuery(BaseModel):
    """Hard filters for one pool fetch. Stores that cannot filter by radius ignore center/radius."""

    model_config = ConfigDict(frozen=True)

    category: Optional[str] = None
    center: Optional[GeoPoint] = None
    radius_m: Optional[float] = None
    price_min: Optional[float] = None
    price_max: Optional[float] = None
    limit: int = 100

    def cache_key(self) -> str:
        return "pool:" + self.model_dump_json()


def ensure_filters(
    filters: Union[None, Dict[str, Any], RecommendationFilters],
) -> RecommendationFilters:
    """Convert request filters (or None) to RecommendationFilters."""
    if filters is None:
        return RecommendationFilters()
    if isinstance(filters, RecommendationFilters):
        return filters
    return RecommendationFilters.model_validate(filters)
