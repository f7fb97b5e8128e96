"""
Candidate model: an activity eligible for recommendation.

Candidates are owned by the external store and immutable from the engine's view.
Built from store records via Candidate.model_validate(d); keys outside the fields
below are ignored so the scorers only ever see an explicit, typed struct.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..utils.timeparts import ensure_aware


class CandidateStatus(str, Enum):
    ACTIVE = "active"
    DRAFT = "draft"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class EnergyLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return {"low": 1, "medium": 2, "high": 3}[self.value]


class GeoPoint(BaseModel):
    """A latitude/longitude pair in degrees."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90.0, le=90.0)
    lon: float = Field(ge=-180.0, le=180.0)


class AgeRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    min: int = Field(0, ge=0)
    max: int = Field(150, ge=0)

    @model_validator(mode="after")
    def min_not_above_max(self):
        if self.min > self.max:
            raise ValueError(f"age_range min {self.min} is above max {self.max}")
        return self

    def contains(self, age: int) -> bool:
        return self.min <= age <= self.max


class Candidate(BaseModel):
    """
    Activity payload used by the pool builder, scorers, and ranker.

    Only id, category, and created_at are required; everything else defaults to
    "unknown" values that the scorers treat as neutral.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = Field(min_length=1)
    category: str = Field(min_length=1)
    created_at: datetime
    status: CandidateStatus = CandidateStatus.ACTIVE
    location: Optional[GeoPoint] = None
    tags: FrozenSet[str] = frozenset()
    participants: int = Field(0, ge=0)
    # None = undeclared (the default capacity applies). 0 or less is malformed and
    # makes popularity scoring fail for this candidate.
    max_participants: Optional[int] = None
    energy_level: Optional[EnergyLevel] = None
    age_range: Optional[AgeRange] = None
    available_now: bool = False
    price: Optional[float] = Field(None, ge=0.0)
    start_date: Optional[datetime] = None
    rating_count: int = Field(0, ge=0)

    @field_validator("created_at", "start_date")
    @classmethod
    def datetimes_aware(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_aware(value) if value is not None else None

    @field_validator("category")
    @classmethod
    def normalize_category(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, value: Any) -> Any:
        if value is None:
            return frozenset()
        if isinstance(value, (list, tuple, set, frozenset)):
            return frozenset(str(t).strip().lower() for t in value if str(t).strip())
        return value

    @property
    def is_multi_participant(self) -> bool:
        return self.max_participants is not None and self.max_participants > 1

    @property
    def is_solo(self) -> bool:
        return self.max_participants == 1


def ensure_candidates(
    items: List[Union[Dict[str, Any], "Candidate"]],
) -> List["Candidate"]:
    """Convert list of dicts or Candidates to Candidate models (raises on invalid records)."""
    return [
        Candidate.model_validate(c) if isinstance(c, dict) else c
        for c in items
    ]
