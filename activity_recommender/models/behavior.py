"""
Behavior models: past events read from the event log and the profile derived from them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..taxonomy import TimeOfDay
from ..utils.timeparts import ensure_aware


class EventAction(str, Enum):
    ACCEPT = "accept"
    REJECT = "reject"
    MESSAGE = "message"


class BehaviorEvent(BaseModel):
    """
    One user action referencing a candidate.

    category, max_participants, and tags describe the candidate as it was when the
    event was recorded.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    action: EventAction
    timestamp: datetime
    candidate_id: Optional[str] = None
    category: Optional[str] = None
    max_participants: Optional[int] = None
    tags: FrozenSet[str] = frozenset()

    @field_validator("timestamp")
    @classmethod
    def timestamp_aware(cls, value: datetime) -> datetime:
        return ensure_aware(value)

    @field_validator("category")
    @classmethod
    def normalize_category(cls, value: Optional[str]) -> Optional[str]:
        return value.strip().lower() if value else None

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, value: Any) -> Any:
        if value is None:
            return frozenset()
        if isinstance(value, (list, tuple, set, frozenset)):
            return frozenset(str(t).strip().lower() for t in value if str(t).strip())
        return value


class BehaviorProfile(BaseModel):
    """Compact summary of recent behavior. Rebuilt per request, never persisted."""

    model_config = ConfigDict(frozen=True)

    preferred_categories: List[str] = Field(default_factory=list, max_length=3)
    active_time_windows: List[TimeOfDay] = Field(
        default_factory=lambda: [TimeOfDay.AFTERNOON], max_length=2
    )
    sociability_index: float = Field(0.5, ge=0.0, le=1.0)
    sample_size: int = Field(0, ge=0)
    # True when history could not be read and this is the neutral fallback.
    degraded: bool = False

    @classmethod
    def neutral(cls, degraded: bool = False) -> "BehaviorProfile":
        return cls(degraded=degraded)

