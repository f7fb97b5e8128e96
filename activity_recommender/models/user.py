"""
User-side models: the declared profile and social-graph snapshots.

UserProfile is read-only input owned by the external user store.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .candidate import EnergyLevel, GeoPoint


def _normalize_interests(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        seen = []
        for item in value:
            text = str(item).strip().lower()
            if text and text not in seen:
                seen.append(text)
        return seen
    return value


class UserProfile(BaseModel):
    """Declared user preferences used by personal preference, context, and social scoring."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = Field(min_length=1)
    interests: List[str] = Field(default_factory=list)
    energy_level: Optional[EnergyLevel] = None
    age: Optional[int] = Field(None, ge=0, le=150)
    preferred_radius_m: Optional[float] = Field(None, gt=0)
    location: Optional[GeoPoint] = None

    @field_validator("interests", mode="before")
    @classmethod
    def normalize_interests(cls, value: Any) -> Any:
        return _normalize_interests(value)


class SocialConnection(BaseModel):
    """A connection of the user, with the interests they declared at read time."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    user_id: str
    interests: List[str] = Field(default_factory=list)

    @field_validator("interests", mode="before")
    @classmethod
    def normalize_interests(cls, value: Any) -> Any:
        return _normalize_interests(value)


class CohortQuery(BaseModel):
    """
    Similarity cohort for collaborative social proof: users of similar age who
    share at least one interest with the requesting user (never the user itself).
    """

    model_config = ConfigDict(frozen=True)

    exclude_user_id: str
    interests: List[str]
    age_min: Optional[int] = None
    age_max: Optional[int] = None
    max_members: int = 20


class SocialSnapshot(BaseModel):
    """
    Social-graph reads for one request, shared by every candidate.

    available is False when either read failed; social scoring then returns the
    neutral baseline for all candidates.
    """

    connections: List[SocialConnection] = Field(default_factory=list)
    cohort_participation: Dict[str, int] = Field(default_factory=dict)
    available: bool = True

    @classmethod
    def unavailable(cls) -> "SocialSnapshot":
        return cls(available=False)


def ensure_user(user: Union[Dict[str, Any], UserProfile]) -> UserProfile:
    """Convert a store record to a UserProfile."""
    return UserProfile.model_validate(user) if isinstance(user, dict) else user


def ensure_connections(
    items: List[Union[Dict[str, Any], SocialConnection, str]],
) -> List[SocialConnection]:
    """Convert connection records to SocialConnection models. Bare ids carry no interests."""
    out = []
    for item in items:
        if isinstance(item, SocialConnection):
            out.append(item)
        elif isinstance(item, str):
            out.append(SocialConnection(user_id=item))
        else:
            out.append(SocialConnection.model_validate(item))
    return out
