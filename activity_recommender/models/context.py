"""
Request context: when and where the user is asking, and under what weather.

Ephemeral per request, never persisted. Season defaults to the meteorological
season of the timestamp when not supplied; an unrecognized season or weather
condition is kept as unknown and scores neutral.
"""

from datetime import datetime
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from ..taxonomy import Season, TimeOfDay, Weather
from ..utils.timeparts import ensure_aware, season_for, time_of_day
from .candidate import GeoPoint

_WEATHER_VALUES = frozenset(w.value for w in Weather)
_SEASON_VALUES = frozenset(s.value for s in Season)

class RecommendationContext(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    timestamp: datetime
    coordinates: Optional[GeoPoint] = None
    weather: Optional[Weather] = None
    season: Optional[Season] = None

    @field_validator("timestamp")
    @classmethod
    def timestamp_aware(cls, value: datetime) -> datetime:
        return ensure_aware(value)

    @field_validator("weather", mode="before")
    @classmethod
    def weather_condition(cls, value: Any) -> Any:
        # Accept {"condition": "rainy", ...} as sent by weather providers.
        if isinstance(value, dict):
            value = value.get("condition")
        # Conditions outside the table (fog, hail, ...) score as unknown weather.
        if isinstance(value, str) and value.strip().lower() not in _WEATHER_VALUES:
            return None
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("season", mode="before")
    @classmethod
    def season_name(cls, value: Any) -> Any:
        # Seasons outside the table (monsoon, dry, ...) score as unknown season.
        if isinstance(value, str):
            value = value.strip().lower()
            return value if value in _SEASON_VALUES else None
        return value

    @model_validator(mode="after")
    def default_season(self):
        # Only an omitted season is derived; an unrecognized one stays unknown.
        if self.season is None and "season" not in self.model_fields_set:
            object.__setattr__(self, "season", season_for(self.timestamp))
        return self

    @property
    def time_of_day(self) -> TimeOfDay:
        return time_of_day(self.timestamp)


def ensure_context(
    context: Union[Dict[str, Any], RecommendationContext],
) -> RecommendationContext:
    """Convert a request dict to a RecommendationContext (raises ValidationError when malformed)."""
    if isinstance(context, RecommendationContext):
        return context
    return RecommendationContext.model_validate(context)
