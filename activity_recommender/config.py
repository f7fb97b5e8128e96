"""
Engine Settings

Process-level settings loaded from environment variables, with a .env file at the
project root read through python-dotenv. Ranking parameters live in
RecommendationConfig (models/config.py); ENGINE_CONFIG_PATH may point at a JSON
file of overrides for it.

    ENGINE_MAX_WORKERS       concurrent candidate scorers (default 8)
    ENGINE_REQUEST_TIMEOUT   seconds per request (default 5.0)
    ENGINE_LOG_LEVEL         root log level (default INFO)
    ENGINE_LOG_JSON          "true" for one JSON object per log line
    ENGINE_CONFIG_PATH       optional RecommendationConfig JSON
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .models.config import DEFAULT_CONFIG, RecommendationConfig

root_env = Path(__file__).resolve().parent.parent / ".env"
if root_env.exists():
    load_dotenv(root_env)


def _bool_env(key: str, default: bool = False) -> bool:
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class EngineSettings:
    """Engine runtime settings."""

    max_workers: int = 8
    request_timeout: float = 5.0
    log_level: str = "INFO"
    log_json: bool = False
    config_path: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "EngineSettings":
        """Load settings from environment variables."""
        config_path = os.getenv("ENGINE_CONFIG_PATH") or None
        return cls(
            max_workers=int(os.getenv("ENGINE_MAX_WORKERS", "8")),
            request_timeout=float(os.getenv("ENGINE_REQUEST_TIMEOUT", "5.0")),
            log_level=os.getenv("ENGINE_LOG_LEVEL", "INFO"),
            log_json=_bool_env("ENGINE_LOG_JSON"),
            config_path=Path(config_path) if config_path else None,
        )

    def validate(self) -> tuple[bool, list[str]]:
        """
        Validate the settings.

        Returns:
            (is_valid, list_of_errors)
        """
        errors = []
        if self.max_workers < 1:
            errors.append(f"ENGINE_MAX_WORKERS must be at least 1, got {self.max_workers}")
        if self.request_timeout <= 0:
            errors.append(f"ENGINE_REQUEST_TIMEOUT must be positive, got {self.request_timeout}")
        if self.config_path is not None and not self.config_path.exists():
            errors.append(f"Config file not found: {self.config_path}")
        return len(errors) == 0, errors

    def load_recommendation_config(self) -> RecommendationConfig:
        """RecommendationConfig from config_path, or the defaults when unset."""
        if self.config_path is None:
            return DEFAULT_CONFIG
        with open(self.config_path) as f:
            return RecommendationConfig.from_dict(json.load(f))


# Global settings instance
_settings: Optional[EngineSettings] = None


def get_settings() -> EngineSettings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = EngineSettings.from_env()
    return _settings


def reload_settings() -> EngineSettings:
    """Reload settings from environment."""
    global _settings
    _settings = EngineSettings.from_env()
    return _settings
