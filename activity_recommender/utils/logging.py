"""
Logging setup for services embedding the engine.

Call configure_logging(settings) once at process start. Library modules only use
logging.getLogger(__name__) and never configure handlers themselves.

Engine messages follow "[tag] CODE key=value ..." so degraded and dropped paths
can be grepped or counted, e.g.:

    [degraded] BEHAVIOR_HISTORY_UNAVAILABLE user_id=u1 error=...
    [dropped] CANDIDATE_SCORING_FAILED candidate_id=a9 error=...

JSON mode emits one object per line with ts, level, logger, msg and any extra= fields.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..config import EngineSettings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

_RESERVED = frozenset(logging.LogRecord("", 0, "", 0, "", None, None).__dict__) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """One JSON object per log line; extra= fields are included at the top level."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(LOG_DATE_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        for key, val in record.__dict__.items():
            if key not in _RESERVED and not key.startswith("_"):
                payload[key] = val
        return json.dumps(payload, default=str)


def configure_logging(settings: "EngineSettings") -> None:
    """Configure the root logger (stdout) from engine settings."""
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    if settings.log_json:
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(formatter)
    logging.basicConfig(level=level, handlers=[console], force=True)
