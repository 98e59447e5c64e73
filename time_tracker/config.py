"""Environment configuration and logging setup."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

DEFAULT_DATABASE_URL = "sqlite:///time_tracker.db"
DEFAULT_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:8501",
    "http://127.0.0.1:3000",
]
LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s] - %(message)s"


@dataclass(frozen=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    allowed_origins: list[str] = field(default_factory=lambda: list(DEFAULT_ORIGINS))
    log_level: str = "INFO"

    @property
    def allow_all_origins(self) -> bool:
        return "*" in self.allowed_origins


def load_settings() -> Settings:
    """Read settings from the environment.

    TIME_TRACKER_DATABASE_URL  SQLAlchemy URL, or memory:// for a throwaway store
    ALLOWED_ORIGINS            comma-separated CORS origins; "*" allows any
    TIME_TRACKER_LOG_LEVEL     logging level name
    """
    origins_env = os.environ.get("ALLOWED_ORIGINS", "")
    origins = [o.strip() for o in origins_env.split(",") if o.strip()]
    if "*" in origins:
        origins = ["*"]

    return Settings(
        database_url=os.environ.get("TIME_TRACKER_DATABASE_URL", DEFAULT_DATABASE_URL),
        allowed_origins=origins or list(DEFAULT_ORIGINS),
        log_level=os.environ.get("TIME_TRACKER_LOG_LEVEL", "INFO").upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
