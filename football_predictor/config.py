"""
Application Configuration

Settings for the API, the worker script and the infrastructure adapters,
read from environment variables (a local .env file is loaded first).
"""

import os
import functools
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value else default


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value else default


def _cors_origins() -> List[str]:
    extra = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "").split(",") if origin.strip()]
    return DEFAULT_CORS_ORIGINS + [origin for origin in extra if origin not in DEFAULT_CORS_ORIGINS]


@dataclass
class Settings:
    """Process settings; every field defaults to its environment variable."""

    # Upstream API
    api_football_key: Optional[str] = field(default_factory=lambda: os.getenv("API_FOOTBALL_KEY"))
    api_football_base_url: str = field(
        default_factory=lambda: os.getenv("API_FOOTBALL_BASE_URL", "https://v3.football.api-sports.io")
    )
    max_requests_per_minute: int = field(default_factory=lambda: _int_env("API_MAX_REQUESTS_PER_MINUTE", 100))
    request_delay_seconds: float = field(default_factory=lambda: _float_env("API_REQUEST_DELAY_SECONDS", 0.5))
    enrichment_delay_seconds: float = 0.2
    default_season: str = field(default_factory=lambda: os.getenv("DEFAULT_SEASON", "2024"))

    # Cache
    cache_ttl_seconds: int = field(default_factory=lambda: _int_env("CACHE_TTL_SECONDS", 3600))
    redis_host: Optional[str] = field(default_factory=lambda: os.getenv("REDIS_HOST"))
    redis_port: int = field(default_factory=lambda: _int_env("REDIS_PORT", 6379))
    redis_password: Optional[str] = field(default_factory=lambda: os.getenv("REDIS_PASSWORD"))

    # Persistence
    database_url: str = field(
        default_factory=lambda: os.getenv("DATABASE_URL", "sqlite:///./football_predictor.db")
    )
    storage_max_age_seconds: int = field(default_factory=lambda: _int_env("STORAGE_MAX_AGE_SECONDS", 3600))

    # Presentation
    timezone: str = field(default_factory=lambda: os.getenv("APP_TIMEZONE", "UTC"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    cors_origins: List[str] = field(default_factory=_cors_origins)

    @property
    def api_football_configured(self) -> bool:
        return bool(self.api_football_key)


@functools.lru_cache()
def get_settings() -> Settings:
    """Process-wide settings instance."""
    return Settings()
