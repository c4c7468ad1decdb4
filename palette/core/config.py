"""
Configuration helpers for the Palette backend.

Routers/services read everything through get_settings() instead of touching
os.environ directly, so tests can swap the environment and call cache_clear().
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    database_url: str
    jwt_secret: str
    access_token_ttl_seconds: int
    refresh_token_ttl_seconds: int
    default_history_days: int
    log_level: str
    cors_origins: tuple[str, ...]


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _csv(value: str | None) -> tuple[str, ...]:
        if not value:
            return ()
        return tuple(item.strip() for item in value.split(",") if item.strip())

    app_env = (os.getenv("APP_ENV") or "dev").lower()
    secret = os.getenv("JWT_SECRET", "")
    if not secret:
        if app_env == "prod":
            raise RuntimeError("JWT_SECRET must be configured in production.")
        secret = "palette-dev-secret"

    return Settings(
        app_env=app_env,
        database_url=os.getenv("DATABASE_URL", "sqlite:///./palette.db"),
        jwt_secret=secret,
        access_token_ttl_seconds=_int(os.getenv("ACCESS_TOKEN_TTL_SECONDS", "1800"), 1800),
        refresh_token_ttl_seconds=_int(os.getenv("REFRESH_TOKEN_TTL_SECONDS", "1209600"), 1209600),
        default_history_days=_int(os.getenv("DEFAULT_HISTORY_DAYS", "7"), 7),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        cors_origins=_csv(os.getenv("CORS_ORIGINS")),
    )
