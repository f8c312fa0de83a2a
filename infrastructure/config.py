from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from domain.errors import ConfigurationError
from infrastructure.http.player_lookup_client import DEFAULT_LOOKUP_URL
from infrastructure.http.session import MAX_CONNECT_TIMEOUT


def _get_required(name: str) -> str:
    raw = os.getenv(name, "").strip()
    if not raw:
        raise ConfigurationError(f"{name} environment variable is not set.")
    return raw


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}.") from None
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive.")
    return value


@dataclass(frozen=True)
class Settings:
    discord_token: str
    guild_id: int
    database: str
    auth_url: str
    auth_token: str
    ss14_api_url: str
    ss14_api_token: str
    player_lookup_url: str = DEFAULT_LOOKUP_URL
    http_connect_timeout: float = MAX_CONNECT_TIMEOUT
    http_total_timeout: float = 15.0
    log_level: str = "INFO"

    @property
    def uses_postgres(self) -> bool:
        return self.database.startswith(("postgres://", "postgresql://"))


def load_settings() -> Settings:
    """
    Build `Settings` from the process environment.

    Raises `ConfigurationError` naming the first missing or malformed value.
    """

    raw_guild = _get_required("DISCORD_GUILD_ID")
    try:
        guild_id = int(raw_guild)
    except ValueError:
        raise ConfigurationError(f"DISCORD_GUILD_ID must be an integer, got {raw_guild!r}.") from None

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigurationError(f"LOG_LEVEL {log_level!r} is not a logging level.")

    return Settings(
        discord_token=_get_required("DISCORD_TOKEN"),
        guild_id=guild_id,
        database=_get_required("SS14_DATABASE"),
        auth_url=_get_required("AUTH_URL"),
        auth_token=_get_required("AUTH_TOKEN"),
        ss14_api_url=_get_required("SS14_API_URL"),
        ss14_api_token=_get_required("SS14_API_TOKEN"),
        player_lookup_url=(os.getenv("PLAYER_LOOKUP_URL", "").strip() or DEFAULT_LOOKUP_URL),
        # Capped at 5 seconds regardless of the environment.
        http_connect_timeout=min(_get_float("HTTP_CONNECT_TIMEOUT", MAX_CONNECT_TIMEOUT), MAX_CONNECT_TIMEOUT),
        http_total_timeout=_get_float("HTTP_TOTAL_TIMEOUT", 15.0),
        log_level=log_level,
    )
