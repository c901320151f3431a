"""Configuration management for ChannelScope.

Loads environment variables using pydantic-settings for type-safe configuration.
The YouTube credential, upstream endpoints, and retry tuning are defined here and
handed to the provider adapter and the resolution core as frozen settings blocks.
"""

import os
from functools import lru_cache
from pathlib import Path
from threading import Lock

from dotenv import load_dotenv
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENV_LOADED = False
_ENV_LOCK = Lock()


def _resolve_env_file() -> str | None:
    """Locate the .env file regardless of the current working directory.

    Preference order:
        1. CHANNELSCOPE_ENV_FILE environment variable (explicit override)
        2. Current working directory (common for local runs)
        3. Ancestors of this file (covers package execution within a container)
    """
    override = os.getenv("CHANNELSCOPE_ENV_FILE")
    if override:
        override_path = Path(override).expanduser()
        if override_path.is_file():
            return str(override_path)

    cwd_candidate = Path.cwd() / ".env"
    if cwd_candidate.is_file():
        return str(cwd_candidate)

    for parent in Path(__file__).resolve().parents:
        candidate = parent / ".env"
        if candidate.is_file():
            return str(candidate)

    return None


_DEFAULT_ENV_FILE = _resolve_env_file()


def ensure_env_loaded() -> None:
    """Load environment variables from disk exactly once."""
    global _ENV_LOADED

    with _ENV_LOCK:
        if _ENV_LOADED:
            return

        env_path = _DEFAULT_ENV_FILE or _resolve_env_file()
        if env_path:
            load_dotenv(env_path, override=False)

        _ENV_LOADED = True


ensure_env_loaded()


class YouTubeProviderSettings(BaseModel):
    """Immutable configuration handle for the YouTube provider adapter."""

    model_config = ConfigDict(frozen=True)

    api_key: SecretStr | None = None
    data_api_base_url: str = "https://youtube.googleapis.com/youtube/v3"
    innertube_base_url: str = "https://www.youtube.com/youtubei/v1"
    innertube_client_name: str = "WEB"
    innertube_client_version: str = "2.20250108.06.00"
    timeout: float = Field(default=10.0, gt=0)
    search_max_results: int = Field(default=5, ge=1, le=50)


class ResolutionSettings(BaseModel):
    """Immutable tuning block for the resolution pipeline and aggregator."""

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=3, ge=1, le=10)
    base_delay: float = Field(default=0.5, ge=0.0)
    max_delay: float = Field(default=4.0, ge=0.0)
    subscriptions_page_size: int = Field(default=50, ge=1, le=50)


class ChannelScopeConfig(BaseSettings):
    """Main configuration class for ChannelScope.

    Loads the API credential, upstream URLs, and tuning parameters from
    environment variables. Uses pydantic-settings for validation and type safety.
    """

    model_config = SettingsConfigDict(
        env_file=_DEFAULT_ENV_FILE,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # ========== Upstream Credentials ==========
    youtube_api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("youtube_api_key", "api_key"),
    )

    # ========== Upstream Endpoints ==========
    youtube_data_api_url: str = "https://youtube.googleapis.com/youtube/v3"
    innertube_api_url: str = "https://www.youtube.com/youtubei/v1"
    innertube_client_version: str = "2.20250108.06.00"
    http_timeout: float = Field(default=10.0, gt=0, le=120)

    # ========== Resolution Tuning ==========
    retry_max_attempts: int = Field(default=3, ge=1, le=10)
    retry_base_delay: float = Field(default=0.5, ge=0.0, le=30.0)
    retry_max_delay: float = Field(default=4.0, ge=0.0, le=120.0)
    search_max_results: int = Field(default=5, ge=1, le=50)
    subscriptions_page_size: int = Field(default=50, ge=1, le=50)

    # ========== Observability ==========
    log_level: str = "INFO"

    # ========== API Service ==========
    host: str = "0.0.0.0"
    port: int = 3000
    cors_allow_origins: list[str] = [
        "http://localhost:3000",
    ]  # Override via CORS_ALLOW_ORIGINS env var (JSON list)

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unsupported log level: {value}")
        return level

    @property
    def provider_settings(self) -> YouTubeProviderSettings:
        """Return the frozen settings block consumed by the provider adapter."""

        return YouTubeProviderSettings(
            api_key=self.youtube_api_key,
            data_api_base_url=self.youtube_data_api_url.rstrip("/"),
            innertube_base_url=self.innertube_api_url.rstrip("/"),
            innertube_client_version=self.innertube_client_version,
            timeout=self.http_timeout,
            search_max_results=self.search_max_results,
        )

    @property
    def resolution_settings(self) -> ResolutionSettings:
        """Return the frozen tuning block consumed by the resolution core."""

        return ResolutionSettings(
            max_attempts=self.retry_max_attempts,
            base_delay=self.retry_base_delay,
            max_delay=self.retry_max_delay,
            subscriptions_page_size=self.subscriptions_page_size,
        )


@lru_cache(maxsize=1)
def get_config() -> ChannelScopeConfig:
    """Return cached Settings instance (thread-safe, process-local).

    Uses lru_cache to ensure a single instance is created and reused.

    Returns:
        ChannelScopeConfig: The configuration instance loaded from environment variables.
    """
    return ChannelScopeConfig()


# Export convenience accessors
__all__ = [
    "ChannelScopeConfig",
    "ResolutionSettings",
    "YouTubeProviderSettings",
    "ensure_env_loaded",
    "get_config",
]
