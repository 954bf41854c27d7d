"""Configuration management for Rerun."""

from functools import lru_cache
from pathlib import Path
from typing import Literal
from urllib.parse import urlparse

from pydantic import PositiveInt, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Metadata provider
    metadata_provider: Literal["tmdb", "omdb"] = "tmdb"
    tmdb_api_key: str | None = None
    omdb_api_key: str | None = None
    omdb_base_url: str = "http://www.omdbapi.com"

    # Upstream behaviour
    provider_timeout: PositiveInt = 10  # Timeout for a single upstream call in seconds
    upstream_retries: int = 0  # Network-level retries, off unless configured
    lookup_attempts: PositiveInt = 5  # Attempts to find an episode with a title or plot
    search_limit: PositiveInt = 12
    search_easter_egg: bool = False

    # Network settings
    # Proxy configuration in the format http://host:port or socks5://host:port
    proxy: str | None = None

    @field_validator("proxy")
    @classmethod
    def validate_proxy(cls, v: str | None) -> str | None:
        if v is None:
            return v

        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https", "socks4", "socks5", "socks5h"):
            raise ValueError(
                "Proxy must be a valid URL with scheme http/https/socks4/socks5/socks5h"
            )
        if not parsed.netloc:
            raise ValueError("Proxy must have a host and port")
        return v

    @model_validator(mode="after")
    def require_provider_key(self) -> "Settings":
        if self.metadata_provider == "tmdb" and not self.tmdb_api_key:
            raise ValueError("TMDB_API_KEY is required when METADATA_PROVIDER=tmdb")
        if self.metadata_provider == "omdb" and not self.omdb_api_key:
            raise ValueError("OMDB_API_KEY is required when METADATA_PROVIDER=omdb")
        return self

    # Server settings
    environment: Literal["development", "production"] = "development"
    cors_origins: list[str] = ["*"]
    static_dir: Path | None = None  # Built client assets, served at /
    host: str = "0.0.0.0"
    port: PositiveInt = 8080
    log_level: str = "INFO"

    # App settings
    debug: bool = False

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
