"""Runtime configuration based on environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import AnyHttpUrl, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TARGET_URL = "washingtonpost.com"
DEFAULT_BASE_URL = "https://www.googleapis.com/customsearch/v1"


class SearchSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SEARCH_RANK_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    api_key: SecretStr | None = None
    engine_id: str | None = Field(
        default=None,
        description="Custom Search Engine identifier (the `cx` parameter).",
    )
    target_url: str = Field(default=DEFAULT_TARGET_URL, min_length=1)
    base_url: AnyHttpUrl = Field(default=DEFAULT_BASE_URL)
    request_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="HTTP timeout per page request; None waits for the provider.",
    )
    accumulate_pages: bool = False

    @field_validator("engine_id", mode="before")
    @classmethod
    def _empty_str_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


@lru_cache
def get_settings() -> SearchSettings:
    """Return cached settings instance."""

    return SearchSettings()


__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_TARGET_URL",
    "SearchSettings",
    "get_settings",
]
