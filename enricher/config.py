"""Application configuration models."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

Mode = Literal["movie", "tv-show"]

TMDB_IMAGE_SIZES: tuple[str, ...] = (
    "w92",
    "w154",
    "w185",
    "w300",
    "w342",
    "w500",
    "w780",
    "w1280",
    "original",
)


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    tmdb_api_key: str | None = Field(default=None, alias="TMDB_API_KEY")
    tmdb_api_url: HttpUrl = Field(
        default="https://api.themoviedb.org/3", alias="TMDB_API_URL"
    )
    tmdb_language: str | None = Field(default=None, alias="TMDB_LANGUAGE")
    tmdb_image_size: str = Field(default="original", alias="TMDB_IMAGE_SIZE")

    concurrency: int = Field(default=2, alias="CONCURRENCY")
    request_timeout_seconds: float = Field(
        default=20.0, alias="REQUEST_TIMEOUT", gt=0
    )
    log_level: str = Field(default="WARNING", alias="LOG_LEVEL")

    @field_validator("tmdb_image_size", mode="before")
    @classmethod
    def _parse_image_size(cls, value: object) -> str:
        """Accept TMDB poster sizes with or without the leading ``w``."""

        if value is None:
            return "original"
        text = str(value).strip().lower()
        if not text:
            return "original"
        if text.isdigit():
            text = f"w{text}"
        if text not in TMDB_IMAGE_SIZES:
            raise ValueError("Unknown TMDB image size configured")
        return text

    @field_validator("log_level", mode="before")
    @classmethod
    def _parse_log_level(cls, value: object) -> str:
        if value is None:
            return "WARNING"
        level = str(value).strip().upper() or "WARNING"
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @property
    def log_level_number(self) -> int:
        """Return the numeric logging level for ``logging.basicConfig``."""

        return logging.getLevelName(self.log_level)

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[call-arg]
