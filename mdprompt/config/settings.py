"""Configuration settings for mdprompt with caching utilities."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from threading import RLock
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MARKDOWN_EXTRAS = ["fenced-code-blocks", "tables", "strike"]


class Settings(BaseSettings):
    """Compiler settings, read from ``MDPROMPT_*`` environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="MDPROMPT_",
        env_file=[".env.test", ".env"],
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Stringifier
    collapse_whitespace: bool = True
    default_passes: list[str] = Field(default_factory=list)
    markdown_extras: list[str] = Field(
        default_factory=lambda: list(DEFAULT_MARKDOWN_EXTRAS)
    )

    # Code generation
    target: Literal["typescript", "python"] = "typescript"

    # Compiled artifact cache (CompilerEngine)
    cache_size: int = 256

    # Logging
    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"
    log_file: Path | None = None

    # Environment
    environment: str = "development"

    @field_validator("cache_size")
    @classmethod
    def _positive_cache_size(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("cache_size must be positive")
        return value

    @property
    def is_development(self) -> bool:
        """Check if running in development mode"""
        return self.environment.lower() in ["development", "dev"]

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode"""
        return self.environment.lower() in ["testing", "test"]


_SETTINGS_LOCK = RLock()
_SETTINGS_CACHE: Settings | None = None


def get_settings(*, refresh: bool = False) -> Settings:
    """Return a cached ``Settings`` instance.

    Parameters
    ----------
    refresh:
        When ``True`` the cached instance is discarded and a new one is created.
    """

    global _SETTINGS_CACHE

    with _SETTINGS_LOCK:
        if refresh or _SETTINGS_CACHE is None:
            _SETTINGS_CACHE = Settings()
        return _SETTINGS_CACHE


def clear_settings_cache() -> None:
    """Clear the cached settings instance."""

    global _SETTINGS_CACHE

    with _SETTINGS_LOCK:
        _SETTINGS_CACHE = None


get_settings.cache_clear = clear_settings_cache  # type: ignore[attr-defined]


@contextmanager
def override_settings(**overrides: Any) -> Iterator[Settings]:
    """Temporarily override the cached settings within a context."""

    global _SETTINGS_CACHE

    with _SETTINGS_LOCK:
        previous_settings = _SETTINGS_CACHE

    base_settings = previous_settings or Settings()
    patched_settings = base_settings.model_copy(update=overrides)

    with _SETTINGS_LOCK:
        _SETTINGS_CACHE = patched_settings

    try:
        yield patched_settings
    finally:
        with _SETTINGS_LOCK:
            _SETTINGS_CACHE = previous_settings
