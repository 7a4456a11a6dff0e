"""Application configuration using pydantic-settings."""

from datetime import timedelta
from functools import cached_property, lru_cache
from typing import Self

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # Record store connection - set via DATABASE_URL env var
    # For tests: use "sqlite+aiosqlite:///:memory:"
    database_url: str = "sqlite+aiosqlite:///./exercise-app.db"
    db_echo: bool = False  # Set True to log all SQL queries (very verbose)

    # Fixed UTC offset that defines the family's "today" (JST by default).
    # A whole-hour offset, not a named zone, so DST never shifts a day.
    timezone_offset_hours: int = 9

    # Exercise used for one-tap "did it today" records when the user has no
    # default of their own
    default_exercise_id: int = 5

    debug: bool = False

    @model_validator(mode="after")
    def validate_config(self) -> Self:
        if not self.database_url:
            raise ValueError(
                "Database configuration required. "
                "Set DATABASE_URL for the record store."
            )
        if not -12 <= self.timezone_offset_hours <= 14:
            raise ValueError(
                "TIMEZONE_OFFSET_HOURS must be between -12 and 14, "
                f"got {self.timezone_offset_hours}."
            )
        if self.default_exercise_id < 1:
            raise ValueError("DEFAULT_EXERCISE_ID must be a positive id.")
        return self

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @cached_property
    def reference_offset(self) -> timedelta:
        """The reference timezone as an offset from UTC."""
        return timedelta(hours=self.timezone_offset_hours)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this in tests to reset settings between test cases.
    After clearing, the next get_settings() call will create
    a fresh Settings instance with current environment variables.

    Example:
        def test_something(monkeypatch):
            monkeypatch.setenv("TIMEZONE_OFFSET_HOURS", "0")
            clear_settings_cache()
            settings = get_settings()  # Fresh instance
    """
    get_settings.cache_clear()
