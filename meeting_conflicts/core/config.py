# meeting_conflicts/core/config.py
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Global application configuration.

    Values are loaded from environment variables at runtime.

    These settings are used for:
    - DB connection
    - Logging output
    - Tuning of the conflict detection engine (buffer, working window,
      slot search horizon)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    APP_NAME: str = "Meeting Conflict Service"
    APP_ENV: str = Field("local", description="Environment name: local/dev/stage/prod")

    DB_URL: str = Field(
        "sqlite+aiosqlite:///./meeting_conflicts.db",
        description="SQLAlchemy-compatible database URL",
    )

    # --- Logging ---
    LOG_LEVEL: str = Field("INFO", description="Root log level.")
    LOG_FORMAT: str = Field(
        "console",
        description="Log renderer: 'console' for humans, 'json' for log shippers.",
    )

    # --- Conflict engine ---
    BUFFER_MINUTES: int = Field(
        10,
        ge=0,
        description="Minimum gap required between two meetings sharing a mandatory attendee.",
    )
    SLOT_INTERVAL_MINUTES: int = Field(
        15,
        gt=0,
        description="Granularity of candidate start times during the alternative slot search.",
    )
    WORKDAY_START_HOUR: int = Field(
        8,
        ge=0,
        le=23,
        description="First hour (inclusive) at which meetings may start.",
    )
    WORKDAY_END_HOUR: int = Field(
        20,
        ge=1,
        le=23,
        description="Hour by which every meeting must have ended.",
    )
    LOOKAHEAD_DAYS: int = Field(
        3,
        ge=0,
        description="How many following days are searched when the requested day is too busy.",
    )
    SLOTS_PER_FUTURE_DAY: int = Field(
        3,
        ge=0,
        description="Number of leading grid slots examined on each following day.",
    )
    MAX_ALTERNATIVES: int = Field(
        5,
        ge=0,
        description="Maximum number of reschedule alternatives returned per analysis.",
    )
    DAILY_MEETING_LIMIT: int = Field(
        8,
        ge=1,
        description="Meetings per attendee per day after which the quick check flags overload.",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Cached accessor for application settings.

    Using LRU cache ensures settings are read and validated only once,
    while still being easily importable across the app.
    """
    return Settings()
