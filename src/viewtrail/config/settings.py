"""
Application settings and configuration management.
"""

from __future__ import annotations

from datetime import tzinfo
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from viewtrail import __version__


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = Field(default="viewtrail")
    app_version: str = Field(default=__version__)
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # Storage
    data_dir: Path = Field(default=Path("./data"))
    history_file: Optional[Path] = Field(default=None)

    # Parsing
    default_timezone: str = Field(default="UTC")
    parse_chunk_size: int = Field(default=500, gt=0)

    # Analytics
    session_gap_minutes: int = Field(default=30, gt=0)
    binge_threshold: int = Field(default=5, gt=0)
    top_channels_limit: int = Field(default=10, gt=0)
    topic_trend_threshold: float = Field(default=10.0, ge=0.0)

    @field_validator("data_dir", "history_file", mode="before")
    @classmethod
    def ensure_path(cls, v: str | Path | None) -> Path | None:
        """Ensure directory paths are Path objects."""
        if isinstance(v, str):
            return Path(v)
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    @field_validator("default_timezone")
    @classmethod
    def validate_default_timezone(cls, v: str) -> str:
        """Validate the fallback timezone is a known IANA name."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Invalid timezone: {v}") from e
        return v

    def create_directories(self) -> None:
        """Create required directories if they don't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)

    @property
    def effective_history_file(self) -> Path:
        """Get the history file, defaulting to one inside data_dir."""
        if self.history_file is not None:
            return self.history_file
        return self.data_dir / "watch-history.json"

    @property
    def default_tzinfo(self) -> tzinfo:
        """Get the fallback timezone as a tzinfo object."""
        return ZoneInfo(self.default_timezone)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()


# Global settings instance
settings = get_settings()
