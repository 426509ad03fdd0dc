"""
ModWatch Configuration Module.

Centralizes all configuration settings using Pydantic Settings.
Requires Python 3.11+.
"""

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Literal

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# Load .env file into os.environ at module import time
# This ensures nested BaseSettings classes can read the values
_env_file = Path(__file__).parent.parent / ".env"
if _env_file.exists():
    load_dotenv(_env_file)
else:
    # Try current working directory
    load_dotenv()


class WatcherSettings(BaseSettings):
    """Modification watcher configuration settings."""

    model_config = SettingsConfigDict(env_prefix="WATCHER_")

    hold_off_ms: int = Field(
        default=0,
        ge=0,
        le=3_600_000,
        description="Quiet period required after the newest modification before raising",
    )
    poll_interval_ms: int = Field(default=1000, ge=10, le=3_600_000)
    suffix_filter: str = Field(default="", description="Only track files ending with this")
    notify: Literal["always", "on_change"] = Field(default="always")

    ignore_dirs: Annotated[list[str], NoDecode] = Field(
        default=[
            ".git",
            ".hg",
            ".svn",
            "__pycache__",
            ".venv",
            "node_modules",
            ".pytest_cache",
            ".mypy_cache",
            ".ruff_cache",
        ],
        description="Directory names refused by the default admission predicate",
    )

    @field_validator("ignore_dirs", mode="before")
    @classmethod
    def parse_ignore_dirs(cls, v: str | list[str]) -> list[str]:
        """Parse ignored directory names from comma-separated string or list."""
        if isinstance(v, str):
            return [p.strip() for p in v.split(",") if p.strip()]
        return v


class FsSettings(BaseSettings):
    """Filesystem helper settings."""

    model_config = SettingsConfigDict(env_prefix="FS_")

    # rwx for user, group and other; the process umask still applies
    create_mode: int = Field(default=0o777, ge=0, le=0o7777)


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO")
    format: str = Field(default="json")  # "json" or "console"
    file_path: Path | None = Field(default=None)


class Settings(BaseSettings):
    """Main application settings aggregating all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="ModWatch")
    app_version: str = Field(default="0.1.0")

    # Sub-settings
    watcher: WatcherSettings = Field(default_factory=WatcherSettings)
    fs: FsSettings = Field(default_factory=FsSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns singleton instance of Settings for performance.
    Call ``get_settings.cache_clear()`` after changing the environment.
    """
    return Settings()
