"""
Configuration for the healthlog application.

Settings are read from ``HEALTHLOG_*`` environment variables or a ``.env``
file. ``build_backing_store`` and ``build_activity_store`` turn them into the
objects owned by the application root.
"""

import sys
from datetime import tzinfo
from pathlib import Path
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .services.activity_store import DEFAULT_ACTIVITIES_KEY, ActivityStore
from .services.dynamodb_service import DynamoDBSettingsStore
from .services.settings_store import InMemorySettingsStore, JsonFileSettingsStore, SettingsStore


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="HEALTHLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    storage_backend: Literal["memory", "file", "dynamodb"] = "file"
    settings_path: Path = Field(default=Path.home() / ".healthlog" / "settings.json")
    storage_key: str = DEFAULT_ACTIVITIES_KEY
    dynamodb_table: str = ""
    aws_region: str = "us-east-1"
    timezone: str = "UTC"
    log_level: str = "INFO"

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown time zone '{v}'") from e
        return v

    @property
    def tz(self) -> tzinfo:
        return ZoneInfo(self.timezone)


def configure_logging(level: str = "INFO") -> None:
    """Send log output to stderr at the given level."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


def build_backing_store(settings: Settings) -> SettingsStore:
    """Create the settings store selected by ``storage_backend``."""
    if settings.storage_backend == "memory":
        return InMemorySettingsStore()
    if settings.storage_backend == "dynamodb":
        return DynamoDBSettingsStore(
            table_name=settings.dynamodb_table or None, region_name=settings.aws_region
        )
    return JsonFileSettingsStore(settings.settings_path)


def build_activity_store(settings: Settings) -> ActivityStore:
    """Create the application's ActivityStore from settings."""
    return ActivityStore(
        backing_store=build_backing_store(settings),
        key=settings.storage_key,
        tz=settings.tz,
    )
