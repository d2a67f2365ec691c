from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )

    log_file: Path = Field(default=Path("logs/moodline.log"), alias="LOG_FILE")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    console_log_level: str = Field(default="WARNING", alias="CONSOLE_LOG_LEVEL")

    host: str = Field(default="127.0.0.1", alias="HOST")
    port: int = Field(default=8000, alias="PORT")

    # Metrics screen defaults
    default_range_days: int = Field(default=14, alias="DEFAULT_RANGE_DAYS")
    chart_width: float = Field(default=640.0, alias="CHART_WIDTH")
    chart_height: float = Field(default=260.0, alias="CHART_HEIGHT")
    metrics_max_days: int = Field(default=731, alias="METRICS_MAX_DAYS")

    # Dummy data generation; unset seed means a fresh RNG per process
    dummy_seed: int | None = Field(default=None, alias="DUMMY_SEED")
    dummy_max_days: int = Field(default=366, alias="DUMMY_MAX_DAYS")

    # Calendar-day grouping zone; empty means the host's local zone
    local_tz: str | None = Field(default=None, alias="LOCAL_TZ")

    version: str = Field(default_factory=lambda: Settings._load_version())

    @staticmethod
    def _load_version() -> str:
        version_env = os.getenv("VERSION")
        if version_env:
            return version_env
        version_file = Path("VERSION")
        if version_file.exists():
            return version_file.read_text(encoding="utf-8").strip()
        return "0.0.0"

    @field_validator("log_file", mode="before")
    @classmethod
    def _validate_log_file(cls, value: Path | str) -> Path:
        path = Path(value)
        if not path.parent.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
        return path

    @field_validator("default_range_days", mode="before")
    @classmethod
    def _validate_range_days(cls, value: int | str | None) -> int:
        if value is None or value == "":
            return 14
        return min(max(int(value), 1), 366)

    @field_validator("dummy_max_days", "metrics_max_days", mode="before")
    @classmethod
    def _validate_max_days(cls, value: int | str | None, info: ValidationInfo) -> int:
        if value is None or value == "":
            return cls.model_fields[info.field_name].default
        return max(int(value), 1)

    @field_validator("log_level", "console_log_level", mode="before")
    @classmethod
    def _validate_log_level(cls, value: str | None, info: ValidationInfo) -> str:
        level = str(value or "").strip().upper()
        if level not in logging.getLevelNamesMapping():
            return cls.model_fields[info.field_name].default
        return level

    @field_validator("chart_width", "chart_height", mode="before")
    @classmethod
    def _validate_chart_size(cls, value: float | str | None) -> float:
        if value is None or value == "":
            return 0.0
        return max(float(value), 0.0)

    @field_validator("local_tz", mode="before")
    @classmethod
    def _validate_local_tz(cls, value: str | None) -> str | None:
        if not value:
            return None
        try:
            ZoneInfo(str(value))
        except (ZoneInfoNotFoundError, ValueError):
            return None
        return str(value)

    @property
    def tzinfo(self) -> ZoneInfo | None:
        return ZoneInfo(self.local_tz) if self.local_tz else None


@lru_cache
def get_settings() -> Settings:
    """Cached settings accessor."""

    return Settings()
