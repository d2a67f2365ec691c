from __future__ import annotations

import logging
import threading
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..domain.moods import DEFAULT_QUICK_EMOJIS, QUICK_SLOT_COUNT

logger = logging.getLogger(__name__)


class ThemeMode(str, Enum):
    SYSTEM = "system"
    LIGHT = "light"
    DARK = "dark"


class AIProvider(str, Enum):
    NONE = "none"
    OPENAI = "openai"
    GEMINI = "gemini"


class AppPreferences(BaseModel):
    """Immutable snapshot of user preferences."""

    model_config = ConfigDict(frozen=True)

    quick_emojis: tuple[str, ...] = DEFAULT_QUICK_EMOJIS
    theme: ThemeMode = ThemeMode.SYSTEM
    provider: AIProvider = AIProvider.NONE
    openai_key: str = Field(default="", repr=False)
    gemini_key: str = Field(default="", repr=False)
    require_biometric: bool = False

    @field_validator("quick_emojis", mode="before")
    @classmethod
    def _pad_quick_emojis(cls, value: object) -> tuple[str, ...]:
        slots = [str(item).strip() for item in (value or ())][:QUICK_SLOT_COUNT]
        # Blank or missing slots fall back to the defaults at the same index.
        padded = [
            slots[index] if index < len(slots) and slots[index] else DEFAULT_QUICK_EMOJIS[index]
            for index in range(QUICK_SLOT_COUNT)
        ]
        return tuple(padded)


class PreferencesStore:
    """In-memory holder for appearance, provider and quick-emoji settings."""

    def __init__(self, initial: AppPreferences | None = None) -> None:
        self._lock = threading.Lock()
        self._prefs = initial or AppPreferences()

    @property
    def current(self) -> AppPreferences:
        return self._prefs

    def quick_emojis(self) -> tuple[str, ...]:
        return self._prefs.quick_emojis

    def set_quick_emoji(self, index: int, emoji: str) -> AppPreferences:
        if not 0 <= index < QUICK_SLOT_COUNT:
            raise IndexError(f"quick emoji slot {index} out of range 0..{QUICK_SLOT_COUNT - 1}")
        with self._lock:
            slots = list(self._prefs.quick_emojis)
            slots[index] = emoji
            return self._replace(quick_emojis=tuple(slots))

    def update(self, **changes: object) -> AppPreferences:
        unknown = set(changes) - set(AppPreferences.model_fields)
        if unknown:
            raise ValueError(f"unknown preference fields: {sorted(unknown)}")
        with self._lock:
            return self._replace(**changes)

    def _replace(self, **changes: object) -> AppPreferences:
        merged = {**self._prefs.model_dump(), **changes}
        self._prefs = AppPreferences.model_validate(merged)
        logger.info("preferences updated", extra={"extra_fields": {"fields": sorted(changes)}})
        return self._prefs


__all__ = ["AIProvider", "AppPreferences", "PreferencesStore", "ThemeMode"]
