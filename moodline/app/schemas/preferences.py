from __future__ import annotations

from pydantic import BaseModel, Field

from ..services.preferences import AIProvider, ThemeMode


class PreferencesResponse(BaseModel):
    quick_emojis: list[str]
    theme: ThemeMode
    provider: AIProvider
    has_openai_key: bool
    has_gemini_key: bool
    require_biometric: bool


class PreferencesPatch(BaseModel):
    theme: ThemeMode | None = None
    provider: AIProvider | None = None
    openai_key: str | None = Field(default=None, max_length=200)
    gemini_key: str | None = Field(default=None, max_length=200)
    require_biometric: bool | None = None


class QuickEmojiUpdate(BaseModel):
    emoji: str = Field(..., min_length=1, max_length=16)
