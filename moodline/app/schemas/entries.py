from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..domain.models import Entry, EntryDraft
from ..domain.moods import MOOD_SLOT_LIMIT, bounded_emojis, rating_for_emojis


def _local_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.astimezone()
    return value


class EntryCreate(BaseModel):
    title: str = Field(default="", max_length=200)
    body: str = Field(default="", max_length=10000)
    mood_emojis: list[str] = Field(default_factory=list)
    mood_rating: int | None = Field(default=None, ge=1, le=5)
    toggle_x: bool = False
    toggle_y: bool = False
    toggle_z: bool = False
    toggle_w: bool = False
    sleep_hours: float = Field(default=7.0, ge=0, le=24)

    @field_validator("mood_emojis")
    @classmethod
    def _bound_emojis(cls, value: list[str]) -> list[str]:
        return list(bounded_emojis(item for item in value if item.strip()))

    def to_draft(self) -> EntryDraft:
        rating = self.mood_rating
        if rating is None:
            rating = rating_for_emojis(self.mood_emojis)
        return EntryDraft(
            title=self.title,
            body=self.body,
            mood_emojis=tuple(self.mood_emojis),
            mood_rating=rating,
            toggle_x=self.toggle_x,
            toggle_y=self.toggle_y,
            toggle_z=self.toggle_z,
            toggle_w=self.toggle_w,
            sleep_hours=self.sleep_hours,
        )


class EntryModel(BaseModel):
    id: int = Field(ge=1)
    created_at: datetime
    title: str = ""
    body: str = ""
    mood_emojis: list[str] = Field(default_factory=list, max_length=MOOD_SLOT_LIMIT)
    mood_rating: int | None = Field(default=None, ge=1, le=5)
    toggle_x: bool = False
    toggle_y: bool = False
    toggle_z: bool = False
    toggle_w: bool = False
    sleep_hours: float = Field(default=0.0, ge=0)
    is_test: bool = False

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at")
    @classmethod
    def _ensure_aware(cls, value: datetime) -> datetime:
        return _local_aware(value)

    def to_entry(self) -> Entry:
        return Entry(**{**self.model_dump(), "mood_emojis": tuple(self.mood_emojis)})


class EntryListResponse(BaseModel):
    items: list[EntryModel]


class EntryCreateResponse(BaseModel):
    ok: bool = True
    id: int


class EntryDeleteResponse(BaseModel):
    deleted: EntryModel | None = None


class DummyRequest(BaseModel):
    start: date
    end: date


class BatchResponse(BaseModel):
    ok: bool = True
    count: int = Field(ge=0)


class MoodSelectRequest(BaseModel):
    selected: list[str] = Field(default_factory=list)
    emoji: str = Field(..., min_length=1, max_length=16)


class MoodSelectResponse(BaseModel):
    selected: list[str]
    mood_rating: int | None = None


__all__ = [
    "BatchResponse",
    "DummyRequest",
    "EntryCreate",
    "EntryCreateResponse",
    "EntryDeleteResponse",
    "EntryListResponse",
    "EntryModel",
    "MoodSelectRequest",
    "MoodSelectResponse",
]
