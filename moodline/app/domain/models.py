"""Value types shared by the store, the aggregator and the chart engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime

from .moods import bounded_emojis


@dataclass(frozen=True)
class EntryDraft:
    """User-editable fields of a journal entry."""

    title: str = ""
    body: str = ""
    mood_emojis: tuple[str, ...] = ()
    mood_rating: int | None = None
    toggle_x: bool = False
    toggle_y: bool = False
    toggle_z: bool = False
    toggle_w: bool = False
    sleep_hours: float = 0.0
    is_test: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "mood_emojis", bounded_emojis(self.mood_emojis))
        object.__setattr__(self, "sleep_hours", max(0.0, float(self.sleep_hours)))


@dataclass(frozen=True)
class Entry:
    id: int
    created_at: datetime
    title: str = ""
    body: str = ""
    mood_emojis: tuple[str, ...] = ()
    mood_rating: int | None = None
    toggle_x: bool = False
    toggle_y: bool = False
    toggle_z: bool = False
    toggle_w: bool = False
    sleep_hours: float = 0.0
    is_test: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "mood_emojis", bounded_emojis(self.mood_emojis))

    @classmethod
    def from_draft(cls, entry_id: int, created_at: datetime, draft: EntryDraft) -> Entry:
        return cls(
            id=entry_id,
            created_at=created_at,
            title=draft.title,
            body=draft.body,
            mood_emojis=draft.mood_emojis,
            mood_rating=draft.mood_rating,
            toggle_x=draft.toggle_x,
            toggle_y=draft.toggle_y,
            toggle_z=draft.toggle_z,
            toggle_w=draft.toggle_w,
            sleep_hours=draft.sleep_hours,
            is_test=draft.is_test,
        )


@dataclass(frozen=True)
class TodoItem:
    id: int
    date: date
    text: str
    done: bool = False


@dataclass(frozen=True)
class DayAggregate:
    """All entries of one calendar day reduced to chartable numbers."""

    date: date
    sleep_avg: float = 0.0
    mood_avg: float | None = None
    count_x: int = 0
    count_y: int = 0
    count_z: int = 0
    count_w: int = 0
    entry_count: int = field(default=0, compare=False)

    @property
    def total(self) -> int:
        return self.count_x + self.count_y + self.count_z + self.count_w


__all__ = ["DayAggregate", "Entry", "EntryDraft", "TodoItem"]
